"""Tests for wire primitives and type dispatch."""

import io
import struct

import numpy as np
import pytest

from geo_ewkb.codec.errors import (
    NotValidWireFormatError,
    TruncatedInputError,
    UnsupportedGeometryKindError,
)
from geo_ewkb.codec.wire import (
    MAX_POINTS_ALLOC,
    SRID_FLAG,
    ByteOrder,
    ByteReader,
    GeometryKind,
    decode_header,
    encode_kind,
    pack_header,
    read_coords,
    split_type_code,
)


class TestTypeCodes:
    """Test kind <-> type code mapping."""

    def test_encode_kind_without_srid(self):
        assert encode_kind(GeometryKind.POLYGON, False) == 3

    def test_encode_kind_sets_srid_flag(self):
        assert encode_kind(GeometryKind.POINT, True) == 0x20000001

    def test_split_type_code(self):
        assert split_type_code(6) == (GeometryKind.MULTI_POLYGON, False)
        assert split_type_code(SRID_FLAG | 7) == (
            GeometryKind.GEOMETRY_COLLECTION,
            True,
        )

    @pytest.mark.parametrize(
        "code",
        [0, 8, 17, 1001, 0x80000001, 0x40000001, 0xA0000001],
    )
    def test_split_rejects_unsupported_kinds(self, code):
        with pytest.raises(UnsupportedGeometryKindError):
            split_type_code(code)

    def test_kind_of_shapely_geometry(self):
        from shapely.geometry import GeometryCollection, MultiPolygon, Point

        assert GeometryKind.of(Point(1, 2)) == GeometryKind.POINT
        assert GeometryKind.of(MultiPolygon()) == GeometryKind.MULTI_POLYGON
        assert GeometryKind.of(GeometryCollection()) == GeometryKind.GEOMETRY_COLLECTION

    def test_kind_of_non_geometry(self):
        with pytest.raises(UnsupportedGeometryKindError):
            GeometryKind.of("POINT (1 2)")


class TestDecodeHeader:
    """Test header parsing."""

    def test_little_endian_with_srid(self):
        header = bytes.fromhex("0101000020e6100000")
        assert decode_header(header) == (
            ByteOrder.LITTLE_ENDIAN,
            GeometryKind.POINT,
            4326,
        )

    def test_big_endian_without_srid(self):
        header = bytes.fromhex("0000000002")
        assert decode_header(header) == (
            ByteOrder.BIG_ENDIAN,
            GeometryKind.LINE_STRING,
            0,
        )

    def test_invalid_order_marker(self):
        with pytest.raises(NotValidWireFormatError, match="byte order marker"):
            decode_header(b"\x02\x01\x00\x00\x00")

    def test_unsupported_kind(self):
        with pytest.raises(UnsupportedGeometryKindError):
            decode_header(b"\x01" + struct.pack("<I", 9))

    def test_truncated_type_code(self):
        with pytest.raises(TruncatedInputError):
            decode_header(b"\x01\x01\x00")

    def test_truncated_srid(self):
        with pytest.raises(TruncatedInputError):
            decode_header(bytes.fromhex("0101000020e610"))

    def test_pack_header_round_trip(self, byte_order):
        buf = bytearray(9)
        end = pack_header(buf, 0, byte_order, GeometryKind.MULTI_POINT, 3857)
        assert end == 9
        assert decode_header(bytes(buf)) == (
            byte_order,
            GeometryKind.MULTI_POINT,
            3857,
        )

    def test_pack_header_without_srid(self):
        buf = bytearray(5)
        end = pack_header(buf, 0, ByteOrder.LITTLE_ENDIAN, GeometryKind.POINT)
        assert end == 5
        assert bytes(buf) == bytes.fromhex("0101000000")


class TestByteReader:
    """Test exact-size reads."""

    def test_reads_exact_size(self):
        reader = ByteReader(io.BytesIO(b"abcdef"))
        assert reader.read(4) == b"abcd"
        assert reader.read(2) == b"ef"

    def test_short_read_is_truncation(self):
        reader = ByteReader(io.BytesIO(b"abc"))
        with pytest.raises(TruncatedInputError):
            reader.read(4)

    def test_truncation_is_a_wire_format_error(self):
        assert issubclass(TruncatedInputError, NotValidWireFormatError)


class TestReadCoords:
    """Test chunked coordinate reads."""

    def test_zero_points(self):
        coords = read_coords(ByteReader(io.BytesIO(b"")), ByteOrder.LITTLE_ENDIAN, 0)
        assert coords.shape == (0, 2)

    @pytest.mark.parametrize("dtype,order", [("<f8", ByteOrder.LITTLE_ENDIAN), (">f8", ByteOrder.BIG_ENDIAN)])
    def test_reads_across_chunk_boundary(self, dtype, order):
        count = MAX_POINTS_ALLOC + 3
        values = np.arange(count * 2, dtype=dtype)
        reader = ByteReader(io.BytesIO(values.tobytes()))

        coords = read_coords(reader, order, count)

        assert coords.shape == (count, 2)
        assert coords.dtype == np.float64
        np.testing.assert_array_equal(coords.ravel(), np.arange(count * 2))

    def test_truncated_run_consumes_available_bytes(self):
        raw = np.array([1.0, 2.0, 3.0, 4.0], dtype="<f8").tobytes()
        stream = io.BytesIO(raw)
        with pytest.raises(TruncatedInputError):
            read_coords(ByteReader(stream), ByteOrder.LITTLE_ENDIAN, 50_000_000)
        assert stream.tell() == len(raw)
