"""
Wire format primitives and type dispatch for (E)WKB.

Handles:
- Byte order markers (0 = big-endian, 1 = little-endian)
- uint32 / float64 readers and writers in either byte order
- Type code <-> geometry kind mapping, including the EWKB SRID flag
- Geometry unit headers (order marker + type code + optional SRID)

Layout of every geometry unit:

    byte     order marker
    uint32   type code   (kind 1..7, bit 29 set when an SRID follows)
    uint32   srid        (present iff the flag is set)
    ...      kind-specific payload
"""

import io
import struct
from enum import IntEnum

import numpy as np

from .errors import (
    NotValidWireFormatError,
    TruncatedInputError,
    UnsupportedGeometryKindError,
)

# EWKB flag marking that a 4-byte SRID follows the type code
SRID_FLAG = 0x20000000

# Upper bound on points read per chunk, so a hostile count field
# cannot size an allocation. Valid data with more points still decodes.
MAX_POINTS_ALLOC = 10000

HEADER_SIZE = 5
SRID_SIZE = 4
COUNT_SIZE = 4
COORD_SIZE = 16


class ByteOrder(IntEnum):
    """Byte order marker values as they appear on the wire."""

    BIG_ENDIAN = 0
    LITTLE_ENDIAN = 1

    @property
    def prefix(self) -> str:
        """struct / numpy byte order character."""
        return ">" if self is ByteOrder.BIG_ENDIAN else "<"


DEFAULT_BYTE_ORDER = ByteOrder.LITTLE_ENDIAN

# WGS84 lon/lat, the SRID used when none is given
DEFAULT_SRID = 4326


class GeometryKind(IntEnum):
    """The seven WKB geometry kinds, valued by their type code."""

    POINT = 1
    LINE_STRING = 2
    POLYGON = 3
    MULTI_POINT = 4
    MULTI_LINE_STRING = 5
    MULTI_POLYGON = 6
    GEOMETRY_COLLECTION = 7

    @classmethod
    def of(cls, geometry) -> "GeometryKind":
        """Kind of a shapely geometry."""
        geom_type = getattr(geometry, "geom_type", None)
        try:
            return GEOMETRY_KIND_MAP[geom_type]
        except KeyError:
            raise UnsupportedGeometryKindError(
                f"Unsupported geometry: {type(geometry).__name__}"
            ) from None


GEOMETRY_KIND_MAP = {
    "Point": GeometryKind.POINT,
    "LineString": GeometryKind.LINE_STRING,
    "Polygon": GeometryKind.POLYGON,
    "MultiPoint": GeometryKind.MULTI_POINT,
    "MultiLineString": GeometryKind.MULTI_LINE_STRING,
    "MultiPolygon": GeometryKind.MULTI_POLYGON,
    "GeometryCollection": GeometryKind.GEOMETRY_COLLECTION,
}

_UINT32 = {order: struct.Struct(order.prefix + "I") for order in ByteOrder}
_COORD = {order: struct.Struct(order.prefix + "dd") for order in ByteOrder}
_FLOAT64 = {order: np.dtype(order.prefix + "f8") for order in ByteOrder}


class ByteReader:
    """Reads exact-size chunks from a binary stream."""

    def __init__(self, stream):
        self._stream = stream

    def read(self, size: int) -> bytes:
        data = self._stream.read(size)
        if data is None or len(data) != size:
            got = 0 if data is None else len(data)
            raise TruncatedInputError(
                f"Unexpected end of input: wanted {size} bytes, got {got}"
            )
        return data


def encode_kind(kind: GeometryKind, has_srid: bool) -> int:
    """Type code for a kind, with the SRID flag set when one follows."""
    code = int(kind)
    if has_srid:
        code |= SRID_FLAG
    return code


def split_type_code(code: int) -> tuple[GeometryKind, bool]:
    """Split a type code into its kind and whether an SRID follows."""
    has_srid = bool(code & SRID_FLAG)
    raw_kind = code & ~SRID_FLAG
    try:
        return GeometryKind(raw_kind), has_srid
    except ValueError:
        raise UnsupportedGeometryKindError(
            f"Unsupported geometry type code: {code:#010x}"
        ) from None


def read_byte_order(reader: ByteReader) -> ByteOrder:
    marker = reader.read(1)[0]
    if marker not in (0, 1):
        raise NotValidWireFormatError(f"Invalid byte order marker: {marker}")
    return ByteOrder(marker)


def read_uint32(reader: ByteReader, order: ByteOrder) -> int:
    return _UINT32[order].unpack(reader.read(4))[0]


def read_point(reader: ByteReader, order: ByteOrder) -> tuple[float, float]:
    return _COORD[order].unpack(reader.read(COORD_SIZE))


def read_coords(reader: ByteReader, order: ByteOrder, count: int) -> np.ndarray:
    """
    Read ``count`` coordinate pairs into a native (count, 2) float64 array.

    Reads happen in chunks of at most MAX_POINTS_ALLOC points, so a
    truncated stream fails after consuming only the bytes it holds.
    """
    chunks = []
    remaining = count
    while remaining > 0:
        step = min(remaining, MAX_POINTS_ALLOC)
        raw = reader.read(step * COORD_SIZE)
        chunks.append(np.frombuffer(raw, dtype=_FLOAT64[order]).reshape(step, 2))
        remaining -= step

    if not chunks:
        return np.empty((0, 2), dtype=np.float64)
    return np.concatenate(chunks).astype(np.float64)


def read_header(reader: ByteReader) -> tuple[ByteOrder, GeometryKind, int]:
    """Read order marker, type code and optional SRID (0 when absent)."""
    order = read_byte_order(reader)
    kind, has_srid = split_type_code(read_uint32(reader, order))
    srid = read_uint32(reader, order) if has_srid else 0
    return order, kind, srid


def decode_header(data: bytes) -> tuple[ByteOrder, GeometryKind, int]:
    """Decode the header at the start of a byte buffer."""
    return read_header(ByteReader(io.BytesIO(bytes(data))))


def pack_uint32(buf: bytearray, offset: int, order: ByteOrder, value: int) -> int:
    _UINT32[order].pack_into(buf, offset, value)
    return offset + COUNT_SIZE


def pack_header(
    buf: bytearray,
    offset: int,
    order: ByteOrder,
    kind: GeometryKind,
    srid: int = 0,
) -> int:
    """Write a unit header at ``offset``; returns the offset after it."""
    buf[offset] = order
    offset = pack_uint32(buf, offset + 1, order, encode_kind(kind, srid != 0))
    if srid:
        offset = pack_uint32(buf, offset, order, srid)
    return offset


def pack_point(buf: bytearray, offset: int, order: ByteOrder, x: float, y: float) -> int:
    _COORD[order].pack_into(buf, offset, x, y)
    return offset + COORD_SIZE


def pack_coords(buf: bytearray, offset: int, order: ByteOrder, coords) -> int:
    """Write an (n, 2) coordinate array as n pairs of doubles."""
    raw = np.ascontiguousarray(coords, dtype=_FLOAT64[order]).tobytes()
    end = offset + len(raw)
    buf[offset:end] = raw
    return end
