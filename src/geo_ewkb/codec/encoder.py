"""
Encode shapely geometries as EWKB.

The output size is computed up front (geometry_length) and the bytes are
written in place into a buffer of exactly that size: no growth, no copies.

Only the outermost unit carries the SRID; nested members of multi
geometries and collections are always written without one.
"""

import numpy as np
from shapely.geometry import Polygon

from .errors import InvalidSridError, UnsupportedGeometryKindError
from .wire import (
    COORD_SIZE,
    COUNT_SIZE,
    DEFAULT_BYTE_ORDER,
    DEFAULT_SRID,
    HEADER_SIZE,
    SRID_SIZE,
    ByteOrder,
    GeometryKind,
    pack_coords,
    pack_header,
    pack_point,
    pack_uint32,
)

_MAX_SRID = 0xFFFFFFFF


def geometry_length(geometry, srid: int = 0) -> int:
    """Exact number of bytes ``geometry`` encodes to with the given SRID."""
    geometry = _as_encodable(geometry)
    length = _unit_length(geometry)
    if srid:
        length += SRID_SIZE
    return length


def marshal(
    geometry,
    srid: int = DEFAULT_SRID,
    byte_order: ByteOrder = DEFAULT_BYTE_ORDER,
) -> bytes:
    """
    Encode a geometry as EWKB.

    An SRID of 0 produces plain WKB (no SRID flag, no SRID field).
    """
    _check_srid(srid)
    order = ByteOrder(byte_order)
    geometry = _as_encodable(geometry)

    buf = bytearray(_unit_length(geometry) + (SRID_SIZE if srid else 0))
    _write_geometry(buf, 0, order, geometry, srid)
    return bytes(buf)


def must_marshal(
    geometry,
    srid: int = DEFAULT_SRID,
    byte_order: ByteOrder = DEFAULT_BYTE_ORDER,
) -> bytes:
    """
    Encode a geometry, treating any failure as a programming error.

    This is an assertion, not error handling: call it only on values you
    have already established are encodable (2D shapely geometries you built
    yourself). Never use it on untrusted input.
    """
    try:
        return marshal(geometry, srid, byte_order)
    except ValueError as e:
        raise AssertionError(f"EWKB encoding failed: {e}") from e


class Encoder:
    """Writes geometries as EWKB to a binary sink (anything with ``write``)."""

    def __init__(
        self,
        sink,
        byte_order: ByteOrder = DEFAULT_BYTE_ORDER,
        srid: int = DEFAULT_SRID,
    ):
        self._sink = sink
        self.byte_order = ByteOrder(byte_order)
        self.srid = _check_srid(srid)

    @classmethod
    def from_options(cls, sink, options) -> "Encoder":
        """Create an encoder configured from a CodecOptions model."""
        return cls(sink, byte_order=options.byte_order, srid=options.srid)

    def set_byte_order(self, byte_order: ByteOrder) -> "Encoder":
        self.byte_order = ByteOrder(byte_order)
        return self

    def set_srid(self, srid: int) -> "Encoder":
        self.srid = _check_srid(srid)
        return self

    def encode(self, geometry) -> None:
        """Encode ``geometry`` and write it to the sink."""
        self._sink.write(marshal(geometry, self.srid, self.byte_order))


def _check_srid(srid: int) -> int:
    if not 0 <= srid <= _MAX_SRID:
        raise InvalidSridError(f"SRID must fit in an unsigned 32-bit int, got {srid}")
    return srid


def _as_encodable(geometry):
    """LinearRings travel as single-ring polygons; everything else as-is."""
    if getattr(geometry, "geom_type", None) == "LinearRing":
        return Polygon(geometry)
    return geometry


def _coords(geometry) -> np.ndarray:
    """(n, 2) coordinate array of a Point, LineString or LinearRing."""
    if geometry.has_z:
        raise UnsupportedGeometryKindError(
            f"3D coordinates are not supported: {geometry.geom_type}"
        )
    if geometry.is_empty:
        return np.empty((0, 2), dtype=np.float64)
    return np.asarray(geometry.coords, dtype=np.float64)


def _rings(polygon) -> list:
    if polygon.is_empty:
        return []
    return [polygon.exterior, *polygon.interiors]


def _unit_length(geometry) -> int:
    """Length of one unit (header included, SRID excluded)."""
    kind = GeometryKind.of(geometry)

    if kind == GeometryKind.POINT:
        if geometry.has_z:
            raise UnsupportedGeometryKindError("3D coordinates are not supported: Point")
        return HEADER_SIZE + COORD_SIZE
    elif kind == GeometryKind.LINE_STRING:
        return HEADER_SIZE + COUNT_SIZE + COORD_SIZE * len(_coords(geometry))
    elif kind == GeometryKind.POLYGON:
        length = HEADER_SIZE + COUNT_SIZE
        for ring in _rings(geometry):
            length += COUNT_SIZE + COORD_SIZE * len(_coords(ring))
        return length

    # MultiPoint, MultiLineString, MultiPolygon, GeometryCollection
    return HEADER_SIZE + COUNT_SIZE + sum(
        _unit_length(_as_encodable(member)) for member in geometry.geoms
    )


def _write_geometry(
    buf: bytearray,
    offset: int,
    order: ByteOrder,
    geometry,
    srid: int = 0,
) -> int:
    """Write one unit at ``offset``; returns the offset after it."""
    kind = GeometryKind.of(geometry)
    offset = pack_header(buf, offset, order, kind, srid)

    if kind == GeometryKind.POINT:
        if geometry.is_empty:
            return pack_point(buf, offset, order, float("nan"), float("nan"))
        return pack_point(buf, offset, order, geometry.x, geometry.y)
    elif kind == GeometryKind.LINE_STRING:
        coords = _coords(geometry)
        offset = pack_uint32(buf, offset, order, len(coords))
        return pack_coords(buf, offset, order, coords)
    elif kind == GeometryKind.POLYGON:
        rings = _rings(geometry)
        offset = pack_uint32(buf, offset, order, len(rings))
        for ring in rings:
            coords = _coords(ring)
            offset = pack_uint32(buf, offset, order, len(coords))
            offset = pack_coords(buf, offset, order, coords)
        return offset

    members = [_as_encodable(member) for member in geometry.geoms]
    offset = pack_uint32(buf, offset, order, len(members))
    for member in members:
        # Nested units never carry an SRID
        offset = _write_geometry(buf, offset, order, member)
    return offset
