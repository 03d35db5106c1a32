"""
Decode EWKB into shapely geometries.

Two entry points:
- unmarshal(data): decode one complete in-memory buffer; returns the
  SRID found in the header
- Decoder(stream).decode(): decode the next geometry off an open binary
  stream; the SRID is NOT propagated and is always reported as 0

The second behavior is a known asymmetry. Callers that need the SRID
must decode from a complete buffer.

Some wire shapes have no shapely equivalent and are rejected with
NotValidWireFormatError rather than rewritten: a 1-point LineString, a
polygon ring that is empty, open or shorter than 4 points, and a
MultiPoint holding an empty (NaN, NaN) Point.

Counts read from the wire never size an allocation up front: coordinate
runs are read in capped chunks and member lists grow as elements
actually arrive, so a hostile count fails with TruncatedInputError once
the input runs out.
"""

import io
import math

from shapely.errors import ShapelyError
from shapely.geometry import (
    GeometryCollection,
    LinearRing,
    LineString,
    MultiLineString,
    MultiPoint,
    MultiPolygon,
    Point,
    Polygon,
)

from ..models import Bound
from .errors import IncorrectGeometryForDestinationError, NotValidWireFormatError
from .wire import (
    ByteOrder,
    ByteReader,
    GeometryKind,
    read_coords,
    read_header,
    read_point,
    read_uint32,
)


def unmarshal(data) -> tuple:
    """
    Decode a complete (E)WKB buffer.

    Returns (geometry, srid); srid is 0 when the data carries none.
    The whole buffer must be consumed.
    """
    data = bytes(data)
    stream = io.BytesIO(data)
    geometry, srid = _read_geometry(ByteReader(stream))
    if stream.tell() != len(data):
        raise NotValidWireFormatError(
            f"{len(data) - stream.tell()} trailing bytes after geometry"
        )
    return geometry, srid


def unmarshal_as(data, target) -> tuple:
    """Decode a complete buffer into the requested geometry type."""
    geometry, srid = unmarshal(data)
    return coerce(geometry, target), srid


class Decoder:
    """Decodes consecutive geometries from a binary stream."""

    def __init__(self, stream):
        self._reader = ByteReader(stream)

    def decode(self) -> tuple:
        """
        Decode the next geometry on the stream.

        Returns (geometry, 0): the SRID is read off the wire but not
        returned. Use unmarshal() on a complete buffer to get it.
        """
        geometry, _ = _read_geometry(self._reader)
        return geometry, 0


def coerce(geometry, target):
    """
    Fit a decoded geometry to a destination type.

    The kind must match exactly, with these relaxations:
    - a Point satisfies MultiPoint (as a one-element MultiPoint)
    - a Polygon with exactly one ring satisfies LinearRing
    - any geometry satisfies Bound (its bounding box)

    Note MultiPoint -> Point is not a promotion.
    """
    if target is None:
        return geometry
    if target is Bound:
        return Bound.from_geometry(geometry)

    kind = GeometryKind.of(geometry)
    if target is LinearRing:
        if kind == GeometryKind.POLYGON and not geometry.is_empty and not geometry.interiors:
            return geometry.exterior
        raise IncorrectGeometryForDestinationError(
            f"Cannot scan {geometry.geom_type} into LinearRing"
        )

    target_kind = _TARGET_KINDS.get(target)
    if target_kind is None:
        raise IncorrectGeometryForDestinationError(
            f"Unsupported destination type: {getattr(target, '__name__', target)!r}"
        )
    if kind == target_kind:
        return geometry
    if kind == GeometryKind.POINT and target_kind == GeometryKind.MULTI_POINT:
        return MultiPoint() if geometry.is_empty else MultiPoint([geometry])

    raise IncorrectGeometryForDestinationError(
        f"Cannot scan {geometry.geom_type} into {target.__name__}"
    )


_TARGET_KINDS = {
    Point: GeometryKind.POINT,
    LineString: GeometryKind.LINE_STRING,
    Polygon: GeometryKind.POLYGON,
    MultiPoint: GeometryKind.MULTI_POINT,
    MultiLineString: GeometryKind.MULTI_LINE_STRING,
    MultiPolygon: GeometryKind.MULTI_POLYGON,
    GeometryCollection: GeometryKind.GEOMETRY_COLLECTION,
}


def _read_geometry(reader: ByteReader) -> tuple:
    """Read one unit: header, then dispatch on kind."""
    order, kind, srid = read_header(reader)
    return _READERS[kind](reader, order), srid


def _build(factory, *args):
    """Construct a shapely geometry, reporting rejects as wire format errors."""
    try:
        return factory(*args)
    except (ShapelyError, ValueError, TypeError) as e:
        raise NotValidWireFormatError(
            f"Invalid {factory.__name__} data: {e}"
        ) from e


def _read_point(reader: ByteReader, order: ByteOrder) -> Point:
    x, y = read_point(reader, order)
    if math.isnan(x) and math.isnan(y):
        return Point()
    return Point(x, y)


def _read_line_string(reader: ByteReader, order: ByteOrder) -> LineString:
    coords = read_coords(reader, order, read_uint32(reader, order))
    if not len(coords):
        return LineString()
    if len(coords) == 1:
        raise NotValidWireFormatError("LineString with a single point")
    return _build(LineString, coords)


def _check_ring(coords) -> None:
    """Reject rings shapely would drop or rewrite (it closes open rings)."""
    if not len(coords):
        raise NotValidWireFormatError("Polygon ring with no points")
    if not (coords[0] == coords[-1]).all():
        raise NotValidWireFormatError(
            f"Polygon ring is not closed ({len(coords)} points)"
        )
    if len(coords) < 4:
        raise NotValidWireFormatError(
            f"Polygon ring needs at least 4 points, got {len(coords)}"
        )


def _read_polygon(reader: ByteReader, order: ByteOrder) -> Polygon:
    num_rings = read_uint32(reader, order)
    rings = []
    for _ in range(num_rings):
        coords = read_coords(reader, order, read_uint32(reader, order))
        _check_ring(coords)
        rings.append(coords)

    if not rings:
        return Polygon()
    return _build(Polygon, rings[0], rings[1:])


def _read_members(reader: ByteReader, order: ByteOrder, member_kind=None) -> list:
    """Read a count and that many full units, each with its own header."""
    num = read_uint32(reader, order)
    members = []
    for _ in range(num):
        member_order, kind, _ = read_header(reader)
        if member_kind is not None and kind != member_kind:
            raise NotValidWireFormatError(
                f"Expected {member_kind.name} member, found {kind.name}"
            )
        members.append(_READERS[kind](reader, member_order))
    return members


def _read_multi_point(reader: ByteReader, order: ByteOrder) -> MultiPoint:
    points = _read_members(reader, order, GeometryKind.POINT)
    if not points:
        return MultiPoint()
    if any(point.is_empty for point in points):
        raise NotValidWireFormatError("MultiPoint with an empty member")
    return _build(MultiPoint, points)


def _read_multi_line_string(reader: ByteReader, order: ByteOrder) -> MultiLineString:
    lines = _read_members(reader, order, GeometryKind.LINE_STRING)
    if not lines:
        return MultiLineString()
    return _build(MultiLineString, lines)


def _read_multi_polygon(reader: ByteReader, order: ByteOrder) -> MultiPolygon:
    polygons = _read_members(reader, order, GeometryKind.POLYGON)
    if not polygons:
        return MultiPolygon()
    return _build(MultiPolygon, polygons)


def _read_collection(reader: ByteReader, order: ByteOrder) -> GeometryCollection:
    geometries = _read_members(reader, order)
    if not geometries:
        return GeometryCollection()
    return _build(GeometryCollection, geometries)


_READERS = {
    GeometryKind.POINT: _read_point,
    GeometryKind.LINE_STRING: _read_line_string,
    GeometryKind.POLYGON: _read_polygon,
    GeometryKind.MULTI_POINT: _read_multi_point,
    GeometryKind.MULTI_LINE_STRING: _read_multi_line_string,
    GeometryKind.MULTI_POLYGON: _read_multi_polygon,
    GeometryKind.GEOMETRY_COLLECTION: _read_collection,
}
