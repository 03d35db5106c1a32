"""
Shared test fixtures.

Provides one sample geometry per kind (plus empty and nested forms)
and both byte orders, so codec tests can run over the full grid.
"""

import pytest
from shapely.geometry import (
    GeometryCollection,
    LineString,
    MultiLineString,
    MultiPoint,
    MultiPolygon,
    Point,
    Polygon,
)

from geo_ewkb.codec.wire import ByteOrder

# Point(30 10), little-endian, SRID 4326
POINT_EWKB_HEX = "0101000020e6100000000000000000003e400000000000002440"

_EXTERIOR = [(35, 10), (45, 45), (15, 40), (10, 20), (35, 10)]
_HOLE = [(20, 30), (35, 35), (30, 20), (20, 30)]

SAMPLES = {
    "point": Point(30, 10),
    "empty_point": Point(),
    "line_string": LineString([(30, 10), (10, 30), (40, 40)]),
    "empty_line_string": LineString(),
    "polygon": Polygon([(30, 10), (40, 40), (20, 40), (10, 20), (30, 10)]),
    "polygon_with_hole": Polygon(_EXTERIOR, [_HOLE]),
    "empty_polygon": Polygon(),
    "multi_point": MultiPoint([(10, 40), (40, 30), (20, 20), (30, 10)]),
    "empty_multi_point": MultiPoint(),
    "multi_line_string": MultiLineString(
        [
            [(10, 10), (20, 20), (10, 40)],
            [(40, 40), (30, 30), (40, 20), (30, 10)],
        ]
    ),
    "multi_polygon": MultiPolygon(
        [
            Polygon([(30, 20), (45, 40), (10, 40), (30, 20)]),
            Polygon(_EXTERIOR, [_HOLE]),
        ]
    ),
    "collection": GeometryCollection(
        [
            Point(40, 10),
            LineString([(10, 10), (20, 20), (10, 40)]),
            Polygon([(40, 40), (20, 45), (45, 30), (40, 40)]),
        ]
    ),
    "nested_collection": GeometryCollection(
        [
            GeometryCollection([Point(1, 2), LineString([(0, 0), (1, 1)])]),
            MultiPoint([(3, 4), (5, 6)]),
        ]
    ),
    "empty_collection": GeometryCollection(),
}


def same_geometry(a, b) -> bool:
    """Structural equality: same type, same coordinates, same nesting."""
    if a.geom_type != b.geom_type:
        return False
    if a.is_empty or b.is_empty:
        return a.is_empty and b.is_empty
    return a.equals_exact(b, tolerance=0)


@pytest.fixture(params=sorted(SAMPLES))
def sample(request):
    """One sample geometry per parametrized run."""
    return SAMPLES[request.param]


@pytest.fixture(params=list(ByteOrder), ids=lambda o: o.name.lower())
def byte_order(request):
    return request.param


@pytest.fixture
def point_ewkb():
    """EWKB of Point(30 10) with SRID 4326, little-endian."""
    return bytes.fromhex(POINT_EWKB_HEX)


@pytest.fixture
def geometry_equal():
    """The structural equality check, for tests outside conftest."""
    return same_geometry
