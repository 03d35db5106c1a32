"""
Arrow columns of EWKB geometries.

Geometry columns in Arrow/Parquet tables are stored as large_binary WKB.
Decoding goes through the SQL scan adapter so nulls, empty values,
vendor SRID prefixes and hex text are handled the same way as rows
coming out of a database.
"""

from typing import Iterable, Optional

import pyarrow as pa

from ..codec.encoder import marshal
from ..codec.wire import DEFAULT_BYTE_ORDER, ByteOrder
from ..sql.scanner import GeometryScanner


def to_arrow(
    geometries: Iterable,
    srid: int = 0,
    byte_order: ByteOrder = DEFAULT_BYTE_ORDER,
) -> pa.Array:
    """Encode geometries into a large_binary array (None -> null)."""
    return pa.array(
        [None if g is None else marshal(g, srid, byte_order) for g in geometries],
        type=pa.large_binary(),
    )


def from_arrow(column, target=None) -> list[Optional[object]]:
    """
    Decode a binary Arrow array or chunked array into shapely geometries.

    Null and empty values decode to None. SRIDs are not returned; scan
    values individually with GeometryScanner when they are needed.
    """
    scanner = GeometryScanner(target)
    geometries = []
    for raw in column.to_pylist():
        scanner.scan(raw)
        geometries.append(scanner.geometry)
    return geometries
