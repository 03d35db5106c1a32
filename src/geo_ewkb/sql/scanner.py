"""
Bridge the EWKB codec to SQL drivers.

Handles:
- Scanning nullable column values into a geometry, optionally of a
  required shapely type (see decoder.coerce for the promotion rules)
- Producing storable EWKB values from geometries
- Driver quirks:
  * MySQL returns geometry columns as WKB prefixed with a raw 4-byte SRID
    (no EWKB flag). If strict decoding fails, the first 4 bytes are
    dropped and decoding is retried once.
  * Some PostgreSQL drivers return bytea as ``\\x``-prefixed hex text
    inside the byte value. That text is hex-decoded first.
"""

import binascii
import logging
import sqlite3
from typing import Optional

from ..codec.decoder import coerce, unmarshal
from ..codec.encoder import marshal
from ..codec.errors import (
    NotValidWireFormatError,
    UnsupportedInputKindError,
    WKBError,
)

logger = logging.getLogger(__name__)

HEX_PREFIX = b"\\x"

# Length of the raw SRID MySQL puts in front of the WKB
VENDOR_SRID_PREFIX_SIZE = 4


class GeometryScanner:
    """
    Scan destination for geometry columns.

    After a successful scan, ``valid`` is True and ``geometry`` / ``srid``
    hold the result. A NULL (or empty) column leaves ``valid`` False and
    ``geometry`` None. If ``target`` is given (a shapely geometry class,
    LinearRing or Bound), the decoded geometry must fit it.

        scanner = GeometryScanner(Point)
        scanner.scan(row["location"])
        if scanner.valid:
            use(scanner.geometry)
    """

    def __init__(self, target=None):
        self.target = target
        self.geometry = None
        self.srid = 0
        self.valid = False

    def scan(self, raw) -> None:
        """Decode one column value into this scanner."""
        self.geometry = None
        self.valid = False

        if raw is None:
            return
        if not isinstance(raw, (bytes, bytearray, memoryview)):
            raise UnsupportedInputKindError(
                f"Scan value must be bytes, got {type(raw).__name__}"
            )

        data = bytes(raw)
        if len(data) > len(HEX_PREFIX) and data.startswith(HEX_PREFIX):
            data = _unhex(data[len(HEX_PREFIX):])

        if not data:
            return

        geometry, srid = _unmarshal_vendor(data)
        geometry = coerce(geometry, self.target)

        self.srid = srid
        self.geometry = geometry
        self.valid = True


def scan(raw, target=None) -> GeometryScanner:
    """Scan a single value into a new GeometryScanner."""
    scanner = GeometryScanner(target)
    scanner.scan(raw)
    return scanner


class GeometryValue:
    """A geometry bound for storage as EWKB (little-endian)."""

    def __init__(self, geometry, srid: int = 0):
        self.geometry = geometry
        self.srid = srid

    def value(self) -> Optional[bytes]:
        """EWKB bytes, or None for a missing geometry."""
        if self.geometry is None:
            return None
        return marshal(self.geometry, self.srid)

    def __conform__(self, protocol):
        # sqlite3 adaptation hook. Bind None yourself for NULL geometries:
        # sqlite3 treats a None result here as "not adapted".
        if protocol is sqlite3.PrepareProtocol:
            return self.value()
        return None


def value(geometry, srid: int = 0) -> GeometryValue:
    """Wrap a geometry (or None) as a storable value."""
    return GeometryValue(geometry, srid)


def _unhex(text: bytes) -> bytes:
    try:
        return binascii.unhexlify(text)
    except (binascii.Error, ValueError) as e:
        raise NotValidWireFormatError(
            f"Data looked hex-encoded but is not: {e}"
        ) from e


def _unmarshal_vendor(data: bytes) -> tuple:
    """Strict decode, retrying once without a raw 4-byte SRID prefix."""
    try:
        return unmarshal(data)
    except WKBError as original:
        if len(data) <= VENDOR_SRID_PREFIX_SIZE:
            raise
        logger.debug(
            "Strict EWKB decode failed (%s); retrying without %d-byte SRID prefix",
            original,
            VENDOR_SRID_PREFIX_SIZE,
        )
        try:
            return unmarshal(data[VENDOR_SRID_PREFIX_SIZE:])
        except WKBError:
            raise original from None
