"""EWKB geometry codec with SQL driver adapters."""

from .codec import (
    DEFAULT_BYTE_ORDER,
    DEFAULT_SRID,
    ByteOrder,
    Decoder,
    Encoder,
    GeometryKind,
    IncorrectGeometryForDestinationError,
    InvalidSridError,
    NotValidWireFormatError,
    TruncatedInputError,
    UnsupportedGeometryKindError,
    UnsupportedInputKindError,
    WKBError,
    geometry_length,
    marshal,
    must_marshal,
    unmarshal,
    unmarshal_as,
)
from .config import load_options
from .models import Bound, CodecOptions
from .sql import GeometryScanner, GeometryValue, scan, value

__all__ = [
    "ByteOrder",
    "GeometryKind",
    "DEFAULT_BYTE_ORDER",
    "DEFAULT_SRID",
    "Encoder",
    "Decoder",
    "marshal",
    "must_marshal",
    "geometry_length",
    "unmarshal",
    "unmarshal_as",
    "GeometryScanner",
    "GeometryValue",
    "scan",
    "value",
    "Bound",
    "CodecOptions",
    "load_options",
    "WKBError",
    "NotValidWireFormatError",
    "TruncatedInputError",
    "IncorrectGeometryForDestinationError",
    "UnsupportedGeometryKindError",
    "UnsupportedInputKindError",
    "InvalidSridError",
]
