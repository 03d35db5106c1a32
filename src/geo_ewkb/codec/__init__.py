"""EWKB codec: wire primitives, encoder and decoder."""

from .errors import (
    IncorrectGeometryForDestinationError,
    InvalidSridError,
    NotValidWireFormatError,
    TruncatedInputError,
    UnsupportedGeometryKindError,
    UnsupportedInputKindError,
    WKBError,
)
from .wire import DEFAULT_BYTE_ORDER, DEFAULT_SRID, ByteOrder, GeometryKind
from .encoder import Encoder, geometry_length, marshal, must_marshal
from .decoder import Decoder, coerce, unmarshal, unmarshal_as

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
    "coerce",
    "WKBError",
    "NotValidWireFormatError",
    "TruncatedInputError",
    "IncorrectGeometryForDestinationError",
    "UnsupportedGeometryKindError",
    "UnsupportedInputKindError",
    "InvalidSridError",
]
