"""Error types shared by the encoder, decoder and SQL scan adapter."""


class WKBError(ValueError):
    """Base class for every error raised by the codec."""


class NotValidWireFormatError(WKBError):
    """The bytes are not (E)WKB: bad byte order marker, trailing data, etc."""


class TruncatedInputError(NotValidWireFormatError):
    """The input ended before a declared field or element count was read."""


class IncorrectGeometryForDestinationError(WKBError):
    """Decoded geometry does not match (or promote to) the requested type."""


class UnsupportedGeometryKindError(WKBError):
    """Type code or geometry value is outside the seven supported kinds."""


class UnsupportedInputKindError(WKBError, TypeError):
    """A scan was given something other than None or a byte sequence."""


class InvalidSridError(WKBError):
    """SRID does not fit the unsigned 32-bit wire field."""
