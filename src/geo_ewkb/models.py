"""
Pydantic models shared by the codec and its adapters.
These models are wire-agnostic: they carry settings and derived values,
never encoded bytes.
"""

from pydantic import BaseModel, Field, field_validator
from shapely.geometry import box

from .codec.wire import DEFAULT_BYTE_ORDER, DEFAULT_SRID, ByteOrder


class CodecOptions(BaseModel):
    """Encoder settings. Passed explicitly; there is no global default."""

    byte_order: ByteOrder = DEFAULT_BYTE_ORDER
    srid: int = Field(DEFAULT_SRID, ge=0, le=0xFFFFFFFF)  # 0 = plain WKB

    @field_validator("byte_order", mode="before")
    @classmethod
    def _parse_byte_order(cls, value):
        # YAML configs spell it out: "little" / "big" (or ndr / xdr)
        if isinstance(value, str):
            names = {
                "little": ByteOrder.LITTLE_ENDIAN,
                "ndr": ByteOrder.LITTLE_ENDIAN,
                "big": ByteOrder.BIG_ENDIAN,
                "xdr": ByteOrder.BIG_ENDIAN,
            }
            key = value.strip().lower()
            if key not in names:
                raise ValueError(f"Invalid byte order: {value}")
            return names[key]
        return value


class Bound(BaseModel):
    """Axis-aligned bounding box. Derived from a geometry, never encoded."""

    model_config = {"frozen": True}

    min_x: float
    min_y: float
    max_x: float
    max_y: float

    @classmethod
    def from_geometry(cls, geometry) -> "Bound":
        min_x, min_y, max_x, max_y = geometry.bounds
        return cls(min_x=min_x, min_y=min_y, max_x=max_x, max_y=max_y)

    def to_polygon(self):
        """Shapely polygon covering the bound."""
        return box(self.min_x, self.min_y, self.max_x, self.max_y)
