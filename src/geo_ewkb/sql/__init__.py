"""SQL driver adapter: scan column values, produce storable values."""

from .scanner import GeometryScanner, GeometryValue, scan, value

__all__ = ["GeometryScanner", "GeometryValue", "scan", "value"]
