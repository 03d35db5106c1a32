"""Columnar output formats for encoded geometries."""

from . import arrow

__all__ = ["arrow"]
