"""Geometry resolution: grid, levels, property access, per-type dimensions."""

from qto.geometry.engine import (
    BeamGeometry,
    ColumnGeometry,
    ElementGeometryEngine,
    FoundationGeometry,
    Geometry,
    SlabGeometry,
)
from qto.geometry.grid import GridResolver, Span, is_span_token
from qto.geometry.levels import LevelResolver
from qto.geometry.properties import first_number, get_number, get_prop

__all__ = [
    "BeamGeometry",
    "ColumnGeometry",
    "ElementGeometryEngine",
    "FoundationGeometry",
    "Geometry",
    "GridResolver",
    "LevelResolver",
    "SlabGeometry",
    "Span",
    "first_number",
    "get_number",
    "get_prop",
    "is_span_token",
]
