"""Data model: project snapshot inputs and calculation-result records."""

from qto.models.project import (
    ElementInstance,
    ElementTemplate,
    ElementType,
    FinishAssignment,
    FinishType,
    GridLine,
    Level,
    Opening,
    Placement,
    ProjectSnapshot,
    RebarConfig,
    RebarGroup,
    ScheduleItem,
    Space,
)
from qto.models.takeoff import (
    BOQLine,
    CalcRun,
    CatalogItem,
    TakeoffLine,
    TakeoffSummary,
    Trade,
)

__all__ = [
    "BOQLine",
    "CalcRun",
    "CatalogItem",
    "ElementInstance",
    "ElementTemplate",
    "ElementType",
    "FinishAssignment",
    "FinishType",
    "GridLine",
    "Level",
    "Opening",
    "Placement",
    "ProjectSnapshot",
    "RebarConfig",
    "RebarGroup",
    "ScheduleItem",
    "Space",
    "TakeoffLine",
    "TakeoffSummary",
    "Trade",
]
