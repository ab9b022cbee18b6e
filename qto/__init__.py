"""QTO — quantity takeoff and DPWH Bill of Quantities engine."""

__version__ = "1.0.0"

from qto.boq.aggregator import BOQAggregator, generate_boq
from qto.boq.catalog import LocalCatalog
from qto.boq.classifier import Part, classify, sort_parts
from qto.boq.report import BOQReport
from qto.engine import TakeoffEngine
from qto.errors import ElementSkipped, GeometryError, InvalidHeightError, TakeoffError
from qto.models import (
    BOQLine,
    CalcRun,
    ElementInstance,
    ElementTemplate,
    ProjectSnapshot,
    TakeoffLine,
)
from qto.settings import ProjectSettings, configure_logging, load_settings
from qto.takeoff.finishes import calculate_finishes
from qto.takeoff.orchestrator import StructuralTakeoff, calculate_structural_elements
from qto.takeoff.schedule import calculate_schedule_items

__all__ = [
    "BOQAggregator",
    "BOQLine",
    "BOQReport",
    "CalcRun",
    "ElementInstance",
    "ElementSkipped",
    "ElementTemplate",
    "GeometryError",
    "InvalidHeightError",
    "LocalCatalog",
    "Part",
    "ProjectSettings",
    "ProjectSnapshot",
    "StructuralTakeoff",
    "TakeoffEngine",
    "TakeoffError",
    "TakeoffLine",
    "calculate_finishes",
    "calculate_schedule_items",
    "calculate_structural_elements",
    "classify",
    "configure_logging",
    "generate_boq",
    "load_settings",
    "sort_parts",
]
