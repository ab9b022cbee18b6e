"""Takeoff: line factory, per-type processors, orchestrator, finishes and schedule paths."""

from qto.takeoff.factory import TakeoffLineFactory, line_id
from qto.takeoff.finishes import FinishesResult, FinishesTakeoff, calculate_finishes
from qto.takeoff.orchestrator import (
    StructuralTakeoff,
    TakeoffResult,
    calculate_structural_elements,
)
from qto.takeoff.processors import PROCESSOR_REGISTRY, get_processor
from qto.takeoff.schedule import ScheduleResult, calculate_schedule_items, trade_for_category

__all__ = [
    "FinishesResult",
    "FinishesTakeoff",
    "PROCESSOR_REGISTRY",
    "ScheduleResult",
    "StructuralTakeoff",
    "TakeoffLineFactory",
    "TakeoffResult",
    "calculate_finishes",
    "calculate_schedule_items",
    "calculate_structural_elements",
    "get_processor",
    "line_id",
    "trade_for_category",
]
