"""Pure quantity calculators: concrete volume, formwork area, rebar weight."""

from qto.quantities import concrete, formwork, rebar
from qto.quantities.rebar import (
    REBAR_WEIGHTS,
    bar_count,
    lap_length,
    rebar_grade,
    rebar_pay_item,
    unit_weight,
)
from qto.quantities.result import QuantityResult
from qto.quantities.rounding import apply_waste, round_half_away

__all__ = [
    "QuantityResult",
    "REBAR_WEIGHTS",
    "apply_waste",
    "bar_count",
    "concrete",
    "formwork",
    "lap_length",
    "rebar",
    "rebar_grade",
    "rebar_pay_item",
    "round_half_away",
    "unit_weight",
]
