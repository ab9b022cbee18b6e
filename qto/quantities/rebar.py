"""Reinforcing-steel weight calculators (kg, waste applied).

Bar groups are either *longitudinal* (straight bars with a lap splice per
bar, laid along a run and distributed across a width) or *transverse*
(closed stirrups/ties with hook allowance, distributed along the member).
"""

from __future__ import annotations

import math

from qto.config import HOOK_ALLOWANCE_M, LAP_MULTIPLIER
from qto.models.project import RebarGroup
from qto.quantities.result import QuantityResult
from qto.quantities.rounding import apply_waste, check_positive, pct

# Nominal diameter (mm) -> unit weight (kg/m), deformed bars
REBAR_WEIGHTS: dict[int, float] = {
    10: 0.617,
    12: 0.888,
    16: 1.578,
    20: 2.466,
    25: 3.853,
    28: 4.834,
    32: 6.313,
    36: 7.990,
    40: 9.864,
}


def _nominal(diameter: float | None) -> int:
    if diameter is None:
        raise ValueError("Bar group has no diameter")
    size = int(round(diameter))
    if abs(diameter - size) > 1e-9 or size not in REBAR_WEIGHTS:
        raise ValueError(
            f"Unsupported bar diameter {diameter:g}mm. "
            f"Available: {', '.join(str(d) for d in REBAR_WEIGHTS)}mm"
        )
    return size


def unit_weight(diameter: float) -> float:
    """kg per metre for a nominal bar diameter in mm."""
    return REBAR_WEIGHTS[_nominal(diameter)]


def rebar_grade(diameter: float) -> int:
    """Steel grade by diameter: ≤12mm -> 40, ≤36mm -> 60, larger -> 80."""
    size = _nominal(diameter)
    if size <= 12:
        return 40
    if size <= 36:
        return 60
    return 80


def rebar_pay_item(diameter: float, epoxy_coated: bool = False) -> str:
    """Default DPWH reinforcing-steel pay item for a diameter."""
    suffix = {40: "a1", 60: "a2", 80: "a3"}[rebar_grade(diameter)]
    return f"902 ({2 if epoxy_coated else 1}) {suffix}"


def lap_length(diameter: float) -> float:
    """Lap splice length in metres (40d)."""
    return LAP_MULTIPLIER * diameter / 1000.0


def bar_count(span: float, spacing: float) -> int:
    """Bars needed to cover *span* at *spacing*: ``ceil(span/spacing) + 1``."""
    check_positive(span=span, spacing=spacing)
    # round() strips float noise so 6 / 0.15 is 40, not 40.000000001
    return math.ceil(round(span / spacing, 9)) + 1


def stirrup_length(width: float, height: float) -> float:
    """Closed rectangular stirrup/tie with two hooks."""
    check_positive(width=width, height=height)
    return 2.0 * (width + height) + HOOK_ALLOWANCE_M


def hoop_length(diameter: float) -> float:
    """Circular tie with hook allowance."""
    check_positive(diameter=diameter)
    return math.pi * diameter + HOOK_ALLOWANCE_M


def group_count(group: RebarGroup, distribute_across: float) -> int:
    """Explicit ``count`` wins; otherwise derive from ``spacing``."""
    _nominal(group.diameter)
    if group.count is not None:
        if group.count <= 0 or group.count != int(group.count):
            raise ValueError(f"Bar count must be a positive whole number, got {group.count:g}")
        return int(group.count)
    if group.spacing is not None:
        return bar_count(distribute_across, group.spacing)
    raise ValueError(f"{group.diameter:g}mm bar group needs a count or a spacing")


def rebar_weight(
    count: int,
    bar_length: float,
    diameter: float,
    waste: float,
    lap: float = 0.0,
    noun: str = "bars",
) -> QuantityResult:
    """Weight of *count* identical bars of ``bar_length + lap`` metres."""
    check_positive(bar_length=bar_length)
    weight_per_m = unit_weight(diameter)
    total_length = count * (bar_length + lap)
    raw = total_length * weight_per_m
    value = apply_waste(raw, waste)

    length_expr = f"({bar_length:.2f} m + {lap:.2f} m lap)" if lap else f"{bar_length:.2f} m"
    formula = f"{count} {noun} × {length_expr} × {weight_per_m:g} kg/m"
    if waste:
        formula += f" × (1 + {pct(waste)} waste)"
    formula += f" = {value:.2f} kg"

    return QuantityResult(
        value=value,
        formula_text=formula,
        inputs_snapshot={
            "count": float(count),
            "barLength": bar_length,
            "lap": lap,
            "diameter": diameter,
            "unitWeight": weight_per_m,
            "totalLength": total_length,
            "waste": waste,
        },
    )


def longitudinal_weight(
    group: RebarGroup,
    run_length: float,
    distribute_across: float,
    waste: float,
    with_lap: bool = True,
) -> QuantityResult:
    """Straight bars laid along *run_length*, spread across *distribute_across*."""
    count = group_count(group, distribute_across)
    lap = lap_length(group.diameter) if with_lap else 0.0
    result = rebar_weight(count, run_length, group.diameter, waste, lap=lap)
    if group.spacing is not None and group.count is None:
        result.inputs_snapshot["spacing"] = group.spacing
    return result


def transverse_weight(
    group: RebarGroup,
    perimeter_length: float,
    member_length: float,
    waste: float,
    noun: str = "stirrups",
) -> QuantityResult:
    """Closed stirrups/ties of *perimeter_length* along *member_length*."""
    count = group_count(group, member_length)
    result = rebar_weight(count, perimeter_length, group.diameter, waste, noun=noun)
    if group.spacing is not None and group.count is None:
        result.inputs_snapshot["spacing"] = group.spacing
    return result
