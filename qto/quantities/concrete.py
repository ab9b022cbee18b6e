"""Concrete volume calculators (m³, waste applied)."""

from __future__ import annotations

import math

from qto.quantities.result import QuantityResult
from qto.quantities.rounding import apply_waste, check_positive, pct


def _finish(expr: str, raw: float, waste: float, inputs: dict[str, float]) -> QuantityResult:
    value = apply_waste(raw, waste)
    formula = f"V = {expr} = {raw:.3f} m³"
    if waste:
        formula += f" × (1 + {pct(waste)} waste) = {value:.3f} m³"
    return QuantityResult(value=value, formula_text=formula, inputs_snapshot={**inputs, "waste": waste})


def beam_volume(width: float, height: float, length: float, waste: float) -> QuantityResult:
    check_positive(width=width, height=height, length=length)
    return _finish(
        f"{width:g} × {height:g} × {length:g}",
        width * height * length,
        waste,
        {"width": width, "height": height, "length": length},
    )


def rect_column_volume(width: float, depth: float, height: float, waste: float) -> QuantityResult:
    check_positive(width=width, depth=depth, height=height)
    return _finish(
        f"{width:g} × {depth:g} × {height:g}",
        width * depth * height,
        waste,
        {"width": width, "depth": depth, "height": height},
    )


def circular_column_volume(diameter: float, height: float, waste: float) -> QuantityResult:
    check_positive(diameter=diameter, height=height)
    return _finish(
        f"π × ({diameter:g} / 2)² × {height:g}",
        math.pi * (diameter / 2.0) ** 2 * height,
        waste,
        {"diameter": diameter, "height": height},
    )


def slab_volume(thickness: float, x_length: float, y_length: float, waste: float) -> QuantityResult:
    check_positive(thickness=thickness, x_length=x_length, y_length=y_length)
    return _finish(
        f"{thickness:g} × {x_length:g} × {y_length:g}",
        thickness * x_length * y_length,
        waste,
        {"thickness": thickness, "xLength": x_length, "yLength": y_length},
    )


def footing_volume(length: float, width: float, depth: float, waste: float) -> QuantityResult:
    check_positive(length=length, width=width, depth=depth)
    return _finish(
        f"{length:g} × {width:g} × {depth:g}",
        length * width * depth,
        waste,
        {"length": length, "width": width, "depth": depth},
    )
