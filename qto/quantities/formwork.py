"""Formwork contact-area calculators (m²).

Formwork is reused or rented rather than consumed, so none of these take
a waste fraction.
"""

from __future__ import annotations

import math

from qto.quantities.result import QuantityResult
from qto.quantities.rounding import check_positive


def beam_formwork(width: float, height: float, length: float) -> QuantityResult:
    """Bottom plus two sides."""
    check_positive(width=width, height=height, length=length)
    area = width * length + 2.0 * height * length
    return QuantityResult(
        value=area,
        formula_text=f"A = {width:g} × {length:g} + 2 × {height:g} × {length:g} = {area:.2f} m²",
        inputs_snapshot={"width": width, "height": height, "length": length},
    )


def rect_column_formwork(width: float, depth: float, height: float) -> QuantityResult:
    """Four sides."""
    check_positive(width=width, depth=depth, height=height)
    area = 2.0 * (width + depth) * height
    return QuantityResult(
        value=area,
        formula_text=f"A = 2 × ({width:g} + {depth:g}) × {height:g} = {area:.2f} m²",
        inputs_snapshot={"width": width, "depth": depth, "height": height},
    )


def circular_column_formwork(diameter: float, height: float) -> QuantityResult:
    """Lateral cylinder surface."""
    check_positive(diameter=diameter, height=height)
    area = math.pi * diameter * height
    return QuantityResult(
        value=area,
        formula_text=f"A = π × {diameter:g} × {height:g} = {area:.2f} m²",
        inputs_snapshot={"diameter": diameter, "height": height},
    )


def slab_formwork(x_length: float, y_length: float) -> QuantityResult:
    """Soffit only."""
    check_positive(x_length=x_length, y_length=y_length)
    area = x_length * y_length
    return QuantityResult(
        value=area,
        formula_text=f"A = {x_length:g} × {y_length:g} (soffit) = {area:.2f} m²",
        inputs_snapshot={"xLength": x_length, "yLength": y_length},
    )


def footing_formwork(length: float, width: float, depth: float) -> QuantityResult:
    """Edge forms: perimeter × depth."""
    check_positive(length=length, width=width, depth=depth)
    area = 2.0 * (length + width) * depth
    return QuantityResult(
        value=area,
        formula_text=f"A = 2 × ({length:g} + {width:g}) × {depth:g} = {area:.2f} m²",
        inputs_snapshot={"length": length, "width": width, "depth": depth},
    )
