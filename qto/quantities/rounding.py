"""Waste and rounding policy shared by every calculator."""

from __future__ import annotations

from decimal import ROUND_HALF_UP, Decimal

from qto.config import FLOAT_GUARD_DIGITS


def round_half_away(value: float, digits: int) -> float:
    """Round *value* half away from zero to *digits* decimal places.

    Binary float noise (``0.3 * 0.5 * 6 * 1.05 == 0.94499999...``) is
    stripped first so that visually exact halves round up.
    """
    guarded = round(value, FLOAT_GUARD_DIGITS)
    quantum = Decimal(1).scaleb(-digits)
    return float(Decimal(str(guarded)).quantize(quantum, rounding=ROUND_HALF_UP))


def apply_waste(value: float, waste: float) -> float:
    """Return ``value * (1 + waste)``; *waste* must lie in [0, 1]."""
    check_waste(waste)
    return value * (1.0 + waste)


def check_waste(waste: float) -> None:
    if not 0.0 <= waste <= 1.0:
        raise ValueError(f"Waste fraction must be between 0 and 1, got {waste}")


def check_positive(**dimensions: float) -> None:
    """Raise ValueError naming the first non-positive dimension."""
    for name, value in dimensions.items():
        if value is None or value <= 0:
            raise ValueError(f"{name} must be positive, got {value}")


def pct(waste: float) -> str:
    """Format a waste fraction for formula text: 0.05 -> '5%'."""
    return f"{waste * 100:g}%"
