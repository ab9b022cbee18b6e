"""Calculator return type."""

from __future__ import annotations

from dataclasses import dataclass, field


@dataclass(frozen=True)
class QuantityResult:
    """A computed quantity before rounding.

    ``value`` already includes waste where the trade applies it.
    """

    value: float
    formula_text: str
    inputs_snapshot: dict[str, float] = field(default_factory=dict)
