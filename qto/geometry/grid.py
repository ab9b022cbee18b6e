"""GridResolver — symbolic grid labels to numeric offsets.

A grid reference token is either a single label (``"A"``) or a hyphenated
span (``"A-C"``).  Both sides of a span resolve on the same axis; the span
length is order-independent.
"""

from __future__ import annotations

from typing import Iterable, Literal, NamedTuple

from qto.models.project import GridLine

Axis = Literal["x", "y"]


class Span(NamedTuple):
    """A resolved pair of offsets on one axis."""

    start: float
    end: float

    @property
    def length(self) -> float:
        return abs(self.end - self.start)


def is_span_token(token: str) -> bool:
    """Return True if *token* denotes a span (contains a hyphen)."""
    return "-" in token


class GridResolver:
    """Label-to-offset lookup for the X and Y axes, built once per run."""

    def __init__(self, grid_x: Iterable[GridLine], grid_y: Iterable[GridLine]) -> None:
        self._lines: dict[str, list[GridLine]] = {
            "x": sorted(grid_x, key=lambda g: g.offset),
            "y": sorted(grid_y, key=lambda g: g.offset),
        }
        self._offsets: dict[str, dict[str, float]] = {
            axis: {g.label.strip(): g.offset for g in lines}
            for axis, lines in self._lines.items()
        }

    def offset_of(self, label: str, axis: Axis) -> float | None:
        """Return the offset of *label* on *axis*, or None if unknown."""
        return self._offsets[axis].get(label.strip())

    def span_of(self, token: str, axis: Axis) -> Span | None:
        """Resolve a single label or an ``"X-Y"`` span on *axis*.

        A single label resolves to a zero-length span at that offset.
        Returns None if any side is unknown.
        """
        if is_span_token(token):
            start_label, _, end_label = token.partition("-")
            start = self.offset_of(start_label, axis)
            end = self.offset_of(end_label, axis)
            if start is None or end is None:
                return None
            return Span(start, end)
        offset = self.offset_of(token, axis)
        if offset is None:
            return None
        return Span(offset, offset)

    def labels(self, axis: Axis) -> list[str]:
        """All labels on *axis*, ordered by offset."""
        return [g.label for g in self._lines[axis]]

    def describe(self) -> str:
        """Diagnostic listing of every valid label on both axes."""
        return (
            f"Available X-grid: [{', '.join(self.labels('x'))}]. "
            f"Available Y-grid: [{', '.join(self.labels('y'))}]."
        )
