"""LevelResolver — level labels, elevation order, inter-level heights."""

from __future__ import annotations

from typing import Iterable

from qto.errors import InvalidHeightError
from qto.models.project import Level


class LevelResolver:
    """Levels indexed by label and sorted ascending by elevation."""

    def __init__(self, levels: Iterable[Level]) -> None:
        self._ordered = sorted(levels, key=lambda lv: lv.elevation)
        self._by_label = {lv.label: lv for lv in self._ordered}

    def by_label(self, label: str) -> Level | None:
        return self._by_label.get(label)

    def next_above(self, label: str) -> Level | None:
        """Return the level immediately above *label*, or None if it is topmost.

        Also None when *label* is unknown.
        """
        level = self._by_label.get(label)
        if level is None:
            return None
        for candidate in self._ordered:
            if candidate.elevation > level.elevation:
                return candidate
        return None

    def height_between(self, lower: Level | str, upper: Level | str) -> float:
        """Return ``elevation(upper) - elevation(lower)``.

        Raises InvalidHeightError unless *upper* is strictly above *lower*.
        """
        low = self._resolve(lower)
        high = self._resolve(upper)
        if high.elevation <= low.elevation:
            raise InvalidHeightError(
                f"Level {high.label} ({high.elevation:g}m) is not above "
                f"level {low.label} ({low.elevation:g}m)"
            )
        return high.elevation - low.elevation

    def labels(self) -> list[str]:
        """All level labels, lowest first."""
        return [lv.label for lv in self._ordered]

    def _resolve(self, level: Level | str) -> Level:
        if isinstance(level, Level):
            return level
        found = self._by_label.get(level)
        if found is None:
            raise InvalidHeightError(
                f"Level {level!r} not found. Available levels: [{', '.join(self.labels())}]"
            )
        return found
