"""BOQClassifier — DPWH part and subcategory for a pay item.

The part order C < D < E < F < G < OTHER is a published contract: reports
group and sort BOQ lines by it.  Unknown part strings always sort last.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Iterable

from qto.boq.catalog import get_base_item_number


class Part(str, Enum):
    C = "PART C"
    D = "PART D"
    E = "PART E"
    F = "PART F"
    G = "PART G"
    OTHER = "OTHER"

    @property
    def rank(self) -> int:
        return _RANKS[self]

    @property
    def part_name(self) -> str:
        return _NAMES[self]

    @property
    def label(self) -> str:
        """Display label, e.g. ``"PART D: Concrete Works"``."""
        return f"{self.value}: {self.part_name}"


_RANKS = {Part.C: 0, Part.D: 1, Part.E: 2, Part.F: 3, Part.G: 4, Part.OTHER: 5}
_UNKNOWN_RANK = len(_RANKS)

_NAMES = {
    Part.C: "Earthwork",
    Part.D: "Concrete Works",
    Part.E: "Finishing Works",
    Part.F: "Metal & Electrical",
    Part.G: "Marine & Other",
    Part.OTHER: "Other Works",
}

# Trade (or schedule category) -> part, used when the item number gives no range
_TRADE_PARTS: dict[str, Part] = {
    "earthwork": Part.C,
    "concrete": Part.D,
    "rebar": Part.D,
    "formwork": Part.D,
    "finishes": Part.E,
    "roofing": Part.E,
    "plumbing": Part.E,
    "carpentry": Part.E,
    "hardware": Part.E,
    "doors & windows": Part.E,
    "glass & glazing": Part.E,
    "waterproofing": Part.E,
    "cladding": Part.E,
    "electrical": Part.F,
    "marine works": Part.G,
}

# (part, keywords, subcategory), first match wins
_SUBCATEGORY_RULES: list[tuple[Part, tuple[str, ...], str]] = [
    (Part.C, ("clearing", "grubbing"), "Clearing and Grubbing"),
    (Part.C, ("removal-trees", "tree"), "Removal of Trees"),
    (Part.C, ("removal-structures", "removal"), "Removal of Structures"),
    (Part.C, ("structure-excavation",), "Structure Excavation"),
    (Part.C, ("excavat",), "Excavation"),
    (Part.C, ("embankment", "fill"), "Embankment"),
    (Part.C, ("site-development", "site development"), "Site Development"),
    (Part.D, ("formwork",), "Formwork"),
    (Part.D, ("reinforc", "rebar"), "Reinforcing Steel"),
    (Part.D, ("precast",), "Precast Concrete"),
    (Part.D, ("concrete",), "Concrete Works"),
    (Part.E, ("termite",), "Termite Control"),
    (Part.E, ("waterproof",), "Waterproofing"),
    (Part.E, ("plumbing", "drainage", "sewer", "water", "pipe"), "Plumbing Works"),
    (Part.E, ("door", "window"), "Doors and Windows"),
    (Part.E, ("glass", "glazing"), "Glass and Glazing"),
    (Part.E, ("tile", "tiling"), "Tiling Works"),
    (Part.E, ("floor",), "Flooring"),
    (Part.E, ("plaster",), "Plastering Works"),
    (Part.E, ("ceiling",), "Ceiling Works"),
    (Part.E, ("paint", "coating", "varnish"), "Painting Works"),
    (Part.E, ("railing",), "Railings"),
    (Part.E, ("masonry", "chb", "block"), "Masonry Works"),
    (Part.E, ("roofing",), "Roofing Works"),
    (Part.E, ("insulation",), "Insulation"),
    (Part.F, ("electric", "wiring", "conduit"), "Electrical Works"),
    (Part.F, ("steel", "metal"), "Metal Works"),
]

_DEFAULT_SUBCATEGORY = {
    Part.C: "Earthwork",
    Part.D: "Concrete Works",
    Part.E: "Other Finishes",
    Part.F: "Metal & Electrical Works",
    Part.G: "Marine & Other Works",
    Part.OTHER: "Other Works",
}


@dataclass(frozen=True)
class Classification:
    part: Part
    subcategory: str

    @property
    def part_name(self) -> str:
        return self.part.part_name

    @property
    def label(self) -> str:
        return self.part.label


def part_for_item(item_number: str) -> Part | None:
    """Part from the DPWH numbering range, or None below 800 / unparseable."""
    base = get_base_item_number(item_number or "")
    if not base:
        return None
    prefix = int(base)
    if 800 <= prefix < 900:
        return Part.C
    if 900 <= prefix < 1000:
        return Part.D
    if 1000 <= prefix < 1100:
        return Part.E
    if 1100 <= prefix < 1500:
        return Part.F
    if prefix >= 1500:
        return Part.G
    return None


def part_for_trade(trade_or_category: str | None) -> Part:
    key = (trade_or_category or "").strip().lower()
    if not key:
        return Part.OTHER
    if key.startswith("earthworks"):
        return Part.C
    if key in _TRADE_PARTS:
        return _TRADE_PARTS[key]
    if key in ("doors", "windows", "glazing", "drainage", "termite-control", "insulation", "acoustical"):
        return Part.E
    return Part.OTHER


def classify(item_number: str, trade_or_category: str | None = None) -> Classification:
    """Classify a pay item.

    The numeric prefix decides the part when it falls in a DPWH range
    (800 and up); otherwise the trade or category does.
    """
    part = part_for_item(item_number) or part_for_trade(trade_or_category)
    return Classification(part=part, subcategory=_subcategory(part, trade_or_category))


def _subcategory(part: Part, trade_or_category: str | None) -> str:
    if not trade_or_category:
        return _DEFAULT_SUBCATEGORY[part]
    lowered = trade_or_category.lower()
    for rule_part, keywords, subcategory in _SUBCATEGORY_RULES:
        if rule_part is part and any(k in lowered for k in keywords):
            return subcategory
    return trade_or_category


def part_rank(part: Part | str) -> int:
    """Sort rank of a part, a part value, or a label like ``"PART D: ..."``."""
    if isinstance(part, Part):
        return part.rank
    prefix = str(part).split(":", 1)[0].strip().upper()
    try:
        return Part(prefix).rank
    except ValueError:
        return _UNKNOWN_RANK


def sort_parts(parts: Iterable[Part | str]) -> list[Part | str]:
    """Order parts C < D < E < F < G < OTHER < unknown (alphabetical)."""
    return sorted(
        parts,
        key=lambda p: (part_rank(p), p.value if isinstance(p, Part) else str(p)),
    )
