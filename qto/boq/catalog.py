"""Pay-item catalog: normalisation helpers, CatalogProvider interface, local seed catalog.

Pay-item numbers arrive with inconsistent spacing and case
(``"900 (1) c"`` vs ``"900 (1)c"``).  Every lookup and every BOQ grouping
key goes through :func:`normalize_pay_item_number` first.
"""

from __future__ import annotations

import abc
import json
import logging
import re
from pathlib import Path
from typing import Any, Iterable, Mapping

from qto.boq.seed_data import SEED_CATALOG
from qto.models.takeoff import CatalogItem

logger = logging.getLogger(__name__)

_UNIT_ALIASES: dict[str, str] = {
    "cu.m": "Cubic Meter",
    "m3": "Cubic Meter",
    "m³": "Cubic Meter",
    "cubic meter": "Cubic Meter",
    "cubic meters": "Cubic Meter",
    "sq.m": "Square Meter",
    "m2": "Square Meter",
    "m²": "Square Meter",
    "square meter": "Square Meter",
    "square meters": "Square Meter",
    "lin.m": "Linear Meter",
    "l.m": "Linear Meter",
    "linear meter": "Linear Meter",
    "linear meters": "Linear Meter",
    "kg": "Kilogram",
    "kilogram": "Kilogram",
    "kilograms": "Kilogram",
    "l.s.": "Lump Sum",
    "ls": "Lump Sum",
    "lump sum": "Lump Sum",
    "each": "Each",
    "ea": "Each",
    "pc": "Each",
    "pcs": "Each",
    "piece": "Each",
}

_PAY_ITEM_RE = re.compile(r"^\d+\s*\(\d+\)([A-Z]\d*)?$")


def normalize_pay_item_number(pay_item: str) -> str:
    """Canonical form for matching: ``"900  (1)  c"`` -> ``"900 (1)C"``."""
    if not pay_item:
        return ""
    text = re.sub(r"\s+", " ", pay_item.strip())
    text = re.sub(r"\s+([a-z0-9])", r"\1", text, flags=re.IGNORECASE)
    return text.upper()


def pay_items_match(a: str, b: str) -> bool:
    return normalize_pay_item_number(a) == normalize_pay_item_number(b)


def normalize_unit(unit: str) -> str:
    """Canonical unit name; unknown units are returned trimmed."""
    if not unit:
        return ""
    return _UNIT_ALIASES.get(unit.strip().lower(), unit.strip())


def get_base_item_number(pay_item: str) -> str:
    """Leading numeric part: ``"900 (1) c"`` -> ``"900"``; ``""`` if none."""
    match = re.match(r"^(\d+)", pay_item.strip()) if pay_item else None
    return match.group(1) if match else ""


def get_trade_from_pay_item(pay_item: str) -> str:
    """Trade implied by the DPWH numbering ranges, else ``"Other"``."""
    base = get_base_item_number(pay_item)
    if not base:
        return "Other"
    number = int(base)
    ranges = (
        (800, 820, "Earthwork"),
        (900, 902, "Concrete"),
        (902, 903, "Rebar"),
        (903, 910, "Formwork"),
        (1000, 1100, "Finishes"),
        (1100, 1200, "Roofing"),
        (1200, 1300, "Plumbing"),
        (1300, 1400, "Electrical"),
        (1500, 1600, "Marine Works"),
    )
    for low, high, trade in ranges:
        if low <= number < high:
            return trade
    return "Other"


def is_valid_pay_item_format(pay_item: str) -> bool:
    """True for ``"900 (1)"``, ``"900 (1)c"``, ``"800 (3) a1"`` and the like."""
    return bool(_PAY_ITEM_RE.match(normalize_pay_item_number(pay_item)))


class CatalogProvider(abc.ABC):
    """Abstract read-only pay-item catalog."""

    @abc.abstractmethod
    def get_item(self, item_number: str) -> CatalogItem | None:
        """Return the catalog entry for *item_number*, or None if unknown."""

    @abc.abstractmethod
    def items(self) -> list[CatalogItem]:
        """All catalog entries."""

    def __contains__(self, item_number: str) -> bool:
        return self.get_item(item_number) is not None


class LocalCatalog(CatalogProvider):
    """Catalog held in memory, keyed by normalised item number.

    Defaults to the embedded :data:`SEED_CATALOG`.
    """

    def __init__(self, records: Mapping[str, Mapping[str, Any]] | Iterable[CatalogItem] | None = None) -> None:
        if records is None:
            records = SEED_CATALOG
        self._items: dict[str, CatalogItem] = {}
        if isinstance(records, Mapping):
            for number, data in records.items():
                self.add(CatalogItem(item_number=number, **data))
        else:
            for item in records:
                self.add(item)

    @classmethod
    def from_json(cls, path: str | Path) -> LocalCatalog:
        """Load ``{"items": [{"itemNumber", "description", "unit", "trade"}...]}``.

        Plain lists and snake_case keys are accepted too.
        """
        raw = json.loads(Path(path).read_text(encoding="utf-8"))
        entries = raw.get("items", []) if isinstance(raw, dict) else raw
        items = []
        for entry in entries:
            items.append(
                CatalogItem(
                    item_number=entry.get("itemNumber") or entry.get("item_number", ""),
                    description=entry.get("description", ""),
                    unit=entry.get("unit", ""),
                    trade=entry.get("trade", ""),
                    category=entry.get("category", ""),
                )
            )
        logger.info("Loaded %d catalog items from %s", len(items), path)
        return cls(items)

    def add(self, item: CatalogItem) -> None:
        key = normalize_pay_item_number(item.item_number)
        if not key:
            logger.warning("Skipping catalog entry without an item number: %r", item.description)
            return
        self._items[key] = item

    def get_item(self, item_number: str) -> CatalogItem | None:
        return self._items.get(normalize_pay_item_number(item_number))

    def items(self) -> list[CatalogItem]:
        return list(self._items.values())

    def __len__(self) -> int:
        return len(self._items)
