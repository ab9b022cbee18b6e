"""Direct-quantity takeoff lines from project schedule items.

Schedule items (doors, plumbing fixtures, earthworks ...) carry their
quantity as entered; no geometry is involved.  They share the TakeoffLine
contract with structural lines so the BOQ aggregator treats both alike.
"""

from __future__ import annotations

import logging
from datetime import datetime, timezone
from typing import Iterable

from pydantic import BaseModel, Field

from qto.models.project import ScheduleItem
from qto.models.takeoff import TakeoffLine, Trade

logger = logging.getLogger(__name__)

CATEGORY_TRADES: dict[str, Trade] = {
    "termite-control": Trade.OTHER,
    "drainage": Trade.PLUMBING,
    "plumbing": Trade.PLUMBING,
    "carpentry": Trade.CARPENTRY,
    "hardware": Trade.HARDWARE,
    "doors": Trade.DOORS_WINDOWS,
    "windows": Trade.DOORS_WINDOWS,
    "glazing": Trade.GLASS_GLAZING,
    "waterproofing": Trade.WATERPROOFING,
    "cladding": Trade.CLADDING,
    "insulation": Trade.OTHER,
    "acoustical": Trade.OTHER,
    "other": Trade.OTHER,
}


def trade_for_category(category: str) -> Trade:
    """Map a schedule category to its trade; ``earthworks-*`` is Earthwork."""
    if category.startswith("earthworks-"):
        return Trade.EARTHWORK
    return CATEGORY_TRADES.get(category, Trade.OTHER)


class ScheduleResult(BaseModel):
    takeoff_lines: list[TakeoffLine] = Field(default_factory=list)
    errors: list[str] = Field(default_factory=list)
    total_items: int = 0
    by_category: dict[str, int] = Field(default_factory=dict)


def calculate_schedule_items(
    items: Iterable[ScheduleItem],
    calculated_at: datetime | None = None,
) -> ScheduleResult:
    """Turn schedule items into TakeoffLines with id ``tof_{itemId}_schedule``."""
    stamp = calculated_at or datetime.now(timezone.utc)
    result = ScheduleResult()

    for item in items:
        result.total_items += 1
        if item.qty < 0:
            result.errors.append(f"Schedule item {item.id}: quantity {item.qty:g} is negative")
            continue

        assumptions = [f"Basis: {item.basis_note}", f"Category: {item.category}"]
        if item.description_override:
            assumptions.append(f"Description: {item.description_override}")

        tags = [f"category:{item.category}"]
        if item.dpwh_item_number_raw:
            tags.append(f"dpwh:{item.dpwh_item_number_raw}")
        tags.extend(t for t in item.tags if t not in tags)

        result.takeoff_lines.append(
            TakeoffLine(
                id=f"tof_{item.id}_schedule",
                source_element_id=item.id,
                trade=trade_for_category(item.category).value,
                resource_key=f"schedule-{item.category}-{item.id}",
                quantity=item.qty,
                unit=item.unit,
                formula_text=f"Direct quantity from schedule: {item.qty:g} {item.unit}",
                inputs_snapshot={"qty": item.qty},
                assumptions=assumptions,
                tags=tags,
                calculated_at=stamp,
            )
        )
        result.by_category[item.category] = result.by_category.get(item.category, 0) + 1

    logger.info("Schedule takeoff: %d lines from %d items", len(result.takeoff_lines), result.total_items)
    return result
