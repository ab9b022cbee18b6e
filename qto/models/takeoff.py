"""Calculation-result records: TakeoffLine, BOQLine, CatalogItem, CalcRun.

These are value objects.  A BOQLine refers to its contributing takeoff
lines by id only; nothing holds object references back.
"""

from __future__ import annotations

import json
from datetime import datetime
from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field


class Trade(str, Enum):
    """Work-category partitions used as the primary aggregation key."""

    CONCRETE = "Concrete"
    REBAR = "Rebar"
    FORMWORK = "Formwork"
    FINISHES = "Finishes"
    ROOFING = "Roofing"
    EARTHWORK = "Earthwork"
    PLUMBING = "Plumbing"
    CARPENTRY = "Carpentry"
    HARDWARE = "Hardware"
    DOORS_WINDOWS = "Doors & Windows"
    GLASS_GLAZING = "Glass & Glazing"
    WATERPROOFING = "Waterproofing"
    CLADDING = "Cladding"
    OTHER = "Other"


class TakeoffLine(BaseModel):
    """One computed quantity for one element (or one schedule entry)."""

    model_config = ConfigDict(frozen=True)

    id: str
    source_element_id: str
    trade: str
    resource_key: str
    quantity: float
    unit: str
    formula_text: str = ""
    inputs_snapshot: dict[str, float] = Field(default_factory=dict)
    assumptions: list[str] = Field(default_factory=list)
    tags: list[str] = Field(default_factory=list)
    """Structured ``prefix:value`` tags, e.g. ``type:beam``, ``level:GF``."""

    calculated_at: datetime | None = None

    def tag_value(self, prefix: str) -> str | None:
        """Return the value of the first ``prefix:value`` tag, or None."""
        marker = f"{prefix}:"
        for tag in self.tags:
            if tag.startswith(marker):
                return tag[len(marker):]
        return None


class BOQLine(BaseModel):
    """One aggregated pay-item line of the Bill of Quantities."""

    model_config = ConfigDict(frozen=True)

    id: str
    dpwh_item_number_raw: str
    description: str
    unit: str
    quantity: float
    source_takeoff_line_ids: list[str] = Field(default_factory=list)
    tags: list[str] = Field(default_factory=list)

    def tag_value(self, prefix: str) -> str | None:
        marker = f"{prefix}:"
        for tag in self.tags:
            if tag.startswith(marker):
                return tag[len(marker):]
        return None


class CatalogItem(BaseModel):
    """A pay-item catalog entry."""

    item_number: str
    description: str
    unit: str
    trade: str = ""
    category: str = ""


class TakeoffSummary(BaseModel):
    """Running totals of a structural takeoff, accumulated line by line.

    Totals add the unrounded post-waste values, so they are independent of
    instance order and of per-line rounding.
    """

    total_concrete_volume: float = 0.0
    total_rebar_weight: float = 0.0
    total_formwork_area: float = 0.0
    element_count: int = 0
    beam_count: int = 0
    column_count: int = 0
    slab_count: int = 0
    foundation_count: int = 0

    def add_quantity(self, trade: str, value: float) -> None:
        if trade == Trade.CONCRETE:
            self.total_concrete_volume += value
        elif trade == Trade.REBAR:
            self.total_rebar_weight += value
        elif trade == Trade.FORMWORK:
            self.total_formwork_area += value

    def count_element(self, element_type: str) -> None:
        field = f"{element_type}_count"
        if field in type(self).model_fields:
            setattr(self, field, getattr(self, field) + 1)


class CalcRun(BaseModel):
    """Payload of one calculation run; persisting it is the caller's job."""

    run_id: str
    timestamp: datetime
    status: str = "completed"
    """'completed', 'completed_with_errors', or 'failed'."""

    summary: dict[str, Any] = Field(default_factory=dict)
    takeoff_lines: list[TakeoffLine] = Field(default_factory=list)
    boq_lines: list[BOQLine] = Field(default_factory=list)
    errors: list[str] = Field(default_factory=list)
    warnings: list[str] = Field(default_factory=list)

    def to_json(self) -> str:
        """Return structured JSON for persistence or audit."""
        return json.dumps(self.model_dump(mode="json"), indent=2)
