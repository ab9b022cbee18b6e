"""BOQAggregator — group TakeoffLines into classified pay-item lines.

Lines are partitioned by trade, each partition resolves a pay item per
line, and lines sharing a (normalised) pay item collapse into one BOQLine
that lists every contributing takeoff line id.

Severity policy:

* missing pay-item assignment on a structural line -> default item + warning
* missing ``dpwh:`` tag on a finishes/roofing/schedule line -> skipped + warning
* pay item absent from the catalog -> group dropped + error
"""

from __future__ import annotations

import logging
import re
from typing import Any, Callable, Iterable

from pydantic import BaseModel, Field

from qto.boq.catalog import CatalogProvider, LocalCatalog, normalize_pay_item_number, normalize_unit
from qto.config import DEFAULT_CONCRETE_ITEM, DEFAULT_FORMWORK_ITEM, DEFAULT_REBAR_ITEM
from qto.models.project import ElementTemplate
from qto.models.takeoff import BOQLine, TakeoffLine, Trade
from qto.quantities.rounding import round_half_away

logger = logging.getLogger(__name__)

STRUCTURAL_DEFAULTS: dict[str, str] = {
    Trade.CONCRETE.value: DEFAULT_CONCRETE_ITEM,
    Trade.REBAR.value: DEFAULT_REBAR_ITEM,
    Trade.FORMWORK.value: DEFAULT_FORMWORK_ITEM,
}

# Summary bucket per partition
_SUMMARY_KEYS = ("Concrete", "Rebar", "Formwork", "Finishes", "Roofing", "ScheduleItems")


def boq_line_id(item_number: str, suffix: str = "") -> str:
    """``boq_`` + item number with every non-alphanumeric replaced by ``_``."""
    return f"boq_{re.sub(r'[^a-zA-Z0-9]', '_', item_number)}{suffix}"


def _partition_key(trade: str) -> str:
    if trade in STRUCTURAL_DEFAULTS or trade in (Trade.FINISHES.value, Trade.ROOFING.value):
        return trade
    return "ScheduleItems"


def _templates_by_name(templates: Iterable[ElementTemplate]) -> dict[str, ElementTemplate]:
    """Index templates by name; the first template with a given name wins."""
    by_name: dict[str, ElementTemplate] = {}
    for template in templates:
        if not template.name:
            continue
        if template.name in by_name:
            logger.warning(
                "Templates %s and %s share the name %r; using %s for pay-item lookup",
                by_name[template.name].id, template.id, template.name, by_name[template.name].id,
            )
            continue
        by_name[template.name] = template
    return by_name


def _breakdown(lines: list[TakeoffLine], prefix: str, fmt: str, default: str | None) -> str:
    counts: dict[str, int] = {}
    for line in lines:
        value = line.tag_value(prefix)
        if value is None:
            if default is None:
                continue
            value = default
        counts[value] = counts.get(value, 0) + 1
    return ", ".join(fmt.format(count=c, name=n) for n, c in counts.items())


class BOQSummary(BaseModel):
    total_lines: int = 0
    total_quantity: float = 0.0
    trades: dict[str, float] = Field(default_factory=lambda: {k: 0.0 for k in _SUMMARY_KEYS})


class BOQResult(BaseModel):
    """Output of one aggregation run."""

    boq_lines: list[BOQLine] = Field(default_factory=list)
    warnings: list[str] = Field(default_factory=list)
    errors: list[str] = Field(default_factory=list)
    summary: BOQSummary = Field(default_factory=BOQSummary)

    def to_dict(self) -> dict[str, Any]:
        return self.model_dump(mode="json")


class BOQAggregator:
    """Stateless aggregator over a read-only pay-item catalog.

    Parameters
    ----------
    catalog:
        Pay-item lookup.  Defaults to the embedded seed catalog.
    """

    def __init__(self, catalog: CatalogProvider | None = None) -> None:
        self.catalog = catalog if catalog is not None else LocalCatalog()

    def aggregate(
        self,
        takeoff_lines: Iterable[TakeoffLine],
        catalog: CatalogProvider | None = None,
        templates: Iterable[ElementTemplate] | None = None,
    ) -> BOQResult:
        """Aggregate *takeoff_lines* into BOQ lines.

        Parameters
        ----------
        takeoff_lines:
            Structural, finishes, roofing and schedule lines, in any order.
        catalog:
            Overrides the aggregator's catalog for this call.
        templates:
            Element templates; used to find the pay item of structural
            lines that carry no ``dpwh:`` tag (matched by ``template:`` name).

        Returns
        -------
        BOQResult
        """
        lines = list(takeoff_lines)
        catalog = catalog if catalog is not None else self.catalog
        result = BOQResult()

        if not lines:
            result.warnings.append("No takeoff lines to process")
            return result

        by_name = _templates_by_name(templates or [])

        partitions: dict[str, list[TakeoffLine]] = {}
        for line in lines:
            partitions.setdefault(_partition_key(line.trade), []).append(line)

        for key in _SUMMARY_KEYS:
            part_lines = partitions.get(key)
            if not part_lines:
                continue
            if key in STRUCTURAL_DEFAULTS:
                groups = self._group_structural(key, part_lines, by_name, result.warnings)
                suffix = ""
            else:
                groups = self._group_tagged(key, part_lines, result.warnings)
                suffix = {"Finishes": "_finishes", "Roofing": "_roofing"}.get(key, "_schedule")

            for item_number, group in groups.items():
                boq_line = self._build_line(key, item_number, group, suffix, catalog, result.errors)
                if boq_line is None:
                    continue
                result.boq_lines.append(boq_line)
                result.summary.trades[key] += boq_line.quantity

        result.summary.total_lines = len(result.boq_lines)
        result.summary.total_quantity = sum(result.summary.trades.values())
        logger.info(
            "Generated %d BOQ lines from %d takeoff lines (%d warnings, %d errors)",
            len(result.boq_lines), len(lines), len(result.warnings), len(result.errors),
        )
        return result

    # -- Pay-item resolution ----------------------------------------------

    def _group_structural(
        self,
        trade: str,
        lines: list[TakeoffLine],
        templates: dict[str, ElementTemplate],
        warnings: list[str],
    ) -> dict[str, list[TakeoffLine]]:
        groups: dict[str, list[TakeoffLine]] = {}
        raw_numbers: dict[str, str] = {}
        for line in lines:
            item = line.tag_value("dpwh") or self._template_item(trade, line, templates)
            if not item:
                item = STRUCTURAL_DEFAULTS[trade]
                name = line.tag_value("template") or "Unknown"
                message = (
                    f'Template "{name}" has no DPWH {trade.lower()} item assigned, '
                    f"using default ({item})"
                )
                if message not in warnings:
                    logger.warning("%s", message)
                    warnings.append(message)
            key = normalize_pay_item_number(item)
            raw_numbers.setdefault(key, item)
            groups.setdefault(key, []).append(line)
        return {raw_numbers[k]: v for k, v in groups.items()}

    @staticmethod
    def _template_item(
        trade: str, line: TakeoffLine, templates: dict[str, ElementTemplate]
    ) -> str | None:
        template = templates.get(line.tag_value("template") or "")
        if template is None:
            return None
        item_for: dict[str, Callable[[ElementTemplate], str | None]] = {
            Trade.CONCRETE.value: lambda t: t.dpwh_item_number,
            Trade.FORMWORK.value: lambda t: t.dpwh_formwork_item,
            Trade.REBAR.value: lambda t: t.rebar_config.dpwh_rebar_item if t.rebar_config else None,
        }
        return item_for[trade](template)

    @staticmethod
    def _group_tagged(
        key: str, lines: list[TakeoffLine], warnings: list[str]
    ) -> dict[str, list[TakeoffLine]]:
        label = "Schedule item" if key == "ScheduleItems" else key
        groups: dict[str, list[TakeoffLine]] = {}
        raw_numbers: dict[str, str] = {}
        for line in lines:
            item = line.tag_value("dpwh")
            if not item:
                warnings.append(f"{label} line {line.id} missing DPWH item number")
                continue
            norm = normalize_pay_item_number(item)
            raw_numbers.setdefault(norm, item)
            groups.setdefault(norm, []).append(line)
        return {raw_numbers[k]: v for k, v in groups.items()}

    # -- Line assembly ----------------------------------------------------

    def _build_line(
        self,
        key: str,
        item_number: str,
        group: list[TakeoffLine],
        suffix: str,
        catalog: CatalogProvider,
        errors: list[str],
    ) -> BOQLine | None:
        catalog_item = catalog.get_item(item_number)
        if catalog_item is None:
            label = "Schedule item" if key == "ScheduleItems" else key
            errors.append(f"{label} DPWH item {item_number} not found in catalog")
            return None

        unit = normalize_unit(catalog_item.unit)
        digits = 3 if key == Trade.CONCRETE.value or unit == "Cubic Meter" else 2
        quantity = round_half_away(sum(line.quantity for line in group), digits)
        trade = group[0].trade if key == "ScheduleItems" else key

        return BOQLine(
            id=boq_line_id(catalog_item.item_number, suffix),
            dpwh_item_number_raw=catalog_item.item_number,
            description=catalog_item.description,
            unit=catalog_item.unit,
            quantity=quantity,
            source_takeoff_line_ids=[line.id for line in group],
            tags=self._tags(key, trade, catalog_item.item_number, group),
        )

    @staticmethod
    def _tags(key: str, trade: str, item_number: str, group: list[TakeoffLine]) -> list[str]:
        tags = [f"dpwh:{item_number}", f"trade:{trade}"]
        if key in STRUCTURAL_DEFAULTS:
            tags.append(f"elements:{_breakdown(group, 'type', '{count} {name}', 'unknown')}")
            consumed = ["type:"]
            if key == Trade.REBAR.value:
                tags.append(f"rebar-types:{_breakdown(group, 'rebar', '{count} {name}', 'main')}")
                consumed.append("rebar:")
        elif key == Trade.FINISHES.value:
            tags.append(f"spaces:{_breakdown(group, 'spaceName', '{count}× {name}', 'unknown')}")
            tags.append(f"categories:{_breakdown(group, 'category', '{count}× {name}', 'unknown')}")
            consumed = ["spaceName:", "category:"]
        elif key == Trade.ROOFING.value:
            tags.append(f"roofPlanes:{_breakdown(group, 'roofPlane', '{count}× {name}', None)}")
            consumed = ["roofPlane:"]
        else:
            tags.append(f"categories:{_breakdown(group, 'category', '{count}× {name}', None)}")
            consumed = ["category:"]
        consumed.append("dpwh:")

        for line in group:
            for tag in line.tags:
                if tag in tags or any(tag.startswith(p) for p in consumed):
                    continue
                tags.append(tag)
        return tags


def generate_boq(
    takeoff_lines: Iterable[TakeoffLine],
    catalog: CatalogProvider | None = None,
    templates: Iterable[ElementTemplate] | None = None,
) -> BOQResult:
    """Convenience wrapper around :meth:`BOQAggregator.aggregate`."""
    return BOQAggregator(catalog).aggregate(takeoff_lines, templates=templates)
