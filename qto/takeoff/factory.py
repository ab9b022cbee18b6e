"""TakeoffLineFactory — wraps calculator results into TakeoffLine records.

Line ids are deterministic (``tof_{instanceId}_{kind}``) so re-running a
takeoff over the same snapshot yields the same ids.
"""

from __future__ import annotations

from datetime import datetime, timezone

from qto.config import CONCRETE_RESOURCE_KEY
from qto.models.project import ElementInstance, ElementTemplate, RebarGroup
from qto.models.takeoff import TakeoffLine, Trade
from qto.quantities.rebar import rebar_grade, rebar_pay_item
from qto.quantities.result import QuantityResult
from qto.quantities.rounding import pct, round_half_away
from qto.settings import ProjectSettings

REBAR_KINDS = ("main", "secondary", "stirrups", "ties")


def line_id(instance_id: str, kind: str) -> str:
    return f"tof_{instance_id}_{kind}"


class TakeoffLineFactory:
    """Builds one TakeoffLine per quantity kind, rounded per settings.

    Parameters
    ----------
    settings:
        Waste fractions (reported in assumptions) and rounding precision.
    calculated_at:
        Timestamp stamped on every line of one run.
    """

    def __init__(
        self,
        settings: ProjectSettings | None = None,
        calculated_at: datetime | None = None,
    ) -> None:
        self.settings = settings or ProjectSettings()
        self.calculated_at = calculated_at or datetime.now(timezone.utc)

    def base_tags(
        self,
        template: ElementTemplate,
        instance: ElementInstance,
        extra: list[str] | None = None,
    ) -> list[str]:
        """``type:``, ``level:``, ``template:`` plus instance tags."""
        tags = [
            f"type:{template.type}",
            f"level:{instance.placement.level_id}",
            f"template:{template.name or template.id}",
        ]
        if instance.placement.grid_ref:
            tags.append(f"grid:{'/'.join(instance.placement.grid_ref)}")
        tags.extend(extra or [])
        for tag in instance.tags:
            if tag not in tags:
                tags.append(tag)
        return tags

    # -- Per-trade builders -----------------------------------------------

    def concrete(
        self,
        template: ElementTemplate,
        instance: ElementInstance,
        result: QuantityResult,
        tags: list[str],
        assumptions: list[str],
    ) -> TakeoffLine:
        item = template.dpwh_item_number
        line_tags = list(tags)
        line_assumptions = [*assumptions, f"Waste: {pct(self.settings.waste.concrete)}"]
        if item:
            line_tags.append(f"dpwh:{item}")
            line_assumptions.append(f"DPWH Item: {item}")
        return self._line(
            instance,
            "concrete",
            Trade.CONCRETE,
            item or CONCRETE_RESOURCE_KEY,
            round_half_away(result.value, self.settings.rounding.concrete),
            "m³",
            result,
            line_tags,
            line_assumptions,
        )

    def formwork(
        self,
        template: ElementTemplate,
        instance: ElementInstance,
        result: QuantityResult,
        tags: list[str],
        assumptions: list[str],
    ) -> TakeoffLine:
        item = template.dpwh_formwork_item
        line_tags = list(tags)
        line_assumptions = [*assumptions, "Formwork: no waste applied (reusable)"]
        if item:
            line_tags.append(f"dpwh:{item}")
            line_assumptions.append(f"DPWH Item: {item}")
        return self._line(
            instance,
            "formwork",
            Trade.FORMWORK,
            item or f"formwork-{template.type}",
            round_half_away(result.value, self.settings.rounding.formwork),
            "m²",
            result,
            line_tags,
            line_assumptions,
        )

    def rebar(
        self,
        template: ElementTemplate,
        instance: ElementInstance,
        kind: str,
        group: RebarGroup,
        result: QuantityResult,
        tags: list[str],
        assumptions: list[str],
    ) -> TakeoffLine:
        """*kind* is one of ``main``, ``secondary``, ``stirrups``, ``ties``."""
        if kind not in REBAR_KINDS:
            raise ValueError(f"Unknown rebar kind {kind!r}")
        config = template.rebar_config
        grade = rebar_grade(group.diameter)
        item = (config.dpwh_rebar_item if config else None) or rebar_pay_item(group.diameter)

        line_tags = [
            *tags,
            f"rebar:{kind}",
            f"diameter:{group.diameter:g}mm",
            f"dpwh:{item}",
        ]
        line_assumptions = [
            *assumptions,
            f"Grade {grade} deformed bars, {group.diameter:g}mm",
            f"Waste: {pct(self.settings.waste.rebar)}",
            f"DPWH Item: {item}",
        ]
        if group.count is None and group.spacing is not None:
            line_assumptions.append(f"Spacing: {group.spacing:g}m")

        return self._line(
            instance,
            f"rebar_{kind}",
            Trade.REBAR,
            f"rebar-{group.diameter:g}mm-grade{grade}-{kind}",
            round_half_away(result.value, self.settings.rounding.rebar),
            "kg",
            result,
            line_tags,
            line_assumptions,
        )

    def _line(
        self,
        instance: ElementInstance,
        kind: str,
        trade: Trade,
        resource_key: str,
        quantity: float,
        unit: str,
        result: QuantityResult,
        tags: list[str],
        assumptions: list[str],
    ) -> TakeoffLine:
        return TakeoffLine(
            id=line_id(instance.id, kind),
            source_element_id=instance.id,
            trade=trade.value,
            resource_key=resource_key,
            quantity=quantity,
            unit=unit,
            formula_text=result.formula_text,
            inputs_snapshot=dict(result.inputs_snapshot),
            assumptions=assumptions,
            tags=tags,
            calculated_at=self.calculated_at,
        )
