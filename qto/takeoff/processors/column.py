"""Column processor: rectangular or circular section between two levels."""

from __future__ import annotations

import math

from qto.geometry.engine import ColumnGeometry
from qto.models.project import RebarConfig, RebarGroup
from qto.quantities import concrete, formwork, rebar
from qto.quantities.result import QuantityResult
from qto.takeoff.processors.base import ElementProcessor


class ColumnProcessor(ElementProcessor):

    @property
    def element_type(self) -> str:
        return "column"

    def extra_tags(self, geom: ColumnGeometry) -> list[str]:
        return [f"shape:{geom.shape}"]

    def concrete(self, geom: ColumnGeometry, waste: float) -> QuantityResult:
        if geom.is_circular:
            return concrete.circular_column_volume(geom.diameter, geom.height, waste)
        return concrete.rect_column_volume(geom.width, geom.depth, geom.height, waste)

    def formwork(self, geom: ColumnGeometry) -> QuantityResult:
        if geom.is_circular:
            return formwork.circular_column_formwork(geom.diameter, geom.height)
        return formwork.rect_column_formwork(geom.width, geom.depth, geom.height)

    def rebar_groups(self, config: RebarConfig) -> list[tuple[str, RebarGroup]]:
        groups = []
        if config.main_bars:
            groups.append(("main", config.main_bars))
        ties = config.ties or config.stirrups
        if ties:
            groups.append(("ties", ties))
        return groups

    def rebar(self, kind: str, group: RebarGroup, geom: ColumnGeometry, waste: float) -> QuantityResult:
        if kind == "ties":
            if geom.is_circular:
                tie_length = rebar.hoop_length(geom.diameter)
            else:
                tie_length = rebar.stirrup_length(geom.width, geom.depth)
            return rebar.transverse_weight(group, tie_length, geom.height, waste, noun="ties")

        if geom.is_circular:
            perimeter = math.pi * geom.diameter
        else:
            perimeter = 2.0 * (geom.width + geom.depth)
        return rebar.longitudinal_weight(group, geom.height, perimeter, waste)
