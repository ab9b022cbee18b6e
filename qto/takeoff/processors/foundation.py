"""Foundation processor: mat panels and isolated footings."""

from __future__ import annotations

from qto.geometry.engine import FoundationGeometry
from qto.models.project import RebarConfig, RebarGroup
from qto.quantities import concrete, formwork
from qto.quantities.result import QuantityResult
from qto.takeoff.processors.base import ElementProcessor
from qto.takeoff.processors.slab import panel_groups, panel_rebar


class FoundationProcessor(ElementProcessor):

    @property
    def element_type(self) -> str:
        return "foundation"

    def extra_tags(self, geom: FoundationGeometry) -> list[str]:
        return [f"foundation:{geom.mode}"]

    def concrete(self, geom: FoundationGeometry, waste: float) -> QuantityResult:
        if geom.is_mat:
            return concrete.slab_volume(geom.depth, geom.length, geom.width, waste)
        return concrete.footing_volume(geom.length, geom.width, geom.depth, waste)

    def formwork(self, geom: FoundationGeometry) -> QuantityResult:
        # Edge forms only, for both mats and footings
        return formwork.footing_formwork(geom.length, geom.width, geom.depth)

    def rebar_groups(self, config: RebarConfig) -> list[tuple[str, RebarGroup]]:
        return panel_groups(config)

    def rebar(self, kind: str, group: RebarGroup, geom: FoundationGeometry, waste: float) -> QuantityResult:
        # Footing bars fit inside the pad; only mat bars need lap splices
        return panel_rebar(kind, group, geom.length, geom.width, waste, with_lap=geom.is_mat)
