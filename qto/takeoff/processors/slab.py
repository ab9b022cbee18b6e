"""Slab processor: two-way panel with main (X) and secondary (Y) bars."""

from __future__ import annotations

from qto.geometry.engine import SlabGeometry
from qto.models.project import RebarConfig, RebarGroup
from qto.quantities import concrete, formwork, rebar
from qto.quantities.result import QuantityResult
from qto.takeoff.processors.base import ElementProcessor


def panel_groups(config: RebarConfig) -> list[tuple[str, RebarGroup]]:
    groups = []
    if config.main_bars:
        groups.append(("main", config.main_bars))
    if config.secondary_bars:
        groups.append(("secondary", config.secondary_bars))
    return groups


def panel_rebar(
    kind: str,
    group: RebarGroup,
    x_length: float,
    y_length: float,
    waste: float,
    with_lap: bool = True,
) -> QuantityResult:
    """Main bars run along X across Y; secondary bars run along Y across X."""
    if kind == "main":
        return rebar.longitudinal_weight(group, x_length, y_length, waste, with_lap=with_lap)
    return rebar.longitudinal_weight(group, y_length, x_length, waste, with_lap=with_lap)


class SlabProcessor(ElementProcessor):

    @property
    def element_type(self) -> str:
        return "slab"

    def concrete(self, geom: SlabGeometry, waste: float) -> QuantityResult:
        return concrete.slab_volume(geom.thickness, geom.x_length, geom.y_length, waste)

    def formwork(self, geom: SlabGeometry) -> QuantityResult:
        return formwork.slab_formwork(geom.x_length, geom.y_length)

    def rebar_groups(self, config: RebarConfig) -> list[tuple[str, RebarGroup]]:
        return panel_groups(config)

    def rebar(self, kind: str, group: RebarGroup, geom: SlabGeometry, waste: float) -> QuantityResult:
        return panel_rebar(kind, group, geom.x_length, geom.y_length, waste)
