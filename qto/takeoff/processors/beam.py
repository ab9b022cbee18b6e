"""Beam processor: concrete, bottom+sides formwork, main bars and stirrups."""

from __future__ import annotations

from qto.geometry.engine import BeamGeometry
from qto.models.project import RebarConfig, RebarGroup
from qto.quantities import concrete, formwork, rebar
from qto.quantities.result import QuantityResult
from qto.takeoff.processors.base import ElementProcessor


class BeamProcessor(ElementProcessor):

    @property
    def element_type(self) -> str:
        return "beam"

    def concrete(self, geom: BeamGeometry, waste: float) -> QuantityResult:
        return concrete.beam_volume(geom.width, geom.height, geom.length, waste)

    def formwork(self, geom: BeamGeometry) -> QuantityResult:
        return formwork.beam_formwork(geom.width, geom.height, geom.length)

    def rebar_groups(self, config: RebarConfig) -> list[tuple[str, RebarGroup]]:
        groups = []
        if config.main_bars:
            groups.append(("main", config.main_bars))
        if config.secondary_bars:
            groups.append(("secondary", config.secondary_bars))
        stirrups = config.stirrups or config.ties
        if stirrups:
            groups.append(("stirrups", stirrups))
        return groups

    def rebar(self, kind: str, group: RebarGroup, geom: BeamGeometry, waste: float) -> QuantityResult:
        if kind == "stirrups":
            return rebar.transverse_weight(
                group,
                rebar.stirrup_length(geom.width, geom.height),
                geom.length,
                waste,
            )
        # Longitudinal bars run the beam length, spread across its width
        return rebar.longitudinal_weight(group, geom.length, geom.width, waste)
