"""Abstract ElementProcessor interface.

A processor turns one placed element into TakeoffLines: it resolves the
geometry once, then attempts concrete, formwork and each rebar group
independently.  A failure in one quantity kind is recorded and the
others still run.
"""

from __future__ import annotations

import abc
import logging
from dataclasses import dataclass, field
from typing import Callable

from qto.geometry.engine import ElementGeometryEngine, Geometry
from qto.models.project import ElementInstance, ElementTemplate, RebarConfig, RebarGroup
from qto.models.takeoff import TakeoffLine
from qto.quantities.result import QuantityResult
from qto.takeoff.factory import TakeoffLineFactory

logger = logging.getLogger(__name__)


@dataclass
class ProcessorOutput:
    """Lines, per-kind errors and unrounded per-trade totals for one element."""

    lines: list[TakeoffLine] = field(default_factory=list)
    errors: list[str] = field(default_factory=list)
    totals: dict[str, float] = field(default_factory=dict)

    def add(self, line: TakeoffLine, unrounded: float) -> None:
        self.lines.append(line)
        self.totals[line.trade] = self.totals.get(line.trade, 0.0) + unrounded


class ElementProcessor(abc.ABC):
    """Base class for all per-type processors."""

    def __init__(self, geometry: ElementGeometryEngine, factory: TakeoffLineFactory) -> None:
        self.geometry = geometry
        self.factory = factory

    @property
    @abc.abstractmethod
    def element_type(self) -> str:
        """The template type this processor handles."""

    @abc.abstractmethod
    def concrete(self, geom: Geometry, waste: float) -> QuantityResult:
        """Concrete volume including waste."""

    @abc.abstractmethod
    def formwork(self, geom: Geometry) -> QuantityResult:
        """Formwork contact area, never wasted."""

    @abc.abstractmethod
    def rebar_groups(self, config: RebarConfig) -> list[tuple[str, RebarGroup]]:
        """``(kind, group)`` pairs to compute, in output order."""

    @abc.abstractmethod
    def rebar(self, kind: str, group: RebarGroup, geom: Geometry, waste: float) -> QuantityResult:
        """Weight of one bar group including waste."""

    def extra_tags(self, geom: Geometry) -> list[str]:
        """Type-specific tags.  Override to add e.g. ``shape:``."""
        return []

    def process(self, template: ElementTemplate, instance: ElementInstance) -> ProcessorOutput:
        """Produce all lines for one instance.

        Geometry failures propagate (the instance yields nothing); per-kind
        calculation failures are collected in ``output.errors``.
        """
        geom = self.geometry.resolve(template, instance)
        tags = self.factory.base_tags(template, instance, self.extra_tags(geom))
        assumptions = list(geom.assumptions)
        settings = self.factory.settings
        output = ProcessorOutput()

        self._attempt(
            output, instance, "concrete",
            lambda: self._pair(
                self.concrete(geom, settings.waste.concrete),
                lambda r: self.factory.concrete(template, instance, r, tags, assumptions),
            ),
        )
        self._attempt(
            output, instance, "formwork",
            lambda: self._pair(
                self.formwork(geom),
                lambda r: self.factory.formwork(template, instance, r, tags, assumptions),
            ),
        )

        if template.rebar_config is not None:
            for kind, group in self.rebar_groups(template.rebar_config):
                self._attempt(
                    output, instance, f"rebar_{kind}",
                    lambda kind=kind, group=group: self._pair(
                        self.rebar(kind, group, geom, settings.waste.rebar),
                        lambda r: self.factory.rebar(
                            template, instance, kind, group, r, tags, assumptions
                        ),
                    ),
                )

        logger.debug(
            "%s %s: %d lines, %d errors",
            self.element_type, instance.id, len(output.lines), len(output.errors),
        )
        return output

    @staticmethod
    def _pair(
        result: QuantityResult, build: Callable[[QuantityResult], TakeoffLine]
    ) -> tuple[TakeoffLine, float]:
        return build(result), result.value

    def _attempt(
        self,
        output: ProcessorOutput,
        instance: ElementInstance,
        kind: str,
        compute: Callable[[], tuple[TakeoffLine, float]],
    ) -> None:
        try:
            line, unrounded = compute()
        except Exception as exc:
            message = (
                f"{self.element_type.capitalize()} {instance.id} "
                f"{kind} calculation error: {exc}"
            )
            logger.warning("%s", message)
            output.errors.append(message)
            return
        output.add(line, unrounded)
