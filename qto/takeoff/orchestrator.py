"""StructuralTakeoff — run every element instance through its processor.

Usage::

    from qto.takeoff import StructuralTakeoff

    result = StructuralTakeoff().run(
        instances, templates, levels, grid_x, grid_y, settings,
    )
    result.takeoff_lines, result.errors, result.summary

Errors never abort the batch: each instance is processed inside its own
error boundary and failures are accumulated as strings.
"""

from __future__ import annotations

import logging
from datetime import datetime, timezone
from typing import Any, Iterable

from pydantic import BaseModel, Field

from qto.errors import ElementSkipped, GeometryError
from qto.geometry.engine import ElementGeometryEngine
from qto.geometry.grid import GridResolver
from qto.geometry.levels import LevelResolver
from qto.models.project import (
    ElementInstance,
    ElementTemplate,
    GridLine,
    Level,
    ProjectSnapshot,
)
from qto.models.takeoff import TakeoffLine, TakeoffSummary
from qto.settings import ProjectSettings
from qto.takeoff.factory import TakeoffLineFactory
from qto.takeoff.processors import ElementProcessor, get_processor

logger = logging.getLogger(__name__)


class TakeoffResult(BaseModel):
    """Output of one structural takeoff run."""

    takeoff_lines: list[TakeoffLine] = Field(default_factory=list)
    errors: list[str] = Field(default_factory=list)
    warnings: list[str] = Field(default_factory=list)
    summary: TakeoffSummary = Field(default_factory=TakeoffSummary)

    def to_dict(self) -> dict[str, Any]:
        return self.model_dump(mode="json")


class StructuralTakeoff:
    """Stateless orchestrator; every call to :meth:`run` is independent."""

    def run(
        self,
        instances: Iterable[ElementInstance],
        templates: Iterable[ElementTemplate],
        levels: Iterable[Level],
        grid_x: Iterable[GridLine],
        grid_y: Iterable[GridLine],
        settings: ProjectSettings | None = None,
        calculated_at: datetime | None = None,
    ) -> TakeoffResult:
        """Compute takeoff lines for every instance.

        Parameters
        ----------
        instances:
            Placed elements, processed in the given order.
        templates:
            Templates referenced by ``instance.template_id``.
        levels, grid_x, grid_y:
            Project levels and structural grid.
        settings:
            Waste and rounding; defaults when omitted.
        calculated_at:
            Timestamp for every produced line; now (UTC) when omitted.

        Returns
        -------
        TakeoffResult
            Lines, accumulated errors and warnings, running summary.
        """
        settings = settings or ProjectSettings()
        result = TakeoffResult()

        if settings.waste.formwork:
            result.warnings.append(
                f"Formwork waste of {settings.waste.formwork:g} ignored: "
                "formwork quantities are never wasted"
            )

        template_map = {t.id: t for t in templates}
        level_resolver = LevelResolver(levels)
        geometry = ElementGeometryEngine(GridResolver(grid_x, grid_y), level_resolver)
        factory = TakeoffLineFactory(settings, calculated_at or datetime.now(timezone.utc))
        processors: dict[str, ElementProcessor] = {}

        for instance in instances:
            try:
                self._process_instance(
                    instance, template_map, level_resolver, geometry, factory, processors, result
                )
            except ElementSkipped as exc:
                logger.warning("Skipped %s: %s", instance.id, exc)
                result.warnings.append(str(exc))
            except GeometryError as exc:
                result.errors.append(str(exc))
            except Exception as exc:
                logger.debug("Instance %s failed", instance.id, exc_info=True)
                result.errors.append(f"Instance {instance.id} processing error: {exc}")

        logger.info(
            "Structural takeoff: %d lines, %d errors, %d warnings",
            len(result.takeoff_lines), len(result.errors), len(result.warnings),
        )
        return result

    def _process_instance(
        self,
        instance: ElementInstance,
        template_map: dict[str, ElementTemplate],
        levels: LevelResolver,
        geometry: ElementGeometryEngine,
        factory: TakeoffLineFactory,
        processors: dict[str, ElementProcessor],
        result: TakeoffResult,
    ) -> None:
        template = template_map.get(instance.template_id)
        if template is None:
            result.errors.append(
                f"Template not found for instance {instance.id}: {instance.template_id}"
            )
            return

        if levels.by_label(instance.placement.level_id) is None:
            result.errors.append(
                f"Level not found for instance {instance.id}: {instance.placement.level_id}. "
                f"Available levels: [{', '.join(levels.labels())}]"
            )
            return

        processor = processors.get(template.type)
        if processor is None:
            processor = get_processor(template.type, geometry, factory)
            if processor is None:
                result.errors.append(
                    f"Unknown element type {template.type!r} for instance {instance.id} "
                    f"(Template: {template.name or template.id})"
                )
                return
            processors[template.type] = processor

        logger.debug("Dispatching %s %s", template.type, instance.id)
        output = processor.process(template, instance)

        result.summary.count_element(template.type)
        result.summary.element_count += 1
        for trade, value in output.totals.items():
            result.summary.add_quantity(trade, value)
        result.takeoff_lines.extend(output.lines)
        result.errors.extend(output.errors)


def calculate_structural_elements(
    project: ProjectSnapshot,
    calculated_at: datetime | None = None,
) -> TakeoffResult:
    """Run a structural takeoff over a whole project snapshot."""
    return StructuralTakeoff().run(
        project.element_instances,
        project.element_templates,
        project.levels,
        project.grid_x,
        project.grid_y,
        project.settings,
        calculated_at=calculated_at,
    )
