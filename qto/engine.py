"""TakeoffEngine — main entry point for a full quantity takeoff run.

Usage::

    from qto import TakeoffEngine

    engine = TakeoffEngine()
    run = engine.run(project_snapshot)
    run.takeoff_lines, run.boq_lines, run.errors, run.warnings
"""

from __future__ import annotations

import logging
import uuid
from datetime import datetime, timezone
from typing import Any

from qto.boq.aggregator import BOQAggregator
from qto.boq.catalog import CatalogProvider, LocalCatalog
from qto.boq.report import BOQReport
from qto.models.project import ProjectSnapshot
from qto.models.takeoff import CalcRun
from qto.takeoff.finishes import calculate_finishes
from qto.takeoff.orchestrator import calculate_structural_elements
from qto.takeoff.schedule import calculate_schedule_items

logger = logging.getLogger(__name__)


class TakeoffEngine:
    """Structural, finishes and schedule takeoff plus BOQ aggregation in one call.

    Parameters
    ----------
    catalog:
        Pay-item catalog.  Defaults to LocalCatalog (embedded seed data).
    """

    def __init__(self, catalog: CatalogProvider | None = None) -> None:
        self.catalog = catalog if catalog is not None else LocalCatalog()

    def run(
        self,
        project: ProjectSnapshot | dict[str, Any],
        *,
        catalog: CatalogProvider | None = None,
    ) -> CalcRun:
        """Calculate takeoff and BOQ for a project snapshot.

        Parameters
        ----------
        project:
            A ProjectSnapshot, or its dict form (camelCase or snake_case keys).
        catalog:
            Override the engine's catalog for this run.

        Returns
        -------
        CalcRun
            ``completed`` or ``completed_with_errors`` with the full payload,
            or ``failed`` with no lines if the calculation itself raised.
        """
        run_id = uuid.uuid4().hex
        timestamp = datetime.now(timezone.utc)

        try:
            if not isinstance(project, ProjectSnapshot):
                project = ProjectSnapshot.model_validate(project)
            structural = calculate_structural_elements(project, calculated_at=timestamp)
            finishes = calculate_finishes(project, calculated_at=timestamp)
            schedule = calculate_schedule_items(project.schedule_items, calculated_at=timestamp)
            takeoff_lines = structural.takeoff_lines + finishes.takeoff_lines + schedule.takeoff_lines
            boq = BOQAggregator(catalog if catalog is not None else self.catalog).aggregate(
                takeoff_lines, templates=project.element_templates
            )
        except Exception as exc:
            logger.error("Calculation run %s failed", run_id, exc_info=True)
            return CalcRun(
                run_id=run_id,
                timestamp=timestamp,
                status="failed",
                errors=[f"Calculation failed: {exc}"],
            )

        errors = structural.errors + finishes.errors + schedule.errors + boq.errors
        warnings = structural.warnings + boq.warnings
        run = CalcRun(
            run_id=run_id,
            timestamp=timestamp,
            status="completed_with_errors" if errors else "completed",
            summary={
                "takeoff": structural.summary.model_dump(),
                "finishes": finishes.summary.model_dump(),
                "schedule": {
                    "total_items": schedule.total_items,
                    "by_category": schedule.by_category,
                },
                "boq": boq.summary.model_dump(),
            },
            takeoff_lines=takeoff_lines,
            boq_lines=boq.boq_lines,
            errors=errors,
            warnings=warnings,
        )
        logger.info(
            "Run %s %s: %d takeoff lines, %d BOQ lines",
            run_id, run.status, len(run.takeoff_lines), len(run.boq_lines),
        )
        return run

    @staticmethod
    def report(run: CalcRun, project_name: str = "") -> BOQReport:
        """Wrap a run's BOQ lines in a BOQReport."""
        return BOQReport(
            project_name=project_name,
            boq_lines=run.boq_lines,
            warnings=run.warnings,
            errors=run.errors,
            generated_at=run.timestamp,
        )
