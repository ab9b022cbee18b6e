"""Finishing-works takeoff: floor, ceiling and wall finish areas per space.

Each FinishAssignment applies one FinishType to one Space and yields one
TakeoffLine with id ``tof_{assignmentId}_{category}``.  Space outlines are
either a grid rectangle (two X labels, two Y labels) or a polygon in
metres.  Wall finishes use the storey height unless the finish type fixes
one or the assignment overrides it, and deduct qualifying openings.

Lines are tagged ``spaceName:``, ``category:`` and ``dpwh:`` so the BOQ
aggregator can group them into the Finishes partition.
"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any, Iterable

from pydantic import BaseModel, Field

from qto.config import DEFAULT_STOREY_HEIGHT_M
from qto.errors import GeometryError
from qto.geometry.grid import GridResolver
from qto.geometry.levels import LevelResolver
from qto.models.project import (
    WALL_CATEGORIES,
    BoundaryData,
    FinishAssignment,
    FinishType,
    Opening,
    ProjectSnapshot,
    Space,
)
from qto.models.takeoff import TakeoffLine, Trade
from qto.quantities.rounding import apply_waste, pct, round_half_away
from qto.takeoff.factory import line_id

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SpaceGeometry:
    area: float
    perimeter: float


def grid_rect_geometry(data: BoundaryData, grid: GridResolver) -> SpaceGeometry:
    """Rectangle between two X grid lines and two Y grid lines."""
    x_labels = data.grid_x or []
    y_labels = data.grid_y or []
    if len(x_labels) != 2 or len(y_labels) != 2:
        raise GeometryError(
            f"A grid rectangle needs two X and two Y labels, got "
            f"X[{', '.join(x_labels)}], Y[{', '.join(y_labels)}]"
        )
    x_offsets = [grid.offset_of(label, "x") for label in x_labels]
    y_offsets = [grid.offset_of(label, "y") for label in y_labels]
    if None in x_offsets or None in y_offsets:
        raise GeometryError(
            f"Grid lines not found. Requested: X[{', '.join(x_labels)}], "
            f"Y[{', '.join(y_labels)}]. {grid.describe()}"
        )
    width = abs(x_offsets[1] - x_offsets[0])
    length = abs(y_offsets[1] - y_offsets[0])
    return SpaceGeometry(
        area=round_half_away(width * length, 3),
        perimeter=round_half_away(2.0 * (width + length), 3),
    )


def polygon_geometry(points: list[tuple[float, float]]) -> SpaceGeometry:
    """Shoelace area and edge-length perimeter of a closed polygon."""
    if len(points) < 3:
        raise GeometryError("Polygon must have at least 3 points")
    area = 0.0
    perimeter = 0.0
    for (x1, y1), (x2, y2) in zip(points, points[1:] + points[:1]):
        area += x1 * y2 - x2 * y1
        perimeter += math.hypot(x2 - x1, y2 - y1)
    return SpaceGeometry(
        area=round_half_away(abs(area) / 2.0, 3),
        perimeter=round_half_away(perimeter, 3),
    )


def space_geometry(space: Space, grid: GridResolver) -> SpaceGeometry:
    kind = space.boundary.type
    if kind == "gridRect":
        return grid_rect_geometry(space.boundary.data, grid)
    if kind == "polygon":
        return polygon_geometry(space.boundary.data.points or [])
    raise GeometryError(f"Unknown boundary type {kind!r} for space {space.id}")


class FinishesSummary(BaseModel):
    total_floor_area: float = 0.0
    total_wall_area: float = 0.0
    total_ceiling_area: float = 0.0
    line_count: int = 0


class FinishesResult(BaseModel):
    """Output of one finishes takeoff run."""

    takeoff_lines: list[TakeoffLine] = Field(default_factory=list)
    errors: list[str] = Field(default_factory=list)
    summary: FinishesSummary = Field(default_factory=FinishesSummary)

    def to_dict(self) -> dict[str, Any]:
        return self.model_dump(mode="json")


class FinishesTakeoff:
    """Finish lines for every assignment against one project's grid and levels."""

    def __init__(self, grid: GridResolver, levels: LevelResolver) -> None:
        self.grid = grid
        self.levels = levels

    def run(
        self,
        spaces: Iterable[Space],
        openings: Iterable[Opening],
        finish_types: Iterable[FinishType],
        assignments: Iterable[FinishAssignment],
        calculated_at: datetime | None = None,
    ) -> FinishesResult:
        """Compute one TakeoffLine per assignment.

        A missing space or finish type, an unknown category or an
        unresolvable outline is recorded as an error for that assignment;
        the rest of the batch still runs.
        """
        stamp = calculated_at or datetime.now(timezone.utc)
        space_map = {s.id: s for s in spaces}
        type_map = {f.id: f for f in finish_types}
        opening_list = list(openings)
        result = FinishesResult()
        totals = {"floor": 0.0, "ceiling": 0.0, "wall": 0.0}

        for assignment in assignments:
            space = space_map.get(assignment.space_id)
            if space is None:
                result.errors.append(
                    f"Space {assignment.space_id} not found for assignment {assignment.id}"
                )
                continue
            finish = type_map.get(assignment.finish_type_id)
            if finish is None:
                result.errors.append(
                    f"Finish type {assignment.finish_type_id} not found for assignment {assignment.id}"
                )
                continue

            try:
                line = self._line_for(space, finish, assignment, opening_list, stamp)
            except Exception as exc:
                logger.debug("Assignment %s failed", assignment.id, exc_info=True)
                result.errors.append(f"Error processing assignment {assignment.id}: {exc}")
                continue

            bucket = "wall" if finish.category in WALL_CATEGORIES else finish.category
            totals[bucket] += line.quantity
            result.takeoff_lines.append(line)

        result.summary = FinishesSummary(
            total_floor_area=round_half_away(totals["floor"], 2),
            total_wall_area=round_half_away(totals["wall"], 2),
            total_ceiling_area=round_half_away(totals["ceiling"], 2),
            line_count=len(result.takeoff_lines),
        )
        logger.info(
            "Finishes takeoff: %d lines, %d errors",
            len(result.takeoff_lines), len(result.errors),
        )
        return result

    def _line_for(
        self,
        space: Space,
        finish: FinishType,
        assignment: FinishAssignment,
        openings: list[Opening],
        stamp: datetime,
    ) -> TakeoffLine:
        category = finish.category
        if category != "floor" and category != "ceiling" and category not in WALL_CATEGORIES:
            raise ValueError(f"Unknown finish category {category!r} for finish type {finish.id}")

        geom = space_geometry(space, self.grid)
        overrides = assignment.overrides
        waste = overrides.waste if overrides and overrides.waste is not None else finish.waste

        if category == "floor":
            raw, formula, inputs, assumptions = self.floor(geom)
        elif category == "ceiling":
            raw, formula, inputs, assumptions = self.ceiling(geom, space)
        else:
            raw, formula, inputs, assumptions = self.wall(geom, space, finish, assignment, openings)

        quantity = round_half_away(apply_waste(raw, waste) if raw else 0.0, finish.rounding)
        if waste and raw:
            formula += f" × (1 + {pct(waste)} waste)"
            assumptions.append(f"Waste: {pct(waste)}")
        formula += f" = {quantity:g} {finish.unit}"
        inputs["waste"] = waste

        tags = [
            f"level:{space.level_id}",
            f"space:{space.id}",
            f"spaceName:{space.name or space.id}",
            f"category:{category}",
            f"finish:{finish.finish_name or finish.id}",
        ]
        if finish.dpwh_item_number_raw:
            tags.append(f"dpwh:{finish.dpwh_item_number_raw}")
        tags.extend(t for t in space.tags if t not in tags)

        prefix = "wall" if category in WALL_CATEGORIES else category
        return TakeoffLine(
            id=line_id(assignment.id, category),
            source_element_id=space.id,
            trade=Trade.FINISHES.value,
            resource_key=f"{prefix}-{finish.id}",
            quantity=quantity,
            unit=finish.unit,
            formula_text=formula,
            inputs_snapshot=inputs,
            assumptions=assumptions,
            tags=tags,
            calculated_at=stamp,
        )

    # -- Per-category quantities --------------------------------------------

    @staticmethod
    def floor(geom: SpaceGeometry) -> tuple[float, str, dict[str, float], list[str]]:
        return (
            geom.area,
            f"Floor finish area = {geom.area:g} m²",
            {"area": geom.area},
            [],
        )

    @staticmethod
    def ceiling(
        geom: SpaceGeometry, space: Space
    ) -> tuple[float, str, dict[str, float], list[str]]:
        if space.metadata.get("isOpenToBelow") == "true":
            return (
                0.0,
                "Ceiling finish area = 0 (open to below)",
                {"area": geom.area, "isOpenToBelow": 1.0},
                ["Open to below: 0 area"],
            )
        return (
            geom.area,
            f"Ceiling finish area = {geom.area:g} m²",
            {"area": geom.area, "isOpenToBelow": 0.0},
            [],
        )

    def wall(
        self,
        geom: SpaceGeometry,
        space: Space,
        finish: FinishType,
        assignment: FinishAssignment,
        openings: list[Opening],
    ) -> tuple[float, str, dict[str, float], list[str]]:
        """Perimeter × height, less the openings the deduction rule accepts."""
        height, height_note = self.wall_height(space, finish, assignment)
        gross = geom.perimeter * height
        assumptions = [height_note]

        deduction = 0.0
        rule = finish.deduction_rule
        if rule is not None and rule.enabled:
            deducted = [
                o for o in openings
                if o.level_id == space.level_id
                and (o.space_id is None or o.space_id == space.id)
                and (not rule.include_types or o.type in rule.include_types)
                and o.area >= rule.min_opening_area
            ]
            deduction = sum(o.area for o in deducted)
            types = ", ".join(rule.include_types) or "all"
            assumptions.append(f"Deduction: min {rule.min_opening_area:g} m², types: {types}")
            assumptions.append(f"Openings deducted: {len(deducted)} ({deduction:.3f} m²)")

        net = max(gross - deduction, 0.0)
        formula = (
            f"Wall finish = ({geom.perimeter:g} m × {height:g} m) - {deduction:.3f} m² openings"
        )
        inputs = {
            "perimeter": geom.perimeter,
            "height": height,
            "grossWallArea": gross,
            "openingDeduction": deduction,
            "netWallArea": net,
        }
        return net, formula, inputs, assumptions

    def wall_height(
        self, space: Space, finish: FinishType, assignment: FinishAssignment
    ) -> tuple[float, str]:
        """Fixed rule height, then the assignment override, then the storey height."""
        rule = finish.wall_height_rule
        if rule is not None and rule.mode == "fixed" and rule.value:
            return rule.value, f"Fixed height: {rule.value:g} m"
        if assignment.overrides and assignment.overrides.height:
            return assignment.overrides.height, (
                f"Height: {assignment.overrides.height:g} m (assignment override)"
            )

        level = self.levels.by_label(space.level_id)
        if level is None:
            raise GeometryError(
                f"Level {space.level_id!r} not found for space {space.id}. "
                f"Available levels: [{', '.join(self.levels.labels())}]"
            )
        above = self.levels.next_above(level.label)
        if above is None:
            return DEFAULT_STOREY_HEIGHT_M, (
                f"Storey height: {DEFAULT_STOREY_HEIGHT_M:g} m (default, no level above {level.label})"
            )
        height = self.levels.height_between(level, above)
        return height, f"Storey height: {level.label} → {above.label} = {height:g} m"


def calculate_finishes(
    project: ProjectSnapshot,
    calculated_at: datetime | None = None,
) -> FinishesResult:
    """Run a finishes takeoff over a whole project snapshot."""
    return FinishesTakeoff(
        GridResolver(project.grid_x, project.grid_y),
        LevelResolver(project.levels),
    ).run(
        project.spaces,
        project.openings,
        project.finish_types,
        project.finish_assignments,
        calculated_at=calculated_at,
    )
