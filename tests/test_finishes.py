"""Tests for the finishing-works takeoff.

Covers: grid-rectangle and polygon space geometry, floor/ceiling/wall
finish lines, wall height precedence, opening deductions, per-assignment
error capture, summary totals, and hand-off to the BOQ aggregator.
"""

from __future__ import annotations

from datetime import datetime, timezone

import pytest

from qto.boq.aggregator import generate_boq
from qto.errors import GeometryError
from qto.geometry.grid import GridResolver
from qto.geometry.levels import LevelResolver
from qto.models.project import (
    BoundaryData,
    FinishAssignment,
    FinishType,
    GridLine,
    Level,
    Opening,
    ProjectSnapshot,
    Space,
)
from qto.takeoff.finishes import (
    FinishesTakeoff,
    calculate_finishes,
    grid_rect_geometry,
    polygon_geometry,
)


STAMP = datetime(2024, 1, 1, tzinfo=timezone.utc)


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------

def _make_grid_lines():
    grid_x = [GridLine(label=l, offset=o) for l, o in (("A", 0), ("B", 3), ("C", 6))]
    grid_y = [GridLine(label=l, offset=o) for l, o in (("1", 0), ("2", 4))]
    return grid_x, grid_y


def _make_levels() -> list[Level]:
    return [Level(label="GF", elevation=0.0), Level(label="2F", elevation=3.5)]


def _make_space(sid: str = "s1", name: str = "Kitchen", level: str = "GF",
                grid_x=("A", "B"), grid_y=("1", "2"), **kwargs) -> Space:
    return Space.model_validate({
        "id": sid,
        "name": name,
        "levelId": level,
        "boundary": {"type": "gridRect", "data": {"gridX": list(grid_x), "gridY": list(grid_y)}},
        **kwargs,
    })


def _make_finish(fid: str, category: str, item: str, **kwargs) -> FinishType:
    return FinishType.model_validate({
        "id": fid,
        "category": category,
        "finishName": fid,
        "dpwhItemNumberRaw": item,
        "unit": "Square Meter",
        **kwargs,
    })


def _make_assignment(aid: str, space_id: str, finish_id: str, **kwargs) -> FinishAssignment:
    return FinishAssignment(id=aid, space_id=space_id, finish_type_id=finish_id, **kwargs)


def _openings() -> list[Opening]:
    return [
        Opening(id="d1", level_id="GF", space_id="s1", type="door", width=0.9, height=2.1),
        Opening(id="w1", level_id="GF", type="window", width=1.2, height=1.0, qty=2),
        Opening(id="v1", level_id="GF", type="vent", width=0.3, height=0.3),
        Opening(id="w2", level_id="2F", type="window", width=1.2, height=1.0),
        Opening(id="d9", level_id="GF", space_id="s9", type="door", width=0.9, height=2.1),
    ]


def _run(spaces, finishes, assignments, openings=None):
    grid_x, grid_y = _make_grid_lines()
    return FinishesTakeoff(GridResolver(grid_x, grid_y), LevelResolver(_make_levels())).run(
        spaces, openings or [], finishes, assignments, calculated_at=STAMP,
    )


def _line(result, line_id: str):
    matches = [l for l in result.takeoff_lines if l.id == line_id]
    assert len(matches) == 1, f"expected one line {line_id}, got {[l.id for l in result.takeoff_lines]}"
    return matches[0]


# ---------------------------------------------------------------------------
# Space geometry
# ---------------------------------------------------------------------------

class TestSpaceGeometry:

    def test_grid_rect(self):
        grid_x, grid_y = _make_grid_lines()
        geom = grid_rect_geometry(
            BoundaryData(grid_x=["A", "B"], grid_y=["1", "2"]), GridResolver(grid_x, grid_y)
        )
        assert geom.area == pytest.approx(12.0)
        assert geom.perimeter == pytest.approx(14.0)

    def test_grid_rect_label_order_does_not_matter(self):
        grid_x, grid_y = _make_grid_lines()
        geom = grid_rect_geometry(
            BoundaryData(grid_x=["C", "A"], grid_y=["2", "1"]), GridResolver(grid_x, grid_y)
        )
        assert geom.area == pytest.approx(24.0)

    def test_grid_rect_unknown_label(self):
        grid_x, grid_y = _make_grid_lines()
        with pytest.raises(GeometryError, match="Available X-grid: \\[A, B, C\\]"):
            grid_rect_geometry(
                BoundaryData(grid_x=["A", "Z"], grid_y=["1", "2"]), GridResolver(grid_x, grid_y)
            )

    def test_grid_rect_needs_two_labels_per_axis(self):
        grid_x, grid_y = _make_grid_lines()
        with pytest.raises(GeometryError, match="two X and two Y"):
            grid_rect_geometry(BoundaryData(grid_x=["A"], grid_y=["1", "2"]), GridResolver(grid_x, grid_y))

    def test_polygon(self):
        geom = polygon_geometry([(0, 0), (3, 0), (0, 4)])
        assert geom.area == pytest.approx(6.0)
        assert geom.perimeter == pytest.approx(12.0)

    def test_polygon_needs_three_points(self):
        with pytest.raises(GeometryError, match="at least 3 points"):
            polygon_geometry([(0, 0), (1, 1)])


# ---------------------------------------------------------------------------
# Floor and ceiling
# ---------------------------------------------------------------------------

class TestFloorAndCeiling:

    def test_floor_with_waste(self):
        result = _run(
            [_make_space()],
            [_make_finish("tiles", "floor", "1018 (1)", waste=0.05, rounding=2)],
            [_make_assignment("fa1", "s1", "tiles")],
        )
        line = _line(result, "tof_fa1_floor")

        assert result.errors == []
        assert line.quantity == 12.6
        assert line.trade == "Finishes"
        assert line.unit == "Square Meter"
        assert line.source_element_id == "s1"
        assert line.resource_key == "floor-tiles"
        assert line.calculated_at == STAMP
        assert "Waste: 5%" in line.assumptions
        assert line.tags == [
            "level:GF", "space:s1", "spaceName:Kitchen", "category:floor",
            "finish:tiles", "dpwh:1018 (1)",
        ]

    def test_assignment_waste_override(self):
        result = _run(
            [_make_space()],
            [_make_finish("tiles", "floor", "1018 (1)", waste=0.05, rounding=2)],
            [_make_assignment("fa1", "s1", "tiles", overrides={"waste": 0.1})],
        )
        assert _line(result, "tof_fa1_floor").quantity == 13.2

    def test_ceiling(self):
        result = _run(
            [_make_space()],
            [_make_finish("paint", "ceiling", "1032 (1) a")],
            [_make_assignment("fa2", "s1", "paint")],
        )
        assert _line(result, "tof_fa2_ceiling").quantity == 12.0

    def test_ceiling_open_to_below(self):
        space = _make_space(metadata={"isOpenToBelow": "true"})
        result = _run(
            [space],
            [_make_finish("paint", "ceiling", "1032 (1) a", waste=0.05)],
            [_make_assignment("fa2", "s1", "paint")],
        )
        line = _line(result, "tof_fa2_ceiling")
        assert line.quantity == 0.0
        assert "Open to below: 0 area" in line.assumptions

    def test_polygon_space(self):
        space = Space.model_validate({
            "id": "s3",
            "name": "Lanai",
            "levelId": "GF",
            "boundary": {"type": "polygon", "data": {"points": [[0, 0], [4, 0], [4, 3], [0, 3]]}},
        })
        result = _run([space], [_make_finish("tiles", "floor", "1018 (1)")], [_make_assignment("fa3", "s3", "tiles")])
        assert _line(result, "tof_fa3_floor").quantity == 12.0


# ---------------------------------------------------------------------------
# Walls
# ---------------------------------------------------------------------------

class TestWalls:

    def _plaster(self, **kwargs) -> FinishType:
        return _make_finish(
            "plaster", "plaster", "1027 (1)",
            deduction_rule={"enabled": True, "minOpeningArea": 0.5, "includeTypes": ["door", "window"]},
            **kwargs,
        )

    def test_storey_height_less_openings(self):
        result = _run(
            [_make_space()], [self._plaster()], [_make_assignment("fa4", "s1", "plaster")], _openings(),
        )
        line = _line(result, "tof_fa4_plaster")

        # 14 m perimeter × 3.5 m, less door 1.89 and two windows 2.4
        assert line.quantity == pytest.approx(44.71)
        assert line.inputs_snapshot["grossWallArea"] == pytest.approx(49.0)
        assert line.inputs_snapshot["openingDeduction"] == pytest.approx(4.29)
        assert line.resource_key == "wall-plaster"
        assert "Storey height: GF → 2F = 3.5 m" in line.assumptions
        assert "Openings deducted: 2 (4.290 m²)" in line.assumptions

    def test_no_deduction_without_rule(self):
        result = _run(
            [_make_space()],
            [_make_finish("paint", "paint", "1032 (1) a")],
            [_make_assignment("fa5", "s1", "paint")],
            _openings(),
        )
        assert _line(result, "tof_fa5_paint").quantity == pytest.approx(49.0)

    def test_fixed_height_wins_over_override(self):
        finish = _make_finish("wainscot", "wall", "1018 (1)", wall_height_rule={"mode": "fixed", "value": 1.2})
        result = _run(
            [_make_space()], [finish],
            [_make_assignment("fa6", "s1", "wainscot", overrides={"height": 2.7})],
        )
        line = _line(result, "tof_fa6_wall")
        assert line.quantity == pytest.approx(16.8)
        assert "Fixed height: 1.2 m" in line.assumptions

    def test_assignment_height_override(self):
        result = _run(
            [_make_space()],
            [_make_finish("paint", "paint", "1032 (1) a")],
            [_make_assignment("fa7", "s1", "paint", overrides={"height": 2.7})],
        )
        assert _line(result, "tof_fa7_paint").quantity == pytest.approx(37.8)

    def test_top_level_uses_default_storey_height(self):
        space = _make_space("s2", "Bedroom", level="2F", grid_x=("B", "C"))
        result = _run([space], [_make_finish("paint", "paint", "1032 (1) a")], [_make_assignment("fa8", "s2", "paint")])
        line = _line(result, "tof_fa8_paint")
        assert line.quantity == pytest.approx(42.0)
        assert any("default" in a for a in line.assumptions)

    def test_openings_never_make_area_negative(self):
        big = [Opening(id="g1", level_id="GF", type="window", width=10, height=10)]
        result = _run([_make_space()], [self._plaster()], [_make_assignment("fa9", "s1", "plaster")], big)
        assert _line(result, "tof_fa9_plaster").quantity == 0.0


# ---------------------------------------------------------------------------
# Batch behaviour
# ---------------------------------------------------------------------------

class TestFinishesBatch:

    def test_missing_references_are_errors(self):
        result = _run(
            [_make_space()],
            [_make_finish("tiles", "floor", "1018 (1)")],
            [
                _make_assignment("x1", "nowhere", "tiles"),
                _make_assignment("x2", "s1", "nothing"),
                _make_assignment("ok", "s1", "tiles"),
            ],
        )
        assert result.errors == [
            "Space nowhere not found for assignment x1",
            "Finish type nothing not found for assignment x2",
        ]
        assert [l.id for l in result.takeoff_lines] == ["tof_ok_floor"]

    def test_unknown_category_and_bad_outline(self):
        bad_space = _make_space("s5", grid_x=("A", "Z"))
        result = _run(
            [_make_space(), bad_space],
            [_make_finish("roof", "roof", "1013 (2) a"), _make_finish("tiles", "floor", "1018 (1)")],
            [_make_assignment("r1", "s1", "roof"), _make_assignment("b1", "s5", "tiles")],
        )
        assert len(result.errors) == 2
        assert "Unknown finish category 'roof'" in result.errors[0]
        assert result.errors[1].startswith("Error processing assignment b1: Grid lines not found")
        assert result.takeoff_lines == []

    def test_summary(self):
        result = _run(
            [_make_space()],
            [
                _make_finish("tiles", "floor", "1018 (1)", waste=0.05, rounding=2),
                _make_finish("paint", "ceiling", "1032 (1) a"),
                _make_finish("plaster", "plaster", "1027 (1)"),
            ],
            [
                _make_assignment("f1", "s1", "tiles"),
                _make_assignment("f2", "s1", "paint"),
                _make_assignment("f3", "s1", "plaster"),
            ],
        )
        assert result.summary.total_floor_area == 12.6
        assert result.summary.total_ceiling_area == 12.0
        assert result.summary.total_wall_area == 49.0
        assert result.summary.line_count == 3

    def test_rerun_is_deterministic(self):
        args = ([_make_space()], [_make_finish("tiles", "floor", "1018 (1)")], [_make_assignment("f1", "s1", "tiles")])
        assert _run(*args).to_dict() == _run(*args).to_dict()

    def test_lines_feed_the_finishes_partition(self):
        result = _run(
            [_make_space(), _make_space("s2", "Bedroom", grid_x=("B", "C"))],
            [_make_finish("tiles", "floor", "1018 (1)")],
            [_make_assignment("f1", "s1", "tiles"), _make_assignment("f2", "s2", "tiles")],
        )
        boq = generate_boq(result.takeoff_lines)
        line = next(l for l in boq.boq_lines if l.id == "boq_1018__1__finishes")

        assert line.quantity == 24.0
        assert line.source_takeoff_line_ids == ["tof_f1_floor", "tof_f2_floor"]
        assert "spaces:1× Kitchen, 1× Bedroom" in line.tags
        assert "categories:2× floor" in line.tags

    def test_calculate_finishes_from_snapshot(self):
        grid_x, grid_y = _make_grid_lines()
        project = ProjectSnapshot(
            grid_x=grid_x,
            grid_y=grid_y,
            levels=_make_levels(),
            spaces=[_make_space()],
            finish_types=[_make_finish("tiles", "floor", "1018 (1)")],
            finish_assignments=[_make_assignment("f1", "s1", "tiles")],
        )
        result = calculate_finishes(project, calculated_at=STAMP)
        assert _line(result, "tof_f1_floor").quantity == 12.0
