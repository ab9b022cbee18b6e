"""Tests for schedule-item takeoff lines."""

from __future__ import annotations

from datetime import datetime, timezone

import pytest

from qto.models.project import ScheduleItem
from qto.models.takeoff import Trade
from qto.takeoff.schedule import calculate_schedule_items, trade_for_category


def _make_item(item_id: str = "s1", **overrides) -> ScheduleItem:
    data = {
        "id": item_id,
        "category": "doors",
        "dpwhItemNumberRaw": "1006 (1)",
        "unit": "Square Meter",
        "qty": 4.2,
        "basisNote": "Door schedule D1 x 2",
    }
    data.update(overrides)
    return ScheduleItem.model_validate(data)


class TestTradeForCategory:

    @pytest.mark.parametrize(
        "category,trade",
        [
            ("doors", Trade.DOORS_WINDOWS),
            ("windows", Trade.DOORS_WINDOWS),
            ("plumbing", Trade.PLUMBING),
            ("drainage", Trade.PLUMBING),
            ("glazing", Trade.GLASS_GLAZING),
            ("earthworks-excavation", Trade.EARTHWORK),
            ("earthworks-structure-excavation", Trade.EARTHWORK),
            ("something-new", Trade.OTHER),
        ],
    )
    def test_mapping(self, category, trade):
        assert trade_for_category(category) == trade


class TestCalculateScheduleItems:

    def test_line_shape(self):
        stamp = datetime(2024, 1, 1, tzinfo=timezone.utc)
        result = calculate_schedule_items([_make_item()], calculated_at=stamp)
        line = result.takeoff_lines[0]

        assert line.id == "tof_s1_schedule"
        assert line.source_element_id == "s1"
        assert line.trade == "Doors & Windows"
        assert line.quantity == 4.2
        assert line.unit == "Square Meter"
        assert line.resource_key == "schedule-doors-s1"
        assert line.formula_text == "Direct quantity from schedule: 4.2 Square Meter"
        assert line.tags[:2] == ["category:doors", "dpwh:1006 (1)"]
        assert "Basis: Door schedule D1 x 2" in line.assumptions
        assert line.calculated_at == stamp

    def test_quantity_is_not_rounded_or_wasted(self):
        result = calculate_schedule_items([_make_item(qty=1.23456)])
        assert result.takeoff_lines[0].quantity == 1.23456

    def test_missing_pay_item_has_no_dpwh_tag(self):
        result = calculate_schedule_items([_make_item(dpwhItemNumberRaw="")])
        assert result.takeoff_lines[0].tag_value("dpwh") is None

    def test_item_tags_are_appended(self):
        result = calculate_schedule_items([_make_item(tags=["zone:north", "category:doors"])])
        tags = result.takeoff_lines[0].tags
        assert "zone:north" in tags
        assert tags.count("category:doors") == 1

    def test_negative_quantity_is_an_error(self):
        result = calculate_schedule_items([_make_item("bad", qty=-1), _make_item("ok")])
        assert [l.id for l in result.takeoff_lines] == ["tof_ok_schedule"]
        assert len(result.errors) == 1
        assert "bad" in result.errors[0]

    def test_counts_by_category(self):
        result = calculate_schedule_items([
            _make_item("d1"),
            _make_item("d2"),
            _make_item("p1", category="plumbing", dpwhItemNumberRaw="1002 (1)", unit="Each", qty=3),
        ])
        assert result.total_items == 3
        assert result.by_category == {"doors": 2, "plumbing": 1}

    def test_empty(self):
        result = calculate_schedule_items([])
        assert result.takeoff_lines == []
        assert result.total_items == 0
