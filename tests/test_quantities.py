"""Tests for the quantity calculators.

Covers: rounding and waste policy, concrete volumes, formwork areas,
reinforcing-steel weights, counts and grades.
"""

from __future__ import annotations

import math

import pytest

from qto.models.project import RebarGroup
from qto.quantities import concrete, formwork, rebar
from qto.quantities.rounding import apply_waste, check_positive, pct, round_half_away


# ---------------------------------------------------------------------------
# Rounding / waste
# ---------------------------------------------------------------------------

class TestRounding:

    def test_visual_half_rounds_up(self):
        # 0.3 * 0.5 * 6 * 1.05 is 0.94499999... in binary
        assert round_half_away(0.3 * 0.5 * 6 * 1.05, 2) == 0.95

    def test_half_away_from_zero(self):
        assert round_half_away(2.675, 2) == 2.68
        assert round_half_away(-1.005, 2) == -1.01
        assert round_half_away(0.0005, 3) == 0.001

    def test_digits(self):
        assert round_half_away(6.048, 3) == 6.048
        assert round_half_away(6.048, 2) == 6.05
        assert round_half_away(6.048, 0) == 6.0

    def test_apply_waste(self):
        assert apply_waste(10.0, 0.05) == pytest.approx(10.5)
        assert apply_waste(10.0, 0.0) == 10.0

    def test_waste_out_of_range(self):
        with pytest.raises(ValueError, match="Waste"):
            apply_waste(10.0, 1.5)
        with pytest.raises(ValueError):
            apply_waste(10.0, -0.1)

    def test_check_positive_names_dimension(self):
        with pytest.raises(ValueError, match="depth must be positive"):
            check_positive(width=1.0, depth=0.0)

    def test_pct(self):
        assert pct(0.05) == "5%"
        assert pct(0.025) == "2.5%"


# ---------------------------------------------------------------------------
# Concrete
# ---------------------------------------------------------------------------

class TestConcrete:

    def test_beam_volume(self):
        result = concrete.beam_volume(0.3, 0.5, 6.0, 0.05)
        assert result.value == pytest.approx(0.945)
        assert "0.3 × 0.5 × 6" in result.formula_text
        assert "5% waste" in result.formula_text
        assert result.inputs_snapshot["waste"] == 0.05

    def test_no_waste_formula(self):
        result = concrete.beam_volume(0.3, 0.5, 6.0, 0.0)
        assert result.value == pytest.approx(0.9)
        assert "waste" not in result.formula_text

    def test_rect_column(self):
        assert concrete.rect_column_volume(0.4, 0.4, 3.5, 0.05).value == pytest.approx(0.588)

    def test_circular_column(self):
        result = concrete.circular_column_volume(0.5, 3.5, 0.0)
        assert result.value == pytest.approx(math.pi * 0.25 ** 2 * 3.5)
        assert "π" in result.formula_text

    def test_slab(self):
        assert concrete.slab_volume(0.12, 6.0, 8.0, 0.05).value == pytest.approx(6.048)

    def test_footing(self):
        assert concrete.footing_volume(1.5, 1.5, 0.6, 0.05).value == pytest.approx(1.4175)

    def test_rejects_zero_dimension(self):
        with pytest.raises(ValueError, match="height"):
            concrete.beam_volume(0.3, 0.0, 6.0, 0.05)


# ---------------------------------------------------------------------------
# Formwork
# ---------------------------------------------------------------------------

class TestFormwork:

    def test_beam_bottom_and_sides(self):
        result = formwork.beam_formwork(0.3, 0.5, 6.0)
        assert result.value == pytest.approx(7.8)
        assert result.formula_text == "A = 0.3 × 6 + 2 × 0.5 × 6 = 7.80 m²"

    def test_rect_column_four_sides(self):
        assert formwork.rect_column_formwork(0.4, 0.4, 3.5).value == pytest.approx(5.6)

    def test_circular_column(self):
        assert formwork.circular_column_formwork(0.5, 3.5).value == pytest.approx(math.pi * 1.75)

    def test_slab_soffit_only(self):
        result = formwork.slab_formwork(6.0, 8.0)
        assert result.value == pytest.approx(48.0)
        assert "soffit" in result.formula_text

    def test_footing_edges(self):
        assert formwork.footing_formwork(1.5, 1.5, 0.6).value == pytest.approx(3.6)


# ---------------------------------------------------------------------------
# Rebar
# ---------------------------------------------------------------------------

class TestRebarTables:

    def test_unit_weight(self):
        assert rebar.unit_weight(16) == 1.578
        assert rebar.unit_weight(10.0) == 0.617

    def test_unsupported_diameter(self):
        with pytest.raises(ValueError, match="Unsupported bar diameter"):
            rebar.unit_weight(11)

    def test_grade_by_diameter(self):
        assert rebar.rebar_grade(10) == 40
        assert rebar.rebar_grade(12) == 40
        assert rebar.rebar_grade(16) == 60
        assert rebar.rebar_grade(36) == 60
        assert rebar.rebar_grade(40) == 80

    def test_pay_item(self):
        assert rebar.rebar_pay_item(10) == "902 (1) a1"
        assert rebar.rebar_pay_item(16) == "902 (1) a2"
        assert rebar.rebar_pay_item(40) == "902 (1) a3"
        assert rebar.rebar_pay_item(16, epoxy_coated=True) == "902 (2) a2"

    def test_lap_and_stirrup_lengths(self):
        assert rebar.lap_length(16) == pytest.approx(0.64)
        assert rebar.stirrup_length(0.3, 0.5) == pytest.approx(1.75)
        assert rebar.hoop_length(0.5) == pytest.approx(math.pi * 0.5 + 0.15)


class TestBarCount:

    def test_exact_division(self):
        assert rebar.bar_count(6.0, 0.15) == 41

    def test_partial_spacing_rounds_up(self):
        assert rebar.bar_count(8.0, 0.15) == 55
        assert rebar.bar_count(3.5, 0.15) == 25

    def test_zero_spacing(self):
        with pytest.raises(ValueError, match="spacing"):
            rebar.bar_count(6.0, 0.0)

    def test_group_count_prefers_explicit_count(self):
        assert rebar.group_count(RebarGroup(diameter=16, count=6, spacing=0.2), 6.0) == 6

    def test_group_count_from_spacing(self):
        assert rebar.group_count(RebarGroup(diameter=12, spacing=0.15), 6.0) == 41

    def test_group_count_needs_count_or_spacing(self):
        with pytest.raises(ValueError, match="count or a spacing"):
            rebar.group_count(RebarGroup(diameter=12), 6.0)

    def test_group_count_rejects_zero(self):
        with pytest.raises(ValueError):
            rebar.group_count(RebarGroup(diameter=12, count=0), 6.0)

    def test_group_count_rejects_fractional_count(self):
        with pytest.raises(ValueError, match="whole number"):
            rebar.group_count(RebarGroup(diameter=12, count=2.5), 6.0)

    def test_group_count_accepts_integral_float(self):
        assert rebar.group_count(RebarGroup(diameter=12, count=4.0), 6.0) == 4

    def test_group_without_diameter(self):
        with pytest.raises(ValueError, match="no diameter"):
            rebar.group_count(RebarGroup(count=4), 6.0)


class TestRebarWeight:

    def test_longitudinal_with_lap(self):
        result = rebar.longitudinal_weight(RebarGroup(diameter=16, count=6), 6.0, 0.3, 0.03)
        expected = 6 * (6.0 + 0.64) * 1.578 * 1.03
        assert result.value == pytest.approx(expected)
        assert result.inputs_snapshot["count"] == 6
        assert result.inputs_snapshot["lap"] == pytest.approx(0.64)
        assert "lap" in result.formula_text

    def test_longitudinal_without_lap(self):
        result = rebar.longitudinal_weight(
            RebarGroup(diameter=16, count=10), 1.5, 1.5, 0.0, with_lap=False
        )
        assert result.value == pytest.approx(10 * 1.5 * 1.578)
        assert "lap" not in result.formula_text

    def test_transverse_records_spacing(self):
        result = rebar.transverse_weight(RebarGroup(diameter=10, spacing=0.15), 1.75, 6.0, 0.0)
        assert result.inputs_snapshot["count"] == 41
        assert result.inputs_snapshot["spacing"] == 0.15
        assert result.value == pytest.approx(41 * 1.75 * 0.617)
        assert result.formula_text.startswith("41 stirrups")
