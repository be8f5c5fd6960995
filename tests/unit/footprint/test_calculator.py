"""
Unit tests for the footprint calculator.
Expected values are worked by hand from the published emission factors.
"""

from dataclasses import replace

import pytest

from footprint.calculator import calculate_footprint, compare_to_benchmarks, round_half_up
from footprint.factors import (
    EmissionCategory,
    classify_emitter,
    diet_base_factor,
    transport_factor,
)
from footprint.models import LifestyleInputs


class TestRoundHalfUp:
    def test_ties_round_up(self):
        assert round_half_up(0.125) == 0.13
        assert round_half_up(2.5, 0) == 3.0

    def test_negative_ties_round_towards_positive(self):
        assert round_half_up(-2.5, 0) == -2.0

    def test_non_finite_passes_through(self):
        assert round_half_up(float("inf")) == float("inf")
        assert round_half_up(float("nan")) != round_half_up(float("nan"))


class TestFactorLookups:
    def test_known_modes(self):
        assert transport_factor("car") == 0.171
        assert transport_factor("bike") == 0.0
        assert transport_factor("electric_car") == 0.053

    def test_unknown_mode_falls_back_to_car(self):
        assert transport_factor("rocket") == 0.171

    def test_unknown_diet_falls_back_to_vegetarian(self):
        assert diet_base_factor("carnivore") == 1500.0

    @pytest.mark.parametrize(
        "total,expected",
        [
            (0.0, EmissionCategory.LOW),
            (3999.99, EmissionCategory.LOW),
            (4000.0, EmissionCategory.MODERATE),
            (7999.99, EmissionCategory.MODERATE),
            (8000.0, EmissionCategory.HIGH),
        ],
    )
    def test_category_boundaries(self, total, expected):
        assert classify_emitter(total) == expected


class TestCalculateFootprint:
    def test_high_impact_breakdown(self, high_impact_inputs):
        breakdown = calculate_footprint(high_impact_inputs)

        assert breakdown.transport == pytest.approx(889.2)
        assert breakdown.energy == pytest.approx(1710.0)
        assert breakdown.diet == pytest.approx(9520.0)  # 2500 base + 5 * 52 * 27
        assert breakdown.waste == pytest.approx(379.6)
        assert breakdown.total == pytest.approx(12498.8)
        assert breakdown.category == EmissionCategory.HIGH

    def test_low_impact_breakdown(self, low_impact_inputs):
        breakdown = calculate_footprint(low_impact_inputs)

        assert breakdown.transport == 0.0
        assert breakdown.energy == pytest.approx(570.0)
        assert breakdown.diet == pytest.approx(1050.0)
        assert breakdown.waste == pytest.approx(46.8)
        assert breakdown.total == pytest.approx(1666.8)
        assert breakdown.category == EmissionCategory.LOW

    def test_mixed_household_worked_example(self):
        """Car commuter on LPG and grid power with a vegetarian diet."""
        inputs = LifestyleInputs(
            transport_km_per_week=100,
            transport_mode="car",
            energy_kwh_per_month=200,
            lpg_kg_per_month=15,
            diet_type="vegetarian",
            red_meat_meals_per_week=0,
            waste_kg_per_week=10,
            waste_segregated=False,
        )
        breakdown = calculate_footprint(inputs)

        assert breakdown.transport == pytest.approx(889.2)
        assert breakdown.energy == pytest.approx(1676.4)  # 2400 kWh * 0.475 + 180 kg LPG * 2.98
        assert breakdown.diet == pytest.approx(1500.0)
        assert breakdown.waste == pytest.approx(379.6)
        assert breakdown.total == pytest.approx(4445.2)
        assert breakdown.category == EmissionCategory.MODERATE

    def test_lpg_adds_to_energy(self, low_impact_inputs):
        breakdown = calculate_footprint(replace(low_impact_inputs, lpg_kg_per_month=10))
        assert breakdown.energy == pytest.approx(570.0 + 10 * 12 * 2.98)

    def test_red_meat_counts_for_every_diet(self, low_impact_inputs):
        breakdown = calculate_footprint(replace(low_impact_inputs, red_meat_meals_per_week=2))
        assert breakdown.diet == pytest.approx(1050.0 + 2 * 52 * 27)

    def test_total_matches_components(self, high_impact_inputs):
        b = calculate_footprint(high_impact_inputs)
        assert b.total == pytest.approx(b.transport + b.energy + b.diet + b.waste, abs=0.02)

    def test_all_zero_inputs_keep_diet_base(self, low_impact_inputs):
        zero = replace(
            low_impact_inputs,
            transport_km_per_week=0,
            energy_kwh_per_month=0,
            waste_kg_per_week=0,
            diet_type="vegetarian",
        )
        breakdown = calculate_footprint(zero)
        assert breakdown.total == pytest.approx(1500.0)
        assert breakdown.category == EmissionCategory.LOW

    def test_inputs_are_not_mutated(self, high_impact_inputs):
        before = high_impact_inputs.to_dict()
        calculate_footprint(high_impact_inputs)
        assert high_impact_inputs.to_dict() == before


class TestBenchmarks:
    def test_gaps_against_reference_footprints(self, high_impact_inputs):
        comparison = compare_to_benchmarks(calculate_footprint(high_impact_inputs))

        assert comparison.sustainable_target == 2000.0
        assert comparison.average_footprint == 6000.0
        assert comparison.gap_to_target == pytest.approx(10498.8)
        assert comparison.gap_to_average == pytest.approx(6498.8)
        assert comparison.percent_of_average == pytest.approx(208.31)
