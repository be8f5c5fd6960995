"""
Unit tests for the recommendation engine.
"""

import random
from dataclasses import replace

import pytest

from footprint.calculator import calculate_footprint
from footprint.factors import EmissionCategory
from footprint.models import EmissionBreakdown
from footprint.recommendations import (
    ECO_TIPS,
    MAX_RECOMMENDATIONS,
    generate_recommendations,
    random_eco_tip,
    rank_categories,
    summarize_recommendations,
    top_contributor,
)


def _breakdown(transport=0.0, energy=0.0, diet=0.0, waste=0.0) -> EmissionBreakdown:
    total = transport + energy + diet + waste
    return EmissionBreakdown(
        transport=transport,
        energy=energy,
        diet=diet,
        waste=waste,
        total=total,
        category=EmissionCategory.LOW,
    )


class TestRanking:
    def test_largest_category_first(self):
        ranked = rank_categories(_breakdown(transport=10, energy=30, diet=20, waste=5))
        assert [name for name, _ in ranked] == ["energy", "diet", "transport", "waste"]

    def test_ties_keep_category_order(self):
        assert top_contributor(_breakdown(transport=100, energy=100)) == "transport"


class TestGenerateRecommendations:
    def test_high_impact_profile(self, high_impact_inputs):
        items = generate_recommendations(high_impact_inputs, calculate_footprint(high_impact_inputs))

        assert len(items) == MAX_RECOMMENDATIONS
        assert [i.category for i in items] == ["diet", "diet", "energy", "energy", "waste", "waste"]

        # Red-meat rule promoted because diet is the top contributor
        assert items[0].priority == 1
        assert "red meat" in items[0].text
        assert items[0].potential_reduction == pytest.approx(2380.0)

        # LED rule is promotable but energy is not the top contributor
        led = next(i for i in items if "LED" in i.text)
        assert led.priority == 2
        assert led.potential_reduction == pytest.approx(427.5)

    def test_sorted_by_priority_then_reduction(self, high_impact_inputs):
        items = generate_recommendations(high_impact_inputs, calculate_footprint(high_impact_inputs))
        keys = [(i.priority, -i.potential_reduction) for i in items]
        assert keys == sorted(keys)

    def test_truncation_drops_lowest_ranked(self, high_impact_inputs):
        items = generate_recommendations(high_impact_inputs, calculate_footprint(high_impact_inputs))
        texts = " ".join(i.text for i in items)
        assert "local and seasonal" not in texts
        assert "single-use plastics" not in texts

    def test_low_impact_profile_has_no_suggestions(self, low_impact_inputs):
        items = generate_recommendations(low_impact_inputs, calculate_footprint(low_impact_inputs))
        assert items == []

    def test_led_promoted_when_energy_is_top(self, low_impact_inputs):
        inputs = replace(
            low_impact_inputs,
            transport_mode="walk",
            energy_kwh_per_month=800,
            waste_kg_per_week=0,
        )
        items = generate_recommendations(inputs, calculate_footprint(inputs))

        assert [(i.category, i.priority) for i in items] == [("energy", 1), ("energy", 2)]
        assert "LED" in items[0].text
        assert items[0].potential_reduction == pytest.approx(4560.0 * 0.25)

    def test_non_promotable_rule_keeps_priority(self, low_impact_inputs):
        inputs = replace(
            low_impact_inputs,
            transport_mode="car",
            transport_km_per_week=500,
            diet_type="vegetarian",
            waste_kg_per_week=0,
        )
        items = generate_recommendations(inputs, calculate_footprint(inputs))

        assert [i.category for i in items] == ["transport", "transport"]
        assert items[0].priority == 1 and "public transport" in items[0].text
        assert items[1].priority == 2 and "carpooling" in items[1].text

    def test_threshold_is_strict(self, low_impact_inputs):
        items = generate_recommendations(low_impact_inputs, _breakdown(waste=200.0))
        assert items == []

        items = generate_recommendations(low_impact_inputs, _breakdown(waste=200.01))
        assert {i.category for i in items} == {"waste"}

    def test_transport_at_or_below_threshold_yields_nothing(self, low_impact_inputs):
        """Transport rules stay silent up to 1000 kg regardless of mode or distance."""
        car = replace(low_impact_inputs, transport_mode="car", transport_km_per_week=112)
        breakdown = calculate_footprint(car)
        assert breakdown.transport == pytest.approx(995.9)
        assert all(i.category != "transport" for i in generate_recommendations(car, breakdown))

        items = generate_recommendations(car, _breakdown(transport=1000.0))
        assert items == []

        items = generate_recommendations(car, _breakdown(transport=1000.01))
        assert {i.category for i in items} == {"transport"}

    def test_segregated_waste_skips_segregation_rule(self, high_impact_inputs):
        inputs = replace(high_impact_inputs, waste_segregated=True)
        items = generate_recommendations(inputs, _breakdown(waste=500.0))
        assert all("segregating" not in i.text for i in items)


class TestSummary:
    def test_combined_reduction_uses_top_three(self, high_impact_inputs):
        breakdown = calculate_footprint(high_impact_inputs)
        items = generate_recommendations(high_impact_inputs, breakdown)
        summary = summarize_recommendations(items, breakdown)

        assert summary.top_contributor == "diet"
        assert summary.top_contributor_value == pytest.approx(9520.0)
        assert summary.combined_reduction == pytest.approx(2380.0 + 1428.0 + 427.5)
        assert summary.tree_equivalent == 212

    def test_empty_list(self, low_impact_inputs):
        breakdown = calculate_footprint(low_impact_inputs)
        summary = summarize_recommendations([], breakdown)
        assert summary.combined_reduction == 0.0
        assert summary.tree_equivalent == 0


def test_random_eco_tip_is_from_catalogue():
    assert random_eco_tip(random.Random(3)) in ECO_TIPS
