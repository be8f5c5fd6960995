"""
Recommendation Engine.

Rule-based mitigation suggestions derived from a breakdown and its inputs.

Rules are evaluated per category only when that category clears its minimum
emission threshold. Each rule proposes a fixed fraction of the category's
emissions as its potential reduction. A handful of rules are promoted to
priority 1 when their category is the user's top contributor.
"""

import random
from dataclasses import dataclass
from typing import Any, Callable, Dict, List, Optional, Sequence, Tuple

from footprint.calculator import round_half_up
from footprint.factors import DietType, TransportMode
from footprint.models import EmissionBreakdown, LifestyleInputs, RecommendationItem

MAX_RECOMMENDATIONS = 6
TREE_ABSORPTION_KG_PER_YEAR = 20.0

CATEGORY_ORDER: Tuple[str, ...] = ("transport", "energy", "diet", "waste")

CATEGORY_THRESHOLDS: Dict[str, float] = {
    "transport": 1000.0,
    "energy": 1500.0,
    "diet": 2000.0,
    "waste": 200.0,
}

ECO_TIPS: Tuple[str, ...] = (
    "Every small action counts towards a sustainable future",
    "The best time to act on climate change was yesterday. The second best time is now.",
    "Your carbon footprint is a measure of impact, not character",
    "Reducing emissions by 2 tons/year is equivalent to planting 100 trees",
    "Sustainable living is a journey, not a destination",
    "Choose progress over perfection in your sustainability journey",
)


def _always(inputs: LifestyleInputs) -> bool:
    return True


def _is_car(inputs: LifestyleInputs) -> bool:
    return inputs.transport_mode == TransportMode.CAR


def _is_non_vegetarian(inputs: LifestyleInputs) -> bool:
    return inputs.diet_type == DietType.NON_VEGETARIAN


@dataclass(frozen=True)
class Rule:
    category: str
    text: str
    fraction: float
    priority: int
    applies: Callable[[LifestyleInputs], bool] = _always
    promote_if_top: bool = False


RULES: Tuple[Rule, ...] = (
    Rule(
        "transport",
        "Switch to public transport 2-3 times per week to reduce emissions by up to 30%",
        0.30,
        1,
        _is_car,
    ),
    Rule(
        "transport",
        "Consider carpooling or working from home 1-2 days per week",
        0.20,
        2,
        lambda i: i.transport_km_per_week > 100,
    ),
    Rule(
        "transport",
        "For short distances under 5km, consider biking or walking",
        0.15,
        2,
        lambda i: _is_car(i) and i.transport_km_per_week < 50,
    ),
    Rule(
        "energy",
        "Switch to LED bulbs and energy-efficient appliances to save up to 25% energy",
        0.25,
        2,
        lambda i: i.energy_kwh_per_month > 200,
        promote_if_top=True,
    ),
    Rule(
        "energy",
        "Use natural light during daytime and unplug devices when not in use",
        0.15,
        2,
    ),
    Rule(
        "energy",
        "Use pressure cookers and optimize cooking methods to reduce LPG consumption",
        0.10,
        3,
        lambda i: i.lpg_kg_per_month > 15,
    ),
    Rule(
        "diet",
        "Reduce red meat consumption to 2-3 times per week to cut diet emissions by 20-30%",
        0.25,
        2,
        lambda i: _is_non_vegetarian(i) and i.red_meat_meals_per_week > 3,
        promote_if_top=True,
    ),
    Rule(
        "diet",
        'Try "Meatless Mondays" or introduce more plant-based meals',
        0.15,
        2,
        _is_non_vegetarian,
    ),
    Rule(
        "diet",
        "Buy local and seasonal produce to reduce transportation emissions",
        0.10,
        3,
    ),
    Rule(
        "waste",
        "Start segregating waste into wet, dry, and recyclable categories",
        0.35,
        2,
        lambda i: not i.waste_segregated,
        promote_if_top=True,
    ),
    Rule(
        "waste",
        "Practice composting for organic waste and reduce overall waste generation",
        0.25,
        2,
        lambda i: i.waste_kg_per_week > 5,
    ),
    Rule(
        "waste",
        "Avoid single-use plastics and carry reusable bags, bottles, and containers",
        0.20,
        3,
    ),
)


def rank_categories(breakdown: EmissionBreakdown) -> List[Tuple[str, float]]:
    """Categories by emission value, largest first. Ties keep CATEGORY_ORDER."""
    values = breakdown.by_category()
    return sorted(
        ((name, values[name]) for name in CATEGORY_ORDER),
        key=lambda pair: pair[1],
        reverse=True,
    )


def top_contributor(breakdown: EmissionBreakdown) -> str:
    return rank_categories(breakdown)[0][0]


def generate_recommendations(
    inputs: LifestyleInputs,
    breakdown: EmissionBreakdown,
    rules: Sequence[Rule] = RULES,
) -> List[RecommendationItem]:
    """
    Build the ranked suggestion list for one assessment.

    Returns at most MAX_RECOMMENDATIONS items ordered by priority ascending,
    then by potential reduction descending.
    """
    values = breakdown.by_category()
    top = top_contributor(breakdown)

    candidates: List[RecommendationItem] = []
    for rule in rules:
        value = values[rule.category]
        if value <= CATEGORY_THRESHOLDS[rule.category]:
            continue
        if not rule.applies(inputs):
            continue

        priority = rule.priority
        if rule.promote_if_top and rule.category == top and priority == 2:
            priority = 1

        candidates.append(
            RecommendationItem(
                category=rule.category,
                text=rule.text,
                potential_reduction=value * rule.fraction,
                priority=priority,
            )
        )

    candidates.sort(key=lambda item: (item.priority, -item.potential_reduction))
    return candidates[:MAX_RECOMMENDATIONS]


@dataclass(frozen=True)
class RecommendationSummary:
    top_contributor: str
    top_contributor_value: float
    combined_reduction: float
    tree_equivalent: int

    def to_dict(self) -> Dict[str, Any]:
        return {
            "top_contributor": self.top_contributor,
            "top_contributor_value": self.top_contributor_value,
            "combined_reduction": self.combined_reduction,
            "tree_equivalent": self.tree_equivalent,
        }


def summarize_recommendations(
    items: Sequence[RecommendationItem], breakdown: EmissionBreakdown
) -> RecommendationSummary:
    """Headline numbers: the biggest source and what the top three items could save."""
    name, value = rank_categories(breakdown)[0]
    combined = sum(item.potential_reduction for item in items[:3])
    return RecommendationSummary(
        top_contributor=name,
        top_contributor_value=value,
        combined_reduction=round_half_up(combined),
        tree_equivalent=int(round_half_up(combined / TREE_ABSORPTION_KG_PER_YEAR, 0)),
    )


def random_eco_tip(rng: Optional[random.Random] = None) -> str:
    return (rng or random).choice(ECO_TIPS)
