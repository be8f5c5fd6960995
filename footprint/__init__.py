"""
Footprint module.

Pattern: Pure Core

Emission factor tables, the annual footprint calculator and the rule-based
recommendation engine. Nothing here performs I/O.
"""

from footprint.calculator import (
    BenchmarkComparison,
    calculate_footprint,
    compare_to_benchmarks,
    round_half_up,
)
from footprint.factors import DietType, EmissionCategory, TransportMode, classify_emitter
from footprint.models import EmissionBreakdown, LifestyleInputs, RecommendationItem
from footprint.recommendations import (
    RecommendationSummary,
    generate_recommendations,
    random_eco_tip,
    summarize_recommendations,
)

__all__ = [
    "BenchmarkComparison",
    "DietType",
    "EmissionBreakdown",
    "EmissionCategory",
    "LifestyleInputs",
    "RecommendationItem",
    "RecommendationSummary",
    "TransportMode",
    "calculate_footprint",
    "classify_emitter",
    "compare_to_benchmarks",
    "generate_recommendations",
    "random_eco_tip",
    "round_half_up",
    "summarize_recommendations",
]
