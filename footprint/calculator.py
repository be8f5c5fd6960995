"""
Footprint Calculator.

Deterministic mapping from lifestyle inputs to an annual emission breakdown.
No I/O and no shared state: safe to call from any number of callers.
"""

import math
from dataclasses import dataclass
from typing import Any, Dict

from footprint.factors import (
    AVERAGE_FOOTPRINT,
    ELECTRICITY_FACTOR,
    LPG_FACTOR,
    MONTHS_PER_YEAR,
    RED_MEAT_MEAL_FACTOR,
    SUSTAINABLE_TARGET,
    WEEKS_PER_YEAR,
    classify_emitter,
    diet_base_factor,
    transport_factor,
    waste_factor,
)
from footprint.models import EmissionBreakdown, LifestyleInputs


def round_half_up(value: float, places: int = 2) -> float:
    """
    Round on the scaled value with ties going up (0.125 -> 0.13, -2.5 -> -2 at 0 places).
    Non-finite values pass through untouched.
    """
    if not math.isfinite(value):
        return value
    scale = 10**places
    return math.floor(value * scale + 0.5) / scale


def transport_emissions(inputs: LifestyleInputs) -> float:
    return inputs.transport_km_per_week * WEEKS_PER_YEAR * transport_factor(inputs.transport_mode)


def energy_emissions(inputs: LifestyleInputs) -> float:
    electricity = inputs.energy_kwh_per_month * MONTHS_PER_YEAR * ELECTRICITY_FACTOR
    lpg = inputs.lpg_kg_per_month * MONTHS_PER_YEAR * LPG_FACTOR
    return electricity + lpg


def diet_emissions(inputs: LifestyleInputs) -> float:
    # Red meat is additive for every diet type, not only the ones the form asks about.
    red_meat = inputs.red_meat_meals_per_week * WEEKS_PER_YEAR * RED_MEAT_MEAL_FACTOR
    return diet_base_factor(inputs.diet_type) + red_meat


def waste_emissions(inputs: LifestyleInputs) -> float:
    return inputs.waste_kg_per_week * WEEKS_PER_YEAR * waste_factor(inputs.waste_segregated)


def calculate_footprint(inputs: LifestyleInputs) -> EmissionBreakdown:
    """Compute the annual CO2e breakdown for one set of lifestyle inputs."""
    transport = transport_emissions(inputs)
    energy = energy_emissions(inputs)
    diet = diet_emissions(inputs)
    waste = waste_emissions(inputs)

    total = round_half_up(transport + energy + diet + waste)

    return EmissionBreakdown(
        transport=round_half_up(transport),
        energy=round_half_up(energy),
        diet=round_half_up(diet),
        waste=round_half_up(waste),
        total=total,
        category=classify_emitter(total),
    )


@dataclass(frozen=True)
class BenchmarkComparison:
    """Position of a footprint relative to the reference footprints."""

    total: float
    sustainable_target: float
    average_footprint: float
    gap_to_target: float
    gap_to_average: float
    percent_of_average: float

    def to_dict(self) -> Dict[str, Any]:
        return {
            "total": self.total,
            "sustainable_target": self.sustainable_target,
            "average_footprint": self.average_footprint,
            "gap_to_target": self.gap_to_target,
            "gap_to_average": self.gap_to_average,
            "percent_of_average": self.percent_of_average,
        }


def compare_to_benchmarks(breakdown: EmissionBreakdown) -> BenchmarkComparison:
    total = breakdown.total
    return BenchmarkComparison(
        total=total,
        sustainable_target=SUSTAINABLE_TARGET,
        average_footprint=AVERAGE_FOOTPRINT,
        gap_to_target=round_half_up(total - SUSTAINABLE_TARGET),
        gap_to_average=round_half_up(total - AVERAGE_FOOTPRINT),
        percent_of_average=round_half_up(total / AVERAGE_FOOTPRINT * 100),
    )
