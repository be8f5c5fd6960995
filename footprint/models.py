"""
Value objects exchanged with the calculator and recommender.
Frozen so a calculation can never mutate the caller's inputs.
"""

from dataclasses import dataclass
from typing import Any, Dict

from footprint.factors import EmissionCategory


@dataclass(frozen=True)
class LifestyleInputs:
    """
    Self-reported lifestyle for a single assessment.

    Range validation belongs to the input form; the engine trusts these values.
    """

    transport_km_per_week: float
    transport_mode: str
    energy_kwh_per_month: float
    lpg_kg_per_month: float
    diet_type: str
    red_meat_meals_per_week: int
    waste_kg_per_week: float
    waste_segregated: bool

    def to_dict(self) -> Dict[str, Any]:
        return {
            "transport_km_per_week": self.transport_km_per_week,
            "transport_mode": str(getattr(self.transport_mode, "value", self.transport_mode)),
            "energy_kwh_per_month": self.energy_kwh_per_month,
            "lpg_kg_per_month": self.lpg_kg_per_month,
            "diet_type": str(getattr(self.diet_type, "value", self.diet_type)),
            "red_meat_meals_per_week": self.red_meat_meals_per_week,
            "waste_kg_per_week": self.waste_kg_per_week,
            "waste_segregated": self.waste_segregated,
        }


@dataclass(frozen=True)
class EmissionBreakdown:
    """Annual emissions per category in kg CO2e, rounded to 2 decimals."""

    transport: float
    energy: float
    diet: float
    waste: float
    total: float
    category: EmissionCategory

    def by_category(self) -> Dict[str, float]:
        return {
            "transport": self.transport,
            "energy": self.energy,
            "diet": self.diet,
            "waste": self.waste,
        }

    def to_dict(self) -> Dict[str, Any]:
        result: Dict[str, Any] = self.by_category()
        result["total"] = self.total
        result["category"] = self.category.value
        return result


@dataclass(frozen=True)
class RecommendationItem:
    category: str
    text: str
    potential_reduction: float
    priority: int

    def to_dict(self) -> Dict[str, Any]:
        return {
            "category": self.category,
            "text": self.text,
            "potential_reduction": self.potential_reduction,
            "priority": self.priority,
        }
