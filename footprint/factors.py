"""
Emission factor reference tables.

Pattern: Leaf Module (No project imports)

Coefficients convert activity quantities (km, kWh, kg, meals) into kg CO2e.
Lookups go through enumerated mappings with an explicit default so an
unrecognised mode or diet never silently produces zero emissions.
"""

from enum import Enum
from typing import Dict, Union

WEEKS_PER_YEAR = 52
MONTHS_PER_YEAR = 12

LOW_THRESHOLD = 4000.0
HIGH_THRESHOLD = 8000.0

SUSTAINABLE_TARGET = 2000.0
AVERAGE_FOOTPRINT = 6000.0


class TransportMode(str, Enum):
    CAR = "car"
    BUS = "bus"
    TRAIN = "train"
    BIKE = "bike"
    WALK = "walk"
    MOTORCYCLE = "motorcycle"
    ELECTRIC_CAR = "electric_car"


class DietType(str, Enum):
    VEGAN = "vegan"
    VEGETARIAN = "vegetarian"
    PESCATARIAN = "pescatarian"
    NON_VEGETARIAN = "non_vegetarian"


class EmissionCategory(str, Enum):
    LOW = "Low"
    MODERATE = "Moderate"
    HIGH = "High"


# kg CO2e per km travelled
TRANSPORT_FACTORS: Dict[TransportMode, float] = {
    TransportMode.CAR: 0.171,
    TransportMode.BUS: 0.089,
    TransportMode.TRAIN: 0.041,
    TransportMode.BIKE: 0.0,
    TransportMode.WALK: 0.0,
    TransportMode.MOTORCYCLE: 0.113,
    TransportMode.ELECTRIC_CAR: 0.053,
}
DEFAULT_TRANSPORT_MODE = TransportMode.CAR

ELECTRICITY_FACTOR = 0.475  # per kWh
LPG_FACTOR = 2.98  # per kg

# kg CO2e per year, before red meat
DIET_BASE_FACTORS: Dict[DietType, float] = {
    DietType.VEGAN: 1050.0,
    DietType.VEGETARIAN: 1500.0,
    DietType.PESCATARIAN: 1750.0,
    DietType.NON_VEGETARIAN: 2500.0,
}
DEFAULT_DIET_TYPE = DietType.VEGETARIAN

RED_MEAT_MEAL_FACTOR = 27.0  # per meal

WASTE_SEGREGATED_FACTOR = 0.45  # per kg
WASTE_UNSEGREGATED_FACTOR = 0.73  # per kg


def transport_factor(mode: Union[TransportMode, str]) -> float:
    """Factor for a transport mode; unknown modes use the car factor."""
    try:
        return TRANSPORT_FACTORS[TransportMode(mode)]
    except ValueError:
        return TRANSPORT_FACTORS[DEFAULT_TRANSPORT_MODE]


def diet_base_factor(diet_type: Union[DietType, str]) -> float:
    """Annual base emission for a diet; unknown diets use the vegetarian base."""
    try:
        return DIET_BASE_FACTORS[DietType(diet_type)]
    except ValueError:
        return DIET_BASE_FACTORS[DEFAULT_DIET_TYPE]


def waste_factor(segregated: bool) -> float:
    return WASTE_SEGREGATED_FACTOR if segregated else WASTE_UNSEGREGATED_FACTOR


def classify_emitter(total: float) -> EmissionCategory:
    """Map an annual total (kg CO2e) onto Low / Moderate / High."""
    if total < LOW_THRESHOLD:
        return EmissionCategory.LOW
    if total < HIGH_THRESHOLD:
        return EmissionCategory.MODERATE
    return EmissionCategory.HIGH
