"""
Synthetic training data for bootstrapping the trend model.

Used only when the store holds too little real history. The target follows
a fixed linear formula plus uniform noise, floored at 1000 kg CO2e.
"""

from typing import List, Optional

import numpy as np

from footprint.calculator import round_half_up
from footprint.factors import DietType, classify_emitter
from feature_store.base import TrainingRecord
from ml_pipeline.features import encode_diet_type

DIET_CHOICES = (
    DietType.VEGAN,
    DietType.VEGETARIAN,
    DietType.PESCATARIAN,
    DietType.NON_VEGETARIAN,
)

TRANSPORT_KM_RANGE = (50.0, 550.0)
ENERGY_UNITS_RANGE = (100.0, 500.0)
WASTE_KG_RANGE = (5.0, 25.0)
NOISE_RANGE = (-250.0, 250.0)
MIN_TARGET = 1000.0

TRANSPORT_COEF = 8.892
ENERGY_COEF = 5.7
DIET_COEF = 625.0
WASTE_COEF = 23.4


def synthetic_target(transport_km: float, energy_units: float, diet_type: str, waste_kg: float) -> float:
    """Noise-free target for one synthetic point."""
    return (
        transport_km * TRANSPORT_COEF
        + energy_units * ENERGY_COEF
        + encode_diet_type(diet_type) * DIET_COEF
        + waste_kg * WASTE_COEF
    )


def generate_synthetic_records(
    count: int, rng: Optional[np.random.Generator] = None
) -> List[TrainingRecord]:
    rng = rng if rng is not None else np.random.default_rng()
    records: List[TrainingRecord] = []

    for _ in range(count):
        transport_km = rng.uniform(*TRANSPORT_KM_RANGE)
        energy_units = rng.uniform(*ENERGY_UNITS_RANGE)
        diet_type = DIET_CHOICES[int(rng.integers(len(DIET_CHOICES)))].value
        waste_kg = rng.uniform(*WASTE_KG_RANGE)

        noise = rng.uniform(*NOISE_RANGE)
        total = round_half_up(
            max(MIN_TARGET, synthetic_target(transport_km, energy_units, diet_type, waste_kg) + noise)
        )

        records.append(
            TrainingRecord(
                transport_km=round_half_up(transport_km),
                energy_units=round_half_up(energy_units),
                diet_type=diet_type,
                waste_kg=round_half_up(waste_kg),
                total_emission=total,
                emission_category=classify_emitter(total).value,
                is_synthetic=True,
            )
        )

    return records
