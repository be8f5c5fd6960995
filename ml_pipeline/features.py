"""
Feature encoding for the trend regression.

Pattern: Training-Serving Consistency

The same encoding is applied to stored training rows and to live prediction
requests: [annual transport km, annual energy units, diet ordinal, annual waste kg].
"""

from dataclasses import dataclass
from typing import Dict, List, Sequence, Tuple, Union

import pandas as pd
import structlog

from footprint.factors import MONTHS_PER_YEAR, WEEKS_PER_YEAR, DietType
from footprint.models import EmissionBreakdown, LifestyleInputs
from feature_store.base import TrainingRecord

logger = structlog.get_logger(__name__)

FEATURE_COLUMNS: Tuple[str, ...] = ("transport_km", "energy_units", "diet_ordinal", "waste_kg")
TARGET_COLUMN = "total_emission"

DIET_ORDINALS: Dict[DietType, int] = {
    DietType.VEGAN: 1,
    DietType.VEGETARIAN: 2,
    DietType.PESCATARIAN: 3,
    DietType.NON_VEGETARIAN: 4,
}
DEFAULT_DIET_ORDINAL = DIET_ORDINALS[DietType.VEGETARIAN]


@dataclass(frozen=True)
class TrainingDataPoint:
    features: Tuple[float, ...]
    target: float


def encode_diet_type(diet_type: Union[DietType, str]) -> int:
    """Ordinal for a diet; unrecognised values encode as vegetarian (2)."""
    try:
        return DIET_ORDINALS[DietType(diet_type)]
    except ValueError:
        return DEFAULT_DIET_ORDINAL


def build_feature_vector(
    annual_transport_km: float,
    annual_energy_units: float,
    diet_type: Union[DietType, str],
    annual_waste_kg: float,
) -> Tuple[float, ...]:
    return (
        float(annual_transport_km),
        float(annual_energy_units),
        float(encode_diet_type(diet_type)),
        float(annual_waste_kg),
    )


def annualize_inputs(inputs: LifestyleInputs) -> Dict[str, float]:
    """Weekly/monthly form quantities scaled to the yearly units the model is trained on."""
    return {
        "transport_km": inputs.transport_km_per_week * WEEKS_PER_YEAR,
        "energy_units": inputs.energy_kwh_per_month * MONTHS_PER_YEAR,
        "waste_kg": inputs.waste_kg_per_week * WEEKS_PER_YEAR,
    }


def training_record_from_assessment(
    inputs: LifestyleInputs, breakdown: EmissionBreakdown
) -> TrainingRecord:
    annual = annualize_inputs(inputs)
    return TrainingRecord(
        transport_km=annual["transport_km"],
        energy_units=annual["energy_units"],
        diet_type=str(getattr(inputs.diet_type, "value", inputs.diet_type)),
        waste_kg=annual["waste_kg"],
        total_emission=breakdown.total,
        emission_category=breakdown.category.value,
        is_synthetic=False,
    )


def prepare_training_data(records: Sequence[TrainingRecord]) -> List[TrainingDataPoint]:
    """
    Validate stored rows and encode them into training points.

    Raises ValueError on non-numeric feature or target values instead of
    coercing them to 0. Rows with missing values are dropped.
    """
    if not records:
        return []

    df = pd.DataFrame([r.to_dict() for r in records])

    for col in ("transport_km", "energy_units", "waste_kg", TARGET_COLUMN):
        try:
            df[col] = pd.to_numeric(df[col], errors="raise")
        except (ValueError, TypeError) as e:
            logger.error("data_type_mismatch", column=col, error=str(e))
            raise ValueError(f"Column {col} contains non-numeric data.") from e

    df["diet_ordinal"] = df["diet_type"].map(encode_diet_type)

    columns = list(FEATURE_COLUMNS) + [TARGET_COLUMN]
    complete = df.dropna(subset=columns)
    dropped = len(df) - len(complete)
    if dropped:
        logger.warning("incomplete_rows_dropped", dropped=dropped, kept=len(complete))

    X = complete[list(FEATURE_COLUMNS)].to_numpy(dtype=float)
    y = complete[TARGET_COLUMN].to_numpy(dtype=float)

    return [
        TrainingDataPoint(features=tuple(float(v) for v in row), target=float(target))
        for row, target in zip(X, y)
    ]
