from pathlib import Path
from typing import Any, Callable

import pytest
from dotenv import load_dotenv

from feature_store.memory_store import InMemoryHistoryStore, InMemoryTrainingDataStore
from footprint.models import LifestyleInputs
from ml_pipeline.config import MLConfig


@pytest.fixture(scope="session", autouse=True)
def load_env():
    """
    Load tests/.env.test (if present) into the process environment
    before any tests run.
    """
    env_path = Path(__file__).parent / ".env.test"
    if env_path.exists():
        load_dotenv(dotenv_path=env_path)


@pytest.fixture
def high_impact_inputs() -> LifestyleInputs:
    """Car commuter, heavy red-meat diet: lands in the High band."""
    return LifestyleInputs(
        transport_km_per_week=100,
        transport_mode="car",
        energy_kwh_per_month=300,
        lpg_kg_per_month=0,
        diet_type="non_vegetarian",
        red_meat_meals_per_week=5,
        waste_kg_per_week=10,
        waste_segregated=False,
    )


@pytest.fixture
def low_impact_inputs() -> LifestyleInputs:
    return LifestyleInputs(
        transport_km_per_week=50,
        transport_mode="bike",
        energy_kwh_per_month=100,
        lpg_kg_per_month=0,
        diet_type="vegan",
        red_meat_meals_per_week=0,
        waste_kg_per_week=2,
        waste_segregated=True,
    )


@pytest.fixture
def make_config() -> Callable[..., MLConfig]:
    """Environment-independent MLConfig with per-test overrides."""

    def _make(**overrides: Any) -> MLConfig:
        values = dict(
            learning_rate=0.0001,
            iterations=1000,
            min_training_points=10,
            synthetic_batch_size=100,
            fetch_limit=1000,
            retrain_after_new_points=50,
            random_seed=42,
            tracking_enabled=False,
            mlflow_tracking_uri="http://mock:5000",
            mlflow_experiment_name="test_exp",
            model_name="test_model",
        )
        values.update(overrides)
        return MLConfig(**values)

    return _make


@pytest.fixture
def training_store() -> InMemoryTrainingDataStore:
    return InMemoryTrainingDataStore()


@pytest.fixture
def history_store() -> InMemoryHistoryStore:
    return InMemoryHistoryStore()
