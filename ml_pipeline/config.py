"""
ML Pipeline configuration.
Default hyperparameters overflow on raw (unscaled) annual activity features;
lower LEARNING_RATE (e.g. 0.000001) for a finite fit.
"""

import os
from dataclasses import dataclass, field
from typing import List, Optional

from ml_pipeline.features import FEATURE_COLUMNS


@dataclass(frozen=True)
class MLConfig:
    """Configuration for regression training and trend prediction."""

    learning_rate: float
    iterations: int

    min_training_points: int
    synthetic_batch_size: int
    fetch_limit: int
    retrain_after_new_points: int
    random_seed: Optional[int]

    tracking_enabled: bool
    mlflow_tracking_uri: str
    mlflow_experiment_name: str
    model_name: str

    # Model input schema; fixed by the feature encoder, not configurable.
    feature_columns: List[str] = field(default_factory=lambda: list(FEATURE_COLUMNS))

    @property
    def feature_count(self) -> int:
        return len(self.feature_columns)

    @classmethod
    def from_env(cls) -> "MLConfig":
        """Load configuration from environment variables."""

        seed_env = os.environ.get("RANDOM_SEED")

        return cls(
            learning_rate=float(os.environ.get("LEARNING_RATE", "0.0001")),
            iterations=int(os.environ.get("TRAINING_ITERATIONS", "1000")),
            min_training_points=int(os.environ.get("MIN_TRAINING_POINTS", "10")),
            synthetic_batch_size=int(os.environ.get("SYNTHETIC_BATCH_SIZE", "100")),
            fetch_limit=int(os.environ.get("TRAINING_FETCH_LIMIT", "1000")),
            retrain_after_new_points=int(os.environ.get("RETRAIN_AFTER_NEW_POINTS", "50")),
            random_seed=int(seed_env) if seed_env else None,
            tracking_enabled=os.environ.get("MLFLOW_TRACKING_ENABLED", "false").lower()
            in {"1", "true", "yes"},
            mlflow_tracking_uri=os.environ.get("MLFLOW_TRACKING_URI", "http://mlflow:5000"),
            mlflow_experiment_name=os.environ.get(
                "MLFLOW_EXPERIMENT_NAME", "footprint-trend-regression"
            ),
            model_name=os.environ.get("MODEL_NAME", "footprint-trend-regressor"),
        )

    @classmethod
    def default(cls) -> "MLConfig":
        """Default configuration for local development."""
        return cls.from_env()
