"""
Regression Training Engine.

Pattern: Injectable Model Context

Owns one LinearRegressionModel plus its trained flag. Callers construct and
pass an engine explicitly, so independent engines never share weights.
Training runs are serialised by a writer lock; predictions read the model's
published parameter snapshot and never wait on training.
"""

import math
import time
from dataclasses import dataclass, field
from datetime import datetime, timezone
from threading import Lock
from typing import Dict, List, Optional, Sequence

import numpy as np
import structlog
from sklearn.metrics import mean_absolute_error, mean_squared_error, r2_score

from ml_pipeline.config import MLConfig
from ml_pipeline.features import FEATURE_COLUMNS, TrainingDataPoint
from ml_pipeline.regression import LinearRegressionModel

logger = structlog.get_logger(__name__)


@dataclass
class TrainingResult:
    """Detailed results of a training run."""

    model_version: str
    training_samples: int
    train_mae: float
    train_rmse: float
    r2_score: float
    weights: Dict[str, float]
    bias: float
    diverged: bool
    training_duration_seconds: float
    synthetic_samples: int = 0
    run_id: Optional[str] = None
    feature_columns: List[str] = field(default_factory=lambda: list(FEATURE_COLUMNS))

    def to_dict(self) -> Dict[str, object]:
        return {
            "model_version": self.model_version,
            "training_samples": self.training_samples,
            "synthetic_samples": self.synthetic_samples,
            "train_mae": _finite_or_none(self.train_mae),
            "train_rmse": _finite_or_none(self.train_rmse),
            "r2_score": _finite_or_none(self.r2_score),
            "weights": {k: _finite_or_none(v) for k, v in self.weights.items()},
            "bias": _finite_or_none(self.bias),
            "diverged": self.diverged,
            "training_duration_seconds": self.training_duration_seconds,
            "run_id": self.run_id,
        }


def _finite_or_none(value: float) -> Optional[float]:
    return value if math.isfinite(value) else None


class RegressionEngine:
    """Trainable trend model with explicit lifecycle: Untrained -> Trained."""

    def __init__(self, config: Optional[MLConfig] = None, registry=None):
        self._config = config or MLConfig.default()
        self._model = LinearRegressionModel(
            n_features=self._config.feature_count,
            learning_rate=self._config.learning_rate,
            iterations=self._config.iterations,
        )
        self._registry = registry
        if self._registry is None and self._config.tracking_enabled:
            from ml_pipeline.registry import ModelRegistry

            self._registry = ModelRegistry(self._config)

        self._lock = Lock()
        self._trained = False
        self._last_result: Optional[TrainingResult] = None

    @property
    def is_trained(self) -> bool:
        return self._trained

    @property
    def model(self) -> LinearRegressionModel:
        return self._model

    @property
    def last_result(self) -> Optional[TrainingResult]:
        return self._last_result

    def train(
        self, points: Sequence[TrainingDataPoint], synthetic_samples: int = 0
    ) -> Optional[TrainingResult]:
        """
        Fit the model on the full batch. Returns None (and changes nothing)
        for an empty dataset.
        """
        if not points:
            logger.warning("training_skipped", reason="empty_dataset")
            return None

        with self._lock:
            start_time = time.time()
            self._model.train(points)
            duration = time.time() - start_time

            diverged = not self._model.is_finite()
            X = np.asarray([p.features for p in points], dtype=float)
            y = np.asarray([p.target for p in points], dtype=float)

            if diverged:
                logger.warning(
                    "training_diverged",
                    samples=len(points),
                    learning_rate=self._model.learning_rate,
                    iterations=self._model.iterations,
                )
                mae = rmse = r2 = float("nan")
            else:
                predictions = self._model.predict_many(X)
                mae = float(mean_absolute_error(y, predictions))
                rmse = float(np.sqrt(mean_squared_error(y, predictions)))
                r2 = float(r2_score(y, predictions)) if len(points) > 1 else float("nan")

            trained_at = datetime.now(timezone.utc)
            columns = list(self._config.feature_columns)
            weights = self._model.weights
            result = TrainingResult(
                model_version=trained_at.strftime("%Y%m%d_%H%M%S"),
                training_samples=len(points),
                train_mae=mae,
                train_rmse=rmse,
                r2_score=r2,
                weights={
                    columns[i] if i < len(columns) else f"feature_{i}": float(w)
                    for i, w in enumerate(weights)
                },
                bias=self._model.bias,
                diverged=diverged,
                training_duration_seconds=duration,
                synthetic_samples=synthetic_samples,
                feature_columns=columns,
            )

            self._trained = True
            self._last_result = result

        logger.info(
            "model_trained",
            version=result.model_version,
            samples=result.training_samples,
            synthetic=synthetic_samples,
            mae=None if diverged else round(mae, 2),
            diverged=diverged,
        )

        if self._registry is not None:
            self._track(result)

        return result

    def _track(self, result: TrainingResult) -> None:
        params = {
            "learning_rate": self._model.learning_rate,
            "iterations": self._model.iterations,
            "training_samples": result.training_samples,
            "synthetic_samples": result.synthetic_samples,
        }
        metrics = {
            k: v
            for k, v in {
                "train_mae": result.train_mae,
                "train_rmse": result.train_rmse,
                "r2_score": result.r2_score,
            }.items()
            if math.isfinite(v)
        }
        try:
            result.run_id = self._registry.log_training_run(
                params=params,
                metrics=metrics,
                coefficients=result.to_dict()["weights"],
            )
        except Exception as e:
            # Tracking is best-effort; the fitted model stays in service.
            logger.warning("training_tracking_failed", error=str(e))

    def predict(self, features: Sequence[float]) -> float:
        return self._model.predict(features)
