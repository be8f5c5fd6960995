"""
Trend Prediction Service.

Pattern: Closed-loop ML feedback

Orchestrates lazy (re)training against a TrainingDataStore and turns the
fitted regression into a short-term trend estimate.

Projection naming: `predicted_emissions_1year` is the model's output for the
unchanged ("stable") scenario and `predicted_emissions_2year` its output for
the "increasing" scenario (transport x1.1, energy x1.05, waste x1.05). They
are two scenarios evaluated today, not two simulated time horizons.

The confidence score is an illustrative draw in [0.75, 0.90). It is not
derived from the fit quality of the model.
"""

import math
import time
from dataclasses import dataclass
from enum import Enum
from threading import Lock
from typing import Any, Dict, List, Optional, Union

import numpy as np
import structlog

from footprint.calculator import round_half_up
from footprint.factors import DietType
from footprint.models import EmissionBreakdown, LifestyleInputs
from feature_store.base import StoreResult, TrainingDataStore, TrainingRecord
from ml_pipeline.config import MLConfig
from ml_pipeline.features import (
    annualize_inputs,
    build_feature_vector,
    prepare_training_data,
    training_record_from_assessment,
)
from ml_pipeline.synthetic import generate_synthetic_records
from ml_pipeline.training import RegressionEngine
from monitoring.metrics import (
    PREDICTION_COUNT,
    PREDICTION_LATENCY,
    STORE_FAILURES,
    TRAINING_DURATION,
    TRAINING_RUNS,
    TRAINING_SET_SIZE,
)

logger = structlog.get_logger(__name__)

TRANSPORT_GROWTH = 1.1
ENERGY_GROWTH = 1.05
WASTE_GROWTH = 1.05

INCREASING_THRESHOLD = 1.1
DECREASING_THRESHOLD = 0.9

CONFIDENCE_RANGE = (0.75, 0.90)


class TrendDirection(str, Enum):
    INCREASING = "increasing"
    STABLE = "stable"
    DECREASING = "decreasing"


@dataclass(frozen=True)
class MLPrediction:
    predicted_emissions_1year: float
    predicted_emissions_2year: float
    confidence_score: float
    trend_direction: TrendDirection
    trained: bool = True

    @property
    def is_finite(self) -> bool:
        """False when the model diverged and the projections are unusable."""
        return math.isfinite(self.predicted_emissions_1year) and math.isfinite(
            self.predicted_emissions_2year
        )

    @property
    def is_usable(self) -> bool:
        """True when the projections came from a trained, non-diverged model."""
        return self.trained and self.is_finite

    def to_dict(self) -> Dict[str, Any]:
        return {
            "predicted_emissions_1year": self.predicted_emissions_1year,
            "predicted_emissions_2year": self.predicted_emissions_2year,
            "confidence_score": self.confidence_score,
            "trend_direction": self.trend_direction.value,
        }


def classify_trend(current_total: float, projected: float) -> TrendDirection:
    if projected > current_total * INCREASING_THRESHOLD:
        return TrendDirection.INCREASING
    if projected < current_total * DECREASING_THRESHOLD:
        return TrendDirection.DECREASING
    return TrendDirection.STABLE


class PredictionService:
    """
    Lazily trained trend predictor.

    Training happens on first use and again after enough new observations
    have been recorded. Store failures are logged and counted; they never
    propagate out of this service.
    """

    def __init__(
        self,
        store: TrainingDataStore,
        engine: Optional[RegressionEngine] = None,
        config: Optional[MLConfig] = None,
        rng: Optional[np.random.Generator] = None,
    ):
        self._config = config or MLConfig.default()
        self._store = store
        self._engine = engine if engine is not None else RegressionEngine(self._config)
        self._rng = rng if rng is not None else np.random.default_rng(self._config.random_seed)
        self._lock = Lock()
        # Counters only; never held while training.
        self._counter_lock = Lock()
        self._stale = False
        self._new_points = 0

    @property
    def engine(self) -> RegressionEngine:
        return self._engine

    @property
    def store(self) -> TrainingDataStore:
        return self._store

    @property
    def is_stale(self) -> bool:
        return self._stale

    def _needs_training(self, force: bool) -> bool:
        return force or self._stale or not self._engine.is_trained

    def _record_store_failure(self, result: StoreResult) -> None:
        STORE_FAILURES.labels(store=self._store.name, operation=result.operation).inc()
        logger.warning(
            "store_operation_failed",
            store=self._store.name,
            operation=result.operation,
            error=result.error,
        )

    def ensure_trained(self, force: bool = False) -> bool:
        """
        Train if the model is untrained, stale, or `force` is set.

        Returns True when a usable (trained) model is in place afterwards.
        """
        if not self._needs_training(force):
            return True

        with self._lock:
            if not self._needs_training(force):
                return True

            with self._counter_lock:
                seen = self._new_points

            records = self._load_training_records()
            if records is None:
                TRAINING_RUNS.labels(outcome="failed").inc()
                return self._engine.is_trained

            synthetic_count = sum(1 for r in records if r.is_synthetic)
            points = prepare_training_data(records)
            result = self._engine.train(points, synthetic_samples=synthetic_count)
            if result is None:
                TRAINING_RUNS.labels(outcome="skipped").inc()
                return self._engine.is_trained

            TRAINING_RUNS.labels(outcome="diverged" if result.diverged else "trained").inc()
            TRAINING_DURATION.observe(result.training_duration_seconds)
            TRAINING_SET_SIZE.labels(source="stored").set(len(points) - synthetic_count)
            TRAINING_SET_SIZE.labels(source="synthetic").set(synthetic_count)

            with self._counter_lock:
                # Observations recorded while training count towards the next run.
                self._new_points -= seen
                self._stale = self._new_points >= self._config.retrain_after_new_points
            return True

    def _load_training_records(self) -> Optional[List[TrainingRecord]]:
        """
        Fetch history, augmenting with synthetic points when it is too thin.
        Returns None when the store cannot be read at all.
        """
        limit = self._config.fetch_limit
        fetched = self._store.fetch_recent(limit)
        if not fetched.ok:
            self._record_store_failure(fetched)
            return None

        records = list(fetched.records)
        if len(records) >= self._config.min_training_points:
            return records

        logger.info(
            "training_data_insufficient",
            available=len(records),
            required=self._config.min_training_points,
            generating=self._config.synthetic_batch_size,
        )
        synthetic = generate_synthetic_records(self._config.synthetic_batch_size, self._rng)

        appended = self._store.append_batch(synthetic)
        if appended.ok:
            # One retry only; a store that still comes back short is not re-queried.
            refetched = self._store.fetch_recent(limit)
            if refetched.ok and len(refetched.records) >= self._config.min_training_points:
                return list(refetched.records)
            if not refetched.ok:
                self._record_store_failure(refetched)
        else:
            self._record_store_failure(appended)

        logger.warning("training_on_local_synthetic", stored=len(records), synthetic=len(synthetic))
        return records + synthetic

    def predict_future(
        self,
        current_total: float,
        annual_transport_km: float,
        annual_energy_units: float,
        diet_type: Union[DietType, str],
        annual_waste_kg: float,
    ) -> MLPrediction:
        start = time.perf_counter()
        try:
            trained = self.ensure_trained()

            stable = build_feature_vector(
                annual_transport_km, annual_energy_units, diet_type, annual_waste_kg
            )
            increasing = build_feature_vector(
                annual_transport_km * TRANSPORT_GROWTH,
                annual_energy_units * ENERGY_GROWTH,
                diet_type,
                annual_waste_kg * WASTE_GROWTH,
            )

            one_year = self._engine.predict(stable)
            two_year = self._engine.predict(increasing)
            trend = classify_trend(current_total, two_year)
            confidence = float(self._rng.uniform(*CONFIDENCE_RANGE))

            prediction = MLPrediction(
                predicted_emissions_1year=round_half_up(one_year),
                predicted_emissions_2year=round_half_up(two_year),
                confidence_score=round_half_up(confidence),
                trend_direction=trend,
                trained=trained,
            )
        except Exception:
            PREDICTION_LATENCY.labels(status="error").observe(time.perf_counter() - start)
            raise

        PREDICTION_LATENCY.labels(status="success").observe(time.perf_counter() - start)
        PREDICTION_COUNT.labels(
            trend=trend.value if prediction.is_usable else "degraded"
        ).inc()
        if not trained:
            logger.warning("prediction_untrained_model", store=self._store.name)
        elif not prediction.is_finite:
            logger.warning("prediction_not_finite", trend=trend.value)
        return prediction

    def predict_for_inputs(
        self, inputs: LifestyleInputs, breakdown: EmissionBreakdown
    ) -> MLPrediction:
        annual = annualize_inputs(inputs)
        return self.predict_future(
            breakdown.total,
            annual["transport_km"],
            annual["energy_units"],
            inputs.diet_type,
            annual["waste_kg"],
        )

    def record_observation(
        self, inputs: LifestyleInputs, breakdown: EmissionBreakdown
    ) -> StoreResult:
        """Append a user-submitted assessment to the training data."""
        result = self._store.append_one(training_record_from_assessment(inputs, breakdown))
        if not result.ok:
            self._record_store_failure(result)
            return result

        with self._counter_lock:
            self._new_points += 1
            if self._new_points >= self._config.retrain_after_new_points:
                self._stale = True
        return result

    def health(self) -> Dict[str, Any]:
        last = self._engine.last_result
        return {
            "model_trained": self._engine.is_trained,
            "stale": self._stale,
            "new_points_since_training": self._new_points,
            "store": self._store.name,
            "store_healthy": self._store.is_healthy(),
            "last_training": last.to_dict() if last else None,
        }
