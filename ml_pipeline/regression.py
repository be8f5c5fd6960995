"""
Linear regression fitted with full-batch gradient descent.

The model is deliberately small: no feature scaling, no regularisation, no
early stopping. Every call to `train` runs the full iteration budget from a
zero start, so the same dataset always yields the same parameters.

Parameters are published as one (weights, bias) tuple at the end of training,
which lets `predict` read a consistent snapshot while another thread trains.
"""

from typing import Sequence, Tuple

import numpy as np

from ml_pipeline.features import FEATURE_COLUMNS, TrainingDataPoint

DEFAULT_LEARNING_RATE = 0.0001
DEFAULT_ITERATIONS = 1000


class DimensionMismatchError(ValueError):
    """A feature vector's length disagrees with the model's weight vector."""


class LinearRegressionModel:
    def __init__(
        self,
        n_features: int = len(FEATURE_COLUMNS),
        learning_rate: float = DEFAULT_LEARNING_RATE,
        iterations: int = DEFAULT_ITERATIONS,
    ):
        self.learning_rate = learning_rate
        self.iterations = iterations
        self._params: Tuple[np.ndarray, float] = (np.zeros(n_features), 0.0)

    @property
    def weights(self) -> np.ndarray:
        return self._params[0].copy()

    @property
    def bias(self) -> float:
        return self._params[1]

    @property
    def n_features(self) -> int:
        return len(self._params[0])

    def is_finite(self) -> bool:
        weights, bias = self._params
        return bool(np.all(np.isfinite(weights)) and np.isfinite(bias))

    def train(self, points: Sequence[TrainingDataPoint]) -> None:
        """Fit on `points`. An empty dataset leaves the current parameters untouched."""
        if not points:
            return

        n_features = len(points[0].features)
        for point in points:
            if len(point.features) != n_features:
                raise DimensionMismatchError(
                    f"Training point has {len(point.features)} features, expected {n_features}"
                )

        X = np.asarray([p.features for p in points], dtype=float)
        y = np.asarray([p.target for p in points], dtype=float)
        n_samples = len(points)

        weights = np.zeros(n_features)
        bias = 0.0

        # Raw-magnitude features can overflow; divergence is reported via is_finite().
        with np.errstate(over="ignore", invalid="ignore"):
            for _ in range(self.iterations):
                errors = X @ weights + bias - y
                weight_gradients = X.T @ errors
                bias_gradient = errors.sum()

                weights = weights - self.learning_rate * (weight_gradients / n_samples)
                bias = bias - self.learning_rate * (bias_gradient / n_samples)

        self._params = (weights, float(bias))

    def predict(self, features: Sequence[float]) -> float:
        """bias + sum(w_i * x_i) for a single feature vector."""
        weights, bias = self._params
        if len(features) != len(weights):
            raise DimensionMismatchError(
                f"Expected {len(weights)} features, got {len(features)}"
            )
        with np.errstate(over="ignore", invalid="ignore"):
            return float(bias + np.dot(weights, np.asarray(features, dtype=float)))

    def predict_many(self, X: np.ndarray) -> np.ndarray:
        weights, bias = self._params
        X = np.asarray(X, dtype=float)
        if X.ndim != 2 or X.shape[1] != len(weights):
            raise DimensionMismatchError(
                f"Expected matrix with {len(weights)} columns, got shape {X.shape}"
            )
        with np.errstate(over="ignore", invalid="ignore"):
            return X @ weights + bias
