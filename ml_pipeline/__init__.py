"""
ML Pipeline module.

Pattern: ML Reproducibility

Trend regression for annual emissions:
- deterministic full-batch gradient descent on a linear model
- synthetic bootstrap data when real history is thin
- MLflow for optional experiment tracking
"""

from ml_pipeline.config import MLConfig
from ml_pipeline.features import TrainingDataPoint, encode_diet_type, prepare_training_data
from ml_pipeline.prediction import MLPrediction, PredictionService, TrendDirection
from ml_pipeline.regression import DimensionMismatchError, LinearRegressionModel
from ml_pipeline.synthetic import generate_synthetic_records
from ml_pipeline.training import RegressionEngine, TrainingResult

__all__ = [
    "MLConfig",
    "TrainingDataPoint",
    "encode_diet_type",
    "prepare_training_data",
    "MLPrediction",
    "PredictionService",
    "TrendDirection",
    "DimensionMismatchError",
    "LinearRegressionModel",
    "generate_synthetic_records",
    "RegressionEngine",
    "TrainingResult",
]
