"""
Footprint Monitoring Package.
"""

from .metrics import (
    FOOTPRINT_ASSESSMENTS,
    PREDICTION_COUNT,
    PREDICTION_LATENCY,
    RECOMMENDATIONS_ISSUED,
    STORE_FAILURES,
    TRAINING_DURATION,
    TRAINING_RUNS,
    TRAINING_SET_SIZE,
)

__all__ = [
    "FOOTPRINT_ASSESSMENTS",
    "PREDICTION_COUNT",
    "PREDICTION_LATENCY",
    "RECOMMENDATIONS_ISSUED",
    "STORE_FAILURES",
    "TRAINING_DURATION",
    "TRAINING_RUNS",
    "TRAINING_SET_SIZE",
]
