"""
Feature Store module.

Pattern:
Semantic Interface
Typed Results at the I/O boundary

Training-data and assessment-history stores behind one interface, with
in-memory and PostgreSQL implementations.
"""

from feature_store.base import (
    HistoryStore,
    StoreResult,
    TrainingDataStore,
    TrainingRecord,
)
from feature_store.config import StoreConfig
from feature_store.factory import build_history_store, build_training_store
from feature_store.memory_store import InMemoryHistoryStore, InMemoryTrainingDataStore

__all__ = [
    "HistoryStore",
    "InMemoryHistoryStore",
    "InMemoryTrainingDataStore",
    "StoreConfig",
    "StoreResult",
    "TrainingDataStore",
    "TrainingRecord",
    "build_history_store",
    "build_training_store",
]
