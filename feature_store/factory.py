"""
Store construction from configuration.
"""

import logging

from feature_store.base import HistoryStore, TrainingDataStore
from feature_store.config import StoreConfig
from feature_store.memory_store import InMemoryHistoryStore, InMemoryTrainingDataStore

logger = logging.getLogger(__name__)


def build_training_store(config: StoreConfig) -> TrainingDataStore:
    if config.backend == "postgres":
        from feature_store.postgres_store import PostgresTrainingDataStore

        return PostgresTrainingDataStore(config)
    logger.info("Using in-memory training data store")
    return InMemoryTrainingDataStore()


def build_history_store(config: StoreConfig) -> HistoryStore:
    if config.backend == "postgres":
        from feature_store.postgres_store import PostgresHistoryStore

        return PostgresHistoryStore(config)
    logger.info("Using in-memory history store")
    return InMemoryHistoryStore()
