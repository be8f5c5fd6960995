"""
ML Training Orchestrator.
Bridge between the training-data store and the trend regression.
"""

import sys

import structlog

from feature_store.config import StoreConfig
from feature_store.factory import build_training_store
from ml_pipeline.config import MLConfig
from ml_pipeline.prediction import PredictionService

logger = structlog.get_logger()


def main():
    config = MLConfig.from_env()
    store_config = StoreConfig.from_env()
    store = build_training_store(store_config)

    try:
        # 1. Open the store
        store.connect()
        logger.info("store_connected", backend=store_config.backend)

        # 2. Force a training run (bootstraps synthetic data if history is thin)
        service = PredictionService(store, config=config)
        if not service.ensure_trained(force=True):
            logger.error("training_failed", reason="no_usable_model")
            sys.exit(1)

        result = service.engine.last_result
        if result is None:
            logger.error("training_failed", reason="no_training_result")
            sys.exit(1)

        if result.diverged:
            logger.warning(
                "training_diverged",
                learning_rate=config.learning_rate,
                iterations=config.iterations,
            )
        else:
            logger.info(
                "training_complete",
                samples=result.training_samples,
                synthetic=result.synthetic_samples,
                mae=f"{result.train_mae:.2f}",
                r2=f"{result.r2_score:.4f}",
            )

    except Exception as e:
        logger.error("orchestration_failed", error=str(e))
        sys.exit(1)
    finally:
        store.close()


if __name__ == "__main__":
    main()
