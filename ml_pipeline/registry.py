import mlflow
import structlog

from ml_pipeline.config import MLConfig

logger = structlog.get_logger()


class ModelRegistry:
    """MLflow experiment tracking for regression training runs."""

    def __init__(self, config: MLConfig):
        self.config = config
        mlflow.set_tracking_uri(config.mlflow_tracking_uri)
        mlflow.set_experiment(config.mlflow_experiment_name)

        # The model is plain numpy; nothing for the autologgers to hook into.
        mlflow.autolog(disable=True)

    def log_training_run(self, params: dict, metrics: dict, coefficients: dict = None):
        """
        Logs hyperparameters, fit metrics and the learned coefficients of one run.
        """
        try:
            with mlflow.start_run(run_name=self.config.model_name) as run:
                clean_params = {
                    k: v for k, v in params.items() if isinstance(v, (str, int, float, bool))
                }
                mlflow.log_params(clean_params)
                mlflow.log_metrics(metrics)

                if coefficients:
                    mlflow.log_dict(coefficients, "coefficients.json")

                logger.info(
                    "training_run_logged", run_id=run.info.run_id, model_name=self.config.model_name
                )
                return run.info.run_id
        except Exception as e:
            logger.error("mlflow_log_failed", error=str(e))
            raise e
