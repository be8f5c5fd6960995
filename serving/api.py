# serving/api.py
import time
import uuid
from contextlib import asynccontextmanager
from typing import Any, Dict, List, Optional

from fastapi import FastAPI, HTTPException, Request, Response
from fastapi.middleware.cors import CORSMiddleware
from prometheus_client import CONTENT_TYPE_LATEST, generate_latest

from feature_store.base import HistoryStore, StoreResult
from feature_store.config import StoreConfig
from feature_store.factory import build_history_store, build_training_store
from footprint.calculator import calculate_footprint, compare_to_benchmarks
from footprint.recommendations import (
    generate_recommendations,
    random_eco_tip,
    summarize_recommendations,
)
from ml_pipeline.config import MLConfig
from ml_pipeline.prediction import MLPrediction, PredictionService
from monitoring.metrics import FOOTPRINT_ASSESSMENTS, RECOMMENDATIONS_ISSUED, STORE_FAILURES
from serving.logging_setup import configure_logging, logger as log
from serving.schemas import (
    FootprintRequest,
    FootprintResponse,
    PredictionRequest,
    TrainingResponse,
    TrendResponse,
)
from serving.settings import Settings


def _count_failure(store_name: str, result: StoreResult) -> None:
    if not result.ok:
        STORE_FAILURES.labels(store=store_name, operation=result.operation).inc()
        log.warning("store.failed", store=store_name, operation=result.operation, error=result.error)


def _prediction_payload(prediction: MLPrediction) -> Optional[Dict[str, Any]]:
    return prediction.to_dict() if prediction.is_usable else None


def _connect(store: Any) -> bool:
    """Open a store's connections; failures leave the app running degraded."""
    try:
        store.connect()
        return True
    except Exception as e:
        log.error("store.connect_failed", store=getattr(store, "name", "unknown"), error=str(e))
        return False


def create_app(
    settings: Optional[Settings] = None,
    service: Optional[PredictionService] = None,
    history_store: Optional[HistoryStore] = None,
) -> FastAPI:
    settings = settings or Settings()
    configure_logging(settings.log_level, settings.log_json)

    owns_stores = service is None or history_store is None
    store_config = StoreConfig.from_env() if owns_stores else None
    if service is None:
        service = PredictionService(build_training_store(store_config), config=MLConfig.from_env())
    if history_store is None:
        history_store = build_history_store(store_config)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        log.info("app.startup", **settings.redacted())
        training_ok = _connect(service.store)
        history_ok = _connect(history_store)
        app.state.degraded = not (training_ok and history_ok)

        if settings.init_schema_on_startup:
            for store in (service.store, history_store):
                init_schema = getattr(store, "init_schema", None)
                if init_schema is None:
                    continue
                try:
                    init_schema()
                except Exception as e:
                    log.error("store.init_schema_failed", store=store.name, error=str(e))

        if settings.warm_model_on_startup:
            trained = service.ensure_trained()
            log.info("model.warmup", trained=trained)

        yield

        service.store.close()
        history_store.close()
        log.info("app.shutdown")

    app = FastAPI(title=settings.app_name, version="1.0", lifespan=lifespan)
    app.state.settings = settings
    app.state.service = service
    app.state.history_store = history_store
    app.state.degraded = False

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_methods=["GET", "POST", "OPTIONS"],
        allow_headers=["*"],
        max_age=86400,
    )

    @app.middleware("http")
    async def access_log_mw(request: Request, call_next):
        rid = str(uuid.uuid4())
        start = time.perf_counter()
        request.state.request_id = rid
        try:
            resp: Response = await call_next(request)
            dur_ms = (time.perf_counter() - start) * 1000.0
            log.info(
                "http.request",
                path=request.url.path,
                status=resp.status_code,
                duration_ms=round(dur_ms, 2),
                request_id=rid,
            )
            resp.headers["X-Request-ID"] = rid
            return resp
        except Exception as e:
            log.error("http.error", path=request.url.path, error=str(e), request_id=rid)
            raise

    @app.get("/healthz")
    def healthz() -> Dict[str, Any]:
        health = service.health()
        history_healthy = history_store.is_healthy()
        degraded = app.state.degraded or not health["store_healthy"] or not history_healthy
        return {
            "status": "degraded" if degraded else "ok",
            "model_trained": health["model_trained"],
            "model_stale": health["stale"],
            "training_store": health["store"],
            "training_store_healthy": health["store_healthy"],
            "history_store": history_store.name,
            "history_store_healthy": history_healthy,
        }

    @app.post("/footprint", response_model=FootprintResponse)
    def assess_footprint(req: FootprintRequest) -> Dict[str, Any]:
        inputs = req.to_inputs()
        breakdown = calculate_footprint(inputs)
        recommendations = generate_recommendations(inputs, breakdown)
        summary = summarize_recommendations(recommendations, breakdown)

        FOOTPRINT_ASSESSMENTS.labels(category=breakdown.category.value).inc()
        for item in recommendations:
            RECOMMENDATIONS_ISSUED.labels(category=item.category).inc()

        persistence: List[Dict[str, Any]] = []
        footprint_id: Optional[str] = None
        if settings.persist_history:
            saved = history_store.save_footprint(req.user_name, inputs, breakdown)
            _count_failure(history_store.name, saved)
            persistence.append(saved.to_dict())
            if saved.ok:
                footprint_id = saved.record_id
                if recommendations:
                    recs = history_store.save_recommendations(footprint_id, recommendations)
                    _count_failure(history_store.name, recs)
                    persistence.append(recs.to_dict())

        if settings.record_training_data:
            persistence.append(service.record_observation(inputs, breakdown).to_dict())

        prediction_payload = None
        prediction_status = "not_requested"
        if req.include_prediction:
            try:
                prediction = service.predict_for_inputs(inputs, breakdown)
            except Exception as e:
                log.error("prediction.failed", error=str(e))
                prediction_status = "error"
            else:
                prediction_payload = _prediction_payload(prediction)
                prediction_status = "ok" if prediction_payload else "degraded"
                if prediction_payload and footprint_id:
                    stored = history_store.save_prediction(footprint_id, prediction)
                    _count_failure(history_store.name, stored)
                    persistence.append(stored.to_dict())

        log.info(
            "footprint.assessed",
            total=breakdown.total,
            category=breakdown.category.value,
            recommendations=len(recommendations),
            prediction=prediction_status,
        )
        return {
            "footprint_id": footprint_id,
            "breakdown": breakdown.to_dict(),
            "recommendations": [item.to_dict() for item in recommendations],
            "summary": summary.to_dict(),
            "benchmarks": compare_to_benchmarks(breakdown).to_dict(),
            "eco_tip": random_eco_tip(),
            "prediction": prediction_payload,
            "prediction_status": prediction_status,
            "persistence": persistence,
        }

    @app.post("/predict", response_model=TrendResponse)
    def predict_trend(req: PredictionRequest) -> Dict[str, Any]:
        try:
            prediction = service.predict_future(
                req.current_total,
                req.annual_transport_km,
                req.annual_energy_units,
                req.diet_type,
                req.annual_waste_kg,
            )
        except Exception as e:
            log.error("prediction.failed", error=str(e))
            raise HTTPException(status_code=503, detail="prediction unavailable")

        payload = _prediction_payload(prediction)
        return {"prediction": payload, "prediction_status": "ok" if payload else "degraded"}

    @app.post("/model/train", response_model=TrainingResponse)
    def retrain() -> Dict[str, Any]:
        trained = service.ensure_trained(force=True)
        last = service.engine.last_result
        return {"trained": trained, "result": last.to_dict() if last else None}

    @app.get("/tips/random")
    def eco_tip() -> Dict[str, str]:
        return {"tip": random_eco_tip()}

    @app.get("/metrics")
    def metrics() -> Response:
        return Response(content=generate_latest(), media_type=CONTENT_TYPE_LATEST)

    return app
