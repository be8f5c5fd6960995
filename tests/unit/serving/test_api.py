"""
API tests.
Stores and the prediction service are injected, so no database is needed.
"""

from unittest.mock import MagicMock

import pytest
from fastapi.testclient import TestClient

from feature_store.base import HistoryStore, StoreResult
from feature_store.memory_store import InMemoryTrainingDataStore
from footprint.recommendations import ECO_TIPS
from ml_pipeline.prediction import PredictionService
from serving.api import create_app
from serving.settings import Settings

ASSESSMENT = {
    "transport_km_per_week": 100,
    "transport_mode": "car",
    "energy_kwh_per_month": 300,
    "lpg_kg_per_month": 0,
    "diet_type": "non_vegetarian",
    "red_meat_meals_per_week": 5,
    "waste_kg_per_week": 10,
    "waste_segregated": False,
    "user_name": "ada",
}


PREDICTION_REQUEST = {
    "current_total": 5000,
    "annual_transport_km": 5200,
    "annual_energy_units": 3600,
    "diet_type": "vegan",
    "annual_waste_kg": 520,
}


class UnreadableTrainingStore(InMemoryTrainingDataStore):
    def fetch_recent(self, limit: int) -> StoreResult:
        return StoreResult.failure("fetch_recent", "connection refused")

@pytest.fixture
def settings():
    return Settings(_env_file=None, warm_model_on_startup=False)


@pytest.fixture
def service(training_store, make_config):
    return PredictionService(training_store, config=make_config(learning_rate=1e-6))


@pytest.fixture
def client(settings, service, history_store):
    app = create_app(settings=settings, service=service, history_store=history_store)
    with TestClient(app) as test_client:
        yield test_client


def test_healthz(client):
    resp = client.get("/healthz")
    assert resp.status_code == 200
    body = resp.json()
    assert body["status"] == "ok"
    assert body["model_trained"] is False
    assert body["training_store"] == "memory_training"


def test_footprint_assessment(client, history_store, training_store):
    resp = client.post("/footprint", json=ASSESSMENT)
    assert resp.status_code == 200
    body = resp.json()

    assert body["breakdown"]["total"] == pytest.approx(12498.8)
    assert body["breakdown"]["category"] == "High"
    assert len(body["recommendations"]) == 6
    assert body["recommendations"][0]["priority"] == 1
    assert body["summary"]["top_contributor"] == "diet"
    assert body["benchmarks"]["average_footprint"] == 6000.0
    assert body["eco_tip"] in ECO_TIPS
    assert body["prediction"] is None
    assert body["prediction_status"] == "not_requested"

    assert body["footprint_id"]
    assert all(p["ok"] for p in body["persistence"])
    assert len(history_store.recommendations_for(body["footprint_id"])) == 6
    assert len(training_store) == 1


def test_footprint_with_prediction(client, history_store):
    resp = client.post("/footprint", json={**ASSESSMENT, "include_prediction": True})
    body = resp.json()

    assert body["prediction_status"] == "ok"
    assert body["prediction"]["trend_direction"] in {"increasing", "stable", "decreasing"}
    assert 0.75 <= body["prediction"]["confidence_score"] <= 0.90
    assert len(history_store.predictions_for(body["footprint_id"])) == 1


def test_diverged_model_degrades_prediction(settings, history_store, training_store, make_config):
    service = PredictionService(training_store, config=make_config())
    app = create_app(settings=settings, service=service, history_store=history_store)
    with TestClient(app) as client:
        body = client.post("/footprint", json={**ASSESSMENT, "include_prediction": True}).json()

    assert body["prediction"] is None
    assert body["prediction_status"] == "degraded"
    assert body["breakdown"]["category"] == "High"


def test_out_of_range_input_is_rejected(client):
    resp = client.post("/footprint", json={**ASSESSMENT, "transport_km_per_week": 600})
    assert resp.status_code == 422


def test_unknown_transport_mode_is_rejected(client):
    resp = client.post("/footprint", json={**ASSESSMENT, "transport_mode": "rocket"})
    assert resp.status_code == 422


def test_history_failure_does_not_break_assessment(settings, service):
    broken = MagicMock(spec=HistoryStore)
    broken.name = "broken_history"
    broken.is_healthy.return_value = False
    broken.save_footprint.return_value = StoreResult.failure("save_footprint", "db down")

    app = create_app(settings=settings, service=service, history_store=broken)
    with TestClient(app) as client:
        resp = client.post("/footprint", json=ASSESSMENT)
        health = client.get("/healthz").json()

    assert resp.status_code == 200
    body = resp.json()
    assert body["footprint_id"] is None
    assert body["persistence"][0] == {
        "ok": False,
        "operation": "save_footprint",
        "count": 0,
        "record_id": None,
        "error": "db down",
    }
    broken.save_recommendations.assert_not_called()
    assert health["status"] == "degraded"


def test_predict_endpoint(client):
    resp = client.post("/predict", json=PREDICTION_REQUEST)
    assert resp.status_code == 200
    assert resp.json()["prediction_status"] == "ok"


def test_untrained_model_degrades_prediction(settings, history_store, make_config):
    """An unreadable training store leaves no model; zero weights are not a projection."""
    service = PredictionService(UnreadableTrainingStore(), config=make_config(learning_rate=1e-6))
    app = create_app(settings=settings, service=service, history_store=history_store)
    with TestClient(app) as client:
        predicted = client.post("/predict", json=PREDICTION_REQUEST)
        assessed = client.post("/footprint", json={**ASSESSMENT, "include_prediction": True})

    assert predicted.status_code == 200
    assert predicted.json() == {"prediction": None, "prediction_status": "degraded"}

    body = assessed.json()
    assert body["prediction"] is None
    assert body["prediction_status"] == "degraded"
    assert history_store.predictions_for(body["footprint_id"]) == []
    assert service.engine.is_trained is False


def test_predict_failure_returns_503(settings, history_store):
    service = MagicMock(spec=PredictionService)
    service.predict_future.side_effect = RuntimeError("boom")

    app = create_app(settings=settings, service=service, history_store=history_store)
    with TestClient(app) as client:
        resp = client.post(
            "/predict",
            json={
                "current_total": 5000,
                "annual_transport_km": 1,
                "annual_energy_units": 1,
                "annual_waste_kg": 1,
            },
        )
    assert resp.status_code == 503


def test_force_training(client):
    resp = client.post("/model/train")
    body = resp.json()
    assert body["trained"] is True
    assert body["result"]["training_samples"] == 100
    assert body["result"]["diverged"] is False


def test_warmup_on_startup(service, history_store):
    settings = Settings(_env_file=None, warm_model_on_startup=True)
    app = create_app(settings=settings, service=service, history_store=history_store)
    with TestClient(app):
        assert service.engine.is_trained is True


def test_random_tip(client):
    assert client.get("/tips/random").json()["tip"] in ECO_TIPS


def test_metrics_exposed(client):
    client.post("/footprint", json=ASSESSMENT)
    resp = client.get("/metrics")
    assert resp.status_code == 200
    assert "footprint_assessments_total" in resp.text
