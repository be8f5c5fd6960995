"""
In-process stores.

Used for local development, tests, and deployments without PostgreSQL.
Contents live as long as the process does.
"""

import logging
import uuid
from dataclasses import replace
from datetime import datetime, timezone
from threading import Lock
from typing import Any, Dict, List, Optional, Sequence

from footprint.models import EmissionBreakdown, LifestyleInputs, RecommendationItem
from feature_store.base import HistoryStore, StoreResult, TrainingDataStore, TrainingRecord

logger = logging.getLogger(__name__)


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class InMemoryTrainingDataStore(TrainingDataStore):
    """Thread-safe append-only list of training records."""

    name = "memory_training"

    def __init__(self, records: Optional[Sequence[TrainingRecord]] = None):
        self._records: List[TrainingRecord] = list(records or [])
        self._lock = Lock()

    def __len__(self) -> int:
        with self._lock:
            return len(self._records)

    def fetch_recent(self, limit: int) -> StoreResult:
        with self._lock:
            newest_first = list(reversed(self._records))[: max(0, limit)]
        return StoreResult.success("fetch_recent", count=len(newest_first), records=newest_first)

    def append_batch(self, records: Sequence[TrainingRecord]) -> StoreResult:
        stamped = [
            r if r.created_at is not None else replace(r, created_at=_utcnow()) for r in records
        ]
        with self._lock:
            self._records.extend(stamped)
        logger.debug("Appended %d training records (in-memory)", len(stamped))
        return StoreResult.success("append_batch", count=len(stamped))


class InMemoryHistoryStore(HistoryStore):
    """Keeps footprint, recommendation and prediction rows in plain lists."""

    name = "memory_history"

    def __init__(self):
        self._footprints: List[Dict[str, Any]] = []
        self._recommendations: List[Dict[str, Any]] = []
        self._predictions: List[Dict[str, Any]] = []
        self._lock = Lock()

    def save_footprint(
        self, user_name: str, inputs: LifestyleInputs, breakdown: EmissionBreakdown
    ) -> StoreResult:
        footprint_id = str(uuid.uuid4())
        row: Dict[str, Any] = {"id": footprint_id, "user_name": user_name}
        row.update(inputs.to_dict())
        row.update(
            {
                "transport_emissions": breakdown.transport,
                "energy_emissions": breakdown.energy,
                "diet_emissions": breakdown.diet,
                "waste_emissions": breakdown.waste,
                "total_emissions": breakdown.total,
                "emission_category": breakdown.category.value,
                "created_at": _utcnow(),
            }
        )
        with self._lock:
            self._footprints.append(row)
        return StoreResult.success("save_footprint", count=1, record_id=footprint_id)

    def save_recommendations(
        self, footprint_id: str, items: Sequence[RecommendationItem]
    ) -> StoreResult:
        rows = [
            {
                "id": str(uuid.uuid4()),
                "footprint_id": footprint_id,
                "category": item.category,
                "recommendation_text": item.text,
                "potential_reduction_kg": item.potential_reduction,
                "priority": item.priority,
                "created_at": _utcnow(),
            }
            for item in items
        ]
        with self._lock:
            self._recommendations.extend(rows)
        return StoreResult.success("save_recommendations", count=len(rows))

    def save_prediction(self, footprint_id: str, prediction: Any) -> StoreResult:
        data = prediction.to_dict()
        row = {
            "id": str(uuid.uuid4()),
            "footprint_id": footprint_id,
            "predicted_emissions_1year": data["predicted_emissions_1year"],
            "predicted_emissions_2year": data["predicted_emissions_2year"],
            "confidence_score": data["confidence_score"],
            "created_at": _utcnow(),
        }
        with self._lock:
            self._predictions.append(row)
        return StoreResult.success("save_prediction", count=1, record_id=row["id"])

    def recent_footprints(self, limit: int) -> StoreResult:
        with self._lock:
            rows = list(reversed(self._footprints))[: max(0, limit)]
        return StoreResult.success("recent_footprints", count=len(rows), records=rows)

    def recommendations_for(self, footprint_id: str) -> List[Dict[str, Any]]:
        with self._lock:
            return [r for r in self._recommendations if r["footprint_id"] == footprint_id]

    def predictions_for(self, footprint_id: str) -> List[Dict[str, Any]]:
        with self._lock:
            return [p for p in self._predictions if p["footprint_id"] == footprint_id]
