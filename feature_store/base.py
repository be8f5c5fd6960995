"""
Store contracts.

Pattern: Semantic Interface

The prediction path reads and appends training rows; the assessment flow
records history. Both talk to these interfaces only. Implementations report
I/O problems through StoreResult instead of raising, so a broken database can
degrade predictions without ever touching footprint or recommendation output.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Dict, Optional, Sequence, Tuple

from footprint.models import EmissionBreakdown, LifestyleInputs, RecommendationItem


@dataclass(frozen=True)
class TrainingRecord:
    """One persisted training row: annualised activity, target and provenance."""

    transport_km: float
    energy_units: float
    diet_type: str
    waste_kg: float
    total_emission: float
    emission_category: str
    is_synthetic: bool = False
    created_at: Optional[datetime] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "transport_km": self.transport_km,
            "energy_units": self.energy_units,
            "diet_type": self.diet_type,
            "waste_kg": self.waste_kg,
            "total_emission": self.total_emission,
            "emission_category": self.emission_category,
            "is_synthetic": self.is_synthetic,
            "created_at": self.created_at.isoformat() if self.created_at else None,
        }

    @classmethod
    def from_row(cls, row: Dict[str, Any]) -> "TrainingRecord":
        return cls(
            transport_km=row["transport_km"],
            energy_units=row["energy_units"],
            diet_type=str(row["diet_type"]),
            waste_kg=row["waste_kg"],
            total_emission=row["total_emission"],
            emission_category=str(row.get("emission_category") or ""),
            is_synthetic=bool(row.get("is_synthetic", False)),
            created_at=row.get("created_at"),
        )


@dataclass(frozen=True)
class StoreResult:
    """Outcome of a store operation."""

    ok: bool
    operation: str
    count: int = 0
    records: Tuple[Any, ...] = field(default_factory=tuple)
    record_id: Optional[str] = None
    error: Optional[str] = None

    @classmethod
    def success(
        cls,
        operation: str,
        count: int = 0,
        records: Sequence[Any] = (),
        record_id: Optional[str] = None,
    ) -> "StoreResult":
        return cls(
            ok=True,
            operation=operation,
            count=count,
            records=tuple(records),
            record_id=record_id,
        )

    @classmethod
    def failure(cls, operation: str, error: str) -> "StoreResult":
        return cls(ok=False, operation=operation, error=error)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "ok": self.ok,
            "operation": self.operation,
            "count": self.count,
            "record_id": self.record_id,
            "error": self.error,
        }


class TrainingDataStore(ABC):
    """Append-only source of regression training rows."""

    name = "training"

    def connect(self) -> None:
        """Open underlying connections. No-op for stores without any."""

    def close(self) -> None:
        """Release underlying connections."""

    def is_healthy(self) -> bool:
        return True

    @abstractmethod
    def fetch_recent(self, limit: int) -> StoreResult:
        """Up to `limit` TrainingRecords, most recent first."""

    @abstractmethod
    def append_batch(self, records: Sequence[TrainingRecord]) -> StoreResult:
        ...

    def append_one(self, record: TrainingRecord) -> StoreResult:
        result = self.append_batch([record])
        if result.ok:
            return StoreResult.success("append_one", count=result.count)
        return StoreResult.failure("append_one", result.error or "append failed")


class HistoryStore(ABC):
    """Best-effort record of past assessments."""

    name = "history"

    def connect(self) -> None:
        """Open underlying connections. No-op for stores without any."""

    def close(self) -> None:
        """Release underlying connections."""

    def is_healthy(self) -> bool:
        return True

    @abstractmethod
    def save_footprint(
        self, user_name: str, inputs: LifestyleInputs, breakdown: EmissionBreakdown
    ) -> StoreResult:
        """Persist one assessment; the new id is returned as `record_id`."""

    @abstractmethod
    def save_recommendations(
        self, footprint_id: str, items: Sequence[RecommendationItem]
    ) -> StoreResult:
        ...

    @abstractmethod
    def save_prediction(self, footprint_id: str, prediction: Any) -> StoreResult:
        ...

    @abstractmethod
    def recent_footprints(self, limit: int) -> StoreResult:
        ...
