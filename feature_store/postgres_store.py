"""
PostgreSQL stores.
Hardened: internal connection pooling; every I/O error is logged and returned
as a failed StoreResult so callers can degrade instead of crash.

Schema
------
ml_training_data      annualised features + target + category + synthetic flag
footprint_records     all lifestyle inputs + breakdown + category
recommendations       suggestion rows linked to a footprint record
user_predictions      trend projections linked to a footprint record
"""

import logging
from contextlib import contextmanager
from typing import Any, Optional, Sequence

import psycopg2
import psycopg2.pool
from psycopg2.extras import RealDictCursor, execute_values

from footprint.models import EmissionBreakdown, LifestyleInputs, RecommendationItem
from feature_store.base import HistoryStore, StoreResult, TrainingDataStore, TrainingRecord
from feature_store.config import StoreConfig

logger = logging.getLogger(__name__)

DDL = """
CREATE TABLE IF NOT EXISTS ml_training_data (
    id                BIGSERIAL PRIMARY KEY,
    transport_km      DOUBLE PRECISION NOT NULL,
    energy_units      DOUBLE PRECISION NOT NULL,
    diet_type         TEXT             NOT NULL,
    waste_kg          DOUBLE PRECISION NOT NULL,
    total_emission    DOUBLE PRECISION NOT NULL,
    emission_category TEXT             NOT NULL,
    is_synthetic      BOOLEAN          NOT NULL DEFAULT FALSE,
    created_at        TIMESTAMPTZ      NOT NULL DEFAULT now()
);

CREATE INDEX IF NOT EXISTS idx_ml_training_data_created_at
    ON ml_training_data (created_at DESC);

CREATE TABLE IF NOT EXISTS footprint_records (
    id                      UUID PRIMARY KEY DEFAULT gen_random_uuid(),
    user_name               TEXT             NOT NULL,
    transport_km_per_week   DOUBLE PRECISION NOT NULL,
    transport_mode          TEXT             NOT NULL,
    energy_kwh_per_month    DOUBLE PRECISION NOT NULL,
    lpg_kg_per_month        DOUBLE PRECISION NOT NULL,
    diet_type               TEXT             NOT NULL,
    red_meat_meals_per_week INTEGER          NOT NULL,
    waste_kg_per_week       DOUBLE PRECISION NOT NULL,
    waste_segregated        BOOLEAN          NOT NULL,
    transport_emissions     DOUBLE PRECISION NOT NULL,
    energy_emissions        DOUBLE PRECISION NOT NULL,
    diet_emissions          DOUBLE PRECISION NOT NULL,
    waste_emissions         DOUBLE PRECISION NOT NULL,
    total_emissions         DOUBLE PRECISION NOT NULL,
    emission_category       TEXT             NOT NULL,
    created_at              TIMESTAMPTZ      NOT NULL DEFAULT now()
);

CREATE TABLE IF NOT EXISTS recommendations (
    id                     UUID PRIMARY KEY DEFAULT gen_random_uuid(),
    footprint_id           UUID             NOT NULL REFERENCES footprint_records (id),
    category               TEXT             NOT NULL,
    recommendation_text    TEXT             NOT NULL,
    potential_reduction_kg DOUBLE PRECISION NOT NULL,
    priority               INTEGER          NOT NULL,
    created_at             TIMESTAMPTZ      NOT NULL DEFAULT now()
);

CREATE TABLE IF NOT EXISTS user_predictions (
    id                        UUID PRIMARY KEY DEFAULT gen_random_uuid(),
    footprint_id              UUID             NOT NULL REFERENCES footprint_records (id),
    predicted_emissions_1year DOUBLE PRECISION NOT NULL,
    predicted_emissions_2year DOUBLE PRECISION NOT NULL,
    confidence_score          DOUBLE PRECISION NOT NULL,
    created_at                TIMESTAMPTZ      NOT NULL DEFAULT now()
);
"""


class _PostgresPool:
    """Connection pool lifecycle shared by both stores."""

    def __init__(self, config: StoreConfig):
        self._config = config
        self._pool: Optional[psycopg2.pool.SimpleConnectionPool] = None

    def connect(self) -> None:
        """Initializes the connection pool."""
        try:
            self._pool = psycopg2.pool.SimpleConnectionPool(
                minconn=self._config.pool_min_connections,
                maxconn=self._config.pool_max_connections,
                **self._config.get_postgres_params(),
            )
            logger.info(
                "Connected to PostgreSQL at %s:%d (schema %s)",
                self._config.postgres_host,
                self._config.postgres_port,
                self._config.postgres_schema,
            )
        except psycopg2.Error as e:
            logger.error("Failed to connect to PostgreSQL: %s", e)
            raise

    def close(self) -> None:
        if self._pool:
            self._pool.closeall()
            self._pool = None
            logger.info("Closed Postgres connection pool")

    def is_healthy(self) -> bool:
        if not self._pool:
            return False
        try:
            with self._cursor() as cur:
                cur.execute("SELECT 1")
            return True
        except (psycopg2.Error, RuntimeError):
            return False

    def init_schema(self) -> None:
        """Create tables if they do not exist."""
        with self._cursor() as cur:
            cur.execute(DDL)
        logger.info("PostgreSQL schema initialised")

    @contextmanager
    def _cursor(self):
        """Pooled cursor; commits on success, rolls back on error."""
        if not self._pool:
            raise RuntimeError("PostgreSQL connection pool is not initialized")

        conn = self._pool.getconn()
        try:
            with conn.cursor(cursor_factory=RealDictCursor) as cur:
                yield cur
            conn.commit()
        except Exception:
            conn.rollback()
            raise
        finally:
            self._pool.putconn(conn)


class PostgresTrainingDataStore(_PostgresPool, TrainingDataStore):
    """Training rows in ml_training_data."""

    name = "postgres_training"

    def fetch_recent(self, limit: int) -> StoreResult:
        query = """
            SELECT transport_km, energy_units, diet_type, waste_kg,
                   total_emission, emission_category, is_synthetic, created_at
            FROM ml_training_data
            ORDER BY created_at DESC
            LIMIT %s
        """
        try:
            with self._cursor() as cur:
                cur.execute(query, (limit,))
                rows = cur.fetchall()
        except (psycopg2.Error, RuntimeError) as e:
            logger.error("Training data fetch failed: %s", e)
            return StoreResult.failure("fetch_recent", str(e))

        records = [TrainingRecord.from_row(row) for row in rows]
        return StoreResult.success("fetch_recent", count=len(records), records=records)

    def append_batch(self, records: Sequence[TrainingRecord]) -> StoreResult:
        if not records:
            return StoreResult.success("append_batch", count=0)

        query = """
            INSERT INTO ml_training_data
                (transport_km, energy_units, diet_type, waste_kg,
                 total_emission, emission_category, is_synthetic)
            VALUES %s
        """
        values = [
            (
                r.transport_km,
                r.energy_units,
                r.diet_type,
                r.waste_kg,
                r.total_emission,
                r.emission_category,
                r.is_synthetic,
            )
            for r in records
        ]
        try:
            with self._cursor() as cur:
                execute_values(cur, query, values)
        except (psycopg2.Error, RuntimeError) as e:
            logger.error("Training data insert of %d rows failed: %s", len(values), e)
            return StoreResult.failure("append_batch", str(e))

        return StoreResult.success("append_batch", count=len(values))


class PostgresHistoryStore(_PostgresPool, HistoryStore):
    """Assessment history in footprint_records / recommendations / user_predictions."""

    name = "postgres_history"

    def save_footprint(
        self, user_name: str, inputs: LifestyleInputs, breakdown: EmissionBreakdown
    ) -> StoreResult:
        query = """
            INSERT INTO footprint_records
                (user_name, transport_km_per_week, transport_mode, energy_kwh_per_month,
                 lpg_kg_per_month, diet_type, red_meat_meals_per_week, waste_kg_per_week,
                 waste_segregated, transport_emissions, energy_emissions, diet_emissions,
                 waste_emissions, total_emissions, emission_category)
            VALUES
                (%(user_name)s, %(transport_km_per_week)s, %(transport_mode)s,
                 %(energy_kwh_per_month)s, %(lpg_kg_per_month)s, %(diet_type)s,
                 %(red_meat_meals_per_week)s, %(waste_kg_per_week)s, %(waste_segregated)s,
                 %(transport_emissions)s, %(energy_emissions)s, %(diet_emissions)s,
                 %(waste_emissions)s, %(total_emissions)s, %(emission_category)s)
            RETURNING id
        """
        params = {"user_name": user_name}
        params.update(inputs.to_dict())
        params.update(
            {
                "transport_emissions": breakdown.transport,
                "energy_emissions": breakdown.energy,
                "diet_emissions": breakdown.diet,
                "waste_emissions": breakdown.waste,
                "total_emissions": breakdown.total,
                "emission_category": breakdown.category.value,
            }
        )
        try:
            with self._cursor() as cur:
                cur.execute(query, params)
                row = cur.fetchone()
        except (psycopg2.Error, RuntimeError) as e:
            logger.error("Footprint insert failed: %s", e)
            return StoreResult.failure("save_footprint", str(e))

        return StoreResult.success("save_footprint", count=1, record_id=str(row["id"]))

    def save_recommendations(
        self, footprint_id: str, items: Sequence[RecommendationItem]
    ) -> StoreResult:
        if not items:
            return StoreResult.success("save_recommendations", count=0)

        query = """
            INSERT INTO recommendations
                (footprint_id, category, recommendation_text, potential_reduction_kg, priority)
            VALUES %s
        """
        values = [
            (footprint_id, i.category, i.text, i.potential_reduction, i.priority) for i in items
        ]
        try:
            with self._cursor() as cur:
                execute_values(cur, query, values)
        except (psycopg2.Error, RuntimeError) as e:
            logger.error("Recommendation insert for footprint %s failed: %s", footprint_id, e)
            return StoreResult.failure("save_recommendations", str(e))

        return StoreResult.success("save_recommendations", count=len(values))

    def save_prediction(self, footprint_id: str, prediction: Any) -> StoreResult:
        query = """
            INSERT INTO user_predictions
                (footprint_id, predicted_emissions_1year, predicted_emissions_2year,
                 confidence_score)
            VALUES (%s, %s, %s, %s)
            RETURNING id
        """
        data = prediction.to_dict()
        try:
            with self._cursor() as cur:
                cur.execute(
                    query,
                    (
                        footprint_id,
                        data["predicted_emissions_1year"],
                        data["predicted_emissions_2year"],
                        data["confidence_score"],
                    ),
                )
                row = cur.fetchone()
        except (psycopg2.Error, RuntimeError) as e:
            logger.error("Prediction insert for footprint %s failed: %s", footprint_id, e)
            return StoreResult.failure("save_prediction", str(e))

        return StoreResult.success("save_prediction", count=1, record_id=str(row["id"]))

    def recent_footprints(self, limit: int) -> StoreResult:
        query = """
            SELECT *
            FROM footprint_records
            ORDER BY created_at DESC
            LIMIT %s
        """
        try:
            with self._cursor() as cur:
                cur.execute(query, (limit,))
                rows = [dict(row) for row in cur.fetchall()]
        except (psycopg2.Error, RuntimeError) as e:
            logger.error("Footprint history fetch failed: %s", e)
            return StoreResult.failure("recent_footprints", str(e))

        return StoreResult.success("recent_footprints", count=len(rows), records=rows)
