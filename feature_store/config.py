"""
Store configuration.

Pattern: Zero-Secret Architecture
Pattern: Leaf Module (No project imports)
"""

from typing import Literal

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class StoreConfig(BaseSettings):
    """
    Configuration for the training-data and history stores.
    The in-memory backend needs no infrastructure and is the default.
    """

    backend: Literal["memory", "postgres"] = "memory"

    # PostgreSQL Configuration
    postgres_user: str = "footprint"
    postgres_password: str = Field(default="")
    postgres_db: str = "footprint"
    postgres_host: str = "localhost"
    postgres_port: int = 5432
    postgres_schema: str = "public"

    pool_min_connections: int = 1
    pool_max_connections: int = 10
    request_timeout_seconds: float = 2.0

    model_config = SettingsConfigDict(
        env_prefix="STORE_", env_file=".env", env_file_encoding="utf-8", extra="ignore"
    )

    @property
    def postgres_dsn(self) -> str:
        return f"postgresql://{self.postgres_user}:{self.postgres_password}@{self.postgres_host}:{self.postgres_port}/{self.postgres_db}"

    @classmethod
    def from_env(cls) -> "StoreConfig":
        return cls()

    def get_postgres_params(self) -> dict:
        """Helper for psycopg2 connection parameters."""
        return {
            "host": self.postgres_host,
            "port": self.postgres_port,
            "user": self.postgres_user,
            "password": self.postgres_password,
            "dbname": self.postgres_db,
            "connect_timeout": max(2, int(self.request_timeout_seconds)),
            "options": f"-c search_path={self.postgres_schema},public",
        }
