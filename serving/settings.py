from __future__ import annotations

from typing import Any, Dict, List

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    app_name: str = Field(default="Carbon Footprint Engine")
    log_level: str = Field(default="INFO")
    log_json: bool = Field(default=False)

    # Assessment flow toggles
    persist_history: bool = Field(default=True)
    record_training_data: bool = Field(default=True)
    warm_model_on_startup: bool = Field(default=True)
    init_schema_on_startup: bool = Field(default=False)

    cors_origins: List[str] = Field(default_factory=lambda: ["http://localhost:5173"])

    model_config = SettingsConfigDict(
        env_prefix="FOOTPRINT_", env_file=".env", env_file_encoding="utf-8", extra="ignore"
    )

    def redacted(self) -> Dict[str, Any]:
        return {
            "app_name": self.app_name,
            "log_level": self.log_level,
            "persist_history": self.persist_history,
            "record_training_data": self.record_training_data,
            "warm_model_on_startup": self.warm_model_on_startup,
        }
