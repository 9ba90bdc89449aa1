from __future__ import annotations

from typing import Literal

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    openai_api_key: str | None = None
    openai_model: str = "gpt-4o-mini"
    storage_backend: Literal["memory", "gcs"] = "memory"
    gcs_bucket_name: str | None = None
    gcs_prefix: str = "riichi-tally"
    starting_score: int = 25000
    history_limit: int = 5
    log_dir: str | None = None
    log_level: str = "INFO"

    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8")


settings = Settings()
