"""
Configuration settings for the Mongo insert benchmark.

Uses Pydantic Settings to load environment variables for the MongoDB target,
logging, and benchmark defaults. Values can also come from a local `.env` file.
"""
from __future__ import annotations

from functools import lru_cache
from typing import Union

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    # MongoDB
    mongo_url: str = Field("mongodb://localhost:27017", alias="MONGO_URL")
    mongo_db: str = Field("test", alias="MONGO_DB")
    mongo_collection: str = Field("w0j0", alias="MONGO_COLLECTION")
    mongo_write_concern: Union[int, str] = Field(1, alias="MONGO_WRITE_CONCERN")
    mongo_server_selection_timeout_ms: int = Field(
        30_000, alias="MONGO_SERVER_SELECTION_TIMEOUT_MS"
    )

    # Application
    log_level: str = Field("INFO", alias="LOG_LEVEL")
    log_json: bool = Field(False, alias="LOG_JSON")
    results_dir: str = Field("results", alias="RESULTS_DIR")

    # Benchmark defaults
    benchmark_inserts: int = Field(1_000_000, alias="BENCHMARK_INSERTS")
    benchmark_trials: int = Field(1, alias="BENCHMARK_TRIALS")
    benchmark_threads: int = Field(1, alias="BENCHMARK_THREADS")
    benchmark_speed_unit: int = Field(1_000, alias="BENCHMARK_SPEED_UNIT")
    benchmark_poll_interval_seconds: float = Field(1.0, alias="BENCHMARK_POLL_INTERVAL")

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        populate_by_name=True,
    )

    @field_validator("mongo_write_concern", mode="before")
    @classmethod
    def _coerce_write_concern(cls, value: object) -> object:
        # Env values arrive as strings; "2" means two members, "majority" stays a tag.
        if isinstance(value, str) and value.strip().isdigit():
            return int(value.strip())
        return value


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """
    Retrieve a cached instance of Settings to avoid repeated env parsing.
    """
    return Settings()


__all__ = ["Settings", "get_settings"]
