"""
Configuration settings for the client record access layer.

Uses Pydantic Settings to load environment variables for collection names,
cache/retry tuning, logging, and benchmark defaults.
"""
from __future__ import annotations

from functools import lru_cache
from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    # Application
    app_env: str = Field("development", alias="APP_ENV")
    log_level: str = Field("INFO", alias="LOG_LEVEL")
    log_json: bool = Field(False, alias="LOG_JSON")

    # Document store
    clients_collection: str = Field("clientes", alias="CLIENTS_COLLECTION")
    clients_order_by: str = Field("nombre", alias="CLIENTS_ORDER_BY")
    configuration_collection: str = Field("configuracion", alias="CONFIGURATION_COLLECTION")
    configuration_document: str = Field("1", alias="CONFIGURATION_DOCUMENT")

    # Cache and retry
    cache_ttl_seconds: float = Field(300.0, alias="CACHE_TTL_SECONDS")
    retry_max_attempts: int = Field(3, alias="RETRY_MAX_ATTEMPTS")
    retry_base_delay_seconds: float = Field(1.0, alias="RETRY_BASE_DELAY_SECONDS")

    # Benchmark defaults
    benchmark_clients: int = Field(1_000, alias="BENCHMARK_CLIENTS")
    benchmark_runs: int = Field(5, alias="BENCHMARK_RUNS")
    store_latency_ms: int = Field(0, alias="STORE_LATENCY_MS")

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        populate_by_name=True,
    )


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """
    Retrieve a cached instance of Settings to avoid repeated env parsing.
    """
    return Settings()


__all__ = ["Settings", "get_settings"]
