"""
Application configuration using Pydantic Settings.
Loads configuration from environment variables with sensible defaults.
"""

from functools import lru_cache

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Redis
    redis_url: str = "redis://localhost:6379/0"
    redis_socket_timeout_seconds: float = 5.0

    # Key layout
    key_root: str = "resque"
    key_delimiter: str = ":"

    # Worker Configuration
    # Lifetime of every per-worker record (started, status, counters)
    worker_ttl_seconds: int = 10_000
    worker_queues: list[str] = ["default"]
    worker_poll_interval_seconds: float = 5.0

    # API Configuration
    api_host: str = "0.0.0.0"
    api_port: int = 8000

    # Observability
    otel_exporter_otlp_endpoint: str | None = "http://localhost:4317"
    otel_service_name: str = "redqueue"
    prometheus_port: int = 9090
    log_level: str = "INFO"
    log_format: str = "json"  # json or console


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
