"""Application configuration.

Values are read from ``LIPSYNC_*`` environment variables. The defaults
reproduce the reference studio: a timer driven simulator, a two minute job
estimate and a 0.1 second minimum trim span.
"""

from __future__ import annotations

from pathlib import Path
from typing import Literal

from pydantic import Field, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


def _default_media_root() -> Path:
    return Path("./var/media")


class AppConfig(BaseSettings):
    """Pydantic settings container for the studio service."""

    model_config = SettingsConfigDict(env_prefix="LIPSYNC_")

    media_root: Path = Field(
        default_factory=_default_media_root,
        description="Filesystem root where uploaded assets are stored.",
    )
    max_upload_bytes: int = Field(
        default=500 * 1024 * 1024,
        ge=1,
        description="Upper bound for a single uploaded asset.",
    )
    upload_chunk_bytes: int = Field(
        default=1024 * 1024,
        ge=1,
        description="Chunk size used while streaming uploads to disk.",
    )
    min_trim_span_seconds: float = Field(
        default=0.1,
        gt=0,
        description="Smallest span a committed trim range may cover.",
    )
    estimated_job_seconds: float = Field(
        default=120.0,
        gt=0,
        description="Advisory processing estimate attached to every job.",
    )
    max_concurrent_jobs: int | None = Field(
        default=None,
        ge=1,
        description="Jobs beyond this many in flight wait in the pending state.",
    )
    reporter: Literal["simulated", "http"] = Field(
        default="simulated",
        description="Progress reporter backend.",
    )
    simulator_start_delay_seconds: float = Field(default=1.0, ge=0.0)
    simulator_tick_seconds: float = Field(default=1.0, ge=0.0)
    simulator_min_increment: float = Field(default=5.0, gt=0.0)
    simulator_max_increment: float = Field(default=20.0, gt=0.0)
    simulator_failure_probability: float = Field(default=0.0, ge=0.0, le=1.0)
    worker_base_url: str | None = Field(
        default=None,
        description="Base URL of the remote lip-sync worker (http reporter).",
    )
    callback_base_url: str = Field(
        default="http://localhost:8000",
        description="Public URL the worker uses to report progress back.",
    )
    worker_request_timeout_seconds: float = Field(default=5.0, ge=0.1)
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = Field(
        default="INFO",
        description="Level applied to the service loggers.",
    )

    @model_validator(mode="after")
    def _check_reporter_settings(self) -> "AppConfig":
        if self.simulator_max_increment < self.simulator_min_increment:
            raise ValueError("simulator_max_increment must not be below simulator_min_increment")
        if self.reporter == "http" and not self.worker_base_url:
            raise ValueError("worker_base_url is required when reporter is 'http'")
        return self


def load_config() -> AppConfig:
    """Load configuration from ``LIPSYNC_*`` environment and prepare storage."""
    config = AppConfig()
    config.media_root.mkdir(parents=True, exist_ok=True)
    return config


__all__ = ["AppConfig", "load_config"]
