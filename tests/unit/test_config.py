from __future__ import annotations

from pathlib import Path

import pytest
from pydantic import ValidationError

from src.lipsync.config import AppConfig, load_config

pytestmark = pytest.mark.unit


def test_defaults_match_reference_studio(tmp_path: Path) -> None:
    config = AppConfig(media_root=tmp_path)

    assert config.min_trim_span_seconds == 0.1
    assert config.estimated_job_seconds == 120.0
    assert config.reporter == "simulated"
    assert config.max_concurrent_jobs is None
    assert (config.simulator_min_increment, config.simulator_max_increment) == (5.0, 20.0)


def test_environment_overrides(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    monkeypatch.setenv("LIPSYNC_MEDIA_ROOT", str(tmp_path / "media"))
    monkeypatch.setenv("LIPSYNC_MAX_CONCURRENT_JOBS", "2")
    monkeypatch.setenv("LIPSYNC_ESTIMATED_JOB_SECONDS", "45")

    config = load_config()

    assert config.max_concurrent_jobs == 2
    assert config.estimated_job_seconds == 45.0
    assert (tmp_path / "media").is_dir()


def test_http_reporter_requires_worker_url(tmp_path: Path) -> None:
    with pytest.raises(ValidationError):
        AppConfig(media_root=tmp_path, reporter="http")


def test_increment_bounds_validated(tmp_path: Path) -> None:
    with pytest.raises(ValidationError):
        AppConfig(
            media_root=tmp_path, simulator_min_increment=10, simulator_max_increment=5
        )


def test_log_level_from_environment(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    monkeypatch.setenv("LIPSYNC_LOG_LEVEL", "DEBUG")

    assert AppConfig(media_root=tmp_path).log_level == "DEBUG"


def test_unknown_log_level_rejected(tmp_path: Path) -> None:
    with pytest.raises(ValidationError):
        AppConfig(media_root=tmp_path, log_level="CHATTY")
