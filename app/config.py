"""
app/config.py

Application-level configuration helpers.
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from functools import lru_cache
from pathlib import Path


def load_env_files() -> None:
    """
    Load simple KEY=VALUE pairs from `.env` and `.env.local` (if present).
    Existing process environment variables are not overwritten.
    """

    project_root = Path(__file__).resolve().parents[1]
    for filename in (".env", ".env.local"):
        env_path = project_root / filename
        if not env_path.exists():
            continue

        for raw_line in env_path.read_text(encoding="utf-8").splitlines():
            line = raw_line.strip()
            if not line or line.startswith("#") or "=" not in line:
                continue

            key, value = line.split("=", 1)
            key = key.strip()
            value = value.strip().strip('"').strip("'")
            if key and key not in os.environ:
                os.environ[key] = value


@lru_cache(maxsize=1)
def _load_env_once() -> None:
    """
    Ensure project `.env` files are loaded once before reading app settings.
    """

    load_env_files()


def _get_int_env(name: str, default: int) -> int:
    """
    Read an integer from environment variables with safe fallback.
    """

    _load_env_once()
    raw_value = os.getenv(name)
    if raw_value is None:
        return default
    try:
        return int(raw_value)
    except ValueError:
        return default


def _get_float_env(name: str, default: float) -> float:
    """
    Read a float from environment variables with safe fallback.
    """

    _load_env_once()
    raw_value = os.getenv(name)
    if raw_value is None:
        return default
    try:
        return float(raw_value)
    except ValueError:
        return default


def _get_str_env(name: str, default: str) -> str:
    """
    Read a string from environment variables with fallback.
    """

    _load_env_once()
    value = os.getenv(name)
    if value is None:
        return default
    stripped = value.strip()
    return stripped if stripped else default


def _get_optional_str_env(name: str) -> str | None:
    """
    Read an optional string value from environment variables.
    """

    _load_env_once()
    value = os.getenv(name)
    if value is None:
        return None
    stripped = value.strip()
    return stripped if stripped else None


@dataclass(frozen=True)
class DashboardSettings:
    """
    Presentation rules applied to every dashboard render.
    """

    display_decimals: int = 4
    min_trend_points: int = 3
    pie_max_slices: int = 8
    alias_tables_path: str | None = None


@dataclass(frozen=True)
class AnalysisServiceSettings:
    """
    HTTP behavior settings for the external analysis service.
    """

    base_url: str = "http://localhost:8000/api"
    timeout_seconds: float = 15.0
    max_retries: int = 3
    backoff_initial_seconds: float = 0.5
    backoff_multiplier: float = 2.0


@lru_cache(maxsize=1)
def get_dashboard_settings() -> DashboardSettings:
    """
    Return cached dashboard presentation settings from environment variables.
    """

    return DashboardSettings(
        display_decimals=max(0, _get_int_env("DASHBOARD_DISPLAY_DECIMALS", 4)),
        min_trend_points=max(1, _get_int_env("DASHBOARD_MIN_TREND_POINTS", 3)),
        pie_max_slices=max(1, _get_int_env("DASHBOARD_PIE_MAX_SLICES", 8)),
        alias_tables_path=_get_optional_str_env("ALIAS_TABLES_PATH"),
    )


@lru_cache(maxsize=1)
def get_analysis_service_settings() -> AnalysisServiceSettings:
    """
    Return analysis service connector settings from environment variables.
    """

    return AnalysisServiceSettings(
        base_url=_get_str_env("ANALYSIS_SERVICE_BASE_URL", "http://localhost:8000/api").rstrip("/"),
        timeout_seconds=max(1.0, _get_float_env("ANALYSIS_SERVICE_TIMEOUT_SECONDS", 15.0)),
        max_retries=max(0, _get_int_env("ANALYSIS_SERVICE_MAX_RETRIES", 3)),
        backoff_initial_seconds=max(0.1, _get_float_env("ANALYSIS_SERVICE_BACKOFF_INITIAL_SECONDS", 0.5)),
        backoff_multiplier=max(1.0, _get_float_env("ANALYSIS_SERVICE_BACKOFF_MULTIPLIER", 2.0)),
    )
