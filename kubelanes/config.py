"""Configuration loading from environment variables."""

from __future__ import annotations

import os

from kubelanes.models.config import (
    DEFAULT_APP_LABEL_KEYS,
    DEFAULT_ROLLOUT_MARKERS,
    EngineConfig,
    HierarchyConfig,
    KubeLanesConfig,
    LogConfig,
    TimelineConfig,
)
from kubelanes.observability.logging import LOG_FORMATS, LOG_LEVELS


def _env(key: str, default: str = "") -> str:
    return os.environ.get(f"KUBELANES_{key}", default)


def _env_bool(key: str, default: bool = False) -> bool:
    raw = _env(key).strip().lower()
    if not raw:
        return default
    return raw in ("true", "1", "yes", "on")


def _env_int(key: str, default: int, min_val: int | None = None, max_val: int | None = None) -> int:
    raw = _env(key, str(default))
    try:
        val = int(raw)
    except ValueError:
        raise ValueError(f"Invalid KUBELANES_{key}: {raw!r}. Must be an integer") from None
    if min_val is not None:
        val = max(val, min_val)
    if max_val is not None:
        val = min(val, max_val)
    return val


def _env_list(key: str, default: tuple[str, ...]) -> tuple[str, ...]:
    raw = _env(key, "")
    if not raw.strip():
        return default
    return tuple(item.strip() for item in raw.split(",") if item.strip())


def _env_choice(key: str, default: str, choices: tuple[str, ...], label: str) -> str:
    value = _env(key, default).strip().lower()
    if value not in choices:
        raise ValueError(f"Invalid {label}: {_env(key)}. Must be one of {choices}")
    return value


def _env_timeout(key: str, default: float) -> float:
    raw = _env(key, str(default))
    try:
        value = float(raw)
    except ValueError:
        raise ValueError(f"Invalid build timeout: {raw!r}. Must be a number of seconds") from None
    if value <= 0:
        raise ValueError(f"Invalid build timeout: {value}. Must be positive")
    return value


def load_config() -> KubeLanesConfig:
    """Load configuration from KUBELANES_* environment variables."""
    return KubeLanesConfig(
        hierarchy=HierarchyConfig(
            group_by_app=_env_bool("GROUP_BY_APP", True),
            app_label_keys=_env_list("APP_LABEL_KEYS", DEFAULT_APP_LABEL_KEYS),
        ),
        timeline=TimelineConfig(
            rollout_markers=_env_list("ROLLOUT_MARKERS", DEFAULT_ROLLOUT_MARKERS),
            hide_routine_events=_env_bool("HIDE_ROUTINE_EVENTS", False),
            sort_by_interest=_env_bool("SORT_BY_INTEREST", True),
        ),
        engine=EngineConfig(
            max_workers=_env_int("MAX_WORKERS", 4, min_val=1, max_val=64),
            build_timeout_seconds=_env_timeout("BUILD_TIMEOUT", 30.0),
        ),
        log=LogConfig(
            level=_env_choice("LOG_LEVEL", "info", LOG_LEVELS, "log level"),
            format=_env_choice("LOG_FORMAT", "json", LOG_FORMATS, "log format"),
        ),
    )
