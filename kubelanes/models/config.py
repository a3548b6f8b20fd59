"""Configuration data structures."""

from __future__ import annotations

from dataclasses import dataclass, field

DEFAULT_APP_LABEL_KEYS = ("app.kubernetes.io/name", "app")
DEFAULT_ROLLOUT_MARKERS = ("updated:", "image(", "image:", "template")


@dataclass
class HierarchyConfig:
    """Hierarchy builder configuration."""

    group_by_app: bool = True
    app_label_keys: tuple[str, ...] = DEFAULT_APP_LABEL_KEYS


@dataclass
class TimelineConfig:
    """Health timeline configuration."""

    rollout_markers: tuple[str, ...] = DEFAULT_ROLLOUT_MARKERS
    hide_routine_events: bool = False
    sort_by_interest: bool = True


@dataclass
class EngineConfig:
    """Batch engine worker pool configuration."""

    max_workers: int = 4
    build_timeout_seconds: float = 30.0


@dataclass
class LogConfig:
    """Logging configuration."""

    level: str = "info"
    format: str = "json"


@dataclass
class KubeLanesConfig:
    """Top-level KubeLanes configuration."""

    hierarchy: HierarchyConfig = field(default_factory=HierarchyConfig)
    timeline: TimelineConfig = field(default_factory=TimelineConfig)
    engine: EngineConfig = field(default_factory=EngineConfig)
    log: LogConfig = field(default_factory=LogConfig)
