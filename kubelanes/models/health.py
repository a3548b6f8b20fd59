"""Health timeline data structures."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timedelta
from enum import StrEnum


class HealthLabel(StrEnum):
    """Health of a resource over an interval.

    ROLLING is degradation attributed to an in-progress rollout.
    """

    HEALTHY = "healthy"
    ROLLING = "rolling"
    DEGRADED = "degraded"
    UNHEALTHY = "unhealthy"
    UNKNOWN = "unknown"


@dataclass(frozen=True)
class HealthSpan:
    """Half-open interval ``[start, end)`` holding a single health label."""

    start: datetime
    end: datetime
    health: HealthLabel

    @property
    def duration(self) -> timedelta:
        return self.end - self.start


@dataclass
class HealthSpanResult:
    """Spans for one lane plus what is known about the resource's creation."""

    spans: list[HealthSpan] = field(default_factory=list)
    created_at: datetime | None = None
    created_before_window: bool = False
