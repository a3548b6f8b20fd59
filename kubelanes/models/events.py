"""Core timeline event data structures and enumerations."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from enum import StrEnum


class EventSource(StrEnum):
    """Where a timeline event originated."""

    INFORMER = "informer"
    K8S_EVENT = "k8s_event"
    HISTORICAL = "historical"


class EventType(StrEnum):
    """Operation for change events, severity for log-style records."""

    ADD = "add"
    UPDATE = "update"
    DELETE = "delete"
    NORMAL = "Normal"
    WARNING = "Warning"


class HealthState(StrEnum):
    """Health reported on a change event."""

    HEALTHY = "healthy"
    DEGRADED = "degraded"
    UNHEALTHY = "unhealthy"
    UNKNOWN = "unknown"


@dataclass(frozen=True)
class OwnerRef:
    """Controller of a resource; the namespace is the owned resource's namespace."""

    kind: str
    name: str


@dataclass(frozen=True)
class FieldChange:
    """A single field difference between two versions of a resource."""

    path: str
    old_value: object = None
    new_value: object = None


@dataclass(frozen=True)
class DiffInfo:
    """What changed in an update event."""

    summary: str = ""
    fields: tuple[FieldChange, ...] = ()


@dataclass(frozen=True)
class TimelineEvent:
    """Canonical timeline event.

    Produced by the ingestion layer, consumed by the hierarchy builder and the
    health timeline. Immutable: the engine only groups and sorts events.
    """

    id: str
    kind: str
    namespace: str
    name: str
    timestamp: datetime
    event_type: EventType
    source: EventSource = EventSource.INFORMER
    reason: str = ""
    message: str = ""
    owner: OwnerRef | None = None
    diff: DiffInfo | None = None
    health_state: HealthState | None = None
    created_at: datetime | None = None  # resource creation time from its metadata
    labels: dict[str, str] = field(default_factory=dict)
    count: int = 1
    uid: str | None = None

    @property
    def historical(self) -> bool:
        """True if reconstructed from current-state metadata rather than observed live."""
        return self.source is EventSource.HISTORICAL

    @property
    def is_change_event(self) -> bool:
        return self.source in (EventSource.INFORMER, EventSource.HISTORICAL)

    @property
    def lane_id(self) -> str:
        return f"{self.kind}/{self.namespace}/{self.name}"
