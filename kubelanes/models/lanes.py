"""Resource lane data structures."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime

from kubelanes.models.events import TimelineEvent
from kubelanes.models.kinds import ResourceKind, is_workload_kind, parse_kind


@dataclass(frozen=True)
class ResourceRef:
    """Identity of a single resource, e.g. the focal resource of a detail view."""

    kind: str
    namespace: str
    name: str

    @property
    def lane_id(self) -> str:
        return f"{self.kind}/{self.namespace}/{self.name}"

    @classmethod
    def parse(cls, lane_id: str) -> ResourceRef:
        """Split ``kind/namespace/name``; the name keeps any further slashes."""
        kind, _, rest = lane_id.partition("/")
        namespace, _, name = rest.partition("/")
        return cls(kind=kind, namespace=namespace, name=name)


@dataclass
class ResourceLane:
    """One tracked resource instance and the events attributed to it.

    Top-level lanes carry their descendants as a flat ``children`` list and a
    precomputed ``all_events_sorted`` covering own and descendant events.
    """

    kind: str
    namespace: str
    name: str
    events: list[TimelineEvent] = field(default_factory=list)
    children: list[ResourceLane] = field(default_factory=list)
    child_event_count: int = 0
    all_events_sorted: list[TimelineEvent] = field(default_factory=list)

    @property
    def id(self) -> str:
        return f"{self.kind}/{self.namespace}/{self.name}"

    @property
    def resource_kind(self) -> ResourceKind:
        return parse_kind(self.kind)

    @property
    def is_workload(self) -> bool:
        return is_workload_kind(self.resource_kind)

    @property
    def latest_timestamp(self) -> datetime | None:
        """Timestamp of the most recent own event, None for an empty lane."""
        if not self.events:
            return None
        return max(e.timestamp for e in self.events)

    @classmethod
    def for_ref(cls, ref: ResourceRef) -> ResourceLane:
        return cls(kind=ref.kind, namespace=ref.namespace, name=ref.name)
