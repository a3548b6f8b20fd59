"""Core data structures for KubeLanes."""

from kubelanes.models.config import KubeLanesConfig
from kubelanes.models.events import (
    DiffInfo,
    EventSource,
    EventType,
    FieldChange,
    HealthState,
    OwnerRef,
    TimelineEvent,
)
from kubelanes.models.health import HealthLabel, HealthSpan, HealthSpanResult
from kubelanes.models.kinds import ResourceKind, parse_kind
from kubelanes.models.lanes import ResourceLane, ResourceRef
from kubelanes.models.topology import Topology, TopologyEdge, TopologyEdgeType, TopologyNode

__all__ = [
    "DiffInfo",
    "EventSource",
    "EventType",
    "FieldChange",
    "HealthLabel",
    "HealthSpan",
    "HealthSpanResult",
    "HealthState",
    "KubeLanesConfig",
    "OwnerRef",
    "ResourceKind",
    "ResourceLane",
    "ResourceRef",
    "TimelineEvent",
    "Topology",
    "TopologyEdge",
    "TopologyEdgeType",
    "TopologyNode",
    "parse_kind",
]
