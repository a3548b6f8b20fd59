"""Topology snapshot data structures.

The topology is a current-state view supplied by an external source. It is
only a secondary signal for the hierarchy and is treated as untrusted.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import StrEnum

from kubelanes.models.kinds import kind_from_topology_token


class TopologyEdgeType(StrEnum):
    """Types of relationships between topology nodes."""

    MANAGES = "manages"
    EXPOSES = "exposes"
    ROUTES_TO = "routes-to"
    CONFIGURES = "configures"
    USES = "uses"


@dataclass(frozen=True)
class TopologyNode:
    """A resource in the topology snapshot; ``id`` is ``kind/namespace/name`` with a lowercase kind."""

    id: str
    kind: str = ""
    name: str = ""
    status: str = "unknown"
    labels: dict[str, str] = field(default_factory=dict)


@dataclass(frozen=True)
class TopologyEdge:
    """A typed edge between two topology node ids."""

    source: str
    target: str
    type: TopologyEdgeType
    id: str = ""
    label: str = ""


@dataclass
class Topology:
    """Nodes and edges of a topology snapshot."""

    nodes: list[TopologyNode] = field(default_factory=list)
    edges: list[TopologyEdge] = field(default_factory=list)
    warnings: list[str] = field(default_factory=list)


def node_id_to_lane_id(node_id: str) -> str | None:
    """Convert ``deployment/default/web`` into the lane id ``Deployment/default/web``.

    Returns None for ids that do not have all three parts.
    """
    parts = node_id.split("/")
    if len(parts) < 3 or not parts[0] or not parts[2]:
        return None
    return f"{kind_from_topology_token(parts[0])}/{parts[1]}/{parts[2]}"
