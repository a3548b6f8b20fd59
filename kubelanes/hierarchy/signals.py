"""Parent signals for the hierarchy builder.

Each signal turns one piece of context (a lane's owner reference, a topology
edge, an app-label group) into ``ParentClaim`` values. The builder applies
the signals in precedence order to a single ``ParentMap`` where the first
claim on a child wins.
"""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from dataclasses import dataclass
from enum import StrEnum

from kubelanes.models.kinds import (
    ResourceKind,
    app_group_order,
    is_label_groupable,
    is_record_kind,
    parse_kind,
)
from kubelanes.models.lanes import ResourceLane, ResourceRef
from kubelanes.models.topology import Topology, TopologyEdge, TopologyEdgeType, node_id_to_lane_id
from kubelanes.observability.logging import get_logger
from kubelanes.observability.metrics import parent_claims_total, topology_edges_ignored_total

_logger = get_logger("hierarchy.signals")


class ClaimSignal(StrEnum):
    """Source of a parent relationship, in precedence order."""

    OWNER_REFERENCE = "owner_reference"
    TOPOLOGY = "topology"
    APP_LABEL = "app_label"


@dataclass(frozen=True)
class ParentClaim:
    """Proposal that ``child`` belongs under ``parent``."""

    child: str
    parent: str
    signal: ClaimSignal


class ParentMap:
    """Child lane id -> parent lane id, where each child is claimed at most once."""

    def __init__(self) -> None:
        self._parents: dict[str, str] = {}

    def __contains__(self, child: str) -> bool:
        return child in self._parents

    def __len__(self) -> int:
        return len(self._parents)

    def get(self, child: str) -> str | None:
        return self._parents.get(child)

    def claim(self, claim: ParentClaim) -> bool:
        """Record the claim unless the child already has a parent."""
        if claim.child in self._parents or claim.child == claim.parent:
            return False
        self._parents[claim.child] = claim.parent
        parent_claims_total.labels(signal=claim.signal.value).inc()
        return True


def ensure_lane(lanes: dict[str, ResourceLane], lane_id: str) -> ResourceLane:
    """Return the lane for ``lane_id``, synthesizing an empty one if needed."""
    lane = lanes.get(lane_id)
    if lane is None:
        lane = ResourceLane.for_ref(ResourceRef.parse(lane_id))
        lanes[lane_id] = lane
    return lane


def _kind_of(lane_id: str) -> ResourceKind:
    return parse_kind(lane_id.split("/", 1)[0])


# ---------------------------------------------------------------------------
# Signal 1: owner references
# ---------------------------------------------------------------------------


def owner_claim(lane: ResourceLane) -> ParentClaim | None:
    """Claim from the first of the lane's own events that carries an owner reference.

    Activity records attached to the lane name the lane itself as owner and
    are skipped.
    """
    for event in lane.events:
        if event.owner is not None and not is_record_kind(parse_kind(event.kind)):
            parent = f"{event.owner.kind}/{lane.namespace}/{event.owner.name}"
            return ParentClaim(child=lane.id, parent=parent, signal=ClaimSignal.OWNER_REFERENCE)
    return None


# ---------------------------------------------------------------------------
# Signal 2: topology edges
# ---------------------------------------------------------------------------


def _ignore_edge(edge: TopologyEdge, reason: str) -> None:
    topology_edges_ignored_total.labels(reason=reason).inc()
    _logger.debug("topology_edge_ignored", source=edge.source, target=edge.target, type=edge.type, reason=reason)


def edge_claim(edge: TopologyEdge, lanes: Mapping[str, ResourceLane]) -> ParentClaim | None:
    """Interpret one topology edge as a parent claim.

    The claimed child must already have a lane; the parent may be missing and
    is synthesized by the caller when the claim is accepted.
    """
    source = node_id_to_lane_id(edge.source)
    target = node_id_to_lane_id(edge.target)
    if source is None or target is None:
        _ignore_edge(edge, "malformed")
        return None
    if source == target:
        _ignore_edge(edge, "self_reference")
        return None
    # Ownership edges duplicate the owner references already applied.
    if edge.type is TopologyEdgeType.MANAGES:
        _ignore_edge(edge, "manages")
        return None
    if source not in lanes and target not in lanes:
        _ignore_edge(edge, "dangling")
        return None

    child: str
    parent: str
    match edge.type:
        case TopologyEdgeType.EXPOSES:
            child, parent = target, source
        case TopologyEdgeType.ROUTES_TO:
            source_kind = _kind_of(source)
            target_kind = _kind_of(target)
            # The Service is the stable aggregation point on either side of a route.
            if source_kind is ResourceKind.INGRESS and target_kind is ResourceKind.SERVICE:
                child, parent = source, target
            elif source_kind is ResourceKind.SERVICE:
                child, parent = target, source
            else:
                _ignore_edge(edge, "unsupported_route")
                return None
        case TopologyEdgeType.CONFIGURES | TopologyEdgeType.USES:
            child, parent = source, target
        case _:
            _ignore_edge(edge, "unknown_type")
            return None

    if child not in lanes:
        _ignore_edge(edge, "child_without_lane")
        return None
    return ParentClaim(child=child, parent=parent, signal=ClaimSignal.TOPOLOGY)


# ---------------------------------------------------------------------------
# Signal 3: app label grouping
# ---------------------------------------------------------------------------


def _app_label(labels: Mapping[str, str], keys: Sequence[str]) -> str | None:
    for key in keys:
        value = labels.get(key)
        if value:
            return value
    return None


def collect_app_labels(
    lanes: Mapping[str, ResourceLane],
    topology: Topology | None,
    keys: Sequence[str],
) -> dict[str, str]:
    """Map lane id -> app label, from topology nodes first and own events second."""
    app_labels: dict[str, str] = {}
    if topology is not None:
        for node in topology.nodes:
            lane_id = node_id_to_lane_id(node.id)
            if lane_id is None:
                continue
            label = _app_label(node.labels, keys)
            if label:
                app_labels[lane_id] = label

    for lane_id, lane in lanes.items():
        if lane_id in app_labels:
            continue
        for event in lane.events:
            label = _app_label(event.labels, keys)
            if label:
                app_labels[lane_id] = label
                break
    return app_labels


def app_group_claims(
    lanes: Mapping[str, ResourceLane],
    parents: ParentMap,
    app_labels: Mapping[str, str],
) -> list[ParentClaim]:
    """Group unparented primary lanes sharing an app label under one representative."""
    groups: dict[str, list[str]] = {}
    for lane_id, lane in lanes.items():
        if lane_id in parents:
            continue
        if not is_label_groupable(lane.resource_kind):
            continue
        label = app_labels.get(lane_id)
        if label:
            groups.setdefault(label, []).append(lane_id)

    claims: list[ParentClaim] = []
    for members in groups.values():
        if len(members) < 2:
            continue
        ranked = sorted(members, key=lambda lane_id: app_group_order(lanes[lane_id].resource_kind))
        representative = ranked[0]
        claims.extend(
            ParentClaim(child=member, parent=representative, signal=ClaimSignal.APP_LABEL)
            for member in ranked[1:]
        )
    return claims
