"""Resource hierarchy builder.

Groups timeline events into lanes and arranges the lanes into a two-level
forest: top-level lanes with a flat list of descendants. Parents come from
three independent signals applied in precedence order:

1. Owner references on events (Deployment -> ReplicaSet -> Pod).
2. Topology edges (Service exposes Deployment, Ingress routes to Service,
   ConfigMap configures Deployment).
3. Shared app labels among primary kinds.

The computation is a pure function of its inputs and never raises for
incomplete or malformed input; every missing signal only means less
hierarchy information.
"""

from __future__ import annotations

from collections.abc import Iterable, Sequence

from kubelanes.hierarchy.signals import (
    ParentMap,
    app_group_claims,
    collect_app_labels,
    edge_claim,
    ensure_lane,
    owner_claim,
)
from kubelanes.models.config import DEFAULT_APP_LABEL_KEYS
from kubelanes.models.events import TimelineEvent
from kubelanes.models.kinds import child_order, is_record_kind, parse_kind
from kubelanes.models.lanes import ResourceLane, ResourceRef
from kubelanes.models.topology import Topology
from kubelanes.observability.logging import get_logger
from kubelanes.observability.metrics import (
    hierarchy_build_duration_seconds,
    hierarchy_builds_total,
    parent_cycles_truncated_total,
)
from kubelanes.timeline.classify import sort_events_for_rendering

_logger = get_logger("hierarchy.builder")

def _lanes_from_events(events: Iterable[TimelineEvent]) -> dict[str, ResourceLane]:
    """Create one lane per resource; owned activity records join their owner's lane."""
    lanes: dict[str, ResourceLane] = {}
    pending: list[tuple[TimelineEvent, str]] = []

    for event in events:
        if event.owner is not None and is_record_kind(parse_kind(event.kind)):
            pending.append((event, f"{event.owner.kind}/{event.namespace}/{event.owner.name}"))
            continue
        ensure_lane(lanes, event.lane_id).events.append(event)

    for event, owner_id in pending:
        if owner_id not in lanes:
            _logger.debug("record_owner_lane_synthesized", owner=owner_id, event_id=event.id)
        ensure_lane(lanes, owner_id).events.append(event)

    return lanes


def _apply_owner_references(lanes: dict[str, ResourceLane], parents: ParentMap) -> None:
    for lane in list(lanes.values()):
        claim = owner_claim(lane)
        if claim is not None and parents.claim(claim):
            ensure_lane(lanes, claim.parent)


def _apply_topology(lanes: dict[str, ResourceLane], parents: ParentMap, topology: Topology) -> None:
    for edge in topology.edges:
        claim = edge_claim(edge, lanes)
        if claim is not None and parents.claim(claim):
            ensure_lane(lanes, claim.parent)


def _apply_app_labels(
    lanes: dict[str, ResourceLane],
    parents: ParentMap,
    topology: Topology | None,
    app_label_keys: Sequence[str],
) -> None:
    app_labels = collect_app_labels(lanes, topology, app_label_keys)
    for claim in app_group_claims(lanes, parents, app_labels):
        parents.claim(claim)


def resolve_root(lane_id: str, parents: ParentMap, lanes: dict[str, ResourceLane]) -> str:
    """Follow parents up to the top-level ancestor of ``lane_id``.

    A lane reached twice ends the walk and is returned as the root, so a
    cyclic parent map still terminates.
    """
    visited: set[str] = set()
    current = lane_id
    while True:
        if current in visited:
            parent_cycles_truncated_total.inc()
            _logger.warning("parent_cycle_truncated", lane=lane_id, root=current)
            return current
        visited.add(current)
        parent = parents.get(current)
        if parent is None or parent not in lanes:
            return current
        current = parent


def _sort_children(children: list[ResourceLane]) -> None:
    # Newest first within a kind; lanes without events go last.
    dated = sorted(
        (c for c in children if c.latest_timestamp is not None),
        key=lambda c: c.latest_timestamp,
        reverse=True,
    )
    children[:] = dated + [c for c in children if c.latest_timestamp is None]
    children.sort(key=lambda c: child_order(c.resource_kind))


def _merge_events(lane: ResourceLane) -> list[TimelineEvent]:
    """Own and descendant events, deduplicated by id, in render order."""
    unique: dict[str, TimelineEvent] = {}
    for event in lane.events:
        unique[event.id] = event
    for child in lane.children:
        for event in child.events:
            unique[event.id] = event
    return sort_events_for_rendering(unique.values())


def _assemble(lanes: dict[str, ResourceLane], parents: ParentMap) -> list[ResourceLane]:
    descendants: set[str] = set()
    for lane_id, lane in lanes.items():
        if lane_id not in parents:
            continue
        root_id = resolve_root(lane_id, parents, lanes)
        if root_id != lane_id:
            root = lanes[root_id]
            root.children.append(lane)
            root.child_event_count += len(lane.events)
            descendants.add(lane_id)

    top_level: list[ResourceLane] = []
    for lane_id, lane in lanes.items():
        if lane_id in descendants:
            lane.all_events_sorted = sort_events_for_rendering(lane.events)
            continue
        _sort_children(lane.children)
        lane.all_events_sorted = _merge_events(lane)
        top_level.append(lane)
    return top_level


def _focus(top_level: list[ResourceLane], root_resource: ResourceRef) -> list[ResourceLane]:
    """The top-level lane containing ``root_resource``, or a placeholder lane."""
    wanted = root_resource.lane_id
    for lane in top_level:
        if lane.id == wanted:
            return [lane]
    for lane in top_level:
        if any(child.id == wanted for child in lane.children):
            return [lane]
    _logger.debug("focal_resource_placeholder", resource=wanted)
    return [ResourceLane.for_ref(root_resource)]


def build_hierarchy(
    events: Iterable[TimelineEvent],
    topology: Topology | None = None,
    root_resource: ResourceRef | None = None,
    group_by_app: bool = True,
    app_label_keys: Sequence[str] = DEFAULT_APP_LABEL_KEYS,
) -> list[ResourceLane]:
    """Build the lane forest for ``events``.

    Args:
        events:         Timeline events; never mutated.
        topology:       Optional topology snapshot used as a secondary signal.
        root_resource:  If given, return only the top-level lane containing
                        this resource (or a placeholder lane for it).
        group_by_app:   Whether to group primary kinds by shared app label.
        app_label_keys: Label keys holding the app name, in lookup order.

    Returns:
        Top-level lanes, each carrying its descendants in ``children``.
    """
    hierarchy_builds_total.labels(focal="true" if root_resource is not None else "false").inc()
    with hierarchy_build_duration_seconds.time():
        lanes = _lanes_from_events(events)
        parents = ParentMap()

        _apply_owner_references(lanes, parents)
        if topology is not None:
            _apply_topology(lanes, parents, topology)
        if group_by_app:
            _apply_app_labels(lanes, parents, topology, app_label_keys)

        top_level = _assemble(lanes, parents)

    _logger.debug(
        "hierarchy_built",
        lanes=len(lanes),
        top_level=len(top_level),
        parented=len(parents),
    )

    if root_resource is not None:
        return _focus(top_level, root_resource)
    return top_level
