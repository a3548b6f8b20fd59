"""Read-only helpers over a computed lane forest."""

from __future__ import annotations

from collections.abc import Iterable, Iterator

from kubelanes.models.events import TimelineEvent
from kubelanes.models.lanes import ResourceLane


def iter_lanes(lanes: Iterable[ResourceLane]) -> Iterator[ResourceLane]:
    """Yield every top-level lane followed by its descendants."""
    for lane in lanes:
        yield lane
        yield from lane.children


def get_all_events_from_hierarchy(lanes: Iterable[ResourceLane]) -> list[TimelineEvent]:
    """All events in the forest, deduplicated by id, newest first."""
    unique: dict[str, TimelineEvent] = {}
    for lane in iter_lanes(lanes):
        for event in lane.events:
            unique[event.id] = event
    return sorted(unique.values(), key=lambda e: e.timestamp, reverse=True)


def count_events_in_hierarchy(lanes: Iterable[ResourceLane]) -> int:
    """Number of events attributed to lanes in the forest, without deduplication."""
    return sum(len(lane.events) for lane in iter_lanes(lanes))


def find_lane(lanes: Iterable[ResourceLane], lane_id: str) -> ResourceLane | None:
    """Locate a lane by id anywhere in the forest."""
    for lane in iter_lanes(lanes):
        if lane.id == lane_id:
            return lane
    return None
