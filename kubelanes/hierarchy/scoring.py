"""Interest scoring used to order top-level lanes.

Recent activity dominates, problems come second, and kind acts as a
tiebreaker. Empty parents, system namespaces and update-only churn are
pushed down.
"""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass
from datetime import datetime, timedelta

from kubelanes.models.events import EventType
from kubelanes.models.kinds import interest_base_score
from kubelanes.models.lanes import ResourceLane
from kubelanes.timeline.classify import is_problematic_event

SYSTEM_NAMESPACES = frozenset({"kube-system", "kube-public", "kube-node-lease", "gke-managed-system"})

_OPERATIONS = (EventType.ADD, EventType.UPDATE, EventType.DELETE)


@dataclass
class ScoreBreakdown:
    """Individual contributions to a lane's interest score."""

    kind: int = 0
    recent_5m: int = 0
    recent_30m: int = 0
    problematic: int = 0
    variety: int = 0
    add_delete: int = 0
    children: int = 0
    empty: int = 0
    system_ns: int = 0
    noisy: int = 0

    @property
    def total(self) -> int:
        return (
            self.kind
            + self.recent_5m
            + self.recent_30m
            + self.problematic
            + self.variety
            + self.add_delete
            + self.children
            + self.empty
            + self.system_ns
            + self.noisy
        )

    @property
    def details(self) -> str:
        """Compact ``kind:50 5m:30 warn:40`` summary of the non-zero parts."""
        parts = [f"kind:{self.kind}"]
        for label, value in (
            ("5m", self.recent_5m),
            ("30m", self.recent_30m),
            ("warn", self.problematic),
            ("var", self.variety),
            ("a/d", self.add_delete),
            ("child", self.children),
            ("empty", self.empty),
            ("sys", self.system_ns),
            ("noisy", self.noisy),
        ):
            if value:
                parts.append(f"{label}:{value}")
        return " ".join(parts)


def score_lane(lane: ResourceLane, now: datetime) -> ScoreBreakdown:
    """Score a top-level lane from its own and its children's events."""
    events = [*lane.events, *(e for child in lane.children for e in child.events)]
    breakdown = ScoreBreakdown(kind=interest_base_score(lane.resource_kind))

    five_minutes_ago = now - timedelta(minutes=5)
    thirty_minutes_ago = now - timedelta(minutes=30)
    last_5m = sum(1 for e in events if e.timestamp > five_minutes_ago)
    last_30m = sum(1 for e in events if thirty_minutes_ago < e.timestamp <= five_minutes_ago)
    breakdown.recent_5m = min(last_5m * 30, 150)
    breakdown.recent_30m = min(last_30m * 10, 50)

    problematic = sum(1 for e in events if is_problematic_event(e))
    breakdown.problematic = min(problematic * 40, 200)

    operations = {e.event_type for e in events if e.event_type in _OPERATIONS}
    breakdown.variety = len(operations) * 10

    adds = sum(1 for e in events if e.event_type is EventType.ADD)
    deletes = sum(1 for e in events if e.event_type is EventType.DELETE)
    breakdown.add_delete = min(adds * 3, 30) + min(deletes * 5, 30)

    if lane.children:
        breakdown.children = 10
    if not lane.events:
        breakdown.empty = -30
    if lane.namespace in SYSTEM_NAMESPACES:
        breakdown.system_ns = -30

    updates = sum(1 for e in events if e.event_type is EventType.UPDATE)
    if updates > 10 and len(operations) == 1:
        breakdown.noisy = -min(updates, 40)

    return breakdown


def sort_lanes_by_interest(lanes: Iterable[ResourceLane], now: datetime) -> list[ResourceLane]:
    """Most interesting lanes first; ties keep their input order."""
    return sorted(lanes, key=lambda lane: score_lane(lane, now).total, reverse=True)
