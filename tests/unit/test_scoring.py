"""Tests for top-level lane interest scoring."""

from __future__ import annotations

import itertools
from datetime import UTC, datetime, timedelta

from kubelanes.hierarchy.scoring import score_lane, sort_lanes_by_interest
from kubelanes.models.events import EventSource, EventType, TimelineEvent
from kubelanes.models.lanes import ResourceLane

_NOW = datetime(2026, 2, 18, 12, 0, 0, tzinfo=UTC)
_ids = itertools.count()


def _make_event(
    minutes_ago: int,
    event_type: EventType = EventType.UPDATE,
    source: EventSource = EventSource.INFORMER,
    reason: str = "",
) -> TimelineEvent:
    return TimelineEvent(
        id=f"evt-{next(_ids)}",
        kind="Pod",
        namespace="default",
        name="p",
        timestamp=_NOW - timedelta(minutes=minutes_ago),
        event_type=event_type,
        source=source,
        reason=reason,
    )


class TestScoreLane:
    def test_active_workload(self) -> None:
        pod = ResourceLane(
            kind="Pod",
            namespace="default",
            name="web-1",
            events=[_make_event(20, EventType.WARNING, EventSource.K8S_EVENT, reason="BackOff")],
        )
        lane = ResourceLane(
            kind="Deployment",
            namespace="default",
            name="web",
            events=[_make_event(2, EventType.ADD), _make_event(10)],
            children=[pod],
        )
        breakdown = score_lane(lane, _NOW)
        assert breakdown.kind == 50
        assert breakdown.recent_5m == 30
        assert breakdown.recent_30m == 20
        assert breakdown.problematic == 40
        assert breakdown.variety == 20
        assert breakdown.add_delete == 3
        assert breakdown.children == 10
        assert breakdown.total == 173

    def test_empty_system_parent(self) -> None:
        child = ResourceLane(kind="Pod", namespace="kube-system", name="p", events=[_make_event(120)])
        lane = ResourceLane(kind="ReplicaSet", namespace="kube-system", name="rs", children=[child])
        breakdown = score_lane(lane, _NOW)
        assert breakdown.total == -20
        assert breakdown.details == "kind:20 var:10 child:10 empty:-30 sys:-30"

    def test_update_only_churn_is_penalized(self) -> None:
        lane = ResourceLane(
            kind="ConfigMap",
            namespace="default",
            name="cfg",
            events=[_make_event(120 + i) for i in range(12)],
        )
        breakdown = score_lane(lane, _NOW)
        assert breakdown.noisy == -12
        assert breakdown.total == 8

    def test_bonuses_are_capped(self) -> None:
        lane = ResourceLane(
            kind="Pod",
            namespace="default",
            name="p",
            events=[_make_event(1, EventType.DELETE, reason="Evicted") for _ in range(20)],
        )
        breakdown = score_lane(lane, _NOW)
        assert breakdown.recent_5m == 150
        assert breakdown.problematic == 200
        assert breakdown.add_delete == 30

    def test_unknown_kind_base_score(self) -> None:
        lane = ResourceLane(kind="Widget", namespace="default", name="w", events=[_make_event(120)])
        assert score_lane(lane, _NOW).kind == 15


class TestSortByInterest:
    def test_recent_activity_first(self) -> None:
        quiet = ResourceLane(kind="Deployment", namespace="default", name="quiet", events=[_make_event(300)])
        busy = ResourceLane(kind="Pod", namespace="default", name="busy", events=[_make_event(1), _make_event(2)])
        assert [lane.name for lane in sort_lanes_by_interest([quiet, busy], _NOW)] == ["busy", "quiet"]

    def test_ties_keep_input_order(self) -> None:
        a = ResourceLane(kind="Service", namespace="default", name="a", events=[_make_event(300)])
        b = ResourceLane(kind="Service", namespace="default", name="b", events=[_make_event(300)])
        assert [lane.name for lane in sort_lanes_by_interest([a, b], _NOW)] == ["a", "b"]
        assert [lane.name for lane in sort_lanes_by_interest([b, a], _NOW)] == ["b", "a"]
