"""Batch timeline engine.

Runs the hierarchy builder and the health timeline over a fixed event set.
Both are pure functions, so independent namespaces are built in parallel on
a bounded worker pool without any shared state between builds.
"""

from __future__ import annotations

import asyncio
from collections.abc import Iterable
from dataclasses import dataclass, field
from datetime import datetime

import structlog

from kubelanes.hierarchy import build_hierarchy, iter_lanes, sort_lanes_by_interest
from kubelanes.models.config import KubeLanesConfig
from kubelanes.models.events import TimelineEvent
from kubelanes.models.health import HealthSpanResult
from kubelanes.models.lanes import ResourceLane, ResourceRef
from kubelanes.models.topology import Topology
from kubelanes.observability.metrics import engine_builds_total
from kubelanes.timeline import RolloutDetector, build_health_spans, filter_routine_events
from kubelanes.timeline.classify import RolloutPredicate

_log = structlog.get_logger(component="engine")


@dataclass
class TimelineResult:
    """Lane forest plus the health spans of every lane in it, keyed by lane id."""

    lanes: list[ResourceLane] = field(default_factory=list)
    health: dict[str, HealthSpanResult] = field(default_factory=dict)


def split_by_namespace(events: Iterable[TimelineEvent]) -> dict[str, list[TimelineEvent]]:
    """Group events by namespace, preserving input order within each group."""
    groups: dict[str, list[TimelineEvent]] = {}
    for event in events:
        groups.setdefault(event.namespace, []).append(event)
    return groups


class TimelineEngine:
    """Builds swimlane data for a time window.

    Args:
        config:     KubeLanesConfig; defaults are used when omitted.
        is_rollout: Rollout predicate; defaults to a ``RolloutDetector`` using
                    the configured diff-summary markers.
    """

    def __init__(
        self,
        config: KubeLanesConfig | None = None,
        is_rollout: RolloutPredicate | None = None,
    ) -> None:
        self._config = config or KubeLanesConfig()
        self._is_rollout = is_rollout or RolloutDetector(self._config.timeline.rollout_markers)

    def build(
        self,
        events: Iterable[TimelineEvent],
        window_start: datetime,
        now: datetime,
        topology: Topology | None = None,
        root_resource: ResourceRef | None = None,
    ) -> TimelineResult:
        """Build lanes and health spans for one event set."""
        timeline_cfg = self._config.timeline
        hierarchy_cfg = self._config.hierarchy

        selected = list(events)
        if timeline_cfg.hide_routine_events:
            selected = filter_routine_events(selected)

        lanes = build_hierarchy(
            selected,
            topology=topology,
            root_resource=root_resource,
            group_by_app=hierarchy_cfg.group_by_app,
            app_label_keys=hierarchy_cfg.app_label_keys,
        )
        if timeline_cfg.sort_by_interest and root_resource is None:
            lanes = sort_lanes_by_interest(lanes, now)

        health = {
            lane.id: build_health_spans(lane.events, window_start, now, is_rollout=self._is_rollout)
            for lane in iter_lanes(lanes)
        }
        return TimelineResult(lanes=lanes, health=health)

    async def build_namespaces(
        self,
        events: Iterable[TimelineEvent],
        window_start: datetime,
        now: datetime,
        topology: Topology | None = None,
    ) -> dict[str, TimelineResult]:
        """Build one TimelineResult per namespace on the bounded worker pool.

        A namespace whose build exceeds the configured timeout is logged and
        left out of the result. Worker threads cannot be interrupted, so a
        timed-out build keeps its slot until its thread returns and at most
        ``max_workers`` builds ever run at once.
        """
        engine_cfg = self._config.engine
        semaphore = asyncio.Semaphore(engine_cfg.max_workers)

        async def _build_one(namespace: str, ns_events: list[TimelineEvent]) -> tuple[str, TimelineResult | None]:
            async with semaphore:
                worker = asyncio.create_task(asyncio.to_thread(self.build, ns_events, window_start, now, topology))
                try:
                    result = await asyncio.wait_for(
                        asyncio.shield(worker),
                        timeout=engine_cfg.build_timeout_seconds,
                    )
                except TimeoutError:
                    engine_builds_total.labels(outcome="timeout").inc()
                    _log.warning(
                        "namespace_build_timeout",
                        namespace=namespace,
                        events=len(ns_events),
                        timeout_seconds=engine_cfg.build_timeout_seconds,
                    )
                    await worker
                    return namespace, None
            engine_builds_total.labels(outcome="ok").inc()
            return namespace, result

        groups = split_by_namespace(events)
        outcomes = await asyncio.gather(*(_build_one(ns, evs) for ns, evs in groups.items()))
        _log.info("namespace_builds_complete", namespaces=len(groups))
        return {ns: result for ns, result in outcomes if result is not None}
