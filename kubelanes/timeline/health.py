"""Health timeline reconstruction.

Turns the point-in-time change events of one lane into contiguous,
non-overlapping health spans bounded by the resource's known existence.
"""

from __future__ import annotations

from collections.abc import Sequence
from datetime import datetime

from kubelanes.models.events import EventType, TimelineEvent
from kubelanes.models.health import HealthLabel, HealthSpan, HealthSpanResult
from kubelanes.observability.logging import get_logger
from kubelanes.observability.metrics import health_span_builds_total
from kubelanes.timeline.classify import (
    RolloutPredicate,
    default_rollout_detector,
    effective_health_state,
)

_logger = get_logger("timeline.health")


def _first_created_at(events: Sequence[TimelineEvent]) -> datetime | None:
    for event in sorted(events, key=lambda e: e.timestamp):
        if event.created_at is not None:
            return event.created_at
    return None


def _exists_from(
    created_at: datetime | None,
    changes: Sequence[TimelineEvent],
    window_start: datetime,
) -> datetime:
    """Earliest instant the resource is known to exist.

    Without a creation time an observed add is the only evidence of a later
    start; otherwise the resource is assumed to predate the window.
    """
    if created_at is not None:
        return created_at
    first_add = next((e for e in changes if e.event_type is EventType.ADD), None)
    if first_add is not None and first_add.timestamp > window_start:
        return first_add.timestamp
    return window_start


def build_health_spans(
    events: Sequence[TimelineEvent],
    window_start: datetime,
    now: datetime,
    all_events: Sequence[TimelineEvent] | None = None,
    is_rollout: RolloutPredicate = default_rollout_detector,
) -> HealthSpanResult:
    """Reconstruct the health spans of one lane inside ``[window_start, now)``.

    Args:
        events:       The lane's events; only change events drive transitions.
        window_start: Start of the visible window.
        now:          Current time; no span extends past it.
        all_events:   Events searched for the resource's creation time
                      (falls back to ``events``), e.g. including K8s Events.
        is_rollout:   Predicate remapping rollout degradation to ROLLING.

    Returns:
        HealthSpanResult with ordered, contiguous spans plus creation metadata.
    """
    health_span_builds_total.inc()
    metadata_events = all_events if all_events is not None else events
    if not metadata_events:
        return HealthSpanResult()

    changes = sorted((e for e in events if e.is_change_event), key=lambda e: e.timestamp)

    created_at = _first_created_at(metadata_events)
    created_before_window = created_at is not None and created_at < window_start
    exists_from = _exists_from(created_at, changes, window_start)

    delete_event = next((e for e in changes if e.event_type is EventType.DELETE), None)
    exists_until = delete_event.timestamp if delete_event is not None else now
    end_bound = min(exists_until, now)

    spans: list[HealthSpan] = []
    current: HealthLabel | None = None
    span_start = max(exists_from, window_start)

    for event in changes:
        ts = event.timestamp
        if ts < window_start or ts < exists_from:
            continue
        # The deletion closes the timeline; nothing at or after it opens a span.
        if ts >= end_bound:
            continue

        health = effective_health_state(event, is_rollout)
        if current is None:
            current = health
            continue
        if health == current:
            continue
        if ts > span_start:
            spans.append(HealthSpan(start=span_start, end=ts, health=current))
            span_start = ts
        elif spans and spans[-1].health == health:
            # Same-instant flip back to the previous state reopens its span.
            span_start = spans.pop().start
        current = health

    if current is not None and end_bound > span_start:
        spans.append(HealthSpan(start=span_start, end=end_bound, health=current))

    # Resources without health signals (e.g. Services) still render as present.
    if not spans and created_at is not None and delete_event is None:
        effective_start = max(exists_from, window_start)
        if effective_start < now:
            spans.append(HealthSpan(start=effective_start, end=now, health=HealthLabel.HEALTHY))

    _logger.debug(
        "health_spans_built",
        change_events=len(changes),
        spans=len(spans),
        deleted=delete_event is not None,
    )
    return HealthSpanResult(
        spans=spans,
        created_at=created_at,
        created_before_window=created_before_window,
    )
