"""Routine-noise detection for timeline events.

Leases, leader-election locks and endpoint churn update constantly and drown
out meaningful changes; these helpers let callers hide them.
"""

from __future__ import annotations

import re
from collections.abc import Iterable

from kubelanes.models.events import EventType, TimelineEvent
from kubelanes.models.kinds import ResourceKind, parse_kind

_NOISY_NAME_PATTERNS = (
    re.compile(r"^kube-scheduler$"),
    re.compile(r"^kube-controller-manager$"),
    re.compile(r"-leader-election$"),
    re.compile(r"-lock$"),
    re.compile(r"-lease$"),
    re.compile(r"^cluster-autoscaler-status$"),
    re.compile(r"^cluster-kubestore$"),
    re.compile(r"^datadog-leader-election$"),
    re.compile(r"^cert-manager-controller$"),
)

_NOISY_KINDS = frozenset(
    {ResourceKind.LEASE, ResourceKind.ENDPOINTS, ResourceKind.ENDPOINT_SLICE, ResourceKind.EVENT}
)


def is_routine_event(event: TimelineEvent) -> bool:
    """True if the event is heartbeat-style noise rather than a meaningful change."""
    if event.historical:
        return False

    kind = parse_kind(event.kind)

    # Lifecycle churn of Event objects themselves is always noise.
    if kind is ResourceKind.EVENT and event.is_change_event:
        return True

    # Adds and deletes are always interesting.
    if event.event_type is not EventType.UPDATE:
        return False

    if kind in _NOISY_KINDS:
        return True

    if any(pattern.search(event.name) for pattern in _NOISY_NAME_PATTERNS):
        return True

    if kind is ResourceKind.CONFIG_MAP:
        name = event.name
        if name.endswith(("-lock", "-lease", "-leader")) or "kubestore" in name:
            return True

    return False


def filter_routine_events(events: Iterable[TimelineEvent]) -> list[TimelineEvent]:
    """Drop routine events, preserving order."""
    return [e for e in events if not is_routine_event(e)]
