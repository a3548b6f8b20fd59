"""Health timeline reconstruction and shared event classification.

Submodules:
    classify -- Problematic-event allowlist, rollout predicate, render order.
    filters  -- Routine-noise detection (leases, locks, endpoint churn).
    health   -- Health span reconstruction for a single lane.
"""

from kubelanes.timeline.classify import (
    PROBLEMATIC_REASONS,
    RolloutDetector,
    effective_health_state,
    is_problematic_event,
    render_priority,
    sort_events_for_rendering,
)
from kubelanes.timeline.filters import filter_routine_events, is_routine_event
from kubelanes.timeline.health import build_health_spans

__all__ = [
    "PROBLEMATIC_REASONS",
    "RolloutDetector",
    "build_health_spans",
    "effective_health_state",
    "filter_routine_events",
    "is_problematic_event",
    "is_routine_event",
    "render_priority",
    "sort_events_for_rendering",
]
