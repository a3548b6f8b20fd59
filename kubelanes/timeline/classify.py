"""Event classification shared by the hierarchy builder and the health timeline.

Problematic reasons are an explicit allowlist; an unknown reason is never
treated as a failure. Rollout detection is a pluggable predicate because the
diff summaries it inspects are free text.
"""

from __future__ import annotations

from collections.abc import Callable, Iterable

from kubelanes.models.config import DEFAULT_ROLLOUT_MARKERS
from kubelanes.models.events import EventType, TimelineEvent
from kubelanes.models.health import HealthLabel
from kubelanes.models.kinds import parse_kind, supports_rollout

PROBLEMATIC_REASONS: frozenset[str] = frozenset(
    {
        # Container state
        "BackOff",
        "CrashLoopBackOff",
        "Failed",
        "Error",
        "OOMKilling",
        "OOMKilled",
        "CreateContainerConfigError",
        "CreateContainerError",
        "RunContainerError",
        "InvalidImageName",
        "ErrImagePull",
        "ImagePullBackOff",
        "ContainerStatusUnknown",
        # Pod scheduling and lifecycle
        "FailedScheduling",
        "FailedMount",
        "FailedAttachVolume",
        "FailedCreate",
        "FailedDelete",
        "Unhealthy",
        "Killing",
        "Evicted",
        "FailedSync",
        "FailedValidation",
        "FailedPreStopHook",
        "FailedPostStartHook",
        "HostPortConflict",
        "InsufficientMemory",
        "InsufficientCPU",
        # Node conditions
        "NodeNotReady",
        "NetworkNotReady",
        "KubeletNotReady",
        "MemoryPressure",
        "DiskPressure",
        "PIDPressure",
        "NodeStatusUnknown",
        # Workload progress
        "ProgressDeadlineExceeded",
        "ReplicaFailure",
        "MinimumReplicasUnavailable",
        # HPA
        "FailedGetScale",
        "FailedRescale",
        "FailedUpdateScale",
        "FailedGetResourceMetric",
        "FailedComputeMetricsReplicas",
        # Storage
        "ProvisioningFailed",
        "FailedBinding",
        "VolumeFailedDelete",
        # Jobs
        "DeadlineExceeded",
        "BackoffLimitExceeded",
    }
)

RolloutPredicate = Callable[[TimelineEvent], bool]


def is_problematic_event(event: TimelineEvent) -> bool:
    """True for warning-level records and events with a known failure reason."""
    if event.event_type is EventType.WARNING:
        return True
    return bool(event.reason) and event.reason in PROBLEMATIC_REASONS


class RolloutDetector:
    """Decides whether a degraded event belongs to an in-progress rollout.

    Matches case-insensitive markers in the diff summary of rollout-capable
    kinds. Known to miss rollouts whose summary does not mention replicas,
    images or the pod template, and to flag any diff that happens to contain
    a marker.
    """

    def __init__(self, markers: Iterable[str] = DEFAULT_ROLLOUT_MARKERS) -> None:
        self.markers = tuple(m.lower() for m in markers if m)

    def __call__(self, event: TimelineEvent) -> bool:
        if not supports_rollout(parse_kind(event.kind)):
            return False
        if event.diff is None or not event.diff.summary:
            return False
        summary = event.diff.summary.lower()
        return any(marker in summary for marker in self.markers)


default_rollout_detector = RolloutDetector()


def effective_health_state(
    event: TimelineEvent,
    is_rollout: RolloutPredicate = default_rollout_detector,
) -> HealthLabel:
    """Health an event implies, with rollout degradation remapped to ROLLING."""
    if event.health_state is not None:
        base = HealthLabel(event.health_state.value)
    elif is_problematic_event(event):
        base = HealthLabel.UNHEALTHY
    else:
        base = HealthLabel.HEALTHY

    if base is HealthLabel.DEGRADED and is_rollout(event):
        return HealthLabel.ROLLING
    return base


def render_priority(event: TimelineEvent) -> int:
    """Draw order of a marker: update < add < delete < problematic."""
    if is_problematic_event(event):
        return 3
    if event.event_type is EventType.DELETE:
        return 2
    if event.event_type is EventType.ADD:
        return 1
    return 0


def sort_events_for_rendering(events: Iterable[TimelineEvent]) -> list[TimelineEvent]:
    """Stable sort so important markers render on top of routine ones."""
    return sorted(events, key=render_priority)
