"""Shared fixtures for KubeLanes integration tests.

Provides event factories and a realistic multi-namespace event set so the
integration tests can drive the engine end to end without a cluster.
"""

from __future__ import annotations

from datetime import UTC, datetime, timedelta

import pytest

from kubelanes.models.events import EventSource, EventType, HealthState, OwnerRef, TimelineEvent
from kubelanes.models.topology import Topology, TopologyEdge, TopologyEdgeType, TopologyNode

# ---------------------------------------------------------------------------
# Timestamp helpers
# ---------------------------------------------------------------------------

T0 = datetime(2026, 2, 18, 12, 0, 0, tzinfo=UTC)


def at(minutes: int) -> datetime:
    return T0 + timedelta(minutes=minutes)


# ---------------------------------------------------------------------------
# Event factory helpers
# ---------------------------------------------------------------------------


def make_event(
    event_id: str,
    kind: str,
    name: str,
    minute: int,
    event_type: EventType = EventType.UPDATE,
    namespace: str = "ns",
    source: EventSource = EventSource.INFORMER,
    owner: OwnerRef | None = None,
    health_state: HealthState | None = None,
    reason: str = "",
    labels: dict[str, str] | None = None,
    created_at: datetime | None = None,
) -> TimelineEvent:
    """Create a TimelineEvent with sensible defaults for testing."""
    return TimelineEvent(
        id=event_id,
        kind=kind,
        namespace=namespace,
        name=name,
        timestamp=at(minute),
        event_type=event_type,
        source=source,
        owner=owner,
        health_state=health_state,
        reason=reason,
        labels=labels or {},
        created_at=created_at,
    )


def make_k8s_event(event_id: str, owner: OwnerRef, minute: int, reason: str, namespace: str = "ns") -> TimelineEvent:
    """Create a Warning record attached to ``owner``."""
    return make_event(
        event_id,
        "Event",
        f"{owner.name}.{event_id}",
        minute,
        event_type=EventType.WARNING,
        namespace=namespace,
        source=EventSource.K8S_EVENT,
        owner=owner,
        reason=reason,
    )


# ---------------------------------------------------------------------------
# Fixtures
# ---------------------------------------------------------------------------


@pytest.fixture
def rollout_events() -> list[TimelineEvent]:
    """Deployment d1 -> ReplicaSet rs1 -> Pod p1 that crash-loops and is deleted."""
    return [
        make_event("d1-add", "Deployment", "d1", 0, EventType.ADD),
        make_event("rs1-add", "ReplicaSet", "rs1", 1, EventType.ADD, owner=OwnerRef("Deployment", "d1")),
        make_event("p1-add", "Pod", "p1", 2, EventType.ADD, owner=OwnerRef("ReplicaSet", "rs1")),
        make_event(
            "p1-crash",
            "Pod",
            "p1",
            3,
            owner=OwnerRef("ReplicaSet", "rs1"),
            health_state=HealthState.UNHEALTHY,
            reason="CrashLoopBackOff",
        ),
        make_event("p1-del", "Pod", "p1", 4, EventType.DELETE, owner=OwnerRef("ReplicaSet", "rs1")),
    ]


@pytest.fixture
def shop_topology() -> Topology:
    """Ingress -> Service -> Deployment with a ConfigMap, all labelled app=shop."""
    return Topology(
        nodes=[
            TopologyNode(id="ingress/shop/shop", kind="Ingress", name="shop", labels={"app": "shop"}),
            TopologyNode(id="service/shop/shop", kind="Service", name="shop", labels={"app": "shop"}),
            TopologyNode(id="deployment/shop/shop", kind="Deployment", name="shop", labels={"app": "shop"}),
        ],
        edges=[
            TopologyEdge("ingress/shop/shop", "service/shop/shop", TopologyEdgeType.ROUTES_TO),
            TopologyEdge("service/shop/shop", "deployment/shop/shop", TopologyEdgeType.EXPOSES),
            TopologyEdge("configmap/shop/shop-cfg", "deployment/shop/shop", TopologyEdgeType.CONFIGURES),
            TopologyEdge("deployment/shop/shop", "replicaset/shop/shop-1", TopologyEdgeType.MANAGES),
        ],
    )


@pytest.fixture
def shop_events() -> list[TimelineEvent]:
    """A rollout in namespace ``shop`` plus unrelated lease churn in ``kube-system``."""
    owner_rs = OwnerRef("ReplicaSet", "shop-1")
    return [
        make_event("ing", "Ingress", "shop", 0, EventType.ADD, namespace="shop"),
        make_event("svc", "Service", "shop", 0, EventType.ADD, namespace="shop"),
        make_event("cfg", "ConfigMap", "shop-cfg", 5, namespace="shop"),
        make_event("dep", "Deployment", "shop", 6, health_state=HealthState.HEALTHY, namespace="shop"),
        make_event(
            "rs", "ReplicaSet", "shop-1", 6, EventType.ADD, namespace="shop", owner=OwnerRef("Deployment", "shop")
        ),
        make_event("pod", "Pod", "shop-1-x", 7, EventType.ADD, namespace="shop", owner=owner_rs),
        make_k8s_event("pull", OwnerRef("Pod", "shop-1-x"), 8, "ImagePullBackOff", namespace="shop"),
        *(
            make_event(f"lease-{i}", "Lease", "kube-controller-manager", 10 + i, namespace="kube-system")
            for i in range(5)
        ),
    ]
