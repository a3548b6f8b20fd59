"""Tests for the individual parent signals."""

from __future__ import annotations

from datetime import UTC, datetime

from kubelanes.hierarchy.signals import (
    ClaimSignal,
    ParentClaim,
    ParentMap,
    app_group_claims,
    collect_app_labels,
    edge_claim,
    ensure_lane,
    owner_claim,
)
from kubelanes.models.events import EventType, OwnerRef, TimelineEvent
from kubelanes.models.lanes import ResourceLane
from kubelanes.models.topology import Topology, TopologyEdge, TopologyEdgeType, TopologyNode

_TS = datetime(2026, 2, 18, 12, 0, 0, tzinfo=UTC)


def _lane(lane_id: str, *events: TimelineEvent) -> ResourceLane:
    kind, namespace, name = lane_id.split("/")
    return ResourceLane(kind=kind, namespace=namespace, name=name, events=list(events))


def _make_event(kind: str, name: str, owner: OwnerRef | None = None, labels: dict[str, str] | None = None) -> TimelineEvent:
    return TimelineEvent(
        id=f"{kind}-{name}",
        kind=kind,
        namespace="default",
        name=name,
        timestamp=_TS,
        event_type=EventType.UPDATE,
        owner=owner,
        labels=labels or {},
    )


class TestParentMap:
    def test_first_claim_wins(self) -> None:
        parents = ParentMap()
        assert parents.claim(ParentClaim("Pod/ns/p", "ReplicaSet/ns/a", ClaimSignal.OWNER_REFERENCE)) is True
        assert parents.claim(ParentClaim("Pod/ns/p", "Service/ns/b", ClaimSignal.TOPOLOGY)) is False
        assert parents.get("Pod/ns/p") == "ReplicaSet/ns/a"
        assert len(parents) == 1

    def test_self_claim_rejected(self) -> None:
        parents = ParentMap()
        assert parents.claim(ParentClaim("Pod/ns/p", "Pod/ns/p", ClaimSignal.TOPOLOGY)) is False
        assert "Pod/ns/p" not in parents

    def test_unclaimed_lane(self) -> None:
        assert ParentMap().get("Pod/ns/p") is None


class TestEnsureLane:
    def test_synthesizes_missing_lane(self) -> None:
        lanes: dict[str, ResourceLane] = {}
        lane = ensure_lane(lanes, "ReplicaSet/default/rs-1")
        assert (lane.kind, lane.namespace, lane.name) == ("ReplicaSet", "default", "rs-1")
        assert lanes == {"ReplicaSet/default/rs-1": lane}

    def test_returns_existing_lane(self) -> None:
        existing = _lane("Pod/default/p", _make_event("Pod", "p"))
        lanes = {existing.id: existing}
        assert ensure_lane(lanes, existing.id) is existing


class TestOwnerClaim:
    def test_claim_from_owner(self) -> None:
        lane = _lane("Pod/default/p", _make_event("Pod", "p", owner=OwnerRef("ReplicaSet", "rs")))
        assert owner_claim(lane) == ParentClaim("Pod/default/p", "ReplicaSet/default/rs", ClaimSignal.OWNER_REFERENCE)

    def test_no_owner(self) -> None:
        assert owner_claim(_lane("Deployment/default/web", _make_event("Deployment", "web"))) is None


class TestEdgeClaim:
    def _lanes(self, *lane_ids: str) -> dict[str, ResourceLane]:
        return {lane_id: _lane(lane_id) for lane_id in lane_ids}

    def test_exposes(self) -> None:
        lanes = self._lanes("Service/default/svc", "Deployment/default/web")
        edge = TopologyEdge("service/default/svc", "deployment/default/web", TopologyEdgeType.EXPOSES)
        assert edge_claim(edge, lanes) == ParentClaim(
            "Deployment/default/web", "Service/default/svc", ClaimSignal.TOPOLOGY
        )

    def test_ingress_route_inverted(self) -> None:
        lanes = self._lanes("Ingress/default/ing", "Service/default/svc")
        edge = TopologyEdge("ingress/default/ing", "service/default/svc", TopologyEdgeType.ROUTES_TO)
        claim = edge_claim(edge, lanes)
        assert claim is not None
        assert (claim.child, claim.parent) == ("Ingress/default/ing", "Service/default/svc")

    def test_configures(self) -> None:
        lanes = self._lanes("ConfigMap/default/cfg", "Deployment/default/web")
        edge = TopologyEdge("configmap/default/cfg", "deployment/default/web", TopologyEdgeType.CONFIGURES)
        claim = edge_claim(edge, lanes)
        assert claim is not None
        assert (claim.child, claim.parent) == ("ConfigMap/default/cfg", "Deployment/default/web")

    def test_manages_ignored(self) -> None:
        lanes = self._lanes("Deployment/default/web", "ReplicaSet/default/rs")
        edge = TopologyEdge("deployment/default/web", "replicaset/default/rs", TopologyEdgeType.MANAGES)
        assert edge_claim(edge, lanes) is None

    def test_malformed_ignored(self) -> None:
        edge = TopologyEdge("service/svc", "deployment/default/web", TopologyEdgeType.EXPOSES)
        assert edge_claim(edge, self._lanes("Deployment/default/web")) is None


class TestAppLabels:
    def test_topology_labels_take_precedence(self) -> None:
        event = _make_event("Deployment", "web", labels={"app": "from-event"})
        lanes = {"Deployment/default/web": _lane("Deployment/default/web", event)}
        topology = Topology(nodes=[TopologyNode(id="deployment/default/web", labels={"app": "from-topology"})])
        assert collect_app_labels(lanes, topology, ("app",)) == {"Deployment/default/web": "from-topology"}

    def test_key_order(self) -> None:
        event = _make_event("Service", "svc", labels={"app": "short", "app.kubernetes.io/name": "long"})
        lanes = {"Service/default/svc": _lane("Service/default/svc", event)}
        assert collect_app_labels(lanes, None, ("app.kubernetes.io/name", "app")) == {"Service/default/svc": "long"}

    def test_group_claims_pick_service(self) -> None:
        lanes = {
            lane_id: _lane(lane_id)
            for lane_id in ("Deployment/default/web", "ConfigMap/default/web-cfg", "Service/default/web")
        }
        labels = dict.fromkeys(lanes, "web")
        claims = app_group_claims(lanes, ParentMap(), labels)
        assert {(c.child, c.parent) for c in claims} == {
            ("Deployment/default/web", "Service/default/web"),
            ("ConfigMap/default/web-cfg", "Service/default/web"),
        }
        assert all(c.signal is ClaimSignal.APP_LABEL for c in claims)

    def test_single_member_group_makes_no_claims(self) -> None:
        lanes = {"Deployment/default/web": _lane("Deployment/default/web")}
        assert app_group_claims(lanes, ParentMap(), {"Deployment/default/web": "web"}) == []
