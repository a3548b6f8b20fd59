"""Closed enumeration of resource kinds and every per-kind lookup.

Lanes keep the raw kind string as part of their identity; these helpers
classify that string through ``parse_kind`` so that an unrecognised kind
falls through to ``ResourceKind.UNKNOWN`` and gets generic treatment.
"""

from __future__ import annotations

from enum import StrEnum


class ResourceKind(StrEnum):
    """Resource kinds the timeline knows how to arrange."""

    POD = "Pod"
    POD_GROUP = "PodGroup"
    REPLICA_SET = "ReplicaSet"
    DEPLOYMENT = "Deployment"
    ROLLOUT = "Rollout"
    STATEFUL_SET = "StatefulSet"
    DAEMON_SET = "DaemonSet"
    JOB = "Job"
    CRON_JOB = "CronJob"
    SERVICE = "Service"
    INGRESS = "Ingress"
    CONFIG_MAP = "ConfigMap"
    SECRET = "Secret"
    HPA = "HPA"
    PVC = "PVC"
    NAMESPACE = "Namespace"
    NODE = "Node"
    EVENT = "Event"
    LEASE = "Lease"
    ENDPOINTS = "Endpoints"
    ENDPOINT_SLICE = "EndpointSlice"
    WORKFLOW = "Workflow"
    CRON_WORKFLOW = "CronWorkflow"
    APPLICATION = "Application"
    KUSTOMIZATION = "Kustomization"
    HELM_RELEASE = "HelmRelease"
    GIT_REPOSITORY = "GitRepository"
    OCI_REPOSITORY = "OCIRepository"
    HELM_REPOSITORY = "HelmRepository"
    UNKNOWN = "Unknown"


# Long API names that classify the same as the topology's short names.
_KIND_ALIASES: dict[str, ResourceKind] = {
    "HorizontalPodAutoscaler": ResourceKind.HPA,
    "PersistentVolumeClaim": ResourceKind.PVC,
}

_BY_VALUE: dict[str, ResourceKind] = {k.value: k for k in ResourceKind if k is not ResourceKind.UNKNOWN}
_BY_TOKEN: dict[str, ResourceKind] = {k.value.lower(): k for k in _BY_VALUE.values()}


def parse_kind(kind: str) -> ResourceKind:
    """Classify a raw kind string, falling back to UNKNOWN."""
    found = _BY_VALUE.get(kind)
    if found is not None:
        return found
    return _KIND_ALIASES.get(kind, ResourceKind.UNKNOWN)


def kind_from_topology_token(token: str) -> str:
    """Map a lowercase topology id token (``deployment``, ``pvc``) to a lane kind.

    Unrecognised tokens are returned unchanged.
    """
    found = _BY_TOKEN.get(token.lower())
    return found.value if found is not None else token


def is_record_kind(kind: ResourceKind) -> bool:
    """True for transient activity-log records that belong on their owner's lane."""
    return kind is ResourceKind.EVENT


def is_workload_kind(kind: ResourceKind) -> bool:
    """True for kinds that act as the representative row of an application."""
    match kind:
        case (
            ResourceKind.DEPLOYMENT
            | ResourceKind.ROLLOUT
            | ResourceKind.DAEMON_SET
            | ResourceKind.STATEFUL_SET
            | ResourceKind.SERVICE
            | ResourceKind.JOB
            | ResourceKind.CRON_JOB
            | ResourceKind.WORKFLOW
            | ResourceKind.CRON_WORKFLOW
            | ResourceKind.APPLICATION
            | ResourceKind.KUSTOMIZATION
            | ResourceKind.HELM_RELEASE
            | ResourceKind.GIT_REPOSITORY
            | ResourceKind.OCI_REPOSITORY
            | ResourceKind.HELM_REPOSITORY
        ):
            return True
        case _:
            return False


def supports_rollout(kind: ResourceKind) -> bool:
    """True for kinds that roll out new revisions of a pod template."""
    match kind:
        case (
            ResourceKind.DEPLOYMENT
            | ResourceKind.STATEFUL_SET
            | ResourceKind.DAEMON_SET
            | ResourceKind.ROLLOUT
            | ResourceKind.REPLICA_SET
        ):
            return True
        case _:
            return False


def is_label_groupable(kind: ResourceKind) -> bool:
    """Primary kinds that may be grouped together by a shared app label."""
    match kind:
        case (
            ResourceKind.SERVICE
            | ResourceKind.DEPLOYMENT
            | ResourceKind.ROLLOUT
            | ResourceKind.STATEFUL_SET
            | ResourceKind.DAEMON_SET
            | ResourceKind.JOB
            | ResourceKind.CRON_JOB
            | ResourceKind.INGRESS
            | ResourceKind.CONFIG_MAP
            | ResourceKind.SECRET
            | ResourceKind.WORKFLOW
            | ResourceKind.CRON_WORKFLOW
        ):
            return True
        case _:
            return False


def app_group_order(kind: ResourceKind) -> int:
    """Rank used to pick the representative parent of an app-label group (lowest wins)."""
    match kind:
        case ResourceKind.SERVICE:
            return 1
        case ResourceKind.INGRESS:
            return 2
        case ResourceKind.DEPLOYMENT | ResourceKind.ROLLOUT | ResourceKind.STATEFUL_SET | ResourceKind.DAEMON_SET:
            return 3
        case ResourceKind.JOB | ResourceKind.CRON_JOB:
            return 4
        case ResourceKind.CONFIG_MAP | ResourceKind.SECRET:
            return 5
        case ResourceKind.REPLICA_SET:
            return 6
        case ResourceKind.POD:
            return 7
        case _:
            return 10


def child_order(kind: ResourceKind) -> int:
    """Rank of a child row beneath its top-level lane (lowest first)."""
    match kind:
        case ResourceKind.SERVICE:
            return 1
        case ResourceKind.DEPLOYMENT | ResourceKind.ROLLOUT | ResourceKind.STATEFUL_SET | ResourceKind.DAEMON_SET:
            return 2
        case ResourceKind.REPLICA_SET:
            return 3
        case ResourceKind.POD:
            return 4
        case ResourceKind.CONFIG_MAP | ResourceKind.SECRET:
            return 5
        case _:
            return 10


def interest_base_score(kind: ResourceKind) -> int:
    """Base interest of a lane kind; GitOps controllers and workloads rank highest."""
    match kind:
        case ResourceKind.APPLICATION | ResourceKind.KUSTOMIZATION | ResourceKind.HELM_RELEASE:
            return 55
        case ResourceKind.GIT_REPOSITORY | ResourceKind.OCI_REPOSITORY | ResourceKind.HELM_REPOSITORY:
            return 52
        case ResourceKind.DEPLOYMENT | ResourceKind.ROLLOUT | ResourceKind.STATEFUL_SET | ResourceKind.DAEMON_SET:
            return 50
        case ResourceKind.SERVICE | ResourceKind.INGRESS:
            return 45
        case ResourceKind.JOB | ResourceKind.CRON_JOB | ResourceKind.WORKFLOW | ResourceKind.CRON_WORKFLOW:
            return 40
        case ResourceKind.POD:
            return 30
        case ResourceKind.HPA:
            return 25
        case ResourceKind.REPLICA_SET:
            return 20
        case ResourceKind.CONFIG_MAP | ResourceKind.SECRET | ResourceKind.PVC:
            return 10
        case _:
            return 15
