"""Decoding of dashboard payloads and encoding of engine results.

Payloads use the dashboard's camelCase JSON shape with ISO-8601 timestamps.
Required event fields raise ``PayloadFormatError`` when missing or invalid;
optional fields that cannot be understood are dropped.
"""

from __future__ import annotations

from collections.abc import Mapping
from datetime import UTC, datetime
from typing import TYPE_CHECKING, Any

import structlog

from kubelanes.models.events import (
    DiffInfo,
    EventSource,
    EventType,
    FieldChange,
    HealthState,
    OwnerRef,
    TimelineEvent,
)
from kubelanes.models.health import HealthSpanResult
from kubelanes.models.lanes import ResourceLane
from kubelanes.models.topology import Topology, TopologyEdge, TopologyEdgeType, TopologyNode

if TYPE_CHECKING:
    from kubelanes.engine import TimelineResult
    from kubelanes.render.palette import NamespacePalette

_log = structlog.get_logger(component="codec")


class PayloadFormatError(ValueError):
    """Raised when an event payload cannot be decoded."""

    def __init__(self, message: str, code: str = "INVALID_PAYLOAD") -> None:
        super().__init__(message)
        self.code = code


# ---------------------------------------------------------------------------
# Decoding
# ---------------------------------------------------------------------------


def parse_timestamp(value: object) -> datetime:
    """Parse an ISO-8601 string or epoch milliseconds into an aware UTC datetime."""
    if isinstance(value, datetime):
        ts = value
    elif isinstance(value, bool):
        raise PayloadFormatError(f"Invalid timestamp: {value!r}", code="INVALID_TIMESTAMP")
    elif isinstance(value, int | float):
        ts = datetime.fromtimestamp(value / 1000.0, tz=UTC)
    elif isinstance(value, str) and value:
        try:
            ts = datetime.fromisoformat(value)
        except ValueError as exc:
            raise PayloadFormatError(f"Invalid timestamp: {value!r}", code="INVALID_TIMESTAMP") from exc
    else:
        raise PayloadFormatError(f"Invalid timestamp: {value!r}", code="INVALID_TIMESTAMP")
    if ts.tzinfo is None:
        ts = ts.replace(tzinfo=UTC)
    return ts


def _optional_timestamp(value: object) -> datetime | None:
    if value is None or value == "":
        return None
    try:
        return parse_timestamp(value)
    except PayloadFormatError:
        return None


def _require_str(payload: Mapping[str, Any], key: str) -> str:
    value = payload.get(key)
    if not isinstance(value, str) or not value:
        raise PayloadFormatError(f"Event field {key!r} must be a non-empty string", code="MISSING_FIELD")
    return value


def _str_map(value: object) -> dict[str, str]:
    if not isinstance(value, Mapping):
        return {}
    return {str(k): str(v) for k, v in value.items() if v is not None}


def _owner(value: object) -> OwnerRef | None:
    if not isinstance(value, Mapping):
        return None
    kind = value.get("kind")
    name = value.get("name")
    if not isinstance(kind, str) or not isinstance(name, str) or not kind or not name:
        return None
    return OwnerRef(kind=kind, name=name)


def _diff(value: object) -> DiffInfo | None:
    if not isinstance(value, Mapping):
        return None
    fields = tuple(
        FieldChange(path=str(f.get("path", "")), old_value=f.get("oldValue"), new_value=f.get("newValue"))
        for f in value.get("fields") or ()
        if isinstance(f, Mapping)
    )
    return DiffInfo(summary=str(value.get("summary") or ""), fields=fields)


def event_from_dict(payload: Mapping[str, Any]) -> TimelineEvent:
    """Decode one timeline event.

    Raises:
        PayloadFormatError: if a required field is missing or invalid.
    """
    if not isinstance(payload, Mapping):
        raise PayloadFormatError("Event payload must be an object", code="INVALID_PAYLOAD")

    raw_type = payload.get("eventType")
    try:
        event_type = EventType(raw_type)
    except ValueError as exc:
        raise PayloadFormatError(f"Unknown eventType: {raw_type!r}", code="INVALID_EVENT_TYPE") from exc

    try:
        source = EventSource(payload.get("source", EventSource.INFORMER.value))
    except ValueError:
        source = EventSource.INFORMER

    try:
        health_state = HealthState(payload["healthState"]) if payload.get("healthState") else None
    except ValueError:
        health_state = None

    count = payload.get("count", 1)
    return TimelineEvent(
        id=_require_str(payload, "id"),
        kind=_require_str(payload, "kind"),
        namespace=str(payload.get("namespace") or ""),
        name=_require_str(payload, "name"),
        timestamp=parse_timestamp(payload.get("timestamp")),
        event_type=event_type,
        source=source,
        reason=str(payload.get("reason") or ""),
        message=str(payload.get("message") or ""),
        owner=_owner(payload.get("owner")),
        diff=_diff(payload.get("diff")),
        health_state=health_state,
        created_at=_optional_timestamp(payload.get("createdAt")),
        labels=_str_map(payload.get("labels")),
        count=count if isinstance(count, int) and not isinstance(count, bool) else 1,
        uid=payload.get("uid") or None,
    )


def events_from_list(payload: object) -> list[TimelineEvent]:
    """Decode a list of events, or an object with an ``events`` list."""
    if isinstance(payload, Mapping):
        payload = payload.get("events", [])
    if not isinstance(payload, list):
        raise PayloadFormatError("Expected a list of events", code="INVALID_PAYLOAD")
    return [event_from_dict(item) for item in payload]


def topology_from_dict(payload: Mapping[str, Any] | None) -> Topology | None:
    """Decode a topology snapshot; malformed nodes and edges are skipped."""
    if not isinstance(payload, Mapping):
        return None

    nodes: list[TopologyNode] = []
    for raw in payload.get("nodes") or ():
        if not isinstance(raw, Mapping) or not isinstance(raw.get("id"), str):
            continue
        data = raw.get("data")
        labels = _str_map(data.get("labels")) if isinstance(data, Mapping) else {}
        labels.update(_str_map(raw.get("labels")))
        nodes.append(
            TopologyNode(
                id=raw["id"],
                kind=str(raw.get("kind") or ""),
                name=str(raw.get("name") or ""),
                status=str(raw.get("status") or "unknown"),
                labels=labels,
            )
        )

    edges: list[TopologyEdge] = []
    skipped = 0
    for raw in payload.get("edges") or ():
        if not isinstance(raw, Mapping):
            skipped += 1
            continue
        source, target = raw.get("source"), raw.get("target")
        try:
            edge_type = TopologyEdgeType(raw.get("type"))
        except ValueError:
            skipped += 1
            continue
        if not isinstance(source, str) or not isinstance(target, str):
            skipped += 1
            continue
        edges.append(
            TopologyEdge(
                source=source,
                target=target,
                type=edge_type,
                id=str(raw.get("id") or ""),
                label=str(raw.get("label") or ""),
            )
        )
    if skipped:
        _log.info("topology_edges_skipped", count=skipped)

    warnings = [str(w) for w in payload.get("warnings") or ()]
    return Topology(nodes=nodes, edges=edges, warnings=warnings)


# ---------------------------------------------------------------------------
# Encoding
# ---------------------------------------------------------------------------


def _iso(ts: datetime | None) -> str | None:
    if ts is None:
        return None
    return ts.astimezone(UTC).isoformat().replace("+00:00", "Z")


def event_to_dict(event: TimelineEvent) -> dict[str, Any]:
    out: dict[str, Any] = {
        "id": event.id,
        "kind": event.kind,
        "namespace": event.namespace,
        "name": event.name,
        "timestamp": _iso(event.timestamp),
        "eventType": event.event_type.value,
        "source": event.source.value,
    }
    if event.reason:
        out["reason"] = event.reason
    if event.message:
        out["message"] = event.message
    if event.owner is not None:
        out["owner"] = {"kind": event.owner.kind, "name": event.owner.name}
    if event.diff is not None:
        out["diff"] = {
            "summary": event.diff.summary,
            "fields": [{"path": f.path, "oldValue": f.old_value, "newValue": f.new_value} for f in event.diff.fields],
        }
    if event.health_state is not None:
        out["healthState"] = event.health_state.value
    if event.created_at is not None:
        out["createdAt"] = _iso(event.created_at)
    return out


def lane_to_dict(lane: ResourceLane, palette: NamespacePalette | None = None) -> dict[str, Any]:
    out: dict[str, Any] = {
        "id": lane.id,
        "kind": lane.kind,
        "namespace": lane.namespace,
        "name": lane.name,
        "isWorkload": lane.is_workload,
        "events": [event_to_dict(e) for e in lane.events],
        "childEventCount": lane.child_event_count,
        "children": [lane_to_dict(child, palette) for child in lane.children],
        "allEventsSorted": [e.id for e in lane.all_events_sorted],
    }
    if palette is not None:
        out["namespaceColor"] = palette.color_for(lane.namespace)
    return out


def span_result_to_dict(result: HealthSpanResult) -> dict[str, Any]:
    return {
        "spans": [
            {"start": _iso(span.start), "end": _iso(span.end), "health": span.health.value}
            for span in result.spans
        ],
        "createdAt": _iso(result.created_at),
        "createdBeforeWindow": result.created_before_window,
    }


def timeline_result_to_dict(result: TimelineResult, palette: NamespacePalette | None = None) -> dict[str, Any]:
    return {
        "lanes": [lane_to_dict(lane, palette) for lane in result.lanes],
        "health": {lane_id: span_result_to_dict(spans) for lane_id, spans in result.health.items()},
    }
