"""Prometheus metrics for the hierarchy builder, health timeline and engine."""

from __future__ import annotations

from prometheus_client import Counter, Histogram

hierarchy_builds_total = Counter(
    "kubelanes_hierarchy_builds_total",
    "Number of hierarchy computations.",
    ["focal"],
)

hierarchy_build_duration_seconds = Histogram(
    "kubelanes_hierarchy_build_duration_seconds",
    "Wall-clock duration of a hierarchy computation.",
    buckets=(0.001, 0.005, 0.01, 0.05, 0.1, 0.5, 1.0, 5.0),
)

parent_claims_total = Counter(
    "kubelanes_parent_claims_total",
    "Parent relationships established, by signal source.",
    ["signal"],
)

topology_edges_ignored_total = Counter(
    "kubelanes_topology_edges_ignored_total",
    "Topology edges that contributed no parent relationship.",
    ["reason"],
)

parent_cycles_truncated_total = Counter(
    "kubelanes_parent_cycles_truncated_total",
    "Root resolutions that stopped at a revisited lane.",
)

health_span_builds_total = Counter(
    "kubelanes_health_span_builds_total",
    "Number of health timeline computations.",
)

engine_builds_total = Counter(
    "kubelanes_engine_builds_total",
    "Namespace builds run by the engine, by outcome.",
    ["outcome"],
)
