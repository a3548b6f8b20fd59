"""Resource hierarchy: lanes, parent signals and forest queries.

Provides the lane forest built from owner references, topology edges and
app labels (see ``builder``), plus read-only queries and interest scoring
over the result.
"""

from kubelanes.hierarchy.builder import build_hierarchy, resolve_root
from kubelanes.hierarchy.queries import (
    count_events_in_hierarchy,
    find_lane,
    get_all_events_from_hierarchy,
    iter_lanes,
)
from kubelanes.hierarchy.scoring import ScoreBreakdown, score_lane, sort_lanes_by_interest
from kubelanes.hierarchy.signals import ClaimSignal, ParentClaim, ParentMap

__all__ = [
    "ClaimSignal",
    "ParentClaim",
    "ParentMap",
    "ScoreBreakdown",
    "build_hierarchy",
    "count_events_in_hierarchy",
    "find_lane",
    "get_all_events_from_hierarchy",
    "iter_lanes",
    "resolve_root",
    "score_lane",
    "sort_lanes_by_interest",
]
