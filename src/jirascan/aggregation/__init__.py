"""Concurrent paginated aggregation of query results."""

from jirascan.aggregation.coordinator import Coordinator
from jirascan.aggregation.engine import aggregate, scan_project
from jirascan.aggregation.models import (
    AggregateResult,
    LaneFailure,
    LaneStatus,
    PageDescriptor,
    PageProgress,
)
from jirascan.aggregation.progress import (
    JsonProgressTracker,
    ProgressTracker,
    RichProgressTracker,
)
from jirascan.aggregation.query import build_project_query

__all__ = [
    "AggregateResult",
    "Coordinator",
    "JsonProgressTracker",
    "LaneFailure",
    "LaneStatus",
    "PageDescriptor",
    "PageProgress",
    "ProgressTracker",
    "RichProgressTracker",
    "aggregate",
    "build_project_query",
    "scan_project",
]
