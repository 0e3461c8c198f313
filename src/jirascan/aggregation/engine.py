"""Entry points for running concurrent searches."""

import threading
from typing import TYPE_CHECKING

from jirascan.aggregation.aggregator import ProgressObserver
from jirascan.aggregation.coordinator import Coordinator
from jirascan.aggregation.models import AggregateResult
from jirascan.aggregation.query import build_project_query
from jirascan.constants import DEFAULT_PAGE_SIZE, DEFAULT_WORKERS

if TYPE_CHECKING:
    from jirascan.jira.fetcher import PageFetcher


def aggregate(
    fetcher: "PageFetcher",
    query: str,
    worker_count: int = DEFAULT_WORKERS,
    page_size: int = DEFAULT_PAGE_SIZE,
    *,
    observer: ProgressObserver | None = None,
    cancel_event: threading.Event | None = None,
    deadline: float | None = None,
) -> AggregateResult:
    """Collect every record matching ``query`` using ``worker_count`` lanes.

    Best-effort: lanes that fail are closed and reported on
    ``result.error`` while the remaining lanes finish. Callers that need a
    complete result should call ``result.raise_for_error()``.

    Args:
        fetcher: Page fetcher (e.g. JiraPageFetcher)
        query: JQL query
        worker_count: Number of concurrent lanes
        page_size: Records requested per page
        observer: Optional callback invoked after each aggregated page
        cancel_event: Event that stops the run when set
        deadline: Seconds after which the run cancels itself

    Returns:
        AggregateResult snapshot

    Raises:
        InvalidConfiguration: If query, worker_count or page_size is invalid
    """
    coordinator = Coordinator(
        fetcher, observer=observer, cancel_event=cancel_event, deadline=deadline
    )
    return coordinator.run(query, page_size, worker_count)


def scan_project(
    fetcher: "PageFetcher",
    project_key: str,
    updated_within_minutes: int | None = None,
    worker_count: int = DEFAULT_WORKERS,
    page_size: int = DEFAULT_PAGE_SIZE,
    **kwargs,
) -> AggregateResult:
    """Collect every issue key of a project, optionally only recent ones.

    Args:
        fetcher: Page fetcher
        project_key: Jira project key
        updated_within_minutes: Restrict to issues updated in the last N minutes
        worker_count: Number of concurrent lanes
        page_size: Records requested per page
        **kwargs: Passed through to aggregate() (observer, cancel_event, deadline)

    Returns:
        AggregateResult snapshot

    Raises:
        InvalidConfiguration: If the project key or worker count is invalid
    """
    query = build_project_query(project_key, updated_within_minutes)
    return aggregate(fetcher, query, worker_count, page_size, **kwargs)
