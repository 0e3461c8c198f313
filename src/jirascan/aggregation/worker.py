"""Worker lane: fetch assigned pages and report back to the coordinator."""

import logging
import threading
from typing import TYPE_CHECKING

from jirascan.aggregation.channels import Channel
from jirascan.aggregation.models import LaneReport, Page, PageDescriptor, ReportKind

if TYPE_CHECKING:
    from jirascan.jira.fetcher import PageFetcher

logger = logging.getLogger(__name__)


def run_lane(
    lane_id: int,
    query: str,
    fetcher: "PageFetcher",
    assignments: Channel[PageDescriptor],
    reports: Channel[LaneReport],
    results: Channel[Page],
    cancel_event: threading.Event | None = None,
) -> int:
    """Run one lane's fetch-and-report cycle until it closes.

    Runs in a worker thread. For every descriptor received:
    - non-empty page: forward it to the aggregator, report PAGE, wait for
      the next assignment
    - empty page: report END_OF_DATA and exit
    - fetch error: report FAILED with the error attached and exit

    A stop signal on ``assignments`` makes the lane exit without fetching.
    Errors are never retried here and never raised out of the thread.

    Args:
        lane_id: Lane identifier (0-based index)
        query: Query string, identical for every lane
        fetcher: Shared page fetcher
        assignments: This lane's assignment channel
        reports: Completion channel shared by all lanes
        results: Page channel consumed by the aggregator
        cancel_event: Run-scoped cancel signal handed to the fetcher

    Returns:
        Number of records fetched by this lane
    """
    thread_name = threading.current_thread().name
    logger.debug(f"Lane {lane_id} ({thread_name}) starting")
    records = 0

    while (descriptor := assignments.receive()) is not None:
        try:
            keys = list(
                fetcher.fetch(
                    query, descriptor.offset, descriptor.page_size, cancel_event=cancel_event
                )
            )
        except Exception as e:
            logger.warning(f"Lane {lane_id} fetch failed at offset {descriptor.offset}: {e}")
            reports.send(
                LaneReport(lane_id=lane_id, kind=ReportKind.FAILED, descriptor=descriptor, error=e)
            )
            break

        if not keys:
            logger.debug(f"Lane {lane_id} hit end-of-data at offset {descriptor.offset}")
            reports.send(
                LaneReport(lane_id=lane_id, kind=ReportKind.END_OF_DATA, descriptor=descriptor)
            )
            break

        records += len(keys)
        results.send(Page(lane_id=lane_id, descriptor=descriptor, keys=tuple(keys)))
        reports.send(
            LaneReport(
                lane_id=lane_id, kind=ReportKind.PAGE, descriptor=descriptor, count=len(keys)
            )
        )

    logger.debug(f"Lane {lane_id} exiting: {records} records fetched")
    return records
