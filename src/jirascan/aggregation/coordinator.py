"""Coordinator for concurrent paginated aggregation."""

import logging
import queue
import threading
import time
from concurrent.futures import ThreadPoolExecutor
from typing import TYPE_CHECKING

from jirascan.aggregation.aggregator import Aggregator, ProgressObserver
from jirascan.aggregation.channels import Channel
from jirascan.aggregation.lanes import LaneTable
from jirascan.aggregation.models import (
    AggregateResult,
    LaneFailure,
    LaneReport,
    LaneStatus,
    Page,
    PageDescriptor,
    ReportKind,
)
from jirascan.aggregation.offset_allocator import OffsetAllocator
from jirascan.aggregation.worker import run_lane
from jirascan.constants import CANCEL_POLL_INTERVAL_SECONDS
from jirascan.exceptions import InvalidConfiguration

if TYPE_CHECKING:
    from jirascan.jira.fetcher import PageFetcher

logger = logging.getLogger(__name__)


def _require_positive_int(name: str, value: object) -> int:
    if isinstance(value, bool) or not isinstance(value, int) or value < 1:
        raise InvalidConfiguration(f"{name} must be a positive integer, got {value!r}")
    return value


class Coordinator:
    """Fans one query out over a pool of worker lanes.

    Architecture:
    - Coordinator (calling thread): single control loop that owns the offset
      cursor and the lane table. Seeds one descriptor per lane, then answers
      each completion report with either a fresh descriptor (non-empty page)
      or by closing the lane (end-of-data, failure).
    - Worker lanes (thread pool): fetch pages, forward records to the
      aggregator, report back. At most one descriptor is outstanding per lane.
    - Aggregator (own thread): collects records independently so slow
      aggregation never blocks fetching.

    All three roles communicate only through channels. The run ends when
    every lane is closed; every thread has exited before ``run()`` returns.
    """

    def __init__(
        self,
        fetcher: "PageFetcher",
        observer: ProgressObserver | None = None,
        cancel_event: threading.Event | None = None,
        deadline: float | None = None,
        poll_interval: float = CANCEL_POLL_INTERVAL_SECONDS,
    ):
        """Initialize coordinator.

        Args:
            fetcher: Page fetcher shared by all lanes
            observer: Optional progress callback invoked by the aggregator
            cancel_event: Event that stops the run when set
            deadline: Seconds after which each run cancels itself. Does not
                touch ``cancel_event``.
            poll_interval: How often an idle control loop checks for cancellation
        """
        self.fetcher = fetcher
        self.observer = observer
        self.cancel_event = cancel_event or threading.Event()
        self.deadline = deadline
        self.poll_interval = poll_interval

    def cancel(self) -> None:
        """Request cancellation (thread-safe).

        Sets ``cancel_event``, which also cancels later runs until it is cleared.
        """
        self.cancel_event.set()

    def run(self, query: str, page_size: int, worker_count: int) -> AggregateResult:
        """Fetch every page of ``query`` and aggregate the records.

        Args:
            query: Query string, immutable for the run
            page_size: Records per page, fixed for the run
            worker_count: Number of concurrent lanes

        Returns:
            AggregateResult with every collected record and lane failure

        Raises:
            InvalidConfiguration: If any argument is invalid (nothing is fetched)
        """
        if not isinstance(query, str) or not query.strip():
            raise InvalidConfiguration("query must be a non-empty string")
        page_size = _require_positive_int("page_size", page_size)
        worker_count = _require_positive_int("worker_count", worker_count)

        start = time.monotonic()
        allocator = OffsetAllocator(page_size)
        lanes = LaneTable(worker_count)
        failures: list[LaneFailure] = []
        assignments: list[Channel[PageDescriptor]] = [
            Channel(maxsize=1) for _ in range(worker_count)
        ]
        reports: Channel[LaneReport] = Channel()
        results: Channel[Page] = Channel()
        aggregator = Aggregator(results, observer=self.observer)
        # Tripped by the caller's event or the deadline; reaches fetcher back-off
        run_cancel = threading.Event()
        cancelled = False

        logger.info(f"Starting run: {worker_count} lanes, page_size={page_size}, query={query!r}")

        with ThreadPoolExecutor(
            max_workers=worker_count + 1, thread_name_prefix="jirascan"
        ) as executor:
            aggregator_future = executor.submit(aggregator.run)
            lane_futures = [
                executor.submit(
                    run_lane,
                    lane_id,
                    query,
                    self.fetcher,
                    assignments[lane_id],
                    reports,
                    results,
                    run_cancel,
                )
                for lane_id in range(worker_count)
            ]

            try:
                for channel in assignments:
                    channel.send(allocator.issue())
                cancelled = self._control_loop(
                    allocator, lanes, assignments, reports, failures, start, run_cancel
                )
            finally:
                # Stop every lane still waiting for work or backing off, then
                # let the aggregator drain once no worker can send another page
                run_cancel.set()
                for channel in assignments:
                    channel.close(discard_pending=True)
                for lane_id, future in enumerate(lane_futures):
                    try:
                        future.result()
                    except Exception as e:
                        logger.error(f"Lane {lane_id} crashed: {e}")
                results.close()

            issue_keys = aggregator_future.result()

        result = AggregateResult(
            issue_keys=issue_keys,
            lanes=lanes.snapshot(),
            failures=tuple(failures),
            offsets_issued=allocator.issued,
            cancelled=cancelled,
            duration_seconds=time.monotonic() - start,
        )
        logger.info(
            f"Run complete: {len(result)} issues in {result.duration_seconds:.1f}s "
            f"({result.fetch_count} fetches, {len(failures)} lane failures"
            + (", cancelled)" if cancelled else ")")
        )
        return result

    def _control_loop(
        self,
        allocator: OffsetAllocator,
        lanes: LaneTable,
        assignments: list[Channel[PageDescriptor]],
        reports: Channel[LaneReport],
        failures: list[LaneFailure],
        start: float,
        run_cancel: threading.Event,
    ) -> bool:
        """React to completion reports until every lane is closed.

        Returns:
            True if the run stopped because of cancellation
        """
        while lanes.open_count > 0:
            if self._should_cancel(start):
                run_cancel.set()
                for lane_id in lanes.open_lanes():
                    lanes.close(lane_id, LaneStatus.CANCELLED)
                logger.warning("Run cancelled, stopping all open lanes")
                return True

            try:
                report = reports.receive(timeout=self.poll_interval)
            except queue.Empty:
                continue

            if report.kind is ReportKind.PAGE:
                descriptor = allocator.issue()
                logger.debug(
                    f"Lane {report.lane_id} got {report.count} records at offset "
                    f"{report.descriptor.offset}, next offset {descriptor.offset}"
                )
                assignments[report.lane_id].send(descriptor)
            elif report.kind is ReportKind.END_OF_DATA:
                lanes.close(report.lane_id, LaneStatus.END_OF_DATA)
                logger.info(
                    f"Lane {report.lane_id} reached end-of-data at offset "
                    f"{report.descriptor.offset} ({lanes.open_count} lanes open)"
                )
            else:
                lanes.close(report.lane_id, LaneStatus.FAILED)
                failure = LaneFailure(
                    lane_id=report.lane_id,
                    offset=report.descriptor.offset,
                    error=report.error or RuntimeError("unknown error"),
                )
                failures.append(failure)
                logger.warning(f"Lane failed, continuing with remaining lanes: {failure}")

        return False

    def _should_cancel(self, start: float) -> bool:
        if self.cancel_event.is_set():
            return True
        if self.deadline is not None and time.monotonic() - start >= self.deadline:
            logger.warning(f"Run deadline of {self.deadline}s exceeded")
            return True
        return False
