"""Messages and result types exchanged by the aggregation engine."""

from collections.abc import Mapping
from dataclasses import dataclass, field
from enum import Enum
from types import MappingProxyType

from jirascan.exceptions import (
    AggregationError,
    LaneFailureError,
    PartialResultError,
    RunCancelledError,
)


class LaneStatus(str, Enum):
    """Lifecycle state of one worker lane."""

    OPEN = "open"
    END_OF_DATA = "end_of_data"
    FAILED = "failed"
    CANCELLED = "cancelled"

    @property
    def is_closed(self) -> bool:
        return self is not LaneStatus.OPEN


class ReportKind(str, Enum):
    """Outcome a worker reports to the coordinator after one fetch."""

    PAGE = "page"
    END_OF_DATA = "end_of_data"
    FAILED = "failed"


@dataclass(frozen=True)
class PageDescriptor:
    """One unit of work: fetch ``page_size`` records starting at ``offset``."""

    offset: int
    page_size: int

    def __post_init__(self) -> None:
        """Validate descriptor fields.

        Raises:
            ValueError: If offset is negative or page_size is not positive
        """
        if self.offset < 0:
            raise ValueError(f"offset must be non-negative, got {self.offset}")
        if self.page_size < 1:
            raise ValueError(f"page_size must be positive, got {self.page_size}")


@dataclass(frozen=True)
class Page:
    """Records fetched by one lane for one descriptor."""

    lane_id: int
    descriptor: PageDescriptor
    keys: tuple[str, ...]

    def __len__(self) -> int:
        return len(self.keys)


@dataclass(frozen=True)
class LaneReport:
    """Completion report sent from a worker to the coordinator."""

    lane_id: int
    kind: ReportKind
    descriptor: PageDescriptor
    count: int = 0
    error: Exception | None = None


@dataclass(frozen=True)
class LaneFailure:
    """A transport error that closed a lane."""

    lane_id: int
    offset: int
    error: Exception

    def __str__(self) -> str:
        return f"lane {self.lane_id} at offset {self.offset}: {self.error}"


@dataclass(frozen=True)
class PageProgress:
    """Progress event handed to the aggregator's observer after each page."""

    lane_id: int
    offset: int
    page_records: int
    total_records: int
    pages: int


@dataclass(frozen=True)
class AggregateResult:
    """Immutable snapshot of a finished aggregation run.

    Attributes:
        issue_keys: Every record identifier collected, in arrival order.
            No ordering across pages and no deduplication is implied.
        lanes: Final status of every lane, keyed by lane id (read-only)
        failures: Transport errors that closed lanes
        offsets_issued: Offsets handed out by the coordinator, in issue order
        cancelled: True if the run stopped on the cancel signal or deadline
        duration_seconds: Wall-clock duration of the run
    """

    issue_keys: tuple[str, ...]
    lanes: Mapping[int, LaneStatus] = field(default_factory=dict, hash=False)
    failures: tuple[LaneFailure, ...] = ()
    offsets_issued: tuple[int, ...] = ()
    cancelled: bool = False
    duration_seconds: float = 0.0

    def __post_init__(self) -> None:
        object.__setattr__(self, "lanes", MappingProxyType(dict(self.lanes)))

    def __len__(self) -> int:
        return len(self.issue_keys)

    def __iter__(self):
        return iter(self.issue_keys)

    @property
    def fetch_count(self) -> int:
        """Number of fetches issued during the run."""
        return len(self.offsets_issued)

    @property
    def error(self) -> AggregationError | None:
        """Aggregated error value describing every lane failure, or None.

        Returns:
            PartialResultError if every lane closed on an error,
            LaneFailureError if only some lanes did, RunCancelledError if
            the run was cancelled without lane failures, otherwise None.
        """
        if self.failures:
            details = "; ".join(str(failure) for failure in self.failures)
            if self.lanes and all(s is LaneStatus.FAILED for s in self.lanes.values()):
                return PartialResultError(
                    f"All {len(self.lanes)} lanes failed, result may be incomplete: {details}",
                    self.failures,
                )
            return LaneFailureError(
                f"{len(self.failures)} of {len(self.lanes)} lanes failed: {details}",
                self.failures,
            )
        if self.cancelled:
            return RunCancelledError(
                f"Run cancelled after collecting {len(self.issue_keys)} issues"
            )
        return None

    def raise_for_error(self) -> None:
        """Raise the aggregated error value, if there is one."""
        error = self.error
        if error is not None:
            raise error
