"""Unit tests for AggregateResult error reporting."""

import pytest

from jirascan.aggregation.models import AggregateResult, LaneFailure, LaneStatus
from jirascan.exceptions import (
    AggregationError,
    LaneFailureError,
    PartialResultError,
    RunCancelledError,
    TransportError,
)


def failure(lane_id: int, offset: int) -> LaneFailure:
    return LaneFailure(lane_id=lane_id, offset=offset, error=TransportError("HTTP 502"))


class TestAggregateResult:
    """Tests for the immutable result snapshot."""

    def test_clean_result(self):
        result = AggregateResult(
            issue_keys=("A-1", "A-2"),
            lanes={0: LaneStatus.END_OF_DATA},
            offsets_issued=(0, 25),
        )

        assert len(result) == 2
        assert list(result) == ["A-1", "A-2"]
        assert result.fetch_count == 2
        assert result.error is None
        result.raise_for_error()

    def test_some_lanes_failed(self):
        result = AggregateResult(
            issue_keys=("A-1",),
            lanes={0: LaneStatus.FAILED, 1: LaneStatus.END_OF_DATA},
            failures=(failure(0, 25),),
        )

        error = result.error
        assert isinstance(error, LaneFailureError)
        assert "1 of 2 lanes failed" in str(error)
        assert "lane 0 at offset 25: HTTP 502" in str(error)
        assert error.failures == result.failures

    def test_all_lanes_failed(self):
        result = AggregateResult(
            issue_keys=(),
            lanes={0: LaneStatus.FAILED, 1: LaneStatus.FAILED},
            failures=(failure(0, 0), failure(1, 25)),
        )

        error = result.error
        assert isinstance(error, PartialResultError)
        assert "All 2 lanes failed" in str(error)
        with pytest.raises(PartialResultError):
            result.raise_for_error()

    def test_cancelled_without_failures(self):
        result = AggregateResult(
            issue_keys=("A-1",),
            lanes={0: LaneStatus.CANCELLED},
            cancelled=True,
        )

        assert isinstance(result.error, RunCancelledError)
        assert "after collecting 1 issues" in str(result.error)

    def test_failures_take_precedence_over_cancellation(self):
        result = AggregateResult(
            issue_keys=(),
            lanes={0: LaneStatus.FAILED, 1: LaneStatus.CANCELLED},
            failures=(failure(0, 0),),
            cancelled=True,
        )
        assert isinstance(result.error, LaneFailureError)

    def test_error_hierarchy(self):
        assert issubclass(LaneFailureError, AggregationError)
        assert issubclass(PartialResultError, AggregationError)
        assert issubclass(RunCancelledError, AggregationError)

    def test_result_is_frozen(self):
        result = AggregateResult(issue_keys=())
        with pytest.raises(AttributeError):
            result.cancelled = True  # type: ignore[misc]

    def test_lanes_are_read_only(self):
        result = AggregateResult(issue_keys=(), lanes={0: LaneStatus.END_OF_DATA})
        with pytest.raises(TypeError):
            result.lanes[0] = LaneStatus.FAILED  # type: ignore[index]
        assert result.lanes == {0: LaneStatus.END_OF_DATA}

    def test_result_is_hashable(self):
        lanes = {0: LaneStatus.END_OF_DATA, 1: LaneStatus.FAILED}
        first = AggregateResult(issue_keys=("R-1",), lanes=lanes)
        second = AggregateResult(issue_keys=("R-1",), lanes=dict(lanes))

        assert hash(first) == hash(second)
        assert first == second
        assert len({first, second}) == 1

    def test_caller_dict_changes_do_not_leak_in(self):
        lanes = {0: LaneStatus.END_OF_DATA}
        result = AggregateResult(issue_keys=(), lanes=lanes)
        lanes[1] = LaneStatus.FAILED
        assert 1 not in result.lanes
