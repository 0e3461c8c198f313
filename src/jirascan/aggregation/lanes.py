"""Per-lane open/closed bookkeeping for the coordinator."""

import logging

from jirascan.aggregation.models import LaneStatus

logger = logging.getLogger(__name__)


class LaneTable:
    """Explicit state of every worker lane, keyed by lane id.

    Each lane starts open and closes exactly once. Closing an already closed
    lane is a coordination bug and raises instead of being counted twice.
    """

    def __init__(self, lane_count: int):
        self._status: dict[int, LaneStatus] = {
            lane_id: LaneStatus.OPEN for lane_id in range(lane_count)
        }
        self._open_count = lane_count

    def __len__(self) -> int:
        return len(self._status)

    @property
    def open_count(self) -> int:
        return self._open_count

    def is_open(self, lane_id: int) -> bool:
        return self._status[lane_id] is LaneStatus.OPEN

    def open_lanes(self) -> list[int]:
        return [lane_id for lane_id, status in self._status.items() if status is LaneStatus.OPEN]

    def close(self, lane_id: int, status: LaneStatus) -> None:
        """Transition a lane from open to a closed status.

        Args:
            lane_id: Lane to close
            status: Closed status to record

        Raises:
            ValueError: If status is OPEN
            RuntimeError: If the lane is already closed
        """
        if status is LaneStatus.OPEN:
            raise ValueError("Cannot close a lane with status OPEN")
        current = self._status[lane_id]
        if current.is_closed:
            raise RuntimeError(
                f"Lane {lane_id} closed twice (was {current.value}, now {status.value})"
            )
        self._status[lane_id] = status
        self._open_count -= 1
        logger.debug(f"Lane {lane_id} closed ({status.value}), {self._open_count} still open")

    def snapshot(self) -> dict[int, LaneStatus]:
        return dict(self._status)
