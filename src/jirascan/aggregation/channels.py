"""Message channels connecting the coordinator, workers and aggregator."""

import queue
from typing import Generic, TypeVar

T = TypeVar("T")


class Channel(Generic[T]):
    """Thread-safe FIFO channel with an end-of-stream signal.

    Wraps ``queue.Queue``. ``close()`` enqueues a ``None`` stop signal; a
    receiver that gets ``None`` must stop reading.

    Example:
        >>> assignments: Channel[PageDescriptor] = Channel(maxsize=1)
        >>> # Coordinator:
        >>> assignments.send(descriptor)
        >>> assignments.close()
        >>> # Worker:
        >>> while (descriptor := assignments.receive()) is not None:
        >>>     fetch(descriptor)
    """

    def __init__(self, maxsize: int = 0):
        """Initialize channel.

        Args:
            maxsize: Maximum number of undelivered items. 0 = unbounded.
        """
        self._queue: queue.Queue[T | None] = queue.Queue(maxsize=maxsize)
        self.maxsize = maxsize

    def send(self, item: T, block: bool = True, timeout: float | None = None) -> None:
        """Enqueue an item (blocks while the channel is full).

        Raises:
            queue.Full: If the channel is full and block=False or timeout expires
        """
        self._queue.put(item, block=block, timeout=timeout)

    def receive(self, block: bool = True, timeout: float | None = None) -> T | None:
        """Dequeue the next item, or None once the channel is closed.

        Raises:
            queue.Empty: If nothing arrives and block=False or timeout expires
        """
        return self._queue.get(block=block, timeout=timeout)

    def close(self, discard_pending: bool = False) -> None:
        """Send the stop signal.

        Args:
            discard_pending: Drop undelivered items first so the receiver
                sees the stop signal next. Only safe when the caller is the
                sole sender.
        """
        if discard_pending:
            while True:
                try:
                    self._queue.get_nowait()
                except queue.Empty:
                    break
        self._queue.put(None)

    def qsize(self) -> int:
        """Return approximate channel size (monitoring only)."""
        return self._queue.qsize()

    def __repr__(self) -> str:
        return f"Channel(maxsize={self.maxsize}, size~{self.qsize()})"
