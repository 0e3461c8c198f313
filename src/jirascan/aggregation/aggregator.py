"""Result sink collecting pages from every lane."""

import logging
from collections.abc import Callable

from jirascan.aggregation.channels import Channel
from jirascan.aggregation.models import Page, PageProgress

logger = logging.getLogger(__name__)

ProgressObserver = Callable[[PageProgress], None]


class Aggregator:
    """Appends every page's records into one collection.

    Runs in its own thread and is the only owner of the collection until
    ``run()`` returns it. Pages may arrive in any interleaving; records are
    kept in arrival order with no deduplication.
    """

    def __init__(self, results: Channel[Page], observer: ProgressObserver | None = None):
        """Initialize aggregator.

        Args:
            results: Channel of pages, closed once every worker has exited
            observer: Optional callback invoked after each page
        """
        self.results = results
        self.observer = observer

    def run(self) -> tuple[str, ...]:
        """Consume pages until the channel closes.

        Returns:
            Immutable snapshot of every collected record identifier
        """
        keys: list[str] = []
        pages = 0

        while (page := self.results.receive()) is not None:
            keys.extend(page.keys)
            pages += 1
            if self.observer is not None:
                self._notify(
                    PageProgress(
                        lane_id=page.lane_id,
                        offset=page.descriptor.offset,
                        page_records=len(page),
                        total_records=len(keys),
                        pages=pages,
                    )
                )

        logger.debug(f"Aggregator drained: {len(keys)} records from {pages} pages")
        return tuple(keys)

    def _notify(self, progress: PageProgress) -> None:
        try:
            self.observer(progress)  # type: ignore[misc]
        except Exception as e:
            logger.warning(f"Progress observer failed: {e}")
