"""JQL search page fetching."""

import logging
import threading
from collections.abc import Sequence
from typing import Protocol

from jirascan.exceptions import TransportError
from jirascan.jira.client import JiraClient
from jirascan.jira.models import SearchPage
from jirascan.jira.retry import NETWORK_POLICY, RATE_LIMIT_POLICY, build_retrying

logger = logging.getLogger(__name__)


class PageFetcher(Protocol):
    """Protocol for fetching one page of query results."""

    def fetch(
        self,
        query: str,
        offset: int,
        page_size: int,
        cancel_event: threading.Event | None = None,
    ) -> list[str]:
        """Fetch the record identifiers of one page.

        Args:
            query: Query string in the remote query language
            offset: Position of the first record of the page
            page_size: Maximum number of records to return
            cancel_event: Set when the run is cancelled. Implementations
                that wait between attempts should stop waiting and raise.

        Returns:
            Record identifiers, empty when no records exist at ``offset``

        Raises:
            TransportError: If the request fails
        """
        ...


class JiraPageFetcher:
    """PageFetcher backed by Jira's ``/search`` endpoint.

    Rate limiting (HTTP 429) and transient failures are retried here with
    exponential back-off; callers only ever see the final TransportError.
    """

    def __init__(
        self,
        client: JiraClient,
        fields: Sequence[str] = (),
        timeout: float | None = None,
    ):
        """Initialize fetcher.

        Args:
            client: Shared Jira client
            fields: Issue fields to request. Empty requests none, since only
                keys are collected.
            timeout: Per-request timeout in seconds (client default if None)
        """
        self.client = client
        self.fields = list(fields)
        self.timeout = timeout

    def _search_once(self, query: str, offset: int, page_size: int) -> SearchPage:
        params = {
            "jql": query,
            "startAt": offset,
            "maxResults": page_size,
            "fields": ",".join(self.fields),
        }
        return self.client.request(
            "GET", "search", params=params, timeout=self.timeout, type=SearchPage
        )

    def search(
        self,
        query: str,
        offset: int,
        page_size: int,
        cancel_event: threading.Event | None = None,
    ) -> SearchPage:
        """Run one paginated JQL search request, retrying transient failures.

        Network errors are retried inside each rate-limit attempt.
        """
        rate_limited = build_retrying(**RATE_LIMIT_POLICY, cancel_event=cancel_event)
        network = build_retrying(**NETWORK_POLICY, cancel_event=cancel_event)
        return rate_limited(network, self._search_once, query, offset, page_size)

    def fetch(
        self,
        query: str,
        offset: int,
        page_size: int,
        cancel_event: threading.Event | None = None,
    ) -> list[str]:
        """Fetch the issue keys of one page.

        Raises:
            TransportError: If the request fails, or if Jira capped the page
                below ``page_size``. Offsets advance by ``page_size``, so a
                capped page would silently skip records.
        """
        page = self.search(query, offset, page_size, cancel_event)
        if page.issues and 0 < page.max_results < page_size:
            raise TransportError(
                f"Jira limits search pages to {page.max_results} issues but "
                f"{page_size} were requested; lower page_size to {page.max_results} or less"
            )
        logger.debug(f"Fetched {len(page.issues)} issues at offset {offset} (total={page.total})")
        return [issue.key for issue in page.issues]
