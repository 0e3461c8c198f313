"""Single-issue operations against the Jira REST API."""

import logging
from typing import Any, TypeVar

import msgspec

from jirascan.exceptions import SerializationError, TransportError
from jirascan.jira.client import JiraClient
from jirascan.jira.models import CreatedIssue, Issue, IssueDraft, IssueSummaryFields
from jirascan.jira.retry import retry_on_network_error, retry_on_rate_limit

logger = logging.getLogger(__name__)

T = TypeVar("T")


class JiraIssueService:
    """Fetch, create and update individual issues.

    Each method is a single request/response call on the shared client and
    has no interaction with the concurrent search engine.
    """

    def __init__(self, client: JiraClient):
        """Initialize service with Jira client.

        Args:
            client: JiraClient instance
        """
        self.client = client

    @retry_on_rate_limit
    @retry_on_network_error
    def _get_issue(self, key: str) -> Issue:
        """Fetch one issue with its fields kept as raw JSON.

        Raises:
            NotFoundError: If the issue doesn't exist
            TransportError: For other API errors
        """
        return self.client.request("GET", f"issue/{key}", type=Issue)

    def get_issue_id(self, key: str) -> str:
        """Return the numeric id of the issue with ``key``."""
        return self._get_issue(key).id

    def get_fields_raw(self, key: str) -> bytes:
        """Return the raw JSON of the issue's ``fields`` object."""
        return bytes(self._get_issue(key).fields)

    def decode_fields(self, key: str, type_: type[T] | Any = dict) -> T:
        """Decode the issue's ``fields`` object into ``type_``.

        Args:
            key: Issue key
            type_: msgspec-compatible target type (Struct, dataclass, dict...)

        Returns:
            Decoded fields

        Raises:
            SerializationError: If the fields don't match ``type_``
        """
        raw = self.get_fields_raw(key)
        try:
            return msgspec.json.decode(raw, type=type_)
        except msgspec.DecodeError as e:
            raise SerializationError(f"Cannot decode fields of {key}: {e}") from e

    def get_summary(self, key: str) -> str:
        """Return the summary line of the issue with ``key``."""
        return self.decode_fields(key, IssueSummaryFields).summary

    @retry_on_rate_limit
    def create_issue(self, issue: IssueDraft) -> str:
        """Create an issue and return its key.

        Not retried on network errors, since a lost response would create a
        duplicate issue.

        Raises:
            TransportError: If Jira rejects the issue; the message carries
                Jira's error body
        """
        try:
            created = self.client.request(
                "POST", "issue", json=issue.to_payload(), type=CreatedIssue
            )
        except TransportError as e:
            logger.error(f"Create issue failed: {e}")
            raise
        logger.info(f"Created issue {created.key}")
        return created.key

    @retry_on_rate_limit
    @retry_on_network_error
    def update_issue(self, key: str, issue: IssueDraft) -> str:
        """Update the fields set on ``issue`` and return the issue key.

        Raises:
            TransportError: If Jira rejects the update
        """
        try:
            self.client.request("PUT", f"issue/{key}", json=issue.to_payload())
        except TransportError as e:
            logger.error(f"Update issue {key} failed: {e}")
            raise
        logger.info(f"Updated issue {key}")
        return key
