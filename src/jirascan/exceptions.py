"""Custom exception classes for jirascan."""

from collections.abc import Sequence
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from jirascan.aggregation.models import LaneFailure


class JiraScanError(Exception):
    """Base exception for all jirascan errors."""

    pass


class ConfigError(JiraScanError):
    """Exception raised for configuration file or environment errors."""

    pass


class InvalidConfiguration(JiraScanError):
    """Exception raised when a run is requested with invalid parameters.

    Raised before any worker is started or any request is made, so no
    partial state exists when it is seen.
    """

    pass


class TransportError(JiraScanError):
    """Exception raised when a single request to Jira fails.

    Covers network failures, timeouts, authentication failures, HTTP error
    responses and undecodable payloads.
    """

    def __init__(
        self,
        message: str,
        status_code: int | None = None,
        response_body: str | None = None,
        transient: bool = False,
    ):
        """Initialize transport error.

        Args:
            message: Error message
            status_code: HTTP status code, if a response was received
            response_body: Decoded error body returned by Jira, if any
            transient: True if repeating the request may succeed
        """
        self.status_code = status_code
        self.response_body = response_body
        self.transient = transient
        if response_body:
            message = f"{message}\n{response_body}"
        super().__init__(message)


class RateLimitError(TransportError):
    """Exception raised when Jira answers HTTP 429 (retryable)."""

    def __init__(self, message: str = "Rate limit exceeded", retry_after: int | None = None):
        """Initialize rate limit error.

        Args:
            message: Error message
            retry_after: Seconds to wait before retrying
        """
        self.retry_after = retry_after
        if retry_after:
            message = f"{message}. Retry after {retry_after}s"
        super().__init__(message, status_code=429, transient=True)


class NotFoundError(TransportError):
    """Exception raised when an issue does not exist or is not visible."""

    pass


class SerializationError(JiraScanError):
    """Exception raised for payload encoding/decoding errors."""

    pass


class AggregationError(JiraScanError):
    """Base class for errors describing the outcome of an aggregation run."""

    def __init__(self, message: str, failures: "Sequence[LaneFailure]" = ()):
        self.failures = tuple(failures)
        super().__init__(message)


class LaneFailureError(AggregationError):
    """Some lanes closed on a transport error; the result is best-effort."""

    pass


class PartialResultError(AggregationError):
    """Every lane closed on an error; the result may be severely incomplete."""

    pass


class RunCancelledError(AggregationError):
    """The run was cancelled before every lane reached end-of-data."""

    pass
