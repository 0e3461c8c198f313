"""Jira REST transport with basic auth and lazy session creation."""

import logging
from typing import Any, cast

import msgspec
import requests

from jirascan.config.models import ConnectionStatus
from jirascan.constants import (
    DEFAULT_REQUEST_TIMEOUT_SECONDS,
    HTTP_NOT_FOUND,
    HTTP_SERVER_ERROR,
    HTTP_TOO_MANY_REQUESTS,
)
from jirascan.exceptions import NotFoundError, RateLimitError, TransportError
from jirascan.jira.models import CurrentUser, ErrorCollection, ServerInfo

logger = logging.getLogger(__name__)


class JiraClient:
    """Thin wrapper around the Jira REST API with lazy session initialization.

    One client is shared by the search engine and the single-issue
    operations; ``requests.Session`` is safe to share across worker threads
    for plain request/response calls.
    """

    def __init__(
        self,
        base_url: str,
        username: str,
        api_token: str,
        timeout: float = DEFAULT_REQUEST_TIMEOUT_SECONDS,
        verify_ssl: bool = True,
        api_version: str = "2",
    ):
        """
        Initialize Jira client with configuration.

        Args:
            base_url: Base URL of the Jira instance
            username: Account name or e-mail used for basic auth
            api_token: API token or password used for basic auth
            timeout: Request timeout in seconds
            verify_ssl: Whether to verify SSL certificates
            api_version: REST API version used to build paths
        """
        self.base_url = base_url.rstrip("/")
        self.username = username
        self.api_token = api_token
        self.timeout = timeout
        self.verify_ssl = verify_ssl
        self.api_version = api_version
        self._session: requests.Session | None = None

    def _init_session(self) -> None:
        """Create the HTTP session with auth and default headers."""
        session = requests.Session()
        session.auth = (self.username, self.api_token)
        session.verify = self.verify_ssl
        session.headers.update(
            {"Accept": "application/json", "Content-Type": "application/json"}
        )
        self._session = session

    @property
    def session(self) -> requests.Session:
        """
        Lazy-load session on first access.

        Returns:
            Initialized requests.Session
        """
        if self._session is None:
            self._init_session()
        return cast(requests.Session, self._session)

    def url(self, path: str) -> str:
        """Build an absolute REST URL for ``path`` (e.g. ``"search"``)."""
        return f"{self.base_url}/rest/api/{self.api_version}/{path.lstrip('/')}"

    def request_raw(
        self,
        method: str,
        path: str,
        *,
        params: dict[str, Any] | None = None,
        json: dict[str, Any] | None = None,
        timeout: float | None = None,
    ) -> bytes:
        """Send one request and return the raw response body.

        Args:
            method: HTTP method
            path: Path relative to the REST API root
            params: Query string parameters
            json: JSON request body
            timeout: Per-request timeout, defaults to the client timeout

        Returns:
            Response body bytes (empty for 204 responses)

        Raises:
            RateLimitError: On HTTP 429
            NotFoundError: On HTTP 404
            TransportError: On any other HTTP error, timeout or network failure
        """
        url = self.url(path)
        timeout = timeout if timeout is not None else self.timeout
        body = msgspec.json.encode(json) if json is not None else None
        try:
            response = self.session.request(
                method, url, params=params, data=body, timeout=timeout
            )
        except requests.Timeout as e:
            raise TransportError(
                f"{method} {url} timed out after {timeout}s", transient=True
            ) from e
        except requests.RequestException as e:
            raise TransportError(f"{method} {url} failed: {e}", transient=True) from e

        status = response.status_code
        if status == HTTP_TOO_MANY_REQUESTS:
            retry_after = response.headers.get("Retry-After")
            raise RateLimitError(
                f"Rate limit exceeded for {method} {url}",
                retry_after=int(retry_after) if retry_after and retry_after.isdigit() else None,
            )
        if status >= 400:
            detail = self._describe_error(response.content) or response.text
            error_cls = NotFoundError if status == HTTP_NOT_FOUND else TransportError
            raise error_cls(
                f"Jira API returned {status} for {method} {url}",
                status_code=status,
                response_body=detail,
                transient=status >= HTTP_SERVER_ERROR,
            )
        return response.content

    def request(
        self,
        method: str,
        path: str,
        *,
        params: dict[str, Any] | None = None,
        json: dict[str, Any] | None = None,
        timeout: float | None = None,
        type: Any = Any,
    ) -> Any:
        """Send one request and decode the JSON response.

        Args:
            method: HTTP method
            path: Path relative to the REST API root
            params: Query string parameters
            json: JSON request body
            timeout: Per-request timeout, defaults to the client timeout
            type: msgspec type to decode into (plain JSON objects by default)

        Returns:
            Decoded response, or None for an empty body

        Raises:
            TransportError: On request failure or undecodable response
        """
        content = self.request_raw(method, path, params=params, json=json, timeout=timeout)
        if not content:
            return None
        try:
            return msgspec.json.decode(content, type=type)
        except msgspec.DecodeError as e:
            raise TransportError(f"Failed to decode response from {method} {path}: {e}") from e

    @staticmethod
    def _describe_error(content: bytes) -> str:
        """Extract Jira's errorMessages/errors from an error body, if present."""
        if not content:
            return ""
        try:
            return msgspec.json.decode(content, type=ErrorCollection).describe()
        except msgspec.DecodeError:
            return ""

    def test_connection(self) -> ConnectionStatus:
        """
        Test connection to the Jira instance and return status.

        Returns:
            ConnectionStatus with instance info or error message
        """
        try:
            user = self.request("GET", "myself", type=CurrentUser)
            info = self.request("GET", "serverInfo", type=ServerInfo)
            return ConnectionStatus(
                connected=True,
                authenticated=True,
                instance_url=info.base_url or self.base_url,
                jira_version=info.version or None,
                deployment_type=info.deployment_type or None,
                user=user.email_address or user.name or user.account_id,
            )
        except TransportError as e:
            error_msg = str(e)
            if e.status_code in (401, 403):
                error_msg = "Authentication failed - invalid credentials"
            elif "timed out" in error_msg:
                error_msg = "Connection timeout - check network connectivity"
            elif e.status_code is None:
                error_msg = "Cannot reach Jira instance - check base URL"

            return ConnectionStatus(
                connected=e.status_code is not None,
                authenticated=False,
                instance_url=self.base_url,
                error_message=error_msg,
            )

    def close(self) -> None:
        """Close the underlying HTTP session, if one was created."""
        if self._session is not None:
            self._session.close()
            self._session = None
            logger.debug("Closed Jira session")

    def __enter__(self) -> "JiraClient":
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()
        return False
