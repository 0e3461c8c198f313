"""Shared pytest fixtures and fakes for jirascan tests.

This module provides an in-memory page fetcher and mocked HTTP plumbing so
the engine and client can be exercised without a Jira instance.
"""

import threading
import time
from collections.abc import Callable
from unittest.mock import Mock

import pytest

from jirascan.jira.client import JiraClient


class FakeFetcher:
    """In-memory PageFetcher over a fixed list of issue keys.

    Records every call, tracks peak concurrency, and can raise a configured
    exception for specific offsets.
    """

    def __init__(
        self,
        records: list[str],
        fail_at: dict[int, Exception] | None = None,
        delay: float = 0.0,
        endless: bool = False,
    ):
        self.records = list(records)
        self.fail_at = dict(fail_at or {})
        self.delay = delay
        self.endless = endless
        self.calls: list[tuple[str, int, int]] = []
        self.in_flight = 0
        self.max_in_flight = 0
        self._lock = threading.Lock()

    def fetch(
        self,
        query: str,
        offset: int,
        page_size: int,
        cancel_event: threading.Event | None = None,
    ) -> list[str]:
        with self._lock:
            self.calls.append((query, offset, page_size))
            self.in_flight += 1
            self.max_in_flight = max(self.max_in_flight, self.in_flight)
        try:
            if self.delay:
                time.sleep(self.delay)
            if offset in self.fail_at:
                raise self.fail_at[offset]
            if self.endless:
                return [f"END-{offset + i}" for i in range(page_size)]
            return self.records[offset : offset + page_size]
        finally:
            with self._lock:
                self.in_flight -= 1

    @property
    def offsets(self) -> list[int]:
        return [offset for _, offset, _ in self.calls]


def make_keys(count: int, project: str = "R") -> list[str]:
    """Build issue keys R-1 .. R-count."""
    return [f"{project}-{i}" for i in range(1, count + 1)]


@pytest.fixture
def fake_fetcher() -> Callable[..., FakeFetcher]:
    """Factory fixture for FakeFetcher instances.

    Returns:
        Callable building a FakeFetcher; pass an int for that many keys
    """

    def _make(records: int | list[str] = 0, **kwargs) -> FakeFetcher:
        keys = make_keys(records) if isinstance(records, int) else records
        return FakeFetcher(keys, **kwargs)

    return _make


@pytest.fixture
def mock_session() -> Mock:
    """Mock requests.Session with a default empty 200 response."""
    session = Mock()
    session.request.return_value = make_response(200, b"")
    return session


@pytest.fixture
def jira_client(mock_session: Mock) -> JiraClient:
    """JiraClient wired to the mock session."""
    client = JiraClient(
        base_url="https://jira.example.com/",
        username="bot@example.com",
        api_token="token",
    )
    client._session = mock_session
    return client


@pytest.fixture
def response() -> Callable[..., Mock]:
    """Factory fixture for mocked requests.Response objects."""
    return make_response


def make_response(status_code: int, content: bytes, headers: dict | None = None) -> Mock:
    resp = Mock()
    resp.status_code = status_code
    resp.content = content
    resp.text = content.decode("utf-8", errors="replace")
    resp.headers = headers or {}
    return resp


@pytest.fixture
def no_retry_sleep(monkeypatch: pytest.MonkeyPatch) -> None:
    """Make tenacity back-off waits instantaneous."""
    monkeypatch.setattr("tenacity.nap.time.sleep", lambda seconds: None)


@pytest.fixture
def jira_env(monkeypatch: pytest.MonkeyPatch, tmp_path) -> None:
    """Configure credentials via environment and hide any real config file."""
    for name in (
        "JIRA_BASE_URL",
        "JIRA_USERNAME",
        "JIRA_API_TOKEN",
        "JIRASCAN_TIMEOUT",
        "JIRASCAN_WORKERS",
    ):
        monkeypatch.delenv(name, raising=False)
    monkeypatch.setenv("JIRASCAN_CONFIG", str(tmp_path / "missing.toml"))
    monkeypatch.setenv("JIRASCAN_BASE_URL", "https://jira.example.com")
    monkeypatch.setenv("JIRASCAN_USERNAME", "bot@example.com")
    monkeypatch.setenv("JIRASCAN_API_TOKEN", "token")
