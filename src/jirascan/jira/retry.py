"""Retry policies for Jira API calls with exponential back-off."""

import threading
from collections.abc import Callable
from functools import wraps
from typing import Any, TypeVar

from tenacity import (
    Retrying,
    retry_if_exception,
    stop_after_attempt,
    stop_when_event_set,
    wait_exponential,
)

from jirascan.constants import (
    DEFAULT_MAX_RETRIES,
    DEFAULT_MAX_RETRIES_NETWORK,
    DEFAULT_MAX_RETRY_WAIT_SECONDS,
)
from jirascan.exceptions import RateLimitError, TransportError

T = TypeVar("T")


def is_rate_limited(exc: BaseException) -> bool:
    return isinstance(exc, RateLimitError)


def is_network_error(exc: BaseException) -> bool:
    """Return True for retryable failures other than rate limiting (5xx, network)."""
    return isinstance(exc, TransportError) and exc.transient and not is_rate_limited(exc)


# Keyword sets for build_retrying()/with_retry()
RATE_LIMIT_POLICY: dict[str, Any] = {
    "max_attempts": DEFAULT_MAX_RETRIES,
    "min_wait": 4,
    "max_wait": DEFAULT_MAX_RETRY_WAIT_SECONDS,
    "predicate": is_rate_limited,
}
NETWORK_POLICY: dict[str, Any] = {
    "max_attempts": DEFAULT_MAX_RETRIES_NETWORK,
    "min_wait": 1,
    "max_wait": 10,
    "predicate": is_network_error,
}


def build_retrying(
    max_attempts: int = DEFAULT_MAX_RETRIES,
    min_wait: int = 1,
    max_wait: int = DEFAULT_MAX_RETRY_WAIT_SECONDS,
    multiplier: int = 2,
    predicate: Callable[[BaseException], bool] = is_rate_limited,
    cancel_event: threading.Event | None = None,
) -> Retrying:
    """Build a tenacity controller for one call.

    The last exception is re-raised once attempts are exhausted, so callers
    always see a TransportError rather than a tenacity RetryError.

    With ``cancel_event``, back-off waits on the event instead of sleeping and
    no further attempt is scheduled once it is set. At most one request is
    made after cancellation.

    Args:
        max_attempts: Maximum number of attempts
        min_wait: Minimum wait time in seconds
        max_wait: Maximum wait time in seconds
        multiplier: Exponential multiplier for back-off
        predicate: Decides whether an exception is retried
        cancel_event: Event that cuts back-off short when set

    Returns:
        Retrying instance, callable as ``retrying(func, *args, **kwargs)``
    """
    stop = stop_after_attempt(max_attempts)
    extra: dict[str, Any] = {}
    if cancel_event is not None:
        stop = stop | stop_when_event_set(cancel_event)
        extra["sleep"] = cancel_event.wait

    return Retrying(
        retry=retry_if_exception(predicate),
        wait=wait_exponential(multiplier=multiplier, min=min_wait, max=max_wait),
        stop=stop,
        reraise=True,
        **extra,
    )


def with_retry(
    max_attempts: int = DEFAULT_MAX_RETRIES,
    min_wait: int = 1,
    max_wait: int = DEFAULT_MAX_RETRY_WAIT_SECONDS,
    multiplier: int = 2,
    predicate: Callable[[BaseException], bool] = is_rate_limited,
) -> Callable[[Callable[..., T]], Callable[..., T]]:
    """Decorator to add retry logic with exponential back-off.

    Args:
        max_attempts: Maximum number of attempts
        min_wait: Minimum wait time in seconds
        max_wait: Maximum wait time in seconds
        multiplier: Exponential multiplier for back-off
        predicate: Decides whether an exception is retried

    Returns:
        Decorated function with retry logic
    """

    def decorator(func: Callable[..., T]) -> Callable[..., T]:
        @wraps(func)
        def wrapper(*args, **kwargs) -> T:
            retrying = build_retrying(max_attempts, min_wait, max_wait, multiplier, predicate)
            return retrying(func, *args, **kwargs)

        return wrapper

    return decorator


retry_on_rate_limit = with_retry(**RATE_LIMIT_POLICY)
retry_on_network_error = with_retry(**NETWORK_POLICY)
