"""Numeric defaults used throughout the jirascan codebase.

This module centralizes values that would otherwise be magic numbers.
"""

# Search pagination
DEFAULT_PAGE_SIZE = 25  # Jira's historical default maxResults for JQL search
MAX_PAGE_SIZE = 1000
DEFAULT_WORKERS = 8
MAX_WORKERS = 1000

# Retry and timeout constants (seconds)
DEFAULT_REQUEST_TIMEOUT_SECONDS = 30
MIN_REQUEST_TIMEOUT_SECONDS = 5
MAX_REQUEST_TIMEOUT_SECONDS = 600
DEFAULT_MAX_RETRIES = 5
DEFAULT_MAX_RETRIES_NETWORK = 3
DEFAULT_MAX_RETRY_WAIT_SECONDS = 120

# Coordinator wake-up interval used to observe cancellation while idle
CANCEL_POLL_INTERVAL_SECONDS = 0.1

# HTTP status codes the client treats specially
HTTP_NOT_FOUND = 404
HTTP_TOO_MANY_REQUESTS = 429
HTTP_SERVER_ERROR = 500

# Preview limits for CLI output
PREVIEW_LIMIT_DEFAULT = 20
