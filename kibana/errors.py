"""Exceptions raised by the Kibana client.

Transport failures (connection refused, timeouts, TLS errors) surface as
the underlying ``httpx.HTTPError`` and are not wrapped here.
"""

import json
from typing import Any


class KibanaError(Exception):
    """Base class for client errors."""


class ConfigurationError(KibanaError):
    """Raised when the client configuration is invalid."""


def format_error(error: Any) -> str:
    """Render a decoded error body compactly for messages."""
    if isinstance(error, str):
        return error
    try:
        return json.dumps(error, separators=(",", ":"), sort_keys=True)
    except (TypeError, ValueError):
        return str(error)


class APIError(KibanaError):
    """Raised when Kibana answers with a non-2xx status.

    Attributes:
        status_code: HTTP status code.
        error: Decoded error body (JSON value, or text when not JSON).
        response: The full Response wrapper.
    """

    def __init__(self, status_code: int, error: Any, response: Any = None):
        self.status_code = status_code
        self.error = error
        self.response = response
        super().__init__(f"HTTP Status Code {status_code}: {format_error(error)}")
