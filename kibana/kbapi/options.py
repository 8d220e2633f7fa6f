"""Request options and output helpers."""

from __future__ import annotations

import json
from collections.abc import Mapping
from typing import Any

import httpx
from rich.console import Console

from .base import RequestOption, Response


def with_headers(headers: Mapping[str, str]) -> RequestOption:
    """Return a request option that sets extra headers on one call.

    Example:
        >>> client.status.get(options=[with_headers({"X-Opaque-Id": "abc"})])
    """

    def apply(request: httpx.Request) -> None:
        for key, value in headers.items():
            request.headers[key] = value

    return apply


def pretty_print(value: Any, console: Console | None = None) -> str:
    """Print a JSON value indented by two spaces and return the text."""
    text = json.dumps(value, indent=2, default=str)
    (console or Console()).print(text, markup=False, highlight=False, soft_wrap=True)
    return text


def print_raw_body(response: Response, console: Console | None = None) -> str:
    text = response.raw_body.decode("utf-8", errors="replace")
    (console or Console()).print(text, markup=False, highlight=False, soft_wrap=True)
    return text
