"""Fixtures for the API binding tests."""

import json

import httpx
import pytest

from kibana.kbapi import API


class RecordingTransport:
    """Transport that records requests and replays a canned response."""

    def __init__(self):
        self.requests: list[httpx.Request] = []
        self.status_code = 200
        self.content = b"{}"
        self.headers = {"Content-Type": "application/json"}
        self.error: Exception | None = None

    def respond(self, status_code: int = 200, body=None, content: bytes | None = None, content_type: str = "application/json") -> None:
        """Set the next response."""
        self.status_code = status_code
        self.content = content if content is not None else json.dumps(body).encode()
        self.headers = {"Content-Type": content_type}

    def perform(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if self.error is not None:
            raise self.error
        return httpx.Response(self.status_code, content=self.content, headers=self.headers, request=request)

    @property
    def last(self) -> httpx.Request:
        return self.requests[-1]


@pytest.fixture
def transport() -> RecordingTransport:
    return RecordingTransport()


@pytest.fixture
def api(transport: RecordingTransport) -> API:
    return API(transport)
