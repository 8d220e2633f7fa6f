"""HTTP transport for the Kibana client, built on httpx.

Connection pooling and connection-level retries belong to httpx; this
module adds node selection across the configured Kibana URLs, default
headers, authentication and optional request metrics.
"""

from __future__ import annotations

import logging
import ssl
import threading
import time
from contextlib import AbstractContextManager
from dataclasses import dataclass, field
from typing import Any, Protocol

import httpx

from .errors import ConfigurationError, KibanaError

logger = logging.getLogger(__name__)


class Transport(Protocol):
    """Anything that can execute a request and return a response."""

    def perform(self, request: httpx.Request) -> httpx.Response: ...


class Instrumentation(Protocol):
    """Tracing hooks run around every API call.

    ``span`` is entered before the request is built; exceptions raised
    inside it (including ``APIError``) propagate through it.
    See ``kibana.instrumentation.OpenTelemetryInstrumentation``.
    """

    def span(self, name: str) -> AbstractContextManager[Any]: ...

    def before_request(self, span: Any, request: httpx.Request) -> None: ...

    def after_response(self, span: Any, response: httpx.Response) -> None: ...


@dataclass
class TransportMetrics:
    """Request counters collected when metrics are enabled."""

    requests: int = 0
    failures: int = 0
    responses: dict[int, int] = field(default_factory=dict)
    requests_by_node: dict[str, int] = field(default_factory=dict)
    total_duration_ms: float = 0.0

    def to_dict(self) -> dict[str, Any]:
        """Convert metrics to dictionary for reporting."""
        return {
            "requests": self.requests,
            "failures": self.failures,
            "responses": dict(self.responses),
            "requests_by_node": dict(self.requests_by_node),
            "avg_duration_ms": (
                round(self.total_duration_ms / self.requests, 2) if self.requests else 0.0
            ),
        }


def authorization_header(
    api_key: str | None = None,
    service_token: str | None = None,
) -> str | None:
    """Build the Authorization value; an API key wins over a service token."""
    if api_key:
        return f"ApiKey {api_key}"
    if service_token:
        return f"Bearer {service_token}"
    return None


def ssl_context(ca_cert: bytes | None = None, verify: bool = True) -> ssl.SSLContext | bool:
    """Build the TLS verification setting for httpx."""
    if ca_cert:
        try:
            return ssl.create_default_context(cadata=ca_cert.decode("ascii"))
        except (ssl.SSLError, ValueError) as e:
            raise ConfigurationError(f"unable to add CA certificate: {e}") from e
    return verify


class HTTPTransport:
    """Executes Kibana requests over a shared httpx.Client.

    Requests arrive with a path-only URL; each one is resolved against the
    next node in round-robin order before being sent.
    """

    def __init__(
        self,
        urls: list[httpx.URL],
        *,
        username: str | None = None,
        password: str | None = None,
        api_key: str | None = None,
        service_token: str | None = None,
        headers: dict[str, str] | None = None,
        user_agent: str | None = None,
        ca_cert: bytes | None = None,
        verify: bool = True,
        max_retries: int = 3,
        disable_retry: bool = False,
        timeout: float | None = 30.0,
        enable_metrics: bool = False,
        enable_debug_logger: bool = False,
        transport: httpx.BaseTransport | None = None,
    ):
        if not urls:
            raise ConfigurationError("no Kibana URLs configured")

        self._urls = list(urls)
        self._next = 0
        self._lock = threading.Lock()
        self._metrics = TransportMetrics() if enable_metrics else None
        self._debug = enable_debug_logger

        default_headers = dict(headers or {})
        if user_agent:
            default_headers["User-Agent"] = user_agent
        authorization = authorization_header(api_key, service_token)
        if authorization:
            default_headers["Authorization"] = authorization

        auth = None
        if authorization is None and username:
            auth = httpx.BasicAuth(username, password or "")

        if transport is None:
            transport = httpx.HTTPTransport(
                verify=ssl_context(ca_cert, verify),
                retries=0 if disable_retry else max_retries,
            )

        self._client = httpx.Client(
            transport=transport,
            headers=default_headers,
            auth=auth,
            timeout=timeout,
        )

    @property
    def urls(self) -> list[httpx.URL]:
        return list(self._urls)

    def _select(self) -> httpx.URL:
        with self._lock:
            url = self._urls[self._next % len(self._urls)]
            self._next += 1
        return url

    def _resolve(self, request: httpx.Request) -> httpx.Request:
        """Rebuild a path-only request against the next node."""
        if request.url.is_absolute_url:
            url = request.url
        else:
            base = self._select()
            url = base.copy_with(raw_path=base.raw_path.rstrip(b"/") + request.url.raw_path)

        return self._client.build_request(
            request.method,
            url,
            headers=request.headers,
            content=request.read(),
            extensions=request.extensions,
        )

    def perform(self, request: httpx.Request) -> httpx.Response:
        """Send a request; transport errors propagate unchanged."""
        outgoing = self._resolve(request)
        node = f"{outgoing.url.scheme}://{outgoing.url.netloc.decode('ascii')}"

        if self._debug:
            logger.debug("> %s %s", outgoing.method, outgoing.url)

        started = time.perf_counter()
        try:
            response = self._client.send(outgoing)
            response.read()
        except httpx.HTTPError:
            self._record(node, None, started)
            raise

        self._record(node, response.status_code, started)
        if self._debug:
            logger.debug(
                "< %s %s %d (%.1f ms)",
                outgoing.method,
                outgoing.url,
                response.status_code,
                (time.perf_counter() - started) * 1000,
            )
        return response

    def _record(self, node: str, status_code: int | None, started: float) -> None:
        if self._metrics is None:
            return
        with self._lock:
            metrics = self._metrics
            metrics.requests += 1
            metrics.requests_by_node[node] = metrics.requests_by_node.get(node, 0) + 1
            metrics.total_duration_ms += (time.perf_counter() - started) * 1000
            if status_code is None:
                metrics.failures += 1
            else:
                metrics.responses[status_code] = metrics.responses.get(status_code, 0) + 1

    def metrics(self) -> dict[str, Any]:
        """Return collected metrics.

        Raises:
            KibanaError: If metrics were not enabled.
        """
        if self._metrics is None:
            raise KibanaError("metrics are not enabled")
        with self._lock:
            return self._metrics.to_dict()

    def close(self) -> None:
        self._client.close()
