"""OpenTelemetry tracing for Kibana API calls.

Requires the ``otel`` extra (``opentelemetry-api``)::

    from kibana import Client, Config
    from kibana.instrumentation import OpenTelemetryInstrumentation

    client = Client(Config(instrumentation=OpenTelemetryInstrumentation()))

Each call opens a client span named after the operation, for example
``spaces.get`` or ``fleet.agent_policies.list``.
"""

from __future__ import annotations

from collections.abc import Iterator
from contextlib import contextmanager

import httpx
from opentelemetry import trace
from opentelemetry.trace import Span, SpanKind, Status, StatusCode

from .version import __version__

TRACER_NAME = "kibana-client"


class OpenTelemetryInstrumentation:
    """Instrumentation backed by an OpenTelemetry tracer.

    Args:
        tracer_provider: Provider to take the tracer from; the global
            provider when None.
        capture_body: Record the request body as a span attribute.
    """

    def __init__(self, tracer_provider: trace.TracerProvider | None = None, capture_body: bool = False):
        self._tracer = trace.get_tracer(TRACER_NAME, __version__, tracer_provider=tracer_provider)
        self.capture_body = capture_body

    @contextmanager
    def span(self, name: str) -> Iterator[Span]:
        with self._tracer.start_as_current_span(name, kind=SpanKind.CLIENT) as span:
            span.set_attribute("db.system", "kibana")
            span.set_attribute("db.operation", name)
            yield span

    def before_request(self, span: Span, request: httpx.Request) -> None:
        span.set_attribute("http.request.method", request.method)
        span.set_attribute("url.path", request.url.path)
        if self.capture_body:
            body = request.read()
            if body:
                span.set_attribute("http.request.body", body.decode("utf-8", errors="replace"))

    def after_response(self, span: Span, response: httpx.Response) -> None:
        span.set_attribute("http.response.status_code", response.status_code)
        if response.status_code >= 400:
            span.set_status(Status(StatusCode.ERROR, f"HTTP {response.status_code}"))
