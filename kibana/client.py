"""Kibana client: configuration, transport setup and CSRF header injection."""

from __future__ import annotations

import os
import platform
from dataclasses import dataclass, field
from typing import Any

import httpx

from .errors import ConfigurationError, KibanaError
from .kbapi import API
from .transport import HTTPTransport, Instrumentation, Transport
from .version import __version__

DEFAULT_URL = "http://localhost:5601"
ADDRESSES_ENV_VAR = "KIBANA_URL"
XSRF_HEADER = "kbn-xsrf"


@dataclass
class Config:
    """Client configuration.

    Attributes:
        addresses: Kibana base URLs; defaults to ``KIBANA_URL`` (comma
            separated), then ``http://localhost:5601``.
        username: Username for HTTP basic authentication.
        password: Password for HTTP basic authentication.
        api_key: Base64 encoded API key; overrides basic auth and service token.
        service_token: Service account token; overrides basic auth.
        headers: Headers sent with every request.
        xsrf_header_value: Value for the kbn-xsrf header.
        ca_cert: PEM encoded certificate authorities to trust.
        verify: Verify TLS certificates when no ``ca_cert`` is given.
        max_retries: Connection retries performed by httpx.
        disable_retry: Turn connection retries off.
        timeout: Request timeout in seconds; None waits forever.
        enable_metrics: Collect request metrics, see ``Client.metrics``.
        enable_debug_logger: Log each request and response at DEBUG.
        instrumentation: Tracing hooks run around every API call, for
            example ``kibana.instrumentation.OpenTelemetryInstrumentation``.
        transport: httpx transport to send requests through.
    """

    addresses: list[str] = field(default_factory=list)
    username: str | None = None
    password: str | None = None
    api_key: str | None = None
    service_token: str | None = None
    headers: dict[str, str] = field(default_factory=dict)
    xsrf_header_value: str = "true"
    ca_cert: bytes | None = None
    verify: bool = True
    max_retries: int = 3
    disable_retry: bool = False
    timeout: float | None = 30.0
    enable_metrics: bool = False
    enable_debug_logger: bool = False
    instrumentation: Instrumentation | None = None
    transport: httpx.BaseTransport | None = None


def addrs_from_environment(env_var: str = ADDRESSES_ENV_VAR) -> list[str]:
    """Split a comma separated environment variable into addresses."""
    value = os.environ.get(env_var, "")
    return [addr.strip() for addr in value.split(",") if addr.strip()]


def addrs_to_urls(addrs: list[str]) -> list[httpx.URL]:
    """Parse addresses into URLs, dropping trailing slashes.

    Raises:
        ConfigurationError: If an address is not an http(s) URL.
    """
    urls = []
    for addr in addrs:
        try:
            url = httpx.URL(addr.rstrip("/"))
        except httpx.InvalidURL as e:
            raise ConfigurationError(f"cannot create client: cannot parse url {addr!r}: {e}") from e
        if url.scheme not in ("http", "https") or not url.host:
            raise ConfigurationError(f"cannot create client: cannot parse url {addr!r}")
        urls.append(url)
    return urls


def init_user_agent() -> str:
    return (
        f"kibana-client/{__version__} "
        f"({platform.system().lower()} {platform.machine()}; Python {platform.python_version()})"
    )


def new_transport(config: Config) -> HTTPTransport:
    """Create the HTTP transport described by ``config``."""
    addrs = list(config.addresses) or addrs_from_environment(ADDRESSES_ENV_VAR)
    urls = addrs_to_urls(addrs) or [httpx.URL(DEFAULT_URL)]

    return HTTPTransport(
        urls,
        username=config.username,
        password=config.password,
        api_key=config.api_key,
        service_token=config.service_token,
        headers=config.headers,
        user_agent=init_user_agent(),
        ca_cert=config.ca_cert,
        verify=config.verify,
        max_retries=config.max_retries,
        disable_retry=config.disable_retry,
        timeout=config.timeout,
        enable_metrics=config.enable_metrics,
        enable_debug_logger=config.enable_debug_logger,
        transport=config.transport,
    )


class Client(API):
    """Kibana API client.

    Every API group is available as an attribute, for example
    ``client.spaces.get(id="default")`` or
    ``client.fleet.agent_policies.list()``.

    Example:
        >>> with Client(Config(addresses=["https://kibana:5601"], api_key="...")) as client:
        ...     client.status.get().body["status"]["overall"]["level"]
    """

    def __init__(self, config: Config | None = None, transport: Transport | None = None):
        self.config = config or Config()
        self.transport = transport if transport is not None else new_transport(self.config)
        self._xsrf_header_value = self.config.xsrf_header_value or "true"
        self.instrumentation = self.config.instrumentation
        super().__init__(self)

    def perform(self, request: httpx.Request) -> httpx.Response:
        """Set the CSRF header and hand the request to the transport."""
        request.headers[XSRF_HEADER] = self._xsrf_header_value
        return self.transport.perform(request)

    def metrics(self) -> dict[str, Any]:
        """Return transport metrics.

        Raises:
            KibanaError: If the transport does not collect metrics.
        """
        metrics = getattr(self.transport, "metrics", None)
        if metrics is None:
            raise KibanaError("transport is missing method metrics()")
        return metrics()

    def close(self) -> None:
        close = getattr(self.transport, "close", None)
        if close is not None:
            close()

    def __enter__(self) -> Client:
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()
