"""Endpoint descriptors and response decoding shared by all API groups.

Each group declares its operations as class attributes::

    class Spaces(APIGroup):
        get = Endpoint("GET", "/api/spaces/space/{id}", "Get a space.")

and callers invoke them with path parameters as keywords::

    client.spaces.get(id="default")

``{name:path}`` keeps slashes in the value; ``{name?}`` may be omitted,
leaving an empty segment.
"""

from __future__ import annotations

import json
import re
from collections.abc import Callable, Mapping
from dataclasses import dataclass, field
from typing import Any
from urllib.parse import quote

import httpx

from ..errors import APIError

RequestOption = Callable[[httpx.Request], None]

PATH_PARAM_PATTERN = re.compile(r"\{(\w+)(:path|\?)?\}")
CALL_KEYWORDS = frozenset({"body", "params", "files", "content", "content_type", "options"})


@dataclass
class Response:
    """Decoded response of a Kibana call.

    Attributes:
        status_code: HTTP status code.
        body: Decoded body for 2xx responses: JSON value, a list for NDJSON,
            text otherwise, None when empty.
        error: Decoded body for non-2xx responses.
        raw_body: Undecoded response bytes.
        headers: Response headers.
    """

    status_code: int
    body: Any = None
    error: Any = None
    raw_body: bytes = b""
    headers: httpx.Headers = field(default_factory=httpx.Headers)

    @property
    def ok(self) -> bool:
        return 200 <= self.status_code < 300


def decode_body(response: httpx.Response) -> Any:
    """Decode a response body by content type, falling back to text."""
    raw = response.content
    if not raw:
        return None

    content_type = response.headers.get("content-type", "")
    try:
        if "ndjson" in content_type:
            return [json.loads(line) for line in raw.splitlines() if line.strip()]
        return json.loads(raw)
    except ValueError:
        return response.text


def encode_params(params: Mapping[str, Any] | None) -> list[tuple[str, str]]:
    """Flatten query parameters: drop None, lowercase booleans, repeat lists."""
    encoded: list[tuple[str, str]] = []
    for key, value in (params or {}).items():
        values = value if isinstance(value, (list, tuple)) else [value]
        for item in values:
            if item is None:
                continue
            if isinstance(item, bool):
                item = "true" if item else "false"
            encoded.append((key, str(item)))
    return encoded


def handle_response(response: httpx.Response) -> Response:
    """Wrap an httpx response, raising APIError for non-2xx statuses."""
    decoded = decode_body(response)
    result = Response(
        status_code=response.status_code,
        raw_body=response.content,
        headers=response.headers,
    )
    if result.ok:
        result.body = decoded
        return result

    result.error = decoded
    raise APIError(response.status_code, decoded, result)


class Endpoint:
    """A single Kibana operation bound to a method and path template."""

    def __init__(self, method: str, path: str, doc: str = "", name: str | None = None):
        self.method = method.upper()
        self.path = path
        self.doc = doc
        self.name = name or ""
        self.path_params = tuple(m.group(1) for m in PATH_PARAM_PATTERN.finditer(path))

    def __set_name__(self, owner: type, name: str) -> None:
        if not self.name:
            self.name = name

    def __get__(self, instance: APIGroup | None, owner: type) -> Any:
        if instance is None:
            return self

        def call(**kwargs: Any) -> Response:
            return self.call(instance._transport, f"{instance._namespace}.{self.name}", **kwargs)

        call.__name__ = self.name
        call.__qualname__ = f"{owner.__name__}.{self.name}"
        call.__doc__ = f"{self.doc}\n\n{self.method} {self.path}".strip()
        return call

    def __repr__(self) -> str:
        return f"Endpoint({self.method} {self.path})"

    def render_path(self, values: Mapping[str, Any]) -> str:
        """Substitute path parameters into the template.

        Raises:
            ValueError: If a path parameter is missing.
        """

        def replace(match: re.Match[str]) -> str:
            name, modifier = match.group(1), match.group(2)
            value = values.get(name)
            if value is None or value == "":
                if modifier == "?":
                    return ""
                raise ValueError(f"{self.name}: missing required path parameter {name!r}")
            return quote(str(value), safe="/" if modifier == ":path" else "")

        return PATH_PARAM_PATTERN.sub(replace, self.path)

    def build_request(self, **kwargs: Any) -> httpx.Request:
        """Build a path-only request from call keywords.

        Raises:
            TypeError: On keywords that are neither path parameters nor
                call options.
            ValueError: If a path parameter is missing.
        """
        unknown = set(kwargs) - CALL_KEYWORDS - set(self.path_params)
        if unknown:
            raise TypeError(f"{self.name}() got unexpected keyword arguments: {', '.join(sorted(unknown))}")

        path = self.render_path({name: kwargs.get(name) for name in self.path_params})
        body = kwargs.get("body")
        files = kwargs.get("files")
        content = kwargs.get("content")

        request_kwargs: dict[str, Any] = {"params": encode_params(kwargs.get("params"))}
        if files is not None:
            request_kwargs["files"] = files
            if body is not None:
                request_kwargs["data"] = body
        elif content is not None:
            request_kwargs["content"] = content
        elif body is not None:
            request_kwargs["json"] = body

        request = httpx.Request(self.method, path, **request_kwargs)
        if kwargs.get("content_type"):
            request.headers["Content-Type"] = kwargs["content_type"]
        for option in kwargs.get("options") or ():
            option(request)
        return request

    def call(self, transport: Any, span_name: str = "", /, **kwargs: Any) -> Response:
        """Build, send and decode one call.

        When the transport carries an ``instrumentation`` object, the call
        runs inside a span named after the operation (``spaces.get``).
        """
        instrumentation = getattr(transport, "instrumentation", None)
        if instrumentation is None:
            return handle_response(transport.perform(self.build_request(**kwargs)))

        with instrumentation.span(span_name or self.name) as span:
            request = self.build_request(**kwargs)
            instrumentation.before_request(span, request)
            response = transport.perform(request)
            instrumentation.after_response(span, response)
            return handle_response(response)


class APIGroup:
    """Base class for a group of endpoints sharing one transport."""

    def __init__(self, transport: Any):
        self._transport = transport
        self._namespace = type(self).__name__.lower()

    def _bind_namespace(self, namespace: str) -> None:
        """Name this group and its subgroups for span names."""
        self._namespace = namespace
        for attr, value in vars(self).items():
            if isinstance(value, APIGroup):
                value._bind_namespace(f"{namespace}.{attr}")

    @classmethod
    def endpoints(cls) -> dict[str, Endpoint]:
        """Return every endpoint declared on the group, by attribute name."""
        found: dict[str, Endpoint] = {}
        for klass in reversed(cls.__mro__):
            for name, value in vars(klass).items():
                if isinstance(value, Endpoint):
                    found[name] = value
        return found
