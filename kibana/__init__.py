"""Python client for the Kibana management API."""

from .client import DEFAULT_URL, Client, Config
from .errors import APIError, ConfigurationError, KibanaError
from .kbapi import API, Response, pretty_print, print_raw_body, with_headers
from .version import __version__

__all__ = [
    "API",
    "DEFAULT_URL",
    "APIError",
    "Client",
    "Config",
    "ConfigurationError",
    "KibanaError",
    "Response",
    "__version__",
    "pretty_print",
    "print_raw_body",
    "with_headers",
]
