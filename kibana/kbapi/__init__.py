"""Kibana API bindings."""

from .api import API, GROUPS
from .base import APIGroup, Endpoint, Response
from .options import pretty_print, print_raw_body, with_headers

__all__ = [
    "API",
    "GROUPS",
    "APIGroup",
    "Endpoint",
    "Response",
    "pretty_print",
    "print_raw_body",
    "with_headers",
]
