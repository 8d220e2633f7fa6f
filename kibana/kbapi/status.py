"""Kibana status API."""

from .base import APIGroup, Endpoint


class Status(APIGroup):
    get = Endpoint("GET", "/api/status", "Get Kibana status; v7format and v8format select the format.")
    get_redacted = Endpoint("GET", "/api/status", "Get the redacted status available without authentication.")
