"""Uptime settings API."""

from .base import APIGroup, Endpoint


class Uptime(APIGroup):
    get_settings = Endpoint("GET", "/api/uptime/settings", "Get uptime settings.")
    update_settings = Endpoint("PUT", "/api/uptime/settings", "Update uptime settings.")
