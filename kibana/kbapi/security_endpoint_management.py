"""Security endpoint management API."""

from .base import APIGroup, Endpoint


class SecurityEndpointManagement(APIGroup):
    get_action_status = Endpoint("GET", "/api/endpoint/action_status", "Get response action status.")
    list_actions = Endpoint("GET", "/api/endpoint/action", "List response actions.")
