"""Security roles API."""

from .base import APIGroup, Endpoint


class Roles(APIGroup):
    list = Endpoint("GET", "/api/security/role", "Get all roles.")
    get = Endpoint("GET", "/api/security/role/{name}", "Get a role.")
    create_or_update_single = Endpoint("PUT", "/api/security/role/{name}", "Create or update a role.")
    create_or_update_multi = Endpoint("POST", "/api/security/roles", "Create or update roles.")
    delete = Endpoint("DELETE", "/api/security/role/{name}", "Delete a role.")
