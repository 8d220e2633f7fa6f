"""Connectors (actions) API."""

from .base import APIGroup, Endpoint

CONNECTOR = "/api/actions/connector/{id}"


class Connectors(APIGroup):
    create = Endpoint("POST", "/api/actions/connector/{id?}", "Create a connector; Kibana generates the id when omitted.")
    get = Endpoint("GET", CONNECTOR, "Get connector information.")
    update = Endpoint("PUT", CONNECTOR, "Update a connector.")
    delete = Endpoint("DELETE", CONNECTOR, "Delete a connector.")
    run = Endpoint("POST", CONNECTOR + "/_execute", "Run a connector.")
    list = Endpoint("GET", "/api/actions/connectors", "Get all connectors.")
    get_types = Endpoint("GET", "/api/actions/connector_types", "Get connector types.")
