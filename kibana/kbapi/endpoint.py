"""Endpoint exceptions API."""

from .base import APIGroup, Endpoint

ENDPOINT_LIST = "/api/endpoint_list"


class EndpointExceptions(APIGroup):
    create_list = Endpoint("POST", ENDPOINT_LIST, "Create the endpoint exception list.")
    create_item = Endpoint("POST", ENDPOINT_LIST + "/items", "Create an endpoint exception list item.")
    get_item = Endpoint("GET", ENDPOINT_LIST + "/items", "Get an endpoint exception list item.")
    update_item = Endpoint("PUT", ENDPOINT_LIST + "/items", "Update an endpoint exception list item.")
    delete_item = Endpoint("DELETE", ENDPOINT_LIST + "/items", "Delete an endpoint exception list item.")
    list_items = Endpoint("GET", ENDPOINT_LIST + "/items/_find", "Find endpoint exception list items.")


class EndpointManagement(APIGroup):
    def __init__(self, transport):
        super().__init__(transport)
        self.exceptions = EndpointExceptions(transport)
