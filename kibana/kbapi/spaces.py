"""Spaces API."""

from .base import APIGroup, Endpoint

SPACES = "/api/spaces"


class Spaces(APIGroup):
    get_all = Endpoint("GET", SPACES + "/space", "Get all spaces.")
    create = Endpoint("POST", SPACES + "/space", "Create a space.")
    get = Endpoint("GET", SPACES + "/space/{id}", "Get a space.")
    update = Endpoint("PUT", SPACES + "/space/{id}", "Update a space.")
    delete = Endpoint("DELETE", SPACES + "/space/{id}", "Delete a space.")
    copy_objects = Endpoint("POST", SPACES + "/_copy_saved_objects", "Copy saved objects between spaces.")
    update_objects = Endpoint("POST", SPACES + "/_update_objects_spaces", "Update the spaces of saved objects.")
    get_shareable_references = Endpoint(
        "POST", SPACES + "/_get_shareable_references", "Get shareable references of saved objects."
    )
    disable_legacy_url_aliases = Endpoint(
        "POST", SPACES + "/_disable_legacy_url_aliases", "Disable legacy URL aliases."
    )
