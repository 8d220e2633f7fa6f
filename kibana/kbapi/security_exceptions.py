"""Security exception lists API."""

from .base import APIGroup, Endpoint

EXCEPTION_LISTS = "/api/exception_lists"
ITEMS = EXCEPTION_LISTS + "/items"


class SecurityExceptions(APIGroup):
    create_list = Endpoint("POST", EXCEPTION_LISTS, "Create an exception list.")
    get_list = Endpoint("GET", EXCEPTION_LISTS, "Get an exception list.")
    update_list = Endpoint("PUT", EXCEPTION_LISTS, "Update an exception list.")
    delete_list = Endpoint("DELETE", EXCEPTION_LISTS, "Delete an exception list.")
    list_lists = Endpoint("GET", EXCEPTION_LISTS + "/_find", "Find exception lists.")
    duplicate_list = Endpoint("POST", EXCEPTION_LISTS + "/_duplicate", "Duplicate an exception list.")
    export_list = Endpoint("POST", EXCEPTION_LISTS + "/_export", "Export an exception list.")
    import_list = Endpoint("POST", EXCEPTION_LISTS + "/_import", "Import an exception list (multipart).")
    get_summary = Endpoint("GET", EXCEPTION_LISTS + "/summary", "Get an exception list summary.")
    create_item = Endpoint("POST", ITEMS, "Create an exception list item.")
    get_item = Endpoint("GET", ITEMS, "Get an exception list item.")
    update_item = Endpoint("PUT", ITEMS, "Update an exception list item.")
    delete_item = Endpoint("DELETE", ITEMS, "Delete an exception list item.")
    list_items = Endpoint("GET", ITEMS + "/_find", "Find exception list items.")
    create_items = Endpoint(
        "POST", "/api/detection_engine/rules/{id}/exceptions", "Create rule exception list items."
    )
    create_shared_list = Endpoint("POST", "/api/exceptions/shared", "Create a shared exception list.")
