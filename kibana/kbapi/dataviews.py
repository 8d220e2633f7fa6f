"""Data views API."""

from .base import APIGroup, Endpoint

DATA_VIEWS = "/api/data_views"
DATA_VIEW = DATA_VIEWS + "/data_view/{view_id}"


class DataViews(APIGroup):
    list = Endpoint("GET", DATA_VIEWS, "Get all data views.")
    create = Endpoint("POST", DATA_VIEWS + "/data_view", "Create a data view.")
    get = Endpoint("GET", DATA_VIEW, "Get a data view.")
    update = Endpoint("POST", DATA_VIEW, "Update a data view.")
    delete = Endpoint("DELETE", DATA_VIEW, "Delete a data view.")
    update_field_metadata = Endpoint("POST", DATA_VIEW + "/fields", "Update data view field metadata.")
    create_runtime_field = Endpoint("POST", DATA_VIEW + "/runtime_field", "Create a runtime field.")
    create_update_runtime_field = Endpoint("PUT", DATA_VIEW + "/runtime_field", "Create or update a runtime field.")
    get_runtime_field = Endpoint("GET", DATA_VIEW + "/runtime_field/{field_name}", "Get a runtime field.")
    update_runtime_field = Endpoint("POST", DATA_VIEW + "/runtime_field/{field_name}", "Update a runtime field.")
    delete_runtime_field = Endpoint("DELETE", DATA_VIEW + "/runtime_field/{field_name}", "Delete a runtime field.")
    get_default = Endpoint("GET", DATA_VIEWS + "/default", "Get the default data view.")
    set_default = Endpoint("POST", DATA_VIEWS + "/default", "Set the default data view.")
    swap_saved_object_reference = Endpoint(
        "POST", DATA_VIEWS + "/swap_references", "Swap saved object references."
    )
    preview_saved_object_swap = Endpoint(
        "POST", DATA_VIEWS + "/swap_references/_preview", "Preview a saved object reference swap."
    )
