"""Cases API."""

from .base import APIGroup, Endpoint

CASES = "/api/cases"
CASE = CASES + "/{case_id}"


class Cases(APIGroup):
    create = Endpoint("POST", CASES, "Create a case.")
    update = Endpoint("PATCH", CASES, "Update cases.")
    delete = Endpoint("DELETE", CASES, "Delete cases; pass ids in params.")
    get = Endpoint("GET", CASE, "Get case information.")
    search = Endpoint("GET", CASES + "/_find", "Search cases.")
    add_comment_alert = Endpoint("POST", CASE + "/comments", "Add a comment or alert to a case.")
    update_alert_comment = Endpoint("PATCH", CASE + "/comments", "Update a case comment or alert.")
    delete_all_alerts_comments = Endpoint("DELETE", CASE + "/comments", "Delete all case comments and alerts.")
    get_alert_comment = Endpoint("GET", CASE + "/comments/{comment_id}", "Get a case comment or alert.")
    delete_alert_comment = Endpoint("DELETE", CASE + "/comments/{comment_id}", "Delete a case comment or alert.")
    list_alerts_comments = Endpoint("GET", CASE + "/comments/_find", "Find case comments and alerts.")
    attach_file = Endpoint("POST", CASE + "/files", "Attach a file to a case (multipart).")
    get_all_alerts = Endpoint("GET", CASE + "/alerts", "Get all alerts attached to a case.")
    list_activity = Endpoint("GET", CASE + "/user_actions/_find", "Find case activity.")
    push = Endpoint("POST", CASE + "/connector/{connector_id}/_push", "Push a case to an external service.")
    list_from_alert = Endpoint("GET", CASES + "/alerts/{alert_id}", "Get cases for an alert.")
    get_settings = Endpoint("GET", CASES + "/configure", "Get case settings.")
    add_settings = Endpoint("POST", CASES + "/configure", "Add case settings.")
    update_settings = Endpoint("PATCH", CASES + "/configure/{configuration_id}", "Update case settings.")
    get_connectors = Endpoint("GET", CASES + "/configure/connectors/_find", "Get case connectors.")
    get_tags = Endpoint("GET", CASES + "/tags", "Get case tags.")
    get_creators = Endpoint("GET", CASES + "/reporters", "Get case creators.")
