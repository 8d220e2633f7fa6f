"""Security detection rules and alerts API."""

from .base import APIGroup, Endpoint

DETECTION_ENGINE = "/api/detection_engine"
RULES = DETECTION_ENGINE + "/rules"
SIGNALS = DETECTION_ENGINE + "/signals"


class SecurityDetections(APIGroup):
    create_rule = Endpoint("POST", RULES, "Create a detection rule.")
    get_rule = Endpoint("GET", RULES, "Get a detection rule; pass id or rule_id in params.")
    update_rule = Endpoint("PUT", RULES, "Update a detection rule.")
    patch_rule = Endpoint("PATCH", RULES, "Patch a detection rule.")
    delete_rule = Endpoint("DELETE", RULES, "Delete a detection rule.")
    list_rules = Endpoint("GET", RULES + "/_find", "Find detection rules.")
    bulk_action_rules = Endpoint("POST", RULES + "/_bulk_action", "Apply a bulk action to detection rules.")
    export_rules = Endpoint("POST", RULES + "/_export", "Export detection rules.")
    import_rules = Endpoint("POST", RULES + "/_import", "Import detection rules (multipart).")
    preview_alerts = Endpoint("POST", RULES + "/preview", "Preview rule alerts.")
    install_prebuilt = Endpoint("PUT", RULES + "/prepackaged", "Install prebuilt rules and timelines.")
    get_status_prebuilt = Endpoint("GET", RULES + "/prepackaged/_status", "Get prebuilt rule status.")
    create_index = Endpoint("POST", DETECTION_ENGINE + "/index", "Create the alerts index.")
    get_index = Endpoint("GET", DETECTION_ENGINE + "/index", "Get the alerts index.")
    delete_index = Endpoint("DELETE", DETECTION_ENGINE + "/index", "Delete the alerts index.")
    get_privileges = Endpoint("GET", DETECTION_ENGINE + "/privileges", "Get detection engine privileges.")
    list_tags = Endpoint("GET", DETECTION_ENGINE + "/tags", "List detection rule tags.")
    search_alerts = Endpoint("POST", SIGNALS + "/search", "Search detection alerts.")
    set_alert_status = Endpoint("POST", SIGNALS + "/status", "Set detection alert status.")
    update_tags = Endpoint("POST", SIGNALS + "/tags", "Add or remove detection alert tags.")
    assign_users = Endpoint("POST", SIGNALS + "/assignees", "Assign users to detection alerts.")
