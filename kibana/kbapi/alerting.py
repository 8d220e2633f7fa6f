"""Alerting rules API."""

from .base import APIGroup, Endpoint

RULE = "/api/alerting/rule/{id}"


class Alerting(APIGroup):
    create = Endpoint("POST", "/api/alerting/rule/{id?}", "Create a rule; Kibana generates the id when omitted.")
    get = Endpoint("GET", RULE, "Get rule details.")
    update = Endpoint("PUT", RULE, "Update a rule.")
    delete = Endpoint("DELETE", RULE, "Delete a rule.")
    disable = Endpoint("POST", RULE + "/_disable", "Disable a rule.")
    enable = Endpoint("POST", RULE + "/_enable", "Enable a rule.")
    mute_all = Endpoint("POST", RULE + "/_mute_all", "Mute all alerts of a rule.")
    unmute_all = Endpoint("POST", RULE + "/_unmute_all", "Unmute all alerts of a rule.")
    update_api_key = Endpoint("POST", RULE + "/_update_api_key", "Update the API key of a rule.")
    mute = Endpoint("POST", "/api/alerting/rule/{rule_id}/alert/{alert_id}/_mute", "Mute an alert.")
    unmute = Endpoint("POST", "/api/alerting/rule/{rule_id}/alert/{alert_id}/_unmute", "Unmute an alert.")
    get_types = Endpoint("GET", "/api/alerting/rule_types", "List rule types.")
    health = Endpoint("GET", "/api/alerting/_health", "Get the alerting framework health.")
    list = Endpoint("GET", "/api/alerting/rules/_find", "Find rules.")
