"""APM settings, agent keys, annotations and source maps."""

from .base import APIGroup, Endpoint

AGENT_CONFIGURATION = "/api/apm/settings/agent-configuration"


class APMAgentConfiguration(APIGroup):
    create_update = Endpoint("PUT", AGENT_CONFIGURATION, "Create or update an agent configuration.")
    get = Endpoint("GET", AGENT_CONFIGURATION + "/view", "Get a single agent configuration.")
    get_environments = Endpoint("GET", AGENT_CONFIGURATION + "/environments", "Get environments for a service.")
    get_name = Endpoint("GET", AGENT_CONFIGURATION + "/agent_name", "Get the agent name for a service.")
    delete = Endpoint("DELETE", AGENT_CONFIGURATION, "Delete an agent configuration.")
    list = Endpoint("GET", AGENT_CONFIGURATION, "List agent configurations.")
    lookup = Endpoint("POST", AGENT_CONFIGURATION + "/search", "Look up a single agent configuration.")


class APMAgentKey(APIGroup):
    create = Endpoint("POST", "/api/apm/agent_keys", "Create an APM agent key.")


class APMAnnotation(APIGroup):
    create = Endpoint("POST", "/api/apm/services/{service_name}/annotation", "Create a service annotation.")
    search = Endpoint("GET", "/api/apm/services/{service_name}/annotation/search", "Search service annotations.")


class APMServerSchema(APIGroup):
    save = Endpoint("POST", "/api/apm/fleet/apm_server_schema", "Save the APM server schema.")


class APMSourceMaps(APIGroup):
    get = Endpoint("GET", "/api/apm/sourcemaps", "List source maps.")
    upload = Endpoint("POST", "/api/apm/sourcemaps", "Upload a source map (multipart).")
    delete = Endpoint("DELETE", "/api/apm/sourcemaps/{id}", "Delete a source map.")


class APM(APIGroup):
    def __init__(self, transport):
        super().__init__(transport)
        self.agent_configuration = APMAgentConfiguration(transport)
        self.agent_key = APMAgentKey(transport)
        self.annotation = APMAnnotation(transport)
        self.server_schema = APMServerSchema(transport)
        self.source_maps = APMSourceMaps(transport)
