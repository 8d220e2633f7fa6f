"""Fleet API: agents, policies, packages, outputs and server settings."""

from .base import APIGroup, Endpoint

FLEET = "/api/fleet"
AGENTS = FLEET + "/agents"
AGENT = AGENTS + "/{agent_id}"
AGENT_POLICIES = FLEET + "/agent_policies"
AGENT_POLICY = AGENT_POLICIES + "/{agent_policy_id}"
DOWNLOAD_SOURCES = FLEET + "/agent_download_sources"
ENROLLMENT_API_KEYS = FLEET + "/enrollment_api_keys"
PACKAGES = FLEET + "/epm/packages"
PACKAGE = PACKAGES + "/{pkg_name}/{pkg_version}"
OUTPUTS = FLEET + "/outputs"
PACKAGE_POLICIES = FLEET + "/package_policies"
PROXIES = FLEET + "/proxies"
SERVER_HOSTS = FLEET + "/fleet_server_hosts"


class FleetAgents(APIGroup):
    list = Endpoint("GET", AGENTS, "List agents.")
    list_by_action_id = Endpoint("POST", AGENTS, "List agents by action ids.")
    get = Endpoint("GET", AGENT, "Get an agent.")
    update = Endpoint("PUT", AGENT, "Update an agent by id.")
    delete = Endpoint("DELETE", AGENT, "Delete an agent.")
    list_uploads = Endpoint("GET", AGENT + "/uploads", "List agent uploads.")
    get_file = Endpoint("GET", AGENTS + "/files/{file_id}/{file_name}", "Get an uploaded file.")
    delete_file = Endpoint("DELETE", AGENTS + "/files/{file_id}", "Delete an uploaded file.")
    get_setup = Endpoint("GET", AGENTS + "/setup", "Get agent setup info.")
    initiate_setup = Endpoint("POST", AGENTS + "/setup", "Initiate agent setup.")
    list_tags = Endpoint("GET", AGENTS + "/tags", "List agent tags.")
    status = Endpoint("GET", FLEET + "/agent_status", "Get an agent status summary.")
    status_data = Endpoint("GET", FLEET + "/agent_status/data", "Get incoming agent data.")


class FleetAgentActions(APIGroup):
    create = Endpoint("POST", AGENT + "/actions", "Create an agent action.")
    cancel = Endpoint("POST", AGENTS + "/actions/{action_id}/cancel", "Cancel an agent action.")
    list_status = Endpoint("GET", AGENTS + "/action_status", "Get an agent action status.")
    reassign = Endpoint("POST", AGENT + "/reassign", "Reassign an agent.")
    unenroll = Endpoint("POST", AGENT + "/unenroll", "Unenroll an agent.")
    upgrade = Endpoint("POST", AGENT + "/upgrade", "Upgrade an agent.")
    request_diagnostics = Endpoint("POST", AGENT + "/request_diagnostics", "Request agent diagnostics.")
    bulk_request_diagnostics = Endpoint(
        "POST", AGENTS + "/bulk_request_diagnostics", "Bulk request diagnostics from agents."
    )
    bulk_reassign = Endpoint("POST", AGENTS + "/bulk_reassign", "Bulk reassign agents.")
    bulk_unenroll = Endpoint("POST", AGENTS + "/bulk_unenroll", "Bulk unenroll agents.")
    bulk_update_tags = Endpoint("POST", AGENTS + "/bulk_update_agent_tags", "Bulk update agent tags.")
    bulk_upgrade = Endpoint("POST", AGENTS + "/bulk_upgrade", "Bulk upgrade agents.")


class FleetAgentPolicies(APIGroup):
    list = Endpoint("GET", AGENT_POLICIES, "List agent policies.")
    create = Endpoint("POST", AGENT_POLICIES, "Create an agent policy.")
    get = Endpoint("GET", AGENT_POLICY, "Get an agent policy.")
    update = Endpoint("PUT", AGENT_POLICY, "Update an agent policy.")
    delete = Endpoint("POST", AGENT_POLICIES + "/delete", "Delete an agent policy; pass agentPolicyId in the body.")
    copy = Endpoint("POST", AGENT_POLICY + "/copy", "Copy an agent policy.")
    download = Endpoint("GET", AGENT_POLICY + "/download", "Download an agent policy.")
    full = Endpoint("GET", AGENT_POLICY + "/full", "Get a full agent policy.")
    bulk_get = Endpoint("POST", AGENT_POLICIES + "/_bulk_get", "Bulk get agent policies.")


class FleetBinaryDownloadSources(APIGroup):
    list = Endpoint("GET", DOWNLOAD_SOURCES, "List agent binary download sources.")
    create = Endpoint("POST", DOWNLOAD_SOURCES, "Create an agent binary download source.")
    get = Endpoint("GET", DOWNLOAD_SOURCES + "/{source_id}", "Get an agent binary download source.")
    update = Endpoint("PUT", DOWNLOAD_SOURCES + "/{source_id}", "Update an agent binary download source.")
    delete = Endpoint("DELETE", DOWNLOAD_SOURCES + "/{source_id}", "Delete an agent binary download source.")


class FleetDataStreams(APIGroup):
    list_all = Endpoint("GET", FLEET + "/data_streams", "List data streams.")


class FleetEPM(APIGroup):
    list_packages = Endpoint("GET", PACKAGES, "List packages.")
    install_package_upload = Endpoint(
        "POST", PACKAGES, "Install a package by upload; send the archive as content."
    )
    get_package = Endpoint("GET", PACKAGE, "Get a package.")
    get_latest_package = Endpoint("GET", PACKAGES + "/{pkg_name}", "Get the latest version of a package.")
    install_package_registry = Endpoint("POST", PACKAGE, "Install a package from the registry.")
    install_latest_package_registry = Endpoint(
        "POST", PACKAGES + "/{pkg_name}", "Install the latest version of a package from the registry."
    )
    update_package_settings = Endpoint("PUT", PACKAGE, "Update package settings.")
    delete_package = Endpoint("DELETE", PACKAGE, "Delete a package.")
    get_package_file = Endpoint("GET", PACKAGE + "/{file_path:path}", "Get a package file.")
    get_package_stats = Endpoint("GET", PACKAGES + "/{pkg_name}/stats", "Get package stats.")
    authorize_transforms = Endpoint("POST", PACKAGE + "/transforms/authorize", "Authorize transforms.")
    bulk_install_packages = Endpoint("POST", PACKAGES + "/_bulk", "Bulk install packages.")
    bulk_get_assets = Endpoint("POST", FLEET + "/epm/bulk_assets", "Bulk get assets.")
    create_custom_integration = Endpoint(
        "POST", FLEET + "/epm/custom_integrations", "Create a custom integration."
    )
    get_inputs_template = Endpoint(
        "GET", FLEET + "/epm/templates/{pkg_name}/{pkg_version}/inputs", "Get an inputs template."
    )
    get_packages_installed = Endpoint("GET", PACKAGES + "/installed", "Get installed packages.")
    get_packages_limited = Endpoint("GET", PACKAGES + "/limited", "Get a limited package list.")
    get_package_verification_id = Endpoint(
        "GET", FLEET + "/epm/verification_key_id", "Get the package signature verification key id."
    )
    list_categories = Endpoint("GET", FLEET + "/epm/categories", "List package categories.")
    list_data_streams = Endpoint("GET", FLEET + "/epm/data_streams", "List package data streams.")


class FleetEnrollmentAPIKeys(APIGroup):
    list = Endpoint("GET", ENROLLMENT_API_KEYS, "List enrollment API keys.")
    create = Endpoint("POST", ENROLLMENT_API_KEYS, "Create an enrollment API key.")
    get = Endpoint("GET", ENROLLMENT_API_KEYS + "/{key_id}", "Get an enrollment API key.")
    revoke = Endpoint("DELETE", ENROLLMENT_API_KEYS + "/{key_id}", "Revoke an enrollment API key.")


class FleetInternal(APIGroup):
    check_fleet_server_health = Endpoint("POST", FLEET + "/health_check", "Check Fleet Server health.")
    check_permissions = Endpoint("GET", FLEET + "/check-permissions", "Check Fleet permissions.")
    get_settings = Endpoint("GET", FLEET + "/settings", "Get Fleet settings.")
    update_settings = Endpoint("PUT", FLEET + "/settings", "Update Fleet settings.")
    initiate_fleet_setup = Endpoint("POST", FLEET + "/setup", "Initiate Fleet setup.")


class FleetMessageSigningService(APIGroup):
    rotate_key_pair = Endpoint(
        "POST", FLEET + "/message_signing_service/rotate_key_pair", "Rotate the message signing key pair."
    )


class FleetOutputs(APIGroup):
    list = Endpoint("GET", OUTPUTS, "List outputs.")
    create = Endpoint("POST", OUTPUTS, "Create an output.")
    get = Endpoint("GET", OUTPUTS + "/{output_id}", "Get an output.")
    update = Endpoint("PUT", OUTPUTS + "/{output_id}", "Update an output.")
    delete = Endpoint("DELETE", OUTPUTS + "/{output_id}", "Delete an output.")
    health = Endpoint("GET", OUTPUTS + "/{output_id}/health", "Get the latest output health.")
    create_logstash_api_key = Endpoint("POST", FLEET + "/logstash_api_keys", "Generate a Logstash API key.")


class FleetPackagePolicies(APIGroup):
    list = Endpoint("GET", PACKAGE_POLICIES, "List package policies.")
    create = Endpoint("POST", PACKAGE_POLICIES, "Create a package policy.")
    get = Endpoint("GET", PACKAGE_POLICIES + "/{package_policy_id}", "Get a package policy.")
    update = Endpoint("PUT", PACKAGE_POLICIES + "/{package_policy_id}", "Update a package policy.")
    delete = Endpoint("DELETE", PACKAGE_POLICIES + "/{package_policy_id}", "Delete a package policy.")
    bulk_delete = Endpoint("POST", PACKAGE_POLICIES + "/delete", "Bulk delete package policies.")
    bulk_get = Endpoint("POST", PACKAGE_POLICIES + "/_bulk_get", "Bulk get package policies.")
    upgrade = Endpoint("POST", PACKAGE_POLICIES + "/upgrade", "Upgrade package policies.")
    upgrade_dry_run = Endpoint("POST", PACKAGE_POLICIES + "/upgrade/dryrun", "Dry run a package policy upgrade.")


class FleetProxies(APIGroup):
    list = Endpoint("GET", PROXIES, "List proxies.")
    create = Endpoint("POST", PROXIES, "Create a proxy.")
    get = Endpoint("GET", PROXIES + "/{item_id}", "Get a proxy.")
    update = Endpoint("PUT", PROXIES + "/{item_id}", "Update a proxy.")
    delete = Endpoint("DELETE", PROXIES + "/{item_id}", "Delete a proxy.")


class FleetServerHosts(APIGroup):
    list = Endpoint("GET", SERVER_HOSTS, "List Fleet Server hosts.")
    create = Endpoint("POST", SERVER_HOSTS, "Create a Fleet Server host.")
    get = Endpoint("GET", SERVER_HOSTS + "/{item_id}", "Get a Fleet Server host.")
    update = Endpoint("PUT", SERVER_HOSTS + "/{item_id}", "Update a Fleet Server host.")
    delete = Endpoint("DELETE", SERVER_HOSTS + "/{item_id}", "Delete a Fleet Server host.")


class FleetServiceTokens(APIGroup):
    create = Endpoint("POST", FLEET + "/service_tokens", "Create a service token.")


class FleetUninstallTokens(APIGroup):
    list = Endpoint("GET", FLEET + "/uninstall_tokens", "List metadata for uninstall tokens.")
    get_decrypted = Endpoint("GET", FLEET + "/uninstall_tokens/{uninstall_token_id}", "Get a decrypted uninstall token.")


class Fleet(APIGroup):
    def __init__(self, transport):
        super().__init__(transport)
        self.agents = FleetAgents(transport)
        self.agent_actions = FleetAgentActions(transport)
        self.agent_policies = FleetAgentPolicies(transport)
        self.binary_download_sources = FleetBinaryDownloadSources(transport)
        self.data_streams = FleetDataStreams(transport)
        self.epm = FleetEPM(transport)
        self.enrollment_api_keys = FleetEnrollmentAPIKeys(transport)
        self.internal = FleetInternal(transport)
        self.message_signing_service = FleetMessageSigningService(transport)
        self.outputs = FleetOutputs(transport)
        self.package_policies = FleetPackagePolicies(transport)
        self.proxies = FleetProxies(transport)
        self.server_hosts = FleetServerHosts(transport)
        self.service_tokens = FleetServiceTokens(transport)
        self.uninstall_tokens = FleetUninstallTokens(transport)
