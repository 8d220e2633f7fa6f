"""Unit tests for SchemaPatcher.

Covers patch set loading, matrix expansion and each supported operation,
plus checks of the shipped config/schema_patches.yaml against a Kibana-shaped
document.
"""

import copy
from pathlib import Path

import pytest
import yaml

from scripts.utils.schema_patcher import PatchError, PatchStats, SchemaPatcher


def write_patches(tmp_path: Path, patch_sets: dict) -> Path:
    """Write a patch config and return its path."""
    path = tmp_path / "patches.yaml"
    path.write_text(yaml.safe_dump({"patch_sets": patch_sets}))
    return path


@pytest.fixture
def spec() -> dict:
    """Document with an output operation and a few component schemas."""
    return {
        "paths": {
            "/api/fleet/outputs/{outputId}": {
                "get": {
                    "responses": {
                        "200": {
                            "content": {
                                "application/json": {
                                    "schema": {"properties": {"item": {"type": "object", "title": "output"}}},
                                },
                            },
                        },
                    },
                },
            },
        },
        "components": {
            "schemas": {
                "email": {"required": ["to", "cc", "bcc"], "properties": {}},
                "a_item": {"properties": {"id": {"format": "int64"}}},
                "b_item": {"properties": {"id": {"format": "int64"}}},
            },
        },
    }


class TestPatchStats:
    """Test PatchStats dataclass."""

    def test_default_values(self) -> None:
        """Verify default stat values are zero."""
        stats = PatchStats()
        assert stats.patches_applied == 0
        assert stats.patches_skipped == 0

    def test_to_dict_contains_all_fields(self) -> None:
        """Verify to_dict includes all stat fields."""
        result = PatchStats().to_dict()
        assert set(result) == {"patches_applied", "patches_skipped", "by_operation", "by_set"}


class TestConfigLoading:
    """Test patch set loading."""

    def test_missing_file_loads_nothing(self, tmp_path: Path) -> None:
        """Verify a missing config yields no patch sets."""
        patcher = SchemaPatcher(tmp_path / "missing.yaml")
        assert patcher.patch_sets == []

    def test_unsupported_op_rejected(self, tmp_path: Path) -> None:
        """Verify unknown operations fail at load time."""
        path = write_patches(tmp_path, {"bad": [{"op": "rename", "key": "x"}]})
        with pytest.raises(PatchError, match="unsupported op"):
            SchemaPatcher(path)

    def test_unknown_set_rejected(self, tmp_path: Path, spec: dict) -> None:
        """Verify applying an unknown set fails."""
        patcher = SchemaPatcher(write_patches(tmp_path, {}))
        with pytest.raises(PatchError, match="unknown patch set"):
            patcher.apply(spec, "nope")

    def test_has_patch_set(self, tmp_path: Path) -> None:
        """Verify loaded set names are reported."""
        patcher = SchemaPatcher(write_patches(tmp_path, {"fleet": [{"op": "delete", "key": "x"}]}))
        assert patcher.has_patch_set("fleet")
        assert not patcher.has_patch_set("outputs")


class TestExpand:
    """Test matrix expansion."""

    def test_without_matrix(self) -> None:
        """Verify patches without a matrix pass through."""
        patch = {"op": "delete", "key": "a"}
        assert SchemaPatcher.expand(patch) == [patch]

    def test_cartesian_product(self) -> None:
        """Verify one patch per combination with placeholders filled."""
        patch = {"op": "delete", "matrix": {"a": [1, 2], "b": ["x", "y"]}, "key": "{a}.{b}"}
        keys = [p["key"] for p in SchemaPatcher.expand(patch)]
        assert keys == ["1.x", "1.y", "2.x", "2.y"]

    def test_path_templates_kept(self) -> None:
        """Verify unknown placeholders such as path parameters survive."""
        patch = {"op": "delete", "matrix": {"verb": ["get"]}, "path": "/a/{id}", "method": "{verb}", "key": "k"}
        expanded = SchemaPatcher.expand(patch)[0]
        assert expanded["path"] == "/a/{id}"
        assert expanded["method"] == "get"
        assert "matrix" not in expanded

    @pytest.mark.parametrize(
        "value",
        ["^[0-9]{2}$", "{", "}", "{a.b}", "{{", "{0}", "{verbs}"],
    )
    def test_other_braces_kept(self, value: str) -> None:
        """Verify braces that do not name a matrix variable pass through verbatim."""
        patch = {"op": "set", "matrix": {"verb": ["get"]}, "key": "{verb}.pattern", "value": value}
        expanded = SchemaPatcher.expand(patch)[0]
        assert expanded["key"] == "get.pattern"
        assert expanded["value"] == value

    def test_nested_values_substituted(self) -> None:
        """Verify placeholders inside nested values and mapping keys are filled."""
        patch = {
            "op": "set",
            "matrix": {"kind": ["output"]},
            "key": "schemas.{kind}_union.discriminator",
            "value": {"mapping": {"{kind}": "#/components/schemas/{kind}_kafka"}, "pattern": "^{kind}-[a-z]{3}$"},
        }
        expanded = SchemaPatcher.expand(patch)[0]
        assert expanded["value"] == {
            "mapping": {"output": "#/components/schemas/output_kafka"},
            "pattern": "^output-[a-z]{3}$",
        }


class TestOperations:
    """Test each patch operation."""

    def test_create_ref_on_operation(self, tmp_path: Path, spec: dict) -> None:
        """Verify create_ref hoists a subtree below an operation."""
        path = write_patches(
            tmp_path,
            {
                "outputs": [
                    {
                        "op": "create_ref",
                        "path": "/api/fleet/outputs/{outputId}",
                        "method": "get",
                        "key": "responses.200.content.application/json.schema.properties.item",
                        "name": "output",
                    },
                ],
            },
        )
        patcher = SchemaPatcher(path)
        spec, count = patcher.apply(spec, "outputs")

        item = spec["paths"]["/api/fleet/outputs/{outputId}"]["get"]["responses"]["200"]["content"][
            "application/json"
        ]["schema"]["properties"]["item"]
        assert count == 1
        assert item == {"$ref": "#/components/schemas/output"}
        assert spec["components"]["schemas"]["output"]["title"] == "output"

    def test_set_copies_value(self, tmp_path: Path, spec: dict) -> None:
        """Verify each set writes an independent copy of its value."""
        path = write_patches(
            tmp_path,
            {"vars": [{"op": "set", "matrix": {"s": ["a_item", "b_item"]}, "key": "schemas.{s}.properties.vars", "value": {"type": "object"}}]},
        )
        spec, count = SchemaPatcher(path).apply(spec, "vars")

        schemas = spec["components"]["schemas"]
        assert count == 2
        assert schemas["a_item"]["properties"]["vars"] == {"type": "object"}
        assert schemas["a_item"]["properties"]["vars"] is not schemas["b_item"]["properties"]["vars"]

    def test_delete_missing_fails(self, tmp_path: Path, spec: dict) -> None:
        """Verify deleting a missing key fails the patch."""
        path = write_patches(tmp_path, {"d": [{"op": "delete", "key": "schemas.nope"}]})
        with pytest.raises(PatchError, match="delete schemas.nope on components"):
            SchemaPatcher(path).apply(spec, "d")

    def test_optional_patch_skipped(self, tmp_path: Path, spec: dict) -> None:
        """Verify optional patches with missing targets are skipped."""
        path = write_patches(tmp_path, {"d": [{"op": "delete", "key": "schemas.nope", "optional": True}]})
        patcher = SchemaPatcher(path)

        spec, count = patcher.apply(spec, "d")

        assert count == 0
        assert patcher.stats.patches_skipped == 1

    def test_missing_operation_fails(self, tmp_path: Path, spec: dict) -> None:
        """Verify a patch on a missing operation fails."""
        path = write_patches(
            tmp_path,
            {"d": [{"op": "delete", "path": "/api/fleet/outputs/{outputId}", "method": "put", "key": "x"}]},
        )
        with pytest.raises(PatchError, match="DELETE|PUT"):
            SchemaPatcher(path).apply(spec, "d")

    def test_pop_then_set(self, tmp_path: Path, spec: dict) -> None:
        """Verify pop removes the last element and requires gates the set."""
        path = write_patches(
            tmp_path,
            {
                "email": [
                    {"op": "pop", "key": "schemas.email.required"},
                    {
                        "op": "set",
                        "key": "schemas.email.anyOf",
                        "value": [{"required": ["to"]}],
                        "requires": "schemas.email",
                        "optional": True,
                    },
                    {
                        "op": "set",
                        "key": "schemas.missing.anyOf",
                        "value": [],
                        "requires": "schemas.missing",
                        "optional": True,
                    },
                ],
            },
        )
        spec, count = SchemaPatcher(path).apply(spec, "email")

        schemas = spec["components"]["schemas"]
        assert count == 2
        assert schemas["email"]["required"] == ["to", "cc"]
        assert schemas["email"]["anyOf"] == [{"required": ["to"]}]
        assert "missing" not in schemas

    def test_move(self, tmp_path: Path) -> None:
        """Verify move replaces a schema with one of its union members."""
        spec = {"components": {"schemas": {"p": {"properties": {"inputs": {"anyOf": [{"type": "array"}, {"type": "object"}]}}}}}}
        path = write_patches(
            tmp_path,
            {"m": [{"op": "move", "from": "schemas.p.properties.inputs.anyOf.1", "to": "schemas.p.properties.inputs"}]},
        )
        spec, _ = SchemaPatcher(path).apply(spec, "m")
        assert spec["components"]["schemas"]["p"]["properties"]["inputs"] == {"type": "object"}

    def test_stats_by_operation(self, tmp_path: Path, spec: dict) -> None:
        """Verify stats are tracked per operation and per set."""
        path = write_patches(
            tmp_path,
            {"f": [{"op": "delete", "matrix": {"s": ["a_item", "b_item"]}, "key": "schemas.{s}.properties.id.format"}]},
        )
        patcher = SchemaPatcher(path)
        patcher.apply(spec, "f")

        stats = patcher.get_stats()
        assert stats["by_operation"] == {"delete": 2}
        assert stats["by_set"] == {"f": 2}


class TestShippedPatches:
    """Test the patch sets shipped in config/schema_patches.yaml."""

    @pytest.fixture
    def config_path(self) -> Path:
        """Get path to schema_patches.yaml config file."""
        return Path(__file__).parent.parent / "config" / "schema_patches.yaml"

    def test_config_loads(self, config_path: Path) -> None:
        """Verify every shipped patch uses a supported operation."""
        patcher = SchemaPatcher(config_path)
        assert set(patcher.patch_sets) >= {"fleet", "run_message_email", "entity_analytics", "get_all_spaces"}

    def test_optional_sets_tolerate_empty_document(self, config_path: Path) -> None:
        """Verify the optional sets skip cleanly when their targets are absent."""
        patcher = SchemaPatcher(config_path)
        spec: dict = {"paths": {}, "components": {"schemas": {}}}
        for name in ("run_message_email", "entity_analytics", "get_all_spaces"):
            _, count = patcher.apply(spec, name)
            assert count == 0

    def test_fleet_requires_its_targets(self, config_path: Path) -> None:
        """Verify the fleet set fails loudly on a document without Fleet paths."""
        patcher = SchemaPatcher(config_path)
        with pytest.raises(PatchError):
            patcher.apply({"paths": {}}, "fleet")


OUTPUT_TYPES = ["elasticsearch", "remote_elasticsearch", "logstash", "kafka"]


def ref(name: str) -> dict:
    return {"$ref": f"#/components/schemas/{name}"}


def json_content(schema: dict) -> dict:
    return {"content": {"application/json": {"schema": copy.deepcopy(schema)}}}


def list_operation(schema: dict) -> dict:
    """Operation answering ``{"items": [schema]}``."""
    body = {"type": "object", "properties": {"items": {"type": "array", "items": schema}}}
    return {"responses": {"200": json_content(body)}}


def item_operation(schema: dict, request: dict | None = None) -> dict:
    """Operation answering ``{"item": schema}``, optionally with a request body."""
    operation = {"responses": {"200": json_content({"type": "object", "properties": {"item": schema}})}}
    if request is not None:
        operation["requestBody"] = json_content(request)
    return operation


def output_member(output_type: str) -> dict:
    return {
        "type": "object",
        "properties": {
            "id": {"type": "string"},
            "type": {"type": "string", "enum": [output_type]},
            "shipper": {"type": "object", "properties": {"disk_queue_enabled": {"type": "boolean"}}},
            "ssl": {"type": "object", "properties": {"certificate": {"type": "string"}}},
            "password": {"anyOf": [{"type": "string"}, {"type": "object"}]},
        },
    }


def output_union() -> dict:
    return {"anyOf": [output_member(t) for t in OUTPUT_TYPES]}


def package_policy() -> dict:
    stream = {"type": "object", "properties": {"enabled": {"type": "boolean"}}}
    streams = {"type": "object", "additionalProperties": stream}
    input_ = {"type": "object", "properties": {"enabled": {"type": "boolean"}, "streams": streams}}
    return {
        "type": "object",
        "properties": {
            "id": {"type": "string"},
            "secret_references": {"type": "array", "items": {"type": "object", "properties": {"id": {"type": "string"}}}},
            "inputs": {
                "anyOf": [
                    {"type": "array", "items": {"type": "object"}},
                    {"type": "object", "additionalProperties": input_},
                ],
            },
        },
    }


def package_policy_request() -> dict:
    return {
        "anyOf": [
            {"type": "array", "items": {"type": "object"}},
            {
                "type": "object",
                "properties": {
                    "name": {"type": "string"},
                    "package": {"type": "object", "properties": {"name": {"type": "string"}, "version": {"type": "string"}}},
                    "inputs": {
                        "type": "object",
                        "additionalProperties": {
                            "type": "object",
                            "properties": {"streams": {"type": "object", "additionalProperties": {"type": "object"}}},
                        },
                    },
                },
            },
        ],
    }


@pytest.fixture
def fleet_spec() -> dict:
    """Document with the Fleet operations the shipped fleet set edits."""
    policy = {"type": "object", "properties": {"id": {"type": "string"}, "name": {"type": "string"}}}
    policy_request = {"type": "object", "properties": {"name": {"type": "string"}}}
    host = {"type": "object", "properties": {"host_urls": {"type": "array", "items": {"type": "string"}}}}
    return {
        "openapi": "3.0.3",
        "paths": {
            "/api/fleet/agent_policies": {
                "get": list_operation(policy),
                "post": item_operation(policy, policy_request),
            },
            "/api/fleet/agent_policies/{agentPolicyId}": {
                "get": item_operation(policy),
                "put": item_operation(policy, policy_request),
            },
            "/api/fleet/enrollment_api_keys": {
                "get": list_operation({"type": "object", "properties": {"api_key": {"type": "string"}}}),
            },
            "/api/fleet/epm/packages": {"get": list_operation({"type": "object", "properties": {"name": {"type": "string"}}})},
            "/api/fleet/epm/packages/{pkgName}/{pkgVersion}": {
                "get": item_operation({"type": "object", "properties": {"version": {"type": "string"}}}),
            },
            "/api/fleet/fleet_server_hosts": {"get": list_operation(host), "post": item_operation(host, host)},
            "/api/fleet/fleet_server_hosts/{itemId}": {"get": item_operation(host), "put": item_operation(host, host)},
            "/api/fleet/outputs": {
                "get": list_operation(output_union()),
                "post": item_operation(output_union(), output_union()),
            },
            "/api/fleet/outputs/{outputId}": {
                "get": item_operation(output_union()),
                "put": item_operation(output_union(), output_union()),
            },
            "/api/fleet/package_policies": {
                "get": list_operation(package_policy()),
                "post": item_operation(package_policy(), package_policy_request()),
            },
            "/api/fleet/package_policies/{packagePolicyId}": {
                "get": item_operation(package_policy()),
                "put": item_operation(package_policy(), package_policy_request()),
            },
        },
        "components": {"schemas": {}},
    }


class TestShippedFleetPatches:
    """Test the shipped fleet set against a Kibana-shaped document."""

    @pytest.fixture
    def config_path(self) -> Path:
        return Path(__file__).parent.parent / "config" / "schema_patches.yaml"

    @pytest.fixture
    def patched(self, config_path: Path, fleet_spec: dict) -> tuple[dict, int, SchemaPatcher]:
        patcher = SchemaPatcher(config_path)
        spec, count = patcher.apply(fleet_spec, "fleet")
        return spec, count, patcher

    @staticmethod
    def response_schema(spec: dict, path: str, method: str) -> dict:
        return spec["paths"][path][method]["responses"]["200"]["content"]["application/json"]["schema"]

    @staticmethod
    def request_schema(spec: dict, path: str, method: str) -> dict:
        return spec["paths"][path][method]["requestBody"]["content"]["application/json"]["schema"]

    def test_every_patch_applies(self, config_path: Path, patched: tuple) -> None:
        """Verify every expanded patch applies and none is skipped."""
        _, count, patcher = patched
        raw = yaml.safe_load(config_path.read_text(encoding="utf-8"))["patch_sets"]["fleet"]
        assert count == sum(len(SchemaPatcher.expand(p)) for p in raw)
        assert patcher.stats.patches_skipped == 0

    def test_agent_policy_refs_shared(self, patched: tuple) -> None:
        """Verify all agent policy responses point at one component."""
        spec, _, _ = patched
        path = "/api/fleet/agent_policies"
        assert self.response_schema(spec, path, "get")["properties"]["items"]["items"] == ref("agent_policy")
        assert self.response_schema(spec, path, "post")["properties"]["item"] == ref("agent_policy")
        for method in ("get", "put"):
            schema = self.response_schema(spec, path + "/{agentPolicyId}", method)
            assert schema["properties"]["item"] == ref("agent_policy")
        assert spec["components"]["schemas"]["agent_policy"]["properties"]["name"] == {"type": "string"}

    def test_agent_policy_request_omitempty(self, patched: tuple) -> None:
        """Verify nullable request fields are marked omit-empty."""
        spec, _, _ = patched
        properties = self.request_schema(spec, "/api/fleet/agent_policies", "post")["properties"]
        assert properties["keep_monitoring_alive"]["x-omitempty"] is True
        assert properties["required_versions"]["x-omitempty"] is True

    def test_output_unions(self, patched: tuple) -> None:
        """Verify output unions are split into per-type components."""
        spec, _, _ = patched
        schemas = spec["components"]["schemas"]

        assert self.request_schema(spec, "/api/fleet/outputs", "post") == ref("new_output_union")
        assert self.request_schema(spec, "/api/fleet/outputs/{outputId}", "put") == ref("update_output_union")
        item = self.response_schema(spec, "/api/fleet/outputs/{outputId}", "put")["properties"]["item"]
        assert item == ref("output_union")
        for kind in ("output", "new_output", "update_output"):
            assert schemas[f"{kind}_union"]["anyOf"] == [ref(f"{kind}_{t}") for t in OUTPUT_TYPES]

    def test_output_children_shared(self, patched: tuple) -> None:
        """Verify shipper and ssl are hoisted once per union kind."""
        spec, _, _ = patched
        schemas = spec["components"]["schemas"]
        for kind in ("output", "new_output", "update_output"):
            for output_type in OUTPUT_TYPES:
                properties = schemas[f"{kind}_{output_type}"]["properties"]
                assert properties["shipper"] == ref(f"{kind}_shipper")
                assert properties["ssl"] == ref(f"{kind}_ssl")
        assert schemas["new_output_ssl"]["x-omitempty"] is True
        assert "x-omitempty" not in schemas["output_ssl"]

    def test_output_discriminator(self, patched: tuple) -> None:
        """Verify the response union gets a type discriminator."""
        spec, _, _ = patched
        discriminator = spec["components"]["schemas"]["output_union"]["discriminator"]
        assert discriminator["propertyName"] == "type"
        assert discriminator["mapping"] == {t: f"#/components/schemas/output_{t}" for t in OUTPUT_TYPES}

    def test_output_update_and_kafka_fields(self, patched: tuple) -> None:
        """Verify update outputs lose their id and kafka credentials accept any value."""
        spec, _, _ = patched
        schemas = spec["components"]["schemas"]
        for output_type in OUTPUT_TYPES:
            assert "id" not in schemas[f"update_output_{output_type}"]["properties"]
            assert "id" in schemas[f"output_{output_type}"]["properties"]
        assert schemas["output_kafka"]["properties"]["password"] == {}
        assert schemas["output_logstash"]["properties"]["password"] == {"anyOf": [{"type": "string"}, {"type": "object"}]}
        assert schemas["new_output_kafka"]["properties"]["proxy_id"]["x-omitempty"] is True

    def test_package_policy_request(self, patched: tuple) -> None:
        """Verify the non-deprecated request member becomes a shared component."""
        spec, _, _ = patched
        schemas = spec["components"]["schemas"]

        assert self.request_schema(spec, "/api/fleet/package_policies", "post") == ref("package_policy_request")
        put = self.request_schema(spec, "/api/fleet/package_policies/{packagePolicyId}", "put")
        assert put == ref("package_policy_request")

        request = schemas["package_policy_request"]
        assert "anyOf" not in request
        assert request["properties"]["package"] == ref("package_policy_request_package")
        assert request["properties"]["inputs"]["additionalProperties"] == ref("package_policy_request_input")
        assert request["properties"]["output_id"]["x-omitempty"] is True
        assert schemas["package_policy_request_input"]["properties"]["streams"]["additionalProperties"] == ref(
            "package_policy_request_input_stream",
        )

    def test_package_policy_inputs(self, patched: tuple) -> None:
        """Verify package policy inputs use the map member of their union."""
        spec, _, _ = patched
        schemas = spec["components"]["schemas"]
        policy = schemas["package_policy"]

        assert policy["properties"]["secret_references"]["items"] == ref("package_policy_secret_ref")
        assert policy["properties"]["inputs"] == {"type": "object", "additionalProperties": ref("package_policy_input")}
        assert schemas["package_policy_input"]["properties"]["streams"]["additionalProperties"] == ref(
            "package_policy_input_stream",
        )
        for name in ("package_policy", "package_policy_input_stream", "package_policy_request_input"):
            assert schemas[name]["properties"]["vars"] == {"type": "object"}
