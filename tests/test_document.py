"""Unit tests for the dotted-path document helpers."""

from pathlib import Path

import pytest

from scripts.utils.document import (
    DocumentError,
    PathNotFoundError,
    create_ref,
    delete,
    get,
    has,
    iter_operations,
    iterate,
    load_schema,
    move,
    must_delete,
    must_get,
    save_schema,
    set_value,
)


@pytest.fixture
def operation() -> dict:
    """Operation with a nested response schema."""
    return {
        "parameters": [
            {"name": "id", "in": "path"},
            {"name": "page", "in": "query"},
        ],
        "responses": {
            "200": {
                "content": {
                    "application/json": {
                        "schema": {
                            "type": "object",
                            "properties": {"item": {"type": "object", "properties": {"id": {"type": "string"}}}},
                        },
                    },
                },
            },
        },
    }


class TestGet:
    """Test dotted-key lookups."""

    def test_nested_mapping(self, operation: dict) -> None:
        """Verify mapping segments resolve, including keys with slashes."""
        schema = must_get(operation, "responses.200.content.application/json.schema")
        assert schema["type"] == "object"

    def test_list_index(self, operation: dict) -> None:
        """Verify numeric segments index into lists."""
        assert must_get(operation, "parameters.1.name") == "page"

    def test_missing_key_raises(self, operation: dict) -> None:
        """Verify must_get raises PathNotFoundError for absent keys."""
        with pytest.raises(PathNotFoundError):
            must_get(operation, "responses.404")

    def test_index_out_of_bounds_raises(self, operation: dict) -> None:
        """Verify out of range list indexes are reported."""
        with pytest.raises(PathNotFoundError, match="out of bounds"):
            must_get(operation, "parameters.5.name")

    def test_get_returns_default(self, operation: dict) -> None:
        """Verify get falls back to the default."""
        assert get(operation, "responses.500.description", "none") == "none"

    def test_literal_key_with_dots(self) -> None:
        """Verify keys containing dots are addressable as a whole."""
        node = {"x.y": 1}
        assert must_get(node, "x.y") == 1

    def test_has(self, operation: dict) -> None:
        """Verify has reports presence, including falsy values."""
        operation["flag"] = None
        assert has(operation, "flag")
        assert not has(operation, "missing")

    def test_path_not_found_is_lookup_error(self) -> None:
        """Verify PathNotFoundError can be caught as LookupError."""
        with pytest.raises(LookupError):
            must_get({}, "a.b")


class TestSetValue:
    """Test dotted-key assignment."""

    def test_creates_intermediate_mappings(self) -> None:
        """Verify missing parents are created."""
        node: dict = {}
        set_value(node, "a.b.c", 1)
        assert node == {"a": {"b": {"c": 1}}}

    def test_sets_list_element(self, operation: dict) -> None:
        """Verify list elements can be replaced."""
        set_value(operation, "parameters.0.required", True)
        assert operation["parameters"][0]["required"] is True

    def test_scalar_parent_raises(self) -> None:
        """Verify assignment below a scalar fails."""
        with pytest.raises(DocumentError):
            set_value({"a": 1}, "a.b", 2)


class TestDelete:
    """Test dotted-key deletion."""

    def test_delete_existing(self, operation: dict) -> None:
        """Verify delete removes the key and reports it."""
        assert delete(operation, "parameters.0.in") is True
        assert "in" not in operation["parameters"][0]

    def test_delete_missing_returns_false(self, operation: dict) -> None:
        """Verify delete of an absent key is a no-op."""
        assert delete(operation, "responses.404") is False

    def test_must_delete_missing_raises(self, operation: dict) -> None:
        """Verify must_delete raises for absent keys."""
        with pytest.raises(PathNotFoundError):
            must_delete(operation, "responses.404")

    def test_list_element_rejected(self, operation: dict) -> None:
        """Verify list elements cannot be deleted directly."""
        with pytest.raises(DocumentError):
            delete(operation, "parameters.0")


class TestMove:
    """Test moving subtrees."""

    def test_move(self) -> None:
        """Verify the value appears at the destination and leaves the source."""
        node = {"a": {"b": 1}}
        move(node, "a.b", "c.d")
        assert node == {"a": {}, "c": {"d": 1}}

    def test_move_missing_raises(self) -> None:
        """Verify moving an absent key fails."""
        with pytest.raises(PathNotFoundError):
            move({}, "a", "b")


class TestCreateRef:
    """Test hoisting subtrees into component schemas."""

    KEY = "responses.200.content.application/json.schema.properties.item"

    def test_hoists_subtree(self, operation: dict) -> None:
        """Verify the subtree becomes a component and is replaced by a $ref."""
        spec: dict = {}
        item = must_get(operation, self.KEY)

        ref = create_ref(spec, operation, "thing", self.KEY)

        assert ref == {"$ref": "#/components/schemas/thing"}
        assert spec["components"]["schemas"]["thing"] == item
        assert must_get(operation, self.KEY) == ref

    def test_reuses_identical_component(self, operation: dict) -> None:
        """Verify an identical existing component is reused."""
        item = must_get(operation, self.KEY)
        spec = {"components": {"schemas": {"thing": dict(item)}}}

        create_ref(spec, operation, "thing", self.KEY)

        assert must_get(operation, self.KEY) == {"$ref": "#/components/schemas/thing"}

    def test_conflicting_component_raises(self, operation: dict) -> None:
        """Verify a different component with the same name is rejected."""
        spec = {"components": {"schemas": {"thing": {"type": "string"}}}}
        with pytest.raises(DocumentError, match="already in use"):
            create_ref(spec, operation, "thing", self.KEY)

    def test_already_a_ref_is_noop(self, operation: dict) -> None:
        """Verify running twice leaves the document unchanged."""
        spec: dict = {}
        create_ref(spec, operation, "thing", self.KEY)
        create_ref(spec, operation, "thing", self.KEY)
        assert list(spec["components"]["schemas"]) == ["thing"]


class TestIterate:
    """Test post-order traversal."""

    def test_post_order_sorted_keys(self) -> None:
        """Verify children are visited before parents, keys sorted."""
        visited = []
        iterate({"b": {"x": {}}, "a": {}}, lambda key, _node: visited.append(key))
        assert visited == ["a", "b.x", "b", ""]

    def test_lists_use_indexes(self) -> None:
        """Verify list elements are keyed by index."""
        visited = []
        iterate({"items": [{"a": 1}, 2]}, lambda key, _node: visited.append(key))
        assert visited == ["items.0", ""]

    def test_prefix(self) -> None:
        """Verify a starting key prefixes every visited key."""
        visited = []
        iterate({"a": {}}, lambda key, _node: visited.append(key), "root")
        assert visited == ["root.a", "root"]


class TestIterOperations:
    """Test operation enumeration."""

    def test_skips_non_method_keys(self) -> None:
        """Verify only HTTP methods are yielded."""
        spec = {"paths": {"/a": {"get": {"x": 1}, "parameters": [], "summary": "s"}}}
        assert list(iter_operations(spec)) == [("/a", "get", {"x": 1})]


class TestSchemaIO:
    """Test YAML load and save."""

    def test_status_codes_load_as_strings(self, tmp_path: Path) -> None:
        """Verify unquoted response codes become string keys."""
        path = tmp_path / "spec.yaml"
        path.write_text("paths:\n  /a:\n    get:\n      responses:\n        200:\n          description: ok\n")
        spec = load_schema(path)
        assert "200" in spec["paths"]["/a"]["get"]["responses"]

    def test_non_mapping_raises(self, tmp_path: Path) -> None:
        """Verify documents that are not mappings are rejected."""
        path = tmp_path / "spec.yaml"
        path.write_text("- a\n- b\n")
        with pytest.raises(DocumentError):
            load_schema(path)

    def test_save_creates_parents_without_aliases(self, tmp_path: Path) -> None:
        """Verify shared subtrees are written out in full."""
        shared = {"type": "string"}
        spec = {"a": shared, "b": shared}
        path = tmp_path / "out" / "spec.yml"

        save_schema(spec, path)

        text = path.read_text()
        assert "&" not in text
        assert "*" not in text
        assert load_schema(path) == spec

    def test_utf8_round_trip(self, tmp_path: Path) -> None:
        """Verify non-ASCII descriptions are read and written as UTF-8."""
        path = tmp_path / "spec.yaml"
        path.write_bytes("info:\n  description: Índice «citado» 日本\n".encode())

        spec = load_schema(path)
        assert spec["info"]["description"] == "Índice «citado» 日本"

        out = tmp_path / "out.yaml"
        save_schema(spec, out)
        assert "Índice «citado» 日本" in out.read_bytes().decode("utf-8")
