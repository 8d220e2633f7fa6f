"""Generic transforms that repair known defects in Kibana's OpenAPI document.

Every transform mutates the document in place and returns
``(spec, count)`` where ``count`` is the number of edits it made, so
the pipeline can report what changed. Transforms are idempotent: a
second run over the same document makes no further edits.
"""

from __future__ import annotations

import logging
import re
from collections import defaultdict
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from collections.abc import Callable, Iterable

from .document import iter_operations, iterate

logger = logging.getLogger(__name__)

TECHNICAL_PREVIEW_STATE = "Technical Preview"

DEFAULT_PROBLEMATIC_PATHS = [
    "/api/detection_engine/rules/preview",
    "/api/upgrade_assistant/reindex/batch",
    "/api/security/roles",
    "/api/security/role/{name}",
]

VALID_PARAMETER_LOCATIONS = {"path", "query", "header", "cookie"}

COMPONENT_TYPES = [
    "schemas",
    "responses",
    "parameters",
    "examples",
    "requestBodies",
    "headers",
    "securitySchemes",
    "links",
    "callbacks",
]


class SchemaTransformError(Exception):
    """Raised when a transform meets a document it cannot repair."""


def _walk_operations_and_components(
    spec: dict[str, Any],
    fn: Callable[[str, dict[str, Any]], None],
) -> None:
    """Run ``fn`` post-order over every operation and the components section."""
    for path, method, operation in iter_operations(spec):
        iterate(operation, fn, f"paths.{path}.{method}")
    if isinstance(spec.get("components"), dict):
        iterate(spec["components"], fn, "components")


def _is_properties_map(key: str) -> bool:
    """Check whether a dotted key names a ``properties`` container.

    Keys inside such maps are property names, not schema keywords.
    """
    return key.rsplit(".", 1)[-1] == "properties"


def _is_name_map(key: str) -> bool:
    """Check whether a dotted key names a map keyed by user-chosen names."""
    if key == "components" or _is_properties_map(key):
        return True
    return key.startswith("components.") and key.count(".") == 1


def _filter_parameters(
    spec: dict[str, Any],
    predicate: Callable[[dict[str, Any]], bool],
) -> int:
    """Drop parameters matching ``predicate`` from operations and path items."""
    removed = 0

    def _filter(container: dict[str, Any]) -> None:
        nonlocal removed
        params = container.get("parameters")
        if not isinstance(params, list):
            return
        kept = [p for p in params if not (isinstance(p, dict) and predicate(p))]
        removed += len(params) - len(kept)
        container["parameters"] = kept

    for path_item in spec.get("paths", {}).values():
        if isinstance(path_item, dict):
            _filter(path_item)
    for _path, _method, operation in iter_operations(spec):
        _filter(operation)

    return removed


def remove_kbn_xsrf(spec: dict[str, Any]) -> tuple[dict[str, Any], int]:
    """Remove the kbn-xsrf header parameter; the client always sends it.

    Matches inline parameters by name and shared ones by $ref, covering
    both ``kbn-xsrf`` and the ``Data_views_kbn_xsrf`` style components.

    Returns (modified_spec, count_of_removals).
    """

    def _is_xsrf(param: dict[str, Any]) -> bool:
        for field_name in ("name", "$ref"):
            value = param.get(field_name)
            if isinstance(value, str) and value.endswith(("kbn_xsrf", "kbn-xsrf")):
                return True
        return False

    return spec, _filter_parameters(spec, _is_xsrf)


def remove_api_version_param(spec: dict[str, Any]) -> tuple[dict[str, Any], int]:
    """Remove the elastic-api-version parameter.

    Returns (modified_spec, count_of_removals).
    """
    return spec, _filter_parameters(spec, lambda p: p.get("name") == "elastic-api-version")


def _simplify_content(holder: Any) -> int:
    if not isinstance(holder, dict) or not isinstance(holder.get("content"), dict):
        return 0

    content = holder["content"]
    simplified: dict[str, Any] = {}
    changed = 0
    for media_type, value in content.items():
        plain = media_type.split(";", 1)[0].strip()
        if plain != media_type:
            changed += 1
            # An explicit plain entry takes precedence over parameterized variants.
            if plain in content:
                continue
        simplified.setdefault(plain, value)

    if changed:
        holder["content"] = simplified
    return changed


def simplify_content_type(spec: dict[str, Any]) -> tuple[dict[str, Any], int]:
    """Strip media type parameters such as ``; Elastic-Api-Version=2023-10-31``.

    Returns (modified_spec, count_of_simplified_keys).
    """
    count = 0

    for _path, _method, operation in iter_operations(spec):
        count += _simplify_content(operation.get("requestBody"))
        responses = operation.get("responses")
        if isinstance(responses, dict):
            for response in responses.values():
                count += _simplify_content(response)

    components = spec.get("components", {})
    for section in ("responses", "requestBodies"):
        for item in components.get(section, {}).values():
            count += _simplify_content(item)

    return spec, count


def add_missing_descriptions(spec: dict[str, Any]) -> tuple[dict[str, Any], int]:
    """Give every response without a description an empty one.

    Returns (modified_spec, count_of_descriptions_added).
    """
    count = 0

    def _fix(responses: Any) -> None:
        nonlocal count
        if not isinstance(responses, dict):
            return
        for response in responses.values():
            if isinstance(response, dict) and "$ref" not in response and "description" not in response:
                response["description"] = ""
                count += 1

    for _path, _method, operation in iter_operations(spec):
        _fix(operation.get("responses"))
    _fix(spec.get("components", {}).get("responses"))

    return spec, count


def _remove_keywords(spec: dict[str, Any], keywords: Iterable[str]) -> int:
    removed = 0

    def _strip(key: str, node: dict[str, Any]) -> None:
        nonlocal removed
        if _is_name_map(key):
            return
        for keyword in keywords:
            if keyword in node:
                del node[keyword]
                removed += 1

    _walk_operations_and_components(spec, _strip)
    return removed


def remove_enums(spec: dict[str, Any]) -> tuple[dict[str, Any], int]:
    """Remove every ``enum`` constraint.

    Kibana's enums drift between releases faster than generated bindings
    can follow.

    Returns (modified_spec, count_of_enums_removed).
    """
    return spec, _remove_keywords(spec, ("enum",))


def remove_examples(spec: dict[str, Any]) -> tuple[dict[str, Any], int]:
    """Remove every ``example``/``examples`` and empty components.examples.

    Returns (modified_spec, count_of_examples_removed).
    """
    count = _remove_keywords(spec, ("example", "examples"))
    if isinstance(spec.get("components"), dict):
        if spec["components"].get("examples"):
            count += len(spec["components"]["examples"])
        spec["components"]["examples"] = {}
    return spec, count


def collect_ref_names(spec: dict[str, Any]) -> set[str]:
    """Collect the last segment of every $ref below paths and components."""
    names: set[str] = set()

    def _collect(_key: str, node: dict[str, Any]) -> None:
        ref = node.get("$ref")
        if isinstance(ref, str):
            names.add(ref.rsplit("/", 1)[-1])

    for path_item in spec.get("paths", {}).values():
        if isinstance(path_item, dict):
            iterate(path_item, _collect)
    if isinstance(spec.get("components"), dict):
        iterate(spec["components"], _collect)
    return names


def remove_unused_components(spec: dict[str, Any]) -> tuple[dict[str, Any], int]:
    """Remove component schemas and parameters nothing references.

    Runs until stable, since dropping one schema can orphan the schemas
    only it referenced.

    Returns (modified_spec, count_of_components_removed).
    """
    components = spec.get("components", {})
    removed = 0

    while True:
        referenced = collect_ref_names(spec)
        unused = [
            (section, name)
            for section in ("schemas", "parameters")
            for name in components.get(section, {})
            if name not in referenced
        ]
        if not unused:
            break
        for section, name in unused:
            del components[section][name]
            logger.debug("Removed unused component %s/%s", section, name)
        removed += len(unused)

    return spec, removed


def collect_all_refs(obj: Any, refs: set[str] | None = None) -> set[str]:
    """Collect all $ref values in a document."""
    if refs is None:
        refs = set()

    if isinstance(obj, dict):
        if isinstance(obj.get("$ref"), str):
            refs.add(obj["$ref"])
        for value in obj.values():
            collect_all_refs(value, refs)
    elif isinstance(obj, list):
        for item in obj:
            collect_all_refs(item, refs)

    return refs


def get_component_from_ref(ref: str) -> tuple[str, str] | None:
    """Extract component type and name from a $ref string.

    Returns (component_type, component_name) or None if not a local component ref.
    """
    match = re.match(r"^#/components/(\w+)/(.+)$", ref)
    if match:
        return match.group(1), match.group(2)
    return None


def find_orphan_refs(spec: dict[str, Any]) -> list[tuple[str, str, str]]:
    """Find all $refs that point to non-existent components.

    Returns list of (ref_string, component_type, component_name), sorted.
    """
    existing: dict[str, set[str]] = defaultdict(set)
    for component_type in COMPONENT_TYPES:
        existing[component_type] = set(spec.get("components", {}).get(component_type, {}) or {})

    orphans = []
    for ref in sorted(collect_all_refs(spec)):
        parsed = get_component_from_ref(ref)
        if parsed and parsed[1] not in existing[parsed[0]]:
            orphans.append((ref, parsed[0], parsed[1]))
    return orphans


def create_stub_component(component_type: str, component_name: str) -> dict[str, Any]:
    """Create a stub component definition."""
    if component_type == "schemas":
        return {"type": "object", "description": f"Auto-generated stub for {component_name}", "x-generated": True}
    if component_type == "responses":
        return {"description": f"Auto-generated stub response for {component_name}", "x-generated": True}
    if component_type == "parameters":
        return {
            "name": component_name,
            "in": "query",
            "description": f"Auto-generated stub parameter for {component_name}",
            "schema": {"type": "string"},
            "x-generated": True,
        }
    return {"description": f"Auto-generated stub for {component_name}", "x-generated": True}


def fix_orphan_refs(spec: dict[str, Any]) -> tuple[dict[str, Any], int]:
    """Create stub components for $refs whose target does not exist.

    Returns (modified_spec, count_of_stubs_created).
    """
    orphans = find_orphan_refs(spec)
    if not orphans:
        return spec, 0

    components = spec.setdefault("components", {})
    created = 0
    for ref, component_type, component_name in orphans:
        section = components.setdefault(component_type, {})
        if component_name not in section:
            section[component_name] = create_stub_component(component_type, component_name)
            logger.warning("Created stub component for dangling %s", ref)
            created += 1

    return spec, created


def remove_duplicate_tags(spec: dict[str, Any]) -> tuple[dict[str, Any], int]:
    """Keep only the first top-level tag of each name.

    Returns (modified_spec, count_of_tags_removed).
    """
    tags = spec.get("tags")
    if not tags:
        return spec, 0

    seen: set[str] = set()
    unique = []
    for tag in tags:
        name = tag.get("name") if isinstance(tag, dict) else None
        if not isinstance(name, str):
            unique.append(tag)
            continue
        if name not in seen:
            seen.add(name)
            unique.append(tag)

    spec["tags"] = unique
    return spec, len(tags) - len(unique)


def fix_array_items_definitions(spec: dict[str, Any]) -> tuple[dict[str, Any], int]:
    """Replace ``items`` given as a list by its first element.

    An empty list becomes a plain object schema.

    Returns (modified_spec, count_of_arrays_fixed).
    """
    count = 0

    def _fix(_key: str, node: dict[str, Any]) -> None:
        nonlocal count
        if node.get("type") == "array" and isinstance(node.get("items"), list):
            items = node["items"]
            node["items"] = items[0] if items else {"type": "object"}
            count += 1

    _walk_operations_and_components(spec, _fix)
    return spec, count


def remove_technical_preview_paths(spec: dict[str, Any]) -> tuple[dict[str, Any], int]:
    """Remove paths where any operation is marked as Technical Preview.

    Returns (modified_spec, count_of_paths_removed).
    """
    preview = sorted(
        {path for path, _method, operation in iter_operations(spec) if operation.get("x-state") == TECHNICAL_PREVIEW_STATE},
    )
    for path in preview:
        del spec["paths"][path]
        logger.debug("Removed technical preview path %s", path)
    return spec, len(preview)


def _rename_property(schema: dict[str, Any], old: str, new: str) -> bool:
    props = schema.get("properties")
    if not isinstance(props, dict) or old not in props:
        return False
    props[new] = props.pop(old)
    required = schema.get("required")
    if isinstance(required, list):
        schema["required"] = [new if field_name == old else field_name for field_name in required]
    return True


def _fix_version_schema(schema: Any) -> int:
    if not isinstance(schema, dict) or not isinstance(schema.get("properties"), dict):
        return 0
    count = 0
    if "version" in schema["properties"] and _rename_property(schema, "_version", "versionUnderscored"):
        count += 1
    if _rename_property(schema, "@timestamp", "atTimestamp"):
        count += 1
    return count


def _fix_version_content(holder: Any) -> int:
    if not isinstance(holder, dict) or not isinstance(holder.get("content"), dict):
        return 0
    return sum(
        _fix_version_schema(media.get("schema"))
        for media in holder["content"].values()
        if isinstance(media, dict)
    )


def fix_version_fields(spec: dict[str, Any]) -> tuple[dict[str, Any], int]:
    """Rename properties that cannot become identifiers.

    ``_version`` becomes ``versionUnderscored`` when a ``version`` property
    sits beside it, and ``@timestamp`` becomes ``atTimestamp``. Matching
    ``required`` entries are renamed too.

    Returns (modified_spec, count_of_renames).
    """
    count = 0
    components = spec.get("components", {})

    for schema in components.get("schemas", {}).values():
        count += _fix_version_schema(schema)
    for section in ("requestBodies", "responses"):
        for item in components.get(section, {}).values():
            count += _fix_version_content(item)

    for _path, _method, operation in iter_operations(spec):
        count += _fix_version_content(operation.get("requestBody"))
        responses = operation.get("responses")
        if isinstance(responses, dict):
            for response in responses.values():
                count += _fix_version_content(response)

    return spec, count


def remove_problematic_paths(
    spec: dict[str, Any],
    paths: Iterable[str] | None = None,
) -> tuple[dict[str, Any], int]:
    """Remove paths that have no practical repair.

    Returns (modified_spec, count_of_paths_removed).
    """
    removed = 0
    for path in DEFAULT_PROBLEMATIC_PATHS if paths is None else paths:
        if spec.get("paths", {}).pop(path, None) is not None:
            removed += 1
            logger.debug("Removed problematic path %s", path)
    return spec, removed


def fix_required_path_parameters(spec: dict[str, Any]) -> tuple[dict[str, Any], int]:
    """Mark parameters named in a path template as required.

    Returns (modified_spec, count_of_parameters_fixed).
    """
    count = 0
    template = re.compile(r"\{([^}]+)\}")

    for path, _method, operation in iter_operations(spec):
        names = set(template.findall(path))
        if not names:
            continue
        for param in operation.get("parameters", []):
            if isinstance(param, dict) and param.get("name") in names and param.get("required") is not True:
                param["required"] = True
                count += 1

    return spec, count


def _is_parameter_key(key: str) -> bool:
    parts = key.split(".")
    if len(parts) >= 2 and parts[-2] == "parameters" and parts[-1].isdigit():
        return True
    return len(parts) == 3 and parts[:2] == ["components", "parameters"]


def fix_validation_issues(spec: dict[str, Any]) -> tuple[dict[str, Any], int]:
    """Apply a batch of small validity repairs.

    - ``required`` keeps only string entries (a single string becomes a list)
    - an empty ``responses`` map gains a generic 200 response
    - empty ``enum`` lists inside ``oneOf``/``anyOf`` options are dropped
    - path parameters are ``required: true`` and ``in`` is a valid location

    Returns (modified_spec, count_of_fixes).
    """
    count = 0

    def _fix(key: str, node: dict[str, Any]) -> None:
        nonlocal count

        if "required" in node and not _is_properties_map(key):
            required = node["required"]
            if isinstance(required, str):
                node["required"] = [required]
                count += 1
            elif isinstance(required, list):
                strings = [item for item in required if isinstance(item, str)]
                if len(strings) != len(required):
                    node["required"] = strings
                    count += 1
            elif not isinstance(required, bool):
                del node["required"]
                count += 1

        for union in ("oneOf", "anyOf"):
            for option in node.get(union) or []:
                if isinstance(option, dict) and option.get("enum") == []:
                    del option["enum"]
                    count += 1

        if _is_parameter_key(key) and "in" in node:
            if node["in"] not in VALID_PARAMETER_LOCATIONS:
                node["in"] = "path"
                count += 1
            if node["in"] == "path" and node.get("required") is not True:
                node["required"] = True
                count += 1

    _walk_operations_and_components(spec, _fix)

    for _path, _method, operation in iter_operations(spec):
        if operation.get("responses") == {}:
            operation["responses"]["200"] = {
                "description": "Success response",
                "content": {"application/json": {"schema": {"type": "object", "properties": {}}}},
            }
            count += 1

    return spec, count


def fix_required_with_any_of(spec: dict[str, Any]) -> tuple[dict[str, Any], int]:
    """Lift an ``{anyOf: [...]}`` entry out of ``required`` to the schema.

    ``required: [a, {anyOf: [b, c]}]`` becomes ``required: [a]`` plus
    ``anyOf: [{required: [b]}, {required: [c]}]``.

    Returns (modified_spec, count_of_schemas_fixed).
    """
    count = 0

    def _fix(_key: str, node: dict[str, Any]) -> None:
        nonlocal count
        required = node.get("required")
        if not isinstance(required, list):
            return
        for index, item in enumerate(required):
            if isinstance(item, dict) and "anyOf" in item:
                node["required"] = required[:index] + required[index + 1 :]
                node["anyOf"] = [{"required": [option]} for option in item["anyOf"]]
                count += 1
                return

    _walk_operations_and_components(spec, _fix)
    return spec, count


TRANSFORMS: dict[str, Callable[[dict[str, Any]], tuple[dict[str, Any], int]]] = {
    "remove_kbn_xsrf": remove_kbn_xsrf,
    "remove_api_version_param": remove_api_version_param,
    "simplify_content_type": simplify_content_type,
    "add_missing_descriptions": add_missing_descriptions,
    "remove_enums": remove_enums,
    "remove_examples": remove_examples,
    "remove_unused_components": remove_unused_components,
    "fix_orphan_refs": fix_orphan_refs,
    "remove_duplicate_tags": remove_duplicate_tags,
    "fix_array_items_definitions": fix_array_items_definitions,
    "remove_technical_preview_paths": remove_technical_preview_paths,
    "fix_version_fields": fix_version_fields,
    "remove_problematic_paths": remove_problematic_paths,
    "fix_required_path_parameters": fix_required_path_parameters,
    "fix_validation_issues": fix_validation_issues,
    "fix_required_with_any_of": fix_required_with_any_of,
}
