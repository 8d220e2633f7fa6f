"""Dotted-path editing helpers for parsed OpenAPI documents.

A parsed document is a tree of dicts, lists and scalars. Nodes are
addressed with dotted keys such as
``responses.200.content.application/json.schema``; numeric segments
index into lists. When the first segment does not name a container the
whole key is treated as a literal mapping key, so keys that contain dots
themselves remain addressable.
"""

from __future__ import annotations

import copy
import logging
from pathlib import Path
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from collections.abc import Callable, Iterator

import yaml

logger = logging.getLogger(__name__)

HTTP_METHODS = ("get", "put", "post", "delete", "options", "head", "patch", "trace")

_MISSING = object()


class DocumentError(Exception):
    """Raised when a document edit cannot be applied."""


class PathNotFoundError(DocumentError, LookupError):
    """Raised when a dotted key does not resolve to a node."""

    def __init__(self, key: str, reason: str = "not found"):
        self.key = key
        super().__init__(f"{key!r} {reason}")


def _index(items: list, segment: str, key: str) -> int:
    """Parse a list index segment, rejecting anything out of bounds."""
    try:
        index = int(segment)
    except ValueError:
        raise PathNotFoundError(key, f"has invalid list index {segment!r}") from None
    if index < 0 or index >= len(items):
        raise PathNotFoundError(key, f"index {index} out of bounds (len {len(items)})")
    return index


def _is_container(value: Any) -> bool:
    return isinstance(value, (dict, list))


def _lookup(node: Any, key: str, full_key: str) -> Any:
    head, sep, rest = key.partition(".")

    if isinstance(node, list):
        item = node[_index(node, head, full_key)]
        if not sep:
            return item
        if _is_container(item):
            return _lookup(item, rest, full_key)
        raise PathNotFoundError(full_key)

    if isinstance(node, dict):
        if sep:
            child = node.get(head)
            if _is_container(child):
                return _lookup(child, rest, full_key)
        if key in node:
            return node[key]
        raise PathNotFoundError(full_key)

    raise PathNotFoundError(full_key)


def must_get(node: Any, key: str) -> Any:
    """Return the value at ``key``, raising PathNotFoundError when absent."""
    return _lookup(node, key, key)


def get(node: Any, key: str, default: Any = None) -> Any:
    """Return the value at ``key`` or ``default`` when absent."""
    try:
        return _lookup(node, key, key)
    except PathNotFoundError:
        return default


def has(node: Any, key: str) -> bool:
    """Check whether ``key`` resolves to a node."""
    return get(node, key, _MISSING) is not _MISSING


def set_value(node: Any, key: str, value: Any) -> None:
    """Set the value at ``key``, creating intermediate mappings as needed."""
    _assign(node, key, value, key)


def _assign(node: Any, key: str, value: Any, full_key: str) -> None:
    head, sep, rest = key.partition(".")

    if isinstance(node, list):
        index = _index(node, head, full_key)
        if not sep:
            node[index] = value
            return
        if not _is_container(node[index]):
            raise DocumentError(f"cannot set {full_key!r}: {head!r} is not a container")
        _assign(node[index], rest, value, full_key)
        return

    if not isinstance(node, dict):
        raise DocumentError(f"cannot set {full_key!r} on {type(node).__name__}")

    if not sep:
        node[key] = value
        return

    if head not in node:
        node[head] = {}
    child = node[head]
    if not _is_container(child):
        raise DocumentError(f"cannot set {full_key!r}: {head!r} is not a container")
    _assign(child, rest, value, full_key)


def delete(node: Any, key: str) -> bool:
    """Delete the value at ``key``.

    Returns False when nothing was found. Removing a list element directly
    is not supported because it would shift every later index.
    """
    return _remove(node, key, key)


def _remove(node: Any, key: str, full_key: str) -> bool:
    head, sep, rest = key.partition(".")

    if isinstance(node, list):
        index = _index(node, head, full_key)
        if not sep:
            raise DocumentError(f"cannot delete list element {full_key!r} directly")
        if _is_container(node[index]):
            return _remove(node[index], rest, full_key)
        return False

    if not isinstance(node, dict):
        return False

    if sep and _is_container(node.get(head)):
        return _remove(node[head], rest, full_key)
    if key in node:
        del node[key]
        return True
    return False


def must_delete(node: Any, key: str) -> None:
    """Delete the value at ``key``, raising PathNotFoundError when absent."""
    if not delete(node, key):
        raise PathNotFoundError(key)


def move(node: Any, src: str, dst: str) -> None:
    """Move the value at ``src`` to ``dst``."""
    value = must_get(node, src)
    set_value(node, dst, value)
    delete(node, src)


def create_ref(spec: dict[str, Any], node: Any, name: str, key: str) -> dict[str, str]:
    """Hoist the subtree at ``key`` into ``components.schemas.<name>``.

    The subtree is replaced by a ``$ref`` to the new component. An existing
    component with the same name is reused only when it is an exact
    duplicate of the subtree.

    Args:
        spec: Full OpenAPI document that owns the components section.
        node: Node the key is relative to (usually an operation).
        name: Component schema name.
        key: Dotted key of the subtree to hoist.

    Returns:
        The ``$ref`` mapping written in place of the subtree.
    """
    target = must_get(node, key)
    ref_value = {"$ref": f"#/components/schemas/{name}"}
    if target == ref_value:
        return ref_value

    schemas = spec.setdefault("components", {}).setdefault("schemas", {})
    if name in schemas:
        if schemas[name] != target:
            raise DocumentError(
                f"component schema {name!r} already in use and not an exact duplicate",
            )
        logger.debug("Reusing identical component schema %s for %s", name, key)
    else:
        schemas[name] = target

    set_value(node, key, copy.deepcopy(ref_value))
    return ref_value


def iterate(node: Any, fn: Callable[[str, dict[str, Any]], None], key: str = "") -> None:
    """Walk every mapping below ``node`` in post-order.

    ``fn`` receives the dotted key of each mapping (empty for the root) and
    the mapping itself, after all of its children have been visited.
    Mapping keys are visited in sorted order.
    """
    if isinstance(node, list):
        for i, item in enumerate(node):
            iterate(item, fn, f"{key}.{i}" if key else str(i))
    elif isinstance(node, dict):
        for child_key in sorted(node, key=str):
            iterate(node[child_key], fn, f"{key}.{child_key}" if key else str(child_key))
        fn(key, node)


def iter_operations(spec: dict[str, Any]) -> Iterator[tuple[str, str, dict[str, Any]]]:
    """Yield ``(path, method, operation)`` for every operation in the document."""
    for path, path_item in list(spec.get("paths", {}).items()):
        if not isinstance(path_item, dict):
            continue
        for method in HTTP_METHODS:
            operation = path_item.get(method)
            if isinstance(operation, dict):
                yield path, method, operation


class StringKeyLoader(getattr(yaml, "CSafeLoader", yaml.SafeLoader)):
    """Safe loader that coerces mapping keys to strings.

    Response codes appear unquoted in most documents and would otherwise
    load as integers.
    """

    def construct_mapping(self, node, deep=False):
        mapping = super().construct_mapping(node, deep=deep)
        return {k if isinstance(k, str) else str(k): v for k, v in mapping.items()}


class NoAliasDumper(yaml.SafeDumper):
    """Safe dumper that never emits anchors or aliases."""

    def ignore_aliases(self, data):
        return True


def load_schema(path: Path) -> dict[str, Any]:
    """Load an OpenAPI document from a YAML (or JSON) file."""
    with path.open(encoding="utf-8") as f:
        spec = yaml.load(f, Loader=StringKeyLoader)  # noqa: S506
    if not isinstance(spec, dict):
        raise DocumentError(f"{path} does not contain a mapping")
    return spec


def save_schema(spec: dict[str, Any], path: Path) -> None:
    """Write an OpenAPI document as YAML."""
    path.parent.mkdir(parents=True, exist_ok=True)
    with path.open("w", encoding="utf-8") as f:
        yaml.dump(
            spec,
            f,
            Dumper=NoAliasDumper,
            sort_keys=False,
            allow_unicode=True,
            default_flow_style=False,
            width=4096,
        )
