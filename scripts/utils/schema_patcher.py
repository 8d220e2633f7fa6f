#!/usr/bin/env python3
"""Declarative per-endpoint patches for the Kibana OpenAPI document.

Kibana's document carries endpoint-specific defects (inline schemas that
should be shared components, missing discriminators, fields that must be
omitted when empty). Rather than hard-coding each repair, they are listed
as named patch sets in ``config/schema_patches.yaml`` and applied here.
"""

import copy
import itertools
import logging
import re
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import yaml

from .document import (
    DocumentError,
    PathNotFoundError,
    create_ref,
    delete,
    move,
    must_get,
    set_value,
)

logger = logging.getLogger(__name__)

PLACEHOLDER_PATTERN = re.compile(r"\{(\w+)\}")


class PatchError(Exception):
    """Raised when a required patch cannot be applied."""


@dataclass
class PatchStats:
    """Statistics for patch application."""

    patches_applied: int = 0
    patches_skipped: int = 0
    by_operation: dict[str, int] = field(default_factory=dict)
    by_set: dict[str, int] = field(default_factory=dict)

    def to_dict(self) -> dict[str, Any]:
        """Convert stats to dictionary for reporting."""
        return {
            "patches_applied": self.patches_applied,
            "patches_skipped": self.patches_skipped,
            "by_operation": dict(self.by_operation),
            "by_set": dict(self.by_set),
        }


class SchemaPatcher:
    """Applies named patch sets to an OpenAPI document.

    Each patch targets either an operation (``path`` plus ``method``), a
    path item (``path`` alone) or the ``components`` section, and runs
    one of the supported operations against a dotted key below it.
    """

    OPERATIONS = ("set", "delete", "move", "create_ref", "pop")

    def __init__(self, config_path: Path | None = None):
        """Initialize with patch sets from file.

        Args:
            config_path: Path to schema_patches.yaml config.
        """
        if config_path is None:
            config_path = Path(__file__).parent.parent.parent / "config" / "schema_patches.yaml"

        self._patch_sets: dict[str, list[dict[str, Any]]] = {}
        self._load_config(config_path)

        self.stats = PatchStats()

    def _load_config(self, config_path: Path) -> None:
        """Load patch sets from YAML config."""
        if not config_path.exists():
            logger.warning("Patch config not found: %s", config_path)
            return

        with config_path.open(encoding="utf-8") as f:
            config = yaml.safe_load(f) or {}

        for name, patches in (config.get("patch_sets") or {}).items():
            if not isinstance(patches, list):
                raise PatchError(f"patch set {name!r} must be a list")
            for patch in patches:
                op = patch.get("op") if isinstance(patch, dict) else None
                if op not in self.OPERATIONS:
                    raise PatchError(f"patch set {name!r} has unsupported op {op!r}")
            self._patch_sets[name] = patches

    @property
    def patch_sets(self) -> list[str]:
        """Names of the loaded patch sets."""
        return list(self._patch_sets)

    def has_patch_set(self, name: str) -> bool:
        """Check whether a patch set with this name was loaded."""
        return name in self._patch_sets

    @staticmethod
    def expand(patch: dict[str, Any]) -> list[dict[str, Any]]:
        """Expand a patch's ``matrix`` into one patch per combination.

        ``{var}`` placeholders naming a matrix variable are replaced in every
        string field; any other brace (path templates, regex quantifiers) is
        left as written. Patches without a matrix are returned as-is.
        """
        matrix = patch.get("matrix")
        if not matrix:
            return [patch]

        template = {k: v for k, v in patch.items() if k != "matrix"}
        names = list(matrix)
        expanded = []
        for values in itertools.product(*(matrix[name] for name in names)):
            placeholders = dict(zip(names, (str(v) for v in values)))
            expanded.append(_substitute(template, placeholders))
        return expanded

    def apply(self, spec: dict[str, Any], set_name: str) -> tuple[dict[str, Any], int]:
        """Apply a named patch set.

        Args:
            spec: OpenAPI document, modified in place.
            set_name: Name of the patch set to apply.

        Returns:
            (modified_spec, count_of_patches_applied).

        Raises:
            PatchError: If the set is unknown or a required patch fails.
        """
        if set_name not in self._patch_sets:
            raise PatchError(f"unknown patch set {set_name!r}")

        applied = 0
        for patch in self._patch_sets[set_name]:
            for concrete in self.expand(patch):
                if self._apply_one(spec, concrete, set_name):
                    applied += 1

        self.stats.by_set[set_name] = self.stats.by_set.get(set_name, 0) + applied
        return spec, applied

    def _apply_one(self, spec: dict[str, Any], patch: dict[str, Any], set_name: str) -> bool:
        op = patch["op"]
        try:
            target = self._resolve_target(spec, patch)
            if patch.get("requires"):
                must_get(target, patch["requires"])
            self._run(spec, target, patch)
        except PathNotFoundError as e:
            if patch.get("optional"):
                logger.warning("Skipping optional %s patch in %s: %s", op, set_name, e)
                self.stats.patches_skipped += 1
                return False
            raise PatchError(f"{set_name}: {_describe(patch)}: {e}") from e
        except DocumentError as e:
            raise PatchError(f"{set_name}: {_describe(patch)}: {e}") from e

        self.stats.patches_applied += 1
        self.stats.by_operation[op] = self.stats.by_operation.get(op, 0) + 1
        return True

    @staticmethod
    def _resolve_target(spec: dict[str, Any], patch: dict[str, Any]) -> Any:
        """Locate the node a patch's keys are relative to."""
        path = patch.get("path")
        if path is None:
            return spec.setdefault("components", {})

        path_item = spec.get("paths", {}).get(path)
        if not isinstance(path_item, dict):
            raise PathNotFoundError(f"paths.{path}")

        method = patch.get("method")
        if not method:
            return path_item

        operation = path_item.get(method.lower())
        if not isinstance(operation, dict):
            raise PathNotFoundError(f"paths.{path}.{method.lower()}")
        return operation

    @staticmethod
    def _run(spec: dict[str, Any], target: Any, patch: dict[str, Any]) -> None:
        op = patch["op"]

        if op == "set":
            set_value(target, patch["key"], copy.deepcopy(patch.get("value")))
        elif op == "delete":
            if not delete(target, patch["key"]):
                raise PathNotFoundError(patch["key"])
        elif op == "move":
            move(target, patch["from"], patch["to"])
        elif op == "create_ref":
            create_ref(spec, target, patch["name"], patch["key"])
        elif op == "pop":
            items = must_get(target, patch["key"])
            if not isinstance(items, list):
                raise DocumentError(f"{patch['key']!r} is not a list")
            index = patch.get("index", -1)
            if not -len(items) <= index < len(items):
                raise PathNotFoundError(patch["key"], f"has no index {index}")
            items.pop(index)

    def get_stats(self) -> dict[str, Any]:
        """Return patch statistics."""
        return self.stats.to_dict()


def _substitute(value: Any, placeholders: dict[str, str]) -> Any:
    if isinstance(value, str):
        return PLACEHOLDER_PATTERN.sub(lambda m: placeholders.get(m.group(1), m.group(0)), value)
    if isinstance(value, dict):
        return {_substitute(k, placeholders): _substitute(v, placeholders) for k, v in value.items()}
    if isinstance(value, list):
        return [_substitute(item, placeholders) for item in value]
    return value


def _describe(patch: dict[str, Any]) -> str:
    where = f"{patch.get('method', '').upper()} {patch['path']}".strip() if patch.get("path") else "components"
    key = patch.get("key") or patch.get("from")
    return f"{patch['op']} {key} on {where}"
