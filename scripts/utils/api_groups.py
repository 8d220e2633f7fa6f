"""API groups used to split the Kibana document into per-area fragments.

Each group owns a set of path prefixes. The transformed document is cut
into one OpenAPI fragment per group; every fragment keeps the source's
info, servers, security, tags and components so it stays self-contained.
Paths no group claims end up in a ``misc`` fragment and fail the run.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any


@dataclass(frozen=True)
class ApiGroup:
    """A named set of path prefixes written to one fragment file."""

    name: str
    path_prefixes: tuple[str, ...]
    filename: str
    group: str

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> ApiGroup:
        """Build a group from a configuration entry."""
        prefixes = data.get("path_prefixes") or data.get("path_prefix") or []
        if isinstance(prefixes, str):
            prefixes = [prefixes]
        name = data["name"]
        return cls(
            name=name,
            path_prefixes=tuple(prefixes),
            filename=data.get("filename", f"{name.lower()}.yml"),
            group=data.get("group", name.lower()),
        )

    def matches(self, path: str) -> bool:
        return path.startswith(self.path_prefixes)


API_GROUPS: tuple[ApiGroup, ...] = (
    ApiGroup("Fleet", ("/api/fleet",), "fleet.yml", "fleet"),
    ApiGroup("DataViews", ("/api/data_views",), "data_views.yml", "dataviews"),
    ApiGroup("Alerting", ("/api/alerting",), "alerting.yml", "alerting"),
    ApiGroup("APM", ("/api/apm",), "apm.yml", "apm"),
    ApiGroup("Cases", ("/api/cases",), "cases.yml", "cases"),
    ApiGroup("Connectors", ("/api/actions",), "connectors.yml", "connectors"),
    ApiGroup(
        "DetectionEngine",
        ("/api/detection_engine", "/api/exception_list", "/api/exceptions/shared"),
        "detection_engine.yml",
        "detection",
    ),
    ApiGroup("Roles", ("/api/security/role",), "roles.yml", "roles"),
    ApiGroup("ML", ("/api/ml",), "ml.yml", "ml"),
    ApiGroup(
        "SavedObjects",
        ("/api/saved_objects", "/api/encrypted_saved_objects"),
        "saved_objects.yml",
        "savedobjects",
    ),
    ApiGroup("SecurityAIAssistant", ("/api/security_ai_assistant",), "security_ai_assistant.yml", "securityaiassistant"),
    ApiGroup("Endpoint", ("/api/endpoint",), "endpoint.yml", "endpoint"),
    ApiGroup("OSquery", ("/api/osquery",), "osquery.yml", "osquery"),
    ApiGroup("Spaces", ("/api/spaces",), "spaces.yml", "spaces"),
    ApiGroup("Status", ("/api/status",), "status.yml", "status"),
    ApiGroup(
        "SLOs",
        ("/s/{spaceId}/api/observability/slos", "/s/{spaceId}/internal/observability/slos/_definitions"),
        "slos.yml",
        "slo",
    ),
    ApiGroup("Timeline", ("/api/timeline", "/api/timelines", "/api/note", "/api/pinned_event"), "timeline.yml", "timeline"),
    ApiGroup(
        "EntityEngine",
        ("/api/entity_store", "/api/risk_score", "/api/asset_criticality"),
        "entity_engine.yml",
        "entityanalytics",
    ),
    ApiGroup("Lists", ("/api/lists",), "lists.yml", "lists"),
    ApiGroup("Streams", ("/api/streams",), "streams.yml", "streams"),
    ApiGroup("Uptime", ("/api/uptime",), "uptime.yml", "uptime"),
    ApiGroup("TaskManager", ("/api/task_manager",), "task_manager.yml", "taskmanager"),
    ApiGroup("Logstash", ("/api/logstash",), "logstash.yml", "logstash"),
    ApiGroup("ShortURL", ("/api/short_url",), "short_url.yml", "shorturl"),
)

MISC_FILENAME = "misc.yml"

# Top-level keys carried into the misc fragment.
MISC_KEYS = ("openapi", "info", "servers", "security", "tags", "components")


def load_api_groups(entries: list[dict[str, Any]] | None) -> tuple[ApiGroup, ...]:
    """Build groups from configuration, falling back to the defaults."""
    if not entries:
        return API_GROUPS
    return tuple(ApiGroup.from_dict(entry) for entry in entries)


def filter_paths_by_prefixes(paths: dict[str, Any], prefixes: tuple[str, ...] | list[str]) -> dict[str, Any]:
    """Return the paths starting with any of the prefixes, in source order."""
    prefixes = tuple(prefixes)
    return {path: item for path, item in paths.items() if path.startswith(prefixes)}


def build_group_spec(spec: dict[str, Any], paths: dict[str, Any]) -> dict[str, Any]:
    """Copy the document's top-level keys with ``paths`` swapped in."""
    fragment = dict(spec)
    fragment["paths"] = paths
    return fragment


def build_misc_spec(spec: dict[str, Any], paths: dict[str, Any]) -> dict[str, Any]:
    """Build the fragment holding paths no group claimed."""
    fragment = {key: spec[key] for key in MISC_KEYS if key in spec}
    fragment["paths"] = paths
    return fragment


@dataclass
class GroupSplit:
    """Result of splitting a document by API group."""

    fragments: list[tuple[ApiGroup, dict[str, Any]]] = field(default_factory=list)
    unmatched: list[str] = field(default_factory=list)
    misc: dict[str, Any] | None = None

    @property
    def paths_by_group(self) -> dict[str, int]:
        return {group.name: len(fragment["paths"]) for group, fragment in self.fragments}


def split_by_group(spec: dict[str, Any], groups: tuple[ApiGroup, ...] = API_GROUPS) -> GroupSplit:
    """Split a document into one fragment per group.

    Groups that match no path are skipped. A path may belong to more than
    one group when prefixes overlap.
    """
    paths = spec.get("paths", {})
    split = GroupSplit()
    claimed: set[str] = set()

    for group in groups:
        group_paths = filter_paths_by_prefixes(paths, group.path_prefixes)
        if not group_paths:
            continue
        claimed.update(group_paths)
        split.fragments.append((group, build_group_spec(spec, group_paths)))

    leftover = {path: item for path, item in paths.items() if path not in claimed}
    if leftover:
        split.unmatched = sorted(leftover)
        split.misc = build_misc_spec(spec, leftover)

    return split
