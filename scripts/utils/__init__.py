"""Utility modules for the Kibana OpenAPI schema transform."""

from .api_groups import API_GROUPS, ApiGroup, GroupSplit, split_by_group
from .codegen import GenerationError, GeneratorConfig, run_generator
from .document import DocumentError, PathNotFoundError, load_schema, save_schema
from .schema_patcher import PatchError, PatchStats, SchemaPatcher
from .transforms import TRANSFORMS, SchemaTransformError

__all__ = [
    "API_GROUPS",
    "TRANSFORMS",
    "ApiGroup",
    "DocumentError",
    "GenerationError",
    "GeneratorConfig",
    "GroupSplit",
    "PatchError",
    "PatchStats",
    "PathNotFoundError",
    "SchemaPatcher",
    "SchemaTransformError",
    "load_schema",
    "run_generator",
    "save_schema",
    "split_by_group",
]
