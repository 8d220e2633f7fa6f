#!/usr/bin/env python3
"""Transform Kibana's OpenAPI document and split it into per-group fragments.

Runs an ordered pipeline of repairs over the upstream document, writes
one OpenAPI fragment per API group and optionally hands each fragment to
a code generator. Paths that no API group claims are written to
misc.yml and fail the run, so new upstream areas are never dropped
silently.

Usage:
    python -m scripts.transform_schema -i kibana.yaml
    python -m scripts.transform_schema -i kibana.yaml --generate
"""

from __future__ import annotations

import argparse
import copy
import json
import logging
import sys
import time
from dataclasses import dataclass, field
from datetime import datetime, timezone
from functools import partial
from pathlib import Path
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from collections.abc import Callable

import yaml
from rich.console import Console
from rich.logging import RichHandler
from rich.progress import BarColumn, Progress, SpinnerColumn, TextColumn, TimeElapsedColumn
from rich.table import Table

from scripts.utils.api_groups import MISC_FILENAME, GroupSplit, load_api_groups, split_by_group
from scripts.utils.codegen import GenerationError, GeneratorConfig, run_generator
from scripts.utils.document import DocumentError, load_schema, save_schema
from scripts.utils.schema_patcher import PatchError, SchemaPatcher
from scripts.utils.transforms import TRANSFORMS, SchemaTransformError

console = Console()
logger = logging.getLogger(__name__)

PATCH_PREFIX = "patch:"

# Order matters: later steps rely on the shape earlier ones produce.
DEFAULT_PIPELINE = [
    "remove_kbn_xsrf",
    "remove_api_version_param",
    "simplify_content_type",
    "add_missing_descriptions",
    "patch:fleet",
    "remove_enums",
    "remove_examples",
    "remove_unused_components",
    "fix_orphan_refs",
    "remove_duplicate_tags",
    "fix_array_items_definitions",
    "remove_technical_preview_paths",
    "fix_version_fields",
    "remove_problematic_paths",
    "patch:run_message_email",
    "patch:entity_analytics",
    "patch:get_all_spaces",
]

# Default configuration
DEFAULT_CONFIG = {
    "paths": {
        "output": "build/openapi",
        "reports": "reports",
        "patches": "config/schema_patches.yaml",
    },
    "pipeline": DEFAULT_PIPELINE,
    "transforms": {
        "problematic_paths": [
            "/api/detection_engine/rules/preview",
            "/api/upgrade_assistant/reindex/batch",
            "/api/security/roles",
            "/api/security/role/{name}",
        ],
    },
    "api_groups": [],
    "generator": {
        "enabled": False,
        "command": [
            "datamodel-codegen",
            "--input",
            "{spec}",
            "--input-file-type",
            "openapi",
            "--output",
            "{output}",
        ],
        "output": "kibana/kbapi/models/{group}.py",
        "keep_specs": False,
        "timeout": 600,
    },
    "output": {
        "json_indent": 2,
    },
}


@dataclass
class TransformStats:
    """Statistics for a transformation run."""

    input_file: str = ""
    paths_before: int = 0
    paths_after: int = 0
    schemas_after: int = 0
    steps: list[dict[str, Any]] = field(default_factory=list)
    paths_by_group: dict[str, int] = field(default_factory=dict)
    files_written: list[str] = field(default_factory=list)
    files_generated: list[str] = field(default_factory=list)
    unmatched_paths: list[str] = field(default_factory=list)
    errors: list[dict[str, Any]] = field(default_factory=list)

    @property
    def total_changes(self) -> int:
        return sum(step["changes"] for step in self.steps)


def load_config(config_path: Path | None = None) -> dict:
    """Load configuration from YAML file or use defaults."""
    if config_path and config_path.exists():
        with config_path.open(encoding="utf-8") as f:
            config = yaml.safe_load(f) or {}
            return _deep_merge(DEFAULT_CONFIG, config)
    return copy.deepcopy(DEFAULT_CONFIG)


def _deep_merge(base: dict, override: dict) -> dict:
    """Deep merge two dictionaries."""
    result = copy.deepcopy(base)
    for key, value in override.items():
        if key in result and isinstance(result[key], dict) and isinstance(value, dict):
            result[key] = _deep_merge(result[key], value)
        else:
            result[key] = value
    return result


def build_pipeline(
    config: dict,
    patcher: SchemaPatcher,
) -> list[tuple[str, Callable[[dict[str, Any]], tuple[dict[str, Any], int]]]]:
    """Resolve the configured step names into callables.

    ``patch:<name>`` steps apply the named patch set; every other step
    names a transform.

    Raises:
        SchemaTransformError: If a step names an unknown transform or patch set.
    """
    steps = []
    for name in config.get("pipeline") or DEFAULT_PIPELINE:
        if name.startswith(PATCH_PREFIX):
            set_name = name[len(PATCH_PREFIX) :]
            if not patcher.has_patch_set(set_name):
                raise SchemaTransformError(f"unknown patch set {set_name!r}")
            steps.append((name, partial(patcher.apply, set_name=set_name)))
        elif name == "remove_problematic_paths":
            paths = config.get("transforms", {}).get("problematic_paths")
            steps.append((name, partial(TRANSFORMS[name], paths=paths)))
        elif name in TRANSFORMS:
            steps.append((name, TRANSFORMS[name]))
        else:
            raise SchemaTransformError(f"unknown transform {name!r}")
    return steps


def run_pipeline(
    spec: dict[str, Any],
    steps: list[tuple[str, Callable[[dict[str, Any]], tuple[dict[str, Any], int]]]],
    stats: TransformStats,
) -> dict[str, Any]:
    """Run each step in order; any failure aborts the run.

    Raises:
        SchemaTransformError: Wrapping the failure, with the step named.
    """
    for name, fn in steps:
        started = time.perf_counter()
        try:
            spec, count = fn(spec)
        except Exception as e:
            raise SchemaTransformError(f"{name} failed: {e}") from e
        elapsed = time.perf_counter() - started
        stats.steps.append({"name": name, "changes": count, "seconds": round(elapsed, 3)})
        logger.info("%s: %d changes", name, count)
    return spec


def write_fragments(
    split: GroupSplit,
    output_dir: Path,
    stats: TransformStats,
    generator: GeneratorConfig | None = None,
) -> None:
    """Write each group fragment and run the generator when configured."""
    output_dir.mkdir(parents=True, exist_ok=True)

    with Progress(
        SpinnerColumn(),
        TextColumn("[progress.description]{task.description}"),
        BarColumn(),
        TextColumn("[progress.percentage]{task.percentage:>3.0f}%"),
        TimeElapsedColumn(),
        console=console,
    ) as progress:
        task = progress.add_task("Writing API groups...", total=len(split.fragments))

        for group, fragment in split.fragments:
            out_file = output_dir / group.filename
            save_schema(fragment, out_file)
            stats.files_written.append(str(out_file))

            if generator is not None:
                generated = run_generator(group, out_file, generator)
                stats.files_generated.append(str(generated))

            progress.update(task, advance=1)


def generate_report(stats: TransformStats, output_path: Path, indent: int = 2) -> None:
    """Generate transformation report."""
    report = {
        "timestamp": datetime.now(tz=timezone.utc).isoformat(),
        "input": stats.input_file,
        "summary": {
            "paths_before": stats.paths_before,
            "paths_after": stats.paths_after,
            "schemas_after": stats.schemas_after,
            "total_changes": stats.total_changes,
            "groups_written": len(stats.files_written),
            "files_generated": len(stats.files_generated),
            "unmatched_paths": len(stats.unmatched_paths),
        },
        "steps": stats.steps,
        "paths_by_group": stats.paths_by_group,
        "unmatched_paths": stats.unmatched_paths,
        "errors": stats.errors,
    }

    output_path.parent.mkdir(parents=True, exist_ok=True)
    with output_path.open("w", encoding="utf-8") as f:
        json.dump(report, f, indent=indent)
        f.write("\n")

    console.print(f"[green]Report saved to {output_path}[/green]")


def print_summary(stats: TransformStats) -> None:
    """Print transformation summary to console."""
    table = Table(title="Schema Transformation Summary")
    table.add_column("Step", style="cyan")
    table.add_column("Changes", style="green", justify="right")

    for step in stats.steps:
        table.add_row(step["name"], str(step["changes"]))
    table.add_section()
    table.add_row("Paths", f"{stats.paths_before} -> {stats.paths_after}")
    table.add_row("Component Schemas", str(stats.schemas_after))
    table.add_row("Groups Written", str(len(stats.files_written)))
    if stats.files_generated:
        table.add_row("Files Generated", str(len(stats.files_generated)))

    console.print(table)

    if stats.errors:
        console.print(f"\n[red]Errors ({len(stats.errors)}):[/red]")
        for error in stats.errors[:10]:
            console.print(f"  - {error['stage']}: {error['error'][:200]}")


def setup_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(message)s",
        handlers=[RichHandler(console=console, show_path=False)],
    )


def main() -> int:
    """Main entry point."""
    parser = argparse.ArgumentParser(
        description="Transform the Kibana OpenAPI document into per-group fragments",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument(
        "-i",
        "--input",
        type=Path,
        required=True,
        help="Upstream OpenAPI document (YAML)",
    )
    parser.add_argument(
        "--config",
        type=Path,
        default=Path("config/transform_schema.yaml"),
        help="Path to configuration file",
    )
    parser.add_argument(
        "--patches",
        type=Path,
        help="Override path to the patch set file",
    )
    parser.add_argument(
        "--output-dir",
        type=Path,
        help="Override directory for group fragments",
    )
    parser.add_argument(
        "--report-dir",
        type=Path,
        help="Override directory for reports",
    )
    parser.add_argument(
        "--generate",
        action="store_true",
        help="Run the code generator for each group",
    )
    parser.add_argument(
        "--dry-run",
        action="store_true",
        help="Run the pipeline without writing fragments",
    )
    parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        help="Log each transform step",
    )

    args = parser.parse_args()
    setup_logging(args.verbose)

    config = load_config(args.config)

    output_dir = args.output_dir or Path(config["paths"]["output"])
    report_dir = args.report_dir or Path(config["paths"]["reports"])
    patches_path = args.patches or Path(config["paths"]["patches"])
    report_path = report_dir / "transform-report.json"
    indent = config.get("output", {}).get("json_indent", 2)

    console.print("[bold blue]Kibana OpenAPI Schema Transformation[/bold blue]")
    console.print(f"  Input:  {args.input}")
    console.print(f"  Output: {output_dir}")

    stats = TransformStats(input_file=str(args.input))

    try:
        spec = load_schema(args.input)
    except (OSError, yaml.YAMLError, DocumentError) as e:
        console.print(f"[red]Failed to load {args.input}: {e}[/red]")
        return 1

    stats.paths_before = len(spec.get("paths", {}))

    try:
        patcher = SchemaPatcher(patches_path)
        steps = build_pipeline(config, patcher)
        spec = run_pipeline(spec, steps, stats)
    except (SchemaTransformError, PatchError) as e:
        console.print(f"[red]Transformation failed: {e}[/red]")
        stats.errors.append({"stage": "transform", "error": str(e)})
        generate_report(stats, report_path, indent)
        return 1

    stats.paths_after = len(spec.get("paths", {}))
    stats.schemas_after = len(spec.get("components", {}).get("schemas", {}))

    split = split_by_group(spec, load_api_groups(config.get("api_groups")))
    stats.paths_by_group = split.paths_by_group
    stats.unmatched_paths = split.unmatched

    if args.dry_run:
        console.print("\n[yellow]DRY RUN - no fragments written[/yellow]")
        for name, count in stats.paths_by_group.items():
            console.print(f"  {name}: {count} paths")
    else:
        generator = None
        if args.generate or config["generator"].get("enabled"):
            generator = GeneratorConfig.from_dict(config["generator"])
        try:
            write_fragments(split, output_dir, stats, generator)
        except GenerationError as e:
            console.print(f"[red]{e}[/red]")
            if e.output:
                console.print(e.output, markup=False, highlight=False)
            stats.errors.append({"stage": "generate", "error": str(e)})
            generate_report(stats, report_path, indent)
            return 1

    if split.misc is not None:
        if not args.dry_run:
            misc_path = output_dir / MISC_FILENAME
            save_schema(split.misc, misc_path)
            console.print(f"\n[red]Saved {misc_path} with {len(split.unmatched)} remaining paths[/red]")
        console.print("[yellow]Remaining paths:[/yellow]")
        for path in split.unmatched:
            console.print(f"  {path}")
        stats.errors.append(
            {"stage": "split", "error": f"{len(split.unmatched)} paths not claimed by any API group"},
        )

    generate_report(stats, report_path, indent)
    print_summary(stats)

    if stats.unmatched_paths:
        return 1

    console.print(
        f"\n[bold green]Wrote {len(stats.files_written)} API group fragments![/bold green]",
    )
    return 0


if __name__ == "__main__":
    sys.exit(main())
