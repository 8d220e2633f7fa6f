"""Hand each group fragment to an external OpenAPI code generator.

The generator is any command line tool; its arguments are rendered from
``{spec}``, ``{output}``, ``{name}`` and ``{group}`` placeholders.
"""

from __future__ import annotations

import logging
import subprocess
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

from .api_groups import ApiGroup

logger = logging.getLogger(__name__)

DEFAULT_COMMAND = [
    "datamodel-codegen",
    "--input",
    "{spec}",
    "--input-file-type",
    "openapi",
    "--output",
    "{output}",
]
DEFAULT_OUTPUT = "kibana/kbapi/models/{group}.py"


class GenerationError(Exception):
    """Raised when the generator fails for a group."""

    def __init__(self, group: str, message: str, output: str = ""):
        self.group = group
        self.output = output
        super().__init__(f"generator failed for {group}: {message}")


@dataclass
class GeneratorConfig:
    """Settings for the external generator."""

    command: list[str] = field(default_factory=lambda: list(DEFAULT_COMMAND))
    output: str = DEFAULT_OUTPUT
    keep_specs: bool = False
    timeout: int = 600

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> GeneratorConfig:
        return cls(
            command=list(data.get("command") or DEFAULT_COMMAND),
            output=data.get("output", DEFAULT_OUTPUT),
            keep_specs=bool(data.get("keep_specs", False)),
            timeout=int(data.get("timeout", 600)),
        )


def render_command(command: list[str], **values: str) -> list[str]:
    """Substitute placeholders into each argument."""
    return [arg.format(**values) for arg in command]


def run_generator(group: ApiGroup, spec_path: Path, config: GeneratorConfig) -> Path:
    """Run the generator for one group fragment.

    Args:
        group: API group the fragment belongs to.
        spec_path: Fragment written for the group.
        config: Generator settings.

    Returns:
        Path of the generated output.

    Raises:
        GenerationError: If the command is missing, times out or fails.
    """
    values = {"name": group.name.lower(), "group": group.group}
    output_path = Path(config.output.format(**values))
    output_path.parent.mkdir(parents=True, exist_ok=True)

    cmd = render_command(config.command, spec=str(spec_path), output=str(output_path), **values)
    logger.info("Generating %s: %s", group.name, " ".join(cmd))

    try:
        result = subprocess.run(
            cmd,
            capture_output=True,
            text=True,
            timeout=config.timeout,
            check=False,
        )
    except FileNotFoundError as e:
        raise GenerationError(group.name, f"command not found: {cmd[0]}") from e
    except subprocess.TimeoutExpired as e:
        raise GenerationError(group.name, f"timed out after {config.timeout} seconds") from e

    if result.returncode != 0:
        output = (result.stdout or "") + (result.stderr or "")
        raise GenerationError(group.name, f"exit code {result.returncode}", output)

    if not config.keep_specs:
        try:
            spec_path.unlink()
        except OSError as e:
            logger.warning("Failed to remove %s: %s", spec_path, e)

    return output_path
