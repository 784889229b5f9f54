"""Render templates and write generated files.

Takes endpoint descriptors and artifact types, plans destinations,
settles conflicts with existing files, then renders and writes each file.
Batches run sequentially in descriptor x type order; a failing task is
recorded and the rest still run.
"""

from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import Any

import jinja2

from .config import GeneratorConfig
from .conflicts import ExistenceCheck, OverwriteConfirm, decide, find_conflicts, should_write
from .errors import (
    MissingTemplateError,
    RenderError,
    TemplateReadError,
    UserCancelledError,
    ViewgenError,
    WriteFailureError,
)
from .models import (
    BatchDecision,
    EndpointDescriptor,
    GenerationResult,
    GenerationTask,
)
from .planner import build_tasks, plan, route_name

logger = logging.getLogger(__name__)


def _decline(paths: list[str]) -> bool:
    return False


def render_template(template_text: str, data: dict[str, Any]) -> str:
    """Render template text with Jinja2. Undefined names are errors."""
    env = jinja2.Environment(
        keep_trailing_newline=True,
        trim_blocks=True,
        lstrip_blocks=True,
        undefined=jinja2.StrictUndefined,
    )
    return env.from_string(template_text).render(**data)


def load_template(artifact_type: str, config: GeneratorConfig, destination: str | None = None) -> str:
    """Read the template text for an artifact type.

    ``destination`` is only used to name the failing file in errors.
    """
    try:
        template_path = config.template_for(artifact_type)
    except MissingTemplateError:
        raise MissingTemplateError(artifact_type, destination=destination) from None

    try:
        return Path(template_path).read_text(encoding="utf-8")
    except (FileNotFoundError, NotADirectoryError, IsADirectoryError):
        raise MissingTemplateError(artifact_type, template_path, destination) from None
    except (OSError, UnicodeDecodeError) as exc:
        raise TemplateReadError(template_path, destination, exc) from exc


def render_payload(
    descriptor: EndpointDescriptor, artifact_type: str, destination: str, config: GeneratorConfig,
) -> dict[str, Any]:
    return {
        "api": descriptor.model_dump(),
        "route_name": route_name(destination, config),
        "artifact_type": artifact_type,
    }


def write_output(destination: str, content: str) -> None:
    """Create parent directories and replace the destination's contents."""
    output_path = Path(destination)
    try:
        output_path.parent.mkdir(parents=True, exist_ok=True)
        output_path.write_text(content, encoding="utf-8")
    except OSError as exc:
        raise WriteFailureError(destination, exc) from exc


def _render_and_write(
    descriptor: EndpointDescriptor, artifact_type: str, destination: str, config: GeneratorConfig,
) -> GenerationResult:
    template_text = load_template(artifact_type, config, destination)
    render = config.render or render_template
    data = render_payload(descriptor, artifact_type, destination, config)
    try:
        content = render(template_text, data)
    except Exception as exc:
        raise RenderError(destination, exc) from exc

    write_output(destination, content)
    logger.debug("Wrote %s (%s)", destination, artifact_type)
    return GenerationResult.success(destination, artifact_type)


def generate_one(
    descriptor: EndpointDescriptor,
    artifact_type: str,
    config: GeneratorConfig,
    override_path: str | None = None,
    exists: ExistenceCheck = os.path.exists,
    confirm_overwrite: OverwriteConfirm = _decline,
) -> GenerationResult:
    """Generate a single file. Errors propagate to the caller.

    An existing destination is only replaced when ``confirm_overwrite``
    agrees; otherwise the result is SKIPPED.
    """
    destination = plan(descriptor, artifact_type, config, override_path)

    if not should_write(destination, exists, confirm_overwrite):
        logger.info("Skipped %s: not overwriting existing file", destination)
        return GenerationResult.skipped(destination, artifact_type)

    return _render_and_write(descriptor, artifact_type, destination, config)


def _run_task(task: GenerationTask, config: GeneratorConfig) -> GenerationResult:
    try:
        return _render_and_write(
            task.descriptor, task.artifact_type, task.destination_path, config,
        )
    except ViewgenError as exc:
        logger.warning("Failed %s: %s", task.destination_path, exc)
        return GenerationResult.failed(task.destination_path, task.artifact_type, str(exc))


def generate_batch(
    descriptors: list[EndpointDescriptor],
    artifact_types: list[str],
    config: GeneratorConfig,
    exists: ExistenceCheck = os.path.exists,
    confirm_overwrite: OverwriteConfirm = _decline,
) -> list[GenerationResult]:
    """Generate every descriptor x artifact type pair.

    Raises UserCancelledError, before writing anything, when existing files
    are found and ``confirm_overwrite`` declines. Per-task failures never
    raise; they come back as FAILED results.
    """
    tasks = build_tasks(descriptors, artifact_types, config)
    destinations = [task.destination_path for task in tasks]

    conflicts = find_conflicts(destinations, exists)
    if decide(conflicts, confirm_overwrite) is BatchDecision.ABORT:
        raise UserCancelledError(conflicts)

    results = [_run_task(task, config) for task in tasks]

    failed = sum(1 for r in results if not r.ok)
    logger.info("Generated %d of %d files (%d failed)", len(results) - failed, len(results), failed)
    return results
