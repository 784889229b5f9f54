"""Compute destination paths for generated files.

Primary artifacts sit at the endpoint's base path:
  /out + /users/{id}           -> /out/users/{id}.vue

Auxiliary artifacts collocate under a sibling ``components`` directory:
  filter for /users/{id}       -> /out/users/components/users_{id}_filter.vue

Planning is pure string work: no filesystem access, same inputs give the
same path, and feeding a planned path back in as the override yields it
again.
"""

from __future__ import annotations

import posixpath

from .config import GeneratorConfig
from .models import EndpointDescriptor, GenerationTask

COMPONENTS_DIR = "components"


def strip_suffix(path: str, config: GeneratorConfig) -> str:
    """Remove a known suffix, or failing that a single trailing extension."""
    for suffix in config.known_suffixes():
        if path.endswith(suffix) and len(path) > len(suffix):
            return path[: -len(suffix)]
    root, _ext = posixpath.splitext(path)
    return root


def base_path(
    descriptor: EndpointDescriptor,
    config: GeneratorConfig,
    override_path: str | None = None,
) -> str:
    base = override_path or f"{config.output_root}{descriptor.path}"
    if len(base) > 1:
        base = base.rstrip("/")
    return strip_suffix(base, config)


def _in_components(path: str) -> bool:
    return COMPONENTS_DIR in path.split("/")


def plan(
    descriptor: EndpointDescriptor,
    artifact_type: str,
    config: GeneratorConfig,
    override_path: str | None = None,
) -> str:
    """Return the destination path for one (descriptor, artifact type) pair."""
    base = base_path(descriptor, config, override_path)
    suffix = config.suffix_for(artifact_type)

    if not config.is_auxiliary(artifact_type) or _in_components(base):
        return base + suffix

    filename = f"{descriptor.api_path}_{artifact_type}{suffix}"
    return posixpath.join(posixpath.dirname(base), COMPONENTS_DIR, filename)


def route_name(destination: str, config: GeneratorConfig) -> str:
    """Route identifier for a destination: output root and suffix removed."""
    route = destination
    root = config.output_root.rstrip("/")
    if root and route.startswith(root + "/"):
        route = route[len(root):]
    for suffix in config.known_suffixes():
        if route.endswith(suffix):
            route = route[: -len(suffix)]
            break
    return route.lstrip("/")


def build_tasks(
    descriptors: list[EndpointDescriptor],
    artifact_types: list[str],
    config: GeneratorConfig,
) -> list[GenerationTask]:
    """Cross product of descriptors x artifact types, in that order."""
    return [
        GenerationTask(
            descriptor=descriptor,
            artifact_type=artifact_type,
            template_id=config.templates.get(artifact_type, ""),
            suffix=config.suffix_for(artifact_type),
            destination_path=plan(descriptor, artifact_type, config),
        )
        for descriptor in descriptors
        for artifact_type in artifact_types
    ]
