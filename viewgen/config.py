"""Generator configuration.

Loaded from ``viewgen.yaml``:

    source: https://example.com/v3/api-docs
    output_root: src/views
    templates:
      list: templates/list.vue.j2
      form: templates/form.vue.j2
      filter: templates/filter.vue.j2
      modal: templates/modal.vue.j2
    suffixes:          # optional, per type
      list: .vue
    auxiliary_types: [filter, modal]
    permissions_path: src/permissions.json
    descriptor_transform: myproject.codegen:refactor   # optional hook

Relative paths are resolved against the directory holding the config file.
"""

from __future__ import annotations

import importlib
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Callable, Optional

import yaml

from .errors import ConfigError, MissingTemplateError
from .extractor import DescriptorTransform

CONFIG_FILENAME = "viewgen.yaml"
DEFAULT_SUFFIX = ".vue"
DEFAULT_AUXILIARY_TYPES = frozenset({"filter", "modal"})
BUILTIN_TEMPLATE_DIR = Path(__file__).parent / "templates"

# render(template_text, data) -> text. Must not touch the filesystem.
RenderFunction = Callable[[str, dict[str, Any]], str]


def builtin_templates() -> dict[str, str]:
    """Stock templates shipped with viewgen, keyed by artifact type."""
    return {
        artifact_type: str(BUILTIN_TEMPLATE_DIR / f"{artifact_type}.vue.j2")
        for artifact_type in ("list", "form", "filter", "modal")
    }


@dataclass
class GeneratorConfig:
    """Everything the planner and orchestrator need.

    ``descriptor_transform`` is a pure hook applied to each extracted
    descriptor; ``render`` defaults to the Jinja2 renderer in codegen.
    """

    output_root: str = "src/views"
    templates: dict[str, str] = field(default_factory=builtin_templates)
    suffixes: dict[str, str] = field(default_factory=dict)
    default_suffix: str = DEFAULT_SUFFIX
    auxiliary_types: frozenset[str] = DEFAULT_AUXILIARY_TYPES
    source: Optional[str] = None
    permissions_path: Optional[str] = None
    descriptor_transform: Optional[DescriptorTransform] = None
    render: Optional[RenderFunction] = None

    def template_for(self, artifact_type: str) -> str:
        try:
            return self.templates[artifact_type]
        except KeyError:
            raise MissingTemplateError(artifact_type) from None

    def suffix_for(self, artifact_type: str) -> str:
        return self.suffixes.get(artifact_type, self.default_suffix)

    def is_auxiliary(self, artifact_type: str) -> bool:
        return artifact_type in self.auxiliary_types

    def known_suffixes(self) -> list[str]:
        """Every configured suffix, longest first, for stripping from paths."""
        suffixes = {self.default_suffix, *self.suffixes.values()}
        return sorted((s for s in suffixes if s), key=len, reverse=True)

    @property
    def artifact_types(self) -> list[str]:
        return list(self.templates)


def _resolve(base: Path, value: str) -> str:
    if value.startswith(("http://", "https://")) or os.path.isabs(value):
        return value
    return str(base / value)


def _mapping(path: Path, data: dict[str, Any], key: str) -> dict[str, str]:
    value = data.get(key) or {}
    if not isinstance(value, dict):
        raise ConfigError(str(path), f"'{key}' must be a mapping")
    return {str(k): str(v) for k, v in value.items()}


def load_config(path: str | Path) -> GeneratorConfig:
    """Load a GeneratorConfig from a YAML file."""
    path = Path(path)
    try:
        with open(path, encoding="utf-8") as f:
            data = yaml.safe_load(f) or {}
    except OSError as exc:
        raise ConfigError(str(path), str(exc)) from exc
    except yaml.YAMLError as exc:
        raise ConfigError(str(path), f"not valid YAML: {exc}") from exc

    if not isinstance(data, dict):
        raise ConfigError(str(path), "top level must be a mapping")

    base = path.resolve().parent
    config = GeneratorConfig()

    if "output_root" in data:
        config.output_root = _resolve(base, str(data["output_root"]))
    if data.get("source"):
        config.source = _resolve(base, str(data["source"]))
    if data.get("permissions_path"):
        config.permissions_path = _resolve(base, str(data["permissions_path"]))

    templates = _mapping(path, data, "templates")
    if templates:
        config.templates = {t: _resolve(base, p) for t, p in templates.items()}
    config.suffixes = _mapping(path, data, "suffixes")
    if "default_suffix" in data:
        config.default_suffix = str(data["default_suffix"])

    auxiliary = data.get("auxiliary_types")
    if auxiliary is not None:
        if not isinstance(auxiliary, list):
            raise ConfigError(str(path), "'auxiliary_types' must be a list")
        config.auxiliary_types = frozenset(str(t) for t in auxiliary)

    if data.get("descriptor_transform"):
        config.descriptor_transform = import_callable(path, str(data["descriptor_transform"]))

    return config


def import_callable(path: Path, target: str) -> Callable[..., Any]:
    """Import ``package.module:function``."""
    module_name, _, attr = target.partition(":")
    if not module_name or not attr:
        raise ConfigError(str(path), f"expected 'module:function', got {target!r}")
    try:
        func = getattr(importlib.import_module(module_name), attr)
    except (ImportError, AttributeError) as exc:
        raise ConfigError(str(path), f"cannot import {target}: {exc}") from exc
    if not callable(func):
        raise ConfigError(str(path), f"{target} is not callable")
    return func


def find_config(start: str | Path = ".") -> Path | None:
    """Look for viewgen.yaml in ``start`` and its parents."""
    current = Path(start).resolve()
    for directory in (current, *current.parents):
        candidate = directory / CONFIG_FILENAME
        if candidate.is_file():
            return candidate
    return None
