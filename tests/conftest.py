"""Shared fixtures for viewgen tests.

A small OpenAPI document plus a config whose templates and output root
live under pytest's tmp_path.
"""

from __future__ import annotations

import copy
from pathlib import Path
from typing import Any

import pytest

from viewgen.config import GeneratorConfig


# ---------------------------------------------------------------------------
# Document
# ---------------------------------------------------------------------------

USER_SCHEMA: dict[str, Any] = {
    "type": "object",
    "properties": {
        "id": {"type": "integer", "format": "int64"},
        "name": {"type": "string", "title": "Full name", "description": "Display name"},
        "active": {"type": "boolean"},
    },
    "required": ["id", "name"],
}

DOCUMENT: dict[str, Any] = {
    "openapi": "3.0.1",
    "paths": {
        "/widgets": {"get": {"summary": "List Widgets"}},
        "/users/{id}": {
            "get": {
                "operationId": "getUser",
                "tags": ["users", "admin"],
                "requestBody": {
                    "content": {
                        "application/json": {"schema": {"$ref": "#/components/schemas/User"}},
                    },
                },
                "responses": {
                    "200": {
                        "content": {"*/*": {"schema": {"$ref": "#/components/schemas/User"}}},
                    },
                },
            },
            "post": {"summary": "Update user"},
        },
        "/orders": {
            "post": {
                "description": "Create order",
                "responses": {
                    "200": {
                        "content": {
                            "application/json": {"schema": {"$ref": "#/components/schemas/User"}},
                        },
                    },
                },
            },
        },
        "/misc/ping": {"parameters": [], "head": {}},
    },
    "components": {"schemas": {"User": USER_SCHEMA}},
}


@pytest.fixture
def document() -> dict[str, Any]:
    """A fresh copy of the sample document."""
    return copy.deepcopy(DOCUMENT)


# ---------------------------------------------------------------------------
# Templates and config
# ---------------------------------------------------------------------------

_TEMPLATES = {
    "list": "list {{ api.name }} -> {{ route_name }}\n",
    "form": "form {{ api.path }}\n",
    "filter": "filter {{ api.api_path }}\n",
    "modal": "modal {{ artifact_type }}\n",
}


@pytest.fixture
def template_dir(tmp_path: Path) -> Path:
    """Directory holding one tiny template per stock artifact type."""
    directory = tmp_path / "templates"
    directory.mkdir()
    for artifact_type, text in _TEMPLATES.items():
        (directory / f"{artifact_type}.j2").write_text(text)
    return directory


@pytest.fixture
def output_root(tmp_path: Path) -> Path:
    return tmp_path / "out"


@pytest.fixture
def config(template_dir: Path, output_root: Path) -> GeneratorConfig:
    return GeneratorConfig(
        output_root=str(output_root),
        templates={t: str(template_dir / f"{t}.j2") for t in _TEMPLATES},
    )
