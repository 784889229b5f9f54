"""Derive identifiers from OpenAPI paths and operations.

  /users/{id}        -> api_path "users_{id}", permission "users_id"
  /orders/items      -> api_path "orders_items"

Endpoint names fall back through the operation's own text before the path:
  summary -> description -> operationId -> last path segment
"""

from __future__ import annotations

import re
from typing import Any


def api_path_for(path: str) -> str:
    """Filesystem-safe identifier: drop the leading '/', join the rest with '_'."""
    return path[1:].replace("/", "_") if path.startswith("/") else path.replace("/", "_")


def last_segment(path: str) -> str:
    """Return the last path segment, or '' when the path ends in '/'."""
    return path.split("/")[-1]


def permission_id_for(path: str) -> str:
    """Permission identifier for a path: api_path with parameter braces removed."""
    name = re.sub(r"[{}]", "", api_path_for(path))
    name = re.sub(r"_+", "_", name)
    return name.strip("_")


def endpoint_name(operation: dict[str, Any], path: str) -> str:
    """Pick a display name for an endpoint. Never returns an empty string."""
    for key in ("summary", "description", "operationId"):
        value = operation.get(key)
        if isinstance(value, str) and value.strip():
            return value.strip()
    return last_segment(path) or api_path_for(path) or path or "/"
