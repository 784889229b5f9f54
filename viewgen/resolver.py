"""Resolve OpenAPI schemas into flat property tables.

Handles:
- $ref lookup by trailing identifier (#/components/schemas/User -> User)
- object schemas -> one PropertyDescriptor per property
- required flags from the schema's ``required`` list

Not handled:
- allOf/oneOf/anyOf composition
- transitive $ref chains: a reference is followed one hop only. A target
  that is itself a $ref is reported and treated as untyped.
"""

from __future__ import annotations

import logging
from typing import Any

from .errors import UnresolvedReferenceError
from .models import PropertyDescriptor, SchemaTable

logger = logging.getLogger(__name__)


def ref_name(ref: str) -> str:
    """Return the trailing identifier segment of a $ref."""
    return ref.rstrip("/").split("/")[-1]


def dereference(schema: dict[str, Any], registry: dict[str, Any]) -> dict[str, Any]:
    """Follow a single $ref, if present. Raises UnresolvedReferenceError."""
    ref = schema.get("$ref")
    if ref is None:
        return schema

    name = ref_name(ref)
    if name not in registry:
        raise UnresolvedReferenceError(ref)

    target = registry[name]
    if isinstance(target, dict) and "$ref" in target:
        logger.warning(
            "Schema %s points at another reference %s; only one hop is followed",
            ref, target["$ref"],
        )
    return target


def _build_property(name: str, schema: dict[str, Any], required: bool) -> PropertyDescriptor:
    return PropertyDescriptor(
        name=name,
        type=schema.get("type"),
        title=schema.get("title") or name,
        description=schema.get("description") or "",
        required=required,
        format=schema.get("format"),
    )


def build_table(schema: Any) -> SchemaTable:
    """Flatten an already-dereferenced schema. Non-object schemas give None."""
    if not isinstance(schema, dict) or schema.get("type") != "object":
        return None

    required_fields = set(schema.get("required") or [])
    table: dict[str, PropertyDescriptor] = {}
    for prop_name, prop_schema in (schema.get("properties") or {}).items():
        table[prop_name] = _build_property(
            prop_name, prop_schema or {}, prop_name in required_fields,
        )
    return table


def resolve(
    schema: dict[str, Any] | None,
    registry: dict[str, Any],
    cache: SchemaCache | None = None,
) -> SchemaTable:
    """Resolve a schema (possibly a $ref) against the schema registry."""
    if not schema:
        return None

    ref = schema.get("$ref")
    if ref is not None and cache is not None:
        return cache.get_or_build(ref, registry)

    return build_table(dereference(schema, registry))


class SchemaCache:
    """Per-document memo of resolved $ref tables.

    Each lookup returns a fresh dict so callers never share a table.
    """

    def __init__(self) -> None:
        self._tables: dict[str, SchemaTable] = {}

    def get_or_build(self, ref: str, registry: dict[str, Any]) -> SchemaTable:
        name = ref_name(ref)
        if name not in self._tables:
            self._tables[name] = build_table(dereference({"$ref": ref}, registry))
        table = self._tables[name]
        return dict(table) if table is not None else None
