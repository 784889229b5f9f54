"""Build endpoint descriptors from an OpenAPI document.

One descriptor per path, in document order. The first operation declared
on a path is the representative one: it alone supplies the name, tags and
request/response bodies. Later methods are only listed in ``methods``.
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any, Callable, Optional

from .loader import get_paths, get_schemas
from .models import EndpointDescriptor
from .naming import api_path_for, endpoint_name, permission_id_for
from .resolver import SchemaCache, resolve

logger = logging.getLogger(__name__)

DescriptorTransform = Callable[[EndpointDescriptor], EndpointDescriptor]

HTTP_METHODS = ("get", "put", "post", "delete", "options", "head", "patch", "trace")

# Request bodies are read from JSON content, responses from the 200/wildcard slot.
_REQUEST_CONTENT_TYPE = "application/json"
_RESPONSE_STATUS = "200"
_RESPONSE_CONTENT_TYPE = "*/*"


def _operations(path_item: dict[str, Any]) -> list[tuple[str, dict[str, Any]]]:
    """Return (method, operation) pairs in document order, deduplicated."""
    seen: dict[str, dict[str, Any]] = {}
    for key, operation in path_item.items():
        method = key.lower()
        if method in HTTP_METHODS and method not in seen:
            seen[method] = operation or {}
    return list(seen.items())


def request_schema(operation: dict[str, Any]) -> dict[str, Any] | None:
    content = (operation.get("requestBody") or {}).get("content") or {}
    return (content.get(_REQUEST_CONTENT_TYPE) or {}).get("schema")


def response_schema(operation: dict[str, Any]) -> dict[str, Any] | None:
    responses = operation.get("responses") or {}
    # YAML documents may key status codes as integers.
    success = responses.get(_RESPONSE_STATUS) or responses.get(int(_RESPONSE_STATUS)) or {}
    content = success.get("content") or {}
    return (content.get(_RESPONSE_CONTENT_TYPE) or {}).get("schema")


def _warn_dropped_bodies(path: str, operations: list[tuple[str, dict[str, Any]]]) -> None:
    first_method, first_op = operations[0]
    for method, operation in operations[1:]:
        if (request_schema(operation) != request_schema(first_op)
                or response_schema(operation) != response_schema(first_op)):
            logger.warning(
                "%s: %s body differs from %s; only the %s operation is used",
                path, method.upper(), first_method.upper(), first_method.upper(),
            )


def build_descriptor(
    path: str,
    path_item: dict[str, Any],
    registry: dict[str, Any],
    cache: SchemaCache | None = None,
) -> EndpointDescriptor:
    """Build the raw descriptor for one path entry."""
    operations = _operations(path_item)
    methods = [method for method, _ in operations]
    operation = operations[0][1] if operations else {}

    if len(operations) > 1:
        _warn_dropped_bodies(path, operations)

    return EndpointDescriptor(
        name=endpoint_name(operation, path),
        path=path,
        api_path=api_path_for(path),
        tags="-".join(operation.get("tags") or []),
        methods=methods,
        request_body=resolve(request_schema(operation), registry, cache),
        response_body=resolve(response_schema(operation), registry, cache),
    )


def extract(
    document: dict[str, Any],
    transform: Optional[DescriptorTransform] = None,
    permissions_path: str | Path | None = None,
) -> list[EndpointDescriptor]:
    """Build one descriptor per documented path, in document order."""
    registry = get_schemas(document)
    cache = SchemaCache()
    descriptors: list[EndpointDescriptor] = []

    for path, path_item in get_paths(document).items():
        descriptor = build_descriptor(path, path_item or {}, registry, cache)
        if transform is not None:
            descriptor = transform(descriptor)
            if not isinstance(descriptor, EndpointDescriptor):
                raise TypeError(
                    f"descriptor transform returned {type(descriptor).__name__} "
                    f"for {path}, expected EndpointDescriptor"
                )
        descriptors.append(descriptor)

    if permissions_path is not None:
        write_permissions(document, permissions_path)

    logger.debug("Extracted %d endpoints", len(descriptors))
    return descriptors


def permission_ids(document: dict[str, Any]) -> list[str]:
    """One permission identifier per documented path."""
    return [permission_id_for(path) for path in get_paths(document)]


def write_permissions(document: dict[str, Any], output: str | Path) -> bool:
    """Write permission identifiers as a JSON array. Failures are logged only."""
    output = Path(output)
    try:
        output.parent.mkdir(parents=True, exist_ok=True)
        output.write_text(json.dumps(permission_ids(document), indent=2) + "\n",
                          encoding="utf-8")
    except OSError as exc:
        logger.warning("Could not write permission identifiers to %s: %s", output, exc)
        return False
    logger.info("Wrote permission identifiers to %s", output)
    return True


def filter_endpoints(
    descriptors: list[EndpointDescriptor], keyword: str | None,
) -> list[EndpointDescriptor]:
    """Keep descriptors whose name, path or a method contains ``keyword``."""
    if not keyword:
        return list(descriptors)
    needle = keyword.lower()
    return [
        d for d in descriptors
        if needle in d.name.lower()
        or needle in d.path.lower()
        or any(needle in m.lower() for m in d.methods)
    ]
