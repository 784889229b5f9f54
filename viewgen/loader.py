"""Load an OpenAPI document from disk or over HTTP.

JSON and YAML are both accepted; YAML is a superset of JSON so one parser
covers both.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any

import httpx
import yaml

from .errors import DocumentLoadError

logger = logging.getLogger(__name__)

FETCH_TIMEOUT = 30.0


def _is_url(source: str) -> bool:
    return source.startswith(("http://", "https://"))


def _fetch(url: str) -> str:
    try:
        response = httpx.get(url, timeout=FETCH_TIMEOUT, follow_redirects=True)
        response.raise_for_status()
    except httpx.HTTPError as exc:
        raise DocumentLoadError(url, exc) from exc
    return response.text


def load_document(source: str | Path) -> dict[str, Any]:
    """Load the OpenAPI document from a file path or http(s) URL."""
    source = str(source)
    if _is_url(source):
        logger.info("Fetching OpenAPI document from %s", source)
        text = _fetch(source)
    else:
        try:
            text = Path(source).read_text(encoding="utf-8")
        except OSError as exc:
            raise DocumentLoadError(source, exc) from exc

    try:
        document = yaml.safe_load(text)
    except yaml.YAMLError as exc:
        raise DocumentLoadError(source, exc) from exc

    if not isinstance(document, dict):
        raise DocumentLoadError(source, "document is not a mapping")
    return document


def get_paths(document: dict[str, Any]) -> dict[str, Any]:
    """Extract the path map from the document."""
    return document.get("paths") or {}


def get_schemas(document: dict[str, Any]) -> dict[str, Any]:
    """Extract the component schema registry from the document."""
    return (document.get("components") or {}).get("schemas") or {}
