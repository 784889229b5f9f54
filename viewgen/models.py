"""Data models passed between extraction, planning and generation.

Descriptors are frozen pydantic models: built once by the extractor and
handed to templates as plain dicts via ``model_dump()``.
"""

from __future__ import annotations

from enum import Enum
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, field_validator, model_validator

from .naming import api_path_for


class PropertyDescriptor(BaseModel):
    """One field of a resolved object schema."""

    model_config = ConfigDict(frozen=True)

    name: str
    type: Optional[str] = None
    title: str = ""
    description: str = ""
    required: bool = False
    format: Optional[str] = None

    @model_validator(mode="before")
    @classmethod
    def _default_title(cls, data: Any) -> Any:
        if isinstance(data, dict) and not data.get("title"):
            data = {**data, "title": data.get("name", "")}
        return data


# Ordered by schema property order; None means "no structured body".
SchemaTable = Optional[dict[str, PropertyDescriptor]]


class EndpointDescriptor(BaseModel):
    """Normalized view of one OpenAPI path, ready for a template.

    Extra fields are allowed so a descriptor transform can attach derived
    values without subclassing.
    """

    model_config = ConfigDict(frozen=True, extra="allow")

    name: str
    path: str
    api_path: str = ""
    tags: str = ""
    methods: list[str] = []
    request_body: SchemaTable = None
    response_body: SchemaTable = None

    @field_validator("name")
    @classmethod
    def _name_not_empty(cls, value: str) -> str:
        if not value.strip():
            raise ValueError("endpoint name must not be empty")
        return value

    @field_validator("methods")
    @classmethod
    def _dedupe_methods(cls, value: list[str]) -> list[str]:
        return list(dict.fromkeys(value))

    @model_validator(mode="before")
    @classmethod
    def _derive_api_path(cls, data: Any) -> Any:
        if isinstance(data, dict) and not data.get("api_path") and "path" in data:
            data = {**data, "api_path": api_path_for(data["path"])}
        return data


class GenerationTask(BaseModel):
    model_config = ConfigDict(frozen=True)

    descriptor: EndpointDescriptor
    artifact_type: str
    template_id: str
    suffix: str
    destination_path: str


class Outcome(str, Enum):
    SUCCESS = "success"
    SKIPPED = "skipped"
    FAILED = "failed"


class GenerationResult(BaseModel):
    """Outcome of one generation task. ``reason`` is set only for failures."""

    model_config = ConfigDict(frozen=True)

    destination_path: str
    artifact_type: str
    outcome: Outcome
    reason: Optional[str] = None

    @classmethod
    def success(cls, destination_path: str, artifact_type: str) -> "GenerationResult":
        return cls(destination_path=destination_path, artifact_type=artifact_type,
                   outcome=Outcome.SUCCESS)

    @classmethod
    def skipped(cls, destination_path: str, artifact_type: str) -> "GenerationResult":
        return cls(destination_path=destination_path, artifact_type=artifact_type,
                   outcome=Outcome.SKIPPED)

    @classmethod
    def failed(cls, destination_path: str, artifact_type: str, reason: str) -> "GenerationResult":
        return cls(destination_path=destination_path, artifact_type=artifact_type,
                   outcome=Outcome.FAILED, reason=reason)

    @property
    def ok(self) -> bool:
        return self.outcome is Outcome.SUCCESS


class BatchDecision(str, Enum):
    OVERWRITE_ALL = "overwrite_all"
    ABORT = "abort"


def count_outcomes(results: list[GenerationResult]) -> dict[Outcome, int]:
    """Tally results by outcome kind (every kind present, possibly zero)."""
    counts = {outcome: 0 for outcome in Outcome}
    for result in results:
        counts[result.outcome] += 1
    return counts
