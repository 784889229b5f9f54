"""Tests for the data models."""

import pytest
from pydantic import ValidationError

from viewgen.models import (
    EndpointDescriptor,
    GenerationResult,
    Outcome,
    PropertyDescriptor,
    count_outcomes,
)


class TestPropertyDescriptor:

    def test_title_defaults_to_name(self):
        assert PropertyDescriptor(name="email").title == "email"

    def test_explicit_title_kept(self):
        assert PropertyDescriptor(name="email", title="E-mail").title == "E-mail"

    def test_frozen(self):
        prop = PropertyDescriptor(name="email")
        with pytest.raises(ValidationError):
            prop.name = "other"


class TestEndpointDescriptor:

    def test_api_path_derived(self):
        assert EndpointDescriptor(name="x", path="/users/{id}").api_path == "users_{id}"

    def test_explicit_api_path_kept(self):
        assert EndpointDescriptor(name="x", path="/users/{id}", api_path="users_id").api_path == "users_id"

    def test_empty_name_rejected(self):
        with pytest.raises(ValidationError):
            EndpointDescriptor(name="  ", path="/users")

    def test_methods_deduplicated_in_order(self):
        descriptor = EndpointDescriptor(name="x", path="/a", methods=["post", "get", "post"])
        assert descriptor.methods == ["post", "get"]

    def test_extra_fields_allowed(self):
        descriptor = EndpointDescriptor(name="x", path="/a", menu="Main")
        assert descriptor.menu == "Main"
        assert descriptor.model_dump()["menu"] == "Main"

    def test_immutable(self):
        descriptor = EndpointDescriptor(name="x", path="/a")
        with pytest.raises(ValidationError):
            descriptor.name = "y"

    def test_body_tables_from_dicts(self):
        descriptor = EndpointDescriptor(
            name="x", path="/a", request_body={"id": {"name": "id", "required": True}},
        )
        assert descriptor.request_body["id"].title == "id"
        assert descriptor.response_body is None


class TestGenerationResult:

    def test_success(self):
        result = GenerationResult.success("/out/a.vue", "list")
        assert result.ok
        assert result.reason is None

    def test_skipped(self):
        result = GenerationResult.skipped("/out/a.vue", "list")
        assert result.outcome is Outcome.SKIPPED
        assert not result.ok

    def test_failed_carries_reason(self):
        result = GenerationResult.failed("/out/a.vue", "list", "boom")
        assert result.outcome is Outcome.FAILED
        assert result.reason == "boom"

    def test_count_outcomes(self):
        results = [
            GenerationResult.success("/a", "list"),
            GenerationResult.failed("/b", "list", "x"),
            GenerationResult.success("/c", "form"),
        ]
        assert count_outcomes(results) == {
            Outcome.SUCCESS: 2, Outcome.SKIPPED: 0, Outcome.FAILED: 1,
        }
