"""Tests for the loader module."""

import json

import httpx
import pytest

from viewgen import loader
from viewgen.errors import DocumentLoadError
from viewgen.loader import get_paths, get_schemas, load_document


_DOC = {"openapi": "3.0.1", "paths": {"/widgets": {"get": {"summary": "List Widgets"}}}}


def _response(status: int, text: str, url: str) -> httpx.Response:
    return httpx.Response(status, text=text, request=httpx.Request("GET", url))


class TestLoadFromDisk:

    def test_json(self, tmp_path):
        path = tmp_path / "openapi.json"
        path.write_text(json.dumps(_DOC))
        assert load_document(path) == _DOC

    def test_yaml(self, tmp_path):
        path = tmp_path / "openapi.yaml"
        path.write_text(
            "openapi: 3.0.1\n"
            "paths:\n"
            "  /widgets:\n"
            "    get:\n"
            "      summary: List Widgets\n"
        )
        assert load_document(str(path)) == _DOC

    def test_missing_file(self, tmp_path):
        with pytest.raises(DocumentLoadError) as exc_info:
            load_document(tmp_path / "nope.json")
        assert "nope.json" in str(exc_info.value)

    def test_not_a_mapping(self, tmp_path):
        path = tmp_path / "list.json"
        path.write_text("[1, 2]")
        with pytest.raises(DocumentLoadError, match="not a mapping"):
            load_document(path)

    def test_unparseable(self, tmp_path):
        path = tmp_path / "bad.yaml"
        path.write_text("paths: [unclosed\n")
        with pytest.raises(DocumentLoadError):
            load_document(path)


class TestLoadFromUrl:

    def test_fetch(self, monkeypatch):
        url = "https://example.com/v3/api-docs"
        calls = []

        def fake_get(target, **kwargs):
            calls.append((target, kwargs))
            return _response(200, json.dumps(_DOC), target)

        monkeypatch.setattr(loader.httpx, "get", fake_get)
        assert load_document(url) == _DOC
        assert calls[0][0] == url
        assert calls[0][1]["follow_redirects"] is True

    def test_http_error(self, monkeypatch):
        url = "https://example.com/missing"
        monkeypatch.setattr(loader.httpx, "get", lambda target, **kw: _response(404, "", target))
        with pytest.raises(DocumentLoadError) as exc_info:
            load_document(url)
        assert url in str(exc_info.value)

    def test_connection_error(self, monkeypatch):
        def fail(target, **kwargs):
            raise httpx.ConnectError("refused")

        monkeypatch.setattr(loader.httpx, "get", fail)
        with pytest.raises(DocumentLoadError, match="refused"):
            load_document("http://localhost:1/openapi.json")


class TestAccessors:

    def test_paths_default(self):
        assert get_paths({}) == {}
        assert get_paths({"paths": None}) == {}

    def test_schemas(self):
        doc = {"components": {"schemas": {"User": {"type": "object"}}}}
        assert get_schemas(doc) == {"User": {"type": "object"}}

    def test_schemas_default(self):
        assert get_schemas({}) == {}
        assert get_schemas({"components": {}}) == {}
