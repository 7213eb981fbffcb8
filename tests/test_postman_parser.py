import json
from pathlib import Path

import pytest

from postman_to_openapi.errors import MalformedInputError
from postman_to_openapi.parser.base import Folder, RequestItem
from postman_to_openapi.parser.postman import (
    load_collection,
    load_environment,
    parse_environment,
    parse_postman,
)

FIXTURES = Path(__file__).parent / "fixtures"


def _collection(items: list[dict], **extra) -> dict:
    return {"info": {"name": "Test"}, "item": items, **extra}


class TestPostmanParser:
    def test_parse_collection_metadata(self):
        collection = parse_postman(FIXTURES / "sample.postman.json")
        assert collection.name == "Users API"
        assert collection.description == "User management endpoints"
        assert [v.key for v in collection.variables][:2] == ["baseUrl", "version"]

    def test_parse_folder_tree(self):
        collection = parse_postman(FIXTURES / "sample.postman.json")
        folder, health = collection.items
        assert isinstance(folder, Folder)
        assert folder.kind == "folder"
        assert len(folder.items) == 4
        assert isinstance(health, RequestItem)
        assert health.kind == "request"

    def test_parse_query_and_headers(self):
        collection = parse_postman(FIXTURES / "sample.postman.json")
        list_users = collection.items[0].items[0]
        req = list_users.request
        assert req.method == "GET"
        assert req.url == "{{baseUrl}}/users?page=1&size=20&q="
        assert [q.key for q in req.query] == ["page", "size", "q"]
        assert req.query[2].disabled is True
        trace = req.headers[0]
        assert trace.required is True
        assert trace.description == "Trace id"

    def test_only_test_scripts_are_kept(self):
        collection = parse_postman(FIXTURES / "sample.postman.json")
        list_users, create_user = collection.items[0].items[:2]
        assert list_users.test_script == ""
        assert "pm.response.to.have.status(201)" in create_user.test_script

    def test_parse_raw_body(self):
        collection = parse_postman(FIXTURES / "sample.postman.json")
        body = collection.items[0].items[1].request.body
        assert body.mode == "raw"
        assert body.language == "json"
        assert '"name": "Ada"' in body.raw

    def test_parse_path_variables(self):
        collection = parse_postman(FIXTURES / "sample.postman.json")
        get_user = collection.items[0].items[2].request
        assert get_user.path_variables[0].key == "id"
        assert get_user.path_variables[0].description == "User id"

    def test_query_from_raw_string_url(self):
        collection = load_collection(_collection([
            {"name": "Search", "request": {"method": "get", "url": "https://x.io/search?q=cat&limit=5"}},
        ]))
        req = collection.items[0].request
        assert req.method == "GET"
        assert [(q.key, q.value) for q in req.query] == [("q", "cat"), ("limit", "5")]

    def test_url_without_raw_is_rebuilt(self):
        collection = load_collection(_collection([
            {
                "name": "Ping",
                "request": {
                    "url": {"protocol": "http", "host": ["localhost"], "port": "3000", "path": ["ping"]},
                },
            },
        ]))
        assert collection.items[0].request.url == "http://localhost:3000/ping"

    def test_auth_type_normalized(self):
        collection = load_collection(_collection(
            [
                {
                    "name": "Legacy",
                    "request": {"url": "https://x.io", "auth": {"type": "basic", "basic": {"username": "u"}}},
                },
            ],
            auth={"type": "Bearer", "bearer": [{"key": "token", "value": "t0k"}]},
        ))
        assert collection.auth.type == "bearer"
        assert collection.items[0].request.auth.type == "basic"

    def test_header_string_form(self):
        collection = load_collection(_collection([
            {"name": "H", "request": {"url": "https://x.io", "header": "X-One: 1\nX-Two: two\n"}},
        ]))
        headers = collection.items[0].request.headers
        assert [(h.key, h.value) for h in headers] == [("X-One", "1"), ("X-Two", "two")]

    def test_description_object_form(self):
        collection = load_collection({
            "info": {"name": "Test", "description": {"content": "Rich text", "type": "text/markdown"}},
            "item": [{"name": "R", "request": {"url": "https://x.io"}}],
        })
        assert collection.description == "Rich text"

    def test_non_string_variable_values(self):
        collection = load_collection(_collection(
            [{"name": "R", "request": {"url": "https://x.io"}}],
            variable=[{"key": "retries", "value": 3}, {"key": "flag", "value": True}],
        ))
        assert [v.value for v in collection.variables] == ["3", "true"]


class TestMalformedCollections:
    def test_not_an_object(self):
        with pytest.raises(MalformedInputError):
            load_collection([])

    def test_missing_info(self):
        with pytest.raises(MalformedInputError, match="info"):
            load_collection({"item": []})

    def test_missing_items(self):
        with pytest.raises(MalformedInputError, match="item"):
            load_collection({"info": {"name": "Test"}})

    def test_request_without_url(self):
        with pytest.raises(MalformedInputError, match="no URL"):
            load_collection(_collection([{"name": "Broken", "request": {"method": "GET"}}]))

    def test_invalid_json_file(self, tmp_path):
        f = tmp_path / "broken.json"
        f.write_text("{not json")
        with pytest.raises(MalformedInputError, match="not valid JSON"):
            parse_postman(f)

    def test_wrong_shape_for_headers(self):
        with pytest.raises(MalformedInputError, match="list of objects"):
            load_collection(_collection([
                {"name": "H", "request": {"url": "https://x.io", "header": [1, 2]}},
            ]))

    def test_wrong_type_for_body_options(self):
        with pytest.raises(MalformedInputError, match="body options"):
            load_collection(_collection([
                {"name": "B", "request": {"url": "https://x.io", "body": {"mode": "raw", "options": "json"}}},
            ]))

    def test_non_string_raw_url(self):
        with pytest.raises(MalformedInputError, match="must be a string"):
            load_collection(_collection([
                {"name": "R", "request": {"url": {"raw": 42}}},
            ]))

    def test_invalid_field_value(self):
        with pytest.raises(MalformedInputError, match="invalid fields"):
            load_collection(_collection([{"name": ["not", "a", "name"], "item": []}]))


class TestNullFields:
    def test_null_url_parts(self):
        collection = load_collection(_collection([
            {
                "name": "Search",
                "request": {
                    "method": None,
                    "header": None,
                    "url": {"raw": "https://x.io/search?q=cat", "query": None, "variable": None},
                },
                "event": None,
            },
        ]))
        req = collection.items[0].request
        assert req.method == "GET"
        assert [(q.key, q.value) for q in req.query] == [("q", "cat")]
        assert req.headers == []
        assert req.path_variables == []
        assert collection.items[0].test_script == ""

    def test_null_body_options(self):
        collection = load_collection(_collection([
            {
                "name": "Create",
                "request": {
                    "method": "POST",
                    "url": "https://x.io/users",
                    "body": {"mode": "raw", "raw": None, "options": None},
                },
            },
        ]))
        body = collection.items[0].request.body
        assert body.language == ""
        assert body.raw == ""

    def test_null_raw_options_and_form_fields(self):
        collection = load_collection(_collection([
            {
                "name": "Form",
                "request": {
                    "url": "https://x.io/form",
                    "body": {"mode": "urlencoded", "urlencoded": None, "options": {"raw": None}},
                },
            },
        ]))
        assert collection.items[0].request.body.fields == []

    def test_null_collection_sections(self):
        collection = load_collection({
            "info": {"name": "Test", "description": None},
            "item": [
                {"name": "Folder", "item": None},
                {"name": "R", "request": {"url": "https://x.io"}, "event": [{"listen": "test", "script": None}]},
            ],
            "variable": None,
            "auth": None,
        })
        assert collection.description == ""
        assert collection.variables == []
        assert collection.auth is None
        assert collection.items[0].items == []
        assert collection.items[1].test_script == ""


class TestEnvironment:
    def test_parse_environment_skips_disabled(self):
        env = parse_environment(FIXTURES / "environment.json")
        assert env == {"baseUrl": "https://staging.example.com/v1", "version": "2.4.0-rc1"}

    def test_environment_without_values(self):
        with pytest.raises(MalformedInputError):
            load_environment({"name": "Empty"})

    def test_environment_roundtrip_from_json_text(self, tmp_path):
        f = tmp_path / "env.json"
        f.write_text(json.dumps({"values": [{"key": "port", "value": 8080}]}))
        assert parse_environment(f) == {"port": "8080"}
