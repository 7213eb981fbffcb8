"""Postman Collection v2.0 / v2.1 parser.

Parses Postman exported JSON files (and environment files) into the
models from `parser.base`. Fields set to `null` count as absent; any
other unexpected shape raises MalformedInputError.
"""

import json
import logging
from pathlib import Path
from urllib.parse import parse_qsl

from pydantic import ValidationError

from postman_to_openapi.errors import MalformedInputError

from .base import Auth, Body, Collection, Folder, KeyValue, Request, RequestItem, Variable

logger = logging.getLogger(__name__)

REQUIRED_MARKER = "[required]"


def parse_postman(file_path: Path) -> Collection:
    """Parse a Postman Collection file into a Collection."""
    return load_collection(_read_json(file_path))


def parse_environment(file_path: Path) -> dict[str, str]:
    """Parse a Postman environment file into a {name: value} mapping."""
    return load_environment(_read_json(file_path))


def load_collection(data: dict) -> Collection:
    """Build a Collection from already decoded collection JSON."""
    if not isinstance(data, dict):
        raise MalformedInputError("Collection must be a JSON object")
    info = data.get("info")
    if not isinstance(info, dict):
        raise MalformedInputError("Collection has no 'info' section")
    if not info.get("name"):
        raise MalformedInputError("Collection 'info' has no name")
    items = data.get("item")
    if not isinstance(items, list):
        raise MalformedInputError("Collection has no 'item' list")

    variables = _dicts(data.get("variable"), "collection 'variable'")
    try:
        return Collection(
            name=info["name"],
            description=_text(info.get("description")),
            items=_parse_items(items),
            variables=[_parse_variable(v) for v in variables if v.get("key")],
            auth=_parse_auth(data.get("auth")),
        )
    except ValidationError as e:
        raise MalformedInputError(f"Collection has invalid fields: {e}") from e


def load_environment(data: dict) -> dict[str, str]:
    """Build a variable mapping from decoded environment JSON.

    Disabled values are skipped.
    """
    if not isinstance(data, dict) or not isinstance(data.get("values"), list):
        raise MalformedInputError("Environment has no 'values' list")
    return {
        v["key"]: _stringify(v.get("value"))
        for v in _dicts(data["values"], "environment 'values'")
        if v.get("key") and v.get("enabled", True)
    }


def _read_json(file_path: Path) -> dict:
    text = file_path.read_text(encoding="utf-8")
    try:
        return json.loads(text)
    except json.JSONDecodeError as e:
        raise MalformedInputError(f"{file_path} is not valid JSON: {e}") from e


def _parse_items(items: list[dict]) -> list[RequestItem | Folder]:
    """Recursively parse items (supports folders)."""
    result: list[RequestItem | Folder] = []
    for item in _dicts(items, "'item'"):
        if "item" in item:
            result.append(
                Folder(
                    name=item.get("name") or "",
                    description=_text(item.get("description")),
                    auth=_parse_auth(item.get("auth")),
                    items=_parse_items(item["item"]),
                )
            )
        elif item.get("request") is not None:
            result.append(_parse_request_item(item))
        else:
            logger.debug("Skipping item %r: neither folder nor request", item.get("name"))
    return result


def _parse_request_item(item: dict) -> RequestItem:
    name = item.get("name") or ""
    req = item["request"]
    if isinstance(req, str):
        req = {"url": req}
    req = _dict(req, f"request {name!r}")

    url = req.get("url")
    if not url:
        raise MalformedInputError(f"Request {name!r} has no URL")

    if isinstance(url, str):
        raw = url
        query = _query_from_raw(raw)
        path_variables: list[KeyValue] = []
    else:
        url = _dict(url, f"URL of request {name!r}")
        raw = url.get("raw") or _raw_from_parts(url)
        if not isinstance(raw, str):
            raise MalformedInputError(f"URL of request {name!r} must be a string, got {type(raw).__name__}")
        if url.get("query") is not None:
            query = _parse_entries(url["query"])
        else:
            query = _query_from_raw(raw)
        path_variables = _parse_entries(url.get("variable"))

    method = req.get("method") or "GET"
    if not isinstance(method, str):
        raise MalformedInputError(f"Request {name!r} has an invalid method: {method!r}")

    return RequestItem(
        name=name,
        request=Request(
            method=method.upper(),
            url=raw,
            query=query,
            headers=_parse_headers(req.get("header")),
            path_variables=path_variables,
            body=_parse_body(req.get("body")),
            auth=_parse_auth(req.get("auth")),
            description=_text(req.get("description")),
        ),
        test_script=_test_script(item.get("event")),
    )


def _raw_from_parts(url: dict) -> str:
    host = url.get("host") or ""
    if isinstance(host, list):
        host = ".".join(str(h) for h in host)
    path = url.get("path") or ""
    if isinstance(path, list):
        path = "/".join(str(p) for p in path)
    raw = str(host)
    if url.get("protocol"):
        raw = f"{url['protocol']}://{raw}"
    if url.get("port"):
        raw = f"{raw}:{url['port']}"
    if path:
        raw = f"{raw}/{str(path).lstrip('/')}"
    return raw


def _query_from_raw(raw: str) -> list[KeyValue]:
    if "?" not in raw:
        return []
    query_string = raw.split("?", 1)[1].split("#", 1)[0]
    return [KeyValue(key=k, value=v) for k, v in parse_qsl(query_string, keep_blank_values=True)]


def _parse_headers(headers: list[dict] | str | None) -> list[KeyValue]:
    # v2.0 allows the headers as one "Key: value" string
    if isinstance(headers, str):
        entries = []
        for line in headers.splitlines():
            key, sep, value = line.partition(":")
            if sep and key.strip():
                entries.append({"key": key.strip(), "value": value.strip()})
        headers = entries
    return _parse_entries(headers)


def _parse_entries(entries: list[dict] | None) -> list[KeyValue]:
    result = []
    for entry in _dicts(entries, "key/value list"):
        if not entry.get("key"):
            continue
        description = _text(entry.get("description"))
        required = bool(entry.get("required", False))
        if REQUIRED_MARKER in description.lower():
            required = True
            start = description.lower().index(REQUIRED_MARKER)
            description = (description[:start] + description[start + len(REQUIRED_MARKER):]).strip()
        value = entry.get("value")
        result.append(
            KeyValue(
                key=str(entry["key"]),
                value=_stringify(value if value is not None else entry.get("src")),
                description=description,
                disabled=bool(entry.get("disabled", False)),
                required=required,
                field_type=entry.get("type") or "text",
            )
        )
    return result


def _parse_body(body: dict | None) -> Body | None:
    if not body:
        return None
    body = _dict(body, "request body")
    mode = body.get("mode")
    if not mode:
        return None
    options = _dict(body.get("options"), "body options")
    raw_options = _dict(options.get("raw"), "raw body options")
    language = raw_options.get("language") or ""
    fields = _parse_entries(body.get(mode)) if mode in ("urlencoded", "formdata") else []
    raw = body.get("raw") or ""
    if not isinstance(raw, str):
        raise MalformedInputError(f"Raw body must be a string, got {type(raw).__name__}")
    return Body(mode=mode, raw=raw, language=language, fields=fields)


def _parse_auth(auth: dict | None) -> Auth | None:
    if not auth:
        return None
    auth = _dict(auth, "auth")
    if not auth.get("type"):
        return None
    return Auth(type=str(auth["type"]).lower())


def _parse_variable(var: dict) -> Variable:
    return Variable(
        key=str(var["key"]),
        value=_stringify(var.get("value")),
        disabled=bool(var.get("disabled", False)),
    )


def _test_script(events: list[dict] | None) -> str:
    lines: list[str] = []
    for event in _dicts(events, "'event'"):
        if event.get("listen") != "test":
            continue
        script = _dict(event.get("script"), "event script").get("exec") or []
        lines.extend([script] if isinstance(script, str) else [str(line) for line in script])
    return "\n".join(lines)


def _dict(value, what: str) -> dict:
    """`value` as a dict; None becomes {}."""
    if value is None:
        return {}
    if not isinstance(value, dict):
        raise MalformedInputError(f"Expected an object for {what}, got {type(value).__name__}")
    return value


def _dicts(value, what: str) -> list[dict]:
    """`value` as a list of dicts; None becomes []."""
    if value is None:
        return []
    if not isinstance(value, list) or not all(isinstance(v, dict) for v in value):
        raise MalformedInputError(f"Expected a list of objects for {what}")
    return value


def _text(value: str | dict | None) -> str:
    """Postman descriptions are either a string or {content, type}."""
    if isinstance(value, dict):
        return str(value.get("content") or "")
    return str(value) if value else ""


def _stringify(value) -> str:
    if value is None:
        return ""
    if isinstance(value, str):
        return value
    return json.dumps(value)
