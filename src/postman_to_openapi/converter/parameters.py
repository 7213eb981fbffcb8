"""Turn query, header and path-variable entries into OpenAPI parameters."""

import re

from postman_to_openapi.openapi.models import Parameter
from postman_to_openapi.parser.base import KeyValue, Request

from .variables import VariableResolver

# Described elsewhere in OpenAPI (requestBody, responses, security).
IGNORED_HEADERS = {"content-type", "accept", "authorization"}

INTEGER = re.compile(r"^-?\d+$")
NUMBER = re.compile(r"^-?\d*\.\d+$")


def classify_parameters(
    request: Request, path_params: list[str], resolver: VariableResolver
) -> list[Parameter]:
    """Path parameters first, then query, then header; unique per (name, in)."""
    described = {v.key: v for v in request.path_variables}
    params = [_path_param(name, described.get(name), resolver) for name in path_params]
    params += [
        _entry_param(entry, "query", resolver) for entry in request.query if not entry.disabled
    ]
    params += [
        _entry_param(entry, "header", resolver)
        for entry in request.headers
        if not entry.disabled and entry.key.lower() not in IGNORED_HEADERS
    ]
    return dedupe(params)


def dedupe(params: list[Parameter]) -> list[Parameter]:
    """Keep the first parameter for each (name, location)."""
    seen: set[tuple[str, str]] = set()
    result = []
    for p in params:
        if p.key not in seen:
            seen.add(p.key)
            result.append(p)
    return result


def _path_param(name: str, entry: KeyValue | None, resolver: VariableResolver) -> Parameter:
    param = Parameter(name=name, location="path", required=True)
    if entry is not None:
        param.description = entry.description or None
        if entry.value:
            param.example = resolver.resolve(entry.value)
    return param


def _entry_param(entry: KeyValue, location: str, resolver: VariableResolver) -> Parameter:
    value = resolver.resolve(entry.value)
    param_type, example = guess_type(value)
    return Parameter(
        name=entry.key,
        location=location,
        required=entry.required,
        description=entry.description or None,
        schema={"type": param_type},
        example=example,
    )


def guess_type(value: str) -> tuple[str, str | int | float | bool | None]:
    """Schema type and typed example for a string value from the collection."""
    if not value:
        return "string", None
    if INTEGER.match(value):
        return "integer", int(value)
    if NUMBER.match(value):
        return "number", float(value)
    if value in ("true", "false"):
        return "boolean", value == "true"
    return "string", value
