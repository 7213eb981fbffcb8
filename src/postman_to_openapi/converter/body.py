"""Request body schema skeletons and responses from test assertions."""

import json
import logging
import re
from http import HTTPStatus

from postman_to_openapi.openapi.models import MediaType, RequestBody, Response
from postman_to_openapi.parser.base import Body

from .variables import VariableResolver

logger = logging.getLogger(__name__)

# Nested objects/arrays are described one level deep, no further.
MAX_SCHEMA_DEPTH = 2

RAW_MEDIA_TYPES = {
    "json": "application/json",
    "text": "text/plain",
    "xml": "application/xml",
    "html": "text/html",
    "javascript": "application/javascript",
}

FORM_MEDIA_TYPES = {
    "urlencoded": "application/x-www-form-urlencoded",
    "formdata": "multipart/form-data",
}

STATUS_PATTERNS = (
    re.compile(r"to\.have\.status\(\s*(\d{3})\s*\)"),
    re.compile(r"\.code\)?\.to\.(?:be\.)?(?:eql|equal|equals|be)\(\s*(\d{3})\s*\)"),
    re.compile(r"(?:responseCode\.code|response\.code|response\.status)\s*={2,3}\s*(\d{3})"),
)
ONE_OF_PATTERN = re.compile(r"oneOf\(\s*\[([\d\s,]+)\]\s*\)")

DEFAULT_STATUS = "200"


def infer_request_body(body: Body | None, resolver: VariableResolver) -> RequestBody | None:
    """Request body with a shallow schema, or None when there is nothing to describe."""
    if body is None:
        return None
    if body.mode == "raw":
        return _raw_body(resolver.resolve(body.raw), body.language)
    if body.mode in FORM_MEDIA_TYPES:
        return _form_body(body, resolver)
    logger.debug("Body mode %r has no request body mapping", body.mode)
    return None


def infer_schema(value, depth: int = 0) -> dict:
    """Schema skeleton guessed from a decoded JSON value."""
    if value is None:
        return {"nullable": True}
    if isinstance(value, bool):
        return {"type": "boolean"}
    if isinstance(value, (int, float)):
        return {"type": "number"}
    if isinstance(value, str):
        return {"type": "string"}
    if isinstance(value, list):
        schema: dict = {"type": "array"}
        if value and depth < MAX_SCHEMA_DEPTH:
            schema["items"] = infer_schema(value[0], depth + 1)
        return schema
    schema = {"type": "object"}
    if depth < MAX_SCHEMA_DEPTH:
        schema["properties"] = {k: infer_schema(v, depth + 1) for k, v in value.items()}
    return schema


def infer_responses(test_script: str) -> dict[str, Response]:
    """One response per distinct asserted status code, `200` when none are found."""
    codes: list[str] = []
    for line in test_script.splitlines():
        found = [(m.start(), m.group(1)) for p in STATUS_PATTERNS for m in p.finditer(line)]
        for m in ONE_OF_PATTERN.finditer(line):
            found += [(m.start(), c.strip()) for c in m.group(1).split(",") if c.strip()]
        for _, code in sorted(found):
            if code not in codes:
                codes.append(code)

    if not codes:
        codes = [DEFAULT_STATUS]
    return {code: Response(description=reason_phrase(code)) for code in codes}


def reason_phrase(code: str) -> str:
    try:
        return HTTPStatus(int(code)).phrase
    except ValueError:
        return f"Response {code}"


def _raw_body(raw: str, language: str) -> RequestBody | None:
    if not raw.strip():
        return None
    try:
        value = json.loads(raw)
    except json.JSONDecodeError:
        media_type = RAW_MEDIA_TYPES.get(language, "text/plain")
        if media_type == "application/json":
            media_type = "text/plain"
        logger.warning("Body is not valid JSON, emitting it as %s", media_type)
        return RequestBody(content={media_type: MediaType(schema={"type": "string"}, example=raw)})

    return RequestBody(
        content={"application/json": MediaType(schema=infer_schema(value), example=value)}
    )


def _form_body(body: Body, resolver: VariableResolver) -> RequestBody | None:
    properties = {}
    for field in body.fields:
        if field.disabled:
            continue
        schema = {"type": "string"}
        if field.field_type == "file":
            schema["format"] = "binary"
        if field.description:
            schema["description"] = field.description
        properties[field.key] = schema
    if not properties:
        return None

    example = {
        f.key: resolver.resolve(f.value)
        for f in body.fields
        if not f.disabled and f.field_type != "file"
    }
    media = MediaType(schema={"type": "object", "properties": properties}, example=example or None)
    return RequestBody(content={FORM_MEDIA_TYPES[body.mode]: media})
