"""Split a Postman request URL into server, path template and path params."""

import re

from pydantic import BaseModel

from .variables import VariableResolver

PATH_PARAM_PATTERNS = (
    re.compile(r"^:(\w[\w.-]*)$"),  # :id
    re.compile(r"^\{\{\s*(\w[\w.-]*)\s*\}\}$"),  # unresolved {{id}}
    re.compile(r"^\{(\w[\w.-]*)\}$"),  # {id}
)


class UrlTemplate(BaseModel):
    server: str  # "" when the URL has no host
    path_template: str  # /users/{id}
    path_params: list[str]
    group: str = ""  # leading segments folded away by path_depth


def parse_url(raw_url: str, resolver: VariableResolver, path_depth: int = 0) -> UrlTemplate:
    """Decompose a raw request URL.

    With `path_depth` N > 0 only the last N segments form the template;
    the leading ones end up in `group` and contribute no parameters.
    """
    url = resolver.resolve(raw_url).split("#", 1)[0].split("?", 1)[0].strip()
    server, path = _split_server(url)

    segments = [s for s in path.split("/") if s]
    group_segments: list[str] = []
    if path_depth and len(segments) > path_depth:
        group_segments = segments[:-path_depth]
        segments = segments[-path_depth:]

    template_segments = []
    path_params: list[str] = []
    for segment in segments:
        name = _path_param_name(segment)
        if name is None:
            template_segments.append(segment)
            continue
        template_segments.append("{" + name + "}")
        if name not in path_params:
            path_params.append(name)

    return UrlTemplate(
        server=server,
        path_template="/" + "/".join(template_segments),
        path_params=path_params,
        group=_group_key(group_segments),
    )


def _split_server(url: str) -> tuple[str, str]:
    if "://" in url:
        scheme, rest = url.split("://", 1)
        host, _, path = rest.partition("/")
        return f"{scheme}://{host}", path
    if url.startswith("/"):
        return "", url
    host, _, path = url.partition("/")
    return host, path


def _path_param_name(segment: str) -> str | None:
    for pattern in PATH_PARAM_PATTERNS:
        match = pattern.match(segment)
        if match:
            return match.group(1)
    return None


def _group_key(segments: list[str]) -> str:
    if not segments:
        return ""
    parts = []
    for segment in segments:
        name = _path_param_name(segment)
        parts.append(segment if name is None else "{" + name + "}")
    return "/" + "/".join(parts)
