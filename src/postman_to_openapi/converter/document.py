"""Document assembler: walks the collection once and builds the OpenAPI document."""

import logging

from postman_to_openapi.errors import MalformedInputError
from postman_to_openapi.openapi.models import Components, ConversionOptions, Document, Operation
from postman_to_openapi.parser.base import Collection, Folder, RequestItem

from .body import infer_request_body, infer_responses
from .info import assemble_info, assemble_servers
from .parameters import classify_parameters
from .security import SecurityMapper, effective_auth
from .tags import TagRegistry, resolve_tags
from .url import parse_url
from .variables import VariableResolver

logger = logging.getLogger(__name__)


class PathMap:
    """Operations keyed by path template, then lower-case method.

    On a repeated (path, method) the later operation wins for every field,
    while parameters are unioned by (name, in): a parameter declared again
    keeps its position but takes the later declaration.
    """

    def __init__(self):
        self.paths: dict[str, dict[str, Operation]] = {}

    def add(self, path: str, method: str, operation: Operation) -> None:
        methods = self.paths.setdefault(path, {})
        previous = methods.get(method)
        if previous is not None:
            logger.debug("Merging duplicate operation %s %s", method.upper(), path)
            operation = merge_operations(previous, operation)
        methods[method] = operation

    def operations(self) -> list[Operation]:
        return [op for methods in self.paths.values() for op in methods.values()]


def merge_operations(previous: Operation, current: Operation) -> Operation:
    merged = {p.key: p for p in previous.parameters or []}
    for p in current.parameters or []:
        merged[p.key] = p
    params = list(merged.values())
    return current.model_copy(update={"parameters": params or None})


def convert(collection: Collection, options: ConversionOptions | None = None) -> Document:
    """Convert a parsed Postman collection into an OpenAPI document."""
    options = options or ConversionOptions()
    return _Assembler(collection, options).build()


class _Assembler:
    """State for a single conversion call."""

    def __init__(self, collection: Collection, options: ConversionOptions):
        self.collection = collection
        self.options = options
        self.resolver = VariableResolver.from_scopes(collection.variables, options.environment)
        self.security = SecurityMapper(options.auth)
        self.tags = TagRegistry()
        self.path_map = PathMap()
        self.servers: list[str] = []

    def build(self) -> Document:
        self._walk(self.collection.items, [])
        if not self.path_map.paths:
            raise MalformedInputError(f"Collection {self.collection.name!r} contains no requests")

        components = None
        if self.security.schemes:
            components = Components(security_schemes=self.security.schemes)
        return Document(
            info=assemble_info(self.collection, self.options.info, self.resolver),
            servers=assemble_servers(self.options.servers, self.servers),
            tags=self.tags.used_by(self.path_map.operations()),
            paths=self.path_map.paths,
            components=components,
        )

    def _walk(self, items: list, folders: list[Folder]) -> None:
        for item in items:
            if item.kind == "folder":
                self._walk(item.items, folders + [item])
            else:
                self._add_request(item, folders)

    def _add_request(self, item: RequestItem, folders: list[Folder]) -> None:
        request = item.request
        url = parse_url(request.url, self.resolver, self.options.path_depth)
        self.servers.append(url.server)

        tags = resolve_tags(folders, self.options.default_tag, url.group)
        for tag in tags or []:
            description = folders[0].description if folders and folders[0].name == tag else ""
            self.tags.add(tag, description)

        auth_chain = [request.auth] + [f.auth for f in reversed(folders)] + [self.collection.auth]
        parameters = classify_parameters(request, url.path_params, self.resolver)

        operation = Operation(
            summary=item.name or None,
            description=request.description or None,
            tags=tags,
            parameters=parameters or None,
            request_body=infer_request_body(request.body, self.resolver),
            responses=infer_responses(item.test_script),
            security=self.security.operation_security(effective_auth(auth_chain)),
        )
        logger.debug("%s %s -> %s", request.method, request.url, url.path_template)
        self.path_map.add(url.path_template, request.method.lower(), operation)
