"""Map Postman auth blocks onto OpenAPI security schemes.

Only HTTP `bearer` and `basic` are supported. Any other Postman auth
type is dropped with a warning. When the caller supplies its own schemes
they replace inference entirely; configured schemes with an unsupported
`scheme` are emitted but never referenced by an operation.
"""

import logging

from postman_to_openapi.openapi.models import SecurityScheme
from postman_to_openapi.parser.base import Auth

logger = logging.getLogger(__name__)

SUPPORTED_SCHEMES = ("bearer", "basic")

INHERIT = "inherit"
NO_AUTH = "noauth"


def effective_auth(chain: list[Auth | None]) -> Auth | None:
    """First auth block that is not `inherit`, innermost scope first."""
    for auth in chain:
        if auth is not None and auth.type != INHERIT:
            return auth
    return None


def inferred_scheme_name(scheme: str) -> str:
    return f"{scheme}Auth"


class SecurityMapper:
    """Collects document-level schemes while resolving per-operation security."""

    def __init__(self, configured: dict[str, SecurityScheme] | None = None):
        self.configured = configured
        self.schemes: dict[str, SecurityScheme] = dict(configured or {})

    def operation_security(self, auth: Auth | None) -> list[dict[str, list[str]]] | None:
        """Security requirement list for an operation whose effective auth is `auth`.

        `[]` means auth explicitly disabled, `None` means no `security` field.
        """
        if auth is not None and auth.type == NO_AUTH:
            return []
        if auth is not None and auth.type not in SUPPORTED_SCHEMES:
            logger.warning("Unsupported auth type %r dropped", auth.type)
            return None
        if self.configured is not None:
            return self._configured_security()
        if auth is None:
            return None

        name = inferred_scheme_name(auth.type)
        if name not in self.schemes:
            self.schemes[name] = SecurityScheme(type="http", scheme=auth.type)
        return [{name: []}]

    def _configured_security(self) -> list[dict[str, list[str]]] | None:
        security = [
            {name: []}
            for name, scheme in self.configured.items()
            if scheme.type == "http" and scheme.scheme in SUPPORTED_SCHEMES
        ]
        return security or None
