"""Collection/environment variable resolution.

Resolution is two passes: `VariableResolver.from_scopes` collects every
scope into one flat table (later scopes win), then `resolve` substitutes
`{{name}}` placeholders. Unknown names are left in place.
"""

import logging
import re

from postman_to_openapi.parser.base import Variable

logger = logging.getLogger(__name__)

PLACEHOLDER = re.compile(r"\{\{\s*([^{}]+?)\s*\}\}")


class VariableResolver:
    """Flat symbol table over collection and environment variables."""

    def __init__(self, values: dict[str, str] | None = None):
        self.values = dict(values or {})

    @classmethod
    def from_scopes(
        cls, collection_vars: list[Variable], environment: dict[str, str] | None = None
    ) -> "VariableResolver":
        """Collect scopes lowest precedence first: collection, then environment."""
        values = {v.key: v.value for v in collection_vars if not v.disabled}
        values.update(environment or {})
        return cls(values)

    def get(self, name: str) -> str | None:
        value = self.values.get(name)
        return self.resolve(value) if value is not None else None

    def resolve(self, text: str) -> str:
        """Substitute every known `{{name}}`; unknown ones pass through literally."""
        return PLACEHOLDER.sub(self._substitute, text)

    def _substitute(self, match: re.Match) -> str:
        name = match.group(1)
        if name in self.values:
            return self.values[name]
        logger.warning("Unresolved variable {{%s}} kept as-is", name)
        return match.group(0)
