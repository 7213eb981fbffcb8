"""Assemble the `info` and `servers` sections.

Precedence, highest first: caller options, collection/environment
variables, built-in defaults.
"""

from postman_to_openapi.openapi.models import Contact, Info, InfoOptions, License, Server
from postman_to_openapi.parser.base import Collection

from .variables import VariableResolver

DEFAULT_VERSION = "1.0.0"

# field -> variable names that may carry it
LICENSE_VARIABLES = {
    "name": ("license.name", "licenseName"),
    "url": ("license.url", "licenseUrl"),
}
CONTACT_VARIABLES = {
    "name": ("contact.name", "contactName"),
    "url": ("contact.url", "contactUrl"),
    "email": ("contact.email", "contactEmail"),
}


def assemble_info(collection: Collection, options: InfoOptions, resolver: VariableResolver) -> Info:
    return Info(
        title=options.title or collection.name,
        description=options.description if options.description is not None else collection.description,
        version=options.version or resolver.get("version") or DEFAULT_VERSION,
        terms_of_service=options.terms_of_service,
        license=_partial(License, options.license, LICENSE_VARIABLES, resolver),
        contact=_partial(Contact, options.contact, CONTACT_VARIABLES, resolver),
    )


def assemble_servers(configured: list[Server] | None, discovered: list[str]) -> list[Server]:
    """Configured servers win outright, even an empty list."""
    if configured is not None:
        return list(configured)
    urls: list[str] = []
    for url in discovered:
        if url and url not in urls:
            urls.append(url)
    return [Server(url=url) for url in urls]


def _partial(model, configured, variables: dict, resolver: VariableResolver):
    """A configured object wins as a whole, otherwise it is built from variables.

    Unpopulated fields are left out; None if no field is populated.
    """
    fields = {}
    for field, names in variables.items():
        if configured is not None:
            value = getattr(configured, field)
        else:
            value = next((v for v in map(resolver.get, names) if v), None)
        if value:
            fields[field] = value
    return model(**fields) if fields else None
