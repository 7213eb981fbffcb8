"""Errors raised while turning a Postman collection into an OpenAPI document."""


class ConversionError(Exception):
    """Base class for all conversion failures."""


class MalformedInputError(ConversionError):
    """The collection (or environment) is missing fields the conversion needs.

    Fatal: the conversion aborts and no partial document is returned.
    """
