"""OpenAPI 3.0 document models and the conversion options.

Field names are snake_case; aliases carry the OpenAPI spelling so that
`Document.to_dict()` produces a document ready for the encoder.
"""

from typing import Any

from pydantic import BaseModel, ConfigDict, Field

OPENAPI_VERSION = "3.0.0"


class OpenApiModel(BaseModel):
    model_config = ConfigDict(populate_by_name=True)


class License(OpenApiModel):
    name: str | None = None
    url: str | None = None


class Contact(OpenApiModel):
    name: str | None = None
    url: str | None = None
    email: str | None = None


class Info(OpenApiModel):
    title: str
    description: str = ""
    version: str
    terms_of_service: str | None = Field(default=None, alias="termsOfService")
    contact: Contact | None = None
    license: License | None = None


class Server(OpenApiModel):
    url: str
    description: str | None = None


class Tag(OpenApiModel):
    name: str
    description: str | None = None


class Parameter(OpenApiModel):
    """A single operation parameter, keyed by (name, location)."""

    name: str
    location: str = Field(alias="in")  # path / query / header
    required: bool
    description: str | None = None
    schema_: dict = Field(default={"type": "string"}, alias="schema")
    example: str | int | float | bool | None = None

    @property
    def key(self) -> tuple[str, str]:
        return self.name, self.location


class MediaType(OpenApiModel):
    schema_: dict = Field(alias="schema")
    example: Any = None


class RequestBody(OpenApiModel):
    content: dict[str, MediaType]


class Response(OpenApiModel):
    description: str


class SecurityScheme(OpenApiModel):
    """An OpenAPI security scheme; unknown keys are kept verbatim."""

    model_config = ConfigDict(populate_by_name=True, extra="allow")

    type: str
    scheme: str | None = None
    bearer_format: str | None = Field(default=None, alias="bearerFormat")
    description: str | None = None


class Operation(OpenApiModel):
    summary: str | None = None
    description: str | None = None
    tags: list[str] | None = None
    parameters: list[Parameter] | None = None
    request_body: RequestBody | None = Field(default=None, alias="requestBody")
    responses: dict[str, Response]
    security: list[dict[str, list[str]]] | None = None


class Components(OpenApiModel):
    security_schemes: dict[str, SecurityScheme] = Field(alias="securitySchemes")


class Document(OpenApiModel):
    openapi: str = OPENAPI_VERSION
    info: Info
    servers: list[Server]
    tags: list[Tag] = []
    paths: dict[str, dict[str, Operation]]
    components: Components | None = None

    def to_dict(self) -> dict:
        """Plain OpenAPI structure: aliased keys, unset optionals dropped."""
        return self.model_dump(by_alias=True, exclude_none=True)


class LicenseOptions(License):
    pass


class ContactOptions(Contact):
    pass


class InfoOptions(OpenApiModel):
    title: str | None = None
    version: str | None = None
    description: str | None = None
    terms_of_service: str | None = Field(default=None, alias="termsOfService")
    license: LicenseOptions | None = None
    contact: ContactOptions | None = None


class ConversionOptions(OpenApiModel):
    """Caller configuration; every field is optional."""

    info: InfoOptions = InfoOptions()
    default_tag: str | None = Field(default=None, alias="defaultTag")
    servers: list[Server] | None = None
    auth: dict[str, SecurityScheme] | None = None
    path_depth: int = Field(default=0, ge=0, alias="pathDepth")
    environment: dict[str, str] = {}
