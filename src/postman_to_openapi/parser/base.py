"""Data models for a parsed Postman collection.

The Postman parser converts collection JSON into these models; the
converter only ever reads them.
"""

from typing import Annotated, Literal, Union

from pydantic import BaseModel, Field


class Variable(BaseModel):
    """A collection (or environment) variable."""

    key: str
    value: str = ""
    disabled: bool = False


class KeyValue(BaseModel):
    """A query, header, path-variable or form entry."""

    key: str
    value: str = ""
    description: str = ""
    disabled: bool = False
    required: bool = False
    field_type: str = "text"  # text / file (form data only)


class Auth(BaseModel):
    """A Postman auth block: `bearer`, `basic`, `inherit`, `noauth`, ..."""

    type: str


class Body(BaseModel):
    mode: str  # raw / urlencoded / formdata / file / graphql
    raw: str = ""
    language: str = ""  # options.raw.language
    fields: list[KeyValue] = []


class Request(BaseModel):
    method: str = "GET"
    url: str
    query: list[KeyValue] = []
    headers: list[KeyValue] = []
    path_variables: list[KeyValue] = []
    body: Body | None = None
    auth: Auth | None = None
    description: str = ""


class RequestItem(BaseModel):
    """A leaf of the collection tree: one HTTP request."""

    kind: Literal["request"] = "request"
    name: str
    request: Request
    test_script: str = ""


class Folder(BaseModel):
    """A folder; only used for tag grouping and auth inheritance."""

    kind: Literal["folder"] = "folder"
    name: str
    description: str = ""
    auth: Auth | None = None
    items: list["Item"] = []


Item = Annotated[Union[RequestItem, Folder], Field(discriminator="kind")]

Folder.model_rebuild()


class Collection(BaseModel):
    """Root of a parsed Postman collection."""

    name: str
    description: str = ""
    items: list[Item]
    variables: list[Variable] = []
    auth: Auth | None = None
