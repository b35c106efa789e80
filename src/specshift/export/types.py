"""Output document trees for OpenAPI 3.0.4 and 3.1.2.

Every node is a Pydantic model whose field names map (via camelCase
aliases) onto OpenAPI keys. Objects that are identical in both versions
exist once; objects that diverge have ``V30``/``V31`` variants:
:class:`DocumentV30`/:class:`DocumentV31`, :class:`InfoV30`/:class:`InfoV31`,
:class:`LicenseV30`/:class:`LicenseV31`,
:class:`ComponentsV30`/:class:`ComponentsV31` and
:class:`SchemaV30`/:class:`SchemaV31`.

Unset fields are ``None`` and omitted when rendered. Each node also carries
an ``extensions`` map that is excluded from the normal dump and merged back
in at the same nesting level by :meth:`Node._inline_extensions`: the node is
first dumped without extensions (the default handler), then the already
filtered extension map is merged into the resulting dict. See
:mod:`specshift.export.render`.
"""

from __future__ import annotations

from typing import Any, Optional, Union

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    SerializationInfo,
    SerializerFunctionWrapHandler,
    model_serializer,
)
from pydantic.alias_generators import to_camel

Number = Union[int, float]


class Node(BaseModel):
    """Base class for every output node."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    extensions: Optional[dict[str, Any]] = Field(default=None, exclude=True)

    @model_serializer(mode="wrap")
    def _inline_extensions(self, handler: SerializerFunctionWrapHandler) -> dict[str, Any]:
        data = handler(self)
        if self.extensions:
            data.update(self.extensions)
        return data


# --- Schemas ---


class Discriminator(Node):
    property_name: str
    mapping: Optional[dict[str, str]] = None


class XML(Node):
    name: Optional[str] = None
    namespace: Optional[str] = None
    prefix: Optional[str] = None
    attribute: Optional[bool] = None
    wrapped: Optional[bool] = None


class SchemaV30(Node):
    """An OpenAPI 3.0 Schema Object (an extended subset of JSON Schema draft 4)."""

    ref: Optional[str] = Field(default=None, alias="$ref")
    title: Optional[str] = None
    type: Optional[str] = None
    format: Optional[str] = None
    description: Optional[str] = None
    example: Any = None
    deprecated: Optional[bool] = None
    read_only: Optional[bool] = None
    write_only: Optional[bool] = None
    nullable: Optional[bool] = None
    discriminator: Optional[Discriminator] = None
    xml: Optional[XML] = None
    enum: Optional[list[Any]] = None
    multiple_of: Optional[Number] = None
    maximum: Optional[Number] = None
    exclusive_maximum: Optional[bool] = None
    minimum: Optional[Number] = None
    exclusive_minimum: Optional[bool] = None
    pattern: Optional[str] = None
    max_length: Optional[int] = None
    min_length: Optional[int] = None
    items: Optional[SchemaV30] = None
    max_items: Optional[int] = None
    min_items: Optional[int] = None
    unique_items: Optional[bool] = None
    properties: Optional[dict[str, SchemaV30]] = None
    required: Optional[list[str]] = None
    additional_properties: Optional[Union[bool, SchemaV30]] = None
    max_properties: Optional[int] = None
    min_properties: Optional[int] = None
    all_of: Optional[list[SchemaV30]] = None
    any_of: Optional[list[SchemaV30]] = None
    one_of: Optional[list[SchemaV30]] = None
    not_: Optional[SchemaV30] = Field(default=None, alias="not")
    default: Any = None


class SchemaV31(Node):
    """An OpenAPI 3.1 Schema Object (JSON Schema 2020-12 plus OAS vocabulary)."""

    ref: Optional[str] = Field(default=None, alias="$ref")
    title: Optional[str] = None
    type: Optional[Union[str, list[str]]] = None
    format: Optional[str] = None
    content_encoding: Optional[str] = None
    content_media_type: Optional[str] = None
    description: Optional[str] = None
    example: Any = None
    examples: Optional[list[Any]] = None
    deprecated: Optional[bool] = None
    read_only: Optional[bool] = None
    write_only: Optional[bool] = None
    discriminator: Optional[Discriminator] = None
    xml: Optional[XML] = None
    enum: Optional[list[Any]] = None
    const: Any = None
    multiple_of: Optional[Number] = None
    maximum: Optional[Number] = None
    exclusive_maximum: Optional[Number] = None
    minimum: Optional[Number] = None
    exclusive_minimum: Optional[Number] = None
    pattern: Optional[str] = None
    max_length: Optional[int] = None
    min_length: Optional[int] = None
    items: Optional[SchemaV31] = None
    max_items: Optional[int] = None
    min_items: Optional[int] = None
    unique_items: Optional[bool] = None
    properties: Optional[dict[str, SchemaV31]] = None
    required: Optional[list[str]] = None
    additional_properties: Optional[Union[bool, SchemaV31]] = None
    pattern_properties: Optional[dict[str, SchemaV31]] = None
    unevaluated_properties: Optional[SchemaV31] = None
    all_of: Optional[list[SchemaV31]] = None
    any_of: Optional[list[SchemaV31]] = None
    one_of: Optional[list[SchemaV31]] = None
    not_: Optional[SchemaV31] = Field(default=None, alias="not")
    default: Any = None
    min_properties: Optional[int] = None
    max_properties: Optional[int] = None


AnySchema = Union[SchemaV30, SchemaV31]


# --- Info ---


class Contact(Node):
    name: Optional[str] = None
    url: Optional[str] = None
    email: Optional[str] = None


class LicenseV30(Node):
    name: str
    url: Optional[str] = None


class LicenseV31(Node):
    name: str
    identifier: Optional[str] = None
    url: Optional[str] = None


class InfoV30(Node):
    title: str
    description: Optional[str] = None
    terms_of_service: Optional[str] = None
    contact: Optional[Contact] = None
    license: Optional[LicenseV30] = None
    version: str


class InfoV31(Node):
    title: str
    summary: Optional[str] = None
    description: Optional[str] = None
    terms_of_service: Optional[str] = None
    contact: Optional[Contact] = None
    license: Optional[LicenseV31] = None
    version: str


class ServerVariable(Node):
    enum: Optional[list[str]] = None
    default: str
    description: Optional[str] = None


class Server(Node):
    url: str
    description: Optional[str] = None
    variables: Optional[dict[str, ServerVariable]] = None


class ExternalDocs(Node):
    description: Optional[str] = None
    url: str


class Tag(Node):
    name: str
    description: Optional[str] = None
    external_docs: Optional[ExternalDocs] = None


# --- Operations ---


class Example(Node):
    ref: Optional[str] = Field(default=None, alias="$ref")
    summary: Optional[str] = None
    description: Optional[str] = None
    value: Any = None
    external_value: Optional[str] = None


class Encoding(Node):
    content_type: Optional[str] = None
    headers: Optional[dict[str, Header]] = None
    style: Optional[str] = None
    explode: Optional[bool] = None
    allow_reserved: Optional[bool] = None


class MediaType(Node):
    schema_: Optional[AnySchema] = Field(default=None, alias="schema")
    example: Any = None
    examples: Optional[dict[str, Example]] = None
    encoding: Optional[dict[str, Encoding]] = None


class Header(Node):
    ref: Optional[str] = Field(default=None, alias="$ref")
    description: Optional[str] = None
    required: Optional[bool] = None
    deprecated: Optional[bool] = None
    allow_empty_value: Optional[bool] = None
    style: Optional[str] = None
    explode: Optional[bool] = None
    schema_: Optional[AnySchema] = Field(default=None, alias="schema")
    example: Any = None
    examples: Optional[dict[str, Example]] = None
    content: Optional[dict[str, MediaType]] = None


class Parameter(Node):
    ref: Optional[str] = Field(default=None, alias="$ref")
    name: Optional[str] = None
    in_: Optional[str] = Field(default=None, alias="in")
    description: Optional[str] = None
    required: Optional[bool] = None
    deprecated: Optional[bool] = None
    allow_empty_value: Optional[bool] = None
    style: Optional[str] = None
    explode: Optional[bool] = None
    allow_reserved: Optional[bool] = None
    schema_: Optional[AnySchema] = Field(default=None, alias="schema")
    example: Any = None
    examples: Optional[dict[str, Example]] = None
    content: Optional[dict[str, MediaType]] = None


class RequestBody(Node):
    ref: Optional[str] = Field(default=None, alias="$ref")
    description: Optional[str] = None
    content: Optional[dict[str, MediaType]] = None
    required: Optional[bool] = None


class Link(Node):
    ref: Optional[str] = Field(default=None, alias="$ref")
    operation_ref: Optional[str] = None
    operation_id: Optional[str] = None
    parameters: Optional[dict[str, Any]] = None
    request_body: Any = None
    description: Optional[str] = None
    server: Optional[Server] = None


class Response(Node):
    ref: Optional[str] = Field(default=None, alias="$ref")
    description: Optional[str] = None
    headers: Optional[dict[str, Header]] = None
    content: Optional[dict[str, MediaType]] = None
    links: Optional[dict[str, Link]] = None


class Operation(Node):
    tags: Optional[list[str]] = None
    summary: Optional[str] = None
    description: Optional[str] = None
    external_docs: Optional[ExternalDocs] = None
    operation_id: Optional[str] = None
    parameters: Optional[list[Parameter]] = None
    request_body: Optional[RequestBody] = None
    responses: dict[str, Response] = Field(default_factory=dict)
    callbacks: Optional[dict[str, Callback]] = None
    deprecated: Optional[bool] = None
    security: Optional[list[dict[str, list[str]]]] = None
    servers: Optional[list[Server]] = None


class PathItem(Node):
    ref: Optional[str] = Field(default=None, alias="$ref")
    summary: Optional[str] = None
    description: Optional[str] = None
    get: Optional[Operation] = None
    put: Optional[Operation] = None
    post: Optional[Operation] = None
    delete: Optional[Operation] = None
    options: Optional[Operation] = None
    head: Optional[Operation] = None
    patch: Optional[Operation] = None
    trace: Optional[Operation] = None
    parameters: Optional[list[Parameter]] = None


class Callback(Node):
    """A Callback Object.

    On the wire a callback is a flat map of runtime expressions to path
    items, so ``path_items`` is hoisted to the top level when rendered.
    """

    ref: Optional[str] = Field(default=None, alias="$ref")
    path_items: Optional[dict[str, PathItem]] = None

    @model_serializer(mode="wrap")
    def _inline_extensions(
        self, handler: SerializerFunctionWrapHandler, info: SerializationInfo
    ) -> dict[str, Any]:
        if self.ref is not None:
            out: dict[str, Any] = {"$ref": self.ref}
        else:
            out = {
                expression: item.model_dump(
                    mode=info.mode,
                    by_alias=info.by_alias,
                    exclude_none=info.exclude_none,
                )
                for expression, item in (self.path_items or {}).items()
            }
        if self.extensions:
            out.update(self.extensions)
        return out


# --- Security ---


class OAuthFlow(Node):
    authorization_url: Optional[str] = None
    token_url: Optional[str] = None
    refresh_url: Optional[str] = None
    scopes: dict[str, str] = Field(default_factory=dict)


class OAuthFlows(Node):
    implicit: Optional[OAuthFlow] = None
    password: Optional[OAuthFlow] = None
    client_credentials: Optional[OAuthFlow] = None
    authorization_code: Optional[OAuthFlow] = None


class SecurityScheme(Node):
    ref: Optional[str] = Field(default=None, alias="$ref")
    type: Optional[str] = None
    description: Optional[str] = None
    name: Optional[str] = None
    in_: Optional[str] = Field(default=None, alias="in")
    scheme: Optional[str] = None
    bearer_format: Optional[str] = None
    flows: Optional[OAuthFlows] = None
    open_id_connect_url: Optional[str] = None


# --- Components and documents ---


class ComponentsV30(Node):
    schemas: Optional[dict[str, SchemaV30]] = None
    responses: Optional[dict[str, Response]] = None
    parameters: Optional[dict[str, Parameter]] = None
    examples: Optional[dict[str, Example]] = None
    request_bodies: Optional[dict[str, RequestBody]] = None
    headers: Optional[dict[str, Header]] = None
    security_schemes: Optional[dict[str, SecurityScheme]] = None
    links: Optional[dict[str, Link]] = None
    callbacks: Optional[dict[str, Callback]] = None


class ComponentsV31(Node):
    schemas: Optional[dict[str, SchemaV31]] = None
    responses: Optional[dict[str, Response]] = None
    parameters: Optional[dict[str, Parameter]] = None
    examples: Optional[dict[str, Example]] = None
    request_bodies: Optional[dict[str, RequestBody]] = None
    headers: Optional[dict[str, Header]] = None
    security_schemes: Optional[dict[str, SecurityScheme]] = None
    links: Optional[dict[str, Link]] = None
    callbacks: Optional[dict[str, Callback]] = None
    path_items: Optional[dict[str, PathItem]] = None


class DocumentV30(Node):
    """Root of an OpenAPI 3.0.4 document. ``paths`` is required."""

    openapi: str
    info: InfoV30
    servers: Optional[list[Server]] = None
    paths: dict[str, PathItem]
    components: Optional[ComponentsV30] = None
    security: Optional[list[dict[str, list[str]]]] = None
    tags: Optional[list[Tag]] = None
    external_docs: Optional[ExternalDocs] = None


class DocumentV31(Node):
    """Root of an OpenAPI 3.1.2 document."""

    openapi: str
    json_schema_dialect: Optional[str] = None
    info: InfoV31
    servers: Optional[list[Server]] = None
    paths: Optional[dict[str, PathItem]] = None
    webhooks: Optional[dict[str, PathItem]] = None
    components: Optional[ComponentsV31] = None
    security: Optional[list[dict[str, list[str]]]] = None
    tags: Optional[list[Tag]] = None
    external_docs: Optional[ExternalDocs] = None


Document = Union[DocumentV30, DocumentV31]


for _cls in Node.__subclasses__():
    _cls.model_rebuild()
del _cls
