"""Canonical Pydantic models for the version-agnostic API description (IR).

This is the single source of truth for input data shapes. The IR is able to
express every feature of both OpenAPI 3.0 and 3.1; the projectors in
:mod:`specshift.export` decide how each feature is encoded (or dropped) for
the requested target.

The models fall into three groups:

**Document structure** -- :class:`Spec`, :class:`Info`, :class:`Contact`,
:class:`License`, :class:`Server`, :class:`ServerVariable`, :class:`Tag`,
:class:`ExternalDocs` and :class:`Components`.

**Operations** -- :class:`PathItem`, :class:`Operation`, :class:`Parameter`,
:class:`RequestBody`, :class:`Response`, :class:`Header`, :class:`MediaType`,
:class:`Encoding`, :class:`Example`, :class:`Link`, :class:`Callback`,
:class:`SecurityScheme`, :class:`OAuthFlows` and :class:`OAuthFlow`.

**Schemas** -- :class:`Schema` and its helpers :class:`Kind`, :class:`Bound`,
:class:`AdditionalProperties`, :class:`Discriminator` and :class:`XML`.

**Configuration** -- :class:`OutputConfig` and :class:`GlobalConfig`, serialised
as JSON in the user's config directory by :mod:`specshift.config`.

Entities that may stand in for another node by reference carry a ``ref``
field. A node with ``ref`` set is terminal: projectors emit a bare
``{"$ref": ...}`` and never look at its other fields, which keeps the tree
acyclic without resolving anything.

Field names are snake_case; camelCase aliases (``readOnly``, ``allOf``,
``operationId``...) are accepted on input so IR documents read like
OpenAPI. The engine treats every model as read-only.
"""

from __future__ import annotations

import enum
from typing import Any, Optional, Union

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel


class IRModel(BaseModel):
    """Base class for all IR models.

    Unknown keys are rejected so that typos in hand-written IR documents
    surface as :class:`~specshift.exceptions.IRParseError` instead of being
    silently ignored.
    """

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        extra="forbid",
    )


Extensions = dict[str, Any]
"""Vendor-extension payloads keyed by ``x-`` names. Values are arbitrary JSON."""

SecurityRequirement = dict[str, list[str]]
"""Map of security scheme name to required scopes."""


# --- Schemas ---


class Kind(str, enum.Enum):
    """JSON Schema primitive type of a :class:`Schema` node."""

    NULL = "null"
    BOOLEAN = "boolean"
    INTEGER = "integer"
    NUMBER = "number"
    STRING = "string"
    OBJECT = "object"
    ARRAY = "array"


class Bound(IRModel):
    """A numeric bound with an exclusivity flag.

    OpenAPI 3.0 writes an exclusive bound as ``minimum: 5`` plus
    ``exclusiveMinimum: true``; 3.1 writes ``exclusiveMinimum: 5``.
    """

    value: Union[int, float]
    exclusive: bool = False


class Discriminator(IRModel):
    """Polymorphism hint for ``oneOf``/``anyOf``/``allOf`` compositions."""

    property_name: str
    mapping: dict[str, str] = Field(default_factory=dict)


class XML(IRModel):
    """XML serialisation hints for a schema."""

    name: Optional[str] = None
    namespace: Optional[str] = None
    prefix: Optional[str] = None
    attribute: bool = False
    wrapped: bool = False


class AdditionalProperties(IRModel):
    """Either an allow-flag or a nested schema for ``additionalProperties``.

    When both are present the nested schema wins.
    """

    allow: Optional[bool] = None
    schema_: Optional[Schema] = Field(default=None, alias="schema")


class Schema(IRModel):
    """A recursive JSON Schema node.

    ``const``, ``example`` and ``default`` use ``None`` for "unset". The
    ``examples`` list is the 3.1 style; ``example`` is the singular 3.0
    style. Both may be present.
    """

    ref: Optional[str] = Field(
        default=None, validation_alias=AliasChoices("$ref", "ref")
    )
    kind: Optional[Kind] = Field(
        default=None, validation_alias=AliasChoices("kind", "type")
    )
    nullable: bool = False
    title: Optional[str] = None
    description: Optional[str] = None
    format: Optional[str] = None
    content_encoding: Optional[str] = None
    content_media_type: Optional[str] = None
    deprecated: bool = False
    read_only: bool = False
    write_only: bool = False

    example: Any = None
    examples: list[Any] = Field(default_factory=list)
    enum: list[Any] = Field(default_factory=list)
    const: Any = None
    default: Any = None

    # Numeric
    multiple_of: Optional[Union[int, float]] = None
    minimum: Optional[Bound] = None
    maximum: Optional[Bound] = None

    # String
    pattern: Optional[str] = None
    min_length: Optional[int] = None
    max_length: Optional[int] = None

    # Array
    items: Optional[Schema] = None
    min_items: Optional[int] = None
    max_items: Optional[int] = None
    unique_items: bool = False

    # Object
    properties: dict[str, Schema] = Field(default_factory=dict)
    required: list[str] = Field(default_factory=list)
    additional_properties: Optional[AdditionalProperties] = None
    pattern_properties: dict[str, Schema] = Field(default_factory=dict)
    unevaluated_properties: Optional[Schema] = None
    min_properties: Optional[int] = None
    max_properties: Optional[int] = None

    # Composition
    all_of: list[Schema] = Field(default_factory=list)
    any_of: list[Schema] = Field(default_factory=list)
    one_of: list[Schema] = Field(default_factory=list)
    not_: Optional[Schema] = Field(default=None, alias="not")

    discriminator: Optional[Discriminator] = None
    xml: Optional[XML] = None
    extensions: Extensions = Field(default_factory=dict)

    @field_validator("minimum", "maximum", mode="before")
    @classmethod
    def _bare_number_bound(cls, value: Any) -> Any:
        """Accept ``minimum: 5`` as shorthand for ``{"value": 5}``."""
        if isinstance(value, (int, float)) and not isinstance(value, bool):
            return {"value": value}
        return value

    @field_validator("additional_properties", mode="before")
    @classmethod
    def _shorthand_additional(cls, value: Any) -> Any:
        """Accept a bare bool or a bare schema dict for ``additionalProperties``."""
        if isinstance(value, bool):
            return {"allow": value}
        if isinstance(value, dict) and not ({"allow", "schema"} & value.keys()):
            return {"schema": value}
        return value


# --- Document structure ---


class ExternalDocs(IRModel):
    """A link to external documentation."""

    url: str
    description: Optional[str] = None
    extensions: Extensions = Field(default_factory=dict)


class Contact(IRModel):
    """Contact information for the API."""

    name: Optional[str] = None
    url: Optional[str] = None
    email: Optional[str] = None
    extensions: Extensions = Field(default_factory=dict)


class License(IRModel):
    """License information.

    ``identifier`` (an SPDX expression, 3.1 only) and ``url`` are mutually
    exclusive. Setting both is a hard error when targeting 3.1.
    """

    name: str
    identifier: Optional[str] = None
    url: Optional[str] = None
    extensions: Extensions = Field(default_factory=dict)


class Info(IRModel):
    """API metadata. ``summary`` only exists in OpenAPI 3.1."""

    title: str
    version: str
    summary: Optional[str] = None
    description: Optional[str] = None
    terms_of_service: Optional[str] = None
    contact: Optional[Contact] = None
    license: Optional[License] = None
    extensions: Extensions = Field(default_factory=dict)


class ServerVariable(IRModel):
    """A substitution variable for a server URL template.

    ``enum`` is ``None`` when not declared. A declared but empty enum is
    invalid in 3.1, as is a ``default`` missing from a declared enum.
    """

    default: str
    enum: Optional[list[str]] = None
    description: Optional[str] = None
    extensions: Extensions = Field(default_factory=dict)


class Server(IRModel):
    """A server URL with optional template variables."""

    url: str
    description: Optional[str] = None
    variables: dict[str, ServerVariable] = Field(default_factory=dict)
    extensions: Extensions = Field(default_factory=dict)


class Tag(IRModel):
    """Metadata for a tag used by operations."""

    name: str
    description: Optional[str] = None
    external_docs: Optional[ExternalDocs] = None
    extensions: Extensions = Field(default_factory=dict)


# --- Operations ---


class Example(IRModel):
    """A named example value."""

    ref: Optional[str] = Field(
        default=None, validation_alias=AliasChoices("$ref", "ref")
    )
    summary: Optional[str] = None
    description: Optional[str] = None
    value: Any = None
    external_value: Optional[str] = None
    extensions: Extensions = Field(default_factory=dict)


class Encoding(IRModel):
    """Encoding of a single property in a multipart or form body."""

    content_type: Optional[str] = None
    headers: dict[str, Header] = Field(default_factory=dict)
    style: Optional[str] = None
    explode: bool = False
    allow_reserved: bool = False
    extensions: Extensions = Field(default_factory=dict)


class MediaType(IRModel):
    """Schema and examples for one content type."""

    schema_: Optional[Schema] = Field(default=None, alias="schema")
    example: Any = None
    examples: dict[str, Example] = Field(default_factory=dict)
    encoding: dict[str, Encoding] = Field(default_factory=dict)
    extensions: Extensions = Field(default_factory=dict)


class Header(IRModel):
    """A response or encoding header."""

    ref: Optional[str] = Field(
        default=None, validation_alias=AliasChoices("$ref", "ref")
    )
    description: Optional[str] = None
    required: bool = False
    deprecated: bool = False
    allow_empty_value: bool = False
    style: Optional[str] = None
    explode: bool = False
    schema_: Optional[Schema] = Field(default=None, alias="schema")
    example: Any = None
    examples: dict[str, Example] = Field(default_factory=dict)
    content: dict[str, MediaType] = Field(default_factory=dict)
    extensions: Extensions = Field(default_factory=dict)


class Parameter(IRModel):
    """A single operation parameter."""

    ref: Optional[str] = Field(
        default=None, validation_alias=AliasChoices("$ref", "ref")
    )
    name: Optional[str] = None
    in_: Optional[str] = Field(default=None, alias="in")
    description: Optional[str] = None
    required: bool = False
    deprecated: bool = False
    allow_empty_value: bool = False
    style: Optional[str] = None
    explode: bool = False
    allow_reserved: bool = False
    schema_: Optional[Schema] = Field(default=None, alias="schema")
    example: Any = None
    examples: dict[str, Example] = Field(default_factory=dict)
    content: dict[str, MediaType] = Field(default_factory=dict)
    extensions: Extensions = Field(default_factory=dict)


class RequestBody(IRModel):
    """A request body definition."""

    ref: Optional[str] = Field(
        default=None, validation_alias=AliasChoices("$ref", "ref")
    )
    description: Optional[str] = None
    required: bool = False
    content: dict[str, MediaType] = Field(default_factory=dict)
    extensions: Extensions = Field(default_factory=dict)


class Link(IRModel):
    """A design-time link from a response to another operation."""

    ref: Optional[str] = Field(
        default=None, validation_alias=AliasChoices("$ref", "ref")
    )
    operation_ref: Optional[str] = None
    operation_id: Optional[str] = None
    parameters: dict[str, Any] = Field(default_factory=dict)
    request_body: Any = None
    description: Optional[str] = None
    server: Optional[Server] = None
    extensions: Extensions = Field(default_factory=dict)


class Response(IRModel):
    """A single response of an operation."""

    ref: Optional[str] = Field(
        default=None, validation_alias=AliasChoices("$ref", "ref")
    )
    description: str = ""
    content: dict[str, MediaType] = Field(default_factory=dict)
    headers: dict[str, Header] = Field(default_factory=dict)
    links: dict[str, Link] = Field(default_factory=dict)
    extensions: Extensions = Field(default_factory=dict)


class Operation(IRModel):
    """A single API operation on a path."""

    tags: list[str] = Field(default_factory=list)
    summary: Optional[str] = None
    description: Optional[str] = None
    external_docs: Optional[ExternalDocs] = None
    operation_id: Optional[str] = None
    parameters: list[Parameter] = Field(default_factory=list)
    request_body: Optional[RequestBody] = None
    responses: dict[str, Response] = Field(default_factory=dict)
    callbacks: dict[str, Callback] = Field(default_factory=dict)
    deprecated: bool = False
    security: list[SecurityRequirement] = Field(default_factory=list)
    servers: list[Server] = Field(default_factory=list)
    extensions: Extensions = Field(default_factory=dict)


class PathItem(IRModel):
    """The operations available on a single path."""

    ref: Optional[str] = Field(
        default=None, validation_alias=AliasChoices("$ref", "ref")
    )
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
    parameters: list[Parameter] = Field(default_factory=list)
    extensions: Extensions = Field(default_factory=dict)


class Callback(IRModel):
    """A map of runtime expressions to path items invoked out of band."""

    ref: Optional[str] = Field(
        default=None, validation_alias=AliasChoices("$ref", "ref")
    )
    path_items: dict[str, PathItem] = Field(default_factory=dict)
    extensions: Extensions = Field(default_factory=dict)


# --- Security ---


class OAuthFlow(IRModel):
    """Configuration for one OAuth 2.0 flow."""

    authorization_url: Optional[str] = None
    token_url: Optional[str] = None
    refresh_url: Optional[str] = None
    scopes: dict[str, str] = Field(default_factory=dict)
    extensions: Extensions = Field(default_factory=dict)


class OAuthFlows(IRModel):
    """The OAuth 2.0 flows supported by a security scheme."""

    implicit: Optional[OAuthFlow] = None
    password: Optional[OAuthFlow] = None
    client_credentials: Optional[OAuthFlow] = None
    authorization_code: Optional[OAuthFlow] = None
    extensions: Extensions = Field(default_factory=dict)


class SecurityScheme(IRModel):
    """A security scheme.

    ``type`` is one of ``apiKey``, ``http``, ``oauth2``, ``openIdConnect`` or
    ``mutualTLS`` (3.1 only).
    """

    ref: Optional[str] = Field(
        default=None, validation_alias=AliasChoices("$ref", "ref")
    )
    type: Optional[str] = None
    description: Optional[str] = None
    name: Optional[str] = None
    in_: Optional[str] = Field(default=None, alias="in")
    scheme: Optional[str] = None
    bearer_format: Optional[str] = None
    flows: Optional[OAuthFlows] = None
    open_id_connect_url: Optional[str] = None
    extensions: Extensions = Field(default_factory=dict)


class Components(IRModel):
    """Reusable objects. ``path_items`` only exists in OpenAPI 3.1."""

    schemas: dict[str, Schema] = Field(default_factory=dict)
    responses: dict[str, Response] = Field(default_factory=dict)
    parameters: dict[str, Parameter] = Field(default_factory=dict)
    examples: dict[str, Example] = Field(default_factory=dict)
    request_bodies: dict[str, RequestBody] = Field(default_factory=dict)
    headers: dict[str, Header] = Field(default_factory=dict)
    security_schemes: dict[str, SecurityScheme] = Field(default_factory=dict)
    links: dict[str, Link] = Field(default_factory=dict)
    callbacks: dict[str, Callback] = Field(default_factory=dict)
    path_items: dict[str, PathItem] = Field(default_factory=dict)
    extensions: Extensions = Field(default_factory=dict)


class Spec(IRModel):
    """Root of the IR: a complete, version-agnostic API description.

    ``webhooks`` is a 3.1-only feature and is dropped (with a diagnostic)
    when projecting to 3.0.
    """

    info: Info
    servers: list[Server] = Field(default_factory=list)
    paths: dict[str, PathItem] = Field(default_factory=dict)
    components: Optional[Components] = None
    webhooks: dict[str, PathItem] = Field(default_factory=dict)
    tags: list[Tag] = Field(default_factory=list)
    security: list[SecurityRequirement] = Field(default_factory=list)
    external_docs: Optional[ExternalDocs] = None
    extensions: Extensions = Field(default_factory=dict)


# --- Configuration ---


class OutputConfig(BaseModel):
    """Output preferences stored in :class:`GlobalConfig`."""

    format: str = Field(
        default="auto", description="Diagnostics format: auto, json, plain, rich"
    )
    document: str = Field(
        default="json", description="Document encoding written by 'project': json, yaml"
    )


class GlobalConfig(BaseModel):
    """User-wide configuration persisted at ``~/.config/specshift/config.json``.

    Loaded and saved by :func:`~specshift.config.load_global_config` and
    :func:`~specshift.config.save_global_config`. Fields here have the
    lowest precedence and can be overridden by project config, environment
    variables, or CLI flags. See :func:`~specshift.config.resolve_config`
    for the full precedence chain.
    """

    target: str = Field(default="3.0.4", description="Default OpenAPI target version")
    strict_downlevel: bool = False
    validate_spec: bool = Field(
        default=False, description="Validate projected documents before writing"
    )
    meta_schemas: dict[str, str] = Field(
        default_factory=dict,
        description="Meta-schema file per target used by --validate",
    )
    output: OutputConfig = Field(default_factory=OutputConfig)


for _model in (
    AdditionalProperties,
    Schema,
    Encoding,
    MediaType,
    Header,
    Parameter,
    Response,
    Operation,
    PathItem,
    Callback,
    Components,
    Spec,
):
    _model.model_rebuild()
del _model
