"""Project IR schemas onto the OpenAPI 3.0.4 Schema Object.

3.0 schemas are an extended subset of JSON Schema draft 4, so several IR
features have to be re-encoded or dropped:

* ``nullable`` stays a boolean keyword next to ``type``; a bare ``null``
  kind becomes ``nullable: true`` with no ``type``.
* Exclusive bounds become boolean ``exclusiveMinimum``/``exclusiveMaximum``
  flags next to the numeric ``minimum``/``maximum``.
* ``const`` becomes a single-element ``enum`` (or is dropped when an enum
  already exists).
* ``examples`` collapses to the singular ``example``.
* ``unevaluatedProperties`` and ``contentMediaType`` are dropped; a
  base64 ``contentEncoding`` becomes ``format: byte``.
* ``patternProperties`` has no 3.0 counterpart and is dropped silently.

Every lossy step is recorded on the :class:`ProjectionContext`.
"""

from __future__ import annotations

from typing import Optional, Union

from specshift import models as ir
from specshift.diag import WarningCode
from specshift.export import types as oas
from specshift.export.context import ProjectionContext, pointer
from specshift.export.schema_common import (
    bound_value,
    copy_list,
    discriminator,
    kind_name,
    or_none,
    xml,
)

_BYTE_ENCODINGS = frozenset({"base64", "base64url"})


def schema_v30(
    schema: Optional[ir.Schema], ctx: ProjectionContext, path: str
) -> Optional[oas.SchemaV30]:
    """Project *schema* (located at *path*) to a 3.0 schema node.

    Args:
        schema: IR schema, or ``None``.
        ctx: Projection state receiving diagnostics.
        path: JSON pointer of *schema* in the output document.

    Returns:
        The projected node, a bare ``$ref`` node for references, or ``None``
        when *schema* is ``None``.
    """
    if schema is None:
        return None
    if schema.ref:
        return oas.SchemaV30(ref=schema.ref)

    out = oas.SchemaV30(
        title=or_none(schema.title),
        description=or_none(schema.description),
        format=or_none(schema.format),
        deprecated=or_none(schema.deprecated),
        read_only=or_none(schema.read_only),
        write_only=or_none(schema.write_only),
        example=schema.example,
        enum=copy_list(schema.enum),
        default=schema.default,
        multiple_of=schema.multiple_of,
        pattern=or_none(schema.pattern),
        min_length=schema.min_length,
        max_length=schema.max_length,
        min_items=schema.min_items,
        max_items=schema.max_items,
        unique_items=or_none(schema.unique_items),
        required=copy_list(schema.required),
        min_properties=schema.min_properties,
        max_properties=schema.max_properties,
        discriminator=discriminator(schema.discriminator),
        xml=xml(schema.xml),
        extensions=ctx.ext(schema.extensions),
    )

    if schema.kind is ir.Kind.NULL:
        out.nullable = True
    else:
        out.type = kind_name(schema.kind)
        out.nullable = or_none(schema.nullable)

    _encoding(schema, out, ctx, path)
    _bounds(schema, out)

    if schema.items is not None:
        out.items = schema_v30(schema.items, ctx, pointer(path, "items"))
    if schema.properties:
        out.properties = {
            name: schema_v30(prop, ctx, pointer(path, "properties", name))
            for name, prop in schema.properties.items()
        }
    out.additional_properties = _additional(schema.additional_properties, ctx, path)

    if schema.all_of:
        out.all_of = _members(schema.all_of, ctx, path, "allOf")
    if schema.any_of:
        out.any_of = _members(schema.any_of, ctx, path, "anyOf")
    if schema.one_of:
        out.one_of = _members(schema.one_of, ctx, path, "oneOf")
    if schema.not_ is not None:
        out.not_ = schema_v30(schema.not_, ctx, pointer(path, "not"))

    _const(schema, out, ctx, path)

    if schema.unevaluated_properties is not None:
        ctx.warn(
            WarningCode.DOWNLEVEL_UNEVALUATED_PROPERTIES,
            path,
            "unevaluatedProperties not supported in OpenAPI 3.0; dropped",
        )

    if schema.examples:
        out.example = schema.examples[0]
        if len(schema.examples) > 1:
            ctx.warn(
                WarningCode.DOWNLEVEL_MULTIPLE_EXAMPLES,
                path,
                "multiple examples not supported in OpenAPI 3.0; using first only",
            )

    return out


def _encoding(
    schema: ir.Schema, out: oas.SchemaV30, ctx: ProjectionContext, path: str
) -> None:
    if schema.content_encoding:
        if schema.content_encoding in _BYTE_ENCODINGS:
            out.format = "byte"
        else:
            ctx.warn(
                WarningCode.DOWNLEVEL_CONTENT_ENCODING,
                path,
                f"contentEncoding {schema.content_encoding!r} not supported "
                "in OpenAPI 3.0; dropped",
            )
    if schema.content_media_type:
        ctx.warn(
            WarningCode.DOWNLEVEL_CONTENT_MEDIA_TYPE,
            path,
            "contentMediaType not supported in OpenAPI 3.0; dropped",
        )


def _bounds(schema: ir.Schema, out: oas.SchemaV30) -> None:
    out.minimum = bound_value(schema.minimum)
    if schema.minimum is not None and schema.minimum.exclusive:
        out.exclusive_minimum = True
    out.maximum = bound_value(schema.maximum)
    if schema.maximum is not None and schema.maximum.exclusive:
        out.exclusive_maximum = True


def _additional(
    value: Optional[ir.AdditionalProperties], ctx: ProjectionContext, path: str
) -> Optional[Union[bool, oas.SchemaV30]]:
    if value is None:
        return None
    if value.schema_ is not None:
        return schema_v30(value.schema_, ctx, pointer(path, "additionalProperties"))
    return value.allow


def _const(
    schema: ir.Schema, out: oas.SchemaV30, ctx: ProjectionContext, path: str
) -> None:
    if schema.const is None:
        return
    if not out.enum:
        out.enum = [schema.const]
        ctx.warn(
            WarningCode.DOWNLEVEL_CONST_TO_ENUM,
            path,
            "const keyword not supported in OpenAPI 3.0; converted to enum",
        )
    else:
        ctx.warn(
            WarningCode.DOWNLEVEL_CONST_TO_ENUM_CONFLICT,
            path,
            "const with enum under OpenAPI 3.0: kept enum, ignored const",
        )


def _members(
    members: list[ir.Schema], ctx: ProjectionContext, path: str, keyword: str
) -> list[oas.SchemaV30]:
    return [
        schema_v30(member, ctx, pointer(path, keyword, i))
        for i, member in enumerate(members)
    ]
