"""Project IR schemas onto the OpenAPI 3.1.2 Schema Object.

3.1 schemas are full JSON Schema 2020-12, so the projection is lossless:
nullability becomes a ``[K, "null"]`` type union, exclusive bounds carry
their value in ``exclusiveMinimum``/``exclusiveMaximum``, and ``const``,
``examples``, ``contentEncoding``, ``contentMediaType``,
``patternProperties`` and ``unevaluatedProperties`` are kept natively. No
diagnostics are emitted here.
"""

from __future__ import annotations

from typing import Optional, Union

from specshift import models as ir
from specshift.export import types as oas
from specshift.export.context import ProjectionContext, pointer
from specshift.export.schema_common import (
    copy_list,
    discriminator,
    kind_name,
    or_none,
    xml,
)


def schema_v31(
    schema: Optional[ir.Schema], ctx: ProjectionContext, path: str
) -> Optional[oas.SchemaV31]:
    """Project *schema* (located at *path*) to a 3.1 schema node."""
    if schema is None:
        return None
    if schema.ref:
        return oas.SchemaV31(ref=schema.ref)

    examples = copy_list(schema.examples)
    if examples is None and schema.example is not None:
        examples = [schema.example]

    out = oas.SchemaV31(
        title=or_none(schema.title),
        type=_type(schema),
        format=or_none(schema.format),
        content_encoding=or_none(schema.content_encoding),
        content_media_type=or_none(schema.content_media_type),
        description=or_none(schema.description),
        example=schema.example,
        examples=examples,
        deprecated=or_none(schema.deprecated),
        read_only=or_none(schema.read_only),
        write_only=or_none(schema.write_only),
        discriminator=discriminator(schema.discriminator),
        xml=xml(schema.xml),
        enum=copy_list(schema.enum),
        const=schema.const,
        multiple_of=schema.multiple_of,
        pattern=or_none(schema.pattern),
        max_length=schema.max_length,
        min_length=schema.min_length,
        max_items=schema.max_items,
        min_items=schema.min_items,
        unique_items=or_none(schema.unique_items),
        required=copy_list(schema.required),
        default=schema.default,
        min_properties=schema.min_properties,
        max_properties=schema.max_properties,
        extensions=ctx.ext(schema.extensions),
    )

    if schema.minimum is not None:
        if schema.minimum.exclusive:
            out.exclusive_minimum = schema.minimum.value
        else:
            out.minimum = schema.minimum.value
    if schema.maximum is not None:
        if schema.maximum.exclusive:
            out.exclusive_maximum = schema.maximum.value
        else:
            out.maximum = schema.maximum.value

    if schema.items is not None:
        out.items = schema_v31(schema.items, ctx, pointer(path, "items"))
    if schema.properties:
        out.properties = {
            name: schema_v31(prop, ctx, pointer(path, "properties", name))
            for name, prop in schema.properties.items()
        }
    out.additional_properties = _additional(schema.additional_properties, ctx, path)
    if schema.pattern_properties:
        out.pattern_properties = {
            regex: schema_v31(prop, ctx, pointer(path, "patternProperties", regex))
            for regex, prop in schema.pattern_properties.items()
        }
    if schema.unevaluated_properties is not None:
        out.unevaluated_properties = schema_v31(
            schema.unevaluated_properties, ctx, pointer(path, "unevaluatedProperties")
        )

    if schema.all_of:
        out.all_of = _members(schema.all_of, ctx, path, "allOf")
    if schema.any_of:
        out.any_of = _members(schema.any_of, ctx, path, "anyOf")
    if schema.one_of:
        out.one_of = _members(schema.one_of, ctx, path, "oneOf")
    if schema.not_ is not None:
        out.not_ = schema_v31(schema.not_, ctx, pointer(path, "not"))

    return out


def _type(schema: ir.Schema) -> Optional[Union[str, list[str]]]:
    name = kind_name(schema.kind)
    if name is None or name == ir.Kind.NULL.value:
        return name
    if schema.nullable:
        return [name, ir.Kind.NULL.value]
    return name


def _additional(
    value: Optional[ir.AdditionalProperties], ctx: ProjectionContext, path: str
) -> Optional[Union[bool, oas.SchemaV31]]:
    if value is None:
        return None
    if value.schema_ is not None:
        return schema_v31(value.schema_, ctx, pointer(path, "additionalProperties"))
    return value.allow


def _members(
    members: list[ir.Schema], ctx: ProjectionContext, path: str, keyword: str
) -> list[oas.SchemaV31]:
    return [
        schema_v31(member, ctx, pointer(path, keyword, i))
        for i, member in enumerate(members)
    ]
