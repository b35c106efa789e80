"""Helpers shared by the 3.0 and 3.1 schema projectors."""

from __future__ import annotations

from typing import Any, Optional, TypeVar

from specshift import models as ir
from specshift.export import types as oas

T = TypeVar("T")


def or_none(value: T) -> Optional[T]:
    """Return *value*, or ``None`` for empty strings, ``False`` and empty containers.

    Output fields set to ``None`` are omitted when rendered.
    """
    return value if value else None


def copy_list(values: list[Any]) -> Optional[list[Any]]:
    return list(values) if values else None


def kind_name(kind: Optional[ir.Kind]) -> Optional[str]:
    """Return the JSON Schema ``type`` keyword for *kind*."""
    return kind.value if kind is not None else None


def bound_value(bound: Optional[ir.Bound]) -> Optional[float]:
    return bound.value if bound is not None else None


def discriminator(value: Optional[ir.Discriminator]) -> Optional[oas.Discriminator]:
    if value is None:
        return None
    return oas.Discriminator(
        property_name=value.property_name,
        mapping=dict(value.mapping) or None,
    )


def xml(value: Optional[ir.XML]) -> Optional[oas.XML]:
    if value is None:
        return None
    return oas.XML(
        name=or_none(value.name),
        namespace=or_none(value.namespace),
        prefix=or_none(value.prefix),
        attribute=or_none(value.attribute),
        wrapped=or_none(value.wrapped),
    )
