"""Diagnostic codes and the :class:`Warnings` collection.

A :class:`Warning` is informational: it never stops a projection. It records
a stable :class:`WarningCode`, the location of the affected node as a JSON
pointer (``#/info/summary``, ``#/components/schemas/Pet/properties/id``) and
a human-readable message.

Codes are plain strings grouped by a naming convention, and the category of
a warning is derived from its code's prefix:

* ``DOWNLEVEL_*`` -- a 3.1 feature was converted or dropped for a 3.0 target.
  The output is still valid, just less expressive.
* ``DEPRECATION_*`` -- a deprecated feature was used.
* ``SERVER_VARIABLE_*`` -- the input violates a validity rule that the
  target format states but that does not warrant aborting.

Example::

    result = project(spec, ProjectionConfig(target=Target.V30))
    if result.warnings.has(WarningCode.DOWNLEVEL_WEBHOOKS):
        ...
    for w in result.warnings.filter_category(WarningCategory.DOWNLEVEL):
        print(w.path, w.message)
"""

from __future__ import annotations

import enum
from collections.abc import Iterable, Iterator, Sequence
from dataclasses import dataclass
from typing import Union, overload


class WarningCategory(str, enum.Enum):
    """Groups related warning codes."""

    UNKNOWN = "unknown"
    DOWNLEVEL = "downlevel"
    DEPRECATION = "deprecation"
    VALIDITY = "validity"


_CATEGORY_PREFIXES: tuple[tuple[str, WarningCategory], ...] = (
    ("DOWNLEVEL_", WarningCategory.DOWNLEVEL),
    ("DEPRECATION_", WarningCategory.DEPRECATION),
    ("SERVER_VARIABLE_", WarningCategory.VALIDITY),
)


def category_of(code: str) -> WarningCategory:
    """Return the category implied by *code*'s prefix."""
    for prefix, category in _CATEGORY_PREFIXES:
        if code.startswith(prefix):
            return category
    return WarningCategory.UNKNOWN


class WarningCode(str, enum.Enum):
    """Stable identifiers for every diagnostic the projectors emit.

    Members compare equal to their string values, so callers may filter
    with either ``WarningCode.DOWNLEVEL_WEBHOOKS`` or ``"DOWNLEVEL_WEBHOOKS"``.
    """

    # 3.1 -> 3.0 feature losses
    DOWNLEVEL_WEBHOOKS = "DOWNLEVEL_WEBHOOKS"
    DOWNLEVEL_INFO_SUMMARY = "DOWNLEVEL_INFO_SUMMARY"
    DOWNLEVEL_LICENSE_IDENTIFIER = "DOWNLEVEL_LICENSE_IDENTIFIER"
    DOWNLEVEL_MUTUAL_TLS = "DOWNLEVEL_MUTUAL_TLS"
    DOWNLEVEL_CONST_TO_ENUM = "DOWNLEVEL_CONST_TO_ENUM"
    DOWNLEVEL_CONST_TO_ENUM_CONFLICT = "DOWNLEVEL_CONST_TO_ENUM_CONFLICT"
    DOWNLEVEL_PATH_ITEMS = "DOWNLEVEL_PATH_ITEMS"
    DOWNLEVEL_PATTERN_PROPERTIES = "DOWNLEVEL_PATTERN_PROPERTIES"
    DOWNLEVEL_UNEVALUATED_PROPERTIES = "DOWNLEVEL_UNEVALUATED_PROPERTIES"
    DOWNLEVEL_CONTENT_ENCODING = "DOWNLEVEL_CONTENT_ENCODING"
    DOWNLEVEL_CONTENT_MEDIA_TYPE = "DOWNLEVEL_CONTENT_MEDIA_TYPE"
    DOWNLEVEL_MULTIPLE_EXAMPLES = "DOWNLEVEL_MULTIPLE_EXAMPLES"

    # Deprecated feature usage
    DEPRECATION_EXAMPLE_SINGULAR = "DEPRECATION_EXAMPLE_SINGULAR"

    # 3.1 validity rules reported without aborting
    SERVER_VARIABLE_EMPTY_ENUM = "SERVER_VARIABLE_EMPTY_ENUM"
    SERVER_VARIABLE_DEFAULT_NOT_IN_ENUM = "SERVER_VARIABLE_DEFAULT_NOT_IN_ENUM"

    def __str__(self) -> str:
        return self.value

    @property
    def category(self) -> WarningCategory:
        """The category derived from this code's prefix."""
        return category_of(self.value)


CodeLike = Union[WarningCode, str]


@dataclass(frozen=True)
class Warning:  # noqa: A001
    """A single non-fatal diagnostic.

    Attributes:
        code: Stable identifier, see :class:`WarningCode`.
        path: JSON pointer to the affected node (e.g. ``#/webhooks``).
        message: Human-readable description.
    """

    code: WarningCode
    path: str
    message: str

    @property
    def category(self) -> WarningCategory:
        """The category of this warning's code."""
        return category_of(str(self.code))

    def __str__(self) -> str:
        return f"[{self.category.value}] {self.code}: {self.message}"


class Warnings(Sequence[Warning]):
    """An ordered collection of :class:`Warning` with filtering helpers.

    Filtering methods return new collections and never modify the receiver.
    Projectors append to a fresh instance per call via :meth:`append`.
    """

    def __init__(self, items: Iterable[Warning] = ()) -> None:
        self._items: list[Warning] = list(items)

    @overload
    def __getitem__(self, index: int) -> Warning: ...

    @overload
    def __getitem__(self, index: slice) -> Warnings: ...

    def __getitem__(self, index: Union[int, slice]) -> Union[Warning, Warnings]:
        if isinstance(index, slice):
            return Warnings(self._items[index])
        return self._items[index]

    def __len__(self) -> int:
        return len(self._items)

    def __iter__(self) -> Iterator[Warning]:
        return iter(self._items)

    def __eq__(self, other: object) -> bool:
        if isinstance(other, Warnings):
            return self._items == other._items
        if isinstance(other, list):
            return self._items == other
        return NotImplemented

    def __repr__(self) -> str:
        return f"Warnings({self._items!r})"

    def __str__(self) -> str:
        if not self._items:
            return "no warnings"
        lines = [f"{len(self._items)} warning(s):"]
        for i, w in enumerate(self._items, start=1):
            lines.append(f"  [{i}] {w}")
        return "\n".join(lines)

    def append(self, warning: Warning) -> None:
        """Add *warning* to the end of the collection."""
        self._items.append(warning)

    def has(self, code: CodeLike) -> bool:
        """Return ``True`` if any warning has *code*."""
        return any(w.code == code for w in self._items)

    def has_any(self, *codes: CodeLike) -> bool:
        """Return ``True`` if any warning matches any of *codes*."""
        wanted = {str(c) for c in codes}
        return any(str(w.code) in wanted for w in self._items)

    def has_category(self, category: WarningCategory) -> bool:
        """Return ``True`` if any warning belongs to *category*."""
        return any(w.category == category for w in self._items)

    def filter(self, *codes: CodeLike) -> Warnings:
        """Return the warnings whose code is one of *codes*.

        An empty *codes* argument matches nothing.
        """
        wanted = {str(c) for c in codes}
        return Warnings(w for w in self._items if str(w.code) in wanted)

    def filter_category(self, category: WarningCategory) -> Warnings:
        """Return the warnings belonging to *category*."""
        return Warnings(w for w in self._items if w.category == category)

    def exclude(self, *codes: CodeLike) -> Warnings:
        """Return the warnings whose code is NOT one of *codes*."""
        unwanted = {str(c) for c in codes}
        return Warnings(w for w in self._items if str(w.code) not in unwanted)

    def codes(self) -> list[WarningCode]:
        """Return the unique codes present, in first-seen order."""
        seen: dict[WarningCode, None] = {}
        for w in self._items:
            seen.setdefault(w.code, None)
        return list(seen)

    def counts(self) -> dict[WarningCategory, int]:
        """Return the number of warnings per category."""
        result: dict[WarningCategory, int] = {}
        for w in self._items:
            result[w.category] = result.get(w.category, 0) + 1
        return result
