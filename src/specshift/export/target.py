"""OpenAPI target versions the projectors can emit."""

from __future__ import annotations

import enum

from specshift.exceptions import UnsupportedTargetError

JSON_SCHEMA_DIALECT_31 = "https://spec.openapis.org/oas/3.1/dialect/2024-11-10"
"""Default ``jsonSchemaDialect`` written into 3.1 documents."""


class Target(str, enum.Enum):
    """A target OpenAPI version.

    The value is written verbatim into the ``openapi`` field of the output
    document and handed to the validation port.
    """

    V30 = "3.0.4"
    V31 = "3.1.2"

    def __str__(self) -> str:
        return self.value

    @property
    def is_feature_rich(self) -> bool:
        """``True`` for targets that support the full 3.1 feature set."""
        return self is Target.V31


def parse_target(value: "Target | str") -> Target:
    """Parse a target identifier.

    Accepts a :class:`Target`, its full version string (``"3.0.4"``), the
    short form (``"3.0"``, ``"3.1"``) or a wildcard patch (``"3.1.x"``).

    Raises:
        UnsupportedTargetError: If *value* names no supported version.
    """
    if isinstance(value, Target):
        return value
    text = str(value).strip().lower()
    if text.startswith("v"):
        text = text[1:]
    for target in Target:
        major_minor = target.value.rsplit(".", 1)[0]
        if text in (target.value, major_minor, f"{major_minor}.x"):
            return target
    raise UnsupportedTargetError(
        f"Unsupported target version: {value!r}. "
        f"Supported: {', '.join(t.value for t in Target)} (or 3.0 / 3.1)"
    )
