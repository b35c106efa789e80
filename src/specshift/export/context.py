"""Per-call projection state shared by the schema and document projectors.

A :class:`ProjectionContext` is created for every projection call. It owns
the diagnostics accumulator and knows the target version and strictness,
so recursive helpers only need to thread it (and a location path) through.
Nothing here is shared between calls.
"""

from __future__ import annotations

import logging
from typing import Any, Mapping, Optional

from specshift.diag import Warning, WarningCode, Warnings
from specshift.export.extensions import filter_extensions
from specshift.export.target import Target

logger = logging.getLogger(__name__)


def pointer(base: str, *segments: Any) -> str:
    """Append *segments* to the JSON pointer *base*.

    Segments are escaped per RFC 6901 (``~`` -> ``~0``, ``/`` -> ``~1``), so
    a path key such as ``/users/{id}`` stays a single segment.
    """
    parts = [base]
    for segment in segments:
        parts.append(str(segment).replace("~", "~0").replace("/", "~1"))
    return "/".join(parts)


class ProjectionContext:
    """Accumulates diagnostics for one projection.

    Args:
        target: Version being produced.
        strict_downlevel: Escalate selected down-level losses to errors.
    """

    def __init__(self, target: Target, strict_downlevel: bool = False) -> None:
        self.target = target
        self.strict_downlevel = strict_downlevel
        self.warnings = Warnings()

    def warn(self, code: WarningCode, path: str, message: str) -> None:
        """Record a diagnostic for the node at *path*."""
        logger.debug("%s at %s: %s", code, path, message)
        self.warnings.append(Warning(code=code, path=path, message=message))

    def ext(self, extensions: Optional[Mapping[str, Any]]) -> Optional[dict[str, Any]]:
        """Filter *extensions* for the current target."""
        return filter_extensions(extensions, self.target)
