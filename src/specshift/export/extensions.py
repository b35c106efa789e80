"""Vendor-extension filtering per target version.

Specification extensions are the ``x-`` prefixed fields an OpenAPI object
may carry. Keys without the prefix are dropped. OpenAPI 3.1 additionally
reserves ``x-oai-`` and ``x-oas-`` for the OpenAPI Initiative; those keys are
dropped silently rather than rejected.
"""

from __future__ import annotations

import copy
from typing import Any, Mapping, Optional

from specshift.export.target import Target

EXTENSION_PREFIX = "x-"
RESERVED_PREFIXES_31 = ("x-oai-", "x-oas-")


def is_allowed_extension(key: str, target: Target) -> bool:
    """Return ``True`` if *key* may appear as an extension in *target*."""
    if not key.startswith(EXTENSION_PREFIX):
        return False
    if target.is_feature_rich and key.startswith(RESERVED_PREFIXES_31):
        return False
    return True


def filter_extensions(
    extensions: Optional[Mapping[str, Any]], target: Target
) -> Optional[dict[str, Any]]:
    """Return the extensions of *extensions* allowed in *target*.

    Values are deep-copied so that the output tree never aliases the input.

    Returns:
        A new dict, or ``None`` when nothing survives the filter. ``None``
        (rather than ``{}``) keeps an empty extension block out of the output.
    """
    if not extensions:
        return None
    out = {
        key: copy.deepcopy(value)
        for key, value in extensions.items()
        if is_allowed_extension(key, target)
    }
    return out or None
