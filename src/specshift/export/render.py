"""Render output documents as JSON or YAML bytes.

Both encodings go through :func:`to_dict`, which dumps the document with
camelCase keys, drops unset (``None``) fields and inlines each node's
vendor extensions as sibling keys (see :class:`specshift.export.types.Node`).
Key order follows field declaration order, so output is deterministic.
"""

from __future__ import annotations

import json
from typing import Any

import yaml

from specshift.export import types as oas


def to_dict(document: oas.Node) -> dict[str, Any]:
    """Return *document* as plain JSON-compatible data."""
    return document.model_dump(mode="json", by_alias=True, exclude_none=True)


def to_json(document: oas.Node) -> bytes:
    """Render *document* as UTF-8 JSON with a two-space indent."""
    text = json.dumps(to_dict(document), indent=2, ensure_ascii=False)
    return (text + "\n").encode("utf-8")


def to_yaml(document: oas.Node) -> bytes:
    """Render *document* as UTF-8 YAML, preserving key order."""
    text = yaml.safe_dump(
        to_dict(document),
        sort_keys=False,
        allow_unicode=True,
        default_flow_style=False,
    )
    return text.encode("utf-8")
