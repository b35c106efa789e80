"""Load IR documents from a URL, local file, or stdin.

An IR document is a JSON or YAML object shaped like
:class:`~specshift.models.Spec` (snake_case or camelCase keys). This module
handles the I/O and format detection, then validates the data into the
Pydantic model.

The public functions are:

* :func:`load_document` -- Read and parse a raw document from any source.
* :func:`load_ir` -- Load a document and validate it into a ``Spec``.
"""

from __future__ import annotations

import json
import logging
import sys
from pathlib import Path
from typing import Any

import httpx
import yaml
from pydantic import ValidationError

from specshift.exceptions import IRParseError
from specshift.models import Spec

logger = logging.getLogger(__name__)


def load_ir(source: str) -> Spec:
    """Load an IR spec from URL, file path, or stdin ('-').

    Args:
        source: A URL (http/https), file path, or '-' for stdin.

    Returns:
        The validated IR spec.

    Raises:
        IRParseError: If the source cannot be loaded, parsed, or does not
            describe a valid IR spec.
    """
    data = load_document(source)
    return parse_ir(data, source=source)


def parse_ir(data: dict[str, Any], source: str = "<data>") -> Spec:
    """Validate already-parsed *data* into a :class:`Spec`.

    Raises:
        IRParseError: Listing every validation error with its location.
    """
    try:
        spec = Spec.model_validate(data)
    except ValidationError as exc:
        details = "\n".join(
            f"  {'.'.join(str(p) for p in err['loc']) or '<root>'}: {err['msg']}"
            for err in exc.errors()
        )
        raise IRParseError(
            f"Invalid IR document {source} ({exc.error_count()} error(s)):\n{details}"
        ) from exc
    logger.debug("loaded IR from %s: %d path(s)", source, len(spec.paths))
    return spec


def load_document(source: str) -> dict[str, Any]:
    """Load a raw JSON/YAML object from URL, file path, or stdin ('-').

    Raises:
        IRParseError: If the source cannot be read or parsed.
    """
    if source == "-":
        return _load_from_stdin()
    elif source.startswith(("http://", "https://")):
        return _load_from_url(source)
    else:
        return _load_from_file(source)


def _load_from_stdin() -> dict[str, Any]:
    try:
        content = sys.stdin.read()
    except OSError as exc:
        raise IRParseError(f"Failed to read from stdin: {exc}") from exc

    if not content.strip():
        raise IRParseError("No input received from stdin")

    return _parse_content(content, hint="stdin")


def _load_from_url(url: str) -> dict[str, Any]:
    """Fetch an IR document over HTTP(S), using the content type as a format hint."""
    try:
        response = httpx.get(url, timeout=30.0, follow_redirects=True)
        response.raise_for_status()
    except httpx.HTTPStatusError as exc:
        raise IRParseError(
            f"HTTP {exc.response.status_code} fetching IR from {url}"
        ) from exc
    except httpx.RequestError as exc:
        raise IRParseError(f"Failed to fetch IR from {url}: {exc}") from exc

    content_type = response.headers.get("content-type", "")
    hint = ""
    if "json" in content_type:
        hint = "json"
    elif "yaml" in content_type or "yml" in content_type:
        hint = "yaml"

    return _parse_content(response.text, hint=hint)


def _load_from_file(path: str) -> dict[str, Any]:
    """Load an IR document from disk.

    ``.json``, ``.yaml`` and ``.yml`` extensions select the parser; anything
    else falls back to content-based detection.
    """
    file_path = Path(path)
    if not file_path.is_file():
        raise IRParseError(f"IR file not found: {path}")

    try:
        content = file_path.read_text(encoding="utf-8")
    except OSError as exc:
        raise IRParseError(f"Failed to read IR file {path}: {exc}") from exc

    if not content.strip():
        raise IRParseError(f"IR file is empty: {path}")

    suffix = file_path.suffix.lower()
    hint = ""
    if suffix == ".json":
        hint = "json"
    elif suffix in (".yaml", ".yml"):
        hint = "yaml"

    return _parse_content(content, hint=hint)


def _parse_content(content: str, hint: str = "") -> dict[str, Any]:
    """Parse content as JSON or YAML.

    Tries JSON first (unless hint is 'yaml'), then falls back to YAML.

    Raises:
        IRParseError: If the content is not an object in either format.
    """
    json_error: Exception | None = None

    if hint != "yaml":
        try:
            result = json.loads(content)
        except json.JSONDecodeError as exc:
            if hint == "json":
                raise IRParseError(f"Invalid JSON: {exc}") from exc
            json_error = exc
        else:
            return _require_object(result)

    try:
        result = yaml.safe_load(content)
    except yaml.YAMLError as exc:
        msg = "Failed to parse IR as JSON or YAML"
        if json_error:
            msg += f"\n  JSON error: {json_error}"
        msg += f"\n  YAML error: {exc}"
        raise IRParseError(msg) from exc
    return _require_object(result)


def _require_object(result: Any) -> dict[str, Any]:
    if not isinstance(result, dict):
        kind = type(result).__name__ if result is not None else "empty document"
        raise IRParseError(f"IR must be a JSON/YAML object (got {kind})")
    return result
