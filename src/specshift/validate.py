"""Validation port and its jsonschema-backed adapter.

The orchestrator hands the rendered JSON document to an optional
:class:`Validator` after projection and before the YAML rendering. Any
exception the validator raises aborts the projection and is wrapped in a
:class:`~specshift.exceptions.SpecValidationError`.

:class:`JSONSchemaValidator` is the bundled adapter. By default it checks
the document against a small structural meta-schema per target (required
top-level fields, ``info`` and ``license`` shape, ``x-`` extension keys).
Callers who need full conformance can supply the official OpenAPI schemas
instead::

    validator = JSONSchemaValidator.from_files({Target.V31: "schema-3.1.json"})
    project(spec, ProjectionConfig(target=Target.V31, validator=validator))
"""

from __future__ import annotations

import json
import logging
import threading
from pathlib import Path
from typing import Any, Mapping, Optional, Protocol, Union, runtime_checkable

import jsonschema
import yaml

from specshift.export.target import Target, parse_target

logger = logging.getLogger(__name__)


@runtime_checkable
class Validator(Protocol):
    """A pluggable validator for rendered documents."""

    def validate(
        self, cancel: Optional[threading.Event], document: bytes, target: Target
    ) -> None:
        """Validate *document* (JSON bytes) as an OpenAPI *target* document.

        Args:
            cancel: Set by the caller to abandon a validation in progress.
            document: The primary (JSON) rendering of the projected document.
            target: The version the document claims to be.

        Raises:
            Exception: Any exception signals that the document is invalid or
                could not be validated.
        """
        ...


class SchemaValidationFailed(Exception):
    """The document does not satisfy the target's meta-schema.

    Attributes:
        errors: One ``"<json path>: <message>"`` entry per violation.
    """

    def __init__(self, message: str, errors: list[str]) -> None:
        super().__init__(message)
        self.errors = errors

    def __str__(self) -> str:
        lines = [self.args[0]]
        lines.extend(f"  {e}" for e in self.errors)
        return "\n".join(lines)


class ValidationCancelled(Exception):
    """The cancel event was set before validation completed."""


# --- Bundled structural meta-schemas ---

_DIALECT = "https://json-schema.org/draft/2020-12/schema"
_EXTENSIONS = {"^x-": {}}


def _closed(properties: dict[str, Any], required: list[str]) -> dict[str, Any]:
    """An object schema allowing only *properties* and ``x-`` extensions."""
    return {
        "type": "object",
        "required": required,
        "properties": properties,
        "patternProperties": _EXTENSIONS,
        "additionalProperties": False,
    }


_STRING = {"type": "string"}

_CONTACT = _closed({"name": _STRING, "url": _STRING, "email": _STRING}, [])

_SERVER = _closed(
    {
        "url": _STRING,
        "description": _STRING,
        "variables": {
            "type": "object",
            "additionalProperties": _closed(
                {
                    "enum": {"type": "array", "items": _STRING, "minItems": 1},
                    "default": _STRING,
                    "description": _STRING,
                },
                ["default"],
            ),
        },
    },
    ["url"],
)

_EXTERNAL_DOCS = _closed({"description": _STRING, "url": _STRING}, ["url"])

_TAG = _closed(
    {"name": _STRING, "description": _STRING, "externalDocs": _EXTERNAL_DOCS},
    ["name"],
)

_PATHS = {
    "type": "object",
    "patternProperties": {"^/": {"type": "object"}, **_EXTENSIONS},
    "additionalProperties": False,
}


def _root(
    openapi_pattern: str,
    info: dict[str, Any],
    extra: dict[str, Any],
    required: list[str],
) -> dict[str, Any]:
    schema = _closed(
        {
            "openapi": {"type": "string", "pattern": openapi_pattern},
            "info": info,
            "servers": {"type": "array", "items": _SERVER},
            "paths": _PATHS,
            "components": {"type": "object"},
            "security": {"type": "array", "items": {"type": "object"}},
            "tags": {"type": "array", "items": _TAG},
            "externalDocs": _EXTERNAL_DOCS,
            **extra,
        },
        required,
    )
    schema["$schema"] = _DIALECT
    return schema


META_SCHEMA_30: dict[str, Any] = _root(
    r"^3\.0\.\d+(-.+)?$",
    _closed(
        {
            "title": _STRING,
            "description": _STRING,
            "termsOfService": _STRING,
            "contact": _CONTACT,
            "license": _closed({"name": _STRING, "url": _STRING}, ["name"]),
            "version": _STRING,
        },
        ["title", "version"],
    ),
    {},
    ["openapi", "info", "paths"],
)
"""Structural meta-schema for OpenAPI 3.0 documents."""

META_SCHEMA_31: dict[str, Any] = _root(
    r"^3\.1\.\d+(-.+)?$",
    _closed(
        {
            "title": _STRING,
            "summary": _STRING,
            "description": _STRING,
            "termsOfService": _STRING,
            "contact": _CONTACT,
            "license": {
                **_closed(
                    {"name": _STRING, "identifier": _STRING, "url": _STRING},
                    ["name"],
                ),
                "not": {"required": ["identifier", "url"]},
            },
            "version": _STRING,
        },
        ["title", "version"],
    ),
    {
        "jsonSchemaDialect": _STRING,
        "webhooks": {"type": "object"},
    },
    ["openapi", "info"],
)
"""Structural meta-schema for OpenAPI 3.1 documents."""

META_SCHEMA_31["anyOf"] = [
    {"required": ["paths"]},
    {"required": ["components"]},
    {"required": ["webhooks"]},
]


class JSONSchemaValidator:
    """Validate rendered documents with the :mod:`jsonschema` library.

    The JSON Schema draft is taken from each meta-schema's ``$schema``
    keyword, so the official OpenAPI 3.0 (draft 4) and 3.1 (2020-12)
    schemas can be used as-is.

    Args:
        schemas: Meta-schemas keyed by target, replacing the bundled
            structural ones for those targets.
    """

    def __init__(
        self, schemas: Optional[Mapping[Union[Target, str], Mapping[str, Any]]] = None
    ) -> None:
        self._schemas: dict[Target, Mapping[str, Any]] = {
            Target.V30: META_SCHEMA_30,
            Target.V31: META_SCHEMA_31,
        }
        for key, schema in (schemas or {}).items():
            self._schemas[parse_target(key)] = schema

    @classmethod
    def from_files(
        cls, paths: Mapping[Union[Target, str], Union[str, Path]]
    ) -> JSONSchemaValidator:
        """Build a validator from meta-schema files (JSON or YAML)."""
        schemas = {}
        for key, path in paths.items():
            text = Path(path).read_text(encoding="utf-8")
            schemas[key] = yaml.safe_load(text)
        return cls(schemas)

    def schema_for(self, target: Union[Target, str]) -> Mapping[str, Any]:
        return self._schemas[parse_target(target)]

    def validate(
        self, cancel: Optional[threading.Event], document: bytes, target: Target
    ) -> None:
        """Validate *document* against the meta-schema for *target*.

        Raises:
            ValidationCancelled: If *cancel* is set before or during validation.
            SchemaValidationFailed: If the document is not valid JSON or
                violates the meta-schema.
        """
        if cancel is not None and cancel.is_set():
            raise ValidationCancelled("validation cancelled before start")

        target = parse_target(target)
        try:
            instance = json.loads(document)
        except ValueError as exc:
            raise SchemaValidationFailed("document is not valid JSON", [str(exc)]) from exc

        schema = self._schemas[target]
        validator_cls = jsonschema.validators.validator_for(
            schema, default=jsonschema.Draft202012Validator
        )
        validator = validator_cls(schema)

        errors: list[str] = []
        for error in validator.iter_errors(instance):
            if cancel is not None and cancel.is_set():
                raise ValidationCancelled("validation cancelled")
            errors.append(f"{error.json_path}: {error.message}")

        logger.debug("validated OpenAPI %s document: %d error(s)", target, len(errors))
        if errors:
            errors.sort()
            raise SchemaValidationFailed(
                f"OpenAPI {target} validation failed with {len(errors)} error(s)",
                errors,
            )
