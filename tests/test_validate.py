"""Tests for specshift.validate -- the jsonschema-backed validation port."""

from __future__ import annotations

import json
import threading
from pathlib import Path
from typing import Any

import pytest

from specshift.exceptions import SpecValidationError
from specshift.export import ProjectionConfig, Target, project
from specshift.models import Spec
from specshift.validate import (
    META_SCHEMA_30,
    META_SCHEMA_31,
    JSONSchemaValidator,
    SchemaValidationFailed,
    ValidationCancelled,
    Validator,
)


def _bytes(doc: dict[str, Any]) -> bytes:
    return json.dumps(doc).encode("utf-8")


_INFO = {"title": "T", "version": "1"}


# ---------------------------------------------------------------------------
# Bundled meta-schemas
# ---------------------------------------------------------------------------


class TestBundledSchemas:
    def test_protocol(self) -> None:
        assert isinstance(JSONSchemaValidator(), Validator)

    def test_schema_for(self) -> None:
        validator = JSONSchemaValidator()
        assert validator.schema_for("3.0") is META_SCHEMA_30
        assert validator.schema_for(Target.V31) is META_SCHEMA_31

    @pytest.mark.parametrize("target", [Target.V30, Target.V31])
    def test_projected_documents_pass(self, petstore_spec: Spec, target: Target) -> None:
        result = project(
            petstore_spec, ProjectionConfig(target=target, validator=JSONSchemaValidator())
        )
        assert result.json

    def test_30_requires_paths(self) -> None:
        with pytest.raises(SchemaValidationFailed) as exc_info:
            JSONSchemaValidator().validate(
                None, _bytes({"openapi": "3.0.4", "info": _INFO}), Target.V30
            )
        assert any("'paths' is a required property" in e for e in exc_info.value.errors)

    def test_30_rejects_webhooks_and_summary(self) -> None:
        doc = {
            "openapi": "3.0.4",
            "info": {**_INFO, "summary": "s"},
            "paths": {},
            "webhooks": {},
        }
        with pytest.raises(SchemaValidationFailed) as exc_info:
            JSONSchemaValidator().validate(None, _bytes(doc), Target.V30)
        assert len(exc_info.value.errors) == 2

    def test_31_needs_paths_components_or_webhooks(self) -> None:
        validator = JSONSchemaValidator()
        with pytest.raises(SchemaValidationFailed):
            validator.validate(None, _bytes({"openapi": "3.1.2", "info": _INFO}), Target.V31)
        validator.validate(
            None, _bytes({"openapi": "3.1.2", "info": _INFO, "webhooks": {}}), Target.V31
        )

    def test_31_license_exclusivity(self) -> None:
        doc = {
            "openapi": "3.1.2",
            "info": {**_INFO, "license": {"name": "MIT", "identifier": "MIT", "url": "u"}},
            "paths": {},
        }
        with pytest.raises(SchemaValidationFailed):
            JSONSchemaValidator().validate(None, _bytes(doc), Target.V31)

    def test_extension_keys_allowed(self) -> None:
        doc = {"openapi": "3.0.4", "info": {**_INFO, "x-logo": {}}, "paths": {}, "x-id": 1}
        JSONSchemaValidator().validate(None, _bytes(doc), Target.V30)

    def test_unknown_key_rejected(self) -> None:
        doc = {"openapi": "3.0.4", "info": _INFO, "paths": {}, "bogus": 1}
        with pytest.raises(SchemaValidationFailed, match="1 error"):
            JSONSchemaValidator().validate(None, _bytes(doc), Target.V30)

    def test_invalid_json(self) -> None:
        with pytest.raises(SchemaValidationFailed, match="not valid JSON"):
            JSONSchemaValidator().validate(None, b"{nope", Target.V30)


# ---------------------------------------------------------------------------
# Custom schemas and cancellation
# ---------------------------------------------------------------------------


class TestCustomSchemas:
    def test_from_files(self, tmp_path: Path) -> None:
        path = tmp_path / "schema.yaml"
        path.write_text("type: object\nrequired: [custom]\n")
        validator = JSONSchemaValidator.from_files({"3.1": path})
        with pytest.raises(SchemaValidationFailed) as exc_info:
            validator.validate(None, _bytes({"openapi": "3.1.2"}), Target.V31)
        assert exc_info.value.errors == ["$: 'custom' is a required property"]
        assert validator.schema_for(Target.V30) is META_SCHEMA_30

    def test_draft4_schema(self) -> None:
        schema = {
            "$schema": "http://json-schema.org/draft-04/schema#",
            "type": "object",
            "required": ["openapi"],
        }
        validator = JSONSchemaValidator({Target.V30: schema})
        validator.validate(None, _bytes({"openapi": "3.0.4"}), Target.V30)

    def test_str_lists_errors(self) -> None:
        failure = SchemaValidationFailed("failed", ["$: a", "$.b: c"])
        assert str(failure) == "failed\n  $: a\n  $.b: c"


class TestCancellation:
    def test_cancel_before_start(self) -> None:
        cancel = threading.Event()
        cancel.set()
        with pytest.raises(ValidationCancelled):
            JSONSchemaValidator().validate(cancel, b"{}", Target.V30)

    def test_cancel_surfaces_as_validation_error(self, minimal_spec: Spec) -> None:
        cancel = threading.Event()
        cancel.set()
        with pytest.raises(SpecValidationError) as exc_info:
            project(
                minimal_spec,
                ProjectionConfig(validator=JSONSchemaValidator()),
                cancel=cancel,
            )
        assert isinstance(exc_info.value.__cause__, ValidationCancelled)

    def test_unset_event_does_not_cancel(self, minimal_spec: Spec) -> None:
        result = project(
            minimal_spec,
            ProjectionConfig(validator=JSONSchemaValidator()),
            cancel=threading.Event(),
        )
        assert result.yaml
