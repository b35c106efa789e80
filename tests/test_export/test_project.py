"""Tests for the projection orchestrator."""

from __future__ import annotations

import json
import threading
from typing import Optional
from unittest.mock import MagicMock

import pytest
import yaml

from specshift.diag import WarningCode
from specshift.exceptions import (
    InvalidSpecError,
    StrictDownlevelError,
    SpecValidationError,
    UnsupportedTargetError,
)
from specshift.export import ProjectionConfig, Target, project
from specshift.models import Info, License, Server, ServerVariable, Spec


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


class RecordingValidator:
    """Validator double that records its calls and optionally fails."""

    def __init__(self, error: Optional[Exception] = None) -> None:
        self.error = error
        self.calls: list[tuple[Optional[threading.Event], bytes, Target]] = []

    def validate(
        self, cancel: Optional[threading.Event], document: bytes, target: Target
    ) -> None:
        self.calls.append((cancel, document, target))
        if self.error is not None:
            raise self.error


# ---------------------------------------------------------------------------
# Dispatch and results
# ---------------------------------------------------------------------------


class TestProject:
    def test_nil_spec(self) -> None:
        with pytest.raises(InvalidSpecError, match="spec is nil") as exc_info:
            project(None, ProjectionConfig())
        assert len(exc_info.value.warnings) == 0

    def test_unsupported_target(self, minimal_spec: Spec) -> None:
        with pytest.raises(UnsupportedTargetError):
            project(minimal_spec, ProjectionConfig(target="2.0"))

    @pytest.mark.parametrize("target,version", [("3.0", "3.0.4"), ("3.1", "3.1.2")])
    def test_both_encodings(self, minimal_spec: Spec, target: str, version: str) -> None:
        result = project(minimal_spec, ProjectionConfig(target=target))
        assert json.loads(result.json)["openapi"] == version
        assert yaml.safe_load(result.yaml) == json.loads(result.json)

    def test_default_target_is_30(self, minimal_spec: Spec) -> None:
        result = project(minimal_spec, ProjectionConfig())
        assert json.loads(result.json)["openapi"] == "3.0.4"

    def test_input_not_mutated(self, petstore_spec: Spec) -> None:
        before = petstore_spec.model_dump()
        project(petstore_spec, ProjectionConfig(target=Target.V30))
        project(petstore_spec, ProjectionConfig(target=Target.V31))
        assert petstore_spec.model_dump() == before

    def test_error_carries_warnings(self, petstore_spec: Spec) -> None:
        config = ProjectionConfig(target=Target.V30, strict_downlevel=True)
        with pytest.raises(StrictDownlevelError) as exc_info:
            project(petstore_spec, config)
        assert exc_info.value.warnings.has(WarningCode.DOWNLEVEL_INFO_SUMMARY)

    def test_calls_do_not_share_warnings(self, petstore_spec: Spec, minimal_spec: Spec) -> None:
        first = project(petstore_spec, ProjectionConfig(target=Target.V30))
        second = project(minimal_spec, ProjectionConfig(target=Target.V30))
        assert len(first.warnings) == 7
        assert len(second.warnings) == 0


# ---------------------------------------------------------------------------
# Behavioural properties
# ---------------------------------------------------------------------------


class TestProperties:
    def test_license_both_fields(self, minimal_spec: Spec) -> None:
        spec = minimal_spec.model_copy(
            update={
                "info": Info(
                    title="T",
                    version="1",
                    license=License(
                        name="MIT",
                        identifier="MIT",
                        url="https://opensource.org/licenses/MIT",
                    ),
                )
            }
        )
        with pytest.raises(InvalidSpecError, match="mutually exclusive"):
            project(spec, ProjectionConfig(target=Target.V31))

        result = project(spec, ProjectionConfig(target=Target.V30))
        assert "identifier" not in json.loads(result.json)["info"]["license"]
        assert result.warnings.has(WarningCode.DOWNLEVEL_LICENSE_IDENTIFIER)

    def test_empty_paths(self) -> None:
        spec = Spec(info=Info(title="T", version="1"))
        with pytest.raises(InvalidSpecError, match="paths"):
            project(spec, ProjectionConfig(target=Target.V30))
        assert project(spec, ProjectionConfig(target=Target.V31)).json

    def test_default_server(self, minimal_spec: Spec) -> None:
        result = project(minimal_spec, ProjectionConfig(target=Target.V31))
        assert json.loads(result.json)["servers"] == [{"url": "/"}]

    def test_info_summary(self, minimal_spec: Spec) -> None:
        spec = minimal_spec.model_copy(
            update={"info": Info(title="T", version="1", summary="API summary")}
        )
        result = project(spec, ProjectionConfig(target=Target.V30))
        assert result.warnings.has(WarningCode.DOWNLEVEL_INFO_SUMMARY)
        assert "summary" not in json.loads(result.json)["info"]

    def test_server_variable_default(self, minimal_spec: Spec) -> None:
        server = Server(
            url="https://{env}.example.com",
            variables={"env": ServerVariable(default="other", enum=["api", "staging"])},
        )
        spec = minimal_spec.model_copy(update={"servers": [server]})
        result = project(spec, ProjectionConfig(target=Target.V31))
        assert result.warnings.has(WarningCode.SERVER_VARIABLE_DEFAULT_NOT_IN_ENUM)

    @pytest.mark.parametrize("target", [Target.V30, Target.V31])
    def test_idempotent(self, petstore_spec: Spec, target: Target) -> None:
        first = project(petstore_spec, ProjectionConfig(target=target))
        second = project(petstore_spec, ProjectionConfig(target=target))
        assert first.json == second.json
        assert first.yaml == second.yaml
        assert set(first.warnings) == set(second.warnings)

    def test_strict_asymmetry(self, minimal_spec: Spec) -> None:
        """Strict mode leaves schema-level losses as diagnostics."""
        from specshift.models import Components, Schema

        spec = minimal_spec.model_copy(
            update={
                "components": Components(
                    schemas={"S": Schema.model_validate({"const": 1, "examples": [1, 2]})}
                )
            }
        )
        result = project(spec, ProjectionConfig(target=Target.V30, strict_downlevel=True))
        assert result.warnings.has(WarningCode.DOWNLEVEL_CONST_TO_ENUM)
        assert result.warnings.has(WarningCode.DOWNLEVEL_MULTIPLE_EXAMPLES)


# ---------------------------------------------------------------------------
# Validation port
# ---------------------------------------------------------------------------


class TestValidationPort:
    def test_called_with_json_and_target(self, minimal_spec: Spec) -> None:
        validator = RecordingValidator()
        cancel = threading.Event()
        result = project(
            minimal_spec,
            ProjectionConfig(target="3.1", validator=validator),
            cancel=cancel,
        )
        assert validator.calls == [(cancel, result.json, Target.V31)]

    def test_failure_wrapped(self, petstore_spec: Spec) -> None:
        cause = ValueError("bad document")
        validator = RecordingValidator(error=cause)
        with pytest.raises(SpecValidationError, match="bad document") as exc_info:
            project(petstore_spec, ProjectionConfig(target=Target.V30, validator=validator))
        assert exc_info.value.__cause__ is cause
        assert exc_info.value.exit_code == 9
        assert len(exc_info.value.warnings) == 7

    def test_not_called_when_projection_fails(self) -> None:
        validator = MagicMock()
        with pytest.raises(InvalidSpecError):
            project(
                Spec(info=Info(title="T", version="1")),
                ProjectionConfig(target=Target.V30, validator=validator),
            )
        validator.validate.assert_not_called()


# ---------------------------------------------------------------------------
# Callbacks in rendered output
# ---------------------------------------------------------------------------


class TestCallbacksRendered:
    @staticmethod
    def _spec() -> Spec:
        callback_item = {"post": {"responses": {"200": {"description": "ok"}}}}
        return Spec.model_validate(
            {
                "info": {"title": "T", "version": "1"},
                "paths": {
                    "/s": {
                        "post": {
                            "callbacks": {
                                "onEvent": {
                                    "pathItems": {"{$request.body#/url}": callback_item},
                                    "extensions": {"x-cb": True},
                                }
                            },
                            "responses": {"201": {"description": "Created"}},
                        }
                    }
                },
                "components": {
                    "callbacks": {
                        "Ev": {"pathItems": {"{$url}": callback_item}},
                        "Alias": {"$ref": "#/components/callbacks/Ev"},
                    }
                },
            }
        )

    @pytest.mark.parametrize("target", [Target.V30, Target.V31])
    def test_path_items_survive_json_and_yaml(self, target: Target) -> None:
        result = project(self._spec(), ProjectionConfig(target=target))
        item = {"post": {"responses": {"200": {"description": "ok"}}}}
        for doc in (json.loads(result.json), yaml.safe_load(result.yaml)):
            assert doc["paths"]["/s"]["post"]["callbacks"] == {
                "onEvent": {"{$request.body#/url}": item, "x-cb": True}
            }
            assert doc["components"]["callbacks"] == {
                "Ev": {"{$url}": item},
                "Alias": {"$ref": "#/components/callbacks/Ev"},
            }
