"""Tests for specshift.models -- IR parsing, aliases and shorthands."""

from __future__ import annotations

from typing import Any

import pytest
from pydantic import ValidationError

from specshift.models import (
    AdditionalProperties,
    GlobalConfig,
    Kind,
    Schema,
    ServerVariable,
    Spec,
)


class TestSchemaParsing:
    """Schema accepts OpenAPI-style camelCase keys."""

    def test_camel_case_aliases(self) -> None:
        s = Schema.model_validate(
            {"type": "string", "readOnly": True, "minLength": 2, "contentEncoding": "base64"}
        )
        assert s.kind is Kind.STRING
        assert s.read_only is True
        assert s.min_length == 2
        assert s.content_encoding == "base64"

    def test_snake_case_names(self) -> None:
        s = Schema.model_validate({"kind": "integer", "read_only": True, "all_of": [{}]})
        assert s.kind is Kind.INTEGER
        assert s.read_only is True
        assert len(s.all_of) == 1

    def test_ref_alias(self) -> None:
        s = Schema.model_validate({"$ref": "#/components/schemas/Pet"})
        assert s.ref == "#/components/schemas/Pet"

    def test_not_alias(self) -> None:
        s = Schema.model_validate({"not": {"type": "null"}})
        assert s.not_ is not None
        assert s.not_.kind is Kind.NULL

    def test_recursive_nesting(self) -> None:
        s = Schema.model_validate(
            {
                "type": "object",
                "properties": {
                    "child": {"type": "array", "items": {"oneOf": [{"type": "string"}]}}
                },
            }
        )
        assert s.properties["child"].items.one_of[0].kind is Kind.STRING

    def test_unknown_key_rejected(self) -> None:
        with pytest.raises(ValidationError):
            Schema.model_validate({"tpye": "string"})

    def test_defaults_are_unset(self) -> None:
        s = Schema()
        assert s.const is None
        assert s.example is None
        assert s.default is None
        assert s.examples == []
        assert s.additional_properties is None


class TestBoundShorthand:
    def test_bare_number(self) -> None:
        s = Schema.model_validate({"minimum": 5})
        assert s.minimum.value == 5
        assert s.minimum.exclusive is False

    def test_explicit_bound(self) -> None:
        s = Schema.model_validate({"maximum": {"value": 9.5, "exclusive": True}})
        assert s.maximum.value == 9.5
        assert s.maximum.exclusive is True


class TestAdditionalPropertiesShorthand:
    @pytest.mark.parametrize(
        "raw,allow,has_schema",
        [
            (True, True, False),
            (False, False, False),
            ({"type": "string"}, None, True),
            ({"allow": False, "schema": {"type": "string"}}, False, True),
        ],
    )
    def test_forms(self, raw: Any, allow: Any, has_schema: bool) -> None:
        s = Schema.model_validate({"additionalProperties": raw})
        assert isinstance(s.additional_properties, AdditionalProperties)
        assert s.additional_properties.allow is allow
        assert (s.additional_properties.schema_ is not None) is has_schema


class TestDocumentModels:
    def test_server_variable_enum_unset_vs_empty(self) -> None:
        assert ServerVariable(default="a").enum is None
        assert ServerVariable(default="a", enum=[]).enum == []

    def test_spec_from_fixture(self, petstore_spec: Spec) -> None:
        assert petstore_spec.info.summary == "A sample pet store"
        assert petstore_spec.components.security_schemes["mtls"].type == "mutualTLS"
        assert "Shared" in petstore_spec.components.path_items
        assert "newPet" in petstore_spec.webhooks
        assert petstore_spec.paths["/pets"].get.parameters[0].in_ == "query"
        assert petstore_spec.extensions == {"x-api-id": "petstore"}

    def test_spec_requires_info(self) -> None:
        with pytest.raises(ValidationError):
            Spec.model_validate({"paths": {}})


class TestGlobalConfig:
    def test_defaults(self) -> None:
        config = GlobalConfig()
        assert config.target == "3.0.4"
        assert config.strict_downlevel is False
        assert config.validate_spec is False
        assert config.output.format == "auto"
        assert config.output.document == "json"

    def test_roundtrip_json(self) -> None:
        config = GlobalConfig(target="3.1.2", strict_downlevel=True)
        restored = GlobalConfig.model_validate(config.model_dump(mode="json"))
        assert restored == config
