"""Tests for JSON/YAML rendering and extension inlining."""

from __future__ import annotations

import json

import yaml

from specshift.export import types as oas
from specshift.export.render import to_dict, to_json, to_yaml


def _doc() -> oas.DocumentV31:
    return oas.DocumentV31(
        openapi="3.1.2",
        info=oas.InfoV31(title="Café", version="1", extensions={"x-logo": {"url": "l.png"}}),
        paths={
            "/a": oas.PathItem(
                get=oas.Operation(
                    responses={"200": oas.Response(description="ok")},
                    extensions={"x-rate-limit": 10},
                )
            )
        },
        extensions={"x-root": True},
    )


class TestToDict:
    def test_extensions_inlined_at_same_level(self) -> None:
        data = to_dict(_doc())
        assert data["x-root"] is True
        assert data["info"]["x-logo"] == {"url": "l.png"}
        assert data["paths"]["/a"]["get"]["x-rate-limit"] == 10
        assert "extensions" not in data
        assert "extensions" not in data["info"]

    def test_none_fields_omitted(self) -> None:
        data = to_dict(oas.Server(url="/"))
        assert data == {"url": "/"}

    def test_camel_case_keys(self) -> None:
        data = to_dict(oas.SecurityScheme(type="openIdConnect", open_id_connect_url="https://x"))
        assert data == {"type": "openIdConnect", "openIdConnectUrl": "https://x"}

    def test_key_order_follows_declaration(self) -> None:
        assert list(to_dict(_doc())) == ["openapi", "info", "paths", "x-root"]

    def test_required_empty_containers_kept(self) -> None:
        data = to_dict(oas.Operation())
        assert data == {"responses": {}}
        flow = to_dict(oas.OAuthFlow(token_url="https://t"))
        assert flow == {"tokenUrl": "https://t", "scopes": {}}


class TestEncodings:
    def test_json(self) -> None:
        raw = to_json(_doc())
        assert raw.endswith(b"\n")
        assert "Café".encode("utf-8") in raw
        assert json.loads(raw) == to_dict(_doc())
        assert raw.startswith(b'{\n  "openapi": "3.1.2"')

    def test_yaml(self) -> None:
        raw = to_yaml(_doc())
        assert raw.startswith(b"openapi:")
        assert yaml.safe_load(raw)["openapi"] == "3.1.2"
        assert "Café".encode("utf-8") in raw
        assert yaml.safe_load(raw) == to_dict(_doc())

    def test_deterministic(self) -> None:
        assert to_json(_doc()) == to_json(_doc())
        assert to_yaml(_doc()) == to_yaml(_doc())
