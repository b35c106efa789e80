"""End-to-end tests for the specshift CLI.

Drives the Typer app through ``CliRunner`` with configuration isolated to
a temporary directory. Assertions on diagnostics use ``result.output``,
which carries both streams.
"""

from __future__ import annotations

import json
from pathlib import Path
from unittest.mock import patch

import pytest
import yaml
from typer.testing import CliRunner

from specshift import __version__
from specshift.app import app, main
from specshift.config import global_config_path, load_global_config
from specshift.exceptions import ConfigError


runner = CliRunner()


# ---------------------------------------------------------------------------
# Root options
# ---------------------------------------------------------------------------


class TestRoot:
    def test_version(self) -> None:
        result = runner.invoke(app, ["--version"])
        assert result.exit_code == 0
        assert result.output.strip() == f"specshift {__version__}"

    def test_no_args_shows_help(self) -> None:
        result = runner.invoke(app, [])
        assert "project" in result.output
        assert "warnings" in result.output


# ---------------------------------------------------------------------------
# specshift project
# ---------------------------------------------------------------------------


class TestProjectCommand:
    def test_json_to_stdout(self, isolated_config: Path, petstore_file: Path) -> None:
        result = runner.invoke(app, ["project", str(petstore_file), "--target", "3.1"])
        assert result.exit_code == 0, result.output
        doc = json.loads(result.output)
        assert doc["openapi"] == "3.1.2"
        assert doc["x-api-id"] == "petstore"

    def test_yaml_to_file(self, isolated_config: Path, petstore_file: Path) -> None:
        out = isolated_config / "openapi.yaml"
        result = runner.invoke(
            app,
            ["--no-color", "project", str(petstore_file), "-t", "3.1", "-F", "yaml", "-o", str(out)],
        )
        assert result.exit_code == 0, result.output
        assert yaml.safe_load(out.read_text())["openapi"] == "3.1.2"
        assert f"Wrote {out}" in result.output

    def test_global_output_option(self, isolated_config: Path, petstore_file: Path) -> None:
        out = isolated_config / "openapi.json"
        result = runner.invoke(app, ["-o", str(out), "project", str(petstore_file), "-t", "3.1"])
        assert result.exit_code == 0, result.output
        assert json.loads(out.read_text())["openapi"] == "3.1.2"

    def test_downlevel_reports_warnings(
        self, isolated_config: Path, petstore_file: Path
    ) -> None:
        out = isolated_config / "openapi.json"
        result = runner.invoke(
            app, ["--no-color", "project", str(petstore_file), "-t", "3.0", "-o", str(out)]
        )
        assert result.exit_code == 0, result.output
        assert "Warning: DOWNLEVEL_WEBHOOKS at #/webhooks" in result.output
        assert "7 warning(s) for OpenAPI 3.0.4" in result.output
        assert "webhooks" not in json.loads(out.read_text())

    def test_strict_fails(self, isolated_config: Path, petstore_file: Path) -> None:
        result = runner.invoke(
            app, ["--no-color", "project", str(petstore_file), "-t", "3.0", "--strict"]
        )
        assert result.exit_code == 8
        assert "Error:" in result.output

    def test_target_from_environment(
        self,
        isolated_config: Path,
        petstore_file: Path,
        monkeypatch: pytest.MonkeyPatch,
    ) -> None:
        monkeypatch.setenv("SPECSHIFT_TARGET", "3.1")
        result = runner.invoke(app, ["project", str(petstore_file)])
        assert result.exit_code == 0, result.output
        assert json.loads(result.output)["openapi"] == "3.1.2"

    def test_stdin(self, isolated_config: Path, petstore_file: Path) -> None:
        result = runner.invoke(
            app, ["project", "-", "-t", "3.1"], input=petstore_file.read_text()
        )
        assert result.exit_code == 0, result.output
        assert json.loads(result.output)["info"]["title"]

    def test_missing_file(self, isolated_config: Path) -> None:
        result = runner.invoke(app, ["project", str(isolated_config / "nope.json")])
        assert result.exit_code == 7

    def test_bad_target(self, isolated_config: Path, petstore_file: Path) -> None:
        result = runner.invoke(app, ["project", str(petstore_file), "-t", "2.0"])
        assert result.exit_code == 1

    def test_bad_document_format(self, isolated_config: Path, petstore_file: Path) -> None:
        result = runner.invoke(app, ["project", str(petstore_file), "-F", "toml"])
        assert result.exit_code == 2

    def test_validate(self, isolated_config: Path, petstore_file: Path) -> None:
        out = isolated_config / "openapi.json"
        result = runner.invoke(
            app, ["project", str(petstore_file), "-t", "3.0", "--validate", "-o", str(out)]
        )
        assert result.exit_code == 0, result.output

    def test_meta_schema_rejects(self, isolated_config: Path, petstore_file: Path) -> None:
        schema = isolated_config / "schema.yaml"
        schema.write_text("type: object\nrequired: [custom]\n")
        result = runner.invoke(
            app,
            ["--no-color", "project", str(petstore_file), "-t", "3.1", "--meta-schema", str(schema)],
        )
        assert result.exit_code == 9
        assert "'custom' is a required property" in result.output

    def test_missing_meta_schema(self, isolated_config: Path, petstore_file: Path) -> None:
        result = runner.invoke(
            app,
            [
                "--no-color",
                "project",
                str(petstore_file),
                "--meta-schema",
                str(isolated_config / "none.json"),
            ],
        )
        assert result.exit_code == 1
        assert "Cannot load meta-schema" in result.output


# ---------------------------------------------------------------------------
# specshift warnings
# ---------------------------------------------------------------------------


class TestWarningsCommand:
    def test_plain_table(self, isolated_config: Path, petstore_file: Path) -> None:
        result = runner.invoke(app, ["--plain", "warnings", str(petstore_file), "-t", "3.0"])
        assert result.exit_code == 0, result.output
        lines = result.output.splitlines()
        assert lines[0] == "Code\tCategory\tPath\tMessage"
        assert len(lines) == 8

    def test_json(self, isolated_config: Path, petstore_file: Path) -> None:
        result = runner.invoke(app, ["--json", "warnings", str(petstore_file), "-t", "3.0"])
        assert result.exit_code == 0, result.output
        records = json.loads(result.output)
        assert [r["Code"] for r in records][0] == "DOWNLEVEL_INFO_SUMMARY"
        assert {r["Category"] for r in records} == {"downlevel"}

    def test_exclude(self, isolated_config: Path, petstore_file: Path) -> None:
        result = runner.invoke(
            app,
            [
                "--json",
                "warnings",
                str(petstore_file),
                "-t",
                "3.0",
                "-x",
                "DOWNLEVEL_WEBHOOKS",
                "-x",
                "DOWNLEVEL_PATH_ITEMS",
            ],
        )
        codes = [r["Code"] for r in json.loads(result.output)]
        assert len(codes) == 5
        assert "DOWNLEVEL_WEBHOOKS" not in codes

    def test_category_without_matches(
        self, isolated_config: Path, petstore_file: Path
    ) -> None:
        result = runner.invoke(
            app, ["warnings", str(petstore_file), "-t", "3.0", "--category", "validity"]
        )
        assert result.exit_code == 0
        assert "No warnings." in result.output

    def test_no_warnings_for_31(self, isolated_config: Path, petstore_file: Path) -> None:
        result = runner.invoke(app, ["warnings", str(petstore_file), "-t", "3.1"])
        assert result.exit_code == 0
        assert "No warnings." in result.output

    def test_projection_failure_exit(self, isolated_config: Path) -> None:
        source = isolated_config / "empty.json"
        source.write_text(json.dumps({"info": {"title": "T", "version": "1"}}))
        result = runner.invoke(app, ["--no-color", "warnings", str(source), "-t", "3.0"])
        assert result.exit_code == 8
        assert "paths" in result.output


# ---------------------------------------------------------------------------
# specshift config
# ---------------------------------------------------------------------------


class TestConfigCommands:
    def test_show(self, isolated_config: Path) -> None:
        result = runner.invoke(app, ["--quiet", "--json", "config", "show"])
        assert result.exit_code == 0, result.output
        assert json.loads(result.output)["target"] == "3.0.4"

    def test_show_effective(
        self, isolated_config: Path, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        monkeypatch.setenv("SPECSHIFT_STRICT", "true")
        result = runner.invoke(app, ["--quiet", "--json", "config", "show", "--effective"])
        assert json.loads(result.output)["strict_downlevel"] is True

    def test_set_target_normalises(self, isolated_config: Path) -> None:
        result = runner.invoke(app, ["--no-color", "config", "set", "target", "3.1"])
        assert result.exit_code == 0, result.output
        assert "Set target = 3.1.2" in result.output
        assert load_global_config().target == "3.1.2"

    def test_set_bool_and_nested(self, isolated_config: Path) -> None:
        runner.invoke(app, ["config", "set", "strict_downlevel", "yes"])
        runner.invoke(app, ["config", "set", "output.document", "yaml"])
        config = load_global_config()
        assert config.strict_downlevel is True
        assert config.output.document == "yaml"

    @pytest.mark.parametrize(
        "key,value", [("bogus", "x"), ("output.nope", "x"), ("output", "x"), ("target", "2.0")]
    )
    def test_set_rejects(self, isolated_config: Path, key: str, value: str) -> None:
        result = runner.invoke(app, ["config", "set", key, value])
        assert result.exit_code == 2
        assert not global_config_path().exists()

    def test_reset_forced(self, isolated_config: Path) -> None:
        runner.invoke(app, ["config", "set", "target", "3.1"])
        result = runner.invoke(app, ["--force", "config", "reset"])
        assert result.exit_code == 0
        assert load_global_config().target == "3.0.4"

    def test_reset_declined(self, isolated_config: Path) -> None:
        runner.invoke(app, ["config", "set", "target", "3.1"])
        result = runner.invoke(app, ["config", "reset"], input="n\n")
        assert result.exit_code == 0
        assert "Cancelled." in result.output
        assert load_global_config().target == "3.1.2"


# ---------------------------------------------------------------------------
# Entry point error handling
# ---------------------------------------------------------------------------


class TestMain:
    def test_specshift_error_exit_code(self) -> None:
        with patch("specshift.app._setup_signal_handlers"), patch(
            "specshift.app.app", side_effect=ConfigError("bad config")
        ):
            with pytest.raises(SystemExit) as exc_info:
                main()
        assert exc_info.value.code == 1

    def test_crash_log(self, isolated_config: Path) -> None:
        with patch("specshift.app._setup_signal_handlers"), patch(
            "specshift.app.app", side_effect=RuntimeError("kaboom")
        ):
            with pytest.raises(SystemExit) as exc_info:
                main()
        assert exc_info.value.code == 1
        logs = list((isolated_config / "data" / "specshift" / "logs").glob("crash-*.log"))
        assert len(logs) == 1
        assert "RuntimeError: kaboom" in logs[0].read_text()

    def test_keyboard_interrupt(self) -> None:
        with patch("specshift.app._setup_signal_handlers"), patch(
            "specshift.app.app", side_effect=KeyboardInterrupt
        ):
            with pytest.raises(SystemExit) as exc_info:
                main()
        assert exc_info.value.code == 130
