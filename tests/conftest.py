"""Shared test fixtures for specshift.

Provides reusable fixtures for loading IR fixtures, building small IR
specs, creating isolated config environments, managing output state, and
running CLI commands. These fixtures are automatically discovered by pytest
and available to all test modules without explicit imports.
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any

import pytest

from specshift.export.context import ProjectionContext
from specshift.export.target import Target
from specshift.models import Info, Operation, PathItem, Response, Spec
from specshift.output import OutputFormat, OutputManager, reset_output, set_output


FIXTURES_DIR = Path(__file__).parent / "fixtures"


# ---------------------------------------------------------------------------
# Auto-reset global output state between tests
# ---------------------------------------------------------------------------


@pytest.fixture(autouse=True)
def _reset_output_between_tests() -> None:
    """Reset the global OutputManager after every test.

    The OutputManager caches references to sys.stdout/sys.stderr at
    creation time.  When Typer's CliRunner redirects those streams during
    a test and the test finishes, the cached references become stale
    ("I/O operation on closed file").  Resetting forces a fresh manager
    to be created on next use.
    """
    yield
    reset_output()


# ---------------------------------------------------------------------------
# IR fixtures
# ---------------------------------------------------------------------------


@pytest.fixture
def petstore_raw() -> dict[str, Any]:
    """Load the raw petstore IR dict (uses every 3.1-only feature)."""
    with open(FIXTURES_DIR / "petstore_ir.json") as f:
        return json.load(f)


@pytest.fixture
def petstore_spec(petstore_raw: dict[str, Any]) -> Spec:
    """The petstore IR validated into a :class:`Spec`."""
    return Spec.model_validate(petstore_raw)


@pytest.fixture
def petstore_file(tmp_path: Path) -> Path:
    """Copy the petstore IR into tmp_path and return its path."""
    path = tmp_path / "petstore_ir.json"
    path.write_text((FIXTURES_DIR / "petstore_ir.json").read_text())
    return path


@pytest.fixture
def minimal_spec() -> Spec:
    """A spec valid for both targets with no lossy features."""
    return Spec(
        info=Info(title="Minimal", version="1.0.0"),
        paths={
            "/health": PathItem(
                get=Operation(responses={"200": Response(description="OK")})
            )
        },
    )


@pytest.fixture
def ctx30() -> ProjectionContext:
    """Fresh projection context for OpenAPI 3.0."""
    return ProjectionContext(Target.V30)


@pytest.fixture
def ctx31() -> ProjectionContext:
    """Fresh projection context for OpenAPI 3.1."""
    return ProjectionContext(Target.V31)


# ---------------------------------------------------------------------------
# Config isolation fixture
# ---------------------------------------------------------------------------


@pytest.fixture
def isolated_config(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """Isolate configuration to a temporary directory.

    Sets XDG_CONFIG_HOME and XDG_DATA_HOME to subdirectories of tmp_path
    so that tests never touch real user config. Forces the XDG code path,
    clears all SPECSHIFT_* environment variables and changes the working
    directory to tmp_path.

    Returns:
        The tmp_path root directory for additional file creation.
    """
    monkeypatch.setenv("XDG_CONFIG_HOME", str(tmp_path / "config"))
    monkeypatch.setenv("XDG_DATA_HOME", str(tmp_path / "data"))
    monkeypatch.setattr("specshift.config._is_xdg_platform", lambda: True)

    for var in ["SPECSHIFT_TARGET", "SPECSHIFT_STRICT"]:
        monkeypatch.delenv(var, raising=False)

    monkeypatch.chdir(tmp_path)
    return tmp_path


# ---------------------------------------------------------------------------
# Output fixtures
# ---------------------------------------------------------------------------


@pytest.fixture
def quiet_output() -> OutputManager:
    """Install a quiet PLAIN-format OutputManager for the test."""
    output = OutputManager(format=OutputFormat.PLAIN, quiet=True)
    set_output(output)
    yield output
    reset_output()


@pytest.fixture
def json_output() -> OutputManager:
    """Install a JSON-format OutputManager for the test."""
    output = OutputManager(format=OutputFormat.JSON)
    set_output(output)
    yield output
    reset_output()


# ---------------------------------------------------------------------------
# CLI runner fixture
# ---------------------------------------------------------------------------


@pytest.fixture
def cli_runner():
    """Typer CLI test runner."""
    from typer.testing import CliRunner

    return CliRunner()
