"""Projection commands -- render an IR document as OpenAPI.

Provides two commands:

* ``specshift project`` -- project the IR to the configured target and
  print the JSON or YAML document. Diagnostics go to stderr.
* ``specshift warnings`` -- project the IR and tabulate the diagnostics
  only, with optional category and code filters.

Both commands resolve their defaults through
:func:`~specshift.config.resolve_config`, so ``--target`` and
``--strict`` fall back to ``SPECSHIFT_TARGET`` / ``SPECSHIFT_STRICT``,
``./specshift.json`` and the global config.
"""

from __future__ import annotations

from pathlib import Path
from typing import Optional

import typer
import yaml

from specshift.diag import WarningCategory, Warnings
from specshift.exceptions import (
    ConfigError,
    InvalidUsageError,
    ProjectionError,
    SpecshiftError,
)
from specshift.models import GlobalConfig
from specshift.output import debug, error, get_output, info

DOCUMENT_FORMATS = ("json", "yaml")


def _fail(exc: SpecshiftError) -> typer.Exit:
    """Report *exc* (and any diagnostics it carries) and build the exit."""
    if isinstance(exc, ProjectionError):
        get_output().report_warnings(exc.warnings)
    error(str(exc))
    return typer.Exit(code=exc.exit_code)


def _build_validator(config: GlobalConfig, meta_schema: Optional[Path]):  # noqa: ANN202
    """Return the validator requested by flags and config, or ``None``.

    ``--meta-schema`` implies validation against that file for the
    resolved target. Otherwise ``validate_spec`` enables validation with
    any ``meta_schemas`` files from config, falling back to the bundled
    structural schemas.
    """
    from specshift.validate import JSONSchemaValidator

    if meta_schema is None and not config.validate_spec:
        return None
    paths: dict[str, str] = dict(config.meta_schemas)
    if meta_schema is not None:
        paths[config.target] = str(meta_schema)
    try:
        return JSONSchemaValidator.from_files(paths)
    except (OSError, yaml.YAMLError) as exc:
        raise ConfigError(f"Cannot load meta-schema: {exc}") from exc
    except SpecshiftError as exc:
        raise ConfigError(f"Invalid meta-schema configuration: {exc}") from exc


def project_command(
    source: str = typer.Argument(
        help="IR document: file path, http(s) URL, or '-' for stdin."
    ),
    target: Optional[str] = typer.Option(
        None, "--target", "-t", help="OpenAPI version: 3.0, 3.1, 3.0.4 or 3.1.2."
    ),
    strict: Optional[bool] = typer.Option(
        None,
        "--strict/--no-strict",
        help="Fail instead of dropping webhooks, mutualTLS and info.summary for 3.0.",
    ),
    validate: Optional[bool] = typer.Option(
        None, "--validate/--no-validate", help="Validate the document before writing."
    ),
    meta_schema: Optional[Path] = typer.Option(
        None,
        "--meta-schema",
        help="JSON/YAML meta-schema to validate against (implies --validate).",
    ),
    document_format: Optional[str] = typer.Option(
        None, "--format", "-F", help="Document encoding: json or yaml."
    ),
    output_file: Optional[str] = typer.Option(
        None, "--output", "-o", help="Write the document to this file."
    ),
) -> None:
    """Project an IR document to OpenAPI 3.0 or 3.1.

    Loads the IR, projects it to the resolved target, optionally validates
    the result, and prints the document. Diagnostics for every lossy
    conversion are reported on stderr.

    Example::

        specshift project api.yaml --target 3.0
        specshift project api.json -t 3.1 --format yaml -o openapi.yaml
        cat api.json | specshift project - --strict
    """
    from specshift.config import resolve_config
    from specshift.export import ProjectionConfig, project
    from specshift.loader import load_ir

    output = get_output()
    try:
        config = resolve_config(
            cli_target=target,
            cli_strict=strict,
            cli_validate=validate,
            cli_document=document_format,
        )
        document = config.output.document.lower()
        if document not in DOCUMENT_FORMATS:
            raise InvalidUsageError(
                f"Unknown document format {document!r}; expected json or yaml"
            )
        spec = load_ir(source)
        validator = _build_validator(config, meta_schema)
        debug(f"Projecting {source} to OpenAPI {config.target}")
        result = project(
            spec,
            ProjectionConfig(
                target=config.target,
                strict_downlevel=config.strict_downlevel,
                validator=validator,
            ),
        )
    except SpecshiftError as exc:
        raise _fail(exc) from None

    output.report_warnings(result.warnings)
    payload = result.yaml if document == "yaml" else result.json
    output.print_document(payload.decode("utf-8"), language=document, path=output_file)
    if result.warnings:
        info(f"{len(result.warnings)} warning(s) for OpenAPI {config.target}")


def warnings_command(
    source: str = typer.Argument(
        help="IR document: file path, http(s) URL, or '-' for stdin."
    ),
    target: Optional[str] = typer.Option(
        None, "--target", "-t", help="OpenAPI version: 3.0, 3.1, 3.0.4 or 3.1.2."
    ),
    category: Optional[WarningCategory] = typer.Option(
        None, "--category", "-c", help="Only show warnings in this category."
    ),
    exclude: list[str] = typer.Option(
        [], "--exclude", "-x", help="Warning code to hide (repeatable)."
    ),
) -> None:
    """List the diagnostics a projection would produce.

    Projects the IR without strict mode or validation and prints one row
    per diagnostic. Hard projection errors are reported after the
    diagnostics collected up to the failure.

    Example::

        specshift warnings api.yaml --target 3.0
        specshift warnings api.yaml -t 3.0 --category downlevel -x DOWNLEVEL_MULTIPLE_EXAMPLES
        specshift --json warnings api.yaml
    """
    from specshift.config import resolve_config
    from specshift.export import ProjectionConfig, project
    from specshift.loader import load_ir

    failure: Optional[ProjectionError] = None
    try:
        config = resolve_config(cli_target=target)
        spec = load_ir(source)
        result = project(spec, ProjectionConfig(target=config.target))
        found = result.warnings
    except ProjectionError as exc:
        failure = exc
        found = exc.warnings
    except SpecshiftError as exc:
        raise _fail(exc) from None

    _print_warnings(found, config.target, category, exclude)

    if failure is not None:
        error(str(failure))
        raise typer.Exit(code=failure.exit_code)


def _print_warnings(
    found: Warnings,
    target: str,
    category: Optional[WarningCategory],
    exclude: list[str],
) -> None:
    if category is not None:
        found = found.filter_category(category)
    if exclude:
        found = found.exclude(*exclude)

    if not found:
        info("No warnings.")
        return

    rows = [[str(w.code), w.category.value, w.path, w.message] for w in found]
    get_output().print_table(
        ["Code", "Category", "Path", "Message"],
        rows,
        title=f"OpenAPI {target} -- {len(rows)} warning(s)",
    )
