"""specshift -- Project a version-agnostic API description to OpenAPI 3.0 or 3.1.

This package takes an intermediate representation (IR) of an API description
and renders it as either an OpenAPI 3.0.4 or an OpenAPI 3.1.2 document. Every
lossy conversion made while targeting the older format is reported as a
structured diagnostic carrying the location of the offending node.

Typical workflow::

    specshift project api.yaml --target 3.0          # JSON on stdout
    specshift project api.yaml --target 3.1 --format yaml -o openapi.yaml
    specshift warnings api.yaml --target 3.0         # diagnostics only

Library usage::

    from specshift.export import ProjectionConfig, Target, project

    result = project(spec, ProjectionConfig(target=Target.V30))
    print(result.json.decode())
    for w in result.warnings:
        print(w)

Modules:
    app: Typer application factory and CLI entry point.
    models: Pydantic IR models consumed by the projectors.
    diag: Warning codes, categories and the Warnings collection.
    export: Schema and document projectors, rendering and orchestration.
    validate: Validation port and the jsonschema-backed adapter.
    loader: Load IR documents from files, URLs or stdin.
    config: XDG-aware configuration and precedence resolution.
    exceptions: Exception hierarchy with exit-code mapping.
    exit_codes: Numeric exit codes following clig.dev conventions.
    output: stdout/stderr formatting system with Rich support.
"""

__version__ = "0.1.0"
