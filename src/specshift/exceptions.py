"""Exception hierarchy for specshift.

All exceptions inherit from :class:`SpecshiftError`, which carries an
``exit_code`` attribute mapped to a constant from :mod:`specshift.exit_codes`.
The top-level error handler in :func:`specshift.app.main` catches
``SpecshiftError`` and exits with the appropriate code, while unexpected
exceptions produce a crash log and exit with :data:`EXIT_GENERIC_FAILURE`.

Projection failures additionally carry the diagnostics gathered before the
failure so that callers can still inspect them.

Subclass hierarchy::

    SpecshiftError (exit 1)
    +-- InvalidUsageError        (exit 2)
    +-- ConfigError              (exit 1)
    +-- IRParseError             (exit 7)
    +-- ProjectionError          (exit 8)
        +-- InvalidSpecError
        +-- UnsupportedTargetError
        +-- StrictDownlevelError
        +-- SpecValidationError  (exit 9)
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Optional

from specshift.exit_codes import (
    EXIT_GENERIC_FAILURE,
    EXIT_INVALID_USAGE,
    EXIT_IR_PARSE_ERROR,
    EXIT_PROJECTION_ERROR,
    EXIT_VALIDATION_ERROR,
)

if TYPE_CHECKING:
    from specshift.diag import Warnings


class SpecshiftError(Exception):
    """Base exception for all specshift errors.

    Every subclass sets a class-level ``exit_code`` corresponding to one of
    the constants in :mod:`specshift.exit_codes`. The entry point catches
    this exception type and calls ``sys.exit(exc.exit_code)``.

    Args:
        message: Human-readable error description printed to stderr.
        exit_code: Optional override for the class-level exit code.
    """

    exit_code: int = EXIT_GENERIC_FAILURE

    def __init__(self, message: str, exit_code: int | None = None):
        super().__init__(message)
        if exit_code is not None:
            self.exit_code = exit_code


class InvalidUsageError(SpecshiftError):
    """Raised for invalid CLI arguments or missing required parameters."""

    exit_code = EXIT_INVALID_USAGE


class ConfigError(SpecshiftError):
    """Raised for configuration problems (invalid JSON, unknown keys, bad values)."""

    exit_code = EXIT_GENERIC_FAILURE


class IRParseError(SpecshiftError):
    """Raised when an IR document cannot be loaded or fails model validation."""

    exit_code = EXIT_IR_PARSE_ERROR


class ProjectionError(SpecshiftError):
    """Base class for hard failures during projection.

    The ``warnings`` attribute holds every diagnostic collected up to the
    point of failure. It is never ``None``; an empty collection means the
    walk failed before any diagnostic was produced.

    Args:
        message: Human-readable error description.
        warnings: Diagnostics accumulated before the failure.
    """

    exit_code = EXIT_PROJECTION_ERROR

    def __init__(self, message: str, warnings: Optional[Warnings] = None):
        super().__init__(message)
        if warnings is None:
            from specshift.diag import Warnings

            warnings = Warnings()
        self.warnings = warnings


class InvalidSpecError(ProjectionError):
    """Raised when the IR is structurally invalid for the requested target."""


class UnsupportedTargetError(ProjectionError):
    """Raised when the requested target version is not recognised."""


class StrictDownlevelError(ProjectionError):
    """Raised in strict mode when a 3.1-only feature cannot be expressed in 3.0."""


class SpecValidationError(ProjectionError):
    """Raised when the validation port rejects the projected document.

    The validator's own exception is attached as ``__cause__``.
    """

    exit_code = EXIT_VALIDATION_ERROR
