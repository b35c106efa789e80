"""Numeric process exit codes following `clig.dev <https://clig.dev/>`_ conventions.

Each constant maps to a specific error category and is referenced by the
corresponding :class:`~specshift.exceptions.SpecshiftError` subclass.
Build scripts can inspect the exit code to tell a broken input apart from a
down-level failure without parsing stderr.

Example::

    $ specshift project api.yaml --target 3.0 --strict
    $ echo $?
    8   # EXIT_PROJECTION_ERROR -- a 3.1-only feature was rejected
"""

EXIT_SUCCESS = 0
"""The command completed successfully."""

EXIT_GENERIC_FAILURE = 1
"""An unclassified error occurred."""

EXIT_INVALID_USAGE = 2
"""The command was invoked with invalid arguments or missing required parameters."""

EXIT_IR_PARSE_ERROR = 7
"""The IR document could not be loaded or did not match the IR model."""

EXIT_PROJECTION_ERROR = 8
"""The IR could not be projected to the requested OpenAPI version."""

EXIT_VALIDATION_ERROR = 9
"""The projected document was rejected by the validator."""
