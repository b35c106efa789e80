"""Projection orchestrator: IR in, rendered OpenAPI bytes out.

:func:`project` runs the whole pipeline for one target:

1. reject a missing spec;
2. dispatch to the 3.0 or 3.1 document projector;
3. render JSON;
4. run the optional validator on the JSON bytes;
5. render YAML.

Any failure raises a :class:`~specshift.exceptions.ProjectionError` whose
``warnings`` carries every diagnostic gathered before the failure. Each call
uses its own projector and diagnostics, so concurrent calls on distinct
specs need no locking.
"""

from __future__ import annotations

import logging
import threading
from dataclasses import dataclass
from typing import TYPE_CHECKING, Optional, Union

from specshift import models as ir
from specshift.diag import Warnings
from specshift.exceptions import (
    InvalidSpecError,
    ProjectionError,
    SpecValidationError,
)
from specshift.export.base import DocumentProjector
from specshift.export.render import to_json, to_yaml
from specshift.export.spec_v30 import V30Projector
from specshift.export.spec_v31 import V31Projector
from specshift.export.target import Target, parse_target

if TYPE_CHECKING:
    from specshift.validate import Validator

logger = logging.getLogger(__name__)

_PROJECTORS: dict[Target, type[DocumentProjector]] = {
    Target.V30: V30Projector,
    Target.V31: V31Projector,
}


@dataclass
class ProjectionConfig:
    """Options for a single :func:`project` call.

    Attributes:
        target: Output version (a :class:`Target` or a string accepted by
            :func:`~specshift.export.target.parse_target`).
        strict_downlevel: Turn webhooks, ``mutualTLS`` schemes and
            ``info.summary`` into hard errors when targeting 3.0.
        validator: Optional validator run on the rendered JSON.
    """

    target: Union[Target, str] = Target.V30
    strict_downlevel: bool = False
    validator: Optional[Validator] = None


@dataclass(frozen=True)
class ProjectionResult:
    """Output of a successful projection."""

    json: bytes
    yaml: bytes
    warnings: Warnings


def project(
    spec: Optional[ir.Spec],
    config: ProjectionConfig,
    cancel: Optional[threading.Event] = None,
) -> ProjectionResult:
    """Project *spec* to the target in *config* and render it.

    Args:
        spec: The IR to project. It is never modified.
        config: Target, strictness and optional validator.
        cancel: Event passed to the validator only; the projection walk
            itself is not interruptible.

    Returns:
        The JSON and YAML renderings plus diagnostics.

    Raises:
        InvalidSpecError: *spec* is ``None`` or invalid for the target.
        UnsupportedTargetError: The target is not recognised.
        StrictDownlevelError: Strict mode and a 3.1-only feature is present.
        SpecValidationError: The validator rejected the document.
    """
    if spec is None:
        raise InvalidSpecError("spec is nil")

    target = parse_target(config.target)
    projector = _PROJECTORS[target](strict_downlevel=config.strict_downlevel)
    logger.debug("projecting to OpenAPI %s (strict=%s)", target, config.strict_downlevel)

    try:
        document = projector.project(spec)
    except ProjectionError as exc:
        exc.warnings = projector.warnings
        raise

    primary = to_json(document)

    if config.validator is not None:
        try:
            config.validator.validate(cancel, primary, target)
        except Exception as exc:
            raise SpecValidationError(
                f"OpenAPI {target} validation failed: {exc}",
                warnings=projector.warnings,
            ) from exc

    secondary = to_yaml(document)
    logger.debug(
        "projection to OpenAPI %s done with %d warning(s)", target, len(projector.warnings)
    )
    return ProjectionResult(json=primary, yaml=secondary, warnings=projector.warnings)
