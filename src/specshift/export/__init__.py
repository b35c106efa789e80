"""Projection of the IR onto OpenAPI 3.0.4 and 3.1.2 documents.

Use :func:`project` for the full pipeline (projection, rendering and
optional validation). The projectors and renderers are also importable on
their own for callers that need the document tree rather than bytes.
"""

from specshift.export.project import ProjectionConfig, ProjectionResult, project
from specshift.export.render import to_dict, to_json, to_yaml
from specshift.export.spec_v30 import V30Projector
from specshift.export.spec_v31 import V31Projector
from specshift.export.target import JSON_SCHEMA_DIALECT_31, Target, parse_target

__all__ = [
    "JSON_SCHEMA_DIALECT_31",
    "ProjectionConfig",
    "ProjectionResult",
    "Target",
    "V30Projector",
    "V31Projector",
    "parse_target",
    "project",
    "to_dict",
    "to_json",
    "to_yaml",
]
