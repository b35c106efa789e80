"""Document projector for OpenAPI 3.1.2.

3.1 is the feature-rich target: webhooks, ``components.pathItems``,
``info.summary``, ``license.identifier`` and ``mutualTLS`` pass through
unchanged. Two 3.1 validity rules are enforced here:

* ``license.identifier`` and ``license.url`` are mutually exclusive. Setting
  both is a hard error (:class:`~specshift.exceptions.InvalidSpecError`).
* A declared server-variable ``enum`` must be non-empty and contain the
  ``default``. Violations are reported as diagnostics, never as errors.

A document without servers gets a single default server at ``/``.
"""

from __future__ import annotations

import logging
from typing import Optional

from specshift import models as ir
from specshift.diag import WarningCode
from specshift.exceptions import InvalidSpecError
from specshift.export import types as oas
from specshift.export.base import DocumentProjector
from specshift.export.context import pointer
from specshift.export.schema_common import or_none
from specshift.export.schema_v31 import schema_v31
from specshift.export.target import JSON_SCHEMA_DIALECT_31, Target

logger = logging.getLogger(__name__)

DEFAULT_SERVER_URL = "/"


class V31Projector(DocumentProjector):
    """Projects an IR spec to an OpenAPI 3.1.2 document."""

    target = Target.V31

    def schema(self, schema: Optional[ir.Schema], path: str) -> Optional[oas.SchemaV31]:
        return schema_v31(schema, self.ctx, path)

    def project(self, spec: ir.Spec) -> oas.DocumentV31:
        doc = oas.DocumentV31(
            openapi=self.target.value,
            json_schema_dialect=JSON_SCHEMA_DIALECT_31,
            info=self.info(spec.info),
            servers=self.servers(spec.servers) or [oas.Server(url=DEFAULT_SERVER_URL)],
            paths=self.paths(spec.paths) or None,
            tags=self.tags(spec.tags),
        )

        if spec.components is not None:
            doc.components = self.components(spec.components)
        if spec.webhooks:
            doc.webhooks = self.paths(spec.webhooks, "#/webhooks")

        doc.security = self.security(spec.security)
        doc.external_docs = self.external_docs(spec.external_docs)
        doc.extensions = self.ext(spec.extensions)

        logger.debug(
            "projected %d path(s), %d webhook(s) to OpenAPI %s",
            len(spec.paths),
            len(spec.webhooks),
            self.target,
        )
        return doc

    def info(self, info: ir.Info) -> oas.InfoV31:
        return oas.InfoV31(
            title=info.title,
            summary=or_none(info.summary),
            description=or_none(info.description),
            terms_of_service=or_none(info.terms_of_service),
            contact=self.contact(info.contact),
            license=self.license(info.license),
            version=info.version,
            extensions=self.ext(info.extensions),
        )

    def license(self, license: Optional[ir.License]) -> Optional[oas.LicenseV31]:
        """Project *license*.

        Raises:
            InvalidSpecError: If both ``identifier`` and ``url`` are set.
        """
        if license is None:
            return None
        if license.identifier and license.url:
            self.fail(
                InvalidSpecError,
                "license identifier and url are mutually exclusive "
                "in OpenAPI 3.1; both fields cannot be set",
            )
        return oas.LicenseV31(
            name=license.name,
            identifier=or_none(license.identifier),
            url=or_none(license.url),
            extensions=self.ext(license.extensions),
        )

    def server_variable(self, variable: ir.ServerVariable, path: str) -> oas.ServerVariable:
        if variable.enum is not None:
            if not variable.enum:
                self.ctx.warn(
                    WarningCode.SERVER_VARIABLE_EMPTY_ENUM,
                    path,
                    "server variable enum MUST NOT be empty in OpenAPI 3.1",
                )
            elif variable.default not in variable.enum:
                self.ctx.warn(
                    WarningCode.SERVER_VARIABLE_DEFAULT_NOT_IN_ENUM,
                    path,
                    f"server variable default {variable.default!r} MUST exist "
                    "in enum values in OpenAPI 3.1",
                )
        return super().server_variable(variable, path)

    def components(self, components: ir.Components) -> oas.ComponentsV31:
        schemes = {
            name: self.security_scheme(scheme)
            for name, scheme in components.security_schemes.items()
        }
        path_items = {
            name: self.path_item(item, pointer("#/components/pathItems", name))
            for name, item in components.path_items.items()
        }
        return oas.ComponentsV31(
            **self.common_components(components),
            security_schemes=schemes or None,
            path_items=path_items or None,
        )
