"""Document projector for OpenAPI 3.0.4.

3.0 cannot express several 3.1 features. They are dropped with a
diagnostic, and three of them (webhooks, ``info.summary`` and ``mutualTLS``
security schemes) become hard errors in strict mode. The remaining losses
(``license.identifier``, ``components.pathItems`` and the schema-level
down-levelling in :mod:`specshift.export.schema_v30`) are always reported
as diagnostics only.
"""

from __future__ import annotations

import logging
from typing import Optional

from specshift import models as ir
from specshift.diag import WarningCode
from specshift.exceptions import InvalidSpecError, StrictDownlevelError
from specshift.export import types as oas
from specshift.export.base import DocumentProjector
from specshift.export.context import pointer
from specshift.export.schema_common import or_none
from specshift.export.schema_v30 import schema_v30
from specshift.export.target import Target

logger = logging.getLogger(__name__)

MUTUAL_TLS = "mutualTLS"


class V30Projector(DocumentProjector):
    """Projects an IR spec to an OpenAPI 3.0.4 document."""

    target = Target.V30

    def schema(self, schema: Optional[ir.Schema], path: str) -> Optional[oas.SchemaV30]:
        return schema_v30(schema, self.ctx, path)

    def project(self, spec: ir.Spec) -> oas.DocumentV30:
        if not spec.paths:
            self.fail(InvalidSpecError, "OpenAPI 3.0 requires 'paths'")

        doc = oas.DocumentV30(
            openapi=self.target.value,
            info=self.info(spec.info),
            servers=self.servers(spec.servers),
            paths=self.paths(spec.paths),
            tags=self.tags(spec.tags),
        )

        if spec.info.summary and self.ctx.strict_downlevel:
            self.fail(StrictDownlevelError, "info.summary not supported in OpenAPI 3.0")

        if spec.components is not None:
            doc.components = self.components(spec.components)

        doc.security = self.security(spec.security)
        doc.external_docs = self.external_docs(spec.external_docs)
        doc.extensions = self.ext(spec.extensions)

        if spec.webhooks:
            self.ctx.warn(
                WarningCode.DOWNLEVEL_WEBHOOKS,
                "#/webhooks",
                "webhooks are 3.1-only; dropped",
            )
            if self.ctx.strict_downlevel:
                self.fail(StrictDownlevelError, "webhooks not supported in OpenAPI 3.0")

        logger.debug("projected %d path(s) to OpenAPI %s", len(doc.paths), self.target)
        return doc

    def info(self, info: ir.Info) -> oas.InfoV30:
        if info.summary:
            self.ctx.warn(
                WarningCode.DOWNLEVEL_INFO_SUMMARY,
                "#/info/summary",
                "info.summary is 3.1-only; dropped",
            )
        return oas.InfoV30(
            title=info.title,
            description=or_none(info.description),
            terms_of_service=or_none(info.terms_of_service),
            contact=self.contact(info.contact),
            license=self.license(info.license),
            version=info.version,
            extensions=self.ext(info.extensions),
        )

    def license(self, license: Optional[ir.License]) -> Optional[oas.LicenseV30]:
        if license is None:
            return None
        if license.identifier:
            self.ctx.warn(
                WarningCode.DOWNLEVEL_LICENSE_IDENTIFIER,
                "#/info/license",
                "license identifier is 3.1-only; dropped (use url instead)",
            )
        return oas.LicenseV30(
            name=license.name,
            url=or_none(license.url),
            extensions=self.ext(license.extensions),
        )

    def components(self, components: ir.Components) -> oas.ComponentsV30:
        """Project *components*, dropping 3.1-only entries.

        Raises:
            StrictDownlevelError: In strict mode, if any ``mutualTLS``
                security scheme was dropped.
        """
        out = oas.ComponentsV30(**self.common_components(components))

        schemes: dict[str, oas.SecurityScheme] = {}
        dropped: list[str] = []
        for name, scheme in components.security_schemes.items():
            if scheme.type == MUTUAL_TLS:
                dropped.append(name)
                continue
            schemes[name] = self.security_scheme(scheme)
        out.security_schemes = schemes or None

        for name in dropped:
            self.ctx.warn(
                WarningCode.DOWNLEVEL_MUTUAL_TLS,
                pointer("#/components/securitySchemes", name),
                "mutualTLS security type is 3.1-only; dropped",
            )
        if dropped and self.ctx.strict_downlevel:
            self.fail(StrictDownlevelError, "mutualTLS security type not supported in OpenAPI 3.0")

        if components.path_items:
            self.ctx.warn(
                WarningCode.DOWNLEVEL_PATH_ITEMS,
                "#/components/pathItems",
                "pathItems in components are 3.1-only; dropped",
            )
        return out
