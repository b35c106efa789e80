"""Builders shared by the 3.0 and 3.1 document projectors.

Most OpenAPI objects (operations, parameters, responses, media types and so
on) have the same shape in both versions and only differ in the schema
dialect nested inside them. :class:`DocumentProjector` builds all of them and
defers schemas, the document root, ``info`` and ``components`` to the
version-specific subclasses in :mod:`specshift.export.spec_v30` and
:mod:`specshift.export.spec_v31`.

Each builder takes the JSON pointer of the node it builds so that schema
diagnostics raised deep inside the tree report an exact location.
"""

from __future__ import annotations

import abc
import copy
import logging
from typing import Any, Optional

from specshift import models as ir
from specshift.diag import Warnings
from specshift.exceptions import ProjectionError
from specshift.export import types as oas
from specshift.export.context import ProjectionContext, pointer
from specshift.export.schema_common import copy_list, or_none
from specshift.export.target import Target

logger = logging.getLogger(__name__)

HTTP_METHODS = ("get", "put", "post", "delete", "options", "head", "patch", "trace")
"""Operation fields of a Path Item, in output order."""


class DocumentProjector(abc.ABC):
    """Walks an IR :class:`~specshift.models.Spec` into an output document.

    A projector is single-use: create one per projection call. Diagnostics
    accumulate on :attr:`warnings` and remain available after :meth:`project`
    raises.

    Args:
        strict_downlevel: Escalate selected down-level losses to errors.
    """

    target: Target

    def __init__(self, strict_downlevel: bool = False) -> None:
        self.ctx = ProjectionContext(self.target, strict_downlevel)

    @property
    def warnings(self) -> Warnings:
        return self.ctx.warnings

    @abc.abstractmethod
    def project(self, spec: ir.Spec) -> oas.Document:
        """Project *spec* into an output document.

        Raises:
            ProjectionError: On any hard failure. The exception's
                ``warnings`` holds the diagnostics gathered so far.
        """

    @abc.abstractmethod
    def schema(self, schema: Optional[ir.Schema], path: str) -> Optional[oas.AnySchema]:
        """Project one schema subtree in this target's dialect."""

    def fail(self, error: type[ProjectionError], message: str) -> None:
        """Abort the projection with *error*, attaching the current diagnostics."""
        logger.debug("projection to %s aborted: %s", self.target, message)
        raise error(message, warnings=self.warnings)

    def ext(self, extensions: Optional[dict[str, Any]]) -> Optional[dict[str, Any]]:
        return self.ctx.ext(extensions)

    # --- Document-level objects ---

    def contact(self, contact: Optional[ir.Contact]) -> Optional[oas.Contact]:
        if contact is None:
            return None
        return oas.Contact(
            name=or_none(contact.name),
            url=or_none(contact.url),
            email=or_none(contact.email),
            extensions=self.ext(contact.extensions),
        )

    def servers(self, servers: list[ir.Server], path: str = "#/servers") -> Optional[list[oas.Server]]:
        if not servers:
            return None
        return [self.server(s, pointer(path, i)) for i, s in enumerate(servers)]

    def server(self, server: ir.Server, path: str) -> oas.Server:
        variables = {
            name: self.server_variable(var, pointer(path, "variables", name))
            for name, var in server.variables.items()
        }
        return oas.Server(
            url=server.url,
            description=or_none(server.description),
            variables=variables or None,
            extensions=self.ext(server.extensions),
        )

    def server_variable(self, variable: ir.ServerVariable, path: str) -> oas.ServerVariable:
        return oas.ServerVariable(
            enum=copy_list(variable.enum or []),
            default=variable.default,
            description=or_none(variable.description),
            extensions=self.ext(variable.extensions),
        )

    def tags(self, tags: list[ir.Tag]) -> Optional[list[oas.Tag]]:
        out = [
            oas.Tag(
                name=tag.name,
                description=or_none(tag.description),
                external_docs=self.external_docs(tag.external_docs),
                extensions=self.ext(tag.extensions),
            )
            for tag in tags
        ]
        return out or None

    def security(self, requirements: list[ir.SecurityRequirement]) -> Optional[list[dict[str, list[str]]]]:
        out = [
            {name: list(scopes) for name, scopes in requirement.items()}
            for requirement in requirements
        ]
        return out or None

    def external_docs(self, docs: Optional[ir.ExternalDocs]) -> Optional[oas.ExternalDocs]:
        if docs is None:
            return None
        return oas.ExternalDocs(
            url=docs.url,
            description=or_none(docs.description),
            extensions=self.ext(docs.extensions),
        )

    # --- Paths and operations ---

    def paths(self, items: dict[str, ir.PathItem], path: str = "#/paths") -> dict[str, oas.PathItem]:
        return {key: self.path_item(item, pointer(path, key)) for key, item in items.items()}

    def path_item(self, item: ir.PathItem, path: str) -> oas.PathItem:
        if item.ref:
            return oas.PathItem(ref=item.ref)
        out = oas.PathItem(
            summary=or_none(item.summary),
            description=or_none(item.description),
            parameters=self.parameters(item.parameters, pointer(path, "parameters")),
            extensions=self.ext(item.extensions),
        )
        for method in HTTP_METHODS:
            operation = getattr(item, method)
            if operation is not None:
                setattr(out, method, self.operation(operation, pointer(path, method)))
        return out

    def operation(self, operation: ir.Operation, path: str) -> oas.Operation:
        return oas.Operation(
            tags=copy_list(operation.tags),
            summary=or_none(operation.summary),
            description=or_none(operation.description),
            external_docs=self.external_docs(operation.external_docs),
            operation_id=or_none(operation.operation_id),
            parameters=self.parameters(operation.parameters, pointer(path, "parameters")),
            request_body=self.request_body(operation.request_body, pointer(path, "requestBody")),
            responses=self.responses(operation.responses, pointer(path, "responses")),
            callbacks=self.callbacks(operation.callbacks, pointer(path, "callbacks")),
            deprecated=or_none(operation.deprecated),
            security=self.security(operation.security),
            servers=self.servers(operation.servers, pointer(path, "servers")),
            extensions=self.ext(operation.extensions),
        )

    def parameters(self, params: list[ir.Parameter], path: str) -> Optional[list[oas.Parameter]]:
        if not params:
            return None
        return [self.parameter(p, pointer(path, i)) for i, p in enumerate(params)]

    def parameter(self, param: ir.Parameter, path: str) -> oas.Parameter:
        if param.ref:
            return oas.Parameter(ref=param.ref)
        return oas.Parameter(
            name=or_none(param.name),
            in_=or_none(param.in_),
            description=or_none(param.description),
            required=or_none(param.required),
            deprecated=or_none(param.deprecated),
            allow_empty_value=or_none(param.allow_empty_value),
            style=or_none(param.style),
            explode=or_none(param.explode),
            allow_reserved=or_none(param.allow_reserved),
            schema_=self.schema(param.schema_, pointer(path, "schema")),
            example=param.example,
            examples=self.examples(param.examples),
            content=self.content(param.content, pointer(path, "content")),
            extensions=self.ext(param.extensions),
        )

    def examples(self, examples: dict[str, ir.Example]) -> Optional[dict[str, oas.Example]]:
        return {name: self.example(ex) for name, ex in examples.items()} or None

    def example(self, example: ir.Example) -> oas.Example:
        if example.ref:
            return oas.Example(ref=example.ref)
        return oas.Example(
            summary=or_none(example.summary),
            description=or_none(example.description),
            value=copy.deepcopy(example.value),
            external_value=or_none(example.external_value),
            extensions=self.ext(example.extensions),
        )

    def request_body(self, body: Optional[ir.RequestBody], path: str) -> Optional[oas.RequestBody]:
        if body is None:
            return None
        if body.ref:
            return oas.RequestBody(ref=body.ref)
        return oas.RequestBody(
            description=or_none(body.description),
            content=self.content(body.content, pointer(path, "content")) or {},
            required=or_none(body.required),
            extensions=self.ext(body.extensions),
        )

    def responses(self, responses: dict[str, ir.Response], path: str) -> dict[str, oas.Response]:
        return {
            code: self.response(resp, pointer(path, code))
            for code, resp in responses.items()
        }

    def response(self, response: ir.Response, path: str) -> oas.Response:
        if response.ref:
            return oas.Response(ref=response.ref)
        links = {
            name: self.link(link, pointer(path, "links", name))
            for name, link in response.links.items()
        }
        return oas.Response(
            description=response.description,
            headers=self.headers(response.headers, pointer(path, "headers")),
            content=self.content(response.content, pointer(path, "content")),
            links=links or None,
            extensions=self.ext(response.extensions),
        )

    def content(self, content: dict[str, ir.MediaType], path: str) -> Optional[dict[str, oas.MediaType]]:
        out = {
            media: self.media_type(mt, pointer(path, media))
            for media, mt in content.items()
        }
        return out or None

    def media_type(self, media_type: ir.MediaType, path: str) -> oas.MediaType:
        encoding = {
            prop: self.encoding(enc, pointer(path, "encoding", prop))
            for prop, enc in media_type.encoding.items()
        }
        return oas.MediaType(
            schema_=self.schema(media_type.schema_, pointer(path, "schema")),
            example=copy.deepcopy(media_type.example),
            examples=self.examples(media_type.examples),
            encoding=encoding or None,
            extensions=self.ext(media_type.extensions),
        )

    def encoding(self, encoding: ir.Encoding, path: str) -> oas.Encoding:
        return oas.Encoding(
            content_type=or_none(encoding.content_type),
            headers=self.headers(encoding.headers, pointer(path, "headers")),
            style=or_none(encoding.style),
            explode=or_none(encoding.explode),
            allow_reserved=or_none(encoding.allow_reserved),
            extensions=self.ext(encoding.extensions),
        )

    def headers(self, headers: dict[str, ir.Header], path: str) -> Optional[dict[str, oas.Header]]:
        out = {name: self.header(h, pointer(path, name)) for name, h in headers.items()}
        return out or None

    def header(self, header: ir.Header, path: str) -> oas.Header:
        if header.ref:
            return oas.Header(ref=header.ref)
        return oas.Header(
            description=or_none(header.description),
            required=or_none(header.required),
            deprecated=or_none(header.deprecated),
            allow_empty_value=or_none(header.allow_empty_value),
            style=or_none(header.style),
            explode=or_none(header.explode),
            schema_=self.schema(header.schema_, pointer(path, "schema")),
            example=copy.deepcopy(header.example),
            examples=self.examples(header.examples),
            content=self.content(header.content, pointer(path, "content")),
            extensions=self.ext(header.extensions),
        )

    def link(self, link: ir.Link, path: str) -> oas.Link:
        if link.ref:
            return oas.Link(ref=link.ref)
        return oas.Link(
            operation_ref=or_none(link.operation_ref),
            operation_id=or_none(link.operation_id),
            parameters=copy.deepcopy(link.parameters) or None,
            request_body=copy.deepcopy(link.request_body),
            description=or_none(link.description),
            server=self.server(link.server, pointer(path, "server")) if link.server else None,
            extensions=self.ext(link.extensions),
        )

    def callbacks(self, callbacks: dict[str, ir.Callback], path: str) -> Optional[dict[str, oas.Callback]]:
        out = {
            name: self.callback(cb, pointer(path, name))
            for name, cb in callbacks.items()
        }
        return out or None

    def callback(self, callback: ir.Callback, path: str) -> oas.Callback:
        if callback.ref:
            return oas.Callback(ref=callback.ref)
        items = {
            expression: self.path_item(item, pointer(path, expression))
            for expression, item in callback.path_items.items()
        }
        return oas.Callback(path_items=items, extensions=self.ext(callback.extensions))

    # --- Security ---

    def security_scheme(self, scheme: ir.SecurityScheme) -> oas.SecurityScheme:
        if scheme.ref:
            return oas.SecurityScheme(ref=scheme.ref)
        return oas.SecurityScheme(
            type=scheme.type,
            description=or_none(scheme.description),
            name=or_none(scheme.name),
            in_=or_none(scheme.in_),
            scheme=or_none(scheme.scheme),
            bearer_format=or_none(scheme.bearer_format),
            flows=self.oauth_flows(scheme.flows),
            open_id_connect_url=or_none(scheme.open_id_connect_url),
            extensions=self.ext(scheme.extensions),
        )

    def oauth_flows(self, flows: Optional[ir.OAuthFlows]) -> Optional[oas.OAuthFlows]:
        """Project *flows*, returning ``None`` when no individual flow is set."""
        if flows is None:
            return None
        out = oas.OAuthFlows(
            implicit=self.oauth_flow(flows.implicit),
            password=self.oauth_flow(flows.password),
            client_credentials=self.oauth_flow(flows.client_credentials),
            authorization_code=self.oauth_flow(flows.authorization_code),
        )
        if not (out.implicit or out.password or out.client_credentials or out.authorization_code):
            return None
        out.extensions = self.ext(flows.extensions)
        return out

    def oauth_flow(self, flow: Optional[ir.OAuthFlow]) -> Optional[oas.OAuthFlow]:
        if flow is None:
            return None
        return oas.OAuthFlow(
            authorization_url=or_none(flow.authorization_url),
            token_url=or_none(flow.token_url),
            refresh_url=or_none(flow.refresh_url),
            scopes=dict(flow.scopes),
            extensions=self.ext(flow.extensions),
        )

    # --- Components ---

    def common_components(self, components: ir.Components, path: str = "#/components") -> dict[str, Any]:
        """Build the component maps that are identical in both versions.

        Returns keyword arguments for the version-specific components node.
        ``schemas`` is included (projected in this target's dialect);
        ``securitySchemes`` and ``pathItems`` are left to the subclass.
        """
        return {
            "schemas": {
                name: self.schema(s, pointer(path, "schemas", name))
                for name, s in components.schemas.items()
            } or None,
            "responses": {
                name: self.response(r, pointer(path, "responses", name))
                for name, r in components.responses.items()
            } or None,
            "parameters": {
                name: self.parameter(p, pointer(path, "parameters", name))
                for name, p in components.parameters.items()
            } or None,
            "examples": self.examples(components.examples),
            "request_bodies": {
                name: self.request_body(rb, pointer(path, "requestBodies", name))
                for name, rb in components.request_bodies.items()
            } or None,
            "headers": self.headers(components.headers, pointer(path, "headers")),
            "links": {
                name: self.link(link, pointer(path, "links", name))
                for name, link in components.links.items()
            } or None,
            "callbacks": self.callbacks(components.callbacks, pointer(path, "callbacks")),
            "extensions": self.ext(components.extensions),
        }
