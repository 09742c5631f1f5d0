"""HTTP operations: one method + path, with its request and responses."""

from typing import Any

from pydantic import Field, field_validator

from .base import Extensions, Model, Node, Server
from .params import HttpCookieParam, HttpHeaderParam, HttpPathParam, HttpQueryParam, MediaTypeContent
from .security import SecurityRequirement


class HttpOperationRequestBody(Model):
    contents: list[MediaTypeContent] | None = None
    required: bool | None = None
    description: str | None = None


class HttpOperationRequest(Model):
    path: list[HttpPathParam] | None = None
    query: list[HttpQueryParam] | None = None
    headers: list[HttpHeaderParam] | None = None
    cookie: list[HttpCookieParam] | None = None
    body: HttpOperationRequestBody | None = None

    def params_by_location(self) -> dict[str, list]:
        """Return the declared parameter lists keyed by location name."""
        return {
            "path": self.path or [],
            "query": self.query or [],
            "headers": self.headers or [],
            "cookie": self.cookie or [],
        }


class HttpOperationResponse(Model):
    # A literal status ("200"), a wildcard with X digits ("2XX", "XXX")
    # or "default". See http_spec.responses for matching rules.
    code: str
    contents: list[MediaTypeContent] | None = None
    headers: list[HttpHeaderParam] | None = None
    description: str | None = None

    @field_validator("code", mode="before")
    @classmethod
    def _code_as_text(cls, code: Any) -> Any:
        # YAML reads an unquoted 200 as an integer.
        return str(code) if isinstance(code, int) else code


class _OperationShape(Node):
    method: str = Field(min_length=1)
    path: str
    request: HttpOperationRequest | None = None
    responses: list[HttpOperationResponse]
    deprecated: bool = False
    internal: bool = False
    extensions: Extensions | None = None

    @field_validator("method")
    @classmethod
    def _lower_method(cls, method: str) -> str:
        return method.lower()


class HttpCallbackOperation(_OperationShape):
    """An operation the API provider calls back on the consumer.

    Callbacks cannot override servers or security and cannot declare
    callbacks of their own; such keys are dropped on construction.
    """

    callback_name: str


class HttpOperation(_OperationShape):
    """A single HTTP method on a path template.

    ``security`` is a list of alternatives (any one may be satisfied), each
    alternative being a list of schemes that must all apply. ``None`` means
    the service-level default applies; an empty list means the operation
    explicitly requires no authentication.
    """

    servers: list[Server] | None = None
    callbacks: list[HttpCallbackOperation] | None = None
    security: list[SecurityRequirement] | None = None

    def inherits_security(self) -> bool:
        return self.security is None

    def effective_security(self, service_security: list | None) -> list[SecurityRequirement]:
        """Resolve the requirement alternatives that apply to this operation.

        ``service_security`` is the service's default scheme list; each of
        its schemes is accepted on its own.
        """
        if self.security is not None:
            return self.security
        if not service_security:
            return []
        return [[scheme] for scheme in service_security]
