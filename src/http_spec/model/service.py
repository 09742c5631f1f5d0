"""The service document: identity, metadata and its operations."""

from typing import Any

from pydantic import Field, field_validator

from .base import Extensions, Model, Node, Server
from .operation import HttpOperation
from .security import HttpSecurityScheme


class Contact(Model):
    name: str | None = None
    url: str | None = None
    email: str | None = None


class License(Model):
    name: str
    url: str | None = None
    identifier: str | None = None


class Logo(Model):
    alt_text: str
    href: str | None = None
    url: str | None = None
    background_color: str | None = None


class HttpService(Node):
    """Top-level description of an HTTP API.

    ``security_schemes`` is the catalog of every scheme the API knows;
    ``security`` lists the schemes applied by default and must only name
    schemes from the catalog.
    """

    name: str = Field(min_length=1)
    version: str
    servers: list[Server] | None = None
    security: list[HttpSecurityScheme] | None = None
    security_schemes: list[HttpSecurityScheme] | None = None
    terms_of_service: str | None = None
    contact: Contact | None = None
    license: License | None = None
    logo: Logo | None = None
    extensions: Extensions | None = None

    @field_validator("version", mode="before")
    @classmethod
    def _version_as_text(cls, version: Any) -> Any:
        if isinstance(version, (int, float)) and not isinstance(version, bool):
            return str(version)
        return version

    def scheme_keys(self) -> set[str]:
        return {scheme.key for scheme in self.security_schemes or []}


class HttpDocument(Model):
    """A service together with its operations, in rendering order."""

    service: HttpService
    operations: list[HttpOperation] = Field(default_factory=list)

    def find_operation(self, method: str, path: str) -> HttpOperation | None:
        method = method.lower()
        for operation in self.operations:
            if operation.method == method and operation.path == path:
                return operation
        return None
