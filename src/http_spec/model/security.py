"""Authentication mechanisms an API may require.

The set of mechanisms is closed: ``HttpSecurityScheme`` is a tagged union
keyed by ``type`` (and by ``scheme`` for ``type: http``). Consumers match on
those discriminants; supporting a new mechanism means adding a variant to
the union.
"""

from typing import Annotated, Any, Literal, Union

from pydantic import Discriminator, Field, Tag, field_validator

from .base import Model


class OAuth2Flow(Model):
    scopes: dict[str, str]
    refresh_url: str | None = None


class OAuth2ImplicitFlow(OAuth2Flow):
    authorization_url: str


class OAuth2AuthorizationCodeFlow(OAuth2Flow):
    authorization_url: str
    token_url: str


class OAuth2PasswordFlow(OAuth2Flow):
    token_url: str


class OAuth2ClientCredentialsFlow(OAuth2Flow):
    token_url: str


class OAuthFlows(Model):
    implicit: OAuth2ImplicitFlow | None = None
    password: OAuth2PasswordFlow | None = None
    client_credentials: OAuth2ClientCredentialsFlow | None = None
    authorization_code: OAuth2AuthorizationCodeFlow | None = None

    def present(self) -> dict[str, OAuth2Flow]:
        """Return the declared flows keyed by their canonical name."""
        flows = {
            "implicit": self.implicit,
            "password": self.password,
            "clientCredentials": self.client_credentials,
            "authorizationCode": self.authorization_code,
        }
        return {name: flow for name, flow in flows.items() if flow is not None}


class SecurityScheme(Model):
    key: str
    description: str | None = None


class ApiKeySecurityScheme(SecurityScheme):
    type: Literal["apiKey"]
    name: str
    in_: Literal["query", "header", "cookie"] = Field(alias="in")


class _HttpAuthScheme(SecurityScheme):
    type: Literal["http"]

    @field_validator("scheme", mode="before", check_fields=False)
    @classmethod
    def _lower_scheme(cls, value: Any) -> Any:
        # RFC 7235 auth-scheme names are case-insensitive.
        return value.lower() if isinstance(value, str) else value


class BearerSecurityScheme(_HttpAuthScheme):
    scheme: Literal["bearer"]
    bearer_format: str | None = None


class BasicSecurityScheme(_HttpAuthScheme):
    scheme: Literal["basic", "digest"]


class OpenIdConnectSecurityScheme(SecurityScheme):
    type: Literal["openIdConnect"]
    open_id_connect_url: str


class OAuth2SecurityScheme(SecurityScheme):
    type: Literal["oauth2"]
    flows: OAuthFlows


class MutualTLSSecurityScheme(SecurityScheme):
    type: Literal["mutualTLS"]


def _scheme_tag(data: Any) -> str | None:
    if isinstance(data, dict):
        kind = data.get("type")
        scheme = data.get("scheme")
    else:
        kind = getattr(data, "type", None)
        scheme = getattr(data, "scheme", None)
    if kind != "http":
        return kind
    if isinstance(scheme, str) and scheme.lower() == "bearer":
        return "http:bearer"
    return "http:basic"


# Discriminator tags of the scheme variants; pydantic reports them as
# path segments in construction errors.
SCHEME_TAGS = ("apiKey", "http:bearer", "http:basic", "openIdConnect", "oauth2", "mutualTLS")

HttpSecurityScheme = Annotated[
    Union[
        Annotated[ApiKeySecurityScheme, Tag("apiKey")],
        Annotated[BearerSecurityScheme, Tag("http:bearer")],
        Annotated[BasicSecurityScheme, Tag("http:basic")],
        Annotated[OpenIdConnectSecurityScheme, Tag("openIdConnect")],
        Annotated[OAuth2SecurityScheme, Tag("oauth2")],
        Annotated[MutualTLSSecurityScheme, Tag("mutualTLS")],
    ],
    Discriminator(_scheme_tag),
]

# One acceptable combination of schemes; all of them apply together.
SecurityRequirement = list[HttpSecurityScheme]
