"""Content shapes and request parameters.

Parameters, request/response bodies and encoded body properties all share
the same content shape: an opaque JSON Schema, example values and
per-property encodings. A parameter additionally has a name and a
serialization style, and the legal styles depend on where the parameter
lives (see ``styles.ALLOWED_STYLES``).
"""

from typing import Any, ClassVar

from pydantic import Field, field_validator
from pydantic_core import PydanticCustomError

from .base import Model
from .examples import Example
from .styles import HttpParamStyle, ParamLocation, allowed_styles_text, is_style_allowed

ILLEGAL_STYLE = "illegal_style"


def _check_style(location: ParamLocation, style: HttpParamStyle) -> HttpParamStyle:
    if not is_style_allowed(location, style):
        raise PydanticCustomError(
            ILLEGAL_STYLE,
            "style '{style}' is not allowed for {location} values (allowed: {allowed})",
            {"style": style.value, "location": location.value, "allowed": allowed_styles_text(location)},
        )
    return style


class HttpEncoding(Model):
    """Serialization rules for one property of an object-shaped body."""

    property: str
    style: HttpParamStyle
    headers: "list[HttpHeaderParam] | None" = None
    media_type: str | None = None
    explode: bool | None = None
    allow_reserved: bool | None = None

    @field_validator("style")
    @classmethod
    def _style_is_legal(cls, style: HttpParamStyle) -> HttpParamStyle:
        return _check_style(ParamLocation.ENCODING, style)


class HttpContent(Model):
    schema_: dict[str, Any] | None = Field(default=None, alias="schema")
    examples: list[Example] | None = None
    encodings: list[HttpEncoding] | None = None


class MediaTypeContent(HttpContent):
    media_type: str


class HttpParam(HttpContent):
    """A named, styled value sent in one of the request locations.

    Subclasses pin ``location``; the base class does not check ``style``.
    """

    location: ClassVar[ParamLocation | None] = None

    name: str
    style: HttpParamStyle
    description: str | None = None
    explode: bool | None = None
    required: bool | None = None
    deprecated: bool | None = None

    @field_validator("style")
    @classmethod
    def _style_is_legal(cls, style: HttpParamStyle) -> HttpParamStyle:
        if cls.location is None:
            return style
        return _check_style(cls.location, style)


class HttpPathParam(HttpParam):
    location: ClassVar[ParamLocation | None] = ParamLocation.PATH


class HttpQueryParam(HttpParam):
    location: ClassVar[ParamLocation | None] = ParamLocation.QUERY

    allow_empty_value: bool | None = None
    allow_reserved: bool | None = None


class HttpHeaderParam(HttpParam):
    location: ClassVar[ParamLocation | None] = ParamLocation.HEADER


class HttpCookieParam(HttpParam):
    location: ClassVar[ParamLocation | None] = ParamLocation.COOKIE


# HttpEncoding and HttpHeaderParam reference each other.
for _model in (
    HttpEncoding,
    HttpContent,
    MediaTypeContent,
    HttpParam,
    HttpPathParam,
    HttpQueryParam,
    HttpHeaderParam,
    HttpCookieParam,
):
    _model.model_rebuild()
