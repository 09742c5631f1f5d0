"""Parameter serialization styles and where each one may be used."""

from enum import Enum


class HttpParamStyle(str, Enum):
    """How a parameter value is serialized on the wire."""

    SIMPLE = "simple"
    MATRIX = "matrix"
    LABEL = "label"
    FORM = "form"
    COMMA_DELIMITED = "commaDelimited"
    SPACE_DELIMITED = "spaceDelimited"
    PIPE_DELIMITED = "pipeDelimited"
    DEEP_OBJECT = "deepObject"


class ParamLocation(str, Enum):
    """Where a styled value lives: a request location or a body property."""

    PATH = "path"
    QUERY = "query"
    HEADER = "header"
    COOKIE = "cookie"
    ENCODING = "encoding"


ALLOWED_STYLES: dict[ParamLocation, frozenset[HttpParamStyle]] = {
    ParamLocation.PATH: frozenset({
        HttpParamStyle.LABEL,
        HttpParamStyle.MATRIX,
        HttpParamStyle.SIMPLE,
    }),
    ParamLocation.QUERY: frozenset({
        HttpParamStyle.FORM,
        HttpParamStyle.SPACE_DELIMITED,
        HttpParamStyle.PIPE_DELIMITED,
        HttpParamStyle.DEEP_OBJECT,
    }),
    ParamLocation.HEADER: frozenset({HttpParamStyle.SIMPLE}),
    ParamLocation.COOKIE: frozenset({HttpParamStyle.FORM}),
    ParamLocation.ENCODING: frozenset({
        HttpParamStyle.FORM,
        HttpParamStyle.COMMA_DELIMITED,
        HttpParamStyle.SPACE_DELIMITED,
        HttpParamStyle.PIPE_DELIMITED,
        HttpParamStyle.DEEP_OBJECT,
    }),
}

DEFAULT_STYLES: dict[ParamLocation, HttpParamStyle] = {
    ParamLocation.PATH: HttpParamStyle.SIMPLE,
    ParamLocation.QUERY: HttpParamStyle.FORM,
    ParamLocation.HEADER: HttpParamStyle.SIMPLE,
    ParamLocation.COOKIE: HttpParamStyle.FORM,
    ParamLocation.ENCODING: HttpParamStyle.FORM,
}


def is_style_allowed(location: ParamLocation | str, style: HttpParamStyle | str) -> bool:
    """Return True if ``style`` may be used for values at ``location``.

    Both arguments accept enum members or their string values. Unknown
    locations or styles are never allowed.
    """
    try:
        location = ParamLocation(location)
        style = HttpParamStyle(style)
    except ValueError:
        return False
    return style in ALLOWED_STYLES[location]


def default_style(location: ParamLocation | str) -> HttpParamStyle:
    """Style a parser should assume when the source document omits one."""
    return DEFAULT_STYLES[ParamLocation(location)]


def allowed_styles_text(location: ParamLocation) -> str:
    return ", ".join(sorted(s.value for s in ALLOWED_STYLES[location]))
