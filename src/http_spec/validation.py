"""Structural validation of HTTP contract trees.

Construction (pydantic) already rejects missing fields and styles that are
illegal for their location. This module adds the cross-entity checks that
a single model cannot see on its own (duplicate parameter names, path
placeholders, security references, response codes, OAuth2 flows) and
reports everything as a flat list of ``Violation`` objects. Validation
never stops at the first defect.
"""

import logging
import re
from enum import Enum
from typing import Any, Iterable

from pydantic import BaseModel, ValidationError
from pydantic.alias_generators import to_camel

from http_spec.model.examples import EXTERNAL, INLINE
from http_spec.model.operation import HttpCallbackOperation, HttpOperation, HttpOperationRequest
from http_spec.model.params import ILLEGAL_STYLE, HttpContent, HttpEncoding, HttpParam
from http_spec.model.security import SCHEME_TAGS, OAuth2SecurityScheme
from http_spec.model.service import HttpDocument, HttpService
from http_spec.model.styles import ParamLocation, allowed_styles_text, is_style_allowed
from http_spec.responses import is_valid_response_code

logger = logging.getLogger(__name__)

_PLACEHOLDER_RE = re.compile(r"\{([^{}]+)\}")

# Required URL fields for each OAuth2 flow, by canonical flow name.
_FLOW_URLS = {
    "implicit": ("authorization_url",),
    "authorizationCode": ("authorization_url", "token_url"),
    "password": ("token_url",),
    "clientCredentials": ("token_url",),
}
_FLOW_URL_ALIASES = ("authorizationUrl", "tokenUrl")

_UNION_TAGS = frozenset((*SCHEME_TAGS, INLINE, EXTERNAL))


class ViolationKind(str, Enum):
    MISSING_REQUIRED_FIELD = "MissingRequiredField"
    ILLEGAL_STYLE_FOR_LOCATION = "IllegalStyleForLocation"
    DUPLICATE_PARAMETER_NAME = "DuplicateParameterName"
    DANGLING_SECURITY_REFERENCE = "DanglingSecurityReference"
    EMPTY_OAUTH_FLOWS = "EmptyOauthFlows"
    INVALID_RESPONSE_CODE = "InvalidResponseCode"
    UNKNOWN_PATH_PARAMETER = "UnknownPathParameter"
    UNKNOWN_ENCODING_PROPERTY = "UnknownEncodingProperty"
    INVALID_VALUE = "InvalidValue"


class Severity(str, Enum):
    ERROR = "error"
    WARNING = "warning"


class Violation(BaseModel):
    """One defect found in a contract tree."""

    kind: ViolationKind
    location: str  # dotted path in the canonical form, e.g. operations[0].request.query[1]
    message: str
    severity: Severity = Severity.ERROR

    def __str__(self) -> str:
        return f"{self.severity.value}: {self.location}: {self.kind.value}: {self.message}"


class InvalidDocumentError(ValueError):
    """Raised when a contract tree has error-level violations."""

    def __init__(self, violations: list[Violation]):
        self.violations = violations
        errors = [v for v in violations if v.severity == Severity.ERROR]
        message = f"{len(errors)} violation(s) found"
        if errors:
            message += f"; first: {errors[0]}"
        super().__init__(message)


def has_errors(violations: Iterable[Violation]) -> bool:
    return any(v.severity == Severity.ERROR for v in violations)


def _format_loc(loc: Iterable[Any], prefix: str = "") -> str:
    text = prefix
    after_index = False
    for part in loc:
        if isinstance(part, int):
            text += f"[{part}]"
            after_index = True
            continue
        # list items of a tagged union get their variant tag as an extra segment
        if not (after_index and part in _UNION_TAGS):
            text += f".{part}" if text else str(part)
        after_index = False
    return text


def violations_from_error(exc: ValidationError, prefix: str = "") -> list[Violation]:
    """Translate a pydantic construction error into violations."""
    violations = []
    for err in exc.errors():
        loc = err["loc"]
        if err["type"] == ILLEGAL_STYLE:
            kind = ViolationKind.ILLEGAL_STYLE_FOR_LOCATION
        elif "flows" in loc and loc[-1] in _FLOW_URL_ALIASES:
            kind = ViolationKind.EMPTY_OAUTH_FLOWS
        elif err["type"] in ("missing", "string_too_short"):
            kind = ViolationKind.MISSING_REQUIRED_FIELD
        elif loc and loc[-1] == "style":
            # not a member of the style vocabulary at all
            kind = ViolationKind.ILLEGAL_STYLE_FOR_LOCATION
        else:
            kind = ViolationKind.INVALID_VALUE
        violations.append(Violation(kind=kind, location=_format_loc(loc, prefix), message=err["msg"]))
    return violations


def validate_document(doc: HttpDocument) -> list[Violation]:
    """Validate a whole document, collecting every violation."""
    violations = validate_service(doc.service)
    catalog = doc.service.scheme_keys()
    for i, operation in enumerate(doc.operations):
        violations += validate_operation(operation, security_schemes=catalog, location=f"operations[{i}]")
    logger.debug("validated %d operations: %d violations", len(doc.operations), len(violations))
    return violations


def validate_service(service: HttpService, location: str = "service") -> list[Violation]:
    violations = []
    if not getattr(service, "name", None):
        violations.append(_missing(f"{location}.name", "service name is required"))
    if getattr(service, "version", None) is None:
        violations.append(_missing(f"{location}.version", "service version is required"))

    for i, scheme in enumerate(service.security_schemes or []):
        violations += _check_scheme(scheme, f"{location}.securitySchemes[{i}]")

    catalog = service.scheme_keys()
    for i, scheme in enumerate(service.security or []):
        if scheme.key not in catalog:
            violations.append(_dangling(scheme.key, f"{location}.security[{i}]"))
    return violations


def validate_operation(
    operation: HttpOperation | HttpCallbackOperation,
    *,
    security_schemes: Iterable[str] | None = None,
    location: str = "operation",
) -> list[Violation]:
    """Validate one operation (or callback) and its callbacks.

    ``security_schemes`` is the catalog of known scheme keys. When None,
    security references are not checked.
    """
    violations = []
    if not getattr(operation, "method", None):
        violations.append(_missing(f"{location}.method", "operation method is required"))
    path = getattr(operation, "path", None)
    if path is None:
        violations.append(_missing(f"{location}.path", "operation path is required"))

    if operation.request is not None:
        violations += _check_request(operation.request, path or "", f"{location}.request")

    responses = getattr(operation, "responses", None)
    if not responses:
        violations.append(_missing(f"{location}.responses", "at least one response is required"))
    for i, response in enumerate(responses or []):
        loc = f"{location}.responses[{i}]"
        if not is_valid_response_code(response.code):
            violations.append(
                Violation(
                    kind=ViolationKind.INVALID_RESPONSE_CODE,
                    location=f"{loc}.code",
                    message=f"'{response.code}' is not a status code, an X wildcard or 'default'",
                )
            )
        violations += _check_params(response.headers or [], f"{loc}.headers")
        violations += _check_contents(response.contents or [], f"{loc}.contents")

    security = getattr(operation, "security", None)
    if security and security_schemes is not None:
        catalog = set(security_schemes)
        for i, requirement in enumerate(security):
            for j, scheme in enumerate(requirement):
                if scheme.key not in catalog:
                    violations.append(_dangling(scheme.key, f"{location}.security[{i}][{j}]"))

    for i, callback in enumerate(getattr(operation, "callbacks", None) or []):
        cb_loc = f"{location}.callbacks[{i}]"
        if not getattr(callback, "callback_name", None):
            violations.append(_missing(f"{cb_loc}.callbackName", "callback name is required"))
        violations += validate_operation(callback, location=cb_loc)
    return violations


def _check_request(request: HttpOperationRequest, path: str, location: str) -> list[Violation]:
    violations = []
    for name, params in request.params_by_location().items():
        violations += _check_params(params, f"{location}.{name}")

    placeholders = set(_PLACEHOLDER_RE.findall(path))
    for i, param in enumerate(request.path or []):
        if param.name not in placeholders:
            violations.append(
                Violation(
                    kind=ViolationKind.UNKNOWN_PATH_PARAMETER,
                    location=f"{location}.path[{i}].name",
                    message=f"path parameter '{param.name}' does not appear in '{path}'",
                )
            )

    if request.body is not None:
        violations += _check_contents(request.body.contents or [], f"{location}.body.contents")
    return violations


def _check_params(params: list[HttpParam], location: str) -> list[Violation]:
    violations = []
    seen: set[str] = set()
    for i, param in enumerate(params):
        loc = f"{location}[{i}]"
        if not getattr(param, "name", None):
            violations.append(_missing(f"{loc}.name", "parameter name is required"))
        elif param.name in seen:
            violations.append(
                Violation(
                    kind=ViolationKind.DUPLICATE_PARAMETER_NAME,
                    location=f"{loc}.name",
                    message=f"parameter '{param.name}' is declared more than once",
                )
            )
        else:
            seen.add(param.name)
        if param.location is not None:
            violations += _check_style(param.location, getattr(param, "style", None), f"{loc}.style")
        violations += _check_content(param, loc)
    return violations


def _check_contents(contents: list[HttpContent], location: str) -> list[Violation]:
    violations = []
    for i, content in enumerate(contents):
        violations += _check_content(content, f"{location}[{i}]")
    return violations


def _check_content(content: HttpContent, location: str) -> list[Violation]:
    violations = []
    encodings: list[HttpEncoding] = content.encodings or []
    schema = content.schema_
    known = None
    if isinstance(schema, dict) and isinstance(schema.get("properties"), dict):
        known = schema["properties"]

    for i, encoding in enumerate(encodings):
        loc = f"{location}.encodings[{i}]"
        violations += _check_style(ParamLocation.ENCODING, getattr(encoding, "style", None), f"{loc}.style")
        if known is not None and encoding.property not in known:
            violations.append(
                Violation(
                    kind=ViolationKind.UNKNOWN_ENCODING_PROPERTY,
                    location=f"{loc}.property",
                    message=f"schema has no property '{encoding.property}'",
                    severity=Severity.WARNING,
                )
            )
        violations += _check_params(encoding.headers or [], f"{loc}.headers")
    return violations


def _check_style(location: ParamLocation, style: Any, loc: str) -> list[Violation]:
    if style is None:
        return [_missing(loc, "style is required")]
    if is_style_allowed(location, style):
        return []
    value = getattr(style, "value", style)
    return [
        Violation(
            kind=ViolationKind.ILLEGAL_STYLE_FOR_LOCATION,
            location=loc,
            message=f"style '{value}' is not allowed for {location.value} values "
            f"(allowed: {allowed_styles_text(location)})",
        )
    ]


def _check_scheme(scheme: Any, location: str) -> list[Violation]:
    if not isinstance(scheme, OAuth2SecurityScheme):
        return []
    flows = scheme.flows.present()
    if not flows:
        return [
            Violation(
                kind=ViolationKind.EMPTY_OAUTH_FLOWS,
                location=f"{location}.flows",
                message=f"oauth2 scheme '{scheme.key}' declares no flows",
            )
        ]
    violations = []
    for name, flow in flows.items():
        for field in _FLOW_URLS[name]:
            if not getattr(flow, field, None):
                alias = to_camel(field)
                violations.append(
                    Violation(
                        kind=ViolationKind.EMPTY_OAUTH_FLOWS,
                        location=f"{location}.flows.{name}.{alias}",
                        message=f"{name} flow of '{scheme.key}' requires a non-empty {alias}",
                    )
                )
    return violations


def _missing(location: str, message: str) -> Violation:
    return Violation(kind=ViolationKind.MISSING_REQUIRED_FIELD, location=location, message=message)


def _dangling(key: str, location: str) -> Violation:
    return Violation(
        kind=ViolationKind.DANGLING_SECURITY_REFERENCE,
        location=location,
        message=f"security scheme '{key}' is not in the service's securitySchemes",
    )


def check_document(data: dict[str, Any]) -> list[Violation]:
    """Build a document from its canonical mapping and validate it.

    Construction failures are reported as violations too. When the document
    as a whole does not build, the service and each operation are built on
    their own, and every part that does build still goes through the tree
    walk.
    """
    try:
        doc = HttpDocument.model_validate(data)
    except ValidationError:
        logger.debug("document did not build, checking its parts one by one")
    else:
        return validate_document(doc)

    violations = []
    raw_service = data.get("service")
    if raw_service is None:
        violations.append(_missing("service", "service is required"))
        catalog = set()
    else:
        try:
            service = HttpService.model_validate(raw_service)
        except ValidationError as exc:
            violations += violations_from_error(exc, prefix="service")
            catalog = _raw_scheme_keys(raw_service)
        else:
            violations += validate_service(service)
            catalog = service.scheme_keys()

    raw_operations = data.get("operations") or []
    if not isinstance(raw_operations, list):
        violations.append(
            Violation(kind=ViolationKind.INVALID_VALUE, location="operations", message="operations must be a list")
        )
        return violations
    for i, raw_operation in enumerate(raw_operations):
        location = f"operations[{i}]"
        try:
            operation = HttpOperation.model_validate(raw_operation)
        except ValidationError as exc:
            violations += violations_from_error(exc, prefix=location)
        else:
            violations += validate_operation(operation, security_schemes=catalog, location=location)
    return violations


def _raw_scheme_keys(raw_service: Any) -> set[str]:
    if not isinstance(raw_service, dict):
        return set()
    schemes = raw_service.get("securitySchemes") or raw_service.get("security_schemes") or []
    if not isinstance(schemes, list):
        return set()
    return {s["key"] for s in schemes if isinstance(s, dict) and isinstance(s.get("key"), str)}


def ensure_valid(doc: HttpDocument) -> HttpDocument:
    """Return ``doc`` unchanged, or raise InvalidDocumentError."""
    violations = validate_document(doc)
    if has_errors(violations):
        raise InvalidDocumentError(violations)
    return doc
