"""Reading and writing documents in their canonical form.

The canonical form is the camelCase mapping produced by ``dump_document``:
``{"service": {...}, "operations": [...]}``. It can be stored as JSON or
YAML; both are read with PyYAML since JSON is a YAML subset.
"""

import copy
import json
import logging
from pathlib import Path
from typing import Any

import yaml
from pydantic import ValidationError

from http_spec.model.service import HttpDocument
from http_spec.model.styles import ParamLocation, default_style
from http_spec.validation import InvalidDocumentError, violations_from_error

logger = logging.getLogger(__name__)

FORMATS = ("json", "yaml")

_REQUEST_LOCATIONS = {
    "path": ParamLocation.PATH,
    "query": ParamLocation.QUERY,
    "headers": ParamLocation.HEADER,
    "cookie": ParamLocation.COOKIE,
}


class UnsupportedDocumentError(ValueError):
    """Raised when a file does not hold a canonical HTTP document."""


def dump_document(doc: HttpDocument) -> dict[str, Any]:
    """Return the canonical, JSON-compatible mapping for ``doc``.

    Fields that were never set are left out, so an absent ``security`` stays
    absent and an explicit empty one stays empty.
    """
    return doc.model_dump(mode="json", by_alias=True, exclude_unset=True)


def load_document(data: dict[str, Any]) -> HttpDocument:
    """Build a document from its canonical mapping.

    Raises InvalidDocumentError listing every construction failure.
    """
    try:
        return HttpDocument.model_validate(data)
    except ValidationError as exc:
        raise InvalidDocumentError(violations_from_error(exc)) from exc


def detect_format(file_path: Path) -> str:
    """Detect whether a document file is JSON or YAML.

    Returns: 'json' or 'yaml'.
    """
    suffix = file_path.suffix.lower()
    if suffix == ".json":
        return "json"
    if suffix in (".yaml", ".yml"):
        return "yaml"

    text = file_path.read_text(encoding="utf-8")
    try:
        json.loads(text)
        return "json"
    except ValueError:
        return "yaml"


def read_raw(file_path: Path) -> dict[str, Any]:
    """Parse a document file into a plain mapping without building models."""
    text = file_path.read_text(encoding="utf-8")
    try:
        data = yaml.safe_load(text)
    except yaml.YAMLError as e:
        raise UnsupportedDocumentError(f"{file_path}: not valid JSON or YAML: {e}") from e

    if not isinstance(data, dict) or "service" not in data:
        raise UnsupportedDocumentError(f"{file_path}: expected a mapping with a 'service' key")
    logger.debug("read %s", file_path)
    return data


def read_document(file_path: Path, *, fill_style_defaults: bool = False) -> HttpDocument:
    """Read and build a document from a JSON or YAML file."""
    data = read_raw(file_path)
    if fill_style_defaults:
        data = apply_style_defaults(data)
    return load_document(data)


def write_document(doc: HttpDocument, file_path: Path, fmt: str = "yaml") -> None:
    if fmt not in FORMATS:
        raise ValueError(f"unknown format {fmt!r}, expected one of {FORMATS}")
    data = dump_document(doc)
    if fmt == "json":
        text = json.dumps(data, indent=2, ensure_ascii=False) + "\n"
    else:
        text = yaml.safe_dump(data, sort_keys=False, allow_unicode=True)
    file_path.parent.mkdir(parents=True, exist_ok=True)
    file_path.write_text(text, encoding="utf-8")
    logger.debug("wrote %s (%s)", file_path, fmt)


def apply_style_defaults(data: dict[str, Any]) -> dict[str, Any]:
    """Return a copy of a raw document with omitted ``style`` keys filled in.

    Source formats let parameters and encodings leave their style implicit;
    the model always requires one. Existing styles are left untouched.
    """
    data = copy.deepcopy(data)
    for operation in data.get("operations") or []:
        _fill_operation(operation)
    return data


def _fill_operation(operation: dict[str, Any]) -> None:
    request = operation.get("request") or {}
    for key, location in _REQUEST_LOCATIONS.items():
        for param in request.get(key) or []:
            _fill_param(param, location)
    body = request.get("body") or {}
    for content in body.get("contents") or []:
        _fill_content(content)

    for response in operation.get("responses") or []:
        for header in response.get("headers") or []:
            _fill_param(header, ParamLocation.HEADER)
        for content in response.get("contents") or []:
            _fill_content(content)

    for callback in operation.get("callbacks") or []:
        _fill_operation(callback)


def _fill_param(param: dict[str, Any], location: ParamLocation) -> None:
    param.setdefault("style", default_style(location).value)
    _fill_content(param)


def _fill_content(content: dict[str, Any]) -> None:
    for encoding in content.get("encodings") or []:
        encoding.setdefault("style", default_style(ParamLocation.ENCODING).value)
        for header in encoding.get("headers") or []:
            _fill_param(header, ParamLocation.HEADER)
