"""Response code grammar and most-specific response selection.

A response code is either a literal status ("404"), a wildcard where some
digits are replaced by an uppercase ``X`` ("4XX", "XXX"), or the sentinel
``default``. When several responses match a concrete status, consumers
must pick the most specific one: an exact code beats a wildcard, fewer
wildcard digits beat more, and ``default`` comes last.
"""

import re
from typing import Sequence

from http_spec.model.operation import HttpOperationResponse

DEFAULT_CODE = "default"
WILDCARD = "X"

_CODE_RE = re.compile(r"^[1-5X][0-9X]{2}$")


def is_valid_response_code(code: str) -> bool:
    return code == DEFAULT_CODE or bool(_CODE_RE.match(code))


def response_code_matches(code: str, status: int) -> bool:
    """Return True if response ``code`` covers the concrete ``status``."""
    if not is_valid_response_code(code):
        return False
    if code == DEFAULT_CODE:
        return True
    if not 100 <= status <= 599:
        return False
    digits = str(status)
    return all(c == WILDCARD or c == d for c, d in zip(code, digits))


def code_specificity(code: str) -> tuple[int, int]:
    """Sort key: lower is more specific.

    Returns ``(is_default, wildcard_count)``.
    """
    if code == DEFAULT_CODE:
        return (1, 3)
    return (0, code.count(WILDCARD))


def select_response(
    responses: Sequence[HttpOperationResponse], status: int
) -> HttpOperationResponse | None:
    """Pick the most specific response declared for ``status``.

    Ties keep declaration order. Returns None when nothing matches.
    """
    candidates = [r for r in responses if response_code_matches(r.code, status)]
    if not candidates:
        return None
    # sorted() is stable, so equally specific codes keep their order.
    return sorted(candidates, key=lambda r: code_specificity(r.code))[0]
