"""Illustrative example values attached to content.

An example is either carried inline (``value``) or hosted elsewhere
(``externalValue``). Which variant applies is decided by the keys present;
a payload carrying both, or neither, is rejected.
"""

from typing import Annotated, Any, Union

from pydantic import Discriminator, Tag

from .base import Node

INLINE = "inline"
EXTERNAL = "external"


class NodeExample(Node):
    key: str
    value: Any


class NodeExternalExample(Node):
    key: str
    external_value: str


def _example_kind(data: Any) -> str | None:
    if isinstance(data, NodeExample):
        return INLINE
    if isinstance(data, NodeExternalExample):
        return EXTERNAL
    if not isinstance(data, dict):
        return None
    inline = "value" in data
    external = "externalValue" in data or "external_value" in data
    if inline == external:
        return None
    return INLINE if inline else EXTERNAL


Example = Annotated[
    Union[Annotated[NodeExample, Tag(INLINE)], Annotated[NodeExternalExample, Tag(EXTERNAL)]],
    Discriminator(
        _example_kind,
        custom_error_type="example_kind",
        custom_error_message="an example carries exactly one of 'value' or 'externalValue'",
    ),
]
