"""Shared building blocks for the HTTP contract models.

Every entity in the contract is an immutable pydantic model. Python
attributes are snake_case; the canonical (serialized) form uses camelCase,
and both spellings are accepted on input. Unknown keys are ignored so that
documents written by newer producers still load.
"""

from typing import Any

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel

# Vendor data carried through untouched (x-* keys and the like).
Extensions = dict[str, Any]


class Model(BaseModel):
    """Base class for all contract entities."""

    model_config = ConfigDict(
        frozen=True,
        extra="ignore",
        alias_generator=to_camel,
        populate_by_name=True,
    )


class NodeTag(Model):
    name: str
    description: str | None = None


class Node(Model):
    """Identity metadata shared by top-level graph entities."""

    id: str | None = None
    summary: str | None = None
    description: str | None = None
    tags: list[NodeTag] | None = None


class Server(Node):
    """A base URL (possibly templated) an API is served from."""

    url: str
    name: str | None = None
    variables: dict[str, Any] | None = None
