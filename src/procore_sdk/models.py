"""Value types shared by the transport, pagination and dispatch layers."""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from enum import Enum
from typing import Any, Mapping, Union


class Environment(str, Enum):
    PRODUCTION = "production"
    SANDBOX = "sandbox"

    @classmethod
    def parse(cls, value: str | None) -> "Environment":
        """Anything other than ``"sandbox"`` (including ``None``) is production."""
        if value and value.strip().lower() == cls.SANDBOX.value:
            return cls.SANDBOX
        return cls.PRODUCTION


@dataclass(frozen=True)
class RequestDescriptor:
    """One pending Procore call.

    ``endpoint`` is relative to ``/rest/<version>`` (e.g. ``/projects/1/rfis``).
    ``company_id`` is sent as the ``Procore-Company-Id`` scope header.
    """

    method: str
    endpoint: str
    query: Mapping[str, Any] = field(default_factory=dict)
    body: Mapping[str, Any] | None = None
    headers: Mapping[str, str] = field(default_factory=dict)
    company_id: int | None = None

    def with_query(self, **params: Any) -> "RequestDescriptor":
        """Return a copy whose query also contains *params*."""
        return replace(self, query={**self.query, **params})


@dataclass(frozen=True)
class FilePart:
    """The binary part of a multipart upload."""

    filename: str
    content: bytes
    content_type: str = "application/octet-stream"


# ---------------------------------------------------------------------------
# Response shapes
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class ArrayShape:
    """The response body itself is the item array."""

    def extract(self, payload: Any) -> list[Any] | None:
        return payload if isinstance(payload, list) else None


@dataclass(frozen=True)
class WrappedShape:
    """Items are nested under ``payload[field]``."""

    field: str

    def extract(self, payload: Any) -> list[Any] | None:
        if not isinstance(payload, dict):
            return None
        items = payload.get(self.field)
        return items if isinstance(items, list) else None


ResponseShape = Union[ArrayShape, WrappedShape]

ARRAY = ArrayShape()
