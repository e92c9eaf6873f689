"""Declarative operation tables.

Every resource module lists its operations as :class:`Operation` values.
An operation names the HTTP method and path template, how its body, query
or multipart form is built from the caller's parameters, and which
executor runs it (:class:`Kind`).  The dispatcher does the rest.

Parameters are a flat mapping.  Path placeholders (``{project_id}``) are
filled from it; ``filters``, ``additional_fields`` and ``update_fields``
are nested mappings, as in the host engine's node parameters.
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Callable, Mapping

from procore_sdk.errors import UnsupportedOperationError
from procore_sdk.helpers import clean_object, validate_required
from procore_sdk.models import ARRAY, FilePart, ResponseShape

Params = Mapping[str, Any]
Builder = Callable[[Params], dict[str, Any]]

_PLACEHOLDER = re.compile(r"{(\w+)}")


class Kind(str, Enum):
    SINGLE = "single"  # one request, result returned as-is
    LIST = "list"  # return_all -> aggregate pages, else one limited page
    DELETE = "delete"  # one request, result replaced by a success record
    UPLOAD = "upload"  # multipart POST


@dataclass(frozen=True)
class UploadSpec:
    """How to build a multipart form for an upload operation.

    *fields* receives the parameters and the resolved file and returns the
    scalar form fields.
    """

    file_field: str
    fields: Callable[[Params, FilePart], dict[str, Any]]
    default_filename: str = "uploaded_file"
    default_content_type: str = "application/octet-stream"


@dataclass(frozen=True)
class Operation:
    name: str
    method: str
    path: str
    kind: Kind = Kind.SINGLE
    body: Builder | None = None
    query: Builder | None = None
    upload: UploadSpec | None = None
    result: Callable[[Any, Params], Any] | None = None
    id_param: str | None = None
    shape: ResponseShape = ARRAY
    scoped: bool = True
    description: str = ""

    @property
    def path_params(self) -> list[str]:
        return _PLACEHOLDER.findall(self.path)

    def endpoint(self, params: Params) -> str:
        names = self.path_params
        validate_required(params, names)
        return self.path.format(**{name: params[name] for name in names})


@dataclass(frozen=True)
class Resource:
    name: str
    display_name: str
    operations: tuple[Operation, ...] = field(default_factory=tuple)

    def get(self, operation: str) -> Operation:
        for op in self.operations:
            if op.name == operation:
                return op
        raise UnsupportedOperationError(
            f"Operation {operation} is not supported for resource {self.name}"
        )

    def operation_names(self) -> list[str]:
        return sorted(op.name for op in self.operations)


# ---------------------------------------------------------------------------
# Body builders
# ---------------------------------------------------------------------------

def create_body(
    key: str,
    *required: str,
    optional: tuple[str, ...] = (),
    renames: Mapping[str, str] | None = None,
    convert: Mapping[str, Callable[[Any], Any]] | None = None,
) -> Builder:
    """``{key: {required..., optional..., **additional_fields}}``, cleaned.

    *renames* maps parameter names to body field names; *convert* maps body
    field names to value converters.
    """
    renames = renames or {}
    convert = convert or {}

    def build(params: Params) -> dict[str, Any]:
        validate_required(params, required)
        fields: dict[str, Any] = {}
        for name in required + optional:
            if name in params:
                fields[renames.get(name, name)] = params[name]
        fields.update(clean_object(params.get("additional_fields")))
        fields = clean_object(fields)
        for name, fn in convert.items():
            if name in fields:
                fields[name] = fn(fields[name])
        return {key: fields}

    return build


def update_body(key: str, renames: Mapping[str, str] | None = None) -> Builder:
    """``{key: update_fields}``, cleaned, with optional field renames."""
    renames = renames or {}

    def build(params: Params) -> dict[str, Any]:
        fields = clean_object(params.get("update_fields"))
        return {key: {renames.get(k, k): v for k, v in fields.items()}}

    return build


def fixed_body(body: Mapping[str, Any]) -> Builder:
    def build(params: Params) -> dict[str, Any]:
        return {k: dict(v) if isinstance(v, Mapping) else v for k, v in body.items()}

    return build


# ---------------------------------------------------------------------------
# Query builders
# ---------------------------------------------------------------------------

def filters_query(params: Params) -> dict[str, Any]:
    """Pass ``filters`` through unchanged (keys are already API names)."""
    return clean_object(params.get("filters"))


def mapped_filters(mapping: Mapping[str, str]) -> Builder:
    """Rename ``filters`` entries to API query keys, e.g. ``status`` -> ``filters[status][]``."""

    def build(params: Params) -> dict[str, Any]:
        filters = clean_object(params.get("filters"))
        return {api_key: filters[name] for name, api_key in mapping.items() if name in filters}

    return build


# ---------------------------------------------------------------------------
# Shorthands
# ---------------------------------------------------------------------------

def list_op(name: str, path: str, *, query: Builder | None = None, **kwargs: Any) -> Operation:
    return Operation(name, "GET", path, kind=Kind.LIST, query=query, **kwargs)


def get_op(name: str, path: str, **kwargs: Any) -> Operation:
    return Operation(name, "GET", path, **kwargs)


def delete_op(name: str, path: str, id_param: str, **kwargs: Any) -> Operation:
    return Operation(name, "DELETE", path, kind=Kind.DELETE, id_param=id_param, **kwargs)
