"""Operation dispatcher.

Maps ``(resource, operation, params)`` to a call of one of the three core
executors (:func:`~procore_sdk.transport.request`,
:func:`~procore_sdk.pagination.request_all`,
:func:`~procore_sdk.transport.upload`) using the tables in
:mod:`procore_sdk.resources`.
"""

from __future__ import annotations

import logging
from typing import Any, Iterable, Mapping

from procore_sdk.auth import AuthProvider
from procore_sdk.errors import ProcoreError
from procore_sdk.helpers import (
    ExecutionItem,
    create_error_response,
    to_execution_data,
    validate_required,
)
from procore_sdk.models import FilePart, RequestDescriptor
from procore_sdk.operations import Kind, Operation, UploadSpec
from procore_sdk.pagination import PAGE_SIZE, request_all
from procore_sdk.resources import get_operation
from procore_sdk.transport import API_VERSION, request, upload

logger = logging.getLogger(__name__)

# Page size of a list call made without return_all and without a limit.
DEFAULT_LIMIT = 50


class OperationDispatcher:
    """Runs resource operations against Procore.

    Parameters
    ----------
    auth:
        Provider used for every call.  Must already be open
        (``async with auth:``).
    continue_on_fail:
        When true, :meth:`execute_items` turns a failing item into an
        ``{"error": ...}`` record instead of aborting the batch.
    api_version:
        Path version segment, ``v1.0`` unless overridden.
    """

    def __init__(
        self,
        auth: AuthProvider,
        *,
        continue_on_fail: bool = False,
        api_version: str = API_VERSION,
    ) -> None:
        self.auth = auth
        self.continue_on_fail = continue_on_fail
        self.api_version = api_version

    async def execute(
        self,
        resource: str,
        operation: str,
        params: Mapping[str, Any] | None = None,
    ) -> Any:
        """Run one operation and return the decoded result."""
        op = get_operation(resource, operation)
        params = dict(params or {})
        endpoint = op.endpoint(params)
        company_id = params.get("company_id") if op.scoped else None

        logger.debug("Dispatching %s.%s -> %s %s", resource, operation, op.method, endpoint)
        if op.kind == Kind.UPLOAD:
            result = await self._upload(op, endpoint, params, company_id)
        else:
            descriptor = RequestDescriptor(
                method=op.method,
                endpoint=endpoint,
                query=op.query(params) if op.query else {},
                body=op.body(params) if op.body else None,
                company_id=company_id,
            )
            if op.kind == Kind.LIST:
                result = await self._list(op, descriptor, params)
            else:
                result = await request(self.auth, descriptor, api_version=self.api_version)
                if op.kind == Kind.DELETE:
                    result = {"success": True, op.id_param: params[op.id_param]}

        if op.result:
            result = op.result(result, params)
        return result

    async def execute_items(
        self,
        resource: str,
        items: Iterable[Mapping[str, Any]],
    ) -> list[ExecutionItem]:
        """Run a batch: each item carries its ``operation`` plus its params.

        Results are flattened into execution items paired with the index of
        the input item that produced them.
        """
        out: list[ExecutionItem] = []
        for index, item in enumerate(items):
            params = dict(item)
            try:
                validate_required(params, ["operation"])
                operation = params.pop("operation")
                result = await self.execute(resource, operation, params)
            except (ProcoreError, ValueError) as exc:
                if not self.continue_on_fail:
                    raise
                logger.warning("Item %d of %s failed: %s", index, resource, exc)
                out.append(create_error_response(exc, index))
                continue
            out.extend(to_execution_data(result, index))
        return out

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------

    async def _list(
        self,
        op: Operation,
        descriptor: RequestDescriptor,
        params: Mapping[str, Any],
    ) -> Any:
        if params.get("return_all"):
            return await request_all(
                self.auth, descriptor, op.shape, api_version=self.api_version
            )

        limit = params.get("limit")
        limit = DEFAULT_LIMIT if limit is None else int(limit)
        if limit < 1:
            raise ValueError("limit must be at least 1")
        payload = await request(
            self.auth,
            descriptor.with_query(per_page=min(limit, PAGE_SIZE)),
            api_version=self.api_version,
        )
        items = op.shape.extract(payload)
        return payload if items is None else items

    async def _upload(
        self,
        op: Operation,
        endpoint: str,
        params: Mapping[str, Any],
        company_id: int | None,
    ) -> Any:
        spec = op.upload
        file = _resolve_file(spec, params)
        return await upload(
            self.auth,
            endpoint,
            spec.fields(params, file),
            file,
            file_field=spec.file_field,
            company_id=company_id,
            api_version=self.api_version,
        )


def _resolve_file(spec: UploadSpec, params: Mapping[str, Any]) -> FilePart:
    """Fill in the operation's default file name and content type."""
    validate_required(params, ["file"])
    file = params["file"]
    if not isinstance(file, FilePart):
        raise ValueError("file must be a FilePart")
    return FilePart(
        filename=file.filename or spec.default_filename,
        content=file.content,
        content_type=(
            file.content_type
            if file.content_type and file.content_type != "application/octet-stream"
            else spec.default_content_type
        ),
    )
