"""Single-request and upload executors.

Both perform exactly one authenticated call through an
:class:`~procore_sdk.auth.AuthProvider` and return the decoded JSON body.
Any failure (network error, non-2xx status, undecodable body, auth
failure) is re-raised as :class:`~procore_sdk.errors.ApiError`.  Nothing
is retried here.
"""

from __future__ import annotations

import logging
from typing import Any, Mapping

import httpx

from procore_sdk.auth import AuthProvider
from procore_sdk.errors import ApiError, ProcoreError
from procore_sdk.models import Environment, FilePart, RequestDescriptor

logger = logging.getLogger(__name__)

PRODUCTION_BASE_URL = "https://api.procore.com"
SANDBOX_BASE_URL = "https://sandbox.procore.com"
API_VERSION = "v1.0"

COMPANY_HEADER = "Procore-Company-Id"

API_ERROR_PREFIX = "Procore API Error"
UPLOAD_ERROR_PREFIX = "Procore Upload Error"


# ---------------------------------------------------------------------------
# Request building
# ---------------------------------------------------------------------------

def base_url(environment: Environment) -> str:
    if environment == Environment.SANDBOX:
        return SANDBOX_BASE_URL
    return PRODUCTION_BASE_URL


def build_url(environment: Environment, endpoint: str, api_version: str = API_VERSION) -> str:
    return f"{base_url(environment)}/rest/{api_version}{endpoint}"


def build_headers(
    defaults: Mapping[str, str],
    extra: Mapping[str, str] | None,
    company_id: int | None,
) -> httpx.Headers:
    """Merge *extra* over *defaults*, then force the company scope header."""
    headers = httpx.Headers(defaults)
    if extra:
        headers.update(extra)
    if company_id:
        headers[COMPANY_HEADER] = str(company_id)
    return headers


def _query_params(query: Mapping[str, Any]) -> dict[str, Any]:
    return {k: v for k, v in query.items() if v is not None}


def _form_value(value: Any) -> str:
    if isinstance(value, bool):
        return "true" if value else "false"
    return str(value)


# ---------------------------------------------------------------------------
# Response handling
# ---------------------------------------------------------------------------

def _decode(response: httpx.Response) -> Any:
    if not response.content:
        return {}
    return response.json()


def _error_body(response: httpx.Response) -> Any:
    try:
        return response.json()
    except ValueError:
        return response.text


def _error_detail(body: Any) -> str | None:
    if isinstance(body, dict):
        for key in ("message", "errors", "error"):
            if body.get(key):
                return str(body[key])
    elif isinstance(body, str) and body.strip():
        return body.strip()[:200]
    return None


def _api_error(prefix: str, exc: Exception) -> ApiError:
    if isinstance(exc, httpx.HTTPStatusError):
        response = exc.response
        body = _error_body(response)
        message = f"{prefix}: {response.status_code} {response.reason_phrase}"
        detail = _error_detail(body)
        if detail:
            message = f"{message} - {detail}"
        return ApiError(message, status_code=response.status_code, response_body=body)
    return ApiError(f"{prefix}: {exc}")


# ---------------------------------------------------------------------------
# Executors
# ---------------------------------------------------------------------------

async def request(
    auth: AuthProvider,
    descriptor: RequestDescriptor,
    *,
    api_version: str = API_VERSION,
) -> Any:
    """Perform one JSON call and return the decoded body (object or array)."""
    url = build_url(auth.environment, descriptor.endpoint, api_version)
    kwargs: dict[str, Any] = {
        "headers": build_headers(
            {"Content-Type": "application/json"},
            descriptor.headers,
            descriptor.company_id,
        ),
    }
    if descriptor.query:
        kwargs["params"] = _query_params(descriptor.query)
    # An empty body is omitted entirely rather than sent as {}.
    if descriptor.body:
        kwargs["json"] = dict(descriptor.body)

    method = descriptor.method.upper()
    logger.debug("Procore %s %s", method, url)
    try:
        response = await auth.request(method, url, **kwargs)
        response.raise_for_status()
        return _decode(response)
    except (httpx.HTTPError, ProcoreError, ValueError) as exc:
        raise _api_error(API_ERROR_PREFIX, exc) from exc


async def upload(
    auth: AuthProvider,
    endpoint: str,
    fields: Mapping[str, Any],
    file: FilePart,
    *,
    file_field: str,
    company_id: int | None = None,
    headers: Mapping[str, str] | None = None,
    api_version: str = API_VERSION,
) -> Any:
    """POST a multipart form: scalar *fields* plus *file* under *file_field*."""
    url = build_url(auth.environment, endpoint, api_version)
    kwargs: dict[str, Any] = {
        # No JSON content type: httpx sets the multipart boundary header.
        "headers": build_headers({}, headers, company_id),
        "data": {k: _form_value(v) for k, v in fields.items() if v is not None},
        "files": {file_field: (file.filename, file.content, file.content_type)},
    }

    logger.debug("Procore upload %s (%s, %d bytes)", url, file.filename, len(file.content))
    try:
        response = await auth.request("POST", url, **kwargs)
        response.raise_for_status()
        return _decode(response)
    except (httpx.HTTPError, ProcoreError, ValueError) as exc:
        raise _api_error(UPLOAD_ERROR_PREFIX, exc) from exc
