"""Exceptions raised by the Procore SDK."""

from __future__ import annotations

from typing import Any


class ProcoreError(Exception):
    """Base class for every error raised by this package."""


class ApiError(ProcoreError):
    """A single Procore HTTP call failed.

    Covers network failures, non-2xx responses and undecodable bodies.
    ``message`` already carries the prefix of the executor that raised it
    (``"Procore API Error: "`` or ``"Procore Upload Error: "``).
    """

    def __init__(
        self,
        message: str,
        *,
        status_code: int | None = None,
        response_body: Any = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.status_code = status_code
        self.response_body = response_body


class AuthenticationError(ProcoreError):
    """No usable access token, or the token endpoint returned garbage."""


class UnsupportedOperationError(ProcoreError):
    """Raised when a resource, operation or trigger event has no mapping."""
