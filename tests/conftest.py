"""
pytest fixtures for procore_sdk tests.

Two kinds of fake backends:

- ``Recorder``: an ``httpx.MockTransport`` handler that captures every
  request and answers from a callable.  Used where the exact wire request
  matters (headers, body bytes).
- ``fake_procore.create_fake_procore``: a FastAPI app served through
  ``httpx.ASGITransport`` for end-to-end flows.
"""

from __future__ import annotations

import json
from typing import Any, Callable

import httpx
import pytest

from procore_sdk.auth import BearerTokenAuth, ProcoreCredentials
from procore_sdk.models import Environment


class Recorder:
    """MockTransport handler that records requests."""

    def __init__(self, respond: Callable[[httpx.Request], httpx.Response] | None = None) -> None:
        self.requests: list[httpx.Request] = []
        self._respond = respond or (lambda request: httpx.Response(200, json={}))

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        return self._respond(request)

    @property
    def last(self) -> httpx.Request:
        return self.requests[-1]

    def transport(self) -> httpx.MockTransport:
        return httpx.MockTransport(self)


def paged_handler(items: list[Any], fail_on_page: int | None = None):
    """Serve *items* as a bare array honouring ``page``/``per_page``."""

    def respond(request: httpx.Request) -> httpx.Response:
        page = int(request.url.params.get("page", 1))
        per_page = int(request.url.params.get("per_page", 100))
        if page == fail_on_page:
            return httpx.Response(500, json={"errors": "boom"})
        start = (page - 1) * per_page
        return httpx.Response(200, json=items[start:start + per_page])

    return respond


def make_auth(
    transport: httpx.AsyncBaseTransport,
    *,
    environment: Environment = Environment.PRODUCTION,
    token: str = "test-token",
) -> BearerTokenAuth:
    return BearerTokenAuth(
        ProcoreCredentials(environment=environment, access_token=token),
        transport=transport,
    )


def json_body(request: httpx.Request) -> Any:
    return json.loads(request.content) if request.content else None


@pytest.fixture
def recorder() -> Recorder:
    return Recorder()
