"""Tests for the bearer and refreshing OAuth2 auth providers."""

import asyncio
import time
from urllib.parse import parse_qs

import httpx
import pytest

from conftest import Recorder
from fake_procore import create_fake_procore
from procore_sdk.auth import (
    TOKEN_URLS,
    BearerTokenAuth,
    OAuth2Auth,
    ProcoreCredentials,
    create_auth_provider,
)
from procore_sdk.errors import ApiError, AuthenticationError
from procore_sdk.models import Environment, RequestDescriptor
from procore_sdk.transport import request


def _refreshable(**overrides):
    values = dict(
        environment=Environment.PRODUCTION,
        access_token="old-token",
        refresh_token="refresh-1",
        client_id="client",
        client_secret="secret",
    )
    values.update(overrides)
    return ProcoreCredentials(**values)


def test_create_auth_provider_picks_oauth_when_refreshable():
    assert isinstance(create_auth_provider(_refreshable()), OAuth2Auth)


def test_create_auth_provider_plain_bearer_without_refresh_token():
    creds = ProcoreCredentials(access_token="abc")
    provider = create_auth_provider(creds)
    assert type(provider) is BearerTokenAuth


def test_request_outside_context_manager_fails():
    auth = BearerTokenAuth(ProcoreCredentials(access_token="abc"))

    async def _test():
        with pytest.raises(RuntimeError, match="async with"):
            await auth.request("GET", "https://api.procore.com/rest/v1.0/companies")

    asyncio.run(_test())


def test_bearer_without_token_raises():
    auth = BearerTokenAuth(ProcoreCredentials())

    async def _test():
        async with auth:
            with pytest.raises(AuthenticationError):
                await auth.access_token()

    asyncio.run(_test())


def test_refresh_before_first_call_when_token_missing():
    app = create_fake_procore({"/companies": [{"id": 1}]})
    creds = _refreshable(access_token=None)
    refreshed = []

    async def _test():
        async with OAuth2Auth(
            creds, transport=httpx.ASGITransport(app=app), on_refresh=refreshed.append
        ) as auth:
            return await request(auth, RequestDescriptor("GET", "/companies"))

    assert asyncio.run(_test()) == [{"id": 1}]
    token_call, api_call = app.state.requests
    assert token_call["path"] == "/oauth/token"
    assert token_call["body"] == {
        "grant_type": "refresh_token",
        "refresh_token": "refresh-1",
        "client_id": "client",
        "client_secret": "secret",
    }
    assert api_call["headers"]["authorization"] == "Bearer fresh-token"
    assert creds.access_token == "fresh-token"
    assert creds.refresh_token == "rotated-refresh"
    assert creds.expires_at > time.time()
    assert refreshed == [creds]


def test_refresh_when_token_expiring():
    creds = _refreshable(expires_at=time.time() + 5)

    def respond(request):
        if request.url.path == "/oauth/token":
            return httpx.Response(200, json={"access_token": "new", "expires_in": 3600})
        return httpx.Response(200, json={"ok": True})

    recorder = Recorder(respond)

    async def _test():
        async with OAuth2Auth(creds, transport=recorder.transport()) as auth:
            await auth.request("GET", "https://api.procore.com/rest/v1.0/me")

    asyncio.run(_test())
    assert [r.url.path for r in recorder.requests] == ["/oauth/token", "/rest/v1.0/me"]
    assert recorder.last.headers["Authorization"] == "Bearer new"
    # Procore did not rotate the refresh token; the old one is kept.
    assert creds.refresh_token == "refresh-1"


def test_valid_token_is_not_refreshed():
    creds = _refreshable(expires_at=time.time() + 3600)
    recorder = Recorder()

    async def _test():
        async with OAuth2Auth(creds, transport=recorder.transport()) as auth:
            await auth.request("GET", "https://api.procore.com/rest/v1.0/me")

    asyncio.run(_test())
    assert len(recorder.requests) == 1
    assert recorder.last.headers["Authorization"] == "Bearer old-token"


def test_401_triggers_single_refresh_and_retry():
    creds = _refreshable()

    def respond(request):
        if request.url.path == "/oauth/token":
            return httpx.Response(200, json={"access_token": "second"})
        if request.headers["Authorization"] == "Bearer old-token":
            return httpx.Response(401, json={"error": "expired"})
        return httpx.Response(200, json={"id": 5})

    recorder = Recorder(respond)

    async def _test():
        async with OAuth2Auth(creds, transport=recorder.transport()) as auth:
            return await request(auth, RequestDescriptor("GET", "/projects/5"))

    assert asyncio.run(_test()) == {"id": 5}
    paths = [r.url.path for r in recorder.requests]
    assert paths == ["/rest/v1.0/projects/5", "/oauth/token", "/rest/v1.0/projects/5"]


def test_persistent_401_is_api_error_after_one_retry():
    creds = _refreshable()

    def respond(request):
        if request.url.path == "/oauth/token":
            return httpx.Response(200, json={"access_token": "still-bad"})
        return httpx.Response(401, json={"error": "unauthorized"})

    recorder = Recorder(respond)

    async def _test():
        async with OAuth2Auth(creds, transport=recorder.transport()) as auth:
            await request(auth, RequestDescriptor("GET", "/projects"))

    with pytest.raises(ApiError) as info:
        asyncio.run(_test())
    assert info.value.status_code == 401
    assert len(recorder.requests) == 3


def test_sandbox_refresh_uses_sandbox_login_host():
    creds = _refreshable(environment=Environment.SANDBOX, access_token=None)

    def respond(request):
        if request.url.path == "/oauth/token":
            return httpx.Response(200, json={"access_token": "sbx"})
        return httpx.Response(200, json=[])

    recorder = Recorder(respond)

    async def _test():
        async with OAuth2Auth(creds, transport=recorder.transport()) as auth:
            await request(auth, RequestDescriptor("GET", "/companies"))

    asyncio.run(_test())
    token_request, api_request = recorder.requests
    assert str(token_request.url) == TOKEN_URLS[Environment.SANDBOX]
    assert parse_qs(token_request.content.decode())["grant_type"] == ["refresh_token"]
    assert api_request.url.host == "sandbox.procore.com"


def test_unrefreshable_without_token_is_api_error():
    app = create_fake_procore()
    creds = _refreshable(access_token=None, refresh_token="")

    async def _test():
        async with create_auth_provider(creds, transport=httpx.ASGITransport(app=app)) as auth:
            await request(auth, RequestDescriptor("GET", "/companies"))

    with pytest.raises(ApiError, match="No Procore access token"):
        asyncio.run(_test())


def test_token_endpoint_error_surfaces_as_api_error():
    creds = _refreshable(access_token=None)

    def respond(request):
        if request.url.path == "/oauth/token":
            return httpx.Response(400, json={"error": "invalid_grant"})
        return httpx.Response(200, json=[])

    async def _test():
        async with OAuth2Auth(creds, transport=Recorder(respond).transport()) as auth:
            await request(auth, RequestDescriptor("GET", "/companies"))

    with pytest.raises(ApiError) as info:
        asyncio.run(_test())
    assert info.value.status_code == 400
