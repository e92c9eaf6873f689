"""Authentication providers.

The transport layer never touches tokens.  It hands every call to an
:class:`AuthProvider`, which knows the selected environment and performs
the HTTP call with a valid ``Authorization: Bearer`` header.

Two providers are shipped:

- :class:`BearerTokenAuth` sends a fixed access token.
- :class:`OAuth2Auth` additionally refreshes the token through Procore's
  OAuth2 token endpoint when it is about to expire or when the API answers
  ``401``.  New tokens are handed to ``on_refresh`` so the host can persist
  them; this module stores nothing.
"""

from __future__ import annotations

import logging
import time
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Any, Callable

import httpx

from procore_sdk.errors import AuthenticationError
from procore_sdk.models import Environment

logger = logging.getLogger(__name__)

TOKEN_URLS = {
    Environment.PRODUCTION: "https://login.procore.com/oauth/token",
    Environment.SANDBOX: "https://login-sandbox.procore.com/oauth/token",
}


@dataclass
class ProcoreCredentials:
    """OAuth2 credentials for one Procore login.

    ``expires_at`` is an epoch timestamp; ``None`` means unknown.
    """

    environment: Environment = Environment.PRODUCTION
    access_token: str | None = None
    refresh_token: str | None = None
    client_id: str | None = None
    client_secret: str | None = None
    expires_at: float | None = None

    def can_refresh(self) -> bool:
        return bool(self.refresh_token and self.client_id and self.client_secret)


class AuthProvider(ABC):
    """Capability handed to the transport: environment + authenticated call."""

    @property
    @abstractmethod
    def environment(self) -> Environment:
        """Environment the credentials belong to."""
        ...

    @abstractmethod
    async def request(self, method: str, url: str, **kwargs: Any) -> httpx.Response:
        """Perform one HTTP call carrying a valid bearer token.

        ``kwargs`` are passed through to :meth:`httpx.AsyncClient.request`.
        """
        ...


class BearerTokenAuth(AuthProvider):
    """Sends a fixed access token.

    Parameters
    ----------
    credentials:
        Token and environment.
    timeout:
        Per-request timeout in seconds.
    transport:
        Optional httpx transport, e.g. ``httpx.MockTransport`` in tests.
    """

    def __init__(
        self,
        credentials: ProcoreCredentials,
        *,
        timeout: float = 60.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self.credentials = credentials
        self.timeout = timeout
        self._transport = transport
        self._client: httpx.AsyncClient | None = None

    async def __aenter__(self) -> "BearerTokenAuth":
        self._client = httpx.AsyncClient(timeout=self.timeout, transport=self._transport)
        return self

    async def __aexit__(self, *args: Any) -> None:
        if self._client:
            await self._client.aclose()
            self._client = None

    @property
    def environment(self) -> Environment:
        return self.credentials.environment

    async def access_token(self) -> str:
        if not self.credentials.access_token:
            raise AuthenticationError("No Procore access token configured")
        return self.credentials.access_token

    async def request(self, method: str, url: str, **kwargs: Any) -> httpx.Response:
        client = self._require_client()
        token = await self.access_token()
        headers = httpx.Headers(kwargs.pop("headers", None))
        headers["Authorization"] = f"Bearer {token}"
        return await client.request(method, url, headers=headers, **kwargs)

    def _require_client(self) -> httpx.AsyncClient:
        if self._client is None:
            raise RuntimeError("Client not initialised. Use `async with` context manager.")
        return self._client


class OAuth2Auth(BearerTokenAuth):
    """Bearer auth that refreshes through the OAuth2 ``refresh_token`` grant."""

    # Refresh this many seconds before the recorded expiry.
    REFRESH_MARGIN = 60

    def __init__(
        self,
        credentials: ProcoreCredentials,
        *,
        timeout: float = 60.0,
        transport: httpx.AsyncBaseTransport | None = None,
        on_refresh: Callable[[ProcoreCredentials], None] | None = None,
    ) -> None:
        super().__init__(credentials, timeout=timeout, transport=transport)
        self.on_refresh = on_refresh

    async def access_token(self) -> str:
        if self.credentials.can_refresh() and (
            not self.credentials.access_token or self._expiring()
        ):
            await self.refresh()
        return await super().access_token()

    async def request(self, method: str, url: str, **kwargs: Any) -> httpx.Response:
        response = await super().request(method, url, **kwargs)
        if response.status_code == 401 and self.credentials.can_refresh():
            logger.info("Procore rejected the access token, refreshing")
            await self.refresh()
            response = await super().request(method, url, **kwargs)
        return response

    async def refresh(self) -> None:
        """Exchange the refresh token for a new access token."""
        creds = self.credentials
        client = self._require_client()
        response = await client.post(
            TOKEN_URLS[creds.environment],
            data={
                "grant_type": "refresh_token",
                "refresh_token": creds.refresh_token,
                "client_id": creds.client_id,
                "client_secret": creds.client_secret,
            },
        )
        response.raise_for_status()
        data = response.json()
        if not isinstance(data, dict) or not data.get("access_token"):
            raise AuthenticationError("Procore token endpoint returned no access_token")

        creds.access_token = data["access_token"]
        creds.refresh_token = data.get("refresh_token") or creds.refresh_token
        expires_in = data.get("expires_in")
        creds.expires_at = time.time() + float(expires_in) if expires_in else None
        logger.debug("Procore access token refreshed (expires_in=%s)", expires_in)

        if self.on_refresh:
            self.on_refresh(creds)

    def _expiring(self) -> bool:
        expires_at = self.credentials.expires_at
        return expires_at is not None and time.time() >= expires_at - self.REFRESH_MARGIN


def create_auth_provider(
    credentials: ProcoreCredentials,
    *,
    timeout: float = 60.0,
    transport: httpx.AsyncBaseTransport | None = None,
    on_refresh: Callable[[ProcoreCredentials], None] | None = None,
) -> BearerTokenAuth:
    """Pick :class:`OAuth2Auth` when the credentials allow refreshing."""
    if credentials.can_refresh():
        return OAuth2Auth(
            credentials, timeout=timeout, transport=transport, on_refresh=on_refresh
        )
    return BearerTokenAuth(credentials, timeout=timeout, transport=transport)
