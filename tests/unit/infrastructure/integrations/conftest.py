"""Shared fixtures for API client tests.

All HTTP goes through pytest-httpx: tests register responses on `httpx_mock` in the order the
client is expected to send requests, then inspect `httpx_mock.get_requests()`.
"""

from collections.abc import AsyncIterator
from datetime import UTC, datetime, timedelta
from unittest.mock import AsyncMock

import pytest

from spotkit.config.settings import SpotifyApiOptions
from spotkit.domain.value_objects import (
    ClientCredentialsGrant,
    PkceGrant,
    SpotifyScope,
    Token,
)
from spotkit.infrastructure.integrations.spotify_api import SpotifyAppApi, SpotifyClientApi


@pytest.fixture
def sleeper() -> AsyncMock:
    """Replaces asyncio.sleep for the 429 wait."""
    return AsyncMock()


@pytest.fixture
def user_token() -> Token:
    """Valid user token carrying every scope."""
    return Token(
        access_token="user-access",
        expires_at=datetime.now(UTC) + timedelta(hours=1),
        refresh_token="user-refresh",
        scopes=frozenset(scope.value for scope in SpotifyScope),
    )


@pytest.fixture
def app_token() -> Token:
    """Valid client-credentials token."""
    return Token(
        access_token="app-access",
        expires_at=datetime.now(UTC) + timedelta(hours=1),
    )


@pytest.fixture
async def app_api(app_token: Token, sleeper: AsyncMock) -> AsyncIterator[SpotifyAppApi]:
    """App API with a valid token and US as default market."""
    api = SpotifyAppApi(
        ClientCredentialsGrant(client_id="app-id", client_secret="app-secret"),
        token=app_token,
        options=SpotifyApiOptions(default_market="US"),
        sleep=sleeper,
    )
    yield api
    await api.close()


@pytest.fixture
async def client_api(
    user_token: Token, sleeper: AsyncMock
) -> AsyncIterator[SpotifyClientApi]:
    """User API (PKCE) with a valid token."""
    api = SpotifyClientApi(
        PkceGrant(
            client_id="client-id",
            redirect_uri="http://localhost:8765/callback",
            code_verifier="v" * 43,
            scopes=tuple(SpotifyScope.all()),
        ),
        token=user_token,
        sleep=sleeper,
    )
    yield api
    await api.close()
