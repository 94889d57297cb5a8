"""API facades: SpotifyAppApi (app token) and SpotifyClientApi (user token)."""

import asyncio
import logging
from types import TracebackType
from typing import Any, Self

import httpx

from spotkit.config.settings import SpotifyApiOptions, get_settings
from spotkit.domain.exceptions import ConfigurationError, ValidationError
from spotkit.domain.ports import ICredentialStore, IRedirectHandler
from spotkit.domain.value_objects.grants import (
    AuthorizationGrant,
    ClientCredentialsGrant,
)
from spotkit.domain.value_objects.token import Token
from spotkit.infrastructure.auth.authenticator import Authenticator
from spotkit.infrastructure.auth.token_store import TokenStore
from spotkit.infrastructure.http_pool import HttpClientPool
from spotkit.infrastructure.integrations.endpoints.artists import ArtistsApi
from spotkit.infrastructure.integrations.endpoints.following import (
    ClientFollowingApi,
    FollowingApi,
)
from spotkit.infrastructure.integrations.endpoints.player import ClientPlayerApi
from spotkit.infrastructure.integrations.endpoints.profile import ClientProfileApi, UserApi
from spotkit.infrastructure.integrations.endpoints.shows import ClientShowApi, ShowApi
from spotkit.infrastructure.integrations.executor import RequestExecutor, Sleeper

logger = logging.getLogger(__name__)


class GenericSpotifyApi:
    """Wiring shared by both facades: options, token store, authenticator, executor.

    Hey future me - everything here is PER INSTANCE. One facade = one token store = one HTTP
    pool. Two users means two facades; they never see each other's token.
    """

    def __init__(
        self,
        grant: AuthorizationGrant | None,
        token: Token | None = None,
        options: SpotifyApiOptions | None = None,
        credential_store: ICredentialStore | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
        sleep: Sleeper = asyncio.sleep,
    ) -> None:
        """
        Wire up a client. No network traffic happens here.

        Args:
            grant: Grant used to obtain and refresh tokens (None = fixed token, no refresh)
            token: Initial token, e.g. restored from storage
            options: Client options (copied, then mutable through self.options)
            credential_store: Optional persistence for the token
            transport: Custom httpx transport (proxies, test doubles)
            sleep: Awaitable used for the 429 wait
        """
        self.options = (options or SpotifyApiOptions()).model_copy()
        self.http_pool = HttpClientPool(
            timeout=self.options.request_timeout_seconds, transport=transport
        )
        self.token_store = TokenStore(token, credential_store)
        self.authenticator = Authenticator(
            grant,
            options=self.options,
            http_pool=self.http_pool,
        )
        self.executor = RequestExecutor(
            self.token_store,
            self.authenticator,
            options=self.options,
            http_pool=self.http_pool,
            sleep=sleep,
        )

    @property
    def token(self) -> Token | None:
        """Current token (may be expired; the next call refreshes it)."""
        return self.token_store.get()

    async def close(self) -> None:
        """Close the HTTP pool. A later request opens a new one."""
        await self.http_pool.close()

    async def __aenter__(self) -> Self:
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        await self.close()


class SpotifyAppApi(GenericSpotifyApi):
    """Client-credentials API: public catalog data, no user context.

    Usage:
        async with spotify_app_api(client_id, client_secret) as api:
            await api.login()
            artist = await api.artists.get_artist("0TnOYISbd1XYRBk9myaseg")
    """

    def __init__(self, *args: Any, **kwargs: Any) -> None:
        super().__init__(*args, **kwargs)
        self.artists = ArtistsApi(self)
        self.shows = ShowApi(self)
        self.following = FollowingApi(self)
        self.users = UserApi(self)

    async def login(self) -> Token:
        """Run the client-credentials grant and store the token.

        Optional: the first request does this on its own when no token is stored.
        """
        token = await self.authenticator.authenticate()
        self.token_store.set(token)
        logger.info("App token obtained, expires at %s", token.expires_at.isoformat())
        return token


class SpotifyClientApi(GenericSpotifyApi):
    """User API: everything SpotifyAppApi can do plus the user's profile, follows and player."""

    def __init__(self, *args: Any, **kwargs: Any) -> None:
        super().__init__(*args, **kwargs)
        self.artists = ArtistsApi(self)
        self.shows = ClientShowApi(self)
        self.following = ClientFollowingApi(self)
        self.profile = ClientProfileApi(self)
        self.users = self.profile
        self.player = ClientPlayerApi(self)
        self._user_id: str | None = None

    # ===== LOGIN =====

    def get_authorization_url(self, state: str, show_dialog: bool = False) -> str:
        """Provider URL to send the user to (code, PKCE and implicit grants)."""
        return self.authenticator.get_authorization_url(state, show_dialog=show_dialog)

    async def authenticate(
        self,
        code: str | None = None,
        redirect_url: str | None = None,
        expected_state: str | None = None,
    ) -> Token:
        """Exchange the redirect result for a token and store it."""
        token = await self.authenticator.authenticate(
            code=code, redirect_url=redirect_url, expected_state=expected_state
        )
        self._set_user_token(token)
        return token

    async def authorize(self, handler: IRedirectHandler) -> Token:
        """Run the full login through a redirect handler and store the token."""
        token = await self.authenticator.authorize(handler)
        self._set_user_token(token)
        return token

    def _set_user_token(self, token: Token) -> None:
        self.token_store.set(token)
        # A new login may be a different user
        self._user_id = None
        logger.info("User token obtained (scopes: %s)", " ".join(sorted(token.scopes)) or "none")

    # ===== USER =====

    async def get_user_id(self) -> str:
        """Id of the token's user. Fetched once from /me, then cached."""
        if self._user_id is None:
            self._user_id = (await self.profile.get_current_user()).id
        return self._user_id


# =============================================================================
# BUILDERS
# =============================================================================


def spotify_app_api(
    client_id: str | None = None,
    client_secret: str | None = None,
    options: SpotifyApiOptions | None = None,
    token: Token | None = None,
    **kwargs: Any,
) -> SpotifyAppApi:
    """
    Build an app (client credentials) API.

    Args:
        client_id: App client id; SPOTIFY_CLIENT_ID when omitted
        client_secret: App client secret; SPOTIFY_CLIENT_SECRET when omitted
        options: Client options
        token: Previously obtained app token
        **kwargs: Passed to SpotifyAppApi (credential_store, transport, sleep)

    Raises:
        ConfigurationError: If id or secret is missing everywhere
    """
    settings = get_settings()
    client_id = client_id or settings.client_id
    client_secret = client_secret or settings.client_secret
    if not client_id or not client_secret:
        raise ConfigurationError(
            "Client id and secret are required (pass them or set SPOTIFY_CLIENT_ID / "
            "SPOTIFY_CLIENT_SECRET)"
        )
    return SpotifyAppApi(
        ClientCredentialsGrant(client_id=client_id, client_secret=client_secret),
        token=token,
        options=options,
        **kwargs,
    )


def spotify_client_api(
    grant: AuthorizationGrant | None,
    token: Token | None = None,
    options: SpotifyApiOptions | None = None,
    **kwargs: Any,
) -> SpotifyClientApi:
    """
    Build a user API.

    Args:
        grant: Authorization code, PKCE or implicit grant. None = use `token` as is (no refresh).
        token: Token from an earlier login, if any
        options: Client options
        **kwargs: Passed to SpotifyClientApi (credential_store, transport, sleep)

    Raises:
        ValidationError: If given a client-credentials grant (no user behind it)
        ConfigurationError: If neither a grant nor a token is given
    """
    if isinstance(grant, ClientCredentialsGrant):
        raise ValidationError(
            "Client credentials carry no user. Use spotify_app_api() instead"
        )
    if grant is None and token is None and kwargs.get("credential_store") is None:
        raise ConfigurationError("A user API needs a grant, a token or a credential store")
    return SpotifyClientApi(grant, token=token, options=options, **kwargs)
