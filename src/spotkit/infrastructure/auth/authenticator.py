"""OAuth2 grant flows against the Spotify accounts service."""

import base64
import hashlib
import logging
import secrets
from typing import Any, cast
from urllib.parse import parse_qs, urlencode, urlparse

import httpx

from spotkit.config.settings import SpotifyApiOptions
from spotkit.domain.exceptions import (
    AuthenticationError,
    ConfigurationError,
    DecodeError,
    NetworkError,
    RequestTimeoutError,
    ValidationError,
)
from spotkit.domain.ports import IRedirectHandler
from spotkit.domain.value_objects.grants import (
    AuthorizationCodeGrant,
    AuthorizationGrant,
    ClientCredentialsGrant,
    ImplicitGrant,
    PkceGrant,
)
from spotkit.domain.value_objects.scopes import scope_string
from spotkit.domain.value_objects.token import Token
from spotkit.infrastructure.http_pool import HttpClientPool
from spotkit.infrastructure.observability.logger_template import log_operation

logger = logging.getLogger(__name__)


class Authenticator:
    """Runs the grant flow of ONE client and refreshes its tokens.

    Hey future me - the grant is fixed per client instance. Everything that differs between
    flows (which form fields, Basic auth or client_id in the body, code vs. fragment) is
    dispatched with `match` on the grant variant. Never branch on grant.kind strings elsewhere.
    """

    # Hey, token endpoint rejects anything but form encoding. Don't switch to json=.
    FORM_HEADERS = {"Content-Type": "application/x-www-form-urlencoded"}

    def __init__(
        self,
        grant: AuthorizationGrant | None,
        options: SpotifyApiOptions | None = None,
        http_pool: HttpClientPool | None = None,
    ) -> None:
        """
        Initialize the authenticator.

        Args:
            grant: Grant of this client. None means "token only" (no refresh possible).
            options: Client options; accounts_base_url and request_timeout_seconds are read on
                every call, so mutations apply to the next token request
            http_pool: Pool shared with the executor; a private one when omitted
        """
        self.grant = grant
        self.options = options or SpotifyApiOptions()
        self._owns_pool = http_pool is None
        self.http_pool = http_pool or HttpClientPool(
            timeout=self.options.request_timeout_seconds
        )

    @property
    def accounts_base_url(self) -> str:
        return self.options.accounts_base_url.rstrip("/")

    @property
    def token_url(self) -> str:
        return f"{self.accounts_base_url}/api/token"

    @property
    def authorize_url(self) -> str:
        return f"{self.accounts_base_url}/authorize"

    async def close(self) -> None:
        """Close the HTTP pool if we created it."""
        if self._owns_pool:
            await self.http_pool.close()

    # =========================================================================
    # PKCE HELPERS
    # =========================================================================

    # Yo future me, 32 random bytes -> 43 char verifier. We strip the "=" padding because the
    # OAuth spec says so. Keep the verifier secret until the code exchange.
    @staticmethod
    def generate_code_verifier() -> str:
        """
        Generate a PKCE code verifier.

        Returns:
            Random code verifier string
        """
        return (
            base64.urlsafe_b64encode(secrets.token_bytes(32))
            .decode("utf-8")
            .rstrip("=")
        )

    @staticmethod
    def generate_code_challenge(code_verifier: str) -> str:
        """
        Generate a PKCE code challenge from verifier.

        Args:
            code_verifier: Code verifier string

        Returns:
            SHA256 hash of code verifier as base64 URL-safe string
        """
        digest = hashlib.sha256(code_verifier.encode("utf-8")).digest()
        return base64.urlsafe_b64encode(digest).decode("utf-8").rstrip("=")

    @staticmethod
    def generate_state() -> str:
        """Random CSRF state for the authorize redirect."""
        return secrets.token_urlsafe(16)

    # =========================================================================
    # REDIRECT SIDE
    # =========================================================================

    def get_authorization_url(self, state: str, show_dialog: bool = False) -> str:
        """
        Build the provider authorize URL for this client's grant.

        Args:
            state: State parameter for CSRF protection
            show_dialog: Force the consent dialog even if the user already approved

        Returns:
            Authorization URL

        Raises:
            ValidationError: If the grant has no redirect step (client credentials)
            ConfigurationError: If client_id or redirect_uri is missing
        """
        grant = self._require_grant()
        params: dict[str, str]
        match grant:
            case AuthorizationCodeGrant(scopes=scopes):
                params = {"response_type": "code", "scope": scope_string(scopes)}
            case PkceGrant(code_verifier=verifier, scopes=scopes):
                params = {
                    "response_type": "code",
                    "scope": scope_string(scopes),
                    "code_challenge_method": "S256",
                    "code_challenge": self.generate_code_challenge(verifier),
                }
            case ImplicitGrant(scopes=scopes):
                params = {"response_type": "token", "scope": scope_string(scopes)}
            case ClientCredentialsGrant():
                raise ValidationError(
                    "Client credentials grant has no authorization redirect"
                )

        if not grant.redirect_uri or not grant.redirect_uri.strip():
            raise ConfigurationError(
                "SPOTIFY_REDIRECT_URI is not configured. "
                "It must match a redirect uri registered in the developer dashboard."
            )

        query = {
            "client_id": grant.client_id,
            "redirect_uri": grant.redirect_uri,
            "state": state,
            **params,
        }
        if not query["scope"]:
            del query["scope"]
        if show_dialog:
            query["show_dialog"] = "true"
        return f"{self.authorize_url}?{urlencode(query)}"

    def parse_redirect(
        self, redirect_url: str, expected_state: str | None = None
    ) -> dict[str, str]:
        """Extract the provider answer from a redirect URL.

        Codes arrive in the query string, implicit tokens in the fragment. Both carry `state`
        and, on failure, `error`.

        Returns:
            Flat dict of the relevant parameters (code or access_token, token_type, ...)

        Raises:
            AuthenticationError: On provider error or state mismatch
        """
        grant = self._require_grant()
        parsed = urlparse(redirect_url)
        raw = parsed.fragment if isinstance(grant, ImplicitGrant) else parsed.query
        params = {key: values[0] for key, values in parse_qs(raw).items()}

        if "error" in params:
            raise AuthenticationError(
                message=f"Authorization denied: {params['error']}",
                error_code=params["error"],
                error_description=params.get("error_description"),
            )
        if expected_state is not None and params.get("state") != expected_state:
            # Hey future me - NEVER relax this. A mismatched state means the redirect wasn't
            # started by us (CSRF) or belongs to an older login attempt.
            raise AuthenticationError(
                message="State mismatch in authorization redirect",
                error_code="state_mismatch",
            )
        return params

    async def authorize(
        self, handler: IRedirectHandler, state: str | None = None
    ) -> Token:
        """Run the full redirect flow through a redirect handler and return the token."""
        state = state or self.generate_state()
        url = self.get_authorization_url(state)
        redirect_url = await handler.authorize(url)
        return await self.authenticate(redirect_url=redirect_url, expected_state=state)

    # =========================================================================
    # TOKEN SIDE
    # =========================================================================

    async def authenticate(
        self,
        code: str | None = None,
        redirect_url: str | None = None,
        expected_state: str | None = None,
    ) -> Token:
        """
        Obtain a token with this client's grant.

        Args:
            code: Authorization code (code and PKCE grants)
            redirect_url: Full redirect URL; the code or fragment token is taken from it
            expected_state: State sent with the authorize URL (checked against redirect_url)

        Returns:
            Fresh token

        Raises:
            AuthenticationError: If the provider rejects the grant
            ValidationError: If the grant needs a code/redirect that wasn't given
        """
        grant = self._require_grant()
        async with log_operation(logger, "token_grant", grant=grant.kind):
            match grant:
                case ClientCredentialsGrant():
                    return await self._request_token(
                        {"grant_type": "client_credentials"}, basic_auth=True
                    )
                case AuthorizationCodeGrant(redirect_uri=redirect_uri):
                    code = self._resolve_code(code, redirect_url, expected_state)
                    return await self._request_token(
                        {
                            "grant_type": "authorization_code",
                            "code": code,
                            "redirect_uri": redirect_uri,
                        },
                        basic_auth=True,
                    )
                case PkceGrant(
                    client_id=client_id, redirect_uri=redirect_uri, code_verifier=verifier
                ):
                    code = self._resolve_code(code, redirect_url, expected_state)
                    return await self._request_token(
                        {
                            "grant_type": "authorization_code",
                            "code": code,
                            "redirect_uri": redirect_uri,
                            "client_id": client_id,
                            "code_verifier": verifier,
                        },
                        basic_auth=False,
                    )
                case ImplicitGrant():
                    if redirect_url is None:
                        raise ValidationError(
                            "Implicit grant needs the redirect url with the token fragment"
                        )
                    params = self.parse_redirect(redirect_url, expected_state)
                    return Token.from_response(params)

        raise AssertionError(f"Unhandled grant: {grant!r}")  # pragma: no cover

    async def refresh(self, token: Token) -> Token:
        """
        Refresh an access token without user interaction.

        Args:
            token: Current (usually expired) token

        Returns:
            New token. Keeps the old refresh token if the provider didn't rotate it.

        Raises:
            AuthenticationError: If there's no refresh token or the provider rejects it
        """
        if not token.refresh_token:
            raise AuthenticationError(
                message="Token has no refresh token. Please re-authenticate.",
                error_code="no_refresh_token",
            )

        data = {"grant_type": "refresh_token", "refresh_token": token.refresh_token}
        async with log_operation(logger, "token_refresh"):
            match self.grant:
                case PkceGrant(client_id=client_id):
                    data["client_id"] = client_id
                    return await self._request_token(data, basic_auth=False, previous=token)
                case AuthorizationCodeGrant():
                    return await self._request_token(data, basic_auth=True, previous=token)
                case _:
                    raise AuthenticationError(
                        message="No client credentials available to refresh the token",
                        error_code="no_refresh_path",
                    )

    async def renew(self, token: Token | None) -> Token:
        """Get a usable token again: refresh if possible, else re-run client credentials.

        This is the executor's single "refresh" entry point.

        Raises:
            AuthenticationError: If neither path exists
        """
        if token is not None and token.refresh_token:
            return await self.refresh(token)
        if isinstance(self.grant, ClientCredentialsGrant):
            return await self.authenticate()
        raise AuthenticationError(
            message="Access token expired and no refresh path exists. Please re-authenticate.",
            error_code="no_refresh_path",
        )

    def can_renew(self, token: Token | None) -> bool:
        """Check whether renew() has a path at all (no network call)."""
        if isinstance(self.grant, ClientCredentialsGrant):
            return True
        return (
            token is not None
            and token.can_refresh
            and isinstance(self.grant, (AuthorizationCodeGrant, PkceGrant))
        )

    # =========================================================================
    # INTERNALS
    # =========================================================================

    def _require_grant(self) -> AuthorizationGrant:
        if self.grant is None:
            raise ConfigurationError(
                "This client was built from a token only and has no grant to authenticate with"
            )
        if not self.grant.client_id or not self.grant.client_id.strip():
            raise ConfigurationError(
                "SPOTIFY_CLIENT_ID is not configured. "
                "Get credentials at https://developer.spotify.com/dashboard"
            )
        return self.grant

    def _resolve_code(
        self, code: str | None, redirect_url: str | None, expected_state: str | None
    ) -> str:
        if code:
            return code
        if redirect_url is None:
            raise ValidationError("An authorization code or redirect url is required")
        params = self.parse_redirect(redirect_url, expected_state)
        if not params.get("code"):
            raise AuthenticationError(
                message="Redirect url carries no authorization code",
                error_code="missing_code",
            )
        return params["code"]

    def _basic_auth(self) -> httpx.BasicAuth:
        grant = self.grant
        if not isinstance(grant, (ClientCredentialsGrant, AuthorizationCodeGrant)):
            raise ConfigurationError("This grant has no client secret")
        if not grant.client_secret:
            raise ConfigurationError(
                "SPOTIFY_CLIENT_SECRET is not configured. It is required for this grant."
            )
        return httpx.BasicAuth(grant.client_id, grant.client_secret)

    async def _request_token(
        self,
        data: dict[str, str],
        basic_auth: bool,
        previous: Token | None = None,
    ) -> Token:
        """POST to the token endpoint and turn the answer into a Token.

        Raises:
            AuthenticationError: Any non-2xx answer, with the provider error attached
            RequestTimeoutError: If the accounts service didn't answer in time
            NetworkError: If the accounts service could not be reached
            DecodeError: If a 2xx answer isn't a token payload
        """
        client = await self.http_pool.get_client()
        auth = self._basic_auth() if basic_auth else None
        timeout = self.options.request_timeout_seconds

        try:
            response = await client.post(
                self.token_url,
                data=data,
                headers=self.FORM_HEADERS,
                auth=auth if auth is not None else httpx.USE_CLIENT_DEFAULT,
                timeout=timeout,
            )
        except httpx.TimeoutException as e:
            raise RequestTimeoutError(
                f"Token endpoint did not answer within {timeout}s"
            ) from e
        except httpx.TransportError as e:
            raise NetworkError(f"Token endpoint unreachable: {e}") from e

        if not response.is_success:
            error_code, description = self._parse_error(response)
            logger.warning(
                "Token endpoint rejected %s (%d): %s",
                data["grant_type"],
                response.status_code,
                error_code,
            )
            raise AuthenticationError(
                message=f"Token request failed: {description or error_code or response.status_code}",
                error_code=error_code,
                error_description=description,
                http_status=response.status_code,
            )

        try:
            payload = cast(dict[str, Any], response.json())
        except ValueError as e:
            raise DecodeError("Token endpoint returned invalid JSON", body=response.text) from e
        if not isinstance(payload, dict):
            raise DecodeError("Token endpoint returned an unexpected payload", body=response.text)
        return Token.from_response(payload, previous=previous)

    @staticmethod
    def _parse_error(response: httpx.Response) -> tuple[str | None, str | None]:
        """Read {"error": ..., "error_description": ...}; tolerate non-JSON bodies."""
        try:
            body = response.json()
        except ValueError:
            return None, response.text or None
        if not isinstance(body, dict):
            return None, None
        error = body.get("error")
        # The accounts service uses a string; the web API nests an object
        if isinstance(error, dict):
            return str(error.get("status", "")) or None, error.get("message")
        return error, body.get("error_description")
