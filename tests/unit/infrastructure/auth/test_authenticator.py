"""Tests for the OAuth2 authenticator."""

import base64
from collections.abc import AsyncIterator
from datetime import UTC, datetime, timedelta
from urllib.parse import parse_qs, urlparse

import httpx
import pytest
from pytest_httpx import HTTPXMock

from spotkit.domain.exceptions import (
    AuthenticationError,
    ConfigurationError,
    DecodeError,
    NetworkError,
    RequestTimeoutError,
    ValidationError,
)
from spotkit.domain.ports import IRedirectHandler
from spotkit.domain.value_objects import (
    AuthorizationCodeGrant,
    ClientCredentialsGrant,
    ImplicitGrant,
    PkceGrant,
    SpotifyScope,
    Token,
)
from spotkit.infrastructure.auth.authenticator import Authenticator

TOKEN_URL = "https://accounts.spotify.com/api/token"
REDIRECT_URI = "http://localhost:8765/callback"

TOKEN_RESPONSE = {
    "access_token": "new-access",
    "token_type": "Bearer",
    "expires_in": 3600,
    "refresh_token": "new-refresh",
    "scope": "user-read-private user-follow-read",
}


def form(request: httpx.Request) -> dict[str, str]:
    """Decode a form-encoded request body."""
    return {key: values[0] for key, values in parse_qs(request.content.decode()).items()}


def basic(client_id: str, client_secret: str) -> str:
    return "Basic " + base64.b64encode(f"{client_id}:{client_secret}".encode()).decode()


@pytest.fixture
async def pkce_authenticator() -> AsyncIterator[Authenticator]:
    authenticator = Authenticator(
        PkceGrant(
            client_id="client-id",
            redirect_uri=REDIRECT_URI,
            code_verifier="dBjftJeZ4CVP-mB92K27uhbUJU1p1r_wW1gFWFOEjXk",
            scopes=(SpotifyScope.USER_READ_PRIVATE, SpotifyScope.USER_FOLLOW_READ),
        )
    )
    yield authenticator
    await authenticator.close()


@pytest.fixture
async def code_authenticator() -> AsyncIterator[Authenticator]:
    authenticator = Authenticator(
        AuthorizationCodeGrant(
            client_id="client-id",
            client_secret="client-secret",
            redirect_uri=REDIRECT_URI,
            scopes=(SpotifyScope.USER_READ_EMAIL,),
        )
    )
    yield authenticator
    await authenticator.close()


class TestPkceHelpers:
    """Test PKCE verifier/challenge generation."""

    def test_code_verifier_length_and_alphabet(self) -> None:
        """Test that the verifier is 43+ url-safe characters without padding."""
        verifier = Authenticator.generate_code_verifier()
        assert len(verifier) >= 43
        assert "=" not in verifier
        assert "+" not in verifier and "/" not in verifier

    def test_code_challenge_matches_rfc7636_example(self) -> None:
        """Test the S256 challenge against the RFC 7636 appendix B vector."""
        challenge = Authenticator.generate_code_challenge(
            "dBjftJeZ4CVP-mB92K27uhbUJU1p1r_wW1gFWFOEjXk"
        )
        assert challenge == "E9Melhoa2OwvFrEMTJguCHaoeK1t8URWbuGJSstw-cM"

    def test_state_is_random(self) -> None:
        assert Authenticator.generate_state() != Authenticator.generate_state()


class TestAuthorizationUrl:
    """Test authorize URL construction."""

    def test_pkce_url_carries_challenge(self, pkce_authenticator: Authenticator) -> None:
        """Test that a PKCE authorize URL has code + S256 challenge."""
        url = pkce_authenticator.get_authorization_url("state-1")

        parsed = urlparse(url)
        params = {k: v[0] for k, v in parse_qs(parsed.query).items()}
        assert f"{parsed.scheme}://{parsed.netloc}{parsed.path}" == (
            "https://accounts.spotify.com/authorize"
        )
        assert params["response_type"] == "code"
        assert params["client_id"] == "client-id"
        assert params["redirect_uri"] == REDIRECT_URI
        assert params["state"] == "state-1"
        assert params["scope"] == "user-read-private user-follow-read"
        assert params["code_challenge_method"] == "S256"
        assert params["code_challenge"] == "E9Melhoa2OwvFrEMTJguCHaoeK1t8URWbuGJSstw-cM"
        assert "show_dialog" not in params

    def test_implicit_url_requests_token(self) -> None:
        """Test that the implicit flow asks for response_type=token."""
        authenticator = Authenticator(ImplicitGrant("client-id", REDIRECT_URI))
        url = authenticator.get_authorization_url("s", show_dialog=True)
        params = parse_qs(urlparse(url).query)
        assert params["response_type"] == ["token"]
        assert params["show_dialog"] == ["true"]
        assert "scope" not in params

    def test_client_credentials_has_no_authorize_url(self) -> None:
        authenticator = Authenticator(ClientCredentialsGrant("id", "secret"))
        with pytest.raises(ValidationError):
            authenticator.get_authorization_url("s")

    def test_missing_redirect_uri(self) -> None:
        """Test that an empty redirect uri is a configuration error."""
        authenticator = Authenticator(ImplicitGrant("client-id", ""))
        with pytest.raises(ConfigurationError):
            authenticator.get_authorization_url("s")


class TestParseRedirect:
    """Test redirect parsing."""

    def test_provider_error_raises(self, pkce_authenticator: Authenticator) -> None:
        """Test that ?error=access_denied becomes an AuthenticationError."""
        with pytest.raises(AuthenticationError) as exc_info:
            pkce_authenticator.parse_redirect(
                f"{REDIRECT_URI}?error=access_denied&state=s", expected_state="s"
            )
        assert exc_info.value.error_code == "access_denied"

    def test_state_mismatch_raises(self, pkce_authenticator: Authenticator) -> None:
        with pytest.raises(AuthenticationError) as exc_info:
            pkce_authenticator.parse_redirect(
                f"{REDIRECT_URI}?code=abc&state=other", expected_state="s"
            )
        assert exc_info.value.error_code == "state_mismatch"


class TestTokenGrants:
    """Test the token endpoint exchanges."""

    async def test_client_credentials(self, httpx_mock: HTTPXMock) -> None:
        """Test client credentials: Basic auth, no refresh token."""
        authenticator = Authenticator(ClientCredentialsGrant("app-id", "app-secret"))
        httpx_mock.add_response(
            method="POST",
            url=TOKEN_URL,
            json={"access_token": "app-access", "token_type": "Bearer", "expires_in": 3600},
        )

        try:
            token = await authenticator.authenticate()
        finally:
            await authenticator.close()

        request = httpx_mock.get_request()
        assert request is not None
        assert request.headers["Authorization"] == basic("app-id", "app-secret")
        assert form(request) == {"grant_type": "client_credentials"}
        assert token.access_token == "app-access"
        assert token.refresh_token is None
        assert not token.is_expired()

    async def test_authorization_code_exchange(
        self, code_authenticator: Authenticator, httpx_mock: HTTPXMock
    ) -> None:
        """Test code exchange with client secret."""
        httpx_mock.add_response(method="POST", url=TOKEN_URL, json=TOKEN_RESPONSE)

        token = await code_authenticator.authenticate(code="auth-code")

        request = httpx_mock.get_request()
        assert request is not None
        assert request.headers["Authorization"] == basic("client-id", "client-secret")
        assert form(request) == {
            "grant_type": "authorization_code",
            "code": "auth-code",
            "redirect_uri": REDIRECT_URI,
        }
        assert token.refresh_token == "new-refresh"
        assert token.scopes == frozenset({"user-read-private", "user-follow-read"})

    async def test_pkce_exchange_from_redirect_url(
        self, pkce_authenticator: Authenticator, httpx_mock: HTTPXMock
    ) -> None:
        """Test PKCE: code taken from the redirect, verifier in the form, no Basic auth."""
        httpx_mock.add_response(method="POST", url=TOKEN_URL, json=TOKEN_RESPONSE)

        await pkce_authenticator.authenticate(
            redirect_url=f"{REDIRECT_URI}?code=auth-code&state=s1", expected_state="s1"
        )

        request = httpx_mock.get_request()
        assert request is not None
        assert "Authorization" not in request.headers
        assert form(request) == {
            "grant_type": "authorization_code",
            "code": "auth-code",
            "redirect_uri": REDIRECT_URI,
            "client_id": "client-id",
            "code_verifier": "dBjftJeZ4CVP-mB92K27uhbUJU1p1r_wW1gFWFOEjXk",
        }

    async def test_implicit_token_from_fragment(self, httpx_mock: HTTPXMock) -> None:
        """Test that the implicit flow parses the fragment without any request."""
        authenticator = Authenticator(ImplicitGrant("client-id", REDIRECT_URI))

        token = await authenticator.authenticate(
            redirect_url=(
                f"{REDIRECT_URI}#access_token=frag-access&token_type=Bearer"
                "&expires_in=3600&state=s1"
            ),
            expected_state="s1",
        )

        assert token.access_token == "frag-access"
        assert token.refresh_token is None
        assert httpx_mock.get_requests() == []

    async def test_code_required(self, pkce_authenticator: Authenticator) -> None:
        with pytest.raises(ValidationError):
            await pkce_authenticator.authenticate()

    async def test_rejected_grant_carries_provider_error(
        self, code_authenticator: Authenticator, httpx_mock: HTTPXMock
    ) -> None:
        """Test that a non-2xx token answer exposes error and description."""
        httpx_mock.add_response(
            method="POST",
            url=TOKEN_URL,
            status_code=400,
            json={"error": "invalid_grant", "error_description": "Invalid authorization code"},
        )

        with pytest.raises(AuthenticationError) as exc_info:
            await code_authenticator.authenticate(code="stale")

        error = exc_info.value
        assert error.error_code == "invalid_grant"
        assert error.error_description == "Invalid authorization code"
        assert error.http_status == 400
        assert error.requires_reauth is True

    async def test_token_endpoint_timeout(
        self, code_authenticator: Authenticator, httpx_mock: HTTPXMock
    ) -> None:
        httpx_mock.add_exception(httpx.ConnectTimeout("timed out"))

        with pytest.raises(RequestTimeoutError):
            await code_authenticator.authenticate(code="c")

    async def test_token_endpoint_unreachable(
        self, code_authenticator: Authenticator, httpx_mock: HTTPXMock
    ) -> None:
        """Test that a refused connection surfaces as NetworkError, not a raw httpx error."""
        httpx_mock.add_exception(httpx.ConnectError("Connection refused"))

        with pytest.raises(NetworkError) as exc_info:
            await code_authenticator.authenticate(code="c")

        assert isinstance(exc_info.value, ConnectionError)
        assert isinstance(exc_info.value.__cause__, httpx.ConnectError)

    async def test_options_are_read_per_request(
        self, code_authenticator: Authenticator, httpx_mock: HTTPXMock
    ) -> None:
        """Test that base url and timeout changes apply to the next token request."""
        code_authenticator.options.accounts_base_url = "https://accounts.example.test/"
        code_authenticator.options.request_timeout_seconds = 2.0
        httpx_mock.add_response(
            method="POST", url="https://accounts.example.test/api/token", json=TOKEN_RESPONSE
        )

        await code_authenticator.authenticate(code="c")

        request = httpx_mock.get_request()
        assert request is not None
        assert request.extensions["timeout"]["read"] == 2.0
        assert code_authenticator.authorize_url == "https://accounts.example.test/authorize"

    async def test_invalid_json_raises_decode_error(
        self, code_authenticator: Authenticator, httpx_mock: HTTPXMock
    ) -> None:
        httpx_mock.add_response(method="POST", url=TOKEN_URL, text="<html>oops</html>")

        with pytest.raises(DecodeError):
            await code_authenticator.authenticate(code="c")


class TestRefresh:
    """Test token refresh."""

    def _expired(self, refresh_token: str | None = "old-refresh") -> Token:
        return Token(
            access_token="old-access",
            expires_at=datetime.now(UTC) - timedelta(minutes=1),
            refresh_token=refresh_token,
            scopes=frozenset({"user-read-private"}),
        )

    async def test_pkce_refresh_sends_client_id(
        self, pkce_authenticator: Authenticator, httpx_mock: HTTPXMock
    ) -> None:
        """Test PKCE refresh: client_id in the form, old refresh token kept if not rotated."""
        httpx_mock.add_response(
            method="POST",
            url=TOKEN_URL,
            json={"access_token": "fresh", "token_type": "Bearer", "expires_in": 3600},
        )

        token = await pkce_authenticator.refresh(self._expired())

        request = httpx_mock.get_request()
        assert request is not None
        assert form(request) == {
            "grant_type": "refresh_token",
            "refresh_token": "old-refresh",
            "client_id": "client-id",
        }
        assert token.access_token == "fresh"
        assert token.refresh_token == "old-refresh"
        assert token.scopes == frozenset({"user-read-private"})

    async def test_code_refresh_uses_basic_auth(
        self, code_authenticator: Authenticator, httpx_mock: HTTPXMock
    ) -> None:
        httpx_mock.add_response(method="POST", url=TOKEN_URL, json=TOKEN_RESPONSE)

        token = await code_authenticator.refresh(self._expired())

        request = httpx_mock.get_request()
        assert request is not None
        assert request.headers["Authorization"] == basic("client-id", "client-secret")
        assert token.refresh_token == "new-refresh"

    async def test_refresh_without_refresh_token(
        self, pkce_authenticator: Authenticator, httpx_mock: HTTPXMock
    ) -> None:
        """Test that no request is made when there's nothing to refresh with."""
        with pytest.raises(AuthenticationError) as exc_info:
            await pkce_authenticator.refresh(self._expired(refresh_token=None))

        assert exc_info.value.error_code == "no_refresh_token"
        assert httpx_mock.get_requests() == []

    async def test_revoked_refresh_token(
        self, pkce_authenticator: Authenticator, httpx_mock: HTTPXMock
    ) -> None:
        httpx_mock.add_response(
            method="POST",
            url=TOKEN_URL,
            status_code=400,
            json={"error": "invalid_grant", "error_description": "Refresh token revoked"},
        )

        with pytest.raises(AuthenticationError) as exc_info:
            await pkce_authenticator.refresh(self._expired())

        assert exc_info.value.requires_reauth is True

    def test_can_renew(self, pkce_authenticator: Authenticator) -> None:
        assert pkce_authenticator.can_renew(self._expired()) is True
        assert pkce_authenticator.can_renew(self._expired(refresh_token=None)) is False
        assert pkce_authenticator.can_renew(None) is False
        assert Authenticator(ClientCredentialsGrant("a", "b")).can_renew(None) is True


class FakeRedirectHandler(IRedirectHandler):
    """Pretends the user logged in and the provider redirected back with a code."""

    def __init__(self) -> None:
        self.seen_url: str | None = None

    async def authorize(self, authorization_url: str) -> str:
        self.seen_url = authorization_url
        state = parse_qs(urlparse(authorization_url).query)["state"][0]
        return f"{REDIRECT_URI}?code=handler-code&state={state}"


class TestAuthorizeFlow:
    """Test the full redirect flow through a handler."""

    async def test_authorize_with_handler(
        self, pkce_authenticator: Authenticator, httpx_mock: HTTPXMock
    ) -> None:
        """Test that authorize() drives the handler and exchanges the returned code."""
        handler = FakeRedirectHandler()
        httpx_mock.add_response(method="POST", url=TOKEN_URL, json=TOKEN_RESPONSE)

        token = await pkce_authenticator.authorize(handler, state="fixed-state")

        assert handler.seen_url is not None
        assert "state=fixed-state" in handler.seen_url
        request = httpx_mock.get_request()
        assert request is not None
        assert form(request)["code"] == "handler-code"
        assert token.access_token == "new-access"
