"""Request executor: the single chokepoint every API call goes through."""

import asyncio
import logging
from collections.abc import Awaitable, Callable
from datetime import UTC, datetime
from email.utils import parsedate_to_datetime

import httpx
from pydantic import ValidationError as PydanticValidationError

from spotkit.config.settings import SpotifyApiOptions
from spotkit.domain.exceptions import (
    AuthenticationError,
    BadRequestError,
    NetworkError,
    RateLimitError,
    RequestTimeoutError,
)
from spotkit.domain.models.common import ErrorResponse
from spotkit.domain.value_objects.token import Token
from spotkit.infrastructure.auth.authenticator import Authenticator
from spotkit.infrastructure.auth.token_store import TokenStore
from spotkit.infrastructure.http_pool import HttpClientPool
from spotkit.infrastructure.integrations.request_spec import RequestSpec
from spotkit.infrastructure.observability.logging import (
    get_correlation_id,
    set_correlation_id,
)

logger = logging.getLogger(__name__)

Sleeper = Callable[[float], Awaitable[None]]


class RequestExecutor:
    """Sends RequestSpecs with auth, timeout and a BOUNDED retry policy.

    Hey future me - the retry policy is deliberately tiny:
    - 429: wait Retry-After (or the fallback) and retry ONCE. Second 429 -> RateLimitError.
    - 401: refresh the token and retry ONCE. Second 401 -> AuthenticationError.
    - timeout: RequestTimeoutError, never retried (the request may have been applied!).
    - connection failure: NetworkError, never retried.
    - anything else non-2xx (5xx included): BadRequestError, never retried.
    No backoff loops, no circuit breaker. Callers that want more retries wrap us.
    """

    def __init__(
        self,
        token_store: TokenStore,
        authenticator: Authenticator,
        options: SpotifyApiOptions | None = None,
        http_pool: HttpClientPool | None = None,
        sleep: Sleeper = asyncio.sleep,
    ) -> None:
        """
        Initialize the executor.

        Args:
            token_store: Token store of this client
            authenticator: Used for refresh (expired token, 401)
            options: Client options; read on every call, so mutations apply immediately
            http_pool: Pool shared with the authenticator; a private one when omitted
            sleep: Awaitable used for the 429 wait (swappable in tests)
        """
        self.token_store = token_store
        self.authenticator = authenticator
        self.options = options or SpotifyApiOptions()
        self._owns_pool = http_pool is None
        self.http_pool = http_pool or HttpClientPool(
            timeout=self.options.request_timeout_seconds
        )
        self._sleep = sleep

    async def close(self) -> None:
        """Close the HTTP pool if we created it."""
        if self._owns_pool:
            await self.http_pool.close()

    async def execute(self, spec: RequestSpec) -> bytes:
        """Send a request and return the raw response body.

        Args:
            spec: Request to send

        Returns:
            Response body (b"" for 204 No Content)

        Raises:
            AuthenticationError: No usable token, refresh failed, or 401 twice
            RateLimitError: 429 after the single retry (or retry disabled)
            RequestTimeoutError: No response within options.request_timeout_seconds
            NetworkError: Connection failed (refused, DNS, reset) before any answer
            BadRequestError: Any other non-2xx answer
        """
        if not get_correlation_id():
            set_correlation_id()

        token = await self._resolve_token()
        self._check_scopes(token, spec)

        rate_limit_retried = False
        unauthorized_retried = False

        while True:
            response = await self._send(spec, token)

            if response.status_code == 429:
                retry_after = self._parse_retry_after(response)
                if rate_limit_retried or not self.options.retry_when_rate_limited:
                    logger.error(
                        "%s rate limited (429), giving up. Retry-After: %s",
                        spec.describe(),
                        retry_after if retry_after is not None else "not provided",
                    )
                    raise RateLimitError(
                        f"{spec.describe()} rate limited (429). "
                        f"Retry-After: {retry_after if retry_after is not None else 'not provided'} seconds.",
                        retry_after=retry_after,
                    )
                rate_limit_retried = True
                wait_time = (
                    retry_after
                    if retry_after is not None
                    else self.options.fallback_retry_after_seconds
                )
                logger.warning(
                    "%s rate limited (429), waiting %.1fs before the single retry",
                    spec.describe(),
                    wait_time,
                )
                await self._sleep(wait_time)
                continue

            if response.status_code == 401:
                if (
                    unauthorized_retried
                    or not self.options.retry_on_unauthorized
                    or not self.authenticator.can_renew(token)
                ):
                    raise AuthenticationError(
                        message=f"{spec.describe()} was rejected as unauthorized (401)",
                        error_code="unauthorized",
                        error_description=self._parse_reason(response),
                        http_status=401,
                    )
                unauthorized_retried = True
                logger.info("%s got 401, refreshing token and retrying once", spec.describe())
                token = await self._renew(token)
                continue

            if not response.is_success:
                raise self._bad_request(spec, response)

            return response.content

    async def _resolve_token(self) -> Token:
        """Current token, refreshed first if missing or expired."""
        token = self.token_store.get()
        if token is not None and not token.is_expired():
            return token

        if not self.options.automatic_refresh:
            raise AuthenticationError(
                message="No valid access token and automatic refresh is disabled",
                error_code="token_expired" if token is not None else "no_token",
            )
        if token is None:
            logger.debug("No token stored, obtaining one")
        else:
            logger.debug("Token expired at %s, refreshing", token.expires_at.isoformat())
        return await self._renew(token)

    async def _renew(self, token: Token | None) -> Token:
        new_token = await self.authenticator.renew(token)
        # Last refresh wins - concurrent refreshes may overwrite each other
        self.token_store.set(new_token)
        return new_token

    def _check_scopes(self, token: Token, spec: RequestSpec) -> None:
        if not spec.required_scopes or not token.scopes:
            return
        missing = spec.required_scopes - token.scopes
        if missing:
            logger.warning(
                "%s needs scopes %s that the token was not granted",
                spec.describe(),
                ", ".join(sorted(missing)),
            )

    async def _send(self, spec: RequestSpec, token: Token) -> httpx.Response:
        client = await self.http_pool.get_client()
        url = spec.url(self.options.base_url)
        headers = {"Authorization": f"{token.token_type} {token.access_token}"}
        timeout = self.options.request_timeout_seconds

        logger.debug("Sending %s", spec.describe())
        try:
            if spec.body is None:
                return await client.request(
                    spec.method, url, headers=headers, timeout=timeout
                )
            return await client.request(
                spec.method, url, headers=headers, json=spec.body, timeout=timeout
            )
        except httpx.TimeoutException as e:
            raise RequestTimeoutError(
                f"No response from {spec.describe()} within {timeout}s"
            ) from e
        except httpx.TransportError as e:
            raise NetworkError(f"{spec.describe()} failed before any answer: {e}") from e

    @staticmethod
    def _parse_retry_after(response: httpx.Response) -> float | None:
        value = response.headers.get("Retry-After")
        if value is None:
            return None
        try:
            seconds = float(value)
        except ValueError:
            # HTTP-date form: "Wed, 21 Oct 2026 07:28:00 GMT"
            try:
                retry_at = parsedate_to_datetime(value)
            except (TypeError, ValueError):
                logger.warning("Ignoring unparsable Retry-After header: %r", value)
                return None
            if retry_at.tzinfo is None:
                retry_at = retry_at.replace(tzinfo=UTC)
            seconds = (retry_at - datetime.now(UTC)).total_seconds()
        return max(seconds, 0.0)

    @staticmethod
    def _parse_reason(response: httpx.Response) -> str | None:
        try:
            return ErrorResponse.model_validate_json(response.content).error.message or None
        except PydanticValidationError:
            return None

    def _bad_request(self, spec: RequestSpec, response: httpx.Response) -> BadRequestError:
        reason = self._parse_reason(response)
        logger.warning(
            "%s failed with %d: %s", spec.describe(), response.status_code, reason
        )
        return BadRequestError(
            f"{spec.describe()} failed with {response.status_code}"
            + (f": {reason}" if reason else ""),
            status_code=response.status_code,
            reason=reason,
            body=response.text,
        )
