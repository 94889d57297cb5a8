"""Domain exceptions."""

from typing import Any


class SpotifyException(Exception):
    """Base exception for everything spotkit raises on purpose."""

    # Hey future me, message is stored as an attribute so callers can inspect it without parsing
    # str(exception). Don't raise this base class directly - always use a specific subclass so
    # callers can catch precisely (rate limit vs. auth vs. bad request need different handling).
    def __init__(self, message: str, *args: Any) -> None:
        super().__init__(message, *args)
        self.message = message


class ValidationError(SpotifyException):
    """Input validation failed before any network call was made.

    Example:
        raise ValidationError("Too many ids (51). Maximum is 50")
        raise ValidationError("spotify:track:abc is not an artist uri")
    """

    pass


class ConfigurationError(SpotifyException):
    """Client misconfiguration (missing client id, secret or redirect uri)."""

    pass


class AuthenticationError(SpotifyException):
    """Token acquisition or refresh failed, or the API rejected the token twice.

    Hey future me - the provider reports token endpoint failures as
    {"error": "invalid_grant", "error_description": "..."}. We keep both parts plus the HTTP
    status so callers can decide between "retry later" and "send the user back to login".
    """

    def __init__(
        self,
        message: str = "Authentication failed. Please re-authenticate with Spotify.",
        error_code: str | None = None,
        error_description: str | None = None,
        http_status: int | None = None,
    ) -> None:
        super().__init__(message)
        self.error_code = error_code  # e.g., "invalid_grant"
        self.error_description = error_description
        self.http_status = http_status  # e.g., 400, 401

    @property
    def requires_reauth(self) -> bool:
        """Check if error requires user re-authentication."""
        # 400 invalid_grant means the refresh token is dead, 401/403 mean access was revoked
        return self.error_code == "invalid_grant" or self.http_status in (400, 401, 403)


class RateLimitError(SpotifyException):
    """The API kept answering 429 after the single automatic retry."""

    def __init__(self, message: str, retry_after: float | None = None) -> None:
        super().__init__(message)
        self.retry_after = retry_after


class RequestTimeoutError(SpotifyException, TimeoutError):
    """No response arrived within the configured request timeout."""

    pass


class NetworkError(SpotifyException, ConnectionError):
    """The request never got an HTTP answer (connection refused, DNS failure, reset).

    Wraps the underlying httpx.TransportError as __cause__. Timeouts are RequestTimeoutError.
    """

    pass


class BadRequestError(SpotifyException):
    """Any non-2xx answer that is not handled by a retry (4xx and 5xx alike).

    Attributes:
        status_code: HTTP status returned by the API
        reason: Provider error message (from {"error": {"message": ...}}) if present
        body: Raw response body as text
    """

    def __init__(
        self,
        message: str,
        status_code: int,
        reason: str | None = None,
        body: str | None = None,
    ) -> None:
        super().__init__(message)
        self.status_code = status_code
        self.reason = reason
        self.body = body


class DecodeError(SpotifyException):
    """Response body did not match the expected shape."""

    def __init__(self, message: str, body: bytes | str | None = None) -> None:
        super().__init__(message)
        self.body = body


__all__ = [
    "AuthenticationError",
    "BadRequestError",
    "ConfigurationError",
    "DecodeError",
    "NetworkError",
    "RateLimitError",
    "RequestTimeoutError",
    "SpotifyException",
    "ValidationError",
]
