"""Token value object."""

from dataclasses import dataclass, field
from datetime import UTC, datetime, timedelta
from typing import Any

from spotkit.domain.exceptions import DecodeError


@dataclass(frozen=True)
class Token:
    """OAuth access token plus what we need to keep it alive.

    Hey future me - Token is FROZEN. A refresh never mutates the old token, it produces a new
    one and the TokenStore swaps it in. That way a request holding a reference to the old token
    can't see a half-updated object.

    Attributes:
        access_token: Bearer credential sent with every API call
        expires_at: UTC instant after which the provider rejects the token
        refresh_token: Long-lived credential for silent refresh (None for client credentials
            and implicit grants)
        token_type: Almost always "Bearer"
        scopes: Scopes granted by the provider
    """

    access_token: str
    expires_at: datetime
    refresh_token: str | None = None
    token_type: str = "Bearer"
    scopes: frozenset[str] = field(default_factory=frozenset)

    @classmethod
    def from_response(
        cls,
        payload: dict[str, Any],
        now: datetime | None = None,
        previous: "Token | None" = None,
    ) -> "Token":
        """Build a token from a token endpoint (or implicit fragment) payload.

        Args:
            payload: {"access_token", "token_type", "expires_in", "refresh_token"?, "scope"?}
            now: Reference time for expires_in (defaults to current UTC time)
            previous: Token being refreshed. Its refresh token and scopes are kept when the
                provider doesn't rotate them.

        Raises:
            DecodeError: If access_token or expires_in is missing or malformed
        """
        access_token = payload.get("access_token")
        if not access_token or not isinstance(access_token, str):
            raise DecodeError("Token response has no access_token", body=str(payload))
        try:
            expires_in = int(payload.get("expires_in", 3600))
        except (TypeError, ValueError) as e:
            raise DecodeError(
                f"Token response has an invalid expires_in: {payload.get('expires_in')!r}",
                body=str(payload),
            ) from e

        issued_at = now or datetime.now(UTC)
        scope = payload.get("scope")
        if scope:
            scopes = frozenset(str(scope).split())
        elif previous is not None:
            scopes = previous.scopes
        else:
            scopes = frozenset()

        refresh_token = payload.get("refresh_token") or (
            previous.refresh_token if previous is not None else None
        )
        return cls(
            access_token=access_token,
            expires_at=issued_at + timedelta(seconds=expires_in),
            refresh_token=refresh_token,
            token_type=str(payload.get("token_type") or "Bearer"),
            scopes=scopes,
        )

    def is_expired(self, now: datetime | None = None) -> bool:
        """Check whether the token is past its expiry instant."""
        return (now or datetime.now(UTC)) >= self.expires_at

    @property
    def can_refresh(self) -> bool:
        """Check if a silent refresh is possible."""
        return bool(self.refresh_token)

    def has_scopes(self, required: frozenset[str] | set[str]) -> bool:
        """Check that all required scopes were granted."""
        return set(required) <= self.scopes

    def __repr__(self) -> str:
        # Never put credentials into logs or tracebacks
        return (
            f"Token(token_type={self.token_type!r}, expires_at={self.expires_at.isoformat()}, "
            f"refreshable={self.can_refresh}, scopes={sorted(self.scopes)})"
        )
