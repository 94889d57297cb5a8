"""Settings and per-client options."""

from functools import lru_cache

from pydantic import BaseModel, ConfigDict, Field
from pydantic_settings import BaseSettings, SettingsConfigDict

DEFAULT_API_BASE_URL = "https://api.spotify.com/v1"
DEFAULT_ACCOUNTS_BASE_URL = "https://accounts.spotify.com"


class SpotifySettings(BaseSettings):
    """Spotify application credentials, read from SPOTIFY_* env vars or .env.

    Hey future me - these are APP credentials (from the developer dashboard), not user tokens.
    User tokens live in the TokenStore and never touch the environment.
    """

    model_config = SettingsConfigDict(
        env_prefix="SPOTIFY_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    client_id: str = Field(default="", description="Application client id")
    client_secret: str = Field(default="", description="Application client secret")
    redirect_uri: str = Field(default="", description="Registered OAuth redirect uri")
    log_level: str = Field(default="INFO", description="Root log level")
    log_json: bool = Field(default=False, description="Emit JSON log lines")


class SpotifyApiOptions(BaseModel):
    """Per-client options. Set at construction, mutable afterwards.

    validate_assignment keeps later mutations (api.options.request_timeout_seconds = 5)
    as strict as the constructor.
    """

    model_config = ConfigDict(validate_assignment=True)

    request_timeout_seconds: float = Field(
        default=100.0, gt=0, description="Per-request timeout"
    )
    retry_when_rate_limited: bool = Field(
        default=True, description="Wait Retry-After and retry once on 429"
    )
    retry_on_unauthorized: bool = Field(
        default=True, description="Refresh the token and retry once on 401"
    )
    automatic_refresh: bool = Field(
        default=True,
        description="Refresh expired tokens before sending a request",
    )
    fallback_retry_after_seconds: float = Field(
        default=1.0, ge=0, description="Wait used when a 429 carries no Retry-After"
    )
    default_market: str | None = Field(
        default=None, description="Market applied to endpoints that require one"
    )
    base_url: str = Field(default=DEFAULT_API_BASE_URL)
    accounts_base_url: str = Field(default=DEFAULT_ACCOUNTS_BASE_URL)


@lru_cache
def get_settings() -> SpotifySettings:
    """Get cached settings (environment is read once per process)."""
    return SpotifySettings()
