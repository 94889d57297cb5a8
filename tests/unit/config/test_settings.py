"""Tests for settings and client options."""

import pytest
from pydantic import ValidationError as PydanticValidationError

from spotkit.config.settings import (
    DEFAULT_API_BASE_URL,
    SpotifyApiOptions,
    SpotifySettings,
    get_settings,
)


class TestSpotifySettings:
    """Test environment-driven settings."""

    def test_reads_prefixed_environment(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("SPOTIFY_CLIENT_ID", "env-id")
        monkeypatch.setenv("SPOTIFY_LOG_JSON", "true")

        settings = SpotifySettings(_env_file=None)

        assert settings.client_id == "env-id"
        assert settings.log_json is True

    def test_get_settings_is_cached(self) -> None:
        get_settings.cache_clear()
        try:
            assert get_settings() is get_settings()
        finally:
            get_settings.cache_clear()


class TestSpotifyApiOptions:
    """Test per-client options."""

    def test_defaults(self) -> None:
        options = SpotifyApiOptions()
        assert options.request_timeout_seconds == 100.0
        assert options.fallback_retry_after_seconds == 1.0
        assert options.retry_when_rate_limited is True
        assert options.retry_on_unauthorized is True
        assert options.automatic_refresh is True
        assert options.base_url == DEFAULT_API_BASE_URL

    def test_assignment_is_validated(self) -> None:
        """Test that later mutations are as strict as the constructor."""
        options = SpotifyApiOptions()
        options.request_timeout_seconds = 5
        assert options.request_timeout_seconds == 5.0

        with pytest.raises(PydanticValidationError):
            options.request_timeout_seconds = 0
