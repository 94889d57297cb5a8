"""Tests for Spotify URI parsing."""

import pytest

from spotkit.domain.exceptions import ValidationError
from spotkit.domain.value_objects import ArtistUri, PlaylistUri, ShowUri, TrackUri

ARTIST_ID = "0OdUWJ0sBjDrqHygGUXeCF"


class TestSpotifyUri:
    """Test the accepted id forms."""

    @pytest.mark.parametrize(
        "value",
        [
            ARTIST_ID,
            f"spotify:artist:{ARTIST_ID}",
            f"https://open.spotify.com/artist/{ARTIST_ID}",
            f"https://open.spotify.com/artist/{ARTIST_ID}?si=abc",
            f"https://open.spotify.com/intl-de/artist/{ARTIST_ID}",
            f"  {ARTIST_ID}  ",
        ],
    )
    def test_forms_normalize_to_id(self, value: str) -> None:
        assert ArtistUri(value).id == ARTIST_ID

    def test_uri_and_str(self) -> None:
        uri = ShowUri("abc")
        assert uri.uri == "spotify:show:abc"
        assert str(uri) == "spotify:show:abc"

    def test_legacy_playlist_uri(self) -> None:
        assert PlaylistUri("spotify:user:someone:playlist:pl1").id == "pl1"

    def test_equality_is_per_type(self) -> None:
        assert ArtistUri("x") == ArtistUri("spotify:artist:x")
        assert ArtistUri("x") != TrackUri("x")

    @pytest.mark.parametrize(
        "value",
        [
            "",
            "spotify:track:abc",
            "spotify:artist:",
            "spotify:artist:a:b",
            "https://example.com/artist/abc",
            "https://open.spotify.com/track/abc",
            "abc/def",
        ],
    )
    def test_invalid_values(self, value: str) -> None:
        with pytest.raises(ValidationError):
            ArtistUri(value)
