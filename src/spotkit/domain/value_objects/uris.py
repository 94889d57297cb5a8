"""Spotify URI value objects.

Every endpoint accepts either a bare id ("0OdUWJ0sBjDrqHygGUXeCF"), a URI
("spotify:artist:0OdUWJ0sBjDrqHygGUXeCF") or an open.spotify.com link. These classes normalize
all three to the bare id and reject URIs of the wrong type.
"""

from dataclasses import dataclass
from typing import ClassVar
from urllib.parse import urlparse

from spotkit.domain.exceptions import ValidationError

_OPEN_SPOTIFY_HOST = "open.spotify.com"


@dataclass(frozen=True, init=False)
class SpotifyUri:
    """Base class; use one of the typed subclasses."""

    uri_type: ClassVar[str] = ""
    id: str

    def __init__(self, value: str) -> None:
        object.__setattr__(self, "id", self._parse(value))

    @classmethod
    def _parse(cls, value: str) -> str:
        value = (value or "").strip()
        if not value:
            raise ValidationError(f"Empty {cls.uri_type} id")

        if value.startswith("spotify:"):
            parts = value.split(":")
            # Legacy playlist uris look like spotify:user:<owner>:playlist:<id>
            if len(parts) == 5 and parts[1] == "user" and parts[3] == "playlist":
                parts = ["spotify", "playlist", parts[4]]
            if len(parts) != 3 or not parts[2]:
                raise ValidationError(f"Malformed Spotify uri: {value}")
            if parts[1] != cls.uri_type:
                raise ValidationError(f"{value} is not a {cls.uri_type} uri")
            return parts[2]

        if value.startswith(("http://", "https://")):
            parsed = urlparse(value)
            segments = [s for s in parsed.path.split("/") if s]
            # Localized links carry a prefix segment such as /intl-de/
            if segments and segments[0].startswith("intl-"):
                segments = segments[1:]
            if parsed.netloc != _OPEN_SPOTIFY_HOST or len(segments) != 2:
                raise ValidationError(f"Not a Spotify link: {value}")
            if segments[0] != cls.uri_type:
                raise ValidationError(f"{value} is not a {cls.uri_type} link")
            return segments[1]

        if ":" in value or "/" in value:
            raise ValidationError(f"Malformed {cls.uri_type} id: {value}")
        return value

    @property
    def uri(self) -> str:
        """Full spotify:<type>:<id> form."""
        return f"spotify:{self.uri_type}:{self.id}"

    def __str__(self) -> str:
        return self.uri


class ArtistUri(SpotifyUri):
    uri_type = "artist"


class AlbumUri(SpotifyUri):
    uri_type = "album"


class TrackUri(SpotifyUri):
    uri_type = "track"


class ShowUri(SpotifyUri):
    uri_type = "show"


class EpisodeUri(SpotifyUri):
    uri_type = "episode"


class PlaylistUri(SpotifyUri):
    uri_type = "playlist"


class UserUri(SpotifyUri):
    uri_type = "user"
