"""Artists, albums and tracks."""

from typing import Literal

from pydantic import BaseModel, Field

from spotkit.domain.models.common import Followers, Image, Restrictions, SpotifyObject


class SimpleArtist(SpotifyObject):
    """Artist reference as embedded in albums and tracks."""

    type: Literal["artist"] = "artist"


class Artist(SimpleArtist):
    """Full artist object."""

    genres: list[str] = Field(default_factory=list)
    images: list[Image] = Field(default_factory=list)
    popularity: int | None = None  # 0-100, recomputed from recent streams
    followers: Followers | None = None


class SimpleAlbum(SpotifyObject):
    """Album as returned by artist albums and embedded in tracks."""

    type: Literal["album"] = "album"
    album_type: str | None = None  # "album", "single", "compilation"
    # Only present on /artists/{id}/albums: relation of the artist to the album
    album_group: str | None = None
    total_tracks: int | None = None
    release_date: str | None = None  # "YYYY", "YYYY-MM" or "YYYY-MM-DD"
    release_date_precision: str | None = None
    artists: list[SimpleArtist] = Field(default_factory=list)
    images: list[Image] = Field(default_factory=list)
    available_markets: list[str] = Field(default_factory=list)
    restrictions: Restrictions | None = None


class Track(SpotifyObject):
    """Full track object."""

    type: Literal["track"] = "track"
    duration_ms: int = 0
    explicit: bool = False
    popularity: int | None = None
    track_number: int | None = None
    disc_number: int | None = None
    preview_url: str | None = None
    is_playable: bool | None = None  # only set when a market was applied (track relinking)
    is_local: bool = False
    artists: list[SimpleArtist] = Field(default_factory=list)
    album: SimpleAlbum | None = None
    external_ids: dict[str, str] = Field(default_factory=dict)
    available_markets: list[str] = Field(default_factory=list)
    restrictions: Restrictions | None = None


class ArtistList(BaseModel):
    """Envelope of GET /artists. Unknown ids come back as null in their slot."""

    artists: list[Artist | None]


class TrackList(BaseModel):
    """Envelope of GET /artists/{id}/top-tracks."""

    tracks: list[Track]
