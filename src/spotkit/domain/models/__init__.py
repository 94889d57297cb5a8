"""Typed API objects (pydantic models decoded from API responses)."""

from spotkit.domain.models.catalog import (
    Artist,
    ArtistList,
    SimpleAlbum,
    SimpleArtist,
    Track,
    TrackList,
)
from spotkit.domain.models.common import (
    ErrorObject,
    ErrorResponse,
    Followers,
    Image,
    Restrictions,
    SpotifyObject,
)
from spotkit.domain.models.paging import Cursor, CursorBasedPagingObject, PagingObject
from spotkit.domain.models.player import (
    CurrentlyPlayingContext,
    Device,
    DeviceList,
    PlaybackContext,
)
from spotkit.domain.models.shows import (
    ResumePoint,
    Show,
    ShowList,
    SimpleEpisode,
    SimpleShow,
)
from spotkit.domain.models.users import PrivateUser, PublicUser

__all__ = [
    "Artist",
    "ArtistList",
    "CurrentlyPlayingContext",
    "Cursor",
    "CursorBasedPagingObject",
    "Device",
    "DeviceList",
    "ErrorObject",
    "ErrorResponse",
    "Followers",
    "Image",
    "PagingObject",
    "PlaybackContext",
    "PrivateUser",
    "PublicUser",
    "Restrictions",
    "ResumePoint",
    "Show",
    "ShowList",
    "SimpleAlbum",
    "SimpleArtist",
    "SimpleEpisode",
    "SimpleShow",
    "SpotifyObject",
    "Track",
    "TrackList",
]
