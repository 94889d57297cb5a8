"""Endpoint groups. Each wraps one area of the Web API on top of the request executor."""

from spotkit.infrastructure.integrations.endpoints.artists import (
    AlbumInclusionStrategy,
    ArtistsApi,
)
from spotkit.infrastructure.integrations.endpoints.base import SpotifyEndpoint, decode
from spotkit.infrastructure.integrations.endpoints.following import (
    ClientFollowingApi,
    FollowingApi,
)
from spotkit.infrastructure.integrations.endpoints.player import ClientPlayerApi
from spotkit.infrastructure.integrations.endpoints.profile import ClientProfileApi, UserApi
from spotkit.infrastructure.integrations.endpoints.shows import ClientShowApi, ShowApi

__all__ = [
    "AlbumInclusionStrategy",
    "ArtistsApi",
    "ClientFollowingApi",
    "ClientPlayerApi",
    "ClientProfileApi",
    "ClientShowApi",
    "FollowingApi",
    "ShowApi",
    "SpotifyEndpoint",
    "UserApi",
    "decode",
]
