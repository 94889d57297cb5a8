"""Spotify Web API client implementation."""

from spotkit.infrastructure.integrations.executor import RequestExecutor
from spotkit.infrastructure.integrations.request_spec import EndpointBuilder, RequestSpec
from spotkit.infrastructure.integrations.spotify_api import (
    GenericSpotifyApi,
    SpotifyAppApi,
    SpotifyClientApi,
    spotify_app_api,
    spotify_client_api,
)

__all__ = [
    "EndpointBuilder",
    "GenericSpotifyApi",
    "RequestExecutor",
    "RequestSpec",
    "SpotifyAppApi",
    "SpotifyClientApi",
    "spotify_app_api",
    "spotify_client_api",
]
