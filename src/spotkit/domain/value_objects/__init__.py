"""Value objects shared by the auth layer and the endpoint wrappers."""

from spotkit.domain.value_objects.grants import (
    AuthorizationCodeGrant,
    AuthorizationGrant,
    ClientCredentialsGrant,
    ImplicitGrant,
    PkceGrant,
)
from spotkit.domain.value_objects.market import FROM_TOKEN, normalize_market
from spotkit.domain.value_objects.scopes import SpotifyScope, scope_string
from spotkit.domain.value_objects.token import Token
from spotkit.domain.value_objects.uris import (
    AlbumUri,
    ArtistUri,
    EpisodeUri,
    PlaylistUri,
    ShowUri,
    SpotifyUri,
    TrackUri,
    UserUri,
)

__all__ = [
    "FROM_TOKEN",
    "AlbumUri",
    "ArtistUri",
    "AuthorizationCodeGrant",
    "AuthorizationGrant",
    "ClientCredentialsGrant",
    "EpisodeUri",
    "ImplicitGrant",
    "PkceGrant",
    "PlaylistUri",
    "ShowUri",
    "SpotifyScope",
    "SpotifyUri",
    "Token",
    "TrackUri",
    "UserUri",
    "normalize_market",
    "scope_string",
]
