"""Artist catalog endpoints."""

from collections.abc import Sequence
from enum import Enum

from spotkit.domain.exceptions import ValidationError
from spotkit.domain.models.catalog import Artist, ArtistList, SimpleAlbum, Track, TrackList
from spotkit.domain.models.paging import PagingObject
from spotkit.domain.value_objects.market import normalize_market
from spotkit.domain.value_objects.uris import ArtistUri
from spotkit.infrastructure.integrations.endpoints.base import SpotifyEndpoint, decode
from spotkit.infrastructure.integrations.request_spec import EndpointBuilder

MAX_ARTISTS_PER_REQUEST = 50


class AlbumInclusionStrategy(str, Enum):
    """Album groups to include when listing an artist's albums."""

    ALBUM = "album"
    SINGLE = "single"
    APPEARS_ON = "appears_on"
    COMPILATION = "compilation"


def check_limit(limit: int | None, maximum: int = 50) -> None:
    """Page size must be 1..maximum when given."""
    if limit is not None and not 1 <= limit <= maximum:
        raise ValidationError(f"limit must be between 1 and {maximum}, got {limit}")


class ArtistsApi(SpotifyEndpoint):
    """Endpoints for retrieving information about one or more artists."""

    async def get_artist(self, artist: str) -> Artist | None:
        """
        Get a single artist.

        Args:
            artist: Artist id, uri or open.spotify.com link

        Returns:
            Artist, or None if the id is unknown
        """
        artist_id = EndpointBuilder.encode(ArtistUri(artist).id)
        return await self.get_object_or_none(self.endpoint(f"/artists/{artist_id}"), Artist)

    # Hey future me, unknown ids come back as null IN THEIR SLOT, so the result lines up with the
    # input. Don't filter the Nones here - callers zip() the result with their ids.
    async def get_artists(self, *artists: str) -> list[Artist | None]:
        """
        Get several artists in one request.

        Args:
            artists: Artist ids or uris. Maximum 50.

        Returns:
            Artists in input order, None where an id is unknown

        Raises:
            ValidationError: No ids, or more than 50
        """
        self.require_ids(artists, "artist")
        self.check_bulk_requesting(MAX_ARTISTS_PER_REQUEST, len(artists))
        body = await self.get(
            self.endpoint("/artists").with_joined(
                "ids", (ArtistUri(artist).id for artist in artists)
            )
        )
        return decode(body, ArtistList).artists  # type: ignore[no-any-return]

    async def get_artist_albums(
        self,
        artist: str,
        limit: int | None = None,
        offset: int | None = None,
        market: str | None = None,
        include: Sequence[AlbumInclusionStrategy] = (),
    ) -> PagingObject[SimpleAlbum]:
        """
        Get an artist's albums.

        Args:
            artist: Artist id or uri
            limit: Page size, 1-50 (API default 20)
            offset: Index of the first album
            market: Only albums available in this market
            include: Album groups to include; all groups when empty

        Raises:
            BadRequestError: If the artist is not found or the filters are illegal
        """
        check_limit(limit)
        artist_id = EndpointBuilder.encode(ArtistUri(artist).id)
        builder = (
            self.endpoint(f"/artists/{artist_id}/albums")
            .with_param("limit", limit)
            .with_param("offset", offset)
            .with_param("market", normalize_market(market or self.api.options.default_market))
            .with_joined("include_groups", (strategy.value for strategy in include))
        )
        return await self.get_paging(builder, PagingObject[SimpleAlbum])

    async def get_artist_top_tracks(self, artist: str, market: str = "US") -> list[Track]:
        """
        Get an artist's top tracks in a market (at most 10, no paging).

        Unlike most endpoints the market is NOT optional here.
        """
        artist_id = EndpointBuilder.encode(ArtistUri(artist).id)
        body = await self.get(
            self.endpoint(f"/artists/{artist_id}/top-tracks").with_param(
                "market", normalize_market(market)
            )
        )
        return decode(body, TrackList).tracks  # type: ignore[no-any-return]

    async def get_related_artists(self, artist: str) -> list[Artist]:
        """Artists similar to the given one. Never contains None, may be empty."""
        artist_id = EndpointBuilder.encode(ArtistUri(artist).id)
        body = await self.get(self.endpoint(f"/artists/{artist_id}/related-artists"))
        return [a for a in decode(body, ArtistList).artists if a is not None]
