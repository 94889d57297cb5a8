"""Podcast show endpoints."""

from spotkit.domain.exceptions import ValidationError
from spotkit.domain.models.paging import PagingObject
from spotkit.domain.models.shows import Show, ShowList, SimpleEpisode, SimpleShow
from spotkit.domain.value_objects.market import normalize_market
from spotkit.domain.value_objects.scopes import SpotifyScope
from spotkit.domain.value_objects.uris import ShowUri
from spotkit.infrastructure.integrations.endpoints.artists import check_limit
from spotkit.infrastructure.integrations.endpoints.base import SpotifyEndpoint, decode
from spotkit.infrastructure.integrations.request_spec import EndpointBuilder

MAX_SHOWS_PER_REQUEST = 50


class ShowApi(SpotifyEndpoint):
    """Show endpoints for app (client credentials) clients.

    Hey future me - an app token has no user country, and the API then hides every show.
    So a market is REQUIRED here: pass one or set options.default_market.
    """

    def _resolve_market(self, market: str | None) -> str | None:
        resolved = normalize_market(market or self.api.options.default_market)
        if resolved is None:
            raise ValidationError(
                "A market is required for show endpoints without a user token. "
                "Pass market= or set options.default_market"
            )
        return resolved

    async def get_show(self, show: str, market: str | None = None) -> Show | None:
        """
        Get a single show with its first page of episodes.

        Returns:
            Show, or None if the id is unknown. Unlike get_shows() this never raises for
            unknown ids.
        """
        show_id = EndpointBuilder.encode(ShowUri(show).id)
        result = await self.get_object_or_none(
            self.endpoint(f"/shows/{show_id}")
            .with_param("market", self._resolve_market(market))
            .with_scopes(SpotifyScope.USER_READ_PLAYBACK_POSITION),
            Show,
        )
        if result is not None:
            model = PagingObject[SimpleEpisode]
            result.episodes.bind(lambda url: self.get_paging(url, model))
        return result

    async def get_shows(self, *shows: str, market: str | None = None) -> list[SimpleShow | None]:
        """
        Get several shows.

        Args:
            shows: Show ids or uris. Maximum 50.
            market: Market (see class docstring)

        Returns:
            Shows in input order, None where an id is unknown

        Raises:
            ValidationError: No ids, or more than 50
            BadRequestError: If an id is malformed
        """
        self.require_ids(shows, "show")
        self.check_bulk_requesting(MAX_SHOWS_PER_REQUEST, len(shows))
        resolved_market = self._resolve_market(market)
        ids = [ShowUri(show).id for show in shows]

        async def fetch(chunk: list[str]) -> list[SimpleShow | None]:
            body = await self.get(
                self.endpoint("/shows")
                .with_joined("ids", chunk)
                .with_param("market", resolved_market)
            )
            return decode(body, ShowList).shows  # type: ignore[no-any-return]

        return await self.bulk_request(MAX_SHOWS_PER_REQUEST, ids, fetch)  # type: ignore[arg-type]

    async def get_show_episodes(
        self,
        show: str,
        limit: int | None = None,
        offset: int | None = None,
        market: str | None = None,
    ) -> PagingObject[SimpleEpisode]:
        """
        Get a page of a show's episodes.

        Args:
            show: Show id or uri
            limit: Page size, 1-50 (API default 20)
            offset: Index of the first episode

        Raises:
            BadRequestError: If the show cannot be found
        """
        check_limit(limit)
        show_id = EndpointBuilder.encode(ShowUri(show).id)
        builder = (
            self.endpoint(f"/shows/{show_id}/episodes")
            .with_param("limit", limit)
            .with_param("offset", offset)
            .with_param("market", self._resolve_market(market))
            .with_scopes(SpotifyScope.USER_READ_PLAYBACK_POSITION)
        )
        return await self.get_paging(builder, PagingObject[SimpleEpisode])


class ClientShowApi(ShowApi):
    """Show endpoints for user clients: the market associated with the user account is used."""

    def _resolve_market(self, market: str | None) -> str | None:
        return normalize_market(market or self.api.options.default_market)
