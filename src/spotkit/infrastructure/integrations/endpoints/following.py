"""Follow/unfollow endpoints for users, artists and playlists."""

from spotkit.domain.exceptions import DecodeError
from spotkit.domain.models.catalog import Artist
from spotkit.domain.models.paging import CursorBasedPagingObject
from spotkit.domain.value_objects.scopes import SpotifyScope
from spotkit.domain.value_objects.uris import ArtistUri, PlaylistUri, UserUri
from spotkit.infrastructure.integrations.endpoints.artists import check_limit
from spotkit.infrastructure.integrations.endpoints.base import SpotifyEndpoint, decode
from spotkit.infrastructure.integrations.request_spec import EndpointBuilder

MAX_FOLLOW_IDS = 50
MAX_PLAYLIST_FOLLOWER_CHECK = 5


class FollowingApi(SpotifyEndpoint):
    """Public following endpoints (work with an app token)."""

    async def are_following_playlist(self, playlist: str, *users: str) -> list[bool]:
        """
        Check whether users follow a playlist.

        Args:
            playlist: Playlist id or uri
            users: User ids or uris, 1-5

        Returns:
            One flag per user, in input order

        Raises:
            ValidationError: No users, or more than 5
            BadRequestError: If the playlist does not exist
        """
        self.require_ids(users, "user")
        self.check_bulk_requesting(MAX_PLAYLIST_FOLLOWER_CHECK, len(users))
        playlist_id = EndpointBuilder.encode(PlaylistUri(playlist).id)
        body = await self.get(
            self.endpoint(f"/playlists/{playlist_id}/followers/contains").with_joined(
                "ids", (UserUri(user).id for user in users)
            )
        )
        return decode(body, list[bool])  # type: ignore[no-any-return]

    async def is_following_playlist_as(self, playlist: str, user: str) -> bool:
        """Check whether one user follows a playlist."""
        return (await self.are_following_playlist(playlist, user))[0]


class ClientFollowingApi(FollowingApi):
    """Following endpoints acting on behalf of the current user.

    Every bulk method takes at most 50 ids, checked before any request is sent.
    """

    # ===== CHECKS =====

    async def _contains(self, kind: str, ids: list[str]) -> list[bool]:
        self.require_ids(ids, kind)
        self.check_bulk_requesting(MAX_FOLLOW_IDS, len(ids))
        body = await self.get(
            self.endpoint("/me/following/contains")
            .with_param("type", kind)
            .with_joined("ids", ids)
            .with_scopes(SpotifyScope.USER_FOLLOW_READ)
        )
        flags: list[bool] = decode(body, list[bool])
        if len(flags) != len(ids):
            # Can't line the answer up with the input - refuse rather than guess
            raise DecodeError(
                f"Expected {len(ids)} follow flags, got {len(flags)}", body=body
            )
        return flags

    async def is_following_users(self, *users: str) -> list[bool]:
        """Whether the current user follows each of the given users."""
        return await self._contains("user", [UserUri(user).id for user in users])

    async def is_following_user(self, user: str) -> bool:
        return (await self.is_following_users(user))[0]

    async def is_following_artists(self, *artists: str) -> list[bool]:
        """Whether the current user follows each of the given artists."""
        return await self._contains("artist", [ArtistUri(artist).id for artist in artists])

    async def is_following_artist(self, artist: str) -> bool:
        return (await self.is_following_artists(artist))[0]

    async def is_following_playlist(self, playlist: str) -> bool:
        """Whether the current user follows a playlist."""
        user_id = await self.api.get_user_id()  # type: ignore[attr-defined]
        return (await self.are_following_playlist(playlist, user_id))[0]

    # ===== LISTING =====

    async def get_followed_artists(
        self, limit: int | None = None, after: str | None = None
    ) -> CursorBasedPagingObject[Artist]:
        """
        Get the artists the current user follows.

        Args:
            limit: Page size, 1-50 (API default 20)
            after: Last artist id of the previous page

        Returns:
            Cursor-based page; next_page()/iter_items() walk the rest
        """
        check_limit(limit)
        builder = (
            self.endpoint("/me/following")
            .with_param("type", "artist")
            .with_param("limit", limit)
            .with_param("after", after)
            .with_scopes(SpotifyScope.USER_FOLLOW_READ)
        )
        return await self.get_paging(builder, CursorBasedPagingObject[Artist], envelope="artists")

    # ===== FOLLOW / UNFOLLOW =====

    async def _change(self, method: str, kind: str, ids: list[str]) -> None:
        self.require_ids(ids, kind)
        self.check_bulk_requesting(MAX_FOLLOW_IDS, len(ids))
        builder = (
            self.endpoint("/me/following")
            .with_param("type", kind)
            .with_joined("ids", ids)
            .with_scopes(SpotifyScope.USER_FOLLOW_MODIFY)
        )
        if method == "PUT":
            await self.put(builder)
        else:
            await self.delete(builder)

    async def follow_users(self, *users: str) -> None:
        await self._change("PUT", "user", [UserUri(user).id for user in users])

    async def follow_user(self, user: str) -> None:
        await self.follow_users(user)

    async def follow_artists(self, *artists: str) -> None:
        await self._change("PUT", "artist", [ArtistUri(artist).id for artist in artists])

    async def follow_artist(self, artist: str) -> None:
        await self.follow_artists(artist)

    async def unfollow_users(self, *users: str) -> None:
        await self._change("DELETE", "user", [UserUri(user).id for user in users])

    async def unfollow_user(self, user: str) -> None:
        await self.unfollow_users(user)

    async def unfollow_artists(self, *artists: str) -> None:
        await self._change("DELETE", "artist", [ArtistUri(artist).id for artist in artists])

    async def unfollow_artist(self, artist: str) -> None:
        await self.unfollow_artists(artist)

    async def follow_playlist(self, playlist: str, public: bool = True) -> None:
        """
        Follow a playlist.

        Args:
            playlist: Playlist id or uri
            public: Show the playlist on the user's public profile
        """
        playlist_id = EndpointBuilder.encode(PlaylistUri(playlist).id)
        scope = (
            SpotifyScope.PLAYLIST_MODIFY_PUBLIC if public else SpotifyScope.PLAYLIST_MODIFY_PRIVATE
        )
        await self.put(
            self.endpoint(f"/playlists/{playlist_id}/followers").with_scopes(scope),
            body={"public": public},
        )

    async def unfollow_playlist(self, playlist: str) -> None:
        playlist_id = EndpointBuilder.encode(PlaylistUri(playlist).id)
        await self.delete(self.endpoint(f"/playlists/{playlist_id}/followers"))
