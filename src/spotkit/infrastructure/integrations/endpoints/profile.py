"""Profile endpoints."""

from spotkit.domain.models.users import PrivateUser, PublicUser
from spotkit.domain.value_objects.scopes import SpotifyScope
from spotkit.domain.value_objects.uris import UserUri
from spotkit.infrastructure.integrations.endpoints.base import SpotifyEndpoint, decode
from spotkit.infrastructure.integrations.request_spec import EndpointBuilder


class UserApi(SpotifyEndpoint):
    """Public user profiles."""

    async def get_profile(self, user: str) -> PublicUser | None:
        """Get a user's public profile, or None if the user doesn't exist."""
        user_id = EndpointBuilder.encode(UserUri(user).id)
        return await self.get_object_or_none(self.endpoint(f"/users/{user_id}"), PublicUser)


class ClientProfileApi(UserApi):
    """Profile of the user the token belongs to."""

    async def get_current_user(self) -> PrivateUser:
        """
        Get the current user's profile (GET /me).

        email is only filled with user-read-email, country/product only with
        user-read-private.
        """
        body = await self.get(
            self.endpoint("/me").with_scopes(
                SpotifyScope.USER_READ_EMAIL, SpotifyScope.USER_READ_PRIVATE
            )
        )
        return decode(body, PrivateUser)  # type: ignore[no-any-return]
