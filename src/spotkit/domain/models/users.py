"""User profiles."""

from typing import Literal

from pydantic import Field

from spotkit.domain.models.common import Followers, Image, SpotifyObject


class PublicUser(SpotifyObject):
    """Public profile. `name` is unused for users, see display_name."""

    type: Literal["user"] = "user"
    display_name: str | None = None
    followers: Followers | None = None
    images: list[Image] = Field(default_factory=list)


class PrivateUser(PublicUser):
    """Profile of the logged-in user (GET /me).

    email needs user-read-email; country and product need user-read-private.
    """

    email: str | None = None
    country: str | None = None
    product: str | None = None  # "premium", "free", ...
