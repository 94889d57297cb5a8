"""Small building blocks shared by most API objects."""

from pydantic import BaseModel, Field


class Image(BaseModel):
    """Cover art / profile picture. Height and width are null for user-uploaded images."""

    url: str
    height: int | None = None
    width: int | None = None


class Followers(BaseModel):
    """Follower count. href is always null (the API doesn't support it yet)."""

    href: str | None = None
    total: int = 0


class Restrictions(BaseModel):
    """Why content is unavailable ("market", "product", "explicit")."""

    reason: str | None = None


class ErrorObject(BaseModel):
    """Regular API error payload: {"error": {"status": 400, "message": "..."}}."""

    status: int
    message: str = ""


class ErrorResponse(BaseModel):
    """Envelope around ErrorObject."""

    error: ErrorObject


class SpotifyObject(BaseModel):
    """Fields every addressable catalog object carries."""

    id: str
    name: str = ""
    uri: str = ""
    href: str | None = None
    external_urls: dict[str, str] = Field(default_factory=dict)
