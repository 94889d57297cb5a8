"""Podcast shows and episodes."""

from typing import Literal

from pydantic import BaseModel, Field

from spotkit.domain.models.common import Image, SpotifyObject
from spotkit.domain.models.paging import PagingObject


class ResumePoint(BaseModel):
    """Where the user stopped listening. Needs the user-read-playback-position scope."""

    fully_played: bool = False
    resume_position_ms: int = 0


class SimpleEpisode(SpotifyObject):
    """Episode as listed on a show."""

    type: Literal["episode"] = "episode"
    description: str = ""
    duration_ms: int = 0
    explicit: bool = False
    release_date: str | None = None
    release_date_precision: str | None = None
    language: str | None = None
    languages: list[str] = Field(default_factory=list)
    images: list[Image] = Field(default_factory=list)
    audio_preview_url: str | None = None
    is_externally_hosted: bool = False
    is_playable: bool | None = None
    resume_point: ResumePoint | None = None


class SimpleShow(SpotifyObject):
    """Show without its episode list."""

    type: Literal["show"] = "show"
    publisher: str = ""
    description: str = ""
    explicit: bool = False
    media_type: str | None = None
    languages: list[str] = Field(default_factory=list)
    images: list[Image] = Field(default_factory=list)
    available_markets: list[str] = Field(default_factory=list)
    total_episodes: int | None = None
    is_externally_hosted: bool | None = None


class Show(SimpleShow):
    """Full show including the first page of episodes."""

    episodes: PagingObject[SimpleEpisode] = Field(
        default_factory=PagingObject[SimpleEpisode]
    )


class ShowList(BaseModel):
    """Envelope of GET /shows. Unknown ids come back as null in their slot."""

    shows: list[SimpleShow | None]
