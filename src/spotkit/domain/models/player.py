"""Playback state."""

from typing import Annotated

from pydantic import BaseModel, Field

from spotkit.domain.models.catalog import Track
from spotkit.domain.models.shows import SimpleEpisode

PlayableItem = Annotated[Track | SimpleEpisode, Field(discriminator="type")]


class Device(BaseModel):
    """A Spotify Connect device. id can be null for restricted devices."""

    id: str | None = None
    name: str = ""
    type: str = ""  # "Computer", "Smartphone", "Speaker", ...
    is_active: bool = False
    is_private_session: bool = False
    is_restricted: bool = False
    volume_percent: int | None = None


class DeviceList(BaseModel):
    """Envelope of GET /me/player/devices."""

    devices: list[Device] = Field(default_factory=list)


class PlaybackContext(BaseModel):
    """Album/playlist/artist the current item is played from."""

    type: str | None = None
    href: str | None = None
    uri: str | None = None
    external_urls: dict[str, str] = Field(default_factory=dict)


class CurrentlyPlayingContext(BaseModel):
    """GET /me/player: device, repeat/shuffle state and the current item."""

    device: Device | None = None
    repeat_state: str = "off"  # "off", "track", "context"
    shuffle_state: bool = False
    context: PlaybackContext | None = None
    timestamp: int | None = None
    progress_ms: int | None = None
    is_playing: bool = False
    item: PlayableItem | None = None
    currently_playing_type: str | None = None  # "track", "episode", "ad", "unknown"
