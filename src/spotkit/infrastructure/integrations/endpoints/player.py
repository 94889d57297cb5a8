"""Playback control endpoints (Spotify Connect).

Hey future me - every write endpoint here needs Premium. Free accounts get a 403 which surfaces
as BadRequestError(status_code=403, reason="Player command failed: Premium required").
"""

import logging

from spotkit.domain.exceptions import ValidationError
from spotkit.domain.models.player import CurrentlyPlayingContext, Device, DeviceList
from spotkit.domain.value_objects.market import normalize_market
from spotkit.domain.value_objects.scopes import SpotifyScope
from spotkit.infrastructure.integrations.endpoints.base import SpotifyEndpoint, decode
from spotkit.infrastructure.integrations.request_spec import EndpointBuilder

logger = logging.getLogger(__name__)


class ClientPlayerApi(SpotifyEndpoint):
    """Read and control the current user's playback."""

    async def get_devices(self) -> list[Device]:
        """List the user's available Connect devices."""
        body = await self.get(
            self.endpoint("/me/player/devices").with_scopes(
                SpotifyScope.USER_READ_PLAYBACK_STATE
            )
        )
        return decode(body, DeviceList).devices  # type: ignore[no-any-return]

    async def get_current_context(
        self, market: str | None = None
    ) -> CurrentlyPlayingContext | None:
        """
        Get the playback state.

        Returns:
            Current context, or None when nothing is playing (204 No Content)
        """
        body = await self.get(
            self.endpoint("/me/player")
            .with_param("market", normalize_market(market or self.api.options.default_market))
            .with_param("additional_types", "track,episode")
            .with_scopes(SpotifyScope.USER_READ_PLAYBACK_STATE)
        )
        if not body.strip():
            return None
        return decode(body, CurrentlyPlayingContext)  # type: ignore[no-any-return]

    async def pause(self, device_id: str | None = None) -> None:
        await self.put(self._command("/me/player/pause", device_id))

    async def resume(self, device_id: str | None = None) -> None:
        """Resume playback where it stopped."""
        await self.put(self._command("/me/player/play", device_id))

    async def skip_forward(self, device_id: str | None = None) -> None:
        await self.post(self._command("/me/player/next", device_id))

    async def skip_behind(self, device_id: str | None = None) -> None:
        await self.post(self._command("/me/player/previous", device_id))

    async def set_volume(self, volume_percent: int, device_id: str | None = None) -> None:
        """
        Set the volume.

        Args:
            volume_percent: 0-100
            device_id: Target device; the active device when omitted

        Raises:
            ValidationError: If volume_percent is out of range (no request is sent)
        """
        if not 0 <= volume_percent <= 100:
            raise ValidationError(f"volume_percent must be between 0 and 100, got {volume_percent}")
        await self.put(
            self._command("/me/player/volume", device_id).with_param("volume_percent", volume_percent)
        )

    def _command(self, path: str, device_id: str | None) -> EndpointBuilder:
        logger.debug("Player command %s (device=%s)", path, device_id or "active")
        return (
            self.endpoint(path)
            .with_param("device_id", device_id)
            .with_scopes(SpotifyScope.USER_MODIFY_PLAYBACK_STATE)
        )
