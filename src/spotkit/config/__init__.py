"""Configuration module for spotkit."""

from .settings import SpotifyApiOptions, SpotifySettings, get_settings

__all__ = ["SpotifyApiOptions", "SpotifySettings", "get_settings"]
