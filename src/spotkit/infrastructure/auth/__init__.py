"""Token acquisition and storage."""

from spotkit.infrastructure.auth.authenticator import Authenticator
from spotkit.infrastructure.auth.token_store import TokenStore

__all__ = ["Authenticator", "TokenStore"]
