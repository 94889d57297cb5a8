"""Ports for collaborators that spotkit consumes but never implements.

Hey future me - this is DEPENDENCY INVERSION again. Token persistence (keyring, database, a
JSON file) and the login UI (browser, mobile webview, local callback server) belong to the
application embedding us. We only talk to these narrow interfaces.
"""

from abc import ABC, abstractmethod

from spotkit.domain.value_objects.token import Token


class ICredentialStore(ABC):
    """Persists a token across process restarts."""

    @abstractmethod
    def load(self) -> Token | None:
        """Return the persisted token, or None if nothing was saved."""
        pass

    @abstractmethod
    def save(self, token: Token) -> None:
        """Persist a token, replacing any previous one."""
        pass

    @abstractmethod
    def clear(self) -> None:
        """Forget the persisted token (logout / revocation)."""
        pass


class IRedirectHandler(ABC):
    """Drives the user through the provider login page.

    Given the provider authorize URL, the handler shows it to the user (browser, webview, ...)
    and returns the full URL the provider redirected back to. The authenticator extracts the
    code or token fragment from it.
    """

    @abstractmethod
    async def authorize(self, authorization_url: str) -> str:
        """Return the redirect URL (including query/fragment) after the user logged in."""
        pass


__all__ = ["ICredentialStore", "IRedirectHandler"]
