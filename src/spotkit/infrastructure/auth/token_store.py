"""In-memory token store (one per client instance)."""

import logging
import threading

from spotkit.domain.ports import ICredentialStore
from spotkit.domain.value_objects.token import Token

logger = logging.getLogger(__name__)


class TokenStore:
    """Holds exactly one current token (or none) for a client instance.

    Hey future me - this is the ONLY shared mutable state between concurrent API calls. Any
    in-flight request may trigger a refresh, so get/set/clear go through a lock. Policy is
    "last refresh wins": two requests refreshing at the same time both write, the later write
    stays. Refreshes are idempotent for the provider, so we don't dedupe them.

    The lock is a threading.Lock: no critical section awaits, and get() must stay callable
    from sync code.

    If a credential store is given, set/clear write through to it and the first get() on an
    empty store loads from it. Persistence itself is the application's job.
    """

    def __init__(
        self,
        token: Token | None = None,
        credential_store: ICredentialStore | None = None,
    ) -> None:
        self._lock = threading.Lock()
        self._token = token
        self._credential_store = credential_store
        self._loaded = token is not None

    def get(self) -> Token | None:
        """Return the current token without side effects on it."""
        with self._lock:
            if not self._loaded and self._credential_store is not None:
                self._token = self._credential_store.load()
                self._loaded = True
                if self._token is not None:
                    logger.debug("Loaded token from credential store")
            return self._token

    def set(self, token: Token) -> None:
        """Replace the current token."""
        with self._lock:
            self._token = token
            self._loaded = True
            if self._credential_store is not None:
                self._credential_store.save(token)

    def clear(self) -> None:
        """Forget the current token (logout / revocation)."""
        with self._lock:
            self._token = None
            self._loaded = True
            if self._credential_store is not None:
                self._credential_store.clear()
        logger.info("Token cleared")
