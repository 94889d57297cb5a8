"""Tests for the per-client token store."""

import threading
from datetime import UTC, datetime, timedelta
from unittest.mock import MagicMock

import pytest

from spotkit.domain.ports import ICredentialStore
from spotkit.domain.value_objects import Token
from spotkit.infrastructure.auth.token_store import TokenStore


def make_token(access_token: str = "access") -> Token:
    return Token(access_token=access_token, expires_at=datetime.now(UTC) + timedelta(hours=1))


@pytest.fixture
def credential_store() -> MagicMock:
    """Credential store mock honoring the port interface."""
    store = MagicMock(spec=ICredentialStore)
    store.load.return_value = None
    return store


class TestTokenStore:
    """Test basic get/set/clear."""

    def test_empty_store(self) -> None:
        assert TokenStore().get() is None

    def test_set_replaces_token(self) -> None:
        store = TokenStore(make_token("first"))
        store.set(make_token("second"))
        token = store.get()
        assert token is not None
        assert token.access_token == "second"

    def test_clear(self) -> None:
        store = TokenStore(make_token())
        store.clear()
        assert store.get() is None

    def test_concurrent_writers_leave_one_complete_token(self) -> None:
        """Test that parallel sets never leave a torn state (last write wins)."""
        store = TokenStore()
        tokens = [make_token(f"access-{i}") for i in range(50)]
        threads = [threading.Thread(target=store.set, args=(t,)) for t in tokens]
        for thread in threads:
            thread.start()
        for thread in threads:
            thread.join()

        assert store.get() in tokens


class TestCredentialStoreWriteThrough:
    """Test persistence through the ICredentialStore port."""

    def test_lazy_load_happens_once(self, credential_store: MagicMock) -> None:
        """Test that the persisted token is loaded on first get() only."""
        persisted = make_token("persisted")
        credential_store.load.return_value = persisted
        store = TokenStore(credential_store=credential_store)

        assert store.get() == persisted
        assert store.get() == persisted
        credential_store.load.assert_called_once()

    def test_initial_token_skips_load(self, credential_store: MagicMock) -> None:
        store = TokenStore(make_token(), credential_store=credential_store)
        store.get()
        credential_store.load.assert_not_called()

    def test_set_and_clear_write_through(self, credential_store: MagicMock) -> None:
        store = TokenStore(credential_store=credential_store)
        token = make_token()

        store.set(token)
        store.clear()

        credential_store.save.assert_called_once_with(token)
        credential_store.clear.assert_called_once()
