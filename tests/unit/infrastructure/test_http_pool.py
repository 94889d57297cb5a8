"""Tests for the per-client HTTP pool."""

import asyncio

import httpx

from spotkit.infrastructure.http_pool import HttpClientPool


class TestHttpClientPool:
    """Test lazy creation and cleanup."""

    async def test_lazy_single_client(self) -> None:
        """Test that concurrent first calls get the same client."""
        pool = HttpClientPool(timeout=5.0)
        assert not pool.is_initialized()

        clients = await asyncio.gather(*(pool.get_client() for _ in range(5)))

        assert all(client is clients[0] for client in clients)
        assert pool.is_initialized()
        await pool.close()

    async def test_close_and_reopen(self) -> None:
        pool = HttpClientPool()
        first = await pool.get_client()

        await pool.close()
        await pool.close()
        second = await pool.get_client()

        assert first.is_closed
        assert second is not first
        await pool.close()

    async def test_custom_transport(self) -> None:
        """Test that a custom transport is used for requests."""
        transport = httpx.MockTransport(lambda request: httpx.Response(200, json={"ok": True}))
        pool = HttpClientPool(transport=transport)

        client = await pool.get_client()
        response = await client.get("https://api.spotify.com/v1/me")

        assert response.json() == {"ok": True}
        await pool.close()
