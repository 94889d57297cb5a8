"""HTTP client pool shared by the executor and the authenticator of one API client.

Hey future me - this is PER API CLIENT, not a process singleton. Two SpotifyClientApi instances
(two users) each get their own pool, so closing one never kills the other's connections.
The API calls and the token endpoint share the same pool, so keep-alive covers both hosts.

Usage:
    pool = HttpClientPool(timeout=100.0)
    client = await pool.get_client()
    ...
    await pool.close()
"""

import asyncio
import logging
from typing import ClassVar

import httpx

logger = logging.getLogger(__name__)


class HttpClientPool:
    """Lazily created httpx.AsyncClient with connection limits.

    - Lazy initialization (created on first use, inside the running loop)
    - asyncio.Lock so concurrent first calls don't create two clients
    - close() releases connections; get_client() afterwards creates a fresh client
    """

    # If you hit rate limits, LOWER max_connections. Spotify throttles per app, not per socket.
    DEFAULT_TIMEOUT: ClassVar[float] = 30.0
    DEFAULT_MAX_KEEPALIVE: ClassVar[int] = 10
    DEFAULT_MAX_CONNECTIONS: ClassVar[int] = 20

    def __init__(
        self,
        timeout: float | None = None,
        max_keepalive: int | None = None,
        max_connections: int | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        """
        Configure the pool. Nothing is opened here.

        Args:
            timeout: Default timeout in seconds (requests may override it)
            max_keepalive: Max idle connections to keep open
            max_connections: Max total concurrent connections
            transport: Custom transport (httpx.MockTransport in tests)
        """
        self.timeout = timeout or self.DEFAULT_TIMEOUT
        self.max_keepalive = max_keepalive or self.DEFAULT_MAX_KEEPALIVE
        self.max_connections = max_connections or self.DEFAULT_MAX_CONNECTIONS
        self.transport = transport
        self._client: httpx.AsyncClient | None = None
        self._lock: asyncio.Lock | None = None

    def _ensure_lock(self) -> asyncio.Lock:
        # asyncio.Lock must be created inside the loop that uses it
        if self._lock is None:
            self._lock = asyncio.Lock()
        return self._lock

    async def get_client(self) -> httpx.AsyncClient:
        """Get the pooled client, creating it on first call."""
        async with self._ensure_lock():
            if self._client is None:
                self._client = httpx.AsyncClient(
                    timeout=httpx.Timeout(self.timeout),
                    limits=httpx.Limits(
                        max_keepalive_connections=self.max_keepalive,
                        max_connections=self.max_connections,
                    ),
                    transport=self.transport,
                )
                logger.debug(
                    "HTTP client pool initialized (timeout=%.1fs, keepalive=%d, max_conn=%d)",
                    self.timeout,
                    self.max_keepalive,
                    self.max_connections,
                )
            return self._client

    async def close(self) -> None:
        """Close the client and release all connections. Safe to call twice."""
        async with self._ensure_lock():
            if self._client is not None:
                await self._client.aclose()
                self._client = None
                logger.debug("HTTP client pool closed")

    def is_initialized(self) -> bool:
        return self._client is not None
