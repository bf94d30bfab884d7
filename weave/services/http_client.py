"""
Shared HTTP Client Manager with Connection Pooling.

One pooled httpx.AsyncClient serves every outbound HTTP integration (Linear
GraphQL today). Creating a client per request wastes connection setup, so the
pool is opened in the app lifespan and closed on shutdown.

Usage:
    from weave.services.http_client import http_client_manager

    client = await http_client_manager.get_client()
    response = await client.post(url, json=payload)

Lifecycle:
    @asynccontextmanager
    async def lifespan(app: FastAPI):
        await http_client_manager.startup()
        yield
        await http_client_manager.shutdown()
"""

import logging
from typing import Optional

import httpx

logger = logging.getLogger("Weave.HTTP.Client")


class HTTPClientManager:
    """
    Owns the shared httpx.AsyncClient.

    Configuration:
    - max_connections: Maximum total connections (default: 100)
    - max_keepalive_connections: Max idle connections to keep (default: 20)
    - default_timeout: Default request timeout in seconds (default: 30.0)
    """

    def __init__(
        self,
        max_connections: int = 100,
        max_keepalive_connections: int = 20,
        default_timeout: float = 30.0,
    ):
        self._max_connections = max_connections
        self._max_keepalive_connections = max_keepalive_connections
        self._default_timeout = default_timeout
        self._client: Optional[httpx.AsyncClient] = None

    @property
    def limits(self) -> httpx.Limits:
        return httpx.Limits(
            max_connections=self._max_connections,
            max_keepalive_connections=self._max_keepalive_connections,
        )

    @property
    def is_initialized(self) -> bool:
        return self._client is not None

    async def startup(self) -> None:
        """Open the pooled client. Safe to call twice."""
        if self._client is not None:
            logger.warning("HTTP client manager already initialized")
            return

        self._client = httpx.AsyncClient(
            limits=self.limits,
            timeout=httpx.Timeout(self._default_timeout),
            follow_redirects=True,
        )
        logger.info(
            f"HTTP client manager initialized "
            f"(max_connections={self._max_connections}, "
            f"max_keepalive={self._max_keepalive_connections})"
        )

    async def shutdown(self) -> None:
        if self._client is not None:
            await self._client.aclose()
            self._client = None
            logger.info("HTTP client manager shut down")

    async def get_client(self) -> httpx.AsyncClient:
        """
        Get the shared HTTP client, opening it lazily if startup was skipped
        (scripts, tests).
        """
        if self._client is None:
            logger.warning("HTTP client accessed before startup - initializing now")
            await self.startup()
        return self._client


# Global singleton instance
http_client_manager = HTTPClientManager()
