# config/cache.py
from typing import Optional
from redis.asyncio import Redis, from_url
from config.settings import settings
import logging

logger = logging.getLogger(__name__)


class StorageContext:
    """
    Owns the two Redis clients the workspace writes to:

    - durable: survives restarts, holds NamespacedEntries and pending uploads.
    - session: short-lived twin; every write carries SESSION_TTL_SECONDS.

    Construct one per workspace and pass it down; tests hand in fakeredis clients.
    """

    def __init__(
        self,
        durable: Optional[Redis] = None,
        session: Optional[Redis] = None,
        *,
        durable_url: str = settings.REDIS_URL,
        session_url: str = settings.SESSION_REDIS_URL,
        session_ttl_seconds: int = settings.SESSION_TTL_SECONDS,
    ) -> None:
        self._durable = durable
        self._session = session
        self._owns_clients = durable is None and session is None
        self._durable_url = durable_url
        self._session_url = session_url
        self.session_ttl = int(session_ttl_seconds)

    @staticmethod
    def _connect(url: str) -> Redis:
        return from_url(
            url,
            encoding="utf-8",
            decode_responses=True,  # stores hold JSON text
            socket_keepalive=True,
            health_check_interval=30,
        )

    async def open(self) -> "StorageContext":
        if self._durable is None:
            self._durable = self._connect(self._durable_url)
        if self._session is None:
            self._session = self._connect(self._session_url)
        # Fail fast on startup if Redis is unreachable.
        await self._durable.ping()
        await self._session.ping()
        logger.info("storage.open owns_clients=%s", self._owns_clients)
        return self

    async def close(self) -> None:
        if not self._owns_clients:
            return
        for client in (self._durable, self._session):
            if client is not None:
                await client.aclose()
        self._durable = None
        self._session = None
        logger.info("storage.closed")

    @property
    def durable(self) -> Redis:
        if self._durable is None:
            raise RuntimeError("StorageContext is not open")
        return self._durable

    @property
    def session(self) -> Redis:
        if self._session is None:
            raise RuntimeError("StorageContext is not open")
        return self._session

    async def __aenter__(self) -> "StorageContext":
        return await self.open()

    async def __aexit__(self, *exc) -> None:
        await self.close()
