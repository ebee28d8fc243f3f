"""Two-tier cache for computed SEO documents.

Redis is used when connection settings are present (``REDIS_URL`` or
``REDIS_HOST``); otherwise documents live in an in-process dict.  The backend is
picked once, on first use, and kept for the lifetime of the process.

The cache is strictly best-effort: any Redis failure is logged and turns into a
miss (reads) or a no-op (writes).  Callers never see a cache exception.
"""

import logging
import time
from typing import Callable, Dict, NamedTuple, Optional, Protocol

from pydantic import ValidationError
from redis.asyncio import Redis
from redis.exceptions import RedisError

from publicweb_seo.config import Settings
from publicweb_seo.models.seo import SeoDocument

logger = logging.getLogger(__name__)

DEFAULT_TTL_SECONDS = 6 * 60 * 60


class CacheBackend(Protocol):
    async def get(self, key: str) -> Optional[SeoDocument]: ...

    async def set(self, key: str, value: SeoDocument, ttl_seconds: int) -> None: ...

    async def close(self) -> None: ...


class CacheEntry(NamedTuple):
    value: SeoDocument
    expires_at: float


class MemoryCacheBackend:
    """Process-local dict with lazy expiry: stale keys are dropped when read."""

    def __init__(self, clock: Callable[[], float] = time.monotonic) -> None:
        self._entries: Dict[str, CacheEntry] = {}
        self._clock = clock

    async def get(self, key: str) -> Optional[SeoDocument]:
        entry = self._entries.get(key)
        if entry is None:
            return None
        if self._clock() > entry.expires_at:
            del self._entries[key]
            return None
        return entry.value

    async def set(self, key: str, value: SeoDocument, ttl_seconds: int) -> None:
        self._entries[key] = CacheEntry(value, self._clock() + ttl_seconds)

    async def close(self) -> None:
        self._entries.clear()

    def __len__(self) -> int:
        return len(self._entries)


class RedisCacheBackend:
    """Redis-backed store; documents are kept as JSON text with ``EX`` expiry.

    The connection is verified lazily with a ``PING``.  When Redis cannot be
    reached the backend reports itself unavailable and retries no sooner than
    *retry_seconds* later.
    """

    def __init__(
        self,
        client: Redis,
        retry_seconds: float = 60.0,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self._client = client
        self._retry_seconds = retry_seconds
        self._clock = clock
        self._ready = False
        self._retry_at = 0.0

    @classmethod
    def from_settings(cls, settings: Settings) -> "RedisCacheBackend":
        if settings.REDIS_URL:
            client = Redis.from_url(
                settings.REDIS_URL,
                password=settings.REDIS_PASSWORD,
                decode_responses=True,
            )
        else:
            client = Redis(
                host=settings.REDIS_HOST,
                port=settings.REDIS_PORT,
                password=settings.REDIS_PASSWORD,
                decode_responses=True,
            )
        return cls(client, retry_seconds=settings.REDIS_RETRY_SECONDS)

    async def _available(self) -> bool:
        if self._ready:
            return True
        if self._clock() < self._retry_at:
            return False
        try:
            await self._client.ping()
        except (RedisError, OSError) as exc:
            logger.warning("Redis connection failed, SEO cache disabled for now: %s", exc)
            self._retry_at = self._clock() + self._retry_seconds
            return False
        self._ready = True
        logger.info("Redis SEO cache connected")
        return True

    def _mark_unavailable(self) -> None:
        self._ready = False
        self._retry_at = self._clock() + self._retry_seconds

    async def get(self, key: str) -> Optional[SeoDocument]:
        if not await self._available():
            return None
        try:
            cached = await self._client.get(key)
        except (RedisError, OSError) as exc:
            logger.warning("Redis GET failed for %s: %s", key, exc)
            self._mark_unavailable()
            return None
        if not cached:
            return None
        try:
            return SeoDocument.model_validate_json(cached)
        except ValidationError as exc:
            logger.warning("Discarding undecodable cache entry %s: %s", key, exc)
            return None

    async def set(self, key: str, value: SeoDocument, ttl_seconds: int) -> None:
        if not await self._available():
            return
        try:
            await self._client.set(key, value.model_dump_json(), ex=ttl_seconds)
        except (RedisError, OSError) as exc:
            logger.warning("Redis SET failed for %s: %s", key, exc)
            self._mark_unavailable()

    async def close(self) -> None:
        try:
            await self._client.aclose()
        except (RedisError, OSError) as exc:
            logger.warning("Error closing Redis connection: %s", exc)


class SeoCache:
    """Front door used by the orchestrator.

    The backend is selected on the first ``get``/``set`` and memoized; pass an
    explicit *backend* to skip selection entirely.
    """

    def __init__(
        self,
        settings: Optional[Settings] = None,
        backend: Optional[CacheBackend] = None,
        default_ttl: int = DEFAULT_TTL_SECONDS,
    ) -> None:
        self._settings = settings or Settings()
        self._backend = backend
        self.default_ttl = default_ttl

    @classmethod
    def from_settings(cls, settings: Settings) -> "SeoCache":
        return cls(settings=settings, default_ttl=settings.SEO_CACHE_TTL_SECONDS)

    def _select_backend(self) -> CacheBackend:
        if self._backend is None:
            if self._settings.redis_configured:
                logger.info("SEO cache backend: redis")
                self._backend = RedisCacheBackend.from_settings(self._settings)
            else:
                logger.info("SEO cache backend: memory")
                self._backend = MemoryCacheBackend()
        return self._backend

    async def get(self, key: str) -> Optional[SeoDocument]:
        return await self._select_backend().get(key)

    async def set(self, key: str, value: SeoDocument, ttl_seconds: Optional[int] = None) -> None:
        ttl = self.default_ttl if ttl_seconds is None else ttl_seconds
        await self._select_backend().set(key, value, ttl)

    async def close(self) -> None:
        if self._backend is not None:
            await self._backend.close()
