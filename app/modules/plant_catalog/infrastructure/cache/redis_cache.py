# 📄 File: app/modules/plant_catalog/infrastructure/cache/redis_cache.py
# 🧭 Purpose (Layman Explanation):
# The catalog's short-term memory: stores recent answers in Redis for a while so the
# database is asked less often.
#
# 🧪 Purpose (Technical Summary):
# CacheBackend contract (get / set with TTL / delete / delete_pattern) and its
# redis.asyncio implementation. Every call is bounded by the active deadline; Redis,
# socket and timeout failures are raised as CacheError for the caching layer to mask.
#
# 🔗 Dependencies:
# - redis.asyncio
# - app.shared.core.deadline, app.shared.core.exceptions
#
# 🔄 Connected Modules / Calls From:
# - cached_plant_repository.py
# - application/engine.py (wiring)

import asyncio
import logging
from abc import ABC, abstractmethod
from typing import Awaitable, List, Optional, TypeVar

import redis.asyncio as redis
from redis.exceptions import RedisError

from app.shared.core.deadline import within_deadline
from app.shared.core.exceptions import CacheError

logger = logging.getLogger(__name__)

T = TypeVar("T")

# Keys deleted per DEL during pattern invalidation
DELETE_BATCH_SIZE = 500


class CacheBackend(ABC):
    """Key/value cache with per-entry expiry."""

    @abstractmethod
    async def get(self, key: str) -> Optional[str]:
        """Return the stored payload, or None on a miss."""
        pass

    @abstractmethod
    async def set(self, key: str, value: str, ttl: int) -> None:
        pass

    @abstractmethod
    async def delete(self, *keys: str) -> int:
        pass

    @abstractmethod
    async def delete_pattern(self, pattern: str) -> int:
        """Delete every key matching a glob pattern; returns the number removed."""
        pass


class RedisCacheBackend(CacheBackend):
    """
    redis.asyncio backed cache.

    Raises:
        CacheError: On any Redis, connection or deadline failure
    """

    def __init__(self, client: redis.Redis):
        self.client = client

    async def _call(self, operation: str, key: str, awaitable: Awaitable[T]) -> T:
        try:
            return await within_deadline(awaitable)
        except (RedisError, OSError, asyncio.TimeoutError, TimeoutError) as e:
            raise CacheError(
                message=f"Cache {operation} failed: {e}",
                operation=operation,
                key=key,
            ) from e

    async def get(self, key: str) -> Optional[str]:
        value = await self._call("get", key, self.client.get(key))
        if isinstance(value, bytes):
            return value.decode("utf-8")
        return value

    async def set(self, key: str, value: str, ttl: int) -> None:
        await self._call("set", key, self.client.set(key, value, ex=ttl))

    async def delete(self, *keys: str) -> int:
        if not keys:
            return 0
        return int(await self._call("delete", keys[0], self.client.delete(*keys)))

    async def delete_pattern(self, pattern: str) -> int:
        return await self._call("delete_pattern", pattern, self._scan_and_delete(pattern))

    async def _scan_and_delete(self, pattern: str) -> int:
        # SCAN instead of KEYS so large namespaces never block the server
        removed = 0
        batch: List[str] = []
        async for key in self.client.scan_iter(match=pattern, count=DELETE_BATCH_SIZE):
            batch.append(key)
            if len(batch) >= DELETE_BATCH_SIZE:
                removed += await self.client.delete(*batch)
                batch = []
        if batch:
            removed += await self.client.delete(*batch)
        logger.debug(f"Invalidated {removed} keys matching {pattern}")
        return removed
