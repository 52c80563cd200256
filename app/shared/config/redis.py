# 📄 File: app/shared/config/redis.py
#
# 🧭 Purpose (Layman Explanation):
# Configuration for the Redis cache that remembers recent catalog answers, and the
# table saying how long each kind of answer may be remembered.
#
# 🧪 Purpose (Technical Summary):
# RedisConfig owns one redis.asyncio connection pool and client per engine; CacheConfig
# is the per-operation-class TTL table used by the catalog's read-through cache.
#
# 🔗 Dependencies:
# - redis Python package (redis.asyncio)
# - app.shared.config.settings
#
# 🔄 Connected Modules / Calls From:
# - app.modules.plant_catalog.infrastructure.cache.cached_plant_repository
# - app.modules.plant_catalog.application.engine

from typing import Any, Dict, Optional

from redis.asyncio import ConnectionPool, Redis

from .settings import Settings, get_settings


# =============================================================================
# REDIS CONNECTION
# =============================================================================

class RedisConfig:
    """
    Lazily created pool + client for the catalog cache.

    A cache call that fails is a miss, so the client never retries: the
    operation's deadline is better spent on the store.
    """

    def __init__(self, settings: Optional[Settings] = None):
        self.settings = settings or get_settings()
        self._pool: Optional[ConnectionPool] = None
        self._client: Optional[Redis] = None

    @property
    def connection_kwargs(self) -> Dict[str, Any]:
        timeout = self.settings.REDIS_SOCKET_TIMEOUT
        kwargs: Dict[str, Any] = {
            "decode_responses": True,
            "retry_on_timeout": False,
            "socket_timeout": timeout,
            "socket_connect_timeout": timeout,
            "health_check_interval": 30,
        }
        if self.settings.is_production:
            kwargs["socket_keepalive"] = True
        return kwargs

    @property
    def pool_kwargs(self) -> Dict[str, Any]:
        return {"max_connections": self.settings.REDIS_MAX_CONNECTIONS, **self.connection_kwargs}

    def client(self) -> Redis:
        """The shared client; no connection is opened until the first command."""
        if self._client is None:
            self._pool = ConnectionPool.from_url(self.settings.redis_url, **self.pool_kwargs)
            self._client = Redis(connection_pool=self._pool)
        return self._client

    async def close(self) -> None:
        if self._client is not None:
            await self._client.aclose()
            self._client = None
        if self._pool is not None:
            await self._pool.disconnect()
            self._pool = None


# =============================================================================
# CACHE TTLS
# =============================================================================

class CacheConfig:
    """
    Cache TTL table keyed by operation class.

    Reference data lives longest, search results shortest since any write
    may change them.
    """

    def __init__(self, settings: Optional[Settings] = None):
        self.settings = settings or get_settings()
        s = self.settings
        self.enabled = s.CACHE_ENABLED
        self.namespace = s.CACHE_NAMESPACE
        self.TTL_MAPPINGS: Dict[str, int] = {
            "plant": s.CACHE_PLANT_TTL,
            "batch": s.CACHE_PLANT_TTL,
            "names": s.CACHE_PLANT_TTL,
            "search": s.CACHE_SEARCH_TTL,
            "count": s.CACHE_SEARCH_TTL,
            "gcsearch": s.CACHE_SEARCH_TTL,
            "companion": s.CACHE_COMPANION_TTL,
            "growing_conditions": s.CACHE_GROWING_CONDITIONS_TTL,
            "physical_characteristics": s.CACHE_PHYSICAL_CHARACTERISTICS_TTL,
            "lookup": s.LOOKUP_CACHE_TTL,
        }

    def get_ttl(self, operation: str, custom_ttl: Optional[int] = None) -> int:
        """
        TTL in seconds for an operation class (plant, search, companion, ...).

        Raises:
            ValueError: If the operation class is unknown
        """
        if custom_ttl is not None:
            return custom_ttl
        if operation not in self.TTL_MAPPINGS:
            raise ValueError(f"Unknown cache operation class: {operation}")
        return self.TTL_MAPPINGS[operation]
