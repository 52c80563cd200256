# 📄 File: app/modules/plant_catalog/infrastructure/cache/__init__.py
# 🧭 Purpose (Layman Explanation):
# The catalog's short-term memory.
# 🧪 Purpose (Technical Summary):
# Caching package: key builder, cache backends, read-through repository decorator and
# the in-process lookup snapshot.
# 🔗 Dependencies:
# redis.asyncio, pydantic
# 🔄 Connected Modules / Calls From:
# application/engine.py, tests

from .cache_keys import CacheKeys
from .cached_plant_repository import CachedPlantRepository
from .lookup_cache import LookupTableCache
from .redis_cache import CacheBackend, RedisCacheBackend

__all__ = ["CacheBackend", "CacheKeys", "CachedPlantRepository", "LookupTableCache", "RedisCacheBackend"]
