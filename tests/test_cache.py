# 📄 File: tests/test_cache.py
# 🧭 Purpose (Layman Explanation):
# Makes sure repeat questions are answered from the cache, that changes throw away stale
# answers, and that a broken cache never breaks the catalog.
# 🧪 Purpose (Technical Summary):
# CachedPlantRepository read-through and invalidation against the in-memory backend,
# failure masking with a backend that always raises CacheError, cache key
# canonicalization, and RedisCacheBackend behaviour over a mocked redis.asyncio client.
# 🔗 Dependencies:
# pytest, pytest-asyncio, unittest.mock, redis
# 🔄 Connected Modules / Calls From:
# pytest

import asyncio
import logging
from unittest.mock import AsyncMock, MagicMock

import pytest
from redis.exceptions import ConnectionError as RedisConnectionError

from app.modules.plant_catalog.domain.models import LocalizedName, SearchFilter
from app.modules.plant_catalog.infrastructure.cache import CachedPlantRepository, CacheKeys, RedisCacheBackend
from app.shared.config.redis import CacheConfig
from app.shared.core.deadline import deadline_scope
from app.shared.core.exceptions import CacheError, PlantNotFoundError
from catalog_fixtures import BASIL, MISSING_PLANT, OAK, SUNFLOWER, TOMATO


class TestReadThrough:
    @pytest.mark.asyncio
    async def test_second_read_served_from_cache(self, cached_store, memory_cache, statements, settings):
        first = await cached_store.find_by_id(TOMATO, "en")
        statements.reset()
        second = await cached_store.find_by_id(TOMATO, "en")

        assert statements.count == 0
        assert second == first
        key = CacheKeys("test").plant(TOMATO, "en")
        assert memory_cache.ttls[key] == settings.CACHE_PLANT_TTL

    @pytest.mark.asyncio
    async def test_locales_are_cached_separately(self, cached_store):
        english = await cached_store.find_by_id(TOMATO, "en")
        mexican = await cached_store.find_by_id(TOMATO, "es", "MX")
        assert english.common_names == ["Tomato", "Garden tomato"]
        assert mexican.common_names == ["Jitomate", "Tomate"]

    @pytest.mark.asyncio
    async def test_empty_name_list_is_cached(self, cached_store, memory_cache, statements):
        assert await cached_store.resolve_names(SUNFLOWER, "en") == []
        assert CacheKeys("test").names(SUNFLOWER, "en") in memory_cache.store

        statements.reset()
        assert await cached_store.resolve_names(SUNFLOWER, "en") == []
        assert statements.count == 0

    @pytest.mark.asyncio
    async def test_not_found_is_never_cached(self, cached_store, memory_cache):
        assert await cached_store.find_by_id(MISSING_PLANT, "en") is None
        assert await cached_store.get_growing_conditions(SUNFLOWER) is None
        assert memory_cache.store == {}

    @pytest.mark.asyncio
    async def test_search_and_count_are_cached(self, cached_store, memory_cache, statements, settings):
        search_filter = SearchFilter(plant_type="annual")
        result = await cached_store.search(None, search_filter, "en")
        total = await cached_store.count(None, search_filter)

        statements.reset()
        assert await cached_store.search(None, search_filter, "en") == result
        assert await cached_store.count(None, search_filter) == total == 3
        assert statements.count == 0

        search_key = CacheKeys("test").search(None, search_filter, "en")
        assert memory_cache.ttls[search_key] == settings.CACHE_SEARCH_TTL

    @pytest.mark.asyncio
    async def test_corrupt_entry_is_a_miss(self, cached_store, memory_cache, caplog):
        key = CacheKeys("test").plant(BASIL, "en")
        memory_cache.store[key] = "{not json"

        with caplog.at_level(logging.WARNING):
            plant = await cached_store.find_by_id(BASIL, "en")

        assert plant.common_names == ["Basil", "Sweet basil"]
        assert "Discarding undecodable cache entry" in caplog.text
        assert memory_cache.store[key] != "{not json"


class TestInvalidation:
    @pytest.mark.asyncio
    async def test_new_name_is_visible_immediately(self, catalog):
        assert await catalog.resolve_names(SUNFLOWER, "en") == []
        assert (await catalog.search("sunflower", language_id="en")).items == []

        await catalog.add_localized_name(SUNFLOWER, "en", "Sunflower", is_primary=True)

        assert await catalog.resolve_names(SUNFLOWER, "en") == ["Sunflower"]
        result = await catalog.search("sunflower", language_id="en")
        assert [p.plant_id for p in result.items] == [SUNFLOWER]

    @pytest.mark.asyncio
    async def test_update_refreshes_plant_and_search(self, catalog):
        before = await catalog.find_by_id(TOMATO, "en")
        assert before.full_botanical_name == "Solanum lycopersicum"
        assert (await catalog.search("roma", language_id="en")).total == 0

        await catalog.update_plant(TOMATO, cultivar_name="Roma")

        after = await catalog.find_by_id(TOMATO, "en")
        assert after.full_botanical_name == "Solanum lycopersicum 'Roma'"
        assert after.common_names == ["Tomato", "Garden tomato"]
        assert (await catalog.search("roma", language_id="en")).total == 1

    @pytest.mark.asyncio
    async def test_delete_drops_every_cached_view(self, catalog, memory_cache):
        await catalog.find_by_id(SUNFLOWER, "en", include_details=True)
        await catalog.search(language_id="en")
        assert memory_cache.keys_with_prefix(f"test:plant:{SUNFLOWER}")

        await catalog.delete_plant(SUNFLOWER)

        assert memory_cache.keys_with_prefix(f"test:plant:{SUNFLOWER}") == []
        assert memory_cache.keys_with_prefix("test:search:") == []
        assert memory_cache.keys_with_prefix(f"test:pc:{SUNFLOWER}") == []
        with pytest.raises(PlantNotFoundError):
            await catalog.find_by_id(SUNFLOWER, "en")
        assert (await catalog.search(language_id="en")).total == 4

    @pytest.mark.asyncio
    async def test_companion_write_invalidates_both_plants(self, catalog, memory_cache):
        assert await catalog.get_companions(TOMATO) == []
        assert await catalog.get_companions(BASIL) == []

        await catalog.create_companion_relationship(TOMATO, BASIL, "beneficial", benefits=["pest_control"])

        assert f"test:companion:{TOMATO}:*" in memory_cache.deleted_patterns
        assert f"test:companion:{BASIL}:*" in memory_cache.deleted_patterns
        assert len(await catalog.get_companions(TOMATO)) == 1
        assert len(await catalog.get_companions(BASIL)) == 1

    @pytest.mark.asyncio
    async def test_companion_delete_invalidates_namespace(self, catalog):
        relationship = await catalog.create_companion_relationship(TOMATO, BASIL, "beneficial")
        assert len(await catalog.get_companions(BASIL)) == 1

        await catalog.delete_companion_relationship(relationship.relationship_id)

        assert await catalog.get_companions(BASIL) == []
        assert await catalog.get_companions(TOMATO) == []

    @pytest.mark.asyncio
    async def test_companion_writes_drop_search_results(self, catalog, memory_cache):
        await catalog.search("basil", language_id="en")
        await catalog.count("basil")
        assert memory_cache.keys_with_prefix("test:search:")
        assert memory_cache.keys_with_prefix("test:count:")

        relationship = await catalog.create_companion_relationship(TOMATO, BASIL, "beneficial")
        assert memory_cache.keys_with_prefix("test:search:") == []
        assert memory_cache.keys_with_prefix("test:count:") == []

        await catalog.search("basil", language_id="en")
        await catalog.delete_companion_relationship(relationship.relationship_id)
        assert memory_cache.keys_with_prefix("test:search:") == []


class TestCacheFailureMasking:
    @pytest.fixture
    def masked_store(self, store, failing_cache, settings):
        return CachedPlantRepository(store, failing_cache, CacheConfig(settings))

    @pytest.mark.asyncio
    async def test_reads_fall_through_to_store(self, masked_store, failing_cache, caplog):
        with caplog.at_level(logging.WARNING):
            plant = await masked_store.find_by_id(OAK, "fr")

        assert plant.common_names == ["English oak", "Pedunculate oak"]
        assert failing_cache.attempts == 2
        assert "Cache read failed" in caplog.text
        assert "Cache write failed" in caplog.text

    @pytest.mark.asyncio
    async def test_writes_succeed_when_invalidation_fails(self, masked_store, caplog):
        with caplog.at_level(logging.WARNING):
            name = await masked_store.add_localized_name(_localized(SUNFLOWER, "es", "Girasol"))

        assert name.common_name == "Girasol"
        assert await masked_store.resolve_names(SUNFLOWER, "es") == ["Girasol"]
        assert "Cache invalidation failed" in caplog.text

    @pytest.mark.asyncio
    async def test_not_found_still_reported(self, masked_store):
        assert await masked_store.find_by_id(MISSING_PLANT, "en") is None


def _localized(plant_id, language_id, common_name):
    return LocalizedName(plant_id=plant_id, language_id=language_id, common_name=common_name)


class TestCacheKeys:
    def setup_method(self):
        self.keys = CacheKeys("test")

    def test_namespaced_patterns(self):
        assert self.keys.plant(TOMATO, "es", "MX") == f"test:plant:{TOMATO}:es:MX"
        assert self.keys.plant(TOMATO, "es") == f"test:plant:{TOMATO}:es:global"
        assert self.keys.physical_characteristics(OAK) == f"test:pc:{OAK}"
        assert self.keys.pattern("search") == "test:search:*"

    def test_set_order_does_not_change_key(self):
        a = SearchFilter(sun_requirements=["partial_shade", "full_sun"])
        b = SearchFilter(sun_requirements=["full_sun", "partial_shade", "full_sun"])
        assert self.keys.search(None, a, "en") == self.keys.search(None, b, "en")

    def test_absent_and_default_fields_share_a_key(self):
        assert self.keys.search("oak", SearchFilter(), "en") == self.keys.search("oak", SearchFilter(evergreen=None), "en")

    def test_page_fields_change_search_key_not_count_key(self):
        small = SearchFilter(family_name="Rosaceae", limit=5)
        large = SearchFilter(family_name="Rosaceae", limit=50)
        assert self.keys.search(None, small, "en") != self.keys.search(None, large, "en")
        assert self.keys.count(None, small) == self.keys.count(None, large)

    def test_locale_changes_key(self):
        f = SearchFilter()
        assert self.keys.search(None, f, "en") != self.keys.search(None, f, "es")
        assert self.keys.search(None, f, "es") != self.keys.search(None, f, "es", "MX")

    def test_unknown_pattern(self):
        with pytest.raises(ValueError):
            self.keys.get_cache_key("nope")


async def _scan(*keys):
    for key in keys:
        yield key


class TestRedisCacheBackend:
    def _client(self):
        client = MagicMock()
        client.get = AsyncMock(return_value=b'{"a":1}')
        client.set = AsyncMock(return_value=True)
        client.delete = AsyncMock(return_value=2)
        return client

    @pytest.mark.asyncio
    async def test_get_decodes_bytes(self):
        backend = RedisCacheBackend(self._client())
        assert await backend.get("k") == '{"a":1}'

    @pytest.mark.asyncio
    async def test_set_passes_ttl(self):
        client = self._client()
        await RedisCacheBackend(client).set("k", "v", 60)
        client.set.assert_awaited_once_with("k", "v", ex=60)

    @pytest.mark.asyncio
    async def test_redis_errors_become_cache_errors(self):
        client = self._client()
        client.get = AsyncMock(side_effect=RedisConnectionError("refused"))
        with pytest.raises(CacheError) as exc_info:
            await RedisCacheBackend(client).get("k")
        assert exc_info.value.details["operation"] == "get"

    @pytest.mark.asyncio
    async def test_delete_pattern_scans_and_deletes(self):
        client = self._client()
        client.scan_iter = MagicMock(return_value=_scan("test:search:1", "test:search:2"))

        removed = await RedisCacheBackend(client).delete_pattern("test:search:*")

        assert removed == 2
        client.scan_iter.assert_called_once_with(match="test:search:*", count=500)
        client.delete.assert_awaited_once_with("test:search:1", "test:search:2")

    @pytest.mark.asyncio
    async def test_delete_without_keys_skips_redis(self):
        client = self._client()
        assert await RedisCacheBackend(client).delete() == 0
        client.delete.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_deadline_bounds_redis_calls(self):
        async def slow_get(key):
            await asyncio.sleep(1)
            return None

        client = self._client()
        client.get = slow_get
        with deadline_scope(0.01):
            with pytest.raises(CacheError):
                await RedisCacheBackend(client).get("k")
