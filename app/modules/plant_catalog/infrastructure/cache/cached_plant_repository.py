# 📄 File: app/modules/plant_catalog/infrastructure/cache/cached_plant_repository.py
# 🧭 Purpose (Layman Explanation):
# Sits in front of the plant database: answers repeat questions from the cache, and when
# a plant or companion pairing changes, forgets exactly the answers that might now be
# wrong. If the cache is down, everything still works, just slower.
#
# 🧪 Purpose (Technical Summary):
# Read-through caching decorator over PlantRepository. Reads consult the cache first and
# populate it on a miss; writes go to the store and then invalidate the affected keys
# and patterns. Cache failures (CacheError, undecodable payloads) are logged at WARNING
# and never change the store result.
#
# 🔗 Dependencies:
# - pydantic TypeAdapter (JSON payloads)
# - cache_keys.py, redis_cache.py (CacheBackend), app.shared.config.redis (TTL table)
#
# 🔄 Connected Modules / Calls From:
# - application/engine.py (wiring), tests

import time
from typing import Any, Iterable, List, Optional, Sequence

from pydantic import TypeAdapter
from pydantic import ValidationError as PayloadValidationError

from app.shared.config.redis import CacheConfig
from app.shared.core.exceptions import CacheError
from app.shared.utils.logging import get_logger

from ...domain.models import (
    CompanionFilter,
    CompanionRelationship,
    GrowingConditions,
    GrowingConditionsFilter,
    LocalizedName,
    PhysicalCharacteristics,
    Plant,
    SearchFilter,
    SearchResult,
)
from ...domain.repositories.plant_repository import PlantRepository
from .cache_keys import CacheKeys
from .redis_cache import CacheBackend

structured_logger = get_logger(__name__)

PLANT = TypeAdapter(Plant)
PLANTS = TypeAdapter(List[Plant])
NAMES = TypeAdapter(List[str])
SEARCH_RESULT = TypeAdapter(SearchResult)
COUNT = TypeAdapter(int)
GROWING_CONDITIONS = TypeAdapter(GrowingConditions)
PHYSICAL = TypeAdapter(PhysicalCharacteristics)
COMPANIONS = TypeAdapter(List[CompanionRelationship])

_MISS = object()


class CachedPlantRepository(PlantRepository):
    """
    Caching decorator for a PlantRepository.

    Not-found results (None) are never cached; empty name lists are.
    """

    def __init__(
        self,
        repository: PlantRepository,
        cache: CacheBackend,
        cache_config: Optional[CacheConfig] = None,
        keys: Optional[CacheKeys] = None,
    ):
        self.repository = repository
        self.cache = cache
        self.cache_config = cache_config or CacheConfig()
        self.keys = keys or CacheKeys(self.cache_config.namespace)

    # =========================================================================
    # MASKED CACHE ACCESS
    # =========================================================================

    async def _read(self, key: str, adapter: TypeAdapter, cache_type: str) -> Any:
        started = time.perf_counter()
        try:
            raw = await self.cache.get(key)
        except CacheError as e:
            structured_logger.warning(
                f"Cache read failed for {key}, falling through to store", cache_key=key, error=e.message
            )
            return _MISS

        hit = raw is not None
        structured_logger.performance.log_cache_operation(
            "get", cache_type, key, hit=hit, duration_ms=(time.perf_counter() - started) * 1000
        )
        if not hit:
            return _MISS

        try:
            return adapter.validate_json(raw)
        except PayloadValidationError as e:
            structured_logger.warning(
                f"Discarding undecodable cache entry {key}", cache_key=key, errors=e.error_count()
            )
            return _MISS

    async def _write(self, key: str, value: Any, adapter: TypeAdapter, cache_type: str) -> None:
        if value is None:
            return
        try:
            payload = adapter.dump_json(value).decode("utf-8")
            await self.cache.set(key, payload, self.cache_config.get_ttl(cache_type))
        except CacheError as e:
            structured_logger.warning(f"Cache write failed for {key}", cache_key=key, error=e.message)

    async def _invalidate(self, keys: Iterable[str] = (), patterns: Iterable[str] = ()) -> None:
        keys = list(keys)
        if keys:
            try:
                await self.cache.delete(*keys)
            except CacheError as e:
                structured_logger.warning(f"Cache invalidation failed for {keys}", error=e.message)
        for pattern in patterns:
            try:
                await self.cache.delete_pattern(pattern)
            except CacheError as e:
                structured_logger.warning(
                    f"Cache invalidation failed for {pattern}", cache_pattern=pattern, error=e.message
                )

    def _listing_patterns(self, *prefixes: str) -> List[str]:
        return [self.keys.pattern(prefix) for prefix in prefixes]

    # =========================================================================
    # READS
    # =========================================================================

    async def find_by_id(
        self,
        plant_id: str,
        language_id: str,
        country_id: Optional[str] = None,
    ) -> Optional[Plant]:
        key = self.keys.plant(plant_id, language_id, country_id)
        cached = await self._read(key, PLANT, "plant")
        if cached is not _MISS:
            return cached

        plant = await self.repository.find_by_id(plant_id, language_id, country_id)
        await self._write(key, plant, PLANT, "plant")
        return plant

    async def find_by_botanical_name(
        self,
        botanical_name: str,
        language_id: str,
        country_id: Optional[str] = None,
    ) -> Optional[Plant]:
        # Passed through uncached
        return await self.repository.find_by_botanical_name(botanical_name, language_id, country_id)

    async def find_by_ids(
        self,
        plant_ids: Sequence[str],
        language_id: str,
        country_id: Optional[str] = None,
    ) -> List[Plant]:
        key = self.keys.batch(plant_ids, language_id, country_id)
        cached = await self._read(key, PLANTS, "batch")
        if cached is not _MISS:
            return cached

        plants = await self.repository.find_by_ids(plant_ids, language_id, country_id)
        await self._write(key, plants, PLANTS, "batch")
        return plants

    async def resolve_names(
        self,
        plant_id: str,
        language_id: str,
        country_id: Optional[str] = None,
    ) -> List[str]:
        key = self.keys.names(plant_id, language_id, country_id)
        cached = await self._read(key, NAMES, "names")
        if cached is not _MISS:
            return cached

        names = await self.repository.resolve_names(plant_id, language_id, country_id)
        await self._write(key, names, NAMES, "names")
        return names

    async def search(
        self,
        query_text: Optional[str],
        search_filter: SearchFilter,
        language_id: str,
        country_id: Optional[str] = None,
    ) -> SearchResult:
        key = self.keys.search(query_text, search_filter, language_id, country_id)
        cached = await self._read(key, SEARCH_RESULT, "search")
        if cached is not _MISS:
            return cached

        result = await self.repository.search(query_text, search_filter, language_id, country_id)
        await self._write(key, result, SEARCH_RESULT, "search")
        return result

    async def count(self, query_text: Optional[str], search_filter: SearchFilter) -> int:
        key = self.keys.count(query_text, search_filter)
        cached = await self._read(key, COUNT, "count")
        if cached is not _MISS:
            return cached

        total = await self.repository.count(query_text, search_filter)
        await self._write(key, total, COUNT, "count")
        return total

    async def find_by_growing_conditions(
        self,
        conditions_filter: GrowingConditionsFilter,
        language_id: str,
        country_id: Optional[str] = None,
    ) -> SearchResult:
        key = self.keys.growing_conditions_search(conditions_filter, language_id, country_id)
        cached = await self._read(key, SEARCH_RESULT, "gcsearch")
        if cached is not _MISS:
            return cached

        result = await self.repository.find_by_growing_conditions(conditions_filter, language_id, country_id)
        await self._write(key, result, SEARCH_RESULT, "gcsearch")
        return result

    async def get_growing_conditions(
        self,
        plant_id: str,
        country_id: Optional[str] = None,
    ) -> Optional[GrowingConditions]:
        key = self.keys.growing_conditions(plant_id, country_id)
        cached = await self._read(key, GROWING_CONDITIONS, "growing_conditions")
        if cached is not _MISS:
            return cached

        conditions = await self.repository.get_growing_conditions(plant_id, country_id)
        await self._write(key, conditions, GROWING_CONDITIONS, "growing_conditions")
        return conditions

    async def get_physical_characteristics(self, plant_id: str) -> Optional[PhysicalCharacteristics]:
        key = self.keys.physical_characteristics(plant_id)
        cached = await self._read(key, PHYSICAL, "physical_characteristics")
        if cached is not _MISS:
            return cached

        characteristics = await self.repository.get_physical_characteristics(plant_id)
        await self._write(key, characteristics, PHYSICAL, "physical_characteristics")
        return characteristics

    async def get_companions(
        self,
        plant_id: str,
        companion_filter: Optional[CompanionFilter] = None,
    ) -> List[CompanionRelationship]:
        key = self.keys.companions(plant_id, companion_filter)
        cached = await self._read(key, COMPANIONS, "companion")
        if cached is not _MISS:
            return cached

        relationships = await self.repository.get_companions(plant_id, companion_filter)
        await self._write(key, relationships, COMPANIONS, "companion")
        return relationships

    # =========================================================================
    # WRITES (store first, then invalidate)
    # =========================================================================

    async def create(self, plant: Plant) -> Plant:
        created = await self.repository.create(plant)
        await self._invalidate(patterns=self._listing_patterns("search", "count", "gcsearch", "plants"))
        return created

    async def bulk_create(self, plants: Sequence[Plant]) -> List[Plant]:
        created = await self.repository.bulk_create(plants)
        await self._invalidate(patterns=self._listing_patterns("search", "count", "gcsearch", "plants"))
        return created

    async def update(self, plant: Plant) -> Plant:
        updated = await self.repository.update(plant)
        await self._invalidate(
            patterns=[
                self.keys.plant_pattern(plant.plant_id),
                self.keys.names_pattern(plant.plant_id),
                *self._listing_patterns("search", "count", "gcsearch", "plants"),
            ]
        )
        return updated

    async def delete(self, plant_id: str) -> bool:
        deleted = await self.repository.delete(plant_id)
        if deleted:
            # Relationships cascade with the plant, so every companion list may change
            await self._invalidate(
                keys=[self.keys.physical_characteristics(plant_id)],
                patterns=[
                    self.keys.plant_pattern(plant_id),
                    self.keys.names_pattern(plant_id),
                    self.keys.growing_conditions_pattern(plant_id),
                    self.keys.companion_pattern(),
                    *self._listing_patterns("search", "count", "gcsearch", "plants"),
                ],
            )
        return deleted

    async def add_localized_name(self, name: LocalizedName) -> LocalizedName:
        added = await self.repository.add_localized_name(name)
        await self._invalidate(
            patterns=[
                self.keys.plant_pattern(name.plant_id),
                self.keys.names_pattern(name.plant_id),
                *self._listing_patterns("search", "count", "gcsearch", "plants"),
            ]
        )
        return added

    async def create_companion(self, relationship: CompanionRelationship) -> CompanionRelationship:
        created = await self.repository.create_companion(relationship)
        await self._invalidate(
            patterns=[
                self.keys.companion_pattern(relationship.plant_a_id),
                self.keys.companion_pattern(relationship.plant_b_id),
                *self._listing_patterns("search", "count"),
            ]
        )
        return created

    async def delete_companion(self, relationship_id: str) -> bool:
        deleted = await self.repository.delete_companion(relationship_id)
        if deleted:
            # The pair is unknown without a read, so drop the whole namespace
            await self._invalidate(
                patterns=[self.keys.companion_pattern(), *self._listing_patterns("search", "count")]
            )
        return deleted
