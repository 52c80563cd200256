# 📄 File: app/modules/plant_catalog/application/engine.py
# 🧭 Purpose (Layman Explanation):
# The front desk of the plant catalog: one object with a method for every question or
# change, which wires the database, the cache and the name lookups together.
#
# 🧪 Purpose (Technical Summary):
# CatalogEngine facade over the query and command handlers plus build_catalog_engine(),
# the composition root: async engine + session manager, store repositories, name batch
# loader, optional Redis-backed CachedPlantRepository and the lookup snapshot cache.
# Each call builds its query/command (pydantic errors become ValidationError) and runs
# inside a log_context so every log line of one operation carries its name, id and locale.
#
# 🔗 Dependencies:
# - sqlalchemy.ext.asyncio (AsyncEngine), redis.asyncio (client)
# - app.shared.infrastructure.database, app.shared.config
# - application handlers, infrastructure repositories and cache
#
# 🔄 Connected Modules / Calls From:
# - Host applications embedding the catalog
# - tests

"""
Catalog Engine

Reads accept language_id (UUID or ISO 639 code), an optional country_id and
an optional timeout in seconds. Writes accept an optional timeout.
"""

import logging
from typing import Any, Dict, List, Optional, Sequence, Union

from redis.asyncio import Redis
from sqlalchemy.ext.asyncio import AsyncEngine

from app.shared.config.redis import CacheConfig, RedisConfig
from app.shared.config.settings import Settings, get_settings
from app.shared.infrastructure.database.connection import DatabaseConnectionManager
from app.shared.infrastructure.database.session import DatabaseSessionManager
from app.shared.utils.logging import log_context
from app.shared.utils.validators import model_validation

from ..domain.models import (
    CompanionFilter,
    CompanionRelationship,
    GrowingConditions,
    GrowingConditionsFilter,
    Language,
    LocalizedName,
    PhysicalCharacteristics,
    Plant,
    SearchFilter,
    SearchResult,
)
from ..domain.repositories.plant_repository import PlantRepository
from ..domain.services import FilterCompiler, NameBatchLoader
from ..infrastructure.cache.cached_plant_repository import CachedPlantRepository
from ..infrastructure.cache.lookup_cache import LookupTableCache
from ..infrastructure.cache.redis_cache import CacheBackend, RedisCacheBackend
from ..infrastructure.database.localized_name_repository_impl import LocalizedNameRepositoryImpl
from ..infrastructure.database.lookup_repository_impl import LookupRepositoryImpl
from ..infrastructure.database.plant_repository_impl import PlantRepositoryImpl
from .commands.plant_commands import (
    AddLocalizedNameCommand,
    BulkCreatePlantsCommand,
    CreateCompanionCommand,
    CreatePlantCommand,
    DeleteCompanionCommand,
    DeletePlantCommand,
    UpdatePlantCommand,
)
from .handlers.command_handlers import (
    AddLocalizedNameCommandHandler,
    BulkCreatePlantsCommandHandler,
    CreateCompanionCommandHandler,
    CreatePlantCommandHandler,
    DeleteCompanionCommandHandler,
    DeletePlantCommandHandler,
    UpdatePlantCommandHandler,
)
from .handlers.query_handlers import (
    CheckCompatibilityQueryHandler,
    CountPlantsQueryHandler,
    GetCompanionsQueryHandler,
    GetGrowingConditionsQueryHandler,
    GetPhysicalCharacteristicsQueryHandler,
    GetPlantByBotanicalNameQueryHandler,
    GetPlantQueryHandler,
    GetPlantsByIdsQueryHandler,
    GrowingConditionsSearchQueryHandler,
    ListLanguagesQueryHandler,
    ResolveNamesQueryHandler,
    SearchPlantsQueryHandler,
)
from .queries.plant_queries import (
    CheckCompatibilityQuery,
    CountPlantsQuery,
    GetCompanionsQuery,
    GetGrowingConditionsQuery,
    GetPhysicalCharacteristicsQuery,
    GetPlantByBotanicalNameQuery,
    GetPlantQuery,
    GetPlantsByIdsQuery,
    GrowingConditionsSearchQuery,
    ListLanguagesQuery,
    ResolveNamesQuery,
    SearchPlantsQuery,
)

logger = logging.getLogger(__name__)

FilterInput = Union[SearchFilter, Dict[str, Any], None]


class CatalogEngine:
    """
    Localized plant catalog: point reads, batched reads, search, growing
    conditions, companions and catalog writes.
    """

    def __init__(
        self,
        repository: PlantRepository,
        lookup_cache: LookupTableCache,
        settings: Optional[Settings] = None,
        compiler: Optional[FilterCompiler] = None,
        connection_manager: Optional[DatabaseConnectionManager] = None,
        redis_config: Optional[RedisConfig] = None,
    ):
        self.settings = settings or get_settings()
        self.repository = repository
        self.lookup_cache = lookup_cache
        self.compiler = compiler or FilterCompiler()
        self._connection_manager = connection_manager
        self._redis_config = redis_config

        args = (repository, self.settings, self.compiler)
        self._get_plant = GetPlantQueryHandler(*args)
        self._get_plants = GetPlantsByIdsQueryHandler(*args)
        self._by_botanical_name = GetPlantByBotanicalNameQueryHandler(*args)
        self._resolve_names = ResolveNamesQueryHandler(*args)
        self._search = SearchPlantsQueryHandler(*args)
        self._count = CountPlantsQueryHandler(*args)
        self._gc_search = GrowingConditionsSearchQueryHandler(*args)
        self._growing_conditions = GetGrowingConditionsQueryHandler(*args)
        self._physical = GetPhysicalCharacteristicsQueryHandler(*args)
        self._companions = GetCompanionsQueryHandler(*args)
        self._compatibility = CheckCompatibilityQueryHandler(*args)
        self._languages = ListLanguagesQueryHandler(lookup_cache, self.settings)

        self._create = CreatePlantCommandHandler(repository, self.settings)
        self._bulk_create = BulkCreatePlantsCommandHandler(repository, self.settings)
        self._update = UpdatePlantCommandHandler(repository, self.settings)
        self._delete = DeletePlantCommandHandler(repository, self.settings)
        self._add_name = AddLocalizedNameCommandHandler(repository, self.settings)
        self._create_companion = CreateCompanionCommandHandler(repository, self.settings)
        self._delete_companion = DeleteCompanionCommandHandler(repository, self.settings)

    async def _run(self, handler: Any, message_type: type, name: str, **fields: Any) -> Any:
        with model_validation(name):
            message = message_type(**fields)
        with log_context(
            message_type.__name__, getattr(message, "language_id", None), getattr(message, "country_id", None)
        ):
            return await handler.handle(message)

    # =========================================================================
    # READS
    # =========================================================================

    async def find_by_id(
        self,
        plant_id: str,
        language_id: str,
        country_id: Optional[str] = None,
        include_details: bool = False,
        timeout: Optional[float] = None,
    ) -> Plant:
        return await self._run(
            self._get_plant, GetPlantQuery, "plant query",
            plant_id=plant_id, language_id=language_id, country_id=country_id,
            include_details=include_details, timeout=timeout,
        )

    async def find_by_botanical_name(
        self,
        botanical_name: str,
        language_id: str,
        country_id: Optional[str] = None,
        timeout: Optional[float] = None,
    ) -> Plant:
        return await self._run(
            self._by_botanical_name, GetPlantByBotanicalNameQuery, "botanical name query",
            botanical_name=botanical_name, language_id=language_id, country_id=country_id, timeout=timeout,
        )

    async def find_by_ids(
        self,
        plant_ids: Sequence[str],
        language_id: str,
        country_id: Optional[str] = None,
        timeout: Optional[float] = None,
    ) -> List[Plant]:
        return await self._run(
            self._get_plants, GetPlantsByIdsQuery, "plants query",
            plant_ids=list(plant_ids), language_id=language_id, country_id=country_id, timeout=timeout,
        )

    async def resolve_names(
        self,
        plant_id: str,
        language_id: str,
        country_id: Optional[str] = None,
        timeout: Optional[float] = None,
    ) -> List[str]:
        return await self._run(
            self._resolve_names, ResolveNamesQuery, "names query",
            plant_id=plant_id, language_id=language_id, country_id=country_id, timeout=timeout,
        )

    async def search(
        self,
        query_text: Optional[str] = None,
        search_filter: FilterInput = None,
        *,
        language_id: str,
        country_id: Optional[str] = None,
        timeout: Optional[float] = None,
    ) -> SearchResult:
        return await self._run(
            self._search, SearchPlantsQuery, "search query",
            query_text=query_text, search_filter=search_filter or SearchFilter(),
            language_id=language_id, country_id=country_id, timeout=timeout,
        )

    async def count(
        self,
        query_text: Optional[str] = None,
        search_filter: FilterInput = None,
        timeout: Optional[float] = None,
    ) -> int:
        return await self._run(
            self._count, CountPlantsQuery, "count query",
            query_text=query_text, search_filter=search_filter or SearchFilter(), timeout=timeout,
        )

    async def find_by_family(
        self,
        family_name: str,
        language_id: str,
        country_id: Optional[str] = None,
        limit: Optional[int] = None,
        cursor: Optional[str] = None,
        timeout: Optional[float] = None,
    ) -> SearchResult:
        """Plants of one family, ordered by genus then species."""
        with model_validation("search filter"):
            search_filter = SearchFilter(
                family_name=family_name,
                limit=limit or self.settings.SEARCH_DEFAULT_LIMIT,
                cursor=cursor,
                sort_by="genus_name",
                sort_order="asc",
            )
        return await self.search(
            None, search_filter, language_id=language_id, country_id=country_id, timeout=timeout
        )

    async def find_by_genus(
        self,
        genus_name: str,
        language_id: str,
        country_id: Optional[str] = None,
        limit: Optional[int] = None,
        cursor: Optional[str] = None,
        timeout: Optional[float] = None,
    ) -> SearchResult:
        """Plants of one genus, ordered by botanical name."""
        with model_validation("search filter"):
            search_filter = SearchFilter(
                genus_name=genus_name,
                limit=limit or self.settings.SEARCH_DEFAULT_LIMIT,
                cursor=cursor,
                sort_by="botanical_name",
                sort_order="asc",
            )
        return await self.search(
            None, search_filter, language_id=language_id, country_id=country_id, timeout=timeout
        )

    async def find_by_species(
        self,
        genus_name: str,
        species_name: str,
        language_id: str,
        country_id: Optional[str] = None,
        limit: Optional[int] = None,
        cursor: Optional[str] = None,
        timeout: Optional[float] = None,
    ) -> SearchResult:
        """Plants of one species (every cultivar), ordered by botanical name."""
        with model_validation("search filter"):
            search_filter = SearchFilter(
                genus_name=genus_name,
                species_name=species_name,
                limit=limit or self.settings.SEARCH_DEFAULT_LIMIT,
                cursor=cursor,
                sort_by="botanical_name",
                sort_order="asc",
            )
        return await self.search(
            None, search_filter, language_id=language_id, country_id=country_id, timeout=timeout
        )

    async def find_by_growing_conditions(
        self,
        conditions_filter: Union[GrowingConditionsFilter, Dict[str, Any], None] = None,
        *,
        language_id: str,
        country_id: Optional[str] = None,
        timeout: Optional[float] = None,
    ) -> SearchResult:
        return await self._run(
            self._gc_search, GrowingConditionsSearchQuery, "growing conditions query",
            conditions_filter=conditions_filter or GrowingConditionsFilter(),
            language_id=language_id, country_id=country_id, timeout=timeout,
        )

    async def get_growing_conditions(
        self,
        plant_id: str,
        country_id: Optional[str] = None,
        timeout: Optional[float] = None,
    ) -> Optional[GrowingConditions]:
        return await self._run(
            self._growing_conditions, GetGrowingConditionsQuery, "growing conditions query",
            plant_id=plant_id, country_id=country_id, timeout=timeout,
        )

    async def get_physical_characteristics(
        self,
        plant_id: str,
        timeout: Optional[float] = None,
    ) -> Optional[PhysicalCharacteristics]:
        return await self._run(
            self._physical, GetPhysicalCharacteristicsQuery, "physical characteristics query",
            plant_id=plant_id, timeout=timeout,
        )

    async def get_companions(
        self,
        plant_id: str,
        companion_filter: Union[CompanionFilter, Dict[str, Any], None] = None,
        timeout: Optional[float] = None,
    ) -> List[CompanionRelationship]:
        return await self._run(
            self._companions, GetCompanionsQuery, "companions query",
            plant_id=plant_id, companion_filter=companion_filter, timeout=timeout,
        )

    async def check_compatibility(
        self,
        plant_a_id: str,
        plant_b_id: str,
        timeout: Optional[float] = None,
    ) -> Optional[CompanionRelationship]:
        return await self._run(
            self._compatibility, CheckCompatibilityQuery, "compatibility query",
            plant_a_id=plant_a_id, plant_b_id=plant_b_id, timeout=timeout,
        )

    async def list_languages(self, timeout: Optional[float] = None) -> List[Language]:
        return await self._run(self._languages, ListLanguagesQuery, "languages query", timeout=timeout)

    async def refresh_lookups(self) -> None:
        """Reload the language, family and genus snapshot now."""
        with log_context("refresh_lookups"):
            await self.lookup_cache.refresh()

    # =========================================================================
    # WRITES
    # =========================================================================

    async def create_plant(self, timeout: Optional[float] = None, **fields: Any) -> Plant:
        return await self._run(self._create, CreatePlantCommand, "plant", timeout=timeout, **fields)

    async def bulk_create_plants(
        self,
        plants: Sequence[Dict[str, Any]],
        timeout: Optional[float] = None,
    ) -> List[Plant]:
        return await self._run(
            self._bulk_create, BulkCreatePlantsCommand, "plants", plants=list(plants), timeout=timeout
        )

    async def update_plant(self, plant_id: str, timeout: Optional[float] = None, **changes: Any) -> Plant:
        return await self._run(
            self._update, UpdatePlantCommand, "plant update", plant_id=plant_id, timeout=timeout, **changes
        )

    async def delete_plant(self, plant_id: str, timeout: Optional[float] = None) -> None:
        await self._run(self._delete, DeletePlantCommand, "plant delete", plant_id=plant_id, timeout=timeout)

    async def add_localized_name(
        self,
        plant_id: str,
        language_id: str,
        common_name: str,
        country_id: Optional[str] = None,
        is_primary: bool = False,
        timeout: Optional[float] = None,
    ) -> LocalizedName:
        return await self._run(
            self._add_name, AddLocalizedNameCommand, "localized name",
            plant_id=plant_id, language_id=language_id, country_id=country_id,
            common_name=common_name, is_primary=is_primary, timeout=timeout,
        )

    async def create_companion_relationship(
        self,
        plant_a_id: str,
        plant_b_id: str,
        relationship_type: str,
        timeout: Optional[float] = None,
        **fields: Any,
    ) -> CompanionRelationship:
        return await self._run(
            self._create_companion, CreateCompanionCommand, "companion relationship",
            plant_a_id=plant_a_id, plant_b_id=plant_b_id, relationship_type=relationship_type,
            timeout=timeout, **fields,
        )

    async def delete_companion_relationship(self, relationship_id: str, timeout: Optional[float] = None) -> None:
        await self._run(
            self._delete_companion, DeleteCompanionCommand, "companion delete",
            relationship_id=relationship_id, timeout=timeout,
        )

    # =========================================================================
    # LIFECYCLE
    # =========================================================================

    async def close(self) -> None:
        """Stop background refreshes and release the pools this engine created."""
        await self.lookup_cache.close()
        if self._redis_config is not None:
            await self._redis_config.close()
        if self._connection_manager is not None:
            await self._connection_manager.close()
        logger.info("Catalog engine closed")


def build_catalog_engine(
    settings: Optional[Settings] = None,
    engine: Optional[AsyncEngine] = None,
    redis_client: Optional[Redis] = None,
    cache_backend: Optional[CacheBackend] = None,
) -> CatalogEngine:
    """
    Wire a CatalogEngine.

    Args:
        settings: Configuration; defaults to get_settings()
        engine: Existing async engine; one is created from settings when omitted
        redis_client: Existing Redis client for the cache backend
        cache_backend: Cache backend overriding Redis entirely

    Returns:
        Ready CatalogEngine; the caller owns engine/client objects it passed in
    """
    settings = settings or get_settings()

    connection_manager = None
    if engine is None:
        connection_manager = DatabaseConnectionManager(settings)
        engine = connection_manager.initialize()
    session_manager = DatabaseSessionManager(engine)

    cache_config = CacheConfig(settings)
    lookup_cache = LookupTableCache(LookupRepositoryImpl(session_manager), cache_config.get_ttl("lookup"))

    name_repository = LocalizedNameRepositoryImpl(session_manager)
    batch_loader = NameBatchLoader(name_repository, settings.DEFAULT_LANGUAGE, lambda: lookup_cache.snapshot)
    compiler = FilterCompiler()
    repository: PlantRepository = PlantRepositoryImpl(session_manager, name_repository, batch_loader, compiler)

    redis_config = None
    if cache_backend is None and cache_config.enabled:
        if redis_client is None:
            redis_config = RedisConfig(settings)
            redis_client = redis_config.client()
        cache_backend = RedisCacheBackend(redis_client)

    if cache_backend is not None:
        repository = CachedPlantRepository(repository, cache_backend, cache_config)
        logger.info(f"Catalog cache enabled (namespace '{cache_config.namespace}')")
    else:
        logger.info("Catalog cache disabled")

    return CatalogEngine(
        repository=repository,
        lookup_cache=lookup_cache,
        settings=settings,
        compiler=compiler,
        connection_manager=connection_manager,
        redis_config=redis_config,
    )
