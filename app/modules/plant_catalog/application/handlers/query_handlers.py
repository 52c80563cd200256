# 📄 File: app/modules/plant_catalog/application/handlers/query_handlers.py
# 🧭 Purpose (Layman Explanation):
# The "information retrievers" of the catalog: they check that a question makes sense,
# start the stopwatch, and then ask the (cached) plant store for the answer.
#
# 🧪 Purpose (Technical Summary):
# CQRS query handlers for catalog reads. Each handler normalizes identifiers, validates
# filters through the FilterCompiler before any cache or store access, and runs the
# repository calls inside one deadline scope so the caller's timeout bounds all of them.
#
# 🔗 Dependencies:
# - application/queries/plant_queries.py (query definitions)
# - domain repositories (PlantRepository, usually the CachedPlantRepository)
# - domain services (FilterCompiler)
# - infrastructure/cache/lookup_cache.py (lookup snapshot)
# - app.shared.core.deadline, app.shared.utils.validators
#
# 🔄 Connected Modules / Calls From:
# - application/engine.py (CatalogEngine facade)
# - tests

"""
Plant Catalog Query Handlers

Query Handlers:
- GetPlantQueryHandler: single plant, optional detail attachment
- GetPlantByBotanicalNameQueryHandler: single plant by exact botanical name
- GetPlantsByIdsQueryHandler: batched multi-plant fetch
- ResolveNamesQueryHandler: localized display names
- SearchPlantsQueryHandler / CountPlantsQueryHandler: free text plus structured search
- GrowingConditionsSearchQueryHandler: plants by growing-condition assertion
- GetGrowingConditionsQueryHandler / GetPhysicalCharacteristicsQueryHandler
- GetCompanionsQueryHandler / CheckCompatibilityQueryHandler
- ListLanguagesQueryHandler: served from the lookup snapshot

Each handler:
- Validates identifiers and filters (ValidationError, no store access)
- Binds the query's deadline for every downstream call
- Leaves caching to the repository it was given
"""

import logging
from typing import List, Optional

from app.shared.config.settings import Settings
from app.shared.core.deadline import deadline_scope
from app.shared.core.exceptions import PlantNotFoundError, ValidationError
from app.shared.utils.validators import (
    require_country_id,
    require_language_id,
    require_plant_id,
    require_search_text,
)

from ...domain.models import (
    CompanionFilter,
    CompanionRelationship,
    GrowingConditions,
    Language,
    PhysicalCharacteristics,
    Plant,
    SearchResult,
)
from ...domain.repositories.plant_repository import PlantRepository
from ...domain.services import FilterCompiler
from ...infrastructure.cache.lookup_cache import LookupTableCache
from ..queries.plant_queries import (
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


class CatalogQueryHandler:
    """Shared wiring for catalog read handlers."""

    def __init__(
        self,
        repository: PlantRepository,
        settings: Settings,
        compiler: Optional[FilterCompiler] = None,
    ):
        self.repository = repository
        self.settings = settings
        self.compiler = compiler or FilterCompiler()

    def _deadline(self, timeout: Optional[float]):
        return deadline_scope(timeout if timeout is not None else self.settings.DEFAULT_OPERATION_TIMEOUT)


class GetPlantQueryHandler(CatalogQueryHandler):
    """
    Handler for single plant retrieval.

    With include_details the plant carries its physical characteristics and,
    when a country is requested, the best growing-condition assertion for it.
    """

    async def handle(self, query: GetPlantQuery) -> Plant:
        """
        Args:
            query: Plant lookup with locale

        Returns:
            Plant with localized common names

        Raises:
            ValidationError: On malformed identifiers
            PlantNotFoundError: If no plant has this identifier
        """
        plant_id = require_plant_id(query.plant_id)
        language_id = require_language_id(query.language_id)
        country_id = require_country_id(query.country_id)

        with self._deadline(query.timeout):
            plant = await self.repository.find_by_id(plant_id, language_id, country_id)
            if plant is None:
                raise PlantNotFoundError(plant_id)

            if query.include_details:
                updates = {
                    "physical_characteristics": await self.repository.get_physical_characteristics(plant_id)
                }
                if country_id is not None:
                    updates["growing_conditions"] = await self.repository.get_growing_conditions(
                        plant_id, country_id
                    )
                plant = plant.model_copy(update=updates)

        logger.debug(f"Retrieved plant {plant_id} ({plant.full_botanical_name})")
        return plant


class GetPlantByBotanicalNameQueryHandler(CatalogQueryHandler):
    async def handle(self, query: GetPlantByBotanicalNameQuery) -> Plant:
        botanical_name = " ".join(query.botanical_name.split())
        if not botanical_name:
            raise ValidationError(message="Botanical name must not be blank", field="botanical_name")
        language_id = require_language_id(query.language_id)
        country_id = require_country_id(query.country_id)

        with self._deadline(query.timeout):
            plant = await self.repository.find_by_botanical_name(botanical_name, language_id, country_id)
        if plant is None:
            raise PlantNotFoundError(botanical_name, message=f"No plant named {botanical_name}")
        return plant


class GetPlantsByIdsQueryHandler(CatalogQueryHandler):
    async def handle(self, query: GetPlantsByIdsQuery) -> List[Plant]:
        """Plants in input order; unknown identifiers are skipped."""
        plant_ids = [require_plant_id(pid, field="plant_ids") for pid in query.plant_ids]
        language_id = require_language_id(query.language_id)
        country_id = require_country_id(query.country_id)
        if not plant_ids:
            return []

        with self._deadline(query.timeout):
            return await self.repository.find_by_ids(plant_ids, language_id, country_id)


class ResolveNamesQueryHandler(CatalogQueryHandler):
    async def handle(self, query: ResolveNamesQuery) -> List[str]:
        plant_id = require_plant_id(query.plant_id)
        language_id = require_language_id(query.language_id)
        country_id = require_country_id(query.country_id)

        with self._deadline(query.timeout):
            return await self.repository.resolve_names(plant_id, language_id, country_id)


class SearchPlantsQueryHandler(CatalogQueryHandler):
    """Handler for free-text and structured plant search."""

    async def handle(self, query: SearchPlantsQuery) -> SearchResult:
        """
        Args:
            query: Search text, filter and locale

        Returns:
            One page of plants with cursor, has_more and total

        Raises:
            ValidationError: On a malformed filter, cursor or over-long text
        """
        query_text = require_search_text(query.query_text, self.settings.SEARCH_MAX_QUERY_LENGTH)
        language_id = require_language_id(query.language_id)
        country_id = require_country_id(query.country_id)
        self.compiler.validate_search(query.search_filter)

        with self._deadline(query.timeout):
            result = await self.repository.search(query_text, query.search_filter, language_id, country_id)

        logger.debug(f"Search '{query_text}' returned {result.count} of {result.total} plants")
        return result


class CountPlantsQueryHandler(CatalogQueryHandler):
    async def handle(self, query: CountPlantsQuery) -> int:
        query_text = require_search_text(query.query_text, self.settings.SEARCH_MAX_QUERY_LENGTH)
        self.compiler.validate_search(query.search_filter)

        with self._deadline(query.timeout):
            return await self.repository.count(query_text, query.search_filter)


class GrowingConditionsSearchQueryHandler(CatalogQueryHandler):
    async def handle(self, query: GrowingConditionsSearchQuery) -> SearchResult:
        language_id = require_language_id(query.language_id)
        country_id = require_country_id(query.country_id)
        self.compiler.validate_growing_conditions(query.conditions_filter)

        with self._deadline(query.timeout):
            return await self.repository.find_by_growing_conditions(
                query.conditions_filter, language_id, country_id
            )


class GetGrowingConditionsQueryHandler(CatalogQueryHandler):
    async def handle(self, query: GetGrowingConditionsQuery) -> Optional[GrowingConditions]:
        """Highest-confidence assertion for the country, or the global one when no country is given."""
        plant_id = require_plant_id(query.plant_id)
        country_id = require_country_id(query.country_id)

        with self._deadline(query.timeout):
            return await self.repository.get_growing_conditions(plant_id, country_id)


class GetPhysicalCharacteristicsQueryHandler(CatalogQueryHandler):
    async def handle(self, query: GetPhysicalCharacteristicsQuery) -> Optional[PhysicalCharacteristics]:
        plant_id = require_plant_id(query.plant_id)

        with self._deadline(query.timeout):
            return await self.repository.get_physical_characteristics(plant_id)


class GetCompanionsQueryHandler(CatalogQueryHandler):
    async def handle(self, query: GetCompanionsQuery) -> List[CompanionRelationship]:
        plant_id = require_plant_id(query.plant_id)
        companion_filter = query.companion_filter
        if companion_filter is not None and companion_filter.plant_id:
            companion_filter = companion_filter.model_copy(
                update={"plant_id": require_plant_id(companion_filter.plant_id, field="companion_filter.plant_id")}
            )

        with self._deadline(query.timeout):
            return await self.repository.get_companions(plant_id, companion_filter)


class CheckCompatibilityQueryHandler(CatalogQueryHandler):
    """How two plants relate, as recorded in either orientation."""

    async def handle(self, query: CheckCompatibilityQuery) -> Optional[CompanionRelationship]:
        """
        Returns:
            The relationship between the two plants, or None when none is recorded

        Raises:
            ValidationError: If the identifiers are malformed or name the same plant
        """
        plant_a_id = require_plant_id(query.plant_a_id, field="plant_a_id")
        plant_b_id = require_plant_id(query.plant_b_id, field="plant_b_id")
        if plant_a_id == plant_b_id:
            raise ValidationError(
                message="A plant cannot be checked against itself",
                field="plant_b_id",
                value=plant_b_id,
            )

        with self._deadline(query.timeout):
            relationships = await self.repository.get_companions(
                plant_a_id, CompanionFilter(plant_id=plant_b_id)
            )
        return relationships[0] if relationships else None


class ListLanguagesQueryHandler:
    """Languages from the in-process lookup snapshot."""

    def __init__(self, lookup_cache: LookupTableCache, settings: Settings):
        self.lookup_cache = lookup_cache
        self.settings = settings

    async def handle(self, query: ListLanguagesQuery) -> List[Language]:
        timeout = query.timeout if query.timeout is not None else self.settings.DEFAULT_OPERATION_TIMEOUT
        with deadline_scope(timeout):
            snapshot = await self.lookup_cache.get()
        return sorted(snapshot.languages_by_id.values(), key=lambda lang: lang.language_code)
