# 📄 File: app/modules/plant_catalog/domain/repositories/plant_repository.py
# 🧭 Purpose (Layman Explanation):
# Defines everything the catalog can be asked (find a plant, search, list companions)
# and told (add a plant, link two companions), without saying where the data lives.
# 🧪 Purpose (Technical Summary):
# Repository interface for the localized plant catalog. Implemented by the SQLAlchemy
# store repository and decorated by the read-through CachedPlantRepository, so both
# expose the same contract.
# 🔗 Dependencies:
# Domain models, typing, abc
# 🔄 Connected Modules / Calls From:
# plant_repository_impl.py, cached_plant_repository.py, query_handlers.py,
# command_handlers.py

from abc import ABC, abstractmethod
from typing import List, Optional, Sequence

from ..models.characteristics import GrowingConditions, PhysicalCharacteristics
from ..models.companion import CompanionRelationship
from ..models.filters import CompanionFilter, GrowingConditionsFilter, SearchFilter
from ..models.pagination import SearchResult
from ..models.plant import LocalizedName, Plant


class PlantRepository(ABC):
    """
    Repository interface for Plant catalog data access operations.

    Read operations take the requester's language and optional country and
    return plants with common_names already resolved for that locale.

    Implementation Notes:
    - Inputs arrive validated; implementations do not re-check identifiers
    - Reads that may legitimately find nothing return None or an empty list
    - Store failures raise DatabaseError (or DeadlineExceededError)
    """

    # =========================================================================
    # READS
    # =========================================================================

    @abstractmethod
    async def find_by_id(
        self,
        plant_id: str,
        language_id: str,
        country_id: Optional[str] = None,
    ) -> Optional[Plant]:
        """
        Get one plant with localized names.

        Args:
            plant_id: Plant UUID
            language_id: Requested language
            country_id: Optional requested country

        Returns:
            Plant, or None if no such plant exists
        """
        pass

    @abstractmethod
    async def find_by_botanical_name(
        self,
        botanical_name: str,
        language_id: str,
        country_id: Optional[str] = None,
    ) -> Optional[Plant]:
        """Plant whose full botanical name equals `botanical_name`, ignoring case."""
        pass

    @abstractmethod
    async def find_by_ids(
        self,
        plant_ids: Sequence[str],
        language_id: str,
        country_id: Optional[str] = None,
    ) -> List[Plant]:
        """
        Get many plants in one grouped fetch.

        Returns:
            Plants in input order; unknown identifiers are skipped
        """
        pass

    @abstractmethod
    async def resolve_names(
        self,
        plant_id: str,
        language_id: str,
        country_id: Optional[str] = None,
    ) -> List[str]:
        """Ordered display names for one plant through the locale fallback chain."""
        pass

    @abstractmethod
    async def search(
        self,
        query_text: Optional[str],
        search_filter: SearchFilter,
        language_id: str,
        country_id: Optional[str] = None,
    ) -> SearchResult:
        """
        Free-text plus structured search with keyset pagination.

        Args:
            query_text: Optional free text over botanical and all common names
            search_filter: Structured predicates, page size, cursor and sort
            language_id: Language for the returned common names
            country_id: Optional country for the returned common names

        Returns:
            SearchResult with items, total, next_cursor and has_more
        """
        pass

    @abstractmethod
    async def count(self, query_text: Optional[str], search_filter: SearchFilter) -> int:
        """Number of plants matching the same predicate search() would use."""
        pass

    @abstractmethod
    async def find_by_growing_conditions(
        self,
        conditions_filter: GrowingConditionsFilter,
        language_id: str,
        country_id: Optional[str] = None,
    ) -> SearchResult:
        """Plants with at least one growing-condition assertion matching the filter."""
        pass

    @abstractmethod
    async def get_growing_conditions(
        self,
        plant_id: str,
        country_id: Optional[str] = None,
    ) -> Optional[GrowingConditions]:
        """
        Highest-confidence growing-condition assertion for a plant in a country.

        Returns:
            GrowingConditions, or None if nothing is recorded
        """
        pass

    @abstractmethod
    async def get_physical_characteristics(self, plant_id: str) -> Optional[PhysicalCharacteristics]:
        """Physical characteristics of a plant, or None if unrecorded."""
        pass

    @abstractmethod
    async def get_companions(
        self,
        plant_id: str,
        companion_filter: Optional[CompanionFilter] = None,
    ) -> List[CompanionRelationship]:
        """Relationships involving plant_id that also satisfy the filter."""
        pass

    # =========================================================================
    # WRITES
    # =========================================================================

    @abstractmethod
    async def create(self, plant: Plant) -> Plant:
        """
        Create a new plant.

        Raises:
            DuplicateResourceError: If the id or botanical name already exists
        """
        pass

    @abstractmethod
    async def bulk_create(self, plants: Sequence[Plant]) -> List[Plant]:
        """Create many plants in a single transaction; all or nothing."""
        pass

    @abstractmethod
    async def update(self, plant: Plant) -> Plant:
        """
        Update taxonomy fields of an existing plant.

        Raises:
            PlantNotFoundError: If the plant does not exist
        """
        pass

    @abstractmethod
    async def delete(self, plant_id: str) -> bool:
        """
        Delete a plant; names, assertions and relationships cascade.

        Returns:
            True if a row was deleted
        """
        pass

    @abstractmethod
    async def add_localized_name(self, name: LocalizedName) -> LocalizedName:
        """Attach a localized common name to a plant."""
        pass

    @abstractmethod
    async def create_companion(self, relationship: CompanionRelationship) -> CompanionRelationship:
        """
        Create a companion relationship.

        Raises:
            PlantNotFoundError: If either plant does not exist
            DuplicateResourceError: If the pair is already related
        """
        pass

    @abstractmethod
    async def delete_companion(self, relationship_id: str) -> bool:
        """
        Delete a companion relationship by id.

        Returns:
            True if a row was deleted
        """
        pass
