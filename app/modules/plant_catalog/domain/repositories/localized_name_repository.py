# 📄 File: app/modules/plant_catalog/domain/repositories/localized_name_repository.py
# 🧭 Purpose (Layman Explanation):
# Defines how the catalog asks for the everyday names of many plants at once, without
# saying which database answers.
# 🧪 Purpose (Technical Summary):
# Repository interface for LocalizedName rows. fetch_names is a single grouped lookup
# keyed by the whole identifier set, the primitive the batch loader builds on.
# 🔗 Dependencies:
# Domain models (LocalizedName), typing, abc
# 🔄 Connected Modules / Calls From:
# name_batch_loader.py, localized_name_repository_impl.py

from abc import ABC, abstractmethod
from typing import Collection, List, Optional

from ..models.plant import LocalizedName


class LocalizedNameRepository(ABC):
    """
    Repository interface for localized common names.

    Implementation Notes:
    - fetch_names must issue exactly one store round trip per call
    - Language and country may be given as row ids or ISO codes
    """

    @abstractmethod
    async def fetch_names(
        self,
        plant_ids: Collection[str],
        language_id: str,
        country_id: Optional[str] = None,
    ) -> List[LocalizedName]:
        """
        Fetch names for many plants in one grouped query.

        Args:
            plant_ids: Plants to load names for (non-empty)
            language_id: Requested language (id or code)
            country_id: When given, names for that country are returned together
                with the language's global names; when None only global names

        Returns:
            Matching LocalizedName rows in no particular order

        Raises:
            DatabaseError: If the store fails
        """
        pass

    @abstractmethod
    async def add_name(self, name: LocalizedName) -> LocalizedName:
        """
        Persist one localized name.

        Raises:
            DuplicateResourceError: If (plant, language, country, name) already exists
            PlantNotFoundError: If the plant does not exist
        """
        pass
