# 📄 File: app/modules/plant_catalog/domain/services/name_batch_loader.py
# 🧭 Purpose (Layman Explanation):
# Fetches the everyday names for a whole page of plants in one trip to the database
# instead of one trip per plant.
# 🧪 Purpose (Technical Summary):
# Grouped name loading: one IN (...) query for tiers 1-2 over the whole identifier set,
# then at most one more grouped query for the default-language fallback of the plants
# that came back empty. Unknown identifiers are simply absent from the result map.
# 🔗 Dependencies:
# localized_name_repository (injected), lookup snapshot accessor (optional),
# localization_resolver.order_names
# 🔄 Connected Modules / Calls From:
# localization_resolver.py, plant_repository_impl.py, plant_search.py

import logging
from collections import defaultdict
from typing import Callable, Collection, Dict, List, Optional, Sequence

from ..models.lookups import LookupSnapshot
from ..models.plant import LocalizedName, Plant
from ..repositories.localized_name_repository import LocalizedNameRepository
from .localization_resolver import order_names

logger = logging.getLogger(__name__)


def _group(records: Sequence[LocalizedName]) -> Dict[str, List[LocalizedName]]:
    grouped: Dict[str, List[LocalizedName]] = defaultdict(list)
    for record in records:
        grouped[record.plant_id].append(record)
    return grouped


class NameBatchLoader:
    """
    Loads localized names for many plants with a fixed number of queries.

    Both queries run sequentially in the caller's task, so a batch either
    completes as a whole or fails as a whole.
    """

    def __init__(
        self,
        name_repository: LocalizedNameRepository,
        default_language: str,
        lookups: Optional[Callable[[], LookupSnapshot]] = None,
    ):
        self.name_repository = name_repository
        self.default_language = default_language
        self.lookups = lookups

    def is_default_language(self, language_id: str) -> bool:
        """True when `language_id` names the default language by code or by row id."""
        if language_id == self.default_language:
            return True
        if self.lookups is None:
            return False
        snapshot = self.lookups()
        requested = snapshot.language(language_id)
        default = snapshot.language(self.default_language)
        if requested is None or default is None:
            return False
        return requested.language_id == default.language_id

    async def load_names_for(
        self,
        plant_ids: Collection[str],
        language_id: str,
        country_id: Optional[str] = None,
    ) -> Dict[str, List[str]]:
        """
        Map each plant id to its ordered display names.

        Args:
            plant_ids: Plant identifiers; duplicates are collapsed
            language_id: Requested language
            country_id: Optional requested country

        Returns:
            Sparse map: plants without any name are absent
        """
        ids = list(dict.fromkeys(plant_ids))
        if not ids:
            return {}

        # Tiers 1-2: requested language, requested country plus language-global
        grouped = _group(await self.name_repository.fetch_names(ids, language_id, country_id))
        result: Dict[str, List[str]] = {}
        for plant_id, records in grouped.items():
            names = order_names(records)
            if names:
                result[plant_id] = names

        missing = [plant_id for plant_id in ids if plant_id not in result]
        if not missing or self.is_default_language(language_id):
            return result

        # Tier 3: default language, global names, for the stragglers only
        fallback = _group(await self.name_repository.fetch_names(missing, self.default_language, None))
        for plant_id, records in fallback.items():
            names = order_names(records)
            if names:
                result[plant_id] = names

        logger.debug(
            f"Loaded names for {len(result)}/{len(ids)} plants "
            f"({len(missing)} via {self.default_language} fallback)"
        )
        return result

    async def attach_names(
        self,
        plants: Sequence[Plant],
        language_id: str,
        country_id: Optional[str] = None,
    ) -> List[Plant]:
        """Return copies of `plants` with common_names filled from one batch load."""
        names = await self.load_names_for([p.plant_id for p in plants], language_id, country_id)
        return [
            plant.model_copy(update={"common_names": names.get(plant.plant_id, [])})
            for plant in plants
        ]
