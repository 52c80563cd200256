# 📄 File: app/modules/plant_catalog/domain/services/localization_resolver.py
# 🧭 Purpose (Layman Explanation):
# Decides which everyday names to show for a plant: names from your country first, then
# names used everywhere in your language, then the default language, then nothing.
# 🧪 Purpose (Technical Summary):
# Four-tier locale fallback for display names. order_names() is the pure within-tier
# ordering (country-specific, primary, lexicographic, de-duplicated); resolve_names()
# runs the chain through the batch loader with a single-element set so single and
# batched resolution share one algorithm.
# 🔗 Dependencies:
# Domain models (LocalizedName), name_batch_loader (injected)
# 🔄 Connected Modules / Calls From:
# name_batch_loader.py, plant_repository_impl.py, tests

import logging
from typing import TYPE_CHECKING, Iterable, List, Optional

from ..models.plant import LocalizedName

if TYPE_CHECKING:
    from .name_batch_loader import NameBatchLoader

logger = logging.getLogger(__name__)


def order_names(records: Iterable[LocalizedName]) -> List[str]:
    """
    Order one plant's names for display.

    Country-specific before global, primary before non-primary, then
    lexicographic. A name text appearing twice keeps its first position.
    """
    ranked = sorted(
        records,
        key=lambda r: (r.country_id is None, not r.is_primary, r.common_name),
    )
    seen = set()
    names: List[str] = []
    for record in ranked:
        if record.common_name in seen:
            continue
        seen.add(record.common_name)
        names.append(record.common_name)
    return names


class LocalizationResolver:
    """
    Resolves a plant's display names for a (language, country) request.

    Tiers, stopping at the first non-empty result:
    1. requested language, requested country
    2. requested language, no country (language-global)
    3. default language, no country (only when the requested language differs)
    4. empty list, a valid and cacheable answer
    """

    def __init__(self, batch_loader: "NameBatchLoader"):
        self.batch_loader = batch_loader

    @property
    def default_language(self) -> str:
        return self.batch_loader.default_language

    async def resolve_names(
        self,
        plant_id: str,
        language_id: str,
        country_id: Optional[str] = None,
    ) -> List[str]:
        names = await self.batch_loader.load_names_for({plant_id}, language_id, country_id)
        resolved = names.get(plant_id, [])
        if not resolved:
            logger.debug(f"No localized names for plant {plant_id} in {language_id}/{country_id}")
        return resolved
