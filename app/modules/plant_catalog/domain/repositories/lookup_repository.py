# 📄 File: app/modules/plant_catalog/domain/repositories/lookup_repository.py
# 🧭 Purpose (Layman Explanation):
# Defines how to read the small reference lists (languages, families, genera).
# 🧪 Purpose (Technical Summary):
# Repository interface for lookup tables, loaded wholesale into a LookupSnapshot.
# 🔗 Dependencies:
# Domain models (lookups), typing, abc
# 🔄 Connected Modules / Calls From:
# lookup_repository_impl.py, lookup_cache.py

from abc import ABC, abstractmethod
from typing import List

from ..models.lookups import Language, LookupSnapshot, PlantFamily, PlantGenus


class LookupRepository(ABC):
    """Read-only access to the catalog's reference tables."""

    @abstractmethod
    async def list_languages(self) -> List[Language]:
        pass

    @abstractmethod
    async def list_families(self) -> List[PlantFamily]:
        pass

    @abstractmethod
    async def list_genera(self) -> List[PlantGenus]:
        pass

    async def load_snapshot(self) -> LookupSnapshot:
        """Load all lookup tables into one immutable snapshot."""
        return LookupSnapshot.build(
            languages=await self.list_languages(),
            families=await self.list_families(),
            genera=await self.list_genera(),
        )
