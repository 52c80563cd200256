# 📄 File: app/modules/plant_catalog/infrastructure/database/lookup_repository_impl.py
# 🧭 Purpose (Layman Explanation):
# Reads the short reference lists (languages, plant families, genera) from the database.
#
# 🧪 Purpose (Technical Summary):
# SQLAlchemy implementation of LookupRepository; whole-table reads feeding the in-process
# LookupSnapshot cache.
#
# 🔗 Dependencies:
# - SQLAlchemy select, infrastructure.database.models
#
# 🔄 Connected Modules / Calls From:
# - lookup_cache.py (snapshot refresh)

import logging
from typing import List

from sqlalchemy import select

from app.shared.infrastructure.database.session import DatabaseSessionManager, execute_bounded

from ...domain.models import Language, PlantFamily, PlantGenus
from ...domain.repositories.lookup_repository import LookupRepository
from .models import LanguageModel, PlantFamilyModel, PlantGenusModel

logger = logging.getLogger(__name__)


class LookupRepositoryImpl(LookupRepository):

    def __init__(self, session_manager: DatabaseSessionManager):
        self.session_manager = session_manager

    async def _all(self, stmt, operation: str) -> list:
        async with self.session_manager.get_read_only_session() as session:
            result = await execute_bounded(session, stmt, operation)
            return list(result.scalars().all())

    async def list_languages(self) -> List[Language]:
        rows = await self._all(select(LanguageModel).order_by(LanguageModel.language_code), "list_languages")
        return [
            Language(language_id=r.language_id, language_code=r.language_code, language_name=r.language_name)
            for r in rows
        ]

    async def list_families(self) -> List[PlantFamily]:
        rows = await self._all(select(PlantFamilyModel).order_by(PlantFamilyModel.family_name), "list_families")
        return [PlantFamily(family_id=r.family_id, family_name=r.family_name) for r in rows]

    async def list_genera(self) -> List[PlantGenus]:
        rows = await self._all(select(PlantGenusModel).order_by(PlantGenusModel.genus_name), "list_genera")
        return [PlantGenus(genus_id=r.genus_id, family_id=r.family_id, genus_name=r.genus_name) for r in rows]
