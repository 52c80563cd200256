# 📄 File: app/modules/plant_catalog/infrastructure/database/plant_repository_impl.py
# 🧭 Purpose (Layman Explanation):
# The catalog's librarian: looks plants up, searches the shelves, files new plants and
# companion pairings, and always hands plants back with names in the reader's language.
#
# 🧪 Purpose (Technical Summary):
# SQLAlchemy implementation of PlantRepository. Point reads and writes run here; search,
# count and growing-condition search are delegated to PlantSearchComposer; names are
# attached through the NameBatchLoader / LocalizationResolver pair so every read path
# uses the same fallback chain and a fixed number of name queries.
#
# 🔗 Dependencies:
# - SQLAlchemy select/delete/case
# - infrastructure.database.{models, mappers, plant_search, predicate_translator}
# - domain services (resolver, batch loader, filter compiler)
# - app.shared.infrastructure.database.session
#
# 🔄 Connected Modules / Calls From:
# - cached_plant_repository.py (decorated store repository)
# - application/engine.py (wiring)

"""
Plant Repository Implementation

Features:
- Localized point and batch reads with a fixed number of name queries
- Keyset-paginated search through the search composer
- Highest-confidence growing-condition lookup per country
- Companion queries matching either side of the pair
- Single-transaction bulk create
"""

import logging
import uuid
from datetime import datetime, timezone
from typing import Dict, List, Optional, Sequence

from sqlalchemy import case, delete, func, or_, select

from app.shared.core.exceptions import DuplicateResourceError, PlantNotFoundError
from app.shared.infrastructure.database.session import DatabaseSessionManager, execute_bounded

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
from ...domain.models.types import CONFIDENCE_RANKS
from ...domain.predicates import AnyFieldEquals, all_of
from ...domain.repositories.localized_name_repository import LocalizedNameRepository
from ...domain.repositories.plant_repository import PlantRepository
from ...domain.services.filter_compiler import FilterCompiler
from ...domain.services.localization_resolver import LocalizationResolver
from ...domain.services.name_batch_loader import NameBatchLoader
from .mappers import (
    companion_to_domain,
    companion_to_row,
    growing_conditions_to_domain,
    growing_conditions_to_row,
    physical_to_domain,
    physical_to_row,
    plant_to_domain,
    plant_to_row,
)
from .models import (
    CompanionRelationshipModel,
    PlantGrowingConditionsModel,
    PlantModel,
    PlantPhysicalCharacteristicsModel,
)
from .plant_search import PlantSearchComposer, country_matches
from .predicate_translator import PredicateTranslator

logger = logging.getLogger(__name__)

COMPANION_COLUMNS = {
    "plant_a_id": CompanionRelationshipModel.plant_a_id,
    "plant_b_id": CompanionRelationshipModel.plant_b_id,
    "relationship_type": CompanionRelationshipModel.relationship_type,
}


class PlantRepositoryImpl(PlantRepository):
    """
    SQLAlchemy implementation of the PlantRepository interface.
    """

    def __init__(
        self,
        session_manager: DatabaseSessionManager,
        name_repository: LocalizedNameRepository,
        batch_loader: NameBatchLoader,
        compiler: Optional[FilterCompiler] = None,
    ):
        self.session_manager = session_manager
        self.name_repository = name_repository
        self.batch_loader = batch_loader
        self.compiler = compiler or FilterCompiler()
        self.resolver = LocalizationResolver(batch_loader)
        self.search_composer = PlantSearchComposer(session_manager, self.compiler, batch_loader)

    # =========================================================================
    # LOCALIZED READS
    # =========================================================================

    async def find_by_id(
        self,
        plant_id: str,
        language_id: str,
        country_id: Optional[str] = None,
    ) -> Optional[Plant]:
        async with self.session_manager.get_read_only_session() as session:
            result = await execute_bounded(
                session, select(PlantModel).where(PlantModel.plant_id == plant_id), "find_by_id"
            )
            row = result.scalar_one_or_none()

        if row is None:
            logger.debug(f"Plant not found: {plant_id}")
            return None

        names = await self.resolver.resolve_names(plant_id, language_id, country_id)
        return plant_to_domain(row, names)

    async def find_by_botanical_name(
        self,
        botanical_name: str,
        language_id: str,
        country_id: Optional[str] = None,
    ) -> Optional[Plant]:
        stmt = (
            select(PlantModel)
            .where(func.lower(PlantModel.full_botanical_name) == botanical_name.lower())
            .order_by(PlantModel.plant_id)
            .limit(1)
        )
        async with self.session_manager.get_read_only_session() as session:
            result = await execute_bounded(session, stmt, "find_by_botanical_name")
            row = result.scalar_one_or_none()

        if row is None:
            return None
        names = await self.resolver.resolve_names(row.plant_id, language_id, country_id)
        return plant_to_domain(row, names)

    async def find_by_ids(
        self,
        plant_ids: Sequence[str],
        language_id: str,
        country_id: Optional[str] = None,
    ) -> List[Plant]:
        ids = list(dict.fromkeys(plant_ids))
        if not ids:
            return []

        async with self.session_manager.get_read_only_session() as session:
            result = await execute_bounded(
                session, select(PlantModel).where(PlantModel.plant_id.in_(ids)), "find_by_ids"
            )
            rows: Dict[str, PlantModel] = {row.plant_id: row for row in result.scalars().all()}

        plants = [plant_to_domain(rows[plant_id]) for plant_id in ids if plant_id in rows]
        logger.debug(f"Batch fetched {len(plants)}/{len(ids)} plants")
        return await self.batch_loader.attach_names(plants, language_id, country_id)

    async def resolve_names(
        self,
        plant_id: str,
        language_id: str,
        country_id: Optional[str] = None,
    ) -> List[str]:
        return await self.resolver.resolve_names(plant_id, language_id, country_id)

    async def search(
        self,
        query_text: Optional[str],
        search_filter: SearchFilter,
        language_id: str,
        country_id: Optional[str] = None,
    ) -> SearchResult:
        return await self.search_composer.search(query_text, search_filter, language_id, country_id)

    async def count(self, query_text: Optional[str], search_filter: SearchFilter) -> int:
        return await self.search_composer.count(query_text, search_filter)

    async def find_by_growing_conditions(
        self,
        conditions_filter: GrowingConditionsFilter,
        language_id: str,
        country_id: Optional[str] = None,
    ) -> SearchResult:
        return await self.search_composer.find_by_growing_conditions(conditions_filter, language_id, country_id)

    # =========================================================================
    # DETAIL READS
    # =========================================================================

    async def get_growing_conditions(
        self,
        plant_id: str,
        country_id: Optional[str] = None,
    ) -> Optional[GrowingConditions]:
        """Highest-ranked assertion; global assertions only when no country is given."""
        gc = PlantGrowingConditionsModel
        stmt = select(gc).where(gc.plant_id == plant_id)
        if country_id:
            stmt = stmt.where(country_matches(gc.country_id).build(country_id))
        else:
            stmt = stmt.where(gc.country_id.is_(None))

        rank = case(CONFIDENCE_RANKS, value=gc.confidence, else_=0)
        stmt = stmt.order_by(rank.desc(), gc.created_at.desc()).limit(1)

        async with self.session_manager.get_read_only_session() as session:
            result = await execute_bounded(session, stmt, "get_growing_conditions")
            row = result.scalar_one_or_none()
        return growing_conditions_to_domain(row) if row is not None else None

    async def get_physical_characteristics(self, plant_id: str) -> Optional[PhysicalCharacteristics]:
        stmt = select(PlantPhysicalCharacteristicsModel).where(
            PlantPhysicalCharacteristicsModel.plant_id == plant_id
        )
        async with self.session_manager.get_read_only_session() as session:
            result = await execute_bounded(session, stmt, "get_physical_characteristics")
            row = result.scalar_one_or_none()
        return physical_to_domain(row) if row is not None else None

    async def get_companions(
        self,
        plant_id: str,
        companion_filter: Optional[CompanionFilter] = None,
    ) -> List[CompanionRelationship]:
        predicate = all_of([
            AnyFieldEquals(("plant_a_id", "plant_b_id"), plant_id),
            self.compiler.compile_companions(companion_filter),
        ])
        translator = PredicateTranslator(COMPANION_COLUMNS, dialect=self.session_manager.dialect_name)
        stmt = (
            select(CompanionRelationshipModel)
            .where(translator.translate(predicate))
            .order_by(CompanionRelationshipModel.created_at, CompanionRelationshipModel.relationship_id)
        )
        async with self.session_manager.get_read_only_session() as session:
            result = await execute_bounded(session, stmt, "get_companions")
            return [companion_to_domain(row) for row in result.scalars().all()]

    # =========================================================================
    # WRITES
    # =========================================================================

    async def _assert_unique_botanical_names(self, session, plants: Sequence[Plant]) -> None:
        names = [p.full_botanical_name for p in plants]
        seen = set()
        for name in names:
            if name in seen:
                raise DuplicateResourceError(
                    message=f"Duplicate botanical name in batch: {name}",
                    resource_type="plant",
                    field="full_botanical_name",
                    value=name,
                )
            seen.add(name)

        ids = [p.plant_id for p in plants]
        stmt = select(PlantModel.full_botanical_name).where(
            PlantModel.full_botanical_name.in_(names), PlantModel.plant_id.notin_(ids)
        )
        clash = (await execute_bounded(session, stmt, "check_botanical_name")).scalars().first()
        if clash is not None:
            raise DuplicateResourceError(
                message=f"Plant already exists: {clash}",
                resource_type="plant",
                field="full_botanical_name",
                value=clash,
            )

    @staticmethod
    def _add_plant_rows(session, plant: Plant) -> None:
        session.add(PlantModel(**plant_to_row(plant)))
        if plant.growing_conditions is not None:
            row = growing_conditions_to_row(plant.growing_conditions)
            row.update(id=str(uuid.uuid4()), plant_id=plant.plant_id)
            session.add(PlantGrowingConditionsModel(**row))
        if plant.physical_characteristics is not None:
            row = physical_to_row(plant.physical_characteristics)
            row["plant_id"] = plant.plant_id
            session.add(PlantPhysicalCharacteristicsModel(**row))

    async def create(self, plant: Plant) -> Plant:
        plant.update_botanical_name()
        async with self.session_manager.get_session() as session:
            await self._assert_unique_botanical_names(session, [plant])
            self._add_plant_rows(session, plant)
            await session.flush()

        logger.info(f"Created plant {plant.plant_id} ({plant.full_botanical_name})")
        return plant

    async def bulk_create(self, plants: Sequence[Plant]) -> List[Plant]:
        plants = list(plants)
        if not plants:
            return []

        for plant in plants:
            plant.update_botanical_name()

        async with self.session_manager.get_session() as session:
            await self._assert_unique_botanical_names(session, plants)
            for plant in plants:
                self._add_plant_rows(session, plant)
            await session.flush()

        logger.info(f"Bulk created {len(plants)} plants")
        return plants

    async def update(self, plant: Plant) -> Plant:
        plant.update_botanical_name()
        async with self.session_manager.get_session() as session:
            result = await execute_bounded(
                session, select(PlantModel).where(PlantModel.plant_id == plant.plant_id), "update"
            )
            row = result.scalar_one_or_none()
            if row is None:
                raise PlantNotFoundError(plant.plant_id)

            await self._assert_unique_botanical_names(session, [plant])

            for field, value in plant_to_row(plant).items():
                if field in ("plant_id", "created_at"):
                    continue
                setattr(row, field, value)
            row.updated_at = datetime.now(timezone.utc)
            await session.flush()

        logger.info(f"Updated plant {plant.plant_id}")
        return plant_to_domain(row, plant.common_names)

    async def delete(self, plant_id: str) -> bool:
        async with self.session_manager.get_session() as session:
            result = await execute_bounded(
                session, delete(PlantModel).where(PlantModel.plant_id == plant_id), "delete"
            )
            deleted = result.rowcount > 0

        if deleted:
            logger.info(f"Deleted plant {plant_id}")
        return deleted

    async def add_localized_name(self, name: LocalizedName) -> LocalizedName:
        return await self.name_repository.add_name(name)

    async def create_companion(self, relationship: CompanionRelationship) -> CompanionRelationship:
        a, b = relationship.plant_a_id, relationship.plant_b_id
        rel = CompanionRelationshipModel

        async with self.session_manager.get_session() as session:
            found = await execute_bounded(
                session, select(PlantModel.plant_id).where(PlantModel.plant_id.in_([a, b])), "create_companion"
            )
            existing = set(found.scalars().all())
            for plant_id in (a, b):
                if plant_id not in existing:
                    raise PlantNotFoundError(plant_id)

            pair = select(rel.relationship_id).where(
                or_(
                    (rel.plant_a_id == a) & (rel.plant_b_id == b),
                    (rel.plant_a_id == b) & (rel.plant_b_id == a),
                )
            )
            if (await execute_bounded(session, pair, "create_companion")).first() is not None:
                raise DuplicateResourceError(
                    message=f"Plants {a} and {b} are already related",
                    resource_type="companion_relationship",
                    field="plant_pair",
                    value=f"{a}:{b}",
                )

            session.add(rel(**companion_to_row(relationship)))
            await session.flush()

        logger.info(f"Created {relationship.relationship_type} companion relationship {a} <-> {b}")
        return relationship

    async def delete_companion(self, relationship_id: str) -> bool:
        async with self.session_manager.get_session() as session:
            result = await execute_bounded(
                session,
                delete(CompanionRelationshipModel).where(
                    CompanionRelationshipModel.relationship_id == relationship_id
                ),
                "delete_companion",
            )
            return result.rowcount > 0
