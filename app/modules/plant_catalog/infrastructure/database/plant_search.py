# 📄 File: app/modules/plant_catalog/infrastructure/database/plant_search.py
# 🧭 Purpose (Layman Explanation):
# Runs plant searches page by page: finds matching plants, puts them in a stable order,
# remembers where the page ended, counts all matches and fills in the everyday names.
#
# 🧪 Purpose (Technical Summary):
# Search composer over the compiled predicate: one bounded SELECT with keyset pagination
# (limit + 1 rows, exclusive row-value bound after the cursor), one COUNT(DISTINCT) with
# the same predicate minus the bound, then a single batched name load for the page.
#
# 🔗 Dependencies:
# - SQLAlchemy select/count
# - predicate_translator.py, filter_compiler.py, name_batch_loader.py
# - app.shared.infrastructure.database.session (bounded execution)
#
# 🔄 Connected Modules / Calls From:
# - plant_repository_impl.py (search, count, find_by_growing_conditions)

import hashlib
import json
import logging
import time
import uuid
from typing import Any, Dict, List, Optional, Sequence, Tuple

from sqlalchemy import distinct, func, or_, select
from sqlalchemy.sql.elements import ColumnElement

from app.shared.core.exceptions import ValidationError
from app.shared.infrastructure.database.session import DatabaseSessionManager, execute_bounded
from app.shared.utils.logging import get_logger

from ...domain.models import GrowingConditionsFilter, PageCursor, SearchFilter, SearchResult
from ...domain.models.filters import PAGE_FIELDS
from ...domain.models.types import SortField, SortOrder
from ...domain.predicates import KeysetAfter, Predicate, Related, SortKey, all_of
from ...domain.services.filter_compiler import COMMON_NAMES, GROWING_CONDITIONS, FilterCompiler
from ...domain.services.name_batch_loader import NameBatchLoader
from .mappers import plant_to_domain
from .models import (
    CountryModel,
    PlantCommonNameModel,
    PlantGrowingConditionsModel,
    PlantModel,
    PlantPhysicalCharacteristicsModel,
)
from .predicate_translator import CustomField, PredicateTranslator, RelationJoin

logger = logging.getLogger(__name__)
structured_logger = get_logger(__name__)

TIEBREAK_FIELD = "plant_id"


def country_matches(column: Any) -> CustomField:
    """Country given as UUID or ISO code, resolved inside the same statement."""
    return CustomField(
        lambda value: column.in_(
            select(CountryModel.country_id).where(
                or_(CountryModel.country_id == value, CountryModel.country_code == value)
            )
        )
    )


PLANT_COLUMNS: Dict[str, Any] = {
    "plant_id": PlantModel.plant_id,
    "family_name": PlantModel.family_name,
    "genus_name": PlantModel.genus_name,
    "species_name": PlantModel.species_name,
    "plant_type": PlantModel.plant_type,
    "full_botanical_name": PlantModel.full_botanical_name,
    "created_at": PlantModel.created_at,
    "height_max_m": PlantPhysicalCharacteristicsModel.height_max_m,
    "height_typical_m": PlantPhysicalCharacteristicsModel.height_typical_m,
    "growth_rate": PlantPhysicalCharacteristicsModel.growth_rate,
    "traits": PlantPhysicalCharacteristicsModel.traits,
}

GC = PlantGrowingConditionsModel
GROWING_CONDITION_COLUMNS: Dict[str, Any] = {
    "hardiness_zones": GC.hardiness_zones,
    "heat_zones": GC.heat_zones,
    "sun_requirements": GC.sun_requirements,
    "water_needs": GC.water_needs,
    "soil_drainage": GC.soil_drainage,
    "drought_tolerant": GC.drought_tolerant,
    "salt_tolerant": GC.salt_tolerant,
    "wind_tolerant": GC.wind_tolerant,
    "ph_min": GC.ph_min,
    "ph_max": GC.ph_max,
    "flowering_months": GC.flowering_months,
    "fruiting_months": GC.fruiting_months,
    "confidence": GC.confidence,
    "country_id": country_matches(GC.country_id),
}

PLANT_RELATIONS: Dict[str, RelationJoin] = {
    GROWING_CONDITIONS: RelationJoin(
        entity=GC,
        correlate=GC.plant_id == PlantModel.plant_id,
        columns=GROWING_CONDITION_COLUMNS,
    ),
    COMMON_NAMES: RelationJoin(
        entity=PlantCommonNameModel,
        correlate=PlantCommonNameModel.plant_id == PlantModel.plant_id,
        columns={"common_name": PlantCommonNameModel.common_name},
    ),
}


def sort_keys_for(sort_by: str, sort_order: str, has_text: bool) -> Tuple[SortKey, ...]:
    """
    Resolve a requested ordering to stored sort keys (plant_id is appended separately).

    Common-name ordering falls back to botanical name because the displayed name
    depends on the request locale. Relevance with text orders by botanical name in
    the requested direction; relevance without text is creation order.
    """
    descending = sort_order == SortOrder.DESC.value
    if sort_by == SortField.RELEVANCE.value:
        if has_text:
            return (SortKey("full_botanical_name", descending),)
        return (SortKey("created_at", descending),)
    if sort_by in (SortField.BOTANICAL_NAME.value, SortField.COMMON_NAME.value):
        return (SortKey("full_botanical_name", descending),)
    if sort_by == SortField.FAMILY_NAME.value:
        return tuple(SortKey(f, descending) for f in ("family_name", "genus_name", "species_name"))
    if sort_by == SortField.GENUS_NAME.value:
        return tuple(SortKey(f, descending) for f in ("genus_name", "species_name"))
    return (SortKey("created_at", descending),)


def _canonical_plant_id(value: str) -> Optional[str]:
    try:
        return str(uuid.UUID(value))
    except (ValueError, AttributeError, TypeError):
        return None


class PlantSearchComposer:
    """
    Composes filtered, ordered, keyset-paginated plant queries.
    """

    def __init__(
        self,
        session_manager: DatabaseSessionManager,
        compiler: FilterCompiler,
        batch_loader: NameBatchLoader,
    ):
        self.session_manager = session_manager
        self.compiler = compiler
        self.batch_loader = batch_loader

    @property
    def translator(self) -> PredicateTranslator:
        return PredicateTranslator(PLANT_COLUMNS, PLANT_RELATIONS, dialect=self.session_manager.dialect_name)

    # =========================================================================
    # PUBLIC OPERATIONS
    # =========================================================================

    async def search(
        self,
        query_text: Optional[str],
        search_filter: SearchFilter,
        language_id: str,
        country_id: Optional[str] = None,
    ) -> SearchResult:
        """
        One page of plants matching free text and structured filters.

        Raises:
            ValidationError: On a contradictory filter or a foreign cursor
            DatabaseError: On store failure
        """
        predicate = self.compiler.compile_search(search_filter, query_text)
        keys = sort_keys_for(search_filter.sort_by, search_filter.sort_order, bool(query_text))
        signature = self._signature(keys, search_filter.canonical_dict(exclude=set(PAGE_FIELDS)), query_text)
        return await self._page(
            predicate=predicate,
            keys=keys,
            signature=signature,
            cursor=search_filter.cursor,
            limit=search_filter.limit,
            language_id=language_id,
            country_id=country_id,
            query_text=query_text,
            operation="search",
        )

    async def count(self, query_text: Optional[str], search_filter: SearchFilter) -> int:
        predicate = self.compiler.compile_search(search_filter, query_text)
        return await self._count(self.translator.translate(predicate), "count")

    async def find_by_growing_conditions(
        self,
        conditions_filter: GrowingConditionsFilter,
        language_id: str,
        country_id: Optional[str] = None,
    ) -> SearchResult:
        """
        Plants with at least one growing-condition assertion satisfying every
        condition of the filter, ordered by plant id.
        """
        predicate = all_of([
            Related(GROWING_CONDITIONS, self.compiler.compile_growing_conditions(conditions_filter))
        ])
        signature = self._signature((), conditions_filter.canonical_dict(exclude={"limit", "cursor"}), None)
        return await self._page(
            predicate=predicate,
            keys=(),
            signature=signature,
            cursor=conditions_filter.cursor,
            limit=conditions_filter.limit,
            language_id=language_id,
            country_id=country_id,
            query_text=None,
            operation="growing_conditions_search",
        )

    # =========================================================================
    # PAGINATION
    # =========================================================================

    @staticmethod
    def _signature(keys: Sequence[SortKey], canonical: Dict[str, Any], query_text: Optional[str]) -> str:
        payload = {
            "order": [[k.field, k.descending] for k in keys],
            "filter": canonical,
            "q": query_text or "",
        }
        encoded = json.dumps(payload, sort_keys=True, separators=(",", ":"))
        return hashlib.md5(encoded.encode("utf-8")).hexdigest()[:16]

    @staticmethod
    def _keyset(cursor: Optional[str], keys: Tuple[SortKey, ...], signature: str) -> Optional[Predicate]:
        if not cursor:
            return None
        # A bare identifier is the id-ordered form of the cursor
        plant_id = _canonical_plant_id(cursor)
        if plant_id is not None:
            if keys:
                raise ValidationError(
                    message="A plant id cursor is only valid for plant id ordering",
                    field="cursor",
                    value=cursor,
                )
            return KeysetAfter((), (), TIEBREAK_FIELD, plant_id)
        page = PageCursor.decode(cursor, signature)
        return KeysetAfter(keys, tuple(page.values), TIEBREAK_FIELD, page.plant_id)

    @staticmethod
    def _next_cursor(row: PlantModel, keys: Tuple[SortKey, ...], signature: str) -> str:
        if not keys:
            return row.plant_id
        values = tuple(getattr(row, key.field) for key in keys)
        return PageCursor(signature=signature, values=values, plant_id=row.plant_id).encode()

    @staticmethod
    def _order_by(keys: Tuple[SortKey, ...]) -> List[ColumnElement]:
        clauses = []
        for key in keys:
            column = PLANT_COLUMNS[key.field]
            clauses.append(column.desc() if key.descending else column.asc())
        clauses.append(PlantModel.plant_id.asc())
        return clauses

    async def _page(
        self,
        predicate: Predicate,
        keys: Tuple[SortKey, ...],
        signature: str,
        cursor: Optional[str],
        limit: int,
        language_id: str,
        country_id: Optional[str],
        query_text: Optional[str],
        operation: str,
    ) -> SearchResult:
        translator = self.translator
        match = translator.translate(predicate)
        bound = self._keyset(cursor, keys, signature)
        condition = match if bound is None else translator.translate(all_of([predicate, bound]))

        stmt = (
            select(PlantModel)
            .outerjoin(
                PlantPhysicalCharacteristicsModel,
                PlantPhysicalCharacteristicsModel.plant_id == PlantModel.plant_id,
            )
            .where(condition)
            .order_by(*self._order_by(keys))
            .limit(limit + 1)
        )

        started = time.perf_counter()
        async with self.session_manager.get_read_only_session() as session:
            result = await execute_bounded(session, stmt, operation)
            rows = list(result.scalars().all())
        structured_logger.performance.log_database_query(
            operation, "plants", (time.perf_counter() - started) * 1000, len(rows)
        )

        has_more = len(rows) > limit
        rows = rows[:limit]
        total = await self._count(match, f"{operation}_count")

        plants = await self.batch_loader.attach_names(
            [plant_to_domain(row) for row in rows], language_id, country_id
        )
        next_cursor = self._next_cursor(rows[-1], keys, signature) if has_more else None

        logger.debug(f"{operation}: {len(plants)} of {total} plants (has_more={has_more})")
        return SearchResult(
            items=plants,
            total=total,
            limit=limit,
            next_cursor=next_cursor,
            has_more=has_more,
            query=query_text,
        )

    async def _count(self, match: ColumnElement, operation: str) -> int:
        stmt = (
            select(func.count(distinct(PlantModel.plant_id)))
            .select_from(PlantModel)
            .outerjoin(
                PlantPhysicalCharacteristicsModel,
                PlantPhysicalCharacteristicsModel.plant_id == PlantModel.plant_id,
            )
            .where(match)
        )
        async with self.session_manager.get_read_only_session() as session:
            result = await execute_bounded(session, stmt, operation)
            return int(result.scalar_one())
