# 📄 File: app/modules/plant_catalog/infrastructure/database/localized_name_repository_impl.py
# 🧭 Purpose (Layman Explanation):
# Reads and saves the everyday names of plants, fetching the names for a whole list of
# plants in a single database trip.
#
# 🧪 Purpose (Technical Summary):
# SQLAlchemy implementation of LocalizedNameRepository. fetch_names is one grouped
# SELECT ... WHERE plant_id IN (...) with language and country accepted as row id or ISO
# code through inline subqueries, so resolution never costs an extra round trip.
#
# 🔗 Dependencies:
# - SQLAlchemy select
# - infrastructure.database.models, mappers
# - app.shared.infrastructure.database.session
#
# 🔄 Connected Modules / Calls From:
# - name_batch_loader.py (fetch_names), plant_repository_impl.py (add_name)

import logging
import time
import uuid
from typing import Collection, List, Optional

from sqlalchemy import or_, select

from app.shared.core.exceptions import DuplicateResourceError, PlantNotFoundError, ValidationError
from app.shared.infrastructure.database.session import DatabaseSessionManager, execute_bounded
from app.shared.utils.logging import get_logger

from ...domain.models import LocalizedName
from ...domain.repositories.localized_name_repository import LocalizedNameRepository
from .mappers import name_to_domain
from .models import CountryModel, LanguageModel, PlantCommonNameModel, PlantModel

logger = logging.getLogger(__name__)
structured_logger = get_logger(__name__)


def language_ids(language_id: str):
    """Subquery of language row ids matching an id or a code."""
    return select(LanguageModel.language_id).where(
        or_(LanguageModel.language_id == language_id, LanguageModel.language_code == language_id)
    )


def country_ids(country_id: str):
    """Subquery of country row ids matching an id or a code."""
    return select(CountryModel.country_id).where(
        or_(CountryModel.country_id == country_id, CountryModel.country_code == country_id)
    )


class LocalizedNameRepositoryImpl(LocalizedNameRepository):
    """
    SQLAlchemy implementation of the LocalizedNameRepository interface.
    """

    def __init__(self, session_manager: DatabaseSessionManager):
        self.session_manager = session_manager

    async def fetch_names(
        self,
        plant_ids: Collection[str],
        language_id: str,
        country_id: Optional[str] = None,
    ) -> List[LocalizedName]:
        names = PlantCommonNameModel
        conditions = [
            names.plant_id.in_(list(plant_ids)),
            names.language_id.in_(language_ids(language_id)),
        ]
        if country_id:
            conditions.append(or_(names.country_id.is_(None), names.country_id.in_(country_ids(country_id))))
        else:
            conditions.append(names.country_id.is_(None))

        stmt = select(names).where(*conditions)

        started = time.perf_counter()
        async with self.session_manager.get_read_only_session() as session:
            result = await execute_bounded(session, stmt, "fetch_names")
            records = [name_to_domain(row) for row in result.scalars().all()]

        structured_logger.performance.log_database_query(
            "fetch_names", names.__tablename__, (time.perf_counter() - started) * 1000, len(records)
        )
        return records

    async def add_name(self, name: LocalizedName) -> LocalizedName:
        """
        Persist one localized name, resolving language and country codes to row ids.

        Raises:
            PlantNotFoundError: If the plant does not exist
            ValidationError: If the language or country is unknown
            DuplicateResourceError: If the same name already exists in that scope
        """
        async with self.session_manager.get_session() as session:
            plant = await execute_bounded(
                session, select(PlantModel.plant_id).where(PlantModel.plant_id == name.plant_id), "add_name"
            )
            if plant.scalar_one_or_none() is None:
                raise PlantNotFoundError(name.plant_id)

            language = (await execute_bounded(session, language_ids(name.language_id), "add_name")).scalar_one_or_none()
            if language is None:
                raise ValidationError(
                    message=f"Unknown language: {name.language_id}",
                    field="language_id",
                    value=name.language_id,
                )

            country = None
            if name.country_id is not None:
                country = (await execute_bounded(session, country_ids(name.country_id), "add_name")).scalar_one_or_none()
                if country is None:
                    raise ValidationError(
                        message=f"Unknown country: {name.country_id}",
                        field="country_id",
                        value=name.country_id,
                    )

            # NULL countries are distinct under a unique constraint, so check explicitly
            existing = select(PlantCommonNameModel.id).where(
                PlantCommonNameModel.plant_id == name.plant_id,
                PlantCommonNameModel.language_id == language,
                PlantCommonNameModel.country_id.is_(None) if country is None
                else PlantCommonNameModel.country_id == country,
                PlantCommonNameModel.common_name == name.common_name,
            )
            if (await execute_bounded(session, existing, "add_name")).first() is not None:
                raise DuplicateResourceError(
                    message=f"Name '{name.common_name}' already exists for plant {name.plant_id}",
                    resource_type="localized_name",
                    field="common_name",
                    value=name.common_name,
                )

            row = PlantCommonNameModel(
                id=str(uuid.uuid4()),
                plant_id=name.plant_id,
                language_id=language,
                country_id=country,
                common_name=name.common_name,
                is_primary=name.is_primary,
            )
            session.add(row)
            await session.flush()

        logger.info(f"Added localized name '{name.common_name}' to plant {name.plant_id}")
        return name_to_domain(row)
