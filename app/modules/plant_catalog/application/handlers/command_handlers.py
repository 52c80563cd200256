# 📄 File: app/modules/plant_catalog/application/handlers/command_handlers.py
# 🧭 Purpose (Layman Explanation):
# The "action takers" of the catalog: they check a requested change, write it to the
# plant store, and make sure no stale cached answer survives it.
#
# 🧪 Purpose (Technical Summary):
# CQRS command handlers for catalog writes. Commands are turned into domain entities
# under model_validation (pydantic errors become the catalog ValidationError), then the
# repository performs the write; the caching decorator handles invalidation.
#
# 🔗 Dependencies:
# - application/commands/plant_commands.py
# - domain repositories (PlantRepository)
# - app.shared.core.deadline, app.shared.utils.validators
#
# 🔄 Connected Modules / Calls From:
# - application/engine.py
# - tests

"""
Plant Catalog Command Handlers

Command Handlers:
- CreatePlantCommandHandler / BulkCreatePlantsCommandHandler
- UpdatePlantCommandHandler
- DeletePlantCommandHandler
- AddLocalizedNameCommandHandler
- CreateCompanionCommandHandler / DeleteCompanionCommandHandler
"""

import logging
from typing import List, Optional

from app.shared.config.settings import Settings
from app.shared.core.deadline import deadline_scope
from app.shared.core.exceptions import CompanionNotFoundError, PlantNotFoundError
from app.shared.utils.validators import (
    model_validation,
    require_country_id,
    require_language_id,
    require_plant_id,
)

from ...domain.models import CompanionRelationship, LocalizedName, Plant
from ...domain.repositories.plant_repository import PlantRepository
from ..commands.plant_commands import (
    AddLocalizedNameCommand,
    BulkCreatePlantsCommand,
    CreateCompanionCommand,
    CreatePlantCommand,
    DeleteCompanionCommand,
    DeletePlantCommand,
    UpdatePlantCommand,
)

logger = logging.getLogger(__name__)


class CatalogCommandHandler:
    def __init__(self, repository: PlantRepository, settings: Settings):
        self.repository = repository
        self.settings = settings

    def _deadline(self, timeout: Optional[float]):
        return deadline_scope(timeout if timeout is not None else self.settings.DEFAULT_OPERATION_TIMEOUT)


class CreatePlantCommandHandler(CatalogCommandHandler):
    """
    Handler for plant creation.

    The full botanical name is always derived from genus, species and
    cultivar; a duplicate botanical name is rejected by the repository.
    """

    async def handle(self, command: CreatePlantCommand) -> Plant:
        """
        Raises:
            ValidationError: If the command violates a plant invariant
            DuplicateResourceError: If the botanical name already exists
        """
        with model_validation("plant"):
            plant = command.to_plant()

        with self._deadline(command.timeout):
            created = await self.repository.create(plant)

        logger.info(f"Created plant {created.plant_id} ({created.full_botanical_name})")
        return created


class BulkCreatePlantsCommandHandler(CatalogCommandHandler):
    async def handle(self, command: BulkCreatePlantsCommand) -> List[Plant]:
        """All plants are created in one transaction, or none are."""
        with model_validation("plant"):
            plants = [item.to_plant() for item in command.plants]
        if not plants:
            return []

        with self._deadline(command.timeout):
            created = await self.repository.bulk_create(plants)

        logger.info(f"Bulk created {len(created)} plants")
        return created


class UpdatePlantCommandHandler(CatalogCommandHandler):
    async def handle(self, command: UpdatePlantCommand) -> Plant:
        """
        Apply the fields set on the command to the stored plant.

        Raises:
            PlantNotFoundError: If the plant does not exist
            ValidationError: If the result violates a plant invariant
        """
        plant_id = require_plant_id(command.plant_id)
        changes = command.changes()

        with self._deadline(command.timeout):
            existing = await self.repository.find_by_id(plant_id, self.settings.DEFAULT_LANGUAGE)
            if existing is None:
                raise PlantNotFoundError(plant_id)

            with model_validation("plant"):
                plant = Plant.model_validate({**existing.model_dump(), **changes})

            updated = await self.repository.update(plant)

        logger.info(f"Updated plant {plant_id}: {sorted(changes)}")
        return updated


class DeletePlantCommandHandler(CatalogCommandHandler):
    async def handle(self, command: DeletePlantCommand) -> None:
        """
        Raises:
            PlantNotFoundError: If the plant does not exist
        """
        plant_id = require_plant_id(command.plant_id)

        with self._deadline(command.timeout):
            deleted = await self.repository.delete(plant_id)
        if not deleted:
            raise PlantNotFoundError(plant_id)

        logger.info(f"Deleted plant {plant_id}")


class AddLocalizedNameCommandHandler(CatalogCommandHandler):
    async def handle(self, command: AddLocalizedNameCommand) -> LocalizedName:
        """
        Raises:
            PlantNotFoundError: If the plant does not exist
            ValidationError: If the language or country is unknown
            DuplicateResourceError: If the same name already exists for that locale
        """
        normalized = command.model_copy(
            update={
                "plant_id": require_plant_id(command.plant_id),
                "language_id": require_language_id(command.language_id),
                "country_id": require_country_id(command.country_id),
            }
        )
        with model_validation("localized name"):
            name = normalized.to_name()

        with self._deadline(command.timeout):
            added = await self.repository.add_localized_name(name)

        logger.info(f"Added name '{added.common_name}' to plant {added.plant_id}")
        return added


class CreateCompanionCommandHandler(CatalogCommandHandler):
    async def handle(self, command: CreateCompanionCommand) -> CompanionRelationship:
        """
        Raises:
            ValidationError: If the pair is not distinct or distances are inconsistent
            PlantNotFoundError: If either plant does not exist
            DuplicateResourceError: If the pair already has a relationship
        """
        require_plant_id(command.plant_a_id, field="plant_a_id")
        require_plant_id(command.plant_b_id, field="plant_b_id")
        with model_validation("companion relationship"):
            relationship = command.to_relationship()

        with self._deadline(command.timeout):
            created = await self.repository.create_companion(relationship)

        logger.info(
            f"Created {created.relationship_type} companion relationship "
            f"{created.plant_a_id} <-> {created.plant_b_id}"
        )
        return created


class DeleteCompanionCommandHandler(CatalogCommandHandler):
    async def handle(self, command: DeleteCompanionCommand) -> None:
        """
        Raises:
            CompanionNotFoundError: If no relationship has this identifier
        """
        relationship_id = require_plant_id(command.relationship_id, field="relationship_id")

        with self._deadline(command.timeout):
            deleted = await self.repository.delete_companion(relationship_id)
        if not deleted:
            raise CompanionNotFoundError(relationship_id)

        logger.info(f"Deleted companion relationship {relationship_id}")
