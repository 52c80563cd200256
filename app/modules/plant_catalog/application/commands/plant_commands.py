# 📄 File: app/modules/plant_catalog/application/commands/plant_commands.py
# 🧭 Purpose (Layman Explanation):
# The changes people can make to the catalog: add a plant, fix its name, give it a name in
# another language, or record that two plants grow well (or badly) together.
#
# 🧪 Purpose (Technical Summary):
# CQRS command objects for catalog writes. Commands carry raw input; to_* methods build
# the validated domain entities so that entity invariants (botanical name derivation,
# distinct companion pair, distance ordering) are enforced in one place.
#
# 🔗 Dependencies:
# - pydantic for command structure
# - domain models (Plant, LocalizedName, CompanionRelationship, characteristics)
#
# 🔄 Connected Modules / Calls From:
# - application/handlers/command_handlers.py
# - application/engine.py

"""
Plant Catalog Commands

Write commands:
- CreatePlantCommand / BulkCreatePlantsCommand
- UpdatePlantCommand (partial; only fields that were set are applied)
- DeletePlantCommand
- AddLocalizedNameCommand
- CreateCompanionCommand / DeleteCompanionCommand
"""

from typing import Any, Dict, List, Optional

from pydantic import BaseModel, Field

from ...domain.models import (
    CompanionRelationship,
    GrowingConditions,
    LocalizedName,
    PhysicalCharacteristics,
    Plant,
)


class CatalogCommand(BaseModel):
    timeout: Optional[float] = Field(default=None, gt=0, description="Seconds allowed for the whole operation")


class CreatePlantCommand(CatalogCommand):
    """Command for adding a species or cultivar to the catalog."""

    plant_id: Optional[str] = Field(default=None, description="Plant UUID; generated when omitted")
    species_id: Optional[str] = None
    cultivar_id: Optional[str] = None

    family_name: str = Field(..., description="Botanical family", examples=["Solanaceae"])
    genus_name: str = Field(..., description="Genus", examples=["Solanum"])
    species_name: str = Field(..., description="Specific epithet", examples=["lycopersicum"])
    cultivar_name: Optional[str] = Field(default=None, examples=["San Marzano"])
    plant_type: Optional[str] = Field(default=None, examples=["annual"])

    growing_conditions: Optional[Dict[str, Any]] = Field(
        default=None, description="Initial growing-condition assertion"
    )
    physical_characteristics: Optional[Dict[str, Any]] = None

    def to_plant(self) -> Plant:
        """
        Build the domain entity.

        Raises:
            pydantic.ValidationError: If any field violates an entity invariant
        """
        data = self.model_dump(
            exclude={"timeout", "growing_conditions", "physical_characteristics"},
            exclude_none=True,
        )
        plant = Plant(**data)
        if self.growing_conditions is not None:
            plant.growing_conditions = GrowingConditions(**{**self.growing_conditions, "plant_id": plant.plant_id})
        if self.physical_characteristics is not None:
            plant.physical_characteristics = PhysicalCharacteristics(
                **{**self.physical_characteristics, "plant_id": plant.plant_id}
            )
        return plant


class BulkCreatePlantsCommand(CatalogCommand):
    """Create many plants in one transaction."""

    plants: List[CreatePlantCommand] = Field(default_factory=list)


class UpdatePlantCommand(CatalogCommand):
    """
    Partial update of taxonomy fields.

    Only fields explicitly set on the command are applied; setting
    cultivar_name to None removes the cultivar.
    """

    plant_id: str = Field(..., description="Plant UUID")
    species_id: Optional[str] = None
    cultivar_id: Optional[str] = None
    family_name: Optional[str] = None
    genus_name: Optional[str] = None
    species_name: Optional[str] = None
    cultivar_name: Optional[str] = None
    plant_type: Optional[str] = None

    def changes(self) -> Dict[str, Any]:
        return self.model_dump(exclude_unset=True, exclude={"plant_id", "timeout"})


class DeletePlantCommand(CatalogCommand):
    plant_id: str = Field(..., description="Plant UUID")


class AddLocalizedNameCommand(CatalogCommand):
    """Attach a common name in a language, optionally for one country."""

    plant_id: str = Field(..., description="Plant UUID")
    language_id: str = Field(..., description="Language UUID or ISO 639 code", examples=["es"])
    country_id: Optional[str] = Field(default=None, description="Country UUID or ISO code", examples=["MX"])
    common_name: str = Field(..., examples=["Jitomate"])
    is_primary: bool = False

    def to_name(self) -> LocalizedName:
        return LocalizedName(**self.model_dump(exclude={"timeout"}))


class CreateCompanionCommand(CatalogCommand):
    """Record how two plants interact when grown together."""

    plant_a_id: str
    plant_b_id: str
    relationship_type: str = Field(..., examples=["beneficial"])
    benefits: List[str] = Field(default_factory=list, examples=[["pest_control"]])
    optimal_distance_m: Optional[float] = None
    max_distance_m: Optional[float] = None
    notes: Optional[str] = None

    def to_relationship(self) -> CompanionRelationship:
        return CompanionRelationship(**self.model_dump(exclude={"timeout"}))


class DeleteCompanionCommand(CatalogCommand):
    relationship_id: str = Field(..., description="Relationship UUID")
