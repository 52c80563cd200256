# 📄 File: app/modules/plant_catalog/domain/models/plant.py
# 🧭 Purpose (Layman Explanation):
# Defines what a plant is in the catalog: its scientific name pieces, the full botanical
# name built from them, and the everyday names people use for it in their language.
# 🧪 Purpose (Technical Summary):
# Plant and LocalizedName domain entities. The full botanical name is always derived from
# genus, species and cultivar and recomputed on validation and assignment; common names
# are populated per request by the localization resolver and never persisted on Plant.
# 🔗 Dependencies:
# pydantic, datetime, uuid, typing, types.py, characteristics.py
# 🔄 Connected Modules / Calls From:
# plant_repository.py, plant_repository_impl.py, name_batch_loader.py,
# cached_plant_repository.py, command_handlers.py, query_handlers.py

import uuid
from datetime import datetime, timezone
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from .characteristics import GrowingConditions, PhysicalCharacteristics
from .types import PlantType


def generate_botanical_name(genus_name: str, species_name: str, cultivar_name: Optional[str] = None) -> str:
    """Genus species 'Cultivar'"""
    name = f"{genus_name} {species_name}"
    if cultivar_name:
        name += f" '{cultivar_name}'"
    return name


class Plant(BaseModel):
    """
    Plant domain model.

    Taxonomy fields are denormalized names; species_id/cultivar_id keep the
    link to the taxonomy tables.
    """

    model_config = ConfigDict(use_enum_values=True, validate_assignment=True)

    plant_id: str = Field(default_factory=lambda: str(uuid.uuid4()))
    species_id: Optional[str] = None
    cultivar_id: Optional[str] = None

    family_name: str = Field(min_length=1, max_length=100)
    genus_name: str = Field(min_length=1, max_length=100)
    species_name: str = Field(min_length=1, max_length=100)
    cultivar_name: Optional[str] = Field(default=None, max_length=100)
    plant_type: Optional[PlantType] = None

    full_botanical_name: str = ""

    # Per-request, never persisted on the plant row
    common_names: List[str] = Field(default_factory=list)

    growing_conditions: Optional[GrowingConditions] = None
    physical_characteristics: Optional[PhysicalCharacteristics] = None

    created_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))
    updated_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))

    @field_validator("family_name", "genus_name", "species_name", "cultivar_name", mode="before")
    @classmethod
    def strip_names(cls, v):
        if isinstance(v, str):
            v = v.strip()
        return v

    @field_validator("plant_id")
    @classmethod
    def normalize_plant_id(cls, v: str) -> str:
        try:
            return str(uuid.UUID(v))
        except (ValueError, AttributeError) as e:
            raise ValueError(f"plant_id must be a UUID: {v}") from e

    @model_validator(mode="after")
    def derive_botanical_name(self) -> "Plant":
        expected = generate_botanical_name(self.genus_name, self.species_name, self.cultivar_name or None)
        if self.full_botanical_name != expected:
            # object.__setattr__ avoids re-entering validate_assignment
            object.__setattr__(self, "full_botanical_name", expected)
        return self

    def generate_botanical_name(self) -> str:
        return generate_botanical_name(self.genus_name, self.species_name, self.cultivar_name or None)

    def update_botanical_name(self) -> None:
        object.__setattr__(self, "full_botanical_name", self.generate_botanical_name())

    @property
    def is_cultivar(self) -> bool:
        return bool(self.cultivar_name)

    @property
    def display_name(self) -> str:
        """First localized common name, or the botanical name."""
        if self.common_names and self.common_names[0]:
            return self.common_names[0]
        return self.full_botanical_name

    def has_common_name(self, name: str) -> bool:
        wanted = name.strip().lower()
        return any(cn.lower() == wanted for cn in self.common_names)

    def search_score(self, query: str) -> int:
        """Heuristic in-process relevance of this plant for a free-text query."""
        query = query.strip().lower()
        score = 0

        botanical = self.full_botanical_name.lower()
        if botanical == query:
            score += 100
        elif query in botanical:
            score += 50

        genus = self.genus_name.lower()
        if genus == query:
            score += 80
        elif genus.startswith(query):
            score += 40

        species = self.species_name.lower()
        if species == query:
            score += 70
        elif species.startswith(query):
            score += 35

        for i, cn in enumerate(self.common_names):
            cn = cn.lower()
            if cn == query:
                score += 90 if i == 0 else 60
            elif query in cn:
                score += 30

        if self.family_name.lower() == query:
            score += 20

        return score


class LocalizedName(BaseModel):
    """
    A common name for a plant in one language, optionally tied to one country.

    country_id = None is the language's global name. Unique on
    (plant_id, language_id, country_id, common_name).
    """

    model_config = ConfigDict(frozen=True)

    plant_id: str
    language_id: str
    country_id: Optional[str] = None
    common_name: str = Field(min_length=1, max_length=200)
    is_primary: bool = False

    @field_validator("common_name")
    @classmethod
    def strip_name(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("common_name cannot be blank")
        return v

    @property
    def is_global(self) -> bool:
        return self.country_id is None
