# 📄 File: app/modules/plant_catalog/domain/models/companion.py
# 🧭 Purpose (Layman Explanation):
# Records which plants grow well (or badly) next to each other, why, and how far apart
# they should be planted.
# 🧪 Purpose (Technical Summary):
# CompanionRelationship entity over an unordered plant pair with classification, benefit
# tags and spacing, enforcing distinct plants and optimal <= maximum spacing.
# 🔗 Dependencies:
# pydantic, datetime, uuid, types.py
# 🔄 Connected Modules / Calls From:
# plant_repository.py, plant_repository_impl.py, cached_plant_repository.py,
# command_handlers.py, query_handlers.py

import uuid
from datetime import datetime, timezone
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from .types import RelationshipType


class CompanionRelationship(BaseModel):
    """Companion planting relationship between two distinct plants."""

    model_config = ConfigDict(use_enum_values=True)

    relationship_id: str = Field(default_factory=lambda: str(uuid.uuid4()))
    plant_a_id: str
    plant_b_id: str
    relationship_type: RelationshipType
    benefits: List[str] = Field(default_factory=list)
    optimal_distance_m: Optional[float] = Field(default=None, ge=0)
    max_distance_m: Optional[float] = Field(default=None, ge=0)
    notes: Optional[str] = None
    created_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))

    @field_validator("relationship_id", "plant_a_id", "plant_b_id")
    @classmethod
    def normalize_uuid(cls, v: str) -> str:
        try:
            return str(uuid.UUID(v))
        except (ValueError, AttributeError) as e:
            raise ValueError(f"invalid UUID: {v}") from e

    @field_validator("benefits")
    @classmethod
    def dedupe_benefits(cls, v: List[str]) -> List[str]:
        return list(dict.fromkeys(b.strip() for b in v if b and b.strip()))

    @model_validator(mode="after")
    def check_pair(self) -> "CompanionRelationship":
        if self.plant_a_id == self.plant_b_id:
            raise ValueError("a plant cannot be its own companion")
        if (
            self.optimal_distance_m is not None
            and self.max_distance_m is not None
            and self.optimal_distance_m > self.max_distance_m
        ):
            raise ValueError("optimal distance cannot exceed max distance")
        return self

    def involves(self, plant_id: str) -> bool:
        return plant_id in (self.plant_a_id, self.plant_b_id)

    def other_plant_id(self, plant_id: str) -> Optional[str]:
        """The partner of `plant_id` in this pair, or None if it is not involved."""
        if plant_id == self.plant_a_id:
            return self.plant_b_id
        if plant_id == self.plant_b_id:
            return self.plant_a_id
        return None

    @property
    def recommended_distance_m(self) -> Optional[float]:
        if self.optimal_distance_m is not None:
            return self.optimal_distance_m
        return self.max_distance_m

    @property
    def is_beneficial(self) -> bool:
        return self.relationship_type == RelationshipType.BENEFICIAL.value

    @property
    def is_antagonistic(self) -> bool:
        return self.relationship_type == RelationshipType.ANTAGONISTIC.value

    @property
    def is_neutral(self) -> bool:
        return self.relationship_type == RelationshipType.NEUTRAL.value

    def has_benefit(self, benefit: str) -> bool:
        return getattr(benefit, "value", benefit) in self.benefits
