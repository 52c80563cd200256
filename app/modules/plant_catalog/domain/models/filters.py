# 📄 File: app/modules/plant_catalog/domain/models/filters.py
# 🧭 Purpose (Layman Explanation):
# The "search form" objects: which family, how tall, how much sun, which page. Every box
# is optional, and two forms filled in the same way always look identical to the cache.
# 🧪 Purpose (Technical Summary):
# Immutable pydantic filter models (SearchFilter, GrowingConditionsFilter, CompanionFilter)
# with set-valued fields normalized to sorted unique tuples and a canonical dict encoding
# (none-dropped, enum values) used for cache key hashing.
# 🔗 Dependencies:
# pydantic, typing, types.py, predicates.py
# 🔄 Connected Modules / Calls From:
# filter_compiler.py, plant_search.py, cache_keys.py, query_handlers.py, engine.py

from typing import Any, Dict, Iterable, Optional, Tuple

from pydantic import BaseModel, ConfigDict, Field, field_validator

from app.shared.config.settings import PAGE_SIZE_CEILING

from ..predicates import AnyFieldEquals, Conjunction, Equals, NotEquals, Predicate, all_of
from .types import (
    ConfidenceLevel,
    GrowthRate,
    PlantType,
    RelationshipType,
    SoilDrainage,
    SortField,
    SortOrder,
    SunRequirement,
    WaterNeeds,
)

DEFAULT_LIMIT = 20
MAX_LIMIT = PAGE_SIZE_CEILING

# Fields that shape a page but not the matching set
PAGE_FIELDS = frozenset({"limit", "cursor", "sort_by", "sort_order"})


def _normalize_set(values: Optional[Iterable[Any]]) -> Optional[Tuple[str, ...]]:
    if values is None:
        return None
    if isinstance(values, str):
        values = [values]
    normalized = sorted({getattr(v, "value", v) for v in values})
    return tuple(normalized) or None


class _CanonicalFilter(BaseModel):
    model_config = ConfigDict(frozen=True, use_enum_values=True, extra="forbid")

    def canonical_dict(self, exclude: Optional[set] = None) -> Dict[str, Any]:
        """Order-independent encoding: absent fields dropped, enums as values."""
        return self.model_dump(mode="json", exclude_none=True, exclude=exclude)


class SearchFilter(_CanonicalFilter):
    """
    Structured plant search predicates plus pagination and sort.

    All predicate fields are optional; absent fields impose no constraint.
    """

    # Taxonomy (case-insensitive exact match)
    family_name: Optional[str] = None
    genus_name: Optional[str] = None
    species_name: Optional[str] = None
    plant_type: Optional[PlantType] = None

    # Growing conditions
    hardiness_zone: Optional[str] = None
    sun_requirements: Optional[Tuple[SunRequirement, ...]] = None
    water_needs: Optional[WaterNeeds] = None

    # Physical characteristics
    min_height: Optional[float] = Field(default=None, ge=0)
    max_height: Optional[float] = Field(default=None, ge=0)
    growth_rate: Optional[GrowthRate] = None
    evergreen: Optional[bool] = None
    deciduous: Optional[bool] = None
    toxic: Optional[bool] = None

    # Pagination and sorting
    limit: int = Field(default=DEFAULT_LIMIT, gt=0, le=MAX_LIMIT)
    cursor: Optional[str] = None
    sort_by: SortField = SortField.RELEVANCE
    sort_order: SortOrder = SortOrder.DESC

    @field_validator("sun_requirements", mode="before")
    @classmethod
    def normalize_sun(cls, v):
        return _normalize_set(v)

    @field_validator("family_name", "genus_name", "species_name", "hardiness_zone", "cursor", mode="before")
    @classmethod
    def blank_to_none(cls, v):
        if isinstance(v, str):
            v = v.strip()
            return v or None
        return v


class GrowingConditionsFilter(_CanonicalFilter):
    """Predicates over growing-condition assertions."""

    hardiness_zone: Optional[str] = None
    heat_zone: Optional[str] = None
    sun_requirements: Optional[Tuple[SunRequirement, ...]] = None
    water_needs: Optional[WaterNeeds] = None
    soil_drainage: Optional[SoilDrainage] = None

    drought_tolerant: Optional[bool] = None
    salt_tolerant: Optional[bool] = None
    wind_tolerant: Optional[bool] = None

    min_ph: Optional[float] = Field(default=None, ge=0, le=14)
    max_ph: Optional[float] = Field(default=None, ge=0, le=14)

    flowering_month: Optional[int] = Field(default=None, ge=1, le=12)
    fruiting_month: Optional[int] = Field(default=None, ge=1, le=12)

    min_confidence: ConfidenceLevel = ConfidenceLevel.PROBABLE
    country_id: Optional[str] = None

    limit: int = Field(default=DEFAULT_LIMIT, gt=0, le=MAX_LIMIT)
    cursor: Optional[str] = None

    @field_validator("sun_requirements", mode="before")
    @classmethod
    def normalize_sun(cls, v):
        return _normalize_set(v)

    @field_validator("hardiness_zone", "heat_zone", "country_id", "cursor", mode="before")
    @classmethod
    def blank_to_none(cls, v):
        if isinstance(v, str):
            v = v.strip()
            return v or None
        return v


class CompanionFilter(_CanonicalFilter):
    """
    Narrow predicate over companion relationships, ANDed when present.
    """

    plant_id: Optional[str] = None
    relationship_type: Optional[RelationshipType] = None
    beneficial_only: bool = False
    exclude_neutral: bool = False

    def to_predicate(self) -> Conjunction:
        """Single definition shared by in-process matching and store push-down."""
        parts: list[Optional[Predicate]] = []
        if self.plant_id:
            parts.append(AnyFieldEquals(("plant_a_id", "plant_b_id"), self.plant_id))
        if self.relationship_type:
            parts.append(Equals("relationship_type", self.relationship_type))
        if self.beneficial_only:
            parts.append(Equals("relationship_type", RelationshipType.BENEFICIAL.value))
        if self.exclude_neutral:
            parts.append(NotEquals("relationship_type", RelationshipType.NEUTRAL.value))
        return all_of(parts)

    def matches(self, relationship: Any) -> bool:
        return self.to_predicate().evaluate(relationship)
