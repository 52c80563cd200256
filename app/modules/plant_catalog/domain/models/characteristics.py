# 📄 File: app/modules/plant_catalog/domain/models/characteristics.py
# 🧭 Purpose (Layman Explanation):
# Describes how a plant grows (which climate zones, how much sun, what soil) and what it
# looks like when grown (how tall, how wide, evergreen or not).
# 🧪 Purpose (Technical Summary):
# Value objects (SizeRange, PHRange) and the GrowingConditions / PhysicalCharacteristics
# summaries, with self-validation and typed trait accessors that keep "recorded false"
# distinct from "unknown".
# 🔗 Dependencies:
# pydantic, datetime, typing, types.py
# 🔄 Connected Modules / Calls From:
# plant.py, plant_repository_impl.py, cached_plant_repository.py, query_handlers.py

from datetime import datetime, timezone
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from .types import ConfidenceLevel, GrowthRate, SoilDrainage, SunRequirement, WaterNeeds

# Common trait keys in PhysicalCharacteristics.traits
TRAIT_EVERGREEN = "evergreen"
TRAIT_DECIDUOUS = "deciduous"
TRAIT_TOXIC = "toxic"
TRAIT_FLOWER_FRAGRANT = "flower_fragrant"
TRAIT_FRUIT_EDIBLE = "fruit_edible"
TRAIT_WILDLIFE_VALUE = "wildlife_value"
TRAIT_FLOWER_COLOR = "flower_color"
TRAIT_LEAF_COLOR = "leaf_color"


class SizeRange(BaseModel):
    """Size range in meters; min <= typical <= max when present."""

    model_config = ConfigDict(frozen=True)

    min_m: Optional[float] = Field(default=None, ge=0)
    typical_m: Optional[float] = Field(default=None, ge=0)
    max_m: Optional[float] = Field(default=None, ge=0)

    @model_validator(mode="after")
    def check_ordering(self) -> "SizeRange":
        present = [v for v in (self.min_m, self.typical_m, self.max_m) if v is not None]
        if present != sorted(present):
            raise ValueError("size range must satisfy min <= typical <= max")
        return self

    def contains(self, value: float) -> bool:
        if self.min_m is not None and value < self.min_m:
            return False
        if self.max_m is not None and value > self.max_m:
            return False
        return True


class PHRange(BaseModel):
    """Soil pH preference on the 0-14 scale."""

    model_config = ConfigDict(frozen=True)

    min_ph: float = Field(ge=0, le=14)
    max_ph: float = Field(ge=0, le=14)
    optimal_ph: Optional[float] = Field(default=None, ge=0, le=14)

    @model_validator(mode="after")
    def check_ordering(self) -> "PHRange":
        if self.min_ph > self.max_ph:
            raise ValueError("min_ph must not exceed max_ph")
        if self.optimal_ph is not None and not self.min_ph <= self.optimal_ph <= self.max_ph:
            raise ValueError("optimal_ph must lie within [min_ph, max_ph]")
        return self

    def overlaps(self, low: Optional[float], high: Optional[float]) -> bool:
        """Interval overlap with an optionally open-ended [low, high]."""
        if low is not None and self.max_ph < low:
            return False
        if high is not None and self.min_ph > high:
            return False
        return True


class GrowingConditions(BaseModel):
    """
    A growing-condition assertion for one plant, optionally scoped to a country.

    Tolerance flags are tri-state: None means nothing was recorded.
    """

    model_config = ConfigDict(use_enum_values=True)

    plant_id: str
    country_id: Optional[str] = None
    confidence: ConfidenceLevel = ConfidenceLevel.PROBABLE

    hardiness_zones: List[str] = Field(default_factory=list)
    heat_zones: List[str] = Field(default_factory=list)
    sun_requirements: List[SunRequirement] = Field(default_factory=list)
    water_needs: Optional[WaterNeeds] = None
    soil_drainage: Optional[SoilDrainage] = None
    soil_types: List[str] = Field(default_factory=list)
    ph_preference: Optional[PHRange] = None
    humidity_preference: Optional[float] = Field(default=None, ge=0, le=100)

    drought_tolerant: Optional[bool] = None
    salt_tolerant: Optional[bool] = None
    wind_tolerant: Optional[bool] = None

    flowering_months: List[int] = Field(default_factory=list)
    fruiting_months: List[int] = Field(default_factory=list)

    created_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))

    @field_validator("flowering_months", "fruiting_months")
    @classmethod
    def validate_months(cls, v: List[int]) -> List[int]:
        for month in v:
            if not 1 <= month <= 12:
                raise ValueError(f"invalid month: {month}")
        return sorted(set(v))

    @field_validator("hardiness_zones", "heat_zones", "soil_types")
    @classmethod
    def strip_codes(cls, v: List[str]) -> List[str]:
        codes = [code.strip() for code in v]
        if any(not code or "," in code for code in codes):
            raise ValueError("zone and soil codes must be non-empty and contain no commas")
        return codes

    def supports_hardiness_zone(self, zone: str) -> bool:
        return zone in self.hardiness_zones

    def has_sun_requirement(self, requirement: SunRequirement) -> bool:
        return SunRequirement(requirement).value in self.sun_requirements

    def is_flowering_in_month(self, month: int) -> bool:
        return month in self.flowering_months

    @property
    def confidence_rank(self) -> int:
        return ConfidenceLevel(self.confidence).rank


class PhysicalCharacteristics(BaseModel):
    """Mature size, growth rate and a free-form trait map."""

    model_config = ConfigDict(use_enum_values=True)

    plant_id: str
    mature_height: Optional[SizeRange] = None
    mature_spread: Optional[SizeRange] = None
    growth_rate: Optional[GrowthRate] = None
    traits: Dict[str, Any] = Field(default_factory=dict)
    created_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))

    def trait_flag(self, key: str) -> Optional[bool]:
        """Boolean trait value, or None when the trait is unrecorded or not a bool."""
        value = self.traits.get(key)
        return value if isinstance(value, bool) else None

    @property
    def is_evergreen(self) -> Optional[bool]:
        return self.trait_flag(TRAIT_EVERGREEN)

    @property
    def is_deciduous(self) -> Optional[bool]:
        return self.trait_flag(TRAIT_DECIDUOUS)

    @property
    def is_toxic(self) -> Optional[bool]:
        return self.trait_flag(TRAIT_TOXIC)

    def attracts_wildlife(self, wildlife: str) -> bool:
        value = self.traits.get(TRAIT_WILDLIFE_VALUE) or []
        return wildlife in value if isinstance(value, list) else value == wildlife
