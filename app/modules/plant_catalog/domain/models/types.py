# 📄 File: app/modules/plant_catalog/domain/models/types.py
# 🧭 Purpose (Layman Explanation):
# The fixed vocabularies of the catalog: what kinds of plants exist, how much sun or
# water they like, how sure we are about a growing fact, and how results can be sorted.
# 🧪 Purpose (Technical Summary):
# String enumerations shared by domain models, filters, predicates and the SQLAlchemy
# schema, including the ordered ConfidenceLevel used for minimum-confidence filtering.
# 🔗 Dependencies:
# enum
# 🔄 Connected Modules / Calls From:
# plant.py, characteristics.py, companion.py, filters.py, filter_compiler.py, models (DB)

from enum import Enum
from typing import Dict


class PlantType(str, Enum):
    """Growth habit classification"""
    TREE = "tree"
    SHRUB = "shrub"
    PERENNIAL = "perennial"
    ANNUAL = "annual"
    BIENNIAL = "biennial"
    BULB = "bulb"
    GRASS = "grass"
    FERN = "fern"
    CLIMBER = "climber"
    AQUATIC = "aquatic"
    SUCCULENT = "succulent"
    PALM = "palm"
    BAMBOO = "bamboo"
    ORCHID = "orchid"
    VINE = "vine"


class ConfidenceLevel(str, Enum):
    """How certain a growing-condition assertion is, weakest first"""
    VERY_LOW = "very_low"
    LOW = "low"
    MODERATE = "moderate"
    PROBABLE = "probable"
    VERY_HIGH = "very_high"
    CONFIRMED = "confirmed"

    @property
    def rank(self) -> int:
        return CONFIDENCE_RANKS[self.value]

    def at_least(self, minimum: "ConfidenceLevel") -> bool:
        return self.rank >= ConfidenceLevel(minimum).rank


CONFIDENCE_RANKS: Dict[str, int] = {
    level.value: rank for rank, level in enumerate(ConfidenceLevel, start=1)
}


class SunRequirement(str, Enum):
    FULL_SUN = "full_sun"
    PARTIAL_SUN = "partial_sun"
    PARTIAL_SHADE = "partial_shade"
    FULL_SHADE = "full_shade"
    MORNING_SUN = "morning_sun"
    AFTERNOON_SHADE = "afternoon_shade"
    DAPPLED_SHADE = "dappled_shade"


class WaterNeeds(str, Enum):
    VERY_DRY = "very_dry"
    DRY = "dry"
    MODERATE = "moderate"
    MOIST = "moist"
    WET = "wet"
    AQUATIC = "aquatic"
    BOG = "bog"


class SoilDrainage(str, Enum):
    VERY_WELL_DRAINED = "very_well_drained"
    WELL_DRAINED = "well_drained"
    MODERATE_DRAINAGE = "moderate_drainage"
    POORLY_DRAINED = "poorly_drained"
    WATERLOGGED = "waterlogged"


class GrowthRate(str, Enum):
    VERY_SLOW = "very_slow"
    SLOW = "slow"
    MODERATE = "moderate"
    FAST = "fast"
    VERY_FAST = "very_fast"


class RelationshipType(str, Enum):
    """Companion planting classification"""
    BENEFICIAL = "beneficial"
    ANTAGONISTIC = "antagonistic"
    NEUTRAL = "neutral"


class CompanionBenefit(str, Enum):
    PEST_CONTROL = "pest_control"
    NITROGEN_FIXATION = "nitrogen_fixation"
    POLLINATOR_ATTRACTION = "pollinator_attraction"
    SHADE_PROVISION = "shade_provision"
    WIND_PROTECTION = "wind_protection"
    GROUND_COVER = "ground_cover"
    WEED_SUPPRESSION = "weed_suppression"
    MOISTURE_RETENTION = "moisture_retention"
    SOIL_IMPROVEMENT = "soil_improvement"
    DISEASE_RESISTANCE = "disease_resistance"


class SortField(str, Enum):
    BOTANICAL_NAME = "botanical_name"
    COMMON_NAME = "common_name"
    FAMILY_NAME = "family_name"
    GENUS_NAME = "genus_name"
    RELEVANCE = "relevance"
    CREATED_AT = "created_at"


class SortOrder(str, Enum):
    ASC = "asc"
    DESC = "desc"
