# 📄 File: app/modules/plant_catalog/domain/models/__init__.py
# 🧭 Purpose (Layman Explanation):
# Gathers the catalog's core data shapes: plants, their names, growing facts, companions
# and search forms.
# 🧪 Purpose (Technical Summary):
# Package exports for the plant catalog domain models, filters, pagination and enums.
# 🔗 Dependencies:
# Domain model modules in this package
# 🔄 Connected Modules / Calls From:
# Domain services, repositories, application layer, infrastructure layer

from .characteristics import GrowingConditions, PHRange, PhysicalCharacteristics, SizeRange
from .companion import CompanionRelationship
from .filters import CompanionFilter, GrowingConditionsFilter, SearchFilter
from .lookups import Language, LookupSnapshot, PlantFamily, PlantGenus
from .pagination import PageCursor, SearchResult
from .plant import LocalizedName, Plant, generate_botanical_name
from .types import (
    CompanionBenefit,
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

__all__ = [
    "CompanionBenefit",
    "CompanionFilter",
    "CompanionRelationship",
    "ConfidenceLevel",
    "GrowingConditions",
    "GrowingConditionsFilter",
    "GrowthRate",
    "Language",
    "LocalizedName",
    "LookupSnapshot",
    "PHRange",
    "PageCursor",
    "PhysicalCharacteristics",
    "Plant",
    "PlantFamily",
    "PlantGenus",
    "PlantType",
    "RelationshipType",
    "SearchFilter",
    "SearchResult",
    "SizeRange",
    "SoilDrainage",
    "SortField",
    "SortOrder",
    "SunRequirement",
    "WaterNeeds",
    "generate_botanical_name",
]
