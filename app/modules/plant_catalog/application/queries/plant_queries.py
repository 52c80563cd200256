# 📄 File: app/modules/plant_catalog/application/queries/plant_queries.py
# 🧭 Purpose (Layman Explanation):
# The questions people can ask the plant catalog: "show me this plant", "find plants like
# this", "what grows well next to it", always in the language they asked in.
#
# 🧪 Purpose (Technical Summary):
# CQRS query objects for catalog reads. Each carries the requester's locale and an
# optional per-operation timeout; identifiers are validated and normalized by the query
# handlers before any cache or store access.
#
# 🔗 Dependencies:
# - pydantic for query structure
# - domain filter models
#
# 🔄 Connected Modules / Calls From:
# - application/handlers/query_handlers.py
# - application/engine.py (builds queries from engine calls)

"""
Plant Catalog Queries

Locale fields:
- language_id: language row UUID or ISO 639 code (required)
- country_id: country row UUID or ISO 3166 alpha-2 code (optional)

Every query accepts `timeout` (seconds); it bounds every store and cache
call made while answering it.
"""

from typing import List, Optional

from pydantic import BaseModel, Field

from ...domain.models import CompanionFilter, GrowingConditionsFilter, SearchFilter


class CatalogQuery(BaseModel):
    """Base for all catalog queries."""

    timeout: Optional[float] = Field(
        default=None,
        gt=0,
        description="Seconds allowed for the whole operation",
        examples=[2.5],
    )


class LocalizedQuery(CatalogQuery):
    language_id: str = Field(..., description="Language UUID or ISO 639 code", examples=["en"])
    country_id: Optional[str] = Field(
        default=None,
        description="Country UUID or ISO 3166 alpha-2 code",
        examples=["MX"],
    )


class GetPlantQuery(LocalizedQuery):
    """Query for a single plant with localized names."""

    plant_id: str = Field(..., description="Plant UUID")
    include_details: bool = Field(
        default=False,
        description="Attach physical characteristics, and growing conditions when a country is given",
    )


class GetPlantByBotanicalNameQuery(LocalizedQuery):
    """Query for the plant with an exact (case-insensitive) botanical name."""

    botanical_name: str = Field(..., max_length=300, examples=["Solanum lycopersicum"])


class GetPlantsByIdsQuery(LocalizedQuery):
    """Query for many plants in one batched fetch."""

    plant_ids: List[str] = Field(default_factory=list, description="Plant UUIDs; order is preserved")


class ResolveNamesQuery(LocalizedQuery):
    plant_id: str = Field(..., description="Plant UUID")


class SearchPlantsQuery(LocalizedQuery):
    """Free-text plus structured search."""

    query_text: Optional[str] = Field(
        default=None,
        description="Free text over botanical and common names (any language)",
        examples=["tomato"],
    )
    search_filter: SearchFilter = Field(default_factory=SearchFilter)


class CountPlantsQuery(CatalogQuery):
    query_text: Optional[str] = None
    search_filter: SearchFilter = Field(default_factory=SearchFilter)


class GrowingConditionsSearchQuery(LocalizedQuery):
    """Plants with a growing-condition assertion matching the filter."""

    conditions_filter: GrowingConditionsFilter = Field(default_factory=GrowingConditionsFilter)


class GetGrowingConditionsQuery(CatalogQuery):
    plant_id: str = Field(..., description="Plant UUID")
    country_id: Optional[str] = Field(default=None, description="Country UUID or code; None for global")


class GetPhysicalCharacteristicsQuery(CatalogQuery):
    plant_id: str = Field(..., description="Plant UUID")


class GetCompanionsQuery(CatalogQuery):
    """Companion relationships of one plant, optionally narrowed."""

    plant_id: str = Field(..., description="Plant UUID")
    companion_filter: Optional[CompanionFilter] = None


class CheckCompatibilityQuery(CatalogQuery):
    """How two plants get along when planted together."""

    plant_a_id: str = Field(..., description="First plant UUID")
    plant_b_id: str = Field(..., description="Second plant UUID")


class ListLanguagesQuery(CatalogQuery):
    pass
