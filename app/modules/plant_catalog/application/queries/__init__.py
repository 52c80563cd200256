# 📄 File: app/modules/plant_catalog/application/queries/__init__.py
# 🧭 Purpose (Layman Explanation):
# The questions the catalog can answer.
# 🧪 Purpose (Technical Summary):
# Query package exports.
# 🔗 Dependencies:
# plant_queries.py
# 🔄 Connected Modules / Calls From:
# application/handlers/query_handlers.py, application/engine.py

from .plant_queries import (
    CatalogQuery,
    CheckCompatibilityQuery,
    CountPlantsQuery,
    GetCompanionsQuery,
    GetGrowingConditionsQuery,
    GetPhysicalCharacteristicsQuery,
    GetPlantByBotanicalNameQuery,
    GetPlantQuery,
    GetPlantsByIdsQuery,
    GrowingConditionsSearchQuery,
    ListLanguagesQuery,
    LocalizedQuery,
    ResolveNamesQuery,
    SearchPlantsQuery,
)

__all__ = [
    "CatalogQuery",
    "CheckCompatibilityQuery",
    "CountPlantsQuery",
    "GetCompanionsQuery",
    "GetGrowingConditionsQuery",
    "GetPhysicalCharacteristicsQuery",
    "GetPlantByBotanicalNameQuery",
    "GetPlantQuery",
    "GetPlantsByIdsQuery",
    "GrowingConditionsSearchQuery",
    "ListLanguagesQuery",
    "LocalizedQuery",
    "ResolveNamesQuery",
    "SearchPlantsQuery",
]
