# 📄 File: app/modules/plant_catalog/application/handlers/__init__.py
# 🧭 Purpose (Layman Explanation):
# The workers that carry out catalog questions and changes.
# 🧪 Purpose (Technical Summary):
# Handlers package for the CQRS command and query handlers.
# 🔗 Dependencies:
# application/commands, application/queries, domain repositories
# 🔄 Connected Modules / Calls From:
# application/engine.py

"""
Plant Catalog Handlers

Command Handlers: create, bulk create, update, delete, localized names, companions
Query Handlers: point and batch reads, search, count, growing conditions,
physical characteristics, companions, compatibility, languages
"""

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from .command_handlers import (
        AddLocalizedNameCommandHandler,
        BulkCreatePlantsCommandHandler,
        CreateCompanionCommandHandler,
        CreatePlantCommandHandler,
        DeleteCompanionCommandHandler,
        DeletePlantCommandHandler,
        UpdatePlantCommandHandler,
    )
    from .query_handlers import (
        CheckCompatibilityQueryHandler,
        CountPlantsQueryHandler,
        GetCompanionsQueryHandler,
        GetGrowingConditionsQueryHandler,
        GetPhysicalCharacteristicsQueryHandler,
        GetPlantByBotanicalNameQueryHandler,
        GetPlantQueryHandler,
        GetPlantsByIdsQueryHandler,
        GrowingConditionsSearchQueryHandler,
        ListLanguagesQueryHandler,
        ResolveNamesQueryHandler,
        SearchPlantsQueryHandler,
    )
