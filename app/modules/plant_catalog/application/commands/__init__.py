# 📄 File: app/modules/plant_catalog/application/commands/__init__.py
# 🧭 Purpose (Layman Explanation):
# The changes the catalog accepts.
# 🧪 Purpose (Technical Summary):
# Command package exports.
# 🔗 Dependencies:
# plant_commands.py
# 🔄 Connected Modules / Calls From:
# application/handlers/command_handlers.py, application/engine.py

from .plant_commands import (
    AddLocalizedNameCommand,
    BulkCreatePlantsCommand,
    CatalogCommand,
    CreateCompanionCommand,
    CreatePlantCommand,
    DeleteCompanionCommand,
    DeletePlantCommand,
    UpdatePlantCommand,
)

__all__ = [
    "AddLocalizedNameCommand",
    "BulkCreatePlantsCommand",
    "CatalogCommand",
    "CreateCompanionCommand",
    "CreatePlantCommand",
    "DeleteCompanionCommand",
    "DeletePlantCommand",
    "UpdatePlantCommand",
]
