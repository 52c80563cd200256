# 📄 File: app/modules/plant_catalog/__init__.py
# 🧭 Purpose (Layman Explanation):
# The plant catalog: every plant species and variety, their everyday names in many
# languages, how they like to grow, and which plants make good neighbours.
# 🧪 Purpose (Technical Summary):
# Package initialization for the catalog module (domain-driven layout with CQRS
# application layer). Exposes the CatalogEngine facade and its composition root.
# 🔗 Dependencies:
# SQLAlchemy (async), redis.asyncio, pydantic, app.shared
# 🔄 Connected Modules / Calls From:
# Host applications, tests

"""
Plant Catalog Module

Architecture follows Domain-Driven Design:
- Domain: entities, filters, predicates, repository contracts, localization services
- Application: queries, commands, handlers and the CatalogEngine facade
- Infrastructure: SQLAlchemy persistence and the Redis read-through cache
"""

from .application.engine import CatalogEngine, build_catalog_engine

__version__ = "1.0.0"
__module_name__ = "plant_catalog"

__all__ = ["CatalogEngine", "build_catalog_engine"]
