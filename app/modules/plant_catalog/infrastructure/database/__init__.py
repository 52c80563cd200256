# 📄 File: app/modules/plant_catalog/infrastructure/database/__init__.py
# 🧭 Purpose (Layman Explanation):
# The catalog's database tables and the code that reads and writes them.
# 🧪 Purpose (Technical Summary):
# Persistence package: ORM models, predicate translation, search composer and
# repository implementations.
# 🔗 Dependencies:
# SQLAlchemy (async)
# 🔄 Connected Modules / Calls From:
# application/engine.py, tests

from .localized_name_repository_impl import LocalizedNameRepositoryImpl
from .lookup_repository_impl import LookupRepositoryImpl
from .plant_repository_impl import PlantRepositoryImpl

__all__ = ["LocalizedNameRepositoryImpl", "LookupRepositoryImpl", "PlantRepositoryImpl"]
