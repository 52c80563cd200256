# 📄 File: app/modules/plant_catalog/domain/__init__.py
# 🧭 Purpose (Layman Explanation):
# The catalog's own rules, independent of any database or cache.
# 🧪 Purpose (Technical Summary):
# Domain layer package: models, predicate algebra, repository contracts, services.
# 🔗 Dependencies:
# pydantic
# 🔄 Connected Modules / Calls From:
# Application and infrastructure layers
