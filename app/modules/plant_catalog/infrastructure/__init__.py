# 📄 File: app/modules/plant_catalog/infrastructure/__init__.py
# 🧭 Purpose (Layman Explanation):
# Where the catalog actually keeps things: the database and the cache.
# 🧪 Purpose (Technical Summary):
# Infrastructure layer package (SQLAlchemy persistence, Redis caching).
# 🔗 Dependencies:
# SQLAlchemy, redis.asyncio
# 🔄 Connected Modules / Calls From:
# application/engine.py
