# 📄 File: app/shared/infrastructure/__init__.py
#
# 🧭 Purpose (Layman Explanation):
# Shared plumbing for talking to the database.
#
# 🧪 Purpose (Technical Summary):
# Shared infrastructure package (async database engine and session management).
#
# 🔗 Dependencies:
# - SQLAlchemy (async)
#
# 🔄 Connected Modules / Calls From:
# - app.modules.plant_catalog.infrastructure
