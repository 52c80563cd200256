# 📄 File: app/shared/__init__.py
#
# 🧭 Purpose (Layman Explanation):
# Marks the 'shared' folder as a package of common tools the catalog module relies on,
# like database connections, settings and logging.
#
# 🧪 Purpose (Technical Summary):
# Shared kernel package initialization for configuration, infrastructure and
# cross-cutting concerns used by the catalog module.
#
# 🔗 Dependencies:
# - Python packaging system
#
# 🔄 Connected Modules / Calls From:
# - app.modules.plant_catalog

"""
Shared Kernel - Common Utilities and Infrastructure

- Configuration management (pydantic-settings, Redis pool, cache TTLs)
- Database infrastructure (async SQLAlchemy engine and sessions)
- Exception hierarchy and deadline propagation
- Structured logging and input validators
"""

__all__ = []
