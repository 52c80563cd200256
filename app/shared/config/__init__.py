# 📄 File: app/shared/config/__init__.py
#
# 🧭 Purpose (Layman Explanation):
# Contains the settings that tell the catalog how to reach its database and cache and
# how long cached answers stay fresh.
#
# 🧪 Purpose (Technical Summary):
# Configuration package initialization with exports for settings management and
# Redis/cache configuration.
#
# 🔗 Dependencies:
# - settings.py (application settings)
# - redis.py (connection pool, TTL table)
#
# 🔄 Connected Modules / Calls From:
# - app.modules.plant_catalog.application.engine
# - Infrastructure components

"""
Configuration Management Package

Handles all engine configuration including:
- Environment-based settings
- Database connection configuration
- Caching and Redis configuration
"""

from .redis import CacheConfig, RedisConfig
from .settings import Settings, get_settings

__all__ = [
    "CacheConfig",
    "RedisConfig",
    "get_settings",
    "Settings",
]
