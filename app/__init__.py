# 📄 File: app/__init__.py
#
# 🧭 Purpose (Layman Explanation):
# Tells Python this 'app' folder holds the plant catalog engine and records its version.
#
# 🧪 Purpose (Technical Summary):
# Application package initialization with version info and package metadata for the
# localized plant catalog query and caching engine.
#
# 🔗 Dependencies:
# - Python packaging system
#
# 🔄 Connected Modules / Calls From:
# - Package imports throughout the application
# - pyproject.toml (distribution metadata)

"""
Plant Catalog Engine - Localized Catalog Query & Caching Engine

Localized plant reads, keyset-paginated search, growing-condition and
companion queries over PostgreSQL, with a Redis read-through cache.
"""

__version__ = "1.0.0"
__title__ = "Plant Catalog Engine"
__description__ = "Localized plant catalog query and caching engine"
__license__ = "MIT"

__all__ = [
    "__version__",
    "__title__",
    "__description__",
    "__license__",
]
