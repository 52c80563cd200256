# 📄 File: app/shared/infrastructure/database/__init__.py
#
# 🧭 Purpose (Layman Explanation):
# Opens and manages connections to the catalog database.
#
# 🧪 Purpose (Technical Summary):
# Exports the declarative Base, engine manager, session manager and bounded execution.
#
# 🔗 Dependencies:
# - connection.py, session.py
#
# 🔄 Connected Modules / Calls From:
# - Catalog ORM models and repositories, engine wiring, tests

from .connection import Base, DatabaseConnectionManager
from .session import DatabaseSessionManager, execute_bounded

__all__ = ["Base", "DatabaseConnectionManager", "DatabaseSessionManager", "execute_bounded"]
