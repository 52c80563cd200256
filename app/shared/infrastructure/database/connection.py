# 📄 File: app/shared/infrastructure/database/connection.py
#
# 🧭 Purpose (Layman Explanation):
# Opens the line to the catalog database and keeps a small pool of connections ready
# so many people can search plants at the same time.
#
# 🧪 Purpose (Technical Summary):
# Async SQLAlchemy engine management with dialect-aware connection pooling parameters
# and a health check, shared by every catalog repository through the session manager.
#
# 🔗 Dependencies:
# - sqlalchemy (async engine)
# - app/shared/config/settings.py (database configuration)
# - asyncpg (PostgreSQL async driver) in deployment, aiosqlite in tests
#
# 🔄 Connected Modules / Calls From:
# - app/shared/infrastructure/database/session.py (session management)
# - app/modules/plant_catalog/application/engine.py (engine wiring)

import logging
from datetime import datetime, timezone
from typing import Any, Dict, Optional

from sqlalchemy import MetaData, event, text
from sqlalchemy.engine import make_url
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncEngine, create_async_engine
from sqlalchemy.orm import DeclarativeBase

from app.shared.config.settings import Settings, get_settings
from app.shared.core.exceptions import DatabaseError

logger = logging.getLogger(__name__)

# Constraint naming convention shared by all catalog tables
convention = {
    "ix": "ix_%(column_0_label)s",
    "uq": "uq_%(table_name)s_%(column_0_name)s",
    "ck": "ck_%(table_name)s_%(constraint_name)s",
    "fk": "fk_%(table_name)s_%(column_0_name)s_%(referred_table_name)s",
    "pk": "pk_%(table_name)s",
}


class Base(DeclarativeBase):
    """Base class for all catalog SQLAlchemy models."""
    metadata = MetaData(naming_convention=convention)


class DatabaseConnectionManager:
    """
    Owns the async engine and its pool configuration.
    """

    def __init__(self, settings: Optional[Settings] = None, url: Optional[str] = None):
        self.settings = settings or get_settings()
        self._url = url or self.settings.database_url
        self._engine: Optional[AsyncEngine] = None
        self._health_check_query = text("SELECT 1")

    def _build_connection_params(self) -> Dict[str, Any]:
        """Build SQLAlchemy engine parameters for the configured dialect."""
        params: Dict[str, Any] = {
            "url": self._url,
            "echo": self.settings.DB_ECHO,
        }
        if make_url(self._url).get_backend_name() == "sqlite":
            return params

        params.update({
            "pool_pre_ping": True,
            "pool_recycle": self.settings.DB_POOL_RECYCLE,
            "pool_size": self.settings.DB_POOL_SIZE,
            "max_overflow": self.settings.DB_MAX_OVERFLOW,
            "pool_timeout": self.settings.DB_POOL_TIMEOUT,
            "connect_args": {
                "server_settings": {
                    "application_name": "plant_catalog",
                    "jit": "off",
                },
                "command_timeout": 60,
            },
        })
        return params

    @property
    def engine(self) -> AsyncEngine:
        if self._engine is None:
            raise DatabaseError("Database engine not initialized", operation="engine")
        return self._engine

    def initialize(self) -> AsyncEngine:
        """Create the engine once."""
        if self._engine is not None:
            return self._engine

        logger.info("Initializing database connection pool...")
        self._engine = create_async_engine(**self._build_connection_params())
        self._register_connection_events()
        return self._engine

    def _register_connection_events(self) -> None:
        """Enable foreign keys on SQLite so relationship cascades match PostgreSQL."""
        if self._engine is None or self._engine.dialect.name != "sqlite":
            return

        @event.listens_for(self._engine.sync_engine, "connect")
        def set_sqlite_pragma(dbapi_connection, connection_record):
            cursor = dbapi_connection.cursor()
            cursor.execute("PRAGMA foreign_keys=ON")
            cursor.close()

    async def health_check(self) -> dict:
        """Perform database health check and return structured status."""
        timestamp = datetime.now(timezone.utc).isoformat()
        if self._engine is None:
            return {"status": "unhealthy", "error": "Database engine not initialized", "timestamp": timestamp}

        try:
            async with self._engine.connect() as conn:
                await conn.execute(self._health_check_query)
            return {"status": "healthy", "timestamp": timestamp}
        except SQLAlchemyError as e:
            logger.warning(f"Database health check failed: {e}")
            return {"status": "unhealthy", "error": str(e), "timestamp": timestamp}

    async def close(self) -> None:
        """Dispose of the engine and its pool."""
        if self._engine is not None:
            await self._engine.dispose()
            self._engine = None
            logger.info("Database connection pool closed")
