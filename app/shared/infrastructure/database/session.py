# 📄 File: app/shared/infrastructure/database/session.py
#
# 🧭 Purpose (Layman Explanation):
# Hands out short database "conversations" to the catalog, saving changes when a write
# finishes cleanly and undoing them when it fails.
#
# 🧪 Purpose (Technical Summary):
# Async SQLAlchemy session management: transactional sessions that commit or roll back,
# and read-only sessions for the query paths. SQLAlchemy failures are wrapped into the
# catalog's DatabaseError hierarchy so they surface to the caller.
#
# 🔗 Dependencies:
# - sqlalchemy.ext.asyncio (AsyncSession, async_sessionmaker)
# - app/shared/core/exceptions.py
#
# 🔄 Connected Modules / Calls From:
# - app/modules/plant_catalog/infrastructure/database/* (repository implementations)

import asyncio
import logging
from contextlib import asynccontextmanager
from typing import Any, AsyncGenerator

from sqlalchemy import exc
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker

from app.shared.core.deadline import remaining_time, within_deadline
from app.shared.core.exceptions import (
    CatalogException,
    DeadlineExceededError,
    DuplicateResourceError,
    RepositoryError,
    TransactionError,
)

logger = logging.getLogger(__name__)


class DatabaseSessionManager:
    """
    Manages database sessions with transaction handling and automatic cleanup.
    """

    def __init__(self, engine: AsyncEngine):
        self._engine = engine
        self._session_factory = async_sessionmaker(
            engine,
            class_=AsyncSession,
            expire_on_commit=False,  # Keep objects accessible after commit
            autoflush=True,
        )

    @property
    def dialect_name(self) -> str:
        return self._engine.dialect.name

    @asynccontextmanager
    async def get_session(self) -> AsyncGenerator[AsyncSession, None]:
        """
        Get an async database session with automatic transaction management.

        Yields:
            AsyncSession: Database session

        Raises:
            DuplicateResourceError: If a unique constraint is violated
            TransactionError: If the transaction fails
        """
        session: AsyncSession = self._session_factory()

        try:
            yield session
            await session.commit()
            logger.debug("Database transaction committed successfully")

        except exc.IntegrityError as e:
            await session.rollback()
            logger.warning(f"Integrity error, transaction rolled back: {e.orig}")
            raise DuplicateResourceError(
                message=f"Constraint violation: {e.orig}",
            ) from e

        except exc.SQLAlchemyError as e:
            await session.rollback()
            logger.error(f"Database error occurred, transaction rolled back: {e}")
            raise TransactionError(f"Database transaction failed: {e}", operation="commit") from e

        except BaseException:
            # Domain errors and cancellation propagate untouched
            await session.rollback()
            raise

        finally:
            await session.close()

    @asynccontextmanager
    async def get_read_only_session(self) -> AsyncGenerator[AsyncSession, None]:
        """
        Get a read-only database session (no commit).

        Yields:
            AsyncSession: Read-only database session
        """
        session: AsyncSession = self._session_factory()

        try:
            yield session

        except CatalogException:
            raise

        except exc.SQLAlchemyError as e:
            logger.error(f"Read-only session error: {e}")
            raise RepositoryError(f"Read operation failed: {e}", operation="read") from e

        finally:
            await session.close()


async def execute_bounded(session: AsyncSession, statement: Any, operation: str) -> Any:
    """
    Execute `statement` on `session` within the active deadline.

    Raises:
        DeadlineExceededError: If the deadline passes before the store answers
    """
    try:
        return await within_deadline(session.execute(statement))
    except (asyncio.TimeoutError, TimeoutError) as e:
        logger.warning(f"Deadline exceeded during {operation}")
        raise DeadlineExceededError(
            message=f"Deadline exceeded during {operation}",
            operation=operation,
            timeout=remaining_time(),
        ) from e
