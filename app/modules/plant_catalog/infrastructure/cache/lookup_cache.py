# 📄 File: app/modules/plant_catalog/infrastructure/cache/lookup_cache.py
# 🧭 Purpose (Layman Explanation):
# Keeps the small reference lists (languages, plant families, genera) in memory and
# quietly refreshes them once a day without making anyone wait.
#
# 🧪 Purpose (Technical Summary):
# In-process cache of an immutable LookupSnapshot. The first read loads synchronously;
# afterwards an expired read returns the current snapshot and schedules one background
# refresh task. Readers always see a whole snapshot, never a half-built one. Refresh
# failures are logged and the previous snapshot stays in service.
#
# 🔗 Dependencies:
# asyncio, domain LookupSnapshot, LookupRepository
#
# 🔄 Connected Modules / Calls From:
# application/handlers/query_handlers.py (list_languages, language checks), engine.py

import asyncio
import logging
from datetime import datetime, timezone
from typing import Optional

from app.shared.core.exceptions import CatalogException

from ...domain.models import LookupSnapshot
from ...domain.repositories.lookup_repository import LookupRepository

logger = logging.getLogger(__name__)


class LookupTableCache:
    """Lookup snapshot with an explicit expiry and refresh contract."""

    def __init__(self, repository: LookupRepository, ttl_seconds: int):
        self.repository = repository
        self.ttl_seconds = ttl_seconds
        self._snapshot = LookupSnapshot()
        self._refresh_task: Optional[asyncio.Task] = None
        self._lock = asyncio.Lock()

    @property
    def snapshot(self) -> LookupSnapshot:
        return self._snapshot

    def is_expired(self, now: Optional[datetime] = None) -> bool:
        if not self._snapshot.is_loaded:
            return True
        now = now or datetime.now(timezone.utc)
        return (now - self._snapshot.loaded_at).total_seconds() >= self.ttl_seconds

    async def refresh(self) -> LookupSnapshot:
        """Load a fresh snapshot and swap it in atomically."""
        async with self._lock:
            snapshot = await self.repository.load_snapshot()
            self._snapshot = snapshot
        logger.info(f"Lookup tables refreshed: {snapshot.stats()}")
        return snapshot

    async def get(self) -> LookupSnapshot:
        if not self._snapshot.is_loaded:
            return await self.refresh()
        if self.is_expired():
            self._schedule_refresh()
        return self._snapshot

    def _schedule_refresh(self) -> None:
        if self._refresh_task is None or self._refresh_task.done():
            self._refresh_task = asyncio.create_task(self._background_refresh())

    async def _background_refresh(self) -> None:
        try:
            await self.refresh()
        except CatalogException as e:
            logger.warning(f"Background lookup refresh failed, keeping previous snapshot: {e.message}")
        except Exception as e:
            # Unawaited task: every failure stops here
            logger.warning(f"Background lookup refresh failed, keeping previous snapshot: {e!r}")

    async def close(self) -> None:
        if self._refresh_task is not None and not self._refresh_task.done():
            self._refresh_task.cancel()
            try:
                await self._refresh_task
            except asyncio.CancelledError:
                pass
        self._refresh_task = None
