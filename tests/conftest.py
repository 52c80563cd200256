# 📄 File: tests/conftest.py
# 🧭 Purpose (Layman Explanation):
# Builds a fresh little catalog database, a pretend cache and a ready-to-use engine for
# every test.
# 🧪 Purpose (Technical Summary):
# pytest / pytest-asyncio fixtures: per-test SQLite file database through aiosqlite with
# the catalog schema created from Base.metadata, seeded rows, repositories, cache doubles
# and a fully wired CatalogEngine.
# 🔗 Dependencies:
# pytest, pytest-asyncio, aiosqlite, SQLAlchemy
# 🔄 Connected Modules / Calls From:
# Every test module

import pytest
import pytest_asyncio

from app.modules.plant_catalog import build_catalog_engine
from app.modules.plant_catalog.domain.services import NameBatchLoader
from app.modules.plant_catalog.infrastructure.cache import CachedPlantRepository
from app.modules.plant_catalog.infrastructure.database import (
    LocalizedNameRepositoryImpl,
    PlantRepositoryImpl,
)
from app.modules.plant_catalog.infrastructure.database import models  # noqa: F401  (registers tables)
from app.shared.config.redis import CacheConfig
from app.shared.config.settings import Settings
from app.shared.infrastructure.database import Base, DatabaseConnectionManager, DatabaseSessionManager
from catalog_fixtures import (
    FailingCacheBackend,
    InMemoryCacheBackend,
    StatementCounter,
    seed_catalog,
)


@pytest.fixture
def settings():
    return Settings(
        ENVIRONMENT="test",
        LOG_FORMAT="text",
        DEFAULT_LANGUAGE="en",
        CACHE_ENABLED=True,
        CACHE_NAMESPACE="test",
    )


@pytest_asyncio.fixture
async def db_engine(tmp_path, settings):
    manager = DatabaseConnectionManager(settings, url=f"sqlite+aiosqlite:///{tmp_path / 'catalog.db'}")
    engine = manager.initialize()
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    await seed_catalog(engine)
    yield engine
    await manager.close()


@pytest.fixture
def statements(db_engine):
    return StatementCounter(db_engine)


@pytest.fixture
def session_manager(db_engine):
    return DatabaseSessionManager(db_engine)


@pytest.fixture
def name_repository(session_manager):
    return LocalizedNameRepositoryImpl(session_manager)


@pytest.fixture
def batch_loader(name_repository, settings):
    return NameBatchLoader(name_repository, settings.DEFAULT_LANGUAGE)


@pytest.fixture
def store(session_manager, name_repository, batch_loader):
    return PlantRepositoryImpl(session_manager, name_repository, batch_loader)


@pytest.fixture
def memory_cache():
    return InMemoryCacheBackend()


@pytest.fixture
def failing_cache():
    return FailingCacheBackend()


@pytest.fixture
def cached_store(store, memory_cache, settings):
    return CachedPlantRepository(store, memory_cache, CacheConfig(settings))


@pytest_asyncio.fixture
async def catalog(settings, db_engine, memory_cache):
    catalog = build_catalog_engine(settings=settings, engine=db_engine, cache_backend=memory_cache)
    yield catalog
    await catalog.close()
