#!/usr/bin/env python3
# tests/units/conftest.py
import pytest
import pytest_asyncio
from httpx import AsyncClient, ASGITransport

from droneplanner.core.config import Settings
from droneplanner.core.security import create_access_token
from droneplanner.db.init_db import create_tables
from droneplanner.db.session import Database
from droneplanner.main import create_app
from droneplanner.services.timezone_service import TimezoneCache, TimezoneService


@pytest.fixture
def settings(tmp_path):
    # One SQLite file per test, thrown away with tmp_path
    return Settings(
        DATABASE_URL=f"sqlite+aiosqlite:///{tmp_path / 'test_planner.db'}",
        JWT_SECRET="test-secret",
        TIMEZONEDB_API_KEY="",
        CREATE_TABLES=False,
        LOG_LEVEL="WARNING",
    )


@pytest_asyncio.fixture
async def database(settings):
    database = Database(settings.DATABASE_URL)
    await create_tables(database, drop=True)
    yield database
    await database.close()


@pytest.fixture
def timezone_service():
    return TimezoneService(api_key="", base_url="http://timezonedb.test", cache=TimezoneCache())


@pytest.fixture
def app(settings, database, timezone_service):
    return create_app(settings, database=database, timezone_service=timezone_service)


@pytest_asyncio.fixture
async def client(app):
    async with AsyncClient(
        transport=ASGITransport(app=app),
        base_url="http://test"
    ) as client:
        yield client


@pytest_asyncio.fixture
async def session(database):
    async with database.session_factory() as session:
        yield session


@pytest.fixture
def auth_headers(settings):
    """Bearer headers for an arbitrary user id."""
    def make(user_id: str = "user-a") -> dict:
        return {"Authorization": f"Bearer {create_access_token(user_id, settings)}"}
    return make
