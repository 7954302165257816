"""Test configuration and fixtures."""

import os

# Settings are read at import time; point them at test values first
os.environ["DATABASE_URL"] = "sqlite+aiosqlite:///:memory:"
os.environ["AUTH_JWT_SECRET"] = "test-secret-key"
os.environ["AUTH_JWT_AUDIENCE"] = "authenticated"
os.environ["LOG_LEVEL"] = "WARNING"

from typing import AsyncGenerator

import httpx
import pytest
from sqlalchemy import event
from sqlalchemy.ext.asyncio import AsyncSession

from dealbies.core.db import Database
from dealbies.main import create_app
from tests.factories import make_user, auth_headers


@pytest.fixture
async def database(tmp_path) -> AsyncGenerator[Database, None]:
    """Fresh SQLite database per test, schema created from the models."""
    db = Database(f"sqlite+aiosqlite:///{tmp_path / 'dealbies-test.db'}")

    @event.listens_for(db.engine.sync_engine, "connect")
    def _enable_foreign_keys(dbapi_connection, connection_record):
        cursor = dbapi_connection.cursor()
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.close()

    await db.create_all()
    yield db
    await db.dispose()


@pytest.fixture
async def session(database) -> AsyncGenerator[AsyncSession, None]:
    async with database.sessionmaker() as s:
        yield s


@pytest.fixture
async def client(database) -> AsyncGenerator[httpx.AsyncClient, None]:
    app = create_app(database)
    transport = httpx.ASGITransport(app=app)
    async with httpx.AsyncClient(transport=transport, base_url="http://testserver") as c:
        yield c


@pytest.fixture
async def user(session):
    return await make_user(session, username="alice")


@pytest.fixture
async def admin(session):
    return await make_user(session, username="root", role="ADMIN")


@pytest.fixture
def user_headers(user) -> dict:
    return auth_headers(user.id)


@pytest.fixture
def admin_headers(admin) -> dict:
    return auth_headers(admin.id)
