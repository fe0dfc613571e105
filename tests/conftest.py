"""Pytest configuration and fixtures.

Tests run against a throwaway SQLite file (aiosqlite) instead of MySQL.
"""

import pytest
from fastapi.testclient import TestClient

from core.config import Settings
from db.bootstrap import ensure_schema
from db.database import Database

CONFIG_VARS = (
    "DATABASE_URL",
    "DB_HOST",
    "DB_PORT",
    "DB_USER",
    "DB_PASS",
    "DB_NAME",
    "DB_POOL_SIZE",
    "DB_POOL_TIMEOUT",
    "STOCK_MODE",
    "CORS_ORIGINS",
    "PORT",
)


@pytest.fixture(autouse=True)
def clean_environment(monkeypatch):
    """Keep a developer's DB_* / .env values out of the tests."""
    for name in CONFIG_VARS:
        monkeypatch.delenv(name, raising=False)
    monkeypatch.setenv("LOG_LEVEL", "WARNING")


@pytest.fixture
def database_url(tmp_path):
    return f"sqlite+aiosqlite:///{tmp_path / 'stock.db'}"


@pytest.fixture
def make_settings(monkeypatch, database_url):
    def _make(mode: str = "both", **env) -> Settings:
        monkeypatch.setenv("DATABASE_URL", database_url)
        monkeypatch.setenv("STOCK_MODE", mode)
        for name, value in env.items():
            monkeypatch.setenv(name, value)
        return Settings()

    return _make


@pytest.fixture
def settings(make_settings):
    return make_settings("both")


@pytest.fixture
async def database(settings):
    db = Database(settings)
    await ensure_schema(db, settings.modes)
    db.ready = True
    yield db
    await db.dispose()


@pytest.fixture
async def session(database):
    async with database.session_maker() as s:
        yield s


@pytest.fixture
def client(settings):
    from main import create_app

    with TestClient(create_app(settings)) as c:
        yield c
