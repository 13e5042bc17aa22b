"""
Core pytest configuration for the entire test suite.

This module provides only the database setup and logging installation needed
across all kinds of tests. Domain-specific fixtures live in:
- tests/test_fixtures/repository_fixtures.py
- tests/test_fixtures/export_fixtures.py

Repositories commit every statement, so there is no outer transaction to roll
back: each test gets its own schema instead (a fresh SQLite file by default,
or create_all/drop_all against TEST_DATABASE_URL).
"""

import os
import logging
from typing import AsyncGenerator
from urllib.parse import urlparse

# -------------------------------
# Early logging tuning (IMPORTANT)
# -------------------------------
# Keep this block before importing amtconfig.* so collection stays quiet.
NOISY_LOGGERS = (
    "sqlalchemy",
    "sqlalchemy.engine",
    "sqlalchemy.engine.Engine",
    "asyncio",
    "aiosqlite",
    "httpx",
    "httpcore",
)
for _name in NOISY_LOGGERS:
    logging.getLogger(_name).setLevel(logging.WARNING)

import pytest
from pytest import FixtureRequest
from sqlalchemy.ext.asyncio import create_async_engine

from amtconfig.config import get_settings
from amtconfig.core.logging.builder import setup_logging
from amtconfig.database.base import Base
from amtconfig.database.gateway import Database
import amtconfig.models  # noqa: F401 - registers every table on Base.metadata

settings = get_settings()
logger = logging.getLogger(__name__)


@pytest.fixture(scope="session", autouse=True)
def configure_logging(request: FixtureRequest):
    """
    Install application logging for the entire test session.

    dictConfig replaces root handlers, which removes pytest's capture handler;
    it is re-attached so `caplog.records` keeps working.
    """
    setup_logging(settings)

    caplog_plugin = request.config.pluginmanager.getplugin("logging-plugin")
    handler = getattr(caplog_plugin, "caplog_handler", None)
    if handler is not None:
        logging.getLogger().addHandler(handler)

    yield


def safe_log_db_url(db_url: str) -> str:
    """Return the URL without credentials, for logging."""
    parsed = urlparse(db_url)
    return f"{parsed.scheme}://{parsed.hostname or ''}:{parsed.port or ''}/{parsed.path.lstrip('/')}"


@pytest.fixture
def test_database_url(tmp_path) -> str:
    """
    Priority:
      1. TEST_DATABASE_URL (CI/CD override, e.g. a throwaway Postgres)
      2. a SQLite file private to this test
    """
    if test_url := os.getenv("TEST_DATABASE_URL"):
        return test_url
    return f"sqlite+aiosqlite:///{tmp_path / 'amtconfig_test.db'}"


@pytest.fixture
async def database(test_database_url: str) -> AsyncGenerator[Database, None]:
    """
    Gateway over a freshly created schema.

    The Database is built before create_all so the SQLite foreign-key pragma
    is installed on every pooled connection, including the DDL one.
    """
    logger.debug("test.database", extra={"url": safe_log_db_url(test_database_url)})
    engine = create_async_engine(test_database_url, pool_pre_ping=True)
    db = Database(engine)

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield db

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)
    await db.dispose()


@pytest.fixture
async def async_engine(database: Database):
    """Low-level engine of the test gateway, for tests that bypass the repositories."""
    return database.engine


# Domain fixtures registered globally
from .test_fixtures.repository_fixtures import (  # noqa: E402
    publisher,
    store,
    proxy_repo,
    sample_proxy_data,
    make_proxy,
    create_proxy,
    created_proxy,
    multiple_proxies,
    create_cira,
    create_ieee8021x,
    create_wireless,
    create_profile,
)
from .test_fixtures.export_fixtures import (  # noqa: E402
    secret_resolver,
    exporter,
    seeded_profile,
)
