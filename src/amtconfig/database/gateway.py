"""
Connection gateway shared by every repository.

Each logical statement runs in its own short-lived session and transaction, so
there is never a transaction spanning two repository calls. The only exception
is `execute_in_transaction`, which runs a fixed list of statements atomically
within a single call.
"""
import logging
import time
from dataclasses import dataclass, field
from typing import Any, Sequence

from sqlalchemy import event
from sqlalchemy.engine import CursorResult, Result
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.sql import Executable

from amtconfig.config import Settings

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class QueryResult:
    """Rows produced by a statement (empty for DML) and the affected row count."""
    rows: list[Any] = field(default_factory=list)
    rowcount: int = 0


def _enable_sqlite_foreign_keys(dbapi_connection, connection_record) -> None:
    # SQLite ignores FOREIGN KEY clauses unless enabled per connection
    cursor = dbapi_connection.cursor()
    cursor.execute("PRAGMA foreign_keys=ON")
    cursor.close()


def _collect(result: Result, scalars: bool) -> QueryResult:
    # ORM selects come back as ChunkedIteratorResult; only CursorResult carries DML rowcounts
    if isinstance(result, CursorResult) and not result.returns_rows:
        return QueryResult(rows=[], rowcount=max(result.rowcount or 0, 0))
    rows = list(result.scalars().all()) if scalars else list(result.all())
    return QueryResult(rows=rows, rowcount=len(rows))


class Database:
    """
    Thin async wrapper around a pooled `AsyncEngine`.

    The engine is injected so tests and the application can share (or not) a
    pool as they see fit. Errors raised by the driver propagate unchanged; the
    repositories translate them.
    """

    def __init__(self, engine: AsyncEngine):
        self.engine = engine
        self._sessionmaker = async_sessionmaker(
            bind=engine,
            class_=AsyncSession,
            expire_on_commit=False,
        )
        if engine.dialect.name == "sqlite":
            event.listen(engine.sync_engine, "connect", _enable_sqlite_foreign_keys)

    async def execute(self, statement: Executable, *, scalars: bool = False) -> QueryResult:
        """
        Run one statement in its own transaction.

        Args:
            statement: any SQLAlchemy executable (select/insert/update/delete).
            scalars: return the first column of each row (ORM entities for
                `select(Model)`) instead of Row tuples.
        """
        started = time.perf_counter()
        async with self._sessionmaker() as session:
            async with session.begin():
                result = await session.execute(statement)
                collected = _collect(result, scalars)

        logger.debug(
            "db.query",
            extra={
                "statement": type(statement).__name__,
                "duration_ms": round((time.perf_counter() - started) * 1000, 3),
                "rowcount": collected.rowcount,
            },
        )
        return collected

    async def execute_in_transaction(self, statements: Sequence[Executable]) -> list[QueryResult]:
        """Run `statements` in order inside one transaction; all or nothing."""
        started = time.perf_counter()
        results: list[QueryResult] = []
        async with self._sessionmaker() as session:
            async with session.begin():
                for statement in statements:
                    result = await session.execute(statement)
                    results.append(_collect(result, scalars=False))

        logger.debug(
            "db.transaction",
            extra={
                "statements": len(results),
                "duration_ms": round((time.perf_counter() - started) * 1000, 3),
                "rowcount": sum(r.rowcount for r in results),
            },
        )
        return results

    async def dispose(self) -> None:
        await self.engine.dispose()


def create_database(settings: Settings) -> Database:
    """Build a `Database` from settings. Pool sizing is skipped for SQLite."""
    url = settings.DATABASE_URL
    engine_kwargs: dict[str, Any] = {
        "echo": settings.SQLALCHEMY_ECHO,
        "pool_pre_ping": True,
    }
    if not url.startswith("sqlite"):
        engine_kwargs["pool_size"] = settings.DB_POOL_SIZE
        engine_kwargs["max_overflow"] = settings.DB_MAX_OVERFLOW

    engine = create_async_engine(url, **engine_kwargs)
    logger.info("db.engine.created", extra={"dialect": engine.dialect.name})
    return Database(engine)
