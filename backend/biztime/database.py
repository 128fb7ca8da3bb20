"""
BizTime Backend — Database Session Management
==============================================

What:  Async SQLAlchemy engine, session factory, and FastAPI dependency.
Why:   Centralizes all database connection logic in one place.
How:   Creates an async engine with connection pooling, provides a session
       dependency that auto-commits on success and auto-rolls-back on error.
Who:   Used by route handlers via FastAPI's dependency injection system.
When:  Engine is created at module import; sessions are created per-request.

Session-per-request:
    Every request gets one AsyncSession, and every query of that request
    (the read-then-write in invoice updates included) runs inside the same
    transaction. Services never open sessions themselves; they receive one
    as an argument, which is what lets tests swap in a mock or an in-memory
    SQLite session via `app.dependency_overrides`.
"""

import logging
from typing import Any, AsyncGenerator, Dict

from sqlalchemy import event
from sqlalchemy.engine import Result
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.orm import DeclarativeBase

from biztime.config import settings
from biztime.exceptions import ConflictError, DatabaseError

logger = logging.getLogger(__name__)


def engine_options(database_url: str) -> Dict[str, Any]:
    """
    Build keyword arguments for create_async_engine.

    SQLite gets no pool sizing (aiosqlite runs on a single file handle);
    every other backend gets the pooled configuration from settings.
    """
    options: Dict[str, Any] = {"echo": settings.log_level == "DEBUG"}
    if database_url.startswith("sqlite"):
        return options
    options.update(
        pool_size=settings.db_pool_size,           # Persistent connections (default: 20)
        max_overflow=settings.db_max_overflow,      # Extra connections for spikes (default: 10)
        pool_pre_ping=settings.db_pool_pre_ping,   # Validate before use (default: True)
        pool_recycle=3600,                          # Recycle after 1 hour
    )
    return options


def enable_sqlite_foreign_keys(engine: AsyncEngine) -> None:
    """
    Turn on foreign key enforcement for every new SQLite connection.

    SQLite ships with FK checks off; without this, ON DELETE CASCADE from
    companies to invoices would silently not happen in local runs and tests.
    """

    @event.listens_for(engine.sync_engine, "connect")
    def _set_sqlite_pragma(dbapi_connection, connection_record):
        cursor = dbapi_connection.cursor()
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.close()


# ── Engine Configuration ──────────────────────────────────────────────────
engine = create_async_engine(settings.database_url, **engine_options(settings.database_url))

if settings.is_sqlite:
    enable_sqlite_foreign_keys(engine)

# ── Session Factory ───────────────────────────────────────────────────────
# expire_on_commit=False: Prevents lazy-loading issues after commit
async_session_factory = async_sessionmaker(
    engine,
    class_=AsyncSession,
    expire_on_commit=False,
)


# ── Base Model ────────────────────────────────────────────────────────────
class Base(DeclarativeBase):
    """
    Base class for all SQLAlchemy ORM models.

    Registers Company and Invoice with a single metadata object, which
    Alembic and create_tables() both read.
    """
    pass


# ── Session Dependency ────────────────────────────────────────────────────
async def get_db_session() -> AsyncGenerator[AsyncSession, None]:
    """
    FastAPI dependency that provides a database session per request.

    How it works:
        1. Creates a new session from the factory
        2. Yields it to the route handler (the handler performs queries)
        3. On success: commits the transaction
        4. On error: rolls back the transaction
        5. Always: closes the session (returns connection to pool)

    Example usage in a route:
        @router.get("/companies")
        async def list_companies(db: AsyncSession = Depends(get_db_session)):
            return await company_service.list_companies(db)

    Raises:
        Any database exceptions are propagated to the global error handler.
    """
    async with async_session_factory() as session:
        try:
            yield session
            await session.commit()
        except Exception:
            # Roll back for ANY failure, including NotFoundError raised
            # after a write in the same request
            await session.rollback()
            raise
        finally:
            await session.close()


# ── Lifecycle Helpers ─────────────────────────────────────────────────────
async def create_tables(target: AsyncEngine = engine) -> None:
    """
    What:  Issues CREATE TABLE IF NOT EXISTS for every registered model.
    When:  Startup with DB_CREATE_TABLES=true, and the test suite.
    Why:   Lets SQLite runs work without an Alembic step.
    """
    # Registers the models on Base.metadata before create_all reads it
    import biztime.models  # noqa: F401

    async with target.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)


async def dispose_engine() -> None:
    """
    What:  Gracefully closes all connections in the pool.
    When:  Called during application shutdown (lifespan handler).
    """
    await engine.dispose()


# ── Query Execution ───────────────────────────────────────────────────────
async def run_query(db: AsyncSession, statement: Any, operation: str) -> Result:
    """
    Execute one parameterized statement and translate driver failures.

    What:    The single place services send SQL through.
    How:     Bound parameters come from the SQLAlchemy statement; results
             are returned untouched so callers can branch on row count.

    Raises:
        ConflictError: Unique or foreign key constraint violated (→ 409)
        DatabaseError: Any other SQLAlchemy failure (→ 500)
    """
    try:
        return await db.execute(statement)
    except IntegrityError as e:
        logger.warning("Integrity error during %s: %s", operation, e.orig)
        raise ConflictError(
            message=f"Could not {operation}: conflicts with existing data",
            context={"operation": operation},
        ) from e
    except SQLAlchemyError as e:
        logger.error("Database error during %s: %s", operation, str(e), exc_info=True)
        raise DatabaseError(
            context={"operation": operation, "error_type": type(e).__name__},
        ) from e
