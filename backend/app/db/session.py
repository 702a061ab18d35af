"""
Database session management.
Handles the SQLite connection and session lifecycle with async support.
"""
from pathlib import Path
from typing import AsyncGenerator

from sqlalchemy import create_engine, event, Engine
from sqlalchemy.ext.asyncio import create_async_engine, AsyncEngine, AsyncSession
from sqlalchemy.pool import NullPool

from backend.app.config import get_settings
from backend.app.logging_config import get_logger

logger = get_logger(__name__)

settings = get_settings()

SQLITE_PREFIX = "sqlite:///"


def _set_sqlite_pragma(dbapi_conn, connection_record):
    """
    Enable foreign key constraints for SQLite.
    Required for ON DELETE CASCADE from users to transactions.
    """
    cursor = dbapi_conn.cursor()
    cursor.execute("PRAGMA foreign_keys=ON")
    cursor.close()


def _ensure_sqlite_directory(db_url: str) -> None:
    if db_url.startswith(SQLITE_PREFIX):
        db_path = db_url.replace(SQLITE_PREFIX, "", 1)
        if db_path and db_path != ":memory:":
            Path(db_path).parent.mkdir(parents=True, exist_ok=True)


def get_sync_engine() -> Engine:
    """
    Create a SYNC database engine.

    Used by:
    - init_database (table creation at startup and in the test suite)
    - Scripts that do not run an event loop

    Returns:
        Engine: SQLAlchemy sync engine
    """
    db_url = settings.DATABASE_URL
    _ensure_sqlite_directory(db_url)

    engine = create_engine(db_url, echo=False, poolclass=NullPool)
    if db_url.startswith(SQLITE_PREFIX):
        event.listen(engine, "connect", _set_sqlite_pragma)
    return engine


def get_async_engine() -> AsyncEngine:
    """
    Create the async database engine.

    Returns:
        AsyncEngine: SQLAlchemy async engine (SQLite via aiosqlite)
    """
    db_url = settings.DATABASE_URL
    _ensure_sqlite_directory(db_url)

    # Convert sqlite:/// to sqlite+aiosqlite:/// for async
    async_db_url = db_url.replace(SQLITE_PREFIX, "sqlite+aiosqlite:///", 1)

    engine = create_async_engine(
        async_db_url,
        echo=False,
        # NullPool for SQLite - each connection is independent
        poolclass=NullPool,
        )
    if db_url.startswith(SQLITE_PREFIX):
        event.listen(engine.sync_engine, "connect", _set_sqlite_pragma)
    return engine


# Create engine instances
sync_engine = get_sync_engine()  # For table creation, scripts
async_engine = get_async_engine()  # For FastAPI app, CLI and services


def init_database() -> None:
    """
    Create all tables that do not exist yet.

    Idempotent: existing tables are left untouched. Called by the app lifespan,
    the CLI and the test suite.
    """
    from sqlmodel import SQLModel

    import backend.app.db.models  # noqa: F401 - registers the tables on SQLModel.metadata

    SQLModel.metadata.create_all(sync_engine)
    logger.info("Database initialized", tables=sorted(SQLModel.metadata.tables))


async def get_session_generator() -> AsyncGenerator[AsyncSession, None]:
    """
    Get an async database session for dependency injection.

    Usage in FastAPI:
        @router.get("/")
        async def endpoint(session: AsyncSession = Depends(get_session_generator)):
            ...

    Yields:
        AsyncSession: SQLAlchemy async session (expire_on_commit disabled)
    """
    async with AsyncSession(async_engine, expire_on_commit=False) as session:
        yield session
