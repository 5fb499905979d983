"""
Database session management.

Builds the async SQLAlchemy engine for the configured store and exposes a
session factory plus the ``get_db`` dependency used by every endpoint that
touches ``investidores`` / ``investimentos``.
"""

from collections.abc import AsyncGenerator

from sqlalchemy import event
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.pool import StaticPool

from investimentos.core.config import settings


def _unicode_lower(value):
    return value.lower() if value is not None else None


def configure_sqlite_connections(async_engine: AsyncEngine) -> None:
    """
    Prepare every new SQLite connection.

    - FK enforcement: SQLite ignores ``FOREIGN KEY`` clauses unless the
      pragma is set per connection.
    - ``lower()``: the built-in only folds ASCII, so "Álvaro" would never
      match "álvaro". It is replaced with Python's Unicode-aware version.

    aiosqlite wraps a sync connection, so the listener goes on the sync engine.
    """

    @event.listens_for(async_engine.sync_engine, "connect")
    def _configure(dbapi_conn, connection_record):
        cursor = dbapi_conn.cursor()
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.close()
        dbapi_conn.create_function("lower", 1, _unicode_lower, deterministic=True)


def build_engine(url: str) -> AsyncEngine:
    """Create the async engine for ``url`` (SQLite in-memory or PostgreSQL)."""
    if url.startswith("sqlite"):
        # StaticPool: every connection shares the same in-memory database.
        sqlite_engine = create_async_engine(
            url,
            echo=settings.DEBUG,
            future=True,
            connect_args={"check_same_thread": False},
            poolclass=StaticPool,
        )
        configure_sqlite_connections(sqlite_engine)
        return sqlite_engine

    return create_async_engine(
        url,
        echo=settings.DEBUG,
        future=True,
        pool_size=settings.DB_POOL_SIZE,
        max_overflow=settings.DB_MAX_OVERFLOW,
        pool_timeout=settings.DB_POOL_TIMEOUT,
        pool_recycle=settings.DB_POOL_RECYCLE,
        pool_pre_ping=True,
    )


engine = build_engine(settings.DATABASE_URL)

AsyncSessionLocal = async_sessionmaker(
    bind=engine,
    class_=AsyncSession,
    # Attributes must stay readable after commit without a lazy reload.
    expire_on_commit=False,
)


async def get_db() -> AsyncGenerator[AsyncSession, None]:
    """
    FastAPI dependency that yields an async database session.

    The session is closed when the request finishes.
    """
    async with AsyncSessionLocal() as session:
        yield session
