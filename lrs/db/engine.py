"""Database handle: async engine, session factory and schema helpers."""

import logging
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

from sqlalchemy import Table, text
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker, create_async_engine

from lrs.config import Settings

logger = logging.getLogger(__name__)


def normalize_database_url(database_url: str) -> str:
    """Rewrite sync driver URLs to their async equivalents.

    Raises:
        ValueError: If the URL is unset or empty.
    """
    if not database_url:
        raise ValueError(
            "DATABASE_URL must be set to a valid connection string. "
            "Please configure the database_url setting."
        )

    # Convert postgresql:// to postgresql+asyncpg://
    if database_url.startswith("postgres://"):
        return database_url.replace("postgres://", "postgresql+asyncpg://", 1)
    if database_url.startswith("postgresql://"):
        return database_url.replace("postgresql://", "postgresql+asyncpg://", 1)

    return database_url


def create_async_engine_from_settings(settings: Settings) -> AsyncEngine:
    """Create async SQLAlchemy engine from settings."""
    return create_async_engine(
        normalize_database_url(settings.database_url), pool_pre_ping=True, echo=False
    )


class Database:
    """Database handle established once at startup.

    ``init`` must be awaited before any session is opened.
    """

    def __init__(self, settings: Settings) -> None:
        self._settings = settings
        self._engine: AsyncEngine | None = None
        self._session_factory: async_sessionmaker[AsyncSession] | None = None

    @property
    def engine(self) -> AsyncEngine:
        if self._engine is None:
            raise RuntimeError("Database has not been initialized")
        return self._engine

    async def init(self) -> None:
        """Create the engine and verify connectivity.

        Raises:
            ValueError: If DATABASE_URL is unset.
            sqlalchemy.exc.SQLAlchemyError: If the database is unreachable.
        """
        engine = create_async_engine_from_settings(self._settings)
        async with engine.connect() as conn:
            await conn.execute(text("SELECT 1"))

        self._engine = engine
        self._session_factory = async_sessionmaker(engine, expire_on_commit=False)
        logger.info(
            "Database initialized",
            extra={"structured": {"dialect": engine.dialect.name}},
        )

    async def create_tables(self, *tables: Table) -> None:
        """Create the given tables if they do not exist yet."""
        if not self._settings.create_tables:
            return

        def _create(sync_conn) -> None:  # type: ignore[no-untyped-def]
            for table in tables:
                table.create(sync_conn, checkfirst=True)

        async with self.engine.begin() as conn:
            await conn.run_sync(_create)

    @asynccontextmanager
    async def session(self) -> AsyncGenerator[AsyncSession, None]:
        """Open a session bound to the engine.

        Yields:
            AsyncSession instance
        """
        if self._session_factory is None:
            raise RuntimeError("Database has not been initialized")
        async with self._session_factory() as session:
            yield session

    async def dispose(self) -> None:
        if self._engine is not None:
            await self._engine.dispose()
            self._engine = None
            self._session_factory = None
