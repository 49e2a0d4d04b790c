"""
Database connection and session management for SQLAlchemy 2.0.
Configured for async operations against PostgreSQL (asyncpg) or SQLite (aiosqlite).

A single Database handle is created at application startup and passed to every
service; nothing here holds a module-level engine.
"""
from contextlib import asynccontextmanager
from typing import Any, AsyncIterator, List, Mapping, Optional
import logging
import time

from sqlalchemy import event, text
from sqlalchemy.engine import RowMapping
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.orm import declarative_base

from chef_site.errors import StorageError, StorageUnavailable

logger = logging.getLogger(__name__)

# Create declarative base for models
Base = declarative_base()

# Additive DDL applied after create_all. Older deployments created some tables
# before these columns/indexes existed; re-running them must not fail startup.
SCHEMA_PATCHES = [
    "ALTER TABLE users ADD COLUMN is_active BOOLEAN DEFAULT TRUE",
    "ALTER TABLE users ADD COLUMN last_login TIMESTAMP",
    "ALTER TABLE categories ADD COLUMN image_path VARCHAR(500)",
    "CREATE INDEX IF NOT EXISTS ix_sessions_expire ON sessions (expire)",
    "CREATE INDEX IF NOT EXISTS ix_blog_posts_status_published ON blog_posts (status, published_at)",
]

TOLERATED_DDL_ERRORS = ("already exists", "duplicate column")


def _enable_sqlite_foreign_keys(dbapi_connection, connection_record):
    cursor = dbapi_connection.cursor()
    cursor.execute("PRAGMA foreign_keys=ON")
    cursor.close()


class Database:
    """
    Owns the async engine and session factory.

    Usage:
        database = Database(settings.async_database_url)
        await database.connect()
        await database.init_schema()
        rows = await database.execute("SELECT COUNT(*) AS count FROM users")
        await database.dispose()
    """

    def __init__(self, url: str, echo: bool = False):
        self.url = url
        self.echo = echo
        self.engine: Optional[AsyncEngine] = None
        self._sessionmaker: Optional[async_sessionmaker] = None

    @property
    def configured(self) -> bool:
        return bool(self.url)

    @property
    def connected(self) -> bool:
        return self.engine is not None

    def _require_engine(self) -> AsyncEngine:
        if self.engine is None:
            raise StorageUnavailable()
        return self.engine

    async def connect(self) -> None:
        """
        Create the engine and verify the connection with a trivial query.

        Raises:
            StorageUnavailable: If no database URL is configured
        """
        if not self.configured:
            raise StorageUnavailable()

        engine_args = {"echo": self.echo}
        # Pool settings only apply to PostgreSQL (not SQLite)
        if self.url.startswith("postgresql"):
            engine_args.update({
                "pool_size": 10,
                "max_overflow": 20,
                "pool_pre_ping": True,  # Verify connections before using (handles stale connections)
                "pool_recycle": 3600,
                "connect_args": {
                    "server_settings": {
                        "application_name": "chef-site-backend"
                    }
                }
            })

        self.engine = create_async_engine(self.url, **engine_args)
        if self.url.startswith("sqlite"):
            event.listen(self.engine.sync_engine, "connect", _enable_sqlite_foreign_keys)

        self._sessionmaker = async_sessionmaker(
            self.engine,
            class_=AsyncSession,
            expire_on_commit=False,
            autoflush=False,
        )

        try:
            async with self.engine.connect() as conn:
                await conn.execute(text("SELECT 1"))
        except Exception as e:
            logger.error(f"Database connection failed ({type(e).__name__}): {str(e)}")
            await self.dispose()
            raise
        logger.info("Database connection initialized successfully")

    async def dispose(self) -> None:
        """Close all pooled connections."""
        if self.engine is not None:
            await self.engine.dispose()
            logger.info("Database connections closed")
        self.engine = None
        self._sessionmaker = None

    async def execute(self, statement: str, params: Optional[Mapping[str, Any]] = None) -> List[RowMapping]:
        """
        Execute one parameterized SQL statement in its own transaction.

        Args:
            statement: SQL text using named bind parameters (":name"), not positional
                "$1" / "?" placeholders
            params: Bind parameter values keyed by name

        Returns:
            list[RowMapping]: Result rows (empty for statements without a result set)

        Raises:
            StorageUnavailable: If the database is not configured/connected
            StorageError: On any driver-level failure
        """
        engine = self._require_engine()
        start = time.perf_counter()
        try:
            async with engine.begin() as conn:
                result = await conn.execute(text(statement), params or {})
                rows = list(result.mappings()) if result.returns_rows else []
        except SQLAlchemyError as e:
            duration = (time.perf_counter() - start) * 1000
            logger.error(f"Database query error after {duration:.1f}ms: {statement!r}: {str(e)}")
            raise StorageError() from e

        duration = (time.perf_counter() - start) * 1000
        logger.debug(f"Executed query {statement!r} in {duration:.1f}ms ({len(rows)} rows)")
        return rows

    @asynccontextmanager
    async def session(self) -> AsyncIterator[AsyncSession]:
        """
        ORM session with automatic commit/rollback.

        Integrity violations propagate unchanged so callers can turn them into
        conflicts; any other driver error is wrapped in StorageError.
        """
        self._require_engine()
        async with self._sessionmaker() as session:
            try:
                yield session
                await session.commit()
            except IntegrityError:
                await session.rollback()
                raise
            except SQLAlchemyError as e:
                await session.rollback()
                logger.error(f"Database session error: {str(e)}", exc_info=True)
                raise StorageError() from e
            except Exception:
                await session.rollback()
                raise

    async def init_schema(self) -> None:
        """
        Create all tables and apply additive schema patches.
        Safe to run on every startup.
        """
        # Import models so they register on Base.metadata
        from chef_site import models  # noqa: F401

        engine = self._require_engine()
        async with engine.begin() as conn:
            await conn.run_sync(Base.metadata.create_all)

        for statement in SCHEMA_PATCHES:
            await self._apply_tolerant(statement)
        logger.info("Database tables initialized successfully")

    async def _apply_tolerant(self, statement: str) -> None:
        engine = self._require_engine()
        try:
            async with engine.begin() as conn:
                await conn.execute(text(statement))
        except SQLAlchemyError as e:
            if any(marker in str(e).lower() for marker in TOLERATED_DDL_ERRORS):
                logger.debug(f"Schema patch already applied: {statement}")
                return
            logger.error(f"Schema patch failed: {statement!r}: {str(e)}")
            raise
