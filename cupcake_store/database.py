"""
Cupcake Store — Database Engine & Session Management
=====================================================

What:  Async SQLAlchemy engine, session factory, URL building and the
       FastAPI session dependency.
How:   `Database` owns one pooled async engine. It is constructed once at
       startup (or by a test), stored on `app.state.database`, and every
       request borrows a session from it through `get_db_session`.
Who:   The application factory/lifespan, the route dependencies, Alembic.

Dialects:
    sqlite    → sqlite+aiosqlite   (development, tests)
    postgres  → postgresql+asyncpg (production)

Connection Pooling:
    PostgreSQL uses pool_size/max_overflow/pool_pre_ping from settings and
    recycles connections hourly. In-memory SQLite is pinned to a single
    connection (StaticPool); otherwise every checkout would see a fresh,
    empty database.
"""

import logging
import shlex
from contextlib import asynccontextmanager
from typing import Any, AsyncGenerator, AsyncIterator, Dict, Optional, Union

from fastapi import Request
from sqlalchemy import text
from sqlalchemy.engine import URL, make_url
from sqlalchemy.exc import ArgumentError
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.orm import DeclarativeBase
from sqlalchemy.pool import StaticPool

from cupcake_store.config import Settings
from cupcake_store.exceptions import DatabaseConnectionError, UnsupportedDialectError

logger = logging.getLogger(__name__)

SQLITE_DRIVER = "sqlite+aiosqlite"
POSTGRES_DRIVER = "postgresql+asyncpg"

# libpq keyword → URL component, for "host=... user=..." style DSNs
_LIBPQ_KEYS = {
    "host": "host",
    "port": "port",
    "user": "username",
    "password": "password",
    "dbname": "database",
}


class Base(DeclarativeBase):
    """
    Base class for all SQLAlchemy ORM models.

    Shares a single metadata object, used by `Database.create_schema()` and
    by Alembic autogenerate.
    """
    pass


# ══════════════════════════════════════════════════════════════════════════
# URL Building
# ══════════════════════════════════════════════════════════════════════════


def _translate_ssl(query: Dict[str, Any]) -> Dict[str, Any]:
    # asyncpg spells libpq's sslmode as ssl
    query = dict(query)
    if "sslmode" in query:
        query["ssl"] = query.pop("sslmode")
    return query


def _parse_libpq_dsn(dsn: str) -> URL:
    """
    Convert a libpq key/value DSN into an asyncpg URL.

    Example:
        "host=db user=cupcake password=secret dbname=store port=5432 sslmode=disable"
        → postgresql+asyncpg://cupcake:secret@db:5432/store?ssl=disable

    Keys asyncpg does not understand (TimeZone, connect_timeout, ...) are
    dropped with a debug log.
    """
    parts: Dict[str, Any] = {}
    query: Dict[str, Any] = {}
    for token in shlex.split(dsn):
        key, sep, value = token.partition("=")
        if not sep:
            raise DatabaseConnectionError(
                f"malformed DSN token '{token}'", context={"dsn_token": token}
            )
        if key in _LIBPQ_KEYS:
            parts[_LIBPQ_KEYS[key]] = value
        elif key == "sslmode":
            query["sslmode"] = value
        else:
            logger.debug("Ignoring unsupported DSN parameter: %s", key)

    if "port" in parts:
        try:
            parts["port"] = int(parts["port"])
        except ValueError:
            raise DatabaseConnectionError(
                f"invalid port '{parts['port']}'", context={"port": parts["port"]}
            )

    return URL.create(POSTGRES_DRIVER, query=_translate_ssl(query), **parts)


def build_database_url(dialect: str, dsn: str) -> URL:
    """
    Build the async SQLAlchemy URL for a dialect/DSN pair.

    Args:
        dialect: "sqlite" or "postgres" (already normalized by Settings)
        dsn:     Path, URL or libpq key/value string

    Returns:
        sqlalchemy URL using the aiosqlite or asyncpg driver

    Raises:
        UnsupportedDialectError: dialect is neither sqlite nor postgres
        DatabaseConnectionError: DSN cannot be parsed
    """
    if dialect == "sqlite":
        if "://" in dsn:
            return make_url(dsn).set(drivername=SQLITE_DRIVER)
        return URL.create(SQLITE_DRIVER, database=dsn)

    if dialect == "postgres":
        if "://" in dsn:
            try:
                url = make_url(dsn)
            except ArgumentError as e:
                raise DatabaseConnectionError(str(e)) from e
            return url.set(drivername=POSTGRES_DRIVER, query=_translate_ssl(url.query))
        return _parse_libpq_dsn(dsn)

    raise UnsupportedDialectError(dialect)


def _is_memory_sqlite(url: URL) -> bool:
    return url.get_backend_name() == "sqlite" and url.database in (None, "", ":memory:")


# ══════════════════════════════════════════════════════════════════════════
# Database Handle
# ══════════════════════════════════════════════════════════════════════════


class Database:
    """
    Owns the async engine and the session factory.

    Lifecycle:
        db = Database.from_settings(settings)   # builds engine, no I/O yet
        await db.connect()                      # probe + create tables
        async with db.session() as session: ...
        await db.dispose()                      # on shutdown
    """

    def __init__(self, url: Union[str, URL], echo: bool = False, **engine_kwargs: Any):
        self.url = make_url(url) if isinstance(url, str) else url

        if _is_memory_sqlite(self.url):
            engine_kwargs.setdefault("poolclass", StaticPool)
            engine_kwargs.setdefault("connect_args", {"check_same_thread": False})

        try:
            self.engine: AsyncEngine = create_async_engine(
                self.url, echo=echo, **engine_kwargs
            )
        except (ArgumentError, ImportError) as e:
            # Missing driver (asyncpg/aiosqlite not installed) or bad URL
            raise DatabaseConnectionError(
                str(e), context={"dialect": self.url.get_backend_name()}
            ) from e

        # expire_on_commit=False: entities stay readable after the request
        # commits, which the response serializer relies on
        self.session_factory = async_sessionmaker(
            self.engine,
            class_=AsyncSession,
            expire_on_commit=False,
        )

    @classmethod
    def from_settings(cls, settings: Settings) -> "Database":
        """Build a Database from DB_DIALECT / DB_DSN and the pool settings."""
        url = build_database_url(settings.db_dialect, settings.db_dsn)
        engine_kwargs: Dict[str, Any] = {}
        if url.get_backend_name() == "postgresql":
            engine_kwargs.update(
                pool_size=settings.db_pool_size,
                max_overflow=settings.db_max_overflow,
                pool_pre_ping=settings.db_pool_pre_ping,
                pool_recycle=3600,
            )
        return cls(url, echo=settings.sql_echo, **engine_kwargs)

    @property
    def dialect(self) -> str:
        return self.url.get_backend_name()

    async def create_schema(self) -> None:
        """Create any missing tables registered on Base.metadata."""
        # Model modules register their tables on import
        from cupcake_store.models import cupcake  # noqa: F401

        async with self.engine.begin() as conn:
            await conn.run_sync(Base.metadata.create_all)

    async def connect(self) -> None:
        """
        Verify connectivity and bring the schema up to date.

        Raises:
            DatabaseConnectionError: the engine could not connect or the
                schema could not be created. Fatal at startup.
        """
        try:
            async with self.engine.connect() as conn:
                await conn.execute(text("SELECT 1"))
            await self.create_schema()
        except Exception as e:
            logger.error("Database startup failed: %s", e)
            raise DatabaseConnectionError(
                str(e), context={"dialect": self.dialect}
            ) from e

        logger.info("Connected to database %s", self.dialect)

    @asynccontextmanager
    async def session(self) -> AsyncIterator[AsyncSession]:
        """
        Provide a transactional session.

        Commits when the block exits normally, rolls back and re-raises
        when it raises.
        """
        async with self.session_factory() as session:
            try:
                yield session
                await session.commit()
            except Exception:
                await session.rollback()
                raise

    async def dispose(self) -> None:
        """Close every pooled connection. Called on application shutdown."""
        await self.engine.dispose()


# ── Session Dependency ────────────────────────────────────────────────────
async def get_db_session(request: Request) -> AsyncGenerator[AsyncSession, None]:
    """
    FastAPI dependency that provides one session per request.

    The session comes from the Database stored on `app.state` by the
    application factory or lifespan. Its teardown can run after the response
    has been sent, so write paths commit explicitly (CupcakeRepository.commit)
    and the final commit here only covers sessions nothing wrote through.
    An exception raised in the handler still rolls the session back.
    """
    database: Optional[Database] = getattr(request.app.state, "database", None)
    if database is None:
        raise RuntimeError("Database is not initialized; was the app started via its lifespan?")
    async with database.session() as session:
        yield session
