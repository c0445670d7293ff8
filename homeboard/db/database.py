"""
Database engine and session management

PostgreSQL (asyncpg) in production, SQLite (aiosqlite) for local runs and tests.
Each uvicorn worker builds its own engine; against a server it uses NullPool so
N workers never hold idle connections. An in-memory SQLite database only exists
on one connection, so that case shares a single StaticPool connection.
"""
import logging
from contextlib import asynccontextmanager
from typing import Any, AsyncGenerator, AsyncIterator, Dict, Optional, Tuple
from urllib.parse import parse_qs, urlencode, urlparse, urlunparse

from sqlalchemy.engine import make_url
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.orm import DeclarativeBase
from sqlalchemy.pool import NullPool, StaticPool

from homeboard.core.config import settings
from homeboard.core.exceptions import StoreError

logger = logging.getLogger(__name__)

# libpq-style query params that asyncpg.connect() rejects with a TypeError
LIBPQ_ONLY_PARAMS = ("ssl", "sslmode", "channel_binding")


def _asyncpg_url_and_connect_args(url: str) -> Tuple[str, Dict[str, Any]]:
    parsed = urlparse(url)
    query = parse_qs(parsed.query, keep_blank_values=True)
    wants_ssl = any(query.get(name, [""])[0] == "require" for name in ("ssl", "sslmode"))
    for name in LIBPQ_ONLY_PARAMS:
        query.pop(name, None)
    url = urlunparse(parsed._replace(query=urlencode([(k, v[0]) for k, v in query.items()])))

    # Stuck transactions must not hold slot locks forever
    connect_args: Dict[str, Any] = {"command_timeout": 30, "timeout": 15}
    if wants_ssl:
        connect_args["ssl"] = True
    return url, connect_args


def database_url_and_connect_args(url: str) -> Tuple[str, Dict[str, Any]]:
    """Engine URL and connect_args for the configured backend."""
    if url.startswith("postgresql+asyncpg"):
        return _asyncpg_url_and_connect_args(url)
    if url.startswith("sqlite"):
        return url, {"check_same_thread": False}
    return url, {}


def is_memory_sqlite(url: str) -> bool:
    parsed = make_url(url)
    return parsed.get_backend_name() == "sqlite" and parsed.database in (None, "", ":memory:")


def build_engine(url: str) -> AsyncEngine:
    engine_url, connect_args = database_url_and_connect_args(url)
    return create_async_engine(
        engine_url,
        echo=False,
        poolclass=StaticPool if is_memory_sqlite(engine_url) else NullPool,
        connect_args=connect_args,
    )


def session_factory(bind: AsyncEngine) -> async_sessionmaker:
    return async_sessionmaker(
        bind,
        class_=AsyncSession,
        expire_on_commit=False,
        autoflush=False,
    )


engine = build_engine(settings.database_url)
async_session_maker = session_factory(engine)


class Base(DeclarativeBase):
    """Base class for all database models"""
    pass


@asynccontextmanager
async def session_scope(maker: async_sessionmaker) -> AsyncIterator[AsyncSession]:
    """
    Unit of work: commit on success, roll back on failure.
    Database failures, including a failed commit, surface as StoreError.
    """
    async with maker() as session:
        try:
            yield session
            await session.commit()
        except SQLAlchemyError as e:
            await session.rollback()
            logger.exception("Database error, transaction rolled back")
            raise StoreError("Database operation failed") from e
        except Exception:
            await session.rollback()
            raise


async def get_db() -> AsyncGenerator[AsyncSession, None]:
    """
    Request-scoped session. Declare it with ``Depends(get_db, scope="function")``
    so the commit happens before the response is sent.
    """
    async with session_scope(async_session_maker) as session:
        yield session


async def create_tables(bind: Optional[AsyncEngine] = None):
    """Create missing tables (local SQLite and tests; PostgreSQL uses alembic)"""
    async with (bind or engine).begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
