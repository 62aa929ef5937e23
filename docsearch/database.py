"""Async database engine and session management.

Uses SQLAlchemy 2.0 async with asyncpg driver.
Graceful degradation: if PostgreSQL is unavailable (or DATABASE_URL is unset),
the app keeps serving searches and only database logging is skipped.
"""

import logging

from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)

from docsearch.config import settings

logger = logging.getLogger(__name__)


def build_engine(database_url: str) -> AsyncEngine | None:
    """Create the async engine, or None when no database is configured."""
    if not database_url:
        return None
    if database_url.startswith("sqlite"):
        return create_async_engine(database_url, echo=False)
    return create_async_engine(
        database_url,
        echo=False,
        pool_size=5,
        max_overflow=10,
        pool_pre_ping=True,
    )


def build_session_factory(engine: AsyncEngine | None) -> async_sessionmaker[AsyncSession] | None:
    if engine is None:
        return None
    return async_sessionmaker(
        engine,
        class_=AsyncSession,
        expire_on_commit=False,
    )


engine = build_engine(settings.database_url)
async_session_factory = build_session_factory(engine)


async def init_db(db_engine: AsyncEngine | None = None) -> bool:
    """Create tables if they don't exist. Returns True on success."""
    from docsearch.models import Base  # noqa: F811

    db_engine = db_engine or engine
    if db_engine is None:
        logger.warning("DATABASE_URL not set — search logs will not be stored in the database")
        return False

    try:
        async with db_engine.begin() as conn:
            await conn.run_sync(Base.metadata.create_all)
        logger.info("Database initialized successfully")
        return True
    except Exception as e:
        logger.warning("Database unavailable — continuing without persistence: %s", str(e)[:200])
        return False


async def close_db():
    """Dispose engine connections on shutdown."""
    if engine is None:
        return
    await engine.dispose()
    logger.info("Database connections closed")
