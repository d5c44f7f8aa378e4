"""
Database engine and session management.
"""

import time
from typing import AsyncGenerator, Optional

from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker, create_async_engine

from book_api.core.config import settings
from book_api.core.logger_config import logger, log_performance
from book_api.models import Base

engine: Optional[AsyncEngine] = None
AsyncSessionLocal: Optional[async_sessionmaker[AsyncSession]] = None


def create_db_engine(database_url: Optional[str] = None) -> AsyncEngine:
    """
    Create the async engine for ``database_url`` (settings by default).

    Pool sizing only applies to server databases; SQLite uses its own pool.
    """
    url = database_url or settings.DATABASE_URL
    options = {"echo": settings.DB_ECHO, "pool_pre_ping": True}
    if not url.startswith("sqlite"):
        options.update(pool_size=settings.DB_POOL_SIZE, max_overflow=settings.DB_MAX_OVERFLOW)
    return create_async_engine(url, **options)


def create_session_factory(bind: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    return async_sessionmaker(bind, class_=AsyncSession, expire_on_commit=False, autoflush=False)


async def create_tables(bind: AsyncEngine) -> None:
    async with bind.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)


async def init_db() -> None:
    """
    Create the engine, check the connection and create all tables.
    """
    global engine, AsyncSessionLocal

    start_time = time.time()
    logger.info("Initializing database...")

    engine = create_db_engine()
    AsyncSessionLocal = create_session_factory(engine)

    try:
        async with engine.connect() as conn:
            await conn.execute(text("SELECT 1"))
        await create_tables(engine)
    except SQLAlchemyError:
        logger.exception("Database initialization failed")
        await engine.dispose()
        engine = None
        AsyncSessionLocal = None
        raise

    log_performance("init_db", time.time() - start_time)
    logger.info("Database initialized successfully")


async def get_db() -> AsyncGenerator[AsyncSession, None]:
    """
    FastAPI dependency providing a database session.

    Yields:
        AsyncSession: session bound to the application engine
    """
    if AsyncSessionLocal is None:
        raise RuntimeError("Database is not initialized, call init_db() first")

    async with AsyncSessionLocal() as session:
        try:
            yield session
        except SQLAlchemyError:
            await session.rollback()
            raise


async def close_db_connection() -> None:
    global engine, AsyncSessionLocal

    if engine is not None:
        await engine.dispose()
        logger.info("Database connection closed")
    engine = None
    AsyncSessionLocal = None
