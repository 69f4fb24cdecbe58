"""Async engine, session factory and schema bootstrap."""

import logging
from collections.abc import AsyncGenerator
from typing import Any

from sqlalchemy.engine import make_url
from sqlalchemy.ext.asyncio import AsyncSession, create_async_engine
from sqlalchemy.orm import sessionmaker
from sqlmodel import SQLModel

from clinic_stock.core.config import get_settings

logger = logging.getLogger(__name__)

settings = get_settings()


def engine_options(database_url: str) -> dict[str, Any]:
    """Pool settings for server databases; SQLite (local runs) takes none."""
    options: dict[str, Any] = {"echo": settings.db_echo}
    if make_url(database_url).get_backend_name() != "sqlite":
        options.update(
            pool_size=settings.db_pool_size,
            max_overflow=settings.db_max_overflow,
            pool_pre_ping=True,
        )
    return options


engine = create_async_engine(settings.database_url, **engine_options(settings.database_url))

async_session_factory = sessionmaker(
    engine,
    class_=AsyncSession,
    expire_on_commit=False,
)


async def get_session() -> AsyncGenerator[AsyncSession, None]:
    """FastAPI dependency yielding one session per request."""
    async with async_session_factory() as session:
        yield session


async def init_db() -> None:
    """Create the inventory tables if they are missing."""
    import clinic_stock.models  # noqa: F401  registers every table on the metadata

    async with engine.begin() as conn:
        await conn.run_sync(SQLModel.metadata.create_all)
    logger.info("Database schema ready (%s)", make_url(settings.database_url).get_backend_name())
