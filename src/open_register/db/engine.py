from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from typing import Any, AsyncIterator

from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.pool import StaticPool

from . import models  # noqa: F401  registers the tables on Base.metadata
from .base import Base
from .settings import DBSettings

logger = logging.getLogger(__name__)


class DBEngine:
    """Holds the async SQLAlchemy engine and session factory for the local store."""

    def __init__(self, settings: DBSettings):
        url = settings.resolved_database_url
        engine_kwargs: dict[str, Any] = {
            "echo": settings.echo,
            "pool_pre_ping": True,
        }
        if url.startswith("sqlite+aiosqlite://"):
            if ":memory:" in url or url.rstrip("/").endswith("sqlite+aiosqlite:"):
                # one shared connection, otherwise every session sees an empty db
                engine_kwargs["poolclass"] = StaticPool
        else:
            engine_kwargs["pool_size"] = settings.pool_size
            engine_kwargs["max_overflow"] = settings.max_overflow
            engine_kwargs["pool_recycle"] = settings.pool_recycle or 1800

        self._engine: AsyncEngine = create_async_engine(url, **engine_kwargs)
        self._session_factory: async_sessionmaker[AsyncSession] = async_sessionmaker(
            bind=self._engine, expire_on_commit=False
        )

    @property
    def engine(self) -> AsyncEngine:
        return self._engine

    @asynccontextmanager
    async def session(self) -> AsyncIterator[AsyncSession]:
        sess = self._session_factory()
        try:
            yield sess
        finally:
            await sess.close()

    async def create_all(self) -> None:
        async with self._engine.begin() as conn:
            await conn.run_sync(Base.metadata.create_all)
        logger.info(
            "Local store tables ensured: %s",
            ", ".join(sorted(Base.metadata.tables)),
        )

    async def dispose(self) -> None:
        await self._engine.dispose()
