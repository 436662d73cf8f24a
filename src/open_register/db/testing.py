from __future__ import annotations

from contextlib import asynccontextmanager
from typing import AsyncIterator

from .engine import DBEngine
from .settings import DBSettings


def make_sqlite_memory_engine(*, echo: bool = False) -> DBEngine:
    return DBEngine(DBSettings(database_url="sqlite+aiosqlite:///:memory:", echo=echo))


@asynccontextmanager
async def ephemeral_db() -> AsyncIterator[DBEngine]:
    """In-memory SQLite store with every table created; disposed on exit."""
    engine = make_sqlite_memory_engine()
    await engine.create_all()
    try:
        yield engine
    finally:
        await engine.dispose()
