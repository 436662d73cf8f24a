"""
Tests for the local object store: settings, mappers and unit of work.
"""

from __future__ import annotations

import pytest
from sqlalchemy.exc import IntegrityError

from open_register.db import (
    DBSettings,
    ObjectEntity,
    Register,
    UnitOfWork,
    db_healthcheck,
)


@pytest.mark.parametrize(
    "raw,expected",
    [
        ("postgres://u:p@h/db", "postgresql+asyncpg://u:p@h/db"),
        ("postgresql://u:p@h/db", "postgresql+asyncpg://u:p@h/db"),
        ("sqlite:///./local.db", "sqlite+aiosqlite:///./local.db"),
        ("sqlite+aiosqlite:///:memory:", "sqlite+aiosqlite:///:memory:"),
    ],
)
def test_database_url_normalized_to_async_driver(raw, expected):
    assert DBSettings(database_url=raw).resolved_database_url == expected


def test_database_url_falls_back_to_env(monkeypatch):
    monkeypatch.setenv("DATABASE_URL", "postgres://env/db")

    assert DBSettings(database_url=None).resolved_database_url == "postgresql+asyncpg://env/db"


def test_missing_database_url_raises(monkeypatch):
    monkeypatch.delenv("DATABASE_URL", raising=False)
    monkeypatch.delenv("DB_DATABASE_URL", raising=False)

    with pytest.raises(ValueError):
        DBSettings(_env_file=None).resolved_database_url


@pytest.mark.store
class TestMappers:
    @pytest.mark.asyncio
    async def test_healthcheck(self, engine):
        async with engine.session() as session:
            assert await db_healthcheck(session) is True

    @pytest.mark.asyncio
    async def test_insert_assigns_uuid_and_timestamps(self, engine, internal_register, schema):
        async with UnitOfWork(engine) as uow:
            entity = await uow.objects().insert(
                ObjectEntity(register=internal_register.id, schema=schema.id, object={"a": 1})
            )

        assert entity.id is not None
        assert len(entity.uuid) == 36
        assert entity.created_at is not None

    @pytest.mark.asyncio
    async def test_find_by_uuid_and_for_register(self, engine, internal_register, schema):
        async with UnitOfWork(engine) as uow:
            mapper = uow.objects()
            first = await mapper.insert(ObjectEntity(register=internal_register.id, schema=schema.id, object={}))
            await mapper.insert(ObjectEntity(register=internal_register.id, schema=schema.id, object={}))

        async with UnitOfWork(engine) as uow:
            mapper = uow.objects()
            assert (await mapper.find_by_uuid(first.uuid)).id == first.id
            assert await mapper.find_by_uuid("missing") is None
            assert len(await mapper.find_for_register(internal_register.id)) == 2
            assert await mapper.find_for_register(internal_register.id + 100) == []

    @pytest.mark.asyncio
    async def test_duplicate_uuid_rejected_by_store(self, engine, internal_register, schema):
        async with UnitOfWork(engine) as uow:
            await uow.objects().insert(
                ObjectEntity(uuid="dup", register=internal_register.id, schema=schema.id, object={})
            )

        with pytest.raises(IntegrityError):
            async with UnitOfWork(engine) as uow:
                await uow.objects().insert(
                    ObjectEntity(uuid="dup", register=internal_register.id, schema=schema.id, object={})
                )

    @pytest.mark.asyncio
    async def test_rollback_on_error(self, engine):
        with pytest.raises(RuntimeError):
            async with UnitOfWork(engine) as uow:
                await uow.registers().insert(Register(title="Temporary"))
                raise RuntimeError("abort")

        async with UnitOfWork(engine) as uow:
            assert await uow.registers().list(where={"title": "Temporary"}) == []

    @pytest.mark.asyncio
    async def test_update_and_delete(self, engine, internal_register, schema):
        async with UnitOfWork(engine) as uow:
            mapper = uow.objects()
            entity = await mapper.insert(ObjectEntity(register=internal_register.id, schema=schema.id, object={"v": 1}))
            entity = await mapper.update(entity, object={"v": 2})
            assert entity.object == {"v": 2}
            assert await mapper.delete(entity.id) == 1
            assert await mapper.delete(entity.id) == 0
