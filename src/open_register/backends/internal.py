from __future__ import annotations

import logging
from typing import Any, Mapping, Optional, Sequence

from ..db.base import new_uuid
from ..db.engine import DBEngine
from ..db.models import ObjectEntity, Register, Schema, SourceType
from ..db.uow import UnitOfWork
from ..exceptions import UnsupportedOperationError

logger = logging.getLogger(__name__)


def _document(entity: ObjectEntity) -> dict[str, Any]:
    return {**entity.object, "id": entity.uuid}


def _matches(entity: ObjectEntity, filters: Mapping[str, Any]) -> bool:
    for key, value in filters.items():
        if key == "id":
            if entity.uuid != str(value):
                return False
        elif entity.object.get(key) != value:
            return False
    return True


class InternalBackend:
    """Objects stored as ObjectEntity rows in the local SQL store.

    Filters are equality matches on top-level payload keys; ``id`` matches
    the record uuid. Documents read back carry that uuid under ``id``, so a
    payload saved with ``{"id": 5}`` reads back as ``{"id": "5"}``, the same
    string form the remote backend writes.
    """

    source = SourceType.INTERNAL

    def __init__(self, engine: DBEngine, register: Register):
        self._engine = engine
        self.register = register

    def _log_extra(self, schema: Optional[Schema] = None) -> dict[str, Any]:
        extra: dict[str, Any] = {"register": self.register.id}
        if schema is not None:
            extra["schema"] = schema.id
        return extra

    async def save(self, schema: Schema, obj: Mapping[str, Any]) -> ObjectEntity:
        payload = dict(obj)
        identifier = payload.get("id")

        async with UnitOfWork(self._engine) as uow:
            mapper = uow.objects()
            if identifier is not None:
                existing = await mapper.find_by_uuid(str(identifier))
                if existing is not None:
                    logger.debug("Updating object %s", existing.uuid, extra=self._log_extra(schema))
                    return await mapper.update(
                        existing,
                        register=self.register.id,
                        schema=schema.id,
                        object=payload,
                    )

            entity = ObjectEntity(
                uuid=str(identifier) if identifier is not None else new_uuid(),
                register=self.register.id,
                schema=schema.id,
                object=payload,
            )
            logger.debug("Inserting object %s", entity.uuid, extra=self._log_extra(schema))
            return await mapper.insert(entity)

    async def _matching(self, uow: UnitOfWork, filters: Mapping[str, Any]) -> list[ObjectEntity]:
        entities = await uow.objects().find_for_register(self.register.id)
        return [e for e in entities if _matches(e, filters)]

    async def find_many(self, filters: Mapping[str, Any]) -> list[dict[str, Any]]:
        async with UnitOfWork(self._engine) as uow:
            return [_document(e) for e in await self._matching(uow, filters)]

    async def find_one(self, filters: Mapping[str, Any]) -> Optional[dict[str, Any]]:
        async with UnitOfWork(self._engine) as uow:
            found = await self._matching(uow, filters)
            return _document(found[0]) if found else None

    async def update_one(self, filters: Mapping[str, Any], update: Mapping[str, Any]) -> Optional[dict[str, Any]]:
        # A record cannot be created here without a schema, so no upsert.
        async with UnitOfWork(self._engine) as uow:
            found = await self._matching(uow, filters)
            if found:
                target = found[0]
                await uow.objects().update(target, object={**target.object, **update})
        return await self.find_one(filters)

    async def delete_one(self, filters: Mapping[str, Any]) -> dict[str, Any]:
        async with UnitOfWork(self._engine) as uow:
            found = await self._matching(uow, filters)
            if found:
                await uow.objects().delete(found[0].id)
                logger.debug("Deleted object %s", found[0].uuid, extra=self._log_extra())
        return {}

    async def aggregate(self, filters: Mapping[str, Any], pipeline: Sequence[Mapping[str, Any]]) -> Any:
        raise UnsupportedOperationError(self.source.value, "aggregate")
