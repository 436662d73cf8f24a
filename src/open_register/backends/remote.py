from __future__ import annotations

import logging
from typing import Any, Mapping, Optional, Sequence

from ..data_api.client import DataApiClient
from ..db.base import new_uuid
from ..db.models import ObjectEntity, Register, Schema, SourceType
from ..exceptions import ConfigurationError

logger = logging.getLogger(__name__)


class RemoteDocumentBackend:
    """Objects stored as documents behind the remote data API."""

    source = SourceType.MONGODB

    def __init__(self, client: DataApiClient, *, register: Optional[Register] = None):
        self.client = client
        self.register = register

    async def save(self, schema: Schema, obj: Mapping[str, Any]) -> ObjectEntity:
        if self.register is None:
            raise ConfigurationError("Saving to the data API requires a register")

        payload = dict(obj)
        identifier = payload.get("id")
        identifier = str(identifier) if identifier is not None else new_uuid()
        payload["id"] = identifier
        logger.debug(
            "Upserting object %s",
            identifier,
            extra={"register": self.register.id, "schema": schema.id},
        )

        await self.client.update_one({"id": identifier}, payload, upsert=True)
        document = await self.client.find_one({"id": identifier})
        return ObjectEntity(
            uuid=identifier,
            register=self.register.id,
            schema=schema.id,
            object=document,
        )

    async def find_many(self, filters: Mapping[str, Any]) -> Any:
        return await self.client.find(filters)

    async def find_one(self, filters: Mapping[str, Any]) -> Optional[dict[str, Any]]:
        return await self.client.find_one(filters)

    async def update_one(self, filters: Mapping[str, Any], update: Mapping[str, Any]) -> Optional[dict[str, Any]]:
        # The acknowledgment only carries counts; the caller gets a fresh read.
        await self.client.update_one(filters, update, upsert=True)
        return await self.client.find_one(filters)

    async def delete_one(self, filters: Mapping[str, Any]) -> dict[str, Any]:
        await self.client.delete_one(filters)
        return {}

    async def aggregate(self, filters: Mapping[str, Any], pipeline: Sequence[Mapping[str, Any]]) -> Any:
        return await self.client.aggregate(filters, pipeline)
