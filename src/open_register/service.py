"""
Object gateway.

Routes object operations to the backend a register declares: the local
SQL store for ``internal`` registers, the remote data API for ``mongodb``
registers. The config-driven operations (find/update/delete/aggregate)
always talk to the data API.
"""
from __future__ import annotations

import logging
from typing import Any, Mapping, Optional, Sequence, Union

import httpx

from .backends import ObjectBackend, RemoteDocumentBackend, select_backend
from .data_api.client import DataApiClient
from .data_api.config import DataApiConfig
from .db.engine import DBEngine
from .db.models import ObjectEntity, Register, Schema
from .exceptions import ConfigurationError

logger = logging.getLogger(__name__)

ConfigLike = Union[DataApiConfig, Mapping[str, Any]]


class ObjectService:
    def __init__(
        self,
        engine: DBEngine,
        *,
        data_api: Optional[ConfigLike] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self._engine = engine
        self._data_api = DataApiConfig.coerce(data_api) if data_api is not None else None
        self._transport = transport

    def backend_for(self, register: Register) -> ObjectBackend:
        """Backend selected from ``register.source``; hold on to it to reuse it."""
        return select_backend(register, engine=self._engine, transport=self._transport)

    def _remote(self, config: Optional[ConfigLike]) -> RemoteDocumentBackend:
        if config is not None:
            resolved = DataApiConfig.coerce(config)
        elif self._data_api is not None:
            resolved = self._data_api
        else:
            raise ConfigurationError("No data API configuration given and no default configured")
        return RemoteDocumentBackend(DataApiClient(resolved, transport=self._transport))

    async def save_object(self, register: Register, schema: Schema, obj: Mapping[str, Any]) -> ObjectEntity:
        """Create or update an object in the register's backend.

        Raises UnsupportedSourceError when the register's source is not a
        supported kind.
        """
        backend = self.backend_for(register)
        entity = await backend.save(schema, obj)
        logger.info(
            "Saved object %s",
            entity.uuid,
            extra={"register": register.id, "schema": schema.id},
        )
        return entity

    async def find_objects(self, filters: Mapping[str, Any], config: Optional[ConfigLike] = None) -> Any:
        return await self._remote(config).find_many(filters)

    async def find_object(self, filters: Mapping[str, Any], config: Optional[ConfigLike] = None) -> Optional[dict[str, Any]]:
        """Single document matching `filters`, or None when the API returns none."""
        return await self._remote(config).find_one(filters)

    async def update_object(
        self,
        filters: Mapping[str, Any],
        update: Mapping[str, Any],
        config: Optional[ConfigLike] = None,
    ) -> Optional[dict[str, Any]]:
        """Upsert `update` into the first match and return a fresh read of it."""
        return await self._remote(config).update_one(filters, update)

    async def delete_object(self, filters: Mapping[str, Any], config: Optional[ConfigLike] = None) -> dict[str, Any]:
        return await self._remote(config).delete_one(filters)

    async def aggregate_objects(
        self,
        filters: Mapping[str, Any],
        pipeline: Sequence[Mapping[str, Any]],
        config: Optional[ConfigLike] = None,
    ) -> Any:
        return await self._remote(config).aggregate(filters, pipeline)
