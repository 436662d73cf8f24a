from __future__ import annotations

from typing import Any, Mapping, Optional, Protocol, Sequence, runtime_checkable

from ..db.models import ObjectEntity, Schema


@runtime_checkable
class ObjectBackend(Protocol):
    """Capabilities every storage backend of a register offers."""

    async def save(self, schema: Schema, obj: Mapping[str, Any]) -> ObjectEntity:
        ...

    async def find_many(self, filters: Mapping[str, Any]) -> Any:
        ...

    async def find_one(self, filters: Mapping[str, Any]) -> Optional[dict[str, Any]]:
        ...

    async def update_one(self, filters: Mapping[str, Any], update: Mapping[str, Any]) -> Optional[dict[str, Any]]:
        ...

    async def delete_one(self, filters: Mapping[str, Any]) -> dict[str, Any]:
        ...

    async def aggregate(self, filters: Mapping[str, Any], pipeline: Sequence[Mapping[str, Any]]) -> Any:
        ...
