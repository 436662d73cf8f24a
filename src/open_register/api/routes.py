from __future__ import annotations

from typing import Any, Optional

from fastapi import APIRouter, Body, HTTPException, status
from pydantic import BaseModel, Field

from ..db.engine import DBEngine
from ..db.models import Register, Schema
from ..db.uow import UnitOfWork
from .deps import EngineDep, ServiceDep

router = APIRouter(prefix="/registers", tags=["objects"])


class SearchIn(BaseModel):
    filter: dict[str, Any] = Field(default_factory=dict)


class AggregateIn(BaseModel):
    filter: dict[str, Any] = Field(default_factory=dict)
    pipeline: list[dict[str, Any]] = Field(default_factory=list)


async def _load(engine: DBEngine, register_id: int, schema_id: Optional[int] = None) -> tuple[Register, Optional[Schema]]:
    # Closed before the backend opens its own unit of work.
    async with UnitOfWork(engine) as uow:
        register = await uow.registers().get(register_id)
        if register is None:
            raise HTTPException(status.HTTP_404_NOT_FOUND, detail=f"Register {register_id} not found")
        schema = None
        if schema_id is not None:
            schema = await uow.schemas().get(schema_id)
            if schema is None:
                raise HTTPException(status.HTTP_404_NOT_FOUND, detail=f"Schema {schema_id} not found")
    return register, schema


@router.post("/{register_id}/schemas/{schema_id}/objects", status_code=status.HTTP_201_CREATED)
async def save_object(
    register_id: int,
    schema_id: int,
    service: ServiceDep,
    engine: EngineDep,
    obj: dict[str, Any] = Body(...),
) -> dict[str, Any]:
    register, schema = await _load(engine, register_id, schema_id)
    entity = await service.save_object(register, schema, obj)
    return entity.to_dict()


@router.post("/{register_id}/objects/search")
async def search_objects(register_id: int, data: SearchIn, service: ServiceDep, engine: EngineDep) -> Any:
    register, _ = await _load(engine, register_id)
    return await service.backend_for(register).find_many(data.filter)


@router.post("/{register_id}/objects/aggregate")
async def aggregate_objects(register_id: int, data: AggregateIn, service: ServiceDep, engine: EngineDep) -> Any:
    register, _ = await _load(engine, register_id)
    return await service.backend_for(register).aggregate(data.filter, data.pipeline)


@router.get("/{register_id}/objects/{object_id}")
async def get_object(register_id: int, object_id: str, service: ServiceDep, engine: EngineDep) -> dict[str, Any]:
    register, _ = await _load(engine, register_id)
    document = await service.backend_for(register).find_one({"id": object_id})
    if document is None:
        raise HTTPException(status.HTTP_404_NOT_FOUND, detail=f"Object {object_id} not found")
    return document


@router.delete("/{register_id}/objects/{object_id}")
async def delete_object(register_id: int, object_id: str, service: ServiceDep, engine: EngineDep) -> dict[str, Any]:
    register, _ = await _load(engine, register_id)
    return await service.backend_for(register).delete_one({"id": object_id})
