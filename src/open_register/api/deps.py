from __future__ import annotations

from typing import Annotated

from fastapi import Depends, Request

from ..db.engine import DBEngine
from ..service import ObjectService


def get_engine(request: Request) -> DBEngine:
    return request.app.state.open_register_engine  # type: ignore[attr-defined]


def get_object_service(request: Request) -> ObjectService:
    return request.app.state.object_service  # type: ignore[attr-defined]


ServiceDep = Annotated[ObjectService, Depends(get_object_service)]
EngineDep = Annotated[DBEngine, Depends(get_engine)]
