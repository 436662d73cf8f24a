from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from typing import Optional

import httpx
from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse

from ..app.settings import get_app_settings
from ..data_api.config import DataApiConfig, get_data_api_settings
from ..db.engine import DBEngine
from ..db.settings import get_db_settings
from ..exceptions import (
    ConfigurationError,
    DecodeError,
    OpenRegisterError,
    TransportError,
    UnsupportedOperationError,
    UnsupportedSourceError,
)
from ..service import ObjectService
from .routes import router

logger = logging.getLogger(__name__)

_STATUS_BY_ERROR: list[tuple[type[OpenRegisterError], int]] = [
    (UnsupportedSourceError, status.HTTP_400_BAD_REQUEST),
    (UnsupportedOperationError, status.HTTP_501_NOT_IMPLEMENTED),
    (TransportError, status.HTTP_502_BAD_GATEWAY),
    (DecodeError, status.HTTP_502_BAD_GATEWAY),
    (ConfigurationError, status.HTTP_500_INTERNAL_SERVER_ERROR),
]


async def _open_register_error_handler(request: Request, exc: Exception) -> JSONResponse:
    code = status.HTTP_500_INTERNAL_SERVER_ERROR
    for error_type, mapped in _STATUS_BY_ERROR:
        if isinstance(exc, error_type):
            code = mapped
            break
    logger.warning("%s on %s %s: %s", type(exc).__name__, request.method, request.url.path, exc)
    return JSONResponse(status_code=code, content={"error": type(exc).__name__, "detail": str(exc)})


def attach_open_register(
    app: FastAPI,
    *,
    engine: Optional[DBEngine] = None,
    data_api: Optional[DataApiConfig] = None,
    transport: Optional[httpx.AsyncBaseTransport] = None,
    create_tables: bool = False,
) -> ObjectService:
    """
    Mount the objects router and wire the gateway into the app, composing
    with any existing lifespan. The engine is disposed on shutdown.
    """
    engine = engine or DBEngine(get_db_settings())
    if data_api is None:
        settings = get_data_api_settings()
        data_api = settings.to_config() if settings.configured else None
    service = ObjectService(engine, data_api=data_api, transport=transport)

    app.state.open_register_engine = engine  # type: ignore[attr-defined]
    app.state.object_service = service  # type: ignore[attr-defined]
    app.include_router(router, prefix=get_app_settings().api_prefix)
    app.add_exception_handler(OpenRegisterError, _open_register_error_handler)

    existing = getattr(app.router, "lifespan_context", None)

    @asynccontextmanager
    async def composed_lifespan(_app: FastAPI):
        try:
            if create_tables:
                await engine.create_all()
            url = engine.engine.url.render_as_string(hide_password=True)
            logger.info("Open Register attached: store=%s data_api=%s", url, data_api.base_url if data_api else None)
            if existing:
                async with existing(_app):
                    yield
            else:
                yield
        finally:
            await engine.dispose()

    app.router.lifespan_context = composed_lifespan  # type: ignore[attr-defined]
    return service
