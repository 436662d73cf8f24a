from __future__ import annotations

from typing import Optional

import httpx

from ..data_api.client import DataApiClient
from ..data_api.config import DataApiConfig
from ..db.engine import DBEngine
from ..db.models import Register, SourceType
from ..exceptions import UnsupportedSourceError
from .base import ObjectBackend
from .internal import InternalBackend
from .remote import RemoteDocumentBackend


def select_backend(
    register: Register,
    *,
    engine: DBEngine,
    transport: Optional[httpx.AsyncBaseTransport] = None,
) -> ObjectBackend:
    """Build the backend a register declares through its ``source``."""
    try:
        source = SourceType(register.source)
    except ValueError:
        raise UnsupportedSourceError(register.source) from None

    if source is SourceType.INTERNAL:
        return InternalBackend(engine, register)
    if source is SourceType.MONGODB:
        config = DataApiConfig.coerce(register.configuration or {})
        return RemoteDocumentBackend(DataApiClient(config, transport=transport), register=register)
    raise UnsupportedSourceError(register.source)


__all__ = [
    "ObjectBackend",
    "InternalBackend",
    "RemoteDocumentBackend",
    "select_backend",
]
