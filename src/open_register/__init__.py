from .exceptions import (
    ConfigurationError,
    DecodeError,
    OpenRegisterError,
    TransportError,
    UnsupportedOperationError,
    UnsupportedSourceError,
)
from .backends import InternalBackend, ObjectBackend, RemoteDocumentBackend, select_backend
from .data_api import DataApiClient, DataApiConfig, DataApiSettings
from .db import DBEngine, DBSettings, ObjectEntity, Register, Schema, SourceType, UnitOfWork
from .service import ObjectService

__all__ = [
    # Gateway
    "ObjectService",
    # Backends
    "ObjectBackend",
    "InternalBackend",
    "RemoteDocumentBackend",
    "select_backend",
    # Remote data API
    "DataApiClient",
    "DataApiConfig",
    "DataApiSettings",
    # Local store
    "DBEngine",
    "DBSettings",
    "UnitOfWork",
    "Register",
    "Schema",
    "ObjectEntity",
    "SourceType",
    # Errors
    "OpenRegisterError",
    "UnsupportedSourceError",
    "UnsupportedOperationError",
    "ConfigurationError",
    "TransportError",
    "DecodeError",
]
