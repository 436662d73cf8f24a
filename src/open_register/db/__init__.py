# Local object store
from .settings import DBSettings, get_db_settings
from .engine import DBEngine
from .base import Base, IdentityMixin, TimestampMixin, new_uuid
from .models import ObjectEntity, Register, Schema, SourceType
from .mapper import Mapper, ObjectEntityMapper, RegisterMapper, SchemaMapper
from .uow import UnitOfWork
from .health import db_healthcheck
from .testing import ephemeral_db, make_sqlite_memory_engine

__all__ = [
    "DBSettings",
    "get_db_settings",
    "DBEngine",
    "Base",
    "IdentityMixin",
    "TimestampMixin",
    "new_uuid",
    "ObjectEntity",
    "Register",
    "Schema",
    "SourceType",
    "Mapper",
    "ObjectEntityMapper",
    "RegisterMapper",
    "SchemaMapper",
    "UnitOfWork",
    "db_healthcheck",
    "ephemeral_db",
    "make_sqlite_memory_engine",
]
