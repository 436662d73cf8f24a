from __future__ import annotations

from enum import StrEnum
from typing import Any, Optional

from sqlalchemy import JSON, ForeignKey, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from .base import Base, IdentityMixin, TimestampMixin


class SourceType(StrEnum):
    """Storage backends a register can declare."""

    INTERNAL = "internal"
    MONGODB = "mongodb"


class Register(IdentityMixin, TimestampMixin, Base):
    """A logical collection of objects and the backend that stores them.

    For external sources `configuration` holds the connection parameters
    (base URL, API key, cluster name, database, collection).
    """

    __tablename__ = "registers"

    title: Mapped[str] = mapped_column(String(255), nullable=False)
    description: Mapped[Optional[str]] = mapped_column(Text, default=None)
    source: Mapped[str] = mapped_column(String(64), nullable=False, default=SourceType.INTERNAL.value)
    configuration: Mapped[dict[str, Any]] = mapped_column(JSON, nullable=False, default=dict)

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "uuid": self.uuid,
            "title": self.title,
            "description": self.description,
            "source": self.source,
        }


class Schema(IdentityMixin, TimestampMixin, Base):
    __tablename__ = "schemas"

    title: Mapped[str] = mapped_column(String(255), nullable=False)
    version: Mapped[str] = mapped_column(String(32), nullable=False, default="0.0.1")
    properties: Mapped[dict[str, Any]] = mapped_column(JSON, nullable=False, default=dict)

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "uuid": self.uuid,
            "title": self.title,
            "version": self.version,
            "properties": self.properties,
        }


class ObjectEntity(IdentityMixin, TimestampMixin, Base):
    """Persisted form of an object: register, schema, uuid and raw payload."""

    __tablename__ = "objects"

    register: Mapped[int] = mapped_column("register_id", ForeignKey("registers.id"), index=True)
    schema: Mapped[int] = mapped_column("schema_id", ForeignKey("schemas.id"), index=True)
    object: Mapped[dict[str, Any]] = mapped_column(JSON, nullable=False, default=dict)

    def to_dict(self) -> dict[str, Any]:
        created = getattr(self, "created_at", None)
        updated = getattr(self, "updated_at", None)
        return {
            "id": self.id,
            "uuid": self.uuid,
            "register": self.register,
            "schema": self.schema,
            "object": self.object,
            "created": created.isoformat() if created else None,
            "updated": updated.isoformat() if updated else None,
        }
