from .deps import get_engine, get_object_service
from .integration import attach_open_register
from .routes import router

__all__ = [
    "attach_open_register",
    "get_engine",
    "get_object_service",
    "router",
]
