from __future__ import annotations

from typing import Optional


class OpenRegisterError(Exception):
    """Base class for every error raised by open_register."""


class UnsupportedSourceError(OpenRegisterError):
    """The register declares a storage source this library cannot handle."""

    def __init__(self, source: object):
        self.source = source
        super().__init__(f"Unsupported source type: {source!r}")


class UnsupportedOperationError(OpenRegisterError):
    """The selected backend does not implement the requested operation."""

    def __init__(self, backend: str, operation: str):
        self.backend = backend
        self.operation = operation
        super().__init__(f"{backend} backend does not support {operation}")


class ConfigurationError(OpenRegisterError):
    """Data API configuration is missing or invalid."""


class TransportError(OpenRegisterError):
    """Calling the remote data API failed (network error or non-2xx status)."""

    def __init__(self, action: str, message: str, *, status_code: Optional[int] = None):
        self.action = action
        self.status_code = status_code
        super().__init__(f"action/{action} failed: {message}")


class DecodeError(OpenRegisterError):
    """The remote data API answered with a body that is not valid JSON."""

    def __init__(self, action: str, message: str):
        self.action = action
        super().__init__(f"action/{action} returned an undecodable body: {message}")
