from __future__ import annotations

import os
from typing import Any, Optional

import httpx

DEFAULT_TIMEOUT_SECONDS = 10.0


def get_default_timeout_seconds() -> float:
    """Timeout for outbound calls; HTTP_CLIENT_TIMEOUT_SECONDS overrides 10s."""
    raw = os.getenv("HTTP_CLIENT_TIMEOUT_SECONDS")
    if not raw:
        return DEFAULT_TIMEOUT_SECONDS
    try:
        return float(raw)
    except ValueError:
        return DEFAULT_TIMEOUT_SECONDS


def _timeout(seconds: Optional[float]) -> httpx.Timeout:
    return httpx.Timeout(seconds if seconds is not None else get_default_timeout_seconds())


def new_async_httpx_client(*, timeout_seconds: Optional[float] = None, **kwargs: Any) -> httpx.AsyncClient:
    return httpx.AsyncClient(timeout=_timeout(timeout_seconds), **kwargs)
