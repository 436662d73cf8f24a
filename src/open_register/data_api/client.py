from __future__ import annotations

import logging
from typing import Any, Mapping, Optional, Sequence

import httpx

from ..exceptions import DecodeError, TransportError
from ..http import new_async_httpx_client
from .config import DataApiConfig

logger = logging.getLogger(__name__)


class DataApiClient:
    """Thin client for a document database data API.

    Every call POSTs a JSON envelope to ``action/<name>`` on a client
    created for that call only. Failures are raised, never retried.
    """

    def __init__(self, config: DataApiConfig, *, transport: Optional[httpx.AsyncBaseTransport] = None):
        self.config = config
        self._transport = transport

    def _new_client(self) -> httpx.AsyncClient:
        kwargs: dict[str, Any] = {
            "base_url": self.config.base_url,
            "headers": self.config.headers(),
        }
        if self._transport is not None:
            kwargs["transport"] = self._transport
        return new_async_httpx_client(timeout_seconds=self.config.timeout, **kwargs)

    async def _post(self, action: str, payload: dict[str, Any]) -> Any:
        log_extra = {"action": action, "data_source": self.config.data_source}
        logger.debug("POST action/%s filter=%s", action, payload.get("filter"), extra=log_extra)

        async with self._new_client() as client:
            try:
                response = await client.post(f"action/{action}", json=payload)
                response.raise_for_status()
            except httpx.HTTPStatusError as exc:
                status = exc.response.status_code
                logger.warning("action/%s answered %s", action, status, extra=log_extra)
                raise TransportError(action, f"HTTP {status}", status_code=status) from exc
            except httpx.HTTPError as exc:
                logger.warning("action/%s transport failure: %s", action, exc, extra=log_extra)
                raise TransportError(action, str(exc) or type(exc).__name__) from exc

        try:
            return response.json()
        except ValueError as exc:
            logger.warning("action/%s returned non-JSON body", action, extra=log_extra)
            raise DecodeError(action, str(exc)) from exc

    async def find(self, filters: Mapping[str, Any]) -> Any:
        return await self._post("find", self.config.envelope(filters))

    async def find_one(self, filters: Mapping[str, Any]) -> Optional[dict[str, Any]]:
        result = await self._post("findOne", self.config.envelope(filters))
        if not isinstance(result, Mapping):
            return None
        return result.get("document")

    async def update_one(self, filters: Mapping[str, Any], update: Mapping[str, Any], *, upsert: bool = True) -> Any:
        payload = self.config.envelope(filters)
        payload["update"] = {"$set": dict(update)}
        payload["upsert"] = upsert
        return await self._post("updateOne", payload)

    async def delete_one(self, filters: Mapping[str, Any]) -> Any:
        return await self._post("deleteOne", self.config.envelope(filters))

    async def aggregate(self, filters: Mapping[str, Any], pipeline: Sequence[Mapping[str, Any]]) -> Any:
        payload = self.config.envelope(filters)
        payload["pipeline"] = [dict(stage) for stage in pipeline]
        return await self._post("aggregate", payload)
