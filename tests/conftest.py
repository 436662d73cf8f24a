"""
Root conftest.py for open-register tests.

Provides:
1. FakeDataApi, an in-memory document store served through httpx.MockTransport
2. Local store fixtures (in-memory SQLite engine, registers, schemas)
3. The ObjectService wired to both
"""

from __future__ import annotations

import json
from typing import Any, Dict, List, Optional

import httpx
import pytest
import pytest_asyncio

from open_register.data_api import DataApiConfig
from open_register.db import Register, Schema, SourceType, UnitOfWork, ephemeral_db
from open_register.service import ObjectService


# =============================================================================
# FAKE DATA API
# =============================================================================


class FakeDataApi:
    """Answers action/* requests from a list of documents.

    Every request is recorded in `requests` as (action, body, headers).
    """

    def __init__(self, documents: Optional[List[Dict[str, Any]]] = None):
        self.documents: List[Dict[str, Any]] = [dict(d) for d in documents or []]
        self.requests: List[tuple[str, Dict[str, Any], httpx.Headers]] = []

    @staticmethod
    def _matches(doc: Dict[str, Any], flt: Dict[str, Any]) -> bool:
        return all(doc.get(k) == v for k, v in flt.items())

    def _filtered(self, flt: Dict[str, Any]) -> List[Dict[str, Any]]:
        return [d for d in self.documents if self._matches(d, flt)]

    def handler(self, request: httpx.Request) -> httpx.Response:
        body = json.loads(request.content)
        action = request.url.path.rsplit("/", 1)[-1]
        self.requests.append((action, body, request.headers))
        flt = body.get("filter", {})

        if action == "find":
            return httpx.Response(200, json=self._filtered(flt))

        if action == "findOne":
            found = self._filtered(flt)
            return httpx.Response(200, json={"document": found[0] if found else None})

        if action == "updateOne":
            changes = body["update"]["$set"]
            found = self._filtered(flt)
            if found:
                found[0].update(changes)
                return httpx.Response(200, json={"matchedCount": 1, "modifiedCount": 1})
            if body.get("upsert"):
                self.documents.append({**flt, **changes})
                return httpx.Response(200, json={"matchedCount": 0, "modifiedCount": 0, "upsertedId": "x"})
            return httpx.Response(200, json={"matchedCount": 0, "modifiedCount": 0})

        if action == "deleteOne":
            found = self._filtered(flt)
            if found:
                self.documents.remove(found[0])
            return httpx.Response(200, json={"deletedCount": len(found[:1])})

        if action == "aggregate":
            docs = self._filtered(flt)
            for stage in body.get("pipeline", []):
                if "$match" in stage:
                    docs = [d for d in docs if self._matches(d, stage["$match"])]
                elif "$count" in stage:
                    docs = [{stage["$count"]: len(docs)}]
            return httpx.Response(200, json=docs)

        return httpx.Response(404, json={"error": f"unknown action {action}"})

    @property
    def transport(self) -> httpx.MockTransport:
        return httpx.MockTransport(self.handler)

    def actions(self) -> List[str]:
        return [action for action, _, _ in self.requests]


FIXTURE_DOCUMENTS = [
    {"id": "a1", "name": "Amsterdam", "kind": "city"},
    {"id": "b2", "name": "Utrecht", "kind": "city"},
    {"id": "c3", "name": "Noord-Holland", "kind": "province"},
]


@pytest.fixture
def fake_api() -> FakeDataApi:
    return FakeDataApi(FIXTURE_DOCUMENTS)


@pytest.fixture
def data_api_config() -> DataApiConfig:
    return DataApiConfig(
        base_url="https://data.example.test/app/data-abc/endpoint/data/v1",
        api_key="secret-key",
        data_source="Cluster0",
    )


# =============================================================================
# LOCAL STORE
# =============================================================================


@pytest_asyncio.fixture
async def engine():
    async with ephemeral_db() as eng:
        yield eng


async def _insert(engine, entity):
    async with UnitOfWork(engine) as uow:
        mapper = uow.registers() if isinstance(entity, Register) else uow.schemas()
        return await mapper.insert(entity)


@pytest_asyncio.fixture
async def internal_register(engine) -> Register:
    return await _insert(engine, Register(title="Cities", source=SourceType.INTERNAL.value))


@pytest_asyncio.fixture
async def mongodb_register(engine, data_api_config) -> Register:
    configuration = {
        "base_uri": data_api_config.base_url,
        "mongodbCluster": data_api_config.data_source,
        "headers": {"api-key": "secret-key"},
    }
    return await _insert(
        engine,
        Register(title="Remote cities", source=SourceType.MONGODB.value, configuration=configuration),
    )


@pytest_asyncio.fixture
async def schema(engine) -> Schema:
    return await _insert(engine, Schema(title="City", properties={"name": {"type": "string"}}))


@pytest.fixture
def service(engine, data_api_config, fake_api) -> ObjectService:
    return ObjectService(engine, data_api=data_api_config, transport=fake_api.transport)
