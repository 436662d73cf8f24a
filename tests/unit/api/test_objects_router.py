from __future__ import annotations

import httpx
import pytest
import pytest_asyncio
from fastapi import FastAPI
from httpx import ASGITransport, AsyncClient

from open_register.api import attach_open_register
from open_register.db import Register, UnitOfWork


@pytest_asyncio.fixture
async def client(engine, data_api_config, fake_api):
    app = FastAPI()
    attach_open_register(app, engine=engine, data_api=data_api_config, transport=fake_api.transport)
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as c:
        yield c


@pytest.mark.asyncio
class TestObjectsRouter:
    async def test_save_internal_object(self, client, internal_register, schema):
        res = await client.post(
            f"/api/registers/{internal_register.id}/schemas/{schema.id}/objects",
            json={"name": "Amsterdam"},
        )

        assert res.status_code == 201
        body = res.json()
        assert body["register"] == internal_register.id
        assert body["schema"] == schema.id
        assert body["object"] == {"name": "Amsterdam"}

        fetched = await client.get(f"/api/registers/{internal_register.id}/objects/{body['uuid']}")
        assert fetched.status_code == 200
        assert fetched.json() == {"name": "Amsterdam", "id": body["uuid"]}

    async def test_unknown_register_is_404(self, client, schema):
        res = await client.post(f"/api/registers/999/schemas/{schema.id}/objects", json={"name": "x"})

        assert res.status_code == 404

    async def test_unknown_schema_is_404(self, client, internal_register):
        res = await client.post(f"/api/registers/{internal_register.id}/schemas/999/objects", json={})

        assert res.status_code == 404

    async def test_unsupported_source_is_400(self, client, engine, schema):
        async with UnitOfWork(engine) as uow:
            register = await uow.registers().insert(Register(title="LDAP", source="ldap"))

        res = await client.post(f"/api/registers/{register.id}/schemas/{schema.id}/objects", json={"name": "x"})

        assert res.status_code == 400
        assert res.json()["error"] == "UnsupportedSourceError"

    async def test_search_remote_register(self, client, mongodb_register):
        res = await client.post(
            f"/api/registers/{mongodb_register.id}/objects/search",
            json={"filter": {"kind": "province"}},
        )

        assert res.status_code == 200
        assert res.json() == [{"id": "c3", "name": "Noord-Holland", "kind": "province"}]

    async def test_get_missing_object_is_404(self, client, mongodb_register):
        res = await client.get(f"/api/registers/{mongodb_register.id}/objects/zz")

        assert res.status_code == 404

    async def test_delete_returns_empty(self, client, mongodb_register, fake_api):
        res = await client.delete(f"/api/registers/{mongodb_register.id}/objects/a1")

        assert res.status_code == 200
        assert res.json() == {}
        assert len(fake_api.documents) == 2

    async def test_aggregate_on_internal_is_501(self, client, internal_register):
        res = await client.post(
            f"/api/registers/{internal_register.id}/objects/aggregate",
            json={"pipeline": [{"$count": "n"}]},
        )

        assert res.status_code == 501

    async def test_remote_failure_is_502(self, engine, data_api_config, mongodb_register):
        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(503, text="unavailable")

        app = FastAPI()
        attach_open_register(app, engine=engine, data_api=data_api_config, transport=httpx.MockTransport(handler))

        async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as c:
            res = await c.post(f"/api/registers/{mongodb_register.id}/objects/search", json={})

        assert res.status_code == 502
        assert res.json()["error"] == "TransportError"

    async def test_undecodable_remote_body_is_502(self, engine, data_api_config, mongodb_register):
        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(200, text="<html>maintenance</html>")

        app = FastAPI()
        attach_open_register(app, engine=engine, data_api=data_api_config, transport=httpx.MockTransport(handler))

        async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as c:
            res = await c.post(f"/api/registers/{mongodb_register.id}/objects/search", json={})

        assert res.status_code == 502
        assert res.json()["error"] == "DecodeError"

    async def test_invalid_register_configuration_is_500(self, client, engine):
        async with UnitOfWork(engine) as uow:
            register = await uow.registers().insert(
                Register(title="Half configured", source="mongodb", configuration={"base_uri": "https://x.test"})
            )

        res = await client.post(f"/api/registers/{register.id}/objects/search", json={})

        assert res.status_code == 500
        assert res.json()["error"] == "ConfigurationError"
