from __future__ import annotations

import asyncio
import json
from typing import Any, Optional

import typer

from .app.logging import setup_logging
from .backends import RemoteDocumentBackend
from .data_api.client import DataApiClient
from .data_api.config import DataApiConfig, get_data_api_settings
from .db.engine import DBEngine
from .db.models import Register, Schema, SourceType
from .db.settings import DBSettings, get_db_settings
from .db.uow import UnitOfWork
from .exceptions import OpenRegisterError
from .service import ObjectService

app = typer.Typer(no_args_is_help=True, add_completion=False, help="Open Register object store tools")

DatabaseUrlOpt = typer.Option(None, "--database-url", help="Override DB_DATABASE_URL / DATABASE_URL")


def _engine(database_url: Optional[str]) -> DBEngine:
    settings = DBSettings(database_url=database_url) if database_url else get_db_settings()
    return DBEngine(settings)


def _parse_json(raw: str, what: str) -> Any:
    try:
        return json.loads(raw)
    except ValueError as exc:
        raise typer.BadParameter(f"{what} is not valid JSON: {exc}") from exc


def _echo(data: Any) -> None:
    typer.echo(json.dumps(data, indent=2, default=str))


def _run(coro) -> Any:
    try:
        return asyncio.run(coro)
    except OpenRegisterError as exc:
        typer.secho(f"{type(exc).__name__}: {exc}", fg=typer.colors.RED, err=True)
        raise typer.Exit(code=1) from exc


@app.callback()
def main(log_level: Optional[str] = typer.Option(None, "--log-level", help="Override LOG_LEVEL")) -> None:
    setup_logging(level=log_level)


@app.command("init-db")
def init_db(database_url: Optional[str] = DatabaseUrlOpt) -> None:
    """Create the registers, schemas and objects tables."""

    async def run() -> None:
        engine = _engine(database_url)
        try:
            await engine.create_all()
        finally:
            await engine.dispose()

    _run(run())
    typer.echo("Tables created.")


@app.command("create-register")
def create_register(
    title: str = typer.Option(..., help="Register title"),
    source: str = typer.Option(SourceType.INTERNAL.value, help="Storage source: internal or mongodb"),
    configuration: str = typer.Option("{}", help="JSON connection parameters for external sources"),
    description: Optional[str] = typer.Option(None),
    database_url: Optional[str] = DatabaseUrlOpt,
) -> None:
    config = _parse_json(configuration, "--configuration")
    if not isinstance(config, dict):
        raise typer.BadParameter("--configuration must be a JSON object")

    async def run() -> dict[str, Any]:
        engine = _engine(database_url)
        try:
            async with UnitOfWork(engine) as uow:
                register = Register(title=title, description=description, source=source, configuration=config)
                return (await uow.registers().insert(register)).to_dict()
        finally:
            await engine.dispose()

    _echo(_run(run()))


@app.command("create-schema")
def create_schema(
    title: str = typer.Option(..., help="Schema title"),
    version: str = typer.Option("0.0.1"),
    properties: str = typer.Option("{}", help="JSON property definitions"),
    database_url: Optional[str] = DatabaseUrlOpt,
) -> None:
    props = _parse_json(properties, "--properties")

    async def run() -> dict[str, Any]:
        engine = _engine(database_url)
        try:
            async with UnitOfWork(engine) as uow:
                schema = Schema(title=title, version=version, properties=props)
                return (await uow.schemas().insert(schema)).to_dict()
        finally:
            await engine.dispose()

    _echo(_run(run()))


@app.command("save-object")
def save_object(
    register_id: int = typer.Argument(...),
    schema_id: int = typer.Argument(...),
    payload: str = typer.Argument(..., help="Object as JSON"),
    database_url: Optional[str] = DatabaseUrlOpt,
) -> None:
    """Save an object into a register, creating or updating by its id."""
    obj = _parse_json(payload, "payload")
    if not isinstance(obj, dict):
        raise typer.BadParameter("payload must be a JSON object")

    async def run() -> dict[str, Any]:
        engine = _engine(database_url)
        try:
            async with UnitOfWork(engine) as uow:
                register = await uow.registers().get(register_id)
                schema = await uow.schemas().get(schema_id)
            if register is None or schema is None:
                raise typer.BadParameter(f"register {register_id} or schema {schema_id} does not exist")
            entity = await ObjectService(engine).save_object(register, schema, obj)
            return entity.to_dict()
        finally:
            await engine.dispose()

    _echo(_run(run()))


@app.command("find-objects")
def find_objects(
    filter_: str = typer.Option("{}", "--filter", help="JSON filter"),
    base_url: Optional[str] = typer.Option(None, help="Data API base URL (default DATA_API_BASE_URL)"),
    data_source: Optional[str] = typer.Option(None, help="Cluster name (default DATA_API_DATA_SOURCE)"),
    api_key: Optional[str] = typer.Option(None, envvar="DATA_API_API_KEY"),
) -> None:
    """Query the remote data API."""
    filters = _parse_json(filter_, "--filter")

    async def run() -> Any:
        settings = get_data_api_settings()
        if base_url or data_source or api_key:
            config = DataApiConfig.coerce(
                {
                    "base_url": base_url or settings.base_url,
                    "data_source": data_source or settings.data_source,
                    "api_key": api_key or settings.api_key,
                    "database": settings.database,
                    "collection": settings.collection,
                }
            )
        else:
            config = settings.to_config()
        return await RemoteDocumentBackend(DataApiClient(config)).find_many(filters)

    _echo(_run(run()))


if __name__ == "__main__":
    app()
