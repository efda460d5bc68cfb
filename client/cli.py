"""CLI for inspecting and editing the dashboard's collections."""

from __future__ import annotations

import asyncio
import json
import logging
from typing import Any, Optional

import typer

from client.api import KNOWN_COLLECTIONS, ApiClient, create_client
from client.config import ClientConfig, load_config
from query.builder import QueryBuilder
from query.schemas import QueryResult

app = typer.Typer(help="LogiWMS data store CLI")

CONFIG_HELP = "Path to client YAML config (defaults when omitted)"
EQ_HELP = "Equality filter as field=value; repeatable"


def _open_client(config_path: str | None) -> ApiClient:
    try:
        config = load_config(config_path) if config_path else ClientConfig()
    except FileNotFoundError as e:
        typer.secho(f"❌ Config file not found: {e}", fg=typer.colors.RED, err=True)
        raise typer.Exit(1)
    except ValueError as e:
        typer.secho(f"❌ Invalid config: {e}", fg=typer.colors.RED, err=True)
        raise typer.Exit(1)
    logging.basicConfig(level=config.log_level)
    try:
        return create_client(config)
    except OSError as e:
        typer.secho(f"❌ Cannot open store: {e}", fg=typer.colors.RED, err=True)
        raise typer.Exit(1)


def _parse_filters(filters: list[str] | None) -> list[tuple[str, str]]:
    parsed: list[tuple[str, str]] = []
    for item in filters or []:
        field, sep, value = item.partition("=")
        if not sep or not field:
            raise typer.BadParameter(f"Expected field=value, got {item!r}", param_hint="--eq")
        parsed.append((field, value))
    return parsed


def _parse_record(text: str) -> dict[str, Any]:
    try:
        data = json.loads(text)
    except json.JSONDecodeError as e:
        raise typer.BadParameter(f"Not valid JSON: {e}")
    if not isinstance(data, dict):
        raise typer.BadParameter("Expected a JSON object")
    return data


async def _resolve(builder: QueryBuilder) -> QueryResult:
    return await builder


def _run(builder: QueryBuilder) -> None:
    result = asyncio.run(_resolve(builder))
    if result.error is not None:
        typer.secho(f"⚠️  {result.error}", fg=typer.colors.YELLOW, err=True)
    typer.echo(json.dumps(result.payload, ensure_ascii=False, indent=2, default=str))


def _filtered(client: ApiClient, collection: str, eq: list[str] | None) -> QueryBuilder:
    builder = client.from_(collection)
    for field, value in _parse_filters(eq):
        builder = builder.eq(field, value)
    return builder


@app.command()
def select(
    collection: str = typer.Argument(..., help="Collection to read"),
    eq: Optional[list[str]] = typer.Option(None, "--eq", help=EQ_HELP),
    order: Optional[str] = typer.Option(None, help="Field to sort by"),
    ascending: bool = typer.Option(False, "--asc/--desc", help="Sort direction"),
    limit: Optional[int] = typer.Option(None, help="Maximum number of records"),
    offset: int = typer.Option(0, help="Records to skip"),
    config: Optional[str] = typer.Option(None, "--config", help=CONFIG_HELP),
) -> None:
    """Print records from a collection as JSON."""
    with _open_client(config) as client:
        builder = _filtered(client, collection, eq).select("*")
        if order:
            builder = builder.order(order, ascending=ascending)
        if limit is not None:
            builder = builder.limit(limit)
        if offset:
            builder = builder.offset(offset)
        _run(builder)


@app.command()
def insert(
    collection: str = typer.Argument(..., help="Collection to insert into"),
    record: str = typer.Argument(..., help="Record as a JSON object"),
    config: Optional[str] = typer.Option(None, "--config", help=CONFIG_HELP),
) -> None:
    """Prepend a record to a collection."""
    payload = _parse_record(record)
    with _open_client(config) as client:
        _run(client.from_(collection).insert(payload))


@app.command()
def update(
    collection: str = typer.Argument(..., help="Collection to update"),
    changes: str = typer.Argument(..., help="Fields to merge, as a JSON object"),
    eq: Optional[list[str]] = typer.Option(None, "--eq", help=EQ_HELP),
    config: Optional[str] = typer.Option(None, "--config", help=CONFIG_HELP),
) -> None:
    """Merge fields into every record matching the filters."""
    payload = _parse_record(changes)
    with _open_client(config) as client:
        _run(_filtered(client, collection, eq).update(payload))


@app.command()
def delete(
    collection: str = typer.Argument(..., help="Collection to delete from"),
    eq: Optional[list[str]] = typer.Option(None, "--eq", help=EQ_HELP),
    config: Optional[str] = typer.Option(None, "--config", help=CONFIG_HELP),
) -> None:
    """Delete every record matching the filters (no filters deletes nothing)."""
    with _open_client(config) as client:
        _run(_filtered(client, collection, eq).delete())


@app.command()
def collections(
    show_known: bool = typer.Option(False, "--known", help="Also list dashboard collections not yet written"),
    config: Optional[str] = typer.Option(None, "--config", help=CONFIG_HELP),
) -> None:
    """List stored collections."""
    with _open_client(config) as client:
        names = set(client.store.collections())
        if show_known:
            names.update(KNOWN_COLLECTIONS)
        for name in sorted(names):
            typer.echo(name)


@app.command()
def clear(
    collection: str = typer.Argument(..., help="Collection to drop"),
    config: Optional[str] = typer.Option(None, "--config", help=CONFIG_HELP),
) -> None:
    """Remove a collection entirely."""
    with _open_client(config) as client:
        client.store.clear(collection)
    typer.secho(f"✅ Cleared {collection}", fg=typer.colors.GREEN)


@app.command()
def token(
    set_to: Optional[str] = typer.Option(None, "--set", help="Store a new session token"),
    clear_token: bool = typer.Option(False, "--clear", help="Remove the stored token"),
    config: Optional[str] = typer.Option(None, "--config", help=CONFIG_HELP),
) -> None:
    """Show, set or clear the persisted session token."""
    if set_to is not None and clear_token:
        typer.secho("❌ Use either --set or --clear", fg=typer.colors.RED, err=True)
        raise typer.Exit(1)
    with _open_client(config) as client:
        if clear_token:
            client.clear_token()
            typer.echo("cleared")
        elif set_to is not None:
            client.set_token(set_to)
            typer.echo("stored")
        else:
            current = client.get_token()
            if current is None:
                typer.secho("No session token stored", fg=typer.colors.YELLOW)
                raise typer.Exit(1)
            typer.echo(current)


if __name__ == "__main__":
    app()
