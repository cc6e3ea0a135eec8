"""Command-line interface for the Apple Music catalog client."""

from __future__ import annotations

import json
import os
import sys
from collections.abc import Callable
from datetime import date
from typing import TYPE_CHECKING, Any, TypeVar

import click
import httpx
from dotenv import load_dotenv
from rich.console import Console
from rich.table import Table

from applemusic import __version__
from applemusic.api import AppleMusicError, ConfigurationError, to_jsonable
from applemusic.client import RESOURCE_PATHS
from applemusic.config import client_configuration_from_config, get_config

if TYPE_CHECKING:
    from applemusic.client import Client
    from applemusic.models import Resource

# Load environment variables from .env file
load_dotenv()

console = Console()

R = TypeVar("R")

# search/charts are queried, not fetched by id
FETCHABLE_RESOURCES = sorted(
    path for attr, path in RESOURCE_PATHS.items() if attr not in ("search", "charts")
)


@click.group()
@click.version_option(version=__version__, prog_name="applemusic")
@click.option(
    "--token",
    envvar="APPLE_MUSIC_TOKEN",
    default=None,
    help="Developer token (default: from config or APPLE_MUSIC_TOKEN)",
)
@click.option("-v", "--verbose", is_flag=True, help="Show extra attributes in text output")
@click.pass_context
def main(ctx: click.Context, token: str | None, verbose: bool) -> None:
    """applemusic - Query the Apple Music catalog from the command line."""
    ctx.ensure_object(dict)
    ctx.obj["token"] = token
    ctx.obj["verbose"] = verbose


def _make_client(ctx: click.Context) -> Client:
    """Build a client from the loaded config; --token only replaces the token."""
    from applemusic.client import Client

    cfg = get_config()
    configuration = client_configuration_from_config(cfg, developer_token=ctx.obj.get("token"))
    return Client(configuration=configuration, timeout=cfg.options.timeout)


def _run(context: str, fn: Callable[[], R]) -> R:
    """Run a request, turning client errors into a message and exit code 1."""
    from applemusic.errors import get_friendly_message, log_error

    try:
        return fn()
    except (AppleMusicError, ConfigurationError, httpx.HTTPError) as e:
        log_error(e, context)
        console.print(f"[red]Error:[/red] {get_friendly_message(e)}")
        sys.exit(1)
    except KeyboardInterrupt:
        console.print("\n[yellow]Cancelled.[/yellow]")
        sys.exit(130)


def _format_value(value: Any) -> str:
    if value is None:
        return ""
    if isinstance(value, date):
        # Also covers datetime instants
        return value.isoformat()
    if isinstance(value, list):
        return ", ".join(str(v) for v in value)
    return str(value)


def _resource_table(title: str, resources: list[Resource], verbose: bool) -> Table:
    """Build a table of catalog resources."""
    table = Table(title=title, show_header=True, header_style="dim", box=None, padding=(0, 2))
    table.add_column("ID", style="dim")
    table.add_column("Type", style="dim")
    table.add_column("Name", style="white")
    table.add_column("Artist")
    table.add_column("Released", justify="right")
    if verbose:
        table.add_column("Genres", style="dim")
        table.add_column("URL", style="dim")

    for resource in resources:
        attributes = resource.get("attributes", {})
        row = [
            resource.get("id", ""),
            resource.get("type", ""),
            _format_value(attributes.get("name")),
            _format_value(attributes.get("artistName") or attributes.get("curatorName")),
            _format_value(attributes.get("releaseDate")),
        ]
        if verbose:
            row.append(_format_value(attributes.get("genreNames")))
            row.append(_format_value(attributes.get("url")))
        table.add_row(*row)

    return table


def _output(body: dict[str, Any], format: str, verbose: bool) -> None:
    if format == "json":
        console.print_json(json.dumps(to_jsonable(body)))
        return

    if body.get("data"):
        console.print(_resource_table("Results", body["data"], verbose))

    # Search and charts group results by type
    results = body.get("results") or {}
    for group_name, group in results.items():
        if isinstance(group, list):
            # charts: {"songs": [{"name": ..., "data": [...]}]}
            for chart in group:
                title = chart.get("name", group_name)
                console.print(_resource_table(title, chart.get("data", []), verbose))
        elif isinstance(group, dict):
            console.print(_resource_table(group_name, group.get("data", []), verbose))

    if not body.get("data") and not results:
        console.print("[dim]No results.[/dim]")


_storefront_option = click.option(
    "--storefront", "-s", default=None, help="Storefront, e.g. us (default: from config)"
)
_language_option = click.option(
    "--language", "-L", default=None, help="Language tag, e.g. en-US (default: from config)"
)
_format_option = click.option(
    "--format",
    "-f",
    type=click.Choice(["text", "json"]),
    default="text",
    help="Output format",
)


@main.command()
@click.argument("resource", type=click.Choice(FETCHABLE_RESOURCES))
@click.argument("resource_id")
@_storefront_option
@_language_option
@_format_option
@click.pass_context
def get(
    ctx: click.Context,
    resource: str,
    resource_id: str,
    storefront: str | None,
    language: str | None,
    format: str,
) -> None:
    """Fetch one catalog resource by ID."""
    verbose = ctx.obj.get("verbose", False)

    def fetch() -> dict[str, Any]:
        with _make_client(ctx) as client:
            return client.resource(resource).get(
                resource_id, storefront=storefront, language_tag=language
            )

    body = _run(f"get {resource}/{resource_id}", fetch)
    _output(body, format, verbose)


@main.command()
@click.argument("term")
@click.option(
    "--types",
    "-t",
    default="songs,albums,artists",
    help="Comma-separated resource types to search",
)
@click.option("--limit", type=int, default=None, help="Results per type (default: from config)")
@_storefront_option
@_language_option
@_format_option
@click.pass_context
def search(
    ctx: click.Context,
    term: str,
    types: str,
    limit: int | None,
    storefront: str | None,
    language: str | None,
    format: str,
) -> None:
    """Search the catalog."""
    verbose = ctx.obj.get("verbose", False)
    if limit is None:
        limit = get_config().options.search_limit

    params = {"term": term, "types": types, "limit": limit}

    def fetch() -> dict[str, Any]:
        with _make_client(ctx) as client:
            return client.search.query(params, storefront=storefront, language_tag=language)

    body = _run(f"search {term}", fetch)
    _output(body, format, verbose)


@main.command()
@click.option(
    "--types", "-t", default="songs,albums", help="Comma-separated chart resource types"
)
@click.option("--genre", default=None, help="Genre ID to filter charts by")
@click.option("--chart", default=None, help="Chart name, e.g. most-played")
@click.option("--limit", type=int, default=None, help="Results per chart")
@_storefront_option
@_language_option
@_format_option
@click.pass_context
def charts(
    ctx: click.Context,
    types: str,
    genre: str | None,
    chart: str | None,
    limit: int | None,
    storefront: str | None,
    language: str | None,
    format: str,
) -> None:
    """Show catalog charts."""
    verbose = ctx.obj.get("verbose", False)

    params: dict[str, str | int] = {"types": types}
    if genre:
        params["genre"] = genre
    if chart:
        params["chart"] = chart
    if limit is not None:
        params["limit"] = limit

    def fetch() -> dict[str, Any]:
        with _make_client(ctx) as client:
            return client.charts.query(params, storefront=storefront, language_tag=language)

    body = _run("charts", fetch)
    _output(body, format, verbose)


@main.group()
def config() -> None:
    """Manage applemusic configuration."""
    pass


@config.command(name="show")
def config_show() -> None:
    """Show current configuration."""
    from applemusic.config import find_config_file

    cfg = get_config()
    config_file = find_config_file()

    console.print("[bold]Current Configuration[/bold]")
    console.print()

    if config_file:
        console.print(f"[dim]Config file:[/dim] {config_file}")
    else:
        console.print("[dim]Config file:[/dim] (none - using defaults)")
    console.print()

    console.print("[bold]Apple Music:[/bold]")
    if cfg.apple_music.developer_token:
        token = "(set)"
    elif os.environ.get("APPLE_MUSIC_TOKEN"):
        token = "(from APPLE_MUSIC_TOKEN env)"
    else:
        token = "(not set)"
    console.print(f"  Developer token: {token}")
    console.print(f"  Storefront: {cfg.apple_music.storefront or '(none)'}")
    console.print(f"  Language: {cfg.apple_music.language_tag or '(storefront default)'}")
    console.print()

    console.print("[bold]Options:[/bold]")
    console.print(f"  Timeout: {cfg.options.timeout:g}s")
    console.print(f"  Search limit: {cfg.options.search_limit}")


@config.command(name="path")
def config_path() -> None:
    """Show configuration file paths."""
    from pathlib import Path

    from applemusic.config import find_config_file, get_config_paths

    console.print("[bold]Configuration paths (in priority order):[/bold]")
    config_file = find_config_file()

    for path in get_config_paths():
        if path.exists():
            if path == config_file:
                console.print(f"  [green]{path}[/green] (active)")
            else:
                console.print(f"  {path} (exists)")
        else:
            console.print(f"  [dim]{path}[/dim]")

    console.print()
    console.print("[bold]Other paths:[/bold]")
    console.print(f"  .env file: {Path.cwd() / '.env'}")


@config.command(name="init")
@click.option("--force", is_flag=True, help="Overwrite existing config file")
def config_init(force: bool) -> None:
    """Create a default configuration file."""
    from applemusic.config import get_config_dir, save_default_config

    config_path = get_config_dir() / "applemusic.ini"

    if config_path.exists() and not force:
        console.print(f"[yellow]Config file already exists:[/yellow] {config_path}")
        console.print("Use --force to overwrite.")
        sys.exit(1)

    save_default_config(config_path)
    console.print(f"[green]Created config file:[/green] {config_path}")
    console.print("Edit this file to customize your settings.")


if __name__ == "__main__":
    main()
