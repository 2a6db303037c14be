from __future__ import annotations

"""``itunes`` command line: term searches and id lookups."""

import json
from dataclasses import replace
from typing import Callable

import click
from tabulate import tabulate

from itunesSearch import __version__
from itunesSearch.api_clients import ITunesClient
from itunesSearch.config import as_dict, load_config
from itunesSearch.errors import ITunesError
from itunesSearch.models.search import Entity, Search, SearchResult
from itunesSearch.utils.deadline import Deadline

_TABLE_COLUMNS = (
    ("trackId", "ID"),
    ("kind", "Kind"),
    ("trackName", "Track"),
    ("artistName", "Artist"),
    ("collectionName", "Collection"),
    ("trackPrice", "Price"),
    ("currency", "Currency"),
)


def _render(result: SearchResult, fmt: str) -> str:
    payload = result.to_dict()
    if fmt == "table":
        rows = [[item[key] for key, _ in _TABLE_COLUMNS] for item in payload["results"]]
        table = tabulate(rows, headers=[title for _, title in _TABLE_COLUMNS])
        return f"{table}\n\n{result.result_count} result(s)"
    return json.dumps(payload, indent=2, ensure_ascii=False)


def _run(
    ctx: click.Context,
    call: Callable[[ITunesClient, Deadline | None], SearchResult],
    timeout: float | None,
    fmt: str,
) -> None:
    deadline = Deadline(timeout) if timeout is not None else None
    try:
        with ITunesClient(config=ctx.obj["config"]) as client:
            result = call(client, deadline)
    except ITunesError as exc:
        raise click.ClickException(str(exc))
    click.echo(_render(result, fmt))


_format_option = click.option(
    "--format",
    "fmt",
    type=click.Choice(["json", "table"]),
    default="json",
    show_default=True,
    help="Output format.",
)
_timeout_option = click.option(
    "--timeout",
    type=click.FloatRange(min=0, min_open=True),
    default=None,
    help="Give up after this many seconds.",
)


@click.group()
@click.version_option(__version__)
@click.option("--log-level", default=None, help="Override ITUNES_LOG_LEVEL.")
@click.pass_context
def cli(ctx: click.Context, log_level: str | None) -> None:
    """Query the iTunes Search API."""
    try:
        config = load_config()
    except ValueError as exc:
        raise click.ClickException(f"invalid configuration: {exc}")
    if log_level:
        config = replace(config, log_level=log_level)
    ctx.ensure_object(dict)
    ctx.obj["config"] = config


@cli.command()
@click.argument("term")
@click.option("--country", default="", help="Two-letter store country code.")
@click.option("--media", default="", help="Media type, e.g. music or movie.")
@click.option(
    "--entity",
    type=click.Choice([e.value for e in Entity]),
    default=None,
    help="Kind of result to return.",
)
@click.option("--attribute", default="", help="Attribute the term is matched against.")
@click.option("--lang", "language", default="", help="Result language, e.g. en_us.")
@click.option("--limit", type=click.IntRange(min=1), default=None, help="Maximum results.")
@click.option("--api-version", "api_version", default="", help="Search result key version.")
@click.option("--explicit/--no-explicit", default=None, help="Include explicit content.")
@_timeout_option
@_format_option
@click.pass_context
def search(
    ctx: click.Context,
    term: str,
    country: str,
    media: str,
    entity: str | None,
    attribute: str,
    language: str,
    limit: int | None,
    api_version: str,
    explicit: bool | None,
    timeout: float | None,
    fmt: str,
) -> None:
    """Search the store for TERM."""
    request = Search(
        term=term,
        country=country,
        media=media,
        entity=entity,
        attribute=attribute,
        language=language,
        limit=limit,
        version=api_version,
        explicit=explicit,
    )
    _run(ctx, lambda client, deadline: client.search(request, deadline=deadline), timeout, fmt)


@cli.command()
@click.argument("identifier")
@_timeout_option
@_format_option
@click.pass_context
def lookup(ctx: click.Context, identifier: str, timeout: float | None, fmt: str) -> None:
    """Look up a catalog entry by IDENTIFIER."""
    _run(ctx, lambda client, deadline: client.search_by_id(identifier, deadline=deadline), timeout, fmt)


@cli.command(name="config")
@click.pass_context
def show_config(ctx: click.Context) -> None:
    """Print the effective client configuration."""
    click.echo(json.dumps(as_dict(ctx.obj["config"]), sort_keys=True, indent=2))


def main() -> None:  # pragma: no cover - console script
    cli(obj={})


if __name__ == "__main__":  # pragma: no cover - manual usage
    main()
