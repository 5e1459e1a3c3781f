"""CLI main entry point for BVG transit queries."""

import logging
import sys
from collections.abc import Callable
from datetime import datetime as dt_module
from typing import Any

import click
from rich.console import Console
from rich.logging import RichHandler
from tenacity import Retrying, retry_if_exception_type, stop_after_attempt, wait_exponential

from ..config import get_settings
from ..core import (
    BvgTransitScraper,
    Location,
    LocationType,
    NetworkError,
    QueryConnectionsStatus,
    SessionExpiredError,
    TransitSearchError,
    ValidationError,
)
from ..core.fetcher import PageFetcher
from .formatters import (
    format_connection_detailed,
    format_connections_table,
    format_departures_table,
    format_json,
    format_locations_table,
    format_stations_table,
    format_status,
)

console = Console()
error_console = Console(stderr=True)
logger = logging.getLogger(__name__)

FORMAT_OPTION = click.option(
    "--format",
    "-f",
    "output_format",
    type=click.Choice(["table", "json"]),
    default="table",
    help="Output format",
)


def retrying_fetch(fetcher: PageFetcher, attempts: int, wait_min: int, wait_max: int) -> Callable[[str], str]:
    """Wrap a fetcher so network failures are retried with exponential backoff."""
    retryer = Retrying(
        stop=stop_after_attempt(attempts),
        wait=wait_exponential(multiplier=1, min=wait_min, max=wait_max),
        retry=retry_if_exception_type(NetworkError),
        reraise=True,
    )

    def fetch(url: str) -> str:
        return retryer(fetcher.fetch, url)

    return fetch


def build_scraper(timeout: int | None = None) -> BvgTransitScraper:
    """Create a scraper whose retrieval is retried per the settings."""
    settings = get_settings()
    if timeout is not None:
        settings = settings.model_copy(update={"timeout": timeout})
    fetch = retrying_fetch(
        PageFetcher(settings),
        settings.retry_attempts,
        settings.retry_wait_min,
        settings.retry_wait_max,
    )
    return BvgTransitScraper(fetch=fetch, settings=settings)


def parse_location(value: str) -> Location:
    """Interpret a command line place reference.

    Digits are a station id, ``lat,lon`` in degrees is an address by
    coordinates, anything else is free text for the service to resolve.
    """
    if value.isdigit():
        return Location(type=LocationType.STATION, id=int(value), name=value)
    if "," in value:
        lat, _, lon = value.partition(",")
        try:
            return Location(
                type=LocationType.ADDRESS,
                lat=round(float(lat) * 1e6),
                lon=round(float(lon) * 1e6),
                name=value,
            )
        except ValueError:
            pass
    return Location(type=LocationType.ANY, name=value)


def run_query(query: Callable[[], Any], verbose: bool) -> Any:
    """Run a query and turn faults into messages and exit codes."""
    try:
        return query()
    except ValidationError as e:
        error_console.print(f"[red]Error:[/red] {e}")
        sys.exit(1)
    except SessionExpiredError:
        error_console.print("[yellow]Session expired:[/yellow] start the search again.")
        sys.exit(1)
    except NetworkError as e:
        error_console.print(f"[red]Network error:[/red] {e}")
        sys.exit(1)
    except TransitSearchError as e:
        logger.error(f"Query failed: {e}", exc_info=verbose)
        error_console.print("[red]Query failed:[/red] the timetable service returned an unexpected page.")
        sys.exit(1)


@click.group()
@click.version_option(version="0.1.0")
@click.option("--verbose", "-v", is_flag=True, help="Log requests and parse details")
@click.option("--timeout", "-t", type=int, default=None, help="Request timeout in seconds")
@click.pass_context
def cli(ctx: click.Context, verbose: bool, timeout: int | None) -> None:
    """BVG Transit - Query the Berlin public transport timetable."""
    if verbose:
        logging.basicConfig(
            level=logging.DEBUG,
            format="%(message)s",
            handlers=[RichHandler(console=error_console, show_path=False)],
        )
    ctx.obj = {"verbose": verbose, "timeout": timeout}


@cli.command()
@click.argument("query")
@FORMAT_OPTION
@click.pass_context
def stations(ctx: click.Context, query: str, output_format: str) -> None:
    """Find stations by name.

    Examples:
        bvg-transit stations "Alexanderplatz"
    """
    scraper = build_scraper(ctx.obj["timeout"])
    with console.status(f"[bold green]Searching stations for {query}..."):
        locations = run_query(lambda: scraper.autocomplete_stations(query), ctx.obj["verbose"])

    if output_format == "json":
        click.echo(format_json(locations))
    else:
        format_locations_table(locations)


@cli.command()
@click.argument("station_id")
@click.option("--max", "-n", "max_stations", default=0, help="Maximum number of stations, 0 for all")
@FORMAT_OPTION
@click.pass_context
def nearby(ctx: click.Context, station_id: str, max_stations: int, output_format: str) -> None:
    """List stations near a station."""
    scraper = build_scraper(ctx.obj["timeout"])
    with console.status(f"[bold green]Searching stations near {station_id}..."):
        result = run_query(
            lambda: scraper.nearby_stations(station_id, max_stations=max_stations),
            ctx.obj["verbose"],
        )

    if result.status.value != "ok":
        error_console.print(f"[yellow]{format_status(result.status.value)}[/yellow]")
        sys.exit(1)

    if output_format == "json":
        click.echo(format_json(result))
    else:
        format_stations_table(list(result.stations))


@cli.command()
@click.argument("from_location")
@click.argument("to_location")
@click.option("--via", help="Intermediate stop")
@click.option(
    "--datetime",
    "-d",
    "datetime_str",
    help="Date and time (YYYY-MM-DD HH:MM format), defaults to now",
    type=str,
)
@click.option("--arrival", is_flag=True, help="Treat the time as arrival time")
@click.option("--products", "-p", default="IRSUTBF", help="Product letters to include")
@FORMAT_OPTION
@click.pass_context
def connections(
    ctx: click.Context,
    from_location: str,
    to_location: str,
    via: str | None,
    datetime_str: str | None,
    arrival: bool,
    products: str,
    output_format: str,
) -> None:
    """Search connections between two places.

    Places are station ids, "lat,lon" coordinates or free text.

    Examples:
        bvg-transit connections "Alexanderplatz" "Zoologischer Garten"
        bvg-transit connections 9100003 9023201 --datetime "2026-10-18 16:30"
    """
    when = dt_module.now()
    if datetime_str:
        try:
            when = dt_module.strptime(datetime_str, "%Y-%m-%d %H:%M")
        except ValueError:
            error_console.print("[red]Invalid datetime format. Use YYYY-MM-DD HH:MM[/red]")
            sys.exit(1)

    scraper = build_scraper(ctx.obj["timeout"])
    with console.status(f"[bold green]Searching connections from {from_location} to {to_location}..."):
        result = run_query(
            lambda: scraper.query_connections(
                parse_location(from_location),
                parse_location(to_location),
                when,
                via=parse_location(via) if via else None,
                departure=not arrival,
                products=products,
            ),
            ctx.obj["verbose"],
        )

    _print_connections(result, output_format)


@cli.command()
@click.argument("link")
@FORMAT_OPTION
@click.pass_context
def more(ctx: click.Context, link: str, output_format: str) -> None:
    """Fetch more connections from a later link of a previous search."""
    scraper = build_scraper(ctx.obj["timeout"])
    with console.status("[bold green]Fetching more connections..."):
        result = run_query(lambda: scraper.query_more_connections(link), ctx.obj["verbose"])

    _print_connections(result, output_format)


def _print_connections(result: Any, output_format: str) -> None:
    if result.status not in (QueryConnectionsStatus.OK, QueryConnectionsStatus.AMBIGUOUS):
        error_console.print(f"[yellow]{format_status(result.status.value)}[/yellow]")
        sys.exit(1)

    if output_format == "json":
        click.echo(format_json(result))
    else:
        format_connections_table(result)


@cli.command()
@click.argument("link")
@FORMAT_OPTION
@click.pass_context
def details(ctx: click.Context, link: str, output_format: str) -> None:
    """Show the legs of a connection."""
    scraper = build_scraper(ctx.obj["timeout"])
    with console.status("[bold green]Fetching connection details..."):
        result = run_query(lambda: scraper.get_connection_details(link), ctx.obj["verbose"])

    if output_format == "json":
        click.echo(format_json(result))
    else:
        format_connection_detailed(result.connection)


@cli.command()
@click.argument("station_id")
@click.option("--max", "-n", "max_departures", default=0, help="Maximum number of departures")
@FORMAT_OPTION
@click.pass_context
def departures(ctx: click.Context, station_id: str, max_departures: int, output_format: str) -> None:
    """Show the departure board of a station.

    Six-digit ids show the live board, others the timetable.
    """
    scraper = build_scraper(ctx.obj["timeout"])
    with console.status(f"[bold green]Fetching departures for {station_id}..."):
        result = run_query(
            lambda: scraper.query_departures(station_id, max_departures=max_departures),
            ctx.obj["verbose"],
        )

    if result.status.value != "ok":
        error_console.print(f"[yellow]{format_status(result.status.value)}[/yellow]")
        sys.exit(1)

    if output_format == "json":
        click.echo(format_json(result))
    else:
        format_departures_table(result)


if __name__ == "__main__":
    cli()
