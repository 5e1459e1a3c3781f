"""Output formatters for CLI display."""

import json
from datetime import datetime

from rich.console import Console
from rich.panel import Panel
from rich.table import Table

from ..core.models import (
    Connection,
    Footway,
    LineColors,
    Location,
    QueryConnectionsResult,
    QueryConnectionsStatus,
    QueryDeparturesResult,
    Station,
    Trip,
)

console = Console()

STATUS_MESSAGES = {
    "ambiguous": "A location is ambiguous, pick one of the candidates.",
    "too_close": "Origin and destination are too close together, try walking.",
    "unresolvable_address": "An address could not be resolved, try a nearby station.",
    "no_connections": "No connection found, try a different time or fewer restrictions.",
    "invalid_date": "The date is outside the timetable period, try a different date.",
    "invalid_station": "The station is not known, check the station id.",
    "service_down": "The service is down for maintenance, try again later.",
}


def _time(value: datetime | None) -> str:
    return f"{value:%H:%M}" if value else "-"


def _line(line: str | None, colors: LineColors | None) -> str:
    """Line label without its category prefix, styled with its colors."""
    if not line:
        return "-"
    label = line[1:]
    if colors is None:
        return label
    return f"[{colors.foreground} on {colors.background}] {label} [/]"


def format_status(status: str) -> str:
    """Actionable message for a status outcome."""
    return STATUS_MESSAGES.get(status, f"Query failed: {status}")


def format_locations_table(locations: list[Location]) -> None:
    """Display autocomplete results as a rich table."""
    if not locations:
        console.print("No stations found.")
        return

    table = Table(title="Stations", show_header=True, header_style="bold magenta")
    table.add_column("Id", style="cyan", no_wrap=True)
    table.add_column("Name", style="green")

    for location in locations:
        table.add_row(str(location.id or "-"), location.name or "-")

    console.print(table)


def format_stations_table(stations: list[Station]) -> None:
    """Display nearby stations as a rich table."""
    if not stations:
        console.print("No stations found.")
        return

    table = Table(title="Nearby Stations", show_header=True, header_style="bold magenta")
    table.add_column("Id", style="cyan", no_wrap=True)
    table.add_column("Name", style="green")
    table.add_column("Place", style="yellow")

    for station in stations:
        table.add_row(str(station.id), station.display_name, station.place or "-")

    console.print(table)


def format_connections_table(result: QueryConnectionsResult) -> None:
    """Display a connection query result."""
    if result.status == QueryConnectionsStatus.AMBIGUOUS:
        console.print(f"[yellow]{format_status(result.status.value)}[/yellow]")
        for label, candidates in (
            ("From", result.ambiguous_from),
            ("Via", result.ambiguous_via),
            ("To", result.ambiguous_to),
        ):
            for candidate in candidates or ():
                console.print(f"  {label}: {candidate.name}")
        return

    if not result.connections:
        console.print("No connections found.")
        return

    table = Table(
        title=f"Connections: {result.from_} → {result.to}",
        show_header=True,
        header_style="bold magenta",
    )
    table.add_column("Departure", style="cyan", no_wrap=True)
    table.add_column("Arrival", style="cyan", no_wrap=True)
    table.add_column("Line")
    table.add_column("Id", style="dim")

    for connection in result.connections:
        table.add_row(
            f"{connection.departure_time:%d.%m. %H:%M}",
            f"{connection.arrival_time:%d.%m. %H:%M}",
            _line(connection.line, connection.line_colors),
            connection.id,
        )

    console.print(table)
    if result.link_later:
        console.print(f"[dim]Later: {result.link_later}[/dim]")


def format_connection_detailed(connection: Connection | None) -> None:
    """Display the legs of a connection as panels."""
    if connection is None:
        console.print("No connection details available.")
        return

    summary_text = f"""[bold]From:[/bold] {connection.departure_name}
[bold]To:[/bold] {connection.arrival_name}
[bold]Departure:[/bold] {connection.departure_time:%d.%m.%Y %H:%M}
[bold]Arrival:[/bold] {connection.arrival_time:%d.%m.%Y %H:%M}"""
    console.print(Panel(summary_text, title="Connection Summary", border_style="blue"))

    for i, part in enumerate(connection.parts, 1):
        if isinstance(part, Trip):
            part_text = f"""[cyan]{part.departure_name}[/cyan] → [cyan]{part.arrival_name}[/cyan]
[bold]Line:[/bold] {_line(part.line, part.line_colors)} towards {part.destination}
[bold]Time:[/bold] {_time(part.departure_time)} → {_time(part.arrival_time)}"""
            if part.departure_position or part.arrival_position:
                part_text += (
                    f"\n[bold]Platform:[/bold] {part.departure_position or '-'}"
                    f" → {part.arrival_position or '-'}"
                )
            console.print(Panel(part_text, title=f"Leg {i}", border_style="green"))
        elif isinstance(part, Footway):
            part_text = f"""[cyan]{part.departure_name}[/cyan] → [cyan]{part.arrival_name}[/cyan]
[bold]Walk:[/bold] {part.minutes} min"""
            console.print(Panel(part_text, title=f"Leg {i}", border_style="yellow"))


def format_departures_table(result: QueryDeparturesResult) -> None:
    """Display a departure board."""
    if not result.departures:
        console.print("No departures found.")
        return

    name = result.location.name if result.location else result.station_id
    table = Table(title=f"Departures: {name}", show_header=True, header_style="bold magenta")
    table.add_column("Time", style="cyan", no_wrap=True)
    table.add_column("Line")
    table.add_column("Destination", style="green")
    table.add_column("Platform", style="blue")

    for departure in result.departures:
        time_info = _time(departure.time)
        if departure.predicted_time is None:
            time_info += "*"
        table.add_row(
            time_info,
            _line(departure.line, departure.line_colors),
            departure.destination_name or "-",
            departure.position or "-",
        )

    console.print(table)


def format_json(value: object) -> str:
    """Format a result model, or a list of models, as JSON."""
    if isinstance(value, list):
        data = [item.model_dump(mode="json") for item in value]
    else:
        data = value.model_dump(mode="json")  # type: ignore[attr-defined]
    return json.dumps(data, ensure_ascii=False, indent=2)
