"""Unit tests for CLI formatters."""

import json
from datetime import datetime
from io import StringIO
from unittest.mock import patch

from rich.console import Console

from bvg_transit.cli.formatters import (
    format_connection_detailed,
    format_connections_table,
    format_departures_table,
    format_json,
    format_locations_table,
    format_stations_table,
    format_status,
)
from bvg_transit.core.colors import colors_for
from bvg_transit.core.models import (
    Connection,
    Departure,
    Footway,
    Location,
    LocationType,
    QueryConnectionsResult,
    QueryDeparturesResult,
    Station,
    Trip,
)


class TestFormatters:
    """Test CLI formatters."""

    def setup_method(self):
        """Set up test fixtures."""
        self.trip = Trip(
            line="SS5",
            line_colors=colors_for("SS5"),
            destination=Location(type=LocationType.ANY, name="Westkreuz"),
            departure_time=datetime(2026, 10, 18, 8, 0),
            departure_position="Gl. 2",
            departure_name="Alexanderplatz",
            arrival_time=datetime(2026, 10, 18, 8, 20),
            arrival_name="Zoo",
        )
        self.connection = Connection(
            id="C0-1",
            link="http://mobil.bvg.de/x?co=C0-1&",
            departure_time=datetime(2026, 10, 18, 8, 0),
            arrival_time=datetime(2026, 10, 18, 8, 27),
            line="SS5",
            line_colors=colors_for("SS5"),
            departure_name="Alexanderplatz",
            arrival_name="Hardenbergplatz",
            parts=(
                self.trip,
                Footway(minutes=7, departure_name="Zoo", arrival_name="Hardenbergplatz"),
            ),
        )

    def test_format_status(self):
        """Test known and unknown status messages."""
        assert "try walking" in format_status("too_close")
        assert format_status("weird") == "Query failed: weird"

    def test_format_locations_table(self):
        """Test autocomplete results."""
        console = Console(file=StringIO())
        with patch("bvg_transit.cli.formatters.console", console):
            format_locations_table(
                [Location(type=LocationType.STATION, id=9100003, name="Alexanderplatz")]
            )
            output = console.file.getvalue()

        assert "Stations" in output
        assert "9100003" in output
        assert "Alexanderplatz" in output

    def test_format_locations_table_empty(self):
        """Test an empty result."""
        console = Console(file=StringIO())
        with patch("bvg_transit.cli.formatters.console", console):
            format_locations_table([])
            output = console.file.getvalue()

        assert "No stations found." in output

    def test_format_stations_table(self):
        """Test nearby stations show name and place."""
        console = Console(file=StringIO())
        with patch("bvg_transit.cli.formatters.console", console):
            format_stations_table(
                [
                    Station(id=9100024, place="Berlin", name="Marienkirche"),
                    Station(id=9999999, long_name="Flughafen BER"),
                ]
            )
            output = console.file.getvalue()

        assert "Nearby Stations" in output
        assert "Marienkirche" in output
        assert "Berlin" in output
        assert "Flughafen BER" in output

    def test_format_connections_table(self):
        """Test found connections."""
        result = QueryConnectionsResult.found(
            link="http://mobil.bvg.de/x",
            from_=Location(type=LocationType.ANY, name="Alex"),
            via=None,
            to=Location(type=LocationType.ANY, name="Zoo"),
            link_later="http://mobil.bvg.de/later",
            connections=[self.connection],
        )

        console = Console(file=StringIO())
        with patch("bvg_transit.cli.formatters.console", console):
            format_connections_table(result)
            output = console.file.getvalue()

        assert "Connections: Alex → Zoo" in output
        assert "18.10. 08:00" in output
        assert "S5" in output
        assert "C0-1" in output
        assert "Later: http://mobil.bvg.de/later" in output

    def test_format_connections_table_ambiguous(self):
        """Test candidates of every ambiguous slot are listed."""
        result = QueryConnectionsResult.ambiguous(
            ambiguous_from=[Location(type=LocationType.ANY, name="Alexanderplatz!")],
            ambiguous_to=[Location(type=LocationType.ANY, name="Zoo!")],
        )

        console = Console(file=StringIO())
        with patch("bvg_transit.cli.formatters.console", console):
            format_connections_table(result)
            output = console.file.getvalue()

        assert "pick one of the candidates" in output
        assert "From: Alexanderplatz!" in output
        assert "To: Zoo!" in output
        assert "Via:" not in output

    def test_format_connection_detailed(self):
        """Test legs are shown as panels."""
        console = Console(file=StringIO())
        with patch("bvg_transit.cli.formatters.console", console):
            format_connection_detailed(self.connection)
            output = console.file.getvalue()

        assert "Connection Summary" in output
        assert "Leg 1" in output
        assert "Leg 2" in output
        assert "Westkreuz" in output
        assert "08:00 → 08:20" in output
        assert "Platform:" in output
        assert "Walk: 7 min" in output

    def test_format_connection_detailed_missing(self):
        """Test a details page without a connection."""
        console = Console(file=StringIO())
        with patch("bvg_transit.cli.formatters.console", console):
            format_connection_detailed(None)
            output = console.file.getvalue()

        assert "No connection details available." in output

    def test_format_departures_table(self):
        """Test planned times are marked."""
        result = QueryDeparturesResult(
            station_id=9100003,
            location=Location(type=LocationType.STATION, id=9100003, name="Alexanderplatz"),
            departures=(
                Departure(
                    predicted_time=datetime(2026, 10, 18, 23, 45),
                    line="UU2",
                    destination_name="Pankow",
                ),
                Departure(
                    planned_time=datetime(2026, 10, 19, 0, 5),
                    line="TM4",
                    position="Gl. 1",
                    destination_name="Zingster Straße",
                ),
            ),
        )

        console = Console(file=StringIO())
        with patch("bvg_transit.cli.formatters.console", console):
            format_departures_table(result)
            output = console.file.getvalue()

        assert "Departures: Alexanderplatz" in output
        assert "23:45 " in output
        assert "00:05*" in output
        assert "Gl. 1" in output
        assert "Zingster Straße" in output

    def test_format_json(self):
        """Test models and lists of models."""
        location = Location(type=LocationType.ANY, name="Straße")

        assert json.loads(format_json(location))["name"] == "Straße"
        assert "Straße" in format_json([location])
        assert json.loads(format_json([location]))[0]["type"] == "any"
