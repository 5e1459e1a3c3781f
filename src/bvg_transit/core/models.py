"""Data models for BVG transit queries."""

from datetime import datetime
from enum import Enum
from typing import Annotated, Literal

from pydantic import BaseModel, ConfigDict, Field


class LocationType(str, Enum):
    """Kind of place reference."""

    STATION = "station"
    ADDRESS = "address"
    ANY = "any"


class Location(BaseModel):
    """A place reference: station, address or unresolved free text."""

    model_config = ConfigDict(frozen=True)

    type: LocationType = Field(..., description="Kind of reference")
    id: int | None = Field(None, description="Numeric station id")
    lat: int = Field(0, description="WGS84 latitude in micro-degrees")
    lon: int = Field(0, description="WGS84 longitude in micro-degrees")
    name: str | None = Field(None, description="Display name")
    place: str | None = Field(None, description="Municipality, if known")

    @property
    def has_location(self) -> bool:
        return self.lat != 0 or self.lon != 0

    def __str__(self) -> str:
        return self.name or ""


class Station(BaseModel):
    """A station whose raw name may encode its place inline."""

    model_config = ConfigDict(frozen=True)

    id: int = Field(..., description="Numeric station id")
    place: str | None = Field(None, description="Place split off the raw name")
    name: str | None = Field(None, description="Name without the place")
    long_name: str | None = Field(None, description="Raw name when no place was found")
    lat: int = Field(0, description="WGS84 latitude in micro-degrees")
    lon: int = Field(0, description="WGS84 longitude in micro-degrees")

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Station):
            return NotImplemented
        return self._key() == other._key()

    def __hash__(self) -> int:
        return hash(self._key())

    def _key(self) -> tuple[int, str | None, str | None, str | None]:
        return (self.id, self.place, self.name, self.long_name)

    @property
    def display_name(self) -> str:
        return self.name or self.long_name or ""

    @property
    def location(self) -> Location:
        return Location(
            type=LocationType.STATION,
            id=self.id,
            lat=self.lat,
            lon=self.lon,
            name=self.display_name,
            place=self.place,
        )

    def __str__(self) -> str:
        if self.place:
            return f"{self.display_name} ({self.place})"
        return self.display_name


class LineColors(BaseModel):
    """Display colors of a line as #rrggbb strings."""

    model_config = ConfigDict(frozen=True)

    background: str
    foreground: str


class Trip(BaseModel):
    """A ride on a single line between two stops."""

    model_config = ConfigDict(frozen=True)

    kind: Literal["trip"] = "trip"
    line: str | None = None
    line_colors: LineColors | None = None
    destination: Location | None = None
    departure_time: datetime
    departure_position: str | None = None
    departure_id: int | None = None
    departure_name: str | None = None
    arrival_time: datetime
    arrival_position: str | None = None
    arrival_id: int | None = None
    arrival_name: str | None = None

    def __str__(self) -> str:
        return f"{self.departure_name} → {self.arrival_name} ({self.line})"


class Footway(BaseModel):
    """A walking segment between two stops or places."""

    model_config = ConfigDict(frozen=True)

    kind: Literal["footway"] = "footway"
    minutes: int
    departure_id: int | None = None
    departure_name: str | None = None
    arrival_id: int | None = None
    arrival_name: str | None = None
    arrival_lat: int = 0
    arrival_lon: int = 0

    def __str__(self) -> str:
        return f"{self.departure_name} → {self.arrival_name} ({self.minutes} min walk)"


Part = Annotated[Trip | Footway, Field(discriminator="kind")]


class Connection(BaseModel):
    """An itinerary from origin to destination."""

    model_config = ConfigDict(frozen=True)

    id: str = Field(..., description="Connection id extracted from the link")
    link: str = Field(..., description="Continuation link for the details page")
    departure_time: datetime
    arrival_time: datetime
    line: str | None = None
    line_colors: LineColors | None = None
    departure_id: int | None = None
    departure_name: str | None = None
    arrival_id: int | None = None
    arrival_name: str | None = None
    parts: tuple[Part, ...] = Field(default_factory=tuple)
    message: str | None = None

    def __str__(self) -> str:
        return (
            f"{self.departure_name} {self.departure_time:%H:%M} → "
            f"{self.arrival_name} {self.arrival_time:%H:%M}"
        )


class Departure(BaseModel):
    """A single row of a departure board.

    Position and colors do not take part in equality, so repeated rows of
    a board compare equal and can be dropped.
    """

    model_config = ConfigDict(frozen=True)

    planned_time: datetime | None = None
    predicted_time: datetime | None = None
    line: str | None = None
    line_colors: LineColors | None = None
    line_link: str | None = None
    position: str | None = None
    destination_id: int | None = None
    destination_name: str | None = None
    message: str | None = None

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Departure):
            return NotImplemented
        return self._key() == other._key()

    def __hash__(self) -> int:
        return hash(self._key())

    def _key(
        self,
    ) -> tuple[datetime | None, datetime | None, str | None, int | None, str | None]:
        return (
            self.planned_time,
            self.predicted_time,
            self.line,
            self.destination_id,
            self.destination_name,
        )

    @property
    def time(self) -> datetime | None:
        return self.predicted_time or self.planned_time


class QueryConnectionsStatus(str, Enum):
    OK = "ok"
    AMBIGUOUS = "ambiguous"
    TOO_CLOSE = "too_close"
    UNRESOLVABLE_ADDRESS = "unresolvable_address"
    NO_CONNECTIONS = "no_connections"
    INVALID_DATE = "invalid_date"


class QueryConnectionsResult(BaseModel):
    """Outcome of a connection query, discriminated by ``status``."""

    model_config = ConfigDict(frozen=True)

    status: QueryConnectionsStatus
    link: str | None = Field(None, description="Link of the page that was parsed")
    from_: Location | None = None
    via: Location | None = None
    to: Location | None = None
    link_earlier: str | None = None
    link_later: str | None = None
    connections: tuple[Connection, ...] = Field(default_factory=tuple)
    ambiguous_from: tuple[Location, ...] | None = None
    ambiguous_via: tuple[Location, ...] | None = None
    ambiguous_to: tuple[Location, ...] | None = None

    @classmethod
    def found(
        cls,
        link: str,
        from_: Location,
        via: Location | None,
        to: Location,
        link_later: str | None,
        connections: list[Connection],
        link_earlier: str | None = None,
    ) -> "QueryConnectionsResult":
        return cls(
            status=QueryConnectionsStatus.OK,
            link=link,
            from_=from_,
            via=via,
            to=to,
            link_earlier=link_earlier,
            link_later=link_later,
            connections=tuple(connections),
        )

    @classmethod
    def ambiguous(
        cls,
        ambiguous_from: list[Location] | None = None,
        ambiguous_via: list[Location] | None = None,
        ambiguous_to: list[Location] | None = None,
    ) -> "QueryConnectionsResult":
        return cls(
            status=QueryConnectionsStatus.AMBIGUOUS,
            ambiguous_from=tuple(ambiguous_from) if ambiguous_from is not None else None,
            ambiguous_via=tuple(ambiguous_via) if ambiguous_via is not None else None,
            ambiguous_to=tuple(ambiguous_to) if ambiguous_to is not None else None,
        )

    @classmethod
    def of_status(cls, status: QueryConnectionsStatus) -> "QueryConnectionsResult":
        return cls(status=status)


class GetConnectionDetailsResult(BaseModel):
    """Legs of one connection; ``connection`` is None if the page had no trip."""

    model_config = ConfigDict(frozen=True)

    current_date: datetime
    connection: Connection | None = None


class NearbyStationsStatus(str, Enum):
    OK = "ok"
    INVALID_STATION = "invalid_station"
    SERVICE_DOWN = "service_down"


class NearbyStationsResult(BaseModel):
    model_config = ConfigDict(frozen=True)

    status: NearbyStationsStatus = NearbyStationsStatus.OK
    stations: tuple[Station, ...] = Field(default_factory=tuple)


class QueryDeparturesStatus(str, Enum):
    OK = "ok"
    INVALID_STATION = "invalid_station"
    SERVICE_DOWN = "service_down"


class QueryDeparturesResult(BaseModel):
    model_config = ConfigDict(frozen=True)

    status: QueryDeparturesStatus = QueryDeparturesStatus.OK
    station_id: int | None = None
    location: Location | None = None
    departures: tuple[Departure, ...] = Field(default_factory=tuple)
