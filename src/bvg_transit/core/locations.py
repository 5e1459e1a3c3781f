"""Place references: query parameters out, stations and ids back in."""

import re
from urllib.parse import quote_plus, unquote_plus

from .exceptions import ParseError
from .models import Location, LocationType, Station

_CONNECTION_ID = re.compile(r"co=(C\d+-\d+)&")

_BERLIN_SUFFIX = " (Berlin)"
_POTSDAM_PREFIX = "Potsdam, "

# station ids below this are not accepted as ids by the journey planner
_MIN_STATION_ID = 1000000


def url_encode(value: str, encoding: str = "utf-8") -> str:
    return quote_plus(value, safe="*", encoding=encoding)


def url_decode(value: str, encoding: str = "utf-8") -> str:
    return unquote_plus(value, encoding=encoding)


def location_type_value(location: Location) -> int:
    if location.type == LocationType.STATION:
        return 1
    if location.type == LocationType.ADDRESS:
        return 2
    if location.type == LocationType.ANY:
        return 255
    raise ValueError(f"unknown location type {location.type}")


def location_value(location: Location) -> str:
    if (
        location.type == LocationType.STATION
        and location.id is not None
        and location.id >= _MIN_STATION_ID
    ):
        return str(location.id)
    return location.name or ""


def location_params(location: Location, suffix: str, wgs_param: str | None) -> str:
    """Query string fragment selecting a location.

    Addresses with coordinates use the WGS84 parameter when the slot has one;
    everything else is sent as type and value.
    """
    if (
        location.type == LocationType.ADDRESS
        and location.lat != 0
        and location.lon != 0
        and wgs_param is not None
    ):
        coordinates = f"A=16@X={location.lon}@Y={location.lat}"
        return f"&{wgs_param}={url_encode(coordinates)}"

    return (
        f"&REQ0JourneyStops{suffix}A={location_type_value(location)}"
        f"&REQ0JourneyStops{suffix}G={url_encode(location_value(location))}"
    )


def new_station(station_id: int, raw_name: str, lat: int = 0, lon: int = 0) -> Station:
    """Build a station, splitting an inline place off its raw name."""
    place = name = long_name = None

    if raw_name.endswith(_BERLIN_SUFFIX):
        place = "Berlin"
        name = raw_name[: -len(_BERLIN_SUFFIX)]
    elif raw_name.startswith(_POTSDAM_PREFIX):
        place = "Potsdam"
        name = raw_name[len(_POTSDAM_PREFIX) :]
    else:
        long_name = raw_name

    return Station(id=station_id, place=place, name=name, long_name=long_name, lat=lat, lon=lon)


def degrees_to_micro(value: str) -> int:
    """Convert a decimal degree string to integer micro-degrees."""
    return round(float(value) * 1e6)


def extract_connection_id(link: str) -> str:
    """Extract the connection id encoded in a details link.

    Raises:
        ParseError: If the link carries no id
    """
    match = _CONNECTION_ID.search(link)
    if not match:
        raise ParseError(f"cannot extract id from {link}", fragment=link, url=link)
    return match.group(1)
