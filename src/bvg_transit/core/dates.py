"""Date and time reconciliation for pages that only give times of day.

Pages carry one reference date in their header and bare ``HH:mm`` times per
row. The helpers here turn those into full timestamps, using the previously
resolved row (or the page's reference timestamp) to decide whether a row
crossed midnight. Each helper must be applied exactly once per row, in page
order; applying them again to shifted values shifts them again.
"""

import re
from datetime import date, datetime, time, timedelta

from .exceptions import ParseError

DAY_ROLLOVER_THRESHOLD = timedelta(hours=12)
DAY_ROLLDOWN_THRESHOLD = timedelta(hours=6)

_DATE_FORMATS = ("%d.%m.%y", "%d.%m.%Y, %H:%M:%S")
_TRAILING_DATE = re.compile(r"(\d\d\.\d\d\.\d\d)\s*$")


def parse_date(text: str, url: str | None = None) -> datetime:
    """Parse a page header date.

    Tries ``dd.MM.yy``, then ``dd.MM.yyyy, HH:mm:ss``, then a trailing
    ``dd.MM.yy`` token. ``url`` is the page the header came from.

    Raises:
        ParseError: If no format matches
    """
    value = text.strip()
    for fmt in _DATE_FORMATS:
        try:
            return datetime.strptime(value, fmt)
        except ValueError:
            continue

    match = _TRAILING_DATE.search(value)
    if match:
        return datetime.strptime(match.group(1), "%d.%m.%y")

    raise ParseError(f"cannot parse date '{text}'", fragment=text, url=url)


def parse_time(text: str) -> time:
    """Parse a ``HH:mm`` time of day."""
    try:
        return datetime.strptime(text.strip(), "%H:%M").time()
    except ValueError as e:
        raise ParseError(f"cannot parse time '{text}'", fragment=text) from e


def join_date_time(day: date, time_of_day: time) -> datetime:
    return datetime.combine(day, time_of_day)


def add_days(value: datetime, days: int) -> datetime:
    return value + timedelta(days=days)


def roll_against_previous(naive: datetime, previous: datetime | None) -> datetime:
    """Place a row relative to the previous row of a listing.

    More than 12 hours after the previous row means the naive date is one
    day too late; more than 6 hours before it means one day too early.
    """
    if previous is None:
        return naive
    diff = naive - previous
    if diff > DAY_ROLLOVER_THRESHOLD:
        return add_days(naive, -1)
    if diff < -DAY_ROLLDOWN_THRESHOLD:
        return add_days(naive, 1)
    return naive


def roll_against_reference(naive: datetime, reference: datetime) -> datetime:
    """Place a departure board row relative to the board's own timestamp."""
    if naive - reference < -DAY_ROLLOVER_THRESHOLD:
        return add_days(naive, 1)
    return naive


def arrival_after_departure(departure: datetime, arrival: datetime) -> datetime:
    """An arrival earlier than its departure is on the next day."""
    if departure > arrival:
        return add_days(arrival, 1)
    return arrival


def departure_after_arrival(
    departure: datetime, last_arrival: datetime | None
) -> datetime:
    """A leg departing before the previous leg arrived is on the next day."""
    if last_arrival is not None and departure < last_arrival:
        return add_days(departure, 1)
    return departure
