"""Classification of error pages.

Each capability has a table of upstream error markers. The markers are the
literal German texts the service prints; they are kept as data so a changed
wording only touches the table.
"""

import logging
import re
from collections.abc import Sequence
from enum import Enum

from .exceptions import SessionExpiredError

logger = logging.getLogger(__name__)


class ErrorOutcome(str, Enum):
    INVALID_STATION = "invalid_station"
    SERVICE_DOWN = "service_down"
    TOO_CLOSE = "too_close"
    UNRESOLVABLE_ADDRESS = "unresolvable_address"
    NO_CONNECTIONS = "no_connections"
    INVALID_DATE = "invalid_date"
    SESSION_EXPIRED = "session_expired"


Marker = tuple[str, ErrorOutcome]

NEARBY_ERRORS: list[Marker] = [
    (r"derzeit leider nicht bearbeitet werden", ErrorOutcome.INVALID_STATION),
]

CONNECTIONS_ERRORS: list[Marker] = [
    (r"zu dicht beieinander|mehrfach vorhanden oder identisch", ErrorOutcome.TOO_CLOSE),
    (r"keine geeigneten Haltestellen", ErrorOutcome.UNRESOLVABLE_ADDRESS),
    (r"keine Verbindung gefunden", ErrorOutcome.NO_CONNECTIONS),
    (r"derzeit nur Ausk&#252;nfte vom", ErrorOutcome.INVALID_DATE),
    (r"zwischenzeitlich nicht mehr gespeichert", ErrorOutcome.SESSION_EXPIRED),
]

DEPARTURES_LIVE_ERRORS: list[Marker] = [
    (r"Haltestelle:", ErrorOutcome.INVALID_STATION),
    (r"Wartungsgr&uuml;nden", ErrorOutcome.SERVICE_DOWN),
]

DEPARTURES_PLAN_ERRORS: list[Marker] = [
    (r"derzeit leider nicht bearbeitet werden", ErrorOutcome.INVALID_STATION),
    (r"Wartungsarbeiten", ErrorOutcome.SERVICE_DOWN),
]

DETAILS_ERRORS: list[Marker] = [
    (r"zwischenzeitlich nicht mehr gespeichert", ErrorOutcome.SESSION_EXPIRED),
]


class ErrorClassifier:
    """Matches a page against one compound pattern of error markers.

    Each marker becomes a named alternative inside a lookahead, so markers
    that overlap in the page are all seen. When markers of several outcomes
    occur in one page, the marker listed first wins, wherever it occurs.
    Markers must not contain capturing groups.
    """

    def __init__(self, markers: Sequence[Marker]):
        self.outcomes = [outcome for _, outcome in markers]
        self.pattern = re.compile(
            "|".join(f"(?=(?P<m{index}>{marker}))" for index, (marker, _) in enumerate(markers))
        )

    def classify(self, page: str) -> ErrorOutcome | None:
        """Return the outcome of the first matching marker, if any.

        Raises:
            SessionExpiredError: If the page reports an expired session
        """
        matched = {
            int(name[1:])
            for m in self.pattern.finditer(page)
            for name, text in m.groupdict().items()
            if text is not None
        }
        if not matched:
            return None

        outcome = self.outcomes[min(matched)]
        logger.debug(f"Classified error page as {outcome.value}")
        if outcome is ErrorOutcome.SESSION_EXPIRED:
            raise SessionExpiredError("query session expired, rebuild the query")
        return outcome
