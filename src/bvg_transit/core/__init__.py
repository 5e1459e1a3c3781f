"""Core BVG transit query functionality."""

from .exceptions import (
    ClassificationError,
    NetworkError,
    ParseError,
    SessionExpiredError,
    TransitSearchError,
    ValidationError,
)
from .models import (
    Connection,
    Departure,
    Footway,
    GetConnectionDetailsResult,
    LineColors,
    Location,
    LocationType,
    NearbyStationsResult,
    NearbyStationsStatus,
    QueryConnectionsResult,
    QueryConnectionsStatus,
    QueryDeparturesResult,
    QueryDeparturesStatus,
    Station,
    Trip,
)
from .scraper import BvgTransitScraper

__all__ = [
    "BvgTransitScraper",
    "Connection",
    "Departure",
    "Footway",
    "GetConnectionDetailsResult",
    "LineColors",
    "Location",
    "LocationType",
    "NearbyStationsResult",
    "NearbyStationsStatus",
    "QueryConnectionsResult",
    "QueryConnectionsStatus",
    "QueryDeparturesResult",
    "QueryDeparturesStatus",
    "Station",
    "Trip",
    "TransitSearchError",
    "ValidationError",
    "NetworkError",
    "ParseError",
    "ClassificationError",
    "SessionExpiredError",
]
