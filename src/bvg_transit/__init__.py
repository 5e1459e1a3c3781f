"""BVG Transit Package

A Python package for querying the BVG (Berlin) mobile timetable site:
station autocomplete, nearby stations, connections and departure boards.
"""

__version__ = "0.1.0"

from .core.models import Connection, Departure, Location, Station
from .core.scraper import BvgTransitScraper

__all__ = ["BvgTransitScraper", "Connection", "Departure", "Location", "Station"]
