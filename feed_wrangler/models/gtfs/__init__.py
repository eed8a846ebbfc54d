"""Data models for GTFS tables and records."""

from .records import FlaggedTrip
from .tables import (
    AgenciesTable,
    FrequenciesTable,
    RoutesTable,
    ShapesTable,
    StopsTable,
    StopTimesTable,
    TripsTable,
)
from .types import LocationType, RouteType

__all__ = [
    "AgenciesTable",
    "FlaggedTrip",
    "FrequenciesTable",
    "LocationType",
    "RoutesTable",
    "RouteType",
    "ShapesTable",
    "StopsTable",
    "StopTimesTable",
    "TripsTable",
]
