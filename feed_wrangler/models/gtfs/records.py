"""Pydantic data models for records produced from a GTFS feed."""

from pydantic import BaseModel, ConfigDict

from .._base.types import TimeString


class FlaggedTrip(BaseModel):
    """A trip whose first departure, in local time, falls in a midnight-rollover window.

    Attributes:
        trip_id: The flagged trip.
        agency_id: Agency operating the trip's route.
        route_id: The trip's route.
        timezone: Timezone the departure was converted to.
        local_hour: Local hour of day of the departure, 0-23.
        local_time: Local time of day of the departure, HH:MM:SS.
        departure_time: Departure time as it appears in stop_times.
        trip_short_name: The trip short name (train number), if any.
        route_long_name: The route long name, if any.
        trip_headsign: The trip headsign, if any.
    """

    model_config = ConfigDict(frozen=True)

    trip_id: str
    agency_id: str
    route_id: str
    timezone: str
    local_hour: int
    local_time: TimeString
    departure_time: TimeString
    trip_short_name: str = ""
    route_long_name: str = ""
    trip_headsign: str = ""
