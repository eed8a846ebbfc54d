"""Audit of trips whose departure looks like a midnight rollover that wasn't carried over.

Feed times are written on the agency's clock. A trip that starts in a timezone west of that
clock and departs in the first local hours of the day is often a time that rolled past midnight
without the trip being moved to the next service day. Those trips are reported, not changed.

Each trip's departure is the departure_time of its lowest stop_sequence. It's converted to
local time of day in the timezone of its first stop (stop_timezone), or the agency's timezone
when the stop doesn't have one, using each zone's standard UTC offset. Daylight saving time is
not applied because trips are not resolved to calendar dates.

Flag windows are a lookup of timezone to a half-open local hour range `[start, end)`; timezones
without a window are never flagged.
"""

from __future__ import annotations

from collections.abc import Iterable
from typing import TYPE_CHECKING, Optional

import pandas as pd

from ..logger import WranglerLogger
from ..models.gtfs.records import FlaggedTrip
from ..params import DEFAULT_ROLLOVER_WINDOWS, SECONDS_PER_DAY
from ..utils.time import (
    seconds_from_midnight_to_str,
    standard_utc_offset,
    str_to_seconds_from_midnight_series,
)
from .trips import first_stop_times

if TYPE_CHECKING:
    from .feed import Feed

AUDIT_RECORD_FIELDS = list(FlaggedTrip.model_fields.keys())


def _offset_seconds(tz_names: pd.Series) -> pd.Series:
    offsets = {tz: standard_utc_offset(tz).total_seconds() for tz in tz_names.unique()}
    return tz_names.map(offsets)


def _optional_col(df: pd.DataFrame, col: str) -> pd.Series:
    if col in df:
        return df[col]
    return pd.Series("", index=df.index)


def trip_departures(feed: Feed, route_types: Optional[Iterable[int]] = None) -> pd.DataFrame:
    """One row per trip, in trips table order, with its first departure and timezones.

    Trips without stop_times or without any departure or arrival time are left out.

    Args:
        feed: Feed to read.
        route_types: if given, only trips on routes of these route types are included.

    Returns:
        DataFrame with trip_id, route_id, agency_id, trip_short_name, trip_headsign,
        route_long_name, departure_time, agency_timezone and timezone columns.
    """
    trips = feed.trips
    departures = pd.DataFrame(
        {
            "trip_id": trips.trip_id,
            "route_id": trips.route_id,
            "trip_short_name": _optional_col(trips, "trip_short_name"),
            "trip_headsign": _optional_col(trips, "trip_headsign"),
        }
    )

    first = first_stop_times(feed.stop_times)[["trip_id", "stop_id", "start_time"]]
    departures = departures.merge(first, on="trip_id", how="inner")
    departures = departures.rename(columns={"start_time": "departure_time"})
    departures = departures.loc[departures.departure_time != ""]

    routes = pd.DataFrame(
        {
            "route_id": feed.routes.route_id,
            "agency_id": _optional_col(feed.routes, "agency_id"),
            "route_long_name": _optional_col(feed.routes, "route_long_name"),
            "route_type": feed.routes.route_type,
        }
    )
    departures = departures.merge(routes, on="route_id", how="left")
    if route_types is not None:
        route_types = {str(int(rt)) for rt in route_types}
        departures = departures.loc[departures.route_type.isin(route_types)].copy()

    # GTFS allows routes to omit agency_id when there is only one agency
    if len(feed.agencies) == 1:
        departures.loc[departures.agency_id == "", "agency_id"] = feed.agencies.agency_id.iloc[0]
    departures = departures.merge(
        feed.agencies[["agency_id", "agency_timezone"]], on="agency_id", how="left"
    )

    stop_tz = pd.Series(
        _optional_col(feed.stops, "stop_timezone").values, index=feed.stops.stop_id
    )
    departures["timezone"] = departures.stop_id.map(stop_tz).fillna("")
    no_stop_tz = departures.timezone == ""
    departures.loc[no_stop_tz, "timezone"] = departures.loc[no_stop_tz, "agency_timezone"]

    return departures.drop(columns=["stop_id", "route_type"]).reset_index(drop=True)


def audit_trips(
    feed: Feed,
    windows: Optional[dict[str, tuple[int, int]]] = None,
    route_types: Optional[Iterable[int]] = None,
    clock_timezone: Optional[str] = None,
) -> list[FlaggedTrip]:
    """Trips whose local departure hour falls in their timezone's rollover window.

    Does not modify the feed.

    Args:
        feed: Feed to audit.
        windows: timezone name to half-open local hour window `[start, end)`. Defaults to
            Central `[0, 1)`, Mountain `[0, 2)` and Pacific `[0, 3)`.
        route_types: if given, only audit trips on routes of these route types.
        clock_timezone: timezone feed times are written in. Defaults to each trip's agency
            timezone.

    Returns:
        Flagged trips in trips table order.
    """
    windows = DEFAULT_ROLLOVER_WINDOWS if windows is None else windows
    departures = trip_departures(feed, route_types=route_types)
    departures = departures.loc[departures.timezone.isin(set(windows))].copy()
    if departures.empty:
        WranglerLogger.info("Audited trips: none in a timezone with a rollover window.")
        return []

    if clock_timezone is not None:
        departures["agency_timezone"] = clock_timezone
    _no_clock = departures.agency_timezone.isna()
    if _no_clock.any():
        WranglerLogger.warning(
            f"Skipping {_no_clock.sum()} trips with no agency to take a clock timezone from: "
            f"{departures.loc[_no_clock, 'trip_id'].tolist()}"
        )
        departures = departures.loc[~_no_clock]
        if departures.empty:
            return []

    raw_seconds = str_to_seconds_from_midnight_series(departures.departure_time)
    shift = _offset_seconds(departures.timezone) - _offset_seconds(departures.agency_timezone)
    local_seconds = ((raw_seconds + shift) % SECONDS_PER_DAY).astype(int)

    window_start = departures.timezone.map(lambda tz: windows[tz][0] * 3600)
    window_end = departures.timezone.map(lambda tz: windows[tz][1] * 3600)
    in_window = (local_seconds >= window_start) & (local_seconds < window_end)

    flagged_df = departures.loc[in_window].copy()
    flagged_df["local_hour"] = local_seconds[in_window] // 3600
    flagged_df["local_time"] = local_seconds[in_window].map(seconds_from_midnight_to_str)

    flagged = [
        FlaggedTrip(**{k: rec[k] for k in AUDIT_RECORD_FIELDS})
        for rec in flagged_df.to_dict("records")
    ]
    for f in flagged:
        WranglerLogger.warning(
            f"Potentially broken: {f.trip_short_name} {f.route_long_name} to {f.trip_headsign} "
            f"(trip {f.trip_id}) departs {f.local_time} {f.timezone}, "
            f"feed time {f.departure_time}."
        )
    WranglerLogger.info(f"Audited {len(departures)} trips: {len(flagged)} flagged.")
    return flagged


def flagged_trips_to_df(flagged: list[FlaggedTrip]) -> pd.DataFrame:
    """Table of flagged trips, one row per trip."""
    return pd.DataFrame([f.model_dump() for f in flagged], columns=AUDIT_RECORD_FIELDS)
