"""Removal of agencies, routes, stops, trips and shapes from a Feed.

Removals cascade along foreign keys, so the feed never holds a row whose reference was removed:

- agencies -> routes -> trips -> stop_times, frequencies
- stops -> stop_times (child stops have their `parent_station` blanked)
- shapes -> trips have their `shape_id` blanked; the trips and their stop_times are kept

Every removal is a set operation and ids that aren't in the feed are ignored, so removals can
be applied in any order, any number of times, with the same result.

!!! example "Removing an agency and everything that depends on it"

    ```python
    from feed_wrangler.feed.filter import remove_agencies

    remove_agencies(feed, {"51"})
    ```
"""

from __future__ import annotations

from collections.abc import Iterable
from typing import TYPE_CHECKING, Callable, Optional

import pandas as pd

from ..logger import WranglerLogger
from .trips import trip_ids_for_shape_ids

if TYPE_CHECKING:
    from .feed import Feed

TripPredicate = Callable[[pd.Series], bool]


def remove_agencies(feed: Feed, agency_ids: Iterable[str]) -> Feed:
    """Remove agencies and, transitively, their routes, trips and stop_times.

    In a single-agency feed, routes without an agency_id (no column, or a blank value) belong
    to that agency and are removed with it.
    """
    agency_ids = set(agency_ids)
    WranglerLogger.info(f"Removing agencies: {sorted(agency_ids)}")
    if len(feed.agencies) == 1 and agency_ids & feed.ids("agencies"):
        if "agency_id" not in feed.routes:
            implicit_route_ids = feed.ids("routes")
        else:
            implicit_route_ids = set(feed.routes.loc[feed.routes.agency_id == "", "route_id"])
        if implicit_route_ids:
            WranglerLogger.debug(
                f"Removing {len(implicit_route_ids)} routes without an agency_id with the agency."
            )
            feed.delete_by_keys("routes", "route_id", implicit_route_ids)
    feed.delete_by_keys("agencies", "agency_id", agency_ids)
    return feed


def remove_routes(feed: Feed, route_ids: Iterable[str]) -> Feed:
    """Remove routes and, transitively, their trips and stop_times."""
    route_ids = set(route_ids)
    WranglerLogger.info(f"Removing routes: {sorted(route_ids)}")
    feed.delete_by_keys("routes", "route_id", route_ids)
    return feed


def remove_stops(feed: Feed, stop_ids: Iterable[str]) -> Feed:
    """Remove stops and the stop_times that visit them.

    Stops whose parent_station is removed keep their row with a blank parent_station.
    """
    stop_ids = set(stop_ids)
    WranglerLogger.info(f"Removing stops: {sorted(stop_ids)}")
    feed.delete_by_keys("stops", "stop_id", stop_ids)
    return feed


def remove_trips(feed: Feed, trip_ids: Iterable[str]) -> Feed:
    """Remove trips and their stop_times and frequencies."""
    trip_ids = set(trip_ids)
    WranglerLogger.debug(f"Removing {len(trip_ids)} trips.")
    feed.delete_by_keys("trips", "trip_id", trip_ids)
    return feed


def remove_trips_matching(feed: Feed, predicate: TripPredicate) -> Feed:
    """Remove every trip whose row satisfies predicate, with its stop_times and frequencies.

    Args:
        feed: Feed to modify.
        predicate: called with each trips row as a pandas Series; truthy to remove the trip.
    """
    if feed.trips.empty:
        return feed
    selected = feed.trips.apply(predicate, axis=1).astype(bool)
    trip_ids = feed.trips.loc[selected, "trip_id"].tolist()
    _name = getattr(predicate, "__name__", repr(predicate))
    WranglerLogger.info(f"Removing {len(trip_ids)} trips matching {_name}.")
    return remove_trips(feed, trip_ids)


def trip_short_name_prefix_predicate(
    prefix: str, route_ids: Optional[Iterable[str]] = None
) -> TripPredicate:
    """Predicate selecting trips whose trip_short_name (e.g. train number) starts with prefix.

    Args:
        prefix: trip_short_name prefix to match.
        route_ids: if given, only trips on one of these routes are selected.
    """
    route_ids = set(route_ids) if route_ids is not None else None

    def _predicate(trip: pd.Series) -> bool:
        if route_ids is not None and trip["route_id"] not in route_ids:
            return False
        return str(trip.get("trip_short_name", "")).startswith(prefix)

    _predicate.__name__ = f"trip_short_name_startswith_{prefix}"
    return _predicate


def detach_shapes(feed: Feed, trip_ids: Iterable[str]) -> Feed:
    """Blank the shape_id of the given trips. The trips and their stop_times are kept."""
    if "shape_id" not in feed.trips:
        return feed
    rows = set()
    trip_index = feed.fk_index("trips", "trip_id")
    for trip_id in set(trip_ids):
        rows.update(trip_index.get(trip_id, []))
    WranglerLogger.debug(f"Detaching shapes from {len(rows)} trips.")
    feed.set_field_by_rows("trips", "shape_id", rows, "")
    return feed


def remove_shapes(feed: Feed, shape_ids: Iterable[str]) -> Feed:
    """Remove shapes: detach them from every trip using them, then drop their points."""
    shape_ids = set(shape_ids)
    if not shape_ids:
        return feed
    trip_ids = trip_ids_for_shape_ids(feed.trips, shape_ids)
    WranglerLogger.info(
        f"Removing {len(shape_ids)} shapes used by {len(trip_ids)} trips: {sorted(shape_ids)}"
    )
    detach_shapes(feed, trip_ids)
    if "shapes" in feed.table_names:
        feed.delete_by_keys("shapes", "shape_id", shape_ids)
    return feed
