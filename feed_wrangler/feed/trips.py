"""Filters and queries of a gtfs trips and stop_times tables."""

from __future__ import annotations

from collections.abc import Iterable

import pandas as pd
from pandera.typing import DataFrame

from ..models.gtfs.tables import StopTimesTable, TripsTable


def trip_ids_for_shape_ids(
    trips: DataFrame[TripsTable], shape_ids: Iterable[str]
) -> list[str]:
    """Returns a list of trip_ids, in trips table order, for trips using any of shape_ids."""
    if "shape_id" not in trips:
        return []
    return trips.loc[trips.shape_id.isin(set(shape_ids)), "trip_id"].tolist()


def trip_ids_for_route_ids(
    trips: DataFrame[TripsTable], route_ids: Iterable[str]
) -> list[str]:
    """Returns a list of trip_ids, in trips table order, for trips on any of route_ids."""
    return trips.loc[trips.route_id.isin(set(route_ids)), "trip_id"].tolist()


def stop_times_for_trip_id(
    stop_times: DataFrame[StopTimesTable], trip_id: str
) -> DataFrame[StopTimesTable]:
    """Returns stop_times for a given trip_id, ordered by numeric stop_sequence."""
    trip_stop_times = stop_times.loc[stop_times.trip_id == trip_id]
    order = trip_stop_times.stop_sequence.astype(int).sort_values(kind="stable").index
    return trip_stop_times.loc[order]


def first_stop_times(stop_times: DataFrame[StopTimesTable]) -> pd.DataFrame:
    """Returns the stop_time with the lowest numeric stop_sequence for each trip.

    Adds a `start_time` column: the departure_time, or arrival_time where departure_time is
    blank.
    """
    seq = stop_times.stop_sequence.astype(int)
    first_idx = seq.groupby(stop_times.trip_id, sort=False).idxmin()
    first = stop_times.loc[first_idx.values].copy()
    first["start_time"] = first.departure_time.where(
        first.departure_time != "", first.arrival_time
    )
    return first
