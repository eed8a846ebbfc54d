"""Main functionality for GTFS tables including Feed object."""

from __future__ import annotations

from pathlib import Path
from typing import ClassVar, Optional

import pandas as pd

from ..logger import WranglerLogger
from ..models._base.db import DBModelMixin
from ..models.gtfs.tables import (
    AgenciesTable,
    FrequenciesTable,
    RoutesTable,
    ShapesTable,
    StopsTable,
    StopTimesTable,
    TripsTable,
)
from ..utils.data import to_str_table, update_df_by_col_value


class Feed(DBModelMixin):
    """Wrapper class around a GTFS feed held as string-valued DataFrames.

    Most functionality derives from mixin class DBModelMixin which provides:

    - validation of tables to schemas when setting a table attribute (e.g. self.trips = trips_df)
    - validation of fks when setting a table attribute (e.g. self.trips = trips_df)
    - fk indexes and cascading deletion by key
    - hashing and deep copy functionality
    - overload of __eq__ to apply only to tables in table_names.
    - convenience methods for accessing tables

    Tables that aren't modeled (calendar, calendar_dates, feed_info, ...) are kept as-is in
    `extra_tables` so they can be written back out with the rest of the feed.

    Attributes:
        table_names (list[str]): list of table names in GTFS feed.
        tables (list[DataFrame]):: list tables as dataframes.
        agencies (DataFrame[AgenciesTable]): agencies dataframe
        routes (DataFrame[RoutesTable]): route dataframe
        shapes (DataFrame[ShapesTable]): shapes dataframe
        stops (DataFrame[StopsTable]): stops dataframe
        trips (DataFrame[TripsTable]): trips dataframe
        stop_times (DataFrame[StopTimesTable]): stop_times dataframe
        frequencies (Optional[DataFrame[FrequenciesTable]]): frequencies dataframe
        extra_tables (dict[str, DataFrame]): unmodeled tables, keyed by file stem
        feed_path (Optional[Path]): where the feed was read from, if read from disk
    """

    # the ordering here matters: referenced tables come before the tables referencing them.
    _table_models: ClassVar[dict] = {
        "agencies": AgenciesTable,
        "routes": RoutesTable,
        "shapes": ShapesTable,
        "stops": StopsTable,
        "trips": TripsTable,
        "stop_times": StopTimesTable,
        "frequencies": FrequenciesTable,
    }

    table_names: ClassVar[list[str]] = [
        "agencies",
        "routes",
        "stops",
        "trips",
        "stop_times",
    ]

    optional_table_names: ClassVar[list[str]] = ["shapes", "frequencies"]

    def __init__(self, extra_tables: Optional[dict[str, pd.DataFrame]] = None, **kwargs):
        """Create a Feed object from a dictionary of DataFrames representing a GTFS feed.

        Args:
            extra_tables: unmodeled tables to carry along unchanged, keyed by file stem.
            kwargs: DataFrames representing the tables of a GTFS feed, keyed by table name.
        """
        self.feed_path: Optional[Path] = None
        self.initialize_tables(**kwargs)

        extra_tables = dict(extra_tables or {})
        extra_tables.update({k: v for k, v in kwargs.items() if k not in self.table_names})
        if extra_tables:
            WranglerLogger.info(f"Carrying unmodeled tables: {list(extra_tables.keys())}")
        self.extra_tables = {k: to_str_table(v) for k, v in extra_tables.items()}

    def set_by_id(
        self,
        table_name: str,
        set_df: pd.DataFrame,
        id_property: str,
        properties: Optional[list[str]] = None,
    ):
        """Set one or more property values based on an ID property for a given table.

        Properties in set_df which aren't yet columns of the table are added as blank columns
        before being set.

        Args:
            table_name (str): Name of the table to modify.
            set_df (pd.DataFrame): DataFrame with columns `<id_property>` and the properties
                to set, where `<id_property>` is unique.
            id_property: Property to use as ID to set by.
            properties: List of properties to set which are in set_df. If not specified, will set
                all properties.
        """
        if not set_df[id_property].is_unique:
            msg = f"{id_property} must be unique in set_df."
            _dupes = set_df[id_property][set_df[id_property].duplicated()]
            WranglerLogger.error(msg + f"Found duplicates: {_dupes.tolist()}")
            raise ValueError(msg)

        if properties is None:
            properties = [c for c in set_df.columns if c != id_property]

        table_df = self.get_table(table_name).copy()
        for prop in properties:
            if prop not in table_df:
                WranglerLogger.debug(f"Adding blank {prop} column to {table_name}.")
                table_df[prop] = ""

        updated_df = update_df_by_col_value(table_df, set_df, id_property, properties=properties)
        self.__setattr__(table_name, updated_df)

    def ids(self, table_name: str) -> set[str]:
        """Set of primary key values of a single-key table."""
        pk = self._table_models[table_name].Config._pk
        if len(pk) != 1:
            msg = f"{table_name} has a composite primary key: {pk}."
            raise ValueError(msg)
        return set(self.get_table(table_name)[pk[0]])

    def __repr__(self) -> str:
        """Summary of record counts by table."""
        counts = ", ".join(f"{t}={len(self.get_table(t))}" for t in self.table_names)
        return f"Feed({counts})"
