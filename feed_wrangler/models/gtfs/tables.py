"""Data models for the GTFS tables held in a Feed, using the pandera library.

The module includes the following classes:

- AgenciesTable: Represents the Agency table in the GTFS dataset.
- RoutesTable: Represents the Routes table in the GTFS dataset.
- TripsTable: Represents the Trips table in the GTFS dataset.
- StopsTable: Represents the Stops table in the GTFS dataset.
- StopTimesTable: Represents the Stop Times table in the GTFS dataset.
- ShapesTable: Represents the Shapes table in the GTFS dataset.
- FrequenciesTable: Optional. Represents the Frequencies table in the GTFS dataset.

Every column is kept as a string so that rows which survive the fixes are written back exactly
as they were read. Numeric and time columns are checked for parseability and range, not
converted. An empty string means the field is blank.

Key metadata is stored on each model's `Config`:

- `_pk`: primary key field(s).
- `_fk`: `{<field>: (<referenced table>, <referenced field>)}`.
- `_fk_detach`: fk fields that are blanked, rather than cascade-deleted, when the referenced
    row is removed.

!!! example "Validating a table to the StopsTable"

    ```python
    from feed_wrangler.models.gtfs.tables import StopsTable
    from feed_wrangler.utils.models import validate_df_to_model

    validated_stops_df = validate_df_to_model(stops_df, StopsTable)
    ```
"""

from typing import ClassVar, Optional

import pandas as pd
import pandera as pa
from pandera.typing import Series

from .._base.db import TableDetachedKeys, TableForeignKeys, TablePrimaryKeys
from .._base.types import TIME_STRING_PATTERN
from .types import LocationType, RouteType, enum_values_as_str

BLANK_OR_TIME_PATTERN = f"^$|{TIME_STRING_PATTERN}"


def _numeric_between(s: pd.Series, min_value: float, max_value: float) -> pd.Series:
    """True where a string value parses to a number within the given range."""
    return pd.to_numeric(s, errors="coerce").between(min_value, max_value)


def _blank_or_numeric_between(s: pd.Series, min_value: float, max_value: float) -> pd.Series:
    """True where a string value is blank or parses to a number within the given range."""
    return (s == "") | _numeric_between(s, min_value, max_value)


def _non_negative_int(s: pd.Series) -> pd.Series:
    """True where a string value is a non-negative integer."""
    return s.str.fullmatch(r"\d+")


class AgenciesTable(pa.DataFrameModel):
    """Represents the Agency table in the GTFS dataset.

    For field definitions, see the GTFS reference: <https://gtfs.org/documentation/schedule/reference/#agencytxt>

    Attributes:
        agency_id (str): The agency_id. Primary key. Required to be unique.
        agency_name (str): The agency name.
        agency_timezone (str): The agency timezone, as an IANA timezone name.
        agency_url (Optional[str]): The agency URL.
        agency_lang (Optional[str]): The agency language.
        agency_phone (Optional[str]): The agency phone number.
    """

    agency_id: Series[str] = pa.Field(coerce=True, nullable=False, unique=True)
    agency_name: Series[str] = pa.Field(coerce=True, nullable=False)
    agency_timezone: Series[str] = pa.Field(coerce=True, nullable=False)

    # Optional Fields
    agency_url: Optional[Series[str]] = pa.Field(coerce=True, nullable=True)
    agency_lang: Optional[Series[str]] = pa.Field(coerce=True, nullable=True)
    agency_phone: Optional[Series[str]] = pa.Field(coerce=True, nullable=True)

    class Config:
        """Config for the AgenciesTable data model."""

        coerce = True
        _pk: ClassVar[TablePrimaryKeys] = ["agency_id"]


class RoutesTable(pa.DataFrameModel):
    """Represents the Routes table in the GTFS dataset.

    For field definitions, see the GTFS reference: <https://gtfs.org/documentation/schedule/reference/#routestxt>

    Attributes:
        route_id (str): The route_id. Primary key. Required to be unique.
        route_type (str): The route type. One of the `RouteType` values.
        agency_id (Optional[str]): Foreign key to agency_id in the agencies table. May be
            omitted when the feed has a single agency.
        route_short_name (Optional[str]): The route short name.
        route_long_name (Optional[str]): The route long name.
        route_color (Optional[str]): The route color.
        route_text_color (Optional[str]): The route text color.
    """

    route_id: Series[str] = pa.Field(nullable=False, unique=True, coerce=True)
    route_type: Series[str] = pa.Field(
        coerce=True, nullable=False, isin=enum_values_as_str(RouteType)
    )

    # Optional Fields
    agency_id: Optional[Series[str]] = pa.Field(nullable=True, coerce=True)
    route_short_name: Optional[Series[str]] = pa.Field(nullable=True, coerce=True)
    route_long_name: Optional[Series[str]] = pa.Field(nullable=True, coerce=True)
    route_desc: Optional[Series[str]] = pa.Field(nullable=True, coerce=True)
    route_url: Optional[Series[str]] = pa.Field(nullable=True, coerce=True)
    route_color: Optional[Series[str]] = pa.Field(nullable=True, coerce=True)
    route_text_color: Optional[Series[str]] = pa.Field(nullable=True, coerce=True)

    class Config:
        """Config for the RoutesTable data model."""

        coerce = True
        _pk: ClassVar[TablePrimaryKeys] = ["route_id"]
        _fk: ClassVar[TableForeignKeys] = {"agency_id": ("agencies", "agency_id")}


class TripsTable(pa.DataFrameModel):
    """Represents the Trips table in the GTFS dataset.

    For field definitions, see the GTFS reference: <https://gtfs.org/documentation/schedule/reference/#tripstxt>

    Attributes:
        trip_id (str): Primary key. Required to be unique.
        route_id (str): Foreign key to `route_id` in the routes table.
        service_id (str): The service id.
        shape_id (Optional[str]): Foreign key to `shape_id` in the shapes table. Blanked
            rather than deleted when the shape is removed.
        trip_short_name (Optional[str]): The trip short name, e.g. a train number.
        trip_headsign (Optional[str]): The trip headsign.
    """

    trip_id: Series[str] = pa.Field(nullable=False, unique=True, coerce=True)
    route_id: Series[str] = pa.Field(nullable=False, coerce=True)
    service_id: Series[str] = pa.Field(nullable=False, coerce=True)

    # Optional Fields
    shape_id: Optional[Series[str]] = pa.Field(nullable=True, coerce=True)
    trip_short_name: Optional[Series[str]] = pa.Field(nullable=True, coerce=True)
    trip_headsign: Optional[Series[str]] = pa.Field(nullable=True, coerce=True)
    direction_id: Optional[Series[str]] = pa.Field(
        nullable=True, coerce=True, isin=["", "0", "1"]
    )
    block_id: Optional[Series[str]] = pa.Field(nullable=True, coerce=True)

    class Config:
        """Config for the TripsTable data model."""

        coerce = True
        _pk: ClassVar[TablePrimaryKeys] = ["trip_id"]
        _fk: ClassVar[TableForeignKeys] = {
            "route_id": ("routes", "route_id"),
            "shape_id": ("shapes", "shape_id"),
        }
        _fk_detach: ClassVar[TableDetachedKeys] = ["shape_id"]


class StopsTable(pa.DataFrameModel):
    """Represents the Stops table in the GTFS dataset.

    For field definitions, see the GTFS reference: <https://gtfs.org/documentation/schedule/reference/#stopstxt>

    Attributes:
        stop_id (str): The stop_id. Primary key. Required to be unique.
        stop_lat (str): The stop latitude. Blank only for generic nodes and boarding areas.
        stop_lon (str): The stop longitude. Blank only for generic nodes and boarding areas.
        stop_name (Optional[str]): The stop name.
        location_type (Optional[str]): The location type. One of the `LocationType` values, or
            blank for a stop platform.
        parent_station (Optional[str]): The `stop_id` of the parent station.
        stop_timezone (Optional[str]): The stop timezone, as an IANA timezone name.
    """

    stop_id: Series[str] = pa.Field(coerce=True, nullable=False, unique=True)
    stop_lat: Series[str] = pa.Field(coerce=True, nullable=False)
    stop_lon: Series[str] = pa.Field(coerce=True, nullable=False)

    # Optional Fields
    stop_code: Optional[Series[str]] = pa.Field(nullable=True, coerce=True)
    stop_name: Optional[Series[str]] = pa.Field(nullable=True, coerce=True)
    stop_desc: Optional[Series[str]] = pa.Field(nullable=True, coerce=True)
    zone_id: Optional[Series[str]] = pa.Field(nullable=True, coerce=True)
    stop_url: Optional[Series[str]] = pa.Field(nullable=True, coerce=True)
    location_type: Optional[Series[str]] = pa.Field(
        nullable=True, coerce=True, isin=["", *enum_values_as_str(LocationType)]
    )
    parent_station: Optional[Series[str]] = pa.Field(nullable=True, coerce=True)
    stop_timezone: Optional[Series[str]] = pa.Field(nullable=True, coerce=True)

    class Config:
        """Config for the StopsTable data model."""

        coerce = True
        _pk: ClassVar[TablePrimaryKeys] = ["stop_id"]
        _fk: ClassVar[TableForeignKeys] = {"parent_station": ("stops", "stop_id")}
        _fk_detach: ClassVar[TableDetachedKeys] = ["parent_station"]

    @pa.check("stop_lat")
    def stop_lat_in_range(cls, series: Series[str]) -> Series[bool]:
        """Check that stop_lat is blank or a valid latitude."""
        return _blank_or_numeric_between(series, -90, 90)

    @pa.check("stop_lon")
    def stop_lon_in_range(cls, series: Series[str]) -> Series[bool]:
        """Check that stop_lon is blank or a valid longitude."""
        return _blank_or_numeric_between(series, -180, 180)


class StopTimesTable(pa.DataFrameModel):
    """Represents the Stop Times table in the GTFS dataset.

    For field definitions, see the GTFS reference: <https://gtfs.org/documentation/schedule/reference/#stop_timestxt>

    The primary key of this table is a composite key of `trip_id` and `stop_sequence`.

    Attributes:
        trip_id (str): Foreign key to `trip_id` in the trips table.
        stop_id (str): Foreign key to `stop_id` in the stops table.
        stop_sequence (str): The stop sequence, a non-negative integer.
        arrival_time (str): The arrival time in HH:MM:SS format. Hours may exceed 23.
        departure_time (str): The departure time in HH:MM:SS format. Hours may exceed 23.
    """

    trip_id: Series[str] = pa.Field(nullable=False, coerce=True)
    stop_id: Series[str] = pa.Field(nullable=False, coerce=True)
    stop_sequence: Series[str] = pa.Field(nullable=False, coerce=True)
    arrival_time: Series[str] = pa.Field(
        nullable=False, coerce=True, str_matches=BLANK_OR_TIME_PATTERN
    )
    departure_time: Series[str] = pa.Field(
        nullable=False, coerce=True, str_matches=BLANK_OR_TIME_PATTERN
    )

    # Optional
    pickup_type: Optional[Series[str]] = pa.Field(nullable=True, coerce=True)
    drop_off_type: Optional[Series[str]] = pa.Field(nullable=True, coerce=True)
    shape_dist_traveled: Optional[Series[str]] = pa.Field(nullable=True, coerce=True)
    timepoint: Optional[Series[str]] = pa.Field(nullable=True, coerce=True)

    class Config:
        """Config for the StopTimesTable data model."""

        coerce = True
        _pk: ClassVar[TablePrimaryKeys] = ["trip_id", "stop_sequence"]
        _fk: ClassVar[TableForeignKeys] = {
            "trip_id": ("trips", "trip_id"),
            "stop_id": ("stops", "stop_id"),
        }
        unique: ClassVar[list[str]] = ["trip_id", "stop_sequence"]

    @pa.check("stop_sequence")
    def stop_sequence_is_int(cls, series: Series[str]) -> Series[bool]:
        """Check that stop_sequence is a non-negative integer."""
        return _non_negative_int(series)


class ShapesTable(pa.DataFrameModel):
    """Represents the Shapes table in the GTFS dataset.

    For field definitions, see the GTFS reference: <https://gtfs.org/documentation/schedule/reference/#shapestxt>

    Attributes:
        shape_id (str): The shape_id.
        shape_pt_lat (str): The shape point latitude.
        shape_pt_lon (str): The shape point longitude.
        shape_pt_sequence (str): The shape point sequence, a non-negative integer.
        shape_dist_traveled (Optional[str]): The shape distance traveled.
    """

    shape_id: Series[str] = pa.Field(nullable=False, coerce=True)
    shape_pt_lat: Series[str] = pa.Field(coerce=True, nullable=False)
    shape_pt_lon: Series[str] = pa.Field(coerce=True, nullable=False)
    shape_pt_sequence: Series[str] = pa.Field(coerce=True, nullable=False)

    # Optional
    shape_dist_traveled: Optional[Series[str]] = pa.Field(coerce=True, nullable=True)

    class Config:
        """Config for the ShapesTable data model."""

        coerce = True
        _pk: ClassVar[TablePrimaryKeys] = ["shape_id", "shape_pt_sequence"]
        unique: ClassVar[list[str]] = ["shape_id", "shape_pt_sequence"]

    @pa.check("shape_pt_lat")
    def shape_pt_lat_in_range(cls, series: Series[str]) -> Series[bool]:
        """Check that shape_pt_lat is a valid latitude."""
        return _numeric_between(series, -90, 90)

    @pa.check("shape_pt_lon")
    def shape_pt_lon_in_range(cls, series: Series[str]) -> Series[bool]:
        """Check that shape_pt_lon is a valid longitude."""
        return _numeric_between(series, -180, 180)

    @pa.check("shape_pt_sequence")
    def shape_pt_sequence_is_int(cls, series: Series[str]) -> Series[bool]:
        return _non_negative_int(series)


class FrequenciesTable(pa.DataFrameModel):
    """Represents the Frequency table in the GTFS dataset.

    For field definitions, see the GTFS reference: <https://gtfs.org/documentation/schedule/reference/#frequenciestxt>

    The primary key of this table is a composite key of `trip_id` and `start_time`.

    Attributes:
        trip_id (str): Foreign key to `trip_id` in the trips table.
        start_time (str): The start time in HH:MM:SS format.
        end_time (str): The end time in HH:MM:SS format.
        headway_secs (str): The headway in seconds.
    """

    trip_id: Series[str] = pa.Field(nullable=False, coerce=True)
    start_time: Series[str] = pa.Field(
        nullable=False, coerce=True, str_matches=TIME_STRING_PATTERN
    )
    end_time: Series[str] = pa.Field(nullable=False, coerce=True, str_matches=TIME_STRING_PATTERN)
    headway_secs: Series[str] = pa.Field(nullable=False, coerce=True)

    class Config:
        """Config for the FrequenciesTable data model."""

        coerce = True
        unique: ClassVar[list[str]] = ["trip_id", "start_time"]
        _pk: ClassVar[TablePrimaryKeys] = ["trip_id", "start_time"]
        _fk: ClassVar[TableForeignKeys] = {"trip_id": ("trips", "trip_id")}

    @pa.check("headway_secs")
    def headway_secs_is_int(cls, series: Series[str]) -> Series[bool]:
        return _non_negative_int(series)
