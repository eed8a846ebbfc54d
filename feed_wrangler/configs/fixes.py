"""Configuration of the fixes applied to a GTFS feed.

All of the feed-specific data the fixes need (which agencies, routes, stops and trips to
remove, stop location overrides, shape denylist, route cosmetics and audit windows) lives here
rather than in code, so a config file can be kept in version control alongside the feed it fixes.

Usage:
    `config` can be a:

    - Path to a config file in yaml/toml/json (recommended),
    - List of paths to config files (in case you want to split up various sub-configurations)
    - Dictionary which is in the same structure of a config file, or
    - A `FixConfig()` instance.

    ```python
    from feed_wrangler import fix_feed, load_feed, load_fix_config

    config = load_fix_config(Path("amtrak_fix_config.yml"))
    result = fix_feed(load_feed("GTFS.zip"), config)
    ```

If not provided, no entities are removed, no stops or routes are changed and shapes are only
checked against the default point delta.

??? Example "Example Fix Configuration"

    ```yaml
    FILTERS:
        REMOVE_AGENCY_IDS: ["1206"]
        REMOVE_ROUTE_IDS: ["88700"]
        REMOVE_TRIPS:
            - TRIP_SHORT_NAME_PREFIX: "7"
              ROUTE_IDS: ["40751"]
    STOPS:
        OVERRIDES:
            EWR:
                LAT: 40.7128
                LON: -74.1837
    SHAPES:
        MAX_POINT_DELTA_DEG: 0.1
        DELTA_METHOD: axis
        DENYLIST_SHAPE_IDS: ["8462"]
    ROUTES:
        COSMETICS:
            "88": {ROUTE_COLOR: "#1F4E79", ROUTE_TEXT_COLOR: "FFFFFF"}
    AUDIT:
        WINDOWS:
            America/Chicago: [0, 1]
            America/Denver: [0, 2]
            America/Los_Angeles: [0, 3]
        ROUTE_TYPES: [2]
    ```

Extended usage:
    Modify a loaded configuration in-line:

    ```python
    config.SHAPES.MAX_POINT_DELTA_DEG = 0.2
    ```
"""

from typing import Literal, Optional

from pydantic import Field, field_validator
from pydantic.dataclasses import dataclass

from ..models._base.types import HexColor, HourWindow, Latitude, Longitude
from ..params import (
    DEFAULT_DOWNLOAD_TIMEOUT_SECS,
    DEFAULT_MAX_POINT_DELTA_DEG,
    DEFAULT_ROLLOVER_WINDOWS,
)
from .utils import ConfigItem


@dataclass
class TripRemovalRule(ConfigItem):
    """Removes trips whose trip_short_name starts with a prefix.

    Attributes:
        TRIP_SHORT_NAME_PREFIX: trip_short_name (train number) prefix of trips to remove.
        ROUTE_IDS: if set, only trips on these routes are removed.
        AGENCY_IDS: if set, only trips on routes of these agencies are removed.
    """

    TRIP_SHORT_NAME_PREFIX: str = Field(min_length=1)
    ROUTE_IDS: Optional[list[str]] = None
    AGENCY_IDS: Optional[list[str]] = None


@dataclass
class FiltersConfig(ConfigItem):
    """Entities to remove from the feed, along with everything that depends on them.

    Attributes:
        REMOVE_AGENCY_IDS: agencies to remove with their routes, trips and stop_times.
        REMOVE_ROUTE_IDS: routes to remove with their trips and stop_times.
        REMOVE_STOP_IDS: stops to remove with their stop_times.
        REMOVE_TRIP_IDS: trips to remove with their stop_times and frequencies.
        REMOVE_TRIPS: trip_short_name prefix rules of trips to remove.
    """

    REMOVE_AGENCY_IDS: list[str] = Field(default_factory=list)
    REMOVE_ROUTE_IDS: list[str] = Field(default_factory=list)
    REMOVE_STOP_IDS: list[str] = Field(default_factory=list)
    REMOVE_TRIP_IDS: list[str] = Field(default_factory=list)
    REMOVE_TRIPS: list[TripRemovalRule] = Field(default_factory=list)


@dataclass
class StopOverride(ConfigItem):
    """Corrected location, and optionally name, of a stop."""

    LAT: Latitude
    LON: Longitude
    NAME: Optional[str] = None


@dataclass
class StopsConfig(ConfigItem):
    """Stop corrections.

    Attributes:
        OVERRIDES: stop_id to its corrected location. Every stop_id must be in the feed.
    """

    OVERRIDES: dict[str, StopOverride] = Field(default_factory=dict)


@dataclass
class ShapesConfig(ConfigItem):
    """Shape validation.

    Attributes:
        MAX_POINT_DELTA_DEG: largest allowed move, in degrees, between consecutive points.
        DELTA_METHOD: `axis` compares the larger of the lat and lon change to
            MAX_POINT_DELTA_DEG; `euclidean` compares their planar distance.
        DENYLIST_SHAPE_IDS: shapes to remove regardless of their geometry.
    """

    MAX_POINT_DELTA_DEG: float = Field(default=DEFAULT_MAX_POINT_DELTA_DEG, gt=0)
    DELTA_METHOD: Literal["axis", "euclidean"] = "axis"
    DENYLIST_SHAPE_IDS: list[str] = Field(default_factory=list)


@dataclass
class RouteCosmetics(ConfigItem):
    """Display fields to overwrite on a route. Fields left unset are unchanged."""

    ROUTE_SHORT_NAME: Optional[str] = None
    ROUTE_LONG_NAME: Optional[str] = None
    ROUTE_COLOR: Optional[HexColor] = None
    ROUTE_TEXT_COLOR: Optional[HexColor] = None


@dataclass
class RoutesConfig(ConfigItem):
    """Route corrections.

    Attributes:
        COSMETICS: route_id to the display fields to overwrite.
    """

    COSMETICS: dict[str, RouteCosmetics] = Field(default_factory=dict)


@dataclass
class AuditConfig(ConfigItem):
    """Midnight rollover audit.

    Attributes:
        WINDOWS: timezone to local hour window `[start, end)` in which a departure is flagged.
            Timezones not listed are never flagged.
        ROUTE_TYPES: if set, only trips on routes of these route types are audited.
        CLOCK_TIMEZONE: timezone feed times are written in. Defaults to the agency timezone.
    """

    WINDOWS: dict[str, HourWindow] = Field(default_factory=lambda: dict(DEFAULT_ROLLOVER_WINDOWS))
    ROUTE_TYPES: Optional[list[int]] = None
    CLOCK_TIMEZONE: Optional[str] = None

    @field_validator("WINDOWS")
    @classmethod
    def _window_hours_in_day(cls, windows: dict[str, tuple[int, int]]):
        for tz, (start, end) in windows.items():
            if not 0 <= start < end <= 24:  # noqa: PLR2004
                msg = f"Window for {tz} must satisfy 0 <= start < end <= 24. Found {start, end}."
                raise ValueError(msg)
        return windows


@dataclass
class IoConfig(ConfigItem):
    """Feed input and output.

    Attributes:
        FEED_URL: url to download the feed from when no input path is given.
        DOWNLOAD_TIMEOUT_SECS: seconds to wait for the feed server.
    """

    FEED_URL: Optional[str] = None
    DOWNLOAD_TIMEOUT_SECS: int = Field(default=DEFAULT_DOWNLOAD_TIMEOUT_SECS, gt=0)


@dataclass
class FixConfig(ConfigItem):
    """Configuration for fixing a GTFS feed.

    Attributes:
        FILTERS: agencies, routes, stops and trips to remove.
        STOPS: stop location overrides.
        SHAPES: shape validation parameters and denylist.
        ROUTES: route cosmetic overrides.
        AUDIT: midnight rollover audit parameters.
        IO: feed download parameters.
    """

    FILTERS: FiltersConfig = Field(default_factory=FiltersConfig)
    STOPS: StopsConfig = Field(default_factory=StopsConfig)
    SHAPES: ShapesConfig = Field(default_factory=ShapesConfig)
    ROUTES: RoutesConfig = Field(default_factory=RoutesConfig)
    AUDIT: AuditConfig = Field(default_factory=AuditConfig)
    IO: IoConfig = Field(default_factory=IoConfig)


DefaultConfig = FixConfig()
