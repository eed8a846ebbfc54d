"""Corrections to stop locations and names."""

from __future__ import annotations

from typing import TYPE_CHECKING, Optional

import pandas as pd
from pydantic import validate_call

from ..errors import StopNotFoundError
from ..logger import WranglerLogger
from ..models._base.types import Latitude, Longitude
from .feed import Feed

if TYPE_CHECKING:
    from ..configs.fixes import StopOverride


def coordinate_to_str(value: float) -> str:
    """Shortest string that reads back as the same float, e.g. 40.7128 -> "40.7128"."""
    return repr(float(value))


@validate_call(config={"arbitrary_types_allowed": True})
def override_stop(
    feed: Feed,
    stop_id: str,
    lat: Latitude,
    lon: Longitude,
    name: Optional[str] = None,
) -> Feed:
    """Overwrite the location, and optionally the name, of a stop.

    Applying the same override again leaves the stop unchanged.

    Args:
        feed: Feed to modify in place.
        stop_id: stop to correct.
        lat: corrected latitude.
        lon: corrected longitude.
        name: corrected stop_name, if given.

    Raises:
        StopNotFoundError: if stop_id isn't in the stops table. An override for a stop that
            no longer exists means the override is stale and needs to be updated.
    """
    if stop_id not in feed.ids("stops"):
        msg = f"Can't override stop {stop_id}: not found in stops."
        WranglerLogger.error(msg)
        raise StopNotFoundError(msg)

    set_values = {
        "stop_id": stop_id,
        "stop_lat": coordinate_to_str(lat),
        "stop_lon": coordinate_to_str(lon),
    }
    if name is not None:
        set_values["stop_name"] = name

    WranglerLogger.debug(f"Overriding stop {stop_id}: {set_values}")
    feed.set_by_id("stops", pd.DataFrame([set_values]), id_property="stop_id")
    return feed


def apply_stop_overrides(feed: Feed, overrides: dict[str, StopOverride]) -> Feed:
    """Apply every stop override, failing on the first stop_id not found."""
    WranglerLogger.info(f"Overriding {len(overrides)} stop locations.")
    for stop_id, override in overrides.items():
        override_stop(feed, stop_id, override.LAT, override.LON, name=override.NAME)
    return feed
