"""Corrections to route colors and names, and route queries."""

from __future__ import annotations

from collections.abc import Iterable
from typing import TYPE_CHECKING, Optional

import pandas as pd
from pandera.typing import DataFrame
from pydantic import validate_call

from ..logger import WranglerLogger
from ..models._base.types import HexColor
from ..models.gtfs.tables import RoutesTable
from .feed import Feed

if TYPE_CHECKING:
    from ..configs.fixes import RouteCosmetics


def route_ids_for_agency_ids(
    routes: DataFrame[RoutesTable], agency_ids: Iterable[str]
) -> list[str]:
    """Returns route_ids, in routes table order, operated by any of agency_ids."""
    if "agency_id" not in routes:
        return routes.route_id.tolist()
    return routes.loc[routes.agency_id.isin(set(agency_ids)), "route_id"].tolist()


@validate_call(config={"arbitrary_types_allowed": True})
def set_route_cosmetics(
    feed: Feed,
    route_id: str,
    short_name: Optional[str] = None,
    long_name: Optional[str] = None,
    color: Optional[HexColor] = None,
    text_color: Optional[HexColor] = None,
) -> Feed:
    """Overwrite display fields of a route. Fields left as None are not changed.

    A route_id not in the feed is skipped with a warning.

    Args:
        feed: Feed to modify in place.
        route_id: route to update.
        short_name: new route_short_name.
        long_name: new route_long_name.
        color: new route_color as six hex digits. A leading `#` and lower case are accepted
            and normalized.
        text_color: new route_text_color, normalized the same way.

    Raises:
        ValidationError: if a color isn't six hex digits.
    """
    if route_id not in feed.ids("routes"):
        WranglerLogger.warning(f"Route {route_id} not in feed - skipping cosmetic change.")
        return feed

    set_values = {
        "route_short_name": short_name,
        "route_long_name": long_name,
        "route_color": color,
        "route_text_color": text_color,
    }
    set_values = {k: v for k, v in set_values.items() if v is not None}
    if not set_values:
        return feed

    WranglerLogger.debug(f"Setting cosmetics for route {route_id}: {set_values}")
    set_df = pd.DataFrame([{"route_id": route_id, **set_values}])
    feed.set_by_id("routes", set_df, id_property="route_id")
    return feed


def apply_route_cosmetics(feed: Feed, cosmetics: dict[str, RouteCosmetics]) -> Feed:
    """Apply cosmetic overrides for each route_id in cosmetics."""
    WranglerLogger.info(f"Applying cosmetic changes to {len(cosmetics)} routes.")
    for route_id, c in cosmetics.items():
        set_route_cosmetics(
            feed,
            route_id,
            short_name=c.ROUTE_SHORT_NAME,
            long_name=c.ROUTE_LONG_NAME,
            color=c.ROUTE_COLOR,
            text_color=c.ROUTE_TEXT_COLOR,
        )
    return feed
