"""Applies every configured fix to a Feed, in a fixed order.

1. remove agencies, routes, stops and trips (by id, then by trip_short_name prefix rule)
2. override stop locations
3. find invalid shapes and remove them, detaching the trips that used them
4. overwrite route cosmetics
5. audit remaining trips for midnight rollover (reported only)

Every step is idempotent, so running the pipeline on its own output changes nothing.

Usage:
    ```python
    from feed_wrangler import fix_feed, load_feed, load_fix_config

    result = fix_feed(load_feed("GTFS.zip"), load_fix_config("fix_config.yml"))
    result.feed
    result.invalid_shape_ids
    result.flagged_trips
    ```
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Optional

from .configs import ConfigInputTypes, FixConfig, load_fix_config
from .feed.audit import audit_trips
from .feed.feed import Feed
from .feed.filter import (
    remove_agencies,
    remove_routes,
    remove_shapes,
    remove_stops,
    remove_trips,
    remove_trips_matching,
    trip_short_name_prefix_predicate,
)
from .feed.routes import apply_route_cosmetics, route_ids_for_agency_ids
from .feed.shapes import find_invalid_shapes
from .feed.stops import apply_stop_overrides
from .logger import WranglerLogger
from .models.gtfs.records import FlaggedTrip


@dataclass
class FixResult:
    """Outcome of fix_feed.

    Attributes:
        feed: the fixed Feed. The same object that was passed in, modified in place.
        invalid_shape_ids: shapes found invalid and removed.
        flagged_trips: trips reported by the midnight rollover audit.
    """

    feed: Feed
    invalid_shape_ids: set[str] = field(default_factory=set)
    flagged_trips: list[FlaggedTrip] = field(default_factory=list)


def _rule_route_ids(feed: Feed, route_ids, agency_ids) -> Optional[set[str]]:
    """Route scope of a trip removal rule; None when the rule applies to every route."""
    if route_ids is None and agency_ids is None:
        return None
    scope = set(feed.ids("routes"))
    if route_ids is not None:
        scope &= set(route_ids)
    if agency_ids is not None:
        scope &= set(route_ids_for_agency_ids(feed.routes, agency_ids))
    return scope


def apply_filters(feed: Feed, config: FixConfig) -> Feed:
    """Remove the agencies, routes, stops and trips named in config.FILTERS."""
    filters = config.FILTERS
    remove_agencies(feed, filters.REMOVE_AGENCY_IDS)
    remove_routes(feed, filters.REMOVE_ROUTE_IDS)
    remove_stops(feed, filters.REMOVE_STOP_IDS)
    remove_trips(feed, filters.REMOVE_TRIP_IDS)
    for rule in filters.REMOVE_TRIPS:
        route_ids = _rule_route_ids(feed, rule.ROUTE_IDS, rule.AGENCY_IDS)
        predicate = trip_short_name_prefix_predicate(rule.TRIP_SHORT_NAME_PREFIX, route_ids)
        remove_trips_matching(feed, predicate)
    return feed


def fix_feed(feed: Feed, config: Optional[ConfigInputTypes] = None) -> FixResult:
    """Apply all fixes in config to feed and audit the result.

    Args:
        feed: Feed to fix. Modified in place.
        config: FixConfig, or anything load_fix_config accepts. Defaults to FixConfig().

    Raises:
        StopNotFoundError: if a stop override names a stop that isn't in the feed.
    """
    config = load_fix_config(config)
    WranglerLogger.info(f"Fixing {feed}")

    apply_filters(feed, config)
    apply_stop_overrides(feed, config.STOPS.OVERRIDES)

    invalid_shape_ids = find_invalid_shapes(
        feed,
        threshold=config.SHAPES.MAX_POINT_DELTA_DEG,
        denylist=config.SHAPES.DENYLIST_SHAPE_IDS,
        method=config.SHAPES.DELTA_METHOD,
    )
    remove_shapes(feed, invalid_shape_ids)

    apply_route_cosmetics(feed, config.ROUTES.COSMETICS)

    flagged_trips = audit_trips(
        feed,
        windows=config.AUDIT.WINDOWS,
        route_types=config.AUDIT.ROUTE_TYPES,
        clock_timezone=config.AUDIT.CLOCK_TIMEZONE,
    )
    WranglerLogger.info(
        f"Fixed {feed}: removed {len(invalid_shape_ids)} invalid shapes, "
        f"flagged {len(flagged_trips)} trips."
    )
    return FixResult(feed, set(invalid_shape_ids), flagged_trips)
