"""Feed Wrangler Package."""

__version__ = "0.1.0"

from .configs import load_fix_config
from .feed.audit import audit_trips, flagged_trips_to_df
from .feed.feed import Feed
from .io import load_feed, write_feed
from .logger import WranglerLogger, setup_logging
from .pipeline import FixResult, fix_feed

__all__ = [
    "Feed",
    "FixResult",
    "WranglerLogger",
    "audit_trips",
    "fix_feed",
    "flagged_trips_to_df",
    "load_feed",
    "load_fix_config",
    "setup_logging",
    "write_feed",
]
