"""Parameters for Feed Wrangler which should not be changed by the user.

Parameters that are here are used throughout the codebase and are stated here for easy reference.
Additional parameters that are more narrowly scoped are defined in the appropriate modules.
"""

SMALL_RECS: int = 5
"""Number of records to display in a dataframe summary."""

SECONDS_PER_DAY: int = 24 * 60 * 60

DEFAULT_MAX_POINT_DELTA_DEG: float = 0.1
"""Largest allowed lat or lon jump, in degrees, between consecutive shape points."""

DEFAULT_ROLLOVER_WINDOWS: dict[str, tuple[int, int]] = {
    "America/Chicago": (0, 1),
    "America/Denver": (0, 2),
    "America/Los_Angeles": (0, 3),
}
"""Local hour windows `[start, end)` where a departure is suspicious of a midnight rollover."""

STANDARD_OFFSET_REFERENCE_DATE: tuple[int, int, int] = (2001, 1, 15)
"""Date used to look up a timezone's standard (non-DST) UTC offset."""

GTFS_FILE_NAMES: dict[str, str] = {"agencies": "agency"}
"""Tables whose GTFS file name differs from the Feed table name."""

DEFAULT_DOWNLOAD_TIMEOUT_SECS: int = 120

DOWNLOAD_CHUNK_SIZE: int = 8192
