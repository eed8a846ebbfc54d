"""Functions related to parsing GTFS time strings and timezone offsets.

GTFS times are `HH:MM:SS` measured from noon minus 12h of the service day, so hours may exceed 23
for trips running past midnight. They are kept as strings in the Feed and only converted to
seconds here when a calculation needs them.
"""

from __future__ import annotations

from datetime import timedelta
from functools import lru_cache

import pandas as pd
from pydantic import validate_call

from ..models._base.types import TimeString
from ..params import STANDARD_OFFSET_REFERENCE_DATE


class UnknownTimezoneError(Exception):
    """Raised when a timezone name can't be resolved."""


@validate_call
def str_to_seconds_from_midnight(time_str: TimeString) -> int:
    """Convert a TimeString (HH:MM:SS) to the number of seconds since midnight.

    Hours past 23 are kept, so "25:10:00" is 90600 rather than wrapping to the next day.
    """
    hours, minutes, seconds = (int(p) for p in time_str.split(":"))
    return hours * 3600 + minutes * 60 + seconds


def str_to_seconds_from_midnight_series(time_str_s: pd.Series) -> pd.Series:
    """Vectorized str_to_seconds_from_midnight. Blank strings become NaN."""
    parts = time_str_s.str.extract(r"^(\d+):(\d{2}):(\d{2})$").astype(float)
    return parts[0] * 3600 + parts[1] * 60 + parts[2]


def seconds_from_midnight_to_str(seconds: int) -> TimeString:
    """Convert the number of seconds since midnight to a TimeString (HH:MM:SS)."""
    hours, remainder = divmod(int(seconds), 3600)
    minutes, secs = divmod(remainder, 60)
    return f"{hours:02}:{minutes:02}:{secs:02}"


@lru_cache(maxsize=64)
def standard_utc_offset(tz_name: str) -> timedelta:
    """UTC offset of a timezone with any daylight saving adjustment removed.

    Evaluated on a fixed reference date; the offset and DST amount at that date are used, so
    historical changes to a zone's standard offset are not considered.

    Raises:
        UnknownTimezoneError: if tz_name isn't a known IANA timezone.
    """
    try:
        ts = pd.Timestamp(*STANDARD_OFFSET_REFERENCE_DATE, tz=tz_name)
    except (KeyError, ValueError) as e:
        msg = f"Unknown timezone: {tz_name}"
        raise UnknownTimezoneError(msg) from e
    return ts.utcoffset() - (ts.dst() or timedelta(0))
