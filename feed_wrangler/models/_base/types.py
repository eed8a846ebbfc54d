from __future__ import annotations

from typing import Annotated

from pydantic import BeforeValidator, Field

Latitude = Annotated[float, Field(ge=-90, le=90, description="Latitude in decimal degrees.")]

Longitude = Annotated[float, Field(ge=-180, le=180, description="Longitude in decimal degrees.")]

TIME_STRING_PATTERN = r"^(\d+):([0-5]\d):([0-5]\d)$"

TimeString = Annotated[
    str,
    Field(
        description="A GTFS time string HH:MM:SS. HH may exceed 23 for service after midnight.",
        pattern=TIME_STRING_PATTERN,
    ),
]

HexColor = Annotated[
    str,
    BeforeValidator(lambda x: str(x).lstrip("#").upper()),
    Field(pattern=r"^[0-9A-F]{6}$", description="Six digit hex color, no leading `#`."),
]

HourWindow = Annotated[
    tuple[int, int],
    Field(description="Half-open local hour window `[start, end)`."),
]
