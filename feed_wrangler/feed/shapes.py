"""Detection of shapes with geometry that can't be right.

A shape is invalid when either:

- two consecutive points (by shape_pt_sequence) are further apart than a threshold in degrees,
    which catches points snapped to the wrong place, or
- its shape_id is on a denylist of shapes known to be wrong that the threshold doesn't catch.

Invalid shapes are removed whole; no attempt is made to repair individual points.
"""

from __future__ import annotations

from collections.abc import Iterable
from typing import TYPE_CHECKING, Literal

import numpy as np
import pandas as pd
from pandera.typing import DataFrame

from ..logger import WranglerLogger
from ..models.gtfs.tables import ShapesTable
from ..params import DEFAULT_MAX_POINT_DELTA_DEG

if TYPE_CHECKING:
    from .feed import Feed

DeltaMethod = Literal["axis", "euclidean"]


def shape_point_deltas(
    shapes: DataFrame[ShapesTable], method: DeltaMethod = "axis"
) -> pd.DataFrame:
    """Distance in degrees from each shape point to the previous point of the same shape.

    Points are ordered by numeric shape_pt_sequence within each shape. The first point of
    each shape has a NaN delta.

    Args:
        shapes: shapes table.
        method: "axis" for the larger of the lat and lon differences, "euclidean" for the
            straight-line distance in degrees.

    Returns:
        DataFrame with shape_id, shape_pt_sequence (int) and delta columns.
    """
    pts = pd.DataFrame(
        {
            "shape_id": shapes.shape_id,
            "shape_pt_sequence": shapes.shape_pt_sequence.astype(int),
            "lat": pd.to_numeric(shapes.shape_pt_lat),
            "lon": pd.to_numeric(shapes.shape_pt_lon),
        }
    )
    pts = pts.sort_values(["shape_id", "shape_pt_sequence"], kind="stable")
    by_shape = pts.groupby("shape_id", sort=False)
    d_lat = by_shape.lat.diff().abs()
    d_lon = by_shape.lon.diff().abs()
    if method == "axis":
        pts["delta"] = np.fmax(d_lat, d_lon).where(d_lat.notna())
    elif method == "euclidean":
        pts["delta"] = np.sqrt(d_lat**2 + d_lon**2)
    else:
        msg = f"Unknown delta method: {method}. Should be one of: axis, euclidean."
        raise ValueError(msg)
    return pts[["shape_id", "shape_pt_sequence", "delta"]]


def shape_ids_exceeding_delta(
    shapes: DataFrame[ShapesTable],
    threshold: float = DEFAULT_MAX_POINT_DELTA_DEG,
    method: DeltaMethod = "axis",
) -> set[str]:
    """Shape_ids with any consecutive pair of points more than threshold degrees apart.

    Shapes with fewer than two points are never returned.
    """
    if shapes.empty:
        return set()
    deltas = shape_point_deltas(shapes, method=method)
    exceeding = deltas.loc[deltas.delta > threshold]
    if not exceeding.empty:
        worst = exceeding.groupby("shape_id").delta.max()
        WranglerLogger.debug(f"Largest point jump by shape over {threshold} deg:\n{worst}")
    return set(exceeding.shape_id)


def denylisted_shape_ids(shapes: DataFrame[ShapesTable], denylist: Iterable[str]) -> set[str]:
    """Shape_ids on the denylist that are present in shapes."""
    return set(denylist) & set(shapes.shape_id)


def find_invalid_shapes(
    feed: Feed,
    threshold: float = DEFAULT_MAX_POINT_DELTA_DEG,
    denylist: Iterable[str] = (),
    method: DeltaMethod = "axis",
) -> set[str]:
    """Shape_ids in the feed that exceed the point delta threshold or are denylisted."""
    if "shapes" not in feed.table_names:
        WranglerLogger.debug("Feed has no shapes - nothing to validate.")
        return set()
    exceeding = shape_ids_exceeding_delta(feed.shapes, threshold=threshold, method=method)
    denied = denylisted_shape_ids(feed.shapes, denylist)
    WranglerLogger.info(
        f"Found {len(exceeding)} shapes with a point jump over {threshold} deg and "
        f"{len(denied)} denylisted shapes."
    )
    return exceeding | denied
