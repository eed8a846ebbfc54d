"""Tests for shape validation in feed_wrangler.feed.shapes.

Run just these tests using `pytest tests/test_feed/test_shapes.py`
"""

import pandas as pd
import pytest

from feed_wrangler import WranglerLogger
from feed_wrangler.feed.shapes import (
    denylisted_shape_ids,
    find_invalid_shapes,
    shape_ids_exceeding_delta,
    shape_point_deltas,
)


def _shape(shape_id: str, points: list[tuple[float, float]], seqs=None) -> pd.DataFrame:
    seqs = seqs or list(range(1, len(points) + 1))
    return pd.DataFrame(
        {
            "shape_id": [shape_id] * len(points),
            "shape_pt_lat": [str(lat) for lat, _ in points],
            "shape_pt_lon": [str(lon) for _, lon in points],
            "shape_pt_sequence": [str(s) for s in seqs],
        }
    )


exceeding_delta_cases = [
    # Test case format: (points, threshold, method, expected flagged)
    ([(0, 0), (0, 0.05), (0, 0.2)], 0.1, "axis", True),
    ([(0, 0), (0, 0.05), (0, 0.09)], 0.1, "axis", False),
    ([(0, 0), (0.08, 0.08)], 0.1, "axis", False),
    ([(0, 0), (0.08, 0.08)], 0.1, "euclidean", True),
    ([(0, 0), (0, 0.1)], 0.1, "axis", False),
    ([(0, 0)], 0.1, "axis", False),
    ([(45, -120), (45, -119)], 2, "axis", False),
]


@pytest.mark.parametrize(("points", "threshold", "method", "expected"), exceeding_delta_cases)
def test_shape_ids_exceeding_delta(request, points, threshold, method, expected):
    WranglerLogger.info(f"--Starting: {request.node.name}")
    shapes = _shape("A", points)
    result = shape_ids_exceeding_delta(shapes, threshold=threshold, method=method)
    assert result == ({"A"} if expected else set())
    WranglerLogger.info(f"--Finished: {request.node.name}")


def test_points_ordered_by_numeric_sequence(request):
    WranglerLogger.info(f"--Starting: {request.node.name}")
    # rows are out of order and "10" sorts before "9" as a string
    shapes = _shape("A", [(0, 0.09), (0, 0), (0, 0.05)], seqs=[10, 1, 9])
    assert shape_ids_exceeding_delta(shapes, threshold=0.1) == set()

    deltas = shape_point_deltas(shapes)
    assert deltas.shape_pt_sequence.tolist() == [1, 9, 10]
    assert pd.isna(deltas.delta.iloc[0])
    assert deltas.delta.iloc[1:].round(6).tolist() == [0.05, 0.04]
    WranglerLogger.info(f"--Finished: {request.node.name}")


def test_deltas_do_not_cross_shapes(request):
    WranglerLogger.info(f"--Starting: {request.node.name}")
    shapes = pd.concat([_shape("A", [(0, 0), (0, 0.05)]), _shape("B", [(10, 10), (10, 10.05)])])
    assert shape_ids_exceeding_delta(shapes, threshold=0.1) == set()
    WranglerLogger.info(f"--Finished: {request.node.name}")


def test_unknown_delta_method(request):
    WranglerLogger.info(f"--Starting: {request.node.name}")
    with pytest.raises(ValueError):
        shape_point_deltas(_shape("A", [(0, 0), (0, 1)]), method="manhattan")
    WranglerLogger.info(f"--Finished: {request.node.name}")


def test_denylisted_shape_ids(request, small_feed):
    WranglerLogger.info(f"--Starting: {request.node.name}")
    assert denylisted_shape_ids(small_feed.shapes, ["S3", "not_a_shape"]) == {"S3"}
    WranglerLogger.info(f"--Finished: {request.node.name}")


def test_find_invalid_shapes(request, small_feed):
    WranglerLogger.info(f"--Starting: {request.node.name}")
    assert find_invalid_shapes(small_feed) == {"S2"}
    assert find_invalid_shapes(small_feed, denylist=["S3"]) == {"S2", "S3"}
    assert find_invalid_shapes(small_feed, threshold=1, denylist=["S3"]) == {"S3"}
    WranglerLogger.info(f"--Finished: {request.node.name}")


def test_find_invalid_shapes_without_shapes_table(request, small_feed_dfs):
    WranglerLogger.info(f"--Starting: {request.node.name}")
    from feed_wrangler.io import load_feed_from_dfs

    del small_feed_dfs["shapes"]
    small_feed_dfs["trips"] = small_feed_dfs["trips"].drop(columns=["shape_id"])
    feed = load_feed_from_dfs(small_feed_dfs)
    assert find_invalid_shapes(feed, denylist=["S1"]) == set()
    WranglerLogger.info(f"--Finished: {request.node.name}")
