"""Tests for /utils and /utils/io_dict.

Run just these tests using `pytest tests/test_utils/test_utils.py`
"""

import pytest

from feed_wrangler import WranglerLogger
from feed_wrangler.errors import DictionaryMergeError
from feed_wrangler.utils.io_dict import load_dict, load_merge_dict
from feed_wrangler.utils.utils import merge_dicts


def test_merge_dicts(request):
    WranglerLogger.info(f"--Starting: {request.node.name}")
    right = {"STOPS": {"OVERRIDES": {"EWR": {"LAT": 40.7}}}, "SHAPES": {"DENYLIST_SHAPE_IDS": []}}
    left = {"STOPS": {"OVERRIDES": {"NYP": {"LAT": 40.8}}}, "AUDIT": {"ROUTE_TYPES": [2]}}
    merged = merge_dicts(right, left)

    assert merged is right
    assert merged == {
        "STOPS": {"OVERRIDES": {"EWR": {"LAT": 40.7}, "NYP": {"LAT": 40.8}}},
        "SHAPES": {"DENYLIST_SHAPE_IDS": []},
        "AUDIT": {"ROUTE_TYPES": [2]},
    }
    WranglerLogger.info(f"--Finished: {request.node.name}")


def test_merge_dicts_conflict(request):
    WranglerLogger.info(f"--Starting: {request.node.name}")
    with pytest.raises(DictionaryMergeError, match="STOPS.OVERRIDES.EWR.LAT"):
        merge_dicts(
            {"STOPS": {"OVERRIDES": {"EWR": {"LAT": 40.7}}}},
            {"STOPS": {"OVERRIDES": {"EWR": {"LAT": 40.8}}}},
        )
    WranglerLogger.info(f"--Finished: {request.node.name}")


def test_load_dict(request, tmp_path):
    WranglerLogger.info(f"--Starting: {request.node.name}")
    yml_file = tmp_path / "a.yml"
    yml_file.write_text("SHAPES:\n  MAX_POINT_DELTA_DEG: 0.2\n")
    empty_file = tmp_path / "empty.yaml"
    empty_file.write_text("")
    toml_file = tmp_path / "b.toml"
    toml_file.write_text('[IO]\nFEED_URL = "https://example.com/gtfs.zip"\n')

    assert load_dict(yml_file) == {"SHAPES": {"MAX_POINT_DELTA_DEG": 0.2}}
    assert load_dict(empty_file) == {}
    assert load_merge_dict([yml_file, toml_file, empty_file]) == {
        "SHAPES": {"MAX_POINT_DELTA_DEG": 0.2},
        "IO": {"FEED_URL": "https://example.com/gtfs.zip"},
    }

    with pytest.raises(FileNotFoundError):
        load_dict(tmp_path / "missing.yml")
    txt_file = tmp_path / "c.txt"
    txt_file.write_text("")
    with pytest.raises(NotImplementedError):
        load_dict(txt_file)
    WranglerLogger.info(f"--Finished: {request.node.name}")
