"""Tests for /utils/data.

Run just these tests using `pytest tests/test_utils/test_data.py`
"""

import numpy as np
import pandas as pd
import pytest
from pandas import testing as tm

from feed_wrangler.logger import WranglerLogger
from feed_wrangler.utils.data import (
    InvalidJoinFieldError,
    MissingPropertiesError,
    df_hash,
    fk_in_pk,
    group_positions,
    positions_for_keys,
    to_str_table,
    update_df_by_col_value,
)


def test_to_str_table(request):
    WranglerLogger.info(f"--Starting: {request.node.name}")
    df = pd.DataFrame(
        {"stop_id": ["A", "B"], "stop_lat": [40.5, np.nan], "stop_code": ["01", None]},
        index=[3, 4],
    )
    str_df = to_str_table(df)

    assert str_df.index.tolist() == [3, 4]
    assert str_df.stop_lat.tolist() == ["40.5", ""]
    assert str_df.stop_code.tolist() == ["01", ""]
    assert df.stop_lat.isna().iloc[1]
    WranglerLogger.info(f"--Finished: {request.node.name}")


def test_update_df_by_col_value(request):
    WranglerLogger.info(f"--Starting: {request.node.name}")
    destination_df = pd.DataFrame(
        {
            "route_id": ["A", "B", "C"],
            "route_color": ["0000FF", "FF0000", "00FF00"],
            "route_text_color": ["FFFFFF", "FFFFFF", "000000"],
        }
    )
    source_df = pd.DataFrame({"route_id": ["C", "A"], "route_color": ["111111", "222222"]})
    expected_df = pd.DataFrame(
        {
            "route_id": ["A", "B", "C"],
            "route_color": ["222222", "FF0000", "111111"],
            "route_text_color": ["FFFFFF", "FFFFFF", "000000"],
        }
    )
    result_df = update_df_by_col_value(destination_df, source_df, "route_id")
    tm.assert_frame_equal(result_df, expected_df)
    assert destination_df.route_color.iloc[0] == "0000FF"
    WranglerLogger.info(f"--Finished: {request.node.name}")


def test_update_df_by_col_value_errors(request):
    WranglerLogger.info(f"--Starting: {request.node.name}")
    destination_df = pd.DataFrame({"route_id": ["A", "B"], "route_color": ["0000FF", "FF0000"]})

    with pytest.raises(InvalidJoinFieldError):
        update_df_by_col_value(
            destination_df, pd.DataFrame({"route_id": ["Z"], "route_color": ["111111"]}), "route_id"
        )
    with pytest.raises(InvalidJoinFieldError):
        update_df_by_col_value(
            destination_df,
            pd.DataFrame({"route_id": ["A", "A"], "route_color": ["111111", "222222"]}),
            "route_id",
        )
    with pytest.raises(MissingPropertiesError):
        update_df_by_col_value(
            destination_df,
            pd.DataFrame({"route_id": ["A"], "route_color": ["111111"]}),
            "route_id",
            properties=["route_text_color"],
        )
    WranglerLogger.info(f"--Finished: {request.node.name}")


def test_fk_in_pk(request):
    WranglerLogger.info(f"--Starting: {request.node.name}")
    pk = pd.Series(["S1", "S2"])
    assert fk_in_pk(pk, ["S1", "", "S2"]) == (True, [])
    assert fk_in_pk(pk, pd.Series(["S1", "S9"], name="shape_id")) == (False, ["S9"])
    WranglerLogger.info(f"--Finished: {request.node.name}")


def test_group_positions(request):
    WranglerLogger.info(f"--Starting: {request.node.name}")
    s = pd.Series(["T1", "T2", "", "T1"], index=[10, 11, 12, 13])
    index = group_positions(s)

    assert index == {"T1": [0, 3], "T2": [1]}
    assert positions_for_keys(index, ["T1", "T9"]) == {0, 3}
    assert positions_for_keys(index, []) == set()
    WranglerLogger.info(f"--Finished: {request.node.name}")


def test_df_hash(request):
    WranglerLogger.info(f"--Starting: {request.node.name}")
    df = pd.DataFrame({"a": ["1", "2"], "b": ["x", "y"]})

    assert df_hash(df) == df_hash(df.copy())
    assert df_hash(df) == df_hash(df.set_index(pd.Index([7, 8])))
    assert df_hash(df) != df_hash(df.rename(columns={"b": "c"}))
    assert df_hash(df) != df_hash(df.iloc[::-1])
    WranglerLogger.info(f"--Finished: {request.node.name}")
