"""Tests for /utils/models.

Run just these tests using `pytest tests/test_utils/test_models.py`
"""

import pandas as pd
import pytest

from feed_wrangler.logger import WranglerLogger
from feed_wrangler.models.gtfs.tables import ShapesTable
from feed_wrangler.utils.models import TableValidationError, validate_df_to_model


def test_validate_df_to_model_keeps_attrs(request):
    WranglerLogger.info(f"--Starting: {request.node.name}")
    df = pd.DataFrame(
        {
            "shape_id": ["S1", "S1"],
            "shape_pt_lat": ["40.75", "40.76"],
            "shape_pt_lon": ["-73.99", "-73.98"],
            "shape_pt_sequence": ["1", "2"],
        }
    )
    df.attrs["source"] = "shapes.txt"
    validated_df = validate_df_to_model(df, ShapesTable)

    assert validated_df.attrs == {"source": "shapes.txt"}
    assert validated_df.shape_pt_lat.tolist() == ["40.75", "40.76"]
    WranglerLogger.info(f"--Finished: {request.node.name}")


def test_validate_df_to_model_failure(request):
    WranglerLogger.info(f"--Starting: {request.node.name}")
    df = pd.DataFrame(
        {
            "shape_id": ["S1"] * 7,
            "shape_pt_lat": ["91"] * 7,
            "shape_pt_lon": ["-73.99"] * 7,
            "shape_pt_sequence": [str(i) for i in range(7)],
        }
    )
    with pytest.raises(TableValidationError):
        validate_df_to_model(df, ShapesTable)
    # missing required column
    no_lon_df = df.drop(columns=["shape_pt_lon"]).assign(shape_pt_lat="40.7")
    with pytest.raises(TableValidationError):
        validate_df_to_model(no_lon_df, ShapesTable)
    WranglerLogger.info(f"--Finished: {request.node.name}")
