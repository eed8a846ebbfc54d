"""Validation of feed tables to their pandera models."""

import copy

from pandas import DataFrame
from pandera.errors import SchemaErrors

from ..logger import WranglerLogger
from ..params import SMALL_RECS


class TableValidationError(Exception):
    """Raised when a table validation fails."""


def validate_df_to_model(df: DataFrame, model: type) -> DataFrame:
    """Validate df to a pandera DataFrameModel, keeping df.attrs.

    All failures are collected before raising. The count of failures per column and check is
    logged at ERROR and the first few failing values at DEBUG.

    Raises:
        TableValidationError: if any check fails or the table can't be coerced.
    """
    attrs = copy.deepcopy(df.attrs)
    msg = f"Validation to {model.__name__} failed."
    try:
        model_df = model.validate(df, lazy=True)
    except SchemaErrors as e:
        fails = e.failure_cases
        counts = fails.groupby(["column", "check"], dropna=False).size()
        WranglerLogger.error(f"{msg} {len(fails)} failures by column and check:\n{counts}")
        WranglerLogger.debug(f"First failure cases:\n{fails.head(SMALL_RECS)}")
        raise TableValidationError(msg) from e
    except (TypeError, ValueError) as e:
        WranglerLogger.error(f"{msg}\n{e}")
        raise TableValidationError(msg) from e
    model_df.attrs = attrs
    return model_df
