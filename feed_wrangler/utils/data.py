"""Utility functions for pandas data manipulation."""

from __future__ import annotations

import hashlib
from collections.abc import Iterable
from typing import Optional, Union

import pandas as pd

from ..logger import WranglerLogger


class MissingPropertiesError(Exception):
    """Raised when properties are missing from the dataframe."""


class InvalidJoinFieldError(Exception):
    """Raised when the join field is not unique."""


def _df_missing_cols(df, cols):
    return [col for col in cols if col not in df.columns]


def to_str_table(df: pd.DataFrame) -> pd.DataFrame:
    """Return a copy of df where every value is a string and missing values are blank strings.

    Column order, row order and the index are left untouched.
    """
    str_df = df.copy()
    for col in str_df.columns:
        s = str_df[col]
        if pd.api.types.is_string_dtype(s) and not s.isna().any():
            continue
        str_df[col] = s.astype(object).where(s.notna(), "").astype(str)
    return str_df


def update_df_by_col_value(
    destination_df: pd.DataFrame,
    source_df: pd.DataFrame,
    join_col: str,
    properties: Optional[list[str]] = None,
    fail_if_missing: bool = True,
) -> pd.DataFrame:
    """Updates destination_df with ALL values in source_df for specified props with same join_col.

    Source_df can contain a subset of IDs of destination_df.
    If fail_if_missing is true, destination_df must have all
    the IDS in source DF - ensuring all source_df values are contained in resulting df.

    Row order and column order of destination_df are preserved.

    ```
    >> destination_df
    route_id  route_color  route_text_color
    A         0000FF       FFFFFF
    B         FF0000       FFFFFF

    >> source_df
    route_id  route_color
    B         00FF00

    >> updated_df
    route_id  route_color  route_text_color
    A         0000FF       FFFFFF
    B         00FF00       FFFFFF
    ```

    Args:
        destination_df (pd.DataFrame): Dataframe to modify.
        source_df (pd.DataFrame): Dataframe with updated columns
        join_col (str): column to join on
        properties (list[str]): List of properties to use. If None, will default to all
            in source_df.
        fail_if_missing (bool): If True, will raise an error if there are missing IDs in
            destination_df that exist in source_df.
    """
    if properties is None:
        properties = [
            c for c in source_df.columns if c in destination_df.columns and c != join_col
        ]
    else:
        _dest_miss = _df_missing_cols(destination_df, [*properties, join_col])
        if _dest_miss:
            msg = f"Properties missing from destination_df: {_dest_miss}"
            raise MissingPropertiesError(msg)
        _source_miss = _df_missing_cols(source_df, [*properties, join_col])
        if _source_miss:
            msg = f"Properties missing from source_df: {_source_miss}"
            raise MissingPropertiesError(msg)

    if fail_if_missing:
        missing_ids = set(source_df[join_col]) - set(destination_df[join_col])
        if missing_ids:
            msg = f"IDs missing from destination_df: \n{missing_ids}"
            raise InvalidJoinFieldError(msg)

    if not source_df[join_col].is_unique:
        msg = f"Can't join from source_df when join_col: {join_col} is not unique."
        raise InvalidJoinFieldError(msg)

    WranglerLogger.debug(f"Updating properties for {len(source_df)} records: {properties}.")

    updated_df = destination_df.copy()
    source_by_id = source_df.set_index(join_col)
    for prop in properties:
        new_vals = updated_df[join_col].map(source_by_id[prop])
        update_idx = new_vals.notna()
        updated_df.loc[update_idx, prop] = new_vals[update_idx]
    return updated_df


def fk_in_pk(
    pk: Union[pd.Series, list], fk: Union[pd.Series, list], ignore_blank: bool = True
) -> tuple[bool, list]:
    """Check if all foreign keys are in the primary keys, optionally ignoring blank values."""
    if isinstance(fk, list):
        fk = pd.Series(fk)

    if ignore_blank:
        fk = fk[fk.notna() & (fk != "")]

    missing_flag = ~fk.isin(pk)

    if missing_flag.any():
        WranglerLogger.warning(
            f"Following keys referenced in {fk.name} but missing in\
            primary key table: \n{fk[missing_flag]} "
        )
        return False, fk[missing_flag].tolist()

    return True, []


def group_positions(s: pd.Series) -> dict[str, list[int]]:
    """Map each value in s to the positional indices of the rows holding it.

    Blank values are not indexed.
    """
    positions = s.reset_index(drop=True)
    positions = positions[positions != ""]
    return {k: v.tolist() for k, v in positions.groupby(positions, sort=False).groups.items()}


def positions_for_keys(index: dict[str, list[int]], keys: Iterable[str]) -> set[int]:
    """Union of the row positions for each key found in index. Unknown keys are ignored."""
    rows: set[int] = set()
    for k in keys:
        rows.update(index.get(k, []))
    return rows


def df_hash(df: pd.DataFrame) -> str:
    """Hash of a dataframe's column names and values."""
    _value = str(df.columns.tolist()).encode()
    _value += pd.util.hash_pandas_object(df, index=False).values.tobytes()
    return hashlib.sha1(_value).hexdigest()
