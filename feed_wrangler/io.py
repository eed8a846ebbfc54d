"""Functions for reading and writing GTFS feeds.

A feed can be read from a directory of `.txt` files, a `.zip` of them, or an http(s) url of a
zip. Every table is read as strings with blank cells kept as "" so that rows not touched by a
fix are written back exactly as they were read.

Usage:
    ```python
    from feed_wrangler import load_feed, write_feed

    feed = load_feed("https://content.amtrak.com/content/gtfs/GTFS.zip")
    write_feed(feed, "fixed_gtfs")
    ```
"""

import tempfile
from pathlib import Path
from typing import Union

import pandas as pd

from .errors import FeedReadError, FeedWriteError
from .feed.feed import Feed
from .logger import WranglerLogger
from .models._base.db import RequiredTableError
from .params import DEFAULT_DOWNLOAD_TIMEOUT_SECS, GTFS_FILE_NAMES
from .utils.io_table import download_file, read_str_table, remove_dir, unzip_file, write_table

FEED_FILE_SUFFIX = ".txt"


def table_file_name(table: str) -> str:
    """GTFS file name, without suffix, of a Feed table name."""
    return GTFS_FILE_NAMES.get(table, table)


def _table_name(file_stem: str) -> str:
    """Feed table name of a GTFS file name without suffix."""
    file_to_table = {v: k for k, v in GTFS_FILE_NAMES.items()}
    return file_to_table.get(file_stem, file_stem)


def _is_url(path: Union[str, Path]) -> bool:
    return str(path).startswith(("http://", "https://"))


def load_feed_from_dfs(feed_dfs: dict[str, pd.DataFrame]) -> Feed:
    """Create a Feed from a dictionary of DataFrames keyed by table name.

    Tables the Feed doesn't model are carried along as extra tables.

    Raises:
        RequiredTableError: if a required table is missing.
    """
    _missing = [t for t in Feed.table_names if t not in feed_dfs]
    if _missing:
        msg = f"feed_dfs must contain the following tables: {Feed.table_names}"
        WranglerLogger.error(msg + f"\n  Missing: {_missing}")
        raise RequiredTableError(msg)
    _empty_optional = [
        t for t in Feed.optional_table_names if t in feed_dfs and feed_dfs[t].columns.empty
    ]
    if _empty_optional:
        WranglerLogger.warning(f"Skipping empty optional tables: {_empty_optional}")
    feed_dfs = {k: v for k, v in feed_dfs.items() if k not in _empty_optional}
    modeled = {k: v for k, v in feed_dfs.items() if k in Feed._table_models}
    extra = {k: v for k, v in feed_dfs.items() if k not in Feed._table_models}
    return Feed(extra_tables=extra, **modeled)


def _tables_dir(feed_dir: Path) -> Path:
    """feed_dir, or its only subdirectory when feed_dir holds no table files.

    Zipped feeds are often packed with the tables inside one top-level folder.
    """
    if any(feed_dir.glob(f"*{FEED_FILE_SUFFIX}")):
        return feed_dir
    subdirs = [p for p in feed_dir.iterdir() if p.is_dir() and not p.name.startswith("__")]
    if len(subdirs) == 1:
        WranglerLogger.debug(f"No tables in {feed_dir}; reading from {subdirs[0].name}/.")
        return subdirs[0]
    return feed_dir


def load_feed_from_dir(feed_dir: Path) -> Feed:
    """Create a Feed from a directory of GTFS `.txt` files.

    If the directory holds no `.txt` files but a single subdirectory, the tables are read
    from that subdirectory.

    Raises:
        RequiredTableError: if the files for a required table are missing.
        FeedReadError: if a file can't be parsed.
    """
    feed_dir = Path(feed_dir)
    if not feed_dir.is_dir():
        msg = f"Feed path not a directory: {feed_dir}"
        raise NotADirectoryError(msg)

    feed_dir = _tables_dir(feed_dir)
    WranglerLogger.info(f"Reading GTFS feed tables from {feed_dir}")
    feed_files = {_table_name(f.stem): f for f in sorted(feed_dir.glob(f"*{FEED_FILE_SUFFIX}"))}

    _missing_files = [t for t in Feed.table_names if t not in feed_files]
    if _missing_files:
        msg = f"Required GTFS Feed table(s) not in {feed_dir}: \n  {_missing_files}"
        WranglerLogger.error(msg)
        raise RequiredTableError(msg)

    feed_dfs = {table: read_str_table(file) for table, file in feed_files.items()}
    return load_feed_from_dfs(feed_dfs)


def load_feed(
    feed_path: Union[str, Path],
    timeout: int = DEFAULT_DOWNLOAD_TIMEOUT_SECS,
) -> Feed:
    """Create a Feed from a directory, zip file or url of a GTFS feed.

    Zip files and downloads are unpacked to a temporary directory which is removed once the
    tables are read.

    Args:
        feed_path: directory, `.zip` file or http(s) url of a zipped GTFS feed.
        timeout: seconds to wait for the server when downloading.

    Raises:
        FeedDownloadError: if the feed can't be downloaded.
        FeedReadError: if the feed path doesn't exist or a file can't be read.
        RequiredTableError: if a required table is missing.
    """
    if _is_url(feed_path):
        tmp_dir = Path(tempfile.mkdtemp())
        try:
            zip_path = download_file(str(feed_path), tmp_dir / "gtfs.zip", timeout=timeout)
            feed = load_feed_from_dir(unzip_file(zip_path, tmp_dir / "gtfs"))
        finally:
            remove_dir(tmp_dir)
        feed.feed_path = feed_path
        return feed

    feed_path = Path(feed_path)
    if not feed_path.exists():
        msg = f"Feed path does not exist: {feed_path}"
        WranglerLogger.error(msg)
        raise FeedReadError(msg)

    if feed_path.suffix == ".zip":
        unzipped = unzip_file(feed_path)
        try:
            feed = load_feed_from_dir(unzipped)
        finally:
            remove_dir(unzipped)
    else:
        feed = load_feed_from_dir(feed_path)
    feed.feed_path = feed_path
    return feed


def write_feed(feed: Feed, out_dir: Union[str, Path], overwrite: bool = True) -> list[Path]:
    """Write every table of the feed, modeled and extra, as GTFS `.txt` files in out_dir.

    Columns are written in the order they were read.

    Args:
        feed: Feed to write.
        out_dir: directory to write to. Created if it doesn't exist.
        overwrite: if False, raises FeedWriteError when a file already exists.

    Returns:
        Paths of the files written.
    """
    out_dir = Path(out_dir)
    out_dir.mkdir(parents=True, exist_ok=True)
    tables = {**feed.extra_tables, **feed.tables_dict}
    written = []
    for table, df in tables.items():
        outpath = out_dir / f"{table_file_name(table)}{FEED_FILE_SUFFIX}"
        try:
            write_table(df, outpath, overwrite=overwrite)
        except FileExistsError as e:
            msg = f"Can't write {table}: {e}"
            WranglerLogger.error(msg)
            raise FeedWriteError(msg) from e
        written.append(outpath)
    WranglerLogger.info(f"Wrote {len(written)} files to {out_dir}")
    return written
