"""Helper functions for reading, writing and fetching table files to reduce boilerplate."""

import shutil
import tempfile
import zipfile
from pathlib import Path
from typing import Optional, Union

import pandas as pd
import requests

from ..errors import FeedDownloadError, FeedReadError
from ..logger import WranglerLogger
from ..params import DEFAULT_DOWNLOAD_TIMEOUT_SECS, DOWNLOAD_CHUNK_SIZE


def write_table(
    df: pd.DataFrame,
    filename: Path,
    overwrite: bool = False,
    **kwargs,
) -> None:
    """Write a dataframe to a csv-formatted file.

    Args:
        df (pd.DataFrame): dataframe to write.
        filename (Path): filename to write to. Suffix should be `.txt` or `.csv`.
        overwrite (bool): whether to overwrite the file if it exists. Defaults to False.
        kwargs: additional arguments to pass to the writer.
    """
    filename = Path(filename)
    if filename.exists() and not overwrite:
        msg = f"File {filename} already exists and overwrite is False."
        raise FileExistsError(msg)

    if not filename.parent.exists():
        filename.parent.mkdir(parents=True)

    WranglerLogger.debug(f"Writing to {filename}.")

    if filename.suffix in [".csv", ".txt"]:
        df.to_csv(filename, index=False, **kwargs)
    else:
        msg = f"Filetype {filename.suffix} not implemented."
        raise NotImplementedError(msg)


def read_str_table(filename: Path) -> pd.DataFrame:
    """Read a csv-formatted table with every value as a string and blank cells as "".

    Raises:
        FeedReadError: if the file can't be parsed.
    """
    filename = Path(filename)
    WranglerLogger.debug(f"...reading {filename}.")
    try:
        return pd.read_csv(
            filename,
            dtype=str,
            keep_default_na=False,
            na_values=[],
            encoding="utf-8-sig",
        )
    except pd.errors.EmptyDataError:
        WranglerLogger.warning(f"{filename} is empty.")
        return pd.DataFrame()
    except (pd.errors.ParserError, UnicodeDecodeError) as e:
        msg = f"Error reading table from file: {filename}.\n{e}"
        WranglerLogger.error(msg)
        raise FeedReadError(msg) from e


def unzip_file(path: Path, out_dir: Optional[Path] = None) -> Path:
    """Unzips a file to out_dir, or a new temporary directory, and returns the directory path.

    Temporary directories are left for the caller to remove.

    Raises:
        FeedReadError: if path isn't a valid zip file.
    """
    out_dir = Path(tempfile.mkdtemp()) if out_dir is None else Path(out_dir)
    out_dir.mkdir(parents=True, exist_ok=True)
    WranglerLogger.debug(f"Unzipping {path} to {out_dir}.")
    try:
        with zipfile.ZipFile(path, "r") as zip_ref:
            zip_ref.extractall(out_dir)
    except zipfile.BadZipFile as e:
        msg = f"{path} is not a valid zip file."
        WranglerLogger.error(msg)
        raise FeedReadError(msg) from e
    return out_dir


def remove_dir(path: Path) -> None:
    """Remove a directory tree, such as one created by unzip_file."""
    shutil.rmtree(path, ignore_errors=True)


def download_file(
    url: str,
    download_to_path: Union[str, Path],
    timeout: int = DEFAULT_DOWNLOAD_TIMEOUT_SECS,
) -> Path:
    """Download a file from url, streaming it to download_to_path.

    Args:
        url: http(s) url of the file.
        download_to_path: file path to save the download to. Parent directories are created.
        timeout: seconds to wait for the server before giving up.

    Raises:
        FeedDownloadError: if the request fails or the response is an http error.
    """
    download_path = Path(download_to_path)
    download_path.parent.mkdir(parents=True, exist_ok=True)
    WranglerLogger.info(f"Downloading {url}")
    try:
        with requests.get(url, stream=True, timeout=timeout) as response:
            response.raise_for_status()
            with download_path.open("wb") as f:
                for chunk in response.iter_content(chunk_size=DOWNLOAD_CHUNK_SIZE):
                    if chunk:
                        f.write(chunk)
    except requests.exceptions.HTTPError as e:
        msg = f"HTTP error downloading {url}: {e}"
        WranglerLogger.error(msg)
        raise FeedDownloadError(msg) from e
    except requests.exceptions.RequestException as e:
        msg = f"Could not download {url}: {e}"
        WranglerLogger.error(msg)
        raise FeedDownloadError(msg) from e
    WranglerLogger.info(f"Downloaded {url} to {download_path}")
    return download_path
