"""Tests for reading and writing feeds in feed_wrangler.io.

Run just these tests using `pytest tests/test_io.py`
"""

import shutil
import zipfile
from pathlib import Path

import pandas as pd
import pytest
import requests

from feed_wrangler import WranglerLogger, load_feed, write_feed
from feed_wrangler.errors import FeedDownloadError, FeedReadError, FeedWriteError
from feed_wrangler.models._base.db import RequiredTableError


def test_write_feed_files(request, small_feed, tmp_path):
    WranglerLogger.info(f"--Starting: {request.node.name}")
    written = write_feed(small_feed, tmp_path / "out")

    names = sorted(p.name for p in written)
    assert names == [
        "agency.txt",
        "calendar.txt",
        "frequencies.txt",
        "routes.txt",
        "shapes.txt",
        "stop_times.txt",
        "stops.txt",
        "trips.txt",
    ]
    WranglerLogger.info(f"--Finished: {request.node.name}")


def test_read_write_verbatim(request, small_feed_dir, tmp_path):
    WranglerLogger.info(f"--Starting: {request.node.name}")
    feed = load_feed(small_feed_dir)
    assert feed.feed_path == small_feed_dir
    assert feed.stops.set_index("stop_id").loc["NYP", "stop_lat"] == "40.750580"

    out_dir = tmp_path / "rewritten"
    write_feed(feed, out_dir)
    for f in small_feed_dir.iterdir():
        assert (out_dir / f.name).read_text() == f.read_text()
    WranglerLogger.info(f"--Finished: {request.node.name}")


def test_load_feed_from_zip(request, small_feed, small_feed_dir, tmp_path):
    WranglerLogger.info(f"--Starting: {request.node.name}")
    zip_path = shutil.make_archive(str(tmp_path / "gtfs"), "zip", small_feed_dir)
    feed = load_feed(zip_path)

    assert feed == small_feed
    pd.testing.assert_frame_equal(
        feed.extra_tables["calendar"], small_feed.extra_tables["calendar"]
    )
    WranglerLogger.info(f"--Finished: {request.node.name}")


def test_load_feed_from_zip_with_folder(request, small_feed, small_feed_dir, tmp_path):
    WranglerLogger.info(f"--Starting: {request.node.name}")
    zip_path = shutil.make_archive(
        str(tmp_path / "gtfs"), "zip", small_feed_dir.parent, small_feed_dir.name
    )
    with zipfile.ZipFile(zip_path) as zf:
        assert all(n.startswith(f"{small_feed_dir.name}/") for n in zf.namelist())

    assert load_feed(zip_path) == small_feed
    WranglerLogger.info(f"--Finished: {request.node.name}")


def test_missing_required_table(request, small_feed_dir):
    WranglerLogger.info(f"--Starting: {request.node.name}")
    (small_feed_dir / "stop_times.txt").unlink()
    with pytest.raises(RequiredTableError):
        load_feed(small_feed_dir)
    WranglerLogger.info(f"--Finished: {request.node.name}")


def test_missing_feed_path(request, tmp_path):
    WranglerLogger.info(f"--Starting: {request.node.name}")
    with pytest.raises(FeedReadError):
        load_feed(tmp_path / "not_here")
    WranglerLogger.info(f"--Finished: {request.node.name}")


def test_bad_zip(request, tmp_path):
    WranglerLogger.info(f"--Starting: {request.node.name}")
    bad_zip = tmp_path / "bad.zip"
    bad_zip.write_text("not a zip")
    with pytest.raises(FeedReadError):
        load_feed(bad_zip)
    WranglerLogger.info(f"--Finished: {request.node.name}")


def test_write_without_overwrite(request, small_feed, small_feed_dir):
    WranglerLogger.info(f"--Starting: {request.node.name}")
    with pytest.raises(FeedWriteError):
        write_feed(small_feed, small_feed_dir, overwrite=False)
    WranglerLogger.info(f"--Finished: {request.node.name}")


def test_load_feed_from_url(request, small_feed, small_feed_dir, tmp_path, monkeypatch):
    WranglerLogger.info(f"--Starting: {request.node.name}")
    zip_path = shutil.make_archive(str(tmp_path / "gtfs"), "zip", small_feed_dir)
    zip_bytes = Path(zip_path).read_bytes()

    class _Response:
        def __enter__(self):
            return self

        def __exit__(self, *args):
            return False

        def raise_for_status(self):
            pass

        def iter_content(self, chunk_size):
            for i in range(0, len(zip_bytes), chunk_size):
                yield zip_bytes[i : i + chunk_size]

    monkeypatch.setattr(requests, "get", lambda url, stream, timeout: _Response())
    feed = load_feed("https://example.com/gtfs.zip")

    assert feed == small_feed
    assert feed.feed_path == "https://example.com/gtfs.zip"
    WranglerLogger.info(f"--Finished: {request.node.name}")


def test_download_error(request, monkeypatch):
    WranglerLogger.info(f"--Starting: {request.node.name}")

    def _raise(url, stream, timeout):
        raise requests.exceptions.ConnectionError("no network")

    monkeypatch.setattr(requests, "get", _raise)
    with pytest.raises(FeedDownloadError):
        load_feed("https://example.com/gtfs.zip")
    WranglerLogger.info(f"--Finished: {request.node.name}")
