"""Tests for the bin/fix_feed.py command line script.

Run just these tests using `pytest tests/test_fix_feed_script.py`
"""

import os
import subprocess
import sys

from feed_wrangler import WranglerLogger, load_feed
from feed_wrangler.utils.io_table import read_str_table


def _run_fix_feed(bin_dir, base_dir, *args):
    env = {**os.environ, "PYTHONPATH": str(base_dir)}
    return subprocess.run(
        [sys.executable, str(bin_dir / "fix_feed.py"), *[str(a) for a in args]],
        capture_output=True,
        text=True,
        check=False,
        env=env,
    )


def test_fix_feed_script(request, bin_dir, base_dir, small_feed_dir, tmp_path):
    WranglerLogger.info(f"--Starting: {request.node.name}")
    out_dir = tmp_path / "fixed"
    audit_file = tmp_path / "flagged_trips.csv"
    process = _run_fix_feed(
        bin_dir,
        base_dir,
        small_feed_dir,
        out_dir,
        "--config",
        base_dir / "example_fix_config.yml",
        "--audit_out",
        audit_file,
    )
    if process.returncode != 0:
        WranglerLogger.error(f"fix_feed.py failed:\n{process.stderr}")
    assert process.returncode == 0

    fixed = load_feed(out_dir)
    stops = fixed.stops.set_index("stop_id")
    assert (stops.loc["EWR", "stop_lat"], stops.loc["EWR", "stop_lon"]) == ("40.7128", "-74.1837")
    assert "S2" not in set(fixed.shapes.shape_id)
    assert (out_dir / "fix_feed.info.log").exists()
    assert read_str_table(audit_file).trip_id.tolist() == ["T3", "T7"]
    WranglerLogger.info(f"--Finished: {request.node.name}")


def test_fix_feed_script_missing_feed(request, bin_dir, base_dir, tmp_path):
    WranglerLogger.info(f"--Starting: {request.node.name}")
    process = _run_fix_feed(bin_dir, base_dir, tmp_path / "not_here", tmp_path / "fixed")
    assert process.returncode == 1
    WranglerLogger.info(f"--Finished: {request.node.name}")
