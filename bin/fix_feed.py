#!/usr/bin/env python3
"""Fix a GTFS feed and write the corrected copy.

Usage: python fix_feed.py <input_path> <out_dir> [--config <config> ...] [--audit_out <csv>] [-o].

Arguments:
    input_path        Directory, .zip file or http(s) url of the GTFS feed. If omitted, the
        config's IO.FEED_URL is used.
    out_dir           Path to the output directory where the fixed feed will be saved.

Options:
    --config <config>       Fix configuration file(s) in yaml/toml/json.
    --audit_out <csv>       Write trips flagged by the midnight rollover audit to this csv.
    --log_dir <dir>         Directory for the info and debug logs. Defaults to out_dir.
    -o                      Overwrite output files if they exist. Default to not overwrite.
"""

import argparse
import sys
from pathlib import Path

from feed_wrangler import (
    WranglerLogger,
    fix_feed,
    flagged_trips_to_df,
    load_feed,
    load_fix_config,
    setup_logging,
    write_feed,
)
from feed_wrangler.utils.io_table import write_table


def fix(input_path, out_dir, config_files, audit_out, overwrite):
    """Wrapper function to load, fix and write a feed."""
    config = load_fix_config(config_files) if config_files else load_fix_config()
    input_path = input_path or config.IO.FEED_URL
    if not input_path:
        msg = "No input feed given and IO.FEED_URL isn't configured."
        raise ValueError(msg)

    feed = load_feed(input_path, timeout=config.IO.DOWNLOAD_TIMEOUT_SECS)
    result = fix_feed(feed, config)
    write_feed(result.feed, out_dir, overwrite=overwrite)
    if audit_out is not None:
        write_table(flagged_trips_to_df(result.flagged_trips), audit_out, overwrite=overwrite)
    return result


if __name__ == "__main__":
    parser = argparse.ArgumentParser(description="Fix a GTFS feed and write the corrected copy.")
    parser.add_argument(
        "input_path",
        type=str,
        nargs="?",
        default=None,
        help="Directory, zip file or url of the GTFS feed.",
    )
    parser.add_argument(
        "out_dir",
        type=Path,
        help="Path to the output directory where the fixed feed will be saved.",
    )
    parser.add_argument(
        "--config", type=Path, nargs="+", default=None, help="Fix configuration file(s)."
    )
    parser.add_argument(
        "--audit_out", type=Path, default=None, help="Csv to write flagged trips to."
    )
    parser.add_argument(
        "--log_dir", type=Path, default=None, help="Directory for info and debug logs."
    )
    parser.add_argument("-o", action="store_true", help="Overwrite output files if they exist")
    args = parser.parse_args()

    log_dir = args.log_dir or args.out_dir
    log_dir.mkdir(parents=True, exist_ok=True)
    setup_logging(
        info_log_filename=log_dir / "fix_feed.info.log",
        debug_log_filename=log_dir / "fix_feed.debug.log",
    )
    try:
        fix(args.input_path, args.out_dir, args.config, args.audit_out, args.o)
    except Exception as e:
        WranglerLogger.error(f"Fix_feed error: {e}")
        sys.exit(1)
