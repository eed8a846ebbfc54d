from pathlib import Path

import pandas as pd
import pytest

pd.set_option("display.max_rows", 500)
pd.set_option("display.max_columns", 500)
pd.set_option("display.width", 50000)


@pytest.fixture(scope="session", autouse=True)
def _test_logging(test_out_dir):
    from feed_wrangler import setup_logging

    setup_logging(
        info_log_filename=test_out_dir / "tests.info.log",
        debug_log_filename=test_out_dir / "tests.debug.log",
    )


@pytest.fixture(scope="session")
def base_dir():
    return Path(__file__).resolve().parent.parent


@pytest.fixture(scope="session")
def bin_dir(base_dir):
    return base_dir / "bin"


@pytest.fixture(scope="session")
def test_dir():
    return Path(__file__).resolve().parent


@pytest.fixture(scope="session")
def test_out_dir(test_dir):
    _test_out_dir = Path(test_dir) / "out"

    if not _test_out_dir.exists():
        _test_out_dir.mkdir()

    return _test_out_dir


@pytest.fixture(scope="session", autouse=True)
def _clear_out_dir(test_out_dir):
    import shutil

    for item in test_out_dir.iterdir():
        if item.is_dir():
            shutil.rmtree(item)
        elif not item.name.endswith(".log"):
            item.unlink()


def _df(columns: list[str], rows: list[tuple]) -> pd.DataFrame:
    return pd.DataFrame(rows, columns=columns, dtype=str)


@pytest.fixture
def small_feed_dfs() -> dict[str, pd.DataFrame]:
    """A small two-agency feed with trips starting in four timezones.

    Agency 51 operates rail routes R1 (east coast) and R2 (long distance west), agency 99 a
    connecting bus R3. Feed times are on the agency clock, America/New_York.

    - S1 is a valid shape, S2 has a 0.15 degree jump and S3 has a single point.
    - T3 starts in Chicago at 01:30 feed time (00:30 local) and T7 in Denver at 02:30 feed
      time (00:30 local). T4 starts in Chicago at 02:30 feed time (01:30 local) and lists its
      stop_times out of order with stop_sequence 10 before 9. T5 starts in New York at 00:30.
    """
    agencies = _df(
        ["agency_id", "agency_name", "agency_url", "agency_timezone"],
        [
            ("51", "Amtrak", "https://www.amtrak.com", "America/New_York"),
            ("99", "Connecting Bus Co", "https://bus.example.com", "America/New_York"),
        ],
    )
    routes = _df(
        [
            "route_id",
            "agency_id",
            "route_short_name",
            "route_long_name",
            "route_type",
            "route_color",
            "route_text_color",
        ],
        [
            ("R1", "51", "", "Northeast Regional", "2", "000000", "FFFFFF"),
            ("R2", "51", "", "California Zephyr", "2", "", ""),
            ("R3", "99", "B", "Connecting Bus", "3", "", ""),
        ],
    )
    shapes = _df(
        ["shape_id", "shape_pt_lat", "shape_pt_lon", "shape_pt_sequence"],
        [
            ("S1", "0", "0", "1"),
            ("S1", "0", "0.05", "2"),
            ("S1", "0", "0.09", "3"),
            ("S2", "0", "0", "1"),
            ("S2", "0", "0.05", "2"),
            ("S2", "0", "0.2", "3"),
            ("S3", "10", "10", "1"),
        ],
    )
    stops = _df(
        [
            "stop_id",
            "stop_name",
            "stop_lat",
            "stop_lon",
            "location_type",
            "parent_station",
            "stop_timezone",
        ],
        [
            ("NYP", "New York Penn", "40.750580", "-73.993584", "1", "", ""),
            ("NYP1", "New York Penn Track 1", "40.7506", "-73.9936", "0", "NYP", ""),
            ("EWR", "Newark Airport", "40.70", "-74.19", "", "", ""),
            ("CHI", "Chicago Union", "41.8787", "-87.6403", "", "", "America/Chicago"),
            ("DEN", "Denver Union", "39.7530", "-105.0002", "", "", "America/Denver"),
            ("EMY", "Emeryville", "37.8405", "-122.2915", "", "", "America/Los_Angeles"),
        ],
    )
    trips = _df(
        ["route_id", "service_id", "trip_id", "trip_short_name", "trip_headsign", "shape_id"],
        [
            ("R1", "daily", "T1", "171", "Washington", "S1"),
            ("R1", "daily", "T2", "173", "Washington", "S2"),
            ("R2", "daily", "T3", "5", "Emeryville", "S1"),
            ("R2", "daily", "T4", "7", "Emeryville", ""),
            ("R1", "daily", "T5", "175", "Washington", "S1"),
            ("R3", "daily", "T6", "8001", "Newark Airport", "S3"),
            ("R2", "daily", "T7", "701", "Emeryville", ""),
        ],
    )
    stop_times = _df(
        ["trip_id", "arrival_time", "departure_time", "stop_id", "stop_sequence"],
        [
            ("T1", "08:00:00", "08:00:00", "NYP1", "1"),
            ("T1", "08:20:00", "08:21:00", "EWR", "2"),
            ("T2", "09:00:00", "09:00:00", "NYP1", "1"),
            ("T2", "09:20:00", "09:20:00", "EWR", "2"),
            ("T3", "01:30:00", "01:30:00", "CHI", "1"),
            ("T3", "19:00:00", "19:10:00", "DEN", "2"),
            ("T3", "40:00:00", "40:00:00", "EMY", "3"),
            ("T4", "20:00:00", "20:05:00", "DEN", "10"),
            ("T4", "02:30:00", "02:30:00", "CHI", "9"),
            ("T5", "", "00:30:00", "NYP1", "1"),
            ("T5", "00:50:00", "", "EWR", "2"),
            ("T6", "10:00:00", "10:00:00", "NYP", "1"),
            ("T6", "10:30:00", "10:30:00", "EWR", "2"),
            ("T7", "02:30:00", "02:30:00", "DEN", "1"),
            ("T7", "20:00:00", "20:00:00", "EMY", "2"),
        ],
    )
    frequencies = _df(
        ["trip_id", "start_time", "end_time", "headway_secs"],
        [("T6", "06:00:00", "10:00:00", "600")],
    )
    calendar = _df(
        [
            "service_id",
            "monday",
            "tuesday",
            "wednesday",
            "thursday",
            "friday",
            "saturday",
            "sunday",
            "start_date",
            "end_date",
        ],
        [("daily", "1", "1", "1", "1", "1", "1", "1", "20240101", "20241231")],
    )
    return {
        "agencies": agencies,
        "routes": routes,
        "shapes": shapes,
        "stops": stops,
        "trips": trips,
        "stop_times": stop_times,
        "frequencies": frequencies,
        "calendar": calendar,
    }


@pytest.fixture
def small_feed(small_feed_dfs):
    from feed_wrangler.io import load_feed_from_dfs

    return load_feed_from_dfs(small_feed_dfs)


@pytest.fixture
def small_feed_dir(small_feed, tmp_path):
    from feed_wrangler import write_feed

    feed_dir = tmp_path / "small_feed"
    write_feed(small_feed, feed_dir)
    return feed_dir
