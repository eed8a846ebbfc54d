"""Configuration module for feed_wrangler."""

from pathlib import Path
from typing import Optional, Union

from ..logger import WranglerLogger
from .fixes import (
    AuditConfig,
    DefaultConfig,
    FiltersConfig,
    FixConfig,
    IoConfig,
    RouteCosmetics,
    RoutesConfig,
    ShapesConfig,
    StopOverride,
    StopsConfig,
    TripRemovalRule,
)
from .utils import _config_data_from_files

ConfigInputTypes = Union[dict, Path, list[Path], FixConfig]


def load_fix_config(data: Optional[ConfigInputTypes] = None) -> FixConfig:
    """Load the FixConfig from a file, list of files, dictionary or existing instance."""
    if isinstance(data, FixConfig):
        return data
    if data is None:
        return FixConfig()
    if isinstance(data, dict):
        return FixConfig(**data)
    if isinstance(data, (Path, str)) or (
        isinstance(data, list) and all(isinstance(d, (Path, str)) for d in data)
    ):
        file_data = _config_data_from_files(data)
        return load_fix_config(file_data)
    msg = "No valid configuration data found."
    WranglerLogger.error(msg + f"\n   Found: {data}.")
    raise ValueError(msg)


__all__ = [
    "AuditConfig",
    "DefaultConfig",
    "FiltersConfig",
    "FixConfig",
    "IoConfig",
    "RouteCosmetics",
    "RoutesConfig",
    "ShapesConfig",
    "StopOverride",
    "StopsConfig",
    "TripRemovalRule",
    "load_fix_config",
]
