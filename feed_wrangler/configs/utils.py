"""Configuration utilities."""

from pathlib import Path
from typing import Optional, Union

from ..logger import WranglerLogger
from ..utils.io_dict import load_merge_dict

SUPPORTED_CONFIG_EXTENSIONS = [".yml", ".yaml", ".json", ".toml"]


class ConfigItem:
    """Base class to add partial dict-like interface to configuration.

    Allow use of .items() ["X"] and .get("X") .to_dict() from configuration.

    Not to be constructed directly. To be used a mixin for dataclasses
    representing config schema.
    Do not use "get" "to_dict", or "items" for key names.
    """

    def __getitem__(self, key):
        """Return the value for key."""
        return getattr(self, key)

    def items(self):
        """A set-like object providing a view on D's items."""
        return self.__dict__.items()

    def to_dict(self):
        """Convert the configuration to a dictionary."""
        result = {}
        for key, value in self.__dict__.items():
            if isinstance(value, ConfigItem):
                result[key] = value.to_dict()
            elif isinstance(value, dict):
                result[key] = {
                    k: v.to_dict() if isinstance(v, ConfigItem) else v for k, v in value.items()
                }
            elif isinstance(value, list):
                result[key] = [v.to_dict() if isinstance(v, ConfigItem) else v for v in value]
            else:
                result[key] = value
        return result

    def get(self, key, default=None):
        """Return the value for key if key is in the dictionary, else default."""
        return self.__dict__.get(key, default)


def find_configs_in_dir(dir: Path) -> list[Path]:
    """Find configuration files in the directory that match `*config<ext>`."""
    config_files: list[Path] = []
    for ext in SUPPORTED_CONFIG_EXTENSIONS:
        config_files.extend(sorted(Path(dir).glob(f"*config{ext}")))
    return config_files


def _config_data_from_files(path: Optional[Union[Path, list[Path]]] = None) -> Union[None, dict]:
    """Load and combine configuration data from file(s).

    Args:
        path: a config file, a directory with `*config.<ext>` files, or a list of either.
            Defaults to the current working directory.
    """
    if path is None:
        path = [Path.cwd()]
    elif not isinstance(path, list):
        path = [path]
    path = [Path(p) for p in path]

    if all(p.is_dir() for p in path):
        config_files = [f for p in path for f in find_configs_in_dir(p)]
    elif all(p.is_file() for p in path):
        config_files = path
    else:
        msg = "All paths must be existing directories or files, not mixed."
        WranglerLogger.error(msg + f"\n   Found: {path}")
        raise ValueError(msg)

    if len(config_files) == 0:
        WranglerLogger.info(
            f"No configuration files found in {path}. Using default configuration."
        )
        return None

    WranglerLogger.debug(f"Loading configuration from {config_files}")
    return load_merge_dict(config_files)
