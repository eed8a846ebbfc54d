"""Reading configuration dictionaries from yaml, toml and json files."""

import json
from pathlib import Path
from typing import Union

import toml
import yaml

from .utils import merge_dicts


def _read_yaml(f) -> dict:
    return yaml.safe_load(f) or {}


DICT_READERS = {
    ".yml": _read_yaml,
    ".yaml": _read_yaml,
    ".json": json.load,
    ".toml": toml.load,
}
"""File suffix to the function reading an open file into a dict."""


def load_dict(path: Path) -> dict:
    """Load a dictionary from a yaml, toml or json file.

    An empty yaml file loads as an empty dict.

    Raises:
        FileNotFoundError: if path isn't a file.
        NotImplementedError: if the suffix isn't one of DICT_READERS.
    """
    path = Path(path)
    if not path.is_file():
        msg = f"Specified dict file {path} not found."
        raise FileNotFoundError(msg)

    reader = DICT_READERS.get(path.suffix.lower())
    if reader is None:
        msg = f"Filetype {path.suffix} not implemented."
        raise NotImplementedError(msg)
    with path.open(encoding="utf-8") as f:
        return reader(f)


def load_merge_dict(path: Union[Path, list[Path]]) -> dict:
    """Load each file in path and merge them into one dict, failing on any repeated key."""
    paths = path if isinstance(path, list) else [path]
    merged: dict = {}
    for p in paths:
        merge_dicts(merged, load_dict(p))
    return merged
