"""General utility functions used throughout package."""

from typing import Optional

from ..errors import DictionaryMergeError
from ..logger import WranglerLogger


def merge_dicts(base: dict, update: dict, path: Optional[list[str]] = None) -> dict:
    """Merge nested dict update into base, in place.

    Nested dicts are merged key by key. Any other key present in both is a conflict: config
    files may split a section between them but never set the same value twice.

    Args:
        base: dict to merge into. Modified in place and returned.
        update: dict to merge from.
        path: keys leading to base, used to name the conflicting key in errors.

    Raises:
        DictionaryMergeError: if a non-dict key is in both base and update.
    """
    path = path or []
    for key, value in update.items():
        key_path = [*path, str(key)]
        if key not in base:
            base[key] = value
        elif isinstance(base[key], dict) and isinstance(value, dict):
            merge_dicts(base[key], value, key_path)
        else:
            msg = f"Key set in more than one config file: {'.'.join(key_path)}"
            WranglerLogger.error(msg)
            raise DictionaryMergeError(msg)
    return base
