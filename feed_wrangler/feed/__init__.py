"""Feed table store and the fixes applied to it."""

from .feed import Feed

__all__ = ["Feed"]
