"""All feed wrangler errors."""


class DictionaryMergeError(Exception):
    """Raised when there is an issue merging configuration dictionaries."""


class FeedDownloadError(Exception):
    """Raised when a transit feed can't be downloaded."""


class FeedReadError(Exception):
    """Raised when there is an error reading a transit feed."""


class FeedWriteError(Exception):
    """Raised when there is an error writing a transit feed."""


class StopNotFoundError(Exception):
    """Raised when a stop override references a stop_id that is not in the stops table."""
