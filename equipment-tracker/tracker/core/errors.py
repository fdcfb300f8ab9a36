class TrackerError(Exception):
    """Base class for every error raised by the inventory core."""


class NotFoundError(TrackerError):
    pass


class ValidationError(TrackerError):
    pass


class StorageError(TrackerError):
    """The storage engine failed (I/O, locking or constraint violation)."""


class BackupError(TrackerError):
    """The storage file could not be copied to the requested destination."""
