"""Exceptions raised while syncing a BookxNote export.

ConfigurationError aborts a whole batch before any book is touched. Every
other error is scoped to one book and is turned into a failed outcome by the
orchestrator.
"""


class SyncError(Exception):
    """Base exception for sync operations."""

    pass


class ConfigurationError(SyncError):
    """Source root unset or missing, or root manifest unusable."""

    pass


class StorageIOError(SyncError):
    """Reading or writing a file failed."""

    pass


class NotFoundError(StorageIOError):
    """A path that should exist does not."""

    pass


class ManifestMissingError(SyncError):
    """A book's manifest.json is absent."""

    pass


class ManifestParseError(SyncError):
    """A manifest.json is not valid JSON or has the wrong shape."""

    pass


class MarkupParseError(SyncError):
    """A markups.json is not valid JSON or has the wrong shape."""

    pass


class MissingUuidError(SyncError):
    """A book manifest carries no res[0].uuid."""

    pass


class MissingSyncRecordError(SyncError):
    """A note has no book_x_note_nb property to re-sync from."""

    pass
