"""Decide whether a book needs to be rendered again."""

from datetime import datetime


def should_skip(
    prior_sync_time: datetime | None,
    source_modified_time: datetime,
    ignore_unchanged: bool,
) -> bool:
    """
    Return True when re-rendering a book can be skipped.

    The markups file's modification time is the only signal of upstream
    change, so a sync recorded strictly after it means nothing new to render.

    Args:
        prior_sync_time: Time of the last recorded sync, or None if never synced
        source_modified_time: Last-modified time of the book's markups.json
        ignore_unchanged: The ignore-unchanged policy flag

    Returns:
        True only if the policy is on, a prior sync exists and it is newer
        than the source
    """
    if not ignore_unchanged or prior_sync_time is None:
        return False
    return prior_sync_time > source_modified_time
