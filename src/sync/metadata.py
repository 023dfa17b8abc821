"""Sync record stored in a note's front matter."""

from dataclasses import dataclass
from datetime import datetime
from typing import Any

from common.constants import NOTEBOOK_KEY, SYNC_TIME_KEY, UUID_KEY

# Same shape as a zh-CN locale date string: 2024/01/05 14:03:05
SYNC_TIME_FORMAT = "%Y/%m/%d %H:%M:%S"


@dataclass(frozen=True)
class SyncRecord:
    """Which book a note was generated from, and when."""

    book_uuid: str
    notebook_id: str
    last_sync_time: datetime

    def to_metadata(self) -> dict[str, str]:
        return {
            UUID_KEY: self.book_uuid,
            NOTEBOOK_KEY: self.notebook_id,
            SYNC_TIME_KEY: format_sync_time(self.last_sync_time),
        }


def format_sync_time(value: datetime) -> str:
    """Format a local time the way it is stored in front matter."""
    return value.strftime(SYNC_TIME_FORMAT)


def parse_sync_time(value: Any) -> datetime | None:
    """
    Parse a stored sync time back into a comparable naive local datetime.

    Accepts the stored format, ISO-8601 strings and datetimes already decoded
    by YAML. Anything else counts as "never synced".
    """
    if value is None:
        return None

    if isinstance(value, datetime):
        # Compare in local time, like markups.json modification times
        return value.astimezone().replace(tzinfo=None) if value.tzinfo else value

    text = str(value).strip()
    if not text:
        return None

    try:
        return datetime.strptime(text, SYNC_TIME_FORMAT)
    except ValueError:
        pass

    try:
        parsed = datetime.fromisoformat(text)
    except ValueError:
        return None
    return parsed.astimezone().replace(tzinfo=None) if parsed.tzinfo else parsed


def merge_metadata(existing: dict[str, Any], record: SyncRecord) -> dict[str, Any]:
    """Return existing front matter with the sync record keys overwritten."""
    merged = dict(existing)
    merged.update(record.to_metadata())
    return merged
