"""Outcome types for book syncs."""

from collections import Counter
from dataclasses import dataclass, field
from enum import Enum


class SyncStatus(str, Enum):
    """What happened to one book."""

    CREATED = "created"
    UPDATED = "updated"
    SKIPPED = "skipped"
    FAILED = "failed"


@dataclass(frozen=True)
class SyncOutcome:
    """Result of syncing one notebook.

    Attributes:
        entry: Export directory name of the notebook (also the note's name)
        notebook_id: Notebook id from the manifest
        status: What happened
        path: Store-relative path of the note, when one was resolved
        reason: Error description for failed syncs
    """

    entry: str
    notebook_id: str
    status: SyncStatus
    path: str | None = None
    reason: str | None = None

    @property
    def failed(self) -> bool:
        return self.status == SyncStatus.FAILED


@dataclass
class SyncSummary:
    """All outcomes of a batch plus per-status counts."""

    outcomes: list[SyncOutcome] = field(default_factory=list)

    @property
    def counts(self) -> dict[SyncStatus, int]:
        tally = Counter(outcome.status for outcome in self.outcomes)
        return {status: tally.get(status, 0) for status in SyncStatus}

    @property
    def has_failures(self) -> bool:
        return any(outcome.failed for outcome in self.outcomes)
