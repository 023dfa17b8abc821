"""Sync outcome reporters."""

import json

from rich.table import Table

from common.logger import console, error, skipped, success

from .models import SyncOutcome, SyncStatus, SyncSummary

STATUS_STYLES = {
    SyncStatus.CREATED: "green",
    SyncStatus.UPDATED: "cyan",
    SyncStatus.SKIPPED: "dim",
    SyncStatus.FAILED: "red",
}


def report_outcome(outcome: SyncOutcome) -> None:
    """Print one line for one notebook."""
    if outcome.status == SyncStatus.CREATED:
        success(f"{outcome.entry}: created {outcome.path}")
    elif outcome.status == SyncStatus.UPDATED:
        success(f"{outcome.entry}: updated {outcome.path}")
    elif outcome.status == SyncStatus.SKIPPED:
        skipped(f"{outcome.entry}: unchanged, not updated")
    else:
        error(f"{outcome.entry}: sync failed: {outcome.reason}")


class SyncReporter:
    """Format and display sync results."""

    def __init__(self, show_skipped: bool = True):
        """Initialize the reporter.

        Args:
            show_skipped: Whether to list notebooks that were left unchanged
        """
        self.show_skipped = show_skipped

    def report_console(self, summary: SyncSummary) -> int:
        """Print every outcome and a count table.

        Returns:
            Exit code (0 for success, 1 if any notebook failed)
        """
        for outcome in summary.outcomes:
            if outcome.status == SyncStatus.SKIPPED and not self.show_skipped:
                continue
            report_outcome(outcome)

        table = Table(title="BookxNote sync")
        table.add_column("Status")
        table.add_column("Notebooks", justify="right")
        for status, count in summary.counts.items():
            style = STATUS_STYLES[status]
            table.add_row(f"[{style}]{status.value}[/{style}]", str(count))
        console.print(table)

        return 1 if summary.has_failures else 0

    def report_json(self, summary: SyncSummary) -> str:
        """Format results as JSON."""
        data = {
            "counts": {status.value: count for status, count in summary.counts.items()},
            "outcomes": [
                {
                    "entry": o.entry,
                    "notebook_id": o.notebook_id,
                    "status": o.status.value,
                    "path": o.path,
                    "reason": o.reason,
                }
                for o in summary.outcomes
            ],
        }
        return json.dumps(data, indent=2, ensure_ascii=False)
