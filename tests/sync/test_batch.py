"""Tests for syncing every notebook in an export."""

import asyncio
import json
from datetime import datetime

import pytest

from common.env import SyncSettings
from common.errors import ConfigurationError
from extract.reader import LocalStorageReader
from sync.batch import sync_all
from sync.models import SyncStatus
from sync.reporters import SyncReporter
from sync.store import VaultDocumentStore

from conftest import write_json

FIXED_CLOCK = lambda: datetime(2024, 6, 1, 10, 0, 0)  # noqa: E731


def write_root_manifest(export_dir, notebooks):
    write_json(export_dir / "manifest.json", {"notebooks": notebooks})


def book(id_, entry):
    return {"type": 0, "id": id_, "entry": entry}


@pytest.fixture
def store(vault_dir):
    return VaultDocumentStore(vault_dir)


class TestSyncAll:
    """Tests for sync_all."""

    @pytest.mark.asyncio
    async def test_outcomes_in_manifest_order(self, settings, store, export_dir, add_book):
        add_book("Dune")
        add_book("Emma")
        write_root_manifest(
            export_dir,
            [
                book("1", "Dune"),
                {"type": 1, "id": "f", "entry": "f", "notebooks": [book("2", "Emma")]},
                book("3", "Missing"),
            ],
        )

        summary = await sync_all(settings, LocalStorageReader(), store, clock=FIXED_CLOCK)

        assert [(o.entry, o.status) for o in summary.outcomes] == [
            ("Dune", SyncStatus.CREATED),
            ("Emma", SyncStatus.CREATED),
            ("Missing", SyncStatus.FAILED),
        ]
        assert summary.counts == {
            SyncStatus.CREATED: 2,
            SyncStatus.UPDATED: 0,
            SyncStatus.SKIPPED: 0,
            SyncStatus.FAILED: 1,
        }
        assert summary.has_failures

    @pytest.mark.asyncio
    async def test_second_batch_skips_unchanged(self, settings, store, export_dir, add_book):
        add_book("Dune", mtime=datetime(2024, 1, 1))
        write_root_manifest(export_dir, [book("1", "Dune")])

        await sync_all(settings, LocalStorageReader(), store, clock=FIXED_CLOCK)
        summary = await sync_all(settings, LocalStorageReader(), store, clock=FIXED_CLOCK)

        assert [o.status for o in summary.outcomes] == [SyncStatus.SKIPPED]

    @pytest.mark.asyncio
    async def test_no_notebooks(self, settings, store, export_dir):
        write_json(export_dir / "manifest.json", {})

        summary = await sync_all(settings, LocalStorageReader(), store)

        assert summary.outcomes == []
        assert not summary.has_failures

    @pytest.mark.asyncio
    async def test_unset_source_aborts(self, vault_dir, store):
        with pytest.raises(ConfigurationError):
            await sync_all(SyncSettings(source_root=None, vault_root=vault_dir), LocalStorageReader(), store)

    @pytest.mark.asyncio
    async def test_missing_root_manifest_aborts(self, settings, store, export_dir, vault_dir):
        (export_dir / "manifest.json").unlink()

        with pytest.raises(ConfigurationError):
            await sync_all(settings, LocalStorageReader(), store)
        assert not (vault_dir / "books").exists()

    @pytest.mark.asyncio
    async def test_unexpected_error_is_isolated(self, settings, vault_dir, export_dir, add_book):
        add_book("Dune")
        add_book("Emma")
        write_root_manifest(export_dir, [book("1", "Dune"), book("2", "Emma")])

        class BrokenStore(VaultDocumentStore):
            async def create(self, path, body):
                if path.endswith("Dune.md"):
                    raise RuntimeError("disk on fire")
                return await super().create(path, body)

        summary = await sync_all(settings, LocalStorageReader(), BrokenStore(vault_dir))

        dune, emma = summary.outcomes
        assert dune.status == SyncStatus.FAILED
        assert dune.reason == "RuntimeError: disk on fire"
        assert emma.status == SyncStatus.CREATED

    @pytest.mark.asyncio
    async def test_books_run_concurrently(self, settings, store, export_dir, add_book):
        """Test that one book can wait on another without deadlocking the batch."""
        add_book("Dune")
        add_book("Emma")
        write_root_manifest(export_dir, [book("1", "Dune"), book("2", "Emma")])
        emma_started = asyncio.Event()

        class WaitingReader(LocalStorageReader):
            async def read_text(self, path):
                if path.parent.name == "Dune":
                    await emma_started.wait()
                if path.parent.name == "Emma":
                    emma_started.set()
                return await super().read_text(path)

        summary = await asyncio.wait_for(
            sync_all(settings, WaitingReader(), store, clock=FIXED_CLOCK), timeout=5
        )

        assert [o.status for o in summary.outcomes] == [SyncStatus.CREATED, SyncStatus.CREATED]


class TestSyncReporter:
    """Tests for SyncReporter."""

    @pytest.mark.asyncio
    async def test_reports(self, settings, store, export_dir, add_book):
        add_book("Dune")
        write_root_manifest(export_dir, [book("1", "Dune"), book("2", "Missing")])
        summary = await sync_all(settings, LocalStorageReader(), store, clock=FIXED_CLOCK)
        reporter = SyncReporter()

        data = json.loads(reporter.report_json(summary))

        assert data["counts"] == {"created": 1, "updated": 0, "skipped": 0, "failed": 1}
        assert data["outcomes"][0] == {
            "entry": "Dune",
            "notebook_id": "1",
            "status": "created",
            "path": "books/Dune.md",
            "reason": None,
        }
        assert reporter.report_console(summary) == 1
