"""Fixtures that build a BookxNote export tree on disk."""

import json
import logging
import os
from datetime import datetime

import pytest

from common.env import SyncSettings


def write_json(path, data):
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(json.dumps(data, ensure_ascii=False), encoding="utf-8")


def set_mtime(path, when: datetime):
    timestamp = when.timestamp()
    os.utime(path, (timestamp, timestamp))


@pytest.fixture
def restore_logging(monkeypatch):
    """Undo setup_logging: root and module loggers get their handlers and levels back."""
    from common import logger as logger_module

    monkeypatch.delenv("LOG_LEVEL", raising=False)
    monkeypatch.setattr(logger_module, "_root_configured", False)
    loggers = [logging.getLogger()] + [
        existing
        for existing in logging.Logger.manager.loggerDict.values()
        if isinstance(existing, logging.Logger)
    ]
    saved = [(existing, list(existing.handlers), existing.level) for existing in loggers]
    yield logging.getLogger()
    for existing, handlers, level in saved:
        for handler in existing.handlers:
            if handler not in handlers:
                handler.close()
        existing.handlers[:] = handlers
        existing.setLevel(level)


SAMPLE_MARKUPS = {
    "title": "root title is never rendered",
    "markups": [
        {
            "title": "Chapter 1",
            "originaltext": "first line\nsecond line",
            "page": 3,
            "uuid": "u1",
            "textblocks": [{"first": [12, 34]}],
        },
        {
            "title": "Chapter 2",
            "content": "just a thought",
        },
    ],
}


@pytest.fixture
def export_dir(tmp_path):
    """
    Create an export root with an empty top-level manifest.

    Returns the export root path.
    """
    root = tmp_path / "bookxnote"
    write_json(root / "manifest.json", {"notebooks": []})
    return root


@pytest.fixture
def add_book(export_dir):
    """
    Return a function adding one notebook directory to the export.

    add_book(entry, uuid="bk", markups=SAMPLE_MARKUPS, mtime=None) writes
    <entry>/manifest.json and <entry>/markups.json; pass uuid=None to leave
    the book manifest without a uuid.
    """

    def _add_book(entry, uuid="bk", markups=SAMPLE_MARKUPS, mtime=None):
        book_dir = export_dir / entry
        manifest = {"res": [{"uuid": uuid}]} if uuid else {"res": []}
        write_json(book_dir / "manifest.json", manifest)
        write_json(book_dir / "markups.json", markups)
        if mtime is not None:
            set_mtime(book_dir / "markups.json", mtime)
        return book_dir

    return _add_book


@pytest.fixture
def vault_dir(tmp_path):
    vault = tmp_path / "vault"
    vault.mkdir()
    return vault


@pytest.fixture
def settings(export_dir, vault_dir):
    return SyncSettings(source_root=export_dir, vault_root=vault_dir, notes_dir="books")
