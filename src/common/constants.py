"""Shared constants for the bookxnote-sync application.

For environment-based configuration (source and vault paths, etc.), use the env module:
    from common.env import env
    source = env.bookxnote_path()
"""

# Export layout: every directory in the export carries one of these
MANIFEST_FILENAME = "manifest.json"
MARKUPS_FILENAME = "markups.json"

# Manifest node type that marks a book; every other value is a folder
BOOK_NODE_TYPE = 0

# Destination documents
NOTE_EXTENSION = ".md"

# Front matter keys written to every synced note
UUID_KEY = "book_x_note_uuid"
NOTEBOOK_KEY = "book_x_note_nb"
SYNC_TIME_KEY = "book_x_note_sync_time"

# Deep links back into the reading application
DEEP_LINK_SCHEME = "bookxnotepro"
DEEP_LINK_HOST = "opennote"
