"""Environment configuration interface for bookxnote-sync.

This module provides a clean interface for accessing environment variables,
centralizing all environment variable access in one place.
"""

import os
from dataclasses import dataclass
from pathlib import Path

from dotenv import load_dotenv

from .errors import ConfigurationError

# Load environment variables from .env file if it exists
load_dotenv()

TRUTHY = {"1", "true", "yes", "on"}


class Environment:
    """Interface for accessing environment configuration."""

    @staticmethod
    def bookxnote_path() -> Path | None:
        """Get the root directory of the BookxNote export.

        Returns:
            Path to the export root, or None if BOOKXNOTE_PATH is unset
        """
        value = os.getenv("BOOKXNOTE_PATH", "")
        return Path(value) if value else None

    @staticmethod
    def vault_path() -> Path:
        """Get the root directory of the destination vault.

        Returns:
            Path to the vault, defaults to the current directory
        """
        return Path(os.getenv("VAULT_PATH", "."))

    @staticmethod
    def vault_notes_dir() -> str:
        """Get the directory inside the vault where notes are written.

        Returns:
            Vault-relative directory, defaults to '' (the vault root)
        """
        return os.getenv("VAULT_NOTES_DIR", "")

    @staticmethod
    def ignore_unchanged() -> bool:
        """Get the ignore-unchanged policy flag.

        Returns:
            True unless IGNORE_UNCHANGED is set to a falsy value
        """
        return os.getenv("IGNORE_UNCHANGED", "true").strip().lower() in TRUTHY

    @staticmethod
    def log_level() -> str:
        """Get the logging level.

        Returns:
            Log level name, defaults to 'INFO'
        """
        return os.getenv("LOG_LEVEL", "INFO").upper()


# Singleton instance for convenient access
env = Environment()


@dataclass
class SyncSettings:
    """Settings for one sync run.

    Attributes:
        source_root: Root directory of the BookxNote export
        vault_root: Root directory of the destination vault
        notes_dir: Vault-relative directory for synced notes ('' = vault root)
        ignore_unchanged: Skip books whose markups did not change since last sync
    """

    source_root: Path | None
    vault_root: Path = Path(".")
    notes_dir: str = ""
    ignore_unchanged: bool = True

    def __post_init__(self):
        if isinstance(self.source_root, str):
            self.source_root = Path(self.source_root) if self.source_root else None
        if isinstance(self.vault_root, str):
            self.vault_root = Path(self.vault_root)
        # Vault paths always use forward slashes
        self.notes_dir = self.notes_dir.replace("\\", "/").strip("/")

    @classmethod
    def from_env(cls) -> "SyncSettings":
        """Build settings from the environment."""
        return cls(
            source_root=env.bookxnote_path(),
            vault_root=env.vault_path(),
            notes_dir=env.vault_notes_dir(),
            ignore_unchanged=env.ignore_unchanged(),
        )


def validate_settings(settings: SyncSettings) -> None:
    """Check the settings a sync cannot start without.

    Raises:
        ConfigurationError: If the source root is unset or does not exist
    """
    if settings.source_root is None:
        raise ConfigurationError("BookxNote export path is not set (BOOKXNOTE_PATH or --source)")
    if not settings.source_root.exists():
        raise ConfigurationError(f"BookxNote export path does not exist: {settings.source_root}")
