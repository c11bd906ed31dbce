# ABOUTME: Default locations for the Bindery library database, content root, and cache.
# ABOUTME: LibraryPaths bundles the paths a command needs so they are passed around explicitly.

from dataclasses import dataclass
from pathlib import Path

DEFAULT_LIBRARY_DIR = Path.home() / ".bindery"
DEFAULT_DB_PATH = DEFAULT_LIBRARY_DIR / "library.db"
DEFAULT_BOOKS_ROOT = DEFAULT_LIBRARY_DIR / "books"

CACHE_DIR_NAME = "cache"


@dataclass(frozen=True)
class LibraryPaths:
    """Where a library lives: its database file and its content root."""

    db_path: Path = DEFAULT_DB_PATH
    books_root: Path = DEFAULT_BOOKS_ROOT

    @property
    def cache_dir(self) -> Path:
        """Converted artifacts live next to the database file."""
        return self.db_path.parent / CACHE_DIR_NAME
