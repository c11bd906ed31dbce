# ABOUTME: SQLite connection management for the Bindery library catalog.
# ABOUTME: Creates the schema on fresh files and opens connections in explicit-transaction mode.

import logging
import sqlite3
from pathlib import Path

from bindery.config import DEFAULT_DB_PATH
from bindery.db.schema import SCHEMA_V1
from bindery.errors import StorageError

logger = logging.getLogger(__name__)


def _schema_exists(conn: sqlite3.Connection) -> bool:
    """Check if the schema has already been applied."""
    cursor = conn.execute(
        "SELECT name FROM sqlite_master WHERE type='table' AND name='books'"
    )
    return cursor.fetchone() is not None


def _connect(db_path: Path) -> sqlite3.Connection:
    db_path.parent.mkdir(parents=True, exist_ok=True)
    # isolation_level=None: the catalog issues BEGIN/COMMIT itself.
    conn = sqlite3.connect(str(db_path), isolation_level=None)
    conn.row_factory = sqlite3.Row
    conn.execute("PRAGMA journal_mode=WAL")
    conn.execute("PRAGMA foreign_keys=ON")
    return conn


def create_library(path: Path | None = None) -> None:
    """Initialize a new library database.

    Only valid against a fresh file. Running it against an existing library
    is a caller error and raises StorageError rather than touching the data.

    Args:
        path: Path to the database file. Defaults to ~/.bindery/library.db.

    Raises:
        StorageError: If the file already holds a library or the DDL fails.
    """
    db_path = path or DEFAULT_DB_PATH
    logger.info("Creating library in %s", db_path)
    try:
        conn = _connect(db_path)
    except sqlite3.Error as exc:
        raise StorageError("create library", exc) from exc

    try:
        if _schema_exists(conn):
            raise StorageError("create library", f"{db_path} already contains a library")
        conn.executescript(SCHEMA_V1)
    except sqlite3.Error as exc:
        raise StorageError("create library", exc) from exc
    finally:
        conn.close()

    logger.info("Library created in %s", db_path)


def open_library(path: Path | None = None) -> sqlite3.Connection:
    """Open the Bindery library database, creating it on first use.

    Creates the database file and parent directories if they don't exist and
    applies the schema when the file is fresh. The connection runs without
    implicit transactions, uses WAL journal mode and the sqlite3.Row factory.

    Args:
        path: Path to the database file. Defaults to ~/.bindery/library.db.

    Returns:
        A configured sqlite3.Connection.
    """
    db_path = path or DEFAULT_DB_PATH
    try:
        conn = _connect(db_path)
        if not _schema_exists(conn):
            conn.executescript(SCHEMA_V1)
    except sqlite3.Error as exc:
        raise StorageError("open library", exc) from exc
    return conn
