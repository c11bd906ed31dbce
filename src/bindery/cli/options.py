# ABOUTME: Shared Click options and helpers for Bindery CLI commands.
# ABOUTME: Provides --db and --root (with env var defaults) and a catalog context manager.

from collections.abc import Iterator
from contextlib import contextmanager
from pathlib import Path

import click

from bindery.config import DEFAULT_BOOKS_ROOT, DEFAULT_DB_PATH, LibraryPaths
from bindery.db.catalog import LibraryCatalog
from bindery.db.connection import open_library

db_option = click.option(
    "--db",
    "db_path",
    type=click.Path(path_type=Path),
    default=None,
    envvar="BINDERY_DB",
    help=f"Path to library database (default: {DEFAULT_DB_PATH}, env: BINDERY_DB)",
)

root_option = click.option(
    "--root",
    "books_root",
    type=click.Path(file_okay=False, path_type=Path),
    default=None,
    envvar="BINDERY_ROOT",
    help=f"Directory holding the library's books (default: {DEFAULT_BOOKS_ROOT}, env: BINDERY_ROOT)",
)


def library_paths(db_path: Path | None, books_root: Path | None) -> LibraryPaths:
    """Fill in defaults for options the user did not give."""
    return LibraryPaths(
        db_path=db_path or DEFAULT_DB_PATH,
        books_root=books_root or DEFAULT_BOOKS_ROOT,
    )


@contextmanager
def open_catalog(paths: LibraryPaths) -> Iterator[LibraryCatalog]:
    """Open the library for one command and close the connection afterwards."""
    conn = open_library(paths.db_path)
    try:
        yield LibraryCatalog(conn, paths.books_root)
    finally:
        conn.close()
