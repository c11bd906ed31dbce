# ABOUTME: The `bindery init` command for creating a new library.
# ABOUTME: Creates the database schema and the content root; refuses to re-initialize.

from pathlib import Path

import click
from rich.console import Console
from rich.markup import escape

from bindery.cli.options import db_option, library_paths, root_option
from bindery.db.connection import create_library
from bindery.errors import StorageError


@click.command("init")
@db_option
@root_option
def init(db_path: Path | None, books_root: Path | None) -> None:
    """Create a new, empty library."""
    console = Console()
    paths = library_paths(db_path, books_root)

    try:
        create_library(paths.db_path)
    except StorageError as exc:
        console.print(f"[red]{escape(str(exc))}[/red]")
        raise SystemExit(1) from exc

    paths.books_root.mkdir(parents=True, exist_ok=True)
    console.print(f"Created library [bold]{escape(str(paths.db_path))}[/bold]")
    console.print(f"Books will be stored in [bold]{escape(str(paths.books_root))}[/bold]")
