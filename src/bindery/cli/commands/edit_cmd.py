# ABOUTME: The `bindery edit` command for interactively editing a book.
# ABOUTME: Loads the book by ID and hands it to an EditSession.

from pathlib import Path

import click
from rich.console import Console

from bindery.cli.editor import HELP_TEXT, EditSession
from bindery.cli.options import db_option, library_paths, open_catalog, root_option


@click.command("edit")
@click.argument("book_id", type=int)
@db_option
@root_option
def edit(book_id: int, db_path: Path | None, books_root: Path | None) -> None:
    """Interactively edit a book's authors, title, series, and tags."""
    console = Console()
    with open_catalog(library_paths(db_path, books_root)) as catalog:
        books = catalog.get_books_by_id([book_id])
        if not books:
            console.print(f"[red]Book {book_id} not found.[/red]")
            raise SystemExit(1)

        console.print(f"[dim]{HELP_TEXT}[/dim]")
        EditSession(catalog, books[0], console=console).run()
