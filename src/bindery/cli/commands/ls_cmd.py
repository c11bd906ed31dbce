# ABOUTME: The `bindery ls` command for listing cataloged books.
# ABOUTME: Displays a Rich table of all books in the library database.

from pathlib import Path

import click
from rich.console import Console

from bindery.cli.commands.search_cmd import books_table
from bindery.cli.options import db_option, library_paths, open_catalog, root_option


@click.command("ls")
@db_option
@root_option
def ls(db_path: Path | None, books_root: Path | None) -> None:
    """List all books in the library."""
    console = Console()
    with open_catalog(library_paths(db_path, books_root)) as catalog:
        books = catalog.list_all()

    if not books:
        console.print("[yellow]No books in the library.[/yellow]")
        return

    console.print(books_table(books))
    console.print(f"\n[dim]{len(books)} book(s)[/dim]")
