# ABOUTME: The `bindery info` command for displaying one cataloged book.
# ABOUTME: Shows every stored field for a book by ID, following merges.

from pathlib import Path

import click
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from bindery.cli.options import db_option, library_paths, open_catalog, root_option
from bindery.db.mapping import Book


def book_details(book: Book, books_root: Path) -> Table:
    """Two-column field/value table for a single book."""
    table = Table(show_header=False, box=None, pad_edge=False)
    table.add_column("Field", style="bold", width=14)
    table.add_column("Value")

    table.add_row("ID", str(book.id))
    table.add_row("Title", escape(book.title))
    table.add_row("Authors", escape(book.author or "unknown"))
    if book.series:
        table.add_row("Series", escape(book.series))
    if book.tags:
        table.add_row("Tags", escape(", ".join(book.tags)))
    table.add_row("Format", escape(book.extension))
    table.add_row("File", escape(str(books_root / book.current_filename)))
    table.add_row("Imported from", escape(str(book.original_filename)))
    table.add_row("Size", f"{book.file_size:,} bytes")
    table.add_row("File mtime", book.file_mtime.isoformat())
    table.add_row("Template", escape(book.template_override or book.naming_template))
    if book.source:
        table.add_row("Source", escape(book.source))
    table.add_row("Hash", book.hash)
    table.add_row("Added", book.created_on or "")
    table.add_row("Modified", book.updated_on or "")
    return table


@click.command("info")
@click.argument("book_id", type=int)
@db_option
@root_option
def info(book_id: int, db_path: Path | None, books_root: Path | None) -> None:
    """Show everything stored about a book."""
    console = Console()
    paths = library_paths(db_path, books_root)
    with open_catalog(paths) as catalog:
        book = catalog.get_by_id(book_id)

    if book is None:
        console.print(f"[red]Book {book_id} not found.[/red]")
        raise SystemExit(1)

    if book.id != book_id:
        console.print(f"[dim]Book {book_id} was merged into {book.id}.[/dim]")
    console.print(book_details(book, paths.books_root))
