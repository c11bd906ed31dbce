# ABOUTME: The `bindery search` command for full-text search of the catalog.
# ABOUTME: Accepts FTS5 queries, including field:term filters, and prints a results table.

from pathlib import Path

import click
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from bindery.cli.options import db_option, library_paths, open_catalog, root_option
from bindery.db.mapping import Book
from bindery.errors import StorageError


def books_table(books: list[Book]) -> Table:
    """Render books as the standard listing table."""
    table = Table()
    table.add_column("ID", style="dim", width=5)
    table.add_column("Author")
    table.add_column("Title", style="bold")
    table.add_column("Series")
    table.add_column("Ext", width=5)
    table.add_column("Tags", style="cyan")

    for book in books:
        table.add_row(
            str(book.id),
            escape(book.author) if book.author else "[dim]unknown[/dim]",
            escape(book.title),
            escape(book.series or ""),
            escape(book.extension),
            escape(", ".join(book.tags)),
        )
    return table


@click.command("search")
@click.argument("terms", nargs=-1, required=True)
@db_option
@root_option
def search(terms: tuple[str, ...], db_path: Path | None, books_root: Path | None) -> None:
    """Search the library.

    Terms match any field; field:term limits a term to one of author,
    title, series, extension, tags, filename, source. All terms must match.
    """
    console = Console()
    query = " ".join(terms)

    with open_catalog(library_paths(db_path, books_root)) as catalog:
        try:
            results = catalog.search(query)
        except StorageError as exc:
            console.print(f"[red]Search failed: {escape(str(exc))}[/red]")
            raise SystemExit(1) from exc

    if not results:
        console.print("[yellow]No results found.[/yellow]")
        return

    console.print(books_table(results))
    console.print(f"\n[dim]{len(results)} result(s)[/dim]")
