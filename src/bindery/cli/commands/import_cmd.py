# ABOUTME: The `bindery import` command for cataloging book files.
# ABOUTME: Walks a directory (or takes one file), then copies or moves each book into the library.

from pathlib import Path

import click
from rich.console import Console
from rich.markup import escape

from bindery.cli.options import db_option, library_paths, open_catalog, root_option
from bindery.core.importer import find_books, import_books
from bindery.core.naming import NAMING_TEMPLATES


@click.command("import")
@click.argument("path", type=click.Path(exists=True, path_type=Path))
@db_option
@root_option
@click.option(
    "--move/--copy",
    default=False,
    help="Move files into the library instead of copying them (default: copy).",
)
@click.option(
    "--template",
    "template_id",
    type=click.Choice(sorted(NAMING_TEMPLATES)),
    default=None,
    help="Naming template for the library path (default: 'series' when known, else 'default').",
)
@click.option("-t", "--tag", "tags", multiple=True, help="Tag every imported book (repeatable).")
@click.option("--source", default=None, help="Provenance note stored with each book.")
def import_command(
    path: Path,
    db_path: Path | None,
    books_root: Path | None,
    move: bool,
    template_id: str | None,
    tags: tuple[str, ...],
    source: str | None,
) -> None:
    """Import a book file, or every book file under a directory, into the library."""
    console = Console()
    files = [path] if path.is_file() else find_books(path)

    if not files:
        console.print(f"[yellow]No book files found in {escape(str(path))}[/yellow]")
        return

    console.print(f"Found [bold]{len(files)}[/bold] book file(s)\n")

    paths = library_paths(db_path, books_root)
    with open_catalog(paths) as catalog:
        result = import_books(
            files, catalog, move=move, template_id=template_id, tags=list(tags), source=source,
        )

    for book in result.imported:
        console.print(
            f"  [green]+[/green] {book.id}: {escape(book.author)} - {escape(book.title)}"
        )
    for file, existing_id in result.duplicates:
        console.print(
            f"  [yellow]=[/yellow] {escape(file.name)}: duplicate of book {existing_id}"
        )

    # Summary
    parts = []
    if result.added:
        parts.append(f"[green]{result.added} added[/green]")
    if result.skipped:
        parts.append(f"[yellow]{result.skipped} skipped[/yellow]")
    if result.errors:
        parts.append(f"[red]{result.errors} error(s)[/red]")

    console.print(", ".join(parts))

    if result.error_details:
        console.print(f"\n[yellow]{result.errors} file(s) could not be imported:[/yellow]")
        for file, msg in result.error_details:
            console.print(f"  [dim]{escape(file.name)}:[/dim] {escape(msg)}")
