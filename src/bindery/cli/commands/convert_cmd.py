# ABOUTME: The `bindery convert` command for producing converted copies of books.
# ABOUTME: Runs ebook-convert once per book and caches the result by content hash.

from pathlib import Path

import click
from rich.console import Console
from rich.markup import escape

from bindery.cli.options import db_option, library_paths, open_catalog, root_option
from bindery.core.converter import DEFAULT_CONVERTER, Converter
from bindery.errors import ConversionError


@click.command("convert")
@click.argument("book_id", type=int)
@db_option
@root_option
@click.option(
    "-f", "--format", "target_format",
    default="epub",
    show_default=True,
    help="Extension of the format to convert to.",
)
@click.option(
    "--converter",
    "executable",
    default=DEFAULT_CONVERTER,
    show_default=True,
    envvar="BINDERY_CONVERTER",
    help="Converter executable, called as: CONVERTER SOURCE DEST.",
)
def convert(
    book_id: int,
    db_path: Path | None,
    books_root: Path | None,
    target_format: str,
    executable: str,
) -> None:
    """Convert a book and print the path of the cached copy."""
    console = Console()
    paths = library_paths(db_path, books_root)
    with open_catalog(paths) as catalog:
        book = catalog.get_by_id(book_id)

    if book is None:
        console.print(f"[red]Book {book_id} not found.[/red]")
        raise SystemExit(1)

    converter = Converter(paths.books_root, paths.cache_dir, executable=executable)
    try:
        cached = converter.convert_to_cache(book, target_format)
    except ConversionError as exc:
        console.print(f"[red]Conversion failed: {escape(str(exc))}[/red]")
        raise SystemExit(1) from exc

    console.print(str(cached), soft_wrap=True)
