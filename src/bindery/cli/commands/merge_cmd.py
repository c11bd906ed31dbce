# ABOUTME: The `bindery merge` command for folding duplicate books into one.
# ABOUTME: The first ID survives; the others resolve to it from then on.

from pathlib import Path

import click
from rich.console import Console
from rich.markup import escape

from bindery.cli.options import db_option, library_paths, open_catalog, root_option
from bindery.errors import BinderyError


@click.command("merge")
@click.argument("book_ids", type=int, nargs=-1, required=True)
@db_option
@root_option
def merge(book_ids: tuple[int, ...], db_path: Path | None, books_root: Path | None) -> None:
    """Merge duplicate books into the first BOOK_ID given."""
    console = Console()
    with open_catalog(library_paths(db_path, books_root)) as catalog:
        try:
            survivor = catalog.merge_books(list(book_ids))
        except (BinderyError, ValueError) as exc:
            console.print(f"[red]{escape(str(exc))}[/red]")
            raise SystemExit(1) from exc

    console.print(f"Merged into {survivor.id}: [bold]{escape(survivor.title)}[/bold]")
