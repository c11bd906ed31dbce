# ABOUTME: The `bindery verify` command for checking library integrity.
# ABOUTME: Reports missing files, hash mismatches, and orphaned files under the content root.

from pathlib import Path

import click
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from bindery.cli.options import db_option, library_paths, open_catalog, root_option
from bindery.core.verifier import verify_library


@click.command("verify")
@db_option
@root_option
@click.option(
    "--check-hash",
    is_flag=True,
    default=False,
    help="Re-hash library files and compare against stored hashes.",
)
def verify(db_path: Path | None, books_root: Path | None, check_hash: bool) -> None:
    """Verify library integrity: missing, changed, or uncataloged files."""
    console = Console()
    with open_catalog(library_paths(db_path, books_root)) as catalog:
        result = verify_library(catalog, check_hash=check_hash)

    if result.total_issues == 0:
        console.print(f"[green]All {result.ok} book(s) verified.[/green]")
        return

    table = Table()
    table.add_column("ID", style="dim", width=5)
    table.add_column("File", style="bold")
    table.add_column("Issue", style="red")

    for book in result.missing:
        table.add_row(str(book.id), escape(str(book.current_filename)), "Missing file")
    for book in result.hash_mismatch:
        table.add_row(str(book.id), escape(str(book.current_filename)), "Hash mismatch")
    for path in result.orphaned:
        table.add_row("", escape(str(path)), "Not in catalog")

    console.print(table)
    console.print(
        f"\n[red]{result.total_issues} issue(s) found, {result.ok} book(s) verified.[/red]"
    )
    raise SystemExit(1)
