# ABOUTME: Interactive line-oriented editor for a single cataloged book.
# ABOUTME: Dispatches commands from a table, saves through the catalog, and offers merge on duplicates.

from collections.abc import Callable

import click
from rich.console import Console
from rich.markup import escape

from bindery.db.catalog import LibraryCatalog
from bindery.db.mapping import AUTHOR_SEPARATOR, Book, deserialize_tags, split_authors
from bindery.errors import BinderyError, DuplicateBookError

HELP_TEXT = (
    "Commands: authors <a & b>, title <title>, series <series>, "
    "tags <a/b>, show, save [-m], quit"
)


class EditSession:
    """Edit one book interactively.

    Field commands change the in-memory book only; ``save`` persists it.
    When saving finds a duplicate, the session reports the existing id and
    waits for ``save -m`` to merge this book into it.
    """

    def __init__(
        self,
        catalog: LibraryCatalog,
        book: Book,
        *,
        console: Console | None = None,
    ) -> None:
        self._catalog = catalog
        self._console = console or Console()
        self.book = book
        self.finished = False
        self._commands: dict[str, Callable[[str], None]] = {
            "a": self._authors,
            "authors": self._authors,
            "title": self._title,
            "series": self._series,
            "tags": self._tags,
            "show": self._show,
            "save": self._save,
            "help": self._help,
            "quit": self._quit,
        }

    def run(self) -> None:
        """Show the book, then read and run commands until quit or Ctrl-C."""
        self._show("")
        while not self.finished:
            try:
                line = click.prompt(">", prompt_suffix=" ", default="", show_default=False)
            except click.Abort:
                self._console.print()
                return
            self.handle(line)

    def handle(self, line: str) -> None:
        """Run a single command line."""
        name, _, args = line.strip().partition(" ")
        if not name:
            return
        command = self._commands.get(name)
        if command is None:
            self._console.print("Unknown command.")
            return
        command(args.strip())

    def _usage(self, text: str) -> None:
        self._console.print(f"[yellow]Usage: {text}[/yellow]")

    def _authors(self, args: str) -> None:
        authors = split_authors(args)
        if not authors:
            self._usage(f"authors <author>{AUTHOR_SEPARATOR}<author>...")
            return
        self.book.authors = authors

    def _title(self, args: str) -> None:
        if not args:
            self._usage("title <title>")
            return
        self.book.title = args

    def _series(self, args: str) -> None:
        if not args:
            self._usage("series <series>")
            return
        self.book.series = args

    def _tags(self, args: str) -> None:
        if not args:
            self._usage("tags <tag>/<tag>...")
            return
        self.book.tags = deserialize_tags(args)

    def _show(self, args: str) -> None:
        self._console.print(f"Title:   {escape(self.book.title)}")
        self._console.print(f"Authors: {escape(self.book.author)}")
        self._console.print(f"Series:  {escape(self.book.series or '')}")
        self._console.print(f"Tags:    {escape(', '.join(self.book.tags))}")

    def _help(self, args: str) -> None:
        self._console.print(HELP_TEXT)

    def _quit(self, args: str) -> None:
        self.finished = True

    def _save(self, args: str) -> None:
        try:
            self._catalog.update_book(self.book, check_duplicates=True)
        except DuplicateBookError as exc:
            if args != "-m":
                self._console.print(
                    f"A duplicate book already exists, id: {exc.existing_id}. "
                    "To merge, type save -m."
                )
                return
            self._merge_into(exc.existing_id)
            return
        except (BinderyError, ValueError) as exc:
            self._console.print(f"[red]Error while updating book: {escape(str(exc))}[/red]")
            return
        self._console.print("Saved.")

    def _merge_into(self, existing_id: int) -> None:
        assert self.book.id is not None
        try:
            survivor = self._catalog.merge_books([existing_id, self.book.id])
        except (BinderyError, ValueError) as exc:
            self._console.print(f"[red]Error merging books: {escape(str(exc))}[/red]")
            return
        self.book = survivor
        self._console.print(f"Merged into {survivor.id}")
