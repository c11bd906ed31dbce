# ABOUTME: Transactional catalog operations for the Bindery library database.
# ABOUTME: Import with dedup and file placement, search, batched lookup, update, and merge.

import logging
import sqlite3
from collections.abc import Iterable, Iterator, Sequence
from contextlib import contextmanager
from pathlib import Path
from typing import Any

from bindery.core.placement import place_file
from bindery.db.mapping import (
    Book,
    book_to_index_row,
    book_to_row,
    row_to_book,
    serialize_tags,
)
from bindery.errors import BookNotFoundError, DuplicateBookError, StorageError

logger = logging.getLogger(__name__)

_INDEX_COLUMNS = ("author", "series", "title", "extension", "tags", "filename", "source")

# Keeps IN (...) lists under SQLite's host parameter limit on old builds.
_MAX_SQL_PARAMS = 500


def _chunked(items: list[int], size: int = _MAX_SQL_PARAMS) -> Iterator[list[int]]:
    for start in range(0, len(items), size):
        yield items[start : start + size]


def _match_term(token: str) -> str | None:
    """Quote one search term as an FTS5 string, keeping a known field: prefix.

    A trailing ``*`` stays a prefix marker. Terms with nothing the tokenizer
    would index (bare punctuation) are dropped.
    """
    field_name, sep, value = token.partition(":")
    if not (sep and field_name.lower() in _INDEX_COLUMNS):
        field_name, value = "", token
    prefix = value.endswith("*")
    value = value.rstrip("*")
    if not any(ch.isalnum() for ch in value):
        return None
    term = '"' + value.replace('"', '""') + '"' + ("*" if prefix else "")
    return f"{field_name.lower()}:{term}" if field_name else term


def to_match_query(query: str) -> str:
    """Turn a user query into an FTS5 MATCH expression.

    Whitespace-separated terms are ANDed. Each term is quoted, so
    punctuation in titles (``Dr. No``, ``Catch-22``) is plain text rather
    than query syntax. Returns an empty string when no term is searchable.
    """
    terms = (_match_term(token) for token in query.split())
    return " ".join(term for term in terms if term)


class LibraryCatalog:
    """A library: the SQLite catalog plus the content root its files live under.

    Every mutating operation runs in a single transaction. The connection is
    expected to come from ``open_library`` (no implicit transactions).
    """

    def __init__(self, conn: sqlite3.Connection, books_root: Path) -> None:
        self._conn = conn
        self.books_root = books_root

    # --- Plumbing ---

    @contextmanager
    def _transaction(self, operation: str) -> Iterator[None]:
        try:
            self._conn.execute("BEGIN IMMEDIATE")
        except sqlite3.Error as exc:
            raise StorageError(operation, exc) from exc
        try:
            yield
        except BaseException:
            if self._conn.in_transaction:
                self._conn.execute("ROLLBACK")
            raise
        try:
            self._conn.execute("COMMIT")
        except sqlite3.Error as exc:
            if self._conn.in_transaction:
                self._conn.execute("ROLLBACK")
            raise StorageError(f"{operation}: committing", exc) from exc

    def _execute(self, operation: str, sql: str, params: Sequence[Any] = ()) -> sqlite3.Cursor:
        try:
            return self._conn.execute(sql, params)
        except sqlite3.Error as exc:
            raise StorageError(operation, exc) from exc

    def _find_existing_hash(self, file_hash: str, exclude_id: int | None = None) -> int | None:
        """Return the id of the book owning ``file_hash``, following merges."""
        cursor = self._execute(
            "checking for duplicate",
            "SELECT id FROM books WHERE hash = ? AND id IS NOT ?",
            (file_hash, exclude_id),
        )
        row = cursor.fetchone()
        if row is not None:
            return row[0]
        cursor = self._execute(
            "checking for duplicate",
            "SELECT new_id FROM merged_books WHERE hash = ?",
            (file_hash,),
        )
        row = cursor.fetchone()
        if row is not None and row[0] != exclude_id:
            return row[0]
        return None

    def _find_same_identity(self, book: Book) -> int | None:
        """Return the id of another book with the same author, title, and series."""
        cursor = self._execute(
            "checking for duplicate",
            "SELECT id FROM books WHERE author = ? AND title = ? AND series IS ? "
            "AND id != ? ORDER BY id LIMIT 1",
            (book.author, book.title, book.series, book.id),
        )
        row = cursor.fetchone()
        return row[0] if row else None

    def _write_index(self, book_id: int, book: Book) -> None:
        index_row = book_to_index_row(book)
        self._execute(
            "indexing book",
            f"INSERT INTO books_fts (rowid, {', '.join(_INDEX_COLUMNS)}) "
            f"VALUES (?, {', '.join('?' for _ in _INDEX_COLUMNS)})",
            [book_id, *(index_row[c] for c in _INDEX_COLUMNS)],
        )

    def _drop_index(self, book_id: int) -> None:
        self._execute(
            "removing book from index", "DELETE FROM books_fts WHERE rowid = ?", (book_id,)
        )

    # --- Import ---

    def import_book(self, book: Book, *, move: bool = False) -> Book:
        """Add a book to the catalog and place its file under the content root.

        The file at ``book.original_filename`` is copied (or moved) to
        ``book.current_filename`` relative to the content root. The row, its
        index entry and the placement commit together: if any step fails the
        transaction is rolled back and nothing becomes visible. A file that
        was placed before a failed commit stays on disk and is logged.

        Args:
            book: The book to import; its ``id`` is ignored.
            move: Move the source file instead of copying it.

        Returns:
            The book as stored, with its new ``id`` and timestamps.

        Raises:
            DuplicateBookError: If a book with the same hash is cataloged.
                The filesystem is not touched in that case.
            PlacementError: If the file could not be placed.
            StorageError: If the database fails.
        """
        row = book_to_row(book)
        columns = ", ".join(row.keys())
        placeholders = ", ".join("?" for _ in row)
        placed: Path | None = None

        try:
            with self._transaction("importing book"):
                existing = self._find_existing_hash(book.hash)
                if existing is not None:
                    raise DuplicateBookError(existing)

                cursor = self._execute(
                    "inserting book",
                    f"INSERT INTO books ({columns}) VALUES ({placeholders})",
                    list(row.values()),
                )
                book_id: int = cursor.lastrowid  # type: ignore[assignment]
                self._write_index(book_id, book)

                # Placement must stay the last fallible step before commit.
                placed = place_file(
                    book.original_filename, self.books_root, book.current_filename, move=move,
                )
        except StorageError:
            if placed is not None:
                logger.warning(
                    "%s was placed but the import of %s did not commit", placed, book.title,
                )
            raise

        logger.info("Imported book: %s: %s, id = %d", book.author, book.title, book_id)
        return self.get_by_id(book_id) or book.with_id(book_id)

    # --- Lookup ---

    def get_books_by_id(self, ids: Iterable[int]) -> list[Book]:
        """Fetch books by id with a few batched queries.

        Ids of books that were merged away resolve to the surviving book.
        Unknown ids are silently omitted. Results follow the order of
        ``ids``; an id that appears twice (directly or through a merge) is
        returned once.
        """
        requested = list(ids)
        if not requested:
            return []

        redirects: dict[int, int] = {}
        for chunk in _chunked(list(dict.fromkeys(requested))):
            placeholders = ", ".join("?" for _ in chunk)
            cursor = self._execute(
                "fetching books by id",
                f"SELECT old_id, new_id FROM merged_books WHERE old_id IN ({placeholders})",
                chunk,
            )
            redirects.update((row[0], row[1]) for row in cursor.fetchall())
        resolved = list(dict.fromkeys(redirects.get(book_id, book_id) for book_id in requested))

        by_id: dict[int, Book] = {}
        for chunk in _chunked(resolved):
            placeholders = ", ".join("?" for _ in chunk)
            cursor = self._execute(
                "fetching books by id",
                f"SELECT * FROM books WHERE id IN ({placeholders})",
                chunk,
            )
            by_id.update((row["id"], row_to_book(row)) for row in cursor.fetchall())
        return [by_id[book_id] for book_id in resolved if book_id in by_id]

    def get_by_id(self, book_id: int) -> Book | None:
        """Retrieve a single book by id, or None."""
        books = self.get_books_by_id([book_id])
        return books[0] if books else None

    def get_by_hash(self, file_hash: str) -> Book | None:
        """Retrieve the book that owns a file hash, following merges."""
        book_id = self._find_existing_hash(file_hash)
        return self.get_by_id(book_id) if book_id is not None else None

    def list_all(self) -> list[Book]:
        """Return all books in the catalog, ordered by author then title."""
        cursor = self._execute("listing books", "SELECT * FROM books ORDER BY author, title")
        return [row_to_book(row) for row in cursor.fetchall()]

    def merged_filenames(self) -> list[Path]:
        """Files of books that were merged into another book, relative to the content root."""
        cursor = self._execute(
            "listing merged books", "SELECT filename FROM merged_books ORDER BY old_id"
        )
        return [Path(row[0]) for row in cursor.fetchall()]

    # --- Search ---

    def search(self, query: str) -> list[Book]:
        """Full-text search over author, series, title, extension, tags, filename, source.

        Bare terms match any field, ``field:term`` restricts a term to one
        field, a trailing ``*`` matches a prefix, and space-separated terms
        must all match. Other punctuation is treated as text. Results are
        ordered by FTS5 rank, best first.

        Raises:
            StorageError: If the database fails.
        """
        match = to_match_query(query)
        if not match:
            return []
        cursor = self._execute(
            "search",
            "SELECT rowid FROM books_fts WHERE books_fts MATCH ? ORDER BY rank",
            (match,),
        )
        ids = [row[0] for row in cursor.fetchall()]
        return self.get_books_by_id(ids)

    # --- Update ---

    def update_book(self, book: Book, *, check_duplicates: bool = True) -> None:
        """Persist edited fields (authors, title, series, tags) of a cataloged book.

        The book row and its index entry are rewritten in one transaction.
        Another book with the same hash always counts as a duplicate; with
        ``check_duplicates`` another book with the same author, title, and
        series does too, so an editor can offer a merge.

        Raises:
            BookNotFoundError: If ``book.id`` is not cataloged.
            DuplicateBookError: If the edit collides with another book.
            ValueError: If the book has no id or its tags cannot be stored.
        """
        if book.id is None:
            raise ValueError("Cannot update a book that has not been imported")
        tags = serialize_tags(book.tags)

        with self._transaction("updating book"):
            cursor = self._execute(
                "updating book", "SELECT * FROM books WHERE id = ?", (book.id,)
            )
            current_row = cursor.fetchone()
            if current_row is None:
                raise BookNotFoundError(book.id)

            existing = self._find_existing_hash(book.hash, exclude_id=book.id)
            if existing is None and check_duplicates:
                existing = self._find_same_identity(book)
            if existing is not None:
                raise DuplicateBookError(existing)

            self._execute(
                "updating book",
                "UPDATE books SET author = ?, title = ?, series = ?, tags = ?, "
                "updated_on = strftime('%Y-%m-%dT%H:%M:%S', 'now') WHERE id = ?",
                (book.author, book.title, book.series, tags, book.id),
            )
            stored = row_to_book(current_row)
            stored.authors = list(book.authors)
            stored.title = book.title
            stored.series = book.series
            stored.tags = list(book.tags)
            self._drop_index(book.id)
            self._write_index(book.id, stored)

        logger.info("Updated book %d: %s: %s", book.id, book.author, book.title)

    # --- Merge ---

    def merge_books(self, ids: Sequence[int]) -> Book:
        """Fold duplicate books into the first id in ``ids``.

        For every other book: its tags are added to the survivor, its id and
        hash are recorded in the merge ledger (so lookups by that id and
        re-imports of that file resolve to the survivor), and its row and
        index entry are removed. Files on disk are left where they are.

        Returns:
            The surviving book.

        Raises:
            ValueError: If fewer than two distinct books are given.
            BookNotFoundError: If any id is not cataloged.
        """
        unique_ids = list(dict.fromkeys(ids))
        if len(unique_ids) < 2:
            raise ValueError("Merging needs at least two distinct book ids")
        survivor_id, *others = unique_ids

        with self._transaction("merging books"):
            placeholders = ", ".join("?" for _ in unique_ids)
            cursor = self._execute(
                "merging books",
                f"SELECT * FROM books WHERE id IN ({placeholders})",
                unique_ids,
            )
            found = {row["id"]: row_to_book(row) for row in cursor.fetchall()}
            for book_id in unique_ids:
                if book_id not in found:
                    raise BookNotFoundError(book_id)

            survivor = found[survivor_id]
            for other_id in others:
                other = found[other_id]
                for tag in other.tags:
                    if tag not in survivor.tags:
                        survivor.tags.append(tag)
                self._execute(
                    "merging books",
                    "UPDATE merged_books SET new_id = ? WHERE new_id = ?",
                    (survivor_id, other_id),
                )
                self._execute(
                    "merging books",
                    "INSERT INTO merged_books (old_id, new_id, hash, filename) "
                    "VALUES (?, ?, ?, ?)",
                    (other_id, survivor_id, other.hash, other.current_filename.as_posix()),
                )
                self._drop_index(other_id)
                self._execute("merging books", "DELETE FROM books WHERE id = ?", (other_id,))

            self._execute(
                "merging books",
                "UPDATE books SET tags = ?, "
                "updated_on = strftime('%Y-%m-%dT%H:%M:%S', 'now') WHERE id = ?",
                (serialize_tags(survivor.tags), survivor_id),
            )
            self._drop_index(survivor_id)
            self._write_index(survivor_id, survivor)

        logger.info("Merged books %s into %d", ", ".join(map(str, others)), survivor_id)
        merged = self.get_by_id(survivor_id)
        assert merged is not None
        return merged
