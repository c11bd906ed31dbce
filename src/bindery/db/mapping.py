# ABOUTME: The Book record and its conversion to and from SQLite rows.
# ABOUTME: Handles the '/'-delimited tag string and the ' & '-joined author column.

from dataclasses import dataclass, field, replace
from datetime import datetime
from pathlib import Path
from typing import Any

TAG_DELIMITER = "/"
AUTHOR_SEPARATOR = " & "


@dataclass
class Book:
    """A cataloged (or about to be cataloged) book file.

    ``id``, ``created_on`` and ``updated_on`` are assigned by the database on
    import. ``current_filename`` is relative to the library's content root.
    """

    title: str
    authors: list[str]
    extension: str
    hash: str
    original_filename: Path
    current_filename: Path
    file_size: int
    file_mtime: datetime
    naming_template: str
    series: str | None = None
    tags: list[str] = field(default_factory=list)
    template_override: str | None = None
    source: str | None = None
    id: int | None = None
    created_on: str | None = None
    updated_on: str | None = None

    @property
    def author(self) -> str:
        """Joined author string, as stored and indexed."""
        return join_authors(self.authors)

    def with_id(self, book_id: int) -> "Book":
        return replace(self, id=book_id)


def serialize_tags(tags: list[str]) -> str:
    """Join tags into their stored form.

    Raises:
        ValueError: If a tag is empty or contains the delimiter, since it
            could not be read back unchanged.
    """
    for tag in tags:
        if not tag:
            raise ValueError("Tags must not be empty")
        if TAG_DELIMITER in tag:
            raise ValueError(f"Tag {tag!r} contains the delimiter {TAG_DELIMITER!r}")
    return TAG_DELIMITER.join(tags)


def deserialize_tags(value: str | None) -> list[str]:
    """Split a stored tag string. Empty segments are dropped, so '' is []."""
    if not value:
        return []
    return [tag for tag in value.split(TAG_DELIMITER) if tag]


def join_authors(authors: list[str]) -> str:
    return AUTHOR_SEPARATOR.join(authors)


def split_authors(value: str | None) -> list[str]:
    if not value:
        return []
    return [a.strip() for a in value.split(AUTHOR_SEPARATOR) if a.strip()]


def book_to_row(book: Book) -> dict[str, Any]:
    """Convert a Book to a dict suitable for INSERT into the books table."""
    return {
        "author": book.author,
        "series": book.series,
        "title": book.title,
        "extension": book.extension,
        "tags": serialize_tags(book.tags),
        "original_filename": str(book.original_filename),
        "filename": book.current_filename.as_posix(),
        "file_size": book.file_size,
        "file_mtime": book.file_mtime.isoformat(),
        "hash": book.hash,
        "naming_template": book.naming_template,
        "template_override": book.template_override,
        "source": book.source,
    }


def book_to_index_row(book: Book) -> dict[str, Any]:
    """The searchable fields of a Book, keyed by books_fts column."""
    return {
        "author": book.author,
        "series": book.series or "",
        "title": book.title,
        "extension": book.extension,
        "tags": serialize_tags(book.tags),
        "filename": book.current_filename.as_posix(),
        "source": book.source or "",
    }


def row_to_book(row: Any) -> Book:
    """Convert a full books row back to a Book."""
    return Book(
        id=row["id"],
        created_on=row["created_on"],
        updated_on=row["updated_on"],
        title=row["title"],
        authors=split_authors(row["author"]),
        series=row["series"],
        extension=row["extension"],
        tags=deserialize_tags(row["tags"]),
        original_filename=Path(row["original_filename"]),
        current_filename=Path(row["filename"]),
        file_size=row["file_size"],
        file_mtime=datetime.fromisoformat(row["file_mtime"]),
        hash=row["hash"],
        naming_template=row["naming_template"],
        template_override=row["template_override"],
        source=row["source"],
    )
