# ABOUTME: Shared pytest fixtures for Bindery tests.
# ABOUTME: Provides sample EPUB files, a temporary library, and a factory for inbound books.

from collections.abc import Callable, Iterator
from pathlib import Path

import pytest
from ebooklib import epub

from bindery.core.placement import unique_name
from bindery.db.catalog import LibraryCatalog
from bindery.db.connection import open_library
from bindery.db.hashing import fingerprint_file
from bindery.db.mapping import Book

MakeBook = Callable[..., Book]


def write_epub(path: Path, title: str, authors: list[str] | None = None) -> Path:
    """Create a minimal valid EPUB with the given title and authors."""
    book = epub.EpubBook()
    book.set_identifier(f"id-{title}")
    book.set_title(title)
    book.set_language("en")
    for author in authors or []:
        book.add_author(author)

    # Add a minimal chapter so the EPUB is structurally valid
    chapter = epub.EpubHtml(title="Chapter 1", file_name="chap01.xhtml", lang="en")
    chapter.content = (
        b"<html><body><h1>Chapter 1</h1>"
        b"<p>Content for " + title.encode() + b".</p>"
        b"</body></html>"
    )
    book.add_item(chapter)

    # Add navigation
    book.toc = [epub.Link("chap01.xhtml", "Chapter 1", "chap01")]
    book.add_item(epub.EpubNcx())
    book.add_item(epub.EpubNav())
    book.spine = ["nav", chapter]

    path.parent.mkdir(parents=True, exist_ok=True)
    epub.write_epub(str(path), book)
    return path


@pytest.fixture
def sample_epub(tmp_path: Path) -> Path:
    """A valid EPUB with known title and author, alone in its directory."""
    return write_epub(
        tmp_path / "inbox" / "name_of_the_rose.epub", "The Name of the Rose", ["Umberto Eco"]
    )


@pytest.fixture
def minimal_epub(tmp_path: Path) -> Path:
    """An EPUB with a title but no author."""
    return write_epub(tmp_path / "inbox" / "minimal.epub", "Untitled Book")


@pytest.fixture
def corrupt_epub(tmp_path: Path) -> Path:
    """A corrupt file that is not a valid EPUB."""
    filepath = tmp_path / "inbox" / "corrupt.epub"
    filepath.parent.mkdir(parents=True, exist_ok=True)
    filepath.write_text("this is not a valid epub file")
    return filepath


@pytest.fixture
def db_path(tmp_path: Path) -> Path:
    """Location of the temporary library database."""
    return tmp_path / "library" / "library.db"


@pytest.fixture
def books_root(tmp_path: Path) -> Path:
    """Content root of the temporary library (created on first placement)."""
    return tmp_path / "library" / "books"


@pytest.fixture
def catalog(db_path: Path, books_root: Path) -> Iterator[LibraryCatalog]:
    """A LibraryCatalog backed by a fresh temporary database."""
    conn = open_library(db_path)
    yield LibraryCatalog(conn, books_root)
    conn.close()


@pytest.fixture
def make_book(tmp_path: Path) -> MakeBook:
    """Factory: write an inbound file and return the Book describing it.

    Files with equal ``content`` share a hash, which is how tests build
    duplicates.
    """
    inbox = tmp_path / "inbox"

    def _make(
        title: str = "Dune",
        authors: tuple[str, ...] = ("Frank Herbert",),
        *,
        content: bytes | None = None,
        series: str | None = None,
        tags: tuple[str, ...] = (),
        extension: str = "epub",
        source: str | None = None,
    ) -> Book:
        inbox.mkdir(parents=True, exist_ok=True)
        src = unique_name(inbox / f"{title}.{extension}")
        src.write_bytes(content if content is not None else f"{title} / {authors}".encode())
        fingerprint = fingerprint_file(src)
        return Book(
            title=title,
            authors=list(authors),
            series=series,
            extension=extension,
            hash=fingerprint.hash,
            original_filename=src,
            current_filename=Path(authors[0]) / f"{title}.{extension}",
            file_size=fingerprint.size,
            file_mtime=fingerprint.mtime,
            naming_template="default",
            tags=list(tags),
            source=source,
        )

    return _make


@pytest.fixture
def epub_writer() -> Callable[..., Path]:
    """The write_epub helper, for tests that need EPUBs with custom metadata."""
    return write_epub
