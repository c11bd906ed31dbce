# ABOUTME: EPUB metadata extraction using ebooklib.
# ABOUTME: Any parser failure surfaces as EpubReadError; Calibre series meta is read when present.

import logging
from pathlib import Path

from ebooklib import epub

from bindery.errors import BinderyError
from bindery.formats import ExtractedMetadata

logger = logging.getLogger(__name__)

_CALIBRE_NAMESPACES = ("calibre", "http://calibre.kovidgoyal.net/2009/metadata")


class EpubReadError(BinderyError):
    """Raised when an EPUB file cannot be read or parsed."""


def _get_metadata_value(book: epub.EpubBook, namespace: str, name: str) -> str | None:
    """Extract a single metadata value from an EpubBook, or None if missing."""
    values = book.get_metadata(namespace, name)
    if not values:
        return None
    # Metadata entries are tuples of (value, attributes)
    value = values[0][0]
    return str(value).strip() if value else None


def _get_authors(book: epub.EpubBook) -> list[str]:
    """Extract all author names from an EpubBook."""
    creators = book.get_metadata("DC", "creator")
    if not creators:
        return []
    return [str(entry[0]).strip() for entry in creators if entry[0]]


def _get_series(book: epub.EpubBook) -> str | None:
    """Read Calibre's series meta tag (<meta name="calibre:series" content=...>).

    ebooklib files prefixed meta names under the prefix's namespace, which is
    the bare prefix unless the OPF declares it.
    """
    for namespace in _CALIBRE_NAMESPACES:
        for _, attrs in book.metadata.get(namespace, {}).get("series", []):
            content = attrs.get("content")
            if content:
                return str(content).strip()
    return None


def read_epub_metadata(path: Path) -> ExtractedMetadata:
    """Extract title, authors, and series from an EPUB file.

    The title is empty when the package document has none; callers fill
    it from the filename.

    Raises:
        EpubReadError: If the file cannot be read or parsed.
    """
    if not path.exists():
        raise EpubReadError(f"File not found: {path}")

    try:
        book = epub.read_epub(str(path), options={"ignore_ncx": True})
    except Exception as exc:
        raise EpubReadError(f"Failed to read EPUB: {path}: {exc}") from exc

    title = _get_metadata_value(book, "DC", "title") or ""
    if not title:
        logger.debug("%s has no title metadata", path)

    return ExtractedMetadata(
        title=title,
        authors=_get_authors(book),
        series=_get_series(book),
        pattern="epub",
    )
