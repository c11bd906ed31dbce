# ABOUTME: Metadata extraction for inbound book files.
# ABOUTME: EPUBs are read with ebooklib; every other format falls back to filename parsing.

from dataclasses import dataclass, field
from pathlib import Path


@dataclass
class ExtractedMetadata:
    """What could be learned about a book file before it is cataloged."""

    title: str
    authors: list[str] = field(default_factory=list)
    series: str | None = None
    pattern: str | None = None


def extract_metadata(path: Path) -> ExtractedMetadata:
    """Read title, authors, and series from a book file.

    EPUB metadata wins where present; missing fields are filled from the
    filename.

    Raises:
        EpubReadError: If an .epub file cannot be parsed.
    """
    from bindery.formats.epub import read_epub_metadata
    from bindery.formats.filename import parse_filename

    parsed = parse_filename(path)
    if path.suffix.lower() != ".epub":
        return parsed

    embedded = read_epub_metadata(path)
    return ExtractedMetadata(
        title=embedded.title or parsed.title,
        authors=embedded.authors or parsed.authors,
        series=embedded.series or parsed.series,
        pattern="epub" if embedded.title and embedded.authors else parsed.pattern,
    )


__all__ = ["ExtractedMetadata", "extract_metadata"]
