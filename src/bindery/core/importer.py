# ABOUTME: Batch import pipeline that turns book files into cataloged Book records.
# ABOUTME: Fingerprints, extracts metadata, names, and hands each book to the catalog.

import logging
from dataclasses import dataclass, field
from pathlib import Path

from bindery.core.naming import choose_template, render_filename
from bindery.core.placement import unique_name
from bindery.db.catalog import LibraryCatalog
from bindery.db.hashing import FileFingerprint, fingerprint_file
from bindery.db.mapping import Book
from bindery.errors import BinderyError, DuplicateBookError
from bindery.formats import ExtractedMetadata, extract_metadata

logger = logging.getLogger(__name__)

BOOK_EXTENSIONS: frozenset[str] = frozenset(
    {".epub", ".mobi", ".azw3", ".azw", ".pdf", ".txt", ".cbz", ".cbr"}
)


@dataclass
class ImportResult:
    """Summary of an import operation."""

    added: int = 0
    skipped: int = 0
    errors: int = 0
    imported: list[Book] = field(default_factory=list)
    duplicates: list[tuple[Path, int]] = field(default_factory=list)
    error_details: list[tuple[Path, str]] = field(default_factory=list)


def find_books(directory: Path) -> list[Path]:
    """Recursively find supported book files in a directory, sorted."""
    return sorted(
        p for p in directory.rglob("*") if p.is_file() and p.suffix.lower() in BOOK_EXTENSIONS
    )


def build_book(
    path: Path,
    fingerprint: FileFingerprint,
    metadata: ExtractedMetadata,
    books_root: Path,
    *,
    template_id: str | None = None,
    tags: list[str] | None = None,
    source: str | None = None,
) -> Book:
    """Assemble a Book for ``path`` and give it a free destination under ``books_root``.

    The destination is de-collided with ``unique_name``; see its note on
    the race window.
    """
    book = Book(
        title=metadata.title,
        authors=list(metadata.authors),
        series=metadata.series,
        extension=path.suffix.lstrip(".").lower(),
        hash=fingerprint.hash,
        original_filename=path,
        current_filename=Path(),
        file_size=fingerprint.size,
        file_mtime=fingerprint.mtime,
        naming_template="",
        tags=list(tags or []),
        source=source if source is not None else f"{metadata.pattern or 'filename'} import",
    )
    book.naming_template = choose_template(book, template_id)
    relative = render_filename(book, template_id)
    book.current_filename = unique_name(books_root / relative).relative_to(books_root)
    return book


def import_books(
    paths: list[Path],
    catalog: LibraryCatalog,
    *,
    move: bool = False,
    template_id: str | None = None,
    tags: list[str] | None = None,
    source: str | None = None,
) -> ImportResult:
    """Import book files into the library.

    For each file: computes its fingerprint, skips it if the hash is already
    cataloged, extracts metadata, derives its place under the content root,
    and imports it through the catalog (which copies or moves the file).
    Failures are recorded per file and the batch carries on.

    Args:
        paths: Book files to import.
        catalog: The library to import into.
        move: Move files into the library instead of copying them.
        template_id: Naming template to use; defaults to series-aware choice.
        tags: Tags to put on every imported book.
        source: Provenance note; defaults to how the metadata was found.

    Returns:
        ImportResult with counts of added, skipped, and errored files.
    """
    result = ImportResult()

    for index, path in enumerate(paths, start=1):
        logger.debug("[%d/%d] %s", index, len(paths), path)
        try:
            fingerprint = fingerprint_file(path)
        except OSError as exc:
            result.errors += 1
            result.error_details.append((path, str(exc)))
            continue

        # Check for duplicate before reading metadata (cheaper)
        existing = catalog.get_by_hash(fingerprint.hash)
        if existing is not None and existing.id is not None:
            result.skipped += 1
            result.duplicates.append((path, existing.id))
            continue

        try:
            metadata = extract_metadata(path)
            book = build_book(
                path, fingerprint, metadata, catalog.books_root,
                template_id=template_id, tags=tags, source=source,
            )
            imported = catalog.import_book(book, move=move)
        except DuplicateBookError as exc:
            # Another process may have imported the same file meanwhile
            result.skipped += 1
            result.duplicates.append((path, exc.existing_id))
            continue
        except (BinderyError, ValueError) as exc:
            logger.warning("Could not import %s: %s", path, exc)
            result.errors += 1
            result.error_details.append((path, str(exc)))
            continue

        result.added += 1
        result.imported.append(imported)

    return result
