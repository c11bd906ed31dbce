# ABOUTME: Library integrity verification for the Bindery catalog.
# ABOUTME: Finds rows whose files are missing and files no row references; repairs nothing.

from dataclasses import dataclass, field
from pathlib import Path

from bindery.db.catalog import LibraryCatalog
from bindery.db.hashing import compute_file_hash
from bindery.db.mapping import Book


@dataclass
class VerifyResult:
    """Aggregated results from a library verification run."""

    ok: int = 0
    missing: list[Book] = field(default_factory=list)
    hash_mismatch: list[Book] = field(default_factory=list)
    orphaned: list[Path] = field(default_factory=list)

    @property
    def total_issues(self) -> int:
        """Total number of issues found across all categories."""
        return len(self.missing) + len(self.hash_mismatch) + len(self.orphaned)


def verify_library(catalog: LibraryCatalog, *, check_hash: bool = False) -> VerifyResult:
    """Verify that the catalog and the content root agree.

    1. Every cataloged book's file exists under the content root.
    2. If check_hash is True, each existing file still has its stored hash.
    3. Files under the content root that no book references are orphans,
       typically left by an import that placed its file but did not commit.

    Files of books folded away by a merge are not orphans.
    """
    result = VerifyResult()
    root = catalog.books_root
    referenced: set[Path] = set(catalog.merged_filenames())

    for book in catalog.list_all():
        referenced.add(book.current_filename)
        path = root / book.current_filename
        if not path.is_file():
            result.missing.append(book)
            continue
        if check_hash and compute_file_hash(path) != book.hash:
            result.hash_mismatch.append(book)
            continue
        result.ok += 1

    if root.is_dir():
        for path in sorted(root.rglob("*")):
            if path.is_file() and path.relative_to(root) not in referenced:
                result.orphaned.append(path)

    return result
