# ABOUTME: Public API for the Bindery library database layer.
# ABOUTME: Exports connection management, catalog operations, and the Book record.

from bindery.db.catalog import LibraryCatalog
from bindery.db.connection import create_library, open_library
from bindery.db.hashing import FileFingerprint, compute_file_hash, fingerprint_file
from bindery.db.mapping import Book, deserialize_tags, serialize_tags

__all__ = [
    "Book",
    "FileFingerprint",
    "LibraryCatalog",
    "compute_file_hash",
    "create_library",
    "deserialize_tags",
    "fingerprint_file",
    "open_library",
    "serialize_tags",
]
