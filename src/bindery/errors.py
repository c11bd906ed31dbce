# ABOUTME: Exception hierarchy shared by the Bindery catalog, placement, and conversion layers.
# ABOUTME: Every error carries enough context for the CLI to report it without a traceback.


class BinderyError(Exception):
    """Base class for all Bindery errors."""


class DuplicateBookError(BinderyError):
    """Raised when a book with the same identity already exists in the catalog.

    The existing book's id is kept on the exception so the caller can offer
    a merge.
    """

    def __init__(self, existing_id: int) -> None:
        super().__init__(f"A duplicate book already exists with id {existing_id}")
        self.existing_id = existing_id


class BookNotFoundError(BinderyError):
    """Raised when an update or merge names a book id that is not cataloged."""

    def __init__(self, book_id: int) -> None:
        super().__init__(f"Book with id {book_id} not found")
        self.book_id = book_id


class StorageError(BinderyError):
    """Raised when the database fails; the current transaction is rolled back."""

    def __init__(self, operation: str, cause: Exception | str) -> None:
        super().__init__(f"{operation}: {cause}")
        self.operation = operation


class PlacementError(BinderyError):
    """Raised when a book file cannot be moved or copied into the library."""


class ConversionError(BinderyError):
    """Raised when the external converter cannot be started or exits non-zero."""
