# ABOUTME: Format conversion through an external converter (Calibre's ebook-convert).
# ABOUTME: Converted files are cached next to the catalog, named by content hash.

import logging
import os
import subprocess
from pathlib import Path

from bindery.db.mapping import Book
from bindery.errors import ConversionError

logger = logging.getLogger(__name__)

DEFAULT_CONVERTER = "ebook-convert"

_STDERR_TAIL = 500


class Converter:
    """Produces converted copies of cataloged books in a hash-keyed cache.

    The converter executable is called with exactly two arguments, the
    source file and the destination file. It runs in the foreground with no
    timeout.
    """

    def __init__(
        self,
        books_root: Path,
        cache_dir: Path,
        *,
        executable: str = DEFAULT_CONVERTER,
    ) -> None:
        self._books_root = books_root
        self._cache_dir = cache_dir
        self._executable = executable

    def cache_path(self, book: Book, target_extension: str = "epub") -> Path:
        """Where the converted copy of ``book`` is (or would be) cached."""
        return self._cache_dir / f"{book.hash}.{target_extension.lstrip('.').lower()}"

    def convert_to_cache(self, book: Book, target_extension: str = "epub") -> Path:
        """Convert a book, reusing an existing cache entry.

        The converter writes to a temporary name in the cache directory. The
        result is moved into place only after a zero exit, so a failed run
        never leaves a cache entry behind.

        Returns:
            Path to the cached converted file.

        Raises:
            ConversionError: If the converter cannot be started, exits
                non-zero, or reports success without writing the file.
        """
        dest = self.cache_path(book, target_extension)
        if dest.exists():
            logger.debug("Using cached conversion %s", dest)
            return dest

        source = self._books_root / book.current_filename
        self._cache_dir.mkdir(parents=True, exist_ok=True)
        # Keep the extension: ebook-convert picks the output format from it.
        tmp = dest.with_name(f".{dest.stem}.tmp{dest.suffix}")
        _cleanup(tmp)

        cmd = [self._executable, str(source), str(tmp)]
        logger.info("Converting %s to %s", source, dest)
        try:
            result = subprocess.run(cmd, capture_output=True, text=True)
        except OSError as exc:
            _cleanup(tmp)
            raise ConversionError(f"Could not run {self._executable}: {exc}") from exc

        if result.returncode != 0:
            _cleanup(tmp)
            err_short = (result.stderr or "unknown error").strip()[-_STDERR_TAIL:]
            raise ConversionError(
                f"{self._executable} exited with status {result.returncode}: {err_short}"
            )
        if not tmp.is_file():
            _cleanup(tmp)
            raise ConversionError(f"{self._executable} reported success but wrote no {dest}")

        os.replace(tmp, dest)
        return dest


def _cleanup(path: Path) -> None:
    """Remove a partial converter output if it exists."""
    if path.exists():
        path.unlink()
