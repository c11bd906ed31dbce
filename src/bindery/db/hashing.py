# ABOUTME: SHA-256 file fingerprinting used as the catalog's dedup key.
# ABOUTME: Captures hash, size, and mtime of a source file in one pass over its stat and bytes.

import hashlib
from dataclasses import dataclass
from datetime import datetime, timezone
from pathlib import Path

_CHUNK_SIZE = 65536  # 64 KB


@dataclass(frozen=True)
class FileFingerprint:
    """Identity of a file at import time."""

    hash: str
    size: int
    mtime: datetime


def compute_file_hash(path: Path) -> str:
    """Compute the SHA-256 hash of a file.

    Reads the file in 64KB chunks so large books are never loaded whole.

    Raises:
        FileNotFoundError: If the file does not exist.
    """
    hasher = hashlib.sha256()
    with open(path, "rb") as f:
        for chunk in iter(lambda: f.read(_CHUNK_SIZE), b""):
            hasher.update(chunk)
    return hasher.hexdigest()


def fingerprint_file(path: Path) -> FileFingerprint:
    """Hash a file and capture its size and modification time (UTC)."""
    st = path.stat()
    return FileFingerprint(
        hash=compute_file_hash(path),
        size=st.st_size,
        mtime=datetime.fromtimestamp(st.st_mtime, tz=timezone.utc),
    )
