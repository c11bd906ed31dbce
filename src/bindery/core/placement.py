# ABOUTME: Moves or copies inbound book files into their place under the content root.
# ABOUTME: Copies keep the source mtime; moves fall back to copy-then-delete across volumes.

import logging
import shutil
from pathlib import Path

from bindery.errors import PlacementError

logger = logging.getLogger(__name__)

_MAX_COLLISION_ATTEMPTS = 10_000


def unique_name(path: Path) -> Path:
    """Find an unused filename by appending " (1)", " (2)", ... before the suffix.

    Returns ``path`` itself when nothing exists there. The check is advisory:
    another process can claim the name between this call and placement.
    """
    if not path.exists():
        return path
    stem = path.stem
    suffix = path.suffix
    parent = path.parent
    for counter in range(1, _MAX_COLLISION_ATTEMPTS + 1):
        candidate = parent / f"{stem} ({counter}){suffix}"
        if not candidate.exists():
            return candidate
    raise PlacementError(
        f"Could not find a non-colliding filename after "
        f"{_MAX_COLLISION_ATTEMPTS} attempts: {path}"
    )


def _copy(source: Path, dest: Path) -> None:
    # copy2 streams the bytes and then copies the source's mtime onto dest.
    shutil.copy2(source, dest)


def _move(source: Path, dest: Path) -> None:
    try:
        source.rename(dest)
    except OSError as exc:
        logger.debug("Rename %s -> %s failed (%s), copying instead", source, dest, exc)
        _copy(source, dest)
        try:
            source.unlink()
        except OSError as unlink_exc:
            logger.warning("Copied %s to %s but could not remove the source: %s",
                           source, dest, unlink_exc)
            return
        logger.info("Moved %s to %s (copy/delete)", source, dest)
        return
    logger.info("Moved %s to %s", source, dest)


def place_file(source: Path, books_root: Path, destination: Path, *, move: bool = False) -> Path:
    """Move or copy ``source`` to ``books_root / destination``.

    Missing parent directories are created. An existing file at the
    destination is never overwritten.

    Args:
        source: The inbound file.
        books_root: The library's content root.
        destination: Path relative to the content root.
        move: Move the file instead of copying it.

    Returns:
        The absolute path of the placed file.

    Raises:
        PlacementError: If the destination exists or the filesystem fails.
    """
    target = books_root / destination
    if target.exists():
        raise PlacementError(f"Destination already exists: {target}")

    try:
        target.parent.mkdir(parents=True, exist_ok=True)
        if move:
            _move(source, target)
        else:
            _copy(source, target)
            logger.info("Copied %s to %s", source, target)
    except OSError as exc:
        raise PlacementError(f"Placing {source} at {target}: {exc}") from exc

    return target
