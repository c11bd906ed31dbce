# ABOUTME: Filename parsing for books whose format carries no readable metadata.
# ABOUTME: Named regex patterns are tried in order; the first match wins.

import re
from pathlib import Path

from bindery.formats import ExtractedMetadata

# Order matters: the most specific pattern comes first.
FILENAME_PATTERNS: list[tuple[str, re.Pattern[str]]] = [
    (
        "author-series-title",
        re.compile(r"^(?P<author>.+?) - \[(?P<series>.+?)\] - (?P<title>.+)$"),
    ),
    ("author-title", re.compile(r"^(?P<author>.+?) - (?P<title>.+)$")),
    ("title", re.compile(r"^(?P<title>.+)$")),
]

# Matches a trailing parenthesized Calibre ID like " (2739)" at end of string
_CALIBRE_ID_RE = re.compile(r"\s+\(\d+\)$")

UNKNOWN_AUTHOR = "Unknown"


def parse_filename(path: Path) -> ExtractedMetadata:
    """Guess title, authors, and series from a filename.

    Authors separated by " & " become separate entries. A file that matches
    only the bare title pattern gets the author "Unknown".
    """
    stem = _CALIBRE_ID_RE.sub("", path.stem).strip() or path.stem
    for name, pattern in FILENAME_PATTERNS:
        match = pattern.match(stem)
        if match is None:
            continue
        groups = match.groupdict()
        author = (groups.get("author") or "").strip()
        authors = [a.strip() for a in author.split(" & ") if a.strip()]
        return ExtractedMetadata(
            title=groups["title"].strip(),
            authors=authors or [UNKNOWN_AUTHOR],
            series=(groups.get("series") or "").strip() or None,
            pattern=name,
        )
    # The bare title pattern matches any non-empty stem.
    return ExtractedMetadata(title=stem, authors=[UNKNOWN_AUTHOR], pattern=None)
