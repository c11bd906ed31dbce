# ABOUTME: Naming templates that decide where a book lives under the content root.
# ABOUTME: A book records which template produced its filename so it can be re-derived later.

import re
import string
from pathlib import Path

from bindery.db.mapping import Book

NAMING_TEMPLATES: dict[str, str] = {
    "default": "{author}/{title}.{extension}",
    "series": "{author}/{series}/{title}.{extension}",
}

DEFAULT_TEMPLATE = "default"
SERIES_TEMPLATE = "series"
OVERRIDE_TEMPLATE = "override"

_UNSAFE_RE = re.compile(r'[\\/:*?"<>|\x00-\x1f]')
_MAX_COMPONENT = 120


def _sanitize(value: str) -> str:
    """Make one path component safe: no separators, no leading dots, bounded length."""
    cleaned = _UNSAFE_RE.sub("_", value).strip().lstrip(".").strip()
    return cleaned[:_MAX_COMPONENT] or "_"


def choose_template(book: Book, template_id: str | None = None) -> str:
    """Pick the template id for a book: explicit id, else series-aware default."""
    if book.template_override:
        return OVERRIDE_TEMPLATE
    if template_id is not None:
        return template_id
    return SERIES_TEMPLATE if book.series else DEFAULT_TEMPLATE


def render_filename(book: Book, template_id: str | None = None) -> Path:
    """Render a book's path relative to the content root.

    ``book.template_override`` wins over any named template. Fields are
    ``{author}``, ``{title}``, ``{series}`` and ``{extension}``; each is
    sanitized so it stays a single path component.

    Raises:
        ValueError: If the template id is unknown or the template uses an
            unknown field.
    """
    chosen = choose_template(book, template_id)
    if chosen == OVERRIDE_TEMPLATE:
        template = book.template_override or ""
    else:
        try:
            template = NAMING_TEMPLATES[chosen]
        except KeyError as exc:
            raise ValueError(f"Unknown naming template: {chosen}") from exc

    fields = {
        "author": _sanitize(book.author or "Unknown"),
        "title": _sanitize(book.title),
        "series": _sanitize(book.series or "No Series"),
        "extension": _sanitize(book.extension),
    }
    try:
        rendered = string.Formatter().vformat(template, (), fields)
    except (KeyError, IndexError) as exc:
        raise ValueError(f"Template {template!r} uses an unknown field: {exc}") from exc

    parts = [part for part in rendered.split("/") if part and part not in (".", "..")]
    if not parts:
        raise ValueError(f"Template {template!r} rendered an empty path")
    return Path(*parts)
