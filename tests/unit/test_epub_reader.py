# ABOUTME: Unit tests for EPUB metadata extraction.
# ABOUTME: Tests reading metadata from valid, minimal, and corrupt EPUB files.

from collections.abc import Callable
from pathlib import Path

import pytest

from bindery.formats import extract_metadata
from bindery.formats.epub import EpubReadError, read_epub_metadata


class TestReadEpubMetadata:
    """Tests for EPUB metadata extraction."""

    def test_extracts_title(self, sample_epub: Path) -> None:
        """Extracts the title from a valid EPUB."""
        meta = read_epub_metadata(sample_epub)
        assert meta.title == "The Name of the Rose"

    def test_extracts_author(self, sample_epub: Path) -> None:
        meta = read_epub_metadata(sample_epub)
        assert meta.authors == ["Umberto Eco"]
        assert meta.pattern == "epub"

    def test_multiple_authors(self, tmp_path: Path, epub_writer: Callable[..., Path]) -> None:
        path = epub_writer(tmp_path / "relic.epub", "Relic", ["Douglas Preston", "Lincoln Child"])
        meta = read_epub_metadata(path)
        assert meta.authors == ["Douglas Preston", "Lincoln Child"]

    def test_no_series_is_none(self, sample_epub: Path) -> None:
        assert read_epub_metadata(sample_epub).series is None

    def test_minimal_epub_has_no_authors(self, minimal_epub: Path) -> None:
        meta = read_epub_metadata(minimal_epub)
        assert meta.title == "Untitled Book"
        assert meta.authors == []

    def test_corrupt_epub_raises(self, corrupt_epub: Path) -> None:
        """A file that is not a zip archive raises EpubReadError."""
        with pytest.raises(EpubReadError, match="Failed to read EPUB"):
            read_epub_metadata(corrupt_epub)

    def test_missing_file_raises(self, tmp_path: Path) -> None:
        with pytest.raises(EpubReadError, match="File not found"):
            read_epub_metadata(tmp_path / "nope.epub")


class TestExtractMetadata:
    """Tests for the format-dispatching extract_metadata."""

    def test_epub_metadata_wins_over_filename(
        self, tmp_path: Path, epub_writer: Callable[..., Path],
    ) -> None:
        path = epub_writer(
            tmp_path / "Someone - Something Else.epub", "The Name of the Rose", ["Umberto Eco"]
        )
        meta = extract_metadata(path)
        assert meta.title == "The Name of the Rose"
        assert meta.authors == ["Umberto Eco"]
        assert meta.pattern == "epub"

    def test_epub_without_author_falls_back_to_filename(
        self, tmp_path: Path, epub_writer: Callable[..., Path],
    ) -> None:
        path = epub_writer(tmp_path / "Jane Doe - Draft.epub", "Untitled Book")
        meta = extract_metadata(path)
        assert meta.title == "Untitled Book"
        assert meta.authors == ["Jane Doe"]
        assert meta.pattern == "author-title"

    def test_other_formats_use_filename(self, tmp_path: Path) -> None:
        path = tmp_path / "Frank Herbert - [Dune Chronicles] - Dune.pdf"
        path.write_bytes(b"%PDF-1.4")
        meta = extract_metadata(path)
        assert meta.title == "Dune"
        assert meta.authors == ["Frank Herbert"]
        assert meta.series == "Dune Chronicles"

    def test_corrupt_epub_propagates_error(self, corrupt_epub: Path) -> None:
        with pytest.raises(EpubReadError):
            extract_metadata(corrupt_epub)
