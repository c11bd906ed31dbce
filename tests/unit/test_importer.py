# ABOUTME: Unit tests for the batch import pipeline.
# ABOUTME: Covers discovery, naming, duplicate skipping, collisions, and per-file errors.

from pathlib import Path

from bindery.core.importer import find_books, import_books
from bindery.db.catalog import LibraryCatalog


def _write(path: Path, content: bytes) -> Path:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_bytes(content)
    return path


class TestFindBooks:
    def test_finds_supported_files_recursively(self, tmp_path: Path) -> None:
        a = _write(tmp_path / "b" / "Second.PDF", b"2")
        b = _write(tmp_path / "a" / "First.epub", b"1")
        _write(tmp_path / "notes.docx", b"x")
        _write(tmp_path / "cover.jpg", b"x")

        assert find_books(tmp_path) == [b, a]

    def test_empty_directory(self, tmp_path: Path) -> None:
        assert find_books(tmp_path) == []


class TestImportBooks:
    """Tests for import_books()."""

    def test_imports_epub_with_embedded_metadata(
        self, catalog: LibraryCatalog, sample_epub: Path, books_root: Path,
    ) -> None:
        result = import_books([sample_epub], catalog)

        assert result.added == 1
        (book,) = result.imported
        assert book.title == "The Name of the Rose"
        assert book.authors == ["Umberto Eco"]
        assert book.current_filename == Path("Umberto Eco/The Name of the Rose.epub")
        assert book.naming_template == "default"
        assert book.source == "epub import"
        assert (books_root / book.current_filename).is_file()
        assert sample_epub.exists()

    def test_series_from_filename_uses_series_template(
        self, catalog: LibraryCatalog, tmp_path: Path,
    ) -> None:
        path = _write(tmp_path / "in" / "Frank Herbert - [Dune Chronicles] - Dune.pdf", b"pdf")
        result = import_books([path], catalog)

        (book,) = result.imported
        assert book.current_filename == Path("Frank Herbert/Dune Chronicles/Dune.pdf")
        assert book.naming_template == "series"
        assert book.source == "author-series-title import"

    def test_explicit_template(self, catalog: LibraryCatalog, tmp_path: Path) -> None:
        path = _write(tmp_path / "in" / "Frank Herbert - [Dune Chronicles] - Dune.pdf", b"pdf")
        (book,) = import_books([path], catalog, template_id="default").imported
        assert book.current_filename == Path("Frank Herbert/Dune.pdf")

    def test_tags_and_source_applied(self, catalog: LibraryCatalog, tmp_path: Path) -> None:
        path = _write(tmp_path / "in" / "Frank Herbert - Dune.txt", b"txt")
        (book,) = import_books(
            [path], catalog, tags=["scifi", "to-read"], source="garage sale"
        ).imported

        assert book.tags == ["scifi", "to-read"]
        assert book.source == "garage sale"

    def test_reimport_is_skipped(self, catalog: LibraryCatalog, sample_epub: Path) -> None:
        first = import_books([sample_epub], catalog)
        second = import_books([sample_epub], catalog)

        assert second.added == 0
        assert second.skipped == 1
        assert second.duplicates == [(sample_epub, first.imported[0].id)]

    def test_same_content_in_batch_is_skipped(
        self, catalog: LibraryCatalog, tmp_path: Path,
    ) -> None:
        a = _write(tmp_path / "in" / "Frank Herbert - Dune.txt", b"same")
        b = _write(tmp_path / "in" / "copy" / "Frank Herbert - Dune.txt", b"same")

        result = import_books([a, b], catalog)
        assert result.added == 1
        assert result.skipped == 1

    def test_name_collision_gets_suffix(
        self, catalog: LibraryCatalog, tmp_path: Path, books_root: Path,
    ) -> None:
        a = _write(tmp_path / "in" / "Frank Herbert - Dune.txt", b"first printing")
        b = _write(tmp_path / "in" / "other" / "Frank Herbert - Dune.txt", b"second printing")

        result = import_books([a, b], catalog)
        names = [book.current_filename for book in result.imported]
        assert names == [Path("Frank Herbert/Dune.txt"), Path("Frank Herbert/Dune (1).txt")]
        assert (books_root / "Frank Herbert" / "Dune (1).txt").read_bytes() == b"second printing"

    def test_move_removes_sources(self, catalog: LibraryCatalog, tmp_path: Path) -> None:
        path = _write(tmp_path / "in" / "Frank Herbert - Dune.txt", b"txt")
        result = import_books([path], catalog, move=True)

        assert result.added == 1
        assert not path.exists()

    def test_corrupt_file_recorded_and_batch_continues(
        self, catalog: LibraryCatalog, corrupt_epub: Path, sample_epub: Path,
    ) -> None:
        result = import_books([corrupt_epub, sample_epub], catalog)

        assert result.errors == 1
        assert result.error_details[0][0] == corrupt_epub
        assert result.added == 1
        assert len(catalog.list_all()) == 1

    def test_unreadable_path_recorded(self, catalog: LibraryCatalog, tmp_path: Path) -> None:
        result = import_books([tmp_path / "gone.epub"], catalog)
        assert result.errors == 1
        assert result.added == 0
