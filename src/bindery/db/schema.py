# ABOUTME: SQL DDL statements for the Bindery library database schema.
# ABOUTME: Defines the books table, the FTS5 shadow index, and the merge ledger.

SCHEMA_VERSION = 1

# The FTS table is written explicitly by the catalog in the same transaction
# as the books row, so there are no sync triggers.
SCHEMA_V1 = """
-- Core book catalog table
CREATE TABLE books (
    id                INTEGER PRIMARY KEY AUTOINCREMENT,
    created_on        TEXT NOT NULL DEFAULT (strftime('%Y-%m-%dT%H:%M:%S', 'now')),
    updated_on        TEXT NOT NULL DEFAULT (strftime('%Y-%m-%dT%H:%M:%S', 'now')),
    author            TEXT NOT NULL,
    series            TEXT,
    title             TEXT NOT NULL,
    extension         TEXT NOT NULL,
    tags              TEXT NOT NULL DEFAULT '',
    original_filename TEXT NOT NULL,
    filename          TEXT NOT NULL,
    file_size         INTEGER NOT NULL,
    file_mtime        TEXT NOT NULL,
    hash              TEXT NOT NULL,
    naming_template   TEXT NOT NULL,
    template_override TEXT,
    source            TEXT
);

CREATE UNIQUE INDEX idx_books_hash ON books(hash);
CREATE INDEX idx_books_identity ON books(author, title, series);

-- FTS5 shadow index, rowid = books.id
CREATE VIRTUAL TABLE books_fts USING fts5(
    author, series, title, extension, tags, filename, source
);

-- Books merged into another book; lookups and dedup follow new_id
CREATE TABLE merged_books (
    old_id    INTEGER PRIMARY KEY,
    new_id    INTEGER NOT NULL,
    hash      TEXT NOT NULL,
    filename  TEXT NOT NULL,
    merged_on TEXT NOT NULL DEFAULT (strftime('%Y-%m-%dT%H:%M:%S', 'now'))
);

CREATE UNIQUE INDEX idx_merged_books_hash ON merged_books(hash);
CREATE INDEX idx_merged_books_new_id ON merged_books(new_id);

-- Schema versioning for future migrations
CREATE TABLE schema_version (
    version    INTEGER NOT NULL,
    applied_at TEXT NOT NULL DEFAULT (strftime('%Y-%m-%dT%H:%M:%S', 'now'))
);

INSERT INTO schema_version (version) VALUES (1);
"""
