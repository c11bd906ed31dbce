# ABOUTME: Bindery - a personal ebook catalog with content-addressed storage.
# ABOUTME: Imports books into a deduplicated, full-text indexed SQLite library.
