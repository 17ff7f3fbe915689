# ABOUTME: SQL DDL statements for the Bouquineur catalog database schema.
# ABOUTME: Defines users, books, authors, tags, and series tables plus schema migrations.

SCHEMA_V1 = """
CREATE TABLE users (
    id   INTEGER PRIMARY KEY AUTOINCREMENT,
    name TEXT NOT NULL UNIQUE
);

-- One row per copy of a book in a user's library
CREATE TABLE books (
    id              INTEGER PRIMARY KEY AUTOINCREMENT,
    owner           INTEGER NOT NULL REFERENCES users(id),
    isbn            TEXT NOT NULL,
    title           TEXT NOT NULL,
    summary         TEXT NOT NULL DEFAULT '',
    published       TEXT,
    publisher       TEXT,
    language        TEXT,
    google_id       TEXT,
    goodreads_id    TEXT,
    amazon_id       TEXT,
    librarything_id TEXT,
    page_count      INTEGER,
    date_added      TEXT NOT NULL DEFAULT (strftime('%Y-%m-%dT%H:%M:%S', 'now')),
    UNIQUE (owner, isbn)
);

CREATE TABLE authors (
    id   INTEGER PRIMARY KEY AUTOINCREMENT,
    name TEXT NOT NULL UNIQUE
);

CREATE TABLE book_authors (
    book_id   INTEGER NOT NULL REFERENCES books(id) ON DELETE CASCADE,
    author_id INTEGER NOT NULL REFERENCES authors(id),
    position  INTEGER NOT NULL,
    PRIMARY KEY (book_id, author_id)
);

CREATE TABLE tags (
    id   INTEGER PRIMARY KEY AUTOINCREMENT,
    name TEXT NOT NULL UNIQUE
);

CREATE TABLE book_tags (
    book_id INTEGER NOT NULL REFERENCES books(id) ON DELETE CASCADE,
    tag_id  INTEGER NOT NULL REFERENCES tags(id),
    PRIMARY KEY (book_id, tag_id)
);

CREATE TABLE schema_version (
    version    INTEGER NOT NULL,
    applied_at TEXT NOT NULL DEFAULT (strftime('%Y-%m-%dT%H:%M:%S', 'now'))
);

INSERT INTO schema_version (version) VALUES (1);
"""

# Migration v1 -> v2: series and per-book volume numbers
MIGRATION_V2 = """
CREATE TABLE series (
    id          INTEGER PRIMARY KEY AUTOINCREMENT,
    owner       INTEGER NOT NULL REFERENCES users(id),
    name        TEXT NOT NULL,
    total_count INTEGER,
    ongoing     INTEGER NOT NULL DEFAULT 1,
    UNIQUE (owner, name)
);

CREATE TABLE book_series (
    book_id   INTEGER PRIMARY KEY REFERENCES books(id) ON DELETE CASCADE,
    series_id INTEGER NOT NULL REFERENCES series(id) ON DELETE CASCADE,
    number    INTEGER NOT NULL,
    UNIQUE (series_id, number)
);

CREATE INDEX idx_book_series_series ON book_series(series_id);

INSERT INTO schema_version (version) VALUES (2);
"""

# Migration v2 -> v3: reading and ownership status
MIGRATION_V3 = """
ALTER TABLE books ADD COLUMN owned INTEGER NOT NULL DEFAULT 1;
ALTER TABLE books ADD COLUMN read INTEGER NOT NULL DEFAULT 0;

CREATE INDEX idx_books_owner_read ON books(owner, read);

INSERT INTO schema_version (version) VALUES (3);
"""

MIGRATIONS: list[tuple[int, str]] = [
    (2, MIGRATION_V2),
    (3, MIGRATION_V3),
]
