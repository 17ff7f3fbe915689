# ABOUTME: Opens the Bouquineur catalog database and brings its schema up to date.
# ABOUTME: Creates the base tables on first use and applies pending migrations in order.

import logging
import sqlite3
from pathlib import Path

from bouquineur.config import DEFAULT_DB_PATH
from bouquineur.db.schema import MIGRATIONS, SCHEMA_V1

logger = logging.getLogger(__name__)

LATEST_VERSION = max(version for version, _ in MIGRATIONS)


def schema_version(conn: sqlite3.Connection) -> int:
    """Highest schema version recorded in the database, 0 for an empty file."""
    has_table = conn.execute(
        "SELECT 1 FROM sqlite_master WHERE type = 'table' AND name = 'schema_version'"
    ).fetchone()
    if has_table is None:
        return 0
    row = conn.execute("SELECT MAX(version) FROM schema_version").fetchone()
    return row[0] or 0


def migrate(conn: sqlite3.Connection) -> int:
    """Create or upgrade the schema and return the resulting version.

    Each migration script records its own version, so running this on an
    up-to-date database does nothing.
    """
    current = schema_version(conn)
    if current == 0:
        logger.info("Creating catalog schema")
        conn.executescript(SCHEMA_V1)
        current = 1

    for version, script in MIGRATIONS:
        if version <= current:
            continue
        logger.info("Migrating catalog schema to version %d", version)
        conn.executescript(script)
        current = version
    return current


def open_catalog(path: Path | None = None) -> sqlite3.Connection:
    """Open the catalog at ``path`` (default ~/.bouquineur/library.db).

    Missing parent directories are created. The returned connection uses
    WAL journaling, enforces foreign keys, and yields sqlite3.Row rows.
    """
    db_path = path or DEFAULT_DB_PATH
    db_path.parent.mkdir(parents=True, exist_ok=True)

    conn = sqlite3.connect(str(db_path))
    conn.row_factory = sqlite3.Row
    conn.execute("PRAGMA journal_mode=WAL")
    conn.execute("PRAGMA foreign_keys=ON")
    migrate(conn)
    return conn
