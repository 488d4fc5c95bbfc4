"""Read-only SQLite access to the full-text index database.

Every read opens its own connection, so concurrent worker threads never
queue behind one another and an abandoned (timed-out) read holds nothing
that later searches need.
"""

import sqlite3
from pathlib import Path

from .config import settings

# ~8MB page cache
CACHE_SIZE_PAGES = -8000


def resolve_index_path(path: str | Path | None = None) -> Path:
    """Database file to read, defaults to ``settings.index_path``."""
    return Path(path or settings.index_path)


def connect(path: str | Path | None = None) -> sqlite3.Connection:
    """Open the database read-only with query-only pragmas.

    Raises:
        FileNotFoundError: If the database file does not exist
    """
    db_path = resolve_index_path(path)
    if not db_path.exists():
        raise FileNotFoundError(f"FTS database not found at {db_path}")
    conn = sqlite3.connect(f"{db_path.resolve().as_uri()}?mode=ro", uri=True)
    conn.row_factory = sqlite3.Row
    conn.execute("PRAGMA query_only = ON")
    conn.execute(f"PRAGMA cache_size = {CACHE_SIZE_PAGES}")
    return conn


def execute_read(path: str | Path | None, sql: str, params: tuple | list = ()) -> list[sqlite3.Row]:
    """Run a read query on a fresh connection and close it.

    Callers run this in a worker thread so the event loop is never blocked.
    """
    conn = connect(path)
    try:
        return conn.execute(sql, params).fetchall()
    finally:
        conn.close()
