"""Forward-only migration runner for the catalog store schema."""

from __future__ import annotations

import sqlite3

# schema_version is the bootstrap table, created before migrations run.
_CREATE_SCHEMA_VERSION = """
CREATE TABLE IF NOT EXISTS schema_version (
    version     INTEGER NOT NULL,
    applied_at  DATETIME NOT NULL DEFAULT (datetime('now'))
)
"""

_V1_SQL = """
CREATE TABLE IF NOT EXISTS assets (
    id              TEXT PRIMARY KEY,
    url             TEXT NOT NULL,
    host            TEXT NOT NULL,
    scheme          TEXT NOT NULL,
    category        TEXT NOT NULL,
    protocol        TEXT NOT NULL DEFAULT '["file"]',
    codec           TEXT NOT NULL DEFAULT '[]',
    res_width       INTEGER,
    res_height      INTEGER,
    res_label       TEXT,
    hdr             TEXT NOT NULL DEFAULT 'sdr',
    container       TEXT,
    features        TEXT NOT NULL DEFAULT '[]',
    notes           TEXT NOT NULL DEFAULT '',
    imported_at     DATETIME NOT NULL DEFAULT (datetime('now'))
);

CREATE TABLE IF NOT EXISTS facet_counts (
    facet_type      TEXT NOT NULL,
    facet_value     TEXT NOT NULL,
    count           INTEGER NOT NULL,
    PRIMARY KEY (facet_type, facet_value)
);

CREATE TABLE IF NOT EXISTS catalog_metadata (
    id              INTEGER PRIMARY KEY CHECK (id = 1),
    total_assets    INTEGER NOT NULL,
    build_timestamp TEXT NOT NULL,
    source_url      TEXT NOT NULL DEFAULT '',
    version         TEXT NOT NULL
);
"""

_V2_SQL = """
CREATE TABLE IF NOT EXISTS saved_searches (
    id              TEXT PRIMARY KEY,
    name            TEXT NOT NULL,
    query           TEXT NOT NULL,
    created_at      DATETIME NOT NULL DEFAULT (datetime('now')),
    last_used       DATETIME NOT NULL DEFAULT (datetime('now'))
);

CREATE TABLE IF NOT EXISTS search_history (
    seq             INTEGER PRIMARY KEY AUTOINCREMENT,
    query           TEXT NOT NULL UNIQUE
);
"""

# Append-only. Each entry: (version: int, sql: str).
# executescript() issues an implicit COMMIT before running.
MIGRATIONS: list[tuple[int, str]] = [
    (1, _V1_SQL),
    (2, _V2_SQL),
]


def current_version(conn: sqlite3.Connection) -> int:
    row = conn.execute("SELECT MAX(version) FROM schema_version").fetchone()
    return row[0] if row[0] is not None else 0


def run_migrations(conn: sqlite3.Connection) -> None:
    """Apply all pending migrations in ascending version order.

    Idempotent: safe to call on a database at any version.
    """
    conn.execute(_CREATE_SCHEMA_VERSION)
    conn.commit()

    current = current_version(conn)
    for version, sql in MIGRATIONS:
        if version > current:
            conn.executescript(sql)
            conn.execute(
                "INSERT INTO schema_version (version) VALUES (?)", (version,)
            )
            conn.commit()
