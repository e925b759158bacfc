"""SQLite schema definitions.

Defines the favorites table plus a small metadata table and provides a helper
to apply the schema to a sqlite3 connection.

Design Principles:
 - Singular table names
 - Favorites are keyed by a surrogate integer id; ``tag`` is the lookup key
   used for membership tests and deletes, and is unique (version 2)
 - Timestamps stored as ISO-8601 text (UTC)
"""

from __future__ import annotations
import sqlite3

SCHEMA_VERSION = 2

# DDL statements (ordered for dependencies)
DDL: list[str] = [
    # Metadata table
    """
    CREATE TABLE IF NOT EXISTS schema_meta (
        key TEXT PRIMARY KEY,
        value TEXT NOT NULL
    );
    """.strip(),
    # Favorite clan (denormalized projection of a directory clan)
    """
    CREATE TABLE IF NOT EXISTS favorite_clan (
        favorite_id INTEGER PRIMARY KEY AUTOINCREMENT,
        tag TEXT NOT NULL,
        name TEXT NOT NULL,
        location_name TEXT,
        points INTEGER NOT NULL,
        wars_won INTEGER NOT NULL,
        war_frequency INTEGER NOT NULL, -- WarFrequency code
        type TEXT,
        required_trophies INTEGER NOT NULL,
        created_at TEXT DEFAULT CURRENT_TIMESTAMP
    );
    """.strip(),
    "CREATE UNIQUE INDEX IF NOT EXISTS uq_favorite_clan_tag ON favorite_clan(tag)",
]

# Version 1 databases may hold the same tag more than once; keep the oldest row
_DEDUPE_V1: list[str] = [
    "DROP INDEX IF EXISTS idx_favorite_clan_tag",
    """
    DELETE FROM favorite_clan WHERE favorite_id NOT IN (
        SELECT MIN(favorite_id) FROM favorite_clan GROUP BY tag
    )
    """.strip(),
]


def apply_schema(conn: sqlite3.Connection) -> None:
    version = get_schema_version(conn)
    cur = conn.cursor()
    for stmt in DDL[:2]:
        cur.execute(stmt)
    if version is not None and version < 2:
        for stmt in _DEDUPE_V1:
            cur.execute(stmt)
    for stmt in DDL[2:]:
        cur.execute(stmt)
    cur.execute(
        "INSERT OR REPLACE INTO schema_meta(key, value) VALUES ('schema_version', ?)",
        (str(SCHEMA_VERSION),),
    )
    conn.commit()


def get_existing_tables(conn: sqlite3.Connection) -> list[str]:
    cur = conn.cursor()
    cur.execute("SELECT name FROM sqlite_master WHERE type='table'")
    return sorted(r[0] for r in cur.fetchall())


def get_schema_version(conn: sqlite3.Connection) -> int | None:
    try:
        row = conn.execute(
            "SELECT value FROM schema_meta WHERE key='schema_version'"
        ).fetchone()
    except sqlite3.OperationalError:
        return None
    return int(row[0]) if row else None
