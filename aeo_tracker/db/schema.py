"""
SQLite schema DDL for the check store.

All statements use ``IF NOT EXISTS`` so ``apply_schema()`` is **idempotent**:
safe to call on an already-initialized database (e.g. on every CLI command,
or in tests).

Table creation order respects foreign key dependencies:
  1. projects  (no FKs)
  2. keywords  (→ projects, cascade delete)
  3. checks    (→ keywords, cascade delete)

Timestamps are stored as fixed-width UTC ISO-8601 strings
(``YYYY-MM-DDTHH:MM:SS.ffffffZ``) so that string comparison in SQL matches
chronological order.
"""

from __future__ import annotations

import logging
import sqlite3

logger = logging.getLogger(__name__)

# ── DDL statements ─────────────────────────────────────────────────────────────

_DDL_PROJECTS = """
CREATE TABLE IF NOT EXISTS projects (
    project_id  INTEGER PRIMARY KEY AUTOINCREMENT,
    domain      TEXT    NOT NULL,
    brand       TEXT    NOT NULL,
    created_at  TEXT    NOT NULL DEFAULT (strftime('%Y-%m-%dT%H:%M:%SZ', 'now'))
);
"""

_DDL_KEYWORDS = """
CREATE TABLE IF NOT EXISTS keywords (
    keyword_id  INTEGER PRIMARY KEY AUTOINCREMENT,
    project_id  INTEGER NOT NULL REFERENCES projects(project_id) ON DELETE CASCADE,
    keyword     TEXT    NOT NULL,
    created_at  TEXT    NOT NULL DEFAULT (strftime('%Y-%m-%dT%H:%M:%SZ', 'now'))
);
"""

_DDL_KEYWORDS_INDEXES = """
CREATE INDEX IF NOT EXISTS idx_keywords_project
    ON keywords(project_id);
"""

_DDL_CHECKS = """
CREATE TABLE IF NOT EXISTS checks (
    check_id    INTEGER PRIMARY KEY AUTOINCREMENT,
    keyword_id  INTEGER NOT NULL REFERENCES keywords(keyword_id) ON DELETE CASCADE,
    engine      TEXT    NOT NULL,
    presence    INTEGER NOT NULL CHECK (presence IN (0, 1)),
    timestamp   TEXT    NOT NULL
);
"""

_DDL_CHECKS_INDEXES = """
CREATE INDEX IF NOT EXISTS idx_checks_keyword_time
    ON checks(keyword_id, timestamp);
"""

# ── Ordered list of all DDL to apply ──────────────────────────────────────────

_ALL_DDL: list[str] = [
    _DDL_PROJECTS,
    _DDL_KEYWORDS,
    _DDL_KEYWORDS_INDEXES,
    _DDL_CHECKS,
    _DDL_CHECKS_INDEXES,
]

# Table names for introspection / tests
ALL_TABLE_NAMES = [
    "projects",
    "keywords",
    "checks",
]


def apply_schema(conn: sqlite3.Connection) -> None:
    """Apply all DDL statements to ``conn``.

    Args:
        conn: An open ``sqlite3.Connection`` (FK enforcement should be ON).
    """
    logger.debug("Applying schema to database...")

    for ddl in _ALL_DDL:
        for statement in _split_ddl(ddl):
            conn.execute(statement)

    conn.commit()
    logger.info("Schema applied: %d tables, indexes created/verified.", len(ALL_TABLE_NAMES))


def _split_ddl(ddl: str) -> list[str]:
    """Split a multi-statement DDL block on semicolons."""
    return [s.strip() for s in ddl.split(";") if s.strip()]


def get_existing_tables(conn: sqlite3.Connection) -> list[str]:
    """Return table names present in the database (sorted, excluding SQLite internals)."""
    rows = conn.execute(
        "SELECT name FROM sqlite_master "
        "WHERE type='table' AND name NOT LIKE 'sqlite_%' ORDER BY name;"
    ).fetchall()
    return [row["name"] for row in rows]


def get_existing_indexes(conn: sqlite3.Connection) -> list[str]:
    """Return user-defined index names (sorted, excluding SQLite autoindexes)."""
    rows = conn.execute(
        "SELECT name FROM sqlite_master "
        "WHERE type='index' AND name NOT LIKE 'sqlite_%' ORDER BY name;"
    ).fetchall()
    return [row["name"] for row in rows]
