"""Tests for SQLite schema: idempotency, table/index creation, FK cascades."""

from __future__ import annotations

import sqlite3

import pytest

from aeo_tracker.db.schema import (
    ALL_TABLE_NAMES,
    apply_schema,
    get_existing_indexes,
    get_existing_tables,
)


class TestApplySchema:
    def test_all_tables_created(self, in_memory_db):
        tables = get_existing_tables(in_memory_db)
        for expected_table in ALL_TABLE_NAMES:
            assert expected_table in tables, (
                f"Expected table '{expected_table}' not found in database. "
                f"Found: {tables}"
            )

    def test_no_internal_tables_listed(self, in_memory_db):
        assert not any(t.startswith("sqlite_") for t in get_existing_tables(in_memory_db))

    def test_idempotent_double_apply(self, in_memory_db):
        """apply_schema() called twice must not raise errors."""
        apply_schema(in_memory_db)
        assert sorted(get_existing_tables(in_memory_db)) == sorted(ALL_TABLE_NAMES)

    def test_key_indexes_created(self, in_memory_db):
        indexes = get_existing_indexes(in_memory_db)
        assert "idx_keywords_project" in indexes
        assert "idx_checks_keyword_time" in indexes


class TestConstraints:
    def _seed_one(self, conn: sqlite3.Connection) -> None:
        conn.execute("INSERT INTO projects (domain, brand) VALUES ('a.com', 'A');")
        conn.execute("INSERT INTO keywords (project_id, keyword) VALUES (1, 'kw');")
        conn.execute(
            "INSERT INTO checks (keyword_id, engine, presence, timestamp) "
            "VALUES (1, 'ChatGPT', 1, '2026-03-15T12:00:00.000000Z');"
        )

    def test_fk_enforcement_is_on(self, in_memory_db):
        row = in_memory_db.execute("PRAGMA foreign_keys;").fetchone()
        assert row[0] == 1

    def test_keyword_requires_project(self, in_memory_db):
        with pytest.raises(sqlite3.IntegrityError):
            in_memory_db.execute("INSERT INTO keywords (project_id, keyword) VALUES (99, 'x');")

    def test_presence_must_be_boolean(self, in_memory_db):
        self._seed_one(in_memory_db)
        with pytest.raises(sqlite3.IntegrityError):
            in_memory_db.execute(
                "INSERT INTO checks (keyword_id, engine, presence, timestamp) "
                "VALUES (1, 'ChatGPT', 2, '2026-03-15T12:00:00.000000Z');"
            )

    def test_project_delete_cascades(self, in_memory_db):
        self._seed_one(in_memory_db)
        in_memory_db.execute("DELETE FROM projects;")
        assert in_memory_db.execute("SELECT COUNT(*) FROM keywords;").fetchone()[0] == 0
        assert in_memory_db.execute("SELECT COUNT(*) FROM checks;").fetchone()[0] == 0
