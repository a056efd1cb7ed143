"""
SQLite connection management for the check store.

``get_connection()`` is a context manager that:
  - Enables foreign key enforcement so deleting a project cascades to its
    keywords and their checks.
  - Enables WAL journal mode so the dashboard can read while a reseed writes.
  - Sets a busy timeout; a second reseed of the same store waits for the
    first one's transaction instead of interleaving with it.
  - Uses ``sqlite3.Row`` factory so rows behave like dicts.
  - Commits on clean exit, rolls back on exception.

Usage::

    from aeo_tracker.db.connection import get_connection

    with get_connection("data/db/aeo_tracker.db") as conn:
        CheckRepository(conn).count()

    with connect_from_config(config.database) as conn:
        ...
"""

from __future__ import annotations

import logging
import sqlite3
from contextlib import contextmanager
from pathlib import Path
from typing import TYPE_CHECKING, Generator

if TYPE_CHECKING:
    from aeo_tracker.config import DatabaseConfig

logger = logging.getLogger(__name__)


@contextmanager
def get_connection(
    db_path: str,
    wal_mode: bool = True,
    busy_timeout_ms: int = 5000,
) -> Generator[sqlite3.Connection, None, None]:
    """Context manager yielding a configured SQLite connection.

    The database file (and any parent directories) are created if missing.

    Args:
        db_path: Path to the SQLite database file, or ``":memory:"``.
        wal_mode: If ``True``, enable WAL journal mode.
        busy_timeout_ms: Milliseconds to wait on a locked database before
            raising ``OperationalError``.

    Yields:
        An open, configured ``sqlite3.Connection``.

    Raises:
        sqlite3.OperationalError: If the database cannot be opened or is locked.
    """
    if db_path != ":memory:":
        Path(db_path).parent.mkdir(parents=True, exist_ok=True)

    logger.debug("Opening SQLite connection: %s", db_path)
    conn = sqlite3.connect(db_path, timeout=busy_timeout_ms / 1000)
    conn.row_factory = sqlite3.Row

    try:
        conn.execute("PRAGMA foreign_keys = ON;")
        conn.execute(f"PRAGMA busy_timeout = {busy_timeout_ms};")
        if wal_mode and db_path != ":memory:":
            conn.execute("PRAGMA journal_mode = WAL;")

        yield conn
        conn.commit()

    except Exception:
        conn.rollback()
        raise

    finally:
        conn.close()


def connect_from_config(
    database: "DatabaseConfig",
    db_path: str | None = None,
):
    """``get_connection()`` using the settings of a ``DatabaseConfig``.

    Args:
        database: Database section of ``AppConfig``.
        db_path: Optional override of ``database.db_path``.
    """
    return get_connection(
        db_path or database.db_path,
        wal_mode=database.wal_mode,
        busy_timeout_ms=database.busy_timeout_ms,
    )
