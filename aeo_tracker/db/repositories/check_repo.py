"""
Repository for presence checks.

``list_observations`` caps its result at ``limit`` rows, newest first. When
the cap is hit, older checks in the window are silently left out of the
aggregate; the repository logs a warning so the truncation is visible.
"""

from __future__ import annotations

import logging
import sqlite3
from datetime import datetime
from typing import Iterable, Sequence

from aeo_tracker.db.repositories.base import BaseRepository, placeholders
from aeo_tracker.models.tracking import Check
from aeo_tracker.utils.time_utils import as_utc

logger = logging.getLogger(__name__)

DEFAULT_OBSERVATION_LIMIT = 20000
DEFAULT_INSERT_BATCH_SIZE = 500

_INSERT_SQL = """
INSERT INTO checks (keyword_id, engine, presence, timestamp)
VALUES (?, ?, ?, ?);
"""


class CheckRepository(BaseRepository):
    """Read/write access to the ``checks`` table."""

    def list_observations(
        self,
        keyword_ids: Iterable[int],
        since: datetime,
        limit: int = DEFAULT_OBSERVATION_LIMIT,
    ) -> list[Check]:
        """Checks for ``keyword_ids`` with ``timestamp >= since``.

        Args:
            keyword_ids: Keywords in scope. Empty → empty list.
            since:       Inclusive lower bound of the window.
            limit:       Maximum rows returned (newest kept).

        Returns:
            List of ``Check`` objects.
        """
        ids = list(keyword_ids)
        if not ids:
            return []
        rows = self.fetchall(
            f"""
            SELECT * FROM checks
            WHERE keyword_id IN ({placeholders(ids)})
              AND timestamp >= ?
            ORDER BY timestamp DESC, check_id DESC
            LIMIT ?;
            """,
            (*ids, to_db_timestamp(since), limit),
        )
        if len(rows) >= limit:
            logger.warning(
                "Observation query hit the %d-row limit; older checks in the window were dropped.",
                limit,
            )
        return [_row_to_check(r) for r in rows]

    def delete_for_keywords(self, keyword_ids: Iterable[int]) -> int:
        """Delete every check for ``keyword_ids``.

        Returns:
            Number of rows deleted.
        """
        ids = list(keyword_ids)
        if not ids:
            return 0
        cursor = self.execute(
            f"DELETE FROM checks WHERE keyword_id IN ({placeholders(ids)});",
            tuple(ids),
        )
        return cursor.rowcount

    def insert_batch(
        self,
        checks: Sequence[Check],
        max_batch_size: int = DEFAULT_INSERT_BATCH_SIZE,
    ) -> int:
        """Insert ``checks`` in chunks of at most ``max_batch_size`` rows.

        Args:
            checks:         Checks to persist.
            max_batch_size: Rows per ``executemany`` call; must be >= 1.

        Returns:
            Number of rows inserted.

        Raises:
            ValueError: If ``max_batch_size < 1``.
        """
        if max_batch_size < 1:
            raise ValueError(f"max_batch_size must be >= 1, got {max_batch_size}.")
        for start in range(0, len(checks), max_batch_size):
            batch = checks[start:start + max_batch_size]
            self.executemany(
                _INSERT_SQL,
                [
                    (c.keyword_id, c.engine, int(c.presence), to_db_timestamp(c.timestamp))
                    for c in batch
                ],
            )
        return len(checks)

    def count(self) -> int:
        row = self.fetchone("SELECT COUNT(*) AS n FROM checks;")
        return int(row["n"]) if row else 0


def to_db_timestamp(moment: datetime) -> str:
    """Fixed-width UTC string; lexical order equals chronological order."""
    return as_utc(moment).strftime("%Y-%m-%dT%H:%M:%S.%fZ")


def _row_to_check(row: sqlite3.Row) -> Check:
    return Check(
        check_id=row["check_id"],
        keyword_id=row["keyword_id"],
        engine=row["engine"],
        presence=bool(row["presence"]),
        timestamp=datetime.fromisoformat(row["timestamp"]),
    )
