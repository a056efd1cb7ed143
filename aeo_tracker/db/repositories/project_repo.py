"""
Repositories for projects and their keywords.
"""

from __future__ import annotations

import logging
import sqlite3
from typing import Iterable, Optional

from aeo_tracker.db.repositories.base import BaseRepository, placeholders
from aeo_tracker.models.tracking import Keyword, Project

logger = logging.getLogger(__name__)


class ProjectRepository(BaseRepository):
    """Read/write access to the ``projects`` table."""

    def insert(self, project: Project) -> int:
        """Insert a new project.

        Args:
            project: The ``Project`` to persist.

        Returns:
            The newly assigned ``project_id``.
        """
        self.execute(
            "INSERT INTO projects (domain, brand) VALUES (?, ?);",
            (project.domain, project.brand),
        )
        return self.last_insert_rowid()

    def get_by_id(self, project_id: int) -> Optional[Project]:
        row = self.fetchone("SELECT * FROM projects WHERE project_id = ?;", (project_id,))
        return _row_to_project(row) if row else None

    def list_all(self) -> list[Project]:
        """All projects ordered by ``project_id``."""
        rows = self.fetchall("SELECT * FROM projects ORDER BY project_id;")
        return [_row_to_project(r) for r in rows]

    def delete_all(self) -> int:
        """Delete every project; keywords and checks cascade.

        Returns:
            Number of projects deleted.
        """
        cursor = self.execute("DELETE FROM projects;")
        logger.info("Deleted %d project(s).", cursor.rowcount)
        return cursor.rowcount


class KeywordRepository(BaseRepository):
    """Read/write access to the ``keywords`` table."""

    def insert(self, keyword: Keyword) -> int:
        """Insert a keyword and return its ``keyword_id``.

        Duplicate keyword text within a project is allowed.
        """
        self.execute(
            "INSERT INTO keywords (project_id, keyword) VALUES (?, ?);",
            (keyword.project_id, keyword.keyword),
        )
        return self.last_insert_rowid()

    def insert_many(self, project_id: int, phrases: Iterable[str]) -> list[int]:
        """Insert one keyword per phrase for ``project_id``.

        Returns:
            The new ``keyword_id`` values in input order.
        """
        return [self.insert(Keyword(keyword=p, project_id=project_id)) for p in phrases]

    def list_for_projects(self, project_ids: Iterable[int]) -> list[Keyword]:
        """Keywords belonging to any of ``project_ids``, ordered by ``keyword_id``.

        Args:
            project_ids: Project ids in scope. Empty → empty list.

        Returns:
            List of ``Keyword`` objects.
        """
        ids = list(project_ids)
        if not ids:
            return []
        rows = self.fetchall(
            f"""
            SELECT * FROM keywords
            WHERE project_id IN ({placeholders(ids)})
            ORDER BY keyword_id;
            """,
            tuple(ids),
        )
        return [_row_to_keyword(r) for r in rows]


# ── Row mappers ───────────────────────────────────────────────────────────────

def _row_to_project(row: sqlite3.Row) -> Project:
    return Project(
        project_id=row["project_id"],
        domain=row["domain"],
        brand=row["brand"],
    )


def _row_to_keyword(row: sqlite3.Row) -> Keyword:
    return Keyword(
        keyword_id=row["keyword_id"],
        keyword=row["keyword"],
        project_id=row["project_id"],
    )
