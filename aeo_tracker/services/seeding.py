"""
Seeding service: write synthetic checks into the store.

Two entry points:

``reseed_checks``
    Regenerate checks for the keywords that already exist (all projects, or
    one). Existing checks for those keywords are deleted, then the fresh set
    is inserted in batches of ``seed.batch_size``.

``seed_demo_project``
    Replace every project with the configured demo project (domain, brand,
    keyword list), then generate its checks.

Both run against the caller's connection. Under ``get_connection()`` the
delete and all insert batches share one transaction, so a concurrent reseed
of the same store waits on the SQLite write lock instead of interleaving.
"""

from __future__ import annotations

import logging
import random
import sqlite3
from dataclasses import dataclass
from datetime import datetime
from typing import Optional

from aeo_tracker.config import AppConfig
from aeo_tracker.db.repositories.check_repo import CheckRepository
from aeo_tracker.db.repositories.project_repo import KeywordRepository, ProjectRepository
from aeo_tracker.models.tracking import Project
from aeo_tracker.seeding.generator import generate_checks

logger = logging.getLogger(__name__)


class SeedError(RuntimeError):
    """Raised when there is nothing to seed (no projects or no keywords)."""


@dataclass(frozen=True)
class SeedResult:
    """Outcome of a seeding run.

    Attributes:
        project_ids:   Projects whose keywords were seeded.
        keyword_count: Number of keywords seeded.
        deleted:       Checks removed before inserting.
        inserted:      Checks inserted.
    """

    project_ids: tuple[int, ...]
    keyword_count: int
    deleted: int
    inserted: int


def reseed_checks(
    conn: sqlite3.Connection,
    config: AppConfig,
    rng: Optional[random.Random] = None,
    now: Optional[datetime] = None,
    project_id: Optional[int] = None,
) -> SeedResult:
    """Replace the checks of existing keywords with a fresh synthetic set.

    Args:
        conn:       Open SQLite connection.
        config:     Application config (engines, seed settings).
        rng:        Random source; pass ``random.Random(seed)`` for
                    reproducible output.
        now:        Anchor instant for "today".
        project_id: Restrict to one project; all projects when ``None``.

    Returns:
        ``SeedResult``.

    Raises:
        SeedError: If there are no projects or the projects have no keywords.
    """
    repo = ProjectRepository(conn)
    if project_id is None:
        projects = repo.list_all()
    else:
        found = repo.get_by_id(project_id)
        projects = [found] if found is not None else []
    if not projects:
        raise SeedError("No projects found. Please add a website first.")

    project_ids = tuple(p.project_id for p in projects if p.project_id is not None)
    keywords = KeywordRepository(conn).list_for_projects(project_ids)
    if not keywords:
        raise SeedError("No keywords found. Please add keywords first.")

    keyword_ids = [kw.keyword_id for kw in keywords if kw.keyword_id is not None]
    return _replace_checks(conn, config, project_ids, keyword_ids, rng, now)


def seed_demo_project(
    conn: sqlite3.Connection,
    config: AppConfig,
    rng: Optional[random.Random] = None,
    now: Optional[datetime] = None,
) -> SeedResult:
    """Replace all projects with the demo project and seed its checks.

    Args:
        conn:   Open SQLite connection.
        config: Application config; ``config.seed`` supplies the demo
                domain, brand and keyword list.
        rng:    Random source.
        now:    Anchor instant for "today".

    Returns:
        ``SeedResult`` for the new demo project.
    """
    seed_cfg = config.seed
    projects = ProjectRepository(conn)
    removed = projects.delete_all()
    if removed:
        logger.info("Removed %d existing project(s) before demo seed.", removed)

    project_id = projects.insert(Project(domain=seed_cfg.demo_domain, brand=seed_cfg.demo_brand))
    keyword_ids = KeywordRepository(conn).insert_many(project_id, seed_cfg.demo_keywords)
    logger.info(
        "Demo project %s (%s) created with %d keyword(s).",
        seed_cfg.demo_domain, seed_cfg.demo_brand, len(keyword_ids),
    )
    return _replace_checks(conn, config, (project_id,), keyword_ids, rng, now)


def _replace_checks(
    conn: sqlite3.Connection,
    config: AppConfig,
    project_ids: tuple[int, ...],
    keyword_ids: list[int],
    rng: Optional[random.Random],
    now: Optional[datetime],
) -> SeedResult:
    seed_cfg = config.seed
    checks = generate_checks(
        keyword_ids,
        engines=config.engines.names,
        rng=rng,
        now=now,
        days=seed_cfg.days,
        absence_threshold=seed_cfg.absence_threshold,
    )

    repo = CheckRepository(conn)
    deleted = repo.delete_for_keywords(keyword_ids)
    inserted = repo.insert_batch(checks, max_batch_size=seed_cfg.batch_size)
    logger.info(
        "Seeded checks | projects=%s keywords=%d deleted=%d inserted=%d",
        list(project_ids), len(keyword_ids), deleted, inserted,
    )
    return SeedResult(
        project_ids=project_ids,
        keyword_count=len(keyword_ids),
        deleted=deleted,
        inserted=inserted,
    )
