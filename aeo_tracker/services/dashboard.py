"""
Dashboard service: fetch the check window and compute every aggregate.

Flow
----
  1. Projects in scope (all projects, or the requested ids).
  2. Keywords for those projects.
  3. Checks for those keywords with ``timestamp >= now - window_days``
     (capped at ``window.observation_limit`` rows).
  4. ``aggregate_visibility()`` → ``build_recommendations()``.

Empty scopes are not errors: each returns an empty ``VisibilitySummary`` and
a ``DashboardStatus`` saying which level was empty. A failing store query
raises ``StoreFetchError`` before any aggregation runs, so partial data is
never presented as "no data".
"""

from __future__ import annotations

import logging
import sqlite3
from dataclasses import dataclass
from datetime import datetime
from enum import StrEnum
from typing import Callable, Iterable, Optional, TypeVar

from aeo_tracker.config import AppConfig
from aeo_tracker.db.repositories.check_repo import CheckRepository
from aeo_tracker.db.repositories.project_repo import KeywordRepository, ProjectRepository
from aeo_tracker.recommendations.alerts import Recommendation, recommend_for_summary
from aeo_tracker.utils.time_utils import as_utc, utcnow, window_start
from aeo_tracker.visibility.aggregator import VisibilitySummary, aggregate_visibility

logger = logging.getLogger(__name__)

T = TypeVar("T")


class StoreFetchError(RuntimeError):
    """Raised when the check store cannot answer a dashboard query.

    Attributes:
        resource: Which fetch failed (``"projects"``, ``"keywords"``, ``"checks"``).
    """

    def __init__(self, resource: str, cause: Exception) -> None:
        self.resource = resource
        super().__init__(f"Failed to load {resource}: {cause}")


class DashboardStatus(StrEnum):
    """Why a dashboard state has (or lacks) data."""

    READY = "ready"
    NO_PROJECTS = "no_projects"
    NO_KEYWORDS = "no_keywords"
    NO_OBSERVATIONS = "no_observations"


@dataclass(frozen=True)
class DashboardState:
    """Everything the presentation layer needs for one render.

    Attributes:
        status:          READY or the level at which the scope was empty.
        summary:         Aggregates (empty summary unless READY).
        recommendations: Capped, ordered alerts.
        project_ids:     Projects in scope.
        keyword_count:   Keywords in scope.
        window_start:    Inclusive lower bound of the check window.
        generated_at:    Reference instant used for the window.
    """

    status: DashboardStatus
    summary: VisibilitySummary
    recommendations: tuple[Recommendation, ...]
    project_ids: tuple[int, ...]
    keyword_count: int
    window_start: datetime
    generated_at: datetime


def load_dashboard(
    conn: sqlite3.Connection,
    config: AppConfig,
    project_ids: Optional[Iterable[int]] = None,
    now: Optional[datetime] = None,
) -> DashboardState:
    """Load the trailing window for ``project_ids`` and aggregate it.

    Args:
        conn:        Open SQLite connection.
        config:      Application config (engines, window, thresholds).
        project_ids: Projects to include; all projects when ``None``.
        now:         Window end; defaults to ``utcnow()``.

    Returns:
        ``DashboardState``.

    Raises:
        StoreFetchError: If any store query fails.
    """
    generated_at = as_utc(now) if now is not None else utcnow()
    since = window_start(generated_at, config.window.window_days)
    engines = config.engines.names

    def _state(
        status: DashboardStatus,
        scope: tuple[int, ...] = (),
        keyword_count: int = 0,
        summary: Optional[VisibilitySummary] = None,
    ) -> DashboardState:
        summary = summary or VisibilitySummary.empty(engines)
        return DashboardState(
            status=status,
            summary=summary,
            recommendations=tuple(recommend_for_summary(summary, config.recommendations)),
            project_ids=scope,
            keyword_count=keyword_count,
            window_start=since,
            generated_at=generated_at,
        )

    wanted = set(project_ids) if project_ids is not None else None
    projects = _fetch("projects", ProjectRepository(conn).list_all)
    scope = tuple(
        p.project_id for p in projects
        if p.project_id is not None and (wanted is None or p.project_id in wanted)
    )
    if not scope:
        logger.info("Dashboard: no projects in scope.")
        return _state(DashboardStatus.NO_PROJECTS)

    keywords = _fetch("keywords", lambda: KeywordRepository(conn).list_for_projects(scope))
    if not keywords:
        logger.info("Dashboard: no keywords for projects %s.", list(scope))
        return _state(DashboardStatus.NO_KEYWORDS, scope)

    checks = _fetch(
        "checks",
        lambda: CheckRepository(conn).list_observations(
            [kw.keyword_id for kw in keywords if kw.keyword_id is not None],
            since=since,
            limit=config.window.observation_limit,
        ),
    )
    if not checks:
        logger.info("Dashboard: no checks since %s.", since.isoformat())
        return _state(DashboardStatus.NO_OBSERVATIONS, scope, len(keywords))

    summary = aggregate_visibility(keywords, checks, engines)
    logger.info(
        "Dashboard: %d checks over %d keyword(s) | overall=%.1f%%",
        summary.observation_count, len(keywords), summary.overall,
    )
    return _state(DashboardStatus.READY, scope, len(keywords), summary)


def _fetch(resource: str, query: Callable[[], T]) -> T:
    try:
        return query()
    except sqlite3.Error as exc:
        logger.error("Store query for %s failed: %s", resource, exc)
        raise StoreFetchError(resource, exc) from exc
