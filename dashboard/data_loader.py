"""
Dashboard data loader.

Reads the SQLite store through ``load_dashboard()`` and reshapes the
aggregates into pandas frames for Streamlit widgets. Nothing here imports
Streamlit, so the frame builders are unit-testable; ``app.py`` wraps
``load_state`` in ``st.cache_data``.
"""

from __future__ import annotations

import random
from typing import Optional

import pandas as pd

from aeo_tracker.config import AppConfig
from aeo_tracker.db.connection import connect_from_config
from aeo_tracker.db.schema import apply_schema
from aeo_tracker.services.dashboard import DashboardState, load_dashboard
from aeo_tracker.services.seeding import SeedResult, reseed_checks, seed_demo_project
from aeo_tracker.visibility.aggregator import VisibilitySummary


def load_state(config: AppConfig, project_ids: Optional[tuple[int, ...]] = None) -> DashboardState:
    """Open the configured store and compute the dashboard state."""
    with connect_from_config(config.database) as conn:
        apply_schema(conn)
        return load_dashboard(conn, config, project_ids=project_ids)


def run_seed(config: AppConfig, demo: bool, seed: Optional[int] = None) -> SeedResult:
    """Seed the demo project (``demo=True``) or regenerate existing checks."""
    rng = random.Random(seed) if seed is not None else random.Random()
    with connect_from_config(config.database) as conn:
        apply_schema(conn)
        if demo:
            return seed_demo_project(conn, config, rng=rng)
        return reseed_checks(conn, config, rng=rng)


def engine_frame(summary: VisibilitySummary) -> pd.DataFrame:
    """One row per engine with checks: ``engine``, ``visibility``."""
    return pd.DataFrame(
        [{"engine": e, "visibility": pct} for e, pct in summary.per_engine.items()],
        columns=["engine", "visibility"],
    )


def trend_frame(summary: VisibilitySummary) -> pd.DataFrame:
    """Daily trend indexed by day; columns ``overall`` then one per engine."""
    columns = ["overall", *summary.engines]
    if not summary.trend:
        return pd.DataFrame(columns=columns, index=pd.DatetimeIndex([], name="day"))
    frame = pd.DataFrame(
        [{"day": row.day, "overall": row.overall, **row.per_engine} for row in summary.trend]
    )
    frame["day"] = pd.to_datetime(frame["day"])
    return frame.set_index("day")[columns]


def keyword_frame(summary: VisibilitySummary) -> pd.DataFrame:
    """Per-keyword breakdown in report order (overall descending)."""
    columns = ["keyword", "overall", *summary.engines, "checks"]
    return pd.DataFrame(
        [
            {"keyword": row.keyword, "overall": row.overall, **row.per_engine, "checks": row.checks}
            for row in summary.keywords
        ],
        columns=columns,
    )
