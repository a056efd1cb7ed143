"""
Shared pytest fixtures for the AEO tracker test suite.

Provides:
  - ``in_memory_db``: A fresh in-memory SQLite connection with the schema
    applied. Created anew for each test that requests it.
  - ``fixed_now``: A fixed UTC instant so window and seeding maths are stable.
  - ``make_check``: Factory for ``Check`` objects with sensible defaults.
  - Sample keyword / project objects.
"""

from __future__ import annotations

import sqlite3
from datetime import datetime, timedelta, timezone
from typing import Callable, Generator

import pytest

from aeo_tracker.config import AppConfig, LoggingConfig
from aeo_tracker.db.schema import apply_schema
from aeo_tracker.models.tracking import Check, Keyword, Project

ENGINES = ("ChatGPT", "Gemini", "Claude", "Perplexity")


# ── Database fixture ──────────────────────────────────────────────────────────

@pytest.fixture
def in_memory_db() -> Generator[sqlite3.Connection, None, None]:
    """Yield a fresh in-memory SQLite connection with the full schema applied.

    Foreign key enforcement is ON. Connection is closed after the test.
    """
    conn = sqlite3.connect(":memory:")
    conn.row_factory = sqlite3.Row
    conn.execute("PRAGMA foreign_keys = ON;")
    apply_schema(conn)
    yield conn
    conn.close()


# ── Time / config fixtures ────────────────────────────────────────────────────

@pytest.fixture
def fixed_now() -> datetime:
    """2026-03-15 12:00 UTC."""
    return datetime(2026, 3, 15, 12, 0, 0, tzinfo=timezone.utc)


@pytest.fixture
def app_config() -> AppConfig:
    """Default config with file logging disabled."""
    return AppConfig(logging=LoggingConfig(log_file=""))


# ── Sample domain object factories ────────────────────────────────────────────

@pytest.fixture
def make_check(fixed_now: datetime) -> Callable[..., Check]:
    """Factory: ``make_check(engine, presence, keyword_id=1, days_ago=0)``."""

    def _make(
        engine: str = "ChatGPT",
        presence: bool = True,
        keyword_id: int = 1,
        days_ago: int = 0,
    ) -> Check:
        return Check(
            keyword_id=keyword_id,
            engine=engine,
            presence=presence,
            timestamp=fixed_now - timedelta(days=days_ago),
        )

    return _make


@pytest.fixture
def sample_project() -> Project:
    return Project(domain="boat-lifestyle.com", brand="BoAt")


@pytest.fixture
def sample_keywords() -> list[Keyword]:
    """Three keywords in project 1 with ids 1..3."""
    return [
        Keyword(keyword_id=1, keyword="wireless headphones", project_id=1),
        Keyword(keyword_id=2, keyword="gaming earbuds", project_id=1),
        Keyword(keyword_id=3, keyword="bass earbuds", project_id=1),
    ]
