"""
Export helpers for the dashboard state.

``dashboard_to_dict()`` turns a ``DashboardState`` into a JSON-ready dict.
``flatten_keyword_rows()`` / ``flatten_trend_rows()`` produce flat rows (one
column per engine) that load directly in Excel or pandas.

All writers create parent directories and return the written ``Path``.
"""

from __future__ import annotations

import csv
import json
import logging
from datetime import date
from pathlib import Path

from aeo_tracker.services.dashboard import DashboardState
from aeo_tracker.visibility.aggregator import VisibilitySummary

logger = logging.getLogger(__name__)


def dashboard_to_dict(state: DashboardState) -> dict:
    """Serialise a ``DashboardState`` to plain JSON types."""
    summary = state.summary
    return {
        "status":            str(state.status),
        "generated_at":      state.generated_at.isoformat(),
        "window_start":      state.window_start.isoformat(),
        "project_ids":       list(state.project_ids),
        "keyword_count":     state.keyword_count,
        "observation_count": summary.observation_count,
        "engines":           list(summary.engines),
        "overall":           summary.overall,
        "per_engine":        dict(summary.per_engine),
        "trend": [
            {"day": row.day.isoformat(), "overall": row.overall, "per_engine": dict(row.per_engine)}
            for row in summary.trend
        ],
        "keywords": [
            {
                "keyword":    row.keyword,
                "overall":    row.overall,
                "per_engine": dict(row.per_engine),
                "checks":     row.checks,
            }
            for row in summary.keywords
        ],
        "recommendations": [
            {"kind": str(rec.kind), "message": rec.message}
            for rec in state.recommendations
        ],
    }


def flatten_keyword_rows(summary: VisibilitySummary) -> list[dict]:
    """One flat row per keyword: ``keyword, overall, checks, <engine>...``."""
    return [
        {
            "keyword": row.keyword,
            "overall": row.overall,
            "checks":  row.checks,
            **{engine: row.per_engine.get(engine, 0.0) for engine in summary.engines},
        }
        for row in summary.keywords
    ]


def flatten_trend_rows(summary: VisibilitySummary) -> list[dict]:
    """One flat row per day: ``day, overall, <engine>...``."""
    return [
        {
            "day":     row.day.isoformat(),
            "overall": row.overall,
            **{engine: row.per_engine.get(engine, 0.0) for engine in summary.engines},
        }
        for row in summary.trend
    ]


def export_to_csv(
    records: list[dict],
    path: Path,
    fieldnames: list[str] | None = None,
) -> Path:
    """Write ``records`` to a UTF-8 CSV file.

    Args:
        records:    List of row dicts.
        path:       Destination file path (parent dirs created if missing).
        fieldnames: Column order.  If None, uses the keys of the first record.

    Returns:
        ``path`` as written.
    """
    path.parent.mkdir(parents=True, exist_ok=True)
    if not records and not fieldnames:
        path.write_text("", encoding="utf-8")
        return path
    cols = fieldnames or list(records[0].keys())
    with path.open("w", newline="", encoding="utf-8") as f:
        writer = csv.DictWriter(f, fieldnames=cols, extrasaction="ignore")
        writer.writeheader()
        writer.writerows(records)
    return path


def export_to_json(data: dict | list, path: Path) -> Path:
    """Write ``data`` to a pretty-printed JSON file."""
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(json.dumps(data, indent=2, default=str), encoding="utf-8")
    return path


def write_dashboard_report(
    state: DashboardState,
    output_dir: Path,
    run_date: date | None = None,
) -> dict[str, Path]:
    """Write the JSON report plus keyword and trend CSVs.

    Files (``{date}`` = ``run_date`` or the state's generation day)::

        visibility_{date}.json
        keywords_{date}.csv
        trend_{date}.csv

    Returns:
        ``{"json": ..., "keywords": ..., "trend": ...}`` paths.
    """
    label = (run_date or state.generated_at.date()).isoformat()
    engines = list(state.summary.engines)

    paths = {
        "json": export_to_json(dashboard_to_dict(state), output_dir / f"visibility_{label}.json"),
        "keywords": export_to_csv(
            flatten_keyword_rows(state.summary),
            output_dir / f"keywords_{label}.csv",
            fieldnames=["keyword", "overall", "checks", *engines],
        ),
        "trend": export_to_csv(
            flatten_trend_rows(state.summary),
            output_dir / f"trend_{label}.csv",
            fieldnames=["day", "overall", *engines],
        ),
    }
    logger.info("Dashboard report written to %s (%d files).", output_dir, len(paths))
    return paths
