"""
Tests for aeo_tracker/reporting/export.py.

What we test
------------
dashboard_to_dict():
  - JSON-serialisable; carries status, aggregates and recommendations.
flatten_keyword_rows() / flatten_trend_rows():
  - One column per known engine, in engine order.
export_to_csv():
  - Header-only file for empty records with fieldnames.
write_dashboard_report():
  - Writes the three dated files and returns their paths.
"""

from __future__ import annotations

import csv
import json
import random
from datetime import date

import pytest

from aeo_tracker.reporting.export import (
    dashboard_to_dict,
    export_to_csv,
    flatten_keyword_rows,
    flatten_trend_rows,
    write_dashboard_report,
)
from aeo_tracker.services.dashboard import load_dashboard
from aeo_tracker.services.seeding import seed_demo_project


@pytest.fixture
def ready_state(in_memory_db, app_config, fixed_now):
    seed_demo_project(in_memory_db, app_config, rng=random.Random(42), now=fixed_now)
    return load_dashboard(in_memory_db, app_config, now=fixed_now)


@pytest.fixture
def empty_state(in_memory_db, app_config, fixed_now):
    return load_dashboard(in_memory_db, app_config, now=fixed_now)


class TestDashboardToDict:
    def test_json_round_trip(self, ready_state):
        payload = dashboard_to_dict(ready_state)
        decoded = json.loads(json.dumps(payload))
        assert decoded["status"] == "ready"
        assert decoded["observation_count"] == 560
        assert decoded["engines"] == ["ChatGPT", "Gemini", "Claude", "Perplexity"]
        assert len(decoded["trend"]) == 14
        assert len(decoded["keywords"]) == 10
        assert decoded["trend"][0]["day"] == "2026-03-02"
        assert all({"kind", "message"} == set(r) for r in decoded["recommendations"])

    def test_empty_state(self, empty_state):
        payload = dashboard_to_dict(empty_state)
        assert payload["status"] == "no_projects"
        assert payload["overall"] == 0.0
        assert payload["per_engine"] == {}
        assert payload["keywords"] == []


class TestFlatten:
    def test_keyword_rows(self, ready_state):
        rows = flatten_keyword_rows(ready_state.summary)
        assert len(rows) == 10
        assert list(rows[0]) == ["keyword", "overall", "checks", "ChatGPT", "Gemini", "Claude", "Perplexity"]
        assert rows[0]["checks"] == 56

    def test_trend_rows(self, ready_state):
        rows = flatten_trend_rows(ready_state.summary)
        assert [r["day"] for r in rows] == sorted(r["day"] for r in rows)
        assert list(rows[0])[:2] == ["day", "overall"]


class TestExportToCsv:
    def test_header_only_when_empty(self, tmp_path):
        path = export_to_csv([], tmp_path / "out.csv", fieldnames=["a", "b"])
        assert path.read_text(encoding="utf-8").strip() == "a,b"

    def test_empty_without_fieldnames(self, tmp_path):
        path = export_to_csv([], tmp_path / "sub" / "out.csv")
        assert path.read_text(encoding="utf-8") == ""

    def test_rows_written(self, tmp_path):
        path = export_to_csv([{"a": 1, "b": 2}, {"a": 3, "b": 4}], tmp_path / "out.csv")
        with path.open(encoding="utf-8") as f:
            assert list(csv.DictReader(f)) == [{"a": "1", "b": "2"}, {"a": "3", "b": "4"}]


class TestWriteDashboardReport:
    def test_writes_three_files(self, ready_state, tmp_path):
        paths = write_dashboard_report(ready_state, tmp_path)

        assert set(paths) == {"json", "keywords", "trend"}
        assert paths["json"].name == "visibility_2026-03-15.json"
        assert paths["keywords"].name == "keywords_2026-03-15.csv"
        assert paths["trend"].name == "trend_2026-03-15.csv"
        assert all(p.exists() for p in paths.values())

        with paths["keywords"].open(encoding="utf-8") as f:
            assert len(list(csv.DictReader(f))) == 10

    def test_run_date_override(self, empty_state, tmp_path):
        paths = write_dashboard_report(empty_state, tmp_path, run_date=date(2026, 1, 1))
        assert paths["trend"].name == "trend_2026-01-01.csv"
        assert paths["trend"].read_text(encoding="utf-8").startswith("day,overall,ChatGPT")
