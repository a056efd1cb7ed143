"""
Tests for the Typer CLI (aeo_tracker/cli.py).

What we test
------------
  - init-db creates the three tables.
  - validate-config prints parsed values; a missing config exits 1.
  - seed-demo followed by report prints the dashboard.
  - report --json emits parseable JSON.
  - reseed-checks on an empty store exits 1 with the SeedError message.
  - export writes the dated report files.
"""

from __future__ import annotations

import json
import logging
from pathlib import Path

import pytest
from typer.testing import CliRunner

from aeo_tracker.cli import app

runner = CliRunner()


@pytest.fixture(autouse=True)
def _restore_root_logger():
    root = logging.getLogger()
    handlers, level = list(root.handlers), root.level
    yield
    root.handlers[:] = handlers
    root.setLevel(level)


@pytest.fixture
def config_file(tmp_path) -> Path:
    db_path = (tmp_path / "db" / "aeo.db").as_posix()
    path = tmp_path / "config.toml"
    path.write_text(
        f'[database]\ndb_path = "{db_path}"\n\n'
        '[logging]\nlevel = "WARNING"\nlog_file = ""\n',
        encoding="utf-8",
    )
    return path


def _invoke(*args: str):
    return runner.invoke(app, list(args))


class TestInitDb:
    def test_creates_tables(self, config_file):
        result = _invoke("init-db", "--config", str(config_file))
        assert result.exit_code == 0, result.output
        assert "checks, keywords, projects" in result.output
        assert "[OK] Database ready." in result.output


class TestValidateConfig:
    def test_valid(self, config_file):
        result = _invoke("validate-config", "--config", str(config_file), "--full")
        assert result.exit_code == 0, result.output
        assert "ChatGPT, Gemini, Claude, Perplexity" in result.output
        assert "[OK] Config valid." in result.output

    def test_missing_file(self, tmp_path):
        result = _invoke("validate-config", "--config", str(tmp_path / "missing.toml"))
        assert result.exit_code == 1
        assert "[ERROR]" in result.output


class TestSeedAndReport:
    def test_seed_then_report(self, config_file):
        seeded = _invoke("seed-demo", "--seed", "42", "--config", str(config_file))
        assert seeded.exit_code == 0, seeded.output
        assert "10 keyword(s), 560 check(s)" in seeded.output

        report = _invoke("report", "--config", str(config_file))
        assert report.exit_code == 0, report.output
        assert "=== AI Visibility Dashboard ===" in report.output
        assert "[RECOMMENDATIONS]" in report.output

    def test_report_json(self, config_file):
        _invoke("seed-demo", "--seed", "1", "--config", str(config_file))
        result = _invoke("report", "--json", "--config", str(config_file))
        assert result.exit_code == 0, result.output
        payload = json.loads(result.stdout)
        assert payload["status"] == "ready"
        assert payload["keyword_count"] == 10

    def test_report_empty_store(self, config_file):
        result = _invoke("report", "--config", str(config_file))
        assert result.exit_code == 0, result.output
        assert "seed-demo" in result.output

    def test_reseed_requires_projects(self, config_file):
        result = _invoke("reseed-checks", "--config", str(config_file))
        assert result.exit_code == 1
        assert "No projects found. Please add a website first." in result.output

    def test_reseed_after_seed(self, config_file):
        _invoke("seed-demo", "--seed", "1", "--config", str(config_file))
        result = _invoke("reseed-checks", "--seed", "2", "--config", str(config_file))
        assert result.exit_code == 0, result.output
        assert "deleted=560 inserted=560" in result.output


class TestExport:
    def test_writes_files(self, config_file, tmp_path):
        _invoke("seed-demo", "--seed", "3", "--config", str(config_file))
        out_dir = tmp_path / "reports"
        result = _invoke("export", "--output-dir", str(out_dir), "--config", str(config_file))
        assert result.exit_code == 0, result.output
        names = sorted(p.name.split("_")[0] for p in out_dir.iterdir())
        assert names == ["keywords", "trend", "visibility"]
