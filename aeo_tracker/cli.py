"""
AEO Tracker CLI entry point.

All commands follow this pattern:
  1. Load ``AppConfig`` via ``load_config()``.
  2. Configure logging.
  3. Open the SQLite store (schema applied idempotently).
  4. Execute the action (seed, report, export).
  5. Report result to stdout.

Install and run::

    pip install -e .
    aeo-tracker --help
    aeo-tracker init-db
    aeo-tracker validate-config
    aeo-tracker seed-demo --seed 42
    aeo-tracker reseed-checks --project-id 1
    aeo-tracker report
    aeo-tracker export --output-dir data/outputs
"""

from __future__ import annotations

import json
import random
from pathlib import Path
from typing import Optional

import typer

app = typer.Typer(
    name="aeo-tracker",
    help="AI answer-engine visibility tracker: local-first dashboard CLI.",
    add_completion=False,
)


# ── Helpers ───────────────────────────────────────────────────────────────────

def _load_config_or_exit(config_path: Optional[str] = None):
    """Load AppConfig, printing a friendly error and exiting on failure."""
    from pydantic import ValidationError

    from aeo_tracker.config import load_config

    try:
        cfg_path = Path(config_path) if config_path else None
        return load_config(cfg_path)
    except FileNotFoundError as exc:
        typer.echo(f"[ERROR] {exc}", err=True)
        raise typer.Exit(code=1)
    except ValidationError as exc:
        typer.echo(f"[ERROR] Config validation failed: {exc}", err=True)
        raise typer.Exit(code=1)


def _configure_logging(config):
    from aeo_tracker.utils.logging import configure_logging
    configure_logging(config.logging)


def _open_store(config, db_path: Optional[str]):
    """Connection context for ``db_path`` (or the configured path)."""
    from aeo_tracker.db.connection import connect_from_config
    return connect_from_config(config.database, db_path)


def _rng(seed: Optional[int]) -> random.Random:
    return random.Random(seed) if seed is not None else random.Random()


# ── Options shared by every command ───────────────────────────────────────────

_DB_PATH_OPTION = typer.Option(None, "--db-path", help="Override DB path from config.")
_CONFIG_OPTION = typer.Option(None, "--config", help="Path to TOML config file.")


# ── Commands ──────────────────────────────────────────────────────────────────

@app.command("init-db")
def init_db(
    db_path: Optional[str] = _DB_PATH_OPTION,
    config_path: Optional[str] = _CONFIG_OPTION,
) -> None:
    """Initialize the SQLite database and apply the schema.

    Safe to run multiple times; all DDL uses IF NOT EXISTS.
    """
    from aeo_tracker.db.schema import apply_schema, get_existing_indexes, get_existing_tables

    config = _load_config_or_exit(config_path)
    _configure_logging(config)

    target_path = db_path or config.database.db_path
    typer.echo(f"Initializing database at: {target_path}")

    with _open_store(config, db_path) as conn:
        apply_schema(conn)
        tables = get_existing_tables(conn)
        indexes = get_existing_indexes(conn)

    typer.echo(f"  Tables:  {', '.join(tables)}")
    typer.echo(f"  Indexes: {len(indexes)} created/verified.")
    typer.echo("[OK] Database ready.")


@app.command("validate-config")
def validate_config(
    config_path: Optional[str] = _CONFIG_OPTION,
    show_full: bool = typer.Option(False, "--full", help="Print full config as JSON."),
) -> None:
    """Validate the configuration file and print parsed values."""
    config = _load_config_or_exit(config_path)

    typer.echo("Configuration validated successfully.")
    typer.echo("")
    typer.echo(f"  Database path:   {config.database.db_path}")
    typer.echo(f"  Engines:         {', '.join(config.engines.names)}")
    typer.echo(f"  Window:          {config.window.window_days} days "
               f"(limit {config.window.observation_limit} checks)")
    typer.echo(f"  Demo project:    {config.seed.demo_domain} ({config.seed.demo_brand})")
    typer.echo(f"  Log level:       {config.logging.level}")
    typer.echo(f"  Debug mode:      {config.debug}")

    if show_full:
        typer.echo("")
        typer.echo("Full config (JSON):")
        typer.echo(json.dumps(config.model_dump(), indent=2, default=str))

    typer.echo("")
    typer.echo("[OK] Config valid.")


@app.command("seed-demo")
def seed_demo(
    seed: Optional[int] = typer.Option(None, "--seed", help="Random seed for reproducible data."),
    db_path: Optional[str] = _DB_PATH_OPTION,
    config_path: Optional[str] = _CONFIG_OPTION,
) -> None:
    """Replace all projects with the demo project and generate 14 days of checks."""
    from aeo_tracker.db.schema import apply_schema
    from aeo_tracker.services.seeding import seed_demo_project

    config = _load_config_or_exit(config_path)
    _configure_logging(config)

    with _open_store(config, db_path) as conn:
        apply_schema(conn)
        result = seed_demo_project(conn, config, rng=_rng(seed))

    typer.echo(
        f"  Demo project {config.seed.demo_domain}: "
        f"{result.keyword_count} keyword(s), {result.inserted} check(s)."
    )
    typer.echo("[OK] Demo data seeded.")


@app.command("reseed-checks")
def reseed_checks_cmd(
    project_id: Optional[int] = typer.Option(
        None, "--project-id", help="Only reseed this project (default: all projects)."
    ),
    seed: Optional[int] = typer.Option(None, "--seed", help="Random seed for reproducible data."),
    db_path: Optional[str] = _DB_PATH_OPTION,
    config_path: Optional[str] = _CONFIG_OPTION,
) -> None:
    """Regenerate synthetic checks for existing keywords (replaces old checks)."""
    from aeo_tracker.db.schema import apply_schema
    from aeo_tracker.services.seeding import SeedError, reseed_checks

    config = _load_config_or_exit(config_path)
    _configure_logging(config)

    try:
        with _open_store(config, db_path) as conn:
            apply_schema(conn)
            result = reseed_checks(conn, config, rng=_rng(seed), project_id=project_id)
    except SeedError as exc:
        typer.echo(f"[ERROR] {exc}", err=True)
        raise typer.Exit(code=1)

    typer.echo(
        f"  Projects {list(result.project_ids)}: {result.keyword_count} keyword(s) | "
        f"deleted={result.deleted} inserted={result.inserted}"
    )
    typer.echo("[OK] Checks regenerated.")


@app.command("report")
def report(
    project_id: Optional[list[int]] = typer.Option(
        None, "--project-id", help="Project to include. Repeatable; all projects if omitted."
    ),
    as_json: bool = typer.Option(False, "--json", help="Print the report as JSON."),
    db_path: Optional[str] = _DB_PATH_OPTION,
    config_path: Optional[str] = _CONFIG_OPTION,
) -> None:
    """Print visibility aggregates and recommendations for the trailing window."""
    from aeo_tracker.db.schema import apply_schema
    from aeo_tracker.reporting.export import dashboard_to_dict
    from aeo_tracker.reporting.formatters import format_dashboard
    from aeo_tracker.services.dashboard import StoreFetchError, load_dashboard

    config = _load_config_or_exit(config_path)
    _configure_logging(config)

    try:
        with _open_store(config, db_path) as conn:
            apply_schema(conn)
            state = load_dashboard(conn, config, project_ids=project_id or None)
    except StoreFetchError as exc:
        typer.echo(f"[ERROR] {exc}", err=True)
        raise typer.Exit(code=1)

    if as_json:
        typer.echo(json.dumps(dashboard_to_dict(state), indent=2))
    else:
        typer.echo(format_dashboard(state))


@app.command("export")
def export(
    output_dir: Optional[str] = typer.Option(
        None, "--output-dir", help="Directory for report files (default: config output.export_dir)."
    ),
    project_id: Optional[list[int]] = typer.Option(
        None, "--project-id", help="Project to include. Repeatable; all projects if omitted."
    ),
    db_path: Optional[str] = _DB_PATH_OPTION,
    config_path: Optional[str] = _CONFIG_OPTION,
) -> None:
    """Write the visibility report as JSON plus keyword/trend CSVs."""
    from aeo_tracker.db.schema import apply_schema
    from aeo_tracker.reporting.export import write_dashboard_report
    from aeo_tracker.services.dashboard import StoreFetchError, load_dashboard

    config = _load_config_or_exit(config_path)
    _configure_logging(config)

    try:
        with _open_store(config, db_path) as conn:
            apply_schema(conn)
            state = load_dashboard(conn, config, project_ids=project_id or None)
    except StoreFetchError as exc:
        typer.echo(f"[ERROR] {exc}", err=True)
        raise typer.Exit(code=1)

    target = Path(output_dir or config.output.export_dir)
    paths = write_dashboard_report(state, target)
    for kind, path in paths.items():
        typer.echo(f"  {kind:<8} {path}")
    typer.echo("[OK] Report exported.")


# ── Entry point ───────────────────────────────────────────────────────────────

if __name__ == "__main__":
    app()
