"""
Application configuration management.

Load order (each layer overrides the previous):
  1. ``config/default.toml``     : committed static defaults
  2. ``config/local.toml``       : optional local overrides (gitignored)
  3. ``.env``                    : local secrets and env overrides (gitignored)
  4. Environment variables       : ``AEO_TRACKER_*`` prefix

Entry point: ``load_config(config_path=None) -> AppConfig``

All services and CLI commands receive an ``AppConfig`` instance,
never raw dicts or individual env var lookups scattered through the codebase.
"""

from __future__ import annotations

import os
import tomllib
from pathlib import Path
from typing import Any, Optional

from dotenv import load_dotenv
from pydantic import BaseModel, ConfigDict, field_validator, model_validator

from aeo_tracker.taxonomy.engine_taxonomy import DEFAULT_ENGINES

# ── Sub-config models ─────────────────────────────────────────────────────────


class DatabaseConfig(BaseModel):
    """SQLite database connection settings."""

    model_config = ConfigDict(frozen=True)

    db_path: str = "data/db/aeo_tracker.db"
    wal_mode: bool = True
    busy_timeout_ms: int = 5000


class EnginesConfig(BaseModel):
    """The AI answer engines being monitored.

    Order matters: it is the column order of every per-engine breakdown.
    """

    model_config = ConfigDict(frozen=True)

    names: list[str] = [str(e) for e in DEFAULT_ENGINES]

    @field_validator("names")
    @classmethod
    def validate_names(cls, v: list[str]) -> list[str]:
        cleaned = [name.strip() for name in v]
        if not cleaned or any(not name for name in cleaned):
            raise ValueError("engines.names must be a non-empty list of non-blank names.")
        if len(set(cleaned)) != len(cleaned):
            raise ValueError(f"engines.names contains duplicates: {cleaned}.")
        return cleaned


class WindowConfig(BaseModel):
    """Trailing observation window used by the dashboard."""

    model_config = ConfigDict(frozen=True)

    window_days: int = 14
    observation_limit: int = 20000

    @field_validator("window_days", "observation_limit")
    @classmethod
    def validate_positive(cls, v: int) -> int:
        if v < 1:
            raise ValueError(f"Window settings must be >= 1, got {v}.")
        return v


class SeedConfig(BaseModel):
    """Synthetic check generation and demo project settings."""

    model_config = ConfigDict(frozen=True)

    days: int = 14
    absence_threshold: float = 0.25
    batch_size: int = 500
    demo_domain: str = "boat-lifestyle.com"
    demo_brand: str = "BoAt"
    demo_keywords: list[str] = [
        "best earbuds under 2000",
        "bluetooth speakers",
        "wireless headphones",
        "neckband earphones",
        "gaming earbuds",
        "anc earbuds",
        "cheap earbuds",
        "sports earphones",
        "budget headphones",
        "bass earbuds",
    ]

    @field_validator("absence_threshold")
    @classmethod
    def validate_threshold(cls, v: float) -> float:
        if not 0.0 <= v <= 1.0:
            raise ValueError(f"absence_threshold must be in [0.0, 1.0], got {v}.")
        return v

    @field_validator("days", "batch_size")
    @classmethod
    def validate_positive(cls, v: int) -> int:
        if v < 1:
            raise ValueError(f"Seed settings must be >= 1, got {v}.")
        return v


class RecommendationConfig(BaseModel):
    """Thresholds for the rule-based recommendation list."""

    model_config = ConfigDict(frozen=True)

    weak_threshold_pct: float = 50.0
    max_weak_keywords: int = 3
    critical_zero_engines: int = 2
    healthy_mean_pct: float = 70.0
    urgent_mean_pct: float = 40.0
    max_items: int = 5

    @field_validator("max_items", "max_weak_keywords")
    @classmethod
    def validate_non_negative(cls, v: int) -> int:
        if v < 0:
            raise ValueError(f"Recommendation limits must be >= 0, got {v}.")
        return v

    @field_validator("critical_zero_engines")
    @classmethod
    def validate_critical_zero_engines(cls, v: int) -> int:
        if v < 1:
            raise ValueError(f"critical_zero_engines must be >= 1, got {v}.")
        return v

    @model_validator(mode="after")
    def validate_health_band(self) -> "RecommendationConfig":
        if self.urgent_mean_pct > self.healthy_mean_pct:
            raise ValueError(
                "urgent_mean_pct must not exceed healthy_mean_pct "
                f"({self.urgent_mean_pct} > {self.healthy_mean_pct})."
            )
        return self


class OutputConfig(BaseModel):
    """Filesystem locations for exported reports."""

    model_config = ConfigDict(frozen=True)

    export_dir: str = "data/outputs"


class LoggingConfig(BaseModel):
    """Logging output settings."""

    model_config = ConfigDict(frozen=True)

    level: str = "INFO"
    log_file: str = "data/logs/aeo_tracker.log"
    json_format: bool = False

    @field_validator("level")
    @classmethod
    def validate_level(cls, v: str) -> str:
        valid = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}
        if v.upper() not in valid:
            raise ValueError(f"Log level must be one of {sorted(valid)}, got '{v}'.")
        return v.upper()


class AppConfig(BaseModel):
    """Complete application configuration, the single source of truth.

    Constructed by ``load_config()`` which merges TOML + .env. Tests build it
    directly (``AppConfig()`` gives the committed defaults).
    """

    model_config = ConfigDict(frozen=True)

    database: DatabaseConfig = DatabaseConfig()
    engines: EnginesConfig = EnginesConfig()
    window: WindowConfig = WindowConfig()
    seed: SeedConfig = SeedConfig()
    recommendations: RecommendationConfig = RecommendationConfig()
    output: OutputConfig = OutputConfig()
    logging: LoggingConfig = LoggingConfig()
    debug: bool = False


# ── Loader ────────────────────────────────────────────────────────────────────

_PROJECT_ROOT = Path(__file__).parent.parent


def _find_project_root() -> Path:
    """Walk up from this file to find the project root (contains pyproject.toml)."""
    candidate = Path(__file__).parent
    for _ in range(5):
        if (candidate / "pyproject.toml").exists():
            return candidate
        candidate = candidate.parent
    return _PROJECT_ROOT


def load_config(config_path: Optional[Path] = None) -> AppConfig:
    """Load and merge application configuration.

    Args:
        config_path: Explicit path to a TOML config file. Defaults to
            ``<project_root>/config/default.toml``.

    Returns:
        Fully validated ``AppConfig`` instance.

    Raises:
        FileNotFoundError: If the specified ``config_path`` does not exist.
        pydantic.ValidationError: If merged config values fail validation.
    """
    root = _find_project_root()

    # 1. Load .env file (silently skip if missing)
    load_dotenv(dotenv_path=root / ".env", override=False)

    # 2. Load TOML config
    if config_path is None:
        config_path = root / "config" / "default.toml"

    config_path = Path(config_path)
    if not config_path.exists():
        raise FileNotFoundError(
            f"Config file not found: {config_path}\n"
            "Create config/default.toml or pass --config."
        )

    with open(config_path, "rb") as f:
        raw: dict[str, Any] = tomllib.load(f)

    local_config_path = config_path.parent / "local.toml"
    if local_config_path.exists():
        with open(local_config_path, "rb") as f:
            local_raw: dict[str, Any] = tomllib.load(f)
        raw = _deep_merge(raw, local_raw)

    # 3. Apply AEO_TRACKER_* environment variable overrides
    raw = _apply_env_overrides(raw)

    # 4. Build and validate AppConfig
    return _build_app_config(raw)


def _deep_merge(base: dict[str, Any], override: dict[str, Any]) -> dict[str, Any]:
    """Recursively merge ``override`` into ``base``."""
    result = dict(base)
    for key, val in override.items():
        if key in result and isinstance(result[key], dict) and isinstance(val, dict):
            result[key] = _deep_merge(result[key], val)
        else:
            result[key] = val
    return result


def _apply_env_overrides(raw: dict[str, Any]) -> dict[str, Any]:
    """Apply AEO_TRACKER_* env vars to the raw config dict.

    Supported overrides:
      AEO_TRACKER_DB_PATH    → raw["database"]["db_path"]
      AEO_TRACKER_LOG_LEVEL  → raw["logging"]["level"]
      AEO_TRACKER_ENGINES    → raw["engines"]["names"] (comma-separated)
      AEO_TRACKER_DEBUG      → raw["debug"]
    """
    if db_path := os.environ.get("AEO_TRACKER_DB_PATH"):
        raw.setdefault("database", {})["db_path"] = db_path

    if log_level := os.environ.get("AEO_TRACKER_LOG_LEVEL"):
        raw.setdefault("logging", {})["level"] = log_level

    if engines := os.environ.get("AEO_TRACKER_ENGINES"):
        raw.setdefault("engines", {})["names"] = [
            name for name in engines.split(",") if name.strip()
        ]

    if debug := os.environ.get("AEO_TRACKER_DEBUG"):
        raw["debug"] = debug.lower() in ("1", "true", "yes")

    return raw


def _build_app_config(raw: dict[str, Any]) -> AppConfig:
    """Map raw TOML dict to ``AppConfig`` model structure."""
    project = raw.pop("project", {})

    return AppConfig(
        database=DatabaseConfig(**raw.get("database", {})),
        engines=EnginesConfig(**raw.get("engines", {})),
        window=WindowConfig(**raw.get("window", {})),
        seed=SeedConfig(**raw.get("seed", {})),
        recommendations=RecommendationConfig(**raw.get("recommendations", {})),
        output=OutputConfig(**raw.get("output", {})),
        logging=LoggingConfig(**raw.get("logging", {})),
        debug=raw.get("debug", project.get("debug", False)),
    )
