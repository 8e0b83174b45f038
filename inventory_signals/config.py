"""
Application configuration management.

Load order (each layer overrides the previous):
  1. ``config/default.toml``      - committed static defaults
  2. ``config/local.toml``        - optional local overrides (gitignored)
  3. ``.env``                     - local secrets and env overrides (gitignored)
  4. Environment variables        - ``INVENTORY_SIGNALS_*`` prefix

Entry point: ``load_config(config_path=None) -> AppConfig``

The session and every CLI command receive an ``AppConfig`` instance,
never raw dicts or individual env var lookups scattered through the codebase.

Engine thresholds (low-stock cut-offs, pricing ratios, lookback windows) are
module constants in their own packages, not configuration.
"""

from __future__ import annotations

import os
import tomllib
from pathlib import Path
from typing import Any, Optional

from dotenv import load_dotenv
from pydantic import BaseModel, ConfigDict, field_validator

from inventory_signals.taxonomy.signal_taxonomy import Granularity

# ── Sub-config models ─────────────────────────────────────────────────────────


class DataConfig(BaseModel):
    """Filesystem paths for seed data and exports."""

    model_config = ConfigDict(frozen=True)

    seed_file: str = "config/seed/demo_inventory.json"
    export_dir: str = "data/exports"


class NotificationsConfig(BaseModel):
    """Notification bell settings."""

    model_config = ConfigDict(frozen=True)

    cap: int = 10

    @field_validator("cap")
    @classmethod
    def validate_cap(cls, v: int) -> int:
        if v < 1:
            raise ValueError(f"notifications.cap must be >= 1, got {v}.")
        return v


class TrendsConfig(BaseModel):
    """Revenue trend chart settings."""

    model_config = ConfigDict(frozen=True)

    change_threshold: float = 0.05
    default_granularity: Granularity = Granularity.DAILY

    @field_validator("change_threshold")
    @classmethod
    def validate_threshold(cls, v: float) -> float:
        if not 0.0 < v < 1.0:
            raise ValueError(f"change_threshold must be in (0.0, 1.0), got {v}.")
        return v


class ImportsConfig(BaseModel):
    """CSV and invoice import settings."""

    model_config = ConfigDict(frozen=True)

    invoice_backdate_days: int = 1

    @field_validator("invoice_backdate_days")
    @classmethod
    def validate_backdate(cls, v: int) -> int:
        if v < 0:
            raise ValueError(f"invoice_backdate_days must be >= 0, got {v}.")
        return v


class InsightsConfig(BaseModel):
    """External insight-text collaborator settings.

    ``endpoint = None`` disables the HTTP client; callers then use the
    rule-based insights only.
    """

    model_config = ConfigDict(frozen=True)

    endpoint: Optional[str] = None
    model: str = "insight-text-default"
    timeout_seconds: float = 20.0
    api_key_env: str = "INSIGHTS_API_KEY"
    language: str = "en"

    @field_validator("language")
    @classmethod
    def validate_language(cls, v: str) -> str:
        valid = {"en", "bn"}
        if v not in valid:
            raise ValueError(f"language must be one of {sorted(valid)}, got '{v}'.")
        return v


class LoggingConfig(BaseModel):
    """Logging output settings."""

    model_config = ConfigDict(frozen=True)

    level: str = "INFO"
    log_file: str = ""
    json_format: bool = False

    @field_validator("level")
    @classmethod
    def validate_level(cls, v: str) -> str:
        valid = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}
        if v.upper() not in valid:
            raise ValueError(f"Log level must be one of {sorted(valid)}, got '{v}'.")
        return v.upper()


class AppConfig(BaseModel):
    """Complete application configuration - the single source of truth.

    Constructed by ``load_config()`` which merges TOML + .env.
    """

    model_config = ConfigDict(frozen=True)

    data: DataConfig = DataConfig()
    notifications: NotificationsConfig = NotificationsConfig()
    trends: TrendsConfig = TrendsConfig()
    imports: ImportsConfig = ImportsConfig()
    insights: InsightsConfig = InsightsConfig()
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


def resolve_project_path(path: str | Path) -> Path:
    """Absolute paths as-is; relative paths are taken from the project root."""
    candidate = Path(path)
    if candidate.is_absolute():
        return candidate
    return _find_project_root() / candidate


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

    load_dotenv(dotenv_path=root / ".env", override=False)

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

    raw = _apply_env_overrides(raw)

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
    """Apply INVENTORY_SIGNALS_* env vars to the raw config dict.

    Supported overrides:
      INVENTORY_SIGNALS_LOG_LEVEL          → raw["logging"]["level"]
      INVENTORY_SIGNALS_INSIGHTS_ENDPOINT  → raw["insights"]["endpoint"]
      INVENTORY_SIGNALS_DEBUG              → raw["debug"]
    """
    if log_level := os.environ.get("INVENTORY_SIGNALS_LOG_LEVEL"):
        raw.setdefault("logging", {})["level"] = log_level

    if endpoint := os.environ.get("INVENTORY_SIGNALS_INSIGHTS_ENDPOINT"):
        raw.setdefault("insights", {})["endpoint"] = endpoint

    if debug := os.environ.get("INVENTORY_SIGNALS_DEBUG"):
        raw["debug"] = debug.lower() in ("1", "true", "yes")

    return raw


def _build_app_config(raw: dict[str, Any]) -> AppConfig:
    """Map raw TOML dict to ``AppConfig`` model structure."""
    project = raw.pop("project", {})

    return AppConfig(
        data=DataConfig(**raw.get("data", {})),
        notifications=NotificationsConfig(**raw.get("notifications", {})),
        trends=TrendsConfig(**raw.get("trends", {})),
        imports=ImportsConfig(**raw.get("imports", {})),
        insights=InsightsConfig(**raw.get("insights", {})),
        logging=LoggingConfig(**raw.get("logging", {})),
        debug=raw.get("debug", project.get("debug", False)),
    )
