"""Configuration loader with YAML and environment variable support.

Reads ~/.config/timetracker/config.yaml (if present) and applies
TIMETRACKER_* environment variable overrides:

- TIMETRACKER_JOURNAL_DIRECTORIES: journal directories, separated by os.pathsep
- TIMETRACKER_JOURNAL_RECURSIVE: recurse into subdirectories (true/false)
- TIMETRACKER_SCAN_WORKERS: number of files scanned concurrently
- TIMETRACKER_LOG_LEVEL: log verbosity (error, warn, info, debug, trace)
"""

import os
from pathlib import Path
from typing import Any, Dict, Optional

import yaml
from pydantic import ValidationError

from timetracker.models.config import Config
from timetracker.services.exceptions import ConfigError
from timetracker.utils.logging import get_logger


logger = get_logger(__name__)

ENV_PREFIX = "TIMETRACKER_"


def default_config_path() -> Path:
    """Return ~/.config/timetracker/config.yaml."""
    return Path.home() / ".config" / "timetracker" / "config.yaml"


def load_config(config_path: Optional[Path] = None) -> Config:
    """Load configuration from YAML file with environment variable overrides.

    A missing file at the default location is not an error: defaults are
    used. A missing file that was asked for explicitly is.

    Args:
        config_path: Path to config file. If None, uses the default path

    Returns:
        Validated Config object

    Raises:
        ConfigError: If the file is missing (explicit path only), unreadable,
            not valid YAML, or fails validation
    """
    explicit = config_path is not None
    if config_path is None:
        config_path = default_config_path()

    if config_path.exists():
        try:
            with config_path.open() as f:
                data = yaml.safe_load(f) or {}
        except (OSError, yaml.YAMLError) as e:
            logger.error("config_unreadable", path=str(config_path), error=str(e))
            raise ConfigError(f"Cannot read configuration ({e})", str(config_path)) from e
        if not isinstance(data, dict):
            raise ConfigError("Configuration file must contain a mapping", str(config_path))
        logger.info("config_loaded", path=str(config_path))
    elif explicit:
        raise ConfigError("Configuration file not found", str(config_path))
    else:
        data = {}

    data = _apply_env_overrides(data)

    try:
        return Config(**data)
    except ValidationError as e:
        logger.error("config_validation_error", path=str(config_path), error=str(e))
        raise ConfigError(f"Configuration validation failed: {e}", str(config_path)) from e


def _apply_env_overrides(data: Dict[str, Any]) -> Dict[str, Any]:
    """Apply environment variable overrides to configuration data.

    Args:
        data: Base configuration dictionary from YAML

    Returns:
        Configuration dictionary with environment overrides applied
    """
    data = dict(data)
    journal = dict(data.get("journal") or {})
    scan = dict(data.get("scan") or {})

    if directories := os.environ.get(f"{ENV_PREFIX}JOURNAL_DIRECTORIES"):
        journal["directories"] = [d for d in directories.split(os.pathsep) if d]

    if recursive := os.environ.get(f"{ENV_PREFIX}JOURNAL_RECURSIVE"):
        journal["recursive"] = _parse_bool(recursive)

    if workers := os.environ.get(f"{ENV_PREFIX}SCAN_WORKERS"):
        scan["workers"] = workers

    if log_level := os.environ.get(f"{ENV_PREFIX}LOG_LEVEL"):
        data["log_level"] = log_level.lower()

    if journal:
        data["journal"] = journal
    if scan:
        data["scan"] = scan

    return data


def _parse_bool(value: str) -> bool:
    return value.strip().lower() in ("1", "true", "yes", "on")
