"""Configuration loader for the LP reader entry points."""

import logging
from pathlib import Path
from typing import Any, Dict, Optional, Union

import yaml

DEFAULT_LOG_FORMAT = "[%(levelname)s] %(message)s"


def default_config_path() -> Path:
    repo_root = Path(__file__).resolve().parents[2]
    return repo_root / "config.yaml"


def load_config(
    config_path: Optional[Union[str, Path]] = None,
    section: str = "lp_reader",
) -> Dict[str, Any]:
    """
    Load one section of the YAML configuration file.

    Args:
        config_path: Path to config.yaml. If None, looks for config.yaml in repo root
            and falls back to an empty configuration when it does not exist.
        section: Top-level key to return (``lp_reader`` or ``mcp_server``).

    Returns:
        Configuration dictionary for the section (empty if absent).

    Raises:
        FileNotFoundError: If an explicitly given config file does not exist.
    """
    if config_path is None:
        config_path = default_config_path()
        if not config_path.exists():
            return {}

    config_path = Path(config_path)
    if not config_path.exists():
        raise FileNotFoundError(f"Config file not found: {config_path}")

    with open(config_path, "r") as f:
        full_config = yaml.safe_load(f) or {}

    config = full_config.get(section) or {}
    if not isinstance(config, dict):
        raise ValueError(f"Config section {section!r} must be a mapping")
    return config


def resolve_logging(
    config: Dict[str, Any], log_level: Optional[str] = None
) -> tuple[str, str]:
    """Return ``(level, format)``; an explicit ``log_level`` wins over the file."""
    level = (log_level or config.get("log_level", "INFO")).upper()
    log_format = config.get("log_format", DEFAULT_LOG_FORMAT)
    return level, log_format


def load_config_or_defaults(
    config_path: Optional[Union[str, Path]],
    section: str,
    logger: logging.Logger,
) -> Dict[str, Any]:
    """Like :func:`load_config`, but a missing file logs a warning and yields ``{}``."""
    try:
        return load_config(config_path, section=section)
    except FileNotFoundError:
        logger.warning("Config file not found: %s, using defaults", config_path)
        return {}


def configure_logging(config: Dict[str, Any], log_level: Optional[str] = None) -> str:
    level, log_format = resolve_logging(config, log_level)
    logging.basicConfig(level=level, format=log_format)
    return level
