"""
Configuration file loading utilities.

This module handles loading and parsing of the TOML configuration file and
turning it into a validated MonitorConfig. There is no process-wide cached
configuration: callers load a config once and pass it on explicitly.
"""

import logging
import tomllib
from pathlib import Path
from typing import Any, Dict, Optional

from ..models.config import MonitorConfig
from ..validation import ErrorSeverity, handle_config_error
from .validators import validate_monitor_config

logger = logging.getLogger(__name__)


def load_toml_file(file_path: Path, description: str = "configuration file") -> Dict[str, Any]:
    """
    Load and parse a TOML file with error handling.

    Args:
        file_path: Path to the TOML file to load
        description: Human-readable description for error messages

    Returns:
        Parsed TOML data as a dictionary

    Raises:
        FileNotFoundError: If the file doesn't exist
        tomllib.TOMLDecodeError: If the file is malformed
    """
    logger.info(f"Loading {description} from: {file_path}")

    if not file_path.exists():
        logger.error(f"{description} not found: {file_path}")
        raise FileNotFoundError(f"{description} not found: {file_path}")

    try:
        with open(file_path, "rb") as f:
            return tomllib.load(f)
    except tomllib.TOMLDecodeError as e:
        handle_config_error(
            error=e,
            context=f"parsing {description}",
            severity=ErrorSeverity.CRITICAL,
            reraise=True,
            logger=logger
        )
        raise


# Setting one of these keys through an override removes the other one
EXCLUSIVE_KEYS = {
    ("trigger", "expression"): "threshold",
    ("trigger", "threshold"): "expression",
}


def merge_overrides(config_data: Dict[str, Any], overrides: Dict[str, Dict[str, Any]]) -> Dict[str, Any]:
    """
    Apply per-section overrides to the raw `[monitor]` table.

    Args:
        config_data: Raw `[monitor]` table
        overrides: Mapping of section name to the keys to replace, e.g.
            ``{"trigger": {"cooldown_seconds": 60}}``. None values are ignored.
            Overriding the trigger expression drops a configured threshold
            and vice versa.

    Returns:
        A new dictionary; the input is left untouched
    """
    merged = {section: dict(values) for section, values in config_data.items() if isinstance(values, dict)}
    for section, values in overrides.items():
        target = merged.setdefault(section, {})
        for key, value in values.items():
            if value is None:
                continue
            target[key] = value
            excluded = EXCLUSIVE_KEYS.get((section, key))
            if excluded is not None and values.get(excluded) is None:
                target.pop(excluded, None)
    return merged


def load_config(
    config_path: Optional[Path],
    overrides: Optional[Dict[str, Dict[str, Any]]] = None,
) -> MonitorConfig:
    """
    Load and validate the monitor configuration.

    Args:
        config_path: Path to config.toml, or None to build the configuration
            from the overrides alone
        overrides: Optional per-section overrides (see `merge_overrides`)

    Returns:
        Fully validated MonitorConfig instance

    Raises:
        FileNotFoundError: If the configuration file is missing
        ValidationError: If configuration validation fails
        tomllib.TOMLDecodeError: If the TOML file is malformed
    """
    if config_path is not None:
        main_config_data = load_toml_file(config_path, "main configuration file")
    else:
        logger.info("No configuration file given, using command-line settings only")
        main_config_data = {}
    monitor_data = main_config_data.get("monitor", {})
    if overrides:
        monitor_data = merge_overrides(monitor_data, overrides)

    try:
        config = validate_monitor_config(monitor_data)
    except Exception as e:
        handle_config_error(
            error=e,
            context="processing configuration",
            severity=ErrorSeverity.ERROR,
            reraise=True,
            logger=logger
        )
        raise

    logger.info(
        f"Loaded configuration: trigger '{config.trigger.expression}', "
        f"interval {config.interval_seconds}s, window {config.period_seconds}s, "
        f"collectors {config.collectors}"
    )
    return config
