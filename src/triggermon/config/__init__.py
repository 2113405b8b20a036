"""
Configuration management for the triggermon package.

This module provides loading and validation of the TOML configuration file.
"""

from .loader import load_config, load_toml_file, merge_overrides
from .validators import (
    validate_monitor_config,
    validate_post_config,
    validate_trigger_config,
)

__all__ = [
    "load_config",
    "load_toml_file",
    "merge_overrides",
    "validate_monitor_config",
    "validate_post_config",
    "validate_trigger_config",
]
