"""
Command-line interface for the triggermon package.

This module provides the main CLI entry point for the monitor.
"""

from .main import main_cli

__all__ = [
    "main_cli",
]
