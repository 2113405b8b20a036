"""
Command execution utilities.

This module provides functions for running external commands on behalf of the
monitor (custom trigger scripts) and for checking system dependencies of the
recorder.
"""

import logging
import shlex
import shutil
import subprocess
from typing import List, Optional

from ..validation import CustomCommandError, handle_subprocess_error

logger = logging.getLogger(__name__)


def split_command(command: str) -> List[str]:
    """Split a command line into arguments, shell-style.

    Args:
        command: Command line string, e.g. ``"/usr/local/bin/check.sh --fast"``.

    Returns:
        List of arguments.

    Raises:
        CustomCommandError: If the command is empty or cannot be tokenized.
    """
    try:
        argv = shlex.split(command)
    except ValueError as e:
        raise CustomCommandError(f"Cannot parse command '{command}': {e}", command=command) from e
    if not argv:
        raise CustomCommandError("Empty command", command=command)
    return argv


def run_condition_command(command: str, timeout: Optional[float] = None) -> int:
    """Run a condition command and return its exit code.

    The command is executed directly, without a shell, with its output
    discarded. A command that starts and exits nonzero is a normal outcome;
    a command that cannot be started at all is an error.

    Args:
        command: The command line to execute.
        timeout: Optional timeout in seconds.

    Returns:
        The process exit code.

    Raises:
        CustomCommandError: If the process cannot be spawned or times out.
    """
    argv = split_command(command)
    logger.debug(f"Executing condition command: {argv}")
    try:
        process = subprocess.run(
            argv,
            stdin=subprocess.DEVNULL,
            stdout=subprocess.DEVNULL,
            stderr=subprocess.DEVNULL,
            timeout=timeout,
            check=False,
        )
    except OSError as e:
        handle_subprocess_error(
            CustomCommandError(f"Cannot start condition command '{command}': {e}", command=command),
            command,
            logger=logger,
        )
    except subprocess.TimeoutExpired as e:
        raise CustomCommandError(
            f"Condition command '{command}' timed out after {timeout}s", command=command
        ) from e

    logger.debug(f"Condition command '{command}' exited with {process.returncode}")
    return process.returncode


def check_perf_installed() -> bool:
    """Check if the 'perf' command is available on the system.

    Returns:
        True if perf is found in the system PATH, False otherwise.
    """
    return shutil.which("perf") is not None
