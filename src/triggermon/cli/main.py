"""
Command-line interface for the triggermon incident capture monitor.

This module provides the CLI entry point: it parses command-line arguments,
loads and validates the configuration, runs the monitoring loop and turns any
failure into a logged error and a nonzero exit code.
"""

import argparse
import logging
import sys
import tomllib
from pathlib import Path
from typing import Any, Dict, List, Optional

from ..config import load_config
from ..monitoring.monitor import TriggerMonitor
from ..system.commands import check_perf_installed
from ..validation import MonitorError, ValidationError, handle_cli_error

# --- Logging Setup ---
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s [%(levelname)-5.5s] %(name)s:%(filename)s:%(lineno)d\t %(message)s",
    datefmt="%Y-%m-%d %H:%M:%S",
    stream=sys.stdout,
)
logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="triggermon",
        description=(
            "Sample system metrics, keep a rolling pre-incident window and capture "
            "it together with a detailed recording when a trigger condition holds."
        ),
    )
    parser.add_argument(
        "-c",
        "--config",
        type=Path,
        help="TOML configuration file. Command-line options override its values.",
    )
    parser.add_argument(
        "--trigger-metrics",
        type=str,
        help="Trigger expression, e.g. 'cpu > 80', 'cpu > 80 && mem > 50' or 'custom /path/check.sh'.",
    )
    parser.add_argument(
        "--threshold",
        type=float,
        help="Simple CPU busy threshold in percent; shorthand for --trigger-metrics 'cpu > N'.",
    )
    parser.add_argument("-i", "--interval", type=float, help="Sampling interval in seconds.")
    parser.add_argument(
        "-p", "--period", type=float, help="Length of the pre-trigger window kept in history, in seconds."
    )
    parser.add_argument("--post", type=float, help="Length of the post-trigger recording in seconds.")
    parser.add_argument(
        "--trigger-times",
        type=int,
        help="Number of consecutive positive evaluations needed to fire.",
    )
    parser.add_argument(
        "--trigger-count",
        type=int,
        help="Maximum number of captures before the monitor exits.",
    )
    parser.add_argument(
        "--cooldown", type=float, help="Seconds after a capture during which the trigger cannot fire again."
    )
    parser.add_argument("-o", "--output", type=Path, help="Base output directory for captured runs.")
    parser.add_argument(
        "--profile",
        action="store_true",
        default=None,
        help="Record a system-wide 'perf' profile during post-trigger recordings.",
    )
    parser.add_argument(
        "--max-iterations",
        type=int,
        help="Stop after this many sampling ticks (0 = run until the trigger count is reached).",
    )
    return parser


def build_overrides(args: argparse.Namespace) -> Dict[str, Dict[str, Any]]:
    """Map parsed arguments onto `[monitor]` configuration sections."""
    return {
        "collection": {
            "interval_seconds": args.interval,
            "period_seconds": args.period,
        },
        "trigger": {
            "expression": args.trigger_metrics,
            "threshold": args.threshold,
            "trigger_times": args.trigger_times,
            "trigger_count": args.trigger_count,
            "cooldown_seconds": args.cooldown,
        },
        "post": {
            "period_seconds": args.post,
            "profile": args.profile,
        },
        "output": {
            "output_dir": str(args.output) if args.output is not None else None,
        },
        "general": {
            "max_iterations": args.max_iterations,
        },
    }


def main_cli(argv: Optional[List[str]] = None) -> None:
    """
    Main command-line interface for triggermon.

    Loads the configuration, applies command-line overrides, runs the monitor
    until the configured number of captures has been taken and exits with
    code 1 on any configuration or runtime failure.

    Raises:
        SystemExit: On configuration errors, validation failures or runtime
            failures of the monitoring loop.
    """
    args = build_parser().parse_args(argv)

    try:
        config = load_config(args.config, build_overrides(args))
    except (FileNotFoundError, tomllib.TOMLDecodeError, ValidationError) as e:
        handle_cli_error(
            error=e,
            context="configuration loading",
            exit_code=1,
            include_traceback=False,
            logger=logger,
        )

    logging.getLogger().setLevel(config.log_level)

    if config.post.profile and not check_perf_installed():
        logger.error("Profiling requested but 'perf' was not found in PATH.")
        sys.exit(1)

    logger.info(f"Captured runs will be saved in: {config.output_dir}")

    try:
        monitor = TriggerMonitor.from_config(config)
        summary = monitor.run()
    except (MonitorError, ValidationError, OSError) as e:
        handle_cli_error(
            error=e,
            context="monitoring",
            exit_code=1,
            include_traceback=True,
            logger=logger,
        )
    except KeyboardInterrupt:
        logger.warning("Interrupted by user, exiting.")
        sys.exit(130)

    for capture in summary.captures:
        logger.info(f"Capture {capture.timestamp}: {capture.run_dir}")
    logger.info(
        f"Done: {summary.triggers_fired} captures in {summary.iterations} ticks ({summary.exit_reason})"
    )


if __name__ == "__main__":
    main_cli()
