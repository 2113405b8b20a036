"""
triggermon: trigger-driven incident capture for host performance metrics.

The monitor samples system metrics at a fixed interval, keeps a rolling
pre-incident window in memory and evaluates a trigger condition every tick.
When the condition holds often enough, the window is dumped to disk and a
bounded, more detailed recording session is run.

The package is organized into specialized modules:
- config: Configuration loading and validation
- models: Data structures and type definitions
- validation: Input validation and error handling
- system: Clock and external command helpers
- collectors: psutil-based metric collectors
- monitoring: History buffers, trigger evaluation and the monitoring loop
- recording: Post-trigger recording sessions
- storage: Dump files and Parquet output
- cli: Command-line interface

Usage:
    From command line:
        triggermon --trigger-metrics 'cpu > 80' --interval 1 --period 60 --post 10

    Programmatically:
        from triggermon import TriggerMonitor, load_config
        config = load_config(Path("conf/config.toml"))
        summary = TriggerMonitor.from_config(config).run()
"""

# Main interfaces
from .config import load_config
from .monitoring.monitor import TriggerMonitor
from .recording import record
from .cli import main_cli

# Model classes for external use
from .models import (
    CaptureResult,
    MonitorConfig,
    MonitorContext,
    MonitorSummary,
    PostRecordConfig,
    RecordOptions,
    RecordResult,
    TriggerConfig,
)

# Trigger evaluation
from .monitoring import evaluate, parse_trigger_expression

# Validation utilities
from .validation import (
    MonitorError,
    ValidationError,
    validate_enum_choice,
    validate_positive_float,
    validate_positive_integer,
)

# System utilities
from .system import SystemClock, check_perf_installed

__version__ = "1.0.0"

__all__ = [
    # Main interfaces
    "load_config",
    "TriggerMonitor",
    "record",
    "main_cli",
    # Models
    "CaptureResult",
    "MonitorConfig",
    "MonitorContext",
    "MonitorSummary",
    "PostRecordConfig",
    "RecordOptions",
    "RecordResult",
    "TriggerConfig",
    # Trigger evaluation
    "evaluate",
    "parse_trigger_expression",
    # Validation
    "MonitorError",
    "ValidationError",
    "validate_positive_integer",
    "validate_positive_float",
    "validate_enum_choice",
    # System utilities
    "SystemClock",
    "check_perf_installed",
]
