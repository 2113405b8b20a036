"""
Trigger monitoring components.

This package holds the building blocks of the monitoring loop: history
buffers, the sampler, CPU utilization and metric computation, the trigger
expression evaluator and the trigger state machine.

The loop itself (`triggermon.monitoring.monitor`) and the capture coordinator
(`triggermon.monitoring.capture`) depend on the recording package and are
imported from their modules directly.
"""

from .cpu_usage import aggregate_cpu_times, calculate_cpu_usage
from .history import HistoryBuffer
from .metrics import compute_metrics, counter_delta
from .sampler import Sampler
from .state_machine import TriggerPhase, TriggerState, TriggerStateMachine
from .trigger_expression import (
    Comparison,
    TriggerCondition,
    evaluate,
    parse_trigger_expression,
    threshold_expression,
)

__all__ = [
    "HistoryBuffer",
    "Sampler",
    "aggregate_cpu_times",
    "calculate_cpu_usage",
    "compute_metrics",
    "counter_delta",
    "Comparison",
    "TriggerCondition",
    "evaluate",
    "parse_trigger_expression",
    "threshold_expression",
    "TriggerPhase",
    "TriggerState",
    "TriggerStateMachine",
]
