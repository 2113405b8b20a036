"""
Trigger state machine.

Tracks consecutive positive evaluations, the cooldown deadline and the number
of firings. Cooldown is a timestamp comparison against the caller's clock; the
machine never sleeps. Hit counting continues during cooldown, only firing is
suppressed until the deadline passes.
"""

import logging
from dataclasses import dataclass
from enum import Enum

logger = logging.getLogger(__name__)


class TriggerPhase(Enum):
    ARMED = "armed"
    COUNTING = "counting"
    COOLDOWN = "cooldown"
    DONE = "done"


@dataclass
class TriggerState:
    consecutive_hits: int = 0
    trigger_count_done: int = 0
    cooldown_until: float = 0.0


class TriggerStateMachine:
    """
    Decides once per tick whether a capture must be fired.

    The caller reports each evaluation through `observe` and, when it returns
    True, runs the capture and then calls `record_fire`. Keeping the two steps
    apart means a failed capture never counts as a firing.
    """

    def __init__(self, trigger_times: int, max_triggers: int, cooldown_seconds: float):
        if trigger_times < 1:
            raise ValueError(f"trigger_times must be >= 1, got {trigger_times}")
        if max_triggers < 1:
            raise ValueError(f"max_triggers must be >= 1, got {max_triggers}")
        if cooldown_seconds < 0:
            raise ValueError(f"cooldown_seconds must be >= 0, got {cooldown_seconds}")

        self.trigger_times = trigger_times
        self.max_triggers = max_triggers
        self.cooldown_seconds = cooldown_seconds
        self.state = TriggerState()

    @property
    def done(self) -> bool:
        return self.state.trigger_count_done >= self.max_triggers

    def observe(self, condition_met: bool, now: float) -> bool:
        """
        Record one evaluation result.

        Args:
            condition_met: Result of the trigger condition for this tick
            now: Current time in seconds on the monitor's clock

        Returns:
            True if a capture should be fired now
        """
        if self.done:
            return False

        if condition_met:
            self.state.consecutive_hits += 1
        else:
            self.state.consecutive_hits = 0

        if self.state.consecutive_hits < self.trigger_times:
            return False

        if now < self.state.cooldown_until:
            logger.debug(
                f"Condition held {self.state.consecutive_hits} times but cooldown lasts "
                f"until {self.state.cooldown_until:.0f}, not firing"
            )
            return False

        return True

    def record_fire(self, now: float) -> None:
        """Account for a completed firing and start the cooldown."""
        self.state.trigger_count_done += 1
        self.state.consecutive_hits = 0
        self.state.cooldown_until = now + self.cooldown_seconds
        logger.info(
            f"Trigger fired ({self.state.trigger_count_done}/{self.max_triggers}), "
            f"cooldown until {self.state.cooldown_until:.0f}"
        )

    def phase(self, now: float) -> TriggerPhase:
        if self.done:
            return TriggerPhase.DONE
        if now < self.state.cooldown_until:
            return TriggerPhase.COOLDOWN
        if self.state.consecutive_hits > 0:
            return TriggerPhase.COUNTING
        return TriggerPhase.ARMED
