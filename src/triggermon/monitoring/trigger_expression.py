"""
Trigger condition parsing and evaluation.

Grammar::

    expression  := custom | comparisons
    custom      := ... "custom" [ "=" | "==" ] command
    comparisons := comparison { [ "&&" | "and" ] comparison }
    comparison  := metric op number
    op          := ">" | "<" | ">=" | "<=" | "==" | "!="

Comparisons are AND-ed. Metric names are case-insensitive and a metric missing
from the value map reads as 0.0. OR, NOT and parentheses are rejected.

A ``custom`` clause takes the text after the keyword, up to the next ``&&``,
as a command line. The command is run without a shell and its exit status is
the result (0 is true). When present it decides the result on its own; every
other clause in the expression is ignored. The word form ``and`` does not end
the command and is passed to it as an argument.
"""

import logging
import math
import operator
import re
from dataclasses import dataclass
from typing import Callable, Dict, Mapping, Optional, Tuple

from ..system.commands import run_condition_command
from ..validation import TriggerExpressionError

logger = logging.getLogger(__name__)

OPERATORS: Dict[str, Callable[[float, float], bool]] = {
    ">": operator.gt,
    "<": operator.lt,
    ">=": operator.ge,
    "<=": operator.le,
    "==": operator.eq,
    "!=": operator.ne,
}

_CUSTOM_RE = re.compile(
    r"\bcustom\b\s*(?:==?\s*)?(?P<command>.*?)\s*(?:&&.*)?$", re.IGNORECASE | re.DOTALL
)
_COMPARISON_RE = re.compile(
    r"(?P<metric>[A-Za-z_][A-Za-z0-9_]*)\s*(?P<op>>=|<=|==|!=|>|<)\s*(?P<value>[^\s&|()!<>=]+)"
)
_CONNECTOR_RE = re.compile(r"&&|\band\b", re.IGNORECASE)
_UNSUPPORTED_RE = re.compile(r"\|\||[()]|!(?!=)|\b(?:or|not)\b", re.IGNORECASE)


@dataclass(frozen=True)
class Comparison:
    """One ``metric op threshold`` clause."""

    metric: str
    operator: str
    threshold: float

    def evaluate(self, metrics: Mapping[str, float]) -> bool:
        value = metrics.get(self.metric, 0.0)
        return OPERATORS[self.operator](value, self.threshold)

    def __str__(self) -> str:
        return f"{self.metric} {self.operator} {self.threshold:g}"


@dataclass(frozen=True)
class TriggerCondition:
    """Parsed trigger expression."""

    expression: str
    comparisons: Tuple[Comparison, ...] = ()
    custom_command: Optional[str] = None

    def evaluate(self, metrics: Mapping[str, float]) -> bool:
        """
        Evaluate the condition against the current metric values.

        Raises:
            CustomCommandError: If the custom command cannot be started
        """
        if self.custom_command is not None:
            return run_condition_command(self.custom_command) == 0

        normalized = {name.lower(): value for name, value in metrics.items()}
        return all(comparison.evaluate(normalized) for comparison in self.comparisons)

    @property
    def is_custom(self) -> bool:
        return self.custom_command is not None


def parse_trigger_expression(expression: str) -> TriggerCondition:
    """
    Parse a trigger expression.

    Args:
        expression: Expression such as ``"cpu > 80 && mem > 50"``

    Returns:
        The parsed, immutable condition

    Raises:
        TriggerExpressionError: If the expression is empty, uses unsupported
            syntax, contains no comparison or has a malformed number
    """
    if not isinstance(expression, str) or not expression.strip():
        raise TriggerExpressionError("Trigger expression is empty", expression=expression)

    custom_match = _CUSTOM_RE.search(expression)
    if custom_match:
        command = _strip_quotes(custom_match.group("command").strip())
        if not command:
            raise TriggerExpressionError(
                "The 'custom' clause requires a command", expression=expression
            )
        logger.debug(f"Trigger uses custom command: {command}")
        return TriggerCondition(expression=expression, custom_command=command)

    unsupported = _UNSUPPORTED_RE.search(expression)
    if unsupported:
        raise TriggerExpressionError(
            f"Unsupported syntax '{unsupported.group(0)}' at position {unsupported.start()}: "
            f"only AND-ed comparisons are supported",
            expression=expression,
        )

    comparisons = []
    position = 0
    for match in _COMPARISON_RE.finditer(expression):
        _check_gap(expression, expression[position:match.start()])
        comparisons.append(
            Comparison(
                metric=match.group("metric").lower(),
                operator=match.group("op"),
                threshold=_parse_number(match.group("value"), expression),
            )
        )
        position = match.end()
    _check_gap(expression, expression[position:])

    if not comparisons:
        raise TriggerExpressionError(
            "Expected at least one comparison '<metric> <op> <number>' (e.g. 'cpu > 80')",
            expression=expression,
        )

    return TriggerCondition(expression=expression, comparisons=tuple(comparisons))


def evaluate(expression: str, metrics: Mapping[str, float]) -> bool:
    """Parse ``expression`` and evaluate it against ``metrics``."""
    return parse_trigger_expression(expression).evaluate(metrics)


def threshold_expression(threshold: float) -> str:
    """Expression equivalent to a plain CPU threshold."""
    return f"cpu > {threshold:g}"


def _parse_number(text: str, expression: str) -> float:
    try:
        value = float(text)
    except ValueError:
        raise TriggerExpressionError(f"Invalid threshold value: {text}", expression=expression) from None
    if not math.isfinite(value):
        raise TriggerExpressionError(f"Invalid threshold value: {text}", expression=expression)
    return value


def _check_gap(expression: str, gap: str) -> None:
    leftover = _CONNECTOR_RE.sub(" ", gap).strip()
    if leftover:
        raise TriggerExpressionError(
            f"Cannot parse '{leftover}' in trigger expression", expression=expression
        )


def _strip_quotes(command: str) -> str:
    if len(command) >= 2 and command[0] == command[-1] and command[0] in "'\"":
        return command[1:-1].strip()
    return command
