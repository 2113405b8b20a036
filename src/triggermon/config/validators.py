"""
Configuration validation utilities.

This module turns the raw `[monitor]` table of `config.toml` into a validated
MonitorConfig, applying defaults for every optional setting.
"""

import logging
from pathlib import Path
from typing import Any, Dict, Optional

from ..collectors.factory import COLLECTOR_TYPES, DEFAULT_COLLECTOR_KINDS
from ..models.config import (
    PARQUET_COMPRESSIONS,
    MonitorConfig,
    PostRecordConfig,
    StorageConfig,
    TriggerConfig,
)
from ..monitoring.trigger_expression import parse_trigger_expression, threshold_expression
from ..validation import (
    TriggerExpressionError,
    ValidationError,
    validate_boolean,
    validate_capture_window,
    validate_enum_choice,
    validate_non_empty_string,
    validate_positive_float,
    validate_positive_integer,
)

logger = logging.getLogger(__name__)

LOG_LEVELS = ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]


def validate_monitor_config(monitor_data: Dict[str, Any]) -> MonitorConfig:
    """
    Validate and create a MonitorConfig from raw configuration data.

    Args:
        monitor_data: Raw monitor configuration from TOML

    Returns:
        Validated MonitorConfig instance

    Raises:
        ValidationError: If validation fails
    """
    collection_settings = monitor_data.get("collection", {})
    trigger_settings = monitor_data.get("trigger", {})
    post_settings = monitor_data.get("post", {})
    output_settings = monitor_data.get("output", {})
    general_settings = monitor_data.get("general", {})
    storage_settings = monitor_data.get("storage", {})

    try:
        # Validate collection settings
        interval_seconds = validate_positive_float(
            collection_settings.get("interval_seconds", 1.0),
            min_value=0.001,  # 1ms minimum
            max_value=3600.0,
            field_name="monitor.collection.interval_seconds",
        )

        if "period_seconds" not in collection_settings:
            raise ValidationError("monitor.collection.period_seconds is required")
        period_seconds = validate_positive_float(
            collection_settings["period_seconds"],
            field_name="monitor.collection.period_seconds",
        )
        capacity = validate_capture_window(
            interval_seconds,
            period_seconds,
            interval_field="monitor.collection.interval_seconds",
            period_field="monitor.collection.period_seconds",
        )

        collectors = _validate_collector_kinds(
            collection_settings.get("collectors", DEFAULT_COLLECTOR_KINDS)
        )

        trigger = validate_trigger_config(trigger_settings)
        post = validate_post_config(post_settings, default_interval=interval_seconds)

        # Validate output settings
        output_dir = Path(validate_non_empty_string(
            output_settings.get("output_dir", "captures"),
            field_name="monitor.output.output_dir",
        ))
        tmp_dir = _optional_path(output_settings.get("tmp_dir", ""), "monitor.output.tmp_dir")
        run_log = _optional_path(output_settings.get("run_log", ""), "monitor.output.run_log")

        # Validate general settings
        max_iterations = validate_positive_integer(
            general_settings.get("max_iterations", 0),
            min_value=0,
            field_name="monitor.general.max_iterations",
        )
        log_level = validate_enum_choice(
            general_settings.get("log_level", "INFO"),
            choices=LOG_LEVELS,
            field_name="monitor.general.log_level",
            case_sensitive=False,
        )

        try:
            storage = StorageConfig.from_dict(storage_settings)
        except ValueError as e:
            raise ValidationError(
                f"monitor.storage.compression must be one of {list(PARQUET_COMPRESSIONS)}: {e}",
                field_name="monitor.storage.compression",
            ) from e

        logger.debug(f"History buffers will hold {capacity} snapshots per collector")

        return MonitorConfig(
            interval_seconds=interval_seconds,
            period_seconds=period_seconds,
            collectors=collectors,
            trigger=trigger,
            post=post,
            output_dir=output_dir,
            tmp_dir=tmp_dir,
            run_log=run_log,
            max_iterations=max_iterations or None,
            log_level=log_level,
            storage=storage,
        )

    except ValidationError as e:
        logger.error(f"Monitor configuration validation failed: {e}")
        raise


def validate_trigger_config(trigger_settings: Dict[str, Any]) -> TriggerConfig:
    """
    Validate the `[monitor.trigger]` table.

    Exactly one of `expression` and `threshold` must be given. A threshold is
    shorthand for the expression ``cpu > <threshold>``.

    Raises:
        ValidationError: If validation fails
    """
    expression = trigger_settings.get("expression")
    threshold = trigger_settings.get("threshold")

    if expression is not None and threshold is not None:
        raise ValidationError(
            "monitor.trigger: specify either 'expression' or 'threshold', not both",
            field_name="monitor.trigger",
        )
    if expression is None and threshold is None:
        raise ValidationError(
            "monitor.trigger: a trigger 'expression' or 'threshold' is required",
            field_name="monitor.trigger",
        )

    if threshold is not None:
        threshold_value = validate_positive_float(
            threshold,
            min_value=0.0,
            max_value=100.0,
            field_name="monitor.trigger.threshold",
        )
        expression = threshold_expression(threshold_value)
    else:
        expression = validate_non_empty_string(expression, field_name="monitor.trigger.expression")

    try:
        parse_trigger_expression(expression)
    except TriggerExpressionError as e:
        raise ValidationError(
            f"monitor.trigger.expression is invalid: {e}",
            field_name="monitor.trigger.expression",
            value=expression,
        ) from e

    return TriggerConfig(
        expression=expression,
        trigger_times=validate_positive_integer(
            trigger_settings.get("trigger_times", 1),
            min_value=1,
            field_name="monitor.trigger.trigger_times",
        ),
        trigger_count=validate_positive_integer(
            trigger_settings.get("trigger_count", 10),
            min_value=1,
            field_name="monitor.trigger.trigger_count",
        ),
        cooldown_seconds=validate_positive_float(
            trigger_settings.get("cooldown_seconds", 1200.0),
            min_value=0.0,
            field_name="monitor.trigger.cooldown_seconds",
        ),
    )


def validate_post_config(post_settings: Dict[str, Any], default_interval: float) -> PostRecordConfig:
    """
    Validate the `[monitor.post]` table.

    Args:
        post_settings: Raw `[monitor.post]` table
        default_interval: Interval used when the table does not set one

    Raises:
        ValidationError: If validation fails
    """
    if "period_seconds" not in post_settings:
        raise ValidationError("monitor.post.period_seconds is required")

    period = validate_positive_float(
        post_settings["period_seconds"],
        field_name="monitor.post.period_seconds",
    )
    interval = validate_positive_float(
        post_settings.get("interval_seconds", default_interval),
        field_name="monitor.post.interval_seconds",
    )
    validate_capture_window(
        interval,
        period,
        interval_field="monitor.post.interval_seconds",
        period_field="monitor.post.period_seconds",
    )

    return PostRecordConfig(
        period_seconds=period,
        interval_seconds=interval,
        profile=validate_boolean(post_settings.get("profile", False), field_name="monitor.post.profile"),
        perf_frequency=validate_positive_integer(
            post_settings.get("perf_frequency", 99),
            min_value=1,
            max_value=100000,
            field_name="monitor.post.perf_frequency",
        ),
    )


def _validate_collector_kinds(kinds: Any) -> list:
    if not isinstance(kinds, list) or not kinds:
        raise ValidationError(
            "monitor.collection.collectors must be a non-empty list",
            field_name="monitor.collection.collectors",
            value=kinds,
        )

    validated = []
    for i, kind in enumerate(kinds):
        validated_kind = validate_enum_choice(
            kind,
            choices=list(COLLECTOR_TYPES),
            field_name=f"monitor.collection.collectors[{i}]",
        )
        if validated_kind in validated:
            raise ValidationError(
                f"monitor.collection.collectors lists '{validated_kind}' more than once",
                field_name="monitor.collection.collectors",
                value=kinds,
            )
        validated.append(validated_kind)
    return validated


def _optional_path(value: Any, field_name: str) -> Optional[Path]:
    if value is None or value == "":
        return None
    if not isinstance(value, str):
        raise ValidationError(f"{field_name} must be a string path", field_name=field_name, value=value)
    return Path(value)
