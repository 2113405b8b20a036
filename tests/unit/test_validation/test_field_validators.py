"""
Unit tests for field validators and error handling helpers.
"""

import logging

import pytest

from triggermon.validation import (
    CaptureError,
    CollectorError,
    ErrorSeverity,
    MonitorError,
    RecorderError,
    ValidationError,
    handle_cli_error,
    handle_error,
    validate_boolean,
    validate_capture_window,
    validate_enum_choice,
    validate_non_empty_string,
    validate_positive_float,
    validate_positive_integer,
)


@pytest.mark.unit
class TestNumberValidators:
    """Test cases for integer and float validators."""

    def test_positive_integer(self):
        assert validate_positive_integer(3) == 3
        assert validate_positive_integer("7") == 7

    @pytest.mark.parametrize("value", [0, -1, "abc", None, True])
    def test_positive_integer_invalid(self, value):
        with pytest.raises(ValidationError) as exc_info:
            validate_positive_integer(value, field_name="trigger_times")

        assert exc_info.value.field_name == "trigger_times"

    def test_positive_integer_max(self):
        with pytest.raises(ValidationError, match="<= 10"):
            validate_positive_integer(11, max_value=10)

    def test_positive_float(self):
        assert validate_positive_float(0) == 0.0
        assert validate_positive_float("2.5") == 2.5

    @pytest.mark.parametrize("value", [-0.1, "fast", float("nan"), False])
    def test_positive_float_invalid(self, value):
        with pytest.raises(ValidationError):
            validate_positive_float(value)

    def test_positive_float_bounds(self):
        assert validate_positive_float(100.0, max_value=100.0) == 100.0
        with pytest.raises(ValidationError):
            validate_positive_float(100.5, max_value=100.0)


@pytest.mark.unit
class TestChoiceAndStringValidators:
    """Test cases for enum, boolean and string validators."""

    def test_enum_case_sensitive(self):
        assert validate_enum_choice("gzip", ["snappy", "gzip"]) == "gzip"
        with pytest.raises(ValidationError):
            validate_enum_choice("GZIP", ["snappy", "gzip"])

    def test_enum_case_insensitive_returns_canonical(self):
        assert validate_enum_choice("warning", ["INFO", "WARNING"], case_sensitive=False) == "WARNING"

    def test_boolean(self):
        assert validate_boolean(True) is True
        with pytest.raises(ValidationError):
            validate_boolean("true")

    def test_non_empty_string(self):
        assert validate_non_empty_string("  cpu > 80 ") == "cpu > 80"
        with pytest.raises(ValidationError):
            validate_non_empty_string("   ")
        with pytest.raises(ValidationError):
            validate_non_empty_string(42)


@pytest.mark.unit
class TestCaptureWindow:
    """Test cases for validate_capture_window."""

    @pytest.mark.parametrize(
        "interval, period, expected",
        [(1.0, 5.0, 5), (2.0, 7.0, 3), (0.5, 1.0, 2), (3.0, 3.5, 1)],
    )
    def test_sample_count(self, interval, period, expected):
        assert validate_capture_window(interval, period) == expected

    @pytest.mark.parametrize(
        "interval, period",
        [(0.0, 5.0), (-1.0, 5.0), (1.0, 0.0), (1.0, -2.0), (5.0, 5.0), (6.0, 5.0)],
    )
    def test_invalid(self, interval, period):
        with pytest.raises(ValidationError):
            validate_capture_window(interval, period)

    def test_field_names_in_error(self):
        with pytest.raises(ValidationError) as exc_info:
            validate_capture_window(
                1.0, 1.0, interval_field="post.interval_seconds", period_field="post.period_seconds"
            )

        assert exc_info.value.field_name == "post.period_seconds"
        assert "post.interval_seconds" in str(exc_info.value)


@pytest.mark.unit
class TestErrorHandling:
    """Test cases for the exception hierarchy and error helpers."""

    def test_hierarchy(self):
        for error_class in (CollectorError, CaptureError, RecorderError):
            assert issubclass(error_class, MonitorError)
        assert not issubclass(ValidationError, MonitorError)

    def test_handle_error_reraises(self):
        error = CaptureError("disk full")

        with pytest.raises(CaptureError):
            handle_error(error, "pre-trigger dump")

    def test_handle_error_logs(self, caplog):
        test_logger = logging.getLogger("triggermon.test")

        with caplog.at_level(logging.WARNING, logger="triggermon.test"):
            handle_error(
                ValueError("bad"), "parsing", severity=ErrorSeverity.WARNING,
                reraise=False, logger=test_logger,
            )

        assert "Error in parsing: bad" in caplog.text

    def test_handle_cli_error_exits(self):
        with pytest.raises(SystemExit) as exc_info:
            handle_cli_error(ValueError("bad config"), "configuration", exit_code=2)

        assert exc_info.value.code == 2
