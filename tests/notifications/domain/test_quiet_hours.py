"""Tests for quiet-hours window evaluation and HH:MM validation."""

from datetime import time

import pytest
from notifications.preference.quiet_hours import (
    is_within_window,
    minutes_since_midnight,
    validate_time_of_day,
)
from protean.exceptions import ValidationError


class TestTimeOfDayValidation:
    @pytest.mark.parametrize("value", ["00:00", "07:30", "12:00", "23:59"])
    def test_valid_values_pass(self, value):
        assert validate_time_of_day(value, "start") == value

    @pytest.mark.parametrize("value", ["24:00", "12:60", "7:30", "0730", "ab:cd", "12:00:00"])
    def test_malformed_values_rejected(self, value):
        with pytest.raises(ValidationError) as exc:
            validate_time_of_day(value, "start")
        assert "start" in exc.value.messages

    def test_missing_value_rejected(self):
        with pytest.raises(ValidationError) as exc:
            validate_time_of_day(None, "end")
        assert "end" in exc.value.messages

    def test_minutes_since_midnight(self):
        assert minutes_since_midnight("00:00") == 0
        assert minutes_since_midnight("22:15") == 22 * 60 + 15


class TestSameDayWindow:
    def test_inside(self):
        assert is_within_window(time(10, 0), "09:00", "17:00") is True

    def test_outside_after(self):
        assert is_within_window(time(20, 0), "09:00", "17:00") is False

    def test_outside_before(self):
        assert is_within_window(time(8, 59), "09:00", "17:00") is False

    def test_start_is_inclusive(self):
        assert is_within_window(time(9, 0), "09:00", "17:00") is True

    def test_end_is_exclusive(self):
        assert is_within_window(time(17, 0), "09:00", "17:00") is False


class TestMidnightSpanningWindow:
    def test_late_evening_inside(self):
        assert is_within_window(time(23, 30), "22:00", "07:00") is True

    def test_early_morning_inside(self):
        assert is_within_window(time(3, 0), "22:00", "07:00") is True

    def test_midday_outside(self):
        assert is_within_window(time(12, 0), "22:00", "07:00") is False

    def test_end_is_exclusive(self):
        assert is_within_window(time(7, 0), "22:00", "07:00") is False

    def test_seconds_are_ignored(self):
        assert is_within_window(time(6, 59, 59), "22:00", "07:00") is True


class TestEqualBounds:
    @pytest.mark.parametrize("now", [time(0, 0), time(8, 0), time(13, 45), time(23, 59)])
    def test_equal_bounds_cover_the_whole_day(self, now):
        assert is_within_window(now, "08:00", "08:00") is True
