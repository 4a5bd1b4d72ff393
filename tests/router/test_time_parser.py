"""Tests for time expression parsing."""

from datetime import datetime, timedelta

import pytest

from piko.errors import ParseFailure
from piko.router.time_parser import (
    extract_clock_time,
    extract_date_time,
    extract_task_text,
    parse_clock_time,
    to_24_hour,
)

NOW = datetime(2026, 10, 19, 14, 0)
MORNING = datetime(2026, 10, 19, 6, 0)


class TestTo24Hour:
    def test_pm_adds_twelve(self):
        assert to_24_hour(5, "pm") == 17

    def test_noon_stays(self):
        assert to_24_hour(12, "pm") == 12

    def test_midnight(self):
        assert to_24_hour(12, "am") == 0

    def test_no_period_unchanged(self):
        assert to_24_hour(17, None) == 17


class TestExtractClockTime:
    def test_at_hour_with_period(self):
        assert extract_clock_time("call mom at 5pm") == (17, 0)

    def test_at_hour_with_space_before_period(self):
        assert extract_clock_time("call mom at 5 pm") == (17, 0)

    def test_at_hour_minute(self):
        assert extract_clock_time("meeting at 5:30pm") == (17, 30)

    def test_twenty_four_hour(self):
        assert extract_clock_time("meeting at 17:30") == (17, 30)

    def test_bare_hour(self):
        assert extract_clock_time("alarm for 7am") == (7, 0)

    def test_no_time(self):
        assert extract_clock_time("buy milk") is None

    def test_invalid_hour(self):
        assert extract_clock_time("at 25pm") is None

    def test_invalid_minute(self):
        assert extract_clock_time("at 9:75") is None

    def test_bare_hour_minute(self):
        assert extract_clock_time("run 6:30am") == (6, 30)

    def test_bare_hour_minute_pm(self):
        assert extract_clock_time("call 7:15 pm") == (19, 15)

    def test_parse_rejects_out_of_range(self):
        with pytest.raises(ParseFailure):
            parse_clock_time("at 25pm")

    def test_parse_without_time(self):
        assert parse_clock_time("buy milk") is None


class TestExtractDateTime:
    def test_in_minutes(self):
        assert extract_date_time("remind me in 45 minutes", NOW) == NOW + timedelta(minutes=45)

    def test_after_single_minute(self):
        assert extract_date_time("after 1 minute", NOW) == NOW + timedelta(minutes=1)

    def test_in_hours(self):
        assert extract_date_time("in 2 hours", NOW) == NOW + timedelta(hours=2)

    def test_after_hours(self):
        assert extract_date_time("after 3 hours", NOW) == NOW + timedelta(hours=3)

    def test_case_insensitive(self):
        assert extract_date_time("IN 10 MINUTES", NOW) == NOW + timedelta(minutes=10)

    def test_minutes_win_over_clock_time(self):
        result = extract_date_time("in 5 minutes at 3pm", NOW)
        assert result == NOW + timedelta(minutes=5)

    def test_minutes_win_over_hours(self):
        result = extract_date_time("in 2 hours or in 10 minutes", NOW)
        assert result == NOW + timedelta(minutes=10)

    def test_clock_time_later_today(self):
        assert extract_date_time("at 5:30pm", NOW) == datetime(2026, 10, 19, 17, 30)

    def test_clock_time_passed_rolls_to_tomorrow(self):
        assert extract_date_time("at 9am", NOW) == datetime(2026, 10, 20, 9, 0)

    def test_clock_time_still_ahead_today(self):
        assert extract_date_time("at 9am", MORNING) == datetime(2026, 10, 19, 9, 0)

    def test_clock_time_equal_to_now_rolls_over(self):
        assert extract_date_time("at 2pm", NOW) == datetime(2026, 10, 20, 14, 0)

    def test_midnight(self):
        assert extract_date_time("at 12am", NOW) == datetime(2026, 10, 20, 0, 0)

    def test_noon(self):
        assert extract_date_time("at 12pm", MORNING) == datetime(2026, 10, 19, 12, 0)

    def test_tomorrow_with_time(self):
        result = extract_date_time("tomorrow at 9am", MORNING)
        assert result == datetime(2026, 10, 20, 9, 0)

    def test_tomorrow_with_time_already_passed_today(self):
        result = extract_date_time("tomorrow at 9am", NOW)
        assert result == datetime(2026, 10, 20, 9, 0)

    def test_tomorrow_alone_has_no_time(self):
        assert extract_date_time("tomorrow", NOW) is None

    def test_invalid_hour_gives_none(self):
        assert extract_date_time("at 25pm", NOW) is None

    def test_no_expression(self):
        assert extract_date_time("call mom", NOW) is None

    def test_huge_minute_offset_gives_none(self):
        assert extract_date_time("in 99999999999 minutes", NOW) is None

    def test_huge_hour_offset_gives_none(self):
        assert extract_date_time("after 999999999999 hours", NOW) is None

    def test_rollover_past_max_date_gives_none(self):
        assert extract_date_time("at 9am", datetime.max) is None

    def test_bare_hour_minute_rolls_over(self):
        assert extract_date_time("6:30am", NOW) == datetime(2026, 10, 20, 6, 30)

    @pytest.mark.parametrize(
        "text",
        ["in 1 minute", "at 3pm", "at 9am", "7am", "at 23:59", "tomorrow at 8am"],
    )
    def test_result_is_in_the_future(self, text: str):
        result = extract_date_time(text, NOW)
        assert result is not None
        assert result > NOW

    def test_seconds_cleared_for_clock_times(self):
        now = datetime(2026, 10, 19, 14, 0, 42, 1234)
        result = extract_date_time("at 5pm", now)
        assert result == datetime(2026, 10, 19, 17, 0)


class TestExtractTaskText:
    def test_removes_trigger_and_clock_time(self):
        assert extract_task_text("remind me to call mom at 5pm") == "call mom"

    def test_removes_relative_time(self):
        assert extract_task_text("Remind me to buy milk in 10 minutes") == "buy milk"

    def test_removes_after_hours(self):
        assert extract_task_text("Remind me to stretch after 2 hours") == "stretch"

    def test_removes_tomorrow(self):
        text = "set a reminder to water plants tomorrow at 9am"
        assert extract_task_text(text) == "water plants"

    def test_trigger_without_to(self):
        assert extract_task_text("reminder to pay rent") == "pay rent"

    def test_only_first_trigger_removed(self):
        assert extract_task_text("remind me to remind me") == "remind me"

    def test_may_be_empty(self):
        assert extract_task_text("remind me in 5 minutes") == ""

    def test_collapses_inner_whitespace(self):
        assert extract_task_text("remind me to feed at 5pm the cat") == "feed the cat"

    def test_removes_bare_hour_minute(self):
        assert extract_task_text("remind me to run 6:30am") == "run"

    def test_no_trigger_keeps_text(self):
        assert extract_task_text("call the bank at 4pm") == "call the bank"
