"""Unit tests for time span parsing and formatting."""

from datetime import timedelta

import pytest

from livesubclip.timespan import (
    format_iso_duration,
    format_timespan,
    parse_timespan,
    ticks_to_timedelta,
)


class TestParseTimespan:
    @pytest.mark.parametrize(
        "text, expected",
        [
            ("00:00:04", timedelta(seconds=4)),
            ("00:01:00", timedelta(minutes=1)),
            ("01:02:03.5", timedelta(hours=1, minutes=2, seconds=3, milliseconds=500)),
            ("00:00:01.1234567", timedelta(seconds=1, microseconds=123457)),
            ("2.03:00:00", timedelta(days=2, hours=3)),
            ("-00:01:40", timedelta(seconds=-100)),
            (" 00:00:02 ", timedelta(seconds=2)),
        ],
    )
    def test_dotnet_format(self, text, expected):
        assert parse_timespan(text) == expected

    @pytest.mark.parametrize(
        "text, expected",
        [
            ("PT4S", timedelta(seconds=4)),
            ("PT1H2M3.5S", timedelta(hours=1, minutes=2, seconds=3.5)),
            ("P1DT2H", timedelta(days=1, hours=2)),
            ("P3D", timedelta(days=3)),
            ("-PT0.1S", timedelta(milliseconds=-100)),
        ],
    )
    def test_iso_format(self, text, expected):
        assert parse_timespan(text) == expected

    @pytest.mark.parametrize("text", ["", "abc", "PT", "P", "P1DT", "00:60:00", "1:2", "00:00:01.12345678"])
    def test_rejects_garbage(self, text):
        with pytest.raises(ValueError):
            parse_timespan(text)

    def test_rejects_non_string(self):
        with pytest.raises(ValueError, match="must be a string"):
            parse_timespan(60)


class TestFormatTimespan:
    def test_whole_seconds(self):
        assert format_timespan(timedelta(minutes=1, seconds=5)) == "00:01:05"

    def test_fraction_uses_seven_digits(self):
        assert format_timespan(timedelta(seconds=4, milliseconds=250)) == "00:00:04.2500000"

    def test_days_and_sign(self):
        assert format_timespan(timedelta(days=1, hours=2)) == "1.02:00:00"
        assert format_timespan(timedelta(seconds=-100)) == "-00:01:40"

    def test_parses_back(self):
        td = timedelta(hours=5, microseconds=66733)
        assert parse_timespan(format_timespan(td)) == td


class TestFormatIsoDuration:
    @pytest.mark.parametrize(
        "td, expected",
        [
            (timedelta(0), "PT0S"),
            (timedelta(seconds=4), "PT4S"),
            (timedelta(hours=1, minutes=2, seconds=3.5), "PT1H2M3.5S"),
            (timedelta(minutes=2), "PT2M"),
            (timedelta(days=1), "PT24H"),
            (timedelta(seconds=-1.9), "-PT1.9S"),
            (timedelta(microseconds=100), "PT0.0001S"),
        ],
    )
    def test_format(self, td, expected):
        assert format_iso_duration(td) == expected


class TestTicksToTimedelta:
    def test_hundred_nanosecond_ticks(self):
        assert ticks_to_timedelta(40_000_000, 10_000_000) == timedelta(seconds=4)

    def test_rounds_to_microseconds(self):
        assert ticks_to_timedelta(15, 10_000_000) == timedelta(microseconds=2)

    def test_large_tick_values_are_exact(self):
        ticks = 16_000_000_000_000_001
        assert ticks_to_timedelta(ticks, 10_000_000) == timedelta(seconds=1_600_000_000)

    def test_invalid_time_scale(self):
        with pytest.raises(ValueError):
            ticks_to_timedelta(10, 0)
