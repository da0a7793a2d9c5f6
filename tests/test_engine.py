"""Calendar engine tests."""

from datetime import datetime, timedelta
from zoneinfo import ZoneInfo

import pytest

from microchron._errors import CalendarParseError, InvalidTimezoneError, MalformedSpecError
from microchron.engine import (
    CalendarDuration,
    CalendarEngine,
    EngineName,
    GregorianEngine,
    get_engine,
)

UTC = ZoneInfo("UTC")
AMSTERDAM = ZoneInfo("Europe/Amsterdam")


class TestRegistry:
    def test_get_by_name(self):
        assert isinstance(get_engine("gregorian"), GregorianEngine)

    def test_get_by_enum(self):
        assert isinstance(get_engine(EngineName.GREGORIAN), CalendarEngine)

    def test_unknown_name(self):
        with pytest.raises(ValueError, match="Available: gregorian"):
            get_engine("julian")


class TestTimezones:
    def test_default_is_utc(self, engine):
        assert engine.resolve_timezone(None) == UTC

    def test_custom_default(self, amsterdam_engine):
        assert amsterdam_engine.default_timezone == AMSTERDAM

    def test_tzinfo_passes_through(self, engine):
        assert engine.resolve_timezone(AMSTERDAM) is AMSTERDAM

    @pytest.mark.parametrize("name", ["Mars/Olympus", "", "../etc/passwd"])
    def test_unknown_name(self, engine, name):
        with pytest.raises(InvalidTimezoneError):
            engine.resolve_timezone(name)

    def test_wrong_type(self, engine):
        with pytest.raises(InvalidTimezoneError, match="unknown or bad timezone"):
            engine.resolve_timezone(123)

    def test_bad_default(self):
        with pytest.raises(InvalidTimezoneError):
            GregorianEngine("Mars/Olympus")

    def test_none_default(self):
        with pytest.raises(InvalidTimezoneError):
            GregorianEngine(None)


class TestParse:
    def test_absolute_keeps_microseconds(self, engine):
        moment = engine.parse("2014-10-09 09:17:50.34")
        assert moment == datetime(2014, 10, 9, 9, 17, 50, 340000, tzinfo=UTC)

    def test_date_only_is_midnight(self, engine):
        assert engine.parse("2014-10-09") == datetime(2014, 10, 9, tzinfo=UTC)

    def test_time_only_is_today(self, engine):
        moment = engine.parse("12:00:00.1")
        assert moment.date() == datetime.now(UTC).date()
        assert (moment.hour, moment.microsecond) == (12, 100000)

    def test_zone_argument(self, engine):
        moment = engine.parse("2014-10-09 09:17:50", "Europe/Amsterdam")
        assert moment.utcoffset() == timedelta(hours=2)

    def test_offset_in_text_wins(self, engine):
        moment = engine.parse("2014-10-09T09:17:50+05:00", "Europe/Amsterdam")
        assert moment.utcoffset() == timedelta(hours=5)

    @pytest.mark.parametrize("text", ["", "  ", "now", "NOW"])
    def test_now(self, engine, text):
        before = datetime.now(UTC)
        moment = engine.parse(text)
        assert before <= moment <= datetime.now(UTC)

    def test_relative(self, engine):
        moment = engine.parse("tomorrow")
        assert moment.date() == (datetime.now(UTC) + timedelta(days=1)).date()
        assert (moment.hour, moment.minute, moment.second, moment.microsecond) == (0, 0, 0, 0)

    @pytest.mark.parametrize("text", ["not a date at all", "2014-13-45"])
    def test_unparseable(self, engine, text):
        with pytest.raises(CalendarParseError, match="unable to parse date/time string"):
            engine.parse(text)

    def test_parse_format(self, engine):
        moment = engine.parse_format("d/m/Y H:i", "09/10/2014 09:17")
        assert moment == datetime(2014, 10, 9, 9, 17, tzinfo=UTC)

    def test_parse_format_mismatch(self, engine):
        with pytest.raises(CalendarParseError, match="does not match format"):
            engine.parse_format("Y-m-d", "09/10/2014")


class TestParseDuration:
    def test_empty_is_zero(self, engine):
        assert engine.parse_duration("") == CalendarDuration()

    def test_fields(self, engine):
        assert engine.parse_duration("P1Y2M3DT4H5M6S") == CalendarDuration(1, 2, 3, 4, 5, 6)

    @pytest.mark.parametrize("spec", ["PT", "P1DT", "PT1.5S", "X", "P1W"])
    def test_malformed(self, engine, spec):
        with pytest.raises(MalformedSpecError):
            engine.parse_duration(spec)


class TestSubSecondBoundary:
    def test_read_fraction(self, engine):
        moment = datetime(2014, 10, 9, 9, 17, 50, 340000, tzinfo=UTC)
        assert engine.read_sub_second_fraction(moment) == 0.34

    def test_whole_seconds(self, engine, moment):
        assert engine.whole_seconds(moment.replace(microsecond=340000)) == moment


class TestArithmetic:
    def test_add_seconds(self, engine, moment):
        assert engine.add_seconds(moment, -50) == datetime(2014, 10, 9, 9, 17, tzinfo=UTC)

    def test_add_seconds_is_absolute_across_dst(self, engine):
        start = datetime(2014, 10, 26, 1, 30, tzinfo=AMSTERDAM)
        end = engine.add_seconds(start, 7200)
        assert engine.get_timestamp(end) - engine.get_timestamp(start) == 7200
        assert end.utcoffset() == timedelta(hours=1)

    def test_add_duration(self, engine, moment):
        duration = CalendarDuration(months=1, days=1, hours=1)
        assert engine.add_duration(moment, duration) == datetime(2014, 11, 10, 10, 17, 50, tzinfo=UTC)

    def test_add_inverted_duration(self, engine, moment):
        duration = CalendarDuration(days=10, seconds=50, invert=True)
        assert engine.add_duration(moment, duration) == datetime(2014, 9, 29, 9, 17, tzinfo=UTC)

    def test_add_days_keeps_wall_clock_across_dst(self, engine):
        start = datetime(2014, 10, 25, 12, tzinfo=AMSTERDAM)
        end = engine.add_duration(start, CalendarDuration(days=1))
        assert (end.day, end.hour) == (26, 12)

    def test_diff(self, engine):
        a = datetime(2014, 1, 31, tzinfo=UTC)
        b = datetime(2014, 3, 1, tzinfo=UTC)
        forward = engine.diff(a, b)
        assert (forward.months, forward.days, forward.invert) == (1, 1, False)
        assert forward.total_days == 29
        backward = engine.diff(b, a)
        assert (backward.months, backward.days, backward.invert) == (1, 1, True)

    def test_diff_across_spring_forward(self, engine):
        a = datetime(2014, 3, 30, tzinfo=AMSTERDAM)
        b = datetime(2014, 3, 30, 12, tzinfo=AMSTERDAM)
        assert engine.diff(a, b) == CalendarDuration(hours=11)
        assert engine.add_duration(a, engine.diff(a, b)) == b

    def test_diff_across_fall_back(self, engine):
        a = datetime(2014, 10, 26, tzinfo=AMSTERDAM)
        b = datetime(2014, 10, 26, 12, tzinfo=AMSTERDAM)
        assert engine.diff(a, b) == CalendarDuration(hours=13)

    def test_diff_days_into_skipped_hour(self, engine):
        a = datetime(2014, 3, 29, 2, 30, tzinfo=AMSTERDAM)
        b = datetime(2014, 3, 30, 3, 10, tzinfo=AMSTERDAM)
        duration = engine.diff(a, b)
        assert duration == CalendarDuration(hours=23, minutes=40)
        assert engine.add_duration(a, duration) == b

    def test_compare_uses_elapsed_time_in_repeated_hour(self, engine):
        first_pass = datetime(2014, 10, 26, 2, 30, tzinfo=AMSTERDAM)
        second_pass = datetime(2014, 10, 26, 2, 10, fold=1, tzinfo=AMSTERDAM)
        assert engine.compare(first_pass, second_pass) == -1

    def test_diff_across_zones(self, engine):
        a = datetime(2014, 10, 9, 11, tzinfo=AMSTERDAM)
        b = datetime(2014, 10, 9, 10, tzinfo=UTC)
        assert engine.diff(a, b) == CalendarDuration(hours=1)

    def test_compare(self, engine, moment):
        later = moment + timedelta(seconds=1)
        assert engine.compare(moment, later) == -1
        assert engine.compare(later, moment) == 1
        assert engine.compare(moment, moment.astimezone(AMSTERDAM)) == 0

    def test_relative_modify(self, engine, moment):
        assert engine.relative_modify(moment, " +1 day ") == moment + timedelta(days=1)

    def test_relative_modify_blank(self, engine, moment):
        assert engine.relative_modify(moment, "   ") is moment


class TestSetters:
    def test_set_time(self, engine, moment):
        assert engine.set_time(moment, 10, 30) == datetime(2014, 10, 9, 10, 30, tzinfo=UTC)

    def test_set_time_overflow(self, engine, moment):
        assert engine.set_time(moment, 25, 0) == datetime(2014, 10, 10, 1, tzinfo=UTC)

    def test_set_date(self, engine, moment):
        assert engine.set_date(moment, 2015, 2, 3) == datetime(2015, 2, 3, 9, 17, 50, tzinfo=UTC)

    def test_set_date_overflow(self, engine, moment):
        assert engine.set_date(moment, 2015, 2, 30) == datetime(2015, 3, 2, 9, 17, 50, tzinfo=UTC)

    def test_timestamps(self, engine, moment):
        assert engine.get_timestamp(moment) == 1412846270
        assert engine.set_timestamp(moment, 0) == datetime(1970, 1, 1, tzinfo=UTC)

    def test_set_timezone(self, engine, moment):
        moved = engine.set_timezone(moment, "Europe/Amsterdam")
        assert moved.hour == 11
        assert moved == moment
