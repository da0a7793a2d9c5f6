"""Gregorian calendar engine on top of ``datetime``, ``zoneinfo`` and dateutil."""

from __future__ import annotations

import calendar
import logging
import re
from datetime import UTC, datetime, timedelta, tzinfo
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from dateutil import parser as dateutil_parser
from dateutil.relativedelta import relativedelta

from microchron._constants import DEFAULT_TIMEZONE
from microchron._errors import (
    ERR_MSG_FORMAT_MISMATCH,
    ERR_MSG_INVALID_TIMEZONE,
    ERR_MSG_MALFORMED_SPEC,
    ERR_MSG_UNPARSEABLE_TIME,
    CalendarParseError,
    InvalidTimezoneError,
    MalformedSpecError,
)
from microchron._fixed_point import to_fraction
from microchron.engine._base import CalendarDuration, CalendarEngine, TimezoneLike
from microchron.engine._format import (
    format_datetime,
    format_duration,
    to_strptime_pattern,
)
from microchron.engine._relative_grammar import parse_relative

logger = logging.getLogger(__name__)

_DURATION_RE = re.compile(
    r"P(?:([0-9]+)Y)?(?:([0-9]+)M)?(?:([0-9]+)D)?"
    r"(?:T(?:([0-9]+)H)?(?:([0-9]+)M)?(?:([0-9]+)S)?)?"
)


def _absolute(moment: datetime) -> datetime:
    return moment.astimezone(UTC)


def _shift(moment: datetime, date_part: relativedelta) -> datetime:
    return moment + date_part if date_part else moment


def _date_part(earlier: datetime, later: datetime) -> relativedelta:
    """Whole years, months and days from ``earlier`` to ``later`` on the wall clock."""
    delta = relativedelta(later, earlier)
    return relativedelta(years=delta.years, months=delta.months, days=delta.days)


class GregorianEngine(CalendarEngine):
    """Proleptic Gregorian calendar with IANA timezones.

    Years, months and days are applied on the wall clock; hours, minutes and
    seconds on absolute time.

    Args:
        default_timezone: Timezone for instants parsed without one.
    """

    def __init__(self, default_timezone: str | tzinfo = DEFAULT_TIMEZONE) -> None:
        if default_timezone is None:
            raise InvalidTimezoneError(
                ERR_MSG_INVALID_TIMEZONE, "default timezone cannot be None"
            )
        self._default_timezone = self.resolve_timezone(default_timezone)

    @property
    def default_timezone(self) -> tzinfo:
        return self._default_timezone

    # --- Construction ---

    def resolve_timezone(self, timezone: TimezoneLike) -> tzinfo:
        if timezone is None:
            return self._default_timezone
        if isinstance(timezone, tzinfo):
            return timezone
        if not isinstance(timezone, str):
            raise InvalidTimezoneError(
                ERR_MSG_INVALID_TIMEZONE,
                f"timezone must be a name or tzinfo, got {type(timezone).__name__}",
            )
        try:
            return ZoneInfo(timezone)
        except (ZoneInfoNotFoundError, ValueError) as exc:
            raise InvalidTimezoneError(
                f"{ERR_MSG_INVALID_TIMEZONE} ({timezone!r})",
                f"timezone {timezone!r} not found in the timezone database",
                wrapped=exc,
            ) from exc

    def now(self, timezone: TimezoneLike = None) -> datetime:
        return datetime.now(self.resolve_timezone(timezone))

    def parse(self, text: str, timezone: TimezoneLike = None) -> datetime:
        """Parse an absolute or relative date/time string.

        Relative strings (``"tomorrow"``, ``"+1 week"``) are applied to the
        current time. Anything else goes to dateutil's parser with today's
        midnight supplying missing fields. A timezone in the text wins over
        ``timezone``.
        """
        zone = self.resolve_timezone(timezone)
        stripped = text.strip()
        if not stripped or stripped.lower() == "now":
            return datetime.now(zone)

        try:
            delta = parse_relative(stripped)
        except CalendarParseError:
            logger.debug("%r is not a relative string, parsing as absolute", stripped)
        else:
            return datetime.now(zone) + delta

        default = datetime.now(zone).replace(hour=0, minute=0, second=0, microsecond=0)
        try:
            moment = dateutil_parser.parse(stripped, default=default)
        except (ValueError, OverflowError) as exc:
            raise CalendarParseError(
                f"{ERR_MSG_UNPARSEABLE_TIME} ({text!r})",
                f"dateutil could not parse {text!r}: {exc}",
                wrapped=exc,
            ) from exc
        if moment.tzinfo is None:
            moment = moment.replace(tzinfo=zone)
        return moment

    def parse_format(
        self, pattern: str, text: str, timezone: TimezoneLike = None
    ) -> datetime:
        zone = self.resolve_timezone(timezone)
        strptime_pattern = to_strptime_pattern(pattern)
        try:
            moment = datetime.strptime(text, strptime_pattern)
        except ValueError as exc:
            raise CalendarParseError(
                f"{ERR_MSG_FORMAT_MISMATCH} ({pattern!r})",
                f"{text!r} does not match {pattern!r} ({strptime_pattern!r}): {exc}",
                wrapped=exc,
            ) from exc
        if moment.tzinfo is None:
            moment = moment.replace(tzinfo=zone)
        return moment

    def parse_duration(self, spec: str) -> CalendarDuration:
        """Parse a whole-second duration spec; ``""`` is a zero duration."""
        if spec == "":
            return CalendarDuration()
        match = _DURATION_RE.fullmatch(spec)
        if match is None or spec.endswith("T"):
            raise MalformedSpecError(
                f"{ERR_MSG_MALFORMED_SPEC} ({spec!r})",
                f"calendar duration spec {spec!r} is not P[nY][nM][nD][T[nH][nM][nS]]",
            )
        years, months, days, hours, minutes, seconds = (
            int(value) if value else 0 for value in match.groups()
        )
        return CalendarDuration(
            years=years,
            months=months,
            days=days,
            hours=hours,
            minutes=minutes,
            seconds=seconds,
        )

    # --- Sub-second boundary ---

    def read_sub_second_fraction(self, instant: datetime) -> float:
        return to_fraction(instant.microsecond)

    def whole_seconds(self, instant: datetime) -> datetime:
        return instant.replace(microsecond=0)

    # --- Arithmetic ---

    def add_seconds(self, instant: datetime, seconds: int) -> datetime:
        if seconds == 0:
            return instant
        moment = _absolute(instant) + timedelta(seconds=seconds)
        return moment.astimezone(instant.tzinfo)

    def add_duration(self, instant: datetime, duration: CalendarDuration) -> datetime:
        sign = -1 if duration.invert else 1
        moment = instant
        if duration.years or duration.months or duration.days:
            # Arithmetic resets fold, so a time-only duration skips this step.
            moment = instant + relativedelta(
                years=sign * duration.years,
                months=sign * duration.months,
                days=sign * duration.days,
            )
        seconds = duration.hours * 3600 + duration.minutes * 60 + duration.seconds
        return self.add_seconds(moment, sign * seconds)

    def diff(self, a: datetime, b: datetime) -> CalendarDuration:
        """Duration from ``a`` to ``b``; ``invert`` is set when ``b < a``.

        Years, months and days are counted on the wall clock and the rest in
        absolute time, the same split :meth:`add_duration` uses, so adding
        the result to the earlier instant gives the later one.
        """
        b = b.astimezone(a.tzinfo)
        if self.compare(a, b) <= 0:
            earlier, later, invert = a, b, False
        else:
            earlier, later, invert = b, a, True

        date_part = _date_part(earlier, later)
        remainder = _absolute(later) - _absolute(_shift(earlier, date_part))
        if remainder < timedelta(0):
            # earlier + date_part fell into a skipped hour after later.
            date_part = _date_part(earlier, later - timedelta(days=1))
            remainder = _absolute(later) - _absolute(_shift(earlier, date_part))

        hours, rest = divmod(remainder.days * 86400 + remainder.seconds, 3600)
        minutes, seconds = divmod(rest, 60)
        return CalendarDuration(
            years=date_part.years,
            months=date_part.months,
            days=date_part.days,
            hours=hours,
            minutes=minutes,
            seconds=seconds,
            invert=invert,
            total_days=(_absolute(later) - _absolute(earlier)).days,
        )

    def compare(self, a: datetime, b: datetime) -> int:
        a, b = _absolute(a), _absolute(b)
        return (a > b) - (a < b)

    def relative_modify(self, instant: datetime, text: str) -> datetime:
        if not text.strip():
            return instant
        delta = parse_relative(text.strip())
        logger.debug("relative modify %r -> %r", text, delta)
        return instant + delta

    # --- Setters ---

    def set_time(
        self, instant: datetime, hour: int, minute: int, second: int = 0
    ) -> datetime:
        # Out-of-range values overflow into the next unit, as with add.
        midnight = instant.replace(hour=0, minute=0, second=0, microsecond=0)
        return midnight + timedelta(hours=hour, minutes=minute, seconds=second)

    def set_date(self, instant: datetime, year: int, month: int, day: int) -> datetime:
        first = instant.replace(year=year, month=1, day=1)
        return first + relativedelta(months=month - 1, days=day - 1)

    def set_timestamp(self, instant: datetime, timestamp: int) -> datetime:
        return datetime.fromtimestamp(timestamp, instant.tzinfo)

    def get_timestamp(self, instant: datetime) -> int:
        return calendar.timegm(instant.utctimetuple())

    def set_timezone(self, instant: datetime, timezone: TimezoneLike) -> datetime:
        return instant.astimezone(self.resolve_timezone(timezone))

    # --- Formatting ---

    def format_instant(self, instant: datetime, pattern: str) -> str:
        return format_datetime(instant, pattern)

    def format_duration(self, duration: CalendarDuration, pattern: str) -> str:
        return format_duration(duration, pattern)
