"""Instants with microsecond precision."""

from __future__ import annotations

import logging
import math
from datetime import datetime, timedelta, tzinfo

from microchron import _fixed_point, _relative
from microchron._constants import DEFAULT_INSTANT_FORMAT, MICROSECONDS_PER_SECOND
from microchron.duration import DurationMS
from microchron.engine import CalendarEngine, TimezoneLike, default_engine

logger = logging.getLogger(__name__)


class InstantMS:
    """A point in calendar time plus a fraction of a second.

    The calendar part is a whole-second instant owned by a
    :class:`~microchron.engine.CalendarEngine`; the fraction is kept here in
    ``[0, 1)``, rounded to microseconds. Mutating methods change the instance
    in place and return it, so calls can be chained::

        >>> InstantMS("2014-10-09 09:17:50.34").modify("+1 day previous microsecond").format(
        ...     "Y-m-d H:i:s.u"
        ... )
        '2014-10-10 09:17:50.339999'

    Args:
        time: Date/time string understood by the engine; ``"now"`` by default.
        timezone: Timezone for strings without one; engine default if None.
        engine: Calendar engine; the module default if None.

    Raises:
        CalendarParseError: If the engine cannot parse ``time``.
        InvalidTimezoneError: If ``timezone`` cannot be resolved.
    """

    __slots__ = ("_engine", "_moment", "_fraction")

    def __init__(
        self,
        time: str = "now",
        timezone: TimezoneLike = None,
        *,
        engine: CalendarEngine | None = None,
    ) -> None:
        engine = engine if engine is not None else default_engine
        parsed = engine.parse(time, timezone)
        self._engine = engine
        self._set_from_engine(parsed)

    @classmethod
    def from_datetime(
        cls, moment: datetime, *, engine: CalendarEngine | None = None
    ) -> InstantMS:
        """Cast a ``datetime``; its microseconds become the fraction.

        A naive ``datetime`` is placed in the engine's default timezone.
        """
        engine = engine if engine is not None else default_engine
        if moment.tzinfo is None:
            moment = moment.replace(tzinfo=engine.resolve_timezone(None))
        instant = cls.__new__(cls)
        instant._engine = engine
        instant._set_from_engine(moment)
        return instant

    @classmethod
    def from_format(
        cls,
        pattern: str,
        text: str,
        timezone: TimezoneLike = None,
        *,
        engine: CalendarEngine | None = None,
    ) -> InstantMS:
        """Parse ``text`` with a date pattern such as ``"Y-m-d H:i:s.u"``."""
        engine = engine if engine is not None else default_engine
        instant = cls.__new__(cls)
        instant._engine = engine
        instant._set_from_engine(engine.parse_format(pattern, text, timezone))
        return instant

    def _set_from_engine(self, moment: datetime) -> None:
        fraction = self._engine.read_sub_second_fraction(moment)
        self._moment = self._engine.whole_seconds(moment)
        self._fraction = fraction

    # --- Properties ---

    @property
    def engine(self) -> CalendarEngine:
        return self._engine

    @property
    def fraction(self) -> float:
        """The sub-second part in seconds, ``0 <= fraction < 1``."""
        return self._fraction

    @property
    def microseconds(self) -> int:
        return _fixed_point.to_microseconds(self._fraction)

    @property
    def timezone(self) -> tzinfo:
        return self._moment.tzinfo

    # --- Setters ---

    def set_microseconds(self, microseconds: int) -> InstantMS:
        """Set the sub-second part; the calendar part is left alone.

        Values outside ``0..999999`` carry into whole seconds.
        """
        self._fraction = 0.0
        return self._shift_microseconds(microseconds)

    def set_time(
        self, hour: int, minute: int, second: int = 0, microsecond: int = 0
    ) -> InstantMS:
        self._moment = self._engine.set_time(self._moment, hour, minute, second)
        return self.set_microseconds(microsecond)

    def set_date(self, year: int, month: int, day: int) -> InstantMS:
        self._moment = self._engine.set_date(self._moment, year, month, day)
        return self

    def set_timestamp(self, timestamp: float) -> InstantMS:
        """Set the instant from seconds since the Unix epoch.

        The fractional part of ``timestamp`` becomes the fraction, e.g.
        ``set_timestamp(time.time())``.
        """
        seconds = math.floor(timestamp)
        microseconds = _fixed_point.to_microseconds(timestamp - seconds)
        self._moment = self._engine.set_timestamp(self._moment, seconds)
        return self.set_microseconds(microseconds)

    def set_timezone(self, timezone: TimezoneLike) -> InstantMS:
        self._moment = self._engine.set_timezone(self._moment, timezone)
        return self

    def get_timestamp(self, include_fraction: bool = False) -> int | float:
        """Seconds since the Unix epoch, as a float when ``include_fraction``."""
        timestamp = self._engine.get_timestamp(self._moment)
        if include_fraction:
            return timestamp + self._fraction
        return timestamp

    # --- Arithmetic ---

    def _shift_microseconds(self, microseconds: int) -> InstantMS:
        fraction, carry = _fixed_point.apply_delta(self._fraction, microseconds)
        if carry:
            logger.debug("%+d microseconds carry %+d seconds", microseconds, carry)
            self._moment = self._engine.add_seconds(self._moment, carry)
        self._fraction = fraction
        return self

    def add(self, duration: DurationMS) -> InstantMS:
        """Add a duration in place.

        The microseconds are applied first, carrying into whole seconds,
        then the engine adds the calendar fields.
        """
        if duration.microseconds:
            delta = -duration.microseconds if duration.invert else duration.microseconds
            self._shift_microseconds(delta)
        self._moment = self._engine.add_duration(self._moment, duration.calendar_duration())
        return self

    def sub(self, duration: DurationMS) -> InstantMS:
        """Subtract a duration in place; ``duration`` itself is not changed."""
        return self.add(duration.negated())

    def diff(self, other: InstantMS, absolute: bool = False) -> DurationMS:
        """The duration from this instant to ``other``.

        ``invert`` is set when ``other`` is earlier, unless ``absolute``.
        Swapping the operands gives the same magnitude and microseconds.
        """
        other_is_earlier = self.compare(other) > 0
        earlier, later = (other, self) if other_is_earlier else (self, other)

        # Long subtraction of the microseconds; a negative result borrows a
        # second from the later instant.
        microseconds = later.microseconds - earlier.microseconds
        later_moment = later._moment
        if microseconds < 0:
            microseconds += MICROSECONDS_PER_SECOND
            later_moment = self._engine.add_seconds(later_moment, -1)

        calendar = self._engine.diff(earlier._moment, later_moment)
        return DurationMS(
            calendar,
            microseconds,
            invert=other_is_earlier and not absolute,
            engine=self._engine,
        )

    def compare(self, other: InstantMS) -> int:
        """-1, 0 or 1 as this instant is earlier than, equal to or later than ``other``."""
        result = self._engine.compare(self._moment, other._moment)
        if result:
            return result
        a, b = self.microseconds, other.microseconds
        return (a > b) - (a < b)

    def modify(self, modifier: str) -> InstantMS:
        """Apply a relative date/time string in place.

        Accepts the engine's relative phrases plus microsecond phrases such
        as ``"3 microseconds"`` or ``"next microsecond"``. A time-resetting
        keyword (``midnight``, ``today``, ``noon``, ``tomorrow``,
        ``yesterday``) also zeroes the fraction before the microseconds are
        applied.
        """
        remainder, microseconds = _relative.extract(modifier)
        self._moment = self._engine.relative_modify(self._moment, remainder)
        if _relative.has_reset_keyword(modifier):
            self._fraction = 0.0
        return self._shift_microseconds(microseconds)

    # --- Formatting and conversion ---

    def format(self, pattern: str) -> str:
        """Render the instant with a single-character date pattern.

        Every ``u`` in ``pattern`` is replaced with the six-digit microseconds
        before the engine formats the rest, escaped or not.
        """
        pattern = pattern.replace("u", f"{self.microseconds:06d}")
        return self._engine.format_instant(self._moment, pattern)

    def to_datetime(self) -> datetime:
        return self._moment + timedelta(microseconds=self.microseconds)

    def copy(self) -> InstantMS:
        instant = type(self).__new__(type(self))
        instant._engine = self._engine
        instant._moment = self._moment
        instant._fraction = self._fraction
        return instant

    __copy__ = copy

    # --- Comparison operators ---

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, InstantMS):
            return NotImplemented
        return self.compare(other) == 0

    def __lt__(self, other: InstantMS) -> bool:
        return self.compare(other) < 0

    def __le__(self, other: InstantMS) -> bool:
        return self.compare(other) <= 0

    def __gt__(self, other: InstantMS) -> bool:
        return self.compare(other) > 0

    def __ge__(self, other: InstantMS) -> bool:
        return self.compare(other) >= 0

    def __str__(self) -> str:
        return self.format(DEFAULT_INSTANT_FORMAT)

    def __repr__(self) -> str:
        return f"InstantMS({self.format('Y-m-d H:i:s.uP')!r})"
