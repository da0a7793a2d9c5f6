"""Durations with a microseconds component."""

from __future__ import annotations

import dataclasses
from datetime import timedelta

from microchron._constants import DEFAULT_DURATION_SPEC, MICROSECONDS_PER_SECOND
from microchron._errors import ERR_MSG_NEGATIVE_DURATION, MicrochronError
from microchron._spec import parse_duration_spec
from microchron.engine import CalendarDuration, CalendarEngine, default_engine


class DurationMS:
    """A signed span of calendar time plus microseconds.

    Calendar fields are owned by a :class:`CalendarDuration` and are never
    negative; ``invert`` carries the sign and may be flipped by callers.
    ``microseconds`` is normally ``0..999999`` but is not normalized, so a
    larger or negative value carries into whole seconds when added to an
    instant.

    Example::

        >>> d = DurationMS.parse("PT59.9S")
        >>> d.seconds, d.microseconds
        (59, 900000)
    """

    __slots__ = ("_calendar", "_engine", "invert", "microseconds")

    def __init__(
        self,
        calendar: CalendarDuration | None = None,
        microseconds: int = 0,
        *,
        invert: bool | None = None,
        engine: CalendarEngine | None = None,
    ) -> None:
        calendar = calendar if calendar is not None else CalendarDuration()
        self._calendar = dataclasses.replace(calendar, invert=False)
        self._engine = engine if engine is not None else default_engine
        self.invert = calendar.invert if invert is None else bool(invert)
        self.microseconds = int(microseconds)

    @classmethod
    def parse(cls, spec: str, *, engine: CalendarEngine | None = None) -> DurationMS:
        """Create a duration from a spec such as ``"P1DT2H0.25S"``.

        Raises:
            MalformedSpecError: If the spec does not match
                ``P[nY][nM][nD][T[nH][nM][n[.f]S]]``.
        """
        engine = engine if engine is not None else default_engine
        parsed = parse_duration_spec(spec)
        calendar = engine.parse_duration(parsed.legacy_spec())
        return cls(calendar, parsed.microseconds, engine=engine)

    @classmethod
    def from_calendar(
        cls,
        duration: CalendarDuration,
        microseconds: int = 0,
        *,
        engine: CalendarEngine | None = None,
    ) -> DurationMS:
        """Cast a calendar-only duration."""
        return cls(duration, microseconds, engine=engine)

    @classmethod
    def from_timedelta(
        cls, delta: timedelta, *, engine: CalendarEngine | None = None
    ) -> DurationMS:
        """Cast a ``timedelta`` into days, hours, minutes, seconds and microseconds."""
        invert = delta < timedelta(0)
        magnitude = -delta if invert else delta
        hours, remainder = divmod(magnitude.seconds, 3600)
        minutes, seconds = divmod(remainder, 60)
        calendar = CalendarDuration(
            days=magnitude.days,
            hours=hours,
            minutes=minutes,
            seconds=seconds,
            invert=invert,
        )
        return cls(calendar, magnitude.microseconds, engine=engine)

    # --- Calendar fields ---

    @property
    def years(self) -> int:
        return self._calendar.years

    @property
    def months(self) -> int:
        return self._calendar.months

    @property
    def days(self) -> int:
        return self._calendar.days

    @property
    def hours(self) -> int:
        return self._calendar.hours

    @property
    def minutes(self) -> int:
        return self._calendar.minutes

    @property
    def seconds(self) -> int:
        return self._calendar.seconds

    @property
    def total_days(self) -> int | None:
        """Whole days spanned, known only for durations computed by ``diff``."""
        return self._calendar.total_days

    @property
    def engine(self) -> CalendarEngine:
        return self._engine

    def calendar_duration(self) -> CalendarDuration:
        """The calendar part of this duration, signed by ``invert``."""
        return dataclasses.replace(self._calendar, invert=self.invert)

    # --- Operations ---

    def negated(self) -> DurationMS:
        return DurationMS(
            self._calendar,
            self.microseconds,
            invert=not self.invert,
            engine=self._engine,
        )

    def format(self, pattern: str) -> str:
        """Render the duration.

        Besides the calendar engine's ``%`` fields, ``%U`` gives the
        microseconds zero-padded to six digits and ``%u`` the bare number,
        e.g. ``"%s.%U"`` gives ``"8.012340"``. These are replaced before the
        engine sees the pattern.
        """
        pattern = pattern.replace("%U", f"{self.microseconds:06d}")
        pattern = pattern.replace("%u", f"{self.microseconds:d}")
        return self._engine.format_duration(self.calendar_duration(), pattern)

    def to_spec(self) -> str:
        """The duration as a spec string accepted by :meth:`parse`.

        The sign is not part of the spec. Microseconds outside
        ``0..999999`` are folded into the seconds; a negative result borrows
        from the minutes, hours and days.

        Raises:
            MicrochronError: If the borrow needs more than the days, hours
                and minutes hold.
        """
        extra_seconds, microseconds = divmod(self.microseconds, MICROSECONDS_PER_SECOND)
        days, hours, minutes = self.days, self.hours, self.minutes
        seconds = self.seconds + extra_seconds
        if seconds < 0:
            total = ((days * 24 + hours) * 60 + minutes) * 60 + seconds
            if total < 0:
                raise MicrochronError(
                    ERR_MSG_NEGATIVE_DURATION,
                    f"{self.microseconds} microseconds exceed the day and time "
                    f"fields of {self._calendar}",
                )
            days, total = divmod(total, 86400)
            hours, total = divmod(total, 3600)
            minutes, seconds = divmod(total, 60)

        date_part = "".join(
            f"{value}{designator}"
            for value, designator in ((self.years, "Y"), (self.months, "M"), (days, "D"))
            if value
        )
        time_part = "".join(
            f"{value}{designator}"
            for value, designator in ((hours, "H"), (minutes, "M"))
            if value
        )
        if microseconds:
            time_part += f"{seconds}.{microseconds:06d}S"
        elif seconds:
            time_part += f"{seconds}S"

        if not date_part and not time_part:
            return DEFAULT_DURATION_SPEC
        return f"P{date_part}T{time_part}" if time_part else f"P{date_part}"

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, DurationMS):
            return NotImplemented
        return (
            self._calendar == other._calendar
            and self.invert == other.invert
            and self.microseconds == other.microseconds
        )

    def __str__(self) -> str:
        return ("-" if self.invert else "") + self.to_spec()

    def __repr__(self) -> str:
        try:
            return f"<DurationMS {self}>"
        except MicrochronError:
            return f"<DurationMS {self._calendar!r} microseconds={self.microseconds}>"
