"""Abstract base class for calendar engines."""

from __future__ import annotations

import enum
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from datetime import datetime, tzinfo

TimezoneLike = str | tzinfo | None
"""A timezone name, a ``tzinfo`` object, or ``None`` for the engine default."""


class EngineName(enum.StrEnum):
    GREGORIAN = "gregorian"


@dataclass(frozen=True)
class CalendarDuration:
    """A whole-second duration in calendar fields.

    Fields are never negative; ``invert`` carries the sign. ``total_days`` is
    only known for durations computed from two instants.
    """

    years: int = 0
    months: int = 0
    days: int = 0
    hours: int = 0
    minutes: int = 0
    seconds: int = 0
    invert: bool = False
    total_days: int | None = field(default=None, compare=False)


class CalendarEngine(ABC):
    """Abstract base class defining the calendar engine interface.

    A calendar engine owns everything at whole-second granularity: parsing,
    calendar arithmetic, timezones and formatting. Instants are timezone
    aware ``datetime`` objects; only :meth:`parse`, :meth:`parse_format` and
    :meth:`now` may return one with a sub-second part, which callers read
    with :meth:`read_sub_second_fraction` and drop with :meth:`whole_seconds`.
    """

    # --- Construction ---

    @abstractmethod
    def resolve_timezone(self, timezone: TimezoneLike) -> tzinfo: ...

    @abstractmethod
    def now(self, timezone: TimezoneLike = None) -> datetime: ...

    @abstractmethod
    def parse(self, text: str, timezone: TimezoneLike = None) -> datetime: ...

    @abstractmethod
    def parse_format(
        self, pattern: str, text: str, timezone: TimezoneLike = None
    ) -> datetime: ...

    @abstractmethod
    def parse_duration(self, spec: str) -> CalendarDuration: ...

    # --- Sub-second boundary ---

    @abstractmethod
    def read_sub_second_fraction(self, instant: datetime) -> float: ...

    @abstractmethod
    def whole_seconds(self, instant: datetime) -> datetime: ...

    # --- Arithmetic ---

    @abstractmethod
    def add_seconds(self, instant: datetime, seconds: int) -> datetime: ...

    @abstractmethod
    def add_duration(
        self, instant: datetime, duration: CalendarDuration
    ) -> datetime: ...

    @abstractmethod
    def diff(self, a: datetime, b: datetime) -> CalendarDuration: ...

    @abstractmethod
    def compare(self, a: datetime, b: datetime) -> int: ...

    @abstractmethod
    def relative_modify(self, instant: datetime, text: str) -> datetime: ...

    # --- Setters ---

    @abstractmethod
    def set_time(
        self, instant: datetime, hour: int, minute: int, second: int = 0
    ) -> datetime: ...

    @abstractmethod
    def set_date(
        self, instant: datetime, year: int, month: int, day: int
    ) -> datetime: ...

    @abstractmethod
    def set_timestamp(self, instant: datetime, timestamp: int) -> datetime: ...

    @abstractmethod
    def get_timestamp(self, instant: datetime) -> int: ...

    @abstractmethod
    def set_timezone(self, instant: datetime, timezone: TimezoneLike) -> datetime: ...

    # --- Formatting ---

    @abstractmethod
    def format_instant(self, instant: datetime, pattern: str) -> str: ...

    @abstractmethod
    def format_duration(self, duration: CalendarDuration, pattern: str) -> str: ...
