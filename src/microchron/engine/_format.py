"""Single-character date patterns and ``%``-style duration patterns.

Date patterns use one letter per field (``"Y-m-d H:i:s"``); a backslash
makes the next character literal. Duration patterns use ``%`` followed by one
letter (``"%h:%I:%S"``). Names are English and locale independent.
"""

from __future__ import annotations

import calendar
from collections.abc import Callable
from datetime import datetime, timedelta
from io import StringIO

from microchron.engine._base import CalendarDuration

MONTH_NAMES = (
    "January", "February", "March", "April", "May", "June", "July",
    "August", "September", "October", "November", "December",
)

WEEKDAY_NAMES = (
    "Monday", "Tuesday", "Wednesday", "Thursday", "Friday", "Saturday", "Sunday",
)

ISO_8601_PATTERN = "Y-m-d\\TH:i:sP"
RFC_2822_PATTERN = "D, d M Y H:i:s O"


def _ordinal_suffix(day: int) -> str:
    if day in (11, 12, 13):
        return "th"
    return {1: "st", 2: "nd", 3: "rd"}.get(day % 10, "th")


def _utc_offset(moment: datetime, separator: str) -> str:
    offset = moment.utcoffset() or timedelta(0)
    sign = "-" if offset < timedelta(0) else "+"
    minutes = abs(int(offset.total_seconds())) // 60
    return f"{sign}{minutes // 60:02d}{separator}{minutes % 60:02d}"


def _zone_identifier(moment: datetime) -> str:
    zone = moment.tzinfo
    key = getattr(zone, "key", None)
    if key:
        return key
    return moment.tzname() or _utc_offset(moment, ":")


def _twelve_hour(moment: datetime) -> int:
    return moment.hour % 12 or 12


DateField = Callable[[datetime], str]

_DATE_FIELDS: dict[str, DateField] = {
    # Day
    "d": lambda m: f"{m.day:02d}",
    "D": lambda m: WEEKDAY_NAMES[m.weekday()][:3],
    "j": lambda m: str(m.day),
    "l": lambda m: WEEKDAY_NAMES[m.weekday()],
    "N": lambda m: str(m.isoweekday()),
    "S": lambda m: _ordinal_suffix(m.day),
    "w": lambda m: str(m.isoweekday() % 7),
    "z": lambda m: str(m.timetuple().tm_yday - 1),
    # Week
    "W": lambda m: f"{m.isocalendar()[1]:02d}",
    # Month
    "F": lambda m: MONTH_NAMES[m.month - 1],
    "m": lambda m: f"{m.month:02d}",
    "M": lambda m: MONTH_NAMES[m.month - 1][:3],
    "n": lambda m: str(m.month),
    "t": lambda m: str(calendar.monthrange(m.year, m.month)[1]),
    # Year
    "L": lambda m: "1" if calendar.isleap(m.year) else "0",
    "o": lambda m: str(m.isocalendar()[0]),
    "Y": lambda m: f"{m.year:04d}",
    "y": lambda m: f"{m.year % 100:02d}",
    # Time
    "a": lambda m: "am" if m.hour < 12 else "pm",
    "A": lambda m: "AM" if m.hour < 12 else "PM",
    "g": lambda m: str(_twelve_hour(m)),
    "G": lambda m: str(m.hour),
    "h": lambda m: f"{_twelve_hour(m):02d}",
    "H": lambda m: f"{m.hour:02d}",
    "i": lambda m: f"{m.minute:02d}",
    "s": lambda m: f"{m.second:02d}",
    "u": lambda m: f"{m.microsecond:06d}",
    "v": lambda m: f"{m.microsecond // 1000:03d}",
    # Timezone
    "e": _zone_identifier,
    "I": lambda m: "1" if m.dst() else "0",
    "O": lambda m: _utc_offset(m, ""),
    "P": lambda m: _utc_offset(m, ":"),
    "p": lambda m: "Z" if not m.utcoffset() else _utc_offset(m, ":"),
    "T": lambda m: m.tzname() or _utc_offset(m, ":"),
    "Z": lambda m: str(int((m.utcoffset() or timedelta(0)).total_seconds())),
    # Full date/time
    "c": lambda m: format_datetime(m, ISO_8601_PATTERN),
    "r": lambda m: format_datetime(m, RFC_2822_PATTERN),
    "U": lambda m: str(int(m.timestamp())),
}


def format_datetime(moment: datetime, pattern: str) -> str:
    """Render ``moment`` according to a single-character date pattern."""
    w = StringIO()
    escaped = False
    for ch in pattern:
        if escaped:
            w.write(ch)
            escaped = False
        elif ch == "\\":
            escaped = True
        else:
            field = _DATE_FIELDS.get(ch)
            w.write(field(moment) if field is not None else ch)
    return w.getvalue()


DurationField = Callable[[CalendarDuration], str]

_DURATION_FIELDS: dict[str, DurationField] = {
    "Y": lambda d: f"{d.years:02d}",
    "y": lambda d: str(d.years),
    "M": lambda d: f"{d.months:02d}",
    "m": lambda d: str(d.months),
    "D": lambda d: f"{d.days:02d}",
    "d": lambda d: str(d.days),
    "a": lambda d: "(unknown)" if d.total_days is None else str(d.total_days),
    "H": lambda d: f"{d.hours:02d}",
    "h": lambda d: str(d.hours),
    "I": lambda d: f"{d.minutes:02d}",
    "i": lambda d: str(d.minutes),
    "S": lambda d: f"{d.seconds:02d}",
    "s": lambda d: str(d.seconds),
    "R": lambda d: "-" if d.invert else "+",
    "r": lambda d: "-" if d.invert else "",
    "%": lambda d: "%",
}


def format_duration(duration: CalendarDuration, pattern: str) -> str:
    """Render ``duration`` according to a ``%``-style duration pattern.

    Unknown ``%`` sequences are copied unchanged.
    """
    w = StringIO()
    chars = iter(pattern)
    for ch in chars:
        if ch != "%":
            w.write(ch)
            continue
        directive = next(chars, None)
        if directive is None:
            w.write("%")
            break
        field = _DURATION_FIELDS.get(directive)
        w.write(field(duration) if field is not None else f"%{directive}")
    return w.getvalue()


# Single-character date pattern -> strptime directive
_STRPTIME_DIRECTIVES: dict[str, str] = {
    "d": "%d",
    "j": "%d",
    "D": "%a",
    "l": "%A",
    "m": "%m",
    "n": "%m",
    "M": "%b",
    "F": "%B",
    "Y": "%Y",
    "y": "%y",
    "a": "%p",
    "A": "%p",
    "g": "%I",
    "h": "%I",
    "G": "%H",
    "H": "%H",
    "i": "%M",
    "s": "%S",
    "u": "%f",
    "O": "%z",
    "P": "%z",
    "p": "%z",
}


def to_strptime_pattern(pattern: str) -> str:
    """Translate a single-character date pattern into a strptime pattern.

    Characters without a directive are matched literally.
    """
    w = StringIO()
    escaped = False
    for ch in pattern:
        if escaped:
            w.write("%%" if ch == "%" else ch)
            escaped = False
        elif ch == "\\":
            escaped = True
        elif ch in _STRPTIME_DIRECTIVES:
            w.write(_STRPTIME_DIRECTIVES[ch])
        else:
            w.write("%%" if ch == "%" else ch)
    return w.getvalue()
