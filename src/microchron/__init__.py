"""microchron - date/time and duration arithmetic with exact microseconds."""

from __future__ import annotations

from importlib.metadata import PackageNotFoundError, version

try:
    __version__ = version("microchron")
except PackageNotFoundError:  # running from a source tree without install
    __version__ = "0.0.0.dev0"

from microchron._errors import (
    CalendarParseError,
    InvalidTimezoneError,
    MalformedSpecError,
    MicrochronError,
)
from microchron.duration import DurationMS
from microchron.engine import (
    CalendarDuration,
    CalendarEngine,
    GregorianEngine,
    TimezoneLike,
    get_engine,
)
from microchron.instant import InstantMS

__all__ = [
    "diff",
    "instant",
    "parse_duration",
    "CalendarDuration",
    "CalendarEngine",
    "CalendarParseError",
    "DurationMS",
    "GregorianEngine",
    "InstantMS",
    "InvalidTimezoneError",
    "MalformedSpecError",
    "MicrochronError",
    "get_engine",
]


def parse_duration(spec: str, *, engine: CalendarEngine | None = None) -> DurationMS:
    """Parse a duration spec whose seconds may carry a fraction.

    Args:
        spec: Spec such as ``"PT59.9S"`` or ``"P1DT0.999999S"``.
        engine: Calendar engine. Defaults to the Gregorian engine.

    Returns:
        The parsed DurationMS.

    Raises:
        MalformedSpecError: If the spec is not ``P[nY][nM][nD][T[nH][nM][n[.f]S]]``.
    """
    return DurationMS.parse(spec, engine=engine)


def instant(
    time: str = "now",
    timezone: TimezoneLike = None,
    *,
    engine: CalendarEngine | None = None,
) -> InstantMS:
    """Create an InstantMS from a date/time string.

    Args:
        time: Absolute (``"2014-10-09 09:17:50.34"``) or relative
            (``"tomorrow"``) date/time string. Defaults to now.
        timezone: Timezone name or tzinfo for strings without one.
        engine: Calendar engine. Defaults to the Gregorian engine in UTC.

    Raises:
        CalendarParseError: If the string cannot be parsed.
        InvalidTimezoneError: If the timezone is unknown.
    """
    return InstantMS(time, timezone, engine=engine)


def diff(a: str | InstantMS, b: str | InstantMS, *, absolute: bool = False) -> DurationMS:
    """The duration from ``a`` to ``b``; strings are parsed as instants."""
    if isinstance(a, str):
        a = InstantMS(a)
    if isinstance(b, str):
        b = InstantMS(b)
    return a.diff(b, absolute=absolute)
