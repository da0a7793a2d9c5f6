"""Shared constants for microsecond-precision date/time arithmetic."""

MICROSECONDS_PER_SECOND = 1_000_000
"""There are this many microseconds in one second."""

MICROSECOND_DIGITS = 6
"""Decimal places kept when a fraction of a second is stored."""

DEFAULT_TIMEZONE = "UTC"
"""Timezone applied to instants parsed without one."""

DEFAULT_INSTANT_FORMAT = "Y-m-d\\TH:i:sO"
"""Pattern used by ``str(InstantMS)`` (ISO 8601 with a basic offset)."""

DEFAULT_DURATION_SPEC = "PT0S"
"""Spec written for a zero duration."""

ORDINAL_VALUES: dict[str, int] = {
    "first": 1,
    "second": 2,
    "third": 3,
    "fourth": 4,
    "fifth": 5,
    "sixth": 6,
    "seventh": 7,
    "eighth": 8,
    "ninth": 9,
    "tenth": 10,
    "eleventh": 11,
    "twelfth": 12,
    "next": 1,
    "last": -1,
    "previous": -1,
    "this": 0,
}
"""Ordinal words recognized in relative strings, mapped to their magnitude."""

TIME_RESETTING_KEYWORDS: tuple[str, ...] = (
    "yesterday",
    "midnight",
    "today",
    "noon",
    "tomorrow",
)
"""Keywords that reset the time of day, and with it the sub-second fraction."""
