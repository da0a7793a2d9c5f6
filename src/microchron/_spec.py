"""Parsing of duration specifications with fractional seconds.

The accepted grammar is ``P[nY][nM][nD][T[nH][nM][n[.f]S]]``: the ISO 8601
duration subset understood by calendar engines, extended with a fraction on
the seconds field. The fraction is split off as microseconds and the rest is
rebuilt as a plain spec for the calendar engine.
"""

from __future__ import annotations

import re
from dataclasses import dataclass

from microchron._constants import MICROSECONDS_PER_SECOND
from microchron._errors import ERR_MSG_MALFORMED_SPEC, MalformedSpecError
from microchron._fixed_point import to_microseconds

DURATION_SPEC_RE = re.compile(
    r"""
    P                                   # first character must be a P
    (?:(?P<years>[0-9]+)Y)?
    (?:(?P<months>[0-9]+)M)?
    (?:(?P<days>[0-9]+)D)?
    (?:(?P<time>T)                      # T delineates date and time parts
        (?:(?P<hours>[0-9]+)H)?
        (?:(?P<minutes>[0-9]+)M)?
        (?:(?P<seconds>[0-9]+)(?:\.(?P<fraction>[0-9]+))?S)?
    )?
    """,
    re.VERBOSE,
)


@dataclass(frozen=True)
class DurationSpec:
    """A parsed duration specification.

    ``None`` marks a field that was absent from the spec, as opposed to an
    explicit zero.
    """

    years: int | None = None
    months: int | None = None
    days: int | None = None
    hours: int | None = None
    minutes: int | None = None
    seconds: int | None = None
    microseconds: int = 0

    def legacy_spec(self) -> str:
        """Rebuild the spec without microseconds.

        Returns an empty string when no field is present, which calendar
        engines treat as a zero duration.
        """
        parts = ["P"]
        for value, designator in (
            (self.years, "Y"),
            (self.months, "M"),
            (self.days, "D"),
        ):
            if value is not None:
                parts.append(f"{value}{designator}")

        time_parts = [
            f"{value}{designator}"
            for value, designator in (
                (self.hours, "H"),
                (self.minutes, "M"),
                (self.seconds, "S"),
            )
            if value is not None
        ]
        if time_parts:
            parts.append("T")
            parts.extend(time_parts)

        spec = "".join(parts)
        return "" if spec == "P" else spec


def _optional_int(value: str | None) -> int | None:
    return None if value is None else int(value)


def parse_duration_spec(spec: str) -> DurationSpec:
    """Parse a duration spec whose seconds may carry a fraction.

    Raises:
        MalformedSpecError: If the spec does not match the grammar, or has
            a ``T`` section without any time field.
    """
    if not isinstance(spec, str):
        raise MalformedSpecError(
            f"{ERR_MSG_MALFORMED_SPEC} ({spec!r})",
            f"duration spec must be a string, got {type(spec).__name__}",
        )

    match = DURATION_SPEC_RE.fullmatch(spec)
    if match is None:
        raise MalformedSpecError(
            f"{ERR_MSG_MALFORMED_SPEC} ({spec!r})",
            f"duration spec {spec!r} does not match P[nY][nM][nD][T[nH][nM][n[.f]S]]",
        )

    parts = match.groupdict()
    if parts["time"] and not any(parts[name] for name in ("hours", "minutes", "seconds")):
        raise MalformedSpecError(
            f"{ERR_MSG_MALFORMED_SPEC} ({spec!r})",
            f"duration spec {spec!r} has an empty time section",
        )

    seconds = _optional_int(parts["seconds"])
    microseconds = 0
    if parts["fraction"] is not None:
        microseconds = to_microseconds(float(f"0.{parts['fraction']}"))
        if microseconds == MICROSECONDS_PER_SECOND:
            # The fraction rounded up to a whole second.
            seconds = (seconds or 0) + 1
            microseconds = 0

    return DurationSpec(
        years=_optional_int(parts["years"]),
        months=_optional_int(parts["months"]),
        days=_optional_int(parts["days"]),
        hours=_optional_int(parts["hours"]),
        minutes=_optional_int(parts["minutes"]),
        seconds=seconds,
        microseconds=microseconds,
    )
