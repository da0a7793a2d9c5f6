"""Microsecond operations in relative date/time strings.

Calendar engines do not know microseconds as a unit. Phrases such as
``"3 microseconds"`` or ``"previous microsecond"`` are located here, cut out
of the string and summed; the remainder is handed to the calendar engine.
"""

from __future__ import annotations

import re
from dataclasses import dataclass

from microchron._constants import ORDINAL_VALUES, TIME_RESETTING_KEYWORDS

_SPACE = r"[ \t]"
_ORDINALS = "|".join(ORDINAL_VALUES)

MICROSECOND_OPERATION_RE = re.compile(
    rf"""
    (?:^|{_SPACE}+)                     # start of string or separating space
    (?P<amount>{_ORDINALS}|[+-]?[0-9]+)
    {_SPACE}+microseconds?
    (?={_SPACE}|$)                      # end of string or space, not consumed
    """,
    re.VERBOSE | re.IGNORECASE,
)

RESET_KEYWORD_RE = re.compile(
    rf"(?:^|{_SPACE})(?:{'|'.join(TIME_RESETTING_KEYWORDS)})(?={_SPACE}|$)",
    re.IGNORECASE,
)


@dataclass(frozen=True)
class MicrosecondOperation:
    """A microsecond phrase found in a relative string."""

    start: int
    end: int
    amount: int


def _amount(token: str) -> int:
    ordinal = ORDINAL_VALUES.get(token.lower())
    if ordinal is not None:
        return ordinal
    return int(token)


def find_operations(text: str) -> list[MicrosecondOperation]:
    """Find the microsecond phrases in ``text``, left to right."""
    return [
        MicrosecondOperation(match.start(), match.end(), _amount(match["amount"]))
        for match in MICROSECOND_OPERATION_RE.finditer(text)
    ]


def extract(text: str) -> tuple[str, int]:
    """Remove the microsecond phrases from ``text``.

    Returns the remaining text and the net number of microseconds, e.g.
    ``"+1 day previous microsecond"`` gives ``("+1 day", -1)``.
    """
    operations = find_operations(text)
    remainder = text
    # Back to front, so earlier spans stay valid.
    for operation in reversed(operations):
        remainder = remainder[: operation.start] + remainder[operation.end :]
    return remainder, sum(operation.amount for operation in operations)


def has_reset_keyword(text: str) -> bool:
    """Whether ``text`` contains a keyword that resets the time of day."""
    return RESET_KEYWORD_RE.search(text) is not None
