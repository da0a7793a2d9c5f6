"""Fixed-point handling of the sub-second part of an instant.

A fraction of a second is stored as a float in ``[0, 1)`` rounded to six
decimals. Arithmetic on it runs on integer microseconds so whole-second
carries and borrows are exact.
"""

from __future__ import annotations

import math

from microchron._constants import MICROSECOND_DIGITS, MICROSECONDS_PER_SECOND


def _round_half_away_from_zero(value: float) -> int:
    return int(math.copysign(math.floor(abs(value) + 0.5), value))


def to_microseconds(fraction: float) -> int:
    """Convert seconds (usually a fraction of one) to whole microseconds."""
    return _round_half_away_from_zero(fraction * MICROSECONDS_PER_SECOND)


def to_fraction(microseconds: int) -> float:
    """Convert microseconds to seconds, precise to six decimals."""
    return round(int(microseconds) / MICROSECONDS_PER_SECOND, MICROSECOND_DIGITS)


def apply_delta(fraction: float, delta_microseconds: int) -> tuple[float, int]:
    """Add a microsecond delta to a fraction of a second.

    Returns ``(new_fraction, carry)`` where ``new_fraction`` is in ``[0, 1)``
    and ``carry`` is the number of whole seconds (negative for a borrow) that
    must be applied to the owning instant to keep its value exact.
    """
    if delta_microseconds == 0:
        return fraction, 0

    total = to_microseconds(fraction) + int(delta_microseconds)
    # Floor division borrows ceil(-sum) seconds for negative sums and
    # carries floor(sum) seconds for sums of one second or more.
    carry, remainder = divmod(total, MICROSECONDS_PER_SECOND)
    return to_fraction(remainder), carry
