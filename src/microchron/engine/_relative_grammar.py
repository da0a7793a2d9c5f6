"""Relative date/time phrases at whole-second granularity.

Parses strings such as ``"+1 day"``, ``"next month"``, ``"tomorrow noon"``,
``"last monday"`` or ``"first day of next month"`` into a single
:class:`~dateutil.relativedelta.relativedelta`. Microseconds are not a unit
here; they are removed before text reaches this grammar.
"""

from __future__ import annotations

from dateutil.relativedelta import FR, MO, SA, SU, TH, TU, WE, relativedelta
from lark import Lark, Token, Tree
from lark.exceptions import UnexpectedInput
from lark.visitors import Interpreter

from microchron._constants import ORDINAL_VALUES
from microchron._errors import ERR_MSG_UNPARSEABLE_RELATIVE, CalendarParseError

RELATIVE_GRAMMAR = r"""
start: _item*

_item: keyword
     | number_relative
     | ordinal_relative
     | weekday_relative
     | day_of
     | time_of_day
     | ago

!keyword: "now" | "today" | "midnight" | "noon" | "tomorrow" | "yesterday"

number_relative: SIGNED_INT unit
ordinal_relative: ordinal unit
weekday_relative: [ordinal] weekday
!day_of: ("first" | "last") "day" "of"
time_of_day: CLOCK
!ago: "ago"

!ordinal: "first" | "second" | "third" | "fourth" | "fifth" | "sixth"
        | "seventh" | "eighth" | "ninth" | "tenth" | "eleventh" | "twelfth"
        | "next" | "last" | "previous" | "this"

!unit: "sec" | "secs" | "second" | "seconds"
     | "min" | "mins" | "minute" | "minutes"
     | "hour" | "hours"
     | "day" | "days"
     | "week" | "weeks"
     | "fortnight" | "fortnights"
     | "month" | "months"
     | "year" | "years"

!weekday: "monday" | "mon" | "tuesday" | "tue" | "wednesday" | "wed"
        | "thursday" | "thu" | "friday" | "fri" | "saturday" | "sat"
        | "sunday" | "sun"

CLOCK: /[0-9]{1,2}:[0-9]{2}(:[0-9]{2})?/

%import common.SIGNED_INT
%import common.WS
%ignore WS
"""

_parser = Lark(RELATIVE_GRAMMAR, parser="earley", start="start")

# Unit word -> (relativedelta field, multiplier)
_UNITS: dict[str, tuple[str, int]] = {
    "sec": ("seconds", 1),
    "secs": ("seconds", 1),
    "second": ("seconds", 1),
    "seconds": ("seconds", 1),
    "min": ("minutes", 1),
    "mins": ("minutes", 1),
    "minute": ("minutes", 1),
    "minutes": ("minutes", 1),
    "hour": ("hours", 1),
    "hours": ("hours", 1),
    "day": ("days", 1),
    "days": ("days", 1),
    "week": ("days", 7),
    "weeks": ("days", 7),
    "fortnight": ("days", 14),
    "fortnights": ("days", 14),
    "month": ("months", 1),
    "months": ("months", 1),
    "year": ("years", 1),
    "years": ("years", 1),
}

_WEEKDAYS = {
    "monday": MO, "mon": MO,
    "tuesday": TU, "tue": TU,
    "wednesday": WE, "wed": WE,
    "thursday": TH, "thu": TH,
    "friday": FR, "fri": FR,
    "saturday": SA, "sat": SA,
    "sunday": SU, "sun": SU,
}


def _word(tree: Tree) -> str:
    return str(tree.children[0])


def _scaled(unit: Tree, amount: int) -> relativedelta:
    field, multiplier = _UNITS[_word(unit)]
    return relativedelta(**{field: amount * multiplier})


class _RelativeInterpreter(Interpreter):
    """Collects the effect of every phrase into one relativedelta."""

    def __init__(self, text: str) -> None:
        self._text = text
        self.delta = relativedelta()
        self.time: tuple[int, int, int] | None = None
        self.clock_set = False
        self.day_of_month: int | None = None
        self.target_weekday = None

    def keyword(self, tree: Tree) -> None:
        word = _word(tree)
        if word == "now":
            return
        # An explicit clock time wins over the keyword, wherever it appears.
        if not self.clock_set:
            self.time = (12, 0, 0) if word == "noon" else (0, 0, 0)
        if word == "tomorrow":
            self.delta += relativedelta(days=1)
        elif word == "yesterday":
            self.delta += relativedelta(days=-1)

    def number_relative(self, tree: Tree) -> None:
        amount, unit = tree.children
        self.delta += _scaled(unit, int(amount))

    def ordinal_relative(self, tree: Tree) -> None:
        ordinal, unit = tree.children
        self.delta += _scaled(unit, ORDINAL_VALUES[_word(ordinal)])

    def weekday_relative(self, tree: Tree) -> None:
        ordinal, weekday = tree.children
        amount = 0 if ordinal is None else ORDINAL_VALUES[_word(ordinal)]
        day = _WEEKDAYS[_word(weekday)]
        if amount > 0:
            # "next friday" is strictly after today.
            self.delta += relativedelta(days=1)
            self.target_weekday = day(+amount)
        elif amount < 0:
            self.delta += relativedelta(days=-1)
            self.target_weekday = day(-1)
        else:
            self.target_weekday = day(+1)
        if self.time is None:
            self.time = (0, 0, 0)

    def day_of(self, tree: Tree) -> None:
        self.day_of_month = 1 if _word(tree) == "first" else 31

    def time_of_day(self, tree: Tree) -> None:
        token: Token = tree.children[0]
        fields = [int(part) for part in str(token).split(":")]
        hour, minute = fields[0], fields[1]
        second = fields[2] if len(fields) > 2 else 0
        if hour > 23 or minute > 59 or second > 59:
            raise CalendarParseError(
                ERR_MSG_UNPARSEABLE_RELATIVE,
                f"time of day {str(token)!r} out of range in {self._text!r}",
            )
        self.time = (hour, minute, second)
        self.clock_set = True

    def ago(self, tree: Tree) -> None:
        self.delta = -self.delta

    def result(self) -> relativedelta:
        hour, minute, second = self.time if self.time is not None else (None, None, None)
        return self.delta + relativedelta(
            day=self.day_of_month,
            weekday=self.target_weekday,
            hour=hour,
            minute=minute,
            second=second,
            microsecond=None if self.time is None else 0,
        )


def parse_relative(text: str) -> relativedelta:
    """Parse a relative date/time string.

    Raises:
        CalendarParseError: If the text is not a sequence of known phrases.
    """
    try:
        tree = _parser.parse(text.lower())
    except UnexpectedInput as exc:
        raise CalendarParseError(
            ERR_MSG_UNPARSEABLE_RELATIVE,
            f"relative string {text!r} not understood: {exc}",
            wrapped=exc,
        ) from exc

    interpreter = _RelativeInterpreter(text)
    interpreter.visit(tree)
    return interpreter.result()
