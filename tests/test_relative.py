"""Microsecond phrase extraction tests."""

import pytest

from microchron._relative import (
    MicrosecondOperation,
    extract,
    find_operations,
    has_reset_keyword,
)


class TestExtract:
    @pytest.mark.parametrize(
        "text,remainder,microseconds",
        [
            ("+1 day previous microsecond", "+1 day", -1),
            ("3 microseconds", "", 3),
            ("+3 microseconds", "", 3),
            ("-3 microseconds", "", -3),
            ("next microsecond", "", 1),
            ("last microsecond", "", -1),
            ("this microsecond", "", 0),
            ("twelfth microsecond", "", 12),
            ("-3 microseconds tomorrow next microsecond", " tomorrow", -2),
            ("1 microsecond 2 microseconds", "", 3),
            ("+1 day", "+1 day", 0),
            ("", "", 0),
            ("+1 day\t5 microseconds", "+1 day", 5),
            ("NEXT MICROSECOND", "", 1),
        ],
    )
    def test_extract(self, text, remainder, microseconds):
        assert extract(text) == (remainder, microseconds)

    def test_sum_of_mixed_amounts(self):
        text = "-3001 microseconds previous microsecond twelfth microseconds"
        assert extract(text)[1] == -2990

    @pytest.mark.parametrize(
        "text",
        [
            "5microseconds",
            "x3 microseconds",
            "3 microsecondsx",
            "fourteenth microsecond",
            "3 milliseconds",
            "1.5 microseconds",
        ],
    )
    def test_not_consumed(self, text):
        remainder, microseconds = extract(text)
        assert microseconds == 0
        assert remainder == text

    def test_leaves_calendar_text_in_place(self):
        assert extract("tomorrow 4 microseconds noon") == ("tomorrow noon", 4)


class TestFindOperations:
    def test_spans(self):
        assert find_operations("+1 day 4 microseconds") == [MicrosecondOperation(6, 21, 4)]

    def test_left_to_right(self):
        operations = find_operations("next microsecond 2 microseconds")
        assert [operation.amount for operation in operations] == [1, 2]
        assert operations[0].start < operations[1].start

    def test_none(self):
        assert find_operations("next month") == []


class TestHasResetKeyword:
    @pytest.mark.parametrize(
        "text,expected",
        [
            ("midnight", True),
            ("tomorrow", True),
            ("+1 day yesterday", True),
            ("NOON", True),
            ("today 3 microseconds", True),
            ("+1 day", False),
            ("todays", False),
            ("afternoon", False),
            ("", False),
        ],
    )
    def test_detects_keyword(self, text, expected):
        assert has_reset_keyword(text) is expected
