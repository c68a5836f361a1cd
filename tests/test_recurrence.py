"""
Recurrence Codec Tests
======================

Test Categories
---------------
1. Model: Repeat value invariants
2. Binary: the 8-byte repeat block
3. Grammar: Palm Desktop repeat lines
4. RRULE: iCalendar output, checked by expanding it with dateutil
"""

from datetime import date, datetime

import pytest
from dateutil.rrule import rrulestr

from pdbconverter.errors import PdbFormatError, UnknownValueError
from pdbconverter.recurrence import (
    LAST_WEEK,
    Repeat,
    RepeatLine,
    RepeatMode,
    Weekday,
    decode_repeat,
    decode_repeat_line,
    encode_recurrence,
    parse_date,
    parse_monthly_day,
    parse_tail,
    parse_weekly_days,
    to_exdate,
    to_rrule,
)

from pdbfiles import repeat_block


def days(*selected: Weekday) -> tuple[bool, ...]:
    return tuple(Weekday(n) in selected for n in range(7))


# =============================================================================
# Model Tests
# =============================================================================

class TestRepeat:
    """Tests for the Repeat value."""

    def test_defaults(self):
        repeat = Repeat(RepeatMode.DAILY)
        assert repeat.frequency == 1
        assert repeat.until is None
        assert repeat.weekdays == ()
        assert not repeat.is_last_week

    def test_weekly_days_length(self):
        with pytest.raises(ValueError):
            Repeat(RepeatMode.WEEKLY, weekly_days=(True,))

    def test_monthly_week_range(self):
        with pytest.raises(ValueError):
            Repeat(RepeatMode.MONTHLY_BY_DAY, monthly_week=5)

    def test_str(self):
        repeat = Repeat(RepeatMode.WEEKLY, 1, date(2005, 12, 8), weekly_days=days(Weekday.TH))
        assert str(repeat) == "WEEKLY-1(TH) until 2005-12-08"


# =============================================================================
# Binary Codec Tests
# =============================================================================

class TestBinary:
    """Tests for decode_repeat."""

    def test_daily(self):
        repeat = decode_repeat(repeat_block(1, until=date(1999, 5, 24), frequency=1))
        assert repeat == Repeat(RepeatMode.DAILY, 1, date(1999, 5, 24))

    def test_weekly(self):
        repeat = decode_repeat(repeat_block(2, frequency=1, repeat_on=0b0111100))
        assert repeat.weekdays == (Weekday.TU, Weekday.WE, Weekday.TH, Weekday.FR)

    def test_monthly_by_day(self):
        repeat = decode_repeat(repeat_block(3, frequency=12, repeat_on=1 * 7 + 0))
        assert repeat.mode == RepeatMode.MONTHLY_BY_DAY
        assert repeat.monthly_week == 1
        assert repeat.monthly_day == Weekday.SU

    def test_last_week(self):
        repeat = decode_repeat(repeat_block(3, repeat_on=4 * 7 + 5))
        assert repeat.is_last_week
        assert to_rrule(repeat) == "FREQ=MONTHLY;BYDAY=-1FR"

    def test_weekday_bits_ignored_outside_weekly(self):
        repeat = decode_repeat(repeat_block(4, frequency=1, repeat_on=0x7F))
        assert repeat == Repeat(RepeatMode.MONTHLY)

    @pytest.mark.parametrize("mode", [0, 6, 255])
    def test_unknown_mode(self, mode):
        with pytest.raises(UnknownValueError) as exc_info:
            decode_repeat(repeat_block(mode))
        assert exc_info.value.value == mode

    def test_wrong_length(self):
        with pytest.raises(PdbFormatError):
            decode_repeat(b"\x01\x00")


# =============================================================================
# Text Grammar Tests
# =============================================================================

class TestRepeatLine:
    """Tests for decode_repeat_line."""

    def test_daily_until(self):
        line = decode_repeat_line("D1 19990524T000000Z")
        assert line == RepeatLine(Repeat(RepeatMode.DAILY, 1, date(1999, 5, 24)))

    def test_daily_exception(self):
        line = decode_repeat_line("D1 19980911T000000Z;19980910T000000Z")
        assert line.repeat.until == date(1998, 9, 11)
        assert line.exceptions == (date(1998, 9, 10),)

    def test_comma_separated_exceptions(self):
        line = decode_repeat_line("D1 19980911T000000Z,19980910T000000Z,19980830T000000Z")
        assert line.exceptions == (date(1998, 9, 10), date(1998, 8, 30))

    def test_weekly_single_day(self):
        line = decode_repeat_line("W1 TH 20051208T000000Z")
        assert line.repeat == Repeat(
            RepeatMode.WEEKLY, 1, date(2005, 12, 8), weekly_days=days(Weekday.TH)
        )

    def test_weekly_several_days(self):
        line = decode_repeat_line("W1 TU WE TH FR 20090807T070000Z")
        assert line.repeat.until == date(2009, 8, 7)
        assert line.repeat.weekdays == (Weekday.TU, Weekday.WE, Weekday.TH, Weekday.FR)

    def test_weekly_two_days(self):
        line = decode_repeat_line("W1 TU TH 20090730T070000Z")
        assert line.repeat.weekdays == (Weekday.TU, Weekday.TH)

    def test_monthly(self):
        line = decode_repeat_line("M1 20060211T000000Z")
        assert line.repeat == Repeat(RepeatMode.MONTHLY, 1, date(2006, 2, 11))

    def test_monthly_by_date(self):
        line = decode_repeat_line("MD3 24 20040723T000000Z")
        assert line.repeat == Repeat(RepeatMode.MONTHLY, 3, date(2004, 7, 23))

    def test_monthly_by_position(self):
        line = decode_repeat_line("MP12 2+ SU #0")
        assert line.repeat == Repeat(
            RepeatMode.MONTHLY_BY_DAY, 12, None, monthly_week=1, monthly_day=Weekday.SU
        )
        assert line.exceptions == ()

    def test_monthly_last_week(self):
        line = decode_repeat_line("MP1 5+ FR #0")
        assert line == RepeatLine(Repeat(
            RepeatMode.MONTHLY_BY_DAY, 1, None, monthly_week=LAST_WEEK, monthly_day=Weekday.FR
        ))
        assert line.repeat.is_last_week

    def test_yearly(self):
        line = decode_repeat_line("YM1 10 19911020T000000Z")
        assert line.repeat == Repeat(RepeatMode.YEARLY, 1, date(1991, 10, 20))

    def test_yearly_open_ended(self):
        line = decode_repeat_line("YM1 12 #0")
        assert line.repeat == Repeat(RepeatMode.YEARLY, 1, None)

    @pytest.mark.parametrize("text", [None, "", "   ", "X1 #0", "garbage", "MP1 2+ WE FR #0"])
    def test_unmatched(self, text):
        assert decode_repeat_line(text) is None

    def test_unparseable_until(self):
        line = decode_repeat_line("D2 19991121T")
        assert line.repeat == Repeat(RepeatMode.DAILY, 2)

    @pytest.mark.parametrize("text, expected", [
        ("W1 TU X1 FR 20090807T070000Z", (Weekday.TU, Weekday.FR)),
        ("W1 SU - TU 20090807T070000Z", (Weekday.SU, Weekday.TU)),
        ("W1 tu, th 20090807T070000Z", (Weekday.TU, Weekday.TH)),
    ])
    def test_weekly_skips_junk_tokens(self, text, expected):
        line = decode_repeat_line(text)
        assert line.repeat.mode == RepeatMode.WEEKLY
        assert line.repeat.weekdays == expected
        assert line.repeat.until == date(2009, 8, 7)

    def test_weekly_without_days(self):
        assert decode_repeat_line("W2 #0") == RepeatLine(Repeat(RepeatMode.WEEKLY, 2))

    @pytest.mark.parametrize("text", [
        "D1 19980911T000000Z; 19980910T000000Z",
        "W1 TU 19980911T000000Z; 19980910T000000Z",
        "MD1 11 19980911T000000Z ,19980910T000000Z",
        "M1 19980911T000000Z ; 19980910T000000Z",
        "YM1 9 19980911T000000Z;  19980910T000000Z",
    ])
    def test_tail_with_blanks(self, text):
        line = decode_repeat_line(text)
        assert line.repeat.until == date(1998, 9, 11)
        assert line.exceptions == (date(1998, 9, 10),)

    def test_occurrence_count_is_open_ended(self):
        line = decode_repeat_line("D1 #5")
        assert line == RepeatLine(Repeat(RepeatMode.DAILY, 1, None))


class TestTokenParsers:
    """Tests for the token level helpers."""

    @pytest.mark.parametrize("text, expected", [
        ("SU", days(Weekday.SU)),
        ("WE", days(Weekday.WE)),
        ("th", days(Weekday.TH)),
        ("SA", days(Weekday.SA)),
        ("SU TU FR", days(Weekday.SU, Weekday.TU, Weekday.FR)),
        ("SU MO TU WE TH FR SA", (True,) * 7),
        ("     TU    SU, FR   ", days(Weekday.SU, Weekday.TU, Weekday.FR)),
        ("SU - TU - PI - FR", days(Weekday.SU, Weekday.TU, Weekday.FR)),
        ("", (False,) * 7),
        ("PI", (False,) * 7),
    ])
    def test_weekly_days(self, text, expected):
        assert parse_weekly_days(text) == expected

    @pytest.mark.parametrize("text, expected", [
        ("SU", Weekday.SU),
        ("WE", Weekday.WE),
        ("th", Weekday.TH),
        ("SA", Weekday.SA),
        ("    SA  ", Weekday.SA),
        ("PI", None),
        ("", None),
        ("WE FR", None),
    ])
    def test_monthly_day(self, text, expected):
        assert parse_monthly_day(text) == expected

    @pytest.mark.parametrize("text, expected", [
        ("20090730T070000Z", date(2009, 7, 30)),
        ("19991121T000000Z", date(1999, 11, 21)),
        ("19991121T000000", date(1999, 11, 21)),
        ("19991121T", None),
        ("foobar", None),
        ("", None),
        ("20090230T000000Z", None),
    ])
    def test_date(self, text, expected):
        assert parse_date(text) == expected

    def test_tail(self):
        assert parse_tail("#0") == (None, ())
        assert parse_tail("20051208T000000Z;bad;20051201T000000Z") == (
            date(2005, 12, 8), (date(2005, 12, 1),)
        )


class TestEquivalence:
    """Binary and text codecs agree on the same recurrence."""

    @pytest.mark.parametrize("block, line", [
        (repeat_block(1, until=date(1999, 5, 24)), "D1 19990524T000000Z"),
        (repeat_block(2, until=date(2009, 8, 7), repeat_on=0b0111100), "W1 TU WE TH FR 20090807T070000Z"),
        (repeat_block(3, frequency=12, repeat_on=7), "MP12 2+ SU #0"),
        (repeat_block(3, repeat_on=33), "MP1 5+ FR #0"),
        (repeat_block(4, frequency=3, until=date(2004, 7, 23)), "MD3 24 20040723T000000Z"),
        (repeat_block(5), "YM1 12 #0"),
    ])
    def test_equal(self, block, line):
        assert decode_repeat(block) == decode_repeat_line(line).repeat


# =============================================================================
# RRULE Tests
# =============================================================================

class TestRRule:
    """Tests for the iCalendar rule encoder."""

    def test_daily(self):
        assert to_rrule(Repeat(RepeatMode.DAILY, 1, date(1999, 5, 24))) == "FREQ=DAILY;UNTIL=19990524"

    def test_interval(self):
        assert to_rrule(Repeat(RepeatMode.MONTHLY, 3)) == "FREQ=MONTHLY;INTERVAL=3"

    def test_weekly_days_in_order(self):
        repeat = Repeat(RepeatMode.WEEKLY, 2, weekly_days=days(Weekday.FR, Weekday.SU, Weekday.TU))
        assert to_rrule(repeat) == "FREQ=WEEKLY;INTERVAL=2;BYDAY=SU,TU,FR"

    def test_monthly_by_day(self):
        repeat = Repeat(RepeatMode.MONTHLY_BY_DAY, 12, monthly_week=1, monthly_day=Weekday.SU)
        assert to_rrule(repeat) == "FREQ=MONTHLY;INTERVAL=12;BYDAY=2SU"

    def test_yearly(self):
        assert to_rrule(Repeat(RepeatMode.YEARLY)) == "FREQ=YEARLY"

    def test_exdate(self):
        assert to_exdate([]) is None
        assert to_exdate([date(1998, 9, 10), date(1998, 8, 30)]) == (
            "EXDATE;VALUE=DATE:19980910,19980830"
        )

    def test_encode_recurrence(self):
        line = decode_repeat_line("D1 19980911T000000Z;19980910T000000Z")
        assert encode_recurrence(line.repeat, line.exceptions) == [
            "RRULE:FREQ=DAILY;UNTIL=19980911",
            "EXDATE;VALUE=DATE:19980910",
        ]

    def test_encode_without_exceptions(self):
        assert encode_recurrence(Repeat(RepeatMode.YEARLY)) == ["RRULE:FREQ=YEARLY"]

    def test_expands_last_friday(self):
        repeat = decode_repeat_line("MP1 5+ FR 20100501T000000Z").repeat
        rule = rrulestr(to_rrule(repeat), dtstart=datetime(2010, 1, 29))
        assert [d.date() for d in rule] == [
            date(2010, 1, 29), date(2010, 2, 26), date(2010, 3, 26), date(2010, 4, 30),
        ]

    def test_expands_weekly(self):
        repeat = decode_repeat_line("W1 TU TH 20090730T070000Z").repeat
        rule = rrulestr(to_rrule(repeat), dtstart=datetime(2009, 7, 14))
        assert [d.date() for d in rule] == [
            date(2009, 7, 14), date(2009, 7, 16), date(2009, 7, 21),
            date(2009, 7, 23), date(2009, 7, 28), date(2009, 7, 30),
        ]
