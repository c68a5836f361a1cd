"""
Text Recurrence Grammar
=======================

Palm Desktop stores recurrences as short vCalendar 1.0 style strings in
the "Repeated Event" column of its calendar table. This module decodes
them into the Repeat model.

Grammar
-------
    D<freq> <tail>                      daily
    W<freq> <weekday>... <tail>         weekly on the listed days
    MD<freq> <day>... <tail>            monthly on a day of the month
    MP<freq> <week>+ <weekday> <tail>   monthly on a weekday of a week
    M<freq> <tail>                      monthly
    YM<freq> <month>... <tail>          yearly

    <tail>  := ("#" <count> | <until>) [(";" | ",") <exception>]...
    <date>  := YYYYMMDD "T" hhmmss [zone letter]

Separators in the tail may be surrounded by blanks. Anything in a W day
list that is not a weekday is skipped.

The forms are tried in the order listed above and the first matching form
wins. MP weeks count from 1; week 5 is the last week of the month.

The decoder is lenient: a line that matches no form, an unknown weekday
token or a malformed date decode to absent values and are logged at
debug level, they never raise.

Examples
--------
    >>> decode_repeat_line("W1 TU TH 20090730T070000Z").repeat.weekdays
    (<Weekday.TU: 2>, <Weekday.TH: 4>)
    >>> decode_repeat_line("MP1 5+ FR #0").repeat.is_last_week
    True

Copyright (c) 2026 pdbconverter Authors & Contributors
"""

from dataclasses import dataclass
from datetime import date
from typing import Optional
import logging
import re

from pdbconverter.recurrence.model import Repeat, RepeatMode, Weekday, LAST_WEEK

logger = logging.getLogger(__name__)


# =============================================================================
# Patterns
# =============================================================================

_DATE_PATTERN = re.compile(r"^(\d{4})(\d{2})(\d{2})T(\d{6})[A-Za-z]?$")
_WORD_PATTERN = re.compile(r"[A-Za-z]+")
_TAIL_SEPARATOR = re.compile(r"[;,]")

# Occurrence count or until date, then separated exception dates
_TAIL = r"((?:#\d+|\d{8}T[^\s;,]*)(?:\s*[;,]\s*[^\s;,]*)*)"

# Order matters, the first matching form wins
_FORMS = (
    (RepeatMode.DAILY, re.compile(rf"^D(\d+)\s+{_TAIL}$")),
    (RepeatMode.WEEKLY, re.compile(rf"^W(\d+)\s+(.*?)\s*{_TAIL}$")),
    (RepeatMode.MONTHLY, re.compile(rf"^MD(\d+)(?:\s+\d{{1,2}}\+?)*\s+{_TAIL}$")),
    (RepeatMode.MONTHLY_BY_DAY, re.compile(rf"^MP(\d+)\s+([1-5])\+\s+([A-Za-z]+)\s+{_TAIL}$")),
    (RepeatMode.MONTHLY, re.compile(rf"^M(\d+)\s+{_TAIL}$")),
    (RepeatMode.YEARLY, re.compile(rf"^YM(\d+)(?:\s+\d{{1,2}})*\s+{_TAIL}$")),
)


@dataclass(frozen=True)
class RepeatLine:
    """
    Result of decoding a repeat line.

    Attributes:
        repeat: The decoded recurrence
        exceptions: Dates excluded from the recurrence
    """
    repeat: Repeat
    exceptions: tuple[date, ...] = ()


# =============================================================================
# Token Parsers
# =============================================================================

def _weekday(token: str) -> Optional[Weekday]:
    try:
        return Weekday[token.upper()]
    except KeyError:
        return None


def parse_weekly_days(text: str) -> tuple[bool, ...]:
    """
    Parse a list of weekday tokens.

    Tokens are case-insensitive and may be separated by anything that is
    not a letter. Unknown tokens are ignored.

    Returns:
        Seven flags, Sunday first
    """
    days = [False] * 7
    for token in _WORD_PATTERN.findall(text):
        day = _weekday(token)
        if day is None:
            logger.debug(f"Ignoring unknown weekday '{token}'")
            continue
        days[day] = True
    return tuple(days)


def parse_monthly_day(text: str) -> Optional[Weekday]:
    """Parse a single weekday token, None if text is not exactly one weekday."""
    return _weekday(text.strip())


def parse_date(token: str) -> Optional[date]:
    """
    Parse a YYYYMMDDThhmmss date token. The time part is ignored.

    Returns:
        The date, or None if the token is malformed
    """
    match = _DATE_PATTERN.match(token.strip())
    if not match:
        return None
    year, month, day = (int(part) for part in match.group(1, 2, 3))
    try:
        return date(year, month, day)
    except ValueError:
        logger.debug(f"Invalid date '{token}'")
        return None


def parse_tail(text: str) -> tuple[Optional[date], tuple[date, ...]]:
    """
    Parse the end of a repeat line.

    Returns:
        Tuple of (until date or None, exception dates)
    """
    tokens = [token.strip() for token in _TAIL_SEPARATOR.split(text) if token.strip()]
    if not tokens:
        return None, ()

    head, rest = tokens[0], tokens[1:]
    if head.startswith("#"):
        if head != "#0":
            logger.debug(f"Occurrence count '{head}' is not supported, treating as open-ended")
        until = None
    else:
        until = parse_date(head)
        if until is None:
            logger.debug(f"Unparseable until date '{head}'")

    exceptions = []
    for token in rest:
        exception = parse_date(token)
        if exception is None:
            logger.debug(f"Unparseable exception date '{token}'")
        else:
            exceptions.append(exception)
    return until, tuple(exceptions)


# =============================================================================
# Line Decoder
# =============================================================================

def decode_repeat_line(line: Optional[str]) -> Optional[RepeatLine]:
    """
    Decode a repeat line.

    Args:
        line: Repeat line, may be None or empty

    Returns:
        The decoded RepeatLine, or None if the line is empty or matches
        no known form
    """
    if not line or not line.strip():
        return None
    line = line.strip()

    for mode, pattern in _FORMS:
        match = pattern.match(line)
        if match:
            return _build(mode, match)

    logger.debug(f"Unknown repeat line '{line}'")
    return None


def _build(mode: RepeatMode, match: re.Match) -> Optional[RepeatLine]:
    frequency = int(match.group(1))
    until, exceptions = parse_tail(match.group(match.lastindex))

    if mode == RepeatMode.WEEKLY:
        repeat = Repeat(mode, frequency, until, weekly_days=parse_weekly_days(match.group(2)))
    elif mode == RepeatMode.MONTHLY_BY_DAY:
        day = parse_monthly_day(match.group(3))
        if day is None:
            logger.debug(f"Unknown weekday '{match.group(3)}' in '{match.string}'")
            return None
        week = int(match.group(2)) - 1
        repeat = Repeat(mode, frequency, until, monthly_week=min(week, LAST_WEEK), monthly_day=day)
    else:
        repeat = Repeat(mode, frequency, until)

    return RepeatLine(repeat, exceptions)
