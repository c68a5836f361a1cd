"""
Recurrence Support
==================

The Repeat model and its three codecs:

- binary: the 8-byte repeat block of calendar PDB records
- grammar: the text form used by the Palm Desktop database
- rrule: iCalendar RRULE/EXDATE output

Copyright (c) 2026 pdbconverter Authors & Contributors
"""

from pdbconverter.recurrence.model import (
    LAST_WEEK,
    Repeat,
    RepeatMode,
    Weekday,
)
from pdbconverter.recurrence.binary import decode_repeat, read_repeat
from pdbconverter.recurrence.grammar import (
    RepeatLine,
    decode_repeat_line,
    parse_date,
    parse_monthly_day,
    parse_tail,
    parse_weekly_days,
)
from pdbconverter.recurrence.rrule import encode_recurrence, to_exdate, to_rrule

__all__ = [
    "LAST_WEEK",
    "Repeat",
    "RepeatMode",
    "Weekday",
    "decode_repeat",
    "read_repeat",
    "RepeatLine",
    "decode_repeat_line",
    "parse_date",
    "parse_monthly_day",
    "parse_tail",
    "parse_weekly_days",
    "encode_recurrence",
    "to_exdate",
    "to_rrule",
]
