"""
iCalendar Rule Encoder
======================

Encodes a Repeat into an iCalendar (RFC 5545) RRULE value and exception
dates into an EXDATE property.

    >>> to_rrule(Repeat(RepeatMode.WEEKLY, 2, weekly_days=(False, True) + (False,) * 5))
    'FREQ=WEEKLY;INTERVAL=2;BYDAY=MO'

Copyright (c) 2026 pdbconverter Authors & Contributors
"""

from datetime import date
from typing import Iterable, Optional

from pdbconverter.recurrence.model import Repeat, RepeatMode

_FREQUENCIES = {
    RepeatMode.DAILY: "DAILY",
    RepeatMode.WEEKLY: "WEEKLY",
    RepeatMode.MONTHLY: "MONTHLY",
    RepeatMode.MONTHLY_BY_DAY: "MONTHLY",
    RepeatMode.YEARLY: "YEARLY",
}


def _format_date(value: date) -> str:
    return value.strftime("%Y%m%d")


def to_rrule(repeat: Repeat) -> str:
    """
    Encode a recurrence as an RRULE value.

    Parts are emitted in the order FREQ, UNTIL, INTERVAL, BYDAY. INTERVAL
    is left out for a frequency of 1. A monthly-by-day rule in the last
    week uses the ordinal -1.
    """
    parts = [f"FREQ={_FREQUENCIES[repeat.mode]}"]

    if repeat.until is not None:
        parts.append(f"UNTIL={_format_date(repeat.until)}")

    if repeat.frequency >= 2:
        parts.append(f"INTERVAL={repeat.frequency}")

    if repeat.mode == RepeatMode.WEEKLY and repeat.weekdays:
        parts.append("BYDAY=" + ",".join(day.name for day in repeat.weekdays))
    elif repeat.mode == RepeatMode.MONTHLY_BY_DAY:
        ordinal = -1 if repeat.is_last_week else repeat.monthly_week + 1
        parts.append(f"BYDAY={ordinal}{repeat.monthly_day.name}")

    return ";".join(parts)


def to_exdate(exceptions: Iterable[date]) -> Optional[str]:
    """Encode exception dates as an EXDATE line, None if there are none."""
    dates = [_format_date(exception) for exception in exceptions]
    if not dates:
        return None
    return "EXDATE;VALUE=DATE:" + ",".join(dates)


def encode_recurrence(repeat: Repeat, exceptions: Iterable[date] = ()) -> list[str]:
    """
    Encode a recurrence and its exceptions as iCalendar content lines.

    Returns:
        The RRULE line, followed by an EXDATE line if there are exceptions
    """
    lines = [f"RRULE:{to_rrule(repeat)}"]
    exdate = to_exdate(exceptions)
    if exdate is not None:
        lines.append(exdate)
    return lines
