"""
Recurrence Model
================

Canonical, codec independent description of a repeating calendar event.
The binary codec, the text grammar codec and the rule encoder all work on
the Repeat value defined here.

Only the fields that belong to a mode carry information:

- WEEKLY uses weekly_days
- MONTHLY_BY_DAY uses monthly_week and monthly_day

All other modes keep the defaults, so two Repeat values describing the
same recurrence compare equal regardless of where they were decoded from.

Copyright (c) 2026 pdbconverter Authors & Contributors
"""

from dataclasses import dataclass
from datetime import date
from enum import IntEnum
from typing import Optional


class RepeatMode(IntEnum):
    """Repeat modes, numbered as in the binary encoding."""
    DAILY = 1
    WEEKLY = 2
    MONTHLY_BY_DAY = 3
    MONTHLY = 4
    YEARLY = 5


class Weekday(IntEnum):
    """Days of the week, Sunday first."""
    SU = 0
    MO = 1
    TU = 2
    WE = 3
    TH = 4
    FR = 5
    SA = 6


# monthly_week value meaning "the last week of the month"
LAST_WEEK = 4

NO_WEEKDAYS = (False,) * 7


@dataclass(frozen=True)
class Repeat:
    """
    A recurrence rule.

    Attributes:
        mode: How the event repeats
        frequency: Interval between occurrences, in units of the mode
        until: Last possible occurrence, None if open-ended
        weekly_days: Seven flags, Sunday first (WEEKLY only)
        monthly_week: Week of the month 0-3, or LAST_WEEK (MONTHLY_BY_DAY only)
        monthly_day: Day of the week (MONTHLY_BY_DAY only)
    """
    mode: RepeatMode
    frequency: int = 1
    until: Optional[date] = None
    weekly_days: tuple[bool, ...] = NO_WEEKDAYS
    monthly_week: int = 0
    monthly_day: Weekday = Weekday.SU

    def __post_init__(self):
        if len(self.weekly_days) != 7:
            raise ValueError(f"weekly_days needs 7 flags, got {len(self.weekly_days)}")
        if not 0 <= self.monthly_week <= LAST_WEEK:
            raise ValueError(f"monthly_week out of range: {self.monthly_week}")

    @property
    def is_last_week(self) -> bool:
        return self.monthly_week == LAST_WEEK

    @property
    def weekdays(self) -> tuple[Weekday, ...]:
        """The selected weekdays, Sunday first."""
        return tuple(Weekday(i) for i, selected in enumerate(self.weekly_days) if selected)

    def __str__(self) -> str:
        text = f"{self.mode.name}-{self.frequency}"
        if self.mode == RepeatMode.WEEKLY:
            text += "(" + ",".join(day.name for day in self.weekdays) + ")"
        elif self.mode == RepeatMode.MONTHLY_BY_DAY:
            week = "last" if self.is_last_week else str(self.monthly_week + 1)
            text += f"({week} {self.monthly_day.name})"
        if self.until is not None:
            text += f" until {self.until.isoformat()}"
        return text
