"""
Binary Recurrence Codec
=======================

Decodes the 8-byte repeat block of a calendar record.

Layout
------
    Offset  Size    Description
    ------  ----    -----------
    0       1       Repeat mode (1-5, see RepeatMode)
    1       1       Reserved
    2       2       Until date, packed (0xFFFF = no end)
    4       1       Frequency
    5       1       Repeat on (mode specific)
    6       2       Reserved

Repeat on:
    WEEKLY:          bit n set = weekday n selected (Sunday = bit 0)
    MONTHLY_BY_DAY:  week * 7 + weekday, week 4 = last week

Copyright (c) 2026 pdbconverter Authors & Contributors
"""

from typing import TYPE_CHECKING
import logging
import struct

from pdbconverter.dates import NO_DATE, unpack_date
from pdbconverter.errors import PdbFormatError, UnknownValueError
from pdbconverter.recurrence.model import Repeat, RepeatMode, Weekday, LAST_WEEK

if TYPE_CHECKING:
    from pdbconverter.pdb.reader import PdbReader

logger = logging.getLogger(__name__)

REPEAT_SIZE = 8
_REPEAT_FORMAT = ">BxHBBxx"


def decode_repeat(data: bytes) -> Repeat:
    """
    Decode an 8-byte repeat block.

    Raises:
        PdbFormatError: If data is not 8 bytes long or the until date is invalid
        UnknownValueError: If the repeat mode is unknown
    """
    if len(data) != REPEAT_SIZE:
        raise PdbFormatError(
            f"repeat block must be {REPEAT_SIZE} bytes, got {len(data)}",
            field="repeat",
        )

    mode_value, until_value, frequency, repeat_on = struct.unpack(_REPEAT_FORMAT, data)

    try:
        mode = RepeatMode(mode_value)
    except ValueError:
        raise UnknownValueError("repeat mode", mode_value) from None

    until = None if until_value == NO_DATE else unpack_date(until_value)

    if mode == RepeatMode.WEEKLY:
        days = tuple(bool(repeat_on & (1 << day)) for day in range(7))
        repeat = Repeat(mode, frequency, until, weekly_days=days)
    elif mode == RepeatMode.MONTHLY_BY_DAY:
        week = repeat_on // 7
        if week > LAST_WEEK:
            raise UnknownValueError("repeat on", repeat_on)
        repeat = Repeat(
            mode, frequency, until,
            monthly_week=week,
            monthly_day=Weekday(repeat_on % 7),
        )
    else:
        repeat = Repeat(mode, frequency, until)

    logger.debug(f"Decoded repeat {repeat}")
    return repeat


def read_repeat(reader: "PdbReader") -> Repeat:
    """Read and decode a repeat block at the reader's position."""
    data = reader.read_bytes(REPEAT_SIZE, "repeat")
    try:
        return decode_repeat(data)
    except UnknownValueError as e:
        raise UnknownValueError(e.field, e.value, reader.record_index) from e
    except PdbFormatError as e:
        raise PdbFormatError(e.message, e.field, reader.record_index) from e
