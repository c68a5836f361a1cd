"""
PalmOS Dates
============

PalmOS counts timestamps in seconds since 1904-01-01 00:00 and stores
day-only dates in a packed 16-bit word:

    bits 15-9   year offset from 1904
    bits 8-5    month
    bits 4-0    day

The word 0xFFFF marks a date that is not set.

Copyright (c) 2026 pdbconverter Authors & Contributors
"""

from datetime import date, datetime, timedelta

from pdbconverter.errors import PdbFormatError

EPOCH = datetime(1904, 1, 1)

NO_DATE = 0xFFFF


def unpack_date(value: int) -> date:
    """
    Unpack a 16-bit PalmOS date.

    Args:
        value: Packed date word (not 0xFFFF)

    Returns:
        The unpacked date

    Raises:
        PdbFormatError: If the month or day is out of range
    """
    year = ((value >> 9) & 0x7F) + 1904
    month = (value >> 5) & 0x0F
    day = value & 0x1F
    try:
        return date(year, month, day)
    except ValueError as e:
        raise PdbFormatError(f"invalid packed date 0x{value:04X}: {e}") from e


def pack_date(value: date) -> int:
    """
    Pack a date into a 16-bit PalmOS date word.

    Raises:
        ValueError: If the year is outside 1904-2031
    """
    offset = value.year - 1904
    if not 0 <= offset <= 0x7F:
        raise ValueError(f"year {value.year} cannot be packed")
    return (offset << 9) | (value.month << 5) | value.day


def palm_timestamp(seconds: int) -> datetime:
    """Convert seconds since the PalmOS epoch to a datetime."""
    return EPOCH + timedelta(seconds=seconds)
