"""
pdbconverter - PalmOS Database Decoder
======================================

This package reads PalmOS personal databases and turns them into plain,
immutable Python values.

Two sources are supported:

- **PDB containers** as synced from a PalmOS device (address book, memo
  pad, to-do list, notepad and calendar)
- **Palm Desktop databases** (Microsoft Access .mdb files), currently the
  calendar

Calendar recurrences can be re-encoded as iCalendar RRULE/EXDATE lines.

Main Components
---------------
- **pdb**: PDB container reader, record model and converters
- **recurrence**: Repeat model, binary and text codecs, RRULE encoder
- **mdb**: Palm Desktop database readers
- **filters**: Category and date range record filters
- **cli**: The pdbdump command-line tool

Quick Start
-----------
Read a to-do list:
    >>> from pdbconverter.pdb import read_database, TodoConverter
    >>> database = read_database("ToDoDB.pdb", TodoConverter())
    >>> for record in database:
    ...     print(record.description, record.due_date)

Print the recurrences of a calendar:
    >>> from pdbconverter.pdb import ScheduleConverter
    >>> from pdbconverter.recurrence import encode_recurrence
    >>> calendar = read_database("CalendarDB-PDat.pdb", ScheduleConverter())
    >>> for event in calendar:
    ...     if event.repeat:
    ...         print(encode_recurrence(event.repeat, event.exceptions))

Or use the command-line tool:
    $ pdbdump info MemoDB.pdb
    $ pdbdump list -c todo -t Business ToDoDB.pdb
    $ pdbdump rrule DateBook.mdb

Copyright (c) 2026 pdbconverter Authors & Contributors
"""

__version__ = "1.0.0"
__author__ = "pdbconverter contributors"

from pdbconverter.errors import (
    PdbError,
    PdbFormatError,
    UnknownValueError,
    WrongFormatError,
    MdbError,
    FilterError,
)

__all__ = [
    "__version__",
    "PdbError",
    "PdbFormatError",
    "UnknownValueError",
    "WrongFormatError",
    "MdbError",
    "FilterError",
]
