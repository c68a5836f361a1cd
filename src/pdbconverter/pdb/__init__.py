"""
PDB Container Support
=====================

Reading of PalmOS PDB containers and decoding of the standard
application schemas.

Example:
    >>> from pdbconverter.pdb import read_database, TodoConverter
    >>> database = read_database("ToDoDB.pdb", TodoConverter())
    >>> for record in database:
    ...     print(record)

Copyright (c) 2026 pdbconverter Authors & Contributors
"""

from pdbconverter.pdb.categories import (
    NUM_CATEGORIES,
    Category,
    CategoryAppInfo,
    read_categories,
)
from pdbconverter.pdb.records import (
    AddressField,
    AddressRecord,
    Alarm,
    AlarmUnit,
    MemoRecord,
    NotepadRecord,
    PhoneLabel,
    RawRecord,
    Record,
    RecordAttributes,
    RecordKind,
    ScheduleRecord,
    TodoRecord,
)
from pdbconverter.pdb.database import DatabaseAttribute, PdbDatabase
from pdbconverter.dates import pack_date, unpack_date
from pdbconverter.pdb.reader import PdbReader, decode_string, read_database
from pdbconverter.pdb.converters import (
    CONVERTERS,
    AddressAppInfo,
    AddressConverter,
    CategoryConverter,
    Converter,
    MemoConverter,
    NotepadConverter,
    RawConverter,
    ScheduleConverter,
    TodoConverter,
    get_converter,
)

__all__ = [
    # Categories
    "NUM_CATEGORIES",
    "Category",
    "CategoryAppInfo",
    "read_categories",
    # Records
    "AddressField",
    "AddressRecord",
    "Alarm",
    "AlarmUnit",
    "MemoRecord",
    "NotepadRecord",
    "PhoneLabel",
    "RawRecord",
    "Record",
    "RecordAttributes",
    "RecordKind",
    "ScheduleRecord",
    "TodoRecord",
    # Database
    "DatabaseAttribute",
    "PdbDatabase",
    # Reader
    "PdbReader",
    "decode_string",
    "pack_date",
    "read_database",
    "unpack_date",
    # Converters
    "CONVERTERS",
    "AddressAppInfo",
    "AddressConverter",
    "CategoryConverter",
    "Converter",
    "MemoConverter",
    "NotepadConverter",
    "RawConverter",
    "ScheduleConverter",
    "TodoConverter",
    "get_converter",
]
