"""
pdbconverter Error Hierarchy
============================

This module defines the exception hierarchy for the whole package.
All exceptions inherit from PdbError, allowing callers to catch every
decoding problem with a single except clause if desired.

Exception Hierarchy
-------------------
PdbError (base)
├── PdbFormatError - truncated or malformed container structure
│   └── UnknownValueError - unrecognized enumerant inside a record
├── WrongFormatError - container is not of the converter's schema
├── MdbError - table-based (Palm Desktop) database problems
└── FilterError - invalid record filter arguments

Structural errors, schema rejections and unknown enumerants always abort
the whole read; no partial database is returned. The distinction between
PdbFormatError and WrongFormatError lets a caller report "not this kind of
file" instead of "corrupt file".

Error messages follow this format:
    record 12: field 'repeat mode': unknown value 9

Copyright (c) 2026 pdbconverter Authors & Contributors
"""

from typing import Optional


# =============================================================================
# Base Exception Class
# =============================================================================

class PdbError(Exception):
    """
    Base exception for all pdbconverter errors.

    All exceptions in the package inherit from this class, allowing callers
    to catch all decoding errors with a single except clause:

        try:
            database = read_database("MemoDB.pdb", MemoConverter())
        except PdbError as e:
            print(f"Error: {e}")
    """
    pass


# =============================================================================
# Container Exceptions
# =============================================================================

class PdbFormatError(PdbError):
    """
    Structural error in a PDB container.

    Raised when:
    - the stream ends where a fixed-size field was expected
    - the record table declares more entries than the file holds
    - record offsets go backwards or point past the end of the file
    - a packed date holds an impossible month or day

    Attributes:
        message: The error description
        field: Name of the field that was being read (optional)
        record_index: Index of the record being decoded (optional)
    """

    def __init__(
        self,
        message: str,
        field: Optional[str] = None,
        record_index: Optional[int] = None,
    ):
        self.message = message
        self.field = field
        self.record_index = record_index
        super().__init__(self._format_message())

    def _format_message(self) -> str:
        parts = []
        if self.record_index is not None:
            parts.append(f"record {self.record_index}")
        if self.field:
            parts.append(f"field '{self.field}'")
        parts.append(self.message)
        return ": ".join(parts)


class UnknownValueError(PdbFormatError):
    """
    Unrecognized enumerant inside a record.

    Raised for an unknown repeat mode or alarm unit. The record layout
    cannot be trusted past such a value, so the read is aborted.
    """

    def __init__(
        self,
        field: str,
        value: int,
        record_index: Optional[int] = None,
    ):
        self.value = value
        super().__init__(
            f"unknown value {value}",
            field=field,
            record_index=record_index,
        )


class WrongFormatError(PdbError):
    """
    The converter does not accept the container.

    Raised after the header and appinfo block were read, when the
    database name or creator does not match the converter's schema.
    """

    def __init__(self, name: str, creator: str, converter: str = ""):
        self.name = name
        self.creator = creator
        self.converter = converter
        message = f"wrong database format: '{name}' (creator '{creator}')"
        if converter:
            message += f" is not accepted by the {converter} converter"
        super().__init__(message)


# =============================================================================
# Table-Based Database Exceptions
# =============================================================================

class MdbError(PdbError):
    """
    Error reading a Palm Desktop (MDB) database.

    Raised when:
    - a required table is missing
    - a required column is missing from a row
    - a column holds a value of an unexpected type
    - an alarm unit is unknown
    """
    pass


# =============================================================================
# Filter Exceptions
# =============================================================================

class FilterError(PdbError):
    """
    Invalid record filter.

    Raised when a category name or key is not defined in the database,
    or when a date range is empty or ends before it starts.
    """
    pass
