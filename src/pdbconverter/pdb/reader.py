"""
PDB Container Reader
====================

This module reads PalmOS PDB containers. The reader decodes the fixed
header and the record table itself, and hands the appinfo block and each
record span to a Converter for schema specific decoding.

PdbReader
---------
PdbReader wraps a seekable binary stream and offers the primitive field
readers used by converters (integers, strings, dates). All multi-byte
values are big-endian.

Reading Process
---------------
1. Read the 78-byte header and the record table
2. Decode the appinfo block (if present) with the converter
3. Ask the converter whether it accepts the database
4. Decode every record span in table order

Deleted records whose offset lies beyond the end of the file are skipped.
The end of every span is clamped to the file length.

String Encoding
---------------
Strings are ISO-8859-1 with a few PalmOS specific glyphs in the range
0x80-0x9F and at 0x18/0x19, which are remapped to their Unicode
equivalents.

Usage Examples
--------------
Reading a memo database:
    >>> from pdbconverter.pdb import read_database, MemoConverter
    >>> database = read_database("MemoDB.pdb", MemoConverter())
    >>> for record in database:
    ...     print(record.memo)

Using the reader directly:
    >>> with PdbReader.open("ToDoDB.pdb") as reader:
    ...     database = reader.read_database(TodoConverter())

Copyright (c) 2026 pdbconverter Authors & Contributors
"""

from datetime import date, datetime
from io import BytesIO
from pathlib import Path
from typing import BinaryIO, Optional, Union, TYPE_CHECKING
import logging
import struct

from pdbconverter.dates import NO_DATE, palm_timestamp, unpack_date
from pdbconverter.errors import PdbError, PdbFormatError
from pdbconverter.pdb.categories import CategoryAppInfo, read_categories
from pdbconverter.pdb.database import (
    HEADER_SIZE,
    RECORD_ENTRY_SIZE,
    DatabaseAttribute,
    PdbDatabase,
)

if TYPE_CHECKING:
    from pdbconverter.pdb.converters import Converter

logger = logging.getLogger(__name__)


# =============================================================================
# Constants
# =============================================================================

DATABASE_NAME_LENGTH = 32

# PalmOS glyphs that differ from ISO-8859-1
SPECIAL_CHARACTERS = {
    0x18: "\u2026",  # horizontal ellipsis
    0x19: "\u2007",  # figure space
    0x80: "\u20AC",  # euro sign
    0x82: "\u201A",
    0x83: "\u0192",
    0x84: "\u201E",
    0x85: "\u2026",
    0x86: "\u2020",
    0x87: "\u2021",
    0x88: "\u0302",
    0x89: "\u2030",
    0x8A: "\u0160",
    0x8B: "\u2039",
    0x8C: "\u0152",
    0x8D: "\u2662",  # diamond suit
    0x8E: "\u2663",  # club suit
    0x8F: "\u2661",  # heart suit
    0x90: "\u2660",  # spade suit
    0x91: "\u2018",
    0x92: "\u2019",
    0x93: "\u201C",
    0x94: "\u201D",
    0x95: "\u2219",
    0x96: "\u2011",
    0x97: "\u2012",
    0x98: "\u0303",
    0x99: "\u2122",
    0x9A: "\u0161",
    0x9B: "\u203A",
    0x9C: "\u0153",
    0x9F: "\u0178",
}

_TRANSLATION = str.maketrans({chr(code): char for code, char in SPECIAL_CHARACTERS.items()})


# =============================================================================
# Helper Functions
# =============================================================================

def decode_string(data: bytes) -> str:
    """Decode PalmOS string bytes into a Python string."""
    return data.decode("latin-1").translate(_TRANSLATION)


# =============================================================================
# PDB Reader
# =============================================================================

class PdbReader:
    """
    Reader for PDB containers.

    The reader owns its stream. Use it as a context manager so the stream
    is closed whether decoding succeeds or fails.

    Attributes:
        stream: The underlying seekable binary stream
        record_index: Index of the record being decoded, None outside
            the record phase
    """

    def __init__(self, stream: BinaryIO):
        self.stream = stream
        self.record_index: Optional[int] = None
        self._length = self._measure()

    @classmethod
    def open(cls, filepath: Union[str, Path]) -> "PdbReader":
        """
        Open a PDB file.

        Raises:
            FileNotFoundError: If the file doesn't exist
        """
        filepath = Path(filepath)
        logger.debug(f"Opening {filepath}")
        return cls(open(filepath, "rb"))

    @classmethod
    def from_bytes(cls, data: bytes) -> "PdbReader":
        """Wrap an in-memory container."""
        return cls(BytesIO(data))

    def __enter__(self) -> "PdbReader":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()

    def close(self) -> None:
        self.stream.close()

    def _measure(self) -> int:
        position = self.stream.tell()
        length = self.stream.seek(0, 2)
        self.stream.seek(position)
        return length

    # =========================================================================
    # Positioning
    # =========================================================================

    @property
    def length(self) -> int:
        """Total length of the container in bytes."""
        return self._length

    def tell(self) -> int:
        return self.stream.tell()

    def seek(self, offset: int) -> None:
        self.stream.seek(offset)

    def remaining(self) -> int:
        """Number of bytes between the cursor and the end of the stream."""
        return max(0, self._length - self.tell())

    # =========================================================================
    # Primitive Readers
    # =========================================================================

    def _error(self, message: str, field: Optional[str]) -> PdbFormatError:
        return PdbFormatError(message, field=field, record_index=self.record_index)

    def read_bytes(self, count: int, field: Optional[str] = None) -> bytes:
        """
        Read exactly count bytes.

        Raises:
            PdbFormatError: If the stream ends early
        """
        if count < 0:
            raise self._error(f"negative length {count}", field)
        data = self.stream.read(count)
        if len(data) != count:
            raise self._error(
                f"unexpected end of data (wanted {count} bytes, got {len(data)})",
                field,
            )
        return data

    def _unpack(self, fmt: str, field: Optional[str]) -> int:
        data = self.read_bytes(struct.calcsize(fmt), field)
        return struct.unpack(fmt, data)[0]

    def read_u8(self, field: Optional[str] = None) -> int:
        return self._unpack(">B", field)

    def read_i8(self, field: Optional[str] = None) -> int:
        return self._unpack(">b", field)

    def read_u16(self, field: Optional[str] = None) -> int:
        return self._unpack(">H", field)

    def read_i16(self, field: Optional[str] = None) -> int:
        return self._unpack(">h", field)

    def read_u32(self, field: Optional[str] = None) -> int:
        return self._unpack(">I", field)

    def read_fixed_string(self, length: int, field: Optional[str] = None) -> str:
        """Read a string of exactly length bytes."""
        return decode_string(self.read_bytes(length, field))

    def read_terminated_fixed_string(self, length: int, field: Optional[str] = None) -> str:
        """
        Read a NUL terminated string stored in a fixed-size field.

        All length bytes are consumed; the string ends at the first NUL.
        """
        data = self.read_bytes(length, field)
        end = data.find(b"\x00")
        if end >= 0:
            data = data[:end]
        return decode_string(data)

    def read_terminated_string(self, field: Optional[str] = None) -> str:
        """
        Read a variable length NUL terminated string.

        The end of the stream terminates the string as well.
        """
        buffer = bytearray()
        while True:
            byte = self.stream.read(1)
            if not byte or byte == b"\x00":
                break
            buffer += byte
        return decode_string(bytes(buffer))

    def read_date(self, field: Optional[str] = None) -> datetime:
        """Read a u32 timestamp (seconds since 1904-01-01)."""
        return palm_timestamp(self.read_u32(field))

    def read_packed_date(self, field: Optional[str] = None) -> Optional[date]:
        """Read a packed date word, None if the date is not set."""
        value = self.read_u16(field)
        if value == NO_DATE:
            return None
        try:
            return unpack_date(value)
        except PdbFormatError as e:
            raise self._error(e.message, field) from e

    def read_date_time_words(self, field: Optional[str] = None) -> Optional[datetime]:
        """
        Read a date-time stored as seven u16 words.

        Word order: second, minute, hour, day, month, year, weekday.
        The weekday is redundant and ignored.

        Returns:
            The datetime, or None if the year is 0
        """
        second, minute, hour, day, month, year, _weekday = (
            self.read_u16(field) for _ in range(7)
        )
        if year == 0:
            return None
        try:
            return datetime(year, month, day, hour, minute, second)
        except ValueError as e:
            raise self._error(f"invalid date-time: {e}", field) from e

    def read_categories(self) -> tuple[CategoryAppInfo, int]:
        """Read the standard category block, see read_categories()."""
        return read_categories(self)

    # =========================================================================
    # Container Reading
    # =========================================================================

    def _read_header(self, database: PdbDatabase) -> tuple[int, int, int]:
        """
        Read the header into database.

        Returns:
            Tuple of (appinfo offset, sortinfo offset, record count)
        """
        if self._length < HEADER_SIZE:
            raise PdbFormatError(
                f"file too short for a PDB header ({self._length} bytes)"
            )

        self.seek(0)
        database.name = self.read_terminated_fixed_string(DATABASE_NAME_LENGTH, "name")
        database.attributes = DatabaseAttribute(self.read_u16("attributes"))
        database.version = self.read_u16("version")
        database.creation_time = self.read_date("creation time")
        database.modification_time = self.read_date("modification time")
        backup = self.read_u32("backup time")
        database.backup_time = palm_timestamp(backup) if backup else None
        database.modification_number = self.read_u32("modification number")
        app_info_offset = self.read_u32("appinfo offset")
        sort_info_offset = self.read_u32("sortinfo offset")
        database.type = self.read_fixed_string(4, "type")
        database.creator = self.read_fixed_string(4, "creator")
        self.read_u32("unique id seed")
        self.read_u32("next record list")
        count = self.read_u16("record count")

        logger.debug(
            f"Header: name='{database.name}' type='{database.type}' "
            f"creator='{database.creator}' records={count}"
        )
        return app_info_offset, sort_info_offset, count

    def _read_record_table(self, count: int) -> list[tuple[int, int]]:
        """Read count (offset, attribute) entries."""
        needed = HEADER_SIZE + count * RECORD_ENTRY_SIZE
        if needed > self._length:
            raise PdbFormatError(
                f"record table of {count} entries needs {needed} bytes, "
                f"file has {self._length}",
                field="record table",
            )
        entries = []
        for _ in range(count):
            offset = self.read_u32("record offset")
            attribute = self.read_u8("record attribute")
            self.read_bytes(3, "record unique id")
            entries.append((offset, attribute))
        return entries

    def _app_info_size(
        self,
        app_info_offset: int,
        sort_info_offset: int,
        entries: list[tuple[int, int]],
    ) -> int:
        if sort_info_offset:
            end = sort_info_offset
        elif entries:
            end = entries[0][0]
        else:
            end = self._length
        end = min(end, self._length)
        if end < app_info_offset:
            raise PdbFormatError(
                f"appinfo block at {app_info_offset} ends before it starts ({end})",
                field="appinfo",
            )
        return end - app_info_offset

    def read_database(self, converter: "Converter") -> PdbDatabase:
        """
        Read the whole container.

        Args:
            converter: Converter for the container's schema

        Returns:
            The decoded database

        Raises:
            PdbFormatError: If the container is truncated or malformed
            WrongFormatError: If the converter does not accept the container
            UnknownValueError: If a record holds an unknown enumerant
        """
        database = PdbDatabase()
        try:
            self._read_into(database, converter)
        except PdbError as e:
            logger.error(f"Reading '{database.name}' failed: {e}")
            raise
        finally:
            self.record_index = None
        return database

    def _read_into(self, database: PdbDatabase, converter: "Converter") -> None:
        app_info_offset, sort_info_offset, count = self._read_header(database)
        entries = self._read_record_table(count)

        if app_info_offset:
            size = self._app_info_size(app_info_offset, sort_info_offset, entries)
            self.seek(app_info_offset)
            database.app_info = converter.decode_app_info(self, size, database)

        converter.check_acceptable(database)

        for index, (offset, attribute) in enumerate(entries):
            deleted = bool(attribute & 0x80)
            if offset >= self._length:
                if deleted:
                    logger.warning(
                        f"Skipping deleted record {index}: offset {offset} "
                        f"is beyond the end of the file"
                    )
                    continue
                raise PdbFormatError(
                    f"offset {offset} is beyond the end of the file ({self._length})",
                    record_index=index,
                )

            if index + 1 < len(entries):
                end = min(entries[index + 1][0], self._length)
            else:
                end = self._length
            span = end - offset
            if span < 0:
                raise PdbFormatError(
                    f"record offsets go backwards ({offset} > {end})",
                    record_index=index,
                )

            self.record_index = index
            self.seek(offset)
            logger.debug(f"Decoding record {index}: offset={offset} size={span}")
            try:
                record = converter.decode_record(self, index, span, attribute, database)
            except PdbError:
                raise
            except Exception as e:
                raise PdbFormatError(
                    f"decoding failed: {e}", record_index=index
                ) from e

            if record is not None:
                database.records.append(record)

        self.record_index = None
        logger.debug(f"Read {len(database.records)} of {count} records")


# =============================================================================
# Convenience Functions
# =============================================================================

def read_database(
    source: Union[str, Path, bytes, BinaryIO],
    converter: "Converter",
) -> PdbDatabase:
    """
    Read a PDB container from a path, a bytes buffer or a binary stream.

    A stream passed in by the caller is closed after reading.

    Example:
        >>> database = read_database(Path("MemoDB.pdb"), MemoConverter())
        >>> print(len(database))
    """
    if isinstance(source, (bytes, bytearray)):
        reader = PdbReader.from_bytes(bytes(source))
    elif isinstance(source, (str, Path)):
        reader = PdbReader.open(source)
    else:
        reader = PdbReader(source)

    with reader:
        return reader.read_database(converter)
