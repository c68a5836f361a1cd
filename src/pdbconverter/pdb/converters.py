"""
Record Converters
=================

A Converter knows one PDB schema. The reader calls it for the appinfo
block and once per record span; the converter decodes the bytes into the
record model.

Converter Interface
-------------------
- is_acceptable(database): does the header identify this schema?
- decode_app_info(reader, size, database): decode the appinfo block
- decode_record(reader, index, size, attribute, database): decode a
  record span, or return None to leave the record out

Available Converters
--------------------
    Name        Database            Creator
    ----        --------            -------
    address     AddressDB           addr
    memo        MemoDB              memo
    todo        ToDoDB              todo
    notepad     npadDB              npad
    schedule    CalendarDB-PDat     PDat
    raw         (any)               (any)

Schema converters drop records flagged as deleted; the raw converter
keeps every record so nothing is lost when inspecting unknown files.

Usage Examples
--------------
    >>> converter = get_converter("todo")
    >>> database = read_database("ToDoDB.pdb", converter)

Copyright (c) 2026 pdbconverter Authors & Contributors
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from datetime import time
from typing import Any, Optional, TYPE_CHECKING
import logging

from pdbconverter.errors import PdbFormatError, UnknownValueError, WrongFormatError
from pdbconverter.pdb.categories import CategoryAppInfo, read_categories
from pdbconverter.pdb.database import PdbDatabase
from pdbconverter.pdb.records import (
    Alarm,
    AlarmUnit,
    AddressField,
    AddressRecord,
    MemoRecord,
    NotepadRecord,
    PhoneLabel,
    RawRecord,
    Record,
    RecordAttributes,
    ScheduleRecord,
    TodoRecord,
)
from pdbconverter.recurrence.binary import read_repeat

if TYPE_CHECKING:
    from pdbconverter.pdb.reader import PdbReader

logger = logging.getLogger(__name__)


# =============================================================================
# Converter Base Classes
# =============================================================================

class Converter(ABC):
    """
    Base class of all converters.

    Subclasses set the class attributes database_name and creator to the
    signature of their schema; None accepts any value.
    """
    name: str = ""
    database_name: Optional[str] = None
    creator: Optional[str] = None

    def is_acceptable(self, database: PdbDatabase) -> bool:
        """Check the database header against the converter's signature."""
        if self.database_name is not None and database.name != self.database_name:
            return False
        if self.creator is not None and database.creator != self.creator:
            return False
        return True

    def check_acceptable(self, database: PdbDatabase) -> None:
        """
        Raises:
            WrongFormatError: If the converter does not accept the database
        """
        if not self.is_acceptable(database):
            raise WrongFormatError(database.name, database.creator, self.name)

    def decode_app_info(
        self, reader: "PdbReader", size: int, database: PdbDatabase
    ) -> Any:
        """Decode the appinfo block. The default skips it."""
        return None

    @abstractmethod
    def decode_record(
        self,
        reader: "PdbReader",
        index: int,
        size: int,
        attribute: int,
        database: PdbDatabase,
    ) -> Optional[Record]:
        """
        Decode one record.

        The reader is positioned at the start of the record span.

        Args:
            reader: Reader positioned at the record
            index: Index of the record in the record table
            size: Length of the record span in bytes
            attribute: Record attribute byte
            database: Database decoded so far

        Returns:
            The record, or None if the record is to be left out
        """

    def __repr__(self) -> str:
        return f"{type(self).__name__}()"


class CategoryConverter(Converter):
    """Converter for schemas that start their appinfo with the category table."""

    def decode_app_info(
        self, reader: "PdbReader", size: int, database: PdbDatabase
    ) -> Optional[CategoryAppInfo]:
        appinfo, _ = read_categories(reader)
        return appinfo

    def decode_record(
        self,
        reader: "PdbReader",
        index: int,
        size: int,
        attribute: int,
        database: PdbDatabase,
    ) -> Optional[Record]:
        attributes = RecordAttributes.from_byte(attribute)
        if attributes.deleted:
            logger.debug(f"Record {index} is deleted")
            return None
        return self.decode(reader, size, attributes, database)

    @abstractmethod
    def decode(
        self,
        reader: "PdbReader",
        size: int,
        attributes: RecordAttributes,
        database: PdbDatabase,
    ) -> Record:
        """Decode a record that is not deleted."""


# =============================================================================
# Address Book
# =============================================================================

ADDRESS_LABEL_COUNT = 22

DEFAULT_FIELD_LABELS = (
    "Last name", "First name", "Company",
    "Work", "Home", "Fax", "Other", "E-mail",
    "Address", "City", "State", "Zip Code", "Country", "Title",
    "Custom 1", "Custom 2", "Custom 3", "Custom 4", "Note",
    "Main", "Pager", "Mobile",
)


@dataclass
class AddressAppInfo(CategoryAppInfo):
    """
    Address book appinfo.

    Attributes:
        labels: 22 labels; 19 field labels followed by the labels of the
            Main, Pager and Mobile phone types
        renamed_labels: Bitmask of labels renamed by the user
        country: Country code of the address book
        sort_by_company: True if the list is sorted by company
    """
    labels: tuple[str, ...] = DEFAULT_FIELD_LABELS
    renamed_labels: int = 0
    country: int = 0
    sort_by_company: bool = False

    def field_label(self, address_field: AddressField) -> str:
        return self.labels[address_field]

    def phone_label(self, label: PhoneLabel) -> str:
        """Display name of a phone label."""
        if label <= PhoneLabel.EMAIL:
            return self.labels[AddressField.PHONE1 + label]
        return self.labels[len(AddressField) + label - PhoneLabel.MAIN]


class AddressConverter(CategoryConverter):
    """Converter for the address book (AddressDB)."""
    name = "address"
    database_name = "AddressDB"
    creator = "addr"

    # Phone label nibbles 0-4, display phone nibble 5
    DISPLAY_PHONE_SHIFT = 20

    def decode_app_info(
        self, reader: "PdbReader", size: int, database: PdbDatabase
    ) -> AddressAppInfo:
        categories, consumed = read_categories(reader)
        appinfo = AddressAppInfo(slots=categories.slots)

        # 2 bytes unique id + padding, u32 renamed, labels, u16 country, u8 sort
        needed = 2 + 4 + ADDRESS_LABEL_COUNT * 16 + 2 + 1
        if size - consumed < needed:
            logger.debug(f"Address appinfo truncated ({size} bytes), using default labels")
            return appinfo

        reader.read_bytes(2, "address appinfo padding")
        appinfo.renamed_labels = reader.read_u32("renamed labels")
        appinfo.labels = tuple(
            reader.read_terminated_fixed_string(16, "field label")
            for _ in range(ADDRESS_LABEL_COUNT)
        )
        appinfo.country = reader.read_u16("country")
        appinfo.sort_by_company = bool(reader.read_u8("sort by company"))
        return appinfo

    def decode(
        self,
        reader: "PdbReader",
        size: int,
        attributes: RecordAttributes,
        database: PdbDatabase,
    ) -> AddressRecord:
        options = reader.read_u32("phone options")
        present = reader.read_u32("field flags")
        reader.read_u8("company offset")

        fields: list[Optional[str]] = [None] * len(AddressField)
        for address_field in AddressField:
            if present & (1 << address_field):
                fields[address_field] = reader.read_terminated_string(address_field.name.lower())

        labels = []
        for phone in range(len(AddressField.phones())):
            value = (options >> (phone * 4)) & 0x0F
            try:
                labels.append(PhoneLabel(value))
            except ValueError:
                raise UnknownValueError("phone label", value, reader.record_index) from None

        return AddressRecord(
            attributes=attributes,
            fields=tuple(fields),
            phone_labels=tuple(labels),
            display_phone=(options >> self.DISPLAY_PHONE_SHIFT) & 0x0F,
        )


# =============================================================================
# Memo Pad
# =============================================================================

class MemoConverter(CategoryConverter):
    """Converter for the memo pad (MemoDB)."""
    name = "memo"
    database_name = "MemoDB"
    creator = "memo"

    def decode(self, reader, size, attributes, database) -> MemoRecord:
        return MemoRecord(attributes=attributes, memo=reader.read_terminated_string("memo"))


# =============================================================================
# To Do List
# =============================================================================

class TodoConverter(CategoryConverter):
    """Converter for the to-do list (ToDoDB)."""
    name = "todo"
    database_name = "ToDoDB"
    creator = "todo"

    FLAG_COMPLETED = 0x80
    PRIORITY_MASK = 0x7F

    def decode(self, reader, size, attributes, database) -> TodoRecord:
        due_date = reader.read_packed_date("due date")
        flags = reader.read_u8("flags")
        description = reader.read_terminated_string("description")
        note = reader.read_terminated_string("note")

        return TodoRecord(
            attributes=attributes,
            due_date=due_date,
            priority=flags & self.PRIORITY_MASK,
            completed=bool(flags & self.FLAG_COMPLETED),
            description=description,
            note=note or None,
        )


# =============================================================================
# Notepad
# =============================================================================

class NotepadConverter(CategoryConverter):
    """Converter for notepad entries (npadDB)."""
    name = "notepad"
    database_name = "npadDB"
    creator = "npad"

    FLAG_TITLE = 0x0002
    FLAG_ALARM = 0x0004

    def decode(self, reader, size, attributes, database) -> NotepadRecord:
        start = reader.tell()

        created = reader.read_date_time_words("created")
        modified = reader.read_date_time_words("modified")
        flags = reader.read_u16("flags")

        alarm = None
        if flags & self.FLAG_ALARM:
            alarm = reader.read_date_time_words("alarm")

        title = None
        if flags & self.FLAG_TITLE:
            title_start = reader.tell()
            title = reader.read_terminated_string("title")
            # Title plus terminator is padded to an even length
            if (reader.tell() - title_start) % 2:
                reader.read_u8("title padding")

        # Image header: end offset, width, height, two constants, end offset
        for _ in range(6):
            reader.read_u32("image header")

        image_size = size - (reader.tell() - start)
        if image_size < 0:
            raise PdbFormatError(
                f"record span of {size} bytes is too short for the notepad header",
                field="image",
                record_index=reader.record_index,
            )

        return NotepadRecord(
            attributes=attributes,
            created=created,
            modified=modified,
            alarm=alarm,
            title=title,
            image=reader.read_bytes(image_size, "image"),
        )


# =============================================================================
# Calendar
# =============================================================================

class ScheduleConverter(CategoryConverter):
    """Converter for the calendar (CalendarDB-PDat)."""
    name = "schedule"
    database_name = "CalendarDB-PDat"
    creator = "PDat"

    FLAG_ALARM = 0x4000
    FLAG_REPEAT = 0x2000
    FLAG_NOTE = 0x1000
    FLAG_EXCEPTIONS = 0x0800
    FLAG_DESCRIPTION = 0x0400
    FLAG_LOCATION = 0x0200

    NO_TIME = 0xFF

    def _read_time(self, reader: "PdbReader", field: str) -> Optional[time]:
        hour = reader.read_u8(f"{field} hour")
        minute = reader.read_u8(f"{field} minute")
        if hour == self.NO_TIME or minute == self.NO_TIME:
            return None
        try:
            return time(hour, minute)
        except ValueError as e:
            raise PdbFormatError(str(e), field=field, record_index=reader.record_index) from e

    def _read_alarm(self, reader: "PdbReader") -> Alarm:
        advance = reader.read_i8("alarm advance")
        unit = reader.read_u8("alarm unit")
        try:
            return Alarm(advance, AlarmUnit(unit))
        except ValueError:
            raise UnknownValueError("alarm unit", unit, reader.record_index) from None

    def decode(self, reader, size, attributes, database) -> ScheduleRecord:
        start_time = self._read_time(reader, "start")
        end_time = self._read_time(reader, "end")
        schedule_date = reader.read_packed_date("date")
        flags = reader.read_u16("flags")

        alarm = self._read_alarm(reader) if flags & self.FLAG_ALARM else None
        repeat = read_repeat(reader) if flags & self.FLAG_REPEAT else None

        exceptions = ()
        if flags & self.FLAG_EXCEPTIONS:
            count = reader.read_u16("exception count")
            exceptions = tuple(
                reader.read_packed_date("exception") for _ in range(count)
            )
            exceptions = tuple(day for day in exceptions if day is not None)

        description = None
        if flags & self.FLAG_DESCRIPTION:
            description = reader.read_terminated_string("description")
        note = None
        if flags & self.FLAG_NOTE:
            note = reader.read_terminated_string("note")
        location = None
        if flags & self.FLAG_LOCATION:
            location = reader.read_terminated_string("location")

        return ScheduleRecord(
            attributes=attributes,
            schedule_date=schedule_date,
            start_time=start_time,
            end_time=end_time,
            alarm=alarm,
            repeat=repeat,
            exceptions=exceptions,
            description=description,
            note=note,
            location=location,
            category=self._category_name(database, attributes.category_index),
        )

    @staticmethod
    def _category_name(database: PdbDatabase, index: int) -> Optional[str]:
        categories = database.categories
        return categories.name_of(index) if categories is not None else None


# =============================================================================
# Raw Records
# =============================================================================

class RawConverter(Converter):
    """
    Converter accepting any database.

    Records are returned undecoded, including deleted ones. The appinfo
    block is kept as raw bytes.
    """
    name = "raw"

    def decode_app_info(self, reader, size, database) -> bytes:
        return reader.read_bytes(size, "appinfo")

    def decode_record(self, reader, index, size, attribute, database) -> RawRecord:
        return RawRecord(
            attributes=RecordAttributes.from_byte(attribute),
            data=reader.read_bytes(size, "data"),
        )


# =============================================================================
# Registry
# =============================================================================

CONVERTERS: dict[str, type[Converter]] = {
    converter.name: converter
    for converter in (
        AddressConverter,
        MemoConverter,
        TodoConverter,
        NotepadConverter,
        ScheduleConverter,
        RawConverter,
    )
}


def get_converter(name: str) -> Converter:
    """
    Create a converter by name.

    Raises:
        KeyError: If there is no converter with that name
    """
    try:
        return CONVERTERS[name.lower()]()
    except KeyError:
        raise KeyError(
            f"unknown converter '{name}', choose from: {', '.join(CONVERTERS)}"
        ) from None
