"""
PDB Record Type Definitions
===========================

This module defines the data structures for decoded PDB records. Each
supported schema has one record class; together they form a closed set
of variants identified by RecordKind.

Record Attribute Byte
---------------------
Every entry of the record table carries one attribute byte:

    Bit 7:    Deleted
    Bit 6:    Dirty
    Bit 5:    Busy
    Bit 4:    Secret
    Bit 0-3:  Category index (0-15)

Record Kinds
------------
- CONTACT:  Address book entry (AddressDB)
- MEMO:     Memo pad text (MemoDB)
- TODO:     To-do item (ToDoDB)
- NOTE:     Notepad entry with an embedded image (npadDB)
- SCHEDULE: Calendar event (CalendarDB-PDat)
- RAW:      Undecoded record bytes

Records are immutable. They are created once while a container is read
and never changed afterwards.

Copyright (c) 2026 pdbconverter Authors & Contributors
"""

from dataclasses import dataclass, field
from datetime import date, datetime, time
from enum import Enum, IntEnum
from typing import ClassVar, Optional

from pdbconverter.recurrence.model import Repeat


# =============================================================================
# Enumeration Types
# =============================================================================

class RecordKind(Enum):
    """The closed set of record variants."""
    CONTACT = "contact"
    MEMO = "memo"
    TODO = "todo"
    NOTE = "note"
    SCHEDULE = "schedule"
    RAW = "raw"


class AddressField(IntEnum):
    """
    Address book fields, in the order they are stored in a record.

    Bit n of the field presence bitmap refers to the field with value n.
    """
    LAST_NAME = 0
    FIRST_NAME = 1
    COMPANY = 2
    PHONE1 = 3
    PHONE2 = 4
    PHONE3 = 5
    PHONE4 = 6
    PHONE5 = 7
    ADDRESS = 8
    CITY = 9
    STATE = 10
    ZIP = 11
    COUNTRY = 12
    TITLE = 13
    CUSTOM1 = 14
    CUSTOM2 = 15
    CUSTOM3 = 16
    CUSTOM4 = 17
    NOTE = 18

    @classmethod
    def phones(cls) -> tuple["AddressField", ...]:
        """The five phone fields."""
        return (cls.PHONE1, cls.PHONE2, cls.PHONE3, cls.PHONE4, cls.PHONE5)

    def is_phone(self) -> bool:
        return AddressField.PHONE1 <= self <= AddressField.PHONE5


class PhoneLabel(IntEnum):
    """Labels that can be assigned to a phone field."""
    WORK = 0
    HOME = 1
    FAX = 2
    OTHER = 3
    EMAIL = 4
    MAIN = 5
    PAGER = 6
    MOBILE = 7


class AlarmUnit(IntEnum):
    """Unit of an alarm's advance value."""
    MINUTES = 0
    HOURS = 1
    DAYS = 2


# =============================================================================
# Record Attributes
# =============================================================================

@dataclass(frozen=True)
class RecordAttributes:
    """
    Decoded record attribute byte.

    Attributes:
        secret: Record is marked private
        busy: Record is in use by an application
        dirty: Record was modified since the last sync
        deleted: Record was deleted
        category_index: Category slot (0-15)
    """
    ATTR_DELETED: ClassVar[int] = 0x80
    ATTR_DIRTY: ClassVar[int] = 0x40
    ATTR_BUSY: ClassVar[int] = 0x20
    ATTR_SECRET: ClassVar[int] = 0x10
    CATEGORY_MASK: ClassVar[int] = 0x0F

    secret: bool = False
    busy: bool = False
    dirty: bool = False
    deleted: bool = False
    category_index: int = 0

    @classmethod
    def from_byte(cls, attribute: int) -> "RecordAttributes":
        """Decode an attribute byte."""
        return cls(
            secret=bool(attribute & cls.ATTR_SECRET),
            busy=bool(attribute & cls.ATTR_BUSY),
            dirty=bool(attribute & cls.ATTR_DIRTY),
            deleted=bool(attribute & cls.ATTR_DELETED),
            category_index=attribute & cls.CATEGORY_MASK,
        )

    def to_byte(self) -> int:
        """Encode back into an attribute byte."""
        value = self.category_index & self.CATEGORY_MASK
        if self.secret:
            value |= self.ATTR_SECRET
        if self.busy:
            value |= self.ATTR_BUSY
        if self.dirty:
            value |= self.ATTR_DIRTY
        if self.deleted:
            value |= self.ATTR_DELETED
        return value


# =============================================================================
# Record Base Class
# =============================================================================

@dataclass(frozen=True)
class Record:
    """
    Base class for all records.

    The shared attribute fields are exposed as properties so that filters
    and exporters can work on any record kind.
    """
    kind: ClassVar[RecordKind]

    attributes: RecordAttributes = field(default_factory=RecordAttributes)

    @property
    def secret(self) -> bool:
        return self.attributes.secret

    @property
    def busy(self) -> bool:
        return self.attributes.busy

    @property
    def dirty(self) -> bool:
        return self.attributes.dirty

    @property
    def deleted(self) -> bool:
        return self.attributes.deleted

    @property
    def category_index(self) -> int:
        return self.attributes.category_index

    @property
    def record_date(self) -> Optional[datetime]:
        """
        The date a record is filtered by.

        Returns:
            Due date, creation date or schedule date, or None if the
            record kind carries no date
        """
        return None


# =============================================================================
# Record Variants
# =============================================================================

@dataclass(frozen=True)
class AddressRecord(Record):
    """
    Address book record.

    Attributes:
        fields: One value per AddressField, None if the field is empty
        phone_labels: Label of each of the five phone fields
        display_phone: Index (0-4) of the phone shown in the list view
    """
    kind: ClassVar[RecordKind] = RecordKind.CONTACT

    fields: tuple[Optional[str], ...] = (None,) * len(AddressField)
    phone_labels: tuple[PhoneLabel, ...] = (
        PhoneLabel.WORK, PhoneLabel.HOME, PhoneLabel.FAX,
        PhoneLabel.OTHER, PhoneLabel.EMAIL,
    )
    display_phone: int = 0

    def get(self, address_field: AddressField) -> Optional[str]:
        return self.fields[address_field]

    def label_of(self, address_field: AddressField) -> Optional[PhoneLabel]:
        """Get the phone label of a phone field, None for other fields."""
        if not address_field.is_phone():
            return None
        return self.phone_labels[address_field - AddressField.PHONE1]

    @property
    def preferred_phone(self) -> Optional[AddressField]:
        """The phone field shown in the list view, if it holds a value."""
        if not 0 <= self.display_phone < len(AddressField.phones()):
            return None
        phone = AddressField.phones()[self.display_phone]
        return phone if self.fields[phone] is not None else None

    def __str__(self) -> str:
        names = [self.get(AddressField.FIRST_NAME), self.get(AddressField.LAST_NAME)]
        name = " ".join(n for n in names if n) or self.get(AddressField.COMPANY) or ""
        return f"Address:[{name}]"


@dataclass(frozen=True)
class MemoRecord(Record):
    """Memo pad record."""
    kind: ClassVar[RecordKind] = RecordKind.MEMO

    memo: str = ""

    def __str__(self) -> str:
        return f"Memo:[{self.memo}]"


@dataclass(frozen=True)
class TodoRecord(Record):
    """
    To-do record.

    Attributes:
        due_date: Due date, None if not set
        priority: Priority (0-127)
        completed: True if the item is done
        description: Item description
        note: Attached note, None if empty
    """
    kind: ClassVar[RecordKind] = RecordKind.TODO

    due_date: Optional[date] = None
    priority: int = 0
    completed: bool = False
    description: str = ""
    note: Optional[str] = None

    @property
    def record_date(self) -> Optional[datetime]:
        if self.due_date is None:
            return None
        return datetime.combine(self.due_date, time())

    def __str__(self) -> str:
        parts = ["complete" if self.completed else "open"]
        if self.due_date is not None:
            parts.append(f"date={self.due_date.isoformat()}")
        parts.append(f"priority={self.priority}")
        parts.append(f"description='{self.description}'")
        if self.note is not None:
            parts.append(f"note='{self.note}'")
        return f"Todo:[{' '.join(parts)}]"


@dataclass(frozen=True)
class NotepadRecord(Record):
    """
    Notepad record.

    The image is kept as the raw bytes found in the record; it is not
    interpreted.
    """
    kind: ClassVar[RecordKind] = RecordKind.NOTE

    created: Optional[datetime] = None
    modified: Optional[datetime] = None
    alarm: Optional[datetime] = None
    title: Optional[str] = None
    image: bytes = field(default=b"", repr=False)

    @property
    def record_date(self) -> Optional[datetime]:
        return self.created

    def __str__(self) -> str:
        parts = [f"created={self.created}"]
        if self.modified is not None:
            parts.append(f"modified={self.modified}")
        if self.title is not None:
            parts.append(f"title='{self.title}'")
        if self.alarm is not None:
            parts.append(f"alarm={self.alarm}")
        parts.append(f"image={len(self.image)} bytes")
        return f"Notepad:[{' '.join(parts)}]"


@dataclass(frozen=True)
class Alarm:
    """Alarm of a schedule, value units before the event starts."""
    value: int
    unit: AlarmUnit

    def __str__(self) -> str:
        return f"{self.value} {self.unit.name.lower()}"


@dataclass(frozen=True)
class ScheduleRecord(Record):
    """
    Calendar event.

    An event without start and end time is an all-day event.

    Attributes:
        schedule_date: Date of the (first) occurrence
        start_time: Start time, None for all-day events
        end_time: End time, None for all-day events
        alarm: Alarm, None if not set
        repeat: Recurrence, None if the event does not repeat
        exceptions: Dates excluded from the recurrence
        description: Event summary
        note: Attached note
        location: Event location
        category: Resolved category name
    """
    kind: ClassVar[RecordKind] = RecordKind.SCHEDULE

    schedule_date: Optional[date] = None
    start_time: Optional[time] = None
    end_time: Optional[time] = None
    alarm: Optional[Alarm] = None
    repeat: Optional[Repeat] = None
    exceptions: tuple[date, ...] = ()
    description: Optional[str] = None
    note: Optional[str] = None
    location: Optional[str] = None
    category: Optional[str] = None

    @property
    def is_all_day(self) -> bool:
        return self.start_time is None and self.end_time is None

    @property
    def record_date(self) -> Optional[datetime]:
        if self.schedule_date is None:
            return None
        return datetime.combine(self.schedule_date, self.start_time or time())

    def __str__(self) -> str:
        parts = [self.schedule_date.isoformat() if self.schedule_date else "undated"]
        if self.start_time is not None:
            parts.append(self.start_time.strftime("%H:%M"))
        if self.end_time is not None:
            parts.append("-" + self.end_time.strftime("%H:%M"))
        if self.description:
            parts.append(f"'{self.description}'")
        if self.repeat is not None:
            parts.append(f"repeat={self.repeat}")
        if self.exceptions:
            parts.append("exceptions={" + ",".join(d.isoformat() for d in self.exceptions) + "}")
        return f"Schedule:[{' '.join(parts)}]"


@dataclass(frozen=True)
class RawRecord(Record):
    """Record holding the undecoded record bytes."""
    kind: ClassVar[RecordKind] = RecordKind.RAW

    data: bytes = field(default=b"", repr=False)

    def __str__(self) -> str:
        return f"Raw:[{len(self.data)} bytes]"
