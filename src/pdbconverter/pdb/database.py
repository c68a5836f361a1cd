"""
PDB Database Aggregate
======================

A PdbDatabase holds everything decoded from one container: the header
metadata, the schema specific appinfo and the ordered list of records.

PDB Header Layout (78 bytes)
----------------------------
    Offset  Size    Description
    ------  ----    -----------
    0       32      Database name, NUL terminated
    32      2       Attributes (see DatabaseAttribute)
    34      2       Version
    36      4       Creation time (seconds since 1904-01-01)
    40      4       Modification time
    44      4       Backup time (0 = never backed up)
    48      4       Modification number
    52      4       AppInfo offset (0 = none)
    56      4       SortInfo offset (0 = none)
    60      4       Type
    64      4       Creator
    68      4       Unique ID seed
    72      4       Next record list
    76      2       Number of records

The record list follows directly, 8 bytes per record:
[offset 4 bytes] [attribute 1 byte] [unique id 3 bytes].

Copyright (c) 2026 pdbconverter Authors & Contributors
"""

from dataclasses import dataclass, field
from datetime import datetime
from enum import IntFlag
from typing import Any, Iterator, Optional, TYPE_CHECKING

from pdbconverter.pdb.categories import CategoryAppInfo
from pdbconverter.pdb.records import Record

if TYPE_CHECKING:
    from pdbconverter.filters import RecordFilter

HEADER_SIZE = 78
RECORD_ENTRY_SIZE = 8


class DatabaseAttribute(IntFlag):
    """Database attribute flags of the PDB header."""
    RESOURCE = 0x0001
    READ_ONLY = 0x0002
    APPINFO_DIRTY = 0x0004
    BACKUP = 0x0008
    OK_TO_INSTALL_NEWER = 0x0010
    RESET = 0x0020
    COPY_PREVENTION = 0x0040
    STREAM = 0x0080
    HIDDEN = 0x0100
    LAUNCHABLE_DATA = 0x0200
    RECYCLABLE = 0x0400
    BUNDLE = 0x0800
    OPEN = 0x8000


@dataclass
class PdbDatabase:
    """
    Decoded contents of a PDB container.

    The database is filled in a single pass by the reader. Converters
    receive the database-so-far, so header fields and the appinfo are
    already available while records are decoded.

    Attributes:
        name: Database name (for example "MemoDB")
        attributes: Database attribute flags
        version: Application specific version
        creation_time: Creation time
        modification_time: Modification time
        backup_time: Backup time, None if never backed up
        modification_number: Modification counter
        type: 4-character type code
        creator: 4-character creator code
        app_info: Schema specific appinfo, None if not present
        records: Decoded records in record table order
    """
    name: str = ""
    attributes: DatabaseAttribute = DatabaseAttribute(0)
    version: int = 0
    creation_time: Optional[datetime] = None
    modification_time: Optional[datetime] = None
    backup_time: Optional[datetime] = None
    modification_number: int = 0
    type: str = ""
    creator: str = ""
    app_info: Any = None
    records: list[Record] = field(default_factory=list)

    def __len__(self) -> int:
        return len(self.records)

    def __iter__(self) -> Iterator[Record]:
        return iter(self.records)

    @property
    def categories(self) -> Optional[CategoryAppInfo]:
        """The category table, if the appinfo carries one."""
        if isinstance(self.app_info, CategoryAppInfo):
            return self.app_info
        return None

    def category_name(self, record: Record) -> Optional[str]:
        """Resolve the category name of a record, None if undefined."""
        categories = self.categories
        if categories is None:
            return None
        return categories.name_of(record.category_index)

    def filter(self, record_filter: Optional["RecordFilter"]) -> list[Record]:
        """Get all records accepted by a filter, in order."""
        if record_filter is None:
            return list(self.records)
        return [record for record in self.records if record_filter.accepts(record)]

    def get_info(self) -> dict:
        """
        Get summary information about the database.

        Returns:
            Dictionary with database information
        """
        return {
            "name": self.name,
            "type": self.type,
            "creator": self.creator,
            "version": self.version,
            "attributes": f"0x{int(self.attributes):04X}",
            "created": self.creation_time.isoformat() if self.creation_time else None,
            "modified": self.modification_time.isoformat() if self.modification_time else None,
            "backed_up": self.backup_time.isoformat() if self.backup_time else None,
            "modification_number": self.modification_number,
            "category_count": len(self.categories) if self.categories else 0,
            "record_count": len(self.records),
        }
