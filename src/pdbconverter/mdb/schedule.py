"""
Palm Desktop Calendar Reader
============================

Reads the calendar of a Palm Desktop DateBook.mdb file into ScheduleRecord
values.

Tables
------
Category:
    ID      Category key
    Name    Category name

Main (one row per event):
    Private         Yes/No
    Category        Category key, as text
    Note            Note text
    Summary         Description
    Location        Location
    Start Time      Seconds since 1970, as text
    End Time        Seconds since 1970, as text
    Untimed         Yes/No, all-day event
    Time Zone       IANA time zone of the event
    Alarm           Yes/No
    Alarm Advance   Alarm advance value
    Alarm Unit      0 = minutes, 1 = hours, 2 = days
    Repeated Event  Recurrence in the text grammar

Copyright (c) 2026 pdbconverter Authors & Contributors
"""

from typing import Optional
import logging

from pdbconverter.config import ConverterConfig
from pdbconverter.errors import MdbError, PdbFormatError
from pdbconverter.mdb.reader import MdbReader, Row, TableSource
from pdbconverter.pdb.categories import Category, CategoryAppInfo
from pdbconverter.pdb.database import PdbDatabase
from pdbconverter.pdb.records import Alarm, AlarmUnit, RecordAttributes, ScheduleRecord
from pdbconverter.recurrence.grammar import decode_repeat_line

logger = logging.getLogger(__name__)

DATABASE_NAME = "DateBook"
CREATOR = "PDat"


class ScheduleMdbReader(MdbReader):
    """Reader for the Palm Desktop calendar."""

    def __init__(self, source: TableSource, config: Optional[ConverterConfig] = None):
        super().__init__(source)
        self.config = config or ConverterConfig.from_env()

    def read(self) -> PdbDatabase:
        """
        Read categories and events.

        Raises:
            MdbError: If a table or column is missing or holds a bad value
        """
        categories = self._read_categories()
        database = PdbDatabase(
            name=DATABASE_NAME,
            creator=CREATOR,
            app_info=categories,
        )
        for index, row in enumerate(self.get_table("Main")):
            try:
                database.records.append(self._read_event(row, categories))
            except MdbError as e:
                raise MdbError(f"row {index}: {e}") from e

        logger.debug(f"Read {len(database.records)} events")
        return database

    def _read_categories(self) -> CategoryAppInfo:
        categories = CategoryAppInfo()
        for index, row in enumerate(self.get_table("Category")):
            key = self.get_column(row, "ID", int)
            if key is None:
                raise MdbError(f"category row {index}: column 'ID': no category key")
            name = self.get_column(row, "Name", str)
            try:
                categories.add(Category(name or "", key))
            except PdbFormatError:
                logger.warning(f"Dropping category '{name}': all 16 slots in use")
        return categories

    def _read_event(self, row: Row, categories: CategoryAppInfo) -> ScheduleRecord:
        category_key = self._category_key(row)
        index = categories.find_by_key(category_key)
        category = categories.get_by_key(category_key)

        attributes = RecordAttributes(
            secret=bool(self.get_column(row, "Private")),
            category_index=index if index is not None else 0,
        )

        start = self.get_date_column(row, "Start Time")
        end = self.get_date_column(row, "End Time")
        if start is None:
            raise MdbError("column 'Start Time': no start time")
        zone = self.config.get_timezone(self.get_column(row, "Time Zone", str))
        start = start.astimezone(zone)
        end = end.astimezone(zone) if end is not None else start

        untimed = bool(self.get_column(row, "Untimed"))

        repeat_line = decode_repeat_line(self.get_column(row, "Repeated Event", str))

        return ScheduleRecord(
            attributes=attributes,
            schedule_date=start.date(),
            start_time=None if untimed else start.time().replace(second=0, microsecond=0),
            end_time=None if untimed else end.time().replace(second=0, microsecond=0),
            alarm=self._read_alarm(row),
            repeat=repeat_line.repeat if repeat_line else None,
            exceptions=repeat_line.exceptions if repeat_line else (),
            description=self._text(row, "Summary"),
            note=self._text(row, "Note"),
            location=self._text(row, "Location"),
            category=category.name if category else None,
        )

    def _category_key(self, row: Row) -> int:
        value = self.get_column(row, "Category")
        try:
            return int(value)
        except (TypeError, ValueError):
            raise MdbError(f"column 'Category': not a number: {value!r}") from None

    def _read_alarm(self, row: Row) -> Optional[Alarm]:
        if not self.get_column(row, "Alarm"):
            return None
        advance = self.get_column(row, "Alarm Advance", int)
        unit = self.get_column(row, "Alarm Unit", int)
        try:
            return Alarm(advance, AlarmUnit(unit))
        except ValueError:
            raise MdbError(f"column 'Alarm Unit': unknown alarm unit {unit}") from None

    def _text(self, row: Row, column: str) -> Optional[str]:
        """Text column value, None if empty."""
        return self.get_column(row, column, str) or None
