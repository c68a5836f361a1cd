"""
Record Filters
==============

Filters select the records of a database that are to be exported or
listed. A filter only needs an accepts(record) method; filters can be
combined with ChainedFilter.

Filter Types
------------
- CategoryFilter: records in one category slot
- DatedFilter: records whose date lies in a range
- ChainedFilter: records accepted by all of its filters

Usage Examples
--------------
Records of the "Business" category in 2010:
    >>> record_filter = build_filter(
    ...     database, category="Business",
    ...     date_from=datetime(2010, 1, 1), date_until=datetime(2011, 1, 1),
    ... )
    >>> records = database.filter(record_filter)

One filter per category, for split exports:
    >>> for name, category_filter in split_filters(database):
    ...     print(name, len(database.filter(category_filter)))

Copyright (c) 2026 pdbconverter Authors & Contributors
"""

from abc import ABC, abstractmethod
from datetime import datetime
from typing import Iterator, Optional
import logging

from pdbconverter.errors import FilterError
from pdbconverter.pdb.categories import CategoryAppInfo
from pdbconverter.pdb.database import PdbDatabase
from pdbconverter.pdb.records import Record

logger = logging.getLogger(__name__)


class RecordFilter(ABC):
    """Base class of all record filters."""

    @abstractmethod
    def accepts(self, record: Record) -> bool:
        """Check if a record passes the filter."""

    def __call__(self, record: Record) -> bool:
        return self.accepts(record)


# =============================================================================
# Category Filter
# =============================================================================

class CategoryFilter(RecordFilter):
    """Accepts records of a single category slot."""

    def __init__(self, category_index: int):
        self.category_index = category_index

    @classmethod
    def for_name(cls, categories: CategoryAppInfo, name: str) -> "CategoryFilter":
        """
        Create a filter for a category name (case-insensitive).

        Raises:
            FilterError: If there is no such category
        """
        index = categories.find_by_name(name)
        if index is None:
            raise FilterError(f"category '{name}' is not defined")
        return cls(index)

    @classmethod
    def for_key(cls, categories: CategoryAppInfo, key: str) -> "CategoryFilter":
        """
        Create a filter for a category key given as a decimal string.

        Raises:
            FilterError: If the key is not a number or not defined
        """
        try:
            value = int(key)
        except ValueError:
            raise FilterError(f"category key '{key}' is not a number") from None
        index = categories.find_by_key(value)
        if index is None:
            raise FilterError(f"category key {value} is not defined")
        return cls(index)

    def accepts(self, record: Record) -> bool:
        return record.category_index == self.category_index

    def __repr__(self) -> str:
        return f"CategoryFilter({self.category_index})"


# =============================================================================
# Date Range Filter
# =============================================================================

class DatedFilter(RecordFilter):
    """
    Accepts records dated within a range.

    The start is inclusive, the end exclusive. Either end may be open
    (None), but not both. Records without a date are only accepted when
    the end of the range is open.
    """

    def __init__(self, date_from: Optional[datetime], date_until: Optional[datetime]):
        if date_from is None and date_until is None:
            raise FilterError("no date range set")
        if date_from is not None and date_until is not None and date_until < date_from:
            raise FilterError(
                f"date range ends before it starts ({date_until} < {date_from})"
            )
        self.date_from = date_from
        self.date_until = date_until

    def accepts(self, record: Record) -> bool:
        record_date = record.record_date
        if record_date is None:
            return self.date_until is None
        if self.date_from is not None and record_date < self.date_from:
            return False
        if self.date_until is not None and record_date >= self.date_until:
            return False
        return True

    def __repr__(self) -> str:
        return f"DatedFilter({self.date_from!r}, {self.date_until!r})"


# =============================================================================
# Chained Filter
# =============================================================================

class ChainedFilter(RecordFilter):
    """Accepts records accepted by all chained filters."""

    def __init__(self, *filters: RecordFilter):
        self.filters = [f for f in filters if f is not None]

    def add(self, record_filter: RecordFilter) -> None:
        self.filters.append(record_filter)

    def accepts(self, record: Record) -> bool:
        return all(f.accepts(record) for f in self.filters)

    def __len__(self) -> int:
        return len(self.filters)

    def __repr__(self) -> str:
        return f"ChainedFilter({', '.join(repr(f) for f in self.filters)})"


# =============================================================================
# Builders
# =============================================================================

def build_filter(
    database: PdbDatabase,
    category: Optional[str] = None,
    date_from: Optional[datetime] = None,
    date_until: Optional[datetime] = None,
) -> Optional[RecordFilter]:
    """
    Build a filter from user input.

    A category is looked up by name first; if there is no category of
    that name and the value is numeric, it is looked up by key.

    Returns:
        The filter, or None if nothing is to be filtered

    Raises:
        FilterError: If the category is unknown or the date range invalid
    """
    chain = ChainedFilter()

    if category is not None:
        categories = database.categories
        if categories is None:
            raise FilterError(f"database '{database.name}' has no categories")
        if categories.find_by_name(category) is None and category.strip().isdigit():
            chain.add(CategoryFilter.for_key(categories, category))
        else:
            chain.add(CategoryFilter.for_name(categories, category))

    if date_from is not None or date_until is not None:
        chain.add(DatedFilter(date_from, date_until))

    if not chain:
        return None
    logger.debug(f"Built filter {chain!r}")
    return chain.filters[0] if len(chain) == 1 else chain


def split_filters(
    database: PdbDatabase,
    base: Optional[RecordFilter] = None,
) -> Iterator[tuple[str, RecordFilter]]:
    """
    Yield one filter per category of the database.

    Each yielded filter accepts the records of one category that are also
    accepted by base, if given.

    Yields:
        Tuples of (category name, filter)
    """
    categories = database.categories
    if categories is None:
        return
    for index, category in categories:
        category_filter = CategoryFilter(index)
        if base is not None:
            yield category.name, ChainedFilter(base, category_filter)
        else:
            yield category.name, category_filter
