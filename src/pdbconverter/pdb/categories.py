"""
Category AppInfo
================

Most PalmOS applications store a standard category table at the start of
their appinfo block. Records reference a category by its slot position
(the low nibble of the record attribute byte), while the Palm Desktop
database references it by a stable key.

AppInfo Category Layout
-----------------------
    Offset  Size    Description
    ------  ----    -----------
    0       2       Renamed categories bitmask (bit n = slot n renamed)
    2       256     16 category names, 16 bytes each, NUL terminated
    258     16      16 category keys, one byte per slot

Slots with an empty name are unused. They stay empty in the table so the
slot index of every other category is preserved.

Copyright (c) 2026 pdbconverter Authors & Contributors
"""

from dataclasses import dataclass, field
from typing import Iterator, Optional, TYPE_CHECKING
import logging

from pdbconverter.errors import PdbFormatError

if TYPE_CHECKING:
    from pdbconverter.pdb.reader import PdbReader

logger = logging.getLogger(__name__)

NUM_CATEGORIES = 16
CATEGORY_NAME_LENGTH = 16
CATEGORY_BLOCK_SIZE = 2 + NUM_CATEGORIES * CATEGORY_NAME_LENGTH + NUM_CATEGORIES


@dataclass(frozen=True)
class Category:
    """
    A single category.

    Attributes:
        name: Human readable category name
        key: Unique key of the category, independent of its slot
        renamed: True if the user renamed a built-in category
    """
    name: str
    key: int
    renamed: bool = False


@dataclass
class CategoryAppInfo:
    """
    AppInfo holding the 16-slot category table.

    Example:
        >>> ai = CategoryAppInfo()
        >>> ai.add(Category("Business", key=1))
        0
        >>> ai.find_by_name("business")
        0
    """
    slots: list[Optional[Category]] = field(
        default_factory=lambda: [None] * NUM_CATEGORIES
    )

    def __getitem__(self, index: int) -> Optional[Category]:
        return self.get(index)

    def __len__(self) -> int:
        return sum(1 for slot in self.slots if slot is not None)

    def __iter__(self) -> Iterator[tuple[int, Category]]:
        """Iterate over (slot index, category) pairs of used slots."""
        for index, category in enumerate(self.slots):
            if category is not None:
                yield index, category

    def get(self, index: int) -> Optional[Category]:
        """Get the category in a slot, None for unused or invalid slots."""
        if 0 <= index < NUM_CATEGORIES:
            return self.slots[index]
        return None

    def name_of(self, index: int) -> Optional[str]:
        """Resolve a slot index to the category name."""
        category = self.get(index)
        return category.name if category else None

    def set(self, index: int, category: Optional[Category]) -> None:
        """Put a category into the given slot."""
        if not 0 <= index < NUM_CATEGORIES:
            raise IndexError(f"category index out of range: {index}")
        self.slots[index] = category

    def add(self, category: Category) -> int:
        """
        Add a category to the next free slot.

        Returns:
            The slot index the category was placed in

        Raises:
            PdbFormatError: If all 16 slots are in use
        """
        for index, slot in enumerate(self.slots):
            if slot is None:
                self.slots[index] = category
                return index
        raise PdbFormatError(
            f"no free slot for category '{category.name}'", field="categories"
        )

    def find_by_name(self, name: str) -> Optional[int]:
        """
        Find the slot index of a category by name.

        The comparison is case-insensitive.

        Returns:
            Slot index, or None if there is no such category
        """
        wanted = name.casefold()
        for index, category in self:
            if category.name.casefold() == wanted:
                return index
        return None

    def find_by_key(self, key: int) -> Optional[int]:
        """Find the slot index of a category by its key."""
        for index, category in self:
            if category.key == key:
                return index
        return None

    def get_by_key(self, key: int) -> Optional[Category]:
        """Get a category by its key."""
        index = self.find_by_key(key)
        return self.slots[index] if index is not None else None

    def names(self) -> list[str]:
        """Names of all used categories, in slot order."""
        return [category.name for _, category in self]


def read_categories(reader: "PdbReader") -> tuple[CategoryAppInfo, int]:
    """
    Read the standard category block.

    After invocation the reader is positioned right after the category
    block, where application specific appinfo data may follow.

    Args:
        reader: PdbReader positioned at the start of the appinfo block

    Returns:
        Tuple of (CategoryAppInfo, bytes consumed)
    """
    start = reader.tell()

    renamed = reader.read_u16("renamed categories")
    names = [
        reader.read_terminated_fixed_string(CATEGORY_NAME_LENGTH, "category name")
        for _ in range(NUM_CATEGORIES)
    ]
    # Keys are read for every slot to keep the cursor aligned
    keys = [reader.read_u8("category key") for _ in range(NUM_CATEGORIES)]

    appinfo = CategoryAppInfo()
    for index, name in enumerate(names):
        if name:
            appinfo.set(index, Category(
                name=name,
                key=keys[index],
                renamed=bool(renamed & (1 << index)),
            ))

    logger.debug(f"Read {len(appinfo)} categories: {appinfo.names()}")
    return appinfo, reader.tell() - start
