"""Sorting of log entries by a table column."""

from collections.abc import Iterable
from enum import Enum

from .models import LogEntry


class SortField(Enum):
    """Columns log entries can be sorted by."""
    TIMESTAMP = "timestamp"
    LEVEL = "level"
    CLASS_NAME = "class"

    @classmethod
    def from_str(cls, value: str) -> "SortField":
        """Parse a sort field name."""
        value = value.strip().lower()
        for sort_field in cls:
            if sort_field.value == value:
                return sort_field
        raise ValueError(f"Unknown sort field: {value}")


def _timestamp_key(entry: LogEntry):
    return entry.timestamp


def _level_key(entry: LogEntry):
    return entry.level.severity


def _class_name_key(entry: LogEntry):
    return entry.class_name


SORT_KEYS = {
    SortField.TIMESTAMP: _timestamp_key,
    SortField.LEVEL: _level_key,
    SortField.CLASS_NAME: _class_name_key,
}


def sort_entries(
    entries: Iterable[LogEntry],
    field: SortField = SortField.TIMESTAMP,
    descending: bool = True,
) -> list[LogEntry]:
    """Return the entries sorted by one column.

    The sort is stable in both directions: entries with equal keys keep
    their input order. The default puts the newest entries first.

    Args:
        entries: Entries to sort.
        field: Column to sort by.
        descending: Sort from largest to smallest key.

    Returns:
        A new sorted list.
    """
    return sorted(entries, key=SORT_KEYS[field], reverse=descending)
