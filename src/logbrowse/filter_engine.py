"""Index and filter engine for parsed log entries."""

import logging
import time
from collections.abc import Iterable, Sequence
from dataclasses import dataclass, field
from datetime import date, datetime, time as dt_time, timezone

from .models import LogEntry, LogFilter, LogLevel, LogStats
from .parser_applog import parse_log_text

logger = logging.getLogger(__name__)

END_OF_DAY = dt_time(23, 59, 59, 999000)


def start_of_day(day: date) -> datetime:
    """First instant of a day in UTC."""
    return datetime.combine(day, dt_time.min, tzinfo=timezone.utc)


def end_of_day(day: date) -> datetime:
    """Last millisecond of a day in UTC."""
    return datetime.combine(day, END_OF_DAY, tzinfo=timezone.utc)


def _group(entries: Sequence[LogEntry], key) -> dict:
    groups: dict = {}
    for entry in entries:
        groups.setdefault(key(entry), []).append(entry)
    return {name: tuple(group) for name, group in groups.items()}


@dataclass(frozen=True, eq=False)
class LogIndex:
    """Entries grouped by level, thread and class name.

    Groups keep the parse order of the entries. The version identifies
    the entry list the index was built from.
    """
    version: int
    entries: tuple[LogEntry, ...]
    by_level: dict[LogLevel, tuple[LogEntry, ...]] = field(repr=False)
    by_thread: dict[str, tuple[LogEntry, ...]] = field(repr=False)
    by_class_name: dict[str, tuple[LogEntry, ...]] = field(repr=False)

    def for_level(self, level: LogLevel) -> tuple[LogEntry, ...]:
        return self.by_level.get(level, ())

    def for_thread(self, thread: str) -> tuple[LogEntry, ...]:
        return self.by_thread.get(thread, ())

    def for_class_name(self, class_name: str) -> tuple[LogEntry, ...]:
        return self.by_class_name.get(class_name, ())

    def threads(self) -> list[str]:
        return list(self.by_thread)

    def class_names(self) -> list[str]:
        return list(self.by_class_name)

    def stats(self) -> LogStats:
        """Counts read from the level groups without scanning entries."""
        stats = LogStats()
        for level in LogLevel:
            stats.add(level, len(self.for_level(level)))
        return stats


def build_index(entries: Sequence[LogEntry], version: int = 0) -> LogIndex:
    """Build a LogIndex over the given entries.

    Args:
        entries: Parsed entries, in file order.
        version: Token of the entry list the index belongs to.

    Returns:
        A new LogIndex.
    """
    started = time.perf_counter()
    entries = tuple(entries)
    index = LogIndex(
        version=version,
        entries=entries,
        by_level=_group(entries, lambda e: e.level),
        by_thread=_group(entries, lambda e: e.thread),
        by_class_name=_group(entries, lambda e: e.class_name),
    )
    logger.debug(
        "Index built in %.1fms: %d levels, %d threads, %d classes",
        (time.perf_counter() - started) * 1000,
        len(index.by_level),
        len(index.by_thread),
        len(index.by_class_name),
    )
    return index


def matches_hide_list(entry: LogEntry, patterns: Iterable[str]) -> bool:
    """Check if the entry's message contains any hidden substring."""
    message = entry.message.lower()
    return any(pattern.lower() in message for pattern in patterns)


def count_matching(entries: Iterable[LogEntry], patterns: Sequence[str]) -> int:
    """Count the entries a hide list would drop."""
    if not patterns:
        return 0
    return sum(1 for entry in entries if matches_hide_list(entry, patterns))


def filter_entries(
    entries: Iterable[LogEntry], criteria: LogFilter
) -> list[LogEntry]:
    """Keep the entries matching every criterion, in input order.

    Args:
        entries: Entries to scan.
        criteria: Filter criteria; unset criteria match everything.

    Returns:
        The matching entries.
    """
    search = criteria.search.lower()
    lower = start_of_day(criteria.date_from) if criteria.date_from else None
    upper = end_of_day(criteria.date_to) if criteria.date_to else None

    result = []
    for entry in entries:
        if search:
            haystack = " ".join(
                (entry.message, entry.class_name, entry.thread, entry.level.value)
            ).lower()
            if search not in haystack:
                continue

        if criteria.level is not None and entry.level != criteria.level:
            continue

        if lower is not None and entry.timestamp < lower:
            continue

        if upper is not None and entry.timestamp > upper:
            continue

        if criteria.exclude and matches_hide_list(entry, criteria.exclude):
            continue

        result.append(entry)

    return result


def compute_stats(entries: Iterable[LogEntry]) -> LogStats:
    """Count entries per level in a single scan."""
    stats = LogStats()
    for entry in entries:
        stats.add(entry.level)
    return stats


class LogSession:
    """Entries of one loaded file together with their index.

    Each successful load bumps the version. The index is only used for
    the session's own entries and only while its version matches, so it
    is never queried against a list it was not built from.

    Attributes:
        entries: Entries of the loaded file, in parse order.
        version: Incremented on every successful load.
        index: Current index, or None when cleared.
    """

    def __init__(self) -> None:
        self.entries: tuple[LogEntry, ...] = ()
        self.version: int = 0
        self.index: LogIndex | None = None

    def load(self, content: str) -> tuple[LogEntry, ...]:
        """Parse content, replacing the loaded entries and the index.

        On a parse error the session is left unchanged.

        Raises:
            LogParseError: If the content holds no log entries.
        """
        entries = parse_log_text(content)
        self.entries = tuple(entries)
        self.version += 1
        self.build_index()
        return self.entries

    def build_index(self) -> LogIndex:
        """Rebuild the index over the loaded entries."""
        self.index = build_index(self.entries, version=self.version)
        return self.index

    def clear_index(self) -> None:
        """Drop the index; later queries scan the entries."""
        self.index = None

    def _current_index(self) -> LogIndex | None:
        if self.index is not None and self.index.version == self.version:
            return self.index
        return None

    def filter(
        self,
        criteria: LogFilter,
        entries: Sequence[LogEntry] | None = None,
    ) -> list[LogEntry]:
        """Filter the loaded entries, or an explicit list of entries.

        A level-only filter over the loaded entries is answered from the
        index when one is current.
        """
        if entries is None:
            index = self._current_index()
            if index is not None and criteria.is_level_only():
                logger.debug("Level filter %s answered from index", criteria.level)
                return list(index.for_level(criteria.level))
            entries = self.entries
        return filter_entries(entries, criteria)

    def stats(self, entries: Sequence[LogEntry] | None = None) -> LogStats:
        """Level counts for the loaded entries, or an explicit list."""
        if entries is None:
            index = self._current_index()
            if index is not None:
                return index.stats()
            entries = self.entries
        return compute_stats(entries)

    def hidden_count(self, patterns: Sequence[str]) -> int:
        """Count loaded entries a hide list would drop."""
        return count_matching(self.entries, patterns)
