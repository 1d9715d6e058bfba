"""Parser for timestamped application log files."""

import logging
import re
from datetime import datetime, timezone

from .models import DEFAULT_CLASS_NAME, DEFAULT_THREAD, LogEntry, LogLevel

logger = logging.getLogger(__name__)


# Entries start with a timestamp, then an optional level word, then up to two
# bracketed labels (class, thread), then the message after the first colon:
#
#   "2024-01-15T10:30:00.123Z ERROR [com.app.Service] [thread-1] : Failed"
#   "2024-01-15 10:30:00,123 WARN [Cache] : eviction"
#
# Lines that do not start with a timestamp continue the previous entry
# (stack traces, wrapped payloads).
TIMESTAMP_PATTERN = re.compile(
    r"^(?P<timestamp>\d{4}-\d{2}-\d{2}[T ]\d{2}:\d{2}:\d{2}(?:[.,]\d{3})?Z?)"
)

LEVEL_PATTERN = re.compile(r"^(\w+)")

BRACKET_PATTERN = re.compile(r"\[([^\]]+)\]")


class LogParseError(Exception):
    """Error parsing log content."""


class EmptyInputError(LogParseError):
    """The content is empty or whitespace only."""

    def __init__(self) -> None:
        super().__init__("The log file is empty")


class NoEntriesFoundError(LogParseError):
    """No line of the content starts with a recognized timestamp."""

    def __init__(self, line_count: int):
        self.line_count = line_count
        super().__init__(
            f"No log entries found in {line_count} line(s). "
            "Check that lines start with a timestamp such as "
            "2024-01-15T10:30:00.123Z."
        )


class FallbackParseError(LogParseError):
    """A fallback entry could not be built for a line."""


def is_header_line(line: str) -> bool:
    """Check if a line starts a new log entry."""
    return TIMESTAMP_PATTERN.match(line) is not None


def parse_timestamp(text: str) -> datetime:
    """Parse a header timestamp into an aware UTC datetime.

    Timestamps without a zone are taken as UTC. An invalid value (such as
    month 13) falls back to the current time.
    """
    normalized = text.replace(" ", "T", 1).replace(",", ".", 1)
    if not normalized.endswith("Z"):
        normalized += "Z"

    try:
        return datetime.fromisoformat(normalized[:-1] + "+00:00")
    except ValueError:
        logger.warning("Invalid timestamp %r, using current time", text)
        return datetime.now(timezone.utc)


def parse_log_line(line: str) -> LogEntry:
    """Parse a single header line into a LogEntry.

    A line without a leading timestamp yields a fallback entry holding
    the trimmed line as its message.

    Args:
        line: A header line from a log file.

    Returns:
        A LogEntry with parsed fields, or a fallback entry.

    Raises:
        FallbackParseError: If the line is blank and has no timestamp.
    """
    match = TIMESTAMP_PATTERN.match(line)
    if not match:
        return _fallback_entry(line)

    timestamp = match.group("timestamp")
    remaining = line[match.end():].strip()

    level = LogLevel.INFO
    level_match = LEVEL_PATTERN.match(remaining)
    if level_match:
        level = LogLevel.from_str(level_match.group(1))
        remaining = remaining[level_match.end():].strip()

    class_name = DEFAULT_CLASS_NAME
    thread = DEFAULT_THREAD
    labels = BRACKET_PATTERN.findall(remaining)
    if len(labels) >= 2:
        class_name, thread = labels[0], labels[1]
    elif labels:
        class_name = labels[0]

    _, colon, after = remaining.partition(":")
    message = after.strip() if colon else remaining

    return LogEntry(
        timestamp=parse_timestamp(timestamp),
        level=level,
        thread=thread,
        class_name=class_name,
        message=message,
        raw=line,
    )


def _fallback_entry(line: str) -> LogEntry:
    """Build an entry for a line with no recognizable header."""
    text = line.strip()
    if not text:
        raise FallbackParseError("Cannot build a log entry from a blank line")
    return LogEntry(
        timestamp=datetime.now(timezone.utc),
        message=text,
        raw=text,
    )


class _PendingEntry:
    """An entry still collecting continuation lines."""

    def __init__(self, header: LogEntry) -> None:
        self.header = header
        self.message_parts = [header.message]
        self.raw_parts = [header.raw]

    def append(self, line: str) -> None:
        self.message_parts.append(line)
        self.raw_parts.append(line)

    def build(self) -> LogEntry:
        header = self.header
        return LogEntry(
            timestamp=header.timestamp,
            level=header.level,
            thread=header.thread,
            class_name=header.class_name,
            message="\n".join(self.message_parts).strip(),
            raw="\n".join(self.raw_parts).strip(),
            id=header.id,
        )


def parse_log_text(content: str) -> list[LogEntry]:
    """Parse log content into ordered entries.

    Lines starting with a timestamp open a new entry. Other lines are
    appended to the open entry, blank ones included, or dropped when no
    entry is open yet.

    Args:
        content: Full text of a log file.

    Returns:
        List of LogEntry objects in file order.

    Raises:
        EmptyInputError: If the content is empty or whitespace only.
        NoEntriesFoundError: If no line starts with a timestamp.
    """
    if not content or not content.strip():
        raise EmptyInputError()

    lines = content.split("\n")
    entries: list[LogEntry] = []
    current: _PendingEntry | None = None
    continuation_count = 0

    for line in lines:
        if is_header_line(line):
            if current is not None:
                entries.append(current.build())
            current = _PendingEntry(parse_log_line(line))
        elif current is not None:
            current.append(line)
            continuation_count += 1

    if current is not None:
        entries.append(current.build())

    if not entries:
        raise NoEntriesFoundError(len(lines))

    logger.debug(
        "Parsed %d entries from %d lines (%d continuation lines)",
        len(entries),
        len(lines),
        continuation_count,
    )
    return entries
