"""Data models for logbrowse."""

import uuid
from dataclasses import dataclass, field
from datetime import date, datetime
from enum import Enum


class LogLevel(Enum):
    """Severities recognized in application logs."""
    INFO = "INFO"
    WARN = "WARN"
    ERROR = "ERROR"
    DEBUG = "DEBUG"
    TRACE = "TRACE"

    @classmethod
    def from_str(cls, value: str) -> "LogLevel":
        """Normalize a level token from a log line.

        Synonyms and abbreviations are accepted case-insensitively.
        Unrecognized tokens map to INFO.
        """
        return _LEVEL_SYNONYMS.get(value.strip().upper(), cls.INFO)

    @classmethod
    def parse_filter(cls, value: str | None) -> "LogLevel | None":
        """Parse a level given as a filter criterion.

        Empty, None, or "ALL" mean no level constraint.

        Raises:
            ValueError: If the value names no known level.
        """
        if value is None:
            return None
        value = value.strip().upper()
        if not value or value == "ALL":
            return None
        try:
            return cls(value)
        except ValueError:
            raise ValueError(f"Unknown log level: {value}") from None

    @property
    def severity(self) -> int:
        """Rank from least (TRACE) to most (ERROR) severe."""
        return _SEVERITY[self]


_LEVEL_SYNONYMS = {
    "ERROR": LogLevel.ERROR,
    "ERR": LogLevel.ERROR,
    "WARN": LogLevel.WARN,
    "WARNING": LogLevel.WARN,
    "INFO": LogLevel.INFO,
    "INFORMATION": LogLevel.INFO,
    "DEBUG": LogLevel.DEBUG,
    "DBG": LogLevel.DEBUG,
    "TRACE": LogLevel.TRACE,
    "TRC": LogLevel.TRACE,
}

_SEVERITY = {
    LogLevel.TRACE: 0,
    LogLevel.DEBUG: 1,
    LogLevel.INFO: 2,
    LogLevel.WARN: 3,
    LogLevel.ERROR: 4,
}

DEFAULT_THREAD = "main"
DEFAULT_CLASS_NAME = "Unknown"


def _new_id() -> str:
    return str(uuid.uuid4())


@dataclass(frozen=True)
class LogEntry:
    """One logical log record, possibly spanning several source lines.

    Attributes:
        timestamp: When the entry was emitted (timezone-aware, UTC).
        level: Normalized severity.
        thread: Execution context label.
        class_name: Origin component label.
        message: Payload text, including continuation lines.
        raw: The original text of every line of the entry.
        id: Opaque identifier, unique per parsed entry.
    """
    timestamp: datetime
    level: LogLevel = LogLevel.INFO
    thread: str = DEFAULT_THREAD
    class_name: str = DEFAULT_CLASS_NAME
    message: str = ""
    raw: str = ""
    id: str = field(default_factory=_new_id)

    @property
    def first_line(self) -> str:
        """First line of the message, as shown in collapsed table rows."""
        return self.message.split("\n", 1)[0]

    @property
    def is_multiline(self) -> bool:
        return "\n" in self.message


@dataclass(frozen=True)
class LogFilter:
    """Filter criteria. Unset criteria place no constraint.

    Attributes:
        search: Case-insensitive substring matched against
            message, class name, thread and level.
        level: Exact level to keep.
        date_from: Keep entries on or after the start of this day (UTC).
        date_to: Keep entries on or before the end of this day (UTC).
        exclude: Message substrings (case-insensitive) whose entries are
            hidden.
    """
    search: str = ""
    level: LogLevel | None = None
    date_from: date | None = None
    date_to: date | None = None
    exclude: tuple[str, ...] = ()

    def is_empty(self) -> bool:
        return (
            not self.search
            and self.level is None
            and self.date_from is None
            and self.date_to is None
            and not self.exclude
        )

    def is_level_only(self) -> bool:
        """True when the level is the only criterion set."""
        return self.level is not None and LogFilter(level=self.level) == self


@dataclass
class LogStats:
    """Entry counts, in total and per level."""
    total: int = 0
    info: int = 0
    warn: int = 0
    error: int = 0
    debug: int = 0
    trace: int = 0

    def count(self, level: LogLevel) -> int:
        return getattr(self, level.name.lower())

    def add(self, level: LogLevel, amount: int = 1) -> None:
        attr = level.name.lower()
        setattr(self, attr, getattr(self, attr) + amount)
        self.total += amount

    def as_dict(self) -> dict[str, int]:
        return {
            "total": self.total,
            "info": self.info,
            "warn": self.warn,
            "error": self.error,
            "debug": self.debug,
            "trace": self.trace,
        }

    def summary(self) -> str:
        """Generate a summary string of the counts."""
        lines = [f"Total entries: {self.total}"]
        for level in LogLevel:
            lines.append(f"  {level.value}: {self.count(level)}")
        return "\n".join(lines)
