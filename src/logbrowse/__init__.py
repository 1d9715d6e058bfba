"""logbrowse - Browse, filter and inspect application log files."""

__version__ = "0.1.0"

from .filter_engine import (
    LogIndex,
    LogSession,
    build_index,
    compute_stats,
    filter_entries,
)
from .models import LogEntry, LogFilter, LogLevel, LogStats
from .parser_applog import (
    EmptyInputError,
    FallbackParseError,
    LogParseError,
    NoEntriesFoundError,
    parse_log_line,
    parse_log_text,
)

__all__ = [
    "EmptyInputError",
    "FallbackParseError",
    "LogEntry",
    "LogFilter",
    "LogIndex",
    "LogLevel",
    "LogParseError",
    "LogSession",
    "LogStats",
    "NoEntriesFoundError",
    "build_index",
    "compute_stats",
    "filter_entries",
    "parse_log_line",
    "parse_log_text",
]
