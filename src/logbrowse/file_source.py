"""Reading log files from disk and from a configured logs directory."""

import gzip
import logging
import zlib
from dataclasses import dataclass
from datetime import datetime, timezone
from pathlib import Path

logger = logging.getLogger(__name__)

DEFAULT_LOGS_DIRECTORY = "/mnt/logs"
LOGS_DIRECTORY_ENV = "LOGS_DIRECTORY"

MAX_FILE_SIZE = 100 * 1024 * 1024
LOG_FILE_EXTENSIONS = (".log", ".gz", ".txt")


class LogFileError(Exception):
    """Error reading a log file."""


class LogFileNotFoundError(LogFileError):
    """The requested file or directory does not exist."""


class AccessDeniedError(LogFileError):
    """The requested path lies outside the logs directory."""


@dataclass(frozen=True)
class LogFileInfo:
    """A file available in the logs directory."""
    name: str
    path: Path
    size: int
    last_modified: datetime


def is_gzip_name(filename: str) -> bool:
    return filename.lower().endswith(".gz")


def decode_content(data: bytes, filename: str) -> str:
    """Turn file bytes into text, decompressing gzip files first.

    Args:
        data: Raw file content.
        filename: Name of the file; a ".gz" suffix selects decompression.

    Returns:
        The UTF-8 decoded text. Undecodable bytes are replaced.

    Raises:
        LogFileError: If a gzip file cannot be decompressed.
    """
    if is_gzip_name(filename):
        try:
            data = gzip.decompress(data)
        except (OSError, EOFError, zlib.error) as e:
            raise LogFileError(f"Failed to decompress {filename}: {e}") from e
        logger.debug("Decompressed %s to %d bytes", filename, len(data))
    return data.decode("utf-8", errors="replace")


def validate_log_file(path: Path, max_size: int = MAX_FILE_SIZE) -> None:
    """Check the extension and size of a log file.

    Raises:
        LogFileNotFoundError: If the file does not exist.
        LogFileError: If the extension is not accepted or the file is too big.
    """
    if not path.is_file():
        raise LogFileNotFoundError(f"File not found: {path}")

    if not path.name.lower().endswith(LOG_FILE_EXTENSIONS):
        raise LogFileError(
            f"Unsupported file type: {path.name}. "
            f"Expected one of {', '.join(LOG_FILE_EXTENSIONS)}"
        )

    size = path.stat().st_size
    if size > max_size:
        raise LogFileError(
            f"File too large: {format_file_size(size)} "
            f"(limit {format_file_size(max_size)})"
        )


def read_log_file(path: Path, max_size: int = MAX_FILE_SIZE) -> str:
    """Validate and read a log file as text.

    Raises:
        LogFileError: If the file is rejected or cannot be read.
    """
    validate_log_file(path, max_size=max_size)
    try:
        data = path.read_bytes()
    except OSError as e:
        raise LogFileError(f"Error reading {path}: {e}") from e
    logger.debug("Read %s (%s)", path, format_file_size(len(data)))
    return decode_content(data, path.name)


def list_log_files(root: Path) -> list[LogFileInfo]:
    """List the regular files of a directory, most recently modified first.

    Raises:
        LogFileNotFoundError: If the directory does not exist.
    """
    if not root.is_dir():
        raise LogFileNotFoundError(f"Directory not found: {root}")

    files = []
    for path in root.iterdir():
        if not path.is_file():
            continue
        stat = path.stat()
        files.append(
            LogFileInfo(
                name=path.name,
                path=path,
                size=stat.st_size,
                last_modified=datetime.fromtimestamp(stat.st_mtime, tz=timezone.utc),
            )
        )

    files.sort(key=lambda info: info.last_modified, reverse=True)
    logger.debug("Found %d files in %s", len(files), root)
    return files


def resolve_log_file(root: Path, name: str) -> Path:
    """Resolve a file name inside the logs directory.

    Raises:
        AccessDeniedError: If the name resolves outside the directory.
        LogFileNotFoundError: If no such file exists.
    """
    resolved_root = root.resolve()
    resolved = (resolved_root / name).resolve()

    if not resolved.is_relative_to(resolved_root):
        raise AccessDeniedError(f"Access denied: {name}")

    if not resolved.is_file():
        raise LogFileNotFoundError(f"File not found: {name}")

    return resolved


def format_file_size(size: int) -> str:
    """Format a byte count for display, e.g. "1.5 KB"."""
    if size == 0:
        return "0 Bytes"

    units = ["Bytes", "KB", "MB", "GB"]
    exponent = 0
    while exponent < len(units) - 1 and size >= 1024 ** (exponent + 1):
        exponent += 1
    value = round(size / 1024**exponent, 2)
    return f"{value:g} {units[exponent]}"
