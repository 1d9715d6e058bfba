"""Parser for .logbrowsehide configuration files (simple line-based format)."""

from dataclasses import dataclass, field
from pathlib import Path

DEFAULT_HIDE_FILE = ".logbrowsehide"


class HideParseError(Exception):
    """Error parsing .logbrowsehide file."""

    def __init__(self, message: str, line_number: int | None = None):
        self.line_number = line_number
        if line_number:
            super().__init__(f"Line {line_number}: {message}")
        else:
            super().__init__(message)


@dataclass
class HideConfig:
    """Parsed .logbrowsehide configuration.

    Entries whose message contains one of the patterns (ignoring case)
    are hidden from the output.
    """
    patterns: list[str] = field(default_factory=list)

    def as_exclude(self) -> tuple[str, ...]:
        """Patterns in the form expected by LogFilter.exclude."""
        return tuple(self.patterns)


def parse_hide_file(path: Path) -> HideConfig:
    """Parse a .logbrowsehide file from disk.

    Raises:
        FileNotFoundError: If the file doesn't exist.
        HideParseError: If the file contains invalid content.
    """
    try:
        content = path.read_text(encoding="utf-8")
    except UnicodeDecodeError as e:
        raise HideParseError(f"{path} is not valid UTF-8 text") from e
    return parse_hide_content(content)


def parse_hide_content(content: str) -> HideConfig:
    """Parse .logbrowsehide content from a string.

    Format:
        - One message substring per line
        - Lines starting with # are comments
        - Empty lines and whitespace-only lines are ignored
        - Leading/trailing whitespace is trimmed
        - A pattern listed twice is kept once

    Raises:
        HideParseError: If a pattern is too short to be meaningful.
    """
    patterns: list[str] = []

    for line_number, line in enumerate(content.splitlines(), start=1):
        line = line.strip()

        if not line or line.startswith("#"):
            continue

        # A one-character pattern would hide nearly everything
        if len(line) < 2:
            raise HideParseError(
                f"Pattern '{line}' is too short",
                line_number=line_number,
            )

        if line not in patterns:
            patterns.append(line)

    return HideConfig(patterns=patterns)


# --- Sample file generation ---

SAMPLE_LOGBROWSEHIDE = """\
# .logbrowsehide - Messages to hide from logbrowse output
#
# List one message substring per line. Entries whose message contains
# one of these (ignoring case) are hidden unless --no-hide is given.
#
# Lines starting with # are comments.
# Empty lines are ignored.

# Authentication noise
Unauthorized error: Full authentication is required to access this resource
Handling exception: Bad credentials
"""


def generate_sample_hide_file(path: Path) -> bool:
    """Generate a sample .logbrowsehide file.

    Returns:
        True if file was created, False if it already exists.
    """
    if path.exists():
        return False

    path.write_text(SAMPLE_LOGBROWSEHIDE, encoding="utf-8")
    return True
