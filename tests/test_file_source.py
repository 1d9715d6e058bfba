"""Tests for reading log files and the logs directory."""

import gzip
import os

import pytest

from logbrowse.file_source import (
    AccessDeniedError,
    LogFileError,
    LogFileNotFoundError,
    decode_content,
    format_file_size,
    list_log_files,
    read_log_file,
    resolve_log_file,
    validate_log_file,
)

LOG_TEXT = "2024-01-15T10:30:00Z INFO [Main] : Started\n"


class TestDecodeContent:
    """Tests for decode_content function."""

    def test_plain_text(self):
        assert decode_content(LOG_TEXT.encode("utf-8"), "app.log") == LOG_TEXT

    def test_gzip(self):
        data = gzip.compress(LOG_TEXT.encode("utf-8"))
        assert decode_content(data, "app.log.GZ") == LOG_TEXT

    def test_corrupt_gzip(self):
        with pytest.raises(LogFileError):
            decode_content(b"not gzip at all", "app.log.gz")

    def test_invalid_utf8_replaced(self):
        text = decode_content(b"caf\xe9", "app.log")
        assert text.startswith("caf")
        assert "\ufffd" in text


class TestValidateLogFile:
    """Tests for validate_log_file function."""

    @pytest.mark.parametrize("name", ["app.log", "app.txt", "app.log.gz", "APP.LOG"])
    def test_accepted(self, tmp_path, name):
        path = tmp_path / name
        path.write_text("x")
        validate_log_file(path)

    def test_bad_extension(self, tmp_path):
        path = tmp_path / "app.json"
        path.write_text("{}")
        with pytest.raises(LogFileError, match="Unsupported file type"):
            validate_log_file(path)

    def test_too_large(self, tmp_path):
        path = tmp_path / "app.log"
        path.write_text("x" * 20)
        with pytest.raises(LogFileError, match="too large"):
            validate_log_file(path, max_size=10)

    def test_missing(self, tmp_path):
        with pytest.raises(LogFileNotFoundError):
            validate_log_file(tmp_path / "missing.log")


class TestReadLogFile:
    """Tests for read_log_file function."""

    def test_reads_plain(self, tmp_path):
        path = tmp_path / "app.log"
        path.write_text(LOG_TEXT, encoding="utf-8")
        assert read_log_file(path) == LOG_TEXT

    def test_reads_gzip(self, tmp_path):
        path = tmp_path / "app.log.gz"
        with gzip.open(path, "wt", encoding="utf-8") as f:
            f.write(LOG_TEXT)
        assert read_log_file(path) == LOG_TEXT


class TestListLogFiles:
    """Tests for list_log_files function."""

    def test_newest_first(self, tmp_path):
        """Files are listed by modification time, newest first."""
        for i, name in enumerate(["old.log", "mid.log", "new.log.gz"]):
            path = tmp_path / name
            path.write_bytes(b"x" * (i + 1))
            os.utime(path, (1_700_000_000 + i * 60, 1_700_000_000 + i * 60))
        (tmp_path / "subdir").mkdir()

        infos = list_log_files(tmp_path)

        assert [info.name for info in infos] == ["new.log.gz", "mid.log", "old.log"]
        assert infos[0].size == 3
        assert infos[0].last_modified.tzinfo is not None

    def test_empty_directory(self, tmp_path):
        assert list_log_files(tmp_path) == []

    def test_missing_directory(self, tmp_path):
        with pytest.raises(LogFileNotFoundError):
            list_log_files(tmp_path / "nope")


class TestResolveLogFile:
    """Tests for resolve_log_file function."""

    def test_inside_root(self, tmp_path):
        path = tmp_path / "app.log"
        path.write_text(LOG_TEXT)
        assert resolve_log_file(tmp_path, "app.log") == path.resolve()

    def test_outside_root(self, tmp_path):
        """Names escaping the root are rejected before existence checks."""
        root = tmp_path / "logs"
        root.mkdir()
        (tmp_path / "secret.log").write_text("secret")

        with pytest.raises(AccessDeniedError):
            resolve_log_file(root, "../secret.log")

    def test_sibling_with_common_prefix(self, tmp_path):
        """A sibling directory sharing the root's prefix is outside it."""
        root = tmp_path / "logs"
        root.mkdir()
        sibling = tmp_path / "logs-private"
        sibling.mkdir()
        (sibling / "app.log").write_text("secret")

        with pytest.raises(AccessDeniedError):
            resolve_log_file(root, "../logs-private/app.log")

    def test_missing(self, tmp_path):
        with pytest.raises(LogFileNotFoundError):
            resolve_log_file(tmp_path, "missing.log")

    def test_errors_are_distinct(self):
        assert not issubclass(AccessDeniedError, LogFileNotFoundError)
        assert not issubclass(LogFileNotFoundError, AccessDeniedError)


class TestFormatFileSize:
    """Tests for format_file_size function."""

    @pytest.mark.parametrize(
        "size,expected",
        [
            (0, "0 Bytes"),
            (500, "500 Bytes"),
            (1024, "1 KB"),
            (1536, "1.5 KB"),
            (100 * 1024 * 1024, "100 MB"),
            (3 * 1024**3, "3 GB"),
        ],
    )
    def test_format(self, size, expected):
        assert format_file_size(size) == expected
