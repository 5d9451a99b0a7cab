"""CSV interchange for directory entries.

Entries are written with the header ``path,files,size_bytes,type`` where
``type`` is ``temp`` or ``normal`` and sizes are plain integers. Reading
validates the whole file before returning anything, so a file with a
single malformed row yields no entries at all.

The six-column layout written by earlier releases (with
``cumulative_files`` and ``cumulative_size_bytes``) is still accepted;
the cumulative columns then carry the aggregated totals.
"""

import csv
import logging
import os
import re
from collections.abc import Iterable
from pathlib import Path
from tempfile import NamedTemporaryFile
from typing import Any

from diskclean.filesystem.models import DirectoryEntry, EntryKind

logger = logging.getLogger(__name__)

CSV_HEADER: tuple[str, ...] = ("path", "files", "size_bytes", "type")

_LEGACY_FILES_COLUMN = "cumulative_files"
_LEGACY_SIZE_COLUMN = "cumulative_size_bytes"

_INTEGER_PATTERN = re.compile(r"[0-9]+")

# Undecodable filename bytes round-trip as surrogate escapes
_ENCODING = "utf-8"
_ENCODING_ERRORS = "surrogateescape"


class CsvError(Exception):
    """Base exception for CSV interchange errors."""


class CsvFormatError(CsvError):
    """Raised when a CSV file does not follow the entry format.

    Attributes:
        line: 1-based line number of the offending header or row.
        message: Description of the problem.
    """

    def __init__(self, line: int, message: str) -> None:
        self.line = line
        self.message = message
        super().__init__(f"Line {line}: {message}")


def write_csv(entries: Iterable[DirectoryEntry], path: Path) -> int:
    """Write entries to a CSV file atomically.

    Paths that are not valid UTF-8 are written back as their original
    bytes, so they survive a round trip through ``read_csv``.

    Args:
        entries: Entries to write.
        path: Destination file; parent directories are created.

    Returns:
        Number of rows written (header excluded).

    Raises:
        CsvError: If the file cannot be written. The destination is left
            untouched in that case.
    """
    count = 0
    tmp_path: Path | None = None
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        with NamedTemporaryFile(
            mode="w",
            dir=path.parent,
            delete=False,
            suffix=".tmp",
            newline="",
            encoding=_ENCODING,
            errors=_ENCODING_ERRORS,
        ) as f:
            tmp_path = Path(f.name)
            writer = csv.writer(f)
            writer.writerow(CSV_HEADER)
            for entry in entries:
                writer.writerow(
                    [entry.path, entry.file_count, entry.size_bytes, entry.kind.value]
                )
                count += 1
        # os.replace() is atomic on POSIX
        os.replace(tmp_path, path)
    except (OSError, UnicodeEncodeError) as e:
        if tmp_path is not None and tmp_path.exists():
            tmp_path.unlink()
        raise CsvError(f"Failed to write {path}: {e}") from e

    logger.info("Wrote %d entries to %s", count, path)
    return count


def read_csv(path: Path) -> list[DirectoryEntry]:
    """Read entries from a CSV file.

    Args:
        path: CSV file to read.

    Returns:
        Entries in file order.

    Raises:
        CsvFormatError: If the header or any row is malformed, or a path
            appears twice. No entries are returned in that case.
        CsvError: If the file cannot be read.
    """
    try:
        with open(path, newline="", encoding=_ENCODING, errors=_ENCODING_ERRORS) as f:
            entries = _parse(csv.reader(f))
    except csv.Error as e:
        raise CsvError(f"Failed to parse {path}: {e}") from e
    except OSError as e:
        raise CsvError(f"Failed to read {path}: {e}") from e

    logger.info("Loaded %d entries from %s", len(entries), path)
    return entries


def _parse(reader: Any) -> list[DirectoryEntry]:
    """Validate the header and every row, then build entries."""
    header = next(reader, None)
    if header is None:
        raise CsvFormatError(1, f"File is empty, expected header: {','.join(CSV_HEADER)}")

    columns = [name.strip() for name in header]
    for required in CSV_HEADER:
        if required not in columns:
            raise CsvFormatError(1, f"Missing required column: {required}")

    files_column = "files"
    size_column = "size_bytes"
    if _LEGACY_FILES_COLUMN in columns and _LEGACY_SIZE_COLUMN in columns:
        files_column = _LEGACY_FILES_COLUMN
        size_column = _LEGACY_SIZE_COLUMN

    index = {name: columns.index(name) for name in (*CSV_HEADER, files_column, size_column)}

    entries: list[DirectoryEntry] = []
    seen: dict[str, int] = {}

    for row in reader:
        line = reader.line_num
        if not row:
            continue
        if len(row) != len(columns):
            raise CsvFormatError(line, f"Expected {len(columns)} columns, found {len(row)}")

        entry_path = row[index["path"]]
        if not entry_path:
            raise CsvFormatError(line, "Empty path")
        if entry_path in seen:
            raise CsvFormatError(
                line, f"Duplicate path {entry_path} (first seen on line {seen[entry_path]})"
            )

        file_count = _parse_count(row[index[files_column]], files_column, line)
        size_bytes = _parse_count(row[index[size_column]], size_column, line)

        token = row[index["type"]]
        try:
            kind = EntryKind(token)
        except ValueError:
            raise CsvFormatError(line, f"Invalid entry type: {token!r}") from None

        seen[entry_path] = line
        entries.append(
            DirectoryEntry(path=entry_path, file_count=file_count, size_bytes=size_bytes, kind=kind)
        )

    return entries


def _parse_count(value: str, column: str, line: int) -> int:
    """Parse a non-negative integer cell.

    Raises:
        CsvFormatError: If the cell is not a plain non-negative integer.
    """
    if not _INTEGER_PATTERN.fullmatch(value):
        raise CsvFormatError(line, f"Invalid {column}: {value!r}")
    return int(value)
