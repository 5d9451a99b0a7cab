"""Filesystem domain models for directory analysis.

This module defines the core data structures produced by a directory
scan: the per-directory entry with its aggregated totals, the kind
assigned by the classifier, and the non-fatal issues collected while
walking the tree.
"""

from dataclasses import dataclass, field
from enum import Enum


class EntryKind(str, Enum):
    """Classification of a scanned directory.

    The values double as the ``type`` tokens of the CSV interchange format.

    Attributes:
        TEMPORARY: Reclaimable directory, reported as one opaque unit.
        NORMAL: Ordinary directory, expanded into per-child entries.
    """

    TEMPORARY = "temp"
    NORMAL = "normal"


@dataclass(frozen=True, slots=True)
class DirectoryEntry:
    """A directory with its aggregated file count and size.

    For a temporary directory the totals are the full recursive contents.
    For a normal directory the totals include every descendant, temporary
    descendants included, even though those descendants are reported as
    entries of their own.

    Attributes:
        path: Filesystem path, unique within one scan or load.
        file_count: Number of regular files in the subtree.
        size_bytes: Sum of regular file sizes in the subtree.
        kind: Classification assigned from the directory base name.
    """

    path: str
    file_count: int
    size_bytes: int
    kind: EntryKind

    def __post_init__(self) -> None:
        """Validate entry data after initialization."""
        if not self.path:
            msg = "Path cannot be empty"
            raise ValueError(msg)
        if self.file_count < 0:
            msg = f"File count cannot be negative, got {self.file_count}"
            raise ValueError(msg)
        if self.size_bytes < 0:
            msg = f"Size cannot be negative, got {self.size_bytes}"
            raise ValueError(msg)

    @property
    def is_temporary(self) -> bool:
        """Check if this entry is a temporary directory."""
        return self.kind == EntryKind.TEMPORARY


@dataclass(frozen=True, slots=True)
class ScanIssue:
    """A path that could not be read during a scan.

    Issues are collected rather than raised; the subtree below the path
    is left out of every total.

    Attributes:
        path: Path that could not be read.
        reason: Human-readable cause.
    """

    path: str
    reason: str

    def __str__(self) -> str:
        return f"{self.path}: {self.reason}"


@dataclass(frozen=True, slots=True)
class ScanResult:
    """Outcome of a completed directory scan.

    Attributes:
        root: Root path the scan started from.
        entries: Reported directory entries (order is not significant).
        issues: Non-fatal read errors encountered during the walk.
        directories_scanned: Number of directories that were listed.
    """

    root: str
    entries: tuple[DirectoryEntry, ...]
    issues: tuple[ScanIssue, ...] = field(default_factory=tuple)
    directories_scanned: int = 0

    @property
    def has_issues(self) -> bool:
        """Check if any path could not be read."""
        return bool(self.issues)
