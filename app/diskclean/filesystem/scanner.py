"""Directory tree scanner with temporary-directory boundaries.

Walks a directory tree from a root, classifies every directory by its
base name, and aggregates file counts and byte sizes per directory.
Temporary directories are measured as a whole and reported once; their
inner structure never produces entries of its own. Normal directories
are expanded, and their totals include the totals of every child,
temporary children included.

Directories are listed by a bounded thread pool fed from a work list.
Listing results are kept in an arena keyed by path and aggregated
bottom-up once the whole tree has been listed, so no entry is exposed
before its subtree is complete.
"""

import logging
import os
import threading
from collections.abc import Callable
from concurrent.futures import FIRST_COMPLETED, Future, ThreadPoolExecutor, wait
from dataclasses import dataclass, field
from pathlib import Path

from diskclean.filesystem.classifier import classify
from diskclean.filesystem.models import DirectoryEntry, EntryKind, ScanIssue, ScanResult

logger = logging.getLogger(__name__)

DEFAULT_MAX_WORKERS = 8

# How often the walk checks the cancel event while waiting on workers
_POLL_SECONDS = 0.1

# (directories_scanned, current_path)
ProgressCallback = Callable[[int, str], None]


class ScanRootError(Exception):
    """Raised when the scan root is missing, not a directory, or unreadable."""


class ScanCancelledError(Exception):
    """Raised when a scan is abandoned through its cancel event."""


@dataclass(frozen=True, slots=True)
class _Listing:
    """Direct contents of one normal directory."""

    file_count: int
    size_bytes: int
    subdirectories: tuple[str, ...]
    issues: tuple[ScanIssue, ...]
    directories: int = 1


@dataclass(frozen=True, slots=True)
class _Measurement:
    """Recursive totals of one temporary directory."""

    file_count: int
    size_bytes: int
    issues: tuple[ScanIssue, ...]
    directories: int


@dataclass(slots=True)
class _DirectoryRecord:
    """Arena slot for a directory that was read successfully."""

    path: str
    kind: EntryKind
    depth: int
    file_count: int = 0
    size_bytes: int = 0
    children: list[str] = field(default_factory=list)


def _describe(exc: OSError) -> str:
    """Build a human-readable cause from an OSError."""
    return exc.strerror or str(exc) or exc.__class__.__name__


def _list_directory(path: str) -> _Listing:
    """List one directory, counting its direct regular files.

    Symbolic links are skipped. Files whose metadata cannot be read are
    recorded as issues and left out of the totals.

    Raises:
        OSError: If the directory itself cannot be listed.
    """
    file_count = 0
    size_bytes = 0
    subdirectories: list[str] = []
    issues: list[ScanIssue] = []

    with os.scandir(path) as it:
        for entry in it:
            try:
                if entry.is_symlink():
                    continue
                if entry.is_dir(follow_symlinks=False):
                    subdirectories.append(entry.path)
                elif entry.is_file(follow_symlinks=False):
                    size_bytes += entry.stat(follow_symlinks=False).st_size
                    file_count += 1
            except OSError as e:
                issues.append(ScanIssue(path=entry.path, reason=_describe(e)))

    return _Listing(
        file_count=file_count,
        size_bytes=size_bytes,
        subdirectories=tuple(subdirectories),
        issues=tuple(issues),
    )


def _measure_tree(path: str, abort: threading.Event | None = None) -> _Measurement:
    """Sum every regular file below a directory without classifying anything.

    Raises:
        OSError: If the top directory cannot be listed.
        ScanCancelledError: If the abort event is set while measuring.
    """
    listing = _list_directory(path)
    file_count = listing.file_count
    size_bytes = listing.size_bytes
    issues = list(listing.issues)
    directories = 1
    stack = list(listing.subdirectories)

    while stack:
        if abort is not None and abort.is_set():
            raise ScanCancelledError(f"Scan cancelled while measuring {path}")
        current = stack.pop()
        try:
            inner = _list_directory(current)
        except OSError as e:
            logger.info("Cannot read directory %s: %s", current, _describe(e))
            issues.append(ScanIssue(path=current, reason=_describe(e)))
            continue
        directories += 1
        file_count += inner.file_count
        size_bytes += inner.size_bytes
        issues.extend(inner.issues)
        stack.extend(inner.subdirectories)

    return _Measurement(
        file_count=file_count,
        size_bytes=size_bytes,
        issues=tuple(issues),
        directories=directories,
    )


class DirectoryScanner:
    """Scans a directory tree and reports aggregated directory entries.

    Args:
        root: Directory to scan.
        temp_only: If True, drop normal entries after aggregation.
        max_workers: Size of the listing thread pool.
        on_progress: Optional callback fired after each directory is read.
        cancel_event: Optional event; when set, the scan is abandoned.
    """

    def __init__(
        self,
        root: Path | str,
        *,
        temp_only: bool = False,
        max_workers: int | None = None,
        on_progress: ProgressCallback | None = None,
        cancel_event: threading.Event | None = None,
    ) -> None:
        self._root = str(root)
        self._temp_only = temp_only
        self._max_workers = max_workers or DEFAULT_MAX_WORKERS
        self._on_progress = on_progress
        self._cancel_event = cancel_event

    @property
    def root(self) -> str:
        """Root path the scanner starts from."""
        return self._root

    def scan(self) -> ScanResult:
        """Walk the tree and aggregate totals for every reported directory.

        Returns:
            ScanResult with all entries and the non-fatal issues collected.

        Raises:
            ScanRootError: If the root cannot be scanned at all.
            ScanCancelledError: If the cancel event was set.
        """
        self._check_root()

        records: dict[str, _DirectoryRecord] = {}
        issues: list[ScanIssue] = []
        # Stops in-flight measurements when the walk ends early
        abort = threading.Event()

        with ThreadPoolExecutor(max_workers=self._max_workers) as executor:
            try:
                scanned = self._walk(executor, abort, records, issues)
            except BaseException:
                abort.set()
                raise

        entries = self._aggregate(records)
        if self._temp_only:
            entries = [e for e in entries if e.kind == EntryKind.TEMPORARY]

        logger.info(
            "Scanned %d directories under %s: %d entries, %d issues",
            scanned,
            self._root,
            len(entries),
            len(issues),
        )

        return ScanResult(
            root=self._root,
            entries=tuple(entries),
            issues=tuple(issues),
            directories_scanned=scanned,
        )

    def _walk(
        self,
        executor: ThreadPoolExecutor,
        abort: threading.Event,
        records: dict[str, _DirectoryRecord],
        issues: list[ScanIssue],
    ) -> int:
        """Drain the work list, filling the arena with one record per readable directory.

        Returns:
            Number of directories listed.
        """
        pending: dict[Future[_Listing | _Measurement], tuple[str, EntryKind, int]] = {}
        scanned = 0

        def submit(path: str, kind: EntryKind, depth: int) -> None:
            if kind == EntryKind.TEMPORARY:
                future = executor.submit(_measure_tree, path, abort)
            else:
                future = executor.submit(_list_directory, path)
            pending[future] = (path, kind, depth)

        submit(self._root, classify(os.path.basename(os.path.abspath(self._root))), 0)

        try:
            while pending:
                if self._is_cancelled():
                    raise ScanCancelledError(f"Scan of {self._root} was cancelled")

                done, _ = wait(pending, timeout=_POLL_SECONDS, return_when=FIRST_COMPLETED)
                for future in done:
                    path, kind, depth = pending.pop(future)
                    try:
                        outcome = future.result()
                    except OSError as e:
                        if path == self._root:
                            msg = f"Cannot read directory {path}: {_describe(e)}"
                            raise ScanRootError(msg) from e
                        logger.info("Cannot read directory %s: %s", path, _describe(e))
                        issues.append(ScanIssue(path=path, reason=_describe(e)))
                        continue

                    record = _DirectoryRecord(
                        path=path,
                        kind=kind,
                        depth=depth,
                        file_count=outcome.file_count,
                        size_bytes=outcome.size_bytes,
                    )
                    records[path] = record
                    issues.extend(outcome.issues)
                    scanned += outcome.directories

                    if isinstance(outcome, _Listing):
                        for child in outcome.subdirectories:
                            record.children.append(child)
                            submit(child, classify(os.path.basename(child)), depth + 1)

                    if self._on_progress is not None:
                        self._on_progress(scanned, path)
        finally:
            for future in pending:
                future.cancel()

        return scanned

    def _check_root(self) -> None:
        """Verify the root exists and is a directory.

        Raises:
            ScanRootError: If the root is missing or not a directory.
        """
        root = Path(self._root)
        if not root.exists():
            msg = f"Path does not exist: {self._root}"
            raise ScanRootError(msg)
        if not root.is_dir():
            msg = f"Path is not a directory: {self._root}"
            raise ScanRootError(msg)

    def _is_cancelled(self) -> bool:
        return self._cancel_event is not None and self._cancel_event.is_set()

    @staticmethod
    def _aggregate(records: dict[str, _DirectoryRecord]) -> list[DirectoryEntry]:
        """Fold child totals into their parents, deepest directories first.

        Children that could not be read have no record and contribute
        nothing.

        Args:
            records: Arena of successfully read directories.

        Returns:
            Entries sorted by path.
        """
        totals: dict[str, tuple[int, int]] = {}

        for record in sorted(records.values(), key=lambda r: r.depth, reverse=True):
            file_count = record.file_count
            size_bytes = record.size_bytes
            for child in record.children:
                child_totals = totals.get(child)
                if child_totals is None:
                    continue
                file_count += child_totals[0]
                size_bytes += child_totals[1]
            totals[record.path] = (file_count, size_bytes)

        return [
            DirectoryEntry(
                path=path,
                file_count=totals[path][0],
                size_bytes=totals[path][1],
                kind=records[path].kind,
            )
            for path in sorted(records)
        ]


def scan(root: Path | str, temp_only: bool = False, **kwargs: object) -> ScanResult:
    """Scan a directory tree with a one-off DirectoryScanner.

    Args:
        root: Directory to scan.
        temp_only: If True, only temporary entries are returned.
        **kwargs: Further DirectoryScanner keyword arguments.

    Returns:
        ScanResult for the tree.
    """
    return DirectoryScanner(root, temp_only=temp_only, **kwargs).scan()  # type: ignore[arg-type]
