"""Directory deletion operator.

Removes confirmed directories one at a time with dry-run support.
A failure on one path is recorded and never stops the rest of the batch.
Freed space is taken from the sizes held in the entries, not measured
again from disk.
"""

import logging
import shutil
from collections.abc import Sequence
from dataclasses import dataclass, field
from pathlib import PurePath

from diskclean.filesystem.models import DirectoryEntry

logger = logging.getLogger(__name__)


class DeletionNotConfirmedError(Exception):
    """Raised when deletion is requested without an explicit confirmation."""


def _removed_ancestor(path: str, removed: set[str]) -> str | None:
    """Find a directory already removed in this batch that contains ``path``."""
    for parent in PurePath(path).parents:
        if str(parent) in removed:
            return str(parent)
    return None


@dataclass(slots=True)
class DeletionReport:
    """Outcome of a deletion batch.

    Attributes:
        successful: Paths removed, in processing order (shallowest first).
        failed: (path, reason) pairs for paths that could not be removed.
        total_freed_bytes: Sum of the held sizes of the removed paths.
        dry_run: Whether this was a dry-run (nothing was removed).
    """

    successful: list[str] = field(default_factory=list)
    failed: list[tuple[str, str]] = field(default_factory=list)
    total_freed_bytes: int = 0
    dry_run: bool = False

    @property
    def success_count(self) -> int:
        """Number of paths removed."""
        return len(self.successful)

    @property
    def failure_count(self) -> int:
        """Number of paths that could not be removed."""
        return len(self.failed)

    @property
    def all_succeeded(self) -> bool:
        """Check if every path in the batch was removed."""
        return not self.failed


class DirectoryOperator:
    """Handles recursive deletion of selected directories.

    Attributes:
        _dry_run: If True, simulate deletions without modifying the filesystem.
    """

    def __init__(self, dry_run: bool = False) -> None:
        """Initialize the DirectoryOperator.

        Args:
            dry_run: If True, report what would be deleted without deleting.
        """
        self._dry_run = dry_run

    @property
    def dry_run(self) -> bool:
        """Whether deletions are only simulated."""
        return self._dry_run

    def delete(self, entries: Sequence[DirectoryEntry], *, confirmed: bool) -> DeletionReport:
        """Delete every entry's directory and report the outcome.

        The batch always runs to the end; each path either lands in
        ``successful`` or in ``failed`` exactly once. An entry nested inside
        a directory removed earlier in the batch is reported as failed, so
        its bytes are never counted twice. Dry-runs follow the same rule.

        Args:
            entries: Entries to remove, with the sizes captured at scan time.
            confirmed: Confirmation already obtained by the caller.

        Returns:
            DeletionReport for the whole batch.

        Raises:
            DeletionNotConfirmedError: If ``confirmed`` is not True.
        """
        if confirmed is not True:
            msg = f"Deletion of {len(entries)} path(s) was not confirmed"
            raise DeletionNotConfirmedError(msg)

        report = DeletionReport(dry_run=self._dry_run)
        removed: set[str] = set()

        # Shallowest paths first so a parent is handled before its descendants
        for entry in sorted(entries, key=lambda e: len(PurePath(e.path).parts)):
            ancestor = _removed_ancestor(entry.path, removed)
            if ancestor is not None:
                report.failed.append((entry.path, f"Removed with parent directory {ancestor}"))
                continue

            error = self._delete_single(entry.path)
            if error is None:
                report.successful.append(entry.path)
                removed.add(entry.path)
                report.total_freed_bytes += entry.size_bytes
            else:
                report.failed.append((entry.path, error))

        return report

    def _delete_single(self, path: str) -> str | None:
        """Remove a single directory tree.

        Args:
            path: Directory to remove.

        Returns:
            None on success, otherwise a human-readable failure reason.
        """
        if self._dry_run:
            logger.info("Dry-run: would delete %s", path)
            return None

        try:
            shutil.rmtree(path)
        except FileNotFoundError:
            logger.warning("Failed to delete %s: path no longer exists", path)
            return "Path does not exist"
        except OSError as e:
            reason = e.strerror or str(e) or e.__class__.__name__
            logger.warning("Failed to delete %s: %s", path, reason)
            return reason

        logger.info("Deleted %s", path)
        return None
