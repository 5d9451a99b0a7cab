"""Filesystem scanning and deletion module.

This module provides directory classification, tree scanning with
subtotal aggregation, and deletion of selected directories.
"""

from diskclean.filesystem.classifier import TEMP_DIRECTORY_NAMES, classify, is_temp_directory
from diskclean.filesystem.models import DirectoryEntry, EntryKind, ScanIssue, ScanResult
from diskclean.filesystem.operator import (
    DeletionNotConfirmedError,
    DeletionReport,
    DirectoryOperator,
)
from diskclean.filesystem.scanner import (
    DirectoryScanner,
    ScanCancelledError,
    ScanRootError,
    scan,
)

__all__ = [
    "TEMP_DIRECTORY_NAMES",
    "DeletionNotConfirmedError",
    "DeletionReport",
    "DirectoryEntry",
    "DirectoryOperator",
    "DirectoryScanner",
    "EntryKind",
    "ScanCancelledError",
    "ScanIssue",
    "ScanResult",
    "ScanRootError",
    "classify",
    "is_temp_directory",
    "scan",
]
