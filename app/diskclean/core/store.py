"""In-memory store of directory entries.

The store is the single data model shared by the scan, CSV and
interactive paths. It never changes after construction: every filter
and sort returns a new store.
"""

from collections.abc import Iterable, Iterator
from dataclasses import dataclass

from diskclean.filesystem.models import DirectoryEntry, EntryKind


class DuplicateEntryError(ValueError):
    """Raised when two entries share the same path."""


@dataclass(frozen=True, slots=True)
class StoreSummary:
    """Headline figures for a set of entries.

    Attributes:
        directory_count: Number of entries.
        temp_count: Number of temporary entries.
        temp_size_bytes: Sum of temporary entry sizes.
        root_file_count: File count of the root entry, if present.
        root_size_bytes: Size of the root entry, if present.
    """

    directory_count: int
    temp_count: int
    temp_size_bytes: int
    root_file_count: int | None = None
    root_size_bytes: int | None = None


class EntryStore:
    """Immutable ordered collection of directory entries.

    Args:
        entries: Entries to hold; paths must be unique.

    Raises:
        DuplicateEntryError: If two entries share a path.
    """

    __slots__ = ("_by_path", "_entries")

    def __init__(self, entries: Iterable[DirectoryEntry] = ()) -> None:
        self._entries: tuple[DirectoryEntry, ...] = tuple(entries)
        self._by_path: dict[str, DirectoryEntry] = {}
        for entry in self._entries:
            if entry.path in self._by_path:
                msg = f"Duplicate entry for path: {entry.path}"
                raise DuplicateEntryError(msg)
            self._by_path[entry.path] = entry

    def __len__(self) -> int:
        return len(self._entries)

    def __iter__(self) -> Iterator[DirectoryEntry]:
        return iter(self._entries)

    def __getitem__(self, index: int) -> DirectoryEntry:
        return self._entries[index]

    def __contains__(self, path: object) -> bool:
        return path in self._by_path

    def __repr__(self) -> str:
        return f"EntryStore({len(self._entries)} entries)"

    @property
    def entries(self) -> tuple[DirectoryEntry, ...]:
        """Entries in store order."""
        return self._entries

    @property
    def paths(self) -> tuple[str, ...]:
        """Entry paths in store order."""
        return tuple(e.path for e in self._entries)

    def get(self, path: str) -> DirectoryEntry | None:
        """Look up an entry by path."""
        return self._by_path.get(path)

    def index_of(self, path: str) -> int:
        """Get the position of a path in store order.

        Raises:
            KeyError: If the path is not in the store.
        """
        for index, entry in enumerate(self._entries):
            if entry.path == path:
                return index
        raise KeyError(path)

    def sorted_by_size(self) -> "EntryStore":
        """Sort by size descending; ties are broken by path ascending."""
        return EntryStore(sorted(self._entries, key=lambda e: (-e.size_bytes, e.path)))

    def top(self, n: int) -> "EntryStore":
        """Keep the first ``n`` entries in store order."""
        if n < 0:
            msg = f"Limit cannot be negative, got {n}"
            raise ValueError(msg)
        return EntryStore(self._entries[:n])

    def temp_only(self) -> "EntryStore":
        """Keep temporary entries only, with their totals untouched."""
        return EntryStore(e for e in self._entries if e.kind == EntryKind.TEMPORARY)

    def at_least(self, min_bytes: int) -> "EntryStore":
        """Keep entries whose size is at least ``min_bytes``."""
        return EntryStore(e for e in self._entries if e.size_bytes >= min_bytes)

    def total_size(self) -> int:
        """Sum of entry sizes.

        Normal entries already include their descendants, so this
        overstates disk usage whenever nested entries are present.
        """
        return sum(e.size_bytes for e in self._entries)

    def summary(self, root: str | None = None) -> StoreSummary:
        """Summarize the store, including root totals when the root is held.

        Args:
            root: Path of the scan root, if known.
        """
        temps = [e for e in self._entries if e.kind == EntryKind.TEMPORARY]
        root_entry = self._by_path.get(root) if root is not None else None
        return StoreSummary(
            directory_count=len(self._entries),
            temp_count=len(temps),
            temp_size_bytes=sum(e.size_bytes for e in temps),
            root_file_count=root_entry.file_count if root_entry else None,
            root_size_bytes=root_entry.size_bytes if root_entry else None,
        )
