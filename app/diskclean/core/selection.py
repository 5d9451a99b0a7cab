"""Selection session state machine.

Tracks which entries a user has marked for deletion, independent of how
the entries are rendered. The session moves through these states:

    BROWSING -> CONFIRMING_DELETION -> DELETING -> COMPLETED
                       |
                       +-> BROWSING (declined, selection kept)

    BROWSING / CONFIRMING_DELETION -> QUIT (no deletion)

Selection identifiers are entry paths. Every selected path always exists
in the current view; replacing the view drops selections that fell out.
"""

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Protocol

from diskclean.core.store import EntryStore
from diskclean.filesystem.models import DirectoryEntry
from diskclean.filesystem.operator import DeletionReport

logger = logging.getLogger(__name__)

# Only this exact answer confirms a deletion
CONFIRMATION_TOKEN = "yes"


class SessionState(str, Enum):
    """States of a selection session."""

    BROWSING = "browsing"
    CONFIRMING_DELETION = "confirming_deletion"
    DELETING = "deleting"
    COMPLETED = "completed"
    QUIT = "quit"


class SelectionError(Exception):
    """Base exception for selection session errors."""


class InvalidSelectionError(SelectionError):
    """Raised when an identifier does not refer to an entry in the current view."""


class InvalidTransitionError(SelectionError):
    """Raised when an operation is not allowed in the current state."""


class EmptySelectionError(SelectionError):
    """Raised when committing with nothing selected."""


class Deleter(Protocol):
    """Anything that can delete a confirmed batch of entries."""

    def delete(self, entries: list[DirectoryEntry], *, confirmed: bool) -> DeletionReport: ...


@dataclass(frozen=True, slots=True)
class DeletionPlan:
    """What a confirmation prompt must show for the current selection.

    Attributes:
        entries: Selected entries in view order.
        total_bytes: Sum of the held sizes of the selected entries.
    """

    entries: tuple[DirectoryEntry, ...]
    total_bytes: int

    @property
    def paths(self) -> tuple[str, ...]:
        """Selected paths in view order."""
        return tuple(e.path for e in self.entries)


def is_confirmed(answer: str | None) -> bool:
    """Check if a prompt answer confirms deletion.

    Surrounding whitespace is ignored; anything other than the exact
    token (including ``"y"`` and empty input) is a refusal.
    """
    if answer is None:
        return False
    return answer.strip() == CONFIRMATION_TOKEN


class SelectionSession:
    """Selection state over an entry view.

    Args:
        view: Entries the user can select from.
    """

    def __init__(self, view: EntryStore) -> None:
        self._view = view
        self._selected: set[str] = set()
        self._state = SessionState.BROWSING
        self._report: DeletionReport | None = None

    @property
    def state(self) -> SessionState:
        """Current session state."""
        return self._state

    @property
    def view(self) -> EntryStore:
        """Entries currently offered for selection."""
        return self._view

    @property
    def report(self) -> DeletionReport | None:
        """Deletion report once the session has completed."""
        return self._report

    @property
    def selected_paths(self) -> tuple[str, ...]:
        """Selected paths in view order."""
        return tuple(path for path in self._view.paths if path in self._selected)

    @property
    def selected_entries(self) -> tuple[DirectoryEntry, ...]:
        """Selected entries in view order."""
        return tuple(e for e in self._view if e.path in self._selected)

    @property
    def selected_bytes(self) -> int:
        """Sum of the held sizes of the selected entries."""
        return sum(e.size_bytes for e in self.selected_entries)

    def is_selected(self, path: str) -> bool:
        """Check if a path is selected."""
        return path in self._selected

    def toggle(self, path: str) -> bool:
        """Flip the selection of one entry.

        Args:
            path: Path of an entry in the current view.

        Returns:
            True if the entry is now selected, False if it was deselected.

        Raises:
            InvalidSelectionError: If the path is not in the current view.
            InvalidTransitionError: If the session is not browsing.
        """
        self._require(SessionState.BROWSING, "toggle")
        if path not in self._view:
            msg = f"Not in the current view: {path}"
            raise InvalidSelectionError(msg)

        if path in self._selected:
            self._selected.discard(path)
            return False
        self._selected.add(path)
        return True

    def toggle_index(self, index: int) -> bool:
        """Flip the selection of the entry at a 0-based view position.

        Raises:
            InvalidSelectionError: If the index is outside the current view.
        """
        if not 0 <= index < len(self._view):
            msg = f"No entry at position {index + 1} (view has {len(self._view)})"
            raise InvalidSelectionError(msg)
        return self.toggle(self._view[index].path)

    def select_all(self) -> None:
        """Select every entry in the current view."""
        self._require(SessionState.BROWSING, "select all")
        self._selected = set(self._view.paths)

    def clear(self) -> None:
        """Deselect everything."""
        self._require(SessionState.BROWSING, "clear")
        self._selected.clear()

    def replace_view(self, view: EntryStore) -> int:
        """Swap the view, dropping selections that are no longer in it.

        Args:
            view: New entries to select from.

        Returns:
            Number of selections dropped.
        """
        self._require(SessionState.BROWSING, "change view")
        stale = {path for path in self._selected if path not in view}
        self._selected -= stale
        self._view = view
        if stale:
            logger.debug("Dropped %d selection(s) outside the new view", len(stale))
        return len(stale)

    def commit(self) -> DeletionPlan:
        """Ask for confirmation of the current selection.

        Returns:
            DeletionPlan with the selected entries and their held total.

        Raises:
            EmptySelectionError: If nothing is selected.
        """
        self._require(SessionState.BROWSING, "commit")
        if not self._selected:
            msg = "Nothing selected"
            raise EmptySelectionError(msg)

        self._state = SessionState.CONFIRMING_DELETION
        return self.plan()

    def plan(self) -> DeletionPlan:
        """Build the deletion plan for the exact current selection."""
        entries = self.selected_entries
        return DeletionPlan(entries=entries, total_bytes=sum(e.size_bytes for e in entries))

    def confirm(self, answer: str | None) -> bool:
        """Resolve the pending confirmation with the user's answer.

        A refusal returns to browsing with the selection preserved.

        Returns:
            True if deletion may proceed.
        """
        self._require(SessionState.CONFIRMING_DELETION, "confirm")
        if is_confirmed(answer):
            self._state = SessionState.DELETING
            return True

        logger.info("Deletion not confirmed; %d selection(s) kept", len(self._selected))
        self._state = SessionState.BROWSING
        return False

    def run_deletion(self, operator: Deleter) -> DeletionReport:
        """Delete the confirmed selection and complete the session.

        Args:
            operator: Deletion executor to hand the selection to.

        Returns:
            DeletionReport from the operator.
        """
        self._require(SessionState.DELETING, "delete")
        report = operator.delete(list(self.selected_entries), confirmed=True)
        self._report = report
        self._selected.clear()
        self._state = SessionState.COMPLETED
        return report

    def quit(self) -> None:
        """End the session without deleting anything."""
        if self._state not in (SessionState.BROWSING, SessionState.CONFIRMING_DELETION):
            msg = f"Cannot quit while {self._state.value}"
            raise InvalidTransitionError(msg)
        self._selected.clear()
        self._state = SessionState.QUIT

    def _require(self, state: SessionState, action: str) -> None:
        if self._state != state:
            msg = f"Cannot {action} while {self._state.value}"
            raise InvalidTransitionError(msg)
