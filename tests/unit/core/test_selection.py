"""Unit tests for the selection session state machine."""

from unittest.mock import MagicMock

import pytest
from diskclean.core.selection import (
    CONFIRMATION_TOKEN,
    EmptySelectionError,
    InvalidSelectionError,
    InvalidTransitionError,
    SelectionSession,
    SessionState,
    is_confirmed,
)
from diskclean.core.store import EntryStore
from diskclean.filesystem.models import DirectoryEntry
from diskclean.filesystem.operator import DeletionReport


@pytest.fixture
def view(sample_entries: list[DirectoryEntry]) -> EntryStore:
    """View sorted the way interactive mode shows it."""
    return EntryStore(sample_entries).sorted_by_size()


@pytest.fixture
def operator() -> MagicMock:
    """Deleter that reports every entry as removed."""
    mock = MagicMock()
    mock.delete.side_effect = lambda entries, *, confirmed: DeletionReport(
        successful=[e.path for e in entries],
        total_freed_bytes=sum(e.size_bytes for e in entries),
    )
    return mock


class TestIsConfirmed:
    """Tests for is_confirmed."""

    @pytest.mark.parametrize("answer", ["yes", " yes ", "yes\n"])
    def test_token_confirms(self, answer: str) -> None:
        """The token confirms regardless of surrounding whitespace."""
        assert is_confirmed(answer) is True

    @pytest.mark.parametrize("answer", ["y", "", "YES", "Yes", "no", "yes please", None])
    def test_anything_else_refuses(self, answer: str | None) -> None:
        """Partial, empty and differently cased answers refuse."""
        assert is_confirmed(answer) is False

    def test_token_value(self) -> None:
        """The confirmation token is 'yes'."""
        assert CONFIRMATION_TOKEN == "yes"


class TestSelection:
    """Tests for toggling and bulk selection."""

    def test_starts_browsing_with_nothing_selected(self, view: EntryStore) -> None:
        """A new session is empty."""
        session = SelectionSession(view)

        assert session.state == SessionState.BROWSING
        assert session.selected_paths == ()
        assert session.selected_bytes == 0
        assert session.report is None

    def test_toggle(self, view: EntryStore) -> None:
        """Toggling twice deselects."""
        session = SelectionSession(view)

        assert session.toggle("/work/target") is True
        assert session.is_selected("/work/target")
        assert session.toggle("/work/target") is False
        assert not session.is_selected("/work/target")

    def test_toggle_unknown_path(self, view: EntryStore) -> None:
        """Paths outside the view are rejected."""
        session = SelectionSession(view)

        with pytest.raises(InvalidSelectionError):
            session.toggle("/elsewhere")

    def test_toggle_index(self, view: EntryStore) -> None:
        """Indices refer to view positions."""
        session = SelectionSession(view)

        session.toggle_index(4)

        assert session.selected_paths == ("/work/docs",)

    @pytest.mark.parametrize("index", [-1, 5, 100])
    def test_toggle_index_out_of_range(self, view: EntryStore, index: int) -> None:
        """Out-of-range indices are rejected."""
        with pytest.raises(InvalidSelectionError, match="No entry at position"):
            SelectionSession(view).toggle_index(index)

    def test_selection_in_view_order(self, view: EntryStore) -> None:
        """Selected paths follow the view, not the toggle order."""
        session = SelectionSession(view)
        session.toggle("/work/docs")
        session.toggle("/work/app/node_modules")

        assert session.selected_paths == ("/work/app/node_modules", "/work/docs")
        assert session.selected_bytes == 3_000_500

    def test_select_all_and_clear(self, view: EntryStore) -> None:
        """select_all marks every entry and clear removes them."""
        session = SelectionSession(view)

        session.select_all()
        assert session.selected_paths == view.paths

        session.clear()
        assert session.selected_paths == ()


class TestReplaceView:
    """Tests for view replacement."""

    def test_stale_selections_dropped(self, view: EntryStore) -> None:
        """Selections outside the new view are removed and counted."""
        session = SelectionSession(view)
        session.toggle("/work/docs")
        session.toggle("/work/target")

        dropped = session.replace_view(view.temp_only())

        assert dropped == 1
        assert session.selected_paths == ("/work/target",)
        assert session.plan().paths == ("/work/target",)

    def test_stale_selection_never_reaches_plan(self, view: EntryStore) -> None:
        """Switching back does not restore dropped selections."""
        session = SelectionSession(view)
        session.toggle("/work/docs")

        session.replace_view(view.temp_only())
        session.replace_view(view)

        assert session.selected_paths == ()


class TestConfirmationFlow:
    """Tests for commit, confirm and deletion."""

    def test_commit_empty_selection(self, view: EntryStore) -> None:
        """Committing nothing raises and keeps browsing."""
        session = SelectionSession(view)

        with pytest.raises(EmptySelectionError):
            session.commit()
        assert session.state == SessionState.BROWSING

    def test_commit_builds_plan(self, view: EntryStore) -> None:
        """The plan lists the exact selection with its held total."""
        session = SelectionSession(view)
        session.toggle("/work/target")
        session.toggle("/work/app/node_modules")

        plan = session.commit()

        assert session.state == SessionState.CONFIRMING_DELETION
        assert plan.paths == ("/work/app/node_modules", "/work/target")
        assert plan.total_bytes == 5_000_000

    def test_refusal_keeps_selection(self, view: EntryStore, operator: MagicMock) -> None:
        """Answering 'y' returns to browsing with the selection intact."""
        session = SelectionSession(view)
        session.toggle("/work/target")
        session.commit()

        assert session.confirm("y") is False

        assert session.state == SessionState.BROWSING
        assert session.selected_paths == ("/work/target",)
        operator.delete.assert_not_called()

    def test_confirmed_deletion(self, view: EntryStore, operator: MagicMock) -> None:
        """Confirming hands exactly the selection to the operator."""
        session = SelectionSession(view)
        session.toggle("/work/target")
        session.commit()

        assert session.confirm("yes") is True
        assert session.state == SessionState.DELETING

        report = session.run_deletion(operator)

        operator.delete.assert_called_once()
        deleted = operator.delete.call_args.args[0]
        assert [e.path for e in deleted] == ["/work/target"]
        assert operator.delete.call_args.kwargs == {"confirmed": True}
        assert report.total_freed_bytes == 2_000_000
        assert session.report is report
        assert session.state == SessionState.COMPLETED
        assert session.selected_paths == ()

    def test_no_toggle_while_confirming(self, view: EntryStore) -> None:
        """Selection is frozen while a confirmation is pending."""
        session = SelectionSession(view)
        session.toggle("/work/target")
        session.commit()

        with pytest.raises(InvalidTransitionError):
            session.toggle("/work/docs")

    def test_run_deletion_requires_confirmation(
        self, view: EntryStore, operator: MagicMock
    ) -> None:
        """Deletion cannot start without a confirmed answer."""
        session = SelectionSession(view)
        session.toggle("/work/target")

        with pytest.raises(InvalidTransitionError):
            session.run_deletion(operator)
        operator.delete.assert_not_called()

    def test_confirm_requires_commit(self, view: EntryStore) -> None:
        """confirm is only valid after commit."""
        with pytest.raises(InvalidTransitionError):
            SelectionSession(view).confirm("yes")


class TestQuit:
    """Tests for quitting."""

    def test_quit_from_browsing(self, view: EntryStore) -> None:
        """Quitting clears the selection."""
        session = SelectionSession(view)
        session.toggle("/work/target")

        session.quit()

        assert session.state == SessionState.QUIT
        assert session.selected_paths == ()

    def test_quit_while_confirming(self, view: EntryStore) -> None:
        """Quitting is allowed during confirmation."""
        session = SelectionSession(view)
        session.toggle("/work/target")
        session.commit()

        session.quit()

        assert session.state == SessionState.QUIT

    def test_quit_after_completion(self, view: EntryStore, operator: MagicMock) -> None:
        """A completed session cannot quit."""
        session = SelectionSession(view)
        session.toggle("/work/target")
        session.commit()
        session.confirm("yes")
        session.run_deletion(operator)

        with pytest.raises(InvalidTransitionError):
            session.quit()
