"""Interactive selection and deletion.

Drives a SelectionSession from a simple prompt loop. The session holds
all selection state; this module only reads commands and renders.

Commands:
    1 3 5-7   toggle entries by their number
    a         select every listed entry
    c         clear the selection
    t         switch between all entries and temporary entries only
    d         delete the selection (asks for confirmation)
    q         quit without deleting
"""

import typer

from diskclean.cli.display import (
    create_entries_table,
    create_plan_table,
    create_report_table,
    print_report_summary,
)
from diskclean.core.selection import (
    CONFIRMATION_TOKEN,
    EmptySelectionError,
    InvalidSelectionError,
    SelectionSession,
    SessionState,
)
from diskclean.core.store import EntryStore
from diskclean.filesystem.operator import DirectoryOperator
from diskclean.utils.formatting import (
    console,
    format_size,
    print_error,
    print_info,
    print_warning,
)

_HELP = (
    "[muted]Numbers/ranges (e.g. 1 3 5-7): toggle  |  a: select all  |  c: clear  |  "
    "t: temp only on/off  |  d: delete selected  |  q: quit[/muted]"
)


def parse_positions(text: str, limit: int | None = None) -> list[int]:
    """Parse 1-based entry numbers and ranges into 0-based indices.

    Accepts numbers and ``start-end`` ranges separated by spaces or commas.
    With ``limit``, numbers above it are rejected before any range is expanded.

    Raises:
        ValueError: If a token is not a number or a valid range.
    """
    indices: list[int] = []
    for token in text.replace(",", " ").split():
        start_text, sep, end_text = token.partition("-")
        if not start_text.isdigit() or (sep and not end_text.isdigit()):
            msg = f"Not a number or range: {token}"
            raise ValueError(msg)
        start = int(start_text)
        end = int(end_text) if sep else start
        if start < 1:
            msg = f"Entries are numbered from 1: {token}"
            raise ValueError(msg)
        if end < start:
            msg = f"Range runs backwards: {token}"
            raise ValueError(msg)
        if limit is not None and end > limit:
            msg = f"No entry {end} (the list has {limit})"
            raise ValueError(msg)
        indices.extend(range(start - 1, end))
    return indices


def run_interactive(
    entries: EntryStore,
    *,
    min_size_bytes: int,
    dry_run: bool = False,
) -> SelectionSession | None:
    """Let the user select entries and delete them after confirmation.

    Only entries of at least ``min_size_bytes`` are offered, largest first.

    Args:
        entries: Entries from a scan or a CSV load.
        min_size_bytes: Smallest entry offered for selection.
        dry_run: If True, report what would be deleted without deleting.

    Returns:
        The finished session, or None if there was nothing to offer.
    """
    full_view = entries.at_least(min_size_bytes).sorted_by_size()
    if not len(full_view):
        print_info(f"No directories of at least {format_size(min_size_bytes)} to select.")
        return None

    temp_view = full_view.temp_only()
    session = SelectionSession(full_view)
    temp_only = False

    while session.state == SessionState.BROWSING:
        _render(session, temp_only, min_size_bytes)
        command = typer.prompt("Command", default="", show_default=False).strip()

        if command in ("q", "quit"):
            session.quit()
        elif command == "a":
            session.select_all()
        elif command == "c":
            session.clear()
        elif command == "t":
            temp_only = not temp_only
            dropped = session.replace_view(temp_view if temp_only else full_view)
            if dropped:
                print_info(f"{dropped} selection(s) outside the temp-only view were cleared.")
        elif command == "d":
            _delete(session, dry_run)
        elif command in ("", "?", "h", "help"):
            console.print(_HELP)
        else:
            _toggle(session, command)

    return session


def _render(session: SelectionSession, temp_only: bool, min_size_bytes: int) -> None:
    view = session.view
    scope = "temp only" if temp_only else "all"
    title = f"Directories >= {format_size(min_size_bytes)} ({scope})"
    console.print(create_entries_table(view, title, selected=session.selected_paths))
    console.print(
        f"Selected: [selected]{len(session.selected_paths)}[/selected] "
        f"([size]{format_size(session.selected_bytes)}[/size])"
    )
    console.print(_HELP)


def _toggle(session: SelectionSession, command: str) -> None:
    try:
        positions = parse_positions(command, limit=len(session.view))
    except ValueError as e:
        print_warning(str(e))
        return

    for index in positions:
        try:
            session.toggle_index(index)
        except InvalidSelectionError as e:
            print_error(str(e))


def _delete(session: SelectionSession, dry_run: bool) -> None:
    try:
        plan = session.commit()
    except EmptySelectionError:
        print_warning("Nothing selected.")
        return

    console.print(create_plan_table(plan, dry_run=dry_run))
    console.print(
        f"Directories to delete: [info]{len(plan.entries)}[/info]  |  "
        f"Total size to be freed: [size]{format_size(plan.total_bytes)}[/size]"
    )
    if not dry_run:
        console.print("[error]This action cannot be undone![/error]")

    answer = typer.prompt(
        f"Type '{CONFIRMATION_TOKEN}' to confirm deletion",
        default="",
        show_default=False,
    )
    if not session.confirm(answer):
        print_info("Deletion cancelled.")
        return

    report = session.run_deletion(DirectoryOperator(dry_run=dry_run))
    console.print(create_report_table(report))
    print_report_summary(report)
