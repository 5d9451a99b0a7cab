"""Shared Rich display functions for entries, plans and deletion results.

Provides reusable table builders and summary printers used by the scan,
load and interactive flows.
"""

from collections.abc import Sequence

from rich.table import Table

from diskclean.core.selection import DeletionPlan
from diskclean.core.store import EntryStore
from diskclean.filesystem.models import DirectoryEntry, EntryKind, ScanIssue
from diskclean.filesystem.operator import DeletionReport
from diskclean.utils.formatting import (
    console,
    format_size,
    print_success,
    print_warning,
    safe_markup,
)

# Issues listed individually before collapsing into a count
MAX_LISTED_ISSUES = 10


def _kind_label(entry: DirectoryEntry) -> str:
    if entry.kind == EntryKind.TEMPORARY:
        return "[temp]temp[/temp]"
    return "[normal]normal[/normal]"


def create_entries_table(
    entries: EntryStore,
    title: str,
    selected: Sequence[str] | None = None,
) -> Table:
    """Create a Rich table listing directory entries.

    Rows are numbered from 1 in store order. When ``selected`` is given a
    checkbox column marks the selected paths.

    Args:
        entries: Entries to list.
        title: Table title.
        selected: Selected paths, or None for a read-only listing.

    Returns:
        Rich Table configured for entry display.
    """
    table = Table(
        title=title,
        show_header=True,
        header_style="bold_header",
        border_style="border",
    )
    table.add_column("#", justify="right", style="muted")
    if selected is not None:
        table.add_column("", width=3, justify="center")
    table.add_column("Path", overflow="fold")
    table.add_column("Type", width=6)
    table.add_column("Files", justify="right")
    table.add_column("Size", justify="right", style="size")

    marked = set(selected or ())
    for rank, entry in enumerate(entries, start=1):
        row = [str(rank)]
        if selected is not None:
            row.append("[selected]✓[/selected]" if entry.path in marked else "")
        row.extend(
            [
                safe_markup(entry.path),
                _kind_label(entry),
                str(entry.file_count),
                format_size(entry.size_bytes),
            ]
        )
        table.add_row(*row)

    return table


def print_summary(entries: EntryStore, root: str | None, limit: int) -> None:
    """Print headline figures and the largest directories.

    Args:
        entries: Entries sorted for display.
        root: Scan root whose totals head the summary, if known.
        limit: Number of directories to list.
    """
    summary = entries.summary(root)

    console.print("\n[bold_header]Scan Summary[/bold_header]")
    if root is not None:
        console.print(f"Root: [text]{safe_markup(root)}[/text]")
    line = f"Total directories: [info]{summary.directory_count}[/info]"
    if summary.root_file_count is not None and summary.root_size_bytes is not None:
        line += (
            f"  |  Files: [info]{summary.root_file_count}[/info]"
            f"  |  Size: [size]{format_size(summary.root_size_bytes)}[/size]"
        )
    console.print(line)
    console.print(
        f"Temp directories: [temp]{summary.temp_count}[/temp]"
        f"  |  Temp size: [temp]{format_size(summary.temp_size_bytes)}[/temp]"
    )

    if not len(entries):
        return

    shown = entries.top(limit)
    console.print(create_entries_table(shown, f"Top {len(shown)} Largest Directories"))


def print_scan_issues(issues: Sequence[ScanIssue], quiet: bool = False) -> None:
    """Print paths that could not be read during a scan.

    Args:
        issues: Issues collected by the scanner.
        quiet: If True, only print the count.
    """
    if not issues:
        return

    print_warning(f"{len(issues)} path(s) could not be read and were left out of the totals.")
    if quiet:
        return

    for issue in issues[:MAX_LISTED_ISSUES]:
        print_warning(f"  {issue.path}: {issue.reason}")
    if len(issues) > MAX_LISTED_ISSUES:
        print_warning(f"  ... and {len(issues) - MAX_LISTED_ISSUES} more")


def create_plan_table(plan: DeletionPlan, dry_run: bool = False) -> Table:
    """Create a Rich table listing the directories about to be deleted.

    Args:
        plan: Deletion plan for the current selection.
        dry_run: Whether this is a dry-run (changes table title).

    Returns:
        Rich Table configured for plan display.
    """
    title = "Planned Deletions (Dry Run)" if dry_run else "Planned Deletions"
    table = Table(
        title=title,
        show_header=True,
        header_style="bold_header",
        border_style="border",
    )
    table.add_column("Path", overflow="fold")
    table.add_column("Type", width=6)
    table.add_column("Size", justify="right", style="size")

    for entry in plan.entries:
        table.add_row(safe_markup(entry.path), _kind_label(entry), format_size(entry.size_bytes))

    return table


def create_report_table(report: DeletionReport) -> Table:
    """Create a Rich table displaying deletion results.

    Args:
        report: Report returned by the deletion operator.

    Returns:
        Rich Table configured for results display.
    """
    table = Table(
        title="Deletion Results",
        show_header=True,
        header_style="bold_header",
        border_style="border",
    )
    table.add_column("Status", width=8, justify="center")
    table.add_column("Path", overflow="fold")
    table.add_column("Details", style="muted")

    ok_status = "[info]dry-run[/info]" if report.dry_run else "[success]OK[/success]"
    for path in report.successful:
        table.add_row(ok_status, safe_markup(path), "Would delete" if report.dry_run else "")
    for path, reason in report.failed:
        table.add_row("[error]FAIL[/error]", safe_markup(path), safe_markup(reason))

    return table


def print_report_summary(report: DeletionReport) -> None:
    """Print a one-line outcome of a deletion batch."""
    freed = format_size(report.total_freed_bytes)
    if report.dry_run:
        console.print(
            f"\n[info]Dry-run: {report.success_count} directory(ies) would be deleted "
            f"({freed}).[/info]"
        )
    elif report.all_succeeded:
        print_success(f"Deleted {report.success_count} directory(ies), freed {freed}.")
    else:
        console.print(
            f"\n[success]{report.success_count} deleted[/success], "
            f"[error]{report.failure_count} failed[/error], freed {freed}"
        )
