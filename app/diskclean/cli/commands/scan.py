"""Scan command implementation.

Scans a directory tree, prints a summary of the largest directories,
and optionally exports the entries to CSV or starts interactive deletion.
"""

from pathlib import Path
from typing import Annotated

import typer

from diskclean.cli.commands import exit_on_failures, load_settings
from diskclean.cli.display import print_scan_issues, print_summary
from diskclean.cli.interactive import run_interactive
from diskclean.core.interchange import CsvError, write_csv
from diskclean.core.store import EntryStore
from diskclean.filesystem.scanner import DirectoryScanner, ScanRootError
from diskclean.utils.formatting import (
    console,
    print_error,
    print_info,
    print_warning,
    safe_markup,
)


def scan(
    ctx: typer.Context,
    path: Annotated[
        Path | None,
        typer.Argument(help="Directory to analyze (defaults to the current directory)."),
    ] = None,
    output_csv: Annotated[
        Path | None,
        typer.Option("--output-csv", "-o", help="Save the scan results to a CSV file."),
    ] = None,
    temp_only: Annotated[
        bool,
        typer.Option("--temp-only", "-t", help="Only report temporary directories."),
    ] = False,
    interactive: Annotated[
        bool,
        typer.Option("--interactive", "-i", help="Select directories and delete them."),
    ] = False,
    limit: Annotated[
        int | None,
        typer.Option("--limit", "-n", min=1, help="Number of directories in the summary."),
    ] = None,
    workers: Annotated[
        int | None,
        typer.Option("--workers", "-w", min=1, max=64, help="Threads used for scanning."),
    ] = None,
    dry_run: Annotated[
        bool,
        typer.Option("--dry-run", help="Show what would be deleted without deleting."),
    ] = False,
) -> None:
    """Scan a directory tree for reclaimable directories.

    Examples:
        diskclean scan                        # Scan the current directory
        diskclean scan ~/projects --temp-only # Only temporary directories
        diskclean scan ~/projects -o out.csv  # Save results for later
        diskclean scan ~/projects -i          # Select and delete
    """
    settings = load_settings()
    quiet = bool(ctx.obj and ctx.obj.get("quiet"))
    root = (path or Path.cwd()).absolute()

    try:
        with console.status(f"Scanning {safe_markup(str(root))}...") as status:

            def on_progress(count: int, current: str) -> None:
                status.update(f"Scanning {safe_markup(str(root))}... {count} directories")

            scanner = DirectoryScanner(
                root,
                temp_only=temp_only,
                max_workers=workers or settings.max_workers,
                on_progress=on_progress,
            )
            result = scanner.scan()
    except ScanRootError as e:
        print_error(str(e))
        raise typer.Exit(code=1) from e
    except KeyboardInterrupt:
        print_warning("Scan cancelled.")
        raise typer.Exit(code=130) from None

    print_info(
        f"Scan complete: {len(result.entries)} directories reported "
        f"({result.directories_scanned} read)."
    )
    print_scan_issues(result.issues, quiet=quiet)

    entries = EntryStore(result.entries).sorted_by_size()

    if output_csv is not None:
        try:
            count = write_csv(entries, output_csv)
        except CsvError as e:
            print_error(str(e))
            raise typer.Exit(code=1) from e
        print_info(f"Saved {count} entries to {output_csv}")

    if not len(entries):
        print_info("No directories to report.")
        return

    print_summary(entries, str(root), limit or settings.summary_limit)

    if interactive:
        session = run_interactive(
            entries,
            min_size_bytes=settings.min_size_bytes,
            dry_run=dry_run,
        )
        exit_on_failures(session)
