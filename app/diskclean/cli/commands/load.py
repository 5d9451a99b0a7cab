"""Load command implementation.

Loads a previous analysis from CSV instead of scanning the filesystem.
"""

from pathlib import Path
from typing import Annotated

import typer

from diskclean.cli.commands import exit_on_failures, load_settings
from diskclean.cli.display import print_summary
from diskclean.cli.interactive import run_interactive
from diskclean.core.interchange import CsvError, read_csv
from diskclean.core.store import EntryStore
from diskclean.utils.formatting import print_error, print_info


def load(
    csv_path: Annotated[
        Path,
        typer.Argument(help="CSV file written by 'diskclean scan --output-csv'."),
    ],
    temp_only: Annotated[
        bool,
        typer.Option("--temp-only", "-t", help="Only keep temporary directories."),
    ] = False,
    interactive: Annotated[
        bool,
        typer.Option("--interactive", "-i", help="Select directories and delete them."),
    ] = False,
    limit: Annotated[
        int | None,
        typer.Option("--limit", "-n", min=1, help="Number of directories in the summary."),
    ] = None,
    dry_run: Annotated[
        bool,
        typer.Option("--dry-run", help="Show what would be deleted without deleting."),
    ] = False,
) -> None:
    """Load a saved analysis from CSV.

    The file is validated as a whole; a single malformed row rejects it.

    Examples:
        diskclean load scan.csv               # Show the summary
        diskclean load scan.csv --temp-only   # Temporary directories only
        diskclean load scan.csv -i            # Select and delete
    """
    settings = load_settings()

    try:
        loaded = read_csv(csv_path)
    except CsvError as e:
        print_error(f"Cannot load {csv_path}: {e}")
        raise typer.Exit(code=1) from e

    entries = EntryStore(loaded)
    print_info(f"Loaded {len(entries)} entries from {csv_path}")

    if temp_only:
        entries = entries.temp_only()
        print_info(f"Filtered to {len(entries)} temporary directories")

    entries = entries.sorted_by_size()
    if not len(entries):
        print_info("No directories to report.")
        return

    print_summary(entries, None, limit or settings.summary_limit)

    if interactive:
        session = run_interactive(
            entries,
            min_size_bytes=settings.min_size_bytes,
            dry_run=dry_run,
        )
        exit_on_failures(session)
