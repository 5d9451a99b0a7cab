"""Configuration commands.

Shows and initializes the settings file and lists the directory names
treated as temporary.
"""

from typing import Annotated

import typer
from rich.table import Table

from diskclean.cli.commands import load_settings
from diskclean.core.config import AppConfig, ConfigError, save_config
from diskclean.core.paths import ensure_config_dir, get_config_path
from diskclean.filesystem.classifier import temp_directory_groups
from diskclean.utils.formatting import (
    console,
    format_size,
    print_error,
    print_info,
    print_success,
    safe_markup,
)

app = typer.Typer(
    help="Show and manage diskclean settings.",
    no_args_is_help=True,
)


@app.command()
def show() -> None:
    """Show the effective settings."""
    settings = load_settings()
    path = get_config_path()

    table = Table(
        title="Settings",
        show_header=True,
        header_style="bold_header",
        border_style="border",
    )
    table.add_column("Key", style="bold")
    table.add_column("Value", justify="right")
    table.add_column("Description", style="muted")

    min_size = f"{settings.min_size_bytes} ({format_size(settings.min_size_bytes)})"
    table.add_row("min_size_bytes", min_size, "Smallest directory shown in interactive mode")
    table.add_row("summary_limit", str(settings.summary_limit), "Directories in the summary")
    table.add_row("max_workers", str(settings.max_workers), "Scanner threads")

    console.print(table)
    source = str(path) if path.exists() else f"{path} (not found, using defaults)"
    console.print(f"[muted]Config file: {safe_markup(source)}[/muted]")


@app.command()
def init(
    force: Annotated[
        bool,
        typer.Option("--force", help="Overwrite an existing settings file."),
    ] = False,
) -> None:
    """Write a settings file with the default values."""
    path = get_config_path()
    if path.exists() and not force:
        print_info(f"Settings file already exists: {path} (use --force to overwrite)")
        return

    try:
        ensure_config_dir()
        saved = save_config(AppConfig(), path)
    except (ConfigError, RuntimeError) as e:
        print_error(str(e))
        raise typer.Exit(code=1) from e
    print_success(f"Settings written to {saved}")


@app.command()
def names() -> None:
    """List the directory names treated as temporary."""
    table = Table(
        title="Temporary Directory Names",
        show_header=True,
        header_style="bold_header",
        border_style="border",
    )
    table.add_column("Group", style="bold")
    table.add_column("Names", style="temp")

    for group, group_names in temp_directory_groups().items():
        table.add_row(group, ", ".join(group_names))

    console.print(table)
