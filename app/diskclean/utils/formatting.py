"""Rich console formatting utilities.

Provides consistent formatting for CLI output using Rich.
"""

import sys

from rich.console import Console
from rich.markup import escape

from diskclean.core.theme import get_theme

_KB = 1024
_SIZE_UNITS: tuple[tuple[str, int], ...] = (
    ("TB", _KB**4),
    ("GB", _KB**3),
    ("MB", _KB**2),
    ("KB", _KB),
)


def _detect_color_system() -> str | None:
    """Detect the best color system for the current terminal.

    Returns "truecolor" for interactive terminals to enable full hex color support,
    None otherwise to let Rich auto-detect.
    """
    if sys.stdout.isatty():
        return "truecolor"
    return None


# Shared console instances (theme loaded once at import)
console = Console(theme=get_theme(), color_system=_detect_color_system())
err_console = Console(theme=get_theme(), stderr=True, color_system=_detect_color_system())


def format_size(size_bytes: int) -> str:
    """Format a byte count as a human-readable string.

    Uses binary units with two decimals, e.g. ``1.50 MB``; values below
    one kilobyte are shown as whole bytes.
    """
    for unit, factor in _SIZE_UNITS:
        if size_bytes >= factor:
            return f"{size_bytes / factor:.2f} {unit}"
    return f"{size_bytes} B"


def safe_markup(text: str) -> str:
    """Make arbitrary text, such as a filesystem path, safe to embed in Rich markup.

    Undecodable bytes from the filesystem (surrogate escapes) are shown as
    backslash escapes, and square brackets are escaped so they are never
    read as style tags.
    """
    return escape(text.encode("utf-8", "backslashreplace").decode("utf-8"))


def print_info(message: str) -> None:
    """Print an info message.

    Messages are plain text; square brackets in paths are printed as-is.
    """
    console.print(f"[info]{safe_markup(message)}[/]")


def print_warning(message: str) -> None:
    """Print a warning message."""
    err_console.print(f"[warning]Warning:[/] {safe_markup(message)}")


def print_error(message: str) -> None:
    """Print an error message."""
    err_console.print(f"[error]Error:[/] {safe_markup(message)}")


def print_success(message: str) -> None:
    """Print a success message."""
    console.print(f"[success]{safe_markup(message)}[/]")
