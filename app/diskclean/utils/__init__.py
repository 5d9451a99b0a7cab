"""Utility modules for diskclean.

This module exports commonly used utility functions.
"""

from diskclean.utils.formatting import (
    console,
    err_console,
    format_size,
    print_error,
    print_info,
    print_success,
    print_warning,
    safe_markup,
)

__all__ = [
    "console",
    "err_console",
    "format_size",
    "print_error",
    "print_info",
    "print_success",
    "print_warning",
    "safe_markup",
]
