"""CLI package for diskclean.

This package contains the Typer application and all subcommands.
"""

from diskclean.cli.main import app

__all__ = ["app"]
