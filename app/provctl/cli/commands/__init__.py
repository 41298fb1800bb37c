"""CLI commands for provctl.

This package contains all subcommand implementations.
"""

from provctl.cli.commands import apply, init, plan

__all__ = ["apply", "init", "plan"]
