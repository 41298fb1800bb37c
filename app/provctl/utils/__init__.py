"""Utility modules for provctl.

This module exports commonly used utility functions.
"""

from provctl.utils.formatting import (
    console,
    err_console,
    print_error,
    print_info,
    print_success,
    print_warning,
)
from provctl.utils.shell import (
    CommandResult,
    command_exists,
    path_env,
    run_command,
    run_interactive,
)

__all__ = [
    "CommandResult",
    "command_exists",
    "console",
    "err_console",
    "path_env",
    "print_error",
    "print_info",
    "print_success",
    "print_warning",
    "run_command",
    "run_interactive",
]
