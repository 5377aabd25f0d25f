"""Utility modules for deploykit.

This module exports commonly used utility functions.
"""

from deploykit.utils.formatting import (
    console,
    create_plan_table,
    create_results_table,
    err_console,
    print_error,
    print_info,
    print_success,
    print_warning,
)
from deploykit.utils.shell import CommandResult, command_exists, format_command, run_command

__all__ = [
    "CommandResult",
    "command_exists",
    "console",
    "create_plan_table",
    "create_results_table",
    "err_console",
    "format_command",
    "print_error",
    "print_info",
    "print_success",
    "print_warning",
    "run_command",
]
