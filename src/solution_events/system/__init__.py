"""
System interaction utilities: command interpreter invocation, editor
launching and child process inspection.
"""

from .commands import (
    build_shell_argv,
    check_shell_available,
    interpreter_name,
    open_in_editor,
    passes_line_verbatim,
    placeholder_command,
    shell_command_flag,
    split_shell,
)
from .processes import describe_live_processes, is_process_alive

__all__ = [
    "build_shell_argv",
    "check_shell_available",
    "interpreter_name",
    "open_in_editor",
    "passes_line_verbatim",
    "placeholder_command",
    "shell_command_flag",
    "split_shell",
    "describe_live_processes",
    "is_process_alive",
]
