"""
Command-line preparation and external program launching.

This module builds the argument vector used to hand a configured command
line to the command interpreter, and opens files in an editor.
"""

import logging
import os
import platform
import shlex
import shutil
import subprocess
from pathlib import Path, PureWindowsPath
from typing import List, Optional

logger = logging.getLogger(__name__)


def interpreter_name(program: str) -> str:
    """Lower-case name of an interpreter executable, without ``.exe``."""
    # PureWindowsPath splits on both separators
    name = PureWindowsPath(program.strip("\"'")).name.lower()
    if name.endswith(".exe"):
        name = name[:-4]
    return name


def shell_command_flag(shell: str) -> str:
    """Return the interpreter flag meaning "run this one command and exit".

    Examples:
        >>> shell_command_flag("cmd.exe")
        '/c'
        >>> shell_command_flag("/bin/bash")
        '-c'
    """
    name = interpreter_name(shell)
    if name == "cmd":
        return "/c"
    if name in ("powershell", "pwsh"):
        return "-Command"
    return "-c"


def build_shell_argv(shell: str, command_line: str) -> List[str]:
    """Build the argument vector that runs ``command_line`` through ``shell``.

    ``shell`` may carry its own arguments (e.g. ``"bash -e"``); they are
    kept in front of the command flag.
    """
    shell_parts = split_shell(shell)
    return shell_parts + [shell_command_flag(shell_parts[0]), command_line]


def split_shell(shell: str) -> List[str]:
    """Split the interpreter setting into program and leading arguments."""
    shell_parts = shlex.split(shell, posix=platform.system() != "Windows")
    if not shell_parts:
        raise ValueError("Shell executable cannot be empty")
    return shell_parts


def passes_line_verbatim(shell: str) -> bool:
    """
    Whether command lines must reach ``shell`` as one unquoted string.

    cmd.exe parses its own command line and does not understand the
    backslash-escaped quotes Windows argv quoting produces, so lines for
    cmd are handed over through ``%COMSPEC% /c`` unchanged.
    """
    if platform.system() != "Windows":
        return False
    try:
        return interpreter_name(split_shell(shell)[0]) == "cmd"
    except ValueError:
        return False


def placeholder_command(shell: str, label: str) -> str:
    """Return a command line that does nothing when run by ``shell``.

    Examples:
        >>> placeholder_command("cmd.exe", "PrebuildEvent")
        'rem PrebuildEvent'
        >>> placeholder_command("/bin/sh", "PrebuildEvent")
        ': PrebuildEvent'
    """
    try:
        name = interpreter_name(split_shell(shell)[0])
    except ValueError:
        name = ""
    if name == "cmd":
        return f"rem {label}"
    if name in ("powershell", "pwsh"):
        return f"# {label}"
    return f": {label}"


def check_shell_available(shell: str) -> bool:
    """Check whether the configured interpreter can be found."""
    try:
        executable = build_shell_argv(shell, "")[0]
    except ValueError:
        return False
    return shutil.which(executable) is not None or os.path.isfile(executable)


def open_in_editor(path: Path, editor: Optional[str] = None) -> bool:
    """Open a file for the user to edit.

    Uses ``editor`` when given, otherwise the platform's default file
    association. Launch failures are logged and reported through the
    return value; opening is advisory and never raises.

    Returns:
        True if a viewer was launched, False otherwise.
    """
    path = Path(path)
    try:
        if editor:
            argv = shlex.split(editor, posix=platform.system() != "Windows") + [str(path)]
            subprocess.Popen(argv)
        elif platform.system() == "Windows":
            os.startfile(str(path))  # type: ignore[attr-defined]
        elif platform.system() == "Darwin":
            subprocess.Popen(["open", str(path)])
        else:
            subprocess.Popen(["xdg-open", str(path)])
    except (OSError, ValueError) as e:
        logger.warning(f"Could not open {path} in an editor: {type(e).__name__}: {e}")
        return False

    logger.info(f"Opened {path} for editing")
    return True
