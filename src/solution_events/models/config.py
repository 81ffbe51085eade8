"""
Configuration data models.

This module contains the per-solution command document, the event kinds
it is keyed by, and the extension-wide settings loaded from TOML.
"""

import platform
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Any, Dict, List, Optional

from ..system.commands import placeholder_command

DEFAULT_CONFIG_FILENAME = "SolutionBuildEvents.json"
DEFAULT_CHANNEL = "Solution Build Events"


class EventKind(Enum):
    """The build-lifecycle transitions a command list can be attached to."""

    PRE_BUILD = "PreBuild"
    POST_BUILD = "PostBuild"
    CONFIGURATION_CHANGED = "ConfigurationChanged"

    @property
    def document_field(self) -> str:
        """Name of the JSON field holding this kind's command list."""
        return _DOCUMENT_FIELDS[self]

    @property
    def header(self) -> str:
        """Header prefixed to every sink line produced for this kind."""
        return _HEADERS[self]


_DOCUMENT_FIELDS = {
    EventKind.PRE_BUILD: "PreBuildEvent",
    EventKind.POST_BUILD: "PostBuildEvent",
    EventKind.CONFIGURATION_CHANGED: "ConfigurationChangedEvent",
}

_HEADERS = {
    EventKind.PRE_BUILD: "Prebuild event",
    EventKind.POST_BUILD: "Postbuild event",
    EventKind.CONFIGURATION_CHANGED: "ConfigurationChanged event",
}


@dataclass
class Parameter:
    """
    The command document stored next to a solution.

    Each field is an ordered list of command lines, run in order when the
    matching event fires. Fields are never ``None``.
    """

    pre_build_event: List[str] = field(default_factory=list)
    post_build_event: List[str] = field(default_factory=list)
    configuration_changed_event: List[str] = field(default_factory=list)

    @classmethod
    def default(cls, shell: Optional[str] = None) -> "Parameter":
        """
        Document written on first use, one no-op placeholder per list.

        The placeholder is a comment in the syntax of ``shell`` (the
        platform default when None), so a fresh document runs cleanly.
        """
        shell = shell or default_shell()
        return cls(
            pre_build_event=[placeholder_command(shell, "PrebuildEvent")],
            post_build_event=[placeholder_command(shell, "PostbuildEvent")],
            configuration_changed_event=[placeholder_command(shell, "ConfigurationChangedEvent")],
        )

    def commands_for(self, kind: EventKind) -> List[str]:
        if kind is EventKind.PRE_BUILD:
            return self.pre_build_event
        if kind is EventKind.POST_BUILD:
            return self.post_build_event
        return self.configuration_changed_event

    def to_dict(self) -> Dict[str, Any]:
        return {
            EventKind.PRE_BUILD.document_field: list(self.pre_build_event),
            EventKind.POST_BUILD.document_field: list(self.post_build_event),
            EventKind.CONFIGURATION_CHANGED.document_field: list(self.configuration_changed_event),
        }


def default_shell() -> str:
    """Command interpreter used when the settings do not name one."""
    if platform.system() == "Windows":
        return "cmd.exe"
    return "/bin/sh"


@dataclass
class HookSettings:
    """
    Extension-wide settings, loaded from the ``[hooks]`` table of the
    settings TOML file.
    """

    # Interpreter each command line is handed to.
    shell: str = field(default_factory=default_shell)
    # File name of the command document, relative to the solution directory.
    config_filename: str = DEFAULT_CONFIG_FILENAME
    # Name of the output channel sink lines are written to.
    channel: str = DEFAULT_CHANNEL
    # Keep running the remaining command lines after one fails.
    continue_on_failure: bool = True
    # Editor used to open the command document; None uses the OS association.
    editor: Optional[str] = None
    # Directory for per-channel log files; None routes sink lines to logging.
    log_dir: Optional[Path] = None
    # Encoding used to decode child process output.
    encoding: str = "utf-8"
