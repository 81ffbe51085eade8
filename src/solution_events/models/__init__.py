"""
Data models for the solution_events package.

Configuration Models:
- The per-solution command document and the event kinds keying it
- Extension-wide settings

Runtime Models:
- Normalized event notifications
- Per-command process outcomes and per-event run results
"""

from .config import (
    DEFAULT_CHANNEL,
    DEFAULT_CONFIG_FILENAME,
    EventKind,
    HookSettings,
    Parameter,
    default_shell,
)
from .runtime import EventFired, ProcessOutcome, RunResult

__all__ = [
    # Configuration
    "DEFAULT_CHANNEL",
    "DEFAULT_CONFIG_FILENAME",
    "EventKind",
    "HookSettings",
    "Parameter",
    "default_shell",
    # Runtime
    "EventFired",
    "ProcessOutcome",
    "RunResult",
]
