"""
solution_events: run configured shell commands on solution build events.

A small JSON document next to a solution lists the command lines to run
before a build, after a build, and when the active configuration changes.
The package reacts to those host events and streams command output into
a named log channel.

The package is organized into specialized modules:
- config: settings loading and command document storage
- models: data structures and type definitions
- validation: input validation and error handling
- events: host abstraction and event normalization
- execution: command running and output sinks
- orchestration: event-to-command dispatch
- system: interpreter, editor and process helpers
- cli: standalone command-line driver

Usage:
    From command line:
        solution-events fire path/to/App.sln pre-build

    Programmatically:
        from solution_events import Orchestrator, InProcessBuildHost, get_config
        host = InProcessBuildHost("path/to/App.sln")
        orchestrator = Orchestrator.from_settings(host, get_config())
        await orchestrator.start()
"""

from .config import ConfigStore, clear_config_cache, get_config, set_config_path
from .events import BuildHost, EventSource, HostEventSource, InProcessBuildHost
from .execution import CommandRunner, FileLogSink, LoggerSink, LogSink
from .models import EventFired, EventKind, HookSettings, Parameter, ProcessOutcome, RunResult
from .orchestration import Orchestrator, OrchestratorState
from .validation import (
    ConfigNotFoundError,
    MalformedConfigError,
    PersistenceError,
    SolutionEventsError,
    ValidationError,
)

__version__ = "1.0.0"

__all__ = [
    # Settings and storage
    "ConfigStore",
    "get_config",
    "set_config_path",
    "clear_config_cache",
    # Events
    "BuildHost",
    "EventSource",
    "HostEventSource",
    "InProcessBuildHost",
    # Execution
    "CommandRunner",
    "LogSink",
    "LoggerSink",
    "FileLogSink",
    # Models
    "EventFired",
    "EventKind",
    "HookSettings",
    "Parameter",
    "ProcessOutcome",
    "RunResult",
    # Orchestration
    "Orchestrator",
    "OrchestratorState",
    # Errors
    "SolutionEventsError",
    "ValidationError",
    "ConfigNotFoundError",
    "MalformedConfigError",
    "PersistenceError",
]
